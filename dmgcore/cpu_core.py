"""Registers, flags and the instruction primitives of the SM83 CPU."""

from __future__ import annotations

from enum import Enum, IntEnum


class Flag(IntEnum):
    """Bits of the F register."""

    Z = 0x80
    N = 0x40
    H = 0x20
    C = 0x10


class Condition(Enum):
    """Branch conditions used by jumps, calls and returns."""

    NONE = "none"
    Z = "z"
    NZ = "nz"
    C = "c"
    NC = "nc"


# Operand encoding used by the opcode tables: B, C, D, E, H, L, (HL), A.
_REGISTER_NAMES = ("b", "c", "d", "e", "h", "l", None, "a")
HL_INDIRECT = 6


def _signed_byte(val):
    val &= 0xFF
    return val - 0x100 if val & 0x80 else val


class CPUCore:
    """CPU state together with the operations the opcode tables are built from.

    Eight-bit operations take an operand value and return the result,
    updating the flags; the caller decides where the result is stored.
    Operations on A write the accumulator themselves.
    """

    def __init__(self, bus, interrupts, skip_boot_rom=False):
        self.bus = bus
        self.interrupts = interrupts
        self.restart(skip_boot_rom)

    def restart(self, skip_boot_rom=False):
        """Load the register values found at power-on or after the boot ROM."""
        self.delay_ime = False
        self.halted = False
        self.halt_bug = False
        self.stopped = False
        if skip_boot_rom:
            self.a, self.f = 0x01, 0xB0
            self.b, self.c = 0x00, 0x13
            self.d, self.e = 0x00, 0xD8
            self.h, self.l = 0x01, 0x4D
            self.pc = 0x0100
        else:
            self.a = self.f = 0
            self.b = self.c = 0
            self.d = self.e = 0
            self.h = self.l = 0
            self.pc = 0x0000
        self.sp = 0xFFFE

    # ------------------------------------------------------------------
    # Register pairs

    @property
    def af(self):
        return (self.a << 8) | self.f

    @af.setter
    def af(self, val):
        self.a = (val >> 8) & 0xFF
        self.f = val & 0xF0

    @property
    def bc(self):
        return (self.b << 8) | self.c

    @bc.setter
    def bc(self, val):
        self.b = (val >> 8) & 0xFF
        self.c = val & 0xFF

    @property
    def de(self):
        return (self.d << 8) | self.e

    @de.setter
    def de(self, val):
        self.d = (val >> 8) & 0xFF
        self.e = val & 0xFF

    @property
    def hl(self):
        return (self.h << 8) | self.l

    @hl.setter
    def hl(self, val):
        self.h = (val >> 8) & 0xFF
        self.l = val & 0xFF

    # ------------------------------------------------------------------
    # Helpers

    def set_flag(self, flag, val):
        """Set or clear one bit of F."""
        if val:
            self.f |= flag
        else:
            self.f &= ~flag & 0xFF

    def get_flag(self, flag):
        """Whether one bit of F is set."""
        return bool(self.f & flag)

    def is_condition_true(self, condition):
        """Evaluate a branch condition against the flags."""
        if condition is Condition.NONE:
            return True
        if condition is Condition.Z:
            return self.get_flag(Flag.Z)
        if condition is Condition.NZ:
            return not self.get_flag(Flag.Z)
        if condition is Condition.C:
            return self.get_flag(Flag.C)
        if condition is Condition.NC:
            return not self.get_flag(Flag.C)
        raise ValueError(f"unknown condition {condition!r}")

    def fetch_byte(self):
        """Read the byte at PC and advance PC."""
        val = self.bus.read_byte(self.pc)
        self.pc = (self.pc + 1) & 0xFFFF
        return val

    def fetch_word(self):
        """Read the little-endian word at PC and advance PC by two."""
        val = self.bus.read_word(self.pc)
        self.pc = (self.pc + 2) & 0xFFFF
        return val

    def read_register(self, index):
        """Read operand ``index``: B, C, D, E, H, L, (HL), A for 0..7."""
        name = _REGISTER_NAMES[index]
        if name is None:
            return self.bus.read_byte(self.hl)
        return getattr(self, name)

    def write_register(self, index, val):
        """Write operand ``index``: B, C, D, E, H, L, (HL), A for 0..7."""
        name = _REGISTER_NAMES[index]
        if name is None:
            self.bus.write_byte(self.hl, val & 0xFF)
        else:
            setattr(self, name, val & 0xFF)

    # ------------------------------------------------------------------
    # Stack

    def push(self, val):
        """Push a 16-bit value onto the stack."""
        self.sp = (self.sp - 2) & 0xFFFF
        self.bus.write_word(self.sp, val & 0xFFFF)

    def pop(self):
        """Pop a 16-bit value from the stack and return it."""
        val = self.bus.read_word(self.sp)
        self.sp = (self.sp + 2) & 0xFFFF
        return val

    # ------------------------------------------------------------------
    # 8-bit arithmetic and logic

    def add(self, val, carry):
        """A <- A + val (+ carry)."""
        carry = int(bool(carry))
        total = self.a + val + carry
        self.set_flag(Flag.C, total > 0xFF)
        self.set_flag(Flag.H, (self.a & 0xF) + (val & 0xF) + carry > 0xF)
        self.set_flag(Flag.N, False)
        self.set_flag(Flag.Z, not total & 0xFF)
        self.a = total & 0xFF

    def sub(self, val, carry):
        """A <- A - val (- carry)."""
        carry = int(bool(carry))
        difference = self.a - val - carry
        self.set_flag(Flag.C, self.a < val + carry)
        self.set_flag(Flag.H, (self.a & 0xF) < (val & 0xF) + carry)
        self.set_flag(Flag.N, True)
        self.set_flag(Flag.Z, not difference & 0xFF)
        self.a = difference & 0xFF

    def cp(self, val):
        """Compare A with ``val`` by subtraction, leaving A unchanged."""
        self.set_flag(Flag.Z, not (self.a - val) & 0xFF)
        self.set_flag(Flag.N, True)
        self.set_flag(Flag.H, (val & 0xF) > (self.a & 0xF))
        self.set_flag(Flag.C, val > self.a)

    def inc(self, val):
        """Return ``val + 1``; carry is unaffected."""
        result = (val + 1) & 0xFF
        self.set_flag(Flag.Z, not result)
        self.set_flag(Flag.N, False)
        self.set_flag(Flag.H, not result & 0xF)
        return result

    def dec(self, val):
        """Return ``val - 1``; carry is unaffected."""
        result = (val - 1) & 0xFF
        self.set_flag(Flag.Z, not result)
        self.set_flag(Flag.N, True)
        self.set_flag(Flag.H, (result & 0xF) == 0xF)
        return result

    def _logic_flags(self, half_carry):
        self.set_flag(Flag.Z, not self.a)
        self.set_flag(Flag.N, False)
        self.set_flag(Flag.H, half_carry)
        self.set_flag(Flag.C, False)

    def and_(self, val):
        """A <- A & val."""
        self.a &= val
        self._logic_flags(True)

    def or_(self, val):
        """A <- A | val."""
        self.a = (self.a | val) & 0xFF
        self._logic_flags(False)

    def xor(self, val):
        """A <- A ^ val."""
        self.a = (self.a ^ val) & 0xFF
        self._logic_flags(False)

    def ccf(self):
        """Complement the carry flag."""
        self.set_flag(Flag.N, False)
        self.set_flag(Flag.H, False)
        self.set_flag(Flag.C, not self.get_flag(Flag.C))

    def scf(self):
        """Set the carry flag."""
        self.set_flag(Flag.N, False)
        self.set_flag(Flag.H, False)
        self.set_flag(Flag.C, True)

    def daa(self):
        """Adjust A to packed BCD after an addition or subtraction."""
        adjustment = 0
        if self.get_flag(Flag.N):
            if self.get_flag(Flag.H):
                adjustment |= 0x6
            if self.get_flag(Flag.C):
                adjustment |= 0x60
            self.a = (self.a - adjustment) & 0xFF
        else:
            if self.get_flag(Flag.H) or (self.a & 0xF) > 0x9:
                adjustment |= 0x6
            if self.get_flag(Flag.C) or self.a > 0x99:
                adjustment |= 0x60
                self.set_flag(Flag.C, True)
            self.a = (self.a + adjustment) & 0xFF
        self.set_flag(Flag.Z, not self.a)
        self.set_flag(Flag.H, False)

    def cpl(self):
        """A <- ~A."""
        self.a = ~self.a & 0xFF
        self.set_flag(Flag.N, True)
        self.set_flag(Flag.H, True)

    # ------------------------------------------------------------------
    # 16-bit arithmetic

    def add_hl(self, val):
        """HL <- HL + val."""
        total = self.hl + val
        self.set_flag(Flag.C, total > 0xFFFF)
        self.set_flag(Flag.H, (self.hl & 0xFFF) + (val & 0xFFF) > 0xFFF)
        self.set_flag(Flag.N, False)
        self.hl = total & 0xFFFF

    def sp_plus_offset(self, offset):
        """Return SP plus a signed byte offset, setting flags as ADD SP/LD HL do."""
        self.set_flag(Flag.Z, False)
        self.set_flag(Flag.N, False)
        self.set_flag(Flag.H, (self.sp & 0xF) + (offset & 0xF) > 0xF)
        self.set_flag(Flag.C, (self.sp & 0xFF) + (offset & 0xFF) > 0xFF)
        return (self.sp + _signed_byte(offset)) & 0xFFFF

    # ------------------------------------------------------------------
    # Rotates, shifts and bits

    def _shift_flags(self, result, carry):
        self.set_flag(Flag.C, carry)
        self.set_flag(Flag.N, False)
        self.set_flag(Flag.H, False)
        self.set_flag(Flag.Z, not result)

    def rlca(self):
        self.a = self.rlc(self.a)
        self.set_flag(Flag.Z, False)

    def rrca(self):
        self.a = self.rrc(self.a)
        self.set_flag(Flag.Z, False)

    def rla(self):
        self.a = self.rl(self.a)
        self.set_flag(Flag.Z, False)

    def rra(self):
        self.a = self.rr(self.a)
        self.set_flag(Flag.Z, False)

    def rlc(self, val):
        """Rotate left, bit 7 to carry and bit 0."""
        result = ((val << 1) | (val >> 7)) & 0xFF
        self._shift_flags(result, val & 0x80)
        return result

    def rrc(self, val):
        """Rotate right, bit 0 to carry and bit 7."""
        result = ((val >> 1) | (val << 7)) & 0xFF
        self._shift_flags(result, val & 0x1)
        return result

    def rl(self, val):
        """Rotate left through carry."""
        result = ((val << 1) | int(self.get_flag(Flag.C))) & 0xFF
        self._shift_flags(result, val & 0x80)
        return result

    def rr(self, val):
        """Rotate right through carry."""
        result = (val >> 1) | (int(self.get_flag(Flag.C)) << 7)
        self._shift_flags(result, val & 0x1)
        return result

    def sla(self, val):
        """Arithmetic shift left."""
        result = (val << 1) & 0xFF
        self._shift_flags(result, val & 0x80)
        return result

    def sra(self, val):
        """Arithmetic shift right, keeping bit 7."""
        result = (val >> 1) | (val & 0x80)
        self._shift_flags(result, val & 0x1)
        return result

    def swap(self, val):
        """Exchange the two nibbles."""
        result = ((val << 4) | (val >> 4)) & 0xFF
        self._shift_flags(result, False)
        return result

    def srl(self, val):
        """Logical shift right."""
        result = val >> 1
        self._shift_flags(result, val & 0x1)
        return result

    def bit(self, bit, val):
        """Test the bits of ``val`` selected by the mask ``bit``."""
        self.set_flag(Flag.Z, not val & bit)
        self.set_flag(Flag.N, False)
        self.set_flag(Flag.H, True)

    # ------------------------------------------------------------------
    # Control flow

    def jp(self, addr, condition):
        if self.is_condition_true(condition):
            self.pc = addr & 0xFFFF

    def jr(self, offset, condition):
        """Jump relative by a signed byte offset."""
        if self.is_condition_true(condition):
            self.pc = (self.pc + _signed_byte(offset)) & 0xFFFF

    def call(self, addr, condition):
        if self.is_condition_true(condition):
            self.push(self.pc)
            self.pc = addr & 0xFFFF

    def ret(self, condition, from_interrupt_handler):
        if self.is_condition_true(condition):
            self.pc = self.pop()
            if from_interrupt_handler:
                self.delay_ime = True

    def rst(self, vec):
        self.push(self.pc)
        self.pc = vec

    # ------------------------------------------------------------------
    # Miscellaneous

    def halt(self):
        """Stop until an interrupt, or trigger the halt bug when IME is off."""
        pending = self.interrupts.flag & self.interrupts.enable & 0x1F
        if not self.interrupts.ime and pending:
            self.halted = False
            self.halt_bug = True
        else:
            self.halted = True

    def stop(self):
        """Record that STOP was executed; execution carries on regardless."""
        self.stopped = True

    def di(self):
        self.delay_ime = False
        self.interrupts.ime = False

    def ei(self):
        """Enable interrupts after the next instruction."""
        self.delay_ime = True