"""Opcode decoder and fetch-execute loop of the SM83 CPU."""

from __future__ import annotations

from .cb_opcodes import execute_extended_opcode
from .cpu_core import HL_INDIRECT, Condition, CPUCore, Flag

# Register pairs selected by bits 4-5 of an opcode.
_PAIRS = ("bc", "de", "hl", "sp")
_STACK_PAIRS = ("bc", "de", "hl", "af")

# Conditions selected by bits 3-4 of conditional jumps, calls and returns.
_CONDITIONS = (Condition.NZ, Condition.Z, Condition.NC, Condition.C)

# Accumulator operations selected by bits 3-5: ADD, ADC, SUB, SBC, AND, XOR, OR, CP.
_ALU_OPERATIONS = (
    lambda cpu, val: cpu.add(val, False),
    lambda cpu, val: cpu.add(val, cpu.get_flag(Flag.C)),
    lambda cpu, val: cpu.sub(val, False),
    lambda cpu, val: cpu.sub(val, cpu.get_flag(Flag.C)),
    CPUCore.and_,
    CPUCore.xor,
    CPUCore.or_,
    CPUCore.cp,
)


class CPU(CPUCore):
    """The CPU with its complete instruction set and cycle counts."""

    def execute_opcode(self, opcode):
        """Execute one opcode whose byte has already been fetched.

        Returns the number of clock cycles the instruction takes.
        """
        if not 0 <= opcode <= 0xFF:
            raise ValueError(f"opcode out of range: {opcode!r}")

        if self.delay_ime:
            self.interrupts.ime = True
            self.delay_ime = False

        if opcode == 0xCB:
            return execute_extended_opcode(self, self.fetch_byte())

        entry = _IRREGULAR.get(opcode)
        if entry is not None:
            operation, cycles = entry
            operation(self)
            return cycles

        if opcode < 0x40:
            return self._execute_block0(opcode)
        if opcode < 0x80:
            return self._execute_load(opcode)
        if opcode < 0xC0:
            operand = opcode & 0x7
            _ALU_OPERATIONS[(opcode >> 3) & 0x7](self, self.read_register(operand))
            return 8 if operand == HL_INDIRECT else 4
        return self._execute_block3(opcode)

    def step(self):
        """Fetch and execute one instruction; return the cycles it took."""
        if self.halted:
            return 4

        opcode = self.fetch_byte()

        if self.halt_bug:
            self.pc = (self.pc - 1) & 0xFFFF
            self.halt_bug = False

        return self.execute_opcode(opcode)

    # ------------------------------------------------------------------
    # Regular opcode blocks

    def _execute_block0(self, opcode):
        target = (opcode >> 3) & 0x7
        pair = _PAIRS[(opcode >> 4) & 0x3]
        low_nibble = opcode & 0xF
        low_bits = opcode & 0x7

        if opcode & 0xE7 == 0x20:
            self.jr(self.fetch_byte(), _CONDITIONS[(opcode >> 3) & 0x3])
            return 12
        if low_nibble == 0x1:
            setattr(self, pair, self.fetch_word() & 0xFFFF)
            return 12
        if low_nibble == 0x3:
            setattr(self, pair, (getattr(self, pair) + 1) & 0xFFFF)
            return 8
        if low_nibble == 0xB:
            setattr(self, pair, (getattr(self, pair) - 1) & 0xFFFF)
            return 8
        if low_nibble == 0x9:
            self.add_hl(getattr(self, pair))
            return 8
        if low_bits == 0x4:
            if target == HL_INDIRECT:
                self._inc_hl_indirect()
                return 12
            self.write_register(target, self.inc(self.read_register(target)))
            return 4
        if low_bits == 0x5:
            if target == HL_INDIRECT:
                self._dec_hl_indirect()
                return 12
            self.write_register(target, self.dec(self.read_register(target)))
            return 4
        if low_bits == 0x6:
            self.write_register(target, self.fetch_byte())
            return 12 if target == HL_INDIRECT else 8
        # NOP (0x00) and anything else left in this block take four cycles.
        return 4

    def _execute_load(self, opcode):
        if opcode == 0x76:
            self.halt()
            return 4
        dest = (opcode >> 3) & 0x7
        src = opcode & 0x7
        self.write_register(dest, self.read_register(src))
        return 8 if HL_INDIRECT in (dest, src) else 4

    def _execute_block3(self, opcode):
        condition = _CONDITIONS[(opcode >> 3) & 0x3]
        stack_pair = _STACK_PAIRS[(opcode >> 4) & 0x3]

        if opcode & 0xE7 == 0xC0:
            self.ret(condition, False)
            return 20
        if opcode & 0xE7 == 0xC2:
            self.jp(self.fetch_word(), condition)
            return 16
        if opcode & 0xE7 == 0xC4:
            self.call(self.fetch_word(), condition)
            return 24
        if opcode & 0xCF == 0xC1:
            setattr(self, stack_pair, self.pop())
            return 12
        if opcode & 0xCF == 0xC5:
            self.push(getattr(self, stack_pair))
            return 16
        if opcode & 0xC7 == 0xC6:
            _ALU_OPERATIONS[(opcode >> 3) & 0x7](self, self.fetch_byte())
            return 8
        if opcode & 0xC7 == 0xC7:
            self.rst(opcode & 0x38)
            return 16
        # Unused opcodes behave as four-cycle no-ops.
        return 4

    # ------------------------------------------------------------------
    # Memory read-modify-write on (HL)

    def _inc_hl_indirect(self):
        self.bus.write_byte(self.hl, (self.bus.read_byte(self.hl) + 1) & 0xFF)
        result = self.bus.read_byte(self.hl)
        self.set_flag(Flag.Z, not result)
        self.set_flag(Flag.N, False)
        self.set_flag(Flag.H, not result & 0xF)

    def _dec_hl_indirect(self):
        self.bus.write_byte(self.hl, (self.bus.read_byte(self.hl) - 1) & 0xFF)
        result = self.bus.read_byte(self.hl)
        self.set_flag(Flag.Z, not result)
        self.set_flag(Flag.N, True)
        self.set_flag(Flag.H, (result & 0xF) == 0xF)

    # ------------------------------------------------------------------
    # Irregular instructions

    def _store_a_at_bc(self):
        self.bus.write_byte(self.bc, self.a)

    def _store_a_at_de(self):
        self.bus.write_byte(self.de, self.a)

    def _store_a_at_hl_increment(self):
        addr = self.hl
        self.hl = (addr + 1) & 0xFFFF
        self.bus.write_byte(addr, self.a)

    def _store_a_at_hl_decrement(self):
        addr = self.hl
        self.hl = (addr - 1) & 0xFFFF
        self.bus.write_byte(addr, self.a)

    def _load_a_from_bc(self):
        self.a = self.bus.read_byte(self.bc)

    def _load_a_from_de(self):
        self.a = self.bus.read_byte(self.de)

    def _load_a_from_hl_increment(self):
        addr = self.hl
        self.hl = (addr + 1) & 0xFFFF
        self.a = self.bus.read_byte(addr)

    def _load_a_from_hl_decrement(self):
        addr = self.hl
        self.hl = (addr - 1) & 0xFFFF
        self.a = self.bus.read_byte(addr)

    def _store_sp_at_immediate(self):
        self.bus.write_word(self.fetch_word(), self.sp)

    def _jump_relative(self):
        self.jr(self.fetch_byte(), Condition.NONE)

    def _jump_absolute(self):
        self.jp(self.fetch_word(), Condition.NONE)

    def _return(self):
        self.ret(Condition.NONE, False)

    def _return_from_interrupt(self):
        self.ret(Condition.NONE, True)

    def _call_absolute(self):
        self.call(self.fetch_word(), Condition.NONE)

    def _store_a_high_immediate(self):
        self.bus.write_byte(0xFF00 + self.fetch_byte(), self.a)

    def _store_a_high_c(self):
        self.bus.write_byte(0xFF00 + self.c, self.a)

    def _load_a_high_immediate(self):
        self.a = self.bus.read_byte(0xFF00 + self.fetch_byte())

    def _load_a_high_c(self):
        self.a = self.bus.read_byte(0xFF00 + self.c)

    def _add_sp_offset(self):
        self.sp = self.sp_plus_offset(self.fetch_byte())

    def _load_hl_sp_offset(self):
        self.hl = self.sp_plus_offset(self.fetch_byte())

    def _jump_hl(self):
        self.jp(self.hl, Condition.NONE)

    def _store_a_at_immediate(self):
        self.bus.write_byte(self.fetch_word(), self.a)

    def _load_a_from_immediate(self):
        self.a = self.bus.read_byte(self.fetch_word())

    def _load_sp_from_hl(self):
        self.sp = self.hl


_IRREGULAR = {
    0x02: (CPU._store_a_at_bc, 8),
    0x07: (CPU.rlca, 4),
    0x08: (CPU._store_sp_at_immediate, 20),
    0x0A: (CPU._load_a_from_bc, 8),
    0x0F: (CPU.rrca, 4),
    0x10: (CPU.stop, 4),
    0x12: (CPU._store_a_at_de, 8),
    0x17: (CPU.rla, 4),
    0x18: (CPU._jump_relative, 12),
    0x1A: (CPU._load_a_from_de, 8),
    0x1F: (CPU.rra, 4),
    0x22: (CPU._store_a_at_hl_increment, 8),
    0x27: (CPU.daa, 4),
    0x2A: (CPU._load_a_from_hl_increment, 8),
    0x2F: (CPU.cpl, 4),
    0x32: (CPU._store_a_at_hl_decrement, 8),
    0x37: (CPU.scf, 4),
    0x3A: (CPU._load_a_from_hl_decrement, 8),
    0x3F: (CPU.ccf, 4),
    0xC3: (CPU._jump_absolute, 16),
    0xC9: (CPU._return, 16),
    0xCD: (CPU._call_absolute, 24),
    0xD9: (CPU._return_from_interrupt, 16),
    0xE0: (CPU._store_a_high_immediate, 12),
    0xE2: (CPU._store_a_high_c, 8),
    0xE8: (CPU._add_sp_offset, 16),
    0xE9: (CPU._jump_hl, 4),
    0xEA: (CPU._store_a_at_immediate, 16),
    0xF0: (CPU._load_a_high_immediate, 12),
    0xF2: (CPU._load_a_high_c, 8),
    0xF3: (CPU.di, 4),
    0xF8: (CPU._load_hl_sp_offset, 12),
    0xF9: (CPU._load_sp_from_hl, 8),
    0xFA: (CPU._load_a_from_immediate, 16),
    0xFB: (CPU.ei, 4),
}