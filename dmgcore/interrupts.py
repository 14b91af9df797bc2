"""Interrupt flag and enable registers with dispatch to the CPU."""

from __future__ import annotations

from enum import IntEnum


class Interrupt(IntEnum):
    """Interrupt sources, valued by their bit in IF and IE."""

    VBLANK = 1
    LCD = 2
    TIMER = 4
    SERIAL = 8
    JOYPAD = 16

    @property
    def vector(self):
        """Address of the handler for this interrupt."""
        return _VECTORS[self]


_VECTORS = {
    Interrupt.VBLANK: 0x40,
    Interrupt.LCD: 0x48,
    Interrupt.TIMER: 0x50,
    Interrupt.SERIAL: 0x58,
    Interrupt.JOYPAD: 0x60,
}


class Interrupts:
    """The IME latch plus the IF (flag) and IE (enable) registers."""

    def __init__(self, skip_boot_rom=False):
        self.ime = True
        self.flag = 0
        self.enable = 0
        self.restart(skip_boot_rom)

    def restart(self, skip_boot_rom=False):
        """Return to the power-on state."""
        self.ime = True
        self.enable = 0
        self.flag = 0xE1 if skip_boot_rom else 0

    def get_flag(self, interrupt):
        """Whether the given interrupt is requested."""
        return bool(self.flag & interrupt)

    def set_flag(self, interrupt, val):
        """Request or clear the given interrupt."""
        if val:
            self.flag = (self.flag | interrupt) & 0xFF
        else:
            self.flag &= ~interrupt & 0xFF

    def fire(self, interrupt, cpu):
        """Jump the CPU to the handler of ``interrupt`` and acknowledge it."""
        self.ime = False
        cpu.push(cpu.pc)
        cpu.halted = False
        self.set_flag(interrupt, False)
        cpu.pc = interrupt.vector

    def check(self, cpu):
        """Service the highest-priority pending interrupt; report whether one fired."""
        if not self.ime:
            return False
        if not self.flag & self.enable:
            return False
        for interrupt in Interrupt:
            if self.get_flag(interrupt):
                self.fire(interrupt, cpu)
                return True
        return False