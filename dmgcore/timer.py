"""DIV and TIMA timer registers."""

from __future__ import annotations

from .interrupts import Interrupt

_FREQUENCIES = {0: 1024, 1: 16, 2: 64, 3: 256}


class Timer:
    """Divider and programmable timer, advanced in CPU cycles."""

    def __init__(self, interrupts, skip_boot_rom=False):
        self.interrupts = interrupts
        self.restart(skip_boot_rom)

    def restart(self, skip_boot_rom=False):
        """Return to the power-on state."""
        self.tima = 0
        self.tma = 0
        self.div_cycle_counter = 0
        self.tima_cycle_counter = 0
        if skip_boot_rom:
            self.tac = 0xF8
            self.div = 0xAB
        else:
            self.tac = 0
            self.div = 0

    def step(self, cycles):
        """Advance the timers by ``cycles`` clock cycles."""
        self.div_cycle_counter = (self.div_cycle_counter + cycles) & 0xFFFF
        while self.div_cycle_counter >= 256:
            self.div_cycle_counter -= 256
            self.div = (self.div + 1) & 0xFFFF

        if not self.tac & 0x4:
            return

        # The TIMA cycle counter is a single byte wide.
        self.tima_cycle_counter = (self.tima_cycle_counter + cycles) & 0xFF
        frequency = _FREQUENCIES[self.tac & 0x3]

        while self.tima_cycle_counter >= frequency:
            self.tima_cycle_counter -= frequency
            self.tima = (self.tima + 1) & 0xFF
            if self.tima == 0:
                self.tima = self.tma
                self.interrupts.set_flag(Interrupt.TIMER, True)