"""Error reporting shared by the emulator components."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from enum import Enum

_RED = "\x1b[31m"


class ErrorModule(Enum):
    """Component of the emulator that reported an error."""

    APP = "APP"
    GAMEBOY = "GAMEBOY"
    BUS = "BUS"
    CART = "CART"
    MBC = "MBC"
    CPU = "CPU"
    PPU = "PPU"
    INTERRUPTS = "INTERRUPTS"
    TIMER = "TIMER"
    JOYPAD = "JOYPAD"


@dataclass(frozen=True)
class Error:
    """A single reported error."""

    text: str
    module: ErrorModule


class UnsupportedCartridgeError(Exception):
    """The cartridge uses a memory bank controller that is not emulated."""


class RomLoadError(Exception):
    """A ROM or boot ROM image could not be read or has an invalid header."""


class ErrorCollector:
    """Accumulates errors and writes them to standard error on demand."""

    def __init__(self):
        self.errors: list[Error] = []

    def report_error(self, text, module):
        """Record an error for later printing."""
        self.errors.append(Error(text, module))

    def report_fatal_error(self, text, module):
        """Record an error and print everything collected so far."""
        self.report_error(text, module)
        self.print_errors(True)

    def format_errors(self):
        """Return the collected errors as coloured message lines."""
        return [
            f"{_RED}--> ERROR::{error.module.value}::{error.text}"
            for error in self.errors
        ]

    def print_errors(self, release=True):
        """Write every collected error to standard error.

        ``release`` is accepted for callers that print at shutdown; the
        output is the same either way.
        """
        stream = sys.stderr
        for message in self.format_errors():
            stream.write(message + "\n")
        stream.flush()