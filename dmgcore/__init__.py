"""Emulator building blocks: SM83 CPU, cartridges, timer, joypad and interrupts."""

__version__ = "0.1.0"