"""The JOYP register and button state."""

from __future__ import annotations

from enum import Enum

from .interrupts import Interrupt


class Button(Enum):
    """Physical buttons of the handheld."""

    A = "a"
    B = "b"
    START = "start"
    SELECT = "select"
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"


_ACTION_MASKS = {Button.A: 1, Button.B: 2, Button.SELECT: 4, Button.START: 8}
_DIRECTION_MASKS = {Button.RIGHT: 1, Button.LEFT: 2, Button.UP: 4, Button.DOWN: 8}


class Joypad:
    """Button matrix exposed through JOYP; a cleared bit means pressed."""

    def __init__(self, interrupts, skip_boot_rom=False):
        self.interrupts = interrupts
        self.restart(skip_boot_rom)

    def restart(self, skip_boot_rom=False):
        """Release every button and reset JOYP."""
        self.action_button_state = 0xFF
        self.directional_button_state = 0xFF
        self.joyp = 0xCF if skip_boot_rom else 0

    @property
    def _action_selected(self):
        return not self.joyp & 0x20

    @property
    def _directions_selected(self):
        return not self.joyp & 0x10

    def press_button(self, button):
        """Mark ``button`` as held and request a joypad interrupt."""
        if button in _ACTION_MASKS:
            self.action_button_state &= ~_ACTION_MASKS[button] & 0xFF
        else:
            self.directional_button_state &= ~_DIRECTION_MASKS[button] & 0xFF
        self.interrupts.set_flag(Interrupt.JOYPAD, True)

    def release_button(self, button):
        """Mark ``button`` as released."""
        if button in _ACTION_MASKS:
            self.action_button_state |= _ACTION_MASKS[button]
        else:
            self.directional_button_state |= _DIRECTION_MASKS[button]

    def check_buttons(self):
        """Refresh the low nibble of JOYP from the selected button group."""
        if self._action_selected:
            self.joyp = (self.joyp & 0xF0) | (self.action_button_state & 0xF)
        elif self._directions_selected:
            self.joyp = (self.joyp & 0xF0) | (self.directional_button_state & 0xF)
        else:
            self.joyp = 0xCF