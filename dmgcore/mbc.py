"""Memory bank controllers for cartridges."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .cart import Cart


def is_address_between(addr, start, end):
    """Whether ``addr`` lies in the inclusive range ``start``..``end``."""
    return start <= addr <= end


class MBC(ABC):
    """A controller that maps cartridge ROM and RAM into the address space."""

    def __init__(self, cart: Cart):
        self.cart = cart

    @abstractmethod
    def read_byte(self, addr):
        """Read a byte from the cartridge address space."""

    @abstractmethod
    def write_byte(self, addr, val):
        """Write a byte to the cartridge address space."""


class MBC1(MBC):
    """MBC1 controller with switchable ROM and RAM banks."""

    def __init__(self, cart):
        super().__init__(cart)
        self.ram_enable = False
        self.rom_bank_number = 1
        self.ram_bank_number = 0
        self.banking_mode_select = False

    def _ram_offset(self, addr):
        bank = (int(self.banking_mode_select) * self.ram_bank_number
                % self.cart.ram_banks) & 0xFF
        return (addr - 0xA000) + 0x2000 * bank

    def read_byte(self, addr):
        if is_address_between(addr, 0x0000, 0x3FFF):
            return self.cart.rom[addr]

        if is_address_between(addr, 0x4000, 0x7FFF):
            bank = (((self.ram_bank_number << 5) | self.rom_bank_number)
                    % self.cart.rom_banks) & 0xFF
            return self.cart.rom[0x4000 * bank + (addr - 0x4000)]

        if is_address_between(addr, 0xA000, 0xBFFF):
            if not self.ram_enable:
                return 0xFF
            return self.cart.ram[self._ram_offset(addr)]

        return 0xFF

    def write_byte(self, addr, val):
        if is_address_between(addr, 0x0000, 0x1FFF):
            self.ram_enable = (val & 0xF) == 0xA

        if is_address_between(addr, 0x2000, 0x3FFF):
            self.rom_bank_number = 1 if not val else val & 0x1F

        if is_address_between(addr, 0x4000, 0x5FFF):
            self.ram_bank_number = val & 2

        if is_address_between(addr, 0x6000, 0x7FFF):
            self.banking_mode_select = val == 1

        if is_address_between(addr, 0xA000, 0xBFFF):
            if not self.ram_enable:
                return
            self.cart.ram[self._ram_offset(addr)] = val & 0xFF


class MBC3(MBC):
    """MBC3 controller; banking and the clock are not emulated.

    Reads return the open-bus value 0xFF and writes are ignored.
    """

    def read_byte(self, addr):
        return 0xFF

    def write_byte(self, addr, val):
        return None