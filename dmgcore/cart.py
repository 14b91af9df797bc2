"""Cartridge header decoding and memory access."""

from __future__ import annotations

from enum import IntEnum

from .errors import RomLoadError, UnsupportedCartridgeError
from .mbc import MBC1, MBC3


class CartType(IntEnum):
    """Cartridge type byte stored at header offset 0x147."""

    ROM_ONLY = 0x00
    MBC1 = 0x01
    MBC1_RAM = 0x02
    MBC1_RAM_BATTERY = 0x03
    MBC2 = 0x05
    MBC2_BATTERY = 0x06
    ROM_RAM = 0x08
    ROM_RAM_BATTERY = 0x09
    MMM01 = 0x0B
    MMM01_RAM = 0x0C
    MMM01_RAM_BATTERY = 0x0D
    MBC3_TIMER_BATTERY = 0x0F
    MBC3_TIMER_RAM_BATTERY = 0x10
    MBC3 = 0x11
    MBC3_RAM = 0x12
    MBC3_RAM_BATTERY = 0x13
    MBC5 = 0x19
    MBC5_RAM = 0x1A
    MBC5_RAM_BATTERY = 0x1B
    MBC5_RUMBLE = 0x1C
    MBC5_RUMBLE_RAM = 0x1D
    MBC5_RUMBLE_RAM_BATTERY = 0x1E
    MBC6 = 0x20
    MBC7_SENSOR_RUMBLE_RAM_BATTERY = 0x22
    POCKET_CAMERA = 0xFC
    BANDAI_TAMA5 = 0xFD
    HUC3 = 0xFE
    HUC1_RAM_BATTERY = 0xFF


ROM_BANKS = {
    0x00: 2, 0x01: 4, 0x02: 8, 0x03: 16, 0x04: 32, 0x05: 64,
    0x06: 128, 0x07: 256, 0x08: 512, 0x52: 72, 0x53: 80, 0x54: 96,
}

RAM_BANKS = {0x00: 0, 0x01: 0, 0x02: 1, 0x03: 4, 0x04: 16, 0x05: 8}

_MBC1_TYPES = frozenset({CartType.MBC1, CartType.MBC1_RAM, CartType.MBC1_RAM_BATTERY})
_MBC3_TYPES = frozenset({
    CartType.MBC3_TIMER_BATTERY,
    CartType.MBC3_TIMER_RAM_BATTERY,
    CartType.MBC3,
    CartType.MBC3_RAM,
    CartType.MBC3_RAM_BATTERY,
})

_TYPE_OFFSET = 0x147
_ROM_SIZE_OFFSET = 0x148
_RAM_SIZE_OFFSET = 0x149


class Cart:
    """A loaded cartridge: ROM image, external RAM and its controller."""

    def __init__(self):
        self.restart()

    def restart(self):
        """Drop any loaded ROM, RAM and controller."""
        self.rom = b""
        self.ram = bytearray()
        self.mbc = None
        self.cart_type = CartType.ROM_ONLY
        self.rom_banks = 0
        self.ram_banks = 0

    def load(self, data):
        """Install a ROM image and configure the cartridge from its header."""
        if len(data) <= _RAM_SIZE_OFFSET:
            raise RomLoadError("ROM image is too short to hold a cartridge header")

        type_code = data[_TYPE_OFFSET]
        try:
            self.cart_type = CartType(type_code)
        except ValueError:
            raise UnsupportedCartridgeError(
                f"unknown cartridge type {type_code:#04x}"
            ) from None
        self.create_mbc()

        rom_code = data[_ROM_SIZE_OFFSET]
        ram_code = data[_RAM_SIZE_OFFSET]
        if rom_code not in ROM_BANKS:
            raise RomLoadError(f"unknown ROM size code {rom_code:#04x}")
        if ram_code not in RAM_BANKS:
            raise RomLoadError(f"unknown RAM size code {ram_code:#04x}")
        self.rom_banks = ROM_BANKS[rom_code]
        self.ram_banks = RAM_BANKS[ram_code]

        self.rom = bytes(data)
        self.ram = bytearray(self.ram_banks * 0x2000)

    def create_mbc(self):
        """Create the bank controller matching the cartridge type."""
        if self.cart_type is CartType.ROM_ONLY:
            self.mbc = None
        elif self.cart_type in _MBC1_TYPES:
            self.mbc = MBC1(self)
        elif self.cart_type in _MBC3_TYPES:
            self.mbc = MBC3(self)
        else:
            raise UnsupportedCartridgeError(
                f"unimplemented memory bank controller: {self.cart_type.name}"
            )

    def read_byte(self, addr):
        """Read a byte from ROM or cartridge RAM."""
        if self.cart_type is CartType.ROM_ONLY:
            return self.rom[addr] if addr < len(self.rom) else 0xFF
        return self.mbc.read_byte(addr)

    def write_byte(self, addr, val):
        """Write a byte to the controller; ignored for plain ROM cartridges."""
        if self.cart_type is CartType.ROM_ONLY:
            return
        self.mbc.write_byte(addr, val)