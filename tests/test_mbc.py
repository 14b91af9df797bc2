from types import SimpleNamespace

import pytest

from dmgcore.mbc import MBC, MBC1, MBC3, is_address_between


def _cart(rom_banks=4, ram_banks=4):
    rom = bytes(bank for bank in range(rom_banks) for _ in range(0x4000))
    return SimpleNamespace(
        rom=rom, ram=bytearray(ram_banks * 0x2000),
        rom_banks=rom_banks, ram_banks=ram_banks,
    )


@pytest.mark.parametrize(
    "addr, expected",
    [(0x3FFF, False), (0x4000, True), (0x6000, True), (0x7FFF, True), (0x8000, False)],
)
def test_is_address_between_inclusive(addr, expected):
    assert is_address_between(addr, 0x4000, 0x7FFF) is expected


def test_mbc_is_abstract():
    with pytest.raises(TypeError):
        MBC(_cart())


def test_bank_zero_is_fixed():
    mbc = MBC1(_cart())
    mbc.write_byte(0x2000, 3)
    assert mbc.read_byte(0x0000) == 0
    assert mbc.read_byte(0x3FFF) == 0


def test_default_switchable_bank_is_one():
    mbc = MBC1(_cart())
    assert mbc.read_byte(0x4000) == 1


@pytest.mark.parametrize("bank", [1, 2, 3])
def test_rom_bank_switch(bank):
    mbc = MBC1(_cart())
    mbc.write_byte(0x2100, bank)
    assert mbc.rom_bank_number == bank
    assert mbc.read_byte(0x4000) == bank
    assert mbc.read_byte(0x7FFF) == bank


def test_rom_bank_zero_selects_one():
    mbc = MBC1(_cart())
    mbc.write_byte(0x2000, 0)
    assert mbc.read_byte(0x5000) == 1


def test_rom_bank_wraps_to_rom_size():
    cart = _cart(rom_banks=4)
    mbc = MBC1(cart)
    mbc.write_byte(0x2000, 6)
    assert mbc.read_byte(0x4000) == 6 % cart.rom_banks


def test_ram_disabled_reads_ff_and_ignores_writes():
    cart = _cart()
    mbc = MBC1(cart)
    mbc.write_byte(0xA000, 0x12)
    assert mbc.read_byte(0xA000) == 0xFF
    assert not any(cart.ram)


def test_ram_round_trip_when_enabled():
    mbc = MBC1(_cart())
    mbc.write_byte(0x0000, 0x0A)
    assert mbc.ram_enable is True
    mbc.write_byte(0xB123, 0x5C)
    assert mbc.read_byte(0xB123) == 0x5C
    mbc.write_byte(0x1000, 0x00)
    assert mbc.read_byte(0xB123) == 0xFF


def test_ram_bank_register_keeps_only_bit_one():
    mbc = MBC1(_cart())
    mbc.write_byte(0x4000, 3)
    assert mbc.ram_bank_number == 2
    mbc.write_byte(0x4000, 1)
    assert mbc.ram_bank_number == 0


def test_ram_bank_used_only_in_mode_one():
    cart = _cart(ram_banks=4)
    mbc = MBC1(cart)
    mbc.write_byte(0x0000, 0x0A)
    mbc.write_byte(0x4000, 2)
    mbc.write_byte(0xA000, 0x11)
    mbc.write_byte(0x6000, 1)
    assert mbc.banking_mode_select is True
    mbc.write_byte(0xA000, 0x22)
    assert cart.ram[0] == 0x11
    assert cart.ram[2 * 0x2000] == 0x22
    mbc.write_byte(0x6000, 2)
    assert mbc.banking_mode_select is False
    assert mbc.read_byte(0xA000) == 0x11


def test_mbc3_reads_open_bus_and_ignores_writes():
    cart = _cart()
    mbc = MBC3(cart)
    mbc.write_byte(0xA000, 0x42)
    assert mbc.read_byte(0x0000) == 0xFF
    assert not any(cart.ram)