import pytest

from dmgcore.interrupts import Interrupt, Interrupts


class _FakeCPU:
    def __init__(self, pc=0x1234):
        self.pc = pc
        self.halted = True
        self.pushed = []

    def push(self, val):
        self.pushed.append(val)


def test_restart_without_boot_skip():
    interrupts = Interrupts()
    assert (interrupts.ime, interrupts.flag, interrupts.enable) == (True, 0, 0)


def test_restart_with_boot_skip():
    interrupts = Interrupts(skip_boot_rom=True)
    assert interrupts.flag == 0xE1


@pytest.mark.parametrize("interrupt", list(Interrupt))
def test_set_and_clear_flag(interrupt):
    interrupts = Interrupts()
    interrupts.set_flag(interrupt, True)
    assert interrupts.get_flag(interrupt) is True
    assert interrupts.flag == interrupt
    interrupts.set_flag(interrupt, False)
    assert interrupts.get_flag(interrupt) is False
    assert interrupts.flag == 0


def test_check_requires_ime():
    interrupts = Interrupts()
    interrupts.ime = False
    interrupts.enable = 0x1F
    interrupts.set_flag(Interrupt.VBLANK, True)
    cpu = _FakeCPU()
    assert interrupts.check(cpu) is False
    assert cpu.pushed == []


def test_check_requires_enabled_request():
    interrupts = Interrupts()
    interrupts.enable = Interrupt.TIMER
    interrupts.set_flag(Interrupt.VBLANK, True)
    assert interrupts.check(_FakeCPU()) is False
    assert interrupts.get_flag(Interrupt.VBLANK)


@pytest.mark.parametrize(
    "interrupt, vector",
    [
        (Interrupt.VBLANK, 0x40),
        (Interrupt.LCD, 0x48),
        (Interrupt.TIMER, 0x50),
        (Interrupt.SERIAL, 0x58),
        (Interrupt.JOYPAD, 0x60),
    ],
)
def test_fire_jumps_to_vector(interrupt, vector):
    interrupts = Interrupts()
    interrupts.enable = 0x1F
    interrupts.set_flag(interrupt, True)
    cpu = _FakeCPU(pc=0x4321)
    assert interrupts.check(cpu) is True
    assert cpu.pc == vector
    assert cpu.pushed == [0x4321]
    assert cpu.halted is False
    assert interrupts.ime is False
    assert interrupts.get_flag(interrupt) is False


def test_lowest_bit_has_priority():
    interrupts = Interrupts()
    interrupts.enable = 0x1F
    interrupts.set_flag(Interrupt.TIMER, True)
    interrupts.set_flag(Interrupt.LCD, True)
    cpu = _FakeCPU()
    interrupts.check(cpu)
    assert cpu.pc == Interrupt.LCD.vector
    assert interrupts.get_flag(Interrupt.TIMER)


def test_dispatch_picks_first_requested_even_if_not_enabled():
    interrupts = Interrupts()
    interrupts.enable = Interrupt.TIMER
    interrupts.set_flag(Interrupt.TIMER, True)
    interrupts.set_flag(Interrupt.VBLANK, True)
    cpu = _FakeCPU()
    assert interrupts.check(cpu) is True
    assert cpu.pc == Interrupt.VBLANK.vector
    assert interrupts.get_flag(Interrupt.TIMER)