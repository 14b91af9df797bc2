from dmgcore.interrupts import Interrupt, Interrupts
from dmgcore.timer import Timer


def _timer(**kwargs):
    return Timer(Interrupts(), **kwargs)


def test_power_on_values_with_boot_skip():
    timer = _timer(skip_boot_rom=True)
    assert (timer.tac, timer.div, timer.tima, timer.tma) == (0xF8, 0xAB, 0, 0)


def test_div_ticks_every_256_cycles():
    timer = _timer()
    timer.step(255)
    assert timer.div == 0
    timer.step(1)
    assert timer.div == 1
    assert timer.div_cycle_counter == 0


def test_div_wraps_at_sixteen_bits():
    timer = _timer()
    timer.div = 0xFFFF
    timer.step(128)
    timer.step(128)
    assert timer.div == 0


def test_tima_stopped_when_disabled():
    timer = _timer()
    timer.tac = 0x01
    for _ in range(50):
        timer.step(20)
    assert timer.tima == 0


def test_tima_counts_at_16_cycles():
    timer = _timer()
    timer.tac = 0x05
    timer.step(20)
    assert timer.tima == 1
    assert timer.tima_cycle_counter == 4


def test_tima_counts_at_64_cycles():
    timer = _timer()
    timer.tac = 0x06
    timer.step(63)
    assert timer.tima == 0
    timer.step(1)
    assert timer.tima == 1


def test_tima_overflow_reloads_and_requests_interrupt():
    interrupts = Interrupts()
    timer = Timer(interrupts)
    timer.tac = 0x05
    timer.tima = 0xFF
    timer.tma = 0x42
    timer.step(16)
    assert timer.tima == 0x42
    assert interrupts.get_flag(Interrupt.TIMER)


def test_byte_wide_counter_never_reaches_1024():
    timer = _timer()
    timer.tac = 0x04
    for _ in range(200):
        timer.step(24)
    assert timer.tima == 0
    assert timer.tima_cycle_counter < 256


def test_restart_clears_state():
    timer = _timer()
    timer.tac = 0x05
    timer.step(200)
    timer.restart()
    assert (timer.div, timer.tima, timer.tac, timer.tima_cycle_counter) == (0, 0, 0, 0)