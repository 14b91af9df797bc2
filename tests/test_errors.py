import pytest

from dmgcore.errors import (
    Error,
    ErrorCollector,
    ErrorModule,
    RomLoadError,
    UnsupportedCartridgeError,
)


def test_report_error_records_entry():
    collector = ErrorCollector()
    collector.report_error("INVALID_READ_ADDRESS FF7F\n", ErrorModule.BUS)
    assert collector.errors == [Error("INVALID_READ_ADDRESS FF7F\n", ErrorModule.BUS)]


def test_format_errors_uses_module_tag():
    collector = ErrorCollector()
    collector.report_error("UNIMPLEMENTED_MBC", ErrorModule.CART)
    collector.report_error("INCOMPATIBLE_BOOT_ROM", ErrorModule.GAMEBOY)
    assert collector.format_errors() == [
        "\x1b[31m--> ERROR::CART::UNIMPLEMENTED_MBC",
        "\x1b[31m--> ERROR::GAMEBOY::INCOMPATIBLE_BOOT_ROM",
    ]


def test_print_errors_writes_to_stderr(capsys):
    collector = ErrorCollector()
    collector.report_error("COULD_NOT_OPEN_ROM_FILE", ErrorModule.GAMEBOY)
    collector.print_errors(True)
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err == "\x1b[31m--> ERROR::GAMEBOY::COULD_NOT_OPEN_ROM_FILE\n"


def test_fatal_error_prints_everything(capsys):
    collector = ErrorCollector()
    collector.report_error("first", ErrorModule.PPU)
    collector.report_fatal_error("second", ErrorModule.TIMER)
    lines = capsys.readouterr().err.splitlines()
    assert lines == collector.format_errors()
    assert len(lines) == 2


def test_collectors_are_independent():
    first = ErrorCollector()
    second = ErrorCollector()
    first.report_error("x", ErrorModule.APP)
    assert second.errors == []


@pytest.mark.parametrize("exc", [RomLoadError, UnsupportedCartridgeError])
def test_exceptions_carry_message(exc):
    err = exc("bad header")
    assert str(err) == "bad header"
    assert isinstance(err, Exception)