"""Decoder and executor for the 0xCB-prefixed instruction table."""

from __future__ import annotations

from .cpu_core import HL_INDIRECT, CPUCore

# Operations selected by bits 3-5 of the opcodes 0x00-0x3F.
_SHIFT_OPERATIONS = (
    CPUCore.rlc,
    CPUCore.rrc,
    CPUCore.rl,
    CPUCore.rr,
    CPUCore.sla,
    CPUCore.sra,
    CPUCore.swap,
    CPUCore.srl,
)

_REGISTER_CYCLES = 8
_MEMORY_CYCLES = 16


def execute_extended_opcode(cpu, opcode):
    """Execute the CB-prefixed ``opcode`` on ``cpu`` and return its cycle count.

    Bits 0-2 select the operand (B, C, D, E, H, L, (HL), A), bits 3-5 the
    operation or bit number and bits 6-7 the instruction family: rotates
    and shifts, BIT, RES or SET.
    """
    if not 0 <= opcode <= 0xFF:
        raise ValueError(f"opcode out of range: {opcode!r}")

    family = opcode >> 6
    selector = (opcode >> 3) & 0x7
    operand = opcode & 0x7
    mask = 1 << selector

    value = cpu.read_register(operand)
    if family == 0:
        cpu.write_register(operand, _SHIFT_OPERATIONS[selector](cpu, value))
    elif family == 1:
        cpu.bit(mask, value)
    elif family == 2:
        cpu.write_register(operand, value & ~mask & 0xFF)
    else:
        cpu.write_register(operand, value | mask)

    return _MEMORY_CYCLES if operand == HL_INDIRECT else _REGISTER_CYCLES