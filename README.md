# dmgcore

`dmgcore` provides the building blocks of an emulator for the original
monochrome handheld game console. It has no dependencies outside the standard
library.

| Module | What it holds |
| --- | --- |
| `dmgcore.cpu` | `CPU`: the SM83 instruction decoder, cycle counts and `step()` |
| `dmgcore.cpu_core` | `CPUCore`, `Flag`, `Condition`: registers, flags and instruction primitives |
| `dmgcore.cb_opcodes` | `execute_extended_opcode(cpu, opcode)`: the `0xCB`-prefixed table |
| `dmgcore.cart` | `Cart`, `CartType`: cartridge header decoding and access |
| `dmgcore.mbc` | `MBC`, `MBC1`, `MBC3`, `is_address_between` |
| `dmgcore.timer` | `Timer`: the DIV, TIMA, TMA and TAC registers |
| `dmgcore.joypad` | `Joypad`, `Button`: the JOYP register |
| `dmgcore.interrupts` | `Interrupts`, `Interrupt`: IME, IF, IE and dispatch |
| `dmgcore.errors` | `ErrorCollector`, `ErrorModule`, `Error` and the exceptions |

Every component takes a `skip_boot_rom` flag. With it set, registers start
with the values the console has after its boot ROM has run (for the CPU:
`AF=0x01B0`, `BC=0x0013`, `DE=0x00D8`, `HL=0x014D`, `SP=0xFFFE`,
`PC=0x0100`); without it they start at zero with `PC=0x0000`.

## The CPU

`CPU` executes instructions against a bus object that you supply. The bus
needs four methods: `read_byte(addr)`, `write_byte(addr, val)`,
`read_word(addr)` and `write_word(addr, val)`, with words little-endian.

```python
from dmgcore.cpu import CPU
from dmgcore.interrupts import Interrupts


class FlatMemory:
    def __init__(self):
        self.data = bytearray(0x10000)

    def read_byte(self, addr):
        return self.data[addr & 0xFFFF]

    def write_byte(self, addr, val):
        self.data[addr & 0xFFFF] = val & 0xFF

    def read_word(self, addr):
        return self.read_byte(addr) | (self.read_byte(addr + 1) << 8)

    def write_word(self, addr, val):
        self.write_byte(addr, val & 0xFF)
        self.write_byte(addr + 1, val >> 8)


memory = FlatMemory()
memory.data[0:3] = bytes([0x3E, 0x42, 0x3C])   # LD A,0x42 ; INC A

interrupts = Interrupts()
cpu = CPU(memory, interrupts)

cycles = cpu.step() + cpu.step()
print(hex(cpu.a), cycles)   # 0x43 12
```

`CPU.step()` fetches one opcode at `PC`, executes it and returns the number of
clock cycles it took; a halted CPU returns 4 without fetching. The halt bug is
modelled: `HALT` with IME off and an interrupt pending makes the next opcode
byte be read twice. `EI` and `RETI` enable interrupts one instruction later.
`STOP` sets `cpu.stopped` and execution carries on. Unused opcodes behave as
four-cycle no-ops.

Registers are plain attributes (`a`, `f`, `b`, `c`, `d`, `e`, `h`, `l`, `sp`,
`pc`) with the pairs `af`, `bc`, `de` and `hl` as properties; writing `af`
keeps only the upper nibble of `F`. `read_register(index)` and
`write_register(index, val)` take the opcode operand encoding 0–7 for B, C,
D, E, H, L, (HL), A.

## Interrupts

`Interrupts.check(cpu)` services the highest-priority requested and enabled
interrupt when IME is set: in order `VBLANK`, `LCD`, `TIMER`, `SERIAL`,
`JOYPAD`. It pushes `PC`, clears IME and the request bit, wakes a halted CPU
and jumps to the vector (`Interrupt.vector`: `0x40`, `0x48`, `0x50`, `0x58`,
`0x60`). It returns whether an interrupt fired.

## Timer and joypad

`Timer.step(cycles)` advances `div` once every 256 cycles and, when bit 2 of
`tac` is set, counts `tima` at the rate chosen by the low bits of `tac`,
reloading it from `tma` and requesting `Interrupt.TIMER` when it overflows.

`Joypad.press_button(Button.START)` marks a button as held and requests
`Interrupt.JOYPAD`; `release_button` lets it go. `check_buttons()` refreshes
the low nibble of `joyp` from whichever group (action or direction) is
selected by bits 5 and 4; with neither selected `joyp` becomes `0xCF`.

## Cartridges

```python
from pathlib import Path
from dmgcore.cart import Cart

cart = Cart()
cart.load(Path("game.gb").read_bytes())
print(cart.cart_type.name, cart.rom_banks, cart.ram_banks)
title = bytes(cart.read_byte(addr) for addr in range(0x134, 0x143))
```

`Cart.load(data)` reads the type byte at `0x0147` and the ROM and RAM size
codes at `0x0148` and `0x0149`, then allocates zeroed cartridge RAM. ROM-only
cartridges and the MBC1 family are emulated. MBC3 cartridges load, but their
controller reads every address as `0xFF` and ignores writes. Any other
controller type, or an unknown type byte, raises
`dmgcore.errors.UnsupportedCartridgeError`; an image too short to hold a
header or with an unknown size code raises `dmgcore.errors.RomLoadError`.

## Error reports

`ErrorCollector` gathers `Error` records tagged with an `ErrorModule`.
`format_errors()` returns them as lines of the form
`--> ERROR::<MODULE>::<text>` (coloured red), `print_errors()` writes them to
standard error and `report_fatal_error()` records one and prints all.

## What the package does not do

`dmgcore` has no memory bus mapping the console's address space (video RAM,
work RAM, OAM, high RAM and the I/O registers), no picture processing unit
and no framebuffer, and no object that ties the components together and runs
frames. It does not read boot ROM or game files from disk itself, produces
no sound, and has no command-line program or window. To run a game you
supply the bus and the frame loop yourself, built on the components above.

## Tests

The test suite uses pytest; install the package with its `test` extra to get
it, then run `pytest`.