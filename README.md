# rspasm

`rspasm` produces machine code for the Reality Signal Processor (RSP), the
vector coprocessor of the Nintendo 64. Each `write_*` method on
`RSPAssembler` appends one encoded 32-bit instruction. The exception is
`write_li`, a pseudo-instruction that appends one or two instructions.

The package also provides `SPMemory`, a model of the RSP's shared memory. It
holds 4 KiB of data memory (DMEM) at 0x0000 followed by 4 KiB of instruction
memory (IMEM) at 0x1000. Words in it are read and written big-endian, and it
can store 8- or 16-bit vectors and take in an assembled program.

## Installation

```
pip install .
```

To also install the test dependencies:

```
pip install ".[test]"
```

## Assembling a program

```python
from rspasm.assembler import RSPAssembler
from rspasm.registers import GPR, VR, E, Element, VSARAccumulator

asm = RSPAssembler(0)            # start offset in IMEM, word aligned, 0..0xFFF

asm.write_li(GPR.T0, 0x12345678)         # LUI + ORI
asm.write_li(GPR.T1, 0x00001234)         # ORI only
asm.write_add(GPR.S0, GPR.T0, GPR.T1)
asm.write_sw(GPR.S0, GPR.R0, 0x0)

asm.write_lqv(VR.V0, E.E0, 0x000, GPR.R0)
asm.write_lqv(VR.V1, E.E0, 0x010, GPR.R0)
asm.write_vmulf(VR.V2, VR.V0, VR.V1, Element.ALL)
asm.write_vsar(VR.V3, VSARAccumulator.HIGH)
asm.write_sqv(VR.V2, E.E0, 0x100, GPR.R0)

asm.write_break()

code = asm.program()    # the instructions so far, as big-endian bytes
print(hex(asm.offset()))  # where the next instruction goes (wraps within IMEM)
```

### Branches and jumps

- The conditional branches (`write_beq`, `write_bne`, `write_blez`,
  `write_bgtz`, `write_bltz`, `write_bgez`, `write_bltzal`, `write_bgezal`)
  take a signed 16-bit offset counted in instructions. The offset is encoded
  exactly as given.
- `write_j` and `write_jal` take a destination as a byte offset. The
  destination must be a multiple of 4.
- For loops, record a target with `get_jump_target()`. Then branch back to it
  with `write_bgtz_backwards`, which works out the offset:

```python
loop = asm.get_jump_target()
asm.write_addiu(GPR.A0, GPR.A0, -1)
asm.write_bgtz_backwards(GPR.A0, loop)
asm.write_nop()
```

### Vector loads and stores

The offset you pass to a vector load or store (`write_lbv` … `write_lwv`,
`write_sqv`) is in bytes. It must be a multiple of the access size. It is
encoded scaled down by that size and must then fit in a signed 7-bit field.

## Registers and element selectors

`rspasm.registers` defines these enumerations:

- `GPR`: the 32 scalar registers, `GPR.R0` to `GPR.RA`.
- `VR`: the 32 vector registers, `VR.V0` to `VR.V31`.
- `Element`: broadcast modifiers for computational vector instructions:
  `ALL`, `ALL1`, `Q0`, `Q1`, `H0`–`H3`, `E0`–`E7`.
- `E`: plain element indices `E0`–`E15`, used by loads, stores and moves.
- `CP0Register`, `CP2FlagsRegister` and `VSARAccumulator` (`HIGH`, `MID`, `LOW`).
- The opcode tables `Op`, `SpecialOp`, `RegimmOp`, `CP0Op`, `WC2Op`, `CP2Op`
  and `VectorOp`.

Helpers:

- `GPR.from_index`, `VR.from_index`, `Element.from_index` and `E.from_index`
  look a member up by number. They raise `ValueError` when there is no such
  member.
- `register_range(start, end)` yields the members from `start` to `end`
  inclusive.
- `Element.effective_element_index(lane)` gives the source lane that a modifier
  selects for lane 0..7.

## Shared memory model

```python
from rspasm.spmem import SPMemory

mem = SPMemory()
mem.write_vector16_into_dmem(0x00, [0x0000, 0x8000, 0xFFFF, 0x8000, 0x8001, 0x8000, 0x7FFF, 0x8000])
assert mem.read(0x00) == 0x00008000
mem.load_program(asm)   # copies asm.program() into IMEM at the assembler's start offset
```

- `write` and `read` access one aligned word anywhere in the 8 KiB.
- These methods wrap around within DMEM:
  - `write_vector16_into_dmem` and `read_vector16_from_dmem`, for eight 16-bit lanes.
  - `write_vector8_into_dmem`, for bytes in a multiple of four.
  - `read_vector8_from_dmem`, for sixteen bytes.
- `read_vector16_from_dmem_or_imem` reads without wrapping, so it can reach
  IMEM.
- `load_program` wraps within IMEM.

## Errors

Invalid operands raise an exception:

- `ValueError`: an immediate out of range, a misaligned offset or address, or a
  register index out of range.
- `TypeError`: a value that is not an integer.

## What this package does not do

It only encodes instructions and models memory contents. It does not execute
RSP programs and does not simulate the processor, its registers or its
accumulator. It cannot disassemble machine code or read assembly source text.
It has no command-line tool.