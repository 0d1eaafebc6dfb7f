"""An in-memory model of the RSP's shared memory: DMEM followed by IMEM."""

from __future__ import annotations

from collections.abc import Sequence

from rspasm.assembler import RSPAssembler

DMEM_START = 0x0000
IMEM_START = 0x1000
SPMEM_SIZE = 0x2000
_DMEM_WORD_MASK = 0xFFC
_IMEM_MASK = 0xFFF


def _check_word_address(addr: int) -> int:
    if isinstance(addr, bool) or not isinstance(addr, int):
        raise TypeError(f"address must be an integer, got {addr!r}")
    if not 0 <= addr < SPMEM_SIZE:
        raise ValueError(f"address {addr:#x} is outside SP memory")
    if addr & 3:
        raise ValueError(f"address {addr:#x} is not word aligned")
    return addr


def _check_aligned(addr: int) -> int:
    if isinstance(addr, bool) or not isinstance(addr, int):
        raise TypeError(f"address must be an integer, got {addr!r}")
    if addr < 0:
        raise ValueError(f"address {addr:#x} is negative")
    if addr & 3:
        raise ValueError(f"address {addr:#x} is not word aligned")
    return addr


def _check_elements(vec: Sequence[int], bits: int) -> list[int]:
    limit = (1 << bits) - 1
    values = list(vec)
    for value in values:
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"vector element must be an integer, got {value!r}")
        if not 0 <= value <= limit:
            raise ValueError(f"vector element {value:#x} does not fit in {bits} bits")
    return values


class SPMemory:
    """Byte-addressed SP memory: DMEM at 0x0000, IMEM at 0x1000, big-endian words."""

    def __init__(self) -> None:
        self._memory = bytearray(SPMEM_SIZE)

    def write(self, addr: int, value: int) -> None:
        """Store a 32 bit word at a word-aligned address."""
        _check_word_address(addr)
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"value must be an integer, got {value!r}")
        if not 0 <= value <= 0xFFFFFFFF:
            raise ValueError(f"value {value:#x} does not fit in 32 bits")
        self._memory[addr:addr + 4] = value.to_bytes(4, "big")

    def read(self, addr: int) -> int:
        """Load the 32 bit word at a word-aligned address."""
        _check_word_address(addr)
        return int.from_bytes(self._memory[addr:addr + 4], "big")

    def _dmem_word(self, addr: int, index: int) -> int:
        return (addr + 4 * index) & _DMEM_WORD_MASK

    def write_vector16_into_dmem(self, addr: int, vec: Sequence[int]) -> None:
        """Store eight 16 bit elements into DMEM, wrapping at the end of DMEM."""
        _check_aligned(addr)
        values = _check_elements(vec, 16)
        if len(values) != 8:
            raise ValueError(f"a vector has 8 elements, got {len(values)}")
        for index, (high, low) in enumerate(zip(values[::2], values[1::2])):
            self.write(self._dmem_word(addr, index), (high << 16) | low)

    def write_vector8_into_dmem(self, addr: int, vec: Sequence[int]) -> None:
        """Store bytes into DMEM, a multiple of four at a time, wrapping at the end of DMEM."""
        _check_aligned(addr)
        values = _check_elements(vec, 8)
        if len(values) % 4:
            raise ValueError(f"byte count {len(values)} is not a multiple of 4")
        for index in range(len(values) // 4):
            chunk = bytes(values[4 * index:4 * index + 4])
            self.write(self._dmem_word(addr, index), int.from_bytes(chunk, "big"))

    def read_vector16_from_dmem(self, addr: int) -> list[int]:
        """Load eight 16 bit elements from DMEM, wrapping at the end of DMEM."""
        _check_aligned(addr)
        return self._split16(self.read(self._dmem_word(addr, index)) for index in range(4))

    def read_vector16_from_dmem_or_imem(self, addr: int) -> list[int]:
        """Load eight 16 bit elements from anywhere in SP memory, without wrapping."""
        _check_aligned(addr)
        return self._split16(self.read(addr + 4 * index) for index in range(4))

    def read_vector8_from_dmem(self, addr: int) -> list[int]:
        """Load sixteen bytes from DMEM, wrapping at the end of DMEM."""
        _check_aligned(addr)
        result: list[int] = []
        for index in range(4):
            result.extend(self.read(self._dmem_word(addr, index)).to_bytes(4, "big"))
        return result

    def load_program(self, assembler: RSPAssembler) -> None:
        """Copy an assembled program into IMEM at its start offset, wrapping within IMEM."""
        program = assembler.program()
        for index in range(0, len(program), 4):
            offset = (assembler.start_offset + index) & _IMEM_MASK
            word = int.from_bytes(program[index:index + 4], "big")
            self.write(IMEM_START + offset, word)

    @staticmethod
    def _split16(words) -> list[int]:
        result: list[int] = []
        for word in words:
            result.append(word >> 16)
            result.append(word & 0xFFFF)
        return result