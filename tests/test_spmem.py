import pytest

from rspasm.assembler import RSPAssembler
from rspasm.registers import GPR
from rspasm.spmem import SPMemory

VMADH_INPUT_A = [0x0000, 0x0000, 0x0000, 0xE000, 0x8001, 0x8000, 0x7FFF, 0x8000]
VMADH_INPUT_B = [0x0000, 0x0001, 0xFFFF, 0xFFFF, 0x8000, 0x7FFF, 0x7FFF, 0x8000]


@pytest.fixture
def mem():
    return SPMemory()


def test_fresh_memory_is_zero(mem):
    assert mem.read(0x000) == 0
    assert mem.read(0x1FFC) == 0


def test_word_round_trip(mem):
    mem.write(0x000, 0xBADDECAF)
    mem.write(0x004, 0x01234567)
    mem.write(0xFFC, 0xBCAD7E8F)
    assert mem.read(0x000) == 0xBADDECAF
    assert mem.read(0x004) == 0x01234567
    assert mem.read(0xFFC) == 0xBCAD7E8F


def test_words_are_big_endian(mem):
    mem.write_vector8_into_dmem(0x20, [0xBA, 0xDD, 0xEC, 0xAF])
    assert mem.read(0x20) == 0xBADDECAF


@pytest.mark.parametrize("addr", [0x1, 0x2, 0x2000, -4])
def test_bad_word_address_raises(mem, addr):
    with pytest.raises(ValueError):
        mem.write(addr, 0)
    with pytest.raises(ValueError):
        mem.read(addr)


@pytest.mark.parametrize("value", [-1, 0x100000000])
def test_out_of_range_value_raises(mem, value):
    with pytest.raises(ValueError):
        mem.write(0, value)


@pytest.mark.parametrize("vec", [VMADH_INPUT_A, VMADH_INPUT_B])
def test_vector16_round_trip(mem, vec):
    mem.write_vector16_into_dmem(0x10, vec)
    assert mem.read_vector16_from_dmem(0x10) == vec
    assert mem.read_vector16_from_dmem_or_imem(0x10) == vec


def test_vector16_packs_pairs_into_words(mem):
    mem.write_vector16_into_dmem(0x00, [0x8000, 0x7FFF, 0, 0, 0, 0, 0, 0])
    assert mem.read(0x00) == 0x80007FFF
    assert mem.read(0x04) == 0


def test_vector16_wraps_at_end_of_dmem(mem):
    vec = [1, 2, 3, 4, 5, 6, 7, 8]
    mem.write_vector16_into_dmem(0xFF8, vec)
    assert mem.read_vector16_from_dmem(0xFF8) == vec
    assert mem.read_vector16_from_dmem(0x000)[:4] == [5, 6, 7, 8]
    assert mem.read(0x1000) == 0


def test_read_from_imem_does_not_wrap(mem):
    vec = [11, 12, 13, 14, 15, 16, 17, 18]
    mem.write_vector16_into_dmem(0x000, vec)
    mem.write(0x1000, 0x00150016)
    assert mem.read_vector16_from_dmem_or_imem(0xFF8)[4:6] == [0x15, 0x16]
    assert mem.read_vector16_from_dmem(0xFF8)[4:6] == [11, 12]


def test_vector16_rejects_wrong_length(mem):
    with pytest.raises(ValueError):
        mem.write_vector16_into_dmem(0, [1, 2, 3])


def test_vector16_rejects_large_element(mem):
    with pytest.raises(ValueError):
        mem.write_vector16_into_dmem(0, [0x10000] + [0] * 7)


def test_vector_rejects_unaligned_address(mem):
    with pytest.raises(ValueError):
        mem.write_vector16_into_dmem(2, [0] * 8)
    with pytest.raises(ValueError):
        mem.read_vector8_from_dmem(1)


def test_vector8_round_trip(mem):
    data = list(range(0xF0, 0x100))
    mem.write_vector8_into_dmem(0x40, data)
    assert mem.read_vector8_from_dmem(0x40) == data


def test_vector8_and_vector16_agree(mem):
    mem.write_vector16_into_dmem(0x30, VMADH_INPUT_A)
    raw = mem.read_vector8_from_dmem(0x30)
    rebuilt = [(hi << 8) | lo for hi, lo in zip(raw[::2], raw[1::2])]
    assert rebuilt == VMADH_INPUT_A


def test_vector8_rejects_partial_word(mem):
    with pytest.raises(ValueError):
        mem.write_vector8_into_dmem(0, [1, 2, 3])
    with pytest.raises(ValueError):
        mem.write_vector8_into_dmem(0, [0x100, 0, 0, 0])


def test_load_program_into_imem(mem):
    assembler = RSPAssembler(0)
    assembler.write_nop()
    assembler.write_li(GPR.T0, 0x12345678)
    assembler.write_break()
    mem.load_program(assembler)
    program = assembler.program()
    words = [int.from_bytes(program[i:i + 4], "big") for i in range(0, len(program), 4)]
    assert [mem.read(0x1000 + 4 * i) for i in range(len(words))] == words
    assert mem.read(0x1000) == 0
    assert mem.read(0x000) == 0


def test_load_program_wraps_within_imem(mem):
    assembler = RSPAssembler(0xFFC)
    assembler.write_break()
    assembler.write_break()
    mem.load_program(assembler)
    assert mem.read(0x1FFC) == mem.read(0x1000)
    assert mem.read(0x1000) == int.from_bytes(assembler.program()[4:8], "big")
    assert mem.read(0x0FFC) == 0