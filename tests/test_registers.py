import pytest

from rspasm.registers import (
    CP0Register,
    CP2FlagsRegister,
    CP2Op,
    E,
    Element,
    GPR,
    Op,
    VR,
    VSARAccumulator,
    VectorOp,
    register_range,
)


@pytest.mark.parametrize("kind,count", [(GPR, 32), (VR, 32), (Element, 16), (E, 16)])
def test_from_index_round_trips_every_member(kind, count):
    assert [kind.from_index(i) for i in range(count)] == list(kind)
    assert all(kind.from_index(int(member)) is member for member in kind)


@pytest.mark.parametrize("kind,bad", [(GPR, 32), (VR, 32), (Element, 16), (E, 16), (GPR, -1)])
def test_from_index_rejects_out_of_range(kind, bad):
    with pytest.raises(ValueError):
        kind.from_index(bad)


def test_from_index_rejects_non_integers():
    with pytest.raises(ValueError):
        GPR.from_index("1")
    with pytest.raises(ValueError):
        VR.from_index(True)


def test_source_register_numbers():
    assert GPR.from_index(31) is GPR.RA
    assert GPR.from_index(16) is GPR.S0
    assert VR.from_index(31) is VR.V31
    assert E.from_index(VSARAccumulator.HIGH) is E.E8
    assert CP0Register(11) is CP0Register.DP_STATUS
    assert CP2FlagsRegister(2) is CP2FlagsRegister.VCE


def test_source_opcode_numbers():
    assert Op(18) is Op.COP2
    assert Op(58) is Op.SWC2
    assert CP2Op(16) is CP2Op.VECTOR
    assert VectorOp(29) is VectorOp.VSAR
    assert VectorOp(63) is VectorOp.VNULL
    with pytest.raises(ValueError):
        Op(17)


@pytest.mark.parametrize("element", [Element.ALL, Element.ALL1])
def test_whole_vector_selectors_are_identity(element):
    assert [element.effective_element_index(i) for i in range(8)] == list(range(8))


@pytest.mark.parametrize("lane", range(8))
def test_scalar_selectors_broadcast_one_lane(lane):
    element = Element.from_index(Element.E0 + lane)
    assert {element.effective_element_index(i) for i in range(8)} == {lane}


def test_quarter_selector_q1():
    assert [Element.Q1.effective_element_index(i) for i in range(8)] == [1, 1, 3, 3, 5, 5, 7, 7]


def test_half_selector_h2():
    assert [Element.H2.effective_element_index(i) for i in range(8)] == [2, 2, 2, 2, 6, 6, 6, 6]


def test_quarter_and_half_selectors_stay_in_their_group():
    for element in (Element.Q0, Element.Q1):
        for i in range(8):
            assert element.effective_element_index(i) // 2 == i // 2
    for element in (Element.H0, Element.H1, Element.H2, Element.H3):
        for i in range(8):
            assert element.effective_element_index(i) // 4 == i // 4


@pytest.mark.parametrize("bad", [-1, 8])
def test_effective_index_rejects_bad_lane(bad):
    with pytest.raises(IndexError):
        Element.ALL.effective_element_index(bad)


def test_register_range_is_inclusive():
    assert list(register_range(GPR.S0, GPR.S5)) == [
        GPR.S0, GPR.S1, GPR.S2, GPR.S3, GPR.S4, GPR.S5,
    ]


def test_register_range_covers_indices_in_order():
    assert [int(g) for g in register_range(GPR.S0, GPR.K1)] == list(range(GPR.S0, GPR.K1 + 1))
    assert list(register_range(VR.V0, VR.V31)) == list(VR)


def test_register_range_single_and_empty():
    assert list(register_range(E.E3, E.E3)) == [E.E3]
    assert list(register_range(GPR.S5, GPR.S0)) == []


def test_register_range_rejects_mixed_kinds():
    with pytest.raises(TypeError):
        list(register_range(GPR.S0, VR.V5))
    with pytest.raises(TypeError):
        list(register_range(CP0Register.SP_ADDRESS, CP0Register.DP_CLOCK))