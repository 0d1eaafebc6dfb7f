"""Register, element and opcode numbering for the RSP instruction set."""

from __future__ import annotations

from enum import IntEnum
from typing import Iterator, TypeVar

_R = TypeVar("_R", bound="_IndexedEnum")


class _IndexedEnum(IntEnum):
    """An integer enumeration whose members can be looked up by their index."""


def _lookup(cls: type[_R], index: int) -> _R:
    """Return the member of ``cls`` with the given index; raise ValueError if there is none."""
    if isinstance(index, bool) or not isinstance(index, int):
        raise ValueError(f"{cls.__name__} index must be an integer, got {index!r}")
    try:
        return cls(index)
    except ValueError:
        raise ValueError(f"{index} is not a valid {cls.__name__} index") from None


class GPR(_IndexedEnum):
    """Scalar general purpose registers."""

    R0 = 0
    AT = 1
    V0 = 2
    V1 = 3
    A0 = 4
    A1 = 5
    R2 = 6
    R3 = 7
    T0 = 8
    T1 = 9
    T2 = 10
    T3 = 11
    T4 = 12
    T5 = 13
    T6 = 14
    T7 = 15
    S0 = 16
    S1 = 17
    S2 = 18
    S3 = 19
    S4 = 20
    S5 = 21
    S6 = 22
    S7 = 23
    T8 = 24
    T9 = 25
    K0 = 26
    K1 = 27
    GP = 28
    SP = 29
    S8 = 30
    RA = 31

    @classmethod
    def from_index(cls, index: int) -> "GPR":
        """Return the register with the given index; raise ValueError if there is none."""
        return _lookup(cls, index)


class VR(_IndexedEnum):
    """Vector registers."""

    V0 = 0
    V1 = 1
    V2 = 2
    V3 = 3
    V4 = 4
    V5 = 5
    V6 = 6
    V7 = 7
    V8 = 8
    V9 = 9
    V10 = 10
    V11 = 11
    V12 = 12
    V13 = 13
    V14 = 14
    V15 = 15
    V16 = 16
    V17 = 17
    V18 = 18
    V19 = 19
    V20 = 20
    V21 = 21
    V22 = 22
    V23 = 23
    V24 = 24
    V25 = 25
    V26 = 26
    V27 = 27
    V28 = 28
    V29 = 29
    V30 = 30
    V31 = 31

    @classmethod
    def from_index(cls, index: int) -> "VR":
        """Return the vector register with the given index; raise ValueError if there is none."""
        return _lookup(cls, index)


def _quarter(n: int) -> tuple[int, ...]:
    return (n, n, n + 2, n + 2, n + 4, n + 4, n + 6, n + 6)


def _half(n: int) -> tuple[int, ...]:
    return (n, n, n, n, n + 4, n + 4, n + 4, n + 4)


class Element(_IndexedEnum):
    """Element selector of a computational vector instruction."""

    ALL = 0
    ALL1 = 1
    Q0 = 2
    Q1 = 3
    H0 = 4
    H1 = 5
    H2 = 6
    H3 = 7
    E0 = 8
    E1 = 9
    E2 = 10
    E3 = 11
    E4 = 12
    E5 = 13
    E6 = 14
    E7 = 15

    @classmethod
    def from_index(cls, index: int) -> "Element":
        """Return the selector with the given index; raise ValueError if there is none."""
        return _lookup(cls, index)

    def effective_element_index(self, index: int) -> int:
        """Return the source lane that lane ``index`` (0..7) reads under this selector."""
        if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < 8:
            raise IndexError(f"lane index must be in 0..7, got {index!r}")
        return _EFFECTIVE_INDEX[self.value][index]


_EFFECTIVE_INDEX: tuple[tuple[int, ...], ...] = (
    tuple(range(8)),
    tuple(range(8)),
    _quarter(0),
    _quarter(1),
    _half(0),
    _half(1),
    _half(2),
    _half(3),
    *((lane,) * 8 for lane in range(8)),
)


class E(_IndexedEnum):
    """Element (byte) index used by loads, stores and register moves."""

    E0 = 0
    E1 = 1
    E2 = 2
    E3 = 3
    E4 = 4
    E5 = 5
    E6 = 6
    E7 = 7
    E8 = 8
    E9 = 9
    E10 = 10
    E11 = 11
    E12 = 12
    E13 = 13
    E14 = 14
    E15 = 15

    @classmethod
    def from_index(cls, index: int) -> "E":
        """Return the element index member; raise ValueError if there is none."""
        return _lookup(cls, index)


class CP0Register(IntEnum):
    """Coprocessor 0 registers visible to the RSP."""

    SP_ADDRESS = 0
    DRAM_ADDRESS = 1
    READ_LENGTH = 2
    WRITE_LENGTH = 3
    SP_STATUS = 4
    DMA_FULL = 5
    DMA_BUSY = 6
    SEMAPHORE = 7
    DP_START = 8
    DP_END = 9
    DP_STATUS = 11
    DP_CLOCK = 12


class CP2FlagsRegister(IntEnum):
    """Vector unit flag registers."""

    VCO = 0
    VCC = 1
    VCE = 2


class VSARAccumulator(IntEnum):
    """Accumulator slices readable with VSAR."""

    HIGH = 8
    MID = 9
    LOW = 10


class Op(IntEnum):
    """Primary opcodes."""

    SPECIAL = 0
    REGIMM = 1
    J = 2
    JAL = 3
    BEQ = 4
    BNE = 5
    BLEZ = 6
    BGTZ = 7
    ADDI = 8
    ADDIU = 9
    SLTI = 10
    SLTIU = 11
    ANDI = 12
    ORI = 13
    XORI = 14
    LUI = 15
    COP0 = 16
    COP2 = 18
    LB = 32
    LH = 33
    LW = 35
    LBU = 36
    LHU = 37
    LWU = 39
    SB = 40
    SH = 41
    SW = 43
    LWC2 = 50
    SWC2 = 58


class SpecialOp(IntEnum):
    """Function codes of the SPECIAL opcode."""

    SLL = 0
    SRL = 2
    SRA = 3
    SLLV = 4
    SRLV = 6
    SRAV = 7
    JR = 8
    JALR = 9
    BREAK = 13
    ADD = 32
    ADDU = 33
    SUB = 34
    SUBU = 35
    AND = 36
    OR = 37
    XOR = 38
    NOR = 39
    SLT = 42
    SLTU = 43


class RegimmOp(IntEnum):
    """Condition codes of the REGIMM opcode."""

    BLTZ = 0
    BGEZ = 1
    BLTZAL = 16
    BGEZAL = 17


class CP0Op(IntEnum):
    """Coprocessor 0 move operations."""

    MFC0 = 0
    MTC0 = 4


class WC2Op(IntEnum):
    """Vector load/store sizes."""

    BV = 0
    SV = 1
    LV = 2
    DV = 3
    QV = 4
    RV = 5
    PV = 6
    UV = 7
    HV = 8
    FV = 9
    WV = 10
    TV = 11


class CP2Op(IntEnum):
    """Coprocessor 2 operations."""

    MFC2 = 0
    CFC2 = 2
    MTC2 = 4
    CTC2 = 6
    VECTOR = 16


class VectorOp(IntEnum):
    """Computational vector instruction function codes."""

    VMULF = 0
    VMULU = 1
    VRNDP = 2
    VMULQ = 3
    VMUDL = 4
    VMUDM = 5
    VMUDN = 6
    VMUDH = 7
    VMACF = 8
    VMACU = 9
    VRNDN = 10
    VMACQ = 11
    VMADL = 12
    VMADM = 13
    VMADN = 14
    VMADH = 15
    VADD = 16
    VSUB = 17
    VSUT = 18
    VABS = 19
    VADDC = 20
    VSUBC = 21
    VADDB = 22
    VSUBB = 23
    VACCB = 24
    VSUCB = 25
    VSAD = 26
    VSAC = 27
    VSUM = 28
    VSAR = 29
    VLT = 32
    VEQ = 33
    VNE = 34
    VGE = 35
    VCL = 36
    VCH = 37
    VCR = 38
    VMRG = 39
    VAND = 40
    VNAND = 41
    VOR = 42
    VNOR = 43
    VXOR = 44
    VNXOR = 45
    VRCP = 48
    VRCPL = 49
    VRCPH = 50
    VMOV = 51
    VRSQ = 52
    VRSQL = 53
    VRSQH = 54
    VNOP = 55
    VEXTT = 56
    VEXTQ = 57
    VEXTN = 58
    VINST = 60
    VINSQ = 61
    VINSN = 62
    VNULL = 63


def register_range(start: _R, end: _R) -> Iterator[_R]:
    """Yield the members from ``start`` to ``end`` inclusive, in index order."""
    kind = type(start)
    if not isinstance(start, _IndexedEnum) or type(end) is not kind:
        raise TypeError("register_range needs two members of the same register enumeration")
    for index in range(start.value, end.value + 1):
        yield kind.from_index(index)