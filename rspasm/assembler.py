"""Encoder that turns RSP instructions into machine words for IMEM."""

from __future__ import annotations

from dataclasses import dataclass

from rspasm.registers import (
    CP0Op,
    CP0Register,
    CP2FlagsRegister,
    CP2Op,
    E,
    Element,
    GPR,
    Op,
    RegimmOp,
    SpecialOp,
    VR,
    VSARAccumulator,
    VectorOp,
    WC2Op,
)

IMEM_SIZE = 0x1000
_OFFSET_MASK = IMEM_SIZE - 1


def _check_range(name: str, value: int, low: int, high: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an integer, got {value!r}")
    if not low <= value <= high:
        raise ValueError(f"{name} {value} is outside {low}..{high}")
    return int(value)


def _signed16(value: int) -> int:
    return _check_range("immediate", value, -0x8000, 0x7FFF) & 0xFFFF


def _unsigned16(value: int) -> int:
    return _check_range("immediate", value, 0, 0xFFFF)


def _aligned(offset: int, alignment: int) -> int:
    if offset % alignment:
        raise ValueError(f"offset {offset:#x} is not a multiple of {alignment}")
    return offset // alignment


@dataclass(frozen=True)
class JumpTarget:
    """An IMEM byte offset that a later branch can jump back to."""

    offset: int


class RSPAssembler:
    """Collects encoded RSP instructions, starting at an IMEM byte offset."""

    def __init__(self, start_offset: int = 0) -> None:
        self.start_offset = _check_range("start offset", start_offset, 0, _OFFSET_MASK)
        if self.start_offset & 3:
            raise ValueError(f"start offset {start_offset:#x} is not word aligned")
        self._words: list[int] = []

    def offset(self) -> int:
        """IMEM byte offset where the next instruction goes (wraps within IMEM)."""
        return (self.start_offset + 4 * len(self._words)) & _OFFSET_MASK

    def program(self) -> bytes:
        """The instructions written so far, as big-endian bytes."""
        return b"".join(word.to_bytes(4, "big") for word in self._words)

    def get_jump_target(self) -> JumpTarget:
        """Mark the current offset as a target for a later backwards branch."""
        return JumpTarget(self.offset())

    # Encoding helpers

    def _emit(self, word: int) -> None:
        self._words.append(word & 0xFFFFFFFF)

    def _main_immediate(self, op: Op, rt: GPR, rs: GPR, imm16: int) -> None:
        self._emit(imm16 | (int(rt) << 16) | (int(rs) << 21) | (int(op) << 26))

    def _main_jump(self, op: Op, destination: int) -> None:
        _check_range("jump destination", destination, 0, 0xFFFFFFFF)
        target = _aligned(destination, 4)
        if target >= 1 << 26:
            raise ValueError(f"jump destination {destination:#x} is out of reach")
        self._emit(target | (int(op) << 26))

    def _special(self, function: SpecialOp, sa: int, rd: GPR, rs: GPR, rt: GPR) -> None:
        _check_range("shift amount", sa, 0, 31)
        self._emit(
            int(function)
            | (sa << 6)
            | (int(rd) << 11)
            | (int(rt) << 16)
            | (int(rs) << 21)
            | (int(Op.SPECIAL) << 26)
        )

    def _regimm(self, regimm_op: RegimmOp, rs: GPR, offset: int) -> None:
        self._emit(
            _signed16(offset)
            | (int(regimm_op) << 16)
            | (int(rs) << 21)
            | (int(Op.REGIMM) << 26)
        )

    def _cop0(self, cp0_op: CP0Op, cp0_register: CP0Register, rt: GPR) -> None:
        self._emit(
            (int(cp0_register) << 11)
            | (int(rt) << 16)
            | (int(cp0_op) << 21)
            | (int(Op.COP0) << 26)
        )

    def _wc2(self, op: Op, wc2_op: WC2Op, vt: VR, element: E, imm7: int, base: GPR) -> None:
        _check_range("scaled offset", imm7, -64, 63)
        self._emit(
            (imm7 & 0x7F)
            | (int(element) << 7)
            | (int(wc2_op) << 11)
            | (int(vt) << 16)
            | (int(base) << 21)
            | (int(op) << 26)
        )

    def _cop2(self, cp2_op: CP2Op, rd: int, rt: GPR, e: E) -> None:
        _check_range("register index", rd, 0, 31)
        self._emit(
            (int(e) << 7)
            | (rd << 11)
            | (int(rt) << 16)
            | (int(cp2_op) << 21)
            | (int(Op.COP2) << 26)
        )

    def _vector(self, vector_op: VectorOp, vd: VR, vt: VR, vs: VR, e: int) -> None:
        # The VECTOR sub-opcode has its low bits free; the element field sits in them.
        self._emit(
            int(vector_op)
            | (int(vd) << 6)
            | (int(vs) << 11)
            | (int(vt) << 16)
            | (int(e) << 21)
            | (int(CP2Op.VECTOR) << 21)
            | (int(Op.COP2) << 26)
        )

    def _load_vector(self, wc2_op: WC2Op, vt: VR, element: E, offset: int, base: GPR, size: int) -> None:
        _check_range("offset", offset, -0x80000000, 0x7FFFFFFF)
        self._wc2(Op.LWC2, wc2_op, vt, element, _aligned(offset, size), base)

    # Main instructions

    def write_addi(self, rt: GPR, rs: GPR, imm: int) -> None:
        self._main_immediate(Op.ADDI, rt, rs, _signed16(imm))

    def write_addiu(self, rt: GPR, rs: GPR, imm: int) -> None:
        self._main_immediate(Op.ADDIU, rt, rs, _signed16(imm))

    def write_andi(self, rt: GPR, rs: GPR, imm: int) -> None:
        self._main_immediate(Op.ANDI, rt, rs, _unsigned16(imm))

    def write_lb(self, rt: GPR, rs: GPR, imm: int) -> None:
        self._main_immediate(Op.LB, rt, rs, _signed16(imm))

    def write_lbu(self, rt: GPR, rs: GPR, imm: int) -> None:
        self._main_immediate(Op.LBU, rt, rs, _signed16(imm))

    def write_lh(self, rt: GPR, rs: GPR, imm: int) -> None:
        self._main_immediate(Op.LH, rt, rs, _signed16(imm))

    def write_lhu(self, rt: GPR, rs: GPR, imm: int) -> None:
        self._main_immediate(Op.LHU, rt, rs, _signed16(imm))

    def write_lw(self, rt: GPR, rs: GPR, imm: int) -> None:
        self._main_immediate(Op.LW, rt, rs, _signed16(imm))

    def write_lwu(self, rt: GPR, rs: GPR, imm: int) -> None:
        self._main_immediate(Op.LWU, rt, rs, _signed16(imm))

    def write_sb(self, rt: GPR, rs: GPR, imm: int) -> None:
        self._main_immediate(Op.SB, rt, rs, _signed16(imm))

    def write_sh(self, rt: GPR, rs: GPR, imm: int) -> None:
        self._main_immediate(Op.SH, rt, rs, _signed16(imm))

    def write_slti(self, rt: GPR, rs: GPR, imm: int) -> None:
        self._main_immediate(Op.SLTI, rt, rs, _signed16(imm))

    def write_sltiu(self, rt: GPR, rs: GPR, imm: int) -> None:
        self._main_immediate(Op.SLTIU, rt, rs, _signed16(imm))

    def write_sw(self, rt: GPR, rs: GPR, imm: int) -> None:
        self._main_immediate(Op.SW, rt, rs, _signed16(imm))

    def write_li(self, rt: GPR, imm: int) -> None:
        """Load a 32 bit value into ``rt`` using one or two instructions."""
        _check_range("immediate", imm, 0, 0xFFFFFFFF)
        if imm & 0xFFFF0000:
            self.write_lui(rt, imm >> 16)
            if imm & 0xFFFF:
                self.write_ori(rt, rt, imm & 0xFFFF)
        else:
            self.write_ori(rt, GPR.R0, imm)

    def write_lui(self, rt: GPR, imm: int) -> None:
        self._main_immediate(Op.LUI, rt, GPR.R0, _unsigned16(imm))

    def write_ori(self, rt: GPR, rs: GPR, imm: int) -> None:
        self._main_immediate(Op.ORI, rt, rs, _unsigned16(imm))

    def write_xori(self, rt: GPR, rs: GPR, imm: int) -> None:
        self._main_immediate(Op.XORI, rt, rs, _unsigned16(imm))

    def write_j(self, destination: int) -> None:
        """Jump to an absolute byte offset."""
        self._main_jump(Op.J, destination)

    def write_jal(self, destination: int) -> None:
        """Jump and link to an absolute byte offset."""
        self._main_jump(Op.JAL, destination)

    def write_beq(self, rt: GPR, rs: GPR, offset: int) -> None:
        self._main_immediate(Op.BEQ, rt, rs, _signed16(offset))

    def write_blez(self, rs: GPR, offset: int) -> None:
        self._main_immediate(Op.BLEZ, GPR.R0, rs, _signed16(offset))

    def write_bne(self, rt: GPR, rs: GPR, offset: int) -> None:
        self._main_immediate(Op.BNE, rt, rs, _signed16(offset))

    def write_bgtz(self, rs: GPR, offset: int) -> None:
        self._main_immediate(Op.BGTZ, GPR.R0, rs, _signed16(offset))

    def write_bgtz_backwards(self, rs: GPR, target: JumpTarget) -> None:
        """Branch to ``target`` if ``rs`` is greater than zero."""
        distance = ((target.offset - self.offset()) & _OFFSET_MASK) >> 2
        self.write_bgtz(rs, distance - 1)

    # COP0

    def write_mfc0(self, cp0_register: CP0Register, rt: GPR) -> None:
        self._cop0(CP0Op.MFC0, cp0_register, rt)

    def write_mtc0(self, cp0_register: CP0Register, rt: GPR) -> None:
        self._cop0(CP0Op.MTC0, cp0_register, rt)

    # COP2

    def write_ctc2(self, flags_register: CP2FlagsRegister, rt: GPR) -> None:
        self.write_ctc2_any_index(int(flags_register), rt)

    def write_ctc2_any_index(self, flags_register: int, rt: GPR) -> None:
        self._cop2(CP2Op.CTC2, flags_register, rt, E.E0)

    def write_cfc2(self, flags_register: CP2FlagsRegister, rt: GPR) -> None:
        self.write_cfc2_any_index(int(flags_register), rt)

    def write_cfc2_any_index(self, flags_register: int, rt: GPR) -> None:
        self._cop2(CP2Op.CFC2, flags_register, rt, E.E0)

    def write_mfc2(self, vd: VR, rt: GPR, e: E) -> None:
        self._cop2(CP2Op.MFC2, int(vd), rt, e)

    def write_mtc2(self, vd: VR, rt: GPR, e: E) -> None:
        self._cop2(CP2Op.MTC2, int(vd), rt, e)

    # Special instructions

    def write_sll(self, rd: GPR, rt: GPR, sa: int) -> None:
        self._special(SpecialOp.SLL, sa, rd, GPR.R0, rt)

    def write_sra(self, rd: GPR, rt: GPR, sa: int) -> None:
        self._special(SpecialOp.SRA, sa, rd, GPR.R0, rt)

    def write_srl(self, rd: GPR, rt: GPR, sa: int) -> None:
        self._special(SpecialOp.SRL, sa, rd, GPR.R0, rt)

    def write_sllv(self, rd: GPR, rt: GPR, rs: GPR) -> None:
        self._special(SpecialOp.SLLV, 0, rd, rs, rt)

    def write_srav(self, rd: GPR, rt: GPR, rs: GPR) -> None:
        self._special(SpecialOp.SRAV, 0, rd, rs, rt)

    def write_srlv(self, rd: GPR, rt: GPR, rs: GPR) -> None:
        self._special(SpecialOp.SRLV, 0, rd, rs, rt)

    def write_nop(self) -> None:
        self.write_sll(GPR.R0, GPR.R0, 0)

    def write_add(self, rd: GPR, rt: GPR, rs: GPR) -> None:
        self._special(SpecialOp.ADD, 0, rd, rs, rt)

    def write_addu(self, rd: GPR, rt: GPR, rs: GPR) -> None:
        self._special(SpecialOp.ADDU, 0, rd, rs, rt)

    def write_sub(self, rd: GPR, rt: GPR, rs: GPR) -> None:
        self._special(SpecialOp.SUB, 0, rd, rs, rt)

    def write_subu(self, rd: GPR, rt: GPR, rs: GPR) -> None:
        self._special(SpecialOp.SUBU, 0, rd, rs, rt)

    def write_and(self, rd: GPR, rt: GPR, rs: GPR) -> None:
        self._special(SpecialOp.AND, 0, rd, rs, rt)

    def write_break(self) -> None:
        self._special(SpecialOp.BREAK, 0, GPR.R0, GPR.R0, GPR.R0)

    def write_nor(self, rd: GPR, rs: GPR, rt: GPR) -> None:
        self._special(SpecialOp.NOR, 0, rd, rs, rt)

    def write_or(self, rd: GPR, rs: GPR, rt: GPR) -> None:
        self._special(SpecialOp.OR, 0, rd, rs, rt)

    def write_xor(self, rd: GPR, rs: GPR, rt: GPR) -> None:
        self._special(SpecialOp.XOR, 0, rd, rs, rt)

    def write_slt(self, rd: GPR, rs: GPR, rt: GPR) -> None:
        self._special(SpecialOp.SLT, 0, rd, rs, rt)

    def write_sltu(self, rd: GPR, rs: GPR, rt: GPR) -> None:
        self._special(SpecialOp.SLTU, 0, rd, rs, rt)

    def write_jr(self, rs: GPR) -> None:
        self._special(SpecialOp.JR, 0, GPR.R0, rs, GPR.R0)

    def write_jalr(self, ra: GPR, target: GPR) -> None:
        self._special(SpecialOp.JALR, 0, ra, target, GPR.R0)

    # Regimm instructions

    def write_bltz(self, rs: GPR, offset: int) -> None:
        self._regimm(RegimmOp.BLTZ, rs, offset)

    def write_bgez(self, rs: GPR, offset: int) -> None:
        self._regimm(RegimmOp.BGEZ, rs, offset)

    def write_bltzal(self, rs: GPR, offset: int) -> None:
        self._regimm(RegimmOp.BLTZAL, rs, offset)

    def write_bgezal(self, rs: GPR, offset: int) -> None:
        self._regimm(RegimmOp.BGEZAL, rs, offset)

    # Vector loads and stores

    def write_lbv(self, vt: VR, element: E, offset: int, base: GPR) -> None:
        self._load_vector(WC2Op.BV, vt, element, offset, base, 1)

    def write_ldv(self, vt: VR, element: E, offset: int, base: GPR) -> None:
        self._load_vector(WC2Op.DV, vt, element, offset, base, 8)

    def write_lfv(self, vt: VR, element: E, offset: int, base: GPR) -> None:
        self._load_vector(WC2Op.FV, vt, element, offset, base, 16)

    def write_lhv(self, vt: VR, element: E, offset: int, base: GPR) -> None:
        self._load_vector(WC2Op.HV, vt, element, offset, base, 16)

    def write_llv(self, vt: VR, element: E, offset: int, base: GPR) -> None:
        self._load_vector(WC2Op.LV, vt, element, offset, base, 4)

    def write_lpv(self, vt: VR, element: E, offset: int, base: GPR) -> None:
        self._load_vector(WC2Op.PV, vt, element, offset, base, 8)

    def write_lqv(self, vt: VR, element: E, offset: int, base: GPR) -> None:
        self._load_vector(WC2Op.QV, vt, element, offset, base, 16)

    def write_lrv(self, vt: VR, element: E, offset: int, base: GPR) -> None:
        self._load_vector(WC2Op.RV, vt, element, offset, base, 16)

    def write_lsv(self, vt: VR, element: E, offset: int, base: GPR) -> None:
        self._load_vector(WC2Op.SV, vt, element, offset, base, 2)

    def write_ltv(self, vt: VR, element: E, offset: int, base: GPR) -> None:
        self._load_vector(WC2Op.TV, vt, element, offset, base, 16)

    def write_luv(self, vt: VR, element: E, offset: int, base: GPR) -> None:
        self._load_vector(WC2Op.UV, vt, element, offset, base, 8)

    def write_lwv(self, vt: VR, element: E, offset: int, base: GPR) -> None:
        self._load_vector(WC2Op.WV, vt, element, offset, base, 16)

    def write_sqv(self, vt: VR, element: E, offset: int, base: GPR) -> None:
        _check_range("offset", offset, -0x80000000, 0x7FFFFFFF)
        self._wc2(Op.SWC2, WC2Op.QV, vt, element, _aligned(offset, 16), base)

    # Computational vector instructions

    def write_vabs(self, vd: VR, vt: VR, vs: VR, e: Element) -> None:
        self._vector(VectorOp.VABS, vd, vt, vs, e)

    def write_vaccb(self, vd: VR, vt: VR, vs: VR, e: Element) -> None:
        self._vector(VectorOp.VACCB, vd, vt, vs, e)

    def write_vadd(self, vd: VR, vt: VR, vs: VR, e: Element) -> None:
        self._vector(VectorOp.VADD, vd, vt, vs, e)

    def write_vaddb(self, vd: VR, vt: VR, vs: VR, e: Element) -> None:
        self._vector(VectorOp.VADDB, vd, vt, vs, e)

    def write_vaddc(self, vd: VR, vt: VR, vs: VR, e: Element) -> None:
        self._vector(VectorOp.VADDC, vd, vt, vs, e)

    def write_vand(self, vd: VR, vt: VR, vs: VR, e: Element) -> None:
        self._vector(VectorOp.VAND, vd, vt, vs, e)

    def write_vextn(self, vd: VR, vt: VR, vs: VR, e: Element) -> None:
        self._vector(VectorOp.VEXTN, vd, vt, vs, e)

    def write_vextq(self, vd: VR, vt: VR, vs: VR, e: Element) -> None:
        self._vector(VectorOp.VEXTQ, vd, vt, vs, e)

    def write_vextt(self, vd: VR, vt: VR, vs: VR, e: Element) -> None:
        self._vector(VectorOp.VEXTT, vd, vt, vs, e)

    def write_vlt(self, vd: VR, vt: VR, vs: VR, e: Element) -> None:
        self._vector(VectorOp.VLT, vd, vt, vs, e)

    def write_veq(self, vd: VR, vt: VR, vs: VR, e: Element) -> None:
        self._vector(VectorOp.VEQ, vd, vt, vs, e)

    def write_vge(self, vd: VR, vt: VR, vs: VR, e: Element) -> None:
        self._vector(VectorOp.VGE, vd, vt, vs, e)

    def write_vinsn(self, vd: VR, vt: VR, vs: VR, e: Element) -> None:
        self._vector(VectorOp.VINSN, vd, vt, vs, e)

    def write_vinsq(self, vd: VR, vt: VR, vs: VR, e: Element) -> None:
        self._vector(VectorOp.VINSQ, vd, vt, vs, e)

    def write_vinst(self, vd: VR, vt: VR, vs: VR, e: Element) -> None:
        self._vector(VectorOp.VINST, vd, vt, vs, e)

    def write_vmacf(self, vd: VR, vt: VR, vs: VR, e: Element) -> None:
        self._vector(VectorOp.VMACF, vd, vt, vs, e)

    def write_vmadh(self, vd: VR, vt: VR, vs: VR, e: Element) -> None:
        self._vector(VectorOp.VMADH, vd, vt, vs, e)

    def write_vmadm(self, vd: VR, vt: VR, vs: VR, e: Element) -> None:
        self._vector(VectorOp.VMADM, vd, vt, vs, e)

    def write_vmadn(self, vd: VR, vt: VR, vs: VR, e: Element) -> None:
        self._vector(VectorOp.VMADN, vd, vt, vs, e)

    def write_vmrg(self, vd: VR, vt: VR, vs: VR, e: Element) -> None:
        self._vector(VectorOp.VMRG, vd, vt, vs, e)

    def write_vmudh(self, vd: VR, vt: VR, vs: VR, e: Element) -> None:
        self._vector(VectorOp.VMUDH, vd, vt, vs, e)

    def write_vmudn(self, vd: VR, vt: VR, vs: VR, e: Element) -> None:
        self._vector(VectorOp.VMUDN, vd, vt, vs, e)

    def write_vmudm(self, vd: VR, vt: VR, vs: VR, e: Element) -> None:
        self._vector(VectorOp.VMUDM, vd, vt, vs, e)

    def write_vmulf(self, vd: VR, vt: VR, vs: VR, e: Element) -> None:
        self._vector(VectorOp.VMULF, vd, vt, vs, e)

    def write_vnand(self, vd: VR, vt: VR, vs: VR, e: Element) -> None:
        self._vector(VectorOp.VNAND, vd, vt, vs, e)

    def write_vne(self, vd: VR, vt: VR, vs: VR, e: Element) -> None:
        self._vector(VectorOp.VNE, vd, vt, vs, e)

    def write_vnop(self, vd: VR, vt: VR, vs: VR, e: Element) -> None:
        self._vector(VectorOp.VNOP, vd, vt, vs, e)

    def write_vnor(self, vd: VR, vt: VR, vs: VR, e: Element) -> None:
        self._vector(VectorOp.VNOR, vd, vt, vs, e)

    def write_vnull(self, vd: VR, vt: VR, vs: VR, e: Element) -> None:
        self._vector(VectorOp.VNULL, vd, vt, vs, e)

    def write_vnxor(self, vd: VR, vt: VR, vs: VR, e: Element) -> None:
        self._vector(VectorOp.VNXOR, vd, vt, vs, e)

    def write_vor(self, vd: VR, vt: VR, vs: VR, e: Element) -> None:
        self._vector(VectorOp.VOR, vd, vt, vs, e)

    def write_vsac(self, vd: VR, vt: VR, vs: VR, e: Element) -> None:
        self._vector(VectorOp.VSAC, vd, vt, vs, e)

    def write_vsad(self, vd: VR, vt: VR, vs: VR, e: Element) -> None:
        self._vector(VectorOp.VSAD, vd, vt, vs, e)

    def write_vsar_any_index(self, vd: VR, vt: VR, vs: VR, e: E) -> None:
        self._vector(VectorOp.VSAR, vd, vt, vs, e)

    def write_vsar(self, vd: VR, source: VSARAccumulator) -> None:
        """Read one slice of the accumulator into ``vd``."""
        self.write_vsar_any_index(vd, VR.V0, VR.V0, E.from_index(int(source)))

    def write_vsub(self, vd: VR, vt: VR, vs: VR, e: Element) -> None:
        self._vector(VectorOp.VSUB, vd, vt, vs, e)

    def write_vsubb(self, vd: VR, vt: VR, vs: VR, e: Element) -> None:
        self._vector(VectorOp.VSUBB, vd, vt, vs, e)

    def write_vsubc(self, vd: VR, vt: VR, vs: VR, e: Element) -> None:
        self._vector(VectorOp.VSUBC, vd, vt, vs, e)

    def write_vsucb(self, vd: VR, vt: VR, vs: VR, e: Element) -> None:
        self._vector(VectorOp.VSUCB, vd, vt, vs, e)

    def write_vsum(self, vd: VR, vt: VR, vs: VR, e: Element) -> None:
        self._vector(VectorOp.VSUM, vd, vt, vs, e)

    def write_vsut(self, vd: VR, vt: VR, vs: VR, e: Element) -> None:
        self._vector(VectorOp.VSUT, vd, vt, vs, e)

    def write_vxor(self, vd: VR, vt: VR, vs: VR, e: Element) -> None:
        self._vector(VectorOp.VXOR, vd, vt, vs, e)