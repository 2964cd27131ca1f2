"""Execute-stage operations; each updates the latch it is given."""

from __future__ import annotations

from .insn import MASK32, sign_extend, to_s32, to_u32
from .latch import Latch

MASK64 = (1 << 64) - 1
DIV_BY_ZERO_RESULT = 0x7FFF_FFFF


def func_add_addu(latch: Latch) -> None:
    latch.result_lo = to_u32(latch.src1 + latch.src2)


def func_and(latch: Latch) -> None:
    latch.result_lo = to_u32(latch.src1 & latch.src2)


def func_nor(latch: Latch) -> None:
    latch.result_lo = to_u32(~(latch.src1 | latch.src2))


def func_or(latch: Latch) -> None:
    latch.result_lo = to_u32(latch.src1 | latch.src2)


def func_sll(latch: Latch) -> None:
    latch.result_lo = to_u32(latch.src2 << latch.shift_amt)


def func_sllv(latch: Latch) -> None:
    latch.result_lo = to_u32(latch.src2 << (latch.src1 & 0x1F))


def func_slt(latch: Latch) -> None:
    latch.result_lo = int(to_s32(latch.src1) < to_s32(latch.src2))


def func_sltu(latch: Latch) -> None:
    latch.result_lo = int(to_u32(latch.src1) < to_u32(latch.src2))


def func_sra(latch: Latch) -> None:
    latch.result_lo = to_u32(to_s32(latch.src2) >> latch.shift_amt)


def func_srav(latch: Latch) -> None:
    latch.result_lo = to_u32(to_s32(latch.src2) >> (latch.src1 & 0x1F))


def func_srl(latch: Latch) -> None:
    latch.result_lo = to_u32(latch.src2) >> latch.shift_amt


def func_srlv(latch: Latch) -> None:
    latch.result_lo = to_u32(latch.src2) >> (latch.src1 & 0x1F)


def func_sub_subu(latch: Latch) -> None:
    latch.result_lo = to_u32(latch.src1 - latch.src2)


def func_xor(latch: Latch) -> None:
    latch.result_lo = to_u32(latch.src1 ^ latch.src2)


def func_div(latch: Latch) -> None:
    """Signed divide, truncating toward zero; remainder to hi, quotient to lo."""
    dividend, divisor = to_s32(latch.src1), to_s32(latch.src2)
    if divisor == 0:
        latch.result_hi = latch.result_lo = DIV_BY_ZERO_RESULT
        return
    quotient = abs(dividend) // abs(divisor)
    if (dividend < 0) != (divisor < 0):
        quotient = -quotient
    latch.result_hi = to_u32(dividend - quotient * divisor)
    latch.result_lo = to_u32(quotient)


def func_divu(latch: Latch) -> None:
    dividend, divisor = to_u32(latch.src1), to_u32(latch.src2)
    if divisor == 0:
        latch.result_hi = latch.result_lo = DIV_BY_ZERO_RESULT
        return
    latch.result_hi = dividend % divisor
    latch.result_lo = dividend // divisor


def func_mfhi(latch: Latch) -> None:
    latch.result_lo = latch.hi


def func_mflo(latch: Latch) -> None:
    latch.result_lo = latch.lo


def func_mthi(latch: Latch) -> None:
    latch.result_hi = to_u32(latch.src1)


def func_mtlo(latch: Latch) -> None:
    latch.result_lo = to_u32(latch.src1)


def _split(product: int, latch: Latch) -> None:
    latch.result_hi = (product >> 32) & MASK32
    latch.result_lo = product & MASK32


def func_mult(latch: Latch) -> None:
    """Signed 32x32 -> 64 multiply into hi/lo."""
    ar1, ar2 = to_u32(latch.src1), to_u32(latch.src2)
    s1, s2 = ar1 >> 31, ar2 >> 31
    # Magnitudes are taken within 31 bits, as the hardware model does.
    if s1:
        ar1 = (-ar1) & 0x7FFF_FFFF
    if s2:
        ar2 = (-ar2) & 0x7FFF_FFFF
    product = ar1 * ar2
    if s1 ^ s2:
        product = (-product) & MASK64
    _split(product, latch)


def func_multu(latch: Latch) -> None:
    _split(to_u32(latch.src1) * to_u32(latch.src2), latch)


def func_jalr(latch: Latch) -> None:
    latch.btaken = 1
    latch.num_jal += 1
    latch.result_lo = to_u32(latch.pc + 8)
    latch.btgt = to_u32(latch.src1)


def func_jr(latch: Latch) -> None:
    latch.btaken = 1
    latch.num_jr += 1
    latch.btgt = to_u32(latch.src1)


def func_await_break(latch: Latch) -> None:
    """No operation."""


def _sign_extend_imm(latch: Latch) -> None:
    latch.src2 = sign_extend(latch.src2, 16)


def func_addi_addiu(latch: Latch) -> None:
    _sign_extend_imm(latch)
    latch.result_lo = to_u32(latch.src1 + latch.src2)


def func_andi(latch: Latch) -> None:
    latch.result_lo = to_u32(latch.src1 & latch.src2)


def func_lui(latch: Latch) -> None:
    latch.result_lo = to_u32(latch.src2 << 16)


def func_ori(latch: Latch) -> None:
    latch.result_lo = to_u32(latch.src1 | latch.src2)


def func_slti(latch: Latch) -> None:
    _sign_extend_imm(latch)
    latch.result_lo = int(to_s32(latch.src1) < latch.src2)


def func_sltiu(latch: Latch) -> None:
    _sign_extend_imm(latch)
    latch.result_lo = int(to_u32(latch.src1) < to_u32(latch.src2))


def func_xori(latch: Latch) -> None:
    latch.result_lo = to_u32(latch.src1 ^ latch.src2)


def func_beq(latch: Latch) -> None:
    latch.num_cond_br += 1
    latch.btaken = int(to_u32(latch.src1) == to_u32(latch.src2))


def _is_negative(value: int) -> bool:
    return bool(to_u32(value) >> 31)


def func_bgez(latch: Latch) -> None:
    latch.num_cond_br += 1
    latch.btaken = int(not _is_negative(latch.src1))


def func_bgezal(latch: Latch) -> None:
    func_bgez(latch)
    latch.result_lo = to_u32(latch.pc + 8)


def func_bltzal(latch: Latch) -> None:
    func_bltz(latch)
    latch.result_lo = to_u32(latch.pc + 8)


def func_bltz(latch: Latch) -> None:
    latch.num_cond_br += 1
    latch.btaken = int(_is_negative(latch.src1))


def func_bgtz(latch: Latch) -> None:
    latch.num_cond_br += 1
    latch.btaken = int(to_s32(latch.src1) > 0)


def func_blez(latch: Latch) -> None:
    latch.num_cond_br += 1
    latch.btaken = int(to_s32(latch.src1) <= 0)


def func_bne(latch: Latch) -> None:
    latch.num_cond_br += 1
    latch.btaken = int(to_u32(latch.src1) != to_u32(latch.src2))


def func_j(latch: Latch) -> None:
    latch.btaken = 1


def func_jal(latch: Latch) -> None:
    latch.num_jal += 1
    latch.btaken = 1
    latch.result_lo = to_u32(latch.pc + 8)


def _effective_address(latch: Latch) -> None:
    _sign_extend_imm(latch)
    latch.mem_addr = to_u32(latch.src1 + latch.src2)


def func_load(latch: Latch) -> None:
    """Address computation for every load (lb, lbu, lh, lhu, lw, lwl, lwr, lwc1)."""
    latch.num_load += 1
    _effective_address(latch)


def func_store(latch: Latch) -> None:
    """Address computation for every store (sb, sh, sw, swl, swr, swc1)."""
    latch.num_store += 1
    _effective_address(latch)


def func_mtc1(latch: Latch) -> None:
    latch.result_lo = to_u32(latch.src1)


def func_mfc1(latch: Latch) -> None:
    latch.result_lo = to_u32(latch.src1)