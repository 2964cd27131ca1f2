"""Memory-stage operations for loads and stores.

Each function takes the processor (anything with ``mem``, ``gpr`` and ``fpr``
attributes) and the latch of the instruction in the memory stage. Loads leave
their value in ``latch.result_lo``; stores update ``cpu.mem``.
"""

from __future__ import annotations

from typing import Any

from .insn import MASK32, sign_extend, to_u32
from .latch import Latch


def _load_word(cpu: Any, addr: int) -> int:
    return cpu.mem.read_word(addr)


def mem_lb(cpu: Any, latch: Latch) -> None:
    """Load a byte, sign-extended to 32 bits."""
    latch.result_lo = to_u32(sign_extend(cpu.mem.read_byte(latch.mem_addr), 8))


def mem_lbu(cpu: Any, latch: Latch) -> None:
    """Load a byte, zero-extended."""
    latch.result_lo = cpu.mem.read_byte(latch.mem_addr)


def mem_lh(cpu: Any, latch: Latch) -> None:
    """Load a half-word, sign-extended to 32 bits."""
    latch.result_lo = to_u32(sign_extend(cpu.mem.read_half(latch.mem_addr), 16))


def mem_lhu(cpu: Any, latch: Latch) -> None:
    """Load a half-word, zero-extended."""
    latch.result_lo = cpu.mem.read_half(latch.mem_addr)


def mem_lwl(cpu: Any, latch: Latch) -> None:
    """Load the left (most significant) part of an unaligned word."""
    word = _load_word(cpu, latch.mem_addr)
    shift = (latch.mem_addr & 3) << 3
    keep = (1 << shift) - 1
    latch.result_lo = to_u32((word << shift) | (latch.subreg_operand & keep))


def mem_lw(cpu: Any, latch: Latch) -> None:
    """Load a word."""
    latch.result_lo = _load_word(cpu, latch.mem_addr)


def mem_lwr(cpu: Any, latch: Latch) -> None:
    """Load the right (least significant) part of an unaligned word."""
    word = _load_word(cpu, latch.mem_addr)
    shift = (~latch.mem_addr & 3) << 3
    keep = ~(MASK32 >> shift) & MASK32
    latch.result_lo = to_u32((word >> shift) | (latch.subreg_operand & keep))


def mem_lwc1(cpu: Any, latch: Latch) -> None:
    """Load a word destined for a floating-point register."""
    latch.result_lo = _load_word(cpu, latch.mem_addr)


def mem_swc1(cpu: Any, latch: Latch) -> None:
    """Store a floating-point register word."""
    cpu.mem.write_word(latch.mem_addr, to_u32(cpu.fpr[latch.dst]))


def mem_sb(cpu: Any, latch: Latch) -> None:
    """Store the low byte of a register."""
    cpu.mem.write_byte(latch.mem_addr, cpu.gpr[latch.dst] & 0xFF)


def mem_sh(cpu: Any, latch: Latch) -> None:
    """Store the low half-word of a register."""
    cpu.mem.write_half(latch.mem_addr, cpu.gpr[latch.dst] & 0xFFFF)


def mem_swl(cpu: Any, latch: Latch) -> None:
    """Store the left (most significant) part of a register to an unaligned word."""
    word = _load_word(cpu, latch.mem_addr)
    shift = (latch.mem_addr & 3) << 3
    value = to_u32(cpu.gpr[latch.dst]) >> shift
    merged = value | (word & ~(MASK32 >> shift) & MASK32)
    cpu.mem.write_word(latch.mem_addr, to_u32(merged))


def mem_sw(cpu: Any, latch: Latch) -> None:
    """Store a word."""
    cpu.mem.write_word(latch.mem_addr, to_u32(cpu.gpr[latch.dst]))


def mem_swr(cpu: Any, latch: Latch) -> None:
    """Store the right (least significant) part of a register to an unaligned word."""
    word = _load_word(cpu, latch.mem_addr)
    shift = (~latch.mem_addr & 3) << 3
    value = to_u32(cpu.gpr[latch.dst]) << shift
    merged = value | (word & ((1 << shift) - 1))
    cpu.mem.write_word(latch.mem_addr, to_u32(merged))