"""MIPS instruction word fields and 32-bit arithmetic helpers."""

from __future__ import annotations

MASK32 = 0xFFFF_FFFF


def to_u32(value: int) -> int:
    """Reduce an integer to an unsigned 32-bit value."""
    return value & MASK32


def to_s32(value: int) -> int:
    """Reduce an integer to a signed (two's complement) 32-bit value."""
    value &= MASK32
    return value - (1 << 32) if value & 0x8000_0000 else value


def sign_extend(value: int, bits: int) -> int:
    """Interpret the low ``bits`` bits of ``value`` as a signed number."""
    if bits <= 0:
        raise ValueError(f"bit width must be positive, got {bits}")
    value &= (1 << bits) - 1
    if value & (1 << (bits - 1)):
        return value - (1 << bits)
    return value


def _checked(value: int, bits: int, name: str) -> int:
    if not 0 <= value < (1 << bits):
        raise ValueError(f"{name} does not fit in {bits} bits: {value}")
    return value


def encode_imm(op: int, rs: int, rt: int, imm: int) -> int:
    """Build an I-format instruction word; ``imm`` may be signed."""
    if not -0x8000 <= imm <= 0xFFFF:
        raise ValueError(f"imm does not fit in 16 bits: {imm}")
    return (
        (_checked(op, 6, "op") << 26)
        | (_checked(rs, 5, "rs") << 21)
        | (_checked(rt, 5, "rt") << 16)
        | (imm & 0xFFFF)
    )


def encode_tgt(op: int, tgt: int) -> int:
    """Build a J-format instruction word."""
    return (_checked(op, 6, "op") << 26) | _checked(tgt, 26, "tgt")


def encode_reg(op: int, rs: int, rt: int, rd: int, sa: int, func: int) -> int:
    """Build an R-format instruction word."""
    return (
        (_checked(op, 6, "op") << 26)
        | (_checked(rs, 5, "rs") << 21)
        | (_checked(rt, 5, "rt") << 16)
        | (_checked(rd, 5, "rd") << 11)
        | (_checked(sa, 5, "sa") << 6)
        | _checked(func, 6, "func")
    )


class Instruction:
    """A 32-bit MIPS instruction word with named field views."""

    __slots__ = ("word",)

    def __init__(self, word: int) -> None:
        self.word = to_u32(word)

    @property
    def op(self) -> int:
        return self.word >> 26

    @property
    def rs(self) -> int:
        return (self.word >> 21) & 0x1F

    @property
    def rt(self) -> int:
        return (self.word >> 16) & 0x1F

    @property
    def rd(self) -> int:
        return (self.word >> 11) & 0x1F

    @property
    def sa(self) -> int:
        return (self.word >> 6) & 0x1F

    @property
    def func(self) -> int:
        return self.word & 0x3F

    @property
    def imm(self) -> int:
        return self.word & 0xFFFF

    @property
    def tgt(self) -> int:
        return self.word & 0x03FF_FFFF

    # Coprocessor-1 register format aliases.
    @property
    def fmt(self) -> int:
        return self.rs

    @property
    def ft(self) -> int:
        return self.rt

    @property
    def fs(self) -> int:
        return self.rd

    @property
    def fd(self) -> int:
        return self.sa

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Instruction):
            return NotImplemented
        return self.word == other.word

    def __hash__(self) -> int:
        return hash(self.word)

    def __repr__(self) -> str:
        return f"Instruction(0x{self.word:08x})"