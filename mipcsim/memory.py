"""Sparse big-endian memory addressed by 64-bit double-words."""

from __future__ import annotations

MASK64 = (1 << 64) - 1


def _shift(addr: int, size: int) -> int:
    return (8 - size - (addr & (8 - size))) * 8


def _get(addr: int, dword: int, size: int) -> int:
    return (dword >> _shift(addr, size)) & ((1 << (8 * size)) - 1)


def _set(addr: int, dword: int, value: int, size: int) -> int:
    mask = (1 << (8 * size)) - 1
    shift = _shift(addr, size)
    return ((dword & ~(mask << shift)) | ((value & mask) << shift)) & MASK64


def get_byte(addr: int, dword: int) -> int:
    """Extract the byte at ``addr`` from its big-endian double-word."""
    return _get(addr, dword, 1)


def set_byte(addr: int, dword: int, value: int) -> int:
    """Return ``dword`` with the byte at ``addr`` replaced."""
    return _set(addr, dword, value, 1)


def get_halfword(addr: int, dword: int) -> int:
    return _get(addr, dword, 2)


def set_halfword(addr: int, dword: int, value: int) -> int:
    return _set(addr, dword, value, 2)


def get_word(addr: int, dword: int) -> int:
    return _get(addr, dword, 4)


def set_word(addr: int, dword: int, value: int) -> int:
    return _set(addr, dword, value, 4)


class Memory:
    """Byte-addressable memory stored as aligned 64-bit double-words.

    Locations never written read as zero.
    """

    def __init__(self) -> None:
        self._dwords: dict[int, int] = {}

    def read(self, addr: int) -> int:
        """Return the double-word containing ``addr``."""
        return self._dwords.get(addr & ~7, 0)

    def write(self, addr: int, value: int) -> None:
        """Store the double-word containing ``addr``."""
        self._dwords[addr & ~7] = value & MASK64

    def load(self, addr: int, data: bytes) -> None:
        """Copy ``data`` into memory starting at ``addr``."""
        for offset, byte in enumerate(data):
            self.write_byte(addr + offset, byte)

    def read_byte(self, addr: int) -> int:
        return get_byte(addr, self.read(addr))

    def write_byte(self, addr: int, value: int) -> None:
        self.write(addr, set_byte(addr, self.read(addr), value))

    def read_half(self, addr: int) -> int:
        return get_halfword(addr, self.read(addr))

    def write_half(self, addr: int, value: int) -> None:
        self.write(addr, set_halfword(addr, self.read(addr), value))

    def read_word(self, addr: int) -> int:
        return get_word(addr, self.read(addr))

    def write_word(self, addr: int, value: int) -> None:
        self.write(addr, set_word(addr, self.read(addr), value))