import pytest

from mipcsim.memory import (
    Memory,
    get_byte,
    get_halfword,
    get_word,
    set_byte,
    set_halfword,
    set_word,
)

DATA = bytes([0x12, 0x34, 0x56, 0x78, 0x9A, 0xBC, 0xDE, 0xF0])
DWORD = int.from_bytes(DATA, "big")


def test_get_byte_is_big_endian():
    for offset, byte in enumerate(DATA):
        assert get_byte(offset, DWORD) == byte


def test_get_halfword_and_word_are_big_endian():
    assert get_halfword(2, DWORD) == int.from_bytes(DATA[2:4], "big")
    assert get_word(0, DWORD) == int.from_bytes(DATA[:4], "big")
    assert get_word(4, DWORD) == int.from_bytes(DATA[4:], "big")


@pytest.mark.parametrize("offset", range(8))
def test_set_byte_touches_only_one_byte(offset):
    updated = set_byte(offset, DWORD, 0xAA)
    assert get_byte(offset, updated) == 0xAA
    for other in range(8):
        if other != offset:
            assert get_byte(other, updated) == get_byte(other, DWORD)


@pytest.mark.parametrize("offset", [0, 2, 4, 6])
def test_set_halfword_round_trip(offset):
    updated = set_halfword(offset, DWORD, 0xBEEF)
    assert get_halfword(offset, updated) == 0xBEEF
    assert get_halfword(offset ^ 2, updated) == get_halfword(offset ^ 2, DWORD)


@pytest.mark.parametrize("offset", [0, 4])
def test_set_word_round_trip(offset):
    updated = set_word(offset, DWORD, 0xCAFEBABE)
    assert get_word(offset, updated) == 0xCAFEBABE
    assert get_word(offset ^ 4, updated) == get_word(offset ^ 4, DWORD)


def test_unwritten_memory_reads_zero():
    mem = Memory()
    assert mem.read(0x4000) == 0
    assert mem.read_word(0x4004) == 0


def test_load_then_read_bytes_and_dword():
    mem = Memory()
    mem.load(0x100, DATA)
    assert [mem.read_byte(0x100 + i) for i in range(8)] == list(DATA)
    assert mem.read(0x100) == DWORD
    assert mem.read(0x103) == mem.read(0x100)


def test_load_unaligned_spans_dwords():
    mem = Memory()
    mem.load(0x205, DATA)
    assert bytes(mem.read_byte(0x205 + i) for i in range(8)) == DATA


def test_word_and_half_round_trip():
    mem = Memory()
    mem.write_word(0x10, 0x11223344)
    mem.write_word(0x14, 0x55667788)
    mem.write_half(0x12, 0xABCD)
    assert mem.read_word(0x14) == 0x55667788
    assert mem.read_half(0x12) == 0xABCD
    assert mem.read_half(0x10) == 0x1122


def test_write_masks_to_64_bits():
    mem = Memory()
    value = (1 << 70) | 0x1234
    mem.write(0x8, value)
    assert mem.read(0x8) == value & ((1 << 64) - 1)