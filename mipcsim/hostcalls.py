"""Host-side helpers that fill simulated structures for stat and time calls.

``target`` is anything with ``write_word(addr, value)`` and
``write_half(addr, value)`` that stores big-endian values in simulated memory.
"""

from __future__ import annotations

import os
import time
from typing import Any

from .insn import to_u32

# Byte offsets of the fields of the simulated ``struct stat`` (132 bytes).
STAT_OFFSETS = {
    "st_dev": 0,
    "st_ino": 16,
    "st_mode": 20,
    "st_nlink": 22,
    "st_uid": 24,
    "st_gid": 28,
    "st_rdev": 32,
    "st_size": 44,
    "st_atime": 52,
    "st_blksize": 76,
    "st_blocks": 80,
}
STAT_SIZE = 132

# Byte offsets within the simulated time structure.
TIME_SEC_OFFSET = 0
TIME_FRACTION_OFFSET = 4

_WORD_FIELDS = (
    "st_dev",
    "st_ino",
    "st_uid",
    "st_gid",
    "st_rdev",
    "st_size",
    "st_blocks",
    "st_blksize",
)
_HALF_FIELDS = ("st_mode", "st_nlink")


def emulate_fxstat(target: Any, fd: int, addr: int) -> int:
    """Run fstat on host ``fd`` and store the result at ``addr``.

    Only the fields the simulated program relies on are written; values are
    truncated to the width of the simulated field. Raises ``OSError`` if the
    host call fails, otherwise returns 0.
    """
    sb = os.fstat(fd)
    for field in _WORD_FIELDS:
        target.write_word(addr + STAT_OFFSETS[field], to_u32(getattr(sb, field, 0)))
    for field in _HALF_FIELDS:
        target.write_half(addr + STAT_OFFSETS[field], getattr(sb, field) & 0xFFFF)
    target.write_word(addr + STAT_OFFSETS["st_atime"], to_u32(int(sb.st_atime)))
    return 0


def emulate_gettime(target: Any, ts_addr: int, tz_addr: int) -> int:
    """Store the host time of day at ``ts_addr`` as seconds and microseconds.

    The time-zone argument is accepted and ignored. Returns 0.
    """
    now_ns = time.time_ns()
    seconds, remainder = divmod(now_ns, 1_000_000_000)
    target.write_word(ts_addr + TIME_SEC_OFFSET, to_u32(seconds))
    target.write_word(ts_addr + TIME_FRACTION_OFFSET, remainder // 1000)
    return 0