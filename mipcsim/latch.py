"""Pipeline latches that carry instruction state between stages."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, Callable, Optional

BRANCH_TARGET_UNSET = 0xDEADBEEF


@dataclass
class FetchLatch:
    """State handed from fetch to decode."""

    ins: int = 0
    pc: int = 0
    change_pc: bool = False
    mem_ex_1: bool = False
    mem_ex_2: bool = False


@dataclass
class Latch:
    """State carried by an instruction through decode, execute and memory."""

    ins: int = 0
    pc: int = 0
    store_ins: int = 0
    store_pc: int = 0

    src1: int = 0
    src2: int = 0
    src3: int = 0
    dst: int = 0
    subreg_operand: int = 0
    mem_addr: int = 0
    result_hi: int = 0
    result_lo: int = 0

    mem_control: bool = False
    write_reg: bool = False
    write_freg: bool = False
    branch_offset: int = 0
    hi_wport: bool = False
    lo_wport: bool = False
    shift_amt: int = 0

    is_syscall: bool = False
    is_illegal: bool = False

    bd: int = 0
    last_bd: int = 0
    btgt: int = BRANCH_TARGET_UNSET
    btaken: int = 0
    is_subreg: bool = False
    hi: int = 0
    lo: int = 0

    rs_num: int = 0
    rt_num: int = 0
    fr_num: int = 0

    ex_ex_1: bool = False
    ex_ex_2: bool = False
    mem_ex_1: bool = False
    mem_ex_2: bool = False
    mem_mem_1: bool = False
    mem_mem_2: bool = False
    store_mem_ex_1: bool = False
    store_mem_ex_2: bool = False

    num_jal: int = 0
    num_jr: int = 0
    num_cond_br: int = 0
    num_load: int = 0
    num_store: int = 0

    op: Optional[Callable[["Latch"], None]] = None
    mem_op: Optional[Callable[[Any, "Latch"], None]] = None

    def copy(self) -> "Latch":
        """Return an independent copy of this latch."""
        return dataclasses.replace(self)

    @classmethod
    def from_fetch(cls, fetch: FetchLatch) -> "Latch":
        """Start a fresh latch for the instruction held in ``fetch``."""
        return cls(
            ins=fetch.ins,
            pc=fetch.pc,
            mem_ex_1=fetch.mem_ex_1,
            mem_ex_2=fetch.mem_ex_2,
        )