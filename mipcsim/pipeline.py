"""Decode and execute stages of the five-stage pipeline.

Each stage works in two half-cycles. ``posedge`` samples the latches left by
the previous cycle and ``negedge`` publishes the stage's new latch. Every
stage's ``posedge`` must run before any stage's ``negedge`` in a cycle.

The processor object handed to a stage must provide these attributes:
``gpr``, ``fpr``, ``hi``, ``lo``, ``fpinst``, ``pc``, ``cycle``,
``fd`` (a :class:`~mipcsim.latch.FetchLatch`), ``de``, ``em`` and ``mw``
(each a :class:`~mipcsim.latch.Latch`), ``lock_pipeline_data``,
``lock_pipeline_sys``, ``is_syscall``, ``nfetched`` and ``load_stall``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from .decode import REG_HI, REG_HI_LO, REG_LO, decode
from .latch import Latch

_log = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Producer:
    """What decode needs to know about an instruction further down the pipe."""

    mem_control: bool
    write_reg: bool
    dst: int

    @classmethod
    def of(cls, latch: Latch) -> "_Producer":
        return cls(bool(latch.mem_control), bool(latch.write_reg), latch.dst)

    def supplies(self, reg: int) -> bool:
        """True if a reader of ``reg`` must take this instruction's result."""
        if self.dst == REG_HI_LO and reg in (REG_LO, REG_HI):
            return True
        return self.write_reg and self.dst == reg


class DecodeStage:
    """Decodes the fetched instruction and detects hazards."""

    def __init__(self, cpu: Any) -> None:
        self.cpu = cpu
        self._pending: Optional[Latch] = None
        self._in_execute: Optional[_Producer] = None
        self._in_memory: Optional[_Producer] = None

    def posedge(self) -> None:
        """Undo a stalled fetch if needed and sample the fetched instruction."""
        cpu = self.cpu
        if cpu.lock_pipeline_data:
            # Replay the instruction held back by a load-use stall.
            cpu.pc = cpu.fd.pc
            cpu.fd.ins = cpu.de.store_ins
            cpu.fd.pc = cpu.de.store_pc
            cpu.lock_pipeline_data = False
            cpu.nfetched -= 1
            cpu.load_stall += 1
        elif cpu.is_syscall:
            # Squash the instruction fetched behind a system call.
            cpu.pc = cpu.fd.pc
            cpu.fd.ins = 0
            cpu.is_syscall = False
            cpu.nfetched -= 1
            cpu.load_stall += 1
        self._pending = Latch.from_fetch(cpu.fd)
        self._in_execute = _Producer.of(cpu.de)
        self._in_memory = _Producer.of(cpu.em)

    def negedge(self) -> None:
        """Decode into the decode/execute latch and set bypass and stall controls."""
        if self._pending is None:
            raise RuntimeError("negedge called before posedge")
        cpu = self.cpu
        ex, me = self._in_execute, self._in_memory
        de = self._pending
        self._pending = None
        cpu.de = de
        ins = de.ins
        decode(de, cpu, ins)

        if de.hi_wport and de.lo_wport:
            de.dst = REG_HI_LO
        elif de.hi_wport:
            de.dst = REG_HI
        elif de.lo_wport:
            de.dst = REG_LO

        if not ex.mem_control:
            if de.rs_num and ex.supplies(de.rs_num):
                de.ex_ex_1 = True
            if de.rt_num and ex.write_reg and ex.dst == de.rt_num:
                de.ex_ex_2 = True
        if de.rs_num and me.supplies(de.rs_num):
            de.mem_ex_1 = True
        if de.rt_num and me.write_reg and me.dst == de.rt_num:
            de.mem_ex_2 = True

        cpu.lock_pipeline_data = False
        load_use = (
            ex.mem_control
            and ex.write_reg
            and (
                (de.rs_num != 0 and de.rs_num == ex.dst)
                or (de.rt_num != 0 and de.rt_num == ex.dst)
            )
        )
        if de.is_syscall:
            cpu.lock_pipeline_sys = True
            cpu.is_syscall = True
        elif load_use:
            de.store_ins = de.ins
            de.store_pc = de.pc
            cpu.lock_pipeline_data = True
            de.ins = 0
            decode(de, cpu, de.ins)
        elif de.is_illegal:
            _log.warning("illegal instruction %#x decoded", ins)
        _log.debug("<%d> Decoded ins %#x", cpu.cycle, ins)


class ExecuteStage:
    """Applies bypasses, runs the operation and resolves branches."""

    def __init__(self, cpu: Any) -> None:
        self.cpu = cpu
        self._pending: Optional[Latch] = None

    def posedge(self) -> None:
        """Execute the instruction in the decode/execute latch."""
        cpu = self.cpu
        em = cpu.de.copy()
        ins = em.ins
        if not em.is_syscall:
            self._bypass(em)

        if not em.is_syscall and not em.is_illegal:
            if em.op is not None:
                em.op(em)
            _log.debug("<%d> Executed ins %#x", cpu.cycle, ins)
            if em.btaken:
                cpu.pc = em.btgt
        elif em.is_syscall:
            _log.debug("<%d> Deferring execution of syscall ins %#x", cpu.cycle, ins)
        else:
            _log.debug(
                "<%d> Illegal ins %#x in execution stage at PC %#x",
                cpu.cycle,
                ins,
                cpu.pc,
            )
        self._pending = em

    def _bypass(self, em: Latch) -> None:
        # Memory results are applied first so that newer execute results win.
        sources = ((em.mem_ex_1, em.mem_ex_2, self.cpu.mw), (em.ex_ex_1, em.ex_ex_2, self.cpu.em))
        if em.rs_num != 0:
            for wanted, _, source in sources:
                if not wanted:
                    continue
                em.src1 = source.result_lo
                if em.rs_num == REG_HI:
                    em.hi = source.result_hi
                if em.rs_num == REG_LO:
                    em.lo = source.result_lo
        if em.rt_num != 0:
            for _, wanted, source in sources:
                if not wanted:
                    continue
                if em.is_subreg:
                    em.subreg_operand = source.result_lo
                else:
                    em.src2 = source.result_lo

    def negedge(self) -> None:
        """Publish the executed instruction to the execute/memory latch."""
        if self._pending is None:
            raise RuntimeError("negedge called before posedge")
        self.cpu.em = self._pending
        self._pending = None