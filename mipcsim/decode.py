"""Instruction decoding into a pipeline latch."""

from __future__ import annotations

from typing import Any, Callable

from . import memops, ops
from .insn import Instruction, sign_extend, to_u32
from .latch import Latch

REG_LO = 32
REG_HI = 33
REG_HI_LO = 35
REG_RA = 31

_SPECIAL_ALU: dict[int, Callable[[Latch], None]] = {
    0x20: ops.func_add_addu,
    0x21: ops.func_add_addu,
    0x24: ops.func_and,
    0x27: ops.func_nor,
    0x25: ops.func_or,
    0x04: ops.func_sllv,
    0x2A: ops.func_slt,
    0x2B: ops.func_sltu,
    0x07: ops.func_srav,
    0x06: ops.func_srlv,
    0x22: ops.func_sub_subu,
    0x23: ops.func_sub_subu,
    0x26: ops.func_xor,
}

_SPECIAL_SHIFT: dict[int, Callable[[Latch], None]] = {
    0x00: ops.func_sll,
    0x03: ops.func_sra,
    0x02: ops.func_srl,
}

_IMM_ALU: dict[int, Callable[[Latch], None]] = {
    0x08: ops.func_addi_addiu,
    0x09: ops.func_addi_addiu,
    0x0C: ops.func_andi,
    0x0D: ops.func_ori,
    0x0A: ops.func_slti,
    0x0B: ops.func_sltiu,
    0x0E: ops.func_xori,
}

_REGIMM: dict[int, tuple[Callable[[Latch], None], bool]] = {
    0x01: (ops.func_bgez, False),
    0x11: (ops.func_bgezal, True),
    0x10: (ops.func_bltzal, True),
    0x00: (ops.func_bltz, False),
}

_LOADS = {
    0x20: memops.mem_lb,
    0x24: memops.mem_lbu,
    0x21: memops.mem_lh,
    0x25: memops.mem_lhu,
    0x23: memops.mem_lw,
}

_SUBREG_LOADS = {
    0x22: memops.mem_lwl,
    0x26: memops.mem_lwr,
}

_STORES = {
    0x28: memops.mem_sb,
    0x29: memops.mem_sh,
    0x2A: memops.mem_swl,
    0x2B: memops.mem_sw,
    0x2E: memops.mem_swr,
}


def _controls(
    latch: Latch,
    *,
    write_reg: bool = False,
    write_freg: bool = False,
    mem_control: bool = False,
) -> None:
    latch.write_reg = write_reg
    latch.write_freg = write_freg
    latch.hi_wport = False
    latch.lo_wport = False
    latch.mem_control = mem_control


def _branch(latch: Latch, imm: int) -> None:
    latch.branch_offset = sign_extend(imm, 16) * 4
    latch.bd = 1
    latch.btgt = to_u32(latch.pc + latch.branch_offset + 4)


def _jump(latch: Latch, tgt: int) -> None:
    latch.branch_offset = tgt
    latch.btgt = to_u32(((latch.pc + 4) & 0xF000_0000) | (tgt << 2))
    latch.bd = 1


def _decode_special(latch: Latch, cpu: Any, insn: Instruction) -> None:
    latch.src1 = cpu.gpr[insn.rs]
    latch.src2 = cpu.gpr[insn.rt]
    latch.dst = insn.rd
    _controls(latch, write_reg=True)
    latch.rs_num = insn.rs
    latch.rt_num = insn.rt

    func = insn.func
    if func in _SPECIAL_ALU:
        latch.op = _SPECIAL_ALU[func]
    elif func in _SPECIAL_SHIFT:
        latch.op = _SPECIAL_SHIFT[func]
        latch.shift_amt = insn.sa
    elif func in (0x1A, 0x1B):
        latch.op = ops.func_div if func == 0x1A else ops.func_divu
        latch.hi_wport = latch.lo_wport = True
        latch.write_reg = False
    elif func == 0x10:
        latch.op = ops.func_mfhi
        latch.hi = cpu.hi
        latch.rs_num = REG_HI
        latch.rt_num = 0
    elif func == 0x12:
        latch.op = ops.func_mflo
        latch.lo = cpu.lo
        latch.rs_num = REG_LO
        latch.rt_num = 0
    elif func == 0x11:
        latch.op = ops.func_mthi
        latch.hi_wport = True
        latch.write_reg = False
        latch.dst = REG_HI
    elif func == 0x13:
        latch.op = ops.func_mtlo
        latch.lo_wport = True
        latch.write_reg = False
        latch.dst = REG_HI
    elif func in (0x18, 0x19):
        latch.op = ops.func_mult if func == 0x18 else ops.func_multu
        latch.hi_wport = latch.lo_wport = True
        latch.write_reg = False
        latch.dst = REG_HI
    elif func == 0x09:
        latch.op = ops.func_jalr
        latch.btgt = to_u32(latch.src1)
    elif func == 0x08:
        latch.op = ops.func_jr
        latch.write_reg = False
        latch.btgt = to_u32(latch.src1)
    elif func == 0x0D:
        latch.op = ops.func_await_break
        latch.write_reg = False
    elif func == 0x0C:
        latch.op = None
        latch.write_reg = False
        latch.is_syscall = True
    else:
        latch.is_illegal = True
        latch.write_reg = False


def _decode_regimm(latch: Latch, cpu: Any, insn: Instruction) -> None:
    latch.src1 = cpu.gpr[insn.rs]
    latch.branch_offset = insn.imm
    _controls(latch)
    latch.rs_num = insn.rs
    latch.rt_num = 0

    entry = _REGIMM.get(insn.rt)
    if entry is None:
        latch.is_illegal = True
        return
    latch.op, links = entry
    if links:
        latch.dst = REG_RA
        latch.write_reg = True
    _branch(latch, insn.imm)


def _decode_memory(
    latch: Latch, cpu: Any, insn: Instruction, *, load: bool, write_freg: bool = False
) -> None:
    latch.op = ops.func_load if load else ops.func_store
    latch.src1 = cpu.gpr[insn.rs]
    latch.src2 = insn.imm
    latch.dst = insn.rt
    _controls(
        latch,
        write_reg=load and not write_freg,
        write_freg=write_freg,
        mem_control=True,
    )
    latch.rs_num = insn.rs


def _decode_cop1(latch: Latch, cpu: Any, insn: Instruction) -> None:
    cpu.fpinst += 1
    if insn.fmt == 4:  # mtc1
        latch.op = ops.func_mtc1
        latch.src1 = cpu.gpr[insn.ft]
        latch.dst = insn.fs
        _controls(latch, write_freg=True)
        latch.rs_num = insn.ft
    elif insn.fmt == 0:  # mfc1
        latch.op = ops.func_mfc1
        latch.src1 = cpu.fpr[insn.fs]
        latch.dst = insn.ft
        _controls(latch, write_reg=True)
        latch.fr_num = insn.ft
    else:
        latch.is_illegal = True
        _controls(latch)


def decode(latch: Latch, cpu: Any, word: int) -> None:
    """Decode ``word`` into ``latch``, reading source registers from ``cpu``.

    ``latch.pc`` must already hold the instruction's address; it is used to
    compute branch and jump targets.
    """
    insn = Instruction(word)
    latch.is_illegal = False
    latch.is_syscall = False
    op = insn.op

    if op == 0:
        _decode_special(latch, cpu, insn)
    elif op in _IMM_ALU:
        latch.op = _IMM_ALU[op]
        latch.src1 = cpu.gpr[insn.rs]
        latch.src2 = insn.imm
        latch.dst = insn.rt
        _controls(latch, write_reg=True)
        latch.rs_num = insn.rs
        latch.rt_num = 0
    elif op == 0x0F:  # lui
        latch.op = ops.func_lui
        latch.src2 = insn.imm
        latch.dst = insn.rt
        _controls(latch, write_reg=True)
    elif op in (0x04, 0x05):  # beq, bne
        latch.op = ops.func_beq if op == 0x04 else ops.func_bne
        latch.src1 = cpu.gpr[insn.rs]
        latch.src2 = cpu.gpr[insn.rt]
        _controls(latch)
        _branch(latch, insn.imm)
        latch.rs_num = insn.rs
        latch.rt_num = insn.rt
    elif op == 0x01:
        _decode_regimm(latch, cpu, insn)
    elif op in (0x06, 0x07):  # blez, bgtz
        latch.op = ops.func_blez if op == 0x06 else ops.func_bgtz
        latch.src1 = cpu.gpr[insn.rs]
        _controls(latch)
        _branch(latch, insn.imm)
        latch.rs_num = insn.rs
        latch.rt_num = 0
    elif op in (0x02, 0x03):  # j, jal
        _controls(latch)
        if op == 0x03:
            latch.op = ops.func_jal
            latch.dst = REG_RA
            latch.write_reg = True
        else:
            latch.op = ops.func_j
        _jump(latch, insn.tgt)
    elif op in _LOADS:
        _decode_memory(latch, cpu, insn, load=True)
        latch.mem_op = _LOADS[op]
        latch.rt_num = 0
    elif op in _SUBREG_LOADS:
        _decode_memory(latch, cpu, insn, load=True)
        latch.mem_op = _SUBREG_LOADS[op]
        latch.subreg_operand = cpu.gpr[insn.rt]
        latch.rt_num = insn.rt
        latch.is_subreg = True
    elif op == 0x31:  # lwc1
        _decode_memory(latch, cpu, insn, load=True, write_freg=True)
        latch.mem_op = memops.mem_lwc1
        latch.rt_num = 0
    elif op == 0x39:  # swc1
        _decode_memory(latch, cpu, insn, load=False)
        latch.mem_op = memops.mem_swc1
        latch.fr_num = 0
    elif op in _STORES:
        _decode_memory(latch, cpu, insn, load=False)
        latch.mem_op = _STORES[op]
        latch.rt_num = 0
    elif op == 0x11:
        _decode_cop1(latch, cpu, insn)
    else:
        latch.is_illegal = True
        _controls(latch)


def format_registers(cpu: Any) -> str:
    """Render the register state of ``cpu`` for debugging."""
    lines = [f"\n--- PC = {to_u32(cpu.pc):08x} ---"]
    for num, value in enumerate(cpu.gpr):
        name = f"r{num}:"
        lines.append(f"{name:>4} {to_u32(value):08x} ({to_u32(value)})")
    lines.append(f"taken: {cpu.btaken}, bd: {cpu.bd}")
    lines.append(f"target: {to_u32(cpu.btgt):08x}")
    return "\n".join(lines) + "\n"