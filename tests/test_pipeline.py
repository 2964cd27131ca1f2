from types import SimpleNamespace

import pytest

from mipcsim import ops
from mipcsim.decode import REG_HI, REG_HI_LO, REG_LO
from mipcsim.insn import encode_imm, encode_reg
from mipcsim.latch import FetchLatch, Latch
from mipcsim.pipeline import DecodeStage, ExecuteStage


def make_cpu():
    return SimpleNamespace(
        gpr=[0] * 32,
        fpr=[0] * 32,
        hi=0,
        lo=0,
        fpinst=0,
        pc=0x1000,
        cycle=0,
        fd=FetchLatch(),
        de=Latch(),
        em=Latch(),
        mw=Latch(),
        lock_pipeline_data=False,
        lock_pipeline_sys=False,
        is_syscall=False,
        nfetched=10,
        load_stall=0,
    )


def run_decode(cpu, word, pc=0x400):
    cpu.fd.ins = word
    cpu.fd.pc = pc
    stage = DecodeStage(cpu)
    stage.posedge()
    stage.negedge()
    return stage


def run_execute(cpu):
    stage = ExecuteStage(cpu)
    stage.posedge()
    stage.negedge()
    return stage


def test_decode_addiu_fills_latch():
    cpu = make_cpu()
    cpu.gpr[1] = 10
    run_decode(cpu, encode_imm(9, 1, 2, 5))
    assert cpu.de.op is ops.func_addi_addiu
    assert cpu.de.src1 == 10
    assert cpu.de.dst == 2
    assert cpu.de.write_reg
    assert cpu.de.pc == 0x400
    assert not cpu.de.ex_ex_1 and not cpu.de.mem_ex_1


def test_ex_ex_bypass_detected():
    cpu = make_cpu()
    cpu.de = Latch(write_reg=True, dst=2)
    run_decode(cpu, encode_reg(0, 2, 0, 3, 0, 0x21))
    assert cpu.de.ex_ex_1
    assert not cpu.de.ex_ex_2
    assert not cpu.lock_pipeline_data


def test_ex_ex_bypass_on_rt():
    cpu = make_cpu()
    cpu.de = Latch(write_reg=True, dst=4)
    run_decode(cpu, encode_reg(0, 0, 4, 3, 0, 0x21))
    assert cpu.de.ex_ex_2
    assert not cpu.de.ex_ex_1


def test_mem_ex_bypass_detected():
    cpu = make_cpu()
    cpu.em = Latch(write_reg=True, dst=2)
    run_decode(cpu, encode_reg(0, 2, 0, 3, 0, 0x21))
    assert cpu.de.mem_ex_1
    assert not cpu.de.ex_ex_1


def test_load_use_stalls_and_replays():
    cpu = make_cpu()
    cpu.de = Latch(mem_control=True, write_reg=True, dst=2)
    word = encode_reg(0, 2, 0, 3, 0, 0x21)
    run_decode(cpu, word, pc=0x480)
    assert cpu.lock_pipeline_data
    assert cpu.de.ins == 0
    assert cpu.de.store_ins == word
    assert cpu.de.store_pc == 0x480
    assert cpu.de.op is ops.func_sll

    cpu.fd.pc = 0x484
    stage = DecodeStage(cpu)
    stage.posedge()
    assert cpu.pc == 0x484
    assert cpu.fd.ins == word
    assert cpu.fd.pc == 0x480
    assert cpu.nfetched == 9
    assert cpu.load_stall == 1
    assert not cpu.lock_pipeline_data


def test_syscall_locks_pipeline_and_squashes_next_fetch():
    cpu = make_cpu()
    run_decode(cpu, encode_reg(0, 0, 0, 0, 0, 0x0C))
    assert cpu.de.is_syscall
    assert cpu.lock_pipeline_sys
    assert cpu.is_syscall

    cpu.fd.ins = encode_imm(9, 1, 2, 5)
    cpu.fd.pc = 0x404
    stage = DecodeStage(cpu)
    stage.posedge()
    assert cpu.fd.ins == 0
    assert cpu.pc == 0x404
    assert not cpu.is_syscall
    assert cpu.load_stall == 1


def test_mult_targets_hi_lo_and_mflo_bypasses():
    cpu = make_cpu()
    run_decode(cpu, encode_reg(0, 1, 2, 0, 0, 0x18))
    assert cpu.de.dst == REG_HI_LO
    run_decode(cpu, encode_reg(0, 0, 0, 3, 0, 0x12))
    assert cpu.de.rs_num == REG_LO
    assert cpu.de.ex_ex_1


def test_decode_negedge_without_posedge_fails():
    with pytest.raises(RuntimeError):
        DecodeStage(make_cpu()).negedge()


def test_execute_negedge_without_posedge_fails():
    with pytest.raises(RuntimeError):
        ExecuteStage(make_cpu()).negedge()


def test_execute_runs_operation():
    cpu = make_cpu()
    cpu.de = Latch(op=ops.func_or, src1=0x0F0, src2=0x00F)
    run_execute(cpu)
    assert cpu.em.result_lo == 0x0FF


def test_execute_forwards_from_execute_latch():
    cpu = make_cpu()
    cpu.em = Latch(result_lo=1234)
    cpu.de = Latch(op=ops.func_or, rs_num=5, ex_ex_1=True, src1=0, src2=0)
    run_execute(cpu)
    assert cpu.em.result_lo == 1234


def test_execute_result_wins_over_memory_result():
    cpu = make_cpu()
    cpu.em = Latch(result_lo=77)
    cpu.mw = Latch(result_lo=99)
    cpu.de = Latch(op=ops.func_or, rs_num=5, ex_ex_1=True, mem_ex_1=True)
    run_execute(cpu)
    assert cpu.em.result_lo == 77


def test_subreg_operand_forwarded_from_memory():
    cpu = make_cpu()
    cpu.mw = Latch(result_lo=0xABCD)
    cpu.de = Latch(
        op=ops.func_load, rt_num=3, is_subreg=True, mem_ex_2=True, src2=0
    )
    run_execute(cpu)
    assert cpu.em.subreg_operand == 0xABCD
    assert cpu.em.src2 == 0


def test_mfhi_takes_forwarded_hi():
    cpu = make_cpu()
    cpu.em = Latch(result_hi=0x55, result_lo=0x11)
    cpu.de = Latch(op=ops.func_mfhi, rs_num=REG_HI, ex_ex_1=True)
    run_execute(cpu)
    assert cpu.em.hi == 0x55
    assert cpu.em.result_lo == 0x55


def test_taken_branch_redirects_pc():
    cpu = make_cpu()
    run_decode(cpu, encode_imm(4, 0, 0, 3), pc=0x400)
    target = cpu.de.btgt
    run_execute(cpu)
    assert cpu.em.btaken == 1
    assert cpu.pc == target


def test_not_taken_branch_leaves_pc():
    cpu = make_cpu()
    cpu.gpr[1] = 1
    run_decode(cpu, encode_imm(4, 1, 0, 3), pc=0x400)
    run_execute(cpu)
    assert cpu.em.btaken == 0
    assert cpu.pc == 0x1000


def test_syscall_is_not_executed():
    cpu = make_cpu()
    cpu.de = Latch(is_syscall=True, btaken=1, btgt=0x2000, ex_ex_1=True, rs_num=5)
    cpu.em = Latch(result_lo=9)
    run_execute(cpu)
    assert cpu.em.is_syscall
    assert cpu.pc == 0x1000
    assert cpu.em.src1 == 0


def test_illegal_instruction_does_not_branch():
    cpu = make_cpu()
    cpu.de = Latch(is_illegal=True, btaken=1, btgt=0x2000)
    run_execute(cpu)
    assert cpu.em.is_illegal
    assert cpu.pc == 0x1000