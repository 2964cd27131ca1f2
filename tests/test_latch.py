from mipcsim.latch import FetchLatch, Latch


def test_default_branch_target_is_marker():
    assert Latch().btgt == 0xDEADBEEF
    assert Latch().op is None


def test_from_fetch_takes_fetch_fields():
    fetch = FetchLatch(ins=0x1234, pc=0x400, mem_ex_1=True, mem_ex_2=False)
    latch = Latch.from_fetch(fetch)
    assert latch.ins == fetch.ins
    assert latch.pc == fetch.pc
    assert latch.mem_ex_1 is True
    assert latch.mem_ex_2 is False
    assert latch.write_reg is False
    assert latch.btgt == Latch().btgt


def test_copy_is_equal_and_independent():
    original = Latch(ins=7, pc=0x20, src1=-3, write_reg=True)
    duplicate = original.copy()
    assert duplicate == original
    duplicate.src1 = 99
    duplicate.num_load += 1
    assert original.src1 == -3
    assert original.num_load == 0


def test_copy_keeps_operation_callables():
    def op(latch):
        latch.result_lo = latch.src1

    original = Latch(op=op, src1=5)
    duplicate = original.copy()
    duplicate.op(duplicate)
    assert duplicate.op is op
    assert duplicate.result_lo == original.src1