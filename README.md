# mipcsim

Building blocks for a cycle-level simulator of a five-stage pipelined MIPS
processor: instruction words, big-endian memory, pipeline latches, an
instruction decoder, execute-stage and memory-stage operations, and the
decode and execute stages with operand bypassing and load-use interlocks.

No third-party libraries are needed. Tests use pytest:

```
pip install -e .[test]
pytest
```

## Modules

- `mipcsim.insn` – `Instruction(word)` exposes the fields `op`, `rs`, `rt`,
  `rd`, `sa`, `func`, `imm`, `tgt` and the coprocessor-1 aliases `fmt`,
  `ft`, `fs`, `fd`. `encode_imm`, `encode_tgt` and `encode_reg` build words
  and raise `ValueError` for fields that do not fit. `sign_extend`, `to_u32`
  and `to_s32` do 32-bit arithmetic.
- `mipcsim.memory` – `Memory` is a sparse store of aligned 64-bit
  double-words (unwritten locations read as zero) with `read`/`write` for
  double-words, `read_byte`, `read_half`, `read_word` and their `write_*`
  counterparts, and `load(addr, data)` to copy bytes in. The free functions
  `get_byte`, `set_byte`, `get_halfword`, `set_halfword`, `get_word` and
  `set_word` pick values out of, or place them into, a big-endian
  double-word.
- `mipcsim.latch` – `FetchLatch` and `Latch` dataclasses that carry an
  instruction's state between stages. `Latch.copy()` returns an independent
  copy; `Latch.from_fetch(fetch)` starts a latch from a fetched instruction.
- `mipcsim.ops` – execute-stage operations (`func_add_addu`, `func_mult`,
  `func_beq`, `func_load`, `func_store`, …). Each takes a latch and writes
  its result, branch decision or memory address into it. Division by zero
  leaves `0x7fffffff` in both hi and lo.
- `mipcsim.memops` – memory-stage operations (`mem_lb`, `mem_lw`, `mem_lwl`,
  `mem_sw`, `mem_swr`, …). Each takes a processor-like object with `mem`,
  `gpr` and `fpr` attributes and the latch in the memory stage.
- `mipcsim.decode` – `decode(latch, cpu, word)` fills a latch from an
  instruction word, selecting the operation and memory operation and
  setting write-back controls. Undefined opcodes set `latch.is_illegal`.
  `format_registers(cpu)` renders `pc`, the 32 registers and branch state
  as text.
- `mipcsim.pipeline` – `DecodeStage` and `ExecuteStage`. Each has
  `posedge()` and `negedge()`; in a cycle every stage's `posedge` must run
  before any stage's `negedge`. Decode detects EX→EX and MEM→EX bypasses,
  stalls one cycle when an instruction uses the result of the load ahead of
  it, and squashes the instruction fetched behind a syscall. Execute applies
  the bypasses, runs the operation and redirects `cpu.pc` on a taken branch.
- `mipcsim.hostcalls` – `emulate_fxstat(target, fd, addr)` runs `os.fstat`
  on a host descriptor and writes the result as a simulated stat structure;
  `emulate_gettime(target, ts_addr, tz_addr)` writes the host time as
  seconds and microseconds. `target` needs `write_word` and `write_half`
  (a `Memory` will do).

## Example

```python
from types import SimpleNamespace

from mipcsim.decode import decode
from mipcsim.insn import encode_imm
from mipcsim.latch import Latch
from mipcsim.memops import mem_lw
from mipcsim.memory import Memory

cpu = SimpleNamespace(gpr=[0] * 32, fpr=[0] * 32, hi=0, lo=0, fpinst=0, mem=Memory())
cpu.gpr[8] = 5

latch = Latch(pc=0x1000)
decode(latch, cpu, encode_imm(0x09, 8, 9, -3))   # addiu $t1, $t0, -3
latch.op(latch)
print(latch.dst, latch.result_lo)                # 9 2

cpu.mem.write_word(0x2000, 0xCAFEF00D)
cpu.gpr[8] = 0x2000
latch = Latch(pc=0x1004)
decode(latch, cpu, encode_imm(0x23, 8, 9, 0))    # lw $t1, 0($t0)
latch.op(latch)                                  # computes the address
latch.mem_op(cpu, latch)                         # reads memory
print(hex(latch.result_lo))                      # 0xcafef00d
```

`DecodeStage` and `ExecuteStage` expect a processor object with the
attributes listed in the `mipcsim.pipeline` module docstring (`gpr`, `fpr`,
`hi`, `lo`, `pc`, `cycle`, the latches `fd`, `de`, `em`, `mw`, the stall
flags and counters).

## What this package does not do

It does not include a complete processor: there is no fetch stage, no
memory or writeback stage object, no class that owns the registers and
drives the clock, and no statistics report. Nor does it dispatch system
calls: `mipcsim.hostcalls` only fills stat and time structures, and no
layer reads a syscall number and acts on it. There is no command-line
program and no loader for program images; code is placed in memory with
`Memory.load`, and the caller drives the stages it uses.