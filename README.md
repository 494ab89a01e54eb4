# evmkit

Building blocks for an Ethereum Virtual Machine interpreter:

- `evmkit.opcodes` holds the `Opcode` enumeration, which covers the opcodes of
  every EVM revision. It also has the helpers `is_defined`, `identifier_of`,
  `is_push` and `push_data_size`.
- `evmkit.analysis` splits bytecode into basic blocks and precomputes the
  arguments of its instructions. It also provides `Stack`, a stack indexed
  from the top, and `find_jumpdest`, which resolves a jump offset to the
  index of an instruction.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Opcodes

```python
from evmkit.opcodes import Opcode, is_defined, identifier_of, is_push, push_data_size

assert is_push(Opcode.PUSH3)
assert push_data_size(Opcode.PUSH3) == 3
assert push_data_size(Opcode.ADD) == 0
assert identifier_of(Opcode.AND) == "and_"
assert identifier_of(Opcode.DUP2) == "dup<2>"
assert not is_defined(0x0C)
```

Every helper raises `ValueError` for a value outside 0–255. `identifier_of`
also raises `ValueError` for a byte that is not a defined opcode. `is_push`
covers PUSH1 to PUSH32 only.

## Analysing bytecode

`analyze(op_table, code)` takes an operation table of exactly 256
`OpTableEntry` values, one for each byte value. Each entry gives a handler
(`fn`, which can be any object), the base gas cost, the stack height the
opcode requires and the change it makes to the stack height. The function
raises `ValueError` if the table does not have 256 entries.

It returns a `CodeAnalysis` with these fields:

- `instrs`: the list of `Instruction` objects. The first instruction and every
  JUMPDEST start a basic block, and so does the instruction that follows a
  JUMPI. The `arg` of a block-starting instruction is a `BlockInfo` that
  holds the block's total gas cost (capped at 2³²−1), the stack height it
  requires and its largest stack growth (both capped at 32767). Other
  instructions carry these arguments: a push carries its value, with missing
  trailing bytes read as zeros; GAS, the calls, the creates and SSTORE carry
  the gas cost of their block accumulated up to and including themselves;
  PC carries its code offset. A STOP instruction always ends the list.
  Bytes after JUMP, STOP, RETURN, REVERT or SELFDESTRUCT, up to the next
  JUMPDEST, are unreachable and are skipped.
- `push_values`: the values of pushes wider than 8 bytes, in code order.
- `jumpdest_offsets` and `jumpdest_targets`: the sorted code offsets of the
  JUMPDESTs, each paired with its instruction index.

```python
from evmkit.analysis import OpTableEntry, analyze, find_jumpdest
from evmkit.opcodes import identifier_of, is_defined

op_table = [
    OpTableEntry(
        fn=identifier_of(op) if is_defined(op) else None,
        gas_cost=0,
        stack_req=0,
        stack_change=0,
    )
    for op in range(256)
]

# PUSH1 3, JUMP, JUMPDEST, STOP
analysis = analyze(op_table, bytes.fromhex("6003565b00"))
assert find_jumpdest(analysis, 3) == 3   # instruction index of the JUMPDEST
assert find_jumpdest(analysis, 1) == -1  # not a jump destination
```

## Stack

```python
from evmkit.analysis import Stack

stack = Stack()
stack.push(1)
stack.push(2)
assert stack.top() == 2
assert stack[1] == 1       # indexed from the top
stack[0] = 5
assert stack.pop() == 5
assert len(stack) == 1
stack.reset()
assert len(stack) == 0
```

An index outside the stack, or `pop` on an empty stack, raises `IndexError`.
`push` does not enforce any stack limit.

## What this package does not do

The package analyses code but does not run it. It has no instruction
handlers and no interpreter loop. It does not compute gas beyond the base
costs that your operation table supplies. It has no memory, storage, account
state or host interface, and it has no built-in operation tables for the EVM
revisions: the caller supplies the table.