"""Code analysis for the block-based interpreter: basic blocks, push values, jump targets."""

from __future__ import annotations

from bisect import bisect_left
from dataclasses import dataclass, field
from typing import Any, Iterable, Sequence, Union

from evmkit.opcodes import Opcode, is_push, push_data_size

_UINT32_MAX = 2**32 - 1
_INT16_MAX = 2**15 - 1

_LAST_SMALL_PUSH = Opcode.PUSH8

_BLOCK_TERMINATORS = frozenset(
    {Opcode.JUMP, Opcode.STOP, Opcode.RETURN, Opcode.REVERT, Opcode.SELFDESTRUCT}
)

_GAS_TRACKING = frozenset(
    {
        Opcode.GAS,
        Opcode.CALL,
        Opcode.CALLCODE,
        Opcode.DELEGATECALL,
        Opcode.STATICCALL,
        Opcode.CREATE,
        Opcode.CREATE2,
        Opcode.SSTORE,
    }
)


@dataclass(frozen=True)
class BlockInfo:
    """Compressed information about a basic block of instructions."""

    gas_cost: int = 0
    """The total base gas cost of all instructions in the block."""

    stack_req: int = 0
    """The stack height required to execute the block."""

    stack_max_growth: int = 0
    """The maximum stack height growth relative to the height at block start."""


@dataclass(frozen=True)
class OpTableEntry:
    """Per-opcode data used by the analysis: handler, base gas cost and stack effects."""

    fn: Any
    gas_cost: int
    stack_req: int
    stack_change: int


InstructionArgument = Union[int, BlockInfo, None]


@dataclass
class Instruction:
    """An analysed instruction: its handler and an optional argument.

    The argument is a ``BlockInfo`` for block-starting instructions, the push
    value for pushes, the accumulated block gas cost for gas-sensitive
    instructions and the code offset for PC.
    """

    fn: Any
    arg: InstructionArgument = None


@dataclass
class CodeAnalysis:
    """The result of analysing a piece of code."""

    instrs: list[Instruction] = field(default_factory=list)
    push_values: list[int] = field(default_factory=list)
    """Values of pushes wider than 8 bytes, in code order."""
    jumpdest_offsets: list[int] = field(default_factory=list)
    """Sorted offsets of JUMPDESTs in the analysed code."""
    jumpdest_targets: list[int] = field(default_factory=list)
    """Instruction indexes matching the entries of ``jumpdest_offsets``."""


class Stack:
    """An EVM stack addressed from the top: index 0 is the top item."""

    def __init__(self, items: Iterable[int] = ()) -> None:
        self._items: list[int] = list(items)

    def __len__(self) -> int:
        return len(self._items)

    def _position(self, index: int) -> int:
        if not 0 <= index < len(self._items):
            raise IndexError(f"stack index out of range: {index}")
        return len(self._items) - 1 - index

    def __getitem__(self, index: int) -> int:
        return self._items[self._position(index)]

    def __setitem__(self, index: int, value: int) -> None:
        self._items[self._position(index)] = value

    def top(self) -> int:
        """Return the top item."""
        return self[0]

    def push(self, item: int) -> None:
        """Push an item; the stack limit is not checked."""
        self._items.append(item)

    def pop(self) -> int:
        """Remove and return the top item."""
        if not self._items:
            raise IndexError("pop from empty stack")
        return self._items.pop()

    def reset(self) -> None:
        """Empty the stack."""
        self._items.clear()


@dataclass
class _BlockBuilder:
    begin_block_index: int
    gas_cost: int = 0
    stack_req: int = 0
    stack_max_growth: int = 0
    stack_change: int = 0

    def add(self, entry: OpTableEntry) -> None:
        self.stack_req = max(self.stack_req, entry.stack_req - self.stack_change)
        self.stack_change += entry.stack_change
        self.stack_max_growth = max(self.stack_max_growth, self.stack_change)
        self.gas_cost += entry.gas_cost

    def close(self) -> BlockInfo:
        return BlockInfo(
            gas_cost=min(self.gas_cost, _UINT32_MAX),
            stack_req=min(self.stack_req, _INT16_MAX),
            stack_max_growth=min(self.stack_max_growth, _INT16_MAX),
        )


def _skip_dead_code(code: bytes, pos: int) -> int:
    """Skip unreachable bytes up to the next JUMPDEST or the end of code."""
    end = len(code)
    while pos < end and code[pos] != Opcode.JUMPDEST:
        if is_push(code[pos]):
            pos = min(pos + push_data_size(code[pos]) + 1, end)
        else:
            pos += 1
    return pos


def analyze(op_table: Sequence[OpTableEntry], code: bytes) -> CodeAnalysis:
    """Split the code into basic blocks and precompute instruction arguments."""
    table = tuple(op_table)
    if len(table) != 256:
        raise ValueError(f"op table must have 256 entries, got {len(table)}")
    code = bytes(code)

    analysis = CodeAnalysis()
    instrs = analysis.instrs
    instrs.append(Instruction(table[Opcode.JUMPDEST].fn))
    block = _BlockBuilder(0)

    end = len(code)
    pos = 0
    while pos < end:
        opcode = code[pos]
        pos += 1
        entry = table[opcode]

        if opcode == Opcode.JUMPDEST:
            instrs[block.begin_block_index].arg = block.close()
            block = _BlockBuilder(len(instrs))
            analysis.jumpdest_offsets.append(pos - 1)
            analysis.jumpdest_targets.append(len(instrs))

        instr = Instruction(entry.fn)
        instrs.append(instr)
        block.add(entry)

        if opcode in _BLOCK_TERMINATORS:
            pos = _skip_dead_code(code, pos)
        elif opcode == Opcode.JUMPI:
            # JUMPI ends the block and carries the data of the following one.
            instrs[block.begin_block_index].arg = block.close()
            block = _BlockBuilder(len(instrs) - 1)
        elif is_push(opcode):
            size = push_data_size(opcode)
            data = code[pos : pos + size]
            pos += len(data)
            # Missing trailing bytes of a truncated push read as zeros.
            value = int.from_bytes(data.ljust(size, b"\0"), "big")
            if opcode > _LAST_SMALL_PUSH:
                analysis.push_values.append(value)
            instr.arg = value
        elif opcode in _GAS_TRACKING:
            instr.arg = block.gas_cost
        elif opcode == Opcode.PC:
            instr.arg = pos - 1

    instrs[block.begin_block_index].arg = block.close()
    instrs.append(Instruction(table[Opcode.STOP].fn))
    return analysis


def find_jumpdest(analysis: CodeAnalysis, offset: int) -> int:
    """Return the instruction index of the JUMPDEST at the code offset, or -1."""
    offsets = analysis.jumpdest_offsets
    i = bisect_left(offsets, offset)
    if i != len(offsets) and offsets[i] == offset:
        return analysis.jumpdest_targets[i]
    return -1