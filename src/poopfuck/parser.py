from __future__ import annotations

import logging

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Optional, Sequence, Tuple, Union

from .errors import ErrorKind, make_parse_error
from .lexer import Marker, tokenize

logger = logging.getLogger(__name__)

A, B, C = Marker.A, Marker.B, Marker.C


class Instruction(Enum):
    INCREMENT_POINTER = (C, B)
    DECREMENT_POINTER = (B, C)
    INCREMENT_VALUE = (C, C)
    DECREMENT_VALUE = (A, A)
    INPUT = (C, A)
    OUTPUT = (A, C)
    LOOP_START = (A, B)
    LOOP_END = (B, A)

    @property
    def pair(self) -> Tuple[Marker, Marker]:
        return self.value

    @property
    def source(self) -> str:
        return self.value[0].token + self.value[1].token

    @classmethod
    def from_pair(cls, first: Marker, second: Marker) -> Optional["Instruction"]:
        """Instruction for a marker pair, ``None`` for the reserved (B, B)."""
        try:
            return cls((first, second))
        except ValueError:
            return None


# ---------------- Instruction tree ----------------
@dataclass(frozen=True)
class Simple:
    instruction: Instruction


@dataclass(frozen=True)
class Loop:
    body: Tuple["Node", ...]


Node = Union[Simple, Loop]


@dataclass
class _ParserContext:
    markers: Sequence[Marker]
    cursor: int = 0
    # (instruction index of the LoopStart, enclosing block) per open loop
    open_loops: List[Tuple[int, List[Node]]] = field(default_factory=list)

    @property
    def index(self) -> int:
        return self.cursor // 2

    @property
    def depth(self) -> int:
        return len(self.open_loops)

    def at_end(self) -> bool:
        return self.cursor >= len(self.markers)

    def next_pair(self) -> Tuple[Marker, Marker]:
        pair = (self.markers[self.cursor], self.markers[self.cursor + 1])
        self.cursor += 2
        return pair


def _parse_program(ctx: _ParserContext) -> List[Node]:
    program: List[Node] = []
    block = program
    while not ctx.at_end():
        index = ctx.index
        instruction = Instruction.from_pair(*ctx.next_pair())

        if instruction is None:
            raise make_parse_error(
                kind=ErrorKind.INVALID_INSTRUCTION_PAIR,
                message="Invalid instruction 'うんち？' + 'うんち？'",
                index=index,
            )
        if instruction is Instruction.INPUT:
            raise make_parse_error(
                kind=ErrorKind.UNSUPPORTED_INPUT,
                message="Reading from stdin is not currently supported",
                index=index,
            )
        if instruction is Instruction.LOOP_END:
            if ctx.depth == 0:
                raise make_parse_error(
                    kind=ErrorKind.UNMATCHED_LOOP_END,
                    message="Invalid end of loop",
                    index=index,
                )
            _, parent = ctx.open_loops.pop()
            parent.append(Loop(tuple(block)))
            block = parent
            continue
        if instruction is Instruction.LOOP_START:
            ctx.open_loops.append((index, block))
            block = []
            continue

        block.append(Simple(instruction))

    if ctx.open_loops:
        opened_at, _ = ctx.open_loops[-1]
        raise make_parse_error(
            kind=ErrorKind.UNMATCHED_LOOP_START,
            message=f"Loop started at instruction {opened_at} is never closed",
            index=opened_at,
        )
    return program


def parse(markers: Sequence[Marker]) -> List[Node]:
    """Build the instruction tree for a marker sequence.

    Markers are read in pairs. Open loop bodies are kept on an explicit
    stack, so nesting depth is bounded only by memory. Raises
    ``PoopSyntaxError`` on the first malformed pair.
    """
    if len(markers) % 2 != 0:
        raise make_parse_error(
            kind=ErrorKind.ODD_TOKEN_COUNT,
            message=(
                "Invalid number of tokens. An instruction always consists of 2 tokens, "
                f"but {len(markers)} tokens found"
            ),
            index=len(markers) // 2,
        )

    ctx = _ParserContext(markers)
    program = _parse_program(ctx)
    logger.debug("parsed %d instructions into %d top-level nodes", ctx.index, len(program))
    return program


def parse_source(source: str) -> List[Node]:
    return parse(tokenize(source))


def walk(nodes: Sequence[Node]) -> Iterator[Instruction]:
    """Yield the instructions of a tree in source order, loop markers included."""
    stack = [iter(nodes)]
    while stack:
        for n in stack[-1]:
            if isinstance(n, Loop):
                yield Instruction.LOOP_START
                stack.append(iter(n.body))
                break
            yield n.instruction
        else:
            stack.pop()
            if stack:
                yield Instruction.LOOP_END


def count_instructions(nodes: Sequence[Node]) -> int:
    """Instruction pairs the tree was built from; a loop counts its start and end."""
    return sum(1 for _ in walk(nodes))


def emit(nodes: Sequence[Node]) -> str:
    return "".join(ins.source for ins in walk(nodes))
