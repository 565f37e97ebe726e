from __future__ import annotations

import logging

from typing import List, Optional, Sequence, TextIO

from .errors import ErrorKind, make_runtime_error
from .options import RunOptions
from .parser import Instruction, Loop, Node, Simple
from .state import ExecutionState

logger = logging.getLogger(__name__)


class Executor:
    """Tree-walking interpreter over a single growable tape."""

    def __init__(self, options: Optional[RunOptions] = None, *, sink: Optional[TextIO] = None):
        self.options = options or RunOptions()
        self.sink = sink
        self.state = ExecutionState()
        self._modulus = (1 << self.options.cell_bits) if self.options.wrap else None

    def run(self, nodes: Sequence[Node]) -> ExecutionState:
        """Run a program on a fresh state and return that state."""
        self.state = ExecutionState()
        logger.debug("run start: %d top-level nodes", len(nodes))
        self._run_program(nodes)
        logger.debug("run end: %d steps, tape length %d",
                     self.state.step_count, len(self.state.tape))
        return self.state

    def _run_program(self, nodes: Sequence[Node]) -> None:
        state = self.state
        # each frame is [block, index]; a frame's index stays on its Loop
        # node while the body runs, so popping the body re-tests the loop
        frames: List[List] = [[nodes, 0]]
        while frames:
            frame = frames[-1]
            block, i = frame
            if i >= len(block):
                frames.pop()
                continue

            node = block[i]
            if isinstance(node, Loop):
                if state.current != 0:
                    frames.append([node.body, 0])
                else:
                    frame[1] = i + 1
            elif isinstance(node, Simple):
                self._step(node.instruction)
                frame[1] = i + 1
            else:
                raise make_runtime_error(
                    kind=ErrorKind.UNDEFINED_INSTRUCTION,
                    message=f"Invalid instruction node {node!r}",
                    pointer=state.pointer,
                )

    def _tick(self) -> None:
        state = self.state
        state.step_count += 1
        limit = self.options.max_steps
        if limit is not None and state.step_count > limit:
            raise make_runtime_error(
                kind=ErrorKind.STEP_LIMIT_EXCEEDED,
                message=f"Program exceeded {limit} steps",
                pointer=state.pointer,
            )

    def _adjust(self, delta: int) -> None:
        value = self.state.current + delta
        if self._modulus is not None:
            value %= self._modulus
        self.state.current = value

    def _step(self, instruction: Instruction) -> None:
        self._tick()
        state = self.state

        if instruction is Instruction.INCREMENT_POINTER:
            state.pointer += 1
            state.grow()
        elif instruction is Instruction.DECREMENT_POINTER:
            if state.pointer == 0:
                raise make_runtime_error(
                    kind=ErrorKind.POINTER_UNDERFLOW,
                    message="Pointer moved left of the first cell",
                    pointer=state.pointer,
                )
            state.pointer -= 1
        elif instruction is Instruction.INCREMENT_VALUE:
            self._adjust(1)
        elif instruction is Instruction.DECREMENT_VALUE:
            self._adjust(-1)
        elif instruction is Instruction.OUTPUT:
            self._write(state.current)
        elif instruction is Instruction.INPUT:
            raise make_runtime_error(
                kind=ErrorKind.UNSUPPORTED_INPUT,
                message="Reading from stdin is not currently supported",
                pointer=state.pointer,
            )
        else:
            # loop markers only exist as Loop nodes once parsed
            raise make_runtime_error(
                kind=ErrorKind.UNDEFINED_INSTRUCTION,
                message=f"Undefined instruction {instruction.name}",
                pointer=state.pointer,
            )

    def _write(self, value: int) -> None:
        if not 0 <= value < 0x110000:
            raise make_runtime_error(
                kind=ErrorKind.UNPRINTABLE_VALUE,
                message=f"Cell value {value} is not a character code",
                pointer=self.state.pointer,
            )
        ch = chr(value)
        self.state.output.append(ch)
        if self.sink is not None:
            self.sink.write(ch)
            self.sink.flush()


def execute(nodes: Sequence[Node], options: Optional[RunOptions] = None, *,
            sink: Optional[TextIO] = None) -> ExecutionState:
    return Executor(options, sink=sink).run(nodes)
