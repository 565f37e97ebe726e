from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple

import numpy as np


@dataclass
class ExecutionState:
    tape: List[int] = field(default_factory=lambda: [0])
    pointer: int = 0
    output: List[str] = field(default_factory=list)
    step_count: int = 0

    def reset(self) -> None:
        self.tape[:] = [0]
        self.pointer = 0
        self.output.clear()
        self.step_count = 0

    @property
    def current(self) -> int:
        return self.tape[self.pointer]

    @current.setter
    def current(self, value: int) -> None:
        self.tape[self.pointer] = value

    def grow(self) -> None:
        """Append zero cells until the pointer addresses one."""
        while self.pointer >= len(self.tape):
            self.tape.append(0)

    def snapshot(self) -> np.ndarray:
        # object dtype keeps unbounded (no-wrap) cells exact
        if all(-2 ** 63 <= v < 2 ** 63 for v in self.tape):
            return np.array(self.tape, dtype=np.int64)
        return np.array(self.tape, dtype=object)

    def nonzero_cells(self) -> List[Tuple[int, int]]:
        mem = self.snapshot()
        return [(int(addr), int(mem[addr])) for addr in np.nonzero(mem)[0]]
