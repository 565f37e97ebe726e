from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class RunOptions:
    cell_bits: int = 8
    wrap: bool = True
    max_steps: Optional[int] = None
    encoding: str = "utf-8"

    def __post_init__(self) -> None:
        if self.cell_bits < 1:
            raise ValueError(f"cell_bits must be positive, got {self.cell_bits}")
        if self.max_steps is not None and self.max_steps < 0:
            raise ValueError(f"max_steps must be >= 0, got {self.max_steps}")
