from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, TextIO, Tuple

from .executor import Executor
from .lexer import tokenize
from .options import RunOptions
from .parser import parse


@dataclass(frozen=True)
class RunResult:
    output: str
    tape: Tuple[int, ...]
    pointer: int
    steps: int

    @property
    def output_bytes(self) -> bytes:
        if all(ord(ch) < 256 for ch in self.output):
            return self.output.encode('latin-1')
        return self.output.encode('utf-8')


def run_string(source: str, *, options: Optional[RunOptions] = None, sink: Optional[TextIO] = None) -> RunResult:
    nodes = parse(tokenize(source))
    state = Executor(options, sink=sink).run(nodes)
    return RunResult(
        output=''.join(state.output),
        tape=tuple(state.tape),
        pointer=state.pointer,
        steps=state.step_count,
    )


def run_file(path: str | Path, *, options: Optional[RunOptions] = None, sink: Optional[TextIO] = None) -> RunResult:
    opts = options or RunOptions()
    p = Path(path)
    return run_string(p.read_text(encoding=opts.encoding), options=opts, sink=sink)
