from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional


class ErrorKind(Enum):
    UNCLOSED_COMMENT = 'UnclosedComment'
    INVALID_TOKEN = 'InvalidToken'
    ODD_TOKEN_COUNT = 'OddTokenCount'
    INVALID_INSTRUCTION_PAIR = 'InvalidInstructionPair'
    UNSUPPORTED_INPUT = 'UnsupportedInput'
    UNMATCHED_LOOP_END = 'UnmatchedLoopEnd'
    UNMATCHED_LOOP_START = 'UnmatchedLoopStart'
    UNDEFINED_INSTRUCTION = 'UndefinedInstruction'
    POINTER_UNDERFLOW = 'PointerUnderflow'
    STEP_LIMIT_EXCEEDED = 'StepLimitExceeded'
    UNPRINTABLE_VALUE = 'UnprintableValue'


_HINTS = {
    ErrorKind.UNCLOSED_COMMENT: 'Every "/*" needs a matching "*/". Comments do not nest.',
    ErrorKind.INVALID_TOKEN: 'Tokens are "うんち" followed by one of "！", "？" or "。".',
    ErrorKind.ODD_TOKEN_COUNT: 'An instruction always consists of 2 tokens.',
    ErrorKind.INVALID_INSTRUCTION_PAIR: '"うんち？うんち？" is reserved and has no meaning.',
    ErrorKind.UNSUPPORTED_INPUT: 'Reading from stdin is not supported; remove "うんち。うんち！".',
    ErrorKind.UNMATCHED_LOOP_END: 'Check for an extra "うんち？うんち！" or a missing loop start.',
    ErrorKind.UNMATCHED_LOOP_START: 'Check for a missing "うんち？うんち！" at the end of a loop.',
    ErrorKind.POINTER_UNDERFLOW: 'The data pointer cannot move left of cell 0.',
}


def _build_context(lines: List[str], line_no_1: int, *, context: int = 2) -> str:
    idx = max(1, line_no_1)
    start = max(1, idx - context)
    end = min(len(lines), idx + context)

    out: List[str] = []
    for i in range(start, end + 1):
        prefix = '>' if i == idx else ' '
        out.append(f"{prefix} {i:4d} | {lines[i - 1]}")
    return "\n".join(out)


def _hint_for(kind: ErrorKind) -> Optional[str]:
    return _HINTS.get(kind)


def _with_hint(text: str, kind: ErrorKind) -> str:
    hint = _hint_for(kind)
    return f"{text}\nHint: {hint}" if hint else text


def line_of(source: str, position: int) -> int:
    """1-based line number of the 1-based character ``position`` in ``source``."""
    return source.count('\n', 0, max(0, position - 1)) + 1


@dataclass
class PoopError(Exception):
    message: str

    def __str__(self) -> str:
        return self.message


@dataclass
class PoopSyntaxError(PoopError):
    kind: ErrorKind
    position: int
    line: int = 0
    context: str = ''


@dataclass
class PoopRuntimeError(PoopError):
    kind: ErrorKind
    pointer: int


def make_lex_error(*, kind: ErrorKind, message: str, source: str, position: int) -> PoopSyntaxError:
    line = line_of(source, position)
    ctx = _build_context(source.split('\n'), line)
    text = f"{kind.value}: {message} (line {line})\n{ctx}"
    return PoopSyntaxError(
        message=_with_hint(text, kind),
        kind=kind,
        position=position,
        line=line,
        context=ctx,
    )


def make_parse_error(*, kind: ErrorKind, message: str, index: int) -> PoopSyntaxError:
    # the marker stream has no lines; ``index`` is the instruction number
    return PoopSyntaxError(
        message=_with_hint(f"{kind.value}: {message} (instruction {index})", kind),
        kind=kind,
        position=index,
    )


def make_runtime_error(*, kind: ErrorKind, message: str, pointer: int) -> PoopRuntimeError:
    return PoopRuntimeError(
        message=_with_hint(f"{kind.value}: {message} (pointer {pointer})", kind),
        kind=kind,
        pointer=pointer,
    )
