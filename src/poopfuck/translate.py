from __future__ import annotations

from typing import Dict, List, Sequence

from .parser import Instruction, Node, walk

BF_OPS = set("+-<>[],.")

_FROM_BF: Dict[str, Instruction] = {
    '>': Instruction.INCREMENT_POINTER,
    '<': Instruction.DECREMENT_POINTER,
    '+': Instruction.INCREMENT_VALUE,
    '-': Instruction.DECREMENT_VALUE,
    ',': Instruction.INPUT,
    '.': Instruction.OUTPUT,
    '[': Instruction.LOOP_START,
    ']': Instruction.LOOP_END,
}
_TO_BF = {ins: ch for ch, ins in _FROM_BF.items()}


def from_brainfuck(code: str, *, per_line: int = 0) -> str:
    """Translate Brainfuck into token source; non-command chars are dropped.

    With ``per_line`` > 0 a newline follows every ``per_line`` instructions.
    """
    code = "".join(ch for ch in code if ch in BF_OPS)
    depth = 0
    out: List[str] = []
    for i, ch in enumerate(code):
        if ch == "[":
            depth += 1
        elif ch == "]":
            if depth == 0:
                raise ValueError("Unmatched ']'")
            depth -= 1
        out.append(_FROM_BF[ch].source)
        if per_line and (i + 1) % per_line == 0:
            out.append("\n")

    if depth != 0:
        raise ValueError("Unmatched '['")
    return "".join(out)


def to_brainfuck(nodes: Sequence[Node]) -> str:
    return "".join(_TO_BF[ins] for ins in walk(nodes))
