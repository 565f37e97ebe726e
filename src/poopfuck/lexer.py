from __future__ import annotations

import logging

from enum import Enum
from typing import Iterable, List

from .errors import ErrorKind, make_lex_error

logger = logging.getLogger(__name__)

TOKEN_PREFIX = 'うんち'
TOKEN_LENGTH = len(TOKEN_PREFIX) + 1
COMMENT_OPEN = '/*'
COMMENT_CLOSE = '*/'


class Marker(Enum):
    A = '！'
    B = '？'
    C = '。'

    @property
    def glyph(self) -> str:
        return self.value

    @property
    def token(self) -> str:
        return TOKEN_PREFIX + self.value


_MARKERS = {m.value: m for m in Marker}


def _skip_comment(source: str, i: int) -> int:
    end = source.find(COMMENT_CLOSE, i + len(COMMENT_OPEN))
    if end < 0:
        raise make_lex_error(
            kind=ErrorKind.UNCLOSED_COMMENT,
            message=f"Unclosed comment opened at {i + 1}th char",
            source=source,
            position=i + 1,
        )
    return end + len(COMMENT_CLOSE)


def _invalid_token(source: str, i: int):
    candidate = source[i:i + TOKEN_LENGTH]
    for offset, ch in enumerate(candidate):
        expected = TOKEN_PREFIX[offset] if offset < len(TOKEN_PREFIX) else None
        if (expected is not None and ch != expected) or (expected is None and ch not in _MARKERS):
            pos = i + offset + 1
            return make_lex_error(
                kind=ErrorKind.INVALID_TOKEN,
                message=f"Invalid token {ch!r} at {pos}th char",
                source=source,
                position=pos,
            )

    # every char fits but the input ends before the marker glyph
    pos = i + len(candidate)
    return make_lex_error(
        kind=ErrorKind.INVALID_TOKEN,
        message=f"Incomplete token {candidate!r} at {pos}th char",
        source=source,
        position=pos,
    )


def tokenize(source: str) -> List[Marker]:
    """Split ``source`` into its marker symbols.

    Whitespace and ``/* ... */`` comments are dropped; each four-character
    token contributes only its final glyph. Raises ``PoopSyntaxError``
    (``UnclosedComment`` or ``InvalidToken``) on the first problem found.
    """
    markers: List[Marker] = []
    i = 0
    n = len(source)
    while i < n:
        if source[i].isspace():
            i += 1
            continue

        if source.startswith(COMMENT_OPEN, i):
            i = _skip_comment(source, i)
            continue

        token = source[i:i + TOKEN_LENGTH]
        if len(token) == TOKEN_LENGTH and token.startswith(TOKEN_PREFIX) and token[-1] in _MARKERS:
            markers.append(_MARKERS[token[-1]])
            i += TOKEN_LENGTH
            continue

        raise _invalid_token(source, i)

    logger.debug("tokenized %d chars into %d markers", n, len(markers))
    return markers


def render_markers(markers: Iterable[Marker]) -> str:
    return ''.join(m.token for m in markers)
