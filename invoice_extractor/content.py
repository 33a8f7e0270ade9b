"""
content.py - Pull the text literals out of an inflated content stream.

The content stream is a sequence of drawing operators in which the visible
text sits inside parentheses, e.g. '(Total Net ) Tj'. Only the bytes inside
the parentheses are kept, in stream order. A backslash inside a literal
keeps the byte after it verbatim, so '\\)' does not close the string.

Lines are delimited by the stream's own newlines. A line produces output
only when at least one literal closed on it; the literals of one line are
concatenated.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict

from .errors import UnterminatedLiteral

logger = logging.getLogger(__name__)

OPEN = ord("(")
CLOSE = ord(")")
ESCAPE = ord("\\")
NEWLINE = ord("\n")


class State(Enum):
    SCAN = "scan"                    # outside any literal
    IN_LITERAL = "in_literal"        # inside (...)
    AFTER_LITERAL = "after_literal"  # a literal closed on this line
    DONE = "done"


@dataclass
class _Scanner:
    content: bytes
    pos: int = 0
    out: bytearray = field(default_factory=bytearray)
    literal_start: int = 0

    @property
    def at_end(self) -> bool:
        return self.pos >= len(self.content)


def _scan(s: _Scanner) -> State:
    if s.at_end:
        return State.DONE
    byte = s.content[s.pos]
    s.pos += 1
    if byte == OPEN:
        s.literal_start = s.pos - 1
        return State.IN_LITERAL
    return State.SCAN


def _in_literal(s: _Scanner) -> State:
    if s.at_end:
        raise UnterminatedLiteral(
            f"Content stream ends inside the literal opened at offset {s.literal_start}"
        )
    byte = s.content[s.pos]
    if byte == CLOSE:
        s.pos += 1
        return State.AFTER_LITERAL
    if byte == ESCAPE:
        if s.pos + 1 >= len(s.content):
            raise UnterminatedLiteral(
                f"Content stream ends with a backslash in the literal opened at offset {s.literal_start}"
            )
        s.out.append(s.content[s.pos + 1])
        s.pos += 2
        return State.IN_LITERAL
    s.out.append(byte)
    s.pos += 1
    return State.IN_LITERAL


def _after_literal(s: _Scanner) -> State:
    if s.at_end:
        return State.DONE
    byte = s.content[s.pos]
    s.pos += 1
    if byte == OPEN:
        s.literal_start = s.pos - 1
        return State.IN_LITERAL
    if byte == NEWLINE:
        s.out.append(NEWLINE)
        return State.SCAN
    return State.AFTER_LITERAL


TRANSITIONS: Dict[State, Callable[[_Scanner], State]] = {
    State.SCAN: _scan,
    State.IN_LITERAL: _in_literal,
    State.AFTER_LITERAL: _after_literal,
}


def extract_text(content: bytes) -> bytes:
    """
    Return the literal text of a content stream, one line per source line
    that closed at least one literal.

    Raises:
        UnterminatedLiteral: the stream ends before a literal is closed
    """
    scanner = _Scanner(content=bytes(content))
    state = State.SCAN
    while state is not State.DONE:
        state = TRANSITIONS[state](scanner)

    logger.debug(f"content: {len(content):,} bytes -> {len(scanner.out):,} bytes of text")
    return bytes(scanner.out)
