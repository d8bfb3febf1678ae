"""
Orthogram grammar: split statement text into literal and orthogram spans.

Syntax inside a statement:
    [answer]          gap, the user types ``answer``
    [answer:hint]     gap with a hint shown next to the placeholder
    [v1|v2|...|vN]    choice, ``v1`` is correct, all variants are shown

Brackets never nest, so the scan is a single pass over two states.
"""
from __future__ import annotations

from collections.abc import Iterable
from enum import Enum, auto

from .errors import NestedBracket, UnmatchedBracket, UnterminatedOrthogram
from .models import Choice, Gap, Literal, Span

OPEN = "["
CLOSE = "]"
SEPARATOR = "|"
HINT_SEPARATOR = ":"
GAP_PLACEHOLDER = "_"
CHOICE_JOINER = "/"


class _State(Enum):
    OUTSIDE = auto()
    INSIDE = auto()


def tokenize(text: str, line_number: int = 0, column_offset: int = 0) -> tuple[Span, ...]:
    """
    Tokenize statement text into spans.

    ``column_offset`` is the number of source characters preceding ``text``
    on its line, so reported columns point into the raw source line.

    Raises UnterminatedOrthogram, NestedBracket or UnmatchedBracket.
    """
    spans: list[Span] = []
    state = _State.OUTSIDE
    buffer: list[str] = []
    variants: list[str] = []
    opened_at = 0

    for index, char in enumerate(text):
        column = column_offset + index + 1
        if state is _State.OUTSIDE:
            if char == OPEN:
                if buffer:
                    spans.append(Literal("".join(buffer)))
                    buffer = []
                variants = []
                opened_at = column
                state = _State.INSIDE
            elif char == CLOSE:
                raise UnmatchedBracket(line_number, column)
            else:
                buffer.append(char)
            continue

        if char == OPEN:
            raise NestedBracket(line_number, column)
        if char == SEPARATOR:
            variants.append("".join(buffer))
            buffer = []
        elif char == CLOSE:
            variants.append("".join(buffer))
            buffer = []
            spans.append(_orthogram(variants))
            state = _State.OUTSIDE
        else:
            buffer.append(char)

    if state is _State.INSIDE:
        raise UnterminatedOrthogram(line_number, opened_at)
    if buffer:
        spans.append(Literal("".join(buffer)))
    return tuple(spans)


def _orthogram(variants: list[str]) -> Gap | Choice:
    if len(variants) == 1:
        answer, _, hint = variants[0].partition(HINT_SEPARATOR)
        return Gap(answer, hint or None)
    return Choice(tuple(variants))


def mask(spans: Iterable[Span]) -> str:
    """Render the prompt: gaps become placeholders, choices list variants."""
    parts: list[str] = []
    for span in spans:
        if isinstance(span, Literal):
            parts.append(span.text)
        elif isinstance(span, Gap):
            parts.append(GAP_PLACEHOLDER if span.hint is None else f"{GAP_PLACEHOLDER}({span.hint})")
        else:
            parts.append(CHOICE_JOINER.join(span.variants))
    return "".join(parts)


def resolve(spans: Iterable[Span]) -> str:
    """Render the expected answer: every orthogram replaced by its correct text."""
    parts: list[str] = []
    for span in spans:
        if isinstance(span, Literal):
            parts.append(span.text)
        else:
            parts.append(span.answer)
    return "".join(parts)


def find_outside(text: str, token: str) -> list[int]:
    """
    Return start indices of ``token`` occurrences outside orthogram brackets.

    Stray brackets are tolerated here; ``tokenize`` reports them.
    """
    positions: list[int] = []
    depth = 0
    index = 0
    while index < len(text):
        char = text[index]
        if char == OPEN:
            depth += 1
        elif char == CLOSE:
            depth = max(0, depth - 1)
        elif depth == 0 and text.startswith(token, index):
            positions.append(index)
            index += len(token)
            continue
        index += 1
    return positions
