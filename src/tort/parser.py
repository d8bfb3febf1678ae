"""
Line parser for quiz scripts.

Classification order, first match wins:
    blank           empty or whitespace-only
    comment         ``#`` not followed by ``!``
    public comment  ``#!``
    translation     exactly one ``->`` outside orthogram brackets
    statement       anything else, tokenized into spans

Statements and translations may end with a note, ``text #! note``, or a
private comment, ``text # comment``, which is dropped.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from .errors import MalformedTranslation, ScriptError
from .grammar import CLOSE, OPEN, find_outside, tokenize
from .models import Blank, Comment, LineKind, ParsedLine, PublicComment, RawLine, Statement, Translation

logger = logging.getLogger(__name__)

COMMENT_INDICATOR = "#"
PUBLIC_COMMENT_INDICATOR = "#!"
ARROW = "->"


def is_empty(text: str) -> bool:
    return not text.strip()


def is_public_comment(text: str) -> bool:
    return text.lstrip().startswith(PUBLIC_COMMENT_INDICATOR)


def is_comment(text: str) -> bool:
    return text.lstrip().startswith(COMMENT_INDICATOR) and not is_public_comment(text)


def classify(raw: RawLine) -> LineKind:
    """
    Classify one raw line.

    Raises a ScriptError subclass for malformed lines.
    """
    text = raw.text.rstrip("\r\n")
    if is_empty(text):
        return Blank()

    stripped = text.lstrip()
    if is_comment(text):
        return Comment(stripped[len(COMMENT_INDICATOR):].strip())
    if is_public_comment(text):
        return PublicComment(stripped[len(PUBLIC_COMMENT_INDICATOR):].lstrip())

    leading = len(text) - len(stripped)
    body, note = _split_note(stripped)

    arrows = find_outside(body, ARROW)
    if len(arrows) > 1:
        raise MalformedTranslation(
            raw.number, leading + arrows[1] + 1, f"expected one `{ARROW}`, found {len(arrows)}"
        )
    if arrows:
        return _translation(raw.number, body, arrows[0], leading, note)

    return Statement(tokenize(body.rstrip(), raw.number, leading), note)


def _split_note(body: str) -> tuple[str, str | None]:
    markers = find_outside(body, COMMENT_INDICATOR)
    if not markers:
        return body, None
    start = markers[0]
    if not body.startswith(PUBLIC_COMMENT_INDICATOR, start):
        return body[:start], None
    note = body[start + len(PUBLIC_COMMENT_INDICATOR):].strip()
    return body[:start], note or None


def _translation(number: int, body: str, arrow: int, leading: int, note: str | None) -> Translation:
    source = body[:arrow].strip()
    target = body[arrow + len(ARROW):].strip()
    if not source or not target:
        side = "source" if not source else "target"
        raise MalformedTranslation(number, leading + arrow + 1, f"empty {side} text")
    for index, char in enumerate(body):
        if char in (OPEN, CLOSE):
            raise MalformedTranslation(number, leading + index + 1, "orthograms are not allowed in translations")
    return Translation(source, target, note)


def parse_line(text: str, number: int = 1) -> ParsedLine:
    """Parse one line of text; raises ScriptError when it is malformed."""
    return ParsedLine(number=number, kind=classify(RawLine(number, text)))


@dataclass(frozen=True)
class ScriptParse:
    """Outcome of parsing a whole script: good lines plus one error per bad line."""

    lines: tuple[ParsedLine, ...]
    errors: tuple[ScriptError, ...]

    @property
    def ok(self) -> bool:
        return not self.errors

    @property
    def gradable_count(self) -> int:
        return sum(1 for line in self.lines if line.is_gradable)


def parse_script(raw_lines: Iterable[RawLine]) -> ScriptParse:
    """
    Parse every line, keeping going past malformed ones.

    The caller decides whether errors abort the run or the bad lines are
    simply left out.
    """
    lines: list[ParsedLine] = []
    errors: list[ScriptError] = []
    for raw in raw_lines:
        try:
            lines.append(ParsedLine(number=raw.number, kind=classify(raw)))
        except ScriptError as exc:
            logger.debug("Malformed script %s", exc.describe())
            errors.append(exc)
    logger.debug("Parsed %d lines, %d malformed", len(lines), len(errors))
    return ScriptParse(lines=tuple(lines), errors=tuple(errors))
