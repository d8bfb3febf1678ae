"""Core data model for quiz scripts: lines, spans, prompts and verdicts."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class RawLine:
    """One line of script source with its 1-based line number."""

    number: int
    text: str


# ---- spans inside a statement ----


@dataclass(frozen=True)
class Literal:
    """Plain text, shown and expected unchanged."""

    text: str


@dataclass(frozen=True)
class Gap:
    """Hidden text the user must type: ``[answer]`` or ``[answer:hint]``."""

    answer: str
    hint: str | None = None


@dataclass(frozen=True)
class Choice:
    """Offered variants ``[right|wrong|...]``; the first one is correct."""

    variants: tuple[str, ...]

    def __post_init__(self) -> None:
        if not self.variants:
            raise ValueError("Choice needs at least one variant.")

    @property
    def answer(self) -> str:
        return self.variants[0]


Span = Literal | Gap | Choice


# ---- line kinds ----


@dataclass(frozen=True)
class Blank:
    """Empty or whitespace-only line."""


@dataclass(frozen=True)
class Comment:
    """``# ...`` line, never shown."""

    text: str


@dataclass(frozen=True)
class PublicComment:
    """``#! ...`` line, shown to the user."""

    text: str


@dataclass(frozen=True)
class Translation:
    """``source -> target`` line."""

    source: str
    target: str
    note: str | None = None


@dataclass(frozen=True)
class Statement:
    """Text with zero or more orthograms."""

    spans: tuple[Span, ...]
    note: str | None = None

    @property
    def has_orthograms(self) -> bool:
        return any(not isinstance(span, Literal) for span in self.spans)


LineKind = Blank | Comment | PublicComment | Translation | Statement


@dataclass(frozen=True)
class ParsedLine:
    """Classified script line, keeps its source line number."""

    number: int
    kind: LineKind

    @property
    def is_gradable(self) -> bool:
        return isinstance(self.kind, (Statement, Translation))


# ---- session values ----


class Task(Enum):
    """What the user is asked to do with a prompt."""

    REPEAT = "Repeat"
    FILL = "Fill gaps"
    TRANSLATE = "Translate"


@dataclass(frozen=True)
class Prompt:
    """Text presented to the user for one gradable line."""

    display: str
    task: Task = Task.FILL
    note: str | None = None


@dataclass(frozen=True)
class Expected:
    """Resolved answer for one gradable line."""

    resolved: str


class Verdict(Enum):
    """Outcome of grading one answer."""

    RIGHT = "right"
    WRONG = "wrong"

    def __bool__(self) -> bool:
        return self is Verdict.RIGHT
