"""
Session engine: walk parsed lines in order and quiz the user once per line.

The engine never touches the console; everything user-facing goes through
a ``Terminal``.  Progress lives in an explicit ``SessionState`` so a run can
be inspected after it ends, including after the user quits early.
"""
from __future__ import annotations

import logging
import time
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Protocol

from .grader import grade
from .grammar import mask, resolve
from .models import (
    Expected,
    LineKind,
    ParsedLine,
    Prompt,
    PublicComment,
    Statement,
    Task,
    Translation,
    Verdict,
)

logger = logging.getLogger(__name__)


class QuitSession(Exception):
    """Signal that the user wants to stop the quiz now."""


class Terminal(Protocol):
    """Console capability used by the engine."""

    def display(self, text: str) -> None: ...

    def ask(self, prompt: Prompt) -> str: ...

    def tell(self, verdict: Verdict, expected: Expected) -> None: ...


@dataclass
class SessionState:
    """Running totals for one pass over a script."""

    total: int = 0
    limit: int = 0
    done: int = 0
    right: int = 0
    wrong: int = 0
    position: int = 0
    started_at: float = field(default_factory=time.monotonic)

    @property
    def planned(self) -> int:
        """Number of lines this run intends to grade."""
        if self.limit and self.limit < self.total:
            return self.limit
        return self.total

    @property
    def finished(self) -> bool:
        return bool(self.limit) and self.done >= self.limit

    @property
    def elapsed(self) -> float:
        return time.monotonic() - self.started_at

    def percent(self, count: int) -> float:
        return 0.0 if self.done == 0 else 100.0 * count / self.done

    def record(self, verdict: Verdict) -> None:
        self.done += 1
        if verdict is Verdict.RIGHT:
            self.right += 1
        else:
            self.wrong += 1


def build_question(kind: LineKind) -> tuple[Prompt, Expected] | None:
    """Return the prompt and expected answer for a gradable line kind."""
    if isinstance(kind, Translation):
        return Prompt(kind.source, Task.TRANSLATE, kind.note), Expected(kind.target)
    if isinstance(kind, Statement):
        task = Task.FILL if kind.has_orthograms else Task.REPEAT
        return Prompt(mask(kind.spans), task, kind.note), Expected(resolve(kind.spans))
    return None


class QuizSession:
    """Drives one quiz over parsed lines through a terminal."""

    def __init__(self, terminal: Terminal) -> None:
        self.terminal = terminal

    def run(self, lines: Iterable[ParsedLine], state: SessionState | None = None) -> SessionState:
        """
        Ask every gradable line once, in the given order.

        ``QuitSession`` raised by the terminal propagates; ``state`` keeps
        the counts reached so far.
        """
        if state is None:
            lines = list(lines)
            state = SessionState(total=sum(1 for line in lines if line.is_gradable))
        for line in lines:
            if state.finished:
                break
            self.step(line, state)
            state.position += 1
        return state

    def step(self, line: ParsedLine, state: SessionState) -> Verdict | None:
        """Handle one line; returns the verdict for gradable lines."""
        if isinstance(line.kind, PublicComment):
            self.terminal.display(line.kind.text)
            return None

        question = build_question(line.kind)
        if question is None:
            return None

        prompt, expected = question
        answer = self.terminal.ask(prompt)
        verdict = grade(expected, answer)
        state.record(verdict)
        logger.debug("Line %d graded %s", line.number, verdict.value)
        self.terminal.tell(verdict, expected)
        return verdict
