"""
Error hierarchy for malformed script lines.

Every parse problem is a ``ScriptError`` bound to one line, so callers can
collect them per line or catch the single base type.  Empty choice
variants (``[|e]``) are valid and deliberately have no error class.
"""
from __future__ import annotations


class ScriptError(Exception):
    """Base class for all script parse errors."""

    message = "malformed line"

    def __init__(self, line_number: int, column: int | None = None, detail: str | None = None) -> None:
        self.line_number = line_number
        self.column = column
        self.detail = detail
        super().__init__(self.describe())

    def describe(self, source_name: str | None = None) -> str:
        """Return ``name:line:column: message`` for the author to fix."""
        location = f"{source_name}:{self.line_number}" if source_name else f"line {self.line_number}"
        if self.column is not None:
            location += f":{self.column}"
        text = self.message if not self.detail else f"{self.message}: {self.detail}"
        return f"{location}: {text}"

    def pointer(self, source_text: str) -> list[str]:
        """Return the offending source line and a caret under the column."""
        if self.column is None:
            return [source_text]
        return [source_text, " " * (self.column - 1) + "^"]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ScriptError):
            return NotImplemented
        return (type(self), self.line_number, self.column, self.detail) == (
            type(other),
            other.line_number,
            other.column,
            other.detail,
        )

    def __hash__(self) -> int:
        return hash((type(self), self.line_number, self.column, self.detail))


class UnterminatedOrthogram(ScriptError):
    """Raised when ``[`` is never closed on its line."""

    message = "unterminated orthogram, `]` expected"


class NestedBracket(ScriptError):
    """Raised when ``[`` appears inside an open orthogram."""

    message = "nested `[` inside an orthogram"


class UnmatchedBracket(ScriptError):
    """Raised when ``]`` appears without an opening ``[``."""

    message = "`]` without a matching `[`"


class MalformedTranslation(ScriptError):
    """Raised when a translation line is not exactly ``source -> target``."""

    message = "malformed translation"
