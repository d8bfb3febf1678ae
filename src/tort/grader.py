"""Answer grading: trimmed, case-sensitive, exact comparison."""

from __future__ import annotations

from difflib import SequenceMatcher

from .models import Expected, Verdict


def normalize(text: str) -> str:
    """Trim surrounding whitespace; case and inner spacing are significant."""
    return text.strip()


def grade(expected: Expected, raw_answer: str) -> Verdict:
    """Return RIGHT only when the trimmed answer equals the trimmed expectation."""
    if normalize(raw_answer) == normalize(expected.resolved):
        return Verdict.RIGHT
    return Verdict.WRONG


def mismatch(expected: Expected, raw_answer: str) -> str:
    """
    Mark where an answer departs from the expected text.

    Extra characters typed by the user are shown as ``[-...-]``, missing
    ones as ``{+...+}``; matching stretches are copied unchanged.
    """
    answer = normalize(raw_answer)
    target = normalize(expected.resolved)
    parts: list[str] = []
    matcher = SequenceMatcher(a=answer, b=target, autojunk=False)
    for tag, a_start, a_end, b_start, b_end in matcher.get_opcodes():
        if tag == "equal":
            parts.append(answer[a_start:a_end])
            continue
        if tag in ("replace", "delete"):
            parts.append(f"[-{answer[a_start:a_end]}-]")
        if tag in ("replace", "insert"):
            parts.append(f"{{+{target[b_start:b_end]}+}}")
    return "".join(parts)
