"""Read quiz scripts from disk into numbered raw lines."""

from __future__ import annotations

from pathlib import Path

from .models import RawLine

SHEBANG_PREFIX = "#!/"


def split_lines(text: str) -> list[RawLine]:
    """
    Number the lines of ``text`` from 1.

    A shebang on the first line is dropped so executable scripts parse the
    same as plain ones; later line numbers are unchanged.
    """
    raw_lines = [RawLine(number, line) for number, line in enumerate(text.splitlines(), start=1)]
    if raw_lines and raw_lines[0].text.startswith(SHEBANG_PREFIX):
        return raw_lines[1:]
    return raw_lines


def read_script(path: Path | str) -> list[RawLine]:
    """Read one UTF-8 script file; OSError and UnicodeDecodeError propagate to the caller."""
    return split_lines(Path(path).read_text(encoding="utf-8-sig"))
