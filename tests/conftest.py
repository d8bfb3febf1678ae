from __future__ import annotations

import re
import shutil
import sys
from collections.abc import Callable, Iterator
from pathlib import Path
from uuid import uuid4

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


@pytest.fixture(name="tmp_path")
def scratch_dir(request: pytest.FixtureRequest) -> Iterator[Path]:
    """One scratch directory per test under ``.tmp_pytest/``, named after the test."""
    root = ROOT / ".tmp_pytest"
    name = re.sub(r"\W+", "_", request.node.name)[:40]
    path = root / f"{name}-{uuid4().hex[:8]}"
    path.mkdir(parents=True)
    yield path
    shutil.rmtree(path, ignore_errors=True)
    if root.is_dir() and not any(root.iterdir()):
        root.rmdir()


@pytest.fixture
def write_script(tmp_path: Path) -> Callable[..., Path]:
    """Write a quiz script into the scratch directory and return its path."""

    def _write(text: str, name: str = "quiz.tort") -> Path:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write
