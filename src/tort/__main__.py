"""``python -m tort quiz.tort`` behaves like the ``tort`` script."""

from __future__ import annotations

import sys

from .main import run


def main() -> None:
    raise SystemExit(run(sys.argv[1:]))


if __name__ == "__main__":  # pragma: no cover
    main()
