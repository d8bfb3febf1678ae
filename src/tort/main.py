"""CLI entrypoint for orthography quiz scripts."""

from __future__ import annotations

import argparse
import logging
import random
import shlex
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path

from . import __version__
from .errors import ScriptError
from .grader import mismatch
from .models import Expected, ParsedLine, Prompt, PublicComment, RawLine, Verdict
from .parser import parse_script
from .session import QuitSession, QuizSession, SessionState, Terminal
from .source import read_script

InputFn = Callable[[str], str]
PrintFn = Callable[[str], None]
QUIT_COMMANDS = {":quit", ":exit", ":q"}
ARGS_DIRECTIVE = "ARGS:"
LABEL_WIDTH = 12
RULE_WIDTH = 80
LOG_FORMAT = "%(asctime)s  %(name)s  %(levelname)s  %(message)s"

logger = logging.getLogger(__name__)


class ConsoleTerminal:
    """Terminal backed by plain input/print callables."""

    def __init__(self, input_fn: InputFn = input, print_fn: PrintFn = print) -> None:
        self._input = input_fn
        self._print = print_fn
        self._last_answer = ""

    def display(self, text: str) -> None:
        self._print(f" {text}")

    def ask(self, prompt: Prompt) -> str:
        question = f"{prompt.task.value + ':':>{LABEL_WIDTH}}  {prompt.display}"
        if prompt.note:
            question += f"   ({prompt.note})"
        self._print(question)
        try:
            answer = self._input(f"{'Your answer:':>{LABEL_WIDTH}}  ")
        except (EOFError, KeyboardInterrupt):
            raise QuitSession() from None
        if answer.strip().lower() in QUIT_COMMANDS:
            raise QuitSession()
        self._last_answer = answer
        return answer

    def tell(self, verdict: Verdict, expected: Expected) -> None:
        if verdict is Verdict.RIGHT:
            self._print(f"{'--->':>{LABEL_WIDTH}}  Right")
        else:
            self._print(f"{'--->':>{LABEL_WIDTH}}  Wrong")
            self._print(f"{'Right:':>{LABEL_WIDTH}}  {expected.resolved}")
            self._print(f"{'Diff:':>{LABEL_WIDTH}}  {mismatch(expected, self._last_answer)}")
        self._print("_" * RULE_WIDTH)


@dataclass(frozen=True)
class RunOptions:
    """Quiz options after script directives are applied."""

    shuffle: bool
    number_of_tests: int


def _non_negative(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid number: {text!r}") from None
    if value < 0:
        raise argparse.ArgumentTypeError("must be 0 or greater")
    return value


def _add_quiz_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("-r", "--random", action="store_true", help="shuffle all quiz lines")
    parser.add_argument(
        "-n",
        "--number-of-tests",
        type=_non_negative,
        default=0,
        help="how many lines to ask (0 means every line)",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="tort", description="Test your orthography knowledge")
    parser.add_argument("files", nargs="+", type=Path, help="quiz scripts to run, in order")
    parser.add_argument("-c", "--check", action="store_true", help="only check scripts for errors")
    parser.add_argument("--strict", action="store_true", help="do not start a quiz if any line is malformed")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    _add_quiz_options(parser)
    return parser


def _directive_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=ARGS_DIRECTIVE, add_help=False, exit_on_error=False)
    _add_quiz_options(parser)
    return parser


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING, format=LOG_FORMAT)


def run(argv: Sequence[str] | None = None, input_fn: InputFn = input, print_fn: PrintFn = print) -> int:
    """Run the CLI application."""
    args = _build_parser().parse_args(argv)
    _configure_logging(args.verbose)

    lines: list[ParsedLine] = []
    problems = 0
    for path in args.files:
        try:
            raw_lines = read_script(path)
        except OSError as exc:
            print_fn(f"Cannot read {path}: {exc.strerror or exc}")
            return 2
        except UnicodeDecodeError as exc:
            print_fn(f"Cannot read {path}: not valid UTF-8 (byte {exc.start})")
            return 2
        parsed = parse_script(raw_lines)
        _report_errors(str(path), raw_lines, parsed.errors, print_fn)
        problems += len(parsed.errors)
        logger.info("Loaded %s: %d lines, %d malformed", path, len(parsed.lines), len(parsed.errors))
        lines.extend(parsed.lines)

    if args.check:
        if problems:
            print_fn(f"{problems} malformed line(s) found.")
            return 1
        print_fn(f"{len(args.files)} script(s) OK.")
        return 0
    if problems and args.strict:
        print_fn("Not starting the quiz: fix the lines above or drop --strict.")
        return 1

    lines, options = apply_directives(lines, RunOptions(args.random, args.number_of_tests), print_fn)
    planned = plan_lines(lines, options.shuffle)
    state = SessionState(total=sum(1 for line in planned if line.is_gradable), limit=options.number_of_tests)
    return play(planned, state, ConsoleTerminal(input_fn, print_fn), print_fn)


def play(lines: list[ParsedLine], state: SessionState, terminal: Terminal, print_fn: PrintFn) -> int:
    """Run the quiz between a headnote and a summary footnote."""
    print_fn("=" * RULE_WIDTH)
    print_fn(f"Starting {state.planned} tests from {state.total}")
    print_fn("Type :q to stop early.")
    print_fn("=" * RULE_WIDTH)
    try:
        QuizSession(terminal).run(lines, state)
    except QuitSession:
        print_fn("\nQuiz stopped early.")
    _print_summary(state, print_fn)
    return 0


def _report_errors(
    source_name: str, raw_lines: list[RawLine], errors: Sequence[ScriptError], print_fn: PrintFn
) -> None:
    texts = {raw.number: raw.text for raw in raw_lines}
    for error in errors:
        print_fn(error.describe(source_name))
        for row in error.pointer(texts.get(error.line_number, "")):
            print_fn(f"    {row}")


def apply_directives(
    lines: list[ParsedLine], options: RunOptions, print_fn: PrintFn = print
) -> tuple[list[ParsedLine], RunOptions]:
    """
    Honour ``#! ARGS: ...`` public comments in the leading header block.

    Directive lines are consumed and never shown.  Only quiz options
    (``--random``, ``--number-of-tests``) are accepted there.
    """
    kept: list[ParsedLine] = []
    in_header = True
    for line in lines:
        if line.is_gradable:
            in_header = False
        kind = line.kind
        if in_header and isinstance(kind, PublicComment) and kind.text.startswith(ARGS_DIRECTIVE):
            options = _parse_directive(line.number, kind.text[len(ARGS_DIRECTIVE):], options, print_fn)
            continue
        kept.append(line)
    return kept, options


def _parse_directive(number: int, text: str, options: RunOptions, print_fn: PrintFn) -> RunOptions:
    try:
        parsed, unknown = _directive_parser().parse_known_args(shlex.split(text))
    except (argparse.ArgumentError, ValueError) as exc:
        print_fn(f"line {number}: ignoring {ARGS_DIRECTIVE} directive: {exc}")
        return options
    if unknown:
        logger.warning("Line %d: unsupported %s options %s", number, ARGS_DIRECTIVE, " ".join(unknown))
    return RunOptions(
        shuffle=options.shuffle or parsed.random,
        number_of_tests=parsed.number_of_tests or options.number_of_tests,
    )


def plan_lines(lines: list[ParsedLine], shuffle: bool, rng: random.Random | None = None) -> list[ParsedLine]:
    """
    Return the lines to quiz, in order.

    When shuffling, the leading header block stays first, the gradable lines
    are shuffled and later public comments are dropped since their position
    no longer means anything.
    """
    header_end = next((index for index, line in enumerate(lines) if line.is_gradable), len(lines))
    header, body = lines[:header_end], lines[header_end:]
    if not shuffle:
        return header + body
    quiz = [line for line in body if line.is_gradable]
    (rng or random.Random()).shuffle(quiz)
    return header + quiz


def _print_summary(state: SessionState, print_fn: PrintFn) -> None:
    print_fn("=" * RULE_WIDTH)
    print_fn(f"Done {state.done} tests from {state.total}")
    print_fn(f"Elapsed time: {state.elapsed:.1f}s")
    print_fn(f"Right answers: {state.right} ({state.percent(state.right):.1f}%)")
    print_fn(f"Wrong answers: {state.wrong} ({state.percent(state.wrong):.1f}%)")
    print_fn("=" * RULE_WIDTH)


def main_entry() -> None:
    """Console script entrypoint."""
    raise SystemExit(run())


if __name__ == "__main__":  # pragma: no cover
    main_entry()
