import pytest

from tort.models import (
    Comment,
    Expected,
    ParsedLine,
    Prompt,
    PublicComment,
    RawLine,
    Statement,
    Task,
    Translation,
    Verdict,
)
from tort.parser import parse_script
from tort.session import QuitSession, QuizSession, SessionState, build_question


class FakeTerminal:
    """In-memory terminal that answers from a script and records everything."""

    def __init__(self, answers: list[str]) -> None:
        self.answers = list(answers)
        self.prompts: list[Prompt] = []
        self.displayed: list[str] = []
        self.verdicts: list[tuple[Verdict, Expected]] = []

    def display(self, text: str) -> None:
        self.displayed.append(text)

    def ask(self, prompt: Prompt) -> str:
        self.prompts.append(prompt)
        if not self.answers:
            raise QuitSession()
        return self.answers.pop(0)

    def tell(self, verdict: Verdict, expected: Expected) -> None:
        self.verdicts.append((verdict, expected))


def _lines(*texts: str) -> tuple[ParsedLine, ...]:
    parsed = parse_script(RawLine(number, text) for number, text in enumerate(texts, start=1))
    assert parsed.ok
    return parsed.lines


# ===========================================================
# build_question
# ===========================================================


class TestBuildQuestion:
    def test_translation_asks_source_and_expects_target(self):
        prompt, expected = build_question(Translation("hello", "salut"))
        assert prompt == Prompt("hello", Task.TRANSLATE)
        assert expected == Expected("salut")

    def test_statement_with_orthograms(self):
        (line,) = _lines("w[ee|e|ie]k #! seven days")
        prompt, expected = build_question(line.kind)
        assert prompt == Prompt("wee/e/iek", Task.FILL, "seven days")
        assert expected == Expected("week")

    def test_plain_statement_is_a_repeat_task(self):
        prompt, expected = build_question(Statement(()))
        assert prompt.task is Task.REPEAT
        assert prompt.display == expected.resolved == ""

    def test_non_gradable_kinds(self):
        assert build_question(Comment("x")) is None
        assert build_question(PublicComment("x")) is None


# ===========================================================
# QuizSession.run
# ===========================================================


class TestRun:
    def test_full_pass_in_order(self):
        lines = _lines(
            "# hidden",
            "#! Good luck!",
            "",
            "a p[ie]ce",
            "hello -> salut",
            "w[ee|e|ie]k",
        )
        terminal = FakeTerminal(["a piece", "Salut", " week "])
        state = QuizSession(terminal).run(lines)

        assert terminal.displayed == ["Good luck!"]
        assert [prompt.display for prompt in terminal.prompts] == ["a p_ce", "hello", "wee/e/iek"]
        assert [verdict for verdict, _ in terminal.verdicts] == [Verdict.RIGHT, Verdict.WRONG, Verdict.RIGHT]
        assert terminal.verdicts[1][1] == Expected("salut")
        assert (state.total, state.done, state.right, state.wrong) == (3, 3, 2, 1)
        assert state.position == len(lines)

    def test_each_line_is_asked_once_even_when_wrong(self):
        terminal = FakeTerminal(["nope", "nope"])
        state = QuizSession(terminal).run(_lines("a", "b"))
        assert len(terminal.prompts) == 2
        assert state.wrong == 2

    def test_limit_stops_after_n_graded_lines(self):
        lines = _lines("a", "#! between", "b", "c")
        terminal = FakeTerminal(["a", "b", "c"])
        state = QuizSession(terminal).run(lines, SessionState(total=3, limit=1))
        assert len(terminal.prompts) == 1
        assert terminal.displayed == []
        assert state.done == 1
        assert state.planned == 1

    def test_quit_keeps_partial_state(self):
        terminal = FakeTerminal(["a"])
        state = SessionState(total=3)
        with pytest.raises(QuitSession):
            QuizSession(terminal).run(_lines("a", "b", "c"), state)
        assert state.done == 1
        assert state.right == 1

    def test_engine_is_reusable(self):
        session = QuizSession(FakeTerminal(["a", "a"]))
        first = session.run(_lines("a"))
        second = session.run(_lines("a"))
        assert first is not second
        assert first.done == second.done == 1

    def test_step_returns_verdict(self):
        (line,) = _lines("hello -> salut")
        state = SessionState(total=1)
        assert QuizSession(FakeTerminal(["salut"])).step(line, state) is Verdict.RIGHT


class TestSessionState:
    def test_percentages(self):
        state = SessionState(total=4)
        state.record(Verdict.RIGHT)
        state.record(Verdict.RIGHT)
        state.record(Verdict.RIGHT)
        state.record(Verdict.WRONG)
        assert state.percent(state.right) == 75.0
        assert state.percent(state.wrong) == 25.0

    def test_percent_without_answers(self):
        assert SessionState().percent(0) == 0.0

    def test_planned_without_limit(self):
        assert SessionState(total=5).planned == 5
        assert SessionState(total=5, limit=9).planned == 5
        assert not SessionState(total=5).finished
