"""Shared fixtures."""

from datetime import date

import pytest

from sangerrename.config import RenameConfig
from sangerrename.exceptions import WorkflowCancelled
from sangerrename.prompter import Prompter


class ScriptedPrompter(Prompter):
    """Prompter that replays canned answers and records what it was asked.

    An answer of ``None`` means "press enter" and returns the default. ``CANCEL``
    behaves like Ctrl-C. Running out of answers also cancels, like end of input.
    """

    CANCEL = object()

    def __init__(self, answers: list) -> None:
        self.answers = list(answers)
        self.asked: list[str] = []
        self.errors: list[str] = []
        self.shown: list = []

    def _next(self, prompt: str):
        self.asked.append(prompt)
        if not self.answers:
            raise WorkflowCancelled("No more scripted answers")
        answer = self.answers.pop(0)
        if answer is self.CANCEL:
            raise WorkflowCancelled("Scripted cancel")
        return answer

    def show(self, renderable) -> None:
        self.shown.append(renderable)

    def error(self, message: str) -> None:
        self.errors.append(message)

    def text(self, prompt: str, default: str = "") -> str:
        answer = self._next(prompt)
        return default if answer is None else answer

    def choice(self, prompt: str, choices: list[str], default: str | None = None) -> str:
        answer = self._next(prompt)
        if answer is None:
            assert default is not None, f"No default for choice prompt '{prompt}'"
            return default
        assert answer in choices, f"'{answer}' is not one of {choices}"
        return answer

    def confirm(self, prompt: str, default: bool = True) -> bool:
        answer = self._next(prompt)
        return default if answer is None else answer


@pytest.fixture
def scripted():
    """Factory for a ScriptedPrompter with the given answers."""
    return ScriptedPrompter


@pytest.fixture
def config() -> RenameConfig:
    """Workflow settings pinned to a fixed date."""
    return RenameConfig(today=date(2025, 6, 1))


@pytest.fixture
def make_files(tmp_path):
    """Create empty files with the given names and return their paths."""

    def _make(*names: str):
        paths = []
        for name in names:
            path = tmp_path / name
            path.write_bytes(b"ABIF" + name.encode())
            paths.append(path)
        return paths

    return _make
