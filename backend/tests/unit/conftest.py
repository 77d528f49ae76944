"""Shared fakes for unit tests."""

import re

import pytest

from hostpanel.application.interfaces import CommandRunner
from hostpanel.domain.entities import CommandResult


class FakeCommandRunner(CommandRunner):
    """Records every command and answers from a list of (pattern, result) rules.

    The most recently added rule whose regex matches the command wins;
    unmatched commands succeed with empty output.
    """

    def __init__(self):
        self.commands: list[str] = []
        self.timeouts: list[float | None] = []
        self.closed = False
        self._rules: list[tuple[re.Pattern, int, str, str]] = []

    def on(self, pattern: str, stdout: str = "", exit_code: int = 0, stderr: str = "") -> "FakeCommandRunner":
        self._rules.insert(0, (re.compile(pattern), exit_code, stdout, stderr))
        return self

    async def run(self, command: str, timeout: float | None = None) -> CommandResult:
        self.commands.append(command)
        self.timeouts.append(timeout)
        for pattern, exit_code, stdout, stderr in self._rules:
            if pattern.search(command):
                return CommandResult(command=command, exit_code=exit_code, stdout=stdout, stderr=stderr)
        return CommandResult(command=command, exit_code=0)

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def runner() -> FakeCommandRunner:
    return FakeCommandRunner()
