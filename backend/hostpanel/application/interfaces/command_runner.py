"""Abstract interface (port) for running shell commands on the managed host."""

from abc import ABC, abstractmethod

from hostpanel.domain.entities import CommandResult

TIMEOUT_EXIT_CODE = 124


class CommandRunner(ABC):
    """Port for command execution: local subprocess or remote SSH session."""

    @abstractmethod
    async def run(self, command: str, timeout: float | None = None) -> CommandResult:
        """Run a shell command and capture its output.

        A non-zero exit status is reported in the result, never raised.
        A command that exceeds ``timeout`` is killed and reported with
        exit code 124.
        """
        ...

    @abstractmethod
    async def close(self) -> None:
        """Release the underlying process or connection resources."""
        ...
