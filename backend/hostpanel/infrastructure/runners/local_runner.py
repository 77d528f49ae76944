"""Command runner for the machine the panel itself runs on."""

import asyncio
import logging
import os
import signal
import time

from hostpanel.application.interfaces.command_runner import TIMEOUT_EXIT_CODE, CommandRunner
from hostpanel.domain.entities import CommandResult

logger = logging.getLogger(__name__)


class LocalCommandRunner(CommandRunner):
    """Runs commands through ``/bin/sh`` with asyncio subprocesses."""

    def __init__(self, default_timeout: float = 300) -> None:
        self._default_timeout = default_timeout

    async def run(self, command: str, timeout: float | None = None) -> CommandResult:
        timeout = timeout or self._default_timeout
        start = time.monotonic()
        logger.debug("local $ %s", command)

        proc = await asyncio.create_subprocess_shell(
            command,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            start_new_session=True,
        )
        try:
            stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=timeout)
        except asyncio.TimeoutError:
            # Children of compound commands hold the pipes; kill the whole group.
            try:
                os.killpg(proc.pid, signal.SIGKILL)
            except ProcessLookupError:
                pass
            await proc.wait()
            logger.warning("Command timed out after %ss: %s", timeout, command)
            return CommandResult(
                command=command,
                exit_code=TIMEOUT_EXIT_CODE,
                stderr=f"timed out after {timeout:g}s",
                duration=time.monotonic() - start,
            )

        return CommandResult(
            command=command,
            exit_code=proc.returncode if proc.returncode is not None else -1,
            stdout=stdout.decode("utf-8", errors="replace"),
            stderr=stderr.decode("utf-8", errors="replace"),
            duration=time.monotonic() - start,
        )

    async def close(self) -> None:
        return None
