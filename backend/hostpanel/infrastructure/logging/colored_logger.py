"""Colored pipeline logger for multi-step server work.

The WordPress installer, the server setup run and the backup runner log
through it so each stage of a long job stands out in the terminal:

    🗄️ [DATABASE] Creating WordPress database...
       ├─ Database wp_blog ready for wp_blog
    🗄️ [DATABASE] ✓ Creating WordPress database... (0.41s)

Colors are dropped when stderr is not a terminal (CLI output piped to a
file, the systemd journal), so log files stay free of escape codes.
"""

import logging
import os
import sys
import time
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, NamedTuple

RESET = "\033[0m"
BOLD = "\033[1m"
DIM = "\033[2m"
RED = "\033[91m"
GREEN = "\033[92m"
YELLOW = "\033[93m"
BLUE = "\033[94m"
MAGENTA = "\033[95m"
CYAN = "\033[96m"
WHITE = "\033[97m"
GRAY = "\033[90m"


class Stage(NamedTuple):
    label: str
    color: str
    icon: str


class PipelineStage:
    """Stages of the panel's long-running jobs."""

    DATABASE = Stage("DATABASE", GREEN, "🗄️")
    DOWNLOAD = Stage("DOWNLOAD", YELLOW, "⬇️")
    CONFIGURE = Stage("CONFIGURE", BLUE, "📝")
    INSTALL = Stage("INSTALL", BLUE, "🧩")
    WEB_SERVER = Stage("WEB_SERVER", MAGENTA, "🌐")
    PERMISSIONS = Stage("PERMISSIONS", CYAN, "🔒")
    SETUP = Stage("SETUP", CYAN, "🛠️")
    BACKUP = Stage("BACKUP", GREEN, "💾")
    ROLLBACK = Stage("ROLLBACK", RED, "↩️")
    COMPLETE = Stage("COMPLETE", GREEN, "✅")


def _colors_enabled() -> bool:
    if os.environ.get("NO_COLOR"):
        return False
    return hasattr(sys.stderr, "isatty") and sys.stderr.isatty()


def _extras(fields: dict[str, Any]) -> str:
    return " | ".join(f"{k}={v}" for k, v in fields.items())


class PipelineLogger:
    """Stage-tagged logger for one pipeline component.

        log = PipelineLogger("BackupRunner")
        with log.timed_step(PipelineStage.BACKUP, "Full backup"):
            ...
        log.stats(size_bytes=1048576, seconds=3.2)
    """

    def __init__(self, component_name: str, color: bool | None = None):
        self._logger = logging.getLogger(component_name)
        self._color = _colors_enabled() if color is None else color

    def _paint(self, text: str, *codes: str) -> str:
        if not self._color or not codes:
            return text
        return "".join(codes) + text + RESET

    def _tag(self, stage: Stage, bold: bool = False) -> str:
        codes = (stage.color, BOLD) if bold else (stage.color,)
        return self._paint(f"{stage.icon} [{stage.label}]", *codes)

    def _with_extras(self, line: str, fields: dict[str, Any]) -> str:
        if not fields:
            return line
        return f"{line} {self._paint(f'({_extras(fields)})', GRAY)}"

    def step_start(self, stage: Stage, message: str, **fields: Any) -> None:
        line = f"{self._tag(stage, bold=True)} {self._paint(message, stage.color)}"
        self._logger.info(self._with_extras(line, fields))

    def step_complete(self, stage: Stage, message: str, **fields: Any) -> None:
        line = f"{self._tag(stage)} {self._paint('✓ ' + message, GREEN)}"
        self._logger.info(self._with_extras(line, fields))

    def step_error(self, stage: Stage, message: str, error: BaseException | None = None) -> None:
        line = f"{self._paint(f'❌ [{stage.label}]', RED, BOLD)} {self._paint(message, RED)}"
        if error is not None:
            line += " " + self._paint(f"→ {type(error).__name__}: {error}", DIM)
        self._logger.error(line)

    def detail(self, message: str, **fields: Any) -> None:
        self._logger.info(self._with_extras("   " + self._paint(f"├─ {message}", GRAY), fields))

    def separator(self, title: str = "") -> None:
        rule = f"{'─' * 10} {title} {'─' * max(0, 50 - len(title))}" if title else "─" * 60
        self._logger.info(self._paint(rule, GRAY))

    def stats(self, **fields: Any) -> None:
        self._logger.info("   " + self._paint(f"📈 {_extras(fields)}", GRAY))

    @contextmanager
    def timed_step(self, stage: Stage, message: str, **fields: Any) -> Iterator[None]:
        """Log start and end of a block with the elapsed time; errors are re-raised."""
        self.step_start(stage, message, **fields)
        start = time.perf_counter()
        try:
            yield
        except Exception as exc:
            self.step_error(stage, f"{message} (failed after {time.perf_counter() - start:.2f}s)", error=exc)
            raise
        self.step_complete(stage, f"{message} ({time.perf_counter() - start:.2f}s)")
