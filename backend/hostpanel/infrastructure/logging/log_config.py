"""Centralized logging configuration.

Per-category levels come from Settings, so the SQL echo, outbound HTTP,
SSH transport and the installer pipelines can each be turned up or down
without touching the rest of the panel.

Call ``setup_logging()`` once from the app lifespan or a CLI entry point.
"""

import logging
import sys

from hostpanel.config import Settings, get_settings

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Settings field -> logger names it controls
LOGGER_CATEGORIES: dict[str, tuple[str, ...]] = {
    "log_level_sql": ("sqlalchemy.engine", "sqlalchemy.pool", "aiosqlite", "aiomysql"),
    "log_level_http": ("httpx", "httpcore"),
    "log_level_uvicorn": ("uvicorn", "uvicorn.access", "uvicorn.error"),
    "log_level_installer": (
        "WordPressInstaller",
        "InstallationManager",
        "BackupRunner",
        "hostpanel.application.services.wordpress_installer",
        "hostpanel.application.services.installation_manager",
        "hostpanel.application.services.backup_runner",
    ),
    "log_level_ssh": ("paramiko", "hostpanel.infrastructure.runners"),
}


def parse_level(raw: str) -> int:
    """Level name to logging constant; unknown names fall back to INFO."""
    numeric = logging.getLevelName(raw.strip().upper()) if raw else None
    return numeric if isinstance(numeric, int) else logging.INFO


def category_levels(settings: Settings) -> dict[str, int]:
    levels: dict[str, int] = {}
    for field, names in LOGGER_CATEGORIES.items():
        level = parse_level(getattr(settings, field, "INFO"))
        for name in names:
            levels[name] = level
    return levels


def setup_logging(settings: Settings | None = None) -> None:
    """Apply root and per-category levels. Calling it twice adds no second handler."""
    settings = settings or get_settings()

    root = logging.getLogger()
    root.setLevel(parse_level(settings.log_level))
    # uvicorn installs its own handlers; the CLI and tests start with none.
    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
        root.addHandler(handler)

    for name, level in category_levels(settings).items():
        logging.getLogger(name).setLevel(level)

    logging.getLogger(__name__).debug(
        "Logging configured: root=%s sql=%s http=%s installer=%s ssh=%s",
        settings.log_level,
        settings.log_level_sql,
        settings.log_level_http,
        settings.log_level_installer,
        settings.log_level_ssh,
    )
