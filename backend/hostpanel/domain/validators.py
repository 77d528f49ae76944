"""Input rules shared by the hosting entities and the installer.

Each ``ensure_*`` function raises :class:`ValidationError` naming the field.
"""

import re

from hostpanel.domain.exceptions import ValidationError

# The first label needs at least three characters; further labels may be shorter.
_DOMAIN_RE = re.compile(
    r"^[a-zA-Z0-9][a-zA-Z0-9-]{1,61}[a-zA-Z0-9](\.[a-zA-Z0-9][a-zA-Z0-9-]{0,61}[a-zA-Z0-9])*\.[a-zA-Z]{2,}$"
)
_EMAIL_RE = re.compile(r"^[A-Za-z0-9.!#$%&'*+/=?^_`{|}~-]+@[A-Za-z0-9-]+(\.[A-Za-z0-9-]+)*\.[A-Za-z]{2,}$")
_IDENTIFIER_RE = re.compile(r"^[A-Za-z0-9_]+$")
_UNIT_RE = re.compile(r"^[A-Za-z0-9@._-]+$")


def is_valid_domain(name: str) -> bool:
    return bool(_DOMAIN_RE.match(name or ""))


def is_valid_email(address: str) -> bool:
    return bool(_EMAIL_RE.match(address or ""))


def ensure_domain(name: str, field: str = "domain") -> str:
    if not is_valid_domain(name):
        raise ValidationError(field, "Invalid domain format")
    return name.lower()


def ensure_email(address: str, field: str = "email") -> str:
    if not is_valid_email(address):
        raise ValidationError(field, "Invalid email address")
    return address


def ensure_identifier(value: str, field: str, max_length: int = 64) -> str:
    """MySQL-safe identifier: word characters only, bounded length."""
    if not value or len(value) > max_length or not _IDENTIFIER_RE.match(value):
        raise ValidationError(
            field,
            f"{field} must be 1-{max_length} characters of letters, digits or underscore",
        )
    return value


def ensure_unit_name(name: str) -> str:
    """systemd unit names that can be passed to systemctl unquoted."""
    if not name or not _UNIT_RE.match(name):
        raise ValidationError("service", f"Invalid service name: {name!r}")
    return name


def ensure_safe_directory(path: str, field: str = "directory") -> str:
    if not path.startswith("/"):
        raise ValidationError(field, "Directory must be an absolute path")
    if ".." in path.split("/"):
        raise ValidationError(field, "Directory must not contain '..'")
    return path


# ── Cron expressions ─────────────────────────────────────────────────

CRON_MACROS = frozenset({"@hourly", "@daily", "@weekly", "@monthly", "@yearly", "@annually", "@reboot"})

# (min, max) per field: minute hour day-of-month month day-of-week
_CRON_RANGES = ((0, 59), (0, 23), (1, 31), (1, 12), (0, 7))
_CRON_FIELD_NAMES = ("minute", "hour", "day of month", "month", "day of week")


def _check_cron_part(part: str, low: int, high: int) -> bool:
    base, _, step = part.partition("/")
    if step and (not step.isdigit() or int(step) == 0):
        return False
    if base == "*":
        return True
    start, dash, end = base.partition("-")
    if not start.isdigit() or (dash and not end.isdigit()):
        return False
    first = int(start)
    last = int(end) if dash else first
    if step and not dash:
        # "5/15" is accepted by cronie as "5-max/15"
        last = high
    return low <= first <= last <= high


def ensure_cron_schedule(schedule: str) -> str:
    """Validate a standard 5-field cron expression or a supported @macro."""
    schedule = " ".join(schedule.split())
    if schedule in CRON_MACROS:
        return schedule

    fields = schedule.split(" ")
    if len(fields) != 5:
        raise ValidationError("schedule", "Cron schedule must have exactly 5 fields")

    for value, (low, high), name in zip(fields, _CRON_RANGES, _CRON_FIELD_NAMES):
        parts = value.split(",")
        if not all(part and _check_cron_part(part, low, high) for part in parts):
            raise ValidationError("schedule", f"Invalid {name} field: {value!r}")
    return schedule
