"""Domain entities for the WordPress installer."""

from dataclasses import asdict, dataclass, field
from typing import Any

from hostpanel.domain.exceptions import ValidationError
from hostpanel.domain.validators import ensure_domain, ensure_email, ensure_identifier

REQUIRED_FIELDS = (
    "domain",
    "db_name",
    "db_user",
    "db_password",
    "wp_admin_user",
    "wp_admin_password",
    "wp_admin_email",
)


@dataclass
class WordPressInstallConfig:
    domain: str
    db_name: str
    db_user: str
    db_password: str
    wp_admin_user: str
    wp_admin_password: str
    wp_admin_email: str
    site_title: str | None = None

    @property
    def title(self) -> str:
        return self.site_title or self.domain

    def validate(self) -> None:
        """Raise ValidationError on the first missing or malformed field."""
        for name in REQUIRED_FIELDS:
            if not getattr(self, name):
                raise ValidationError(name, f"Missing required field: {name}")

        ensure_email(self.wp_admin_email, "wp_admin_email")
        self.domain = ensure_domain(self.domain)
        ensure_identifier(self.db_name, "db_name", max_length=64)
        ensure_identifier(self.db_user, "db_user", max_length=32)


@dataclass
class WordPressInstallResult:
    success: bool
    site_url: str | None = None
    admin_url: str | None = None
    admin_user: str | None = None
    admin_password: str | None = None
    error: str | None = None
    errors: list[str] = field(default_factory=list)
    rolled_back: list[str] = field(default_factory=list)

    def to_dict(self, include_password: bool = True) -> dict[str, Any]:
        data = asdict(self)
        if not include_password:
            data.pop("admin_password", None)
        return data
