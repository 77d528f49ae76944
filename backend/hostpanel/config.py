from functools import lru_cache
from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings

_BACKEND_DIR = Path(__file__).resolve().parents[1]
_ENV_FILES = (
    _BACKEND_DIR / ".env",
    ".env",
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    app_title: str = "HostPanel API"
    app_version: str = "0.1.0"
    app_env: str = "development"
    database_url: str = "sqlite:///data/hostpanel.db"
    cors_origins: list[str] = ["http://localhost:5173"]

    # Host layout
    web_root: str = "/var/www/html"
    nginx_sites_available: str = "/etc/nginx/sites-available"
    nginx_sites_enabled: str = "/etc/nginx/sites-enabled"
    php_fpm_socket: str = "/var/run/php/php8.1-fpm.sock"
    backup_dir: str = "/var/backups/hostpanel"
    installer_log_file: str = "/var/log/hostpanel/wordpress-installer.log"
    preferences_file: str = "data/preferences.json"

    # WordPress
    wordpress_download_url: str = "https://wordpress.org/latest.tar.gz"

    # MySQL administration (root connection used by the installer)
    mysql_host: str = "localhost"
    mysql_port: int = 3306
    mysql_root_user: str = "root"
    mysql_root_password: str = Field(
        default="",
        validation_alias=AliasChoices("mysql_root_password", "MYSQL_ROOT_PASSWORD"),
    )

    # Timeouts (seconds)
    command_timeout: int = 300
    http_timeout: int = 120
    ssh_connect_timeout: int = 10

    # Background loops (seconds)
    monitor_interval: int = 5
    job_poll_interval: int = 2

    # Logging: per-category log levels (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    log_level: str = "INFO"                  # Root / app-wide
    log_level_sql: str = "WARNING"           # sqlalchemy.engine SQL statements
    log_level_http: str = "WARNING"          # httpx / httpcore outbound HTTP
    log_level_uvicorn: str = "INFO"          # uvicorn.access / uvicorn.error
    log_level_installer: str = "INFO"        # WordPress / server setup pipelines
    log_level_ssh: str = "WARNING"           # paramiko transport chatter

    model_config = {
        "env_file": _ENV_FILES,
        "env_file_encoding": "utf-8",
        "populate_by_name": True,
    }


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance: reads .env once."""
    return Settings()
