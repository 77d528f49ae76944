"""Construction of the WordPress installer from settings."""

from hostpanel.application.interfaces import CommandRunner
from hostpanel.application.services.wordpress_installer import WordPressInstaller
from hostpanel.config import Settings, get_settings
from hostpanel.infrastructure.mysql import MySQLDatabaseAdmin


def build_wordpress_installer(
    runner: CommandRunner,
    rollback: bool = True,
    settings: Settings | None = None,
) -> WordPressInstaller:
    """Installer wired to the configured host layout and MySQL root account."""
    settings = settings or get_settings()
    db_admin = MySQLDatabaseAdmin(
        host=settings.mysql_host,
        port=settings.mysql_port,
        user=settings.mysql_root_user,
        password=settings.mysql_root_password,
    )
    return WordPressInstaller(
        runner,
        db_admin,
        web_root=settings.web_root,
        sites_available=settings.nginx_sites_available,
        sites_enabled=settings.nginx_sites_enabled,
        php_fpm_socket=settings.php_fpm_socket,
        download_url=settings.wordpress_download_url,
        log_file=settings.installer_log_file,
        command_timeout=settings.command_timeout,
        http_timeout=settings.http_timeout,
        rollback=rollback,
    )
