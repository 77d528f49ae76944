"""Unit tests for the WordPress installer pipeline."""

import io
import re
import tarfile
from pathlib import Path

import httpx
import pytest

from hostpanel.application.interfaces import DatabaseAdmin
from hostpanel.application.services import WordPressInstaller
from hostpanel.application.services.wordpress_installer import (
    SALT_KEYS,
    SALT_LENGTH,
    render_nginx_vhost,
    render_wp_config,
    safe_extract,
)
from hostpanel.domain.entities import WordPressInstallConfig
from hostpanel.domain.exceptions import InstallerError

DOWNLOAD_URL = "https://downloads.test/latest.tar.gz"

SAMPLE_CONFIG = """<?php
define( 'DB_NAME', 'database_name_here' );
define( 'DB_USER', 'username_here' );
define( 'DB_PASSWORD', 'password_here' );
define( 'AUTH_KEY',         'put your unique phrase here' );
define( 'SECURE_AUTH_KEY',  'put your unique phrase here' );
define( 'LOGGED_IN_KEY',    'put your unique phrase here' );
define( 'NONCE_KEY',        'put your unique phrase here' );
define( 'AUTH_SALT',        'put your unique phrase here' );
define( 'SECURE_AUTH_SALT', 'put your unique phrase here' );
define( 'LOGGED_IN_SALT',   'put your unique phrase here' );
define( 'NONCE_SALT',       'put your unique phrase here' );
/* That's all, stop editing! Happy publishing. */
"""


def make_archive(files: dict[str, str]) -> bytes:
    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode="w:gz") as tar:
        for name, content in files.items():
            data = content.encode()
            info = tarfile.TarInfo(name)
            info.size = len(data)
            tar.addfile(info, io.BytesIO(data))
    return buffer.getvalue()


WORDPRESS_ARCHIVE = make_archive({
    "wordpress/index.php": "<?php // index",
    "wordpress/wp-config-sample.php": SAMPLE_CONFIG,
})


class FakeDatabaseAdmin(DatabaseAdmin):
    def __init__(self, existing_user: bool = False, fail_connect: bool = False):
        self.calls: list[tuple] = []
        self.existing_user = existing_user
        self.fail_connect = fail_connect
        self.closed = False

    async def connect(self):
        if self.fail_connect:
            raise ConnectionError("Access denied for user 'root'")
        self.calls.append(("connect",))

    async def database_exists(self, name):
        return False

    async def user_exists(self, user, host="localhost"):
        return self.existing_user

    async def create_database(self, name, charset, collation):
        self.calls.append(("create_database", name, charset, collation))

    async def create_user(self, user, password, host="localhost"):
        self.calls.append(("create_user", user))

    async def grant_all(self, database, user, host="localhost"):
        self.calls.append(("grant_all", database, user))

    async def drop_database(self, name):
        self.calls.append(("drop_database", name))

    async def drop_user(self, user, host="localhost"):
        self.calls.append(("drop_user", user))

    async def close(self):
        self.closed = True


def make_transport(install_status: int = 200, install_body: str = "<h1>Success!</h1>") -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "GET" and str(request.url) == DOWNLOAD_URL:
            return httpx.Response(200, content=WORDPRESS_ARCHIVE)
        if request.method == "POST" and request.url.path == "/wp-admin/install.php":
            return httpx.Response(install_status, text=install_body)
        return httpx.Response(404)

    return httpx.MockTransport(handler)


def make_config(**overrides) -> WordPressInstallConfig:
    values = dict(
        domain="blog.example.com",
        db_name="wp_blog",
        db_user="wp_blog",
        db_password="db-secret",
        wp_admin_user="admin",
        wp_admin_password="admin-secret",
        wp_admin_email="admin@example.com",
    )
    values.update(overrides)
    return WordPressInstallConfig(**values)


@pytest.fixture
def db_admin():
    return FakeDatabaseAdmin()


@pytest.fixture
def layout(tmp_path: Path) -> dict[str, Path]:
    return {
        "web_root": tmp_path / "www",
        "sites_available": tmp_path / "nginx" / "sites-available",
        "sites_enabled": tmp_path / "nginx" / "sites-enabled",
        "log_file": tmp_path / "wordpress_install.log",
    }


def make_installer(runner, db_admin, layout, transport=None, rollback=True) -> WordPressInstaller:
    return WordPressInstaller(
        runner,
        db_admin,
        web_root=layout["web_root"],
        sites_available=layout["sites_available"],
        sites_enabled=layout["sites_enabled"],
        download_url=DOWNLOAD_URL,
        log_file=layout["log_file"],
        rollback=rollback,
        transport=transport or make_transport(),
    )


# ── Rendering helpers ────────────────────────────────────────────────


def test_render_wp_config_fills_credentials_and_salts():
    content = render_wp_config(SAMPLE_CONFIG, make_config())

    assert "'wp_blog'" in content
    assert "'db-secret'" in content
    assert "put your unique phrase here" not in content
    for key in SALT_KEYS:
        assert f"define('{key}', '" in content
    assert content.index("Custom HostPanel configurations") < content.index("That's all, stop editing!")
    assert "define('DISALLOW_FILE_EDIT', true);" in content


def test_render_wp_config_salts_are_unique():
    content = render_wp_config(SAMPLE_CONFIG, make_config())
    salts = re.findall(r"define\('[A-Z_]+_(?:KEY|SALT)', '([^']{%d})'\);" % SALT_LENGTH, content)
    assert len(salts) == len(SALT_KEYS)
    assert len(set(salts)) == len(salts)


def test_render_nginx_vhost():
    vhost = render_nginx_vhost("blog.example.com", "/var/www/blog.example.com", "/run/php/php8.1-fpm.sock")
    assert "server_name blog.example.com www.blog.example.com;" in vhost
    assert "root /var/www/blog.example.com;" in vhost
    assert "fastcgi_pass unix:/run/php/php8.1-fpm.sock;" in vhost
    assert "try_files $uri $uri/ /index.php?$args;" in vhost


def test_safe_extract_rejects_parent_paths(tmp_path):
    archive = tmp_path / "evil.tar.gz"
    archive.write_bytes(make_archive({"../escape.txt": "x"}))

    with pytest.raises(InstallerError):
        safe_extract(archive, tmp_path / "out")
    assert not (tmp_path / "escape.txt").exists()


# ── Pipeline ─────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_install_success(runner, db_admin, layout):
    installer = make_installer(runner, db_admin, layout)
    steps: list[tuple[str, int, int]] = []

    async def on_step(name, index, total):
        steps.append((name, index, total))

    result = await installer.install(make_config(), on_step=on_step)

    assert result.success, result.error
    assert result.site_url == "http://blog.example.com"
    assert result.admin_url == "http://blog.example.com/wp-admin"
    assert result.admin_password == "admin-secret"

    install_dir = layout["web_root"] / "blog.example.com"
    assert (install_dir / "index.php").exists()
    assert "'db-secret'" in (install_dir / "wp-config.php").read_text()
    assert (install_dir / "wp-config.php").stat().st_mode & 0o777 == 0o600

    vhost = layout["sites_available"] / "blog.example.com"
    assert vhost.exists()
    assert (layout["sites_enabled"] / "blog.example.com").is_symlink()

    assert ("create_database", "wp_blog", "utf8mb4", "utf8mb4_unicode_ci") in db_admin.calls
    assert ("grant_all", "wp_blog", "wp_blog") in db_admin.calls
    assert db_admin.closed

    assert "nginx -t" in runner.commands
    assert "systemctl reload nginx" in runner.commands
    assert any(c.startswith("chown -R www-data:www-data") for c in runner.commands)
    assert not any(c.startswith("wp core install") for c in runner.commands)

    assert [s[0] for s in steps][0] == "connect_database"
    assert steps[-1] == ("set_permissions", 6, 7)
    assert "WordPress installation completed successfully!" in layout["log_file"].read_text()


@pytest.mark.asyncio
async def test_install_falls_back_to_wp_cli(runner, db_admin, layout):
    installer = make_installer(runner, db_admin, layout, transport=make_transport(install_status=502, install_body=""))

    result = await installer.install(make_config(site_title="My Blog"))

    assert result.success
    cli = next(c for c in runner.commands if c.startswith("wp core install"))
    assert "--title='My Blog'" in cli
    assert "--skip-email" in cli


@pytest.mark.asyncio
async def test_wp_cli_failure_fails_install(runner, db_admin, layout):
    runner.on(r"^wp core install", exit_code=1, stderr="Error: database not reachable")
    installer = make_installer(runner, db_admin, layout, transport=make_transport(install_status=500, install_body=""))

    result = await installer.install(make_config())

    assert not result.success
    assert "database not reachable" in result.error


@pytest.mark.asyncio
async def test_nginx_test_failure_rolls_back(runner, db_admin, layout):
    runner.on(r"^nginx -t$", exit_code=1, stderr="emerg")
    installer = make_installer(runner, db_admin, layout)

    result = await installer.install(make_config())

    assert not result.success
    assert result.error == "Nginx configuration test failed"
    assert result.rolled_back == ["configure_wordpress", "download_wordpress", "create_database"]
    assert not (layout["web_root"] / "blog.example.com").exists()
    assert ("drop_user", "wp_blog") in db_admin.calls
    assert ("drop_database", "wp_blog") in db_admin.calls
    assert "Installation failed: Nginx configuration test failed" in layout["log_file"].read_text()


@pytest.mark.asyncio
async def test_rollback_keeps_preexisting_user(runner, layout):
    db_admin = FakeDatabaseAdmin(existing_user=True)
    runner.on(r"^chown", exit_code=1, stderr="no such user")
    installer = make_installer(runner, db_admin, layout)

    result = await installer.install(make_config())

    assert not result.success
    assert result.errors[0].startswith("set_permissions:")
    assert ("drop_user", "wp_blog") not in db_admin.calls
    assert ("drop_database", "wp_blog") in db_admin.calls
    assert not (layout["sites_enabled"] / "blog.example.com").exists()


@pytest.mark.asyncio
async def test_no_rollback_leaves_files(runner, db_admin, layout):
    runner.on(r"^nginx -t$", exit_code=1)
    installer = make_installer(runner, db_admin, layout, rollback=False)

    result = await installer.install(make_config())

    assert not result.success
    assert result.rolled_back == []
    assert (layout["web_root"] / "blog.example.com" / "wp-config.php").exists()


@pytest.mark.asyncio
async def test_database_connection_failure(runner, layout):
    db_admin = FakeDatabaseAdmin(fail_connect=True)
    installer = make_installer(runner, db_admin, layout)

    result = await installer.install(make_config())

    assert not result.success
    assert result.error.startswith("Database connection failed")
    assert runner.commands == []


@pytest.mark.asyncio
async def test_download_failure(runner, db_admin, layout):
    transport = httpx.MockTransport(lambda request: httpx.Response(503))
    installer = make_installer(runner, db_admin, layout, transport=transport)

    result = await installer.install(make_config())

    assert not result.success
    assert result.error.startswith("Failed to download WordPress")
    assert result.rolled_back == ["create_database"]


@pytest.mark.asyncio
async def test_invalid_config_is_rejected_before_any_step(runner, db_admin, layout):
    installer = make_installer(runner, db_admin, layout)

    result = await installer.install(make_config(wp_admin_email="not-an-email"))

    assert not result.success
    assert db_admin.calls == []
