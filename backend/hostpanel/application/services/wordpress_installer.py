"""WordPress installer: provisions a complete site on the web host.

Pipeline:
    1. connect_database      open the MySQL admin connection
    2. create_database       schema + user + grants
    3. download_wordpress    fetch latest.tar.gz, extract into <web_root>/<domain>
    4. configure_wordpress   wp-config.php with credentials, salts and panel defaults
    5. install_wordpress     run the web installer, falling back to WP-CLI
    6. configure_web_server  nginx vhost, enable, test, reload
    7. set_permissions       www-data ownership, 755/644, wp-config.php 600

Each step may register an undo action. When a step fails, the undo actions of
the steps that already completed run in reverse order so that a failed
install leaves no half-provisioned site behind.

Files are written on the machine running the installer; shell commands go
through the injected CommandRunner.
"""

import asyncio
import logging
import os
import re
import secrets
import shlex
import shutil
import tarfile
import tempfile
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path, PurePosixPath

import httpx

from hostpanel.application.interfaces.command_runner import CommandRunner
from hostpanel.application.interfaces.database_admin import DatabaseAdmin
from hostpanel.domain.entities import WordPressInstallConfig, WordPressInstallResult
from hostpanel.domain.exceptions import InstallerError, ValidationError
from hostpanel.infrastructure.logging.colored_logger import PipelineLogger, PipelineStage, Stage

logger = logging.getLogger(__name__)

SALT_KEYS = (
    "AUTH_KEY",
    "SECURE_AUTH_KEY",
    "LOGGED_IN_KEY",
    "NONCE_KEY",
    "AUTH_SALT",
    "SECURE_AUTH_SALT",
    "LOGGED_IN_SALT",
    "NONCE_SALT",
)
SALT_LENGTH = 64
SALT_CHARS = (
    "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"
    "!@#$%^&*()-_ []{}<>~`+=,.;:/?|"
)

_SALT_DEFINE_RE = re.compile(
    r"define\(\s*'(?P<key>[A-Z_]+)'\s*,\s*'put your unique phrase here'\s*\);"
)
_STOP_EDITING_MARKER = "/* That's all, stop editing!"

CUSTOM_CONFIG = """
// Custom HostPanel configurations
define('WP_DEBUG', false);
define('WP_DEBUG_LOG', false);
define('WP_DEBUG_DISPLAY', false);
define('AUTOMATIC_UPDATER_DISABLED', false);
define('WP_AUTO_UPDATE_CORE', true);
define('WP_POST_REVISIONS', 5);
define('WP_MEMORY_LIMIT', '256M');

// Security enhancements
define('DISALLOW_FILE_EDIT', true);
define('FORCE_SSL_ADMIN', false);

// Performance optimizations
define('WP_CACHE', true);
define('COMPRESS_CSS', true);
define('COMPRESS_SCRIPTS', true);
"""

NGINX_TEMPLATE = """server {{
    listen 80;
    server_name {domain} www.{domain};
    root {root};
    index index.php index.html index.htm;

    # Security headers
    add_header X-Frame-Options SAMEORIGIN;
    add_header X-Content-Type-Options nosniff;
    add_header X-XSS-Protection "1; mode=block";

    # WordPress specific rules
    location / {{
        try_files $uri $uri/ /index.php?$args;
    }}

    location ~ \\.php$ {{
        include snippets/fastcgi-php.conf;
        fastcgi_pass unix:{php_fpm_socket};
        fastcgi_param SCRIPT_FILENAME $document_root$fastcgi_script_name;
        include fastcgi_params;
    }}

    # Deny access to sensitive files
    location ~ /\\. {{
        deny all;
        access_log off;
        log_not_found off;
    }}

    location ~ ~$ {{
        deny all;
        access_log off;
        log_not_found off;
    }}

    # WordPress security
    location ~ ^/(wp-admin|wp-includes)/ {{
        location ~ \\.php$ {{
            include snippets/fastcgi-php.conf;
            fastcgi_pass unix:{php_fpm_socket};
        }}
    }}

    # Static file caching
    location ~* \\.(js|css|png|jpg|jpeg|gif|ico|svg)$ {{
        expires 1y;
        add_header Cache-Control "public, immutable";
    }}
}}
"""

StepProgress = Callable[[str, int, int], Awaitable[None]]


def generate_salt(length: int = SALT_LENGTH) -> str:
    return "".join(secrets.choice(SALT_CHARS) for _ in range(length))


def render_wp_config(sample: str, config: WordPressInstallConfig) -> str:
    """Fill in wp-config-sample.php: credentials, fresh salts, panel defaults."""
    content = (
        sample.replace("database_name_here", config.db_name)
        .replace("username_here", config.db_user)
        .replace("password_here", config.db_password)
    )
    content = _SALT_DEFINE_RE.sub(
        lambda m: f"define('{m.group('key')}', '{generate_salt()}');",
        content,
    )
    if _STOP_EDITING_MARKER in content:
        content = content.replace(_STOP_EDITING_MARKER, CUSTOM_CONFIG + "\n" + _STOP_EDITING_MARKER, 1)
    else:
        content += CUSTOM_CONFIG
    return content


def render_nginx_vhost(domain: str, root: str | Path, php_fpm_socket: str) -> str:
    return NGINX_TEMPLATE.format(domain=domain, root=root, php_fpm_socket=php_fpm_socket)


def safe_extract(archive: Path, destination: Path) -> None:
    """Extract a tar archive, refusing members that would escape ``destination``."""
    with tarfile.open(archive, "r:*") as tar:
        members = tar.getmembers()
        for member in members:
            path = PurePosixPath(member.name)
            if path.is_absolute() or ".." in path.parts:
                raise InstallerError("download_wordpress", f"Unsafe path in archive: {member.name}")
            if member.issym() or member.islnk():
                target = PurePosixPath(member.linkname)
                if target.is_absolute() or ".." in target.parts:
                    raise InstallerError("download_wordpress", f"Unsafe link in archive: {member.name}")
        tar.extractall(destination, members=members)


@dataclass
class _InstallState:
    """What this run changed, so undo actions only revert their own work."""

    install_dir: Path
    created_database: bool = False
    created_user: bool = False
    created_install_dir: bool = False
    previous_wp_config: str | None = None
    wrote_wp_config: bool = False
    previous_vhost: str | None = None
    wrote_vhost: bool = False
    created_symlink: bool = False


@dataclass
class _Step:
    name: str
    stage: Stage
    description: str
    action: Callable[[WordPressInstallConfig, _InstallState], Awaitable[None]]
    undo: Callable[[WordPressInstallConfig, _InstallState], Awaitable[None]] | None = None


class WordPressInstaller:
    """Runs the install pipeline for one site with step-by-step compensation."""

    def __init__(
        self,
        runner: CommandRunner,
        db_admin: DatabaseAdmin,
        *,
        web_root: str | Path,
        sites_available: str | Path,
        sites_enabled: str | Path,
        php_fpm_socket: str = "/var/run/php/php8.1-fpm.sock",
        download_url: str = "https://wordpress.org/latest.tar.gz",
        log_file: str | Path | None = None,
        command_timeout: float = 300,
        http_timeout: float = 120,
        rollback: bool = True,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._runner = runner
        self._db = db_admin
        self._web_root = Path(web_root)
        self._sites_available = Path(sites_available)
        self._sites_enabled = Path(sites_enabled)
        self._php_fpm_socket = php_fpm_socket
        self._download_url = download_url
        self._log_file = Path(log_file) if log_file else None
        self._command_timeout = command_timeout
        self._http_timeout = http_timeout
        self._rollback = rollback
        self._transport = transport
        self._log = PipelineLogger("WordPressInstaller")
        self._log_file_warned = False

    # ── Public API ───────────────────────────────────────────────────

    async def install(
        self,
        config: WordPressInstallConfig,
        on_step: StepProgress | None = None,
    ) -> WordPressInstallResult:
        try:
            config.validate()
        except ValidationError as exc:
            self._append_log(f"Installation failed: {exc}")
            return WordPressInstallResult(success=False, error=str(exc), errors=[str(exc)])

        state = _InstallState(install_dir=self._web_root / config.domain)
        steps = self._steps()
        completed: list[_Step] = []

        self._log.separator(f"WordPress {config.domain}")
        self._append_log(f"Starting WordPress installation for {config.domain}")

        try:
            for index, step in enumerate(steps):
                if on_step is not None:
                    await on_step(step.name, index, len(steps))
                self._append_log(step.description)
                try:
                    with self._log.timed_step(step.stage, step.description):
                        await step.action(config, state)
                except InstallerError as exc:
                    return await self._fail(config, state, completed, exc)
                except Exception as exc:
                    return await self._fail(config, state, completed, InstallerError(step.name, str(exc)))
                completed.append(step)
        finally:
            try:
                await self._db.close()
            except Exception:
                logger.warning("Could not close MySQL admin connection", exc_info=True)

        self._append_log("WordPress installation completed successfully!")
        self._log.step_complete(PipelineStage.COMPLETE, f"WordPress ready at http://{config.domain}")
        return WordPressInstallResult(
            success=True,
            site_url=f"http://{config.domain}",
            admin_url=f"http://{config.domain}/wp-admin",
            admin_user=config.wp_admin_user,
            admin_password=config.wp_admin_password,
        )

    # ── Failure handling ─────────────────────────────────────────────

    async def _fail(
        self,
        config: WordPressInstallConfig,
        state: _InstallState,
        completed: list[_Step],
        error: InstallerError,
    ) -> WordPressInstallResult:
        self._append_log(f"Installation failed: {error.message}")
        errors = [f"{error.step}: {error.message}"]
        rolled_back: list[str] = []

        if self._rollback:
            for step in reversed(completed):
                if step.undo is None:
                    continue
                self._log.step_start(PipelineStage.ROLLBACK, f"Undoing {step.name}")
                try:
                    await step.undo(config, state)
                except Exception as exc:
                    self._log.step_error(PipelineStage.ROLLBACK, f"Undo of {step.name} failed", error=exc)
                    errors.append(f"rollback {step.name}: {exc}")
                    continue
                rolled_back.append(step.name)
                self._append_log(f"Rolled back {step.name}")

        return WordPressInstallResult(
            success=False,
            error=error.message,
            errors=errors,
            rolled_back=rolled_back,
        )

    # ── Steps ────────────────────────────────────────────────────────

    def _steps(self) -> list[_Step]:
        return [
            _Step("connect_database", PipelineStage.DATABASE, "Connecting to MySQL database...",
                  self._connect_database),
            _Step("create_database", PipelineStage.DATABASE, "Creating WordPress database...",
                  self._create_database, self._undo_create_database),
            _Step("download_wordpress", PipelineStage.DOWNLOAD, "Downloading WordPress...",
                  self._download_wordpress, self._undo_download_wordpress),
            _Step("configure_wordpress", PipelineStage.CONFIGURE, "Configuring WordPress...",
                  self._configure_wordpress, self._undo_configure_wordpress),
            _Step("install_wordpress", PipelineStage.INSTALL, "Installing WordPress...",
                  self._install_wordpress),
            _Step("configure_web_server", PipelineStage.WEB_SERVER, "Configuring web server...",
                  self._configure_web_server, self._undo_configure_web_server),
            _Step("set_permissions", PipelineStage.PERMISSIONS, "Setting file permissions...",
                  self._set_permissions),
        ]

    async def _connect_database(self, config: WordPressInstallConfig, state: _InstallState) -> None:
        try:
            await self._db.connect()
        except Exception as exc:
            raise InstallerError("connect_database", f"Database connection failed: {exc}") from exc

    async def _create_database(self, config: WordPressInstallConfig, state: _InstallState) -> None:
        try:
            if not await self._db.database_exists(config.db_name):
                await self._db.create_database(config.db_name, "utf8mb4", "utf8mb4_unicode_ci")
                state.created_database = True
            if not await self._db.user_exists(config.db_user):
                await self._db.create_user(config.db_user, config.db_password)
                state.created_user = True
            await self._db.grant_all(config.db_name, config.db_user)
        except InstallerError:
            raise
        except Exception as exc:
            raise InstallerError("create_database", f"Database creation failed: {exc}") from exc
        self._log.detail(f"Database {config.db_name} ready for {config.db_user}")

    async def _undo_create_database(self, config: WordPressInstallConfig, state: _InstallState) -> None:
        if state.created_user:
            await self._db.drop_user(config.db_user)
        if state.created_database:
            await self._db.drop_database(config.db_name)

    async def _download_wordpress(self, config: WordPressInstallConfig, state: _InstallState) -> None:
        install_dir = state.install_dir
        with tempfile.TemporaryDirectory(prefix="wordpress_") as tmp:
            archive = Path(tmp) / "wordpress.tar.gz"
            try:
                async with httpx.AsyncClient(
                    timeout=self._http_timeout,
                    follow_redirects=True,
                    transport=self._transport,
                ) as client:
                    async with client.stream("GET", self._download_url) as response:
                        response.raise_for_status()
                        with archive.open("wb") as fh:
                            async for chunk in response.aiter_bytes():
                                fh.write(chunk)
            except httpx.HTTPError as exc:
                raise InstallerError("download_wordpress", f"Failed to download WordPress: {exc}") from exc

            self._log.detail(f"Downloaded {archive.stat().st_size} bytes")
            await asyncio.to_thread(safe_extract, archive, Path(tmp))

            source = Path(tmp) / "wordpress"
            if not source.is_dir():
                raise InstallerError("download_wordpress", "Archive does not contain a wordpress/ directory")

            state.created_install_dir = not install_dir.exists()
            await asyncio.to_thread(shutil.copytree, source, install_dir, dirs_exist_ok=True)

        self._append_log(f"WordPress downloaded and extracted to {install_dir}")

    async def _undo_download_wordpress(self, config: WordPressInstallConfig, state: _InstallState) -> None:
        if state.created_install_dir and state.install_dir.exists():
            await asyncio.to_thread(shutil.rmtree, state.install_dir)

    async def _configure_wordpress(self, config: WordPressInstallConfig, state: _InstallState) -> None:
        sample = state.install_dir / "wp-config-sample.php"
        target = state.install_dir / "wp-config.php"
        if not sample.exists():
            raise InstallerError("configure_wordpress", "wp-config-sample.php not found")

        if target.exists():
            state.previous_wp_config = target.read_text("utf-8")
        target.write_text(render_wp_config(sample.read_text("utf-8"), config), encoding="utf-8")
        state.wrote_wp_config = True
        self._append_log("WordPress configuration created")

    async def _undo_configure_wordpress(self, config: WordPressInstallConfig, state: _InstallState) -> None:
        target = state.install_dir / "wp-config.php"
        if not state.wrote_wp_config:
            return
        if state.previous_wp_config is not None:
            target.write_text(state.previous_wp_config, encoding="utf-8")
        elif target.exists():
            target.unlink()

    async def _install_wordpress(self, config: WordPressInstallConfig, state: _InstallState) -> None:
        url = f"http://{config.domain}/wp-admin/install.php?step=2"
        form = {
            "weblog_title": config.title,
            "user_name": config.wp_admin_user,
            "admin_password": config.wp_admin_password,
            "admin_password2": config.wp_admin_password,
            "admin_email": config.wp_admin_email,
            "blog_public": "1",
            "Submit": "Install WordPress",
        }
        try:
            async with httpx.AsyncClient(timeout=self._http_timeout, transport=self._transport) as client:
                response = await client.post(url, data=form)
            if response.status_code == 200 and "success" in response.text.lower():
                self._log.detail("Installed through the web installer")
                return
            self._log.detail(f"Web installer returned HTTP {response.status_code}, falling back to WP-CLI")
        except httpx.HTTPError as exc:
            self._log.detail(f"Web installer unreachable ({exc}), falling back to WP-CLI")

        command = " ".join([
            "wp core install",
            f"--path={shlex.quote(str(state.install_dir))}",
            f"--url={shlex.quote('http://' + config.domain)}",
            f"--title={shlex.quote(config.title)}",
            f"--admin_user={shlex.quote(config.wp_admin_user)}",
            f"--admin_password={shlex.quote(config.wp_admin_password)}",
            f"--admin_email={shlex.quote(config.wp_admin_email)}",
            "--skip-email",
            "--allow-root",
        ])
        result = await self._runner.run(command, timeout=self._command_timeout)
        if not result.ok:
            raise InstallerError(
                "install_wordpress",
                f"WordPress installation failed: {result.stderr.strip() or 'WP-CLI exited with ' + str(result.exit_code)}",
            )
        self._log.detail("Installed through WP-CLI")

    async def _configure_web_server(self, config: WordPressInstallConfig, state: _InstallState) -> None:
        vhost = self._sites_available / config.domain
        enabled = self._sites_enabled / config.domain

        if vhost.exists():
            state.previous_vhost = vhost.read_text("utf-8")
        vhost.parent.mkdir(parents=True, exist_ok=True)
        vhost.write_text(
            render_nginx_vhost(config.domain, state.install_dir, self._php_fpm_socket),
            encoding="utf-8",
        )
        state.wrote_vhost = True

        if not enabled.exists() and not enabled.is_symlink():
            enabled.parent.mkdir(parents=True, exist_ok=True)
            os.symlink(vhost, enabled)
            state.created_symlink = True

        test = await self._runner.run("nginx -t", timeout=self._command_timeout)
        if not test.ok:
            raise InstallerError("configure_web_server", "Nginx configuration test failed")
        await self._runner.run("systemctl reload nginx", timeout=self._command_timeout)
        self._append_log("Nginx configuration created and reloaded")

    async def _undo_configure_web_server(self, config: WordPressInstallConfig, state: _InstallState) -> None:
        vhost = self._sites_available / config.domain
        enabled = self._sites_enabled / config.domain
        if state.created_symlink and enabled.is_symlink():
            enabled.unlink()
        if state.wrote_vhost:
            if state.previous_vhost is not None:
                vhost.write_text(state.previous_vhost, encoding="utf-8")
            elif vhost.exists():
                vhost.unlink()
        test = await self._runner.run("nginx -t", timeout=self._command_timeout)
        if test.ok:
            await self._runner.run("systemctl reload nginx", timeout=self._command_timeout)

    async def _set_permissions(self, config: WordPressInstallConfig, state: _InstallState) -> None:
        target = shlex.quote(str(state.install_dir))
        commands = [
            f"chown -R www-data:www-data {target}",
            f"find {target} -type d -exec chmod 755 {{}} \\;",
            f"find {target} -type f -exec chmod 644 {{}} \\;",
        ]
        for command in commands:
            result = await self._runner.run(command, timeout=self._command_timeout)
            if not result.ok:
                raise InstallerError("set_permissions", f"'{command}' failed: {result.stderr.strip()}")

        wp_config = state.install_dir / "wp-config.php"
        if wp_config.exists():
            wp_config.chmod(0o600)
        self._append_log("File permissions set correctly")

    # ── Log file ─────────────────────────────────────────────────────

    def _append_log(self, message: str) -> None:
        logger.info(message)
        if self._log_file is None:
            return
        line = f"[{datetime.now().strftime('%Y-%m-%d %H:%M:%S')}] {message}\n"
        try:
            self._log_file.parent.mkdir(parents=True, exist_ok=True)
            with self._log_file.open("a", encoding="utf-8") as fh:
                fh.write(line)
        except OSError as exc:
            if not self._log_file_warned:
                logger.warning("Cannot write installer log %s: %s", self._log_file, exc)
                self._log_file_warned = True
