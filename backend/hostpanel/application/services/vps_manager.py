"""VPS manager: the single point through which the panel drives the managed server.

Holds at most one active connection (a :class:`CommandRunner`) for the whole
process. All higher-level operations build shell commands with every
interpolated argument passed through ``shlex.quote``.
"""

import logging
import shlex
from collections.abc import Callable
from typing import TYPE_CHECKING

from hostpanel.application.interfaces.command_runner import CommandRunner
from hostpanel.domain.entities import (
    CommandResult,
    HostedSite,
    ServerDatabase,
    ServiceState,
    ServiceStatus,
    VPSConnection,
    WordPressInstallConfig,
    WordPressInstallResult,
)
from hostpanel.domain.exceptions import CommandExecutionError, VPSNotConnectedError
from hostpanel.domain.metrics_parser import format_uptime
from hostpanel.domain.validators import ensure_domain, ensure_identifier, ensure_unit_name

if TYPE_CHECKING:
    from hostpanel.application.services.wordpress_installer import StepProgress, WordPressInstaller

logger = logging.getLogger(__name__)

DEFAULT_SERVICES = ("nginx", "mysql", "redis", "php-fpm", "fail2ban")

SERVICE_PROPERTIES = (
    "ActiveState",
    "MainPID",
    "ActiveEnterTimestampMonotonic",
    "UnitFileState",
    "MemoryCurrent",
    "CPUUsageNSec",
)

_ACTIVE_STATE_MAP = {
    "active": ServiceState.RUNNING,
    "inactive": ServiceState.STOPPED,
    "failed": ServiceState.ERROR,
    "activating": ServiceState.RESTARTING,
    "deactivating": ServiceState.RESTARTING,
    "reloading": ServiceState.RESTARTING,
}

SYSTEM_SCHEMAS = ("mysql", "information_schema", "performance_schema", "sys")

_DATABASES_QUERY = (
    "SELECT s.schema_name, "
    "COALESCE(ROUND(SUM(t.data_length + t.index_length) / 1024 / 1024, 2), 0), "
    "COUNT(t.table_name) "
    "FROM information_schema.schemata s "
    "LEFT JOIN information_schema.tables t ON t.table_schema = s.schema_name "
    "WHERE s.schema_name NOT IN ({excluded}) "
    "GROUP BY s.schema_name ORDER BY s.schema_name"
).format(excluded=", ".join(f"'{name}'" for name in SYSTEM_SCHEMAS))

# systemd reports unset counters as 2**64 - 1
_UNSET = 18446744073709551615

RunnerFactory = Callable[[VPSConnection], CommandRunner]


def sql_string(value: str) -> str:
    """Quote a value as a MySQL string literal."""
    return "'" + value.replace("\\", "\\\\").replace("'", "\\'") + "'"


def _int_property(props: dict[str, str], key: str) -> int:
    raw = props.get(key, "")
    if not raw.isdigit():
        return 0
    value = int(raw)
    return 0 if value == _UNSET else value


def parse_service_status(name: str, output: str, now_monotonic_us: int | None = None) -> ServiceStatus:
    """Build a ServiceStatus from ``systemctl show --property=...`` output."""
    props: dict[str, str] = {}
    for line in output.splitlines():
        key, sep, value = line.partition("=")
        if sep:
            props[key.strip()] = value.strip()

    state = _ACTIVE_STATE_MAP.get(props.get("ActiveState", ""), ServiceState.STOPPED)
    pid = _int_property(props, "MainPID") or None
    memory_mb = round(_int_property(props, "MemoryCurrent") / (1024 * 1024), 1)

    uptime = ""
    cpu_percent = 0.0
    entered_us = _int_property(props, "ActiveEnterTimestampMonotonic")
    if state == ServiceState.RUNNING and entered_us and now_monotonic_us and now_monotonic_us > entered_us:
        active_us = now_monotonic_us - entered_us
        uptime = format_uptime(active_us // 1_000_000)
        cpu_ns = _int_property(props, "CPUUsageNSec")
        cpu_percent = round(100.0 * cpu_ns / (active_us * 1000), 1)

    return ServiceStatus(
        name=name,
        status=state,
        pid=pid,
        uptime=uptime,
        memory_mb=memory_mb,
        cpu_percent=cpu_percent,
        autostart=props.get("UnitFileState") == "enabled",
    )


def parse_nginx_vhost(filename: str, config: str) -> HostedSite | None:
    """Extract server_name, root and TLS listener from an nginx server block."""
    names: list[str] = []
    root = ""
    ssl = False
    for raw in config.splitlines():
        line = raw.split("#", 1)[0].strip().rstrip(";").strip()
        if not line:
            continue
        directive, *rest_parts = line.split(None, 1)
        rest = rest_parts[0] if rest_parts else ""
        if directive == "server_name" and not names:
            names = [n for n in rest.split() if n and n != "_"]
        elif directive == "root" and not root:
            root = rest.strip()
        elif directive == "listen" and ("443" in rest or "ssl" in rest.split()):
            ssl = True
    if not names:
        return None
    return HostedSite(name=names[0], document_root=root, ssl=ssl, aliases=names[1:])


class VPSManager:
    """Owns the process-wide server connection and the operations built on it."""

    def __init__(
        self,
        runner_factory: RunnerFactory,
        command_timeout: float = 300,
        nginx_sites_enabled: str = "/etc/nginx/sites-enabled",
        installer_factory: "Callable[[CommandRunner], WordPressInstaller] | None" = None,
    ) -> None:
        self._runner_factory = runner_factory
        self._command_timeout = command_timeout
        self._sites_enabled = nginx_sites_enabled
        self._installer_factory = installer_factory
        self._runner: CommandRunner | None = None
        self._connection: VPSConnection | None = None

    # ── Connection state ─────────────────────────────────────────────

    @property
    def is_connected(self) -> bool:
        return self._runner is not None

    @property
    def connection_info(self) -> dict | None:
        if self._connection is None or self._runner is None:
            return None
        return {
            "host": self._connection.host,
            "port": self._connection.port,
            "username": self._connection.username,
        }

    @property
    def runner(self) -> CommandRunner:
        if self._runner is None:
            raise VPSNotConnectedError()
        return self._runner

    async def connect(self, connection: VPSConnection) -> None:
        """Open a runner for ``connection`` and verify it by running ``true``."""
        if self._runner is not None:
            await self.disconnect()

        try:
            runner = self._runner_factory(connection)
        except ValueError as exc:
            raise CommandExecutionError("connect", -1, str(exc)) from exc

        try:
            result = await runner.run("true", timeout=self._command_timeout)
        except Exception as exc:
            await runner.close()
            logger.warning("Connection to %s failed: %s", connection.host, exc)
            raise CommandExecutionError("true", -1, str(exc)) from exc

        if not result.ok:
            await runner.close()
            raise CommandExecutionError("true", result.exit_code, result.stderr)

        self._runner = runner
        self._connection = connection
        logger.info("Connected to %s as %s", connection.host, connection.username)

    async def disconnect(self) -> None:
        runner, self._runner = self._runner, None
        host = self._connection.host if self._connection else None
        self._connection = None
        if runner is not None:
            await runner.close()
            logger.info("Disconnected from %s", host)

    # ── Command execution ────────────────────────────────────────────

    async def execute(self, command: str, timeout: float | None = None) -> CommandResult:
        """Run a command on the server; a non-zero exit is reported, not raised."""
        runner = self.runner
        result = await runner.run(command, timeout=timeout or self._command_timeout)
        if not result.ok:
            logger.debug("Command exited %d: %s", result.exit_code, command)
        return result

    async def run_checked(self, command: str, timeout: float | None = None) -> CommandResult:
        result = await self.execute(command, timeout=timeout)
        if not result.ok:
            raise CommandExecutionError(command, result.exit_code, result.stderr)
        return result

    # ── Services ─────────────────────────────────────────────────────

    async def get_services(self, names: tuple[str, ...] | list[str] = DEFAULT_SERVICES) -> list[ServiceStatus]:
        uptime = await self.execute("cat /proc/uptime")
        now_us: int | None = None
        if uptime.ok and uptime.stdout.split():
            now_us = int(float(uptime.stdout.split()[0]) * 1_000_000)

        properties = ",".join(SERVICE_PROPERTIES)
        services = []
        for name in names:
            ensure_unit_name(name)
            result = await self.execute(f"systemctl show {shlex.quote(name)} --property={properties}")
            if not result.ok:
                services.append(ServiceStatus(name=name, status=ServiceState.ERROR))
                continue
            services.append(parse_service_status(name, result.stdout, now_us))
        return services

    async def restart_service(self, name: str) -> bool:
        ensure_unit_name(name)
        result = await self.execute(f"systemctl restart {shlex.quote(name)}")
        if result.ok:
            logger.info("Service %s restarted", name)
        else:
            logger.warning("Restart of %s failed: %s", name, result.stderr.strip())
        return result.ok

    # ── Discovery ────────────────────────────────────────────────────

    async def get_domains(self) -> list[HostedSite]:
        listing = await self.execute(f"ls -1 {shlex.quote(self._sites_enabled)}")
        if not listing.ok:
            return []

        sites = []
        for filename in listing.stdout.split():
            path = f"{self._sites_enabled.rstrip('/')}/{filename}"
            content = await self.execute(f"cat {shlex.quote(path)}")
            if not content.ok:
                continue
            site = parse_nginx_vhost(filename, content.stdout)
            if site is not None:
                sites.append(site)
        return sites

    async def get_databases(self) -> list[ServerDatabase]:
        result = await self.run_checked(f"mysql -N -B -e {shlex.quote(_DATABASES_QUERY)}")
        databases = []
        for line in result.stdout.splitlines():
            fields = line.split("\t")
            if len(fields) < 3:
                continue
            databases.append(
                ServerDatabase(name=fields[0], size_mb=float(fields[1] or 0), table_count=int(fields[2] or 0))
            )
        return databases

    # ── Provisioning ─────────────────────────────────────────────────

    async def create_database(self, name: str, user: str, password: str) -> None:
        """Create a utf8mb4 database and a local user with all privileges on it."""
        ensure_identifier(name, "name")
        ensure_identifier(user, "user", max_length=32)
        account = f"{sql_string(user)}@'localhost'"
        statements = [
            f"CREATE DATABASE IF NOT EXISTS `{name}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;",
            f"CREATE USER IF NOT EXISTS {account} IDENTIFIED BY {sql_string(password)};",
            f"GRANT ALL PRIVILEGES ON `{name}`.* TO {account};",
            "FLUSH PRIVILEGES;",
        ]
        await self.run_checked(f"mysql -e {shlex.quote(' '.join(statements))}")
        logger.info("Database %s provisioned for user %s", name, user)

    async def create_ssl_certificate(self, domain: str) -> bool:
        domain = ensure_domain(domain)
        result = await self.execute(
            f"certbot --nginx -d {shlex.quote(domain)} --non-interactive --agree-tos"
        )
        if not result.ok:
            logger.warning("certbot failed for %s: %s", domain, result.stderr.strip())
        return result.ok

    async def create_self_signed_certificate(self, domain: str, days: int = 365) -> bool:
        domain = ensure_domain(domain)
        key = shlex.quote(f"/etc/ssl/private/{domain}.key")
        crt = shlex.quote(f"/etc/ssl/certs/{domain}.crt")
        subject = shlex.quote(f"/CN={domain}")
        result = await self.execute(
            f"openssl req -x509 -nodes -newkey rsa:2048 -days {int(days)} "
            f"-keyout {key} -out {crt} -subj {subject}"
        )
        if not result.ok:
            logger.warning("openssl failed for %s: %s", domain, result.stderr.strip())
        return result.ok

    async def install_wordpress(
        self,
        config: WordPressInstallConfig,
        on_step: "StepProgress | None" = None,
    ) -> WordPressInstallResult:
        runner = self.runner
        if self._installer_factory is None:
            raise RuntimeError("WordPress installer is not configured")
        installer = self._installer_factory(runner)
        return await installer.install(config, on_step=on_step)
