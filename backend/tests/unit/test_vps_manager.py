"""Unit tests for the VPSManager and its output parsers."""

import pytest

from hostpanel.application.services import VPSManager
from hostpanel.application.services.vps_manager import parse_nginx_vhost, parse_service_status
from hostpanel.domain.entities import ServiceState, VPSConnection
from hostpanel.domain.exceptions import CommandExecutionError, ValidationError, VPSNotConnectedError

CONNECTION = VPSConnection(host="203.0.113.10", username="root", password="secret")

NGINX_SHOW = """\
ActiveState=active
MainPID=812
ActiveEnterTimestampMonotonic=1000000000
UnitFileState=enabled
MemoryCurrent=52428800
CPUUsageNSec=3600000000000
"""

VHOST = """\
server {
    listen 80;
    listen 443 ssl; # managed by Certbot
    server_name example.com www.example.com;
    root /var/www/example.com;
}
"""


@pytest.fixture
def manager(runner) -> VPSManager:
    return VPSManager(runner_factory=lambda connection: runner, command_timeout=30)


# ── Parsers ──────────────────────────────────────────────────────────


def test_parse_running_service():
    # 2 hours after the unit became active
    now_us = 1_000_000_000 + 7_200 * 1_000_000
    status = parse_service_status("nginx", NGINX_SHOW, now_us)

    assert status.status == ServiceState.RUNNING
    assert status.pid == 812
    assert status.memory_mb == 50.0
    assert status.uptime == "2h 0m"
    assert status.cpu_percent == 50.0
    assert status.autostart is True


def test_parse_stopped_service_ignores_unset_counters():
    output = "ActiveState=inactive\nMainPID=0\nMemoryCurrent=18446744073709551615\nUnitFileState=disabled\n"
    status = parse_service_status("redis", output, 10)

    assert status.status == ServiceState.STOPPED
    assert status.pid is None
    assert status.memory_mb == 0.0
    assert status.uptime == ""
    assert status.autostart is False


@pytest.mark.parametrize(
    "state, expected",
    [("failed", ServiceState.ERROR), ("activating", ServiceState.RESTARTING), ("reloading", ServiceState.RESTARTING)],
)
def test_parse_service_state_mapping(state, expected):
    assert parse_service_status("x", f"ActiveState={state}\n").status == expected


def test_parse_nginx_vhost():
    site = parse_nginx_vhost("example.com", VHOST)
    assert site.name == "example.com"
    assert site.aliases == ["www.example.com"]
    assert site.document_root == "/var/www/example.com"
    assert site.ssl is True


def test_parse_nginx_vhost_without_server_name():
    assert parse_nginx_vhost("default", "server {\n listen 80 default_server;\n server_name _;\n}") is None


# ── Connection state ─────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_connect_verifies_with_true(manager, runner):
    await manager.connect(CONNECTION)

    assert manager.is_connected
    assert runner.commands == ["true"]
    assert manager.connection_info == {"host": "203.0.113.10", "port": 22, "username": "root"}


@pytest.mark.asyncio
async def test_failed_verification_leaves_manager_disconnected(manager, runner):
    runner.on(r"^true$", exit_code=255, stderr="Permission denied")

    with pytest.raises(CommandExecutionError):
        await manager.connect(CONNECTION)

    assert not manager.is_connected
    assert runner.closed


@pytest.mark.asyncio
async def test_connect_wraps_runner_construction_errors():
    def factory(connection):
        raise ValueError("SSH connections need a password or a private key")

    manager = VPSManager(runner_factory=factory)
    with pytest.raises(CommandExecutionError):
        await manager.connect(CONNECTION)


@pytest.mark.asyncio
async def test_disconnect_closes_runner(manager, runner):
    await manager.connect(CONNECTION)
    await manager.disconnect()

    assert runner.closed
    assert manager.connection_info is None
    with pytest.raises(VPSNotConnectedError):
        await manager.execute("uptime")


# ── Commands ─────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_execute_reports_non_zero_exit(manager, runner):
    await manager.connect(CONNECTION)
    runner.on(r"^false$", exit_code=1)

    result = await manager.execute("false")

    assert result.exit_code == 1
    assert runner.timeouts[-1] == 30


@pytest.mark.asyncio
async def test_run_checked_raises(manager, runner):
    await manager.connect(CONNECTION)
    runner.on(r"^false$", exit_code=1, stderr="boom")

    with pytest.raises(CommandExecutionError) as exc:
        await manager.run_checked("false")
    assert exc.value.exit_code == 1


@pytest.mark.asyncio
async def test_get_services(manager, runner):
    await manager.connect(CONNECTION)
    runner.on(r"cat /proc/uptime", stdout="1007.2 2000.0")
    runner.on(r"systemctl show nginx ", stdout=NGINX_SHOW)
    runner.on(r"systemctl show mysql ", exit_code=1)

    services = await manager.get_services(["nginx", "mysql"])

    assert [s.name for s in services] == ["nginx", "mysql"]
    assert services[0].status == ServiceState.RUNNING
    assert services[0].uptime == "0m"
    assert services[1].status == ServiceState.ERROR
    assert "--property=ActiveState,MainPID" in runner.commands[-1]


@pytest.mark.asyncio
async def test_restart_service_rejects_unsafe_names(manager, runner):
    await manager.connect(CONNECTION)
    assert await manager.restart_service("nginx") is True
    assert runner.commands[-1] == "systemctl restart nginx"

    with pytest.raises(ValidationError):
        await manager.restart_service("nginx && reboot")


@pytest.mark.asyncio
async def test_get_domains_reads_each_vhost(manager, runner):
    await manager.connect(CONNECTION)
    runner.on(r"^ls -1 ", stdout="example.com\ndefault\n")
    runner.on(r"^cat .*/example.com$", stdout=VHOST)
    runner.on(r"^cat .*/default$", stdout="server { server_name _; }")

    sites = await manager.get_domains()

    assert [s.name for s in sites] == ["example.com"]


@pytest.mark.asyncio
async def test_get_databases_parses_tab_separated_rows(manager, runner):
    await manager.connect(CONNECTION)
    runner.on(r"^mysql -N -B -e", stdout="shop\t12.50\t40\nwp_site\t0\t0\n")

    databases = await manager.get_databases()

    assert databases[0].name == "shop"
    assert databases[0].size_mb == 12.5
    assert databases[0].table_count == 40
    assert "information_schema.schemata" in runner.commands[-1]
    assert "'performance_schema'" in runner.commands[-1]


@pytest.mark.asyncio
async def test_create_database_quotes_password(manager, runner):
    await manager.connect(CONNECTION)

    await manager.create_database("wp_site", "wp_user", "it's")

    command = runner.commands[-1]
    assert command.startswith("mysql -e ")
    assert "CREATE DATABASE IF NOT EXISTS `wp_site` CHARACTER SET utf8mb4" in command
    assert "GRANT ALL PRIVILEGES ON `wp_site`.*" in command
    assert "FLUSH PRIVILEGES;" in command
    assert "it\\'" in command


@pytest.mark.asyncio
async def test_create_database_validates_identifiers(manager, runner):
    await manager.connect(CONNECTION)
    with pytest.raises(ValidationError):
        await manager.create_database("bad-name", "wp_user", "pw")


@pytest.mark.asyncio
async def test_certificates(manager, runner):
    await manager.connect(CONNECTION)
    runner.on(r"^certbot", exit_code=1, stderr="challenge failed")

    assert await manager.create_ssl_certificate("example.com") is False
    assert runner.commands[-1] == "certbot --nginx -d example.com --non-interactive --agree-tos"

    assert await manager.create_self_signed_certificate("example.com", days=30) is True
    assert "openssl req -x509" in runner.commands[-1]
    assert "-days 30" in runner.commands[-1]
