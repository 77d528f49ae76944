"""Unit tests for the SystemMonitor sampling loop."""

import asyncio

import pytest

from hostpanel.application.services import SystemMonitor, VPSManager
from hostpanel.domain.entities import VPSConnection
from hostpanel.domain.exceptions import CommandExecutionError, VPSNotConnectedError


def sample_output(user: int, idle: int) -> str:
    return "\n".join([
        "@@stat",
        f"cpu  {user} 0 50 {idle} 50 0 0 0 0 0",
        "@@nproc",
        "4",
        "@@cpumodel",
        "model name\t: AMD EPYC 7B13",
        "@@free",
        "               total        used        free      shared  buff/cache   available",
        "Mem:      8589934592  1073741824  4294967296           0  3221225472  6442450944",
        "@@df",
        "Filesystem         1-blocks        Used    Available Capacity Mounted on",
        "/dev/vda1      107374182400 32212254720  75161927680      30% /",
        "@@netdev",
        "  eth0:    5000      50    0    0    0     0          0         0     3000      30    0    0    0     0       0          0",
        "@@uptime",
        "93784.12 180000.00",
        "@@loadavg",
        "0.50 0.40 0.30 2/345 12345",
    ])


class RecordingSSE:
    def __init__(self):
        self.events: list[tuple[str, dict]] = []

    async def broadcast(self, event_type: str, data: dict) -> None:
        self.events.append((event_type, data))


@pytest.fixture
async def vps(runner) -> VPSManager:
    manager = VPSManager(runner_factory=lambda connection: runner)
    await manager.connect(VPSConnection(host="localhost", username="root"))
    return manager


@pytest.mark.asyncio
async def test_sample_parses_every_section(vps, runner):
    runner.on(r"@@stat", stdout=sample_output(100, 800))
    monitor = SystemMonitor(vps)

    metrics = await monitor.sample()

    assert metrics.cpu.usage == 0.0
    assert metrics.cpu.cores == 4
    assert metrics.cpu.model == "AMD EPYC 7B13"
    assert metrics.memory.usage == 25.0
    assert metrics.disk.usage == 30.0
    assert metrics.network.bytes_in == 5000
    assert metrics.uptime_seconds == 93784
    assert metrics.load_average == [0.5, 0.4, 0.3]
    assert metrics.processes == 345
    assert len(runner.commands) == 2  # connect check + one compound sample


@pytest.mark.asyncio
async def test_cpu_usage_uses_previous_sample(vps, runner):
    monitor = SystemMonitor(vps)
    runner.on(r"@@stat", stdout=sample_output(100, 800))
    await monitor.sample()
    runner.on(r"@@stat", stdout=sample_output(200, 1600))

    metrics = await monitor.sample()

    assert metrics.cpu.usage == 15.0
    assert monitor.sample_count == 2


@pytest.mark.asyncio
async def test_sample_is_broadcast_as_metrics_event(vps, runner):
    runner.on(r"@@stat", stdout=sample_output(100, 800))
    sse = RecordingSSE()
    monitor = SystemMonitor(vps, sse_manager=sse)

    await monitor.sample()

    event_type, data = sse.events[0]
    assert event_type == "metrics"
    assert data["uptime"] == "1d 2h 3m"
    assert data["memory"]["used_mb"] == 2048.0
    assert isinstance(data["sampled_at"], str)


@pytest.mark.asyncio
async def test_sample_without_output_raises(vps, runner):
    monitor = SystemMonitor(vps)
    with pytest.raises(CommandExecutionError):
        await monitor.sample()


@pytest.mark.asyncio
async def test_sample_requires_connection():
    monitor = SystemMonitor(VPSManager(runner_factory=lambda connection: None))
    with pytest.raises(VPSNotConnectedError):
        await monitor.get_metrics()


@pytest.mark.asyncio
async def test_history_is_limited_and_resettable(vps, runner):
    runner.on(r"@@stat", stdout=sample_output(100, 800))
    monitor = SystemMonitor(vps)
    for _ in range(3):
        await monitor.sample()

    assert len(monitor.history()) == 3
    assert len(monitor.history(limit=2)) == 2
    assert await monitor.get_metrics() is monitor.history()[-1]

    monitor.reset()
    assert monitor.sample_count == 0


@pytest.mark.asyncio
async def test_loop_survives_failed_samples_and_restarts(vps, runner):
    monitor = SystemMonitor(vps, interval=0.01)

    await monitor.start()
    await asyncio.sleep(0.05)
    assert monitor.is_running
    assert monitor.sample_count == 0

    runner.on(r"@@stat", stdout=sample_output(100, 800))
    await monitor.start(interval=0.02)
    await asyncio.sleep(0.05)
    assert monitor.interval == 0.02
    assert monitor.sample_count >= 1

    await monitor.stop()
    assert not monitor.is_running
