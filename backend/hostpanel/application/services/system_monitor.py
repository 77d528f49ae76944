"""System monitor: periodic telemetry sampling of the connected server.

Each sample is a single compound command whose sections are parsed by the
pure functions in :mod:`hostpanel.domain.metrics_parser`. Samples are kept
in a bounded history and broadcast to SSE clients as ``metrics`` events.
"""

import asyncio
import logging
from collections import deque
from dataclasses import asdict

from hostpanel.application.services.sse_manager import SSEManager
from hostpanel.application.services.vps_manager import VPSManager
from hostpanel.domain import metrics_parser as mp
from hostpanel.domain.entities import CpuMetrics, NetworkMetrics, ServiceStatus, SystemMetrics, UsageMetrics
from hostpanel.domain.exceptions import CommandExecutionError

logger = logging.getLogger(__name__)

HISTORY_SIZE = 720


def metrics_to_dict(metrics: SystemMetrics) -> dict:
    data = asdict(metrics)
    data["sampled_at"] = metrics.sampled_at.isoformat()
    data["uptime"] = mp.format_uptime(metrics.uptime_seconds)
    return data


class SystemMonitor:

    def __init__(
        self,
        vps_manager: VPSManager,
        interval: float = 5,
        sse_manager: SSEManager | None = None,
    ) -> None:
        self._vps = vps_manager
        self._interval = interval
        self._sse = sse_manager
        self._history: deque[SystemMetrics] = deque(maxlen=HISTORY_SIZE)
        self._previous_cpu: tuple[int, int] | None = None
        self._task: asyncio.Task | None = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def sample_count(self) -> int:
        return len(self._history)

    async def start(self, interval: float | None = None) -> None:
        """Start sampling (restarting if already running) every ``interval`` seconds."""
        if interval is not None:
            self._interval = interval
        await self.stop()
        self._task = asyncio.create_task(self._loop())
        logger.info("System monitor started (interval=%ss)", self._interval)

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.info("System monitor stopped")

    async def _loop(self) -> None:
        while True:
            try:
                await self.sample()
            except asyncio.CancelledError:
                raise
            except Exception as exc:
                logger.warning("Metrics sample failed: %s", exc)
            await asyncio.sleep(self._interval)

    async def sample(self) -> SystemMetrics:
        """Collect one sample, append it to history and broadcast it."""
        result = await self._vps.execute(mp.build_sample_command())
        sections = mp.split_sections(result.stdout)
        if "stat" not in sections:
            raise CommandExecutionError(result.command, result.exit_code, result.stderr)

        cpu_times = mp.parse_cpu_times(sections["stat"].strip().splitlines()[0])
        usage = mp.cpu_usage(self._previous_cpu, cpu_times)
        self._previous_cpu = cpu_times

        nproc = sections.get("nproc", "").strip()
        loads, processes = mp.parse_loadavg(sections.get("loadavg", "0 0 0"))
        b_in, b_out, p_in, p_out = mp.parse_net_dev(sections.get("netdev", ""))

        metrics = SystemMetrics(
            cpu=CpuMetrics(
                usage=usage,
                cores=int(nproc) if nproc.isdigit() else 1,
                model=mp.parse_cpu_model(sections.get("cpumodel", "")),
            ),
            memory=UsageMetrics(*mp.parse_free(sections.get("free", ""))),
            disk=UsageMetrics(*mp.parse_df(sections.get("df", ""))),
            network=NetworkMetrics(bytes_in=b_in, bytes_out=b_out, packets_in=p_in, packets_out=p_out),
            uptime_seconds=mp.parse_uptime(sections.get("uptime", "0")),
            load_average=loads,
            processes=processes,
        )

        self._history.append(metrics)
        if self._sse is not None:
            await self._sse.broadcast("metrics", metrics_to_dict(metrics))
        return metrics

    async def get_metrics(self) -> SystemMetrics:
        """Latest sample, sampling on demand when nothing is recorded yet."""
        if self._history:
            return self._history[-1]
        return await self.sample()

    async def get_services(self) -> list[ServiceStatus]:
        return await self._vps.get_services()

    def history(self, limit: int | None = None) -> list[SystemMetrics]:
        items = list(self._history)
        if limit is not None and limit > 0:
            return items[-limit:]
        return items

    def reset(self) -> None:
        """Drop history and the CPU baseline, e.g. after switching servers."""
        self._history.clear()
        self._previous_cpu = None
