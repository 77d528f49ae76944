"""Parsers for the raw ``/proc`` and coreutils output sampled from a Linux host.

All functions are pure; the system monitor feeds them sections of a single
compound command so one round-trip yields a full sample.
"""

SECTION_MARKER = "@@"

# Section name → shell snippet. Order is preserved in the compound command.
SAMPLE_SECTIONS: dict[str, str] = {
    "stat": "head -n1 /proc/stat",
    "nproc": "nproc",
    "cpumodel": "grep -m1 'model name' /proc/cpuinfo",
    "free": "free -b",
    "df": "df -PB1 /",
    "netdev": "cat /proc/net/dev",
    "uptime": "cat /proc/uptime",
    "loadavg": "cat /proc/loadavg",
}

_MB = 1024 * 1024


def build_sample_command() -> str:
    parts = [f"echo '{SECTION_MARKER}{name}'; {cmd}" for name, cmd in SAMPLE_SECTIONS.items()]
    return "; ".join(parts)


def split_sections(output: str) -> dict[str, str]:
    """Split compound command output on ``@@name`` marker lines."""
    sections: dict[str, list[str]] = {}
    current: list[str] | None = None
    for line in output.splitlines():
        stripped = line.strip()
        if stripped.startswith(SECTION_MARKER) and stripped[len(SECTION_MARKER):] in SAMPLE_SECTIONS:
            current = sections.setdefault(stripped[len(SECTION_MARKER):], [])
        elif current is not None:
            current.append(line)
    return {name: "\n".join(lines) for name, lines in sections.items()}


def parse_cpu_times(line: str) -> tuple[int, int]:
    """Return ``(idle, total)`` jiffies from the aggregate ``cpu`` line of /proc/stat.

    idle includes iowait so that waiting on disk is not reported as load.
    """
    fields = line.split()
    if not fields or fields[0] != "cpu":
        raise ValueError(f"Not an aggregate cpu line: {line!r}")
    values = [int(v) for v in fields[1:11]]
    idle = values[3] + (values[4] if len(values) > 4 else 0)
    return idle, sum(values)


def cpu_usage(previous: tuple[int, int] | None, current: tuple[int, int]) -> float:
    """Percentage of non-idle time between two samples, 0.0 without history."""
    if previous is None:
        return 0.0
    d_idle = current[0] - previous[0]
    d_total = current[1] - previous[1]
    if d_total <= 0:
        return 0.0
    return round(max(0.0, min(100.0, 100.0 * (1 - d_idle / d_total))), 1)


def _usage(total: int, used: int) -> tuple[float, float, float, float]:
    free = max(total - used, 0)
    usage = round(100.0 * used / total, 1) if total else 0.0
    return round(total / _MB, 1), round(used / _MB, 1), round(free / _MB, 1), usage


def parse_free(text: str) -> tuple[float, float, float, float]:
    """Parse ``free -b``; returns (total_mb, used_mb, free_mb, usage%).

    Used memory is total minus *available*, matching what ``free`` users
    read as real pressure rather than counting page cache.
    """
    for line in text.splitlines():
        if line.startswith("Mem:"):
            fields = line.split()
            total = int(fields[1])
            available = int(fields[6]) if len(fields) > 6 else int(fields[3])
            return _usage(total, total - available)
    raise ValueError("No 'Mem:' line in free output")


def parse_df(text: str) -> tuple[float, float, float, float]:
    """Parse POSIX ``df -PB1 /`` output for the root filesystem."""
    lines = [ln for ln in text.splitlines() if ln.strip()]
    if len(lines) < 2:
        raise ValueError("Unexpected df output")
    fields = lines[-1].split()
    total, used = int(fields[1]), int(fields[2])
    return _usage(total, used)


def parse_net_dev(text: str) -> tuple[int, int, int, int]:
    """Sum (bytes_in, bytes_out, packets_in, packets_out) over all non-loopback interfaces."""
    bytes_in = bytes_out = packets_in = packets_out = 0
    for line in text.splitlines():
        if ":" not in line:
            continue
        iface, _, data = line.partition(":")
        if iface.strip() == "lo":
            continue
        fields = data.split()
        if len(fields) < 10:
            continue
        bytes_in += int(fields[0])
        packets_in += int(fields[1])
        bytes_out += int(fields[8])
        packets_out += int(fields[9])
    return bytes_in, bytes_out, packets_in, packets_out


def parse_uptime(text: str) -> int:
    return int(float(text.split()[0]))


def parse_loadavg(text: str) -> tuple[list[float], int]:
    """Return the three load averages and the total process count."""
    fields = text.split()
    loads = [float(v) for v in fields[:3]]
    processes = int(fields[3].split("/")[1]) if len(fields) > 3 and "/" in fields[3] else 0
    return loads, processes


def parse_cpu_model(text: str) -> str:
    _, _, model = text.partition(":")
    return model.strip()


def format_uptime(seconds: int) -> str:
    days = seconds // 86400
    hours = (seconds % 86400) // 3600
    minutes = (seconds % 3600) // 60

    if days > 0:
        return f"{days}d {hours}h {minutes}m"
    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"
