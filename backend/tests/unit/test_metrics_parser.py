"""Unit tests for the /proc and coreutils output parsers."""

import pytest

from hostpanel.domain import metrics_parser as mp

FREE_OUTPUT = """\
               total        used        free      shared  buff/cache   available
Mem:      8589934592  1073741824  4294967296           0  3221225472  6442450944
Swap:              0           0           0
"""

DF_OUTPUT = """\
Filesystem         1-blocks        Used    Available Capacity Mounted on
/dev/vda1      107374182400 32212254720  75161927680      30% /
"""

NET_DEV_OUTPUT = """\
Inter-|   Receive                                                |  Transmit
 face |bytes    packets errs drop fifo frame compressed multicast|bytes    packets errs drop fifo colls carrier compressed
    lo:    1000      10    0    0    0     0          0         0     1000      10    0    0    0     0       0          0
  eth0:    5000      50    0    0    0     0          0         0     3000      30    0    0    0     0       0          0
  eth1:     200       2    0    0    0     0          0         0      100       1    0    0    0     0       0          0
"""


def test_cpu_times_counts_iowait_as_idle():
    idle, total = mp.parse_cpu_times("cpu  100 0 50 800 50 0 0 0 0 0")
    assert idle == 850
    assert total == 1000


def test_cpu_times_rejects_per_core_line():
    with pytest.raises(ValueError):
        mp.parse_cpu_times("cpu0 100 0 50 800 50 0 0 0 0 0")


def test_cpu_usage_is_zero_without_history():
    assert mp.cpu_usage(None, (850, 1000)) == 0.0


def test_cpu_usage_from_delta():
    assert mp.cpu_usage((850, 1000), (1700, 2000)) == 15.0


def test_cpu_usage_with_no_elapsed_time():
    assert mp.cpu_usage((850, 1000), (850, 1000)) == 0.0


def test_parse_free_uses_available_memory():
    total, used, free, usage = mp.parse_free(FREE_OUTPUT)
    assert total == 8192.0
    assert used == 2048.0
    assert free == 6144.0
    assert usage == 25.0


def test_parse_free_without_mem_line():
    with pytest.raises(ValueError):
        mp.parse_free("garbage")


def test_parse_df():
    total, used, free, usage = mp.parse_df(DF_OUTPUT)
    assert total == 102400.0
    assert used == 30720.0
    assert free == 71680.0
    assert usage == 30.0


def test_parse_net_dev_skips_loopback():
    assert mp.parse_net_dev(NET_DEV_OUTPUT) == (5200, 3100, 52, 31)


def test_parse_loadavg():
    loads, processes = mp.parse_loadavg("0.50 0.40 0.30 2/345 12345")
    assert loads == [0.5, 0.4, 0.3]
    assert processes == 345


def test_parse_uptime_and_cpu_model():
    assert mp.parse_uptime("93784.12 180000.00") == 93784
    assert mp.parse_cpu_model("model name\t: Intel(R) Xeon(R) CPU") == "Intel(R) Xeon(R) CPU"


@pytest.mark.parametrize(
    "seconds, expected",
    [(59, "0m"), (3600, "1h 0m"), (3720, "1h 2m"), (93784, "1d 2h 3m")],
)
def test_format_uptime(seconds, expected):
    assert mp.format_uptime(seconds) == expected


def test_split_sections_round_trip_through_markers():
    command = mp.build_sample_command()
    assert "echo '@@stat'; head -n1 /proc/stat" in command
    output = "@@stat\ncpu  1 2 3 4\n@@nproc\n4\n@@unknown\nignored\n"
    sections = mp.split_sections(output)
    assert sections["stat"] == "cpu  1 2 3 4"
    assert sections["nproc"] == "4\n@@unknown\nignored"
