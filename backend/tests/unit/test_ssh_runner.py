"""Unit tests for the SSH runner's output collection."""

import time

from hostpanel.infrastructure.runners.ssh_runner import collect_output


class ScriptedChannel:
    """Stands in for a paramiko channel that yields queued chunks."""

    def __init__(self, stdout=(), stderr=(), exits=True):
        self._stdout = list(stdout)
        self._stderr = list(stderr)
        self._exits = exits

    def recv_ready(self):
        return bool(self._stdout)

    def recv(self, size):
        return self._stdout.pop(0)

    def recv_stderr_ready(self):
        return bool(self._stderr)

    def recv_stderr(self, size):
        return self._stderr.pop(0)

    def exit_status_ready(self):
        return self._exits


def test_collects_both_streams_until_exit():
    channel = ScriptedChannel(stdout=[b"hello ", b"world"], stderr=[b"warn\n"] * 3)

    out, err = collect_output(channel, time.monotonic() + 5)

    assert out == b"hello world"
    assert err == b"warn\n" * 3


def test_deadline_bounds_a_command_that_never_exits():
    channel = ScriptedChannel(stderr=[b"still going"], exits=False)
    started = time.monotonic()

    out, err = collect_output(channel, started + 0.2)

    assert out is None
    assert err == b"still going"
    assert time.monotonic() - started < 1
