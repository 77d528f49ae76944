"""Command runner for a remote server reached over SSH with paramiko.

paramiko is blocking, so every call is pushed onto a worker thread with
``asyncio.to_thread``. The client is connected lazily on the first command
and reused until :meth:`close`.
"""

import asyncio
import io
import logging
import threading
import time

import paramiko

from hostpanel.application.interfaces.command_runner import TIMEOUT_EXIT_CODE, CommandRunner
from hostpanel.domain.entities import CommandResult, VPSConnection

logger = logging.getLogger(__name__)

_KEY_TYPES = (paramiko.RSAKey, paramiko.Ed25519Key, paramiko.ECDSAKey)
_POLL_INTERVAL = 0.05
_CHUNK_SIZE = 32768


def load_private_key(key_text: str) -> paramiko.PKey:
    """Parse a PEM/OpenSSH private key, trying RSA, Ed25519 then ECDSA."""
    last_error: Exception | None = None
    for key_type in _KEY_TYPES:
        try:
            return key_type.from_private_key(io.StringIO(key_text))
        except paramiko.SSHException as exc:
            last_error = exc
    raise paramiko.SSHException(f"Unsupported private key format: {last_error}")


def collect_output(channel: paramiko.Channel, deadline: float) -> tuple[bytes | None, bytes]:
    """Drain stdout and stderr together until the command exits.

    Returns ``(None, stderr)`` once ``deadline`` (a ``time.monotonic`` value)
    passes with the command still running.
    """
    out, err = bytearray(), bytearray()
    while True:
        progressed = False
        while channel.recv_ready():
            out += channel.recv(_CHUNK_SIZE)
            progressed = True
        while channel.recv_stderr_ready():
            err += channel.recv_stderr(_CHUNK_SIZE)
            progressed = True
        if channel.exit_status_ready() and not channel.recv_ready() and not channel.recv_stderr_ready():
            return bytes(out), bytes(err)
        if time.monotonic() >= deadline:
            return None, bytes(err)
        if not progressed:
            time.sleep(_POLL_INTERVAL)


class SSHCommandRunner(CommandRunner):

    def __init__(
        self,
        connection: VPSConnection,
        connect_timeout: float = 10,
        default_timeout: float = 300,
    ) -> None:
        if not (connection.password or connection.private_key):
            raise ValueError("SSH connection requires a password or a private key")
        self._connection = connection
        self._connect_timeout = connect_timeout
        self._default_timeout = default_timeout
        self._client: paramiko.SSHClient | None = None
        self._lock = threading.Lock()

    def _ensure_client(self) -> paramiko.SSHClient:
        with self._lock:
            if self._client is not None:
                return self._client

            conn = self._connection
            client = paramiko.SSHClient()
            client.set_missing_host_key_policy(paramiko.AutoAddPolicy())
            kwargs: dict = {
                "hostname": conn.host,
                "port": conn.port,
                "username": conn.username,
                "timeout": self._connect_timeout,
                "look_for_keys": False,
                "allow_agent": False,
            }
            if conn.private_key:
                kwargs["pkey"] = load_private_key(conn.private_key)
            else:
                kwargs["password"] = conn.password

            logger.info("Opening SSH session to %s@%s:%d", conn.username, conn.host, conn.port)
            client.connect(**kwargs)
            self._client = client
            return client

    def _run_blocking(self, command: str, timeout: float) -> CommandResult:
        start = time.monotonic()
        client = self._ensure_client()
        logger.debug("ssh $ %s", command)

        channel = client.get_transport().open_session()
        channel.exec_command(command)
        out, err = collect_output(channel, start + timeout)
        if out is None:
            channel.close()
            logger.warning("Remote command timed out after %ss: %s", timeout, command)
            return CommandResult(
                command=command,
                exit_code=TIMEOUT_EXIT_CODE,
                stderr=f"timed out after {timeout:g}s",
                duration=time.monotonic() - start,
            )

        exit_code = channel.recv_exit_status()
        channel.close()
        return CommandResult(
            command=command,
            exit_code=exit_code,
            stdout=out.decode("utf-8", errors="replace"),
            stderr=err.decode("utf-8", errors="replace"),
            duration=time.monotonic() - start,
        )

    async def run(self, command: str, timeout: float | None = None) -> CommandResult:
        return await asyncio.to_thread(self._run_blocking, command, timeout or self._default_timeout)

    async def close(self) -> None:
        with self._lock:
            client, self._client = self._client, None
        if client is not None:
            await asyncio.to_thread(client.close)
            logger.info("SSH session to %s closed", self._connection.host)
