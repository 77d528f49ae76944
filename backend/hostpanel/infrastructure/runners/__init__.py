from hostpanel.config import Settings
from hostpanel.domain.entities import VPSConnection

from .local_runner import LocalCommandRunner
from .ssh_runner import SSHCommandRunner, load_private_key


def create_runner(connection: VPSConnection, settings: Settings):
    """Pick the runner for a connection: local subprocess or SSH."""
    if connection.is_local:
        return LocalCommandRunner(default_timeout=settings.command_timeout)
    return SSHCommandRunner(
        connection,
        connect_timeout=settings.ssh_connect_timeout,
        default_timeout=settings.command_timeout,
    )


__all__ = ["LocalCommandRunner", "SSHCommandRunner", "create_runner", "load_private_key"]
