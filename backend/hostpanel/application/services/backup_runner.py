"""Backup runner: produces archive files on the managed host."""

import shlex
from datetime import datetime, timezone

from hostpanel.application.interfaces.command_runner import CommandRunner
from hostpanel.domain.entities import Backup, BackupType
from hostpanel.domain.exceptions import CommandExecutionError
from hostpanel.infrastructure.logging.colored_logger import PipelineLogger, PipelineStage

DUMP = "mysqldump --all-databases --single-transaction --routines --events"


class BackupRunner:
    """Builds and runs the tar / mysqldump commands for one backup.

    files     tar of the web root
    database  gzip'd dump of every database
    full      both, bundled into one tar.gz
    """

    def __init__(
        self,
        runner: CommandRunner,
        backup_dir: str,
        web_root: str,
        timeout: float = 3600,
    ) -> None:
        self._runner = runner
        self._backup_dir = backup_dir.rstrip("/")
        self._web_root = web_root
        self._timeout = timeout
        self._log = PipelineLogger("BackupRunner")

    def archive_path(self, backup: Backup) -> str:
        created_at = backup.created_at
        # SQLite drops tzinfo on round-trip; stored values are UTC
        if created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=timezone.utc)
        stamp = created_at.astimezone(timezone.utc).strftime("%Y%m%d-%H%M%S")
        suffix = "sql.gz" if backup.backup_type == BackupType.DATABASE else "tar.gz"
        return f"{self._backup_dir}/{backup.backup_type.value}-{stamp}-{backup.id[:8]}.{suffix}"

    def build_command(self, backup: Backup) -> str:
        target = shlex.quote(self.archive_path(backup))
        web_root = shlex.quote(self._web_root)
        mkdir = f"mkdir -p {shlex.quote(self._backup_dir)}"

        if backup.backup_type == BackupType.FILES:
            return f"{mkdir} && tar -czf {target} -C {web_root} ."

        if backup.backup_type == BackupType.DATABASE:
            raw = shlex.quote(self.archive_path(backup).removesuffix(".gz"))
            return f"{mkdir} && {DUMP} > {raw} && gzip -f {raw}"

        stage = shlex.quote(f"{self._backup_dir}/.stage-{backup.id}")
        return (
            f"{mkdir} && mkdir -p {stage}"
            f" && tar -czf {stage}/files.tar.gz -C {web_root} ."
            f" && {DUMP} > {stage}/databases.sql"
            f" && tar -czf {target} -C {stage} ."
            f"; status=$?; rm -rf {stage}; exit $status"
        )

    async def run(self, backup: Backup) -> tuple[str, int]:
        """Create the archive; returns (path, size in bytes)."""
        path = self.archive_path(backup)
        command = self.build_command(backup)

        started = datetime.now(timezone.utc)
        with self._log.timed_step(PipelineStage.BACKUP, f"{backup.name} → {path}"):
            result = await self._runner.run(command, timeout=self._timeout)
            if not result.ok:
                raise CommandExecutionError(command, result.exit_code, result.stderr)

            size_result = await self._runner.run(f"stat -c %s {shlex.quote(path)}", timeout=30)
            size = int(size_result.stdout.strip()) if size_result.ok and size_result.stdout.strip().isdigit() else 0

        self._log.stats(size_bytes=size, seconds=round((datetime.now(timezone.utc) - started).total_seconds(), 1))
        return path, size
