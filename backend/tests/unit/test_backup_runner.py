"""Unit tests for the tar / mysqldump commands the BackupRunner builds."""

import time
from datetime import datetime, timezone

import pytest

from hostpanel.application.services import BackupRunner
from hostpanel.domain.entities import Backup, BackupType
from hostpanel.domain.exceptions import CommandExecutionError


def make_backup(backup_type: BackupType) -> Backup:
    return Backup(
        name="nightly",
        backup_type=backup_type,
        id="0a1b2c3d-4e5f-6789-abcd-ef0123456789",
        created_at=datetime(2024, 3, 5, 2, 0, 30, tzinfo=timezone.utc),
    )


@pytest.fixture
def backup_runner(runner) -> BackupRunner:
    return BackupRunner(runner, "/var/backups/hostpanel/", "/var/www/html")


def test_archive_paths(backup_runner: BackupRunner):
    assert backup_runner.archive_path(make_backup(BackupType.FILES)) == (
        "/var/backups/hostpanel/files-20240305-020030-0a1b2c3d.tar.gz"
    )
    assert backup_runner.archive_path(make_backup(BackupType.DATABASE)).endswith("database-20240305-020030-0a1b2c3d.sql.gz")
    assert backup_runner.archive_path(make_backup(BackupType.FULL)).endswith(".tar.gz")


def test_archive_path_treats_naive_timestamps_as_utc(backup_runner: BackupRunner, monkeypatch):
    monkeypatch.setenv("TZ", "America/New_York")
    time.tzset()
    try:
        backup = make_backup(BackupType.FILES)
        backup.created_at = backup.created_at.replace(tzinfo=None)
        assert backup_runner.archive_path(backup).endswith("files-20240305-020030-0a1b2c3d.tar.gz")
    finally:
        monkeypatch.undo()
        time.tzset()


def test_files_command(backup_runner: BackupRunner):
    command = backup_runner.build_command(make_backup(BackupType.FILES))
    assert command == (
        "mkdir -p /var/backups/hostpanel && "
        "tar -czf /var/backups/hostpanel/files-20240305-020030-0a1b2c3d.tar.gz -C /var/www/html ."
    )


def test_database_command_dumps_then_compresses(backup_runner: BackupRunner):
    command = backup_runner.build_command(make_backup(BackupType.DATABASE))
    assert "mysqldump --all-databases --single-transaction --routines --events > " in command
    assert command.endswith("gzip -f /var/backups/hostpanel/database-20240305-020030-0a1b2c3d.sql")


def test_full_command_cleans_up_staging(backup_runner: BackupRunner):
    command = backup_runner.build_command(make_backup(BackupType.FULL))
    stage = "/var/backups/hostpanel/.stage-0a1b2c3d-4e5f-6789-abcd-ef0123456789"
    assert f"tar -czf {stage}/files.tar.gz -C /var/www/html ." in command
    assert f"> {stage}/databases.sql" in command
    assert command.endswith(f"; status=$?; rm -rf {stage}; exit $status")


def test_web_root_is_quoted(runner):
    command = BackupRunner(runner, "/backups", "/srv/my site").build_command(make_backup(BackupType.FILES))
    assert "-C '/srv/my site' ." in command


@pytest.mark.asyncio
async def test_run_returns_path_and_size(backup_runner: BackupRunner, runner):
    runner.on(r"^stat -c %s ", stdout="1048576\n")

    path, size = await backup_runner.run(make_backup(BackupType.FILES))

    assert path.endswith("files-20240305-020030-0a1b2c3d.tar.gz")
    assert size == 1048576
    assert runner.timeouts[0] == 3600


@pytest.mark.asyncio
async def test_run_raises_on_failure(backup_runner: BackupRunner, runner):
    runner.on(r"mysqldump", exit_code=2, stderr="mysqldump: Got error: 1045")

    with pytest.raises(CommandExecutionError) as exc:
        await backup_runner.run(make_backup(BackupType.DATABASE))
    assert exc.value.exit_code == 2
    assert not any(c.startswith("stat") for c in runner.commands)
