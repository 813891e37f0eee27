"""Backup session directory, session log, disk pre-flight and compression."""

from datetime import datetime
from pathlib import Path
from typing import Optional

from ..util.compression import compress_directory
from ..util.logging import add_file_handler, get_logger, remove_handler
from ..util.paths import ensure_directory, format_size, get_available_space
from ..util.timeutil import generate_session_name

logger = get_logger(__name__)

MB = 1024 * 1024


class InsufficientSpaceError(Exception):
    """Not enough free disk space to start a backup."""
    pass


def check_disk_space(path: Path, min_free_mb: int) -> int:
    """Return free space in bytes at path; raise if below min_free_mb."""
    ensure_directory(path)
    available = get_available_space(path)

    if available < min_free_mb * MB:
        raise InsufficientSpaceError(
            f"Insufficient disk space at {path}: {format_size(available)} available, "
            f"{min_free_mb} MB required"
        )

    logger.info(f"Disk space OK ({format_size(available)} available)")
    return available


class BackupSession:
    """One timestamped backup directory and its log file."""

    def __init__(self, backup_root: Path, timestamp: Optional[datetime] = None):
        self.started_at = timestamp or datetime.now()
        self.backup_root = Path(backup_root)
        self.path = self.backup_root / generate_session_name(self.started_at)
        self._log_handler = None

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def log_file(self) -> Path:
        return self.path / "backup.log"

    @property
    def summary_path(self) -> Path:
        return self.path / "summary.txt"

    @property
    def restore_guide_path(self) -> Path:
        return self.path / "restore_guide.txt"

    def open(self) -> "BackupSession":
        """Create the session directory and start writing backup.log."""
        ensure_directory(self.path)
        self._log_handler = add_file_handler(get_logger(), self.log_file)
        logger.info(f"Backup session: {self.path}")
        return self

    def close(self) -> None:
        if self._log_handler is not None:
            remove_handler(get_logger(), self._log_handler)
            self._log_handler = None

    def compress(self) -> Path:
        """Archive the session as <session>.tar.gz; the log is closed first."""
        self.close()
        return compress_directory(self.path)

    def __enter__(self) -> "BackupSession":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
