from datetime import datetime, timedelta
from pathlib import Path

from ocrmerge.logging.logger import Log

ENTRY_SEPARATOR = "\n\n"


def error_log_name(source_path: Path, when: datetime) -> str:
    """Build error log file name: '{source basename} {MMddyyyy}.txt'"""
    return f"{source_path.name} {when:%m%d%Y}.txt"


class ErrorLogWriter:
    """Writes dated operator error logs and prunes expired ones."""

    def __init__(self, log_dir: Path, retention_days: int = 30) -> None:
        self._log_dir = log_dir
        self._retention = timedelta(days=retention_days)

    def write(self, source_path: Path, message: str, when: datetime | None = None) -> Path:
        """Append message to the day's log for source_path, blank-line separated."""
        when = when or datetime.now()
        self._log_dir.mkdir(parents=True, exist_ok=True)
        path = self._log_dir / error_log_name(source_path, when)
        has_entries = path.is_file() and path.stat().st_size > 0
        with path.open("a", encoding="utf-8") as log_file:
            if has_entries:
                log_file.write(ENTRY_SEPARATOR)
            log_file.write(message)
        Log.warning(f"Wrote error log {path}")
        return path

    def prune(self, now: datetime | None = None) -> int:
        """Delete logs last modified before the retention window. Returns count removed."""
        if not self._log_dir.is_dir():
            return 0
        cutoff = (now or datetime.now()) - self._retention
        removed = 0
        for entry in self._log_dir.iterdir():
            if not entry.is_file():
                continue
            if datetime.fromtimestamp(entry.stat().st_mtime) < cutoff:
                entry.unlink()
                removed += 1
        if removed:
            Log.info(f"Pruned {removed} error logs older than {self._retention.days} days")
        return removed
