from datetime import datetime
from pathlib import Path

import pyzipper

from ocrmerge.config.categories import Category
from ocrmerge.logging.logger import Log
from ocrmerge.utils.fs import list_files


def archive_name(prefix: str, when: datetime) -> str:
    """Build daily archive name: '{prefix} {Mon}_{day}_{year}.zip'"""
    return f"{prefix} {when:%b}_{when.day}_{when.year}.zip"


class InputArchiver:
    """Copies the day's raw source archives into one dated zip, grouped by category."""

    def __init__(self, source_root: Path, archive_root: Path, prefix: str) -> None:
        self._source_root = source_root
        self._archive_root = archive_root
        self._prefix = prefix

    def archive(self, categories: list[Category], when: datetime | None = None) -> Path | None:
        """Returns the archive path, or None when there was nothing to archive."""
        members = [
            (source_file, f"{category.key}/{source_file.name}")
            for category in categories
            for source_file in list_files(category.source_dir(self._source_root))
        ]
        if not members:
            Log.info("No input files to archive")
            return None

        self._archive_root.mkdir(parents=True, exist_ok=True)
        target = self._archive_root / archive_name(self._prefix, when or datetime.now())
        with pyzipper.ZipFile(target, "w", compression=pyzipper.ZIP_DEFLATED) as zf:
            for source_file, arcname in members:
                zf.write(source_file, arcname)
        Log.info(f"Archived {len(members)} input files to {target}")
        return target
