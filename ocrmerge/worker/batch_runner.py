from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from ocrmerge.archive.archiver import InputArchiver
from ocrmerge.config.categories import Category, load_categories
from ocrmerge.config.settings import Settings
from ocrmerge.logging.logger import Log
from ocrmerge.notification.error_log import ErrorLogWriter
from ocrmerge.notification.reporter import ErrorReporter
from ocrmerge.notification.smtp_notifier import SmtpNotifier
from ocrmerge.processor.processor import Processor, build_processor
from ocrmerge.utils.fs import clear_directory, is_empty


@dataclass
class BatchSummary:
    delivered: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)
    archive_path: Path | None = None


class BatchRunner:
    """One scheduled run: every category in turn, then cleanup, archiving and log pruning."""

    def __init__(
        self,
        processor: Processor,
        categories: list[Category],
        archiver: InputArchiver,
        log_writer: ErrorLogWriter,
        *,
        source_root: Path,
        staging_dir: Path,
    ) -> None:
        self._processor = processor
        self._categories = categories
        self._archiver = archiver
        self._log_writer = log_writer
        self._source_root = source_root
        self._staging_dir = staging_dir

    def has_input(self) -> bool:
        return any(
            not is_empty(category.source_dir(self._source_root))
            for category in self._categories
        )

    def run(self, now: datetime | None = None) -> BatchSummary:
        """Process categories strictly one after another.

        A failure in one category is logged and the run moves on to the next.
        Returns without touching anything when no source folder has input.
        """
        summary = BatchSummary()
        if not self.has_input():
            Log.info("No input files found")
            return summary

        for category in self._categories:
            try:
                context = self._processor.process(category)
            except Exception as exc:
                Log.exception(f"Category {category.key} aborted: {exc}")
                summary.failed.append(category.key)
                continue
            if context.skipped:
                summary.skipped.append(category.key)
            else:
                summary.delivered.append(category.key)

        summary.archive_path = self._finish(now or datetime.now())
        Log.info(
            f"Run complete: delivered={summary.delivered} "
            f"skipped={summary.skipped} failed={summary.failed}"
        )
        return summary

    def _finish(self, now: datetime) -> Path | None:
        archive_path = None
        try:
            clear_directory(self._staging_dir)
        except OSError as exc:
            Log.error(f"Could not clear staging directory {self._staging_dir}: {exc}")
        try:
            archive_path = self._archiver.archive(self._categories, now)
        except OSError as exc:
            Log.error(f"Archiving input files failed: {exc}")
        try:
            self._log_writer.prune(now)
        except OSError as exc:
            Log.error(f"Pruning error logs failed: {exc}")
        return archive_path


def build_batch_runner(settings: Settings) -> BatchRunner:
    """Wire every collaborator from one Settings object."""
    log_writer = ErrorLogWriter(settings.error_log_dir, settings.error_log_retention_days)
    reporter = ErrorReporter(SmtpNotifier.from_settings(settings), log_writer)
    return BatchRunner(
        build_processor(settings, reporter),
        load_categories(settings),
        InputArchiver(settings.source_root, settings.archive_root, settings.archive_name_prefix),
        log_writer,
        source_root=settings.source_root,
        staging_dir=settings.staging_dir,
    )
