import os
import shutil
import tempfile
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from pathlib import Path, PurePosixPath

import pyzipper

from ocrmerge.archive.exceptions import CorruptArchiveError
from ocrmerge.archive.models import ExtractionReport
from ocrmerge.logging.logger import Log
from ocrmerge.notification.reporter import ErrorReporter, corrupt_archive_message
from ocrmerge.utils.fs import list_files

PDF_SUFFIX = ".pdf"


def is_pdf_entry(info: pyzipper.ZipInfo) -> bool:
    return not info.is_dir() and info.filename.lower().endswith(PDF_SUFFIX)


class ArchiveExtractor:
    """Flattens the PDF entries of every archive in a source folder into staging."""

    def __init__(
        self,
        reporter: ErrorReporter,
        *,
        password: str = "",
        max_workers: int = 4,
        timeout_seconds: float | None = 300,
    ) -> None:
        self._reporter = reporter
        self._password = password.encode() if password else None
        self._max_workers = max(1, max_workers)
        self._timeout_seconds = timeout_seconds

    def extract(self, source_dir: Path, staging_dir: Path) -> ExtractionReport:
        """Extract all archives concurrently. A corrupt archive is reported, never raised.

        Returns only after every worker has stopped, so nothing lands in
        staging_dir once this call is over.
        """
        staging_dir.mkdir(parents=True, exist_ok=True)
        report = ExtractionReport()
        archives = list_files(source_dir)
        if not archives:
            Log.info(f"No archives in {source_dir}")
            return report

        staged: set[Path] = set()
        with ThreadPoolExecutor(
            max_workers=self._max_workers, thread_name_prefix="extract"
        ) as executor:
            jobs = []
            for archive in archives:
                cancel = threading.Event()
                future = executor.submit(self.extract_archive, archive, staging_dir, cancel)
                jobs.append((archive, cancel, future))
            for archive, cancel, future in jobs:
                try:
                    staged.update(future.result(timeout=self._timeout_seconds))
                except FutureTimeoutError:
                    cancel.set()
                    self._discard(future)
                    self._handle_corrupt(
                        archive,
                        CorruptArchiveError(
                            f"extraction timed out after {self._timeout_seconds}s"
                        ),
                        report,
                    )
                except CorruptArchiveError as exc:
                    self._handle_corrupt(archive, exc, report)

        report.staged = sorted(staged, key=lambda path: path.name)
        Log.info(
            f"Extracted {len(report.staged)} PDFs from {len(archives)} archives "
            f"in {source_dir} ({len(report.corrupt)} corrupt)"
        )
        return report

    def extract_archive(
        self,
        archive: Path,
        staging_dir: Path,
        cancel: threading.Event | None = None,
    ) -> list[Path]:
        """Write each PDF entry of one archive to staging_dir under its leaf name.

        Entries are written to a private temp directory first and moved into
        staging_dir only once the whole archive has been read. Setting cancel
        stops the work before the next entry and before the final move.

        Raises:
            CorruptArchiveError: if the archive cannot be opened, an entry cannot
                be read, or the work was cancelled. Nothing is left in staging_dir.
        """
        cancel = cancel or threading.Event()
        work_dir = Path(tempfile.mkdtemp(prefix=".extract-", dir=staging_dir))
        moved: list[Path] = []
        try:
            names: list[str] = []
            with pyzipper.AESZipFile(archive) as zf:
                if self._password:
                    zf.setpassword(self._password)
                for info in zf.infolist():
                    if not is_pdf_entry(info):
                        continue
                    _raise_if_cancelled(cancel, archive)
                    name = PurePosixPath(info.filename.replace("\\", "/")).name
                    with zf.open(info) as src:
                        _raise_if_cancelled(cancel, archive)
                        with (work_dir / name).open("wb") as dst:
                            shutil.copyfileobj(src, dst)
                    if name not in names:
                        names.append(name)

            _raise_if_cancelled(cancel, archive)
            for name in names:
                target = staging_dir / name
                os.replace(work_dir / name, target)
                moved.append(target)
        except CorruptArchiveError:
            _unlink_all(moved)
            raise
        except Exception as exc:
            _unlink_all(moved)
            raise CorruptArchiveError(f"{archive}: {exc}") from exc
        finally:
            shutil.rmtree(work_dir, ignore_errors=True)
        Log.debug(f"{archive.name}: {len(moved)} PDF entries")
        return moved

    def _discard(self, future: Future[list[Path]]) -> None:
        """Wait for a cancelled worker to stop and remove anything it still staged."""
        try:
            leftovers = future.result()
        except CorruptArchiveError:
            return
        _unlink_all(leftovers)

    def _handle_corrupt(
        self, archive: Path, exc: CorruptArchiveError, report: ExtractionReport
    ) -> None:
        Log.error(f"Corrupt archive {archive}: {exc}")
        report.corrupt.append(archive)
        self._reporter.report(archive, corrupt_archive_message(archive))


def _raise_if_cancelled(cancel: threading.Event, archive: Path) -> None:
    if cancel.is_set():
        raise CorruptArchiveError(f"{archive}: extraction cancelled")


def _unlink_all(paths: list[Path]) -> None:
    for path in paths:
        path.unlink(missing_ok=True)
