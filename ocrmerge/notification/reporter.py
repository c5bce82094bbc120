from pathlib import Path

from ocrmerge.logging.logger import Log
from ocrmerge.notification.base import BaseNotifier
from ocrmerge.notification.error_log import ErrorLogWriter
from ocrmerge.notification.exceptions import NotificationError

CORRUPT_ARCHIVE_SUBJECT = "ERROR: Corrupted Files Encountered"
OCR_FAILURE_SUBJECT = "ERROR: Documents Failed OCR"
PROCESSING_FAILURE_SUBJECT = "ERROR: Category Processing Failed"

MESSAGE_PREAMBLE = "This is an automatically generated message, please DO NOT respond. \r\n\r\n"


def corrupt_archive_message(archive_path: Path) -> str:
    return f"{archive_path} was unable to be opened. File is likely corrupted."


class ErrorReporter:
    """Surfaces a failure to an operator: email first, dated log file if that fails."""

    def __init__(self, notifier: BaseNotifier, log_writer: ErrorLogWriter) -> None:
        self._notifier = notifier
        self._log_writer = log_writer

    def report(
        self,
        source_path: Path,
        message: str,
        subject: str = CORRUPT_ARCHIVE_SUBJECT,
    ) -> None:
        try:
            self._notifier.send(subject, MESSAGE_PREAMBLE + message)
            Log.info(f"Sent notice '{subject}' for {source_path}")
        except NotificationError as exc:
            Log.warning(f"Notification failed, falling back to error log: {exc}")
            try:
                self._log_writer.write(source_path, message)
            except OSError as write_exc:
                Log.error(f"Could not write error log for {source_path}: {write_exc}")
