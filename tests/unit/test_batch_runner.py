from datetime import datetime
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from ocrmerge.config.categories import Category
from ocrmerge.processor.pipeline import CategoryContext
from ocrmerge.worker.batch_runner import BatchRunner

CATEGORIES = [
    Category("Aloha", "Aloha Trust", "aloha"),
    Category("Premier", "CCSAPB", "CCSAPB"),
    Category("Radio", "Clear Channel", "iheart"),
]
NOW = datetime(2024, 3, 5, 6, 0)


@pytest.fixture()
def source_root(tmp_path: Path) -> Path:
    root = tmp_path / "src"
    for category in CATEGORIES:
        category.source_dir(root).mkdir(parents=True)
    return root


def _runner(
    tmp_path: Path, source_root: Path, processor: MagicMock
) -> tuple[BatchRunner, MagicMock, MagicMock]:
    archiver = MagicMock()
    archiver.archive.return_value = tmp_path / "archive.zip"
    log_writer = MagicMock()
    runner = BatchRunner(
        processor,
        CATEGORIES,
        archiver,
        log_writer,
        source_root=source_root,
        staging_dir=tmp_path / "staging",
    )
    return runner, archiver, log_writer


class TestBatchRunner:
    def test_no_input_does_nothing(self, tmp_path: Path, source_root: Path) -> None:
        processor = MagicMock()
        runner, archiver, log_writer = _runner(tmp_path, source_root, processor)

        summary = runner.run(NOW)

        assert not runner.has_input()
        assert summary.delivered == summary.skipped == summary.failed == []
        processor.process.assert_not_called()
        archiver.archive.assert_not_called()
        log_writer.prune.assert_not_called()

    def test_one_failing_category_does_not_stop_the_rest(
        self, tmp_path: Path, source_root: Path
    ) -> None:
        (source_root / "Clear Channel" / "batch.zip").write_bytes(b"zip")
        processed: list[str] = []

        def process(category: Category) -> CategoryContext:
            processed.append(category.key)
            context = CategoryContext(category=category)
            if category.key == "Aloha":
                context.skip("no PDF documents staged")
            if category.key == "Premier":
                raise RuntimeError("disk full")
            return context

        processor = MagicMock()
        processor.process.side_effect = process
        runner, archiver, log_writer = _runner(tmp_path, source_root, processor)

        summary = runner.run(NOW)

        assert processed == ["Aloha", "Premier", "Radio"]
        assert summary.delivered == ["Radio"]
        assert summary.skipped == ["Aloha"]
        assert summary.failed == ["Premier"]
        assert summary.archive_path == tmp_path / "archive.zip"
        archiver.archive.assert_called_once_with(CATEGORIES, NOW)
        log_writer.prune.assert_called_once_with(NOW)

    def test_staging_cleared_after_run(self, tmp_path: Path, source_root: Path) -> None:
        (source_root / "Aloha Trust" / "batch.zip").write_bytes(b"zip")
        staging = tmp_path / "staging"
        staging.mkdir()
        (staging / "leftover.pdf").write_bytes(b"x")
        processor = MagicMock()
        processor.process.side_effect = lambda category: CategoryContext(category=category)
        runner, _, _ = _runner(tmp_path, source_root, processor)

        runner.run(NOW)

        assert list(staging.iterdir()) == []

    def test_cleanup_errors_are_logged_not_raised(
        self, tmp_path: Path, source_root: Path
    ) -> None:
        (source_root / "Aloha Trust" / "batch.zip").write_bytes(b"zip")
        processor = MagicMock()
        processor.process.side_effect = lambda category: CategoryContext(category=category)
        runner, archiver, log_writer = _runner(tmp_path, source_root, processor)
        archiver.archive.side_effect = OSError("archive volume offline")

        summary = runner.run(NOW)

        assert summary.archive_path is None
        log_writer.prune.assert_called_once_with(NOW)
