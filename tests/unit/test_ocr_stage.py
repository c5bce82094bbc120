from collections.abc import Callable
from pathlib import Path

import pymupdf
import pytest
from conftest import LANDSCAPE, PORTRAIT, FakeOcrEngine

from ocrmerge.config.categories import Category, Orientation
from ocrmerge.pdf.annotator import SENTINEL, PdfAnnotator
from ocrmerge.pdf.pdfplumber_adapter import PdfPlumberAdapter
from ocrmerge.processor.ocr_stage import OcrStage

RADIO = Category("Radio", "Clear Channel", "iheart")
PREMIER_LANDSCAPE = Category("PremierLandscape", "CCSAPBL", "CCSAPBL", Orientation.LANDSCAPE)


@pytest.fixture()
def stage(
    tmp_path: Path, fake_engine_factory: Callable[[], FakeOcrEngine]
) -> OcrStage:
    return OcrStage(
        fake_engine_factory,
        PdfAnnotator(),
        working_dir=tmp_path / "ocr",
        max_workers=4,
        dpi=50,
    )


class TestOcrStage:
    def test_indexes_and_annotates_every_document(
        self, stage: OcrStage, write_pdf: Callable[..., Path]
    ) -> None:
        paths = [write_pdf("a.pdf", 3), write_pdf("b.pdf", 1), write_pdf("c.pdf", 2)]

        result = stage.run(paths, RADIO)

        assert [path.name for path, _ in result.index.ordered()] == ["b.pdf", "c.pdf", "a.pdf"]
        assert result.failures == []
        assert [doc.path.name for doc in result.documents] == ["a.pdf", "b.pdf", "c.pdf"]
        assert all(doc.address_text == "JOHN DOE\n1 MAIN ST" for doc in result.documents)
        assert all(doc.orientation_normalized for doc in result.documents)
        for path in paths:
            first_page = PdfPlumberAdapter().extract_pages(path.read_bytes())[0]
            assert SENTINEL in first_page

    def test_failing_document_is_isolated(
        self, stage: OcrStage, write_pdf: Callable[..., Path]
    ) -> None:
        good = write_pdf("good.pdf", 2)
        broken = good.parent / "broken.pdf"
        broken.write_bytes(b"this is not a pdf")

        result = stage.run([broken, good], RADIO)

        assert result.index.ordered() == [(good, 2)]
        assert [failure.path for failure in result.failures] == [broken]
        assert "broken.pdf" in result.failures[0].error
        assert broken.read_bytes() == b"this is not a pdf"

    def test_rotation_follows_category_orientation(
        self, stage: OcrStage, write_pdf: Callable[..., Path]
    ) -> None:
        portrait = write_pdf("p.pdf", 1, pagesize=PORTRAIT)
        landscape = write_pdf("l.pdf", 2, pagesize=LANDSCAPE)

        result = stage.run([portrait, landscape], PREMIER_LANDSCAPE)

        rotated = {doc.path.name: doc.rotated_pages for doc in result.documents}
        assert rotated == {"l.pdf": (), "p.pdf": (0,)}
        with pymupdf.open(portrait) as doc:
            assert doc[0].rotation == 90

    def test_pool_sized_to_workload_and_stopped(
        self,
        stage: OcrStage,
        write_pdf: Callable[..., Path],
        fake_engines: list[FakeOcrEngine],
    ) -> None:
        stage.run([write_pdf("a.pdf"), write_pdf("b.pdf")], RADIO)

        assert len(fake_engines) == 2
        assert all(engine.stopped for engine in fake_engines)
        assert not any(engine.overlapped for engine in fake_engines)

    def test_working_dir_cleared_before_run(
        self, tmp_path: Path, stage: OcrStage, write_pdf: Callable[..., Path]
    ) -> None:
        leftover = tmp_path / "ocr" / "stale.tmp"
        leftover.parent.mkdir(parents=True)
        leftover.write_text("old")

        stage.run([write_pdf("a.pdf")], RADIO)

        assert not leftover.exists()

    def test_no_documents(
        self, stage: OcrStage, fake_engines: list[FakeOcrEngine]
    ) -> None:
        result = stage.run([], RADIO)

        assert len(result.index) == 0
        assert fake_engines == []
