from collections.abc import Callable
from pathlib import Path

import pymupdf
import pytest
from conftest import LANDSCAPE, PORTRAIT

from ocrmerge.config.categories import Orientation
from ocrmerge.pdf.annotator import SENTINEL, PdfAnnotator, needs_rotation
from ocrmerge.pdf.exceptions import AnnotationError
from ocrmerge.pdf.pdfplumber_adapter import PdfPlumberAdapter


def _rotations(path: Path) -> list[int]:
    with pymupdf.open(path) as doc:
        return [page.rotation for page in doc]


class TestNeedsRotation:
    @pytest.mark.parametrize(
        ("width", "height", "orientation", "expected"),
        [
            (612, 792, Orientation.PORTRAIT, False),
            (792, 612, Orientation.PORTRAIT, True),
            (612, 792, Orientation.LANDSCAPE, True),
            (792, 612, Orientation.LANDSCAPE, False),
            (600, 600, Orientation.PORTRAIT, False),
            (600, 600, Orientation.LANDSCAPE, True),
        ],
    )
    def test_orientation_mismatch(
        self, width: float, height: float, orientation: Orientation, expected: bool
    ) -> None:
        assert needs_rotation(width, height, orientation) is expected


class TestAnnotate:
    def test_landscape_pages_turned_for_portrait_category(
        self, write_pdf: Callable[..., Path]
    ) -> None:
        path = write_pdf("wide.pdf", pages=2, pagesize=LANDSCAPE)

        result = PdfAnnotator().annotate(path, "JOHN DOE", Orientation.PORTRAIT)

        assert result.page_count == 2
        assert result.rotated_pages == (0, 1)
        assert _rotations(path) == [90, 90]

    def test_portrait_pages_turned_for_landscape_category(
        self, write_pdf: Callable[..., Path]
    ) -> None:
        path = write_pdf("tall.pdf", pages=1, pagesize=PORTRAIT)

        result = PdfAnnotator().annotate(path, "JOHN DOE", Orientation.LANDSCAPE)

        assert result.rotated_pages == (0,)
        assert _rotations(path) == [90]

    def test_matching_pages_left_alone(self, write_pdf: Callable[..., Path]) -> None:
        path = write_pdf("fine.pdf", pages=3, pagesize=PORTRAIT)

        result = PdfAnnotator().annotate(path, "JOHN DOE", Orientation.PORTRAIT)

        assert result.rotated_pages == ()
        assert _rotations(path) == [0, 0, 0]

    def test_existing_rotation_is_advanced(self, write_pdf: Callable[..., Path]) -> None:
        path = write_pdf("turned.pdf", pages=1, pagesize=LANDSCAPE)
        with pymupdf.open(path) as doc:
            doc[0].set_rotation(270)
            data = doc.tobytes()
        path.write_bytes(data)

        PdfAnnotator().annotate(path, "JOHN DOE", Orientation.PORTRAIT)

        assert _rotations(path) == [0]

    def test_overlay_on_first_page_only(self, write_pdf: Callable[..., Path]) -> None:
        path = write_pdf("letter.pdf", pages=2)

        PdfAnnotator().annotate(path, "JANE SMITH 42 ELM ST", Orientation.PORTRAIT)

        pages = PdfPlumberAdapter().extract_pages(path.read_bytes())
        assert len(pages) == 2
        assert SENTINEL in pages[0]
        assert "JANE SMITH 42 ELM ST" in pages[0]
        assert "letter page 1" in pages[0]
        assert SENTINEL not in pages[1]

    def test_empty_text_still_gets_sentinel(self, write_pdf: Callable[..., Path]) -> None:
        path = write_pdf("blank_address.pdf", pages=1)

        PdfAnnotator().annotate(path, "", Orientation.PORTRAIT)

        assert SENTINEL in PdfPlumberAdapter().extract_pages(path.read_bytes())[0]

    def test_unreadable_file_is_left_untouched(self, tmp_path: Path) -> None:
        path = tmp_path / "broken.pdf"
        path.write_bytes(b"not a pdf at all")

        with pytest.raises(AnnotationError, match="broken.pdf"):
            PdfAnnotator().annotate(path, "JOHN DOE", Orientation.PORTRAIT)

        assert path.read_bytes() == b"not a pdf at all"
