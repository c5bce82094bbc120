from dataclasses import dataclass
from pathlib import Path

import pymupdf

from ocrmerge.config.categories import Orientation
from ocrmerge.pdf.exceptions import AnnotationError

SENTINEL = "PAGE-1"

OVERLAY_FONT = "cour"
OVERLAY_FONT_SIZE = 1
# Points from the top-left corner of page 1.
TEXT_ORIGIN = (25, 3)
SENTINEL_ORIGIN = (3, 3)


@dataclass(frozen=True)
class AnnotationResult:
    page_count: int
    rotated_pages: tuple[int, ...] = ()


def needs_rotation(width: float, height: float, orientation: Orientation) -> bool:
    """True when a page of this unrotated size does not match the expected orientation.

    Square pages count as portrait.
    """
    is_landscape = width > height
    if orientation is Orientation.LANDSCAPE:
        return not is_landscape
    return is_landscape


def normalize_rotation(doc: pymupdf.Document, orientation: Orientation) -> list[int]:
    """Turn mismatched pages a further 90 degrees. Returns zero-based indexes turned."""
    rotated: list[int] = []
    for page in doc:
        box = page.mediabox
        if needs_rotation(box.width, box.height, orientation):
            page.set_rotation((page.rotation + 90) % 360)
            rotated.append(page.number)
    return rotated


def stamp_first_page(page: pymupdf.Page, text: str) -> None:
    """Write fully transparent text that stays extractable by text scrapers."""
    for origin, content in ((TEXT_ORIGIN, text), (SENTINEL_ORIGIN, SENTINEL)):
        if not content:
            continue
        page.insert_text(
            pymupdf.Point(*origin),
            content,
            fontname=OVERLAY_FONT,
            fontsize=OVERLAY_FONT_SIZE,
            fill_opacity=0,
            stroke_opacity=0,
        )


class PdfAnnotator:
    """Normalizes page rotation and stamps the address overlay onto a staged PDF in place."""

    def annotate(self, path: Path, text: str, orientation: Orientation) -> AnnotationResult:
        """Rewrite path with rotation and overlay applied.

        The new document is serialized to memory first and written with a
        single whole-file write, so a failure leaves the file on disk untouched.

        Raises:
            AnnotationError: if the document cannot be read, modified or written.
        """
        try:
            with pymupdf.open(path) as doc:  # type: ignore[no-untyped-call]
                if doc.page_count == 0:
                    raise AnnotationError(f"{path.name} has no pages")
                stamp_first_page(doc[0], text)
                rotated = normalize_rotation(doc, orientation)
                page_count = doc.page_count
                data = doc.tobytes(garbage=3, deflate=True)
            path.write_bytes(data)
        except AnnotationError:
            raise
        except Exception as exc:
            raise AnnotationError(f"Annotating {path.name} failed: {exc}") from exc
        return AnnotationResult(page_count=page_count, rotated_pages=tuple(rotated))
