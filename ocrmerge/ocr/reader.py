from pathlib import Path

import pymupdf
from PIL import Image

from ocrmerge.ocr.exceptions import OcrDocumentError, OcrError
from ocrmerge.ocr.models import ADDRESS_ZONE, AddressReading, AddressZone, PageImage
from ocrmerge.ocr.pool import OcrEnginePool


def render_page(page: pymupdf.Page, dpi: int) -> PageImage:
    pix = page.get_pixmap(dpi=dpi, alpha=False)
    image = Image.frombytes("RGB", (pix.width, pix.height), pix.samples)
    return PageImage(image=image, dpi=dpi)


def normalize_text(text: str) -> str:
    """Upper-case recognized text and drop blank lines and edge whitespace."""
    lines = [line.strip() for line in text.splitlines()]
    return "\n".join(line for line in lines if line).upper()


class AddressReader:
    """Reads a document's page count and the address zone text of its first page."""

    def __init__(
        self,
        pool: OcrEnginePool,
        *,
        dpi: int = 300,
        zone: AddressZone = ADDRESS_ZONE,
    ) -> None:
        self._pool = pool
        self._dpi = dpi
        self._zone = zone

    def read(self, path: Path) -> AddressReading:
        """Raises:
            OcrDocumentError: if the PDF cannot be opened or has no pages.
            OcrEngineError: if recognition fails.
        """
        try:
            with pymupdf.open(path) as doc:  # type: ignore[no-untyped-call]
                page_count = doc.page_count
                if page_count == 0:
                    raise OcrDocumentError(f"{path.name} has no pages")
                page_image = render_page(doc[0], self._dpi)
        except OcrError:
            raise
        except Exception as exc:
            raise OcrDocumentError(f"Cannot open or render {path.name}: {exc}") from exc

        with self._pool.acquire() as engine:
            text = engine.recognize(page_image, self._zone)
        return AddressReading(page_count=page_count, text=normalize_text(text))
