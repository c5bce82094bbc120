import shutil
import tempfile
import uuid
from pathlib import Path

import pytesseract

from ocrmerge.ocr.base import BaseOcrEngine
from ocrmerge.ocr.exceptions import OcrEngineError
from ocrmerge.ocr.models import AddressZone, PageImage


class TesseractAdapter(BaseOcrEngine):
    """Recognizes a page zone with the Tesseract CLI through pytesseract."""

    # psm 6: single uniform block. Dictionaries off so names and street lines are not "corrected".
    TESSERACT_CONFIG = "--psm 6 -c load_system_dawg=0 -c load_freq_dawg=0"

    def __init__(self, *, language: str = "eng", timeout_seconds: int = 120) -> None:
        self._language = language
        self._timeout_seconds = timeout_seconds
        self._scratch_dir: Path | None = None

    def start(self, working_dir: Path) -> None:
        working_dir.mkdir(parents=True, exist_ok=True)
        self._scratch_dir = Path(tempfile.mkdtemp(prefix="tesseract-", dir=working_dir))

    def recognize(self, page: PageImage, zone: AddressZone) -> str:
        if self._scratch_dir is None:
            raise OcrEngineError("Tesseract engine used before start()")

        box = zone.to_pixels(page.dpi, page.image.size)
        crop_path = self._scratch_dir / f"{uuid.uuid4().hex}.png"
        try:
            page.image.crop(box).save(crop_path, format="PNG", dpi=(page.dpi, page.dpi))
            return pytesseract.image_to_string(
                str(crop_path),
                lang=self._language,
                config=self.TESSERACT_CONFIG,
                timeout=self._timeout_seconds,
            )
        except Exception as exc:
            raise OcrEngineError(f"tesseract recognition failed: {exc}") from exc
        finally:
            crop_path.unlink(missing_ok=True)

    def stop(self) -> None:
        if self._scratch_dir is not None:
            shutil.rmtree(self._scratch_dir, ignore_errors=True)
            self._scratch_dir = None
