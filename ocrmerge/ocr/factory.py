from ocrmerge.config.settings import Settings
from ocrmerge.ocr.base import BaseOcrEngine
from ocrmerge.ocr.tesseract_adapter import TesseractAdapter


class OcrEngineFactory:
    """Creates a new OCR engine instance based on settings."""

    ADAPTERS: dict[str, type[TesseractAdapter]] = {
        "tesseract": TesseractAdapter,
    }

    @classmethod
    def create(cls, settings: Settings) -> BaseOcrEngine:
        engine = settings.ocr_engine.lower()
        adapter_cls = cls.ADAPTERS.get(engine)
        if adapter_cls is None:
            raise ValueError(
                f"Unknown OCR engine '{engine}'. Choose from: {list(cls.ADAPTERS)}"
            )
        return adapter_cls(
            language=settings.ocr_language,
            timeout_seconds=settings.ocr_timeout_seconds,
        )
