from abc import ABC, abstractmethod
from pathlib import Path

from ocrmerge.ocr.models import AddressZone, PageImage


class BaseOcrEngine(ABC):
    """Contract for OCR engine adapters.

    An engine instance is used by one task at a time; the pool enforces this.
    """

    @abstractmethod
    def start(self, working_dir: Path) -> None:
        """Prepare the engine, keeping any scratch state under working_dir."""

    @abstractmethod
    def recognize(self, page: PageImage, zone: AddressZone) -> str:
        """Recognize the text inside zone of a rendered page.

        Raises:
            OcrEngineError: on any engine failure or timeout.
        """

    @abstractmethod
    def stop(self) -> None:
        """Release the engine and its scratch state."""
