from abc import ABC, abstractmethod


class BasePdfExtractor(ABC):
    """Contract for all PDF text extraction adapters."""

    @abstractmethod
    def extract_pages(self, pdf_bytes: bytes) -> list[str]:
        """Extract the text of every page, in page order.

        Args:
            pdf_bytes: Raw PDF file content.

        Returns:
            One string per page; a page without text yields "".

        Raises:
            PdfExtractionError: if extraction fails for any reason.
        """

    def extract(self, pdf_bytes: bytes) -> str:
        """Extract plain text of the whole document as a single stripped string."""
        return "\n".join(self.extract_pages(pdf_bytes)).strip()
