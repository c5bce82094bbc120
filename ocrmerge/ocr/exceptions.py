class OcrError(Exception):
    """Base exception for OCR failures."""


class OcrEngineError(OcrError):
    """Raised when an engine cannot start, times out or fails to recognize."""


class OcrDocumentError(OcrError):
    """Raised when a document cannot be opened or its first page rendered."""
