class PdfError(Exception):
    """Base exception for PDF handling."""


class PdfExtractionError(PdfError):
    """Raised when page text cannot be read back from a PDF."""


class AnnotationError(PdfError):
    """Raised when a staged document cannot be rotated, stamped or rewritten."""


class MergeError(PdfError):
    """Raised when the category output cannot be assembled."""


class MergeVerificationError(MergeError):
    """Raised when the merged output does not match the documents it was built from."""
