from itertools import accumulate
from pathlib import Path

import pymupdf

from ocrmerge.pdf.annotator import SENTINEL
from ocrmerge.pdf.base import BasePdfExtractor
from ocrmerge.pdf.exceptions import MergeVerificationError, PdfExtractionError


def first_page_indexes(page_counts: list[int]) -> list[int]:
    """Zero-based index in the merge of each document's first page."""
    return [0, *accumulate(page_counts)][: len(page_counts)]


def unrotated_copy(path: Path) -> bytes:
    """PDF bytes of path with every page's rotation reset to 0."""
    try:
        with pymupdf.open(path) as doc:  # type: ignore[no-untyped-call]
            for page in doc:
                if page.rotation:
                    page.set_rotation(0)
            return doc.tobytes()
    except Exception as exc:
        raise PdfExtractionError(f"Cannot open {path.name} for verification: {exc}") from exc


class MergeVerifier:
    """Reads a merged PDF back and checks it against the documents it was built from.

    Pages are read in their unrotated frame, the one the overlay was written
    in, so the check does not depend on how the extractor handles rotation.
    """

    def __init__(self, extractor: BasePdfExtractor, sentinel: str = SENTINEL) -> None:
        self._extractor = extractor
        self._sentinel = sentinel

    def verify(self, merged_path: Path, page_counts: list[int]) -> None:
        """Check the page total and that every document starts on a sentinel page.

        Args:
            merged_path: The merged output.
            page_counts: Page count of each source, in merge order.

        Raises:
            MergeVerificationError: on any mismatch.
            PdfExtractionError: if the merged output cannot be read.
        """
        pages = self._extractor.extract_pages(unrotated_copy(merged_path))
        expected_total = sum(page_counts)
        if len(pages) != expected_total:
            raise MergeVerificationError(
                f"{merged_path.name} has {len(pages)} pages, expected {expected_total}"
            )
        unmarked = [
            index + 1
            for index in first_page_indexes(page_counts)
            if self._sentinel not in pages[index]
        ]
        if unmarked:
            raise MergeVerificationError(
                f"{merged_path.name}: document start pages {unmarked} lack '{self._sentinel}'"
            )
