import uuid
from pathlib import Path

import pymupdf

from ocrmerge.logging.logger import Log
from ocrmerge.pdf.exceptions import MergeError


class PdfMerger:
    """Concatenates whole documents, in the given order, into one new PDF."""

    def merge(self, ordered_paths: list[Path], output_dir: Path) -> Path:
        """Write the merge to a fresh '{uuid}.pdf' in output_dir and return its path.

        Each source contributes all of its pages contiguously, keeping page
        rotation. On any failure the partial output is deleted.

        Raises:
            MergeError: if there is nothing to merge or a source cannot be read.
        """
        if not ordered_paths:
            raise MergeError("No documents to merge")

        output_dir.mkdir(parents=True, exist_ok=True)
        target = output_dir / f"{uuid.uuid4()}.pdf"
        try:
            with pymupdf.open() as merged:  # type: ignore[no-untyped-call]
                for source in ordered_paths:
                    with pymupdf.open(source) as doc:  # type: ignore[no-untyped-call]
                        merged.insert_pdf(doc)
                merged.save(target, garbage=3, deflate=True)
        except Exception as exc:
            target.unlink(missing_ok=True)
            raise MergeError(f"Merging {len(ordered_paths)} documents failed: {exc}") from exc

        Log.info(f"Merged {len(ordered_paths)} documents into {target.name}")
        return target
