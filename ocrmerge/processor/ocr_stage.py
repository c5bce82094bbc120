from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path

from ocrmerge.config.categories import Category
from ocrmerge.logging.logger import Log
from ocrmerge.ocr.base import BaseOcrEngine
from ocrmerge.ocr.models import ADDRESS_ZONE, AddressZone
from ocrmerge.ocr.pool import OcrEnginePool
from ocrmerge.ocr.reader import AddressReader
from ocrmerge.pdf.annotator import PdfAnnotator
from ocrmerge.processor.models import OcrFailure, OcrStageResult, PageCountIndex, StagedDocument
from ocrmerge.utils.fs import clear_directory


class OcrStage:
    """Reads and annotates every staged document of a category in parallel.

    Each task owns its file end to end: open, OCR the address zone, rotate and
    stamp, rewrite. The page-count index is the only shared state. A failing
    file is recorded and left out of the index; the rest of the batch goes on.
    """

    def __init__(
        self,
        engine_factory: Callable[[], BaseOcrEngine],
        annotator: PdfAnnotator,
        *,
        working_dir: Path,
        max_workers: int = 4,
        dpi: int = 300,
        zone: AddressZone = ADDRESS_ZONE,
    ) -> None:
        self._engine_factory = engine_factory
        self._annotator = annotator
        self._working_dir = working_dir
        self._max_workers = max(1, max_workers)
        self._dpi = dpi
        self._zone = zone

    def run(self, paths: list[Path], category: Category) -> OcrStageResult:
        result = OcrStageResult()
        clear_directory(self._working_dir)
        if not paths:
            return result

        workers = min(self._max_workers, len(paths))
        with (
            OcrEnginePool(self._engine_factory, workers, self._working_dir) as pool,
            ThreadPoolExecutor(max_workers=workers, thread_name_prefix="ocr") as executor,
        ):
            reader = AddressReader(pool, dpi=self._dpi, zone=self._zone)
            futures = {
                executor.submit(self._process_file, reader, path, category, result.index): path
                for path in paths
            }
            for future in as_completed(futures):
                path = futures[future]
                try:
                    result.documents.append(future.result())
                except Exception as exc:
                    Log.error(f"OCR failed for {path.name}: {exc}")
                    result.failures.append(OcrFailure(path=path, error=str(exc)))

        result.documents.sort(key=lambda doc: doc.path.name)
        result.failures.sort(key=lambda failure: failure.path.name)
        Log.info(
            f"OCR stage for {category.key}: {len(result.index)} documents, "
            f"{result.index.total_pages()} pages, {len(result.failures)} failed"
        )
        return result

    def _process_file(
        self,
        reader: AddressReader,
        path: Path,
        category: Category,
        index: PageCountIndex,
    ) -> StagedDocument:
        reading = reader.read(path)
        Log.debug(f"{path.name}: {reading.page_count} pages, address {reading.text!r}")
        annotation = self._annotator.annotate(path, reading.text, category.orientation)
        if not index.add(path, reading.page_count):
            Log.warning(f"{path.name} already indexed, keeping first page count")
        return StagedDocument(
            path=path,
            page_count=reading.page_count,
            address_text=reading.text,
            orientation_normalized=True,
            rotated_pages=annotation.rotated_pages,
        )
