from pathlib import Path

from ocrmerge.archive.extractor import ArchiveExtractor
from ocrmerge.logging.logger import Log
from ocrmerge.notification.reporter import (
    OCR_FAILURE_SUBJECT,
    PROCESSING_FAILURE_SUBJECT,
    ErrorReporter,
)
from ocrmerge.pdf.merger import PdfMerger
from ocrmerge.pdf.verifier import MergeVerifier
from ocrmerge.processor.delivery import Delivery
from ocrmerge.processor.ocr_stage import OcrStage
from ocrmerge.processor.pipeline import CategoryContext, PipelineStep
from ocrmerge.utils.fs import clear_directory


class ClearStagingStep(PipelineStep):
    def __init__(self, staging_dir: Path) -> None:
        self._staging_dir = staging_dir

    def run(self, context: CategoryContext) -> CategoryContext:
        clear_directory(self._staging_dir)
        return context


class ExtractArchivesStep(PipelineStep):
    def __init__(
        self,
        extractor: ArchiveExtractor,
        source_root: Path,
        staging_dir: Path,
    ) -> None:
        self._extractor = extractor
        self._source_root = source_root
        self._staging_dir = staging_dir

    def run(self, context: CategoryContext) -> CategoryContext:
        source_dir = context.category.source_dir(self._source_root)
        context.extraction = self._extractor.extract(source_dir, self._staging_dir)
        context.staged = list(context.extraction.staged)
        if not context.staged:
            context.skip("no PDF documents staged")
        else:
            Log.info(f"Staged {len(context.staged)} documents for {context.category.key}")
        return context


class OcrAnnotateStep(PipelineStep):
    def __init__(self, ocr_stage: OcrStage, reporter: ErrorReporter) -> None:
        self._ocr_stage = ocr_stage
        self._reporter = reporter

    def run(self, context: CategoryContext) -> CategoryContext:
        result = self._ocr_stage.run(context.staged, context.category)
        context.ocr_result = result
        if result.failures:
            lines = [f"{failure.path.name}: {failure.error}" for failure in result.failures]
            self._reporter.report(
                Path(context.category.key),
                f"{len(result.failures)} documents in {context.category.key} failed OCR "
                "and were left out of the merge:\r\n" + "\r\n".join(lines),
                subject=OCR_FAILURE_SUBJECT,
            )
        if len(result.index) == 0:
            context.skip("every staged document failed OCR")
        return context


class MergeStep(PipelineStep):
    def __init__(self, merger: PdfMerger, staging_dir: Path) -> None:
        self._merger = merger
        self._staging_dir = staging_dir

    def run(self, context: CategoryContext) -> CategoryContext:
        if context.ocr_result is None:
            raise ValueError("CategoryContext.ocr_result must be set before merge")
        context.ordered = context.ocr_result.index.ordered()
        Log.debug(
            "Merge order: "
            + ", ".join(f"{path.name}({count})" for path, count in context.ordered)
        )
        context.merged_path = self._merger.merge(
            [path for path, _ in context.ordered], self._staging_dir
        )
        return context


class VerifyMergeStep(PipelineStep):
    def __init__(self, verifier: MergeVerifier) -> None:
        self._verifier = verifier

    def run(self, context: CategoryContext) -> CategoryContext:
        if context.merged_path is None:
            raise ValueError("CategoryContext.merged_path must be set before verification")
        self._verifier.verify(context.merged_path, [count for _, count in context.ordered])
        return context


class DeliverStep(PipelineStep):
    def __init__(self, delivery: Delivery) -> None:
        self._delivery = delivery

    def run(self, context: CategoryContext) -> CategoryContext:
        if context.merged_path is None:
            raise ValueError("CategoryContext.merged_path must be set before delivery")
        context.destination = self._delivery.deliver(context.merged_path, context.category)
        context.merged_path = None
        return context


class ReportFailureStep(PipelineStep):
    def __init__(self, reporter: ErrorReporter) -> None:
        self._reporter = reporter

    def run(self, context: CategoryContext) -> CategoryContext:
        key = context.category.key
        if context.merged_path is not None:
            context.merged_path.unlink(missing_ok=True)
            context.merged_path = None
        Log.error(f"Category {key} failed: {context.error_message}")
        self._reporter.report(
            Path(key),
            f"Processing of {key} failed and nothing was delivered: {context.error_message}",
            subject=PROCESSING_FAILURE_SUBJECT,
        )
        return context
