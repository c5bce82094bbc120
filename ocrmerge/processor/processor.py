from functools import partial

from ocrmerge.archive.extractor import ArchiveExtractor
from ocrmerge.config.categories import Category
from ocrmerge.config.settings import Settings
from ocrmerge.logging.logger import Log
from ocrmerge.notification.reporter import ErrorReporter
from ocrmerge.ocr.factory import OcrEngineFactory
from ocrmerge.pdf.annotator import PdfAnnotator
from ocrmerge.pdf.factory import PdfExtractorFactory
from ocrmerge.pdf.merger import PdfMerger
from ocrmerge.pdf.verifier import MergeVerifier
from ocrmerge.processor.delivery import Delivery
from ocrmerge.processor.ocr_stage import OcrStage
from ocrmerge.processor.pipeline import CategoryContext, PipelineStep
from ocrmerge.processor.steps import (
    ClearStagingStep,
    DeliverStep,
    ExtractArchivesStep,
    MergeStep,
    OcrAnnotateStep,
    ReportFailureStep,
    VerifyMergeStep,
)


class Processor:
    """Runs one category through the pipeline.

    Pipeline: clear staging -> extract -> OCR + annotate -> merge -> verify -> deliver.
    A step may mark the context skipped, which ends the run without error.
    """

    def __init__(self, steps: list[PipelineStep], failed_step: PipelineStep) -> None:
        self._steps = steps
        self._failed_step = failed_step

    def process(self, category: Category) -> CategoryContext:
        Log.info(f"Processing category {category.key}")
        context = CategoryContext(category=category)
        try:
            for step in self._steps:
                context = step.run(context)
                if context.skipped:
                    Log.info(f"Skipping category {category.key}: {context.skip_reason}")
                    break
        except Exception as exc:
            context.error_message = str(exc)
            self._failed_step.run(context)
            raise
        return context


def build_processor(settings: Settings, reporter: ErrorReporter) -> Processor:
    """Build a Processor with all required adapters."""
    extractor = ArchiveExtractor(
        reporter,
        password=settings.archive_password,
        max_workers=settings.extraction_max_workers,
        timeout_seconds=settings.extraction_timeout_seconds,
    )
    ocr_stage = OcrStage(
        partial(OcrEngineFactory.create, settings),
        PdfAnnotator(),
        working_dir=settings.ocr_working_dir,
        max_workers=settings.ocr_max_workers,
        dpi=settings.ocr_dpi,
    )
    verifier = MergeVerifier(PdfExtractorFactory.create(settings))
    steps: list[PipelineStep] = [
        ClearStagingStep(settings.staging_dir),
        ExtractArchivesStep(extractor, settings.source_root, settings.staging_dir),
        OcrAnnotateStep(ocr_stage, reporter),
        MergeStep(PdfMerger(), settings.staging_dir),
        VerifyMergeStep(verifier),
        DeliverStep(Delivery(settings.output_root)),
    ]
    return Processor(steps=steps, failed_step=ReportFailureStep(reporter))
