from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path

from ocrmerge.archive.models import ExtractionReport
from ocrmerge.config.categories import Category
from ocrmerge.processor.models import OcrStageResult


@dataclass(slots=True)
class CategoryContext:
    category: Category
    extraction: ExtractionReport | None = None
    staged: list[Path] = field(default_factory=list)
    ocr_result: OcrStageResult | None = None
    ordered: list[tuple[Path, int]] = field(default_factory=list)
    merged_path: Path | None = None
    destination: Path | None = None
    skipped: bool = False
    skip_reason: str = ""
    error_message: str = ""

    def skip(self, reason: str) -> None:
        self.skipped = True
        self.skip_reason = reason


class PipelineStep(ABC):
    @abstractmethod
    def run(self, context: CategoryContext) -> CategoryContext:
        raise NotImplementedError
