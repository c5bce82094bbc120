import threading
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class StagedDocument:
    """A staged PDF after the OCR stage has read and annotated it."""

    path: Path
    page_count: int
    address_text: str = ""
    orientation_normalized: bool = False
    rotated_pages: tuple[int, ...] = ()


@dataclass(frozen=True)
class OcrFailure:
    path: Path
    error: str


class PageCountIndex:
    """Thread-safe map of staged file -> page count, written at most once per file.

    Merge order is ascending page count; equal counts are ordered by file
    name, then full path, so the result does not depend on which worker
    finished first.
    """

    def __init__(self) -> None:
        self._counts: dict[Path, int] = {}
        self._lock = threading.Lock()

    def add(self, path: Path, page_count: int) -> bool:
        """Insert if absent. Returns False (and keeps the first value) for a repeated path."""
        with self._lock:
            if path in self._counts:
                return False
            self._counts[path] = page_count
            return True

    def get(self, path: Path) -> int | None:
        with self._lock:
            return self._counts.get(path)

    def items(self) -> list[tuple[Path, int]]:
        with self._lock:
            return list(self._counts.items())

    def total_pages(self) -> int:
        with self._lock:
            return sum(self._counts.values())

    def ordered(self) -> list[tuple[Path, int]]:
        return sorted(self.items(), key=lambda item: (item[1], item[0].name, str(item[0])))

    def __len__(self) -> int:
        with self._lock:
            return len(self._counts)

    def __contains__(self, path: object) -> bool:
        with self._lock:
            return path in self._counts

    def __iter__(self) -> Iterator[Path]:
        return iter([path for path, _ in self.ordered()])


@dataclass
class OcrStageResult:
    index: PageCountIndex = field(default_factory=PageCountIndex)
    documents: list[StagedDocument] = field(default_factory=list)
    failures: list[OcrFailure] = field(default_factory=list)
