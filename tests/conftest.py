import io
import threading
import time
from collections.abc import Callable
from pathlib import Path

import pytest
import pyzipper
from reportlab.lib.pagesizes import landscape, letter
from reportlab.pdfgen import canvas

from ocrmerge.ocr.base import BaseOcrEngine
from ocrmerge.ocr.models import AddressZone, PageImage

PORTRAIT = letter
LANDSCAPE = landscape(letter)


def build_pdf(
    pages: int = 1,
    label: str = "doc",
    pagesize: tuple[float, float] = PORTRAIT,
) -> bytes:
    """Generate a PDF whose pages read '<label> page <n>'."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=pagesize)
    for number in range(1, pages + 1):
        c.drawString(72, 72, f"{label} page {number}")
        c.showPage()
    c.save()
    return buf.getvalue()


class FakeOcrEngine(BaseOcrEngine):
    """Returns fixed text and records how it was used."""

    def __init__(self, text: str = "john doe\n  1 main st  \n\n") -> None:
        self.text = text
        self.working_dir: Path | None = None
        self.stopped = False
        self.calls = 0
        self.overlapped = False
        self._busy = False
        self._lock = threading.Lock()

    def start(self, working_dir: Path) -> None:
        self.working_dir = working_dir

    def recognize(self, page: PageImage, zone: AddressZone) -> str:
        with self._lock:
            if self._busy:
                self.overlapped = True
            self._busy = True
        try:
            time.sleep(0.01)
            self.calls += 1
            return self.text
        finally:
            with self._lock:
                self._busy = False

    def stop(self) -> None:
        self.stopped = True


@pytest.fixture()
def make_pdf() -> Callable[..., bytes]:
    return build_pdf


@pytest.fixture()
def write_pdf(tmp_path: Path) -> Callable[..., Path]:
    """Write a generated PDF under tmp_path/staging and return its path."""

    def _write(
        name: str,
        pages: int = 1,
        pagesize: tuple[float, float] = PORTRAIT,
        directory: Path | None = None,
    ) -> Path:
        target_dir = directory or tmp_path / "staging"
        target_dir.mkdir(parents=True, exist_ok=True)
        path = target_dir / name
        path.write_bytes(build_pdf(pages, label=path.stem, pagesize=pagesize))
        return path

    return _write


@pytest.fixture()
def make_zip() -> Callable[[Path, dict[str, bytes]], Path]:
    """Write a plain zip with the given entries; names ending in '/' become directories."""

    def _make(path: Path, entries: dict[str, bytes]) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        with pyzipper.ZipFile(path, "w", compression=pyzipper.ZIP_DEFLATED) as zf:
            for name, data in entries.items():
                zf.writestr(name, data)
        return path

    return _make


@pytest.fixture()
def fake_engines() -> list[FakeOcrEngine]:
    return []


@pytest.fixture()
def fake_engine_factory(fake_engines: list[FakeOcrEngine]) -> Callable[[], FakeOcrEngine]:
    def _factory() -> FakeOcrEngine:
        engine = FakeOcrEngine()
        fake_engines.append(engine)
        return engine

    return _factory
