import queue
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from pathlib import Path
from types import TracebackType

from ocrmerge.logging.logger import Log
from ocrmerge.ocr.base import BaseOcrEngine
from ocrmerge.ocr.exceptions import OcrEngineError


class OcrEnginePool:
    """Fixed set of started engines, each handed to one task at a time.

    Engines are not safe to share between concurrent calls, so every task
    borrows one through acquire() and the pool takes it back on exit,
    including when the task raises.
    """

    def __init__(
        self,
        engine_factory: Callable[[], BaseOcrEngine],
        size: int,
        working_dir: Path,
        acquire_timeout_seconds: float | None = None,
    ) -> None:
        if size < 1:
            raise ValueError(f"OCR engine pool size must be at least 1, got {size}")
        self._engine_factory = engine_factory
        self._size = size
        self._working_dir = working_dir
        self._acquire_timeout_seconds = acquire_timeout_seconds
        self._engines: list[BaseOcrEngine] = []
        self._idle: queue.Queue[BaseOcrEngine] = queue.Queue()

    @property
    def size(self) -> int:
        return self._size

    def open(self) -> None:
        try:
            for _ in range(self._size):
                engine = self._engine_factory()
                engine.start(self._working_dir)
                self._engines.append(engine)
                self._idle.put(engine)
        except Exception as exc:
            self.close()
            raise OcrEngineError(f"Could not start OCR engine pool: {exc}") from exc
        Log.debug(f"Started {self._size} OCR engines in {self._working_dir}")

    def close(self) -> None:
        for engine in self._engines:
            try:
                engine.stop()
            except Exception as exc:
                Log.warning(f"Failed to stop OCR engine: {exc}")
        self._engines.clear()
        self._idle = queue.Queue()

    @contextmanager
    def acquire(self) -> Iterator[BaseOcrEngine]:
        if not self._engines:
            raise OcrEngineError("OCR engine pool is not open")
        try:
            engine = self._idle.get(timeout=self._acquire_timeout_seconds)
        except queue.Empty as exc:
            raise OcrEngineError("Timed out waiting for a free OCR engine") from exc
        try:
            yield engine
        finally:
            self._idle.put(engine)

    def __enter__(self) -> "OcrEnginePool":
        self.open()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
