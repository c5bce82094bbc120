import errno
import os
import shutil
from pathlib import Path

from ocrmerge.config.categories import Category
from ocrmerge.logging.logger import Log
from ocrmerge.processor.exceptions import DeliveryError


class Delivery:
    """Moves a category's merged output to its fixed destination, replacing the last run's."""

    def __init__(self, output_root: Path) -> None:
        self._output_root = output_root

    def deliver(self, merged_path: Path, category: Category) -> Path:
        destination = category.destination_path(self._output_root)
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            try:
                os.replace(merged_path, destination)
            except OSError as exc:
                if exc.errno != errno.EXDEV:
                    raise
                shutil.move(str(merged_path), str(destination))
        except OSError as exc:
            raise DeliveryError(
                f"Could not deliver {merged_path.name} to {destination}: {exc}"
            ) from exc
        Log.info(f"Delivered {category.key} output to {destination}")
        return destination
