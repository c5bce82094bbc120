from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from ocrmerge.config.settings import Settings


class Orientation(str, Enum):
    PORTRAIT = "portrait"
    LANDSCAPE = "landscape"


@dataclass(frozen=True)
class Category:
    """Routing entry: where a category's archives come from and where its merge goes."""

    key: str
    source_folder: str
    destination_folder: str
    orientation: Orientation = Orientation.PORTRAIT

    def source_dir(self, source_root: Path) -> Path:
        return source_root / self.source_folder

    def destination_path(self, output_root: Path) -> Path:
        """Build delivery path: {output_root}/{dest}/{dest}.pdf"""
        return output_root / self.destination_folder / f"{self.destination_folder}.pdf"


CATEGORIES: tuple[Category, ...] = (
    Category("Aloha", "Aloha Trust", "aloha"),
    Category("Premier", "CCSAPB", "CCSAPB"),
    Category("PremierLandscape", "CCSAPBL", "CCSAPBL", Orientation.LANDSCAPE),
    Category("SpecialBilling", "CCSASB", "CCSASB"),
    Category("TotalTraffic", "CCSATT", "CCSATT"),
    Category("Radio", "Clear Channel", "iheart"),
    Category("LockboxInsert", "LockboxInsert", "iheart_insert"),
)


def load_categories(settings: Settings) -> list[Category]:
    """Return the enabled categories in table order.

    Raises:
        ValueError: if an enabled key does not exist in the table.
    """
    known = {category.key: category for category in CATEGORIES}
    unknown = [key for key in settings.enabled_categories if key not in known]
    if unknown:
        raise ValueError(
            f"Unknown categories {unknown}. Choose from: {list(known)}"
        )
    enabled = set(settings.enabled_categories)
    return [category for category in CATEGORIES if category.key in enabled]
