from dataclasses import dataclass, field
from pathlib import Path


@dataclass
class ExtractionReport:
    """What one category's extraction pass produced."""

    staged: list[Path] = field(default_factory=list)
    corrupt: list[Path] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.staged
