from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class PageImage:
    """A single rendered page. ordinal_index is 1-based and defines page order."""

    ordinal_index: int
    path: Path
