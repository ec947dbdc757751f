from abc import ABC, abstractmethod
from collections.abc import Sequence

from taxdoc.extraction.models import ExtractedRecord


class BaseFieldStrategy(ABC):
    """Field-extraction rules for one document type."""

    @abstractmethod
    def extract_page(self, lines: Sequence[str]) -> ExtractedRecord | None:
        """Read one page and return its record, or None if no field matched."""
