from collections.abc import Sequence

from taxdoc.extraction.amount import extract_amount, value_after_colon
from taxdoc.extraction.base import BaseFieldStrategy
from taxdoc.extraction.models import W2Record


class W2Strategy(BaseFieldStrategy):
    """Reads wages, federal tax withheld and employer name from a W-2 page."""

    WAGES_KEYWORDS = ("wages", "tips", "other compensation")
    WITHHELD_KEYWORDS = ("federal income tax withheld",)
    EMPLOYER_KEYWORDS = ("employer's name", "employer name")

    def extract_page(self, lines: Sequence[str]) -> W2Record | None:
        wages: float | None = None
        tax_withheld: float | None = None
        employer: str | None = None

        for line in lines:
            lower = line.lower()
            if any(keyword in lower for keyword in self.WAGES_KEYWORDS):
                if wages is None:
                    wages = extract_amount(line)
            elif any(keyword in lower for keyword in self.WITHHELD_KEYWORDS):
                if tax_withheld is None:
                    tax_withheld = extract_amount(line)
            elif any(keyword in lower for keyword in self.EMPLOYER_KEYWORDS):
                if employer is None:
                    employer = value_after_colon(line)

        if wages is None and tax_withheld is None and employer is None:
            return None
        defaults = W2Record()
        return W2Record(
            employer=employer if employer is not None else defaults.employer,
            wages=wages if wages is not None else defaults.wages,
            tax_withheld=tax_withheld if tax_withheld is not None else defaults.tax_withheld,
        )
