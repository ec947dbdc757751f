from collections.abc import Sequence

from taxdoc.extraction.amount import extract_amount, value_after_colon
from taxdoc.extraction.base import BaseFieldStrategy
from taxdoc.extraction.models import Form1099Record


class Form1099Strategy(BaseFieldStrategy):
    """Reads income and payer name from a 1099-INT or 1099-NEC page."""

    INCOME_KEYWORDS = ("interest income", "nonemployee compensation", "box 1")
    PAYER_KEYWORDS = ("payer's name", "payer name")

    def extract_page(self, lines: Sequence[str]) -> Form1099Record | None:
        income: float | None = None
        payer: str | None = None

        for line in lines:
            lower = line.lower()
            if any(keyword in lower for keyword in self.INCOME_KEYWORDS):
                if income is None:
                    income = extract_amount(line)
            elif any(keyword in lower for keyword in self.PAYER_KEYWORDS):
                if payer is None:
                    payer = value_after_colon(line)

        if income is None and payer is None:
            return None
        defaults = Form1099Record()
        return Form1099Record(
            payer=payer if payer is not None else defaults.payer,
            income=income if income is not None else defaults.income,
        )
