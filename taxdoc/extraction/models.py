from dataclasses import dataclass
from enum import Enum


class DocumentType(Enum):
    """Document types with a registered field-extraction strategy."""

    W2 = "W2"
    FORM_1099 = "1099"

    @classmethod
    def parse(cls, value: str) -> "DocumentType | None":
        """Map a declared document-type string to a member, or None if unknown."""
        normalized = value.strip().upper()
        for member in cls:
            if member.value == normalized:
                return member
        return None


@dataclass(frozen=True)
class W2Record:
    """Fields read from one page of a W-2 wage statement."""

    employer: str = "Unknown Employer"
    wages: float = 0.0
    tax_withheld: float = 0.0


@dataclass(frozen=True)
class Form1099Record:
    """Fields read from one page of a 1099 information return."""

    payer: str = "Unknown Payer"
    income: float = 0.0


@dataclass(frozen=True)
class NoDataRecord:
    """Sentinel emitted when no page of a document yielded any field.

    Consumers must treat it as a failed extraction, never as a real record.
    """

    error: str = "No data found"


ExtractedRecord = W2Record | Form1099Record | NoDataRecord
