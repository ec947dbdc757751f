from taxdoc.extraction.amount import extract_amount
from taxdoc.extraction.base import BaseFieldStrategy
from taxdoc.extraction.field_extractor import FieldExtractor
from taxdoc.extraction.models import (
    DocumentType,
    ExtractedRecord,
    Form1099Record,
    NoDataRecord,
    W2Record,
)

__all__ = [
    "BaseFieldStrategy",
    "DocumentType",
    "ExtractedRecord",
    "FieldExtractor",
    "Form1099Record",
    "NoDataRecord",
    "W2Record",
    "extract_amount",
]
