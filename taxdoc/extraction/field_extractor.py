from taxdoc.extraction.base import BaseFieldStrategy
from taxdoc.extraction.form_1099_strategy import Form1099Strategy
from taxdoc.extraction.models import DocumentType, ExtractedRecord, NoDataRecord
from taxdoc.extraction.w2_strategy import W2Strategy
from taxdoc.logging.logger import Log
from taxdoc.processor.constants import PAGE_BREAK


class FieldExtractor:
    """Turns assembled OCR text into typed records for a declared document type.

    Pages are read independently and each contributes at most one record.
    When no page yields anything, the result is the single NoDataRecord
    sentinel rather than an empty list. Never raises.
    """

    def __init__(self, strategies: dict[DocumentType, BaseFieldStrategy] | None = None) -> None:
        self._strategies: dict[DocumentType, BaseFieldStrategy] = (
            dict(strategies)
            if strategies is not None
            else {
                DocumentType.W2: W2Strategy(),
                DocumentType.FORM_1099: Form1099Strategy(),
            }
        )

    def register(self, doc_type: DocumentType, strategy: BaseFieldStrategy) -> None:
        self._strategies[doc_type] = strategy

    def extract(self, text: str, doc_type: str) -> list[ExtractedRecord]:
        strategy = self._resolve(doc_type)
        records: list[ExtractedRecord] = []
        if strategy is not None:
            for page in text.split(PAGE_BREAK.strip()):
                if not page.strip():
                    continue
                record = strategy.extract_page(page.splitlines())
                if record is not None:
                    records.append(record)

        if not records:
            return [NoDataRecord()]
        return records

    def _resolve(self, doc_type: str) -> BaseFieldStrategy | None:
        parsed = DocumentType.parse(doc_type)
        strategy = self._strategies.get(parsed) if parsed is not None else None
        if strategy is None:
            Log.warning(f"No field extraction registered for document type '{doc_type}'")
        return strategy
