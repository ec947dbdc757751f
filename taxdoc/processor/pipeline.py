from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field

from taxdoc.database.models import TaxDocumentRecord
from taxdoc.extraction.models import ExtractedRecord
from taxdoc.processor.models import DocumentEntry, TaxDataAggregate, UploadedFile


@dataclass(slots=True)
class IngestionContext:
    user_id: str
    upload: UploadedFile
    # set when retrying an upload whose document row already exists
    resume_document_id: str | None = None
    on_document_created: Callable[[TaxDocumentRecord], None] | None = None
    document: TaxDocumentRecord | None = None
    extracted_text: str = ""
    records: list[ExtractedRecord] = field(default_factory=list)
    entry: DocumentEntry | None = None
    aggregate: TaxDataAggregate | None = None


class PipelineStep(ABC):
    @abstractmethod
    def run(self, context: IngestionContext) -> IngestionContext:
        raise NotImplementedError
