from dataclasses import asdict, dataclass, field
from datetime import date
from pathlib import Path
from typing import Any

from taxdoc.database.models import TaxDocumentRecord
from taxdoc.extraction.models import ExtractedRecord


def resolve_tax_year(raw: str | int | None, default: int | None = None) -> int:
    """Parse a declared year, falling back to the default tax year.

    Without an explicit default the previous calendar year is used, which is
    the year being filed for during tax season.
    """
    fallback = default if default is not None else date.today().year - 1
    if raw is None:
        return fallback
    try:
        return int(str(raw).strip())
    except ValueError:
        return fallback


@dataclass(frozen=True)
class UploadedFile:
    """An uploaded file as handed over by the upload handler."""

    path: Path
    declared_year: int
    declared_type: str
    original_name: str


@dataclass(frozen=True)
class DocumentEntry:
    """One uploaded document's contribution to a user's yearly aggregate."""

    id: str
    type: str
    records: list[ExtractedRecord]
    raw_text_preview: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type,
            "records": [asdict(record) for record in self.records],
            "raw_text_preview": self.raw_text_preview,
        }


@dataclass(frozen=True)
class TaxDataAggregate:
    """Per-user, per-year collection of extracted document data.

    ``extra`` keeps any other top-level keys of the stored JSON blob, such as
    manually entered data, so merges never drop them.
    """

    documents: list[dict[str, Any]] = field(default_factory=list)
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> "TaxDataAggregate":
        extra = {key: value for key, value in data.items() if key != "documents"}
        documents = data.get("documents")
        return cls(
            documents=list(documents) if isinstance(documents, list) else [],
            extra=extra,
        )

    def to_payload(self) -> dict[str, Any]:
        return {**self.extra, "documents": list(self.documents)}


@dataclass(frozen=True)
class IngestionResult:
    """What the pipeline hands back to the caller for one upload."""

    document: TaxDocumentRecord
    records: list[ExtractedRecord]
    aggregate: TaxDataAggregate
