from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass
class JobRecord:
    """Represents a row from the tax_ingestion_jobs table."""

    id: int
    user_id: str
    year: int | None
    document_type: str
    file_name: str
    file_path: str
    status: str
    attempts: int
    document_id: str | None = None
    error_message: str | None = None
    locked_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class TaxDocumentRecord:
    """Represents a row from the tax_documents table."""

    id: str
    user_id: str
    year: int
    document_type: str
    file_name: str
    file_path: str
    created_at: datetime | None = None
    updated_at: datetime | None = None
    deleted_at: datetime | None = None


@dataclass
class TaxDataRecord:
    """Represents a row from the tax_data table."""

    id: str
    user_id: str
    year: int
    data: dict[str, Any] = field(default_factory=dict)
    created_at: datetime | None = None
    updated_at: datetime | None = None
