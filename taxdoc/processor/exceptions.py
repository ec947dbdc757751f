class ProcessorError(Exception):
    """Base exception for all processor-related errors."""


class NoUploadError(ProcessorError):
    """Raised when an ingestion request carries no uploaded file."""


class StorageError(ProcessorError):
    """Raised when a persistence call fails."""


class DocumentNotFoundError(StorageError):
    """Raised when a tax document cannot be found in the database."""
