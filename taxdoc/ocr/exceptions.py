class OcrError(Exception):
    """Base exception for OCR failures."""


class OcrInitError(OcrError):
    """Raised when the OCR engine or its language data cannot be loaded."""


class OcrRunError(OcrError):
    """Raised when recognition fails for a specific image."""
