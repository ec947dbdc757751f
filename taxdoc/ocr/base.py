from abc import ABC, abstractmethod
from pathlib import Path


class BaseOcrEngine(ABC):
    """Contract for all OCR adapters."""

    @abstractmethod
    def extract_text(self, image_path: Path) -> str:
        """Recognize the text of a single raster image.

        Implementations must be safe to call from several threads at once and
        must not carry state from one image to the next.

        Raises:
            OcrInitError: if the engine or its language data cannot be loaded.
            OcrRunError: if recognition fails for this image.
        """
