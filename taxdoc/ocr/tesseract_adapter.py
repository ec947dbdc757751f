import threading
from pathlib import Path

import pytesseract
from PIL import Image

from taxdoc.logging.logger import Log
from taxdoc.ocr.base import BaseOcrEngine
from taxdoc.ocr.exceptions import OcrInitError, OcrRunError


class TesseractAdapter(BaseOcrEngine):
    """Runs Tesseract through pytesseract with a fixed language configuration.

    Each call spawns its own tesseract process, so images never influence one
    another. The configuration is immutable once the engine is initialized.
    """

    def __init__(
        self,
        lang: str = "eng",
        tessdata_dir: str = "",
        tesseract_cmd: str = "",
        timeout_seconds: int = 60,
    ) -> None:
        self._lang = lang
        self._config = f'--tessdata-dir "{tessdata_dir}"' if tessdata_dir else ""
        self._tesseract_cmd = tesseract_cmd
        self._timeout_seconds = timeout_seconds
        self._initialized = False
        self._init_lock = threading.Lock()

    def extract_text(self, image_path: Path) -> str:
        self._ensure_initialized()
        try:
            with Image.open(image_path) as image:
                text = pytesseract.image_to_string(
                    image,
                    lang=self._lang,
                    config=self._config,
                    timeout=self._timeout_seconds,
                )
        except pytesseract.TesseractNotFoundError as exc:
            raise OcrInitError(f"Tesseract binary not found: {exc}") from exc
        except pytesseract.TesseractError as exc:
            if "failed loading language" in str(exc.message).lower():
                raise OcrInitError(
                    f"Tesseract could not load language '{self._lang}': {exc.message}"
                ) from exc
            raise OcrRunError(f"Tesseract failed on {image_path}: {exc.message}") from exc
        except RuntimeError as exc:
            # pytesseract signals its timeout with a bare RuntimeError
            raise OcrRunError(f"Tesseract failed on {image_path}: {exc}") from exc
        except (OSError, Image.DecompressionBombError) as exc:
            # truncated or oversized files may only fail once pixels are decoded
            raise OcrRunError(f"Cannot open image {image_path}: {exc}") from exc
        return text or ""

    def _ensure_initialized(self) -> None:
        if self._initialized:
            return
        with self._init_lock:
            if self._initialized:
                return
            if self._tesseract_cmd:
                pytesseract.pytesseract.tesseract_cmd = self._tesseract_cmd
            try:
                version = pytesseract.get_tesseract_version()
                languages = pytesseract.get_languages(config=self._config)
            except pytesseract.TesseractNotFoundError as exc:
                raise OcrInitError(f"Tesseract binary not found: {exc}") from exc
            except pytesseract.TesseractError as exc:
                raise OcrInitError(f"Tesseract initialization failed: {exc.message}") from exc
            missing = [code for code in self._lang.split("+") if code not in languages]
            if missing:
                raise OcrInitError(
                    f"Tesseract language data {missing} not installed. "
                    f"Available: {sorted(languages)}"
                )
            Log.info(f"Tesseract {version} ready with language '{self._lang}'")
            self._initialized = True
