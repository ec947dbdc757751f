from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from taxdoc.logging.logger import Log
from taxdoc.ocr.base import BaseOcrEngine
from taxdoc.ocr.exceptions import OcrInitError, OcrRunError
from taxdoc.processor.constants import EXTRACTION_FAILED_TEXT, PAGE_BREAK
from taxdoc.rasterizer.base import BaseRasterizer, is_multi_page, single_page
from taxdoc.rasterizer.exceptions import RasterizationError
from taxdoc.rasterizer.models import PageImage
from taxdoc.rasterizer.scratch import scratch_directory


class _AllPagesFailedError(Exception):
    pass


class DocumentTextAssembler:
    """Produces the full OCR text of one uploaded file.

    Multi-page files are rasterized into a private scratch directory, each
    page is recognized on a bounded thread pool and the page texts are joined
    with PAGE_BREAK in page order. A page that cannot be read becomes an empty
    segment. If nothing at all can be read the fixed EXTRACTION_FAILED_TEXT is
    returned instead, so callers never see an exception from here.
    """

    def __init__(
        self,
        rasterizer: BaseRasterizer,
        ocr_engine: BaseOcrEngine,
        scratch_root: Path,
        max_workers: int = 2,
    ) -> None:
        self._rasterizer = rasterizer
        self._ocr_engine = ocr_engine
        self._scratch_root = scratch_root
        self._max_workers = max(1, max_workers)

    def assemble(self, file_path: Path) -> str:
        try:
            if is_multi_page(file_path):
                with scratch_directory(self._scratch_root) as scratch_dir:
                    pages = self._rasterizer.rasterize(file_path, scratch_dir)
                    segments = self._read_pages(pages)
            else:
                segments = self._read_pages(single_page(file_path))
        except (RasterizationError, OcrInitError, _AllPagesFailedError) as exc:
            Log.error(f"Text extraction failed for {file_path}: {exc}")
            return EXTRACTION_FAILED_TEXT

        text = PAGE_BREAK.join(segments)
        Log.info(f"Assembled {len(text)} chars from {len(segments)} page(s) of {file_path.name}")
        return text

    def _read_pages(self, pages: list[PageImage]) -> list[str]:
        if not pages:
            raise _AllPagesFailedError("document has no pages")
        ordered = sorted(pages, key=lambda page: page.ordinal_index)
        workers = min(self._max_workers, len(ordered))
        segments: list[str] = []
        failures = 0
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="ocr") as executor:
            futures = [
                (page, executor.submit(self._ocr_engine.extract_text, page.path))
                for page in ordered
            ]
            for page, future in futures:
                try:
                    segments.append(future.result())
                except OcrInitError:
                    executor.shutdown(wait=True, cancel_futures=True)
                    raise
                except OcrRunError as exc:
                    Log.warning(f"Page {page.ordinal_index} unreadable, keeping it empty: {exc}")
                    segments.append("")
                    failures += 1

        if failures == len(ordered):
            raise _AllPagesFailedError(f"none of {len(ordered)} page(s) could be read")
        return segments
