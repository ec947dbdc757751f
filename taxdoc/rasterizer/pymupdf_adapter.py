from pathlib import Path

import pymupdf

from taxdoc.rasterizer.base import BaseRasterizer
from taxdoc.rasterizer.exceptions import RasterizationError
from taxdoc.rasterizer.models import PageImage


class PyMuPdfRasterizer(BaseRasterizer):
    """Renders PDF pages to PNG files using PyMuPDF."""

    def __init__(self, dpi: int = 150) -> None:
        self._dpi = dpi

    def rasterize(self, source: Path, output_dir: Path) -> list[PageImage]:
        pages: list[PageImage] = []
        try:
            with pymupdf.open(str(source)) as doc:  # type: ignore[no-untyped-call]
                for index, page in enumerate(doc, start=1):
                    target = output_dir / f"page-{index:04d}.png"
                    pixmap = page.get_pixmap(dpi=self._dpi, alpha=False)
                    pixmap.save(str(target))
                    pages.append(PageImage(ordinal_index=index, path=target))
        except Exception as exc:
            raise RasterizationError(f"pymupdf rasterization failed: {exc}") from exc
        if not pages:
            raise RasterizationError(f"pymupdf produced no pages for {source}")
        return pages
