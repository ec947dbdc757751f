from pathlib import Path

import pdfplumber

from taxdoc.rasterizer.base import BaseRasterizer
from taxdoc.rasterizer.exceptions import RasterizationError
from taxdoc.rasterizer.models import PageImage


class PdfPlumberRasterizer(BaseRasterizer):
    """Renders PDF pages to PNG files using pdfplumber."""

    def __init__(self, dpi: int = 150) -> None:
        self._dpi = dpi

    def rasterize(self, source: Path, output_dir: Path) -> list[PageImage]:
        pages: list[PageImage] = []
        try:
            with pdfplumber.open(source) as pdf:
                for index, page in enumerate(pdf.pages, start=1):
                    target = output_dir / f"page-{index:04d}.png"
                    page.to_image(resolution=self._dpi).save(target, format="PNG")
                    pages.append(PageImage(ordinal_index=index, path=target))
        except Exception as exc:
            raise RasterizationError(f"pdfplumber rasterization failed: {exc}") from exc
        if not pages:
            raise RasterizationError(f"pdfplumber produced no pages for {source}")
        return pages
