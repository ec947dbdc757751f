from taxdoc.config.settings import Settings
from taxdoc.rasterizer.base import BaseRasterizer
from taxdoc.rasterizer.pdfplumber_adapter import PdfPlumberRasterizer
from taxdoc.rasterizer.pdftoppm_adapter import PdftoppmRasterizer
from taxdoc.rasterizer.pymupdf_adapter import PyMuPdfRasterizer


class RasterizerFactory:
    """Creates the correct page rasterizer based on settings."""

    ENGINES: tuple[str, ...] = ("pdftoppm", "pymupdf", "pdfplumber")

    @classmethod
    def create(cls, settings: Settings) -> BaseRasterizer:
        engine = settings.rasterizer_engine.lower()
        if engine == "pdftoppm":
            return PdftoppmRasterizer(
                executable=settings.pdftoppm_path,
                dpi=settings.rasterize_dpi,
                timeout_seconds=settings.rasterize_timeout_seconds,
            )
        if engine == "pymupdf":
            return PyMuPdfRasterizer(dpi=settings.rasterize_dpi)
        if engine == "pdfplumber":
            return PdfPlumberRasterizer(dpi=settings.rasterize_dpi)
        raise ValueError(
            f"Unknown rasterizer engine '{engine}'. Choose from: {list(cls.ENGINES)}"
        )
