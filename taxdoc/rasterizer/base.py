import re
from abc import ABC, abstractmethod
from pathlib import Path

from taxdoc.rasterizer.exceptions import RasterizationError
from taxdoc.rasterizer.models import PageImage

MULTI_PAGE_EXTENSIONS = frozenset({".pdf"})
PAGE_FILE_PATTERN = re.compile(r"^page-(\d+)\.png$")


def is_multi_page(path: Path) -> bool:
    """Decide by extension alone whether a file needs rasterization."""
    return path.suffix.lower() in MULTI_PAGE_EXTENSIONS


def single_page(path: Path) -> list[PageImage]:
    """Wrap an already-raster input as a one-page sequence."""
    return [PageImage(ordinal_index=1, path=path)]


def collect_pages(output_dir: Path) -> list[PageImage]:
    """List rendered pages in output_dir ordered by their page number.

    Order comes from the integer in ``page-<n>.png``, so renderers that do
    not zero-pad still yield the right sequence. Other files are ignored.
    """
    pages: dict[int, Path] = {}
    for entry in output_dir.iterdir():
        match = PAGE_FILE_PATTERN.match(entry.name)
        if match is None or not entry.is_file():
            continue
        index = int(match.group(1))
        if index in pages:
            raise RasterizationError(
                f"Duplicate page {index} in {output_dir}: {pages[index].name}, {entry.name}"
            )
        pages[index] = entry
    return [PageImage(ordinal_index=index, path=pages[index]) for index in sorted(pages)]


class BaseRasterizer(ABC):
    """Contract for all page rasterization adapters."""

    @abstractmethod
    def rasterize(self, source: Path, output_dir: Path) -> list[PageImage]:
        """Render every page of a multi-page document into output_dir.

        Args:
            source: Path of the multi-page document.
            output_dir: Existing, empty scratch directory owned by the caller.

        Returns:
            One PageImage per page, ordered by ordinal_index.

        Raises:
            RasterizationError: if rendering fails for any reason.
        """
