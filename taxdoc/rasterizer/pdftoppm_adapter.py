import subprocess
from pathlib import Path

from taxdoc.logging.logger import Log
from taxdoc.rasterizer.base import BaseRasterizer, collect_pages
from taxdoc.rasterizer.exceptions import ExternalToolError, RasterizationError
from taxdoc.rasterizer.models import PageImage


class PdftoppmRasterizer(BaseRasterizer):
    """Renders PDF pages to PNG files with the poppler ``pdftoppm`` tool."""

    def __init__(
        self,
        executable: str = "pdftoppm",
        dpi: int = 150,
        timeout_seconds: int = 120,
    ) -> None:
        self._executable = executable
        self._dpi = dpi
        self._timeout_seconds = timeout_seconds

    def rasterize(self, source: Path, output_dir: Path) -> list[PageImage]:
        command = [
            self._executable,
            "-png",
            "-r",
            str(self._dpi),
            str(source),
            str(output_dir / "page"),
        ]
        try:
            completed = subprocess.run(
                command,
                capture_output=True,
                text=True,
                timeout=self._timeout_seconds,
                check=False,
            )
        except FileNotFoundError as exc:
            raise ExternalToolError(f"Failed to run {self._executable}: {exc}") from exc
        except subprocess.TimeoutExpired as exc:
            raise ExternalToolError(
                f"{self._executable} timed out after {self._timeout_seconds}s"
            ) from exc

        if completed.returncode != 0:
            raise ExternalToolError(
                f"{self._executable} failed with exit code {completed.returncode}: "
                f"{completed.stderr.strip()}"
            )

        pages = collect_pages(output_dir)
        if not pages:
            raise RasterizationError(f"{self._executable} produced no pages for {source}")
        Log.info(f"Rasterized {len(pages)} pages from {source.name}")
        return pages
