import shutil
import uuid
from collections.abc import Generator
from contextlib import contextmanager
from pathlib import Path

from taxdoc.logging.logger import Log
from taxdoc.rasterizer.exceptions import RasterizationError


@contextmanager
def scratch_directory(root: Path) -> Generator[Path, None, None]:
    """Create a uniquely named scratch directory and remove it on exit.

    The name carries a random UUID so concurrent uploads never share a
    directory. Removal runs on success and on error alike.
    """
    path = root / f"temp_{uuid.uuid4().hex}"
    try:
        path.mkdir(parents=True)
    except OSError as exc:
        raise RasterizationError(f"Cannot create scratch directory {path}: {exc}") from exc
    Log.debug(f"Created scratch directory {path}")
    try:
        yield path
    finally:
        shutil.rmtree(path)
        Log.debug(f"Removed scratch directory {path}")
