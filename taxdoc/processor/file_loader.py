from pathlib import Path

from taxdoc.processor.exceptions import NoUploadError
from taxdoc.processor.models import UploadedFile


class FileLoader:
    """Resolves the filesystem path of an uploaded file."""

    FILES_ROOT = Path(".")

    def __init__(self, files_root: Path | None = None) -> None:
        self._files_root = files_root if files_root is not None else self.FILES_ROOT

    def locate(self, upload: UploadedFile) -> Path:
        """Return the path of the uploaded file on local storage.

        Relative paths, such as the ``uploads/<uuid>_<name>`` paths stored by
        the upload handler, are resolved against the files root.

        Raises:
            NoUploadError: if the upload carries no file path.
        """
        if upload.path == Path(""):
            raise NoUploadError("No file uploaded")
        if upload.path.is_absolute():
            return upload.path
        return self._files_root / upload.path
