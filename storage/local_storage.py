"""Local filesystem storage implementation."""

from __future__ import annotations

import os
from pathlib import Path
from typing import IO

from werkzeug.utils import secure_filename

from config import Config

from .abstract_storage import AbstractStorage


class LocalStorage(AbstractStorage):
    """Persist files to the local filesystem under the configured upload directory."""

    def __init__(self, upload_dir: str | None = None):
        self.base_directory = Path(upload_dir or Config.UPLOAD_DIR)
        os.makedirs(self.base_directory, exist_ok=True)

    def _resolve(self, path: str) -> Path | None:
        candidate = (self.base_directory / path).resolve()
        if not candidate.is_relative_to(self.base_directory.resolve()):
            return None
        return candidate

    def save(self, file_obj: IO[bytes], filename: str) -> str:
        """Save a file and return the relative path within the upload directory."""

        safe_name = secure_filename(filename)
        if not safe_name:
            raise ValueError("Filename must contain at least one valid character.")

        destination = self.base_directory / safe_name
        if hasattr(file_obj, "save"):
            file_obj.save(destination)  # type: ignore[arg-type]
        else:
            with open(destination, "wb") as output:
                output.write(file_obj.read())

        return str(destination.relative_to(self.base_directory))

    def exists(self, path: str) -> bool:
        """Return True if the given relative path exists within the upload directory."""

        resolved = self._resolve(path)
        return resolved is not None and resolved.is_file()

    def delete(self, path: str) -> bool:
        """Unlink a stored file; a missing file is not an error."""

        if not self.exists(path):
            return False
        resolved = self._resolve(path)
        resolved.unlink(missing_ok=True)
        return True
