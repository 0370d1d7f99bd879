"""Static file serving middleware.

Serves files from a directory at the same path they have on disk:
``GET /css/site.css`` reads ``<directory>/css/site.css``.

Anything that is not a readable regular file inside the directory falls
through to the next middleware or the routes.
"""

import logging
import mimetypes
from pathlib import Path

from switchback.http.request import Request
from switchback.http.response import ResponseWriter

logger = logging.getLogger("switchback.static")


class PublicFiles:
    """Middleware that serves public files (scripts, styles, images).

    Security: resolves symlinks and verifies the final path is within
    the configured directory, so ``..`` segments cannot escape it.

    Usage::

        router.add_middleware(PublicFiles("./public"))
    """

    __slots__ = ("_directory",)

    def __init__(self, directory: str | Path) -> None:
        self._directory = Path(directory).resolve()

    @property
    def directory(self) -> Path:
        return self._directory

    def __call__(self, response: ResponseWriter, request: Request) -> bool:
        """Serve the file for ``request.path``; ``False`` if there is none."""
        file_path = self._resolve(request.path)
        if file_path is None or not file_path.is_file():
            return False

        try:
            data = file_path.read_bytes()
        except OSError as exc:
            logger.debug("Cannot read %s: %s", file_path, exc)
            return False

        content_type, _ = mimetypes.guess_type(file_path.name)
        response.add_header("Content-Type", content_type or "application/octet-stream")
        response.write(data)
        return True

    def _resolve(self, path: str) -> Path | None:
        relative = path.lstrip("/")
        if not relative:
            return None
        try:
            file_path = (self._directory / relative).resolve()
        except (OSError, ValueError):
            return None
        if not file_path.is_relative_to(self._directory):
            return None
        return file_path


def serve_public_files(directory: str | Path) -> PublicFiles:
    """Return a middleware serving files stored in *directory*."""
    return PublicFiles(directory)
