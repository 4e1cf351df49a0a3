# toolkit/utils/files.py
import logging
import os
from pathlib import Path
from typing import Union

from fastapi.responses import FileResponse

from toolkit.core.errors import ErrorKind, ToolkitError

logger = logging.getLogger(__name__)

DIR_MODE = 0o755

PathLike = Union[str, "os.PathLike[str]"]


def create_dir_if_not_exist(path: PathLike) -> None:
    """Create `path` and any missing parents (mode 0755); no-op when it exists."""
    if os.path.isdir(path):
        return
    try:
        os.makedirs(path, mode=DIR_MODE, exist_ok=True)
    except OSError as exc:
        raise ToolkitError(
            ErrorKind.DIRECTORY_CREATE_FAILED,
            f"could not create directory {os.fspath(path)}: {exc.strerror or exc}",
        ) from exc
    logger.debug(f"Map aangemaakt: {os.fspath(path)}")


def download_static_file(directory: PathLike, file_name: str, display_name: str) -> FileResponse:
    """
    Serve directory/file_name as an attachment called `display_name`.
    Range requests, Last-Modified and Content-Length are handled by FileResponse.
    """
    file_path = Path(directory) / file_name
    if not file_path.is_file():
        raise ToolkitError(ErrorKind.NOT_FOUND, f"file not found: {file_name}")
    return FileResponse(
        file_path,
        headers={"Content-Disposition": f'attachment; filename="{display_name}"'},
    )
