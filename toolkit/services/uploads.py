# toolkit/services/uploads.py
import logging
from pathlib import Path, PurePath
from typing import AsyncGenerator, List, Optional

from starlette.datastructures import FormData, UploadFile
from starlette.formparsers import MultiPartException, MultiPartParser
from starlette.requests import ClientDisconnect, Request

from toolkit.core.errors import ErrorKind, ToolkitError
from toolkit.core.settings import ResolvedConfig, ToolkitSettings, resolve_config
from toolkit.schemas.uploads import UploadedFile
from toolkit.services.randomizer import random_string
from toolkit.services.sniffing import SNIFF_LEN, detect_content_type
from toolkit.utils.files import PathLike, create_dir_if_not_exist

logger = logging.getLogger(__name__)

RANDOM_NAME_LEN = 25
COPY_CHUNK = 64 * 1024


class _StreamAborted(MultiPartException):
    """Raised from inside the body stream so the parser closes its spooled files."""

    def __init__(self, error: ToolkitError):
        super().__init__(error.message)
        self.error = error


def _too_big(limit: int) -> ToolkitError:
    return ToolkitError(
        ErrorKind.BODY_TOO_LARGE,
        f"the uploaded file is too big (max {limit} bytes)",
        limit=limit,
    )


async def _limited_stream(request: Request, limit: int) -> AsyncGenerator[bytes, None]:
    received = 0
    try:
        async for chunk in request.stream():
            received += len(chunk)
            if received > limit:
                raise _StreamAborted(_too_big(limit))
            yield chunk
    except ClientDisconnect as exc:
        raise _StreamAborted(
            ToolkitError(ErrorKind.IO_FAILURE, "client disconnected during upload")
        ) from exc


async def _parse_form(request: Request, limit: int) -> FormData:
    content_type = request.headers.get("content-type", "")
    if not content_type.lower().startswith("multipart/form-data"):
        raise ToolkitError(ErrorKind.INVALID_FORM, "request is not a multipart form")

    declared = request.headers.get("content-length", "")
    if declared.isdigit() and int(declared) > limit:
        raise _too_big(limit)

    parser = MultiPartParser(request.headers, _limited_stream(request, limit))
    try:
        return await parser.parse()
    except _StreamAborted as exc:
        raise exc.error from exc
    except MultiPartException as exc:
        raise ToolkitError(ErrorKind.INVALID_FORM, f"unable to parse multipart form: {exc.message}") from exc
    except ValueError as exc:
        # python-multipart framing errors
        raise ToolkitError(ErrorKind.INVALID_FORM, f"unable to parse multipart form: {exc}") from exc


def _base_name(filename: str) -> str:
    # strip pad, zoals de browser het meestuurt
    return PurePath(filename.replace("\\", "/")).name


def _target_name(original_name: str, rename: bool) -> str:
    if not rename:
        return original_name
    # alles vanaf de laatste punt, ook bij ".env"
    dot = original_name.rfind(".")
    ext = original_name[dot:] if dot >= 0 else ""
    return f"{random_string(RANDOM_NAME_LEN)}{ext}"


async def _persist_part(
    part: UploadFile, upload_dir: PathLike, rename: bool, config: ResolvedConfig
) -> UploadedFile:
    """
    Sniff, validate and copy one file part into upload_dir.
    The part is always closed; the output file only if it was opened.
    """
    try:
        await part.seek(0)
        head = await part.read(SNIFF_LEN)
        detected = detect_content_type(head)
        if config.allowed_types and detected.lower() not in config.allowed_types:
            raise ToolkitError(
                ErrorKind.TYPE_NOT_ALLOWED,
                f"the uploaded file type is not permitted: {detected}",
                detected_type=detected,
            )
        await part.seek(0)

        original_name = _base_name(part.filename or "")
        new_name = _target_name(original_name, rename)
        destination = Path(upload_dir) / new_name

        size = 0
        with open(destination, "wb") as outfile:
            while True:
                chunk = await part.read(COPY_CHUNK)
                if not chunk:
                    break
                outfile.write(chunk)
                size += len(chunk)
    except OSError as exc:
        raise ToolkitError(ErrorKind.IO_FAILURE, f"could not store uploaded file: {exc}") from exc
    finally:
        await part.close()

    logger.debug(f"Bestand opgeslagen: {destination} ({size} bytes, {detected})")
    return UploadedFile(new_name=new_name, original_name=original_name, size_bytes=size)


async def upload_files(
    request: Request,
    upload_dir: PathLike,
    rename: bool = True,
    *,
    config: Optional[ResolvedConfig] = None,
) -> List[UploadedFile]:
    """
    Store every file part of a multipart request in upload_dir, in form order.

    On failure the ToolkitError carries the files stored so far in
    `error.uploaded`; those stay on disk.
    """
    config = config or resolve_config(ToolkitSettings())
    create_dir_if_not_exist(upload_dir)
    form = await _parse_form(request, config.max_upload_bytes)

    uploaded: List[UploadedFile] = []
    try:
        for _, value in form.multi_items():
            if not isinstance(value, UploadFile):
                continue
            try:
                uploaded.append(await _persist_part(value, upload_dir, rename, config))
            except ToolkitError as err:
                err.uploaded = list(uploaded)
                raise
    finally:
        await form.close()
    return uploaded


async def upload_one_file(
    request: Request,
    upload_dir: PathLike,
    rename: bool = True,
    *,
    config: Optional[ResolvedConfig] = None,
) -> UploadedFile:
    files = await upload_files(request, upload_dir, rename, config=config)
    if not files:
        raise ToolkitError(ErrorKind.NO_FILES, "no file was uploaded")
    return files[0]
