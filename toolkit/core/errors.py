# toolkit/core/errors.py
from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, List, Optional

if TYPE_CHECKING:
    from toolkit.services.uploads import UploadedFile


class ErrorKind(str, Enum):
    DIRECTORY_CREATE_FAILED = "directory-create-failed"
    BODY_TOO_LARGE = "body-too-large"
    TYPE_NOT_ALLOWED = "type-not-allowed"
    IO_FAILURE = "io-failure"
    NOT_FOUND = "not-found"
    INVALID_FORM = "invalid-form"
    NO_FILES = "no-files"
    JSON_SYNTAX = "json-syntax"
    JSON_TRUNCATED = "json-truncated"
    JSON_TYPE_MISMATCH = "json-type-mismatch"
    JSON_EMPTY_BODY = "json-empty-body"
    JSON_UNKNOWN_FIELD = "json-unknown-field"
    JSON_MULTIPLE_VALUES = "json-multiple-values"
    JSON_INVALID_TARGET = "json-invalid-target"


# Suggested response status per kind (hosts may ignore this)
_HTTP_STATUS = {
    ErrorKind.BODY_TOO_LARGE: 413,
    ErrorKind.TYPE_NOT_ALLOWED: 415,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.DIRECTORY_CREATE_FAILED: 500,
    ErrorKind.IO_FAILURE: 500,
}


class ToolkitError(Exception):
    """
    Classified error raised by every toolkit operation.

    - kind: ErrorKind tag callers can branch on
    - offset: byte offset in the request body (json-syntax, json-type-mismatch)
    - field: field path (json-type-mismatch) or key (json-unknown-field)
    - limit: configured byte limit (body-too-large)
    - detected_type: sniffed MIME type (type-not-allowed)
    - uploaded: files persisted before an upload batch failed
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        *,
        offset: Optional[int] = None,
        field: Optional[str] = None,
        limit: Optional[int] = None,
        detected_type: Optional[str] = None,
    ):
        self.kind = kind
        self.message = str(message)
        self.offset = offset
        self.field = field
        self.limit = limit
        self.detected_type = detected_type
        self.uploaded: List["UploadedFile"] = []
        super().__init__(self.message)

    @property
    def http_status(self) -> int:
        return _HTTP_STATUS.get(self.kind, 400)

    def __repr__(self) -> str:
        return f"ToolkitError({self.kind.value!r}, {self.message!r})"


def body_too_large(limit: int) -> ToolkitError:
    return ToolkitError(
        ErrorKind.BODY_TOO_LARGE,
        f"body must not be larger than {limit} bytes",
        limit=limit,
    )
