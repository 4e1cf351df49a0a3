# toolkit/services/json_codec.py
from __future__ import annotations

import json
import logging
import types
from dataclasses import fields as dataclass_fields, is_dataclass
from functools import lru_cache
from typing import Annotated, Any, Dict, Mapping, Optional, Tuple, Union, get_args, get_origin, get_type_hints

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel, PydanticUserError, TypeAdapter, ValidationError
from starlette.requests import ClientDisconnect, Request

from toolkit.core.errors import ErrorKind, ToolkitError, body_too_large
from toolkit.core.settings import DEFAULT_MAX_JSON_BYTES
from toolkit.schemas.responses import JSONEnvelope

logger = logging.getLogger(__name__)

JSON_WS = " \t\n\r"


class _NonStandardConstant(ValueError):
    pass


def _reject_constant(token: str) -> Any:
    raise _NonStandardConstant(token)


# NaN en Infinity zijn geen JSON
_decoder = json.JSONDecoder(parse_constant=_reject_constant)


# =========================
# Reading
# =========================
async def _read_body(request: Request, limit: int) -> bytes:
    declared = request.headers.get("content-length", "")
    if declared.isdigit() and int(declared) > limit:
        raise body_too_large(limit)

    body = bytearray()
    try:
        async for chunk in request.stream():
            body.extend(chunk)
            if len(body) > limit:
                raise body_too_large(limit)
    except ClientDisconnect as exc:
        raise ToolkitError(ErrorKind.IO_FAILURE, "client disconnected while sending body") from exc
    return bytes(body)


def _byte_offset(text: str, pos: int) -> int:
    return len(text[:pos].encode("utf-8"))


def _constant_position(text: str, start: int) -> int:
    """Index of the first N or I outside a string literal, from start."""
    in_string = escaped = False
    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
        elif ch == '"':
            in_string = True
        elif ch in "NI":
            return i
    return start


def _syntax_error(text: str, pos: int) -> ToolkitError:
    offset = _byte_offset(text, pos) + 1
    return ToolkitError(
        ErrorKind.JSON_SYNTAX,
        f"body contains badly-formed JSON (at character {offset})",
        offset=offset,
    )


def _decode_first(text: str) -> Tuple[Any, int, int]:
    """Decode the first JSON value in text; returns (value, start, end)."""
    start = len(text) - len(text.lstrip(JSON_WS))
    if start == len(text):
        raise ToolkitError(ErrorKind.JSON_EMPTY_BODY, "body must not be empty")

    try:
        value, end = _decoder.raw_decode(text, start)
    except _NonStandardConstant as exc:
        raise _syntax_error(text, _constant_position(text, start)) from exc
    except json.JSONDecodeError as exc:
        if exc.pos >= len(text.rstrip(JSON_WS)) or exc.msg.startswith("Unterminated string"):
            raise ToolkitError(ErrorKind.JSON_TRUNCATED, "body contains badly-formed JSON") from exc
        raise _syntax_error(text, exc.pos) from exc
    return value, start, end


@lru_cache(maxsize=256)
def _adapter(target: Any) -> TypeAdapter:
    return TypeAdapter(target)


def _adapter_for(target: Any) -> TypeAdapter:
    if not isinstance(target, type) and get_origin(target) is None:
        raise ToolkitError(
            ErrorKind.JSON_INVALID_TARGET,
            f"error unmarshaling JSON: target must be a type, got {type(target).__name__}",
        )
    try:
        return _adapter(target)
    except (PydanticUserError, TypeError) as exc:
        raise ToolkitError(ErrorKind.JSON_INVALID_TARGET, f"error unmarshaling JSON: {exc}") from exc


def _declared_fields(shape: Any) -> Optional[Dict[str, Any]]:
    """Known keys -> annotation for structured targets, None for everything else."""
    if get_origin(shape) is not None:
        return None
    if isinstance(shape, type) and issubclass(shape, BaseModel):
        if shape.model_config.get("extra") == "allow":
            return None
        declared: Dict[str, Any] = {}
        for name, info in shape.model_fields.items():
            declared[name] = info.annotation
            if info.alias:
                declared[info.alias] = info.annotation
            if isinstance(info.validation_alias, str):
                declared[info.validation_alias] = info.annotation
        return declared
    if isinstance(shape, type) and is_dataclass(shape):
        hints = get_type_hints(shape)
        return {f.name: hints.get(f.name, Any) for f in dataclass_fields(shape)}
    return None


def _find_unknown_field(value: Any, shape: Any) -> Optional[str]:
    declared = _declared_fields(shape)
    if declared is not None:
        if not isinstance(value, dict):
            return None
        for key, item in value.items():
            if key not in declared:
                return key
            found = _find_unknown_field(item, declared[key])
            if found is not None:
                return found
        return None

    origin = get_origin(shape)
    args = get_args(shape)
    if origin is None or not args:
        return None
    if origin is Annotated:
        return _find_unknown_field(value, args[0])
    if origin is Union or origin is types.UnionType:
        members = [a for a in args if a is not type(None)]
        # Alleen eenduidige Optional[X]; echte unions laten we aan pydantic over
        return _find_unknown_field(value, members[0]) if len(members) == 1 else None
    if isinstance(value, list):
        if origin is tuple and not (len(args) == 2 and args[1] is Ellipsis):
            pairs = zip(value, args)
        else:
            pairs = ((item, args[0]) for item in value)
        for item, item_shape in pairs:
            found = _find_unknown_field(item, item_shape)
            if found is not None:
                return found
        return None
    if isinstance(value, dict) and len(args) == 2:
        for item in value.values():
            found = _find_unknown_field(item, args[1])
            if found is not None:
                return found
    return None


def _validate(adapter: TypeAdapter, raw: str, value_offset: int) -> Any:
    try:
        return adapter.validate_json(raw, strict=True)
    except ValidationError as exc:
        first = exc.errors()[0]
        loc = [str(part) for part in first.get("loc", ())]
        if loc:
            field = ".".join(loc)
            if first.get("type") == "missing":
                message = f'body is missing JSON field "{field}"'
            else:
                message = f'body contains incorrect JSON type for field "{field}"'
            raise ToolkitError(ErrorKind.JSON_TYPE_MISMATCH, message, field=field) from exc
        raise ToolkitError(
            ErrorKind.JSON_TYPE_MISMATCH,
            f"body contains incorrect JSON type (at character {value_offset})",
            offset=value_offset,
        ) from exc


async def read_json(
    request: Request,
    target: Any,
    *,
    max_bytes: Optional[int] = None,
    allow_unknown_fields: bool = False,
) -> Any:
    """
    Decode exactly one JSON value from the request body into `target`.

    `target` is a pydantic model, a dataclass or any type pydantic can
    validate. Values are validated in strict JSON mode. Every failure is
    raised as a ToolkitError; nothing is returned on failure.

    Checks run in a fixed order: size, syntax, target, unknown keys, types,
    trailing data. A body with both an unknown key and a wrong type anywhere
    is reported as json-unknown-field.
    """
    limit = max_bytes or DEFAULT_MAX_JSON_BYTES
    body = await _read_body(request, limit)
    text = body.decode("utf-8", errors="replace")

    value, start, end = _decode_first(text)
    adapter = _adapter_for(target)

    if not allow_unknown_fields:
        unknown = _find_unknown_field(value, target)
        if unknown is not None:
            raise ToolkitError(
                ErrorKind.JSON_UNKNOWN_FIELD,
                f'body contains unknown key "{unknown}"',
                field=unknown,
            )

    result = _validate(adapter, text[start:end], _byte_offset(text, start) + 1)

    if text[end:].strip(JSON_WS):
        raise ToolkitError(ErrorKind.JSON_MULTIPLE_VALUES, "body must contain only one JSON value")
    return result


# =========================
# Writing
# =========================
def write_json(status: int, data: Any, headers: Optional[Mapping[str, str]] = None) -> JSONResponse:
    """
    Build a JSON response; extra headers are applied first, the content type
    is always application/json. Encoding errors propagate unchanged.

    `headers` holds one value per name; repeated headers (several Set-Cookie
    lines) go on the returned response via `response.headers.append`.
    """
    if isinstance(data, JSONEnvelope):
        data = data.to_wire()
    content = jsonable_encoder(data)
    extra = {k: v for k, v in (headers or {}).items() if k.lower() != "content-type"}
    return JSONResponse(content=content, status_code=status, headers=extra)


def error_json(err: BaseException, status: int = 400) -> JSONResponse:
    payload = JSONEnvelope(error=True, message=str(err))
    return write_json(status, payload)
