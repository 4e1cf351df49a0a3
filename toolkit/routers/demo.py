# toolkit/routers/demo.py
import os

from fastapi import APIRouter, Request
from fastapi.responses import FileResponse, JSONResponse
from pydantic import BaseModel

from toolkit.schemas.responses import JSONEnvelope
from toolkit.tools import Tools

router = APIRouter(tags=["toolkit"])


class EchoPayload(BaseModel):
    foo: str
    bar: int | None = None


def _tools(request: Request) -> Tools:
    return request.app.state.tools


def _upload_dir() -> str:
    return os.getenv("UPLOAD_DIR", "./uploads")


def _static_dir() -> str:
    return os.getenv("STATIC_DIR", "./static")


# -----------------------------------------------------------------------------
# Uploads
# -----------------------------------------------------------------------------
@router.post("/uploads")
async def upload_many(request: Request, rename: bool = True) -> JSONResponse:
    tools = _tools(request)
    uploaded = await tools.upload_files(request, _upload_dir(), rename)
    return tools.write_json(
        200,
        JSONEnvelope(message=f"{len(uploaded)} file(s) uploaded", data=[f.model_dump() for f in uploaded]),
    )


@router.post("/uploads/one")
async def upload_one(request: Request, rename: bool = True) -> JSONResponse:
    tools = _tools(request)
    uploaded = await tools.upload_one_file(request, _upload_dir(), rename)
    return tools.write_json(200, JSONEnvelope(message="file uploaded", data=uploaded.model_dump()))


# -----------------------------------------------------------------------------
# JSON
# -----------------------------------------------------------------------------
@router.post("/json")
async def echo_json(request: Request) -> JSONResponse:
    tools = _tools(request)
    payload = await tools.read_json(request, EchoPayload)
    return tools.write_json(200, JSONEnvelope(message="ok", data=payload), headers={"X-Toolkit": "echo"})


# -----------------------------------------------------------------------------
# Misc
# -----------------------------------------------------------------------------
@router.get("/slug")
async def make_slug(request: Request, value: str = "") -> JSONResponse:
    tools = _tools(request)
    try:
        slug = tools.slugify(value)
    except ValueError as e:
        return tools.error_json(e)
    return tools.write_json(200, JSONEnvelope(message="ok", data={"slug": slug}))


@router.get("/download/{file_name}")
async def download(request: Request, file_name: str, display_name: str | None = None) -> FileResponse:
    return _tools(request).download_static_file(_static_dir(), file_name, display_name or file_name)
