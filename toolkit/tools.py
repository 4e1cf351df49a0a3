# toolkit/tools.py
from typing import Any, List, Mapping, Optional, Tuple

import httpx
from fastapi.responses import FileResponse, JSONResponse
from starlette.requests import Request

from toolkit.core.settings import ResolvedConfig, ToolkitSettings, resolve_config
from toolkit.schemas.uploads import UploadedFile
from toolkit.services import json_codec, remote, uploads
from toolkit.services.randomizer import random_string
from toolkit.utils import files, slugs
from toolkit.utils.files import PathLike


class Tools:
    """
    One toolkit instance: shared settings plus every helper as a method.

    Settings are read, never written: each call works on its own
    ResolvedConfig, so one instance can serve concurrent requests.
    """

    def __init__(self, settings: Optional[ToolkitSettings] = None):
        self.settings = settings or ToolkitSettings()

    def config(self) -> ResolvedConfig:
        return resolve_config(self.settings)

    def random_string(self, length: int) -> str:
        return random_string(length)

    async def upload_files(self, request: Request, upload_dir: PathLike, rename: bool = True) -> List[UploadedFile]:
        return await uploads.upload_files(request, upload_dir, rename, config=self.config())

    async def upload_one_file(self, request: Request, upload_dir: PathLike, rename: bool = True) -> UploadedFile:
        return await uploads.upload_one_file(request, upload_dir, rename, config=self.config())

    def create_dir_if_not_exist(self, path: PathLike) -> None:
        files.create_dir_if_not_exist(path)

    def slugify(self, value: str) -> str:
        return slugs.slugify(value)

    def download_static_file(self, directory: PathLike, file_name: str, display_name: str) -> FileResponse:
        return files.download_static_file(directory, file_name, display_name)

    async def read_json(self, request: Request, target: Any) -> Any:
        cfg = self.config()
        return await json_codec.read_json(
            request,
            target,
            max_bytes=cfg.max_json_bytes,
            allow_unknown_fields=cfg.allow_unknown_fields,
        )

    def write_json(self, status: int, data: Any, headers: Optional[Mapping[str, str]] = None) -> JSONResponse:
        return json_codec.write_json(status, data, headers)

    def error_json(self, err: BaseException, status: int = 400) -> JSONResponse:
        return json_codec.error_json(err, status)

    async def push_json_to_remote(
        self, uri: str, data: Any, client: Optional[httpx.AsyncClient] = None
    ) -> Tuple[httpx.Response, int]:
        return await remote.push_json_to_remote(uri, data, client)
