# Toolkit package: helpers for FastAPI / Starlette request handlers

from toolkit.core.errors import ErrorKind, ToolkitError
from toolkit.core.settings import ResolvedConfig, ToolkitSettings, resolve_config
from toolkit.schemas.responses import JSONEnvelope
from toolkit.schemas.uploads import UploadedFile
from toolkit.tools import Tools

__all__ = [
    "ErrorKind",
    "JSONEnvelope",
    "ResolvedConfig",
    "Tools",
    "ToolkitError",
    "ToolkitSettings",
    "UploadedFile",
    "resolve_config",
]
