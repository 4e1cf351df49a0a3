# toolkit/core/settings.py
from dataclasses import dataclass
from typing import FrozenSet

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_MAX_UPLOAD_BYTES = 1 << 30  # 1 GiB
DEFAULT_MAX_JSON_BYTES = 1 << 20  # 1 MiB


class ToolkitSettings(BaseSettings):
    """
    Instellingen per toolkit-instantie.
    Een waarde van 0 betekent: gebruik de default (zie resolve_config).
    """

    model_config = SettingsConfigDict(
        env_prefix="TOOLKIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    max_upload_bytes: int = Field(default=0, ge=0)
    allowed_types: list[str] = []
    max_json_bytes: int = Field(default=0, ge=0)
    allow_unknown_fields: bool = False


@dataclass(frozen=True)
class ResolvedConfig:
    max_upload_bytes: int
    allowed_types: FrozenSet[str]
    max_json_bytes: int
    allow_unknown_fields: bool


def resolve_config(settings: ToolkitSettings) -> ResolvedConfig:
    """Fill in defaults for one call without touching the shared settings."""
    return ResolvedConfig(
        max_upload_bytes=settings.max_upload_bytes or DEFAULT_MAX_UPLOAD_BYTES,
        allowed_types=frozenset(t.strip().lower() for t in settings.allowed_types if t.strip()),
        max_json_bytes=settings.max_json_bytes or DEFAULT_MAX_JSON_BYTES,
        allow_unknown_fields=bool(settings.allow_unknown_fields),
    )
