from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from vidstream.ranges import MAX_CHUNK_SIZE


class Config(BaseSettings):
    """Process-wide settings, read once from `VIDSTREAM_*` environment variables."""

    model_config = SettingsConfigDict(env_prefix="VIDSTREAM_", extra="ignore")

    backend: Literal["local", "s3"] = "local"

    # local backend
    root: Path = Path("videos")

    # s3 backend
    bucket: str | None = None
    access_key_id: str | None = None
    access_key_secret: str | None = None
    region: str | None = None
    endpoint: str | None = None
    max_workers: int = Field(default=16, gt=0)
    list_page_size: int = Field(default=1000, gt=0, le=1000)

    max_chunk_size: int = Field(default=MAX_CHUNK_SIZE, gt=0)

    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"

    @model_validator(mode="after")
    def _check_backend(self) -> Config:
        if self.backend == "s3" and not self.bucket:
            raise ValueError("VIDSTREAM_BUCKET is required for the s3 backend")
        return self
