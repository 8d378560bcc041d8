from __future__ import annotations

import logging
import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path

import anyio

from vidstream.errors import BackendFailure, NotFound
from vidstream.ranges import infer_content_type
from vidstream.storage import (
    MAX_CHUNK_SIZE,
    READ_CHUNK_SIZE,
    ObjectMetadata,
    ResolvedRange,
    StreamingAdapter,
)

logger = logging.getLogger(__name__)


@dataclass
class LocalStore(StreamingAdapter):
    """Serves the files found directly under `root`."""

    root: anyio.Path
    max_chunk_size: int = MAX_CHUNK_SIZE

    @classmethod
    @asynccontextmanager
    async def connect(
        cls, root: str | os.PathLike[str], max_chunk_size: int = MAX_CHUNK_SIZE
    ) -> AsyncIterator[LocalStore]:
        path = await anyio.Path(root).absolute()
        logger.info("Serving local content from %s", path)
        yield cls(path, max_chunk_size)

    def _path(self, key: str) -> anyio.Path:
        # keys name direct children of the root, nothing else
        if not key or key != Path(key).name or key in (".", ".."):
            raise NotFound(key)
        return self.root / key

    async def _resolve(self, key: str) -> anyio.Path:
        path = self._path(key)
        try:
            if not await path.is_file():
                raise NotFound(key)
        except OSError as e:
            raise BackendFailure(f"Failed to resolve {key!r}: {e}") from e
        return path

    async def get_content_metadata(self, key: str) -> ObjectMetadata:
        path = await self._resolve(key)
        try:
            stat = await path.stat()
        except FileNotFoundError:
            raise NotFound(key) from None
        except OSError as e:
            logger.error("Failed to get local content metadata for key %s.", key, exc_info=True)
            raise BackendFailure(f"Failed to stat {key!r}: {e}") from e
        return ObjectMetadata(key=key, content_type=infer_content_type(key), size=stat.st_size)

    async def list_all_content_metadata(self) -> list[ObjectMetadata]:
        try:
            names = sorted([entry.name async for entry in self.root.iterdir()])
        except OSError as e:
            logger.error("Failed to list local content in %s.", self.root, exc_info=True)
            raise BackendFailure(f"Failed to list {self.root}: {e}") from e

        metadata: list[ObjectMetadata] = []
        for name in names:
            try:
                metadata.append(await self.get_content_metadata(name))
            except NotFound:
                # directories and entries removed while listing
                continue
        return metadata

    async def stream_content(self, key: str, range: ResolvedRange) -> AsyncIterator[bytes]:
        path = self._path(key)
        remaining = range.length
        try:
            async with await anyio.open_file(path, "rb") as f:
                size = await f.seek(0, os.SEEK_END)
                if size < range.start:
                    raise BackendFailure(
                        f"Could not skip to byte {range.start} of {key!r}: only {size} bytes available"
                    )
                await f.seek(range.start)
                while remaining > 0:
                    chunk = await f.read(min(READ_CHUNK_SIZE, remaining))
                    if not chunk:
                        raise BackendFailure(
                            f"{key!r} ended {remaining} bytes before the end of {range.header_value()}"
                        )
                    remaining -= len(chunk)
                    yield chunk
        except OSError as e:
            logger.error("Error streaming local file %s. %s", path, range.header_value(), exc_info=True)
            raise BackendFailure(f"Failed to read {key!r}: {e}") from e
