from __future__ import annotations

from collections.abc import AsyncIterator
from dataclasses import dataclass
from typing import Protocol

from vidstream.ranges import MAX_CHUNK_SIZE, ByteRange, ResolvedRange, resolve_range

__all__ = [
    "MAX_CHUNK_SIZE",
    "READ_CHUNK_SIZE",
    "ByteRange",
    "ObjectMetadata",
    "ResolvedRange",
    "StreamedContent",
    "StreamingAdapter",
]

READ_CHUNK_SIZE = 8 * 1024  # 8 KiB


@dataclass
class ObjectMetadata:
    key: str
    content_type: str
    size: int


@dataclass
class StreamedContent:
    key: str
    metadata: ObjectMetadata
    # lazy, finite and not restartable; the consumer owns it until exhausted or closed
    byte_stream: AsyncIterator[bytes]
    range: ResolvedRange

    @property
    def content_length(self) -> int:
        return self.range.length


class StreamingAdapter(Protocol):
    """A backing store that can describe its objects and stream byte ranges of them.

    Implementations provide `get_content_metadata`, `list_all_content_metadata`
    and `stream_content`; `load_content` and `get_content_size` are shared.
    """

    max_chunk_size: int

    async def get_content_metadata(self, key: str) -> ObjectMetadata: ...

    async def list_all_content_metadata(self) -> list[ObjectMetadata]: ...

    def stream_content(self, key: str, range: ResolvedRange) -> AsyncIterator[bytes]: ...

    async def get_content_size(self, key: str) -> int:
        metadata = await self.get_content_metadata(key)
        return metadata.size

    async def load_content(self, key: str, requested: ByteRange | None = None) -> StreamedContent:
        metadata = await self.get_content_metadata(key)
        valid_range = resolve_range(requested, metadata.size, self.max_chunk_size)
        return StreamedContent(
            key=key,
            metadata=metadata,
            byte_stream=self.stream_content(key, valid_range),
            range=valid_range,
        )
