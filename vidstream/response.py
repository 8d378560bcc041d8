from __future__ import annotations

from collections.abc import AsyncIterator
from dataclasses import dataclass

from vidstream.storage import StreamedContent


@dataclass
class ContentResponse:
    status: int
    headers: dict[str, str]
    body: AsyncIterator[bytes]


def to_response(content: StreamedContent) -> ContentResponse:
    """Describe `content` as a full (200) or partial (206) HTTP response."""
    size = content.metadata.size
    start, end = content.range.start, content.range.end
    complete = start == 0 and end == size - 1
    return ContentResponse(
        status=200 if complete else 206,
        headers={
            "Content-Type": content.metadata.content_type,
            "Accept-Ranges": "bytes",
            "Content-Length": str(content.content_length),
            "Content-Range": f"bytes {start}-{end}/{size}",
        },
        body=content.byte_stream,
    )
