from __future__ import annotations

from dataclasses import dataclass

from vidstream.errors import RangeNotSatisfiable

MAX_CHUNK_SIZE = 1024 * 1024  # 1 MiB


@dataclass
class ByteRange:
    """Inclusive byte offsets as requested by a client. Either bound may be missing."""

    start: int | None = None
    end: int | None = None


@dataclass(frozen=True)
class ResolvedRange:
    """The byte interval actually served. Only built by `resolve_range`."""

    start: int
    end: int

    @property
    def length(self) -> int:
        return self.end - self.start + 1

    def header_value(self) -> str:
        return f"bytes={self.start}-{self.end}"


def resolve_range(
    requested: ByteRange | None,
    size: int,
    max_chunk_size: int = MAX_CHUNK_SIZE,
) -> ResolvedRange:
    """Clamp a requested range to the object size and the chunk ceiling.

    A missing or oversized upper bound is replaced by the largest chunk the
    server is willing to send. A start at or past the end of the object
    cannot be served and raises `RangeNotSatisfiable`.
    """
    if requested is None:
        requested = ByteRange(start=0, end=None)

    start = max(requested.start or 0, 0)
    if start >= size:
        raise RangeNotSatisfiable(start, size)

    end = requested.end
    if end is not None and end < start:
        end = None

    if end is None or end - start + 1 > max_chunk_size:
        end = min(start + max_chunk_size - 1, size - 1)

    return ResolvedRange(start=start, end=min(end, size - 1))


def _parse_offset(value: str | None) -> int | None:
    if value is None:
        return None
    value = value.strip()
    # plain ASCII digits only: no signs, underscores or other scripts' digits
    if not (value.isascii() and value.isdigit()):
        return None
    return int(value)


def parse_range_header(header: str | None) -> ByteRange:
    """Parse a `Range: bytes=<start>-<end>` header.

    Never fails: anything malformed degrades to "from byte 0, no upper bound".
    """
    if header is None or "=" not in header:
        return ByteRange(start=0, end=None)
    _, value = header.split("=", 1)
    bounds = value.split("-", 1)
    start = _parse_offset(bounds[0])
    end = _parse_offset(bounds[1]) if len(bounds) > 1 else None
    return ByteRange(start=start or 0, end=end)


def infer_content_type(filename: str) -> str:
    # every extension is reported as a video subtype, e.g. "a.mp4" -> "video/mp4"
    if "." in filename:
        return "video/" + filename.rsplit(".", 1)[1]
    return "application/octet-stream"
