from typing import Annotated

from fastapi import APIRouter, Depends, Header, Request, Response
from fastapi.responses import JSONResponse, StreamingResponse

from vidstream.depends import Injected
from vidstream.errors import ContentError, RangeNotSatisfiable
from vidstream.ranges import ByteRange, parse_range_header
from vidstream.response import to_response
from vidstream.storage import ObjectMetadata, StreamingAdapter

router = APIRouter()
videos = APIRouter(prefix="/api/v1/videos")


@router.get("/health")
async def health() -> Response:
    return Response(status_code=200)


def range_from_header(range: Annotated[str | None, Header()] = None) -> ByteRange:
    return parse_range_header(range)


async def content_error_handler(request: Request, exc: ContentError) -> JSONResponse:
    headers = {}
    if isinstance(exc, RangeNotSatisfiable):
        headers["Content-Range"] = f"bytes */{exc.size}"
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": str(exc), "kind": exc.kind.value},
        headers=headers,
    )


@videos.get("")
async def list_videos(adapter: Injected[StreamingAdapter]) -> list[ObjectMetadata]:
    return await adapter.list_all_content_metadata()


@videos.get("/{key}/metadata")
async def get_video_metadata(key: str, adapter: Injected[StreamingAdapter]) -> ObjectMetadata:
    return await adapter.get_content_metadata(key)


@videos.get("/{key}/size")
async def get_video_size(key: str, adapter: Injected[StreamingAdapter]) -> int:
    return await adapter.get_content_size(key)


# browsers send a Range header on their own when playing through a <video> tag
@videos.get("/{key}")
async def get_video_content(
    key: str,
    adapter: Injected[StreamingAdapter],
    range: Annotated[ByteRange, Depends(range_from_header)],
) -> StreamingResponse:
    content = await adapter.load_content(key, range)
    response = to_response(content)
    return StreamingResponse(response.body, status_code=response.status, headers=response.headers)


router.include_router(videos)
