import logging
from collections.abc import AsyncIterator
from contextlib import AsyncExitStack, asynccontextmanager

import anyio
from fastapi import FastAPI

from vidstream.api import content_error_handler, router
from vidstream.config import Config
from vidstream.depends import bind
from vidstream.errors import ContentError
from vidstream.storage import StreamingAdapter

logger = logging.getLogger(__name__)


def make_app(adapter: StreamingAdapter) -> FastAPI:
    app = FastAPI()
    app.include_router(router)
    app.add_exception_handler(ContentError, content_error_handler)  # type: ignore[arg-type]
    bind(app, StreamingAdapter, adapter)
    return app


@asynccontextmanager
async def open_adapter(config: Config) -> AsyncIterator[StreamingAdapter]:
    """Open the backing store selected by `config.backend`."""
    if config.backend == "s3":
        from vidstream.storage.s3 import S3Store

        if not config.bucket:
            raise ValueError("a bucket is required for the s3 backend")
        async with S3Store.connect(
            bucket=config.bucket,
            access_key_id=config.access_key_id,
            access_key_secret=config.access_key_secret,
            region=config.region,
            endpoint=config.endpoint,
            max_workers=config.max_workers,
            max_chunk_size=config.max_chunk_size,
            list_page_size=config.list_page_size,
        ) as store:
            yield store
    else:
        from vidstream.storage.local import LocalStore

        async with LocalStore.connect(config.root, max_chunk_size=config.max_chunk_size) as store:
            yield store


async def main() -> None:
    import uvicorn

    config = Config()
    logging.basicConfig(
        level=config.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    async with AsyncExitStack() as stack:
        adapter = await stack.enter_async_context(open_adapter(config))
        app = make_app(adapter)

        logger.info("Listening on %s:%d (backend=%s)", config.host, config.port, config.backend)
        server = uvicorn.Server(uvicorn.Config(app, host=config.host, port=config.port, log_config=None))
        await server.serve()


def run() -> None:
    anyio.run(main)


if __name__ == "__main__":
    run()
