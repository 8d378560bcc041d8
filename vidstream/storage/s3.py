from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from functools import partial
from typing import Any, Callable

import boto3
from anyio import CapacityLimiter, to_thread
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError

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

NOT_FOUND_CODES = {"404", "NoSuchKey", "NotFound"}


@dataclass
class S3Store(StreamingAdapter):
    """Serves the objects of a single S3 bucket.

    boto3 is blocking, so every call is dispatched onto worker threads bounded
    by `limiter`; the event loop only ever awaits.
    """

    client: Any
    bucket: str
    limiter: CapacityLimiter
    max_chunk_size: int = MAX_CHUNK_SIZE
    list_page_size: int = 1000

    @classmethod
    @asynccontextmanager
    async def connect(
        cls,
        bucket: str,
        access_key_id: str | None = None,
        access_key_secret: str | None = None,
        region: str | None = None,
        endpoint: str | None = None,
        max_workers: int = 16,
        max_chunk_size: int = MAX_CHUNK_SIZE,
        list_page_size: int = 1000,
    ) -> AsyncIterator[S3Store]:
        session = boto3.session.Session(
            aws_access_key_id=access_key_id,
            aws_secret_access_key=access_key_secret,
            region_name=region,
        )
        client = session.client(
            "s3",
            endpoint_url=endpoint,
            config=BotoConfig(max_pool_connections=max_workers),
        )
        logger.info("Serving content from s3://%s (endpoint=%s)", bucket, endpoint or "aws")
        try:
            yield cls(client, bucket, CapacityLimiter(max_workers), max_chunk_size, list_page_size)
        finally:
            client.close()

    async def _run(self, func: Callable[..., Any], /, *args: Any, **kwargs: Any) -> Any:
        return await to_thread.run_sync(partial(func, *args, **kwargs), limiter=self.limiter)

    async def get_content_metadata(self, key: str) -> ObjectMetadata:
        try:
            response = await self._run(self.client.head_object, Bucket=self.bucket, Key=key)
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") in NOT_FOUND_CODES:
                raise NotFound(key) from None
            logger.error("Failed to get S3 content metadata for key %s.", key, exc_info=True)
            raise BackendFailure(f"Failed to head s3://{self.bucket}/{key}: {e}") from e
        except BotoCoreError as e:
            logger.error("Failed to get S3 content metadata for key %s.", key, exc_info=True)
            raise BackendFailure(f"Failed to head s3://{self.bucket}/{key}: {e}") from e
        return ObjectMetadata(
            key=key,
            content_type=response.get("ContentType") or infer_content_type(key),
            size=response["ContentLength"],
        )

    def _list_pages(self) -> list[ObjectMetadata]:
        paginator = self.client.get_paginator("list_objects_v2")
        pages = paginator.paginate(
            Bucket=self.bucket,
            PaginationConfig={"PageSize": self.list_page_size},
        )
        metadata: list[ObjectMetadata] = []
        for page in pages:
            for obj in page.get("Contents", []):
                key = obj.get("Key")
                if not key:
                    continue
                metadata.append(
                    ObjectMetadata(key=key, content_type=infer_content_type(key), size=obj["Size"])
                )
        return metadata

    async def list_all_content_metadata(self) -> list[ObjectMetadata]:
        try:
            return await self._run(self._list_pages)
        except (BotoCoreError, ClientError) as e:
            logger.error("Failed to list S3 content in %s.", self.bucket, exc_info=True)
            raise BackendFailure(f"Failed to list s3://{self.bucket}: {e}") from e

    async def stream_content(self, key: str, range: ResolvedRange) -> AsyncIterator[bytes]:
        logger.debug("Streaming S3 Object %s/%s. %s", self.bucket, key, range.header_value())
        try:
            response = await self._run(
                self.client.get_object,
                Bucket=self.bucket,
                Key=key,
                Range=range.header_value(),
            )
        except (BotoCoreError, ClientError) as e:
            logger.error(
                "Error streaming S3 Object %s/%s. %s", self.bucket, key, range.header_value(), exc_info=True
            )
            raise BackendFailure(f"Failed to get s3://{self.bucket}/{key}: {e}") from e

        body = response["Body"]
        remaining = range.length
        try:
            while remaining > 0:
                chunk = await self._run(body.read, min(READ_CHUNK_SIZE, remaining))
                if not chunk:
                    raise BackendFailure(
                        f"s3://{self.bucket}/{key} ended {remaining} bytes before the end of {range.header_value()}"
                    )
                remaining -= len(chunk)
                yield chunk
        except (BotoCoreError, ClientError, OSError) as e:
            logger.error(
                "Error streaming S3 Object %s/%s. %s", self.bucket, key, range.header_value(), exc_info=True
            )
            raise BackendFailure(f"Failed to read s3://{self.bucket}/{key}: {e}") from e
        finally:
            body.close()
