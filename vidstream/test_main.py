from pathlib import Path

import pytest
from moto import mock_aws
from pydantic import ValidationError

from vidstream.config import Config
from vidstream.main import open_adapter
from vidstream.storage import MAX_CHUNK_SIZE
from vidstream.storage.local import LocalStore
from vidstream.storage.s3 import S3Store


def test_config_defaults() -> None:
    config = Config()
    assert config.backend == "local"
    assert config.root == Path("videos")
    assert config.max_chunk_size == MAX_CHUNK_SIZE


def test_config_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("VIDSTREAM_BACKEND", "s3")
    monkeypatch.setenv("VIDSTREAM_BUCKET", "videos-bucket")
    monkeypatch.setenv("VIDSTREAM_MAX_CHUNK_SIZE", "4096")

    config = Config()

    assert config.backend == "s3"
    assert config.bucket == "videos-bucket"
    assert config.max_chunk_size == 4096


def test_s3_backend_requires_bucket() -> None:
    with pytest.raises(ValidationError):
        Config(backend="s3")


def test_chunk_size_must_be_positive() -> None:
    with pytest.raises(ValidationError):
        Config(max_chunk_size=0)


@pytest.mark.anyio
async def test_open_local_adapter(videos: Path) -> None:
    async with open_adapter(Config(root=videos, max_chunk_size=1000)) as adapter:
        assert isinstance(adapter, LocalStore)
        content = await adapter.load_content("earth-spinning.mp4", None)
        assert content.content_length == 1000


@pytest.mark.anyio
async def test_open_s3_adapter() -> None:
    config = Config(
        backend="s3",
        bucket="videos-bucket",
        access_key_id="testing",
        access_key_secret="testing",
        region="us-east-1",
    )
    with mock_aws():
        async with open_adapter(config) as adapter:
            assert isinstance(adapter, S3Store)
            adapter.client.create_bucket(Bucket="videos-bucket")
            assert await adapter.list_all_content_metadata() == []


@pytest.mark.anyio
async def test_open_s3_adapter_without_bucket_fails() -> None:
    config = Config.model_construct(backend="s3", bucket=None)
    with pytest.raises(ValueError):
        async with open_adapter(config):
            pass
