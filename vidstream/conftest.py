from pathlib import Path

import pytest

from vidstream.testing import (
    EARTH_SPINNING_FILE_SIZE,
    EARTH_SPINNING_VIDEO_KEY,
    PARK_FILE_SIZE,
    PARK_VIDEO_KEY,
    SCIENCE_FILE_SIZE,
    SCIENCE_VIDEO_KEY,
    payload,
)


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def videos(tmp_path: Path) -> Path:
    """A directory laid out like the bundled `videos` resources."""
    root = tmp_path / "videos"
    root.mkdir()
    (root / EARTH_SPINNING_VIDEO_KEY).write_bytes(payload(EARTH_SPINNING_FILE_SIZE))
    # the large files are sparse, only their sizes matter
    for key, size in ((PARK_VIDEO_KEY, PARK_FILE_SIZE), (SCIENCE_VIDEO_KEY, SCIENCE_FILE_SIZE)):
        with open(root / key, "wb") as f:
            f.truncate(size)
    return root
