"""Known test objects, modelled on the sample videos the service ships with."""

EARTH_SPINNING_VIDEO_KEY = "earth-spinning.mp4"
EARTH_SPINNING_CONTENT_TYPE = "video/mp4"
EARTH_SPINNING_FILE_SIZE = 873682

PARK_VIDEO_KEY = "park.mp4"
PARK_CONTENT_TYPE = "video/mp4"
PARK_FILE_SIZE = 21657943

SCIENCE_VIDEO_KEY = "science-video"
SCIENCE_CONTENT_TYPE = "application/octet-stream"
SCIENCE_FILE_SIZE = 13927646


def payload(size: int) -> bytes:
    """Deterministic content whose bytes differ between neighbouring 8 KiB chunks."""
    return (bytes(range(251)) * (size // 251 + 1))[:size]
