from __future__ import annotations

from enum import Enum
from typing import ClassVar


class ErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    BACKEND_FAILURE = "backend_failure"
    RANGE_NOT_SATISFIABLE = "range_not_satisfiable"


class ContentError(Exception):
    """Base class for every failure a streaming adapter can report."""

    kind: ClassVar[ErrorKind]
    status_code: ClassVar[int]


class NotFound(ContentError):
    kind = ErrorKind.NOT_FOUND
    status_code = 404

    def __init__(self, key: str) -> None:
        super().__init__(f"Resource with key '{key}' does not exist.")
        self.key = key


class BackendFailure(ContentError):
    kind = ErrorKind.BACKEND_FAILURE
    status_code = 500


class RangeNotSatisfiable(ContentError):
    kind = ErrorKind.RANGE_NOT_SATISFIABLE
    status_code = 416

    def __init__(self, start: int, size: int) -> None:
        super().__init__(f"Range start {start} is beyond object size {size}.")
        self.start = start
        self.size = size
