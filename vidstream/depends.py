from __future__ import annotations

from typing import Annotated, Any, Callable, TypeVar

from fastapi import Depends, FastAPI

T = TypeVar("T")

_providers: dict[Any, Callable[[], Any]] = {}


def _provider(tp: Any) -> Callable[[], Any]:
    if tp not in _providers:

        def provide() -> Any:
            raise RuntimeError(f"No value bound for {tp!r}")

        _providers[tp] = provide
    return _providers[tp]


def bind(app: FastAPI, tp: type[T], value: T) -> None:
    """Make `value` the instance injected wherever `Injected[tp]` is requested."""
    app.dependency_overrides[_provider(tp)] = lambda: value


class _Injected:
    def __getitem__(self, tp: Any) -> Any:
        return Annotated[tp, Depends(_provider(tp))]


Injected = _Injected()
