from functools import cache
from typing import Annotated, Any, Callable, TypeVar

from fastapi import Depends, FastAPI

T = TypeVar("T")


@cache
def _provider(tp: type) -> Callable[[], Any]:
    def provide() -> Any:
        raise LookupError(f"Nothing bound for {tp.__name__}, call bind() when building the app")

    provide.__name__ = f"provide_{tp.__name__}"
    return provide


def bind(app: FastAPI, tp: type[T], value: T) -> None:
    """Make `value` what routes get for `Injected[tp]`."""
    app.dependency_overrides[_provider(tp)] = lambda: value


class Injected:
    """`Injected[Config]` is `Annotated[Config, Depends(...)]` resolved through `bind`."""

    def __class_getitem__(cls, tp: type) -> Any:
        return Annotated[tp, Depends(_provider(tp))]
