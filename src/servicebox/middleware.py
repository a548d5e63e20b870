"""Middleware: maps an inbound request to a fragment of caller identity."""

import inspect
from collections.abc import Awaitable, Callable, Iterable, Mapping, Sequence
from typing import Any, Protocol, runtime_checkable

Identity = dict[str, Any]

MiddlewareResult = Mapping[str, Any] | None


@runtime_checkable
class Middleware(Protocol):
    """Contract for middleware.

    ``map`` receives the raw inbound request and returns a mapping to merge
    into the caller identity, or None to contribute nothing. It may be a
    coroutine function.
    """

    def map(self, request: Any) -> MiddlewareResult | Awaitable[MiddlewareResult]: ...


class FunctionMiddleware:
    """Adapts a plain (sync or async) function to the middleware contract."""

    def __init__(
        self,
        func: Callable[[Any], MiddlewareResult | Awaitable[MiddlewareResult]],
    ):
        self._func = func
        self.__name__ = getattr(func, "__name__", type(self).__name__)

    def map(self, request: Any) -> MiddlewareResult | Awaitable[MiddlewareResult]:
        return self._func(request)

    def __repr__(self) -> str:
        return f"FunctionMiddleware({self.__name__})"


def middleware(
    func: Callable[[Any], MiddlewareResult | Awaitable[MiddlewareResult]],
) -> FunctionMiddleware:
    """Decorator turning a function into middleware.

    Usage:
        @middleware
        async def bearer(request):
            token = request.headers.get("authorization")
            return {"token": token} if token else None
    """
    return FunctionMiddleware(func)


def merge_identity(fragments: Iterable[MiddlewareResult]) -> Identity:
    """Fold identity fragments left to right; later keys overwrite earlier."""
    identity: Identity = {}
    for fragment in fragments:
        if fragment is None:
            continue
        if not isinstance(fragment, Mapping):
            raise TypeError(
                f"Middleware must return a mapping or None, got {type(fragment).__name__}"
            )
        identity.update(fragment)
    return identity


async def authorize(middleware_list: Sequence[Middleware], request: Any) -> Identity:
    """Run middleware in declaration order and merge their fragments."""
    fragments: list[MiddlewareResult] = []
    for item in middleware_list:
        fragment = item.map(request)
        if inspect.isawaitable(fragment):
            fragment = await fragment
        fragments.append(fragment)
    return merge_identity(fragments)
