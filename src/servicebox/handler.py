"""Untyped lifecycle callbacks (``connect`` / ``close``)."""

import inspect
from collections.abc import Awaitable, Callable, Sequence
from typing import Any

from servicebox.context import Context
from servicebox.middleware import Middleware

HandlerCallback = Callable[[Context], Any | Awaitable[Any]]


class Handler:
    """A ``connect`` or ``close`` callback of one namespace.

    ``middleware`` records the list of the service that built the handler
    and is never run: the host invokes handlers with the context of the
    first call it dispatched to the namespace, whose identity came from
    that method's middleware.
    """

    def __init__(self, middleware: Sequence[Middleware], callback: HandlerCallback):
        self.middleware = tuple(middleware)
        self.callback = callback

    async def execute(self, context: Context) -> None:
        result = self.callback(context)
        if inspect.isawaitable(result):
            await result

    def __repr__(self) -> str:
        name = getattr(self.callback, "__qualname__", repr(self.callback))
        return f"Handler({name})"
