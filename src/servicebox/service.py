"""Service builder and per-namespace registry."""

import inspect
import logging
from collections.abc import Callable, Iterator, Mapping, Sequence
from typing import Any, overload

from servicebox.event import Event
from servicebox.handler import Handler, HandlerCallback
from servicebox.method import Method, MethodCallback, Schema, Signature
from servicebox.middleware import Middleware
from servicebox.validator import SchemaCompiler

logger = logging.getLogger(__name__)

# Leading characters marking a member as a published event; stripped from
# the dispatch name (``$changed`` / ``_changed`` -> ``changed``).
EVENT_MARKERS = "$_"

Member = Method | Event | Handler


class Service:
    """Factory for methods, events and handlers sharing one middleware list.

    Usage:
        service = Service([authenticated])

        class Math:
            add = service.method(Signature([NUMBER, NUMBER], NUMBER), add_numbers)
            added = service.event(NUMBER)
            connect = service.handler(on_connect)

        # or as decorators
        @service.method(Signature([NUMBER], NUMBER))
        def double(context, value):
            return value * 2
    """

    def __init__(
        self,
        middleware: Sequence[Middleware] = (),
        compiler: SchemaCompiler | None = None,
    ):
        self.middleware = tuple(middleware)
        self._compiler = compiler

    @overload
    def method(self, callback: MethodCallback, /) -> Method: ...

    @overload
    def method(self, signature: Signature, callback: MethodCallback, /) -> Method: ...

    @overload
    def method(self, signature: Signature, /) -> Callable[[MethodCallback], Method]: ...

    def method(self, *args: Any) -> Method | Callable[[MethodCallback], Method]:
        """Create a method; without a signature it takes no parameters."""
        if len(args) == 2:
            signature, callback = args
            return Method(self.middleware, signature, callback, self._compiler)
        if len(args) != 1:
            raise TypeError("method() takes a callback, a signature, or both")
        (arg,) = args
        if isinstance(arg, Signature):

            def decorator(callback: MethodCallback) -> Method:
                return Method(self.middleware, arg, callback, self._compiler)

            return decorator
        return Method(self.middleware, Signature.any(), arg, self._compiler)

    def event(self, schema: Schema) -> Event:
        return Event(schema)

    def handler(self, callback: HandlerCallback) -> Handler:
        return Handler(self.middleware, callback)


class ServiceRegistry:
    """Methods, events and handlers of one namespace, keyed by local name.

    Built once when the host is created and read-only afterwards. Name
    collisions are not an error: the last registration wins.
    """

    def __init__(self) -> None:
        self._methods: dict[str, Method] = {}
        self._events: dict[str, Event] = {}
        self._handlers: dict[str, Handler] = {}

    @classmethod
    def from_service(cls, service: Any) -> "ServiceRegistry":
        """Classify the members of a service object (or mapping) by type."""
        registry = cls()
        for name, member in _iter_members(service):
            if isinstance(member, Method | Event | Handler):
                registry.add(name, member)
        return registry

    def add(self, name: str, member: Member) -> None:
        """Register a member explicitly."""
        match member:
            case Method():
                self._methods[name] = member
            case Event():
                if name[:1] and name[0] in EVENT_MARKERS:
                    name = name[1:]
                self._events[name] = member
            case Handler():
                self._handlers[name] = member
            case _:
                raise TypeError(
                    f"Cannot register {type(member).__name__!r} as {name!r}"
                )

    @property
    def methods(self) -> Mapping[str, Method]:
        return self._methods

    @property
    def events(self) -> Mapping[str, Event]:
        return self._events

    @property
    def handlers(self) -> Mapping[str, Handler]:
        return self._handlers

    def get_method(self, name: str) -> Method | None:
        return self._methods.get(name)

    def get_event(self, name: str) -> Event | None:
        return self._events.get(name)

    def get_handler(self, name: str) -> Handler | None:
        return self._handlers.get(name)

    def describe(self) -> dict[str, Any]:
        return {
            "methods": {name: m.describe() for name, m in sorted(self._methods.items())},
            "events": {name: e.describe() for name, e in sorted(self._events.items())},
        }


def _iter_members(service: Any) -> Iterator[tuple[str, Any]]:
    if isinstance(service, Mapping):
        yield from service.items()
        return
    # Static lookup so properties and descriptors on the service never run
    yield from inspect.getmembers_static(service)
