"""Single-slot push channels."""

import asyncio
import inspect
import logging
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)

EventCallback = Callable[[str, Any], Any]


class Event:
    """A schema-typed event with exactly one receiver.

    ``receive`` replaces any previously registered callback; ``send`` is
    fire-and-forget and does nothing when no receiver is registered. The
    schema describes the payload but is not enforced on send.
    """

    def __init__(self, schema: dict[str, Any] | bool):
        self.schema = schema
        self._callback: EventCallback | None = None
        self._tasks: set[asyncio.Task[Any]] = set()

    @property
    def has_receiver(self) -> bool:
        return self._callback is not None

    def receive(self, callback: EventCallback) -> None:
        self._callback = callback

    def send(self, id: str, data: Any) -> None:
        callback = self._callback
        if callback is None:
            return
        result = callback(id, data)
        if not inspect.isawaitable(result):
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            if inspect.iscoroutine(result):
                result.close()
            logger.warning("Dropped async event delivery outside an event loop")
            return
        # Keep a reference until done so the task is not collected early
        task = asyncio.ensure_future(result, loop=loop)
        self._tasks.add(task)
        task.add_done_callback(self._delivered)

    def _delivered(self, task: "asyncio.Future[Any]") -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        if (error := task.exception()) is not None:
            logger.error(
                "Event receiver failed",
                exc_info=(type(error), error, error.__traceback__),
            )

    def describe(self) -> dict[str, Any] | bool:
        return self.schema

    def __repr__(self) -> str:
        return f"Event(receiver={self.has_receiver})"
