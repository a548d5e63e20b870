"""Thin async client for servicebox hosts."""

import itertools
import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

import httpx

from servicebox.exceptions import ErrorCode, RemoteError
from servicebox.protocol import (
    ProtocolErrorBody,
    ProtocolRequest,
    ProtocolResponse,
    decode_batch,
)

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0


@dataclass
class MethodCall:
    method: str
    args: Sequence[Any] = field(default_factory=tuple)


class Client:
    """Calls methods on a host, one batch per HTTP POST.

    Usage:
        async with Client("http://localhost:8080/") as client:
            total = await client.execute("math/add", 2, 3)
    """

    def __init__(
        self,
        endpoint: str,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        headers: dict[str, str] | None = None,
    ):
        self._endpoint = endpoint
        self._http = httpx.AsyncClient(
            transport=transport, timeout=timeout, headers=headers
        )
        self._ordinal = itertools.count()

    async def __aenter__(self) -> "Client":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def execute(self, method: str, *args: Any) -> Any:
        """Call a single method and return its result."""
        results = await self.execute_many([MethodCall(method, args)])
        return results[0]

    async def execute_many(self, calls: Sequence[MethodCall]) -> list[Any]:
        """Call several methods in one batch.

        Results are paired with calls by id and returned in call order.

        Raises:
            RemoteError: For a rejected batch, for the first call that failed,
                or when a call has no response.
        """
        if not calls:
            return []
        batch = [
            ProtocolRequest(method=call.method, params=list(call.args), id=next(self._ordinal))
            for call in calls
        ]
        responses = await self.post(batch)
        for response in responses:
            if response.id is None and response.error is not None:
                raise _remote_error(response.error)

        by_id = {response.id: response for response in responses}
        results: list[Any] = []
        for request in batch:
            response = by_id.get(request.id)
            if response is None:
                raise RemoteError(
                    ErrorCode.INTERNAL_ERROR,
                    "Missing response for call",
                    {"id": request.id, "method": request.method},
                )
            if response.error is not None:
                raise _remote_error(response.error)
            results.append(response.result)
        return results

    async def post(self, batch: Sequence[ProtocolRequest]) -> list[ProtocolResponse]:
        """Send a raw batch and decode the response items."""
        logger.debug("Posting batch", extra={"endpoint": self._endpoint, "size": len(batch)})
        response = await self._http.post(
            self._endpoint,
            json=[request.to_dict() for request in batch],
            headers={"Content-Type": "application/json"},
        )
        response.raise_for_status()
        return decode_batch(response.content)

    async def describe(self) -> dict[str, Any]:
        """Fetch the host's method and event metadata."""
        response = await self._http.get(self._endpoint)
        response.raise_for_status()
        return response.json()


def _remote_error(error: ProtocolErrorBody) -> RemoteError:
    return RemoteError(error.code, error.message, error.data)
