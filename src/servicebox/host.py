"""Batch dispatch engine.

Each inbound HTTP request is handled as one batch and moves through the
phases Parsing -> Authorizing -> Connecting -> Executing -> Closing ->
Responding:

1. Parsing: check the content type, read the body, decode JSON and validate
   it against the batch request envelope.
2. Authorizing: resolve every call to a method and compute its caller
   identity from the method's middleware. One session id is shared by the
   whole batch.
3. Connecting: run the ``connect`` handler once per namespace touched, with
   the context of that namespace's first call.
4. Executing: run calls one at a time in batch order. Failures are isolated
   to the call that raised them.
5. Closing: run the ``close`` handler once per namespace touched.
6. Responding: encode the ordered results as a JSON array.

Failures during Parsing or Authorizing reject the whole batch before any
call executes. They are still answered with HTTP 200 and a single-item
batch whose ``id`` is null, so clients always receive a protocol response.
"""

import json
import logging
import uuid
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol

from servicebox.context import Context
from servicebox.exceptions import (
    InternalErrorException,
    InvalidRequestException,
    MethodNotFoundException,
    ParseException,
    ServiceException,
)
from servicebox.method import Method
from servicebox.middleware import authorize
from servicebox.protocol import (
    BATCH_REQUEST_SCHEMA,
    BATCH_RESPONSE_SCHEMA,
    ProtocolRequest,
    ProtocolResponse,
)
from servicebox.service import ServiceRegistry
from servicebox.validator import SchemaCompiler, get_compiler

if TYPE_CHECKING:
    from servicebox.config import ServiceBoxConfig

logger = logging.getLogger(__name__)

JSON_MEDIA_TYPE = "application/json"

DEFAULT_MAX_BODY_BYTES = 10 * 1024 * 1024  # 10MB

CONNECT_HANDLER = "connect"
CLOSE_HANDLER = "close"

# Aggregate event receiver: (qualified event name, session id, data)
EventSink = Callable[[str, str, Any], Any]


class InboundRequest(Protocol):
    """Byte-stream request consumed by the host (a Starlette request fits)."""

    @property
    def headers(self) -> Mapping[str, str]: ...

    async def body(self) -> bytes: ...


@dataclass
class HostResponse:
    """Transport-agnostic HTTP response produced by ``Host.handle``."""

    body: bytes
    status_code: int = 200
    headers: dict[str, str] = field(
        default_factory=lambda: {"content-type": JSON_MEDIA_TYPE}
    )


@dataclass(frozen=True)
class _Call:
    request: ProtocolRequest
    method: Method
    context: Context

    @property
    def namespace(self) -> str:
        return self.request.namespace


class Host:
    """Hosts a set of namespaced services behind the batch protocol."""

    def __init__(
        self,
        services: Mapping[str, Any],
        *,
        compiler: SchemaCompiler | None = None,
        max_body_bytes: int = DEFAULT_MAX_BODY_BYTES,
    ):
        compiler = compiler or get_compiler()
        self._registries: dict[str, ServiceRegistry] = {
            namespace: ServiceRegistry.from_service(service)
            for namespace, service in services.items()
        }
        self._request_validator = compiler.compile(BATCH_REQUEST_SCHEMA)
        self._response_validator = compiler.compile(BATCH_RESPONSE_SCHEMA)
        self._max_body_bytes = max_body_bytes

        for namespace, registry in self._registries.items():
            logger.debug(
                "Registered namespace %s",
                namespace,
                extra={
                    "methods": sorted(registry.methods),
                    "events": sorted(registry.events),
                    "handlers": sorted(registry.handlers),
                },
            )

    @classmethod
    def from_config(
        cls, services: Mapping[str, Any], config: "ServiceBoxConfig"
    ) -> "Host":
        """Create a host using the limits from a loaded configuration."""
        return cls(services, max_body_bytes=config.protocol.max_body_bytes)

    def configure(self, config: "ServiceBoxConfig") -> None:
        """Apply the protocol limits of a loaded configuration."""
        self._max_body_bytes = config.protocol.max_body_bytes
        logger.debug(
            "Applied configuration", extra={"max_body_bytes": self._max_body_bytes}
        )

    @property
    def max_body_bytes(self) -> int:
        return self._max_body_bytes

    @property
    def namespaces(self) -> list[str]:
        return list(self._registries)

    def get_registry(self, namespace: str) -> ServiceRegistry | None:
        return self._registries.get(namespace)

    def describe(self) -> dict[str, Any]:
        """Metadata for every namespace: method signatures and event schemas."""
        return {
            namespace: registry.describe()
            for namespace, registry in self._registries.items()
        }

    # ---------------------------------------------------------------------
    # Connection control
    # ---------------------------------------------------------------------

    def close(self, session_id: str) -> None:
        """Terminate the connection for a session.

        Every connection over HTTP ends with its request, so there is nothing
        to terminate here. Persistent transports override this.
        """
        logger.debug("Close requested for session %s", session_id)

    def receive(self, sink: EventSink) -> None:
        """Attach one receiver to every event of every namespace.

        Replaces any receiver already registered on those events.
        """
        for namespace, registry in self._registries.items():
            for name, event in registry.events.items():
                event.receive(_forward(f"{namespace}/{name}", sink))

    # ---------------------------------------------------------------------
    # Request handling
    # ---------------------------------------------------------------------

    async def handle(self, request: InboundRequest) -> HostResponse:
        """Run one HTTP request through the full dispatch cycle."""
        try:
            batch = await self.read_batch(request)
            responses = await self.dispatch(batch, request)
        except ServiceException as e:
            logger.info(
                "Batch rejected: %s", e.message, extra={"code": e.code, "data": e.data}
            )
            responses = [ProtocolResponse.failure(None, e)]
        return HostResponse(body=self.encode(responses))

    async def read_batch(self, request: InboundRequest) -> list[ProtocolRequest]:
        """Parsing phase: read and validate the batch envelope."""
        content_type = request.headers.get("content-type", "")
        if content_type.split(";", 1)[0].strip().lower() != JSON_MEDIA_TYPE:
            raise ParseException(
                {"message": f"Content-Type header not '{JSON_MEDIA_TYPE}'"}
            )

        content_length = request.headers.get("content-length")
        if content_length and content_length.isdigit():
            self._check_body_size(int(content_length))
        body = await request.body()
        self._check_body_size(len(body))

        try:
            payload = json.loads(body, parse_constant=_reject_constant)
        except ValueError as e:  # JSONDecodeError and UnicodeDecodeError included
            raise ParseException({"message": str(e)}) from e

        valid, errors = self._request_validator.validate(payload)
        if not valid:
            raise InvalidRequestException(errors)
        return [ProtocolRequest.from_dict(item) for item in payload]

    def _check_body_size(self, size: int) -> None:
        if size > self._max_body_bytes:
            raise InvalidRequestException(
                {"message": f"Request body too large: {size} > {self._max_body_bytes}"}
            )

    async def dispatch(
        self, batch: list[ProtocolRequest], request: Any = None
    ) -> list[ProtocolResponse]:
        """Authorize, connect, execute and close an already parsed batch."""
        session_id = str(uuid.uuid4())
        calls = await self._authorize(batch, request, session_id)

        contexts = _first_contexts(calls)
        failures = await self._connect(contexts)
        try:
            return [
                await self._execute(call, failures.get(call.namespace))
                for call in calls
            ]
        finally:
            await self._close(contexts)

    async def _authorize(
        self, batch: list[ProtocolRequest], request: Any, session_id: str
    ) -> list[_Call]:
        calls: list[_Call] = []
        for rpc_request in batch:
            method = self._resolve(rpc_request)
            try:
                identity = await authorize(method.middleware, request)
            except ServiceException:
                raise
            except Exception as e:
                logger.exception(
                    "Middleware error", extra={"method": rpc_request.method}
                )
                raise InternalErrorException() from e
            context = Context(id=session_id, identity=identity, host=self)
            calls.append(_Call(request=rpc_request, method=method, context=context))
        return calls

    def _resolve(self, rpc_request: ProtocolRequest) -> Method:
        registry = self._registries.get(rpc_request.namespace)
        method = registry.get_method(rpc_request.name) if registry else None
        if method is None:
            raise MethodNotFoundException({"method": rpc_request.method})
        return method

    async def _connect(
        self, contexts: dict[str, Context]
    ) -> dict[str, ServiceException]:
        failures: dict[str, ServiceException] = {}
        for namespace, context in contexts.items():
            handler = self._registries[namespace].get_handler(CONNECT_HANDLER)
            if handler is None:
                continue
            try:
                await handler.execute(context)
            except ServiceException as e:
                failures[namespace] = e
            except Exception:
                logger.exception("Connect handler error", extra={"namespace": namespace})
                failures[namespace] = InternalErrorException()
        return failures

    async def _execute(
        self, call: _Call, failure: ServiceException | None
    ) -> ProtocolResponse:
        request_id = call.request.id
        if failure is not None:
            return ProtocolResponse.failure(request_id, failure)
        try:
            result = await call.method.execute(call.context, *call.request.params)
        except ServiceException as e:
            logger.debug(
                "Method failed: %s", e.message, extra={"method": call.request.method}
            )
            return ProtocolResponse.failure(request_id, e)
        except Exception:
            logger.exception("RPC method error", extra={"method": call.request.method})
            return ProtocolResponse.failure(request_id, InternalErrorException())
        return ProtocolResponse.success(request_id, result)

    async def _close(self, contexts: dict[str, Context]) -> None:
        for namespace, context in contexts.items():
            handler = self._registries[namespace].get_handler(CLOSE_HANDLER)
            if handler is None:
                continue
            try:
                await handler.execute(context)
            except Exception:
                # Results are already decided; a close failure cannot change them
                logger.exception("Close handler error", extra={"namespace": namespace})

    # ---------------------------------------------------------------------
    # Responding
    # ---------------------------------------------------------------------

    def encode(self, responses: list[ProtocolResponse]) -> bytes:
        """Responding phase: encode the batch as a JSON array."""
        items = [self._encode_item(response) for response in responses]
        valid, errors = self._response_validator.validate(items)
        if not valid:
            logger.error("Malformed batch response", extra={"errors": errors})
            items = [ProtocolResponse.failure(None, InternalErrorException()).to_dict()]
        return json.dumps(items, allow_nan=False).encode()

    def _encode_item(self, response: ProtocolResponse) -> dict[str, Any]:
        item = response.to_dict()
        try:
            json.dumps(item, allow_nan=False)
        except (TypeError, ValueError):
            logger.exception("Unserializable response", extra={"id": response.id})
            return ProtocolResponse.failure(response.id, InternalErrorException()).to_dict()
        return item


def _reject_constant(token: str) -> Any:
    raise ValueError(f"Invalid JSON constant: {token}")


def _first_contexts(calls: list[_Call]) -> dict[str, Context]:
    """Context of the first call per namespace, in first-occurrence order."""
    contexts: dict[str, Context] = {}
    for call in calls:
        contexts.setdefault(call.namespace, call.context)
    return contexts


def _forward(qualified_name: str, sink: EventSink) -> Callable[[str, Any], Any]:
    def receiver(session_id: str, data: Any) -> Any:
        return sink(qualified_name, session_id, data)

    return receiver
