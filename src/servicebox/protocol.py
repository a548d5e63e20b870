"""JSON-RPC 2.0 batch protocol types and envelope schemas."""

import json
from dataclasses import dataclass, field
from typing import Any

from servicebox.exceptions import ErrorCode, ServiceException

JSONRPC_VERSION = "2.0"

# Envelope schemas for the batch request and response bodies.
PROTOCOL_REQUEST_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "jsonrpc": {"const": JSONRPC_VERSION},
        "id": {"type": ["number", "null"]},
        "method": {"type": "string"},
        "params": {"type": "array"},
    },
    "required": ["jsonrpc", "id", "method", "params"],
}

BATCH_REQUEST_SCHEMA: dict[str, Any] = {
    "type": "array",
    "items": PROTOCOL_REQUEST_SCHEMA,
}

PROTOCOL_ERROR_BODY_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "code": {"type": "integer"},
        "message": {"type": "string"},
        "data": {},
    },
    "required": ["code", "message"],
}

PROTOCOL_RESPONSE_SCHEMA: dict[str, Any] = {
    "oneOf": [
        {
            "type": "object",
            "properties": {
                "jsonrpc": {"const": JSONRPC_VERSION},
                "id": {"type": ["number", "null"]},
                "result": {},
            },
            "required": ["jsonrpc", "id", "result"],
            "not": {"required": ["error"]},
        },
        {
            "type": "object",
            "properties": {
                "jsonrpc": {"const": JSONRPC_VERSION},
                "id": {"type": ["number", "null"]},
                "error": PROTOCOL_ERROR_BODY_SCHEMA,
            },
            "required": ["jsonrpc", "id", "error"],
            "not": {"required": ["result"]},
        },
    ]
}

BATCH_RESPONSE_SCHEMA: dict[str, Any] = {
    "type": "array",
    "items": PROTOCOL_RESPONSE_SCHEMA,
}


@dataclass(frozen=True)
class ProtocolRequest:
    """A single call inside a batch."""

    method: str
    params: list[Any] = field(default_factory=list)
    id: int | float | None = None
    jsonrpc: str = JSONRPC_VERSION

    @property
    def namespace(self) -> str:
        return self.method.partition("/")[0]

    @property
    def name(self) -> str:
        return self.method.partition("/")[2]

    def to_dict(self) -> dict[str, Any]:
        return {
            "jsonrpc": self.jsonrpc,
            "id": self.id,
            "method": self.method,
            "params": list(self.params),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ProtocolRequest":
        return cls(
            method=data.get("method", ""),
            params=list(data.get("params", [])),
            id=data.get("id"),
            jsonrpc=data.get("jsonrpc", JSONRPC_VERSION),
        )


@dataclass(frozen=True)
class ProtocolErrorBody:
    """The ``error`` member of a failed call."""

    code: int
    message: str
    data: Any = None

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message, "data": self.data}


@dataclass(frozen=True)
class ProtocolResponse:
    """Result or error for one call, paired with the call by ``id``."""

    id: int | float | None
    result: Any = None
    error: ProtocolErrorBody | None = None
    jsonrpc: str = JSONRPC_VERSION

    @property
    def is_error(self) -> bool:
        return self.error is not None

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"jsonrpc": self.jsonrpc, "id": self.id}
        if self.error is not None:
            d["error"] = self.error.to_dict()
        else:
            d["result"] = self.result
        return d

    @classmethod
    def success(cls, id: int | float | None, result: Any) -> "ProtocolResponse":
        return cls(id=id, result=result)

    @classmethod
    def failure(
        cls, id: int | float | None, exception: ServiceException
    ) -> "ProtocolResponse":
        return cls(
            id=id,
            error=ProtocolErrorBody(
                code=exception.code, message=exception.message, data=exception.data
            ),
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ProtocolResponse":
        error = None
        if "error" in data:
            err = data["error"] or {}
            error = ProtocolErrorBody(
                code=err.get("code", ErrorCode.INTERNAL_ERROR),
                message=err.get("message", "Unknown error"),
                data=err.get("data"),
            )
        return cls(
            id=data.get("id"),
            result=data.get("result"),
            error=error,
            jsonrpc=data.get("jsonrpc", JSONRPC_VERSION),
        )


def encode_batch(responses: list[ProtocolResponse]) -> bytes:
    """Serialize a batch of responses to a JSON array."""
    return json.dumps([response.to_dict() for response in responses]).encode()


def decode_batch(data: bytes | str) -> list[ProtocolResponse]:
    """Parse a JSON array of responses."""
    payload = json.loads(data)
    if not isinstance(payload, list):
        raise ValueError("Expected a JSON array of responses")
    return [ProtocolResponse.from_dict(item) for item in payload]
