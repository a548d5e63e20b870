"""Shared test fixtures and factories."""

import json
from collections.abc import AsyncGenerator
from pathlib import Path
from typing import Any

import httpx
import pytest
from fastapi import FastAPI
from typer.testing import CliRunner

from servicebox import Context, Host, Service, Signature
from servicebox.server import create_app

NUMBER = {"type": "number"}
STRING = {"type": "string"}
OBJECT = {"type": "object"}


# =============================================================================
# Request Factories
# =============================================================================


def call(id: int | None, method: str, *params: Any) -> dict[str, Any]:
    """A single protocol request as sent on the wire."""
    return {"jsonrpc": "2.0", "id": id, "method": method, "params": list(params)}


class FakeRequest:
    """Minimal inbound request: lower-cased headers and a body."""

    def __init__(
        self,
        body: Any,
        content_type: str = "application/json",
        headers: dict[str, str] | None = None,
    ):
        self.headers = {"content-type": content_type, **(headers or {})}
        self._body = body if isinstance(body, bytes) else json.dumps(body).encode()

    async def body(self) -> bytes:
        return self._body


# =============================================================================
# Services
# =============================================================================


class MathService:
    """Arithmetic service recording its lifecycle in ``log``."""

    def __init__(self, middleware=()) -> None:
        service = Service(middleware)
        self.log: list[tuple[str, str]] = []

        self.add = service.method(Signature([NUMBER, NUMBER], NUMBER), self._add)
        self.divide = service.method(Signature([NUMBER, NUMBER], NUMBER), self._divide)
        self.broken = service.method(Signature([], NUMBER), lambda context: "five")
        self.explode = service.method(lambda context: 1 / 0)
        self.whoami = service.method(
            Signature([], OBJECT), lambda context: dict(context.identity)
        )
        self.session = service.method(Signature([], STRING), lambda context: context.id)

        self._added = service.event(NUMBER)
        self.connect = service.handler(self._on_connect)
        self.close = service.handler(self._on_close)

    async def _add(self, context: Context, a: float, b: float) -> float:
        self.log.append(("execute", "add"))
        self._added.send(context.id, a + b)
        return a + b

    def _divide(self, context: Context, a: float, b: float) -> float:
        from servicebox import ServiceException

        self.log.append(("execute", "divide"))
        if b == 0:
            raise ServiceException("Division by zero", code=-32001, data={"b": b})
        return a / b

    def _on_connect(self, context: Context) -> None:
        self.log.append(("connect", context.id))

    def _on_close(self, context: Context) -> None:
        self.log.append(("close", context.id))


class EchoService:
    """Service without lifecycle handlers."""

    def __init__(self) -> None:
        service = Service()
        self.echo = service.method(Signature([True], True), lambda context, value: value)


# =============================================================================
# Host Fixtures
# =============================================================================


@pytest.fixture
def math_service() -> MathService:
    return MathService()


@pytest.fixture
def echo_service() -> EchoService:
    return EchoService()


@pytest.fixture
def host(math_service: MathService, echo_service: EchoService) -> Host:
    return Host({"math": math_service, "echo": echo_service})


@pytest.fixture
def app(host: Host) -> FastAPI:
    return create_app(host)


@pytest.fixture
async def http_client(app: FastAPI) -> AsyncGenerator[httpx.AsyncClient, None]:
    """HTTP client bound to the app in-process."""
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


# =============================================================================
# CLI / Configuration Fixtures
# =============================================================================


@pytest.fixture
def cli_runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def config_toml_content() -> str:
    """Valid TOML config content."""
    return """
[server]
host = "0.0.0.0"
port = 9000
path = "/rpc"

[protocol]
max_body_bytes = 2048

[schema]
extension_keywords = ["kind", "modifier", "description_ref"]

[logging]
level = "DEBUG"
"""


@pytest.fixture
def config_file(tmp_path: Path, config_toml_content: str) -> Path:
    """Create a temporary config file."""
    config_path = tmp_path / "config.toml"
    config_path.write_text(config_toml_content)
    return config_path
