"""Tests for the HTTP binding."""

import pytest
from conftest import NUMBER, call

from servicebox.config import ServiceBoxConfig
from servicebox.server import create_app


class TestBatchEndpoint:
    @pytest.mark.asyncio
    async def test_post_batch(self, http_client):
        response = await http_client.post(
            "/", json=[call(1, "math/add", 2, 3), call(2, "math/add", "x", 3)]
        )
        assert response.status_code == 200
        assert response.headers["content-type"] == "application/json"
        items = response.json()
        assert items[0]["result"] == 5
        assert items[1]["error"]["code"] == -32602

    @pytest.mark.asyncio
    async def test_rejected_batch_is_still_200(self, http_client):
        response = await http_client.post(
            "/", content=b"not json", headers={"content-type": "application/json"}
        )
        assert response.status_code == 200
        assert response.json()[0]["error"]["code"] == -32700
        assert response.json()[0]["id"] is None

    @pytest.mark.asyncio
    async def test_wrong_content_type(self, http_client):
        response = await http_client.post(
            "/", content=b"[]", headers={"content-type": "text/plain"}
        )
        assert response.json()[0]["error"]["code"] == -32700

    @pytest.mark.asyncio
    async def test_get_returns_metadata(self, http_client):
        response = await http_client.get("/")
        assert response.status_code == 200
        description = response.json()
        assert description["math"]["methods"]["add"]["params"] == [NUMBER, NUMBER]
        assert description["echo"]["events"] == {}


class TestConfiguredPath:
    @pytest.mark.asyncio
    async def test_custom_path(self, host):
        import httpx

        config = ServiceBoxConfig.model_validate({"server": {"path": "/rpc"}})
        app = create_app(host, config)
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.post("/rpc", json=[call(1, "math/add", 1, 1)])
            assert response.json()[0]["result"] == 2
            assert (await client.post("/", json=[])).status_code in (404, 405)


class TestHealth:
    @pytest.mark.asyncio
    async def test_health(self, http_client):
        response = await http_client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}

    @pytest.mark.asyncio
    async def test_ready_lists_namespaces(self, http_client):
        response = await http_client.get("/ready")
        assert response.json() == {"status": "ready", "namespaces": ["math", "echo"]}


class TestAppState:
    def test_host_on_state(self, app, host):
        assert app.state.host is host
        assert app.state.config is None
