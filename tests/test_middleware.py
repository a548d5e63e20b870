"""Tests for middleware identity composition."""

import pytest

from servicebox.middleware import (
    FunctionMiddleware,
    Middleware,
    authorize,
    merge_identity,
    middleware,
)


class StaticMiddleware:
    def __init__(self, fragment):
        self.fragment = fragment
        self.requests = []

    def map(self, request):
        self.requests.append(request)
        return self.fragment


class TestMergeIdentity:
    def test_later_fragments_overwrite(self):
        assert merge_identity([{"a": 1}, {"a": 2, "b": 3}]) == {"a": 2, "b": 3}

    def test_none_contributes_nothing(self):
        assert merge_identity([None, {"a": 1}, None]) == {"a": 1}

    def test_empty(self):
        assert merge_identity([]) == {}

    def test_rejects_non_mapping(self):
        with pytest.raises(TypeError):
            merge_identity([["a", 1]])


class TestAuthorize:
    @pytest.mark.asyncio
    async def test_merges_in_declaration_order(self):
        identity = await authorize(
            [StaticMiddleware({"a": 1}), StaticMiddleware({"a": 2, "b": 3})], object()
        )
        assert identity == {"a": 2, "b": 3}

    @pytest.mark.asyncio
    async def test_empty_list_gives_empty_identity(self):
        assert await authorize([], object()) == {}

    @pytest.mark.asyncio
    async def test_passes_raw_request(self):
        request = object()
        item = StaticMiddleware(None)
        await authorize([item], request)
        assert item.requests == [request]

    @pytest.mark.asyncio
    async def test_async_middleware(self):
        @middleware
        async def user(request):
            return {"user": request["user"]}

        @middleware
        def role(request):
            return {"role": "admin"} if request["user"] == "root" else None

        assert await authorize([user, role], {"user": "root"}) == {
            "user": "root",
            "role": "admin",
        }
        assert await authorize([user, role], {"user": "guest"}) == {"user": "guest"}

    @pytest.mark.asyncio
    async def test_errors_propagate(self):
        @middleware
        def broken(request):
            raise RuntimeError("no")

        with pytest.raises(RuntimeError):
            await authorize([broken], object())


class TestMiddlewareDecorator:
    def test_wraps_function(self):
        @middleware
        def tenant(request):
            return {"tenant": "acme"}

        assert isinstance(tenant, FunctionMiddleware)
        assert isinstance(tenant, Middleware)
        assert tenant.map(None) == {"tenant": "acme"}
        assert tenant.__name__ == "tenant"
