"""Tests for ecohouse/core/http.py - shared auth provider client."""

import anyio
import httpx
import pytest

from ecohouse.core import http as http_module


def _reset_auth_client() -> None:
    async def close() -> None:
        if http_module._auth_client is not None:
            await http_module._auth_client.aclose()
        http_module._auth_client = None

    anyio.run(close)


class TestCreateHttpClient:
    @pytest.mark.asyncio
    async def test_defaults(self):
        client = http_module.create_http_client()
        try:
            assert client.timeout == http_module.AUTH_CLIENT_TIMEOUT
            assert client.timeout.connect == 5.0
            assert client.timeout.read == 10.0
            assert client.headers["Accept"] == "application/json"
            assert client.headers["User-Agent"] == http_module.USER_AGENT
        finally:
            await client.aclose()

    @pytest.mark.asyncio
    async def test_headers_override_defaults(self):
        client = http_module.create_http_client(
            headers={"Accept": "text/plain", "apikey": "anon"}
        )
        try:
            assert client.headers["Accept"] == "text/plain"
            assert client.headers["apikey"] == "anon"
        finally:
            await client.aclose()

    @pytest.mark.asyncio
    async def test_custom_limits(self):
        client = http_module.create_http_client(
            limits=httpx.Limits(max_connections=7, max_keepalive_connections=3)
        )
        try:
            pool_size = client._transport._pool._max_connections  # type: ignore[union-attr]
            assert pool_size == 7
        finally:
            await client.aclose()


class TestAuthClient:
    @pytest.fixture(autouse=True)
    def reset_auth_client(self):
        _reset_auth_client()
        yield
        _reset_auth_client()

    @pytest.mark.asyncio
    async def test_is_shared(self):
        assert http_module.get_auth_client() is http_module.get_auth_client()

    @pytest.mark.asyncio
    async def test_close_resets_shared_client(self):
        client = http_module.get_auth_client()

        await http_module.close_auth_client()

        assert client.is_closed
        assert http_module._auth_client is None
        assert http_module.get_auth_client() is not client

    @pytest.mark.asyncio
    async def test_replaces_closed_client(self):
        client = http_module.get_auth_client()
        await client.aclose()

        assert http_module.get_auth_client() is not client

    @pytest.mark.asyncio
    async def test_close_without_client(self):
        await http_module.close_auth_client()
        assert http_module._auth_client is None
