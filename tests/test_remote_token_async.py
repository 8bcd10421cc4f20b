"""Tests for the httpx-based async remote token fetcher."""

import json
import unittest
from datetime import datetime, timezone

import httpx

from gog.auth.errors import RemoteTokenError
from gog.auth.httpx.remote_token import AsyncRemoteTokenFetcher

ENDPOINT = "https://tokens.example.com/token"


def _client(handler):
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class AsyncRemoteTokenFetcherTest(unittest.IsolatedAsyncioTestCase):
    async def test_happy_path(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"access_token": "access-123", "expiry": "2025-01-01T00:00:00Z"})

        async with _client(handler) as client:
            fetcher = AsyncRemoteTokenFetcher(
                ENDPOINT,
                email="user@example.com",
                scopes=["scope1", "scope2"],
                auth="test-token",
                http_client=client,
            )
            token = await fetcher.fetch()

        self.assertEqual(token.access_token, "access-123")
        self.assertEqual(token.expiry, datetime(2025, 1, 1, tzinfo=timezone.utc))
        request = seen[0]
        self.assertEqual(request.method, "POST")
        self.assertEqual(request.headers["Content-Type"], "application/json")
        self.assertEqual(request.headers["Authorization"], "Bearer test-token")
        self.assertIn("(remote-token", request.headers["User-Agent"])
        self.assertTrue(request.headers["User-Agent"].endswith(f"python-httpx/{httpx.__version__}"))
        self.assertEqual(json.loads(request.content), {"email": "user@example.com", "scopes": ["scope1", "scope2"]})

    async def test_no_auth_header(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"access_token": "access-no-auth"})

        async with _client(handler) as client:
            token = await AsyncRemoteTokenFetcher(ENDPOINT, email="user@example.com", http_client=client).fetch()

        self.assertEqual(token.access_token, "access-no-auth")
        self.assertNotIn("Authorization", seen[0].headers)

    async def test_server_error(self):
        async with _client(lambda request: httpx.Response(500, text="internal error")) as client:
            with self.assertRaises(RemoteTokenError) as ctx:
                await AsyncRemoteTokenFetcher(ENDPOINT, email="user@example.com", http_client=client).fetch()
        self.assertIn("500", str(ctx.exception))

    async def test_empty_access_token(self):
        async with _client(lambda request: httpx.Response(200, json={"access_token": ""})) as client:
            with self.assertRaises(RemoteTokenError) as ctx:
                await AsyncRemoteTokenFetcher(ENDPOINT, email="user@example.com", http_client=client).fetch()
        self.assertIn("empty access token", str(ctx.exception))

    async def test_invalid_json(self):
        async with _client(lambda request: httpx.Response(200, text="not json")) as client:
            with self.assertRaises(RemoteTokenError) as ctx:
                await AsyncRemoteTokenFetcher(ENDPOINT, email="user@example.com", http_client=client).fetch()
        self.assertIn("parse response", str(ctx.exception))

    async def test_transport_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        async with _client(handler) as client:
            with self.assertRaises(RemoteTokenError) as ctx:
                await AsyncRemoteTokenFetcher(ENDPOINT, email="user@example.com", http_client=client).fetch()
        self.assertIn("request failed", str(ctx.exception))

    async def test_connection_error_default_client(self):
        fetcher = AsyncRemoteTokenFetcher("http://127.0.0.1:1", email="user@example.com", timeout=5)
        with self.assertRaises(RemoteTokenError) as ctx:
            await fetcher.fetch()
        self.assertIn("request failed", str(ctx.exception))

    async def test_invalid_endpoint(self):
        fetcher = AsyncRemoteTokenFetcher("not a url", email="user@example.com", timeout=5)
        with self.assertRaises(RemoteTokenError) as ctx:
            await fetcher.fetch()
        self.assertIn("request failed", str(ctx.exception))


if __name__ == "__main__":
    unittest.main()
