"""Tests for backend connectivity tracking."""
import httpx

from src.client.connectivity import ConnectivityMonitor


def _http(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url="http://test/api")


class TestConnectivityMonitor:
    async def test_initial_state(self):
        async with _http(lambda request: httpx.Response(200)) as http:
            monitor = ConnectivityMonitor(http)

        assert monitor.connected is False
        assert monitor.checking is True
        assert monitor.error is None

    async def test_connected(self, fake_http):
        monitor = ConnectivityMonitor(fake_http)

        assert await monitor.start() is True
        assert monitor.connected is True
        assert monitor.checking is False
        assert monitor.error is None

    async def test_database_down(self):
        def handler(request):
            return httpx.Response(200, json={"connected": False, "error": "Connection check failed"})

        async with _http(handler) as http:
            monitor = ConnectivityMonitor(http)
            await monitor.start()

        assert monitor.connected is False
        assert monitor.checking is False
        assert monitor.error == "Connection check failed"

    async def test_http_error_status(self):
        async with _http(lambda request: httpx.Response(503)) as http:
            monitor = ConnectivityMonitor(http)
            await monitor.start()

        assert monitor.connected is False
        assert monitor.error == "Health check returned HTTP 503"

    async def test_transport_failure_does_not_raise(self, fake_api, fake_http):
        fake_api.offline = True
        monitor = ConnectivityMonitor(fake_http)

        assert await monitor.start() is False
        assert monitor.checking is False
        assert monitor.error

    async def test_invalid_body(self):
        async with _http(lambda request: httpx.Response(200, content=b"<html>")) as http:
            monitor = ConnectivityMonitor(http)
            await monitor.start()

        assert monitor.connected is False
        assert monitor.error

    async def test_recheck_recovers(self, fake_api, fake_http):
        fake_api.offline = True
        monitor = ConnectivityMonitor(fake_http)
        await monitor.start()

        fake_api.offline = False
        assert await monitor.recheck() is True
        assert monitor.error is None

    async def test_against_real_app(self, api_http):
        monitor = ConnectivityMonitor(api_http)

        assert await monitor.start() is True
