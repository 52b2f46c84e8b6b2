import httpx
import pytest
from fastapi.testclient import TestClient
from tenacity import wait_none

from inkparse.config import Settings
from inkparse.main import create_app
from inkparse.services.keepalive import KeepAlivePinger


@pytest.fixture
def no_wait(monkeypatch):
    monkeypatch.setattr(KeepAlivePinger.ping.retry, "wait", wait_none())


class TestKeepAlivePinger:

    @pytest.mark.asyncio
    async def test_ping(self):
        seen = []

        def handler(request):
            seen.append(str(request.url))
            return httpx.Response(200, json={"status": "ok"})

        pinger = KeepAlivePinger("https://inkparse.example.com/health", 10, transport=httpx.MockTransport(handler))
        assert await pinger.ping() == 200
        assert seen == ["https://inkparse.example.com/health"]
        assert pinger.interval_s == 600

    @pytest.mark.asyncio
    async def test_ping_retries_network_errors(self, no_wait):
        attempts = []

        def handler(request):
            attempts.append(1)
            if len(attempts) < 3:
                raise httpx.ConnectError("refused", request=request)
            return httpx.Response(200)

        pinger = KeepAlivePinger("https://inkparse.example.com/health", 10, transport=httpx.MockTransport(handler))
        assert await pinger.ping() == 200
        assert len(attempts) == 3

    @pytest.mark.asyncio
    async def test_ping_gives_up(self, no_wait):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        pinger = KeepAlivePinger("https://inkparse.example.com/health", 10, transport=httpx.MockTransport(handler))
        with pytest.raises(httpx.ConnectError):
            await pinger.ping()


def test_lifespan_starts_and_cancels_pinger(monkeypatch, settings):
    monkeypatch.setenv("KEEPALIVE_ENABLE", "true")
    monkeypatch.setenv("KEEPALIVE_URL", "https://inkparse.example.com/health")
    app = create_app(Settings())

    with TestClient(app):
        task = app.state._keepalive_task
        assert not task.done()

    assert task.cancelled()
