import asyncio

import httpx
import pytest

from catalog_browser.core.http_retry import get_with_retry


def _client(responses: list):
    calls: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(str(request.url))
        outcome = responses[min(len(calls), len(responses)) - 1]
        if isinstance(outcome, Exception):
            raise outcome
        return httpx.Response(outcome, json={})

    return httpx.AsyncClient(transport=httpx.MockTransport(handler)), calls


@pytest.fixture
def no_sleep(monkeypatch: pytest.MonkeyPatch):
    sleeps: list[float] = []

    async def _sleep(seconds: float):
        sleeps.append(seconds)

    monkeypatch.setattr(asyncio, "sleep", _sleep)
    return sleeps


@pytest.mark.asyncio
async def test_single_attempt_by_default(no_sleep):
    client, calls = _client([503, 200])
    with pytest.raises(httpx.HTTPStatusError):
        await get_with_retry(client, "https://x/")
    assert len(calls) == 1
    assert no_sleep == []


@pytest.mark.asyncio
async def test_retries_server_errors_with_backoff(no_sleep):
    client, calls = _client([503, 502, 200])
    response = await get_with_retry(client, "https://x/", max_retries=3, initial_delay=0.5)

    assert response.status_code == 200
    assert len(calls) == 3
    assert no_sleep == [0.5, 1.0]


@pytest.mark.asyncio
async def test_does_not_retry_client_errors(no_sleep):
    client, calls = _client([404])
    with pytest.raises(httpx.HTTPStatusError):
        await get_with_retry(client, "https://x/", max_retries=3)
    assert len(calls) == 1


@pytest.mark.asyncio
async def test_retries_transport_errors_then_raises(no_sleep):
    client, calls = _client([httpx.ConnectError("refused")])
    with pytest.raises(httpx.ConnectError):
        await get_with_retry(client, "https://x/", max_retries=2, initial_delay=1.0, max_delay=1.5)
    assert len(calls) == 3
    assert no_sleep == [1.0, 1.5]
