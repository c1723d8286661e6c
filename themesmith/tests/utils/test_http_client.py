# themesmith/tests/utils/test_http_client.py
import httpx
import pytest

from themesmith.utils.http_client import HttpClient


def _flaky_transport(failures: int, status: int = 503):
    calls = {"n": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        calls["n"] += 1
        if calls["n"] <= failures:
            return httpx.Response(status, text="unavailable")
        return httpx.Response(200, json={"ok": True})

    return httpx.MockTransport(handler), calls


@pytest.mark.asyncio
async def test_arequest_retries_then_succeeds():
    transport, calls = _flaky_transport(failures=1)
    client = HttpClient(max_retries=2, backoff_factor=0.0, async_transport=transport)

    resp = await client.arequest("GET", "https://example.test/ping")
    await client.aclose()

    assert resp.status_code == 200
    assert resp.ok
    assert resp.json() == {"ok": True}
    assert calls["n"] == 2


def test_request_gives_up_after_max_retries():
    transport, calls = _flaky_transport(failures=5)
    client = HttpClient(max_retries=2, backoff_factor=0.0, transport=transport)

    resp = client.request("POST", "https://example.test/", json_body={"html": ""})
    client.close()

    assert resp.status_code == 503
    assert not resp.ok
    assert calls["n"] == 3


def test_server_errors_are_not_retried():
    """A 500 from the renderer is deterministic; retrying would not help."""
    transport, calls = _flaky_transport(failures=5, status=500)
    client = HttpClient(max_retries=2, backoff_factor=0.0, transport=transport)

    resp = client.request("POST", "https://example.test/")
    client.close()

    assert resp.status_code == 500
    assert calls["n"] == 1


def test_connect_errors_are_retried_then_raised():
    calls = {"n": 0}

    def handler(request):
        calls["n"] += 1
        raise httpx.ConnectError("refused", request=request)

    client = HttpClient(max_retries=1, backoff_factor=0.0, transport=httpx.MockTransport(handler))
    with pytest.raises(httpx.ConnectError):
        client.request("GET", "https://example.test/")
    client.close()
    assert calls["n"] == 2


def test_response_timing_and_json_fallback():
    client = HttpClient(
        max_retries=0,
        transport=httpx.MockTransport(lambda request: httpx.Response(200, text="not json")),
    )
    resp = client.request("GET", "https://example.test/")
    client.close()

    assert resp.method == "GET"
    assert resp.url == "https://example.test/"
    assert resp.duration_ms >= 0
    assert resp.ended_ms >= resp.started_ms
    assert resp.json() is None
