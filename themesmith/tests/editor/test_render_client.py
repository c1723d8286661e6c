# themesmith/tests/editor/test_render_client.py
"""
Tests for the editor's render client, against mock transports and the real
application (with the pipeline stubbed).
"""
import json

import httpx
import pytest

from themesmith.editor.client import RenderClient, build_payload
from themesmith.exceptions import RenderRequestError
from themesmith.schemas.settings import Settings
from themesmith.serve import app
from themesmith.utils.http_client import HttpClient
from themesmith.web.routes_render import get_pipeline

SERVICE_URL = "http://render.test/"


def _client(handler) -> RenderClient:
    http = HttpClient(
        max_retries=0,
        transport=httpx.MockTransport(handler),
        async_transport=httpx.MockTransport(handler),
    )
    return RenderClient(SERVICE_URL, http_client=http, settings=Settings())


def test_build_payload_sends_whole_theme_under_extend():
    theme = {"colors": {"primary": {"50": "#243d48"}}}
    assert build_payload("<p></p>", theme) == {"html": "<p></p>", "theme": {"extend": theme}}


@pytest.mark.asyncio
async def test_render_posts_payload_and_returns_text():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["url"] = str(request.url)
        seen["content_type"] = request.headers["content-type"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, text=".p-4{padding:1rem}", headers={"content-type": "text/css"})

    client = _client(handler)
    css = await client.render('<div class="p-4"></div>', {"spacing": {"4": "1rem"}})
    await client.aclose()

    assert css == ".p-4{padding:1rem}"
    assert seen["method"] == "POST"
    assert seen["url"] == SERVICE_URL
    assert seen["content_type"] == "application/json"
    assert seen["body"] == {
        "html": '<div class="p-4"></div>',
        "theme": {"extend": {"spacing": {"4": "1rem"}}},
    }


@pytest.mark.asyncio
async def test_non_success_status_raises():
    client = _client(lambda request: httpx.Response(500, json={"error_type": "PipelineError"}))
    with pytest.raises(RenderRequestError) as excinfo:
        await client.render("", {})
    await client.aclose()
    assert excinfo.value.status_code == 500
    assert "PipelineError" in excinfo.value.body


@pytest.mark.asyncio
async def test_network_failure_raises():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    client = _client(handler)
    with pytest.raises(RenderRequestError) as excinfo:
        await client.render("", {})
    await client.aclose()
    assert excinfo.value.status_code is None


def test_render_sync():
    client = _client(lambda request: httpx.Response(200, text="/* ok */"))
    assert client.render_sync("", {}) == "/* ok */"
    client.close()


def test_render_sync_error():
    client = _client(lambda request: httpx.Response(400, json={"error_type": "MalformedRequest"}))
    with pytest.raises(RenderRequestError):
        client.render_sync("", {})
    client.close()


@pytest.mark.asyncio
async def test_round_trip_through_the_service():
    """The client's payload is accepted by the real route and the CSS comes back."""

    class EchoPipeline:
        def render_stylesheet(self, markup, theme_fragment):
            color = theme_fragment["colors"]["primary"]["50"]
            return f"/* {markup} */ .bg-primary-50 {{ background-color: {color} }}"

    app.dependency_overrides[get_pipeline] = lambda: EchoPipeline()
    try:
        http = HttpClient(max_retries=0, async_transport=httpx.ASGITransport(app=app))
        client = RenderClient("http://testserver/", http_client=http, settings=Settings())
        css = await client.render("<b></b>", {"colors": {"primary": {"50": "#243d48"}}})
        await client.aclose()
    finally:
        app.dependency_overrides.pop(get_pipeline, None)

    assert css == "/* <b></b> */ .bg-primary-50 { background-color: #243d48 }"
