# themesmith/editor/client.py
"""
Client side of the render round-trip.
"""
from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

import httpx

from themesmith.exceptions import RenderRequestError
from themesmith.schemas.settings import Settings, get_settings
from themesmith.utils.http_client import HttpClient, HttpResponse
from themesmith.utils.logger import setup_logger

logger = setup_logger(__name__)


def build_payload(markup: str, theme: Mapping[str, Any]) -> Dict[str, Any]:
    """The JSON body of a render request: the whole theme under `extend`."""
    return {"html": markup, "theme": {"extend": dict(theme)}}


class RenderClient:
    """Posts markup plus theme to the rendering service and returns the CSS text."""

    def __init__(
        self,
        service_url: Optional[str] = None,
        *,
        http_client: Optional[HttpClient] = None,
        settings: Optional[Settings] = None,
    ):
        settings = settings or get_settings()
        self.service_url = service_url or settings.service_url
        self._http = http_client or HttpClient(
            timeout=settings.request_timeout,
            max_retries=settings.max_retries,
        )

    def _check(self, resp: HttpResponse) -> str:
        if not resp.ok:
            logger.warning(f"Render service answered {resp.status_code} after {resp.duration_ms} ms.")
            raise RenderRequestError(
                f"Render service answered with status {resp.status_code}.",
                status_code=resp.status_code,
                body=resp.text,
            )
        logger.debug(f"Received {len(resp.text)} bytes of CSS in {resp.duration_ms} ms.")
        return resp.text

    async def render(self, markup: str, theme: Mapping[str, Any]) -> str:
        """Requests a stylesheet for `markup` and `theme`.

        :raises RenderRequestError: On network failure or a non-2xx response.
        """
        try:
            resp = await self._http.arequest(
                "POST", self.service_url, json_body=build_payload(markup, theme)
            )
        except httpx.HTTPError as e:
            logger.warning(f"Render service unreachable at {self.service_url}: {e}")
            raise RenderRequestError(f"Render service unreachable: {e}") from e
        return self._check(resp)

    def render_sync(self, markup: str, theme: Mapping[str, Any]) -> str:
        """Blocking variant of `render`, for one-shot CLI use."""
        try:
            resp = self._http.request(
                "POST", self.service_url, json_body=build_payload(markup, theme)
            )
        except httpx.HTTPError as e:
            logger.warning(f"Render service unreachable at {self.service_url}: {e}")
            raise RenderRequestError(f"Render service unreachable: {e}") from e
        return self._check(resp)

    async def aclose(self) -> None:
        await self._http.aclose()

    def close(self) -> None:
        self._http.close()
