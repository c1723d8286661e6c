# themesmith/utils/http_client.py
from __future__ import annotations

import asyncio
import json
import time
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple, Union

import httpx

DEFAULT_TIMEOUT = httpx.Timeout(connect=5.0, read=30.0, write=30.0, pool=5.0)

_TRANSIENT_ERRORS = (
    httpx.ConnectError,
    httpx.ReadTimeout,
    httpx.WriteError,
    httpx.RemoteProtocolError,
)


@dataclass
class HttpResponse:
    method: str
    url: str
    status_code: int
    headers: Dict[str, str]
    text: str
    duration_ms: int
    started_ms: int
    ended_ms: int

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    def json(self) -> Any:
        """Best-effort JSON decode; returns None on failure."""
        try:
            return json.loads(self.text)
        except ValueError:
            return None


def _now_ms() -> int:
    return int(time.time() * 1000)


def _to_response(method: str, resp: httpx.Response, started: int) -> HttpResponse:
    ended = _now_ms()
    return HttpResponse(
        method=method.upper(),
        url=str(resp.request.url),
        status_code=resp.status_code,
        headers=dict(resp.headers),
        text=resp.text,
        duration_ms=ended - started,
        started_ms=started,
        ended_ms=ended,
    )


class HttpClient:
    """
    A thin wrapper over httpx with:
      - sensible timeouts
      - bounded retries with exponential backoff
      - response timing
      - injectable transports (mock or ASGI) for tests
    """

    def __init__(
        self,
        *,
        base_url: str = "",
        timeout: Union[httpx.Timeout, float] = DEFAULT_TIMEOUT,
        max_retries: int = 2,
        backoff_factor: float = 0.2,
        headers: Optional[Mapping[str, str]] = None,
        transport: Optional[httpx.BaseTransport] = None,
        async_transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        if not isinstance(timeout, httpx.Timeout):
            timeout = httpx.Timeout(timeout)
        self._timeout = timeout
        self._max_retries = max_retries
        self._backoff = backoff_factor
        self._headers = dict(headers or {})
        self._client = httpx.Client(
            base_url=base_url, timeout=timeout, headers=self._headers, transport=transport
        )
        self._aclient = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            headers=self._headers,
            transport=async_transport,
        )

    # ------------------------- Sync -------------------------

    def request(
        self,
        method: str,
        url: str,
        *,
        headers: Optional[Mapping[str, str]] = None,
        json_body: Optional[Any] = None,
        content: Optional[Union[bytes, str]] = None,
        retry_on: Tuple[int, ...] = (408, 429, 502, 503, 504),
    ) -> HttpResponse:
        started = _now_ms()
        for attempt in range(self._max_retries + 1):
            try:
                resp = self._client.request(
                    method, url, headers=headers, json=json_body, content=content
                )
            except _TRANSIENT_ERRORS:
                if attempt < self._max_retries:
                    time.sleep(self._backoff * (2**attempt))
                    continue
                raise
            if resp.status_code in retry_on and attempt < self._max_retries:
                time.sleep(self._backoff * (2**attempt))
                continue
            return _to_response(method, resp, started)
        raise RuntimeError("unreachable")  # pragma: no cover

    # ------------------------- Async ------------------------

    async def arequest(
        self,
        method: str,
        url: str,
        *,
        headers: Optional[Mapping[str, str]] = None,
        json_body: Optional[Any] = None,
        content: Optional[Union[bytes, str]] = None,
        retry_on: Tuple[int, ...] = (408, 429, 502, 503, 504),
    ) -> HttpResponse:
        started = _now_ms()
        for attempt in range(self._max_retries + 1):
            try:
                resp = await self._aclient.request(
                    method, url, headers=headers, json=json_body, content=content
                )
            except _TRANSIENT_ERRORS:
                if attempt < self._max_retries:
                    await asyncio.sleep(self._backoff * (2**attempt))
                    continue
                raise
            if resp.status_code in retry_on and attempt < self._max_retries:
                await asyncio.sleep(self._backoff * (2**attempt))
                continue
            return _to_response(method, resp, started)
        raise RuntimeError("unreachable")  # pragma: no cover

    # ------------------------- Cleanup ----------------------

    def close(self) -> None:
        self._client.close()

    async def aclose(self) -> None:
        await self._aclient.aclose()
        self._client.close()
