"""
Async HTTP transport for the generation and execution endpoints.

Status codes are mapped onto the error taxonomy here so that callers only
ever see ArtifactsError subclasses.
"""

import logging
from typing import Any, Optional

import httpx

from ai_artifacts.errors import AuthError, RateLimitError, TransportError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:3000"
DEFAULT_TIMEOUT_S = 30.0
USER_AGENT = "ai-artifacts/0.1.0"


def raise_for_status(resp: httpx.Response, body: str = "") -> None:
    if resp.status_code < 400:
        return
    detail = f"HTTP {resp.status_code}: {body[:200]}" if body else f"HTTP {resp.status_code}"
    if resp.status_code in (401, 403):
        raise AuthError(detail)
    if resp.status_code == 429:
        raise RateLimitError(detail, retry_after=resp.headers.get("retry-after"))
    raise TransportError(detail, code="http_error", details={"status": resp.status_code})


class HttpClient:
    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT_S,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._timeout = timeout
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/") + "/api",
            headers={"User-Agent": USER_AGENT, "Accept": "application/json"},
            timeout=timeout,
            transport=transport,
        )

    async def post(self, path: str, body: Optional[dict[str, Any]] = None) -> Any:
        try:
            resp = await self._client.post(path, json=body)
        except httpx.HTTPError as e:
            logger.error("POST %s failed: %s", path, e)
            raise TransportError(f"Request to {path} failed: {e}")
        raise_for_status(resp, resp.text)
        try:
            return resp.json()
        except ValueError:
            raise TransportError(f"Invalid JSON from {path}: {resp.text[:200]}", code="invalid_response")

    async def open_stream(
        self, path: str, body: Optional[dict[str, Any]] = None, read_timeout: Optional[float] = None,
    ) -> httpx.Response:
        """POST and return the response once headers arrive. Caller must ``aclose()`` it."""
        extra: dict[str, Any] = {}
        if read_timeout:
            extra["timeout"] = httpx.Timeout(self._timeout, read=read_timeout)
        request = self._client.build_request("POST", path, json=body, **extra)
        try:
            resp = await self._client.send(request, stream=True)
        except httpx.HTTPError as e:
            logger.error("Stream to %s could not start: %s", path, e)
            raise TransportError(f"Could not reach {path}: {e}")
        if resp.status_code >= 400:
            try:
                text = (await resp.aread()).decode("utf-8", errors="replace")
            except httpx.HTTPError:
                text = ""
            finally:
                await resp.aclose()
            raise_for_status(resp, text)
        return resp

    async def close(self) -> None:
        await self._client.aclose()
