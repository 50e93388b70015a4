"""
Fetch-like transports used by the HTTP adapters.

Adapters only see the small interface below: ``post`` returns a response with
``ok``, ``status``, ``reason``, ``json()`` and ``get_reader()``; the reader
yields raw byte chunks until ``b""``. Two implementations are provided on top
of httpx:

- HttpxTransport streams the body as it arrives.
- BufferedTransport downloads the whole body first and replays it as a single
  chunk, for hosts where incremental reads are not available.
"""

from __future__ import annotations

import json
import logging
from typing import Any, AsyncIterator, Dict, Optional, Protocol, runtime_checkable

import httpx

from .exceptions import TransportError

logger = logging.getLogger(__name__)

DEFAULT_HTTP_TIMEOUT = httpx.Timeout(60.0, connect=10.0)


@runtime_checkable
class BodyReader(Protocol):
    """Incremental reader over a response body."""

    async def read(self) -> bytes:
        """Return the next chunk, or ``b""`` once the body is exhausted."""
        ...

    async def release(self) -> None:
        """Give the underlying connection back. Called exactly once per reader."""
        ...


@runtime_checkable
class TransportResponse(Protocol):
    status: int
    reason: str

    @property
    def ok(self) -> bool: ...

    async def json(self) -> Any: ...

    def get_reader(self) -> Optional[BodyReader]: ...

    async def aclose(self) -> None: ...


@runtime_checkable
class Transport(Protocol):
    """Injected HTTP POST function."""

    async def post(self, url: str, *, headers: Dict[str, str], body: str) -> TransportResponse:
        ...


class _HttpxBodyReader:
    def __init__(self, response: "HttpxResponse"):
        self._owner = response
        self._chunks: AsyncIterator[bytes] = response.raw.aiter_bytes()
        self._released = False

    async def read(self) -> bytes:
        if self._released:
            return b""
        try:
            return await self._chunks.__anext__()
        except StopAsyncIteration:
            return b""
        except httpx.HTTPError as exc:
            raise TransportError(f"Connection lost while reading response body: {exc}") from exc

    async def release(self) -> None:
        if self._released:
            return
        self._released = True
        await self._owner.aclose()


class HttpxResponse:
    """Adapter from ``httpx.Response`` (opened with ``stream=True``) to TransportResponse."""

    def __init__(self, response: httpx.Response, client: Optional[httpx.AsyncClient] = None):
        self.raw = response
        self.status = response.status_code
        self.reason = response.reason_phrase
        self._client = client
        self._closed = False

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    async def json(self) -> Any:
        try:
            await self.raw.aread()
        except httpx.HTTPError as exc:
            raise TransportError(f"Connection lost while reading response body: {exc}") from exc
        finally:
            await self.aclose()
        return json.loads(self.raw.content)

    def get_reader(self) -> Optional[BodyReader]:
        if self._closed or self.raw.is_stream_consumed:
            return None
        return _HttpxBodyReader(self)

    async def aclose(self) -> None:
        if self._closed:
            return
        self._closed = True
        await self.raw.aclose()
        if self._client is not None:
            await self._client.aclose()


class HttpxTransport:
    """
    Streaming transport backed by ``httpx.AsyncClient``.

    Pass a client to share a connection pool; otherwise a client is created
    per request and closed together with its response.
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        timeout: httpx.Timeout = DEFAULT_HTTP_TIMEOUT,
    ):
        self._client = client
        self.timeout = timeout

    async def post(self, url: str, *, headers: Dict[str, str], body: str) -> HttpxResponse:
        owned = self._client is None
        client = self._client or httpx.AsyncClient(timeout=self.timeout)
        request = client.build_request("POST", url, headers=headers, content=body.encode("utf-8"))
        try:
            response = await client.send(request, stream=True)
        except httpx.HTTPError as exc:
            if owned:
                await client.aclose()
            raise TransportError(f"POST {url} failed: {exc}") from exc
        logger.debug("POST %s -> %s %s", url, response.status_code, response.reason_phrase)
        return HttpxResponse(response, client if owned else None)


class _BufferedBodyReader:
    def __init__(self, content: bytes):
        self._content: Optional[bytes] = content
        self.released = False

    async def read(self) -> bytes:
        content, self._content = self._content, None
        return content or b""

    async def release(self) -> None:
        self.released = True
        self._content = None


class BufferedResponse:
    """A fully downloaded response; its reader replays the body as one chunk."""

    def __init__(self, status: int, reason: str, content: bytes):
        self.status = status
        self.reason = reason
        self.content = content

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    async def json(self) -> Any:
        return json.loads(self.content)

    def get_reader(self) -> Optional[BodyReader]:
        return _BufferedBodyReader(self.content)

    async def aclose(self) -> None:
        return None


class BufferedTransport:
    """Alternate transport that reads the whole body before returning."""

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        timeout: httpx.Timeout = DEFAULT_HTTP_TIMEOUT,
    ):
        self._client = client
        self.timeout = timeout

    async def post(self, url: str, *, headers: Dict[str, str], body: str) -> BufferedResponse:
        # httpx computes Content-Length itself.
        headers = {k: v for k, v in headers.items() if k.lower() != "content-length"}
        try:
            if self._client is not None:
                response = await self._client.post(url, headers=headers, content=body.encode("utf-8"))
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.post(url, headers=headers, content=body.encode("utf-8"))
        except httpx.HTTPError as exc:
            raise TransportError(f"POST {url} failed: {exc}") from exc
        logger.debug("POST %s -> %s %s (buffered)", url, response.status_code, response.reason_phrase)
        return BufferedResponse(response.status_code, response.reason_phrase, response.content)


def default_transport(use_alternate: bool = False) -> Transport:
    """Pick the transport the way the ``use_alternate_transport`` setting asks for."""
    return BufferedTransport() if use_alternate else HttpxTransport()


__all__ = [
    "BodyReader",
    "TransportResponse",
    "Transport",
    "HttpxResponse",
    "HttpxTransport",
    "BufferedResponse",
    "BufferedTransport",
    "default_transport",
]
