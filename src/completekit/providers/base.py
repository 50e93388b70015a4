"""
Provider abstraction: the completion contract every adapter implements.
"""

from __future__ import annotations

import asyncio
import json
import logging
from abc import ABC, abstractmethod
from typing import Any, AsyncIterator, Dict, Optional

from ..config import ProviderDescriptor
from ..exceptions import (
    CompleteKitError,
    ConfigurationError,
    ProviderError,
    StreamUnavailable,
    TransportError,
)
from ..prompt import PromptBuilder
from ..transport import BodyReader, Transport, TransportResponse, default_transport
from ..types import (
    DEFAULT_MAX_OUTPUT_TOKENS,
    DEFAULT_QUERY_TIMEOUT,
    ChunkCallback,
    CompletionRequest,
)
from ..watchdog import StallWatchdog

logger = logging.getLogger(__name__)


class Provider(ABC):
    """
    Base class for vendor adapters.

    Subclasses implement two hooks, ``_complete`` (return the full text) and
    ``_stream`` (push every fragment to a callback). ``complete`` decides
    which one runs and enforces the shared callback rules, so both modes give
    the same text for the same vendor output.
    """

    name: str = "base"
    default_max_output_tokens: int = DEFAULT_MAX_OUTPUT_TOKENS
    supports_system_role: bool = True

    def __init__(
        self,
        *,
        debug: bool = False,
        query_timeout: float = DEFAULT_QUERY_TIMEOUT,
        prompt_builder: Optional[PromptBuilder] = None,
    ):
        self.debug = debug
        self.query_timeout = query_timeout
        self.prompt_builder = prompt_builder or PromptBuilder()

    async def complete(
        self,
        system_prompt: str,
        content: str,
        *,
        on_chunk: Optional[ChunkCallback] = None,
        temperature: Optional[float] = None,
        max_output_tokens: Optional[int] = None,
        user_prompt: Optional[str] = None,
        streaming: bool = False,
        system_prompt_support: bool = True,
    ) -> Optional[str]:
        """
        Run one completion.

        Args:
            system_prompt: Instruction text.
            content: Primary content.
            on_chunk: Receives text fragments. In streaming mode every
                non-empty fragment in arrival order; otherwise the complete
                result once (skipped when the result is empty).
            temperature: Sampling temperature. Default: 0.7.
            max_output_tokens: Output token limit. Default: adapter specific.
            user_prompt: Optional secondary instruction sent before the content.
            streaming: Stream fragments to ``on_chunk`` (needs ``on_chunk``).
            system_prompt_support: Send the instruction with the system role.
                Ignored when the descriptor disables the system role.

        Returns:
            The full text, or None when fragments were streamed.

        Raises:
            ProviderError: The vendor answered with a failure status.
            TransportError: The request could not be delivered.
            StreamUnavailable: A streaming response had no body.
        """
        request = CompletionRequest.build(
            system_prompt,
            content,
            temperature=temperature,
            max_output_tokens=max_output_tokens,
            user_prompt=user_prompt,
            streaming=bool(streaming and on_chunk is not None),
            system_prompt_support=system_prompt_support and self.supports_system_role,
            default_max_output_tokens=self.default_max_output_tokens,
        )

        if request.streaming and on_chunk is not None:
            await self._stream(request, on_chunk)
            return None

        result = await self._complete(request)
        if on_chunk is not None and result:
            on_chunk(result)
        return result

    async def complete_with_watchdog(
        self,
        system_prompt: str,
        content: str,
        *,
        on_chunk: Optional[ChunkCallback] = None,
        watchdog: Optional[StallWatchdog] = None,
        **kwargs: Any,
    ) -> Optional[str]:
        """``complete`` guarded by a stall watchdog (``query_timeout`` by default)."""
        guard = watchdog or StallWatchdog(timeout=self.query_timeout)
        if on_chunk is None:
            # Nothing to stream to; the caller needs the returned text.
            kwargs["streaming"] = False
        return await guard.run(
            lambda forward: self.complete(system_prompt, content, on_chunk=forward, **kwargs),
            on_chunk,
        )

    async def complete_streaming(
        self,
        system_prompt: str,
        content: str,
        on_chunk: ChunkCallback,
        **kwargs: Any,
    ) -> None:
        """Streaming completion where the window applies between fragments."""
        kwargs["streaming"] = True
        await self.complete_with_watchdog(system_prompt, content, on_chunk=on_chunk, **kwargs)

    @abstractmethod
    async def _complete(self, request: CompletionRequest) -> str:
        """Return the full response text ("" when the vendor sent none)."""

    @abstractmethod
    async def _stream(self, request: CompletionRequest, on_delta: ChunkCallback) -> None:
        """Deliver each text fragment to ``on_delta`` until the vendor is done."""

    def _log_debug(self, label: str, payload: Any) -> None:
        if not self.debug:
            return
        try:
            rendered = json.dumps(payload, ensure_ascii=False, default=str)
        except (TypeError, ValueError):
            rendered = repr(payload)
        logger.debug("[%s] %s: %s", self.name, label, rendered)


class HTTPProvider(Provider):
    """
    Base for adapters that talk JSON over the injected transport.

    Holds the provider descriptor and bound model name, computes the base
    URL and headers, and checks the response status.
    """

    label: str = "HTTP"
    default_base_url: str = ""

    def __init__(
        self,
        descriptor: ProviderDescriptor,
        model_name: str,
        *,
        transport: Optional[Transport] = None,
        debug: bool = False,
        query_timeout: float = DEFAULT_QUERY_TIMEOUT,
    ):
        super().__init__(debug=debug, query_timeout=query_timeout)
        if not model_name:
            raise ConfigurationError(f"No model name configured for provider: {descriptor.name}")
        self.descriptor = descriptor
        self.model_name = model_name
        self.supports_system_role = descriptor.supports_system_role
        self.transport = transport or default_transport()

    @property
    def base_url(self) -> str:
        return (self.descriptor.url or self.default_base_url).rstrip("/")

    def headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.descriptor.api_key:
            headers["Authorization"] = f"Bearer {self.descriptor.api_key}"
        return headers

    async def _post(self, endpoint: str, body: Dict[str, Any]) -> TransportResponse:
        url = f"{self.base_url}{endpoint}"
        self._log_debug("request", {"url": url, "body": body})
        response = await self.transport.post(url, headers=self.headers(), body=json.dumps(body))
        if not response.ok:
            await response.aclose()
            raise ProviderError(
                f"{self.label} API error: {response.status} {response.reason}",
                status=response.status,
                provider=self.name,
            )
        return response

    async def _read_json(self, response: TransportResponse) -> Any:
        try:
            data = await response.json()
        except ValueError as exc:
            raise ProviderError(
                f"{self.label} API error: response body is not valid JSON",
                status=response.status,
                provider=self.name,
            ) from exc
        self._log_debug("response", data)
        return data

    def _reader(self, response: TransportResponse) -> BodyReader:
        reader = response.get_reader()
        if reader is None:
            raise StreamUnavailable(
                "No response body reader available",
                status=response.status,
                provider=self.name,
            )
        return reader


class SDKProvider(Provider):
    """
    Base for adapters that delegate the wire protocol to a vendor SDK.

    The SDK client is created lazily from the descriptor unless one is
    injected (tests pass fakes).
    """

    label: str = "SDK"

    def __init__(
        self,
        descriptor: ProviderDescriptor,
        model_name: str,
        *,
        client: Any = None,
        debug: bool = False,
        query_timeout: float = DEFAULT_QUERY_TIMEOUT,
    ):
        super().__init__(debug=debug, query_timeout=query_timeout)
        if not model_name:
            raise ConfigurationError(f"No model name configured for provider: {descriptor.name}")
        self.descriptor = descriptor
        self.model_name = model_name
        self.supports_system_role = descriptor.supports_system_role
        self._client = client if client is not None else self._create_client()

    @abstractmethod
    def _create_client(self) -> Any:
        """Instantiate the vendor SDK client from the descriptor."""

    def _translate_error(self, exc: Exception) -> CompleteKitError:
        return translate_sdk_error(exc, provider=self.name, label=self.label)

    async def _events(self, stream: Any) -> AsyncIterator[Any]:
        """Iterate an SDK stream, translating errors raised between events."""
        iterator = stream.__aiter__()
        while True:
            try:
                event = await iterator.__anext__()
            except StopAsyncIteration:
                return
            except CompleteKitError:
                raise
            except Exception as exc:  # noqa: BLE001
                raise self._translate_error(exc) from exc
            yield event


_TRANSPORT_ERROR_NAMES = ("APIConnectionError", "APITimeoutError", "ConnectError", "ReadTimeout")


def translate_sdk_error(exc: Exception, *, provider: str, label: str) -> CompleteKitError:
    """
    Map a vendor SDK exception onto the completekit taxonomy.

    Errors carrying an HTTP status (``status_code`` on openai/anthropic,
    ``code`` on google-genai) become ProviderError; connection and timeout
    failures become TransportError; anything else is a ProviderError
    without status.
    """
    if isinstance(exc, CompleteKitError):
        return exc
    status = getattr(exc, "status_code", None)
    if not isinstance(status, int):
        status = getattr(exc, "code", None)
    if isinstance(status, int) and not isinstance(status, bool):
        reason = getattr(exc, "message", None) or str(exc)
        return ProviderError(f"{label} API error: {status} {reason}", status=status, provider=provider)
    if (
        isinstance(exc, (ConnectionError, asyncio.TimeoutError))
        or type(exc).__name__ in _TRANSPORT_ERROR_NAMES
    ):
        return TransportError(f"{label} request failed: {exc}")
    return ProviderError(f"{label} API error: {exc}", provider=provider)


__all__ = [
    "Provider",
    "HTTPProvider",
    "SDKProvider",
    "ProviderError",
    "translate_sdk_error",
]
