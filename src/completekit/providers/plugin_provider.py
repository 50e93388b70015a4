"""
Adapter for providers hosted by an external AI-providers plugin.

The host owns the backend connection. It hands back a chunk handler with
three single-shot registration points (``on_data``, ``on_end``,
``on_error``); this adapter turns that push interface into one awaitable
result.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Dict, List, Optional, Protocol, Sequence, runtime_checkable

from ..exceptions import CompleteKitError, ConfigurationError, ProviderError
from ..types import DEFAULT_QUERY_TIMEOUT, ChunkCallback, CompletionRequest
from .base import Provider

logger = logging.getLogger(__name__)


@runtime_checkable
class ChunkHandler(Protocol):
    def on_data(self, callback: Callable[[str], None]) -> None: ...

    def on_end(self, callback: Callable[[], None]) -> None: ...

    def on_error(self, callback: Callable[[Exception], None]) -> None: ...


@runtime_checkable
class ProviderHost(Protocol):
    """The host plugin's service object."""

    providers: Sequence[Any]

    async def execute(self, *, provider: Any, messages: List[Dict[str, str]]) -> ChunkHandler: ...


class ResultChannel:
    """
    One-shot completion signal.

    Whichever of ``resolve``/``reject`` runs first settles the future; later
    calls are ignored.
    """

    def __init__(self) -> None:
        self._future: "asyncio.Future[Optional[str]]" = asyncio.get_running_loop().create_future()

    @property
    def settled(self) -> bool:
        return self._future.done()

    def resolve(self, value: Optional[str]) -> None:
        if self._future.done():
            logger.debug("Ignoring completion signal on a settled channel")
            return
        self._future.set_result(value)

    def reject(self, error: BaseException) -> None:
        if self._future.done():
            logger.debug("Ignoring error on a settled channel: %r", error)
            return
        self._future.set_exception(error)

    async def wait(self) -> Optional[str]:
        return await self._future


class PluginProvider(Provider):
    """
    Completion through a host-plugin provider, addressed by its id.

    The host does not expose role distinctions to this layer, so every
    instruction is sent as a user message regardless of
    ``system_prompt_support``.
    """

    name = "plugin"
    label = "Plugin AI providers"

    def __init__(
        self,
        provider_id: str,
        host: Optional[ProviderHost] = None,
        *,
        debug: bool = False,
        query_timeout: float = DEFAULT_QUERY_TIMEOUT,
    ):
        super().__init__(debug=debug, query_timeout=query_timeout)
        self.provider_id = provider_id
        self.host = host

    def _messages(self, request: CompletionRequest) -> List[Dict[str, str]]:
        return [m.to_dict() for m in self.prompt_builder.demoted(request)]

    def _resolve_provider(self) -> Any:
        if self.host is None:
            raise ConfigurationError(
                "AI providers host is not available",
                suggestion="install and enable the AI providers plugin",
            )
        provider = next((p for p in self.host.providers if _provider_id(p) == self.provider_id), None)
        if provider is None:
            raise ConfigurationError(f"Provider with id {self.provider_id} not found")
        return provider

    async def _run(self, request: CompletionRequest, on_delta: Optional[ChunkCallback]) -> Optional[str]:
        provider = self._resolve_provider()
        messages = self._messages(request)
        self._log_debug("request", {"provider": self.provider_id, "messages": messages})

        channel = ResultChannel()
        parts: List[str] = []

        def handle_data(chunk: str) -> None:
            if channel.settled or not chunk:
                return
            if on_delta is not None:
                on_delta(chunk)
            else:
                parts.append(chunk)

        def handle_end() -> None:
            channel.resolve(None if on_delta is not None else "".join(parts))

        def handle_error(error: Exception) -> None:
            channel.reject(ProviderError(f"{self.label} API error: {error}", provider=self.name))

        try:
            handler = await self.host.execute(provider=provider, messages=messages)
            handler.on_data(handle_data)
            handler.on_end(handle_end)
            handler.on_error(handle_error)
        except CompleteKitError:
            raise
        except Exception as exc:  # noqa: BLE001
            raise ProviderError(f"{self.label} API error: {exc}", provider=self.name) from exc

        return await channel.wait()

    async def _complete(self, request: CompletionRequest) -> str:
        return await self._run(request, None) or ""

    async def _stream(self, request: CompletionRequest, on_delta: ChunkCallback) -> None:
        await self._run(request, on_delta)


def hosted_field(provider: Any, field: str) -> Any:
    """Read ``field`` from a host provider entry, which may be a dict or an object."""
    if isinstance(provider, dict):
        return provider.get(field)
    return getattr(provider, field, None)


def _provider_id(provider: Any) -> Any:
    return hosted_field(provider, "id")


__all__ = ["PluginProvider", "ProviderHost", "ChunkHandler", "ResultChannel", "hosted_field"]
