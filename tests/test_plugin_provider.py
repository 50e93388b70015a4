"""
Tests for the host-plugin adapter (plugin_provider.py).
"""

from __future__ import annotations

import asyncio
from types import SimpleNamespace
from typing import Any, Callable, Dict, List, Optional

import pytest

from completekit.exceptions import ConfigurationError, ProviderError
from completekit.providers.plugin_provider import PluginProvider, ResultChannel


class FakeHandler:
    """Chunk handler that replays a script once all callbacks are registered."""

    def __init__(self, chunks: List[str], error: Optional[Exception] = None, end: bool = True):
        self.chunks = chunks
        self.error = error
        self.end = end
        self._data: Optional[Callable[[str], None]] = None
        self._end: Optional[Callable[[], None]] = None
        self._error: Optional[Callable[[Exception], None]] = None

    def on_data(self, callback: Callable[[str], None]) -> None:
        self._data = callback

    def on_end(self, callback: Callable[[], None]) -> None:
        self._end = callback

    def on_error(self, callback: Callable[[Exception], None]) -> None:
        self._error = callback
        asyncio.get_running_loop().call_soon(self._play)

    def _play(self) -> None:
        for chunk in self.chunks:
            self._data(chunk)
        if self.error is not None:
            self._error(self.error)
        if self.end:
            self._end()


class FakeHost:
    def __init__(self, handler: FakeHandler, providers: Optional[List[Any]] = None):
        self.handler = handler
        self.providers = providers or [SimpleNamespace(id="local-llm", name="Local LLM")]
        self.calls: List[Dict[str, Any]] = []

    async def execute(self, *, provider: Any, messages: List[Dict[str, str]]) -> FakeHandler:
        self.calls.append({"provider": provider, "messages": messages})
        return self.handler


class TestPluginProvider:
    @pytest.mark.asyncio
    async def test_non_streaming_accumulates(self) -> None:
        host = FakeHost(FakeHandler(["Hel", "", "lo"]))
        provider = PluginProvider("local-llm", host)
        received: List[str] = []

        result = await provider.complete("S", "C", user_prompt="U", on_chunk=received.append)

        assert result == "Hello"
        assert received == ["Hello"]
        assert host.calls[0]["provider"].id == "local-llm"
        # every message uses the user role
        assert host.calls[0]["messages"] == [
            {"role": "user", "content": "S"},
            {"role": "user", "content": "U"},
            {"role": "user", "content": "C"},
        ]

    @pytest.mark.asyncio
    async def test_streaming_forwards_chunks(self) -> None:
        host = FakeHost(FakeHandler(["a", "b", "c"]))
        provider = PluginProvider("local-llm", host)
        received: List[str] = []

        result = await provider.complete("S", "C", on_chunk=received.append, streaming=True)

        assert result is None
        assert received == ["a", "b", "c"]

    @pytest.mark.asyncio
    async def test_error_rejects(self) -> None:
        host = FakeHost(FakeHandler(["partial"], error=RuntimeError("backend down"), end=False))
        provider = PluginProvider("local-llm", host)

        with pytest.raises(ProviderError) as exc_info:
            await provider.complete("S", "C")
        assert "backend down" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_end_after_error_is_ignored(self) -> None:
        host = FakeHost(FakeHandler([], error=RuntimeError("boom"), end=True))
        provider = PluginProvider("local-llm", host)

        with pytest.raises(ProviderError):
            await provider.complete("S", "C")

    @pytest.mark.asyncio
    async def test_dict_providers_supported(self) -> None:
        host = FakeHost(FakeHandler(["ok"]), providers=[{"id": "p-9", "name": "Nine"}])
        provider = PluginProvider("p-9", host)

        assert await provider.complete("S", "C") == "ok"

    @pytest.mark.asyncio
    async def test_unknown_provider(self) -> None:
        provider = PluginProvider("missing", FakeHost(FakeHandler([])))

        with pytest.raises(ConfigurationError) as exc_info:
            await provider.complete("S", "C")
        assert "Provider with id missing not found" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_missing_host(self) -> None:
        with pytest.raises(ConfigurationError):
            await PluginProvider("local-llm").complete("S", "C")

    @pytest.mark.asyncio
    async def test_execute_failure_wrapped(self) -> None:
        class BrokenHost(FakeHost):
            async def execute(self, *, provider: Any, messages: List[Dict[str, str]]) -> FakeHandler:
                raise RuntimeError("plugin crashed")

        provider = PluginProvider("local-llm", BrokenHost(FakeHandler([])))

        with pytest.raises(ProviderError) as exc_info:
            await provider.complete("S", "C")
        assert "plugin crashed" in str(exc_info.value)


class TestResultChannel:
    @pytest.mark.asyncio
    async def test_first_signal_wins(self) -> None:
        channel = ResultChannel()
        channel.resolve("first")
        channel.reject(RuntimeError("late"))
        channel.resolve("second")

        assert channel.settled is True
        assert await channel.wait() == "first"
