"""
OpenAI provider adapter built on the official ``openai`` SDK.
"""

from __future__ import annotations

from typing import Any, Dict

from ..exceptions import CompleteKitError, ConfigurationError
from ..parser import choice_text
from ..types import ChunkCallback, CompletionRequest
from .base import SDKProvider


class OpenAIProvider(SDKProvider):
    """
    Adapter that speaks to OpenAI's Chat Completions API via ``AsyncOpenAI``.

    The SDK returns complete JSON responses (non-streaming) or an async
    sequence of chunk objects (streaming); this adapter only reads
    ``choices[0].message.content`` and ``choices[0].delta.content``.
    """

    name = "openai"
    label = "OpenAI"
    default_max_output_tokens = 4000

    def _create_client(self) -> Any:
        if not self.descriptor.api_key:
            raise ConfigurationError(
                f"API key not configured for provider: {self.descriptor.name}",
                suggestion="set apiKey for the provider or export OPENAI_API_KEY",
            )
        try:
            from openai import AsyncOpenAI
        except ImportError as exc:
            raise ConfigurationError(
                "openai package not installed. Install with `pip install openai`."
            ) from exc

        kwargs: Dict[str, Any] = {"api_key": self.descriptor.api_key}
        if self.descriptor.url and self.descriptor.url.strip():
            kwargs["base_url"] = self.descriptor.url.strip()
        return AsyncOpenAI(**kwargs)

    def _request_args(self, request: CompletionRequest) -> Dict[str, Any]:
        return {
            "model": self.model_name,
            "messages": [m.to_dict() for m in self.prompt_builder.messages(request)],
            "max_tokens": request.max_output_tokens,
            "temperature": request.temperature,
        }

    async def _complete(self, request: CompletionRequest) -> str:
        args = self._request_args(request)
        self._log_debug("request", args)
        try:
            response = await self._client.chat.completions.create(**args)
        except CompleteKitError:
            raise
        except Exception as exc:  # noqa: BLE001
            raise self._translate_error(exc) from exc

        return choice_text(response, "message") or ""

    async def _stream(self, request: CompletionRequest, on_delta: ChunkCallback) -> None:
        args = self._request_args(request)
        self._log_debug("request", args)
        try:
            stream = await self._client.chat.completions.create(stream=True, **args)
        except CompleteKitError:
            raise
        except Exception as exc:  # noqa: BLE001
            raise self._translate_error(exc) from exc

        async for chunk in self._events(stream):
            content = choice_text(chunk, "delta")
            if content:
                on_delta(content)


__all__ = ["OpenAIProvider"]
