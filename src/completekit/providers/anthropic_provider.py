"""
Anthropic provider adapter built on the ``anthropic`` SDK.
"""

from __future__ import annotations

from typing import Any, Dict

from ..exceptions import CompleteKitError, ConfigurationError
from ..parser import event_text, message_text
from ..types import ChunkCallback, CompletionRequest
from .base import SDKProvider


class AnthropicProvider(SDKProvider):
    """Anthropic Messages API adapter."""

    name = "anthropic"
    label = "Anthropic"
    default_base_url = "https://api.anthropic.com"

    def _create_client(self) -> Any:
        if not self.descriptor.api_key:
            raise ConfigurationError(
                f"API key not configured for provider: {self.descriptor.name}",
                suggestion="set apiKey for the provider or export ANTHROPIC_API_KEY",
            )
        try:
            from anthropic import AsyncAnthropic
        except ImportError as exc:
            raise ConfigurationError(
                "anthropic package not installed. Install with `pip install anthropic`."
            ) from exc

        return AsyncAnthropic(
            api_key=self.descriptor.api_key,
            base_url=self.descriptor.url or self.default_base_url,
        )

    def _request_args(self, request: CompletionRequest) -> Dict[str, Any]:
        """
        Build the messages.create arguments.

        The system prompt goes into the top-level ``system`` field when
        supported; otherwise it leads the user messages. An omitted system
        prompt is left out of the request rather than sent empty.
        """
        system, messages = self.prompt_builder.split_system(request)
        request_args: Dict[str, Any] = {
            "model": self.model_name,
            "max_tokens": request.max_output_tokens,
            "temperature": request.temperature,
            "messages": [m.to_dict() for m in messages],
        }
        if system:
            request_args["system"] = system
        return request_args

    async def _complete(self, request: CompletionRequest) -> str:
        args = self._request_args(request)
        self._log_debug("request", args)
        try:
            message = await self._client.messages.create(**args)
        except CompleteKitError:
            raise
        except Exception as exc:  # noqa: BLE001
            raise self._translate_error(exc) from exc

        return message_text(message)

    async def _stream(self, request: CompletionRequest, on_delta: ChunkCallback) -> None:
        args = self._request_args(request)
        self._log_debug("request", args)
        try:
            stream = await self._client.messages.create(stream=True, **args)
        except CompleteKitError:
            raise
        except Exception as exc:  # noqa: BLE001
            raise self._translate_error(exc) from exc

        async for event in self._events(stream):
            text = event_text(event)
            if text:
                on_delta(text)


__all__ = ["AnthropicProvider"]
