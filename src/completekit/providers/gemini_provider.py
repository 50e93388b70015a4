"""
Google Gemini provider adapter using the google-genai SDK.

This provider uses the centralized Client API:
- client.aio.models.generate_content() for non-streaming
- client.aio.models.generate_content_stream() for streaming
"""

from __future__ import annotations

from typing import Any, Dict, List

from ..exceptions import CompleteKitError, ConfigurationError
from ..parser import candidate_text
from ..types import ChunkCallback, CompletionRequest, Message
from .base import SDKProvider

# Model families served through the Gemini API that reject system_instruction.
NO_SYSTEM_INSTRUCTION_MARKERS = ("gemma",)


class GeminiProvider(SDKProvider):
    """
    Google Gemini adapter.

    The system prompt travels in ``config.system_instruction``. For models
    that do not accept it (Gemma) the field is left out of the config and the
    prompt becomes the first user content instead.
    """

    name = "gemini"
    label = "Gemini"
    api_version = "v1beta"

    def _create_client(self) -> Any:
        if not self.descriptor.api_key:
            raise ConfigurationError(
                f"API key not configured for provider: {self.descriptor.name}",
                suggestion="set apiKey for the provider or export GEMINI_API_KEY",
            )
        try:
            from google import genai
        except ImportError as exc:
            raise ConfigurationError(
                "google-genai package not installed. Install with `pip install google-genai`."
            ) from exc

        http_options: Dict[str, Any] = {"api_version": self.api_version}
        if self.descriptor.url:
            http_options["base_url"] = self.descriptor.url
        return genai.Client(api_key=self.descriptor.api_key, http_options=http_options)

    @property
    def supports_system_instruction(self) -> bool:
        lowered = self.model_name.lower()
        return not any(marker in lowered for marker in NO_SYSTEM_INSTRUCTION_MARKERS)

    def _request_args(self, request: CompletionRequest) -> Dict[str, Any]:
        config: Dict[str, Any] = {
            "temperature": request.temperature,
            "max_output_tokens": request.max_output_tokens,
        }
        if request.system_prompt_support and self.supports_system_instruction:
            config["system_instruction"] = request.system_prompt
            messages = self.prompt_builder.user_messages(request)
        else:
            messages = self.prompt_builder.demoted(request)

        return {
            "model": self.model_name,
            "contents": self._format_contents(messages),
            "config": config,
        }

    def _format_contents(self, messages: List[Message]) -> List[Dict[str, Any]]:
        # Every composed message is a user turn for this layer.
        return [{"role": "user", "parts": [{"text": m.content}]} for m in messages]

    async def _complete(self, request: CompletionRequest) -> str:
        args = self._request_args(request)
        self._log_debug("request", args)
        try:
            response = await self._client.aio.models.generate_content(**args)
        except CompleteKitError:
            raise
        except Exception as exc:  # noqa: BLE001
            raise self._translate_error(exc) from exc

        return candidate_text(response) or ""

    async def _stream(self, request: CompletionRequest, on_delta: ChunkCallback) -> None:
        args = self._request_args(request)
        self._log_debug("request", args)
        try:
            stream = await self._client.aio.models.generate_content_stream(**args)
        except CompleteKitError:
            raise
        except Exception as exc:  # noqa: BLE001
            raise self._translate_error(exc) from exc

        async for chunk in self._events(stream):
            text = candidate_text(chunk)
            if text:
                on_delta(text)


__all__ = ["GeminiProvider", "NO_SYSTEM_INSTRUCTION_MARKERS"]
