"""
Adapters for OpenAI-compatible chat-completions endpoints spoken over HTTP.

Groq, OpenRouter and LM Studio all accept the same request body and stream
Server-Sent Events (``data: {json}`` lines ending with ``data: [DONE]``).
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from ..parser import choice_text
from ..stream import drain_sse
from ..types import ChunkCallback, CompletionRequest
from .base import HTTPProvider


class OpenAICompatibleProvider(HTTPProvider):
    """Chat-completions over HTTP with SSE streaming."""

    name = "openai-compatible"
    label = "OpenAI-compatible"
    endpoint = "/chat/completions"

    def _build_body(self, request: CompletionRequest) -> Dict[str, Any]:
        return {
            "model": self.model_name,
            "messages": [m.to_dict() for m in self.prompt_builder.messages(request)],
            "temperature": request.temperature,
            "max_tokens": request.max_output_tokens,
            "stream": request.streaming,
        }

    def _message_content(self, data: Any) -> Optional[str]:
        return choice_text(data, "message")

    async def _complete(self, request: CompletionRequest) -> str:
        response = await self._post(self.endpoint, self._build_body(request))
        data = await self._read_json(response)
        return self._message_content(data) or ""

    async def _stream(self, request: CompletionRequest, on_delta: ChunkCallback) -> None:
        response = await self._post(self.endpoint, self._build_body(request))
        reader = self._reader(response)
        await drain_sse(reader, on_delta)


class GroqProvider(OpenAICompatibleProvider):
    """Groq cloud inference."""

    name = "groq"
    label = "Groq"
    default_base_url = "https://api.groq.com/openai/v1"


class LMStudioProvider(OpenAICompatibleProvider):
    """
    LM Studio local server.

    Local instances usually run without authentication; the credential is
    still attached when one is configured.
    """

    name = "lmstudio"
    label = "LMStudio"
    default_base_url = "http://localhost:1234/v1"


class OpenRouterProvider(OpenAICompatibleProvider):
    """
    OpenRouter gateway.

    Identifies the calling application through the X-Title header (and
    HTTP-Referer when a referer is set). Some routed models answer with
    ``"content": null``; that is read as an empty completion.
    """

    name = "openrouter"
    label = "OpenRouter"
    default_base_url = "https://openrouter.ai/api/v1"

    title = "completekit"
    referer: Optional[str] = None

    def headers(self) -> Dict[str, str]:
        headers = super().headers()
        if self.referer:
            headers["HTTP-Referer"] = self.referer
        headers["X-Title"] = self.title
        return headers


__all__ = [
    "OpenAICompatibleProvider",
    "GroqProvider",
    "LMStudioProvider",
    "OpenRouterProvider",
]
