"""
Ollama provider adapter for local LLM inference.
"""

from __future__ import annotations

from typing import Any, Dict

from ..parser import ndjson_text
from ..stream import drain_ndjson
from ..types import ChunkCallback, CompletionRequest
from .base import HTTPProvider


class OllamaProvider(HTTPProvider):
    """
    Adapter for the native Ollama ``/api/generate`` endpoint.

    Ollama takes a single prompt string instead of a message list, so the
    system instruction, optional user instruction and content are joined with
    newlines in that order. Streaming responses are newline-delimited JSON,
    one ``{"response": "...", "done": false}`` object per line.

    Features:
    - No API key required (runs locally); no Authorization header is ever sent
    - Token limit travels as ``options.num_predict``

    Note:
        Requires Ollama to be installed and running. Start it with
        ``ollama serve``; the default endpoint is http://localhost:11434.
    """

    name = "ollama"
    label = "Ollama"
    default_base_url = "http://localhost:11434"
    endpoint = "/api/generate"

    def headers(self) -> Dict[str, str]:
        return {"Content-Type": "application/json"}

    def _build_body(self, request: CompletionRequest) -> Dict[str, Any]:
        return {
            "model": self.model_name,
            "prompt": self.prompt_builder.combined(request),
            "stream": request.streaming,
            "options": {
                "temperature": request.temperature,
                "num_predict": request.max_output_tokens,
            },
        }

    async def _complete(self, request: CompletionRequest) -> str:
        response = await self._post(self.endpoint, self._build_body(request))
        data = await self._read_json(response)
        return ndjson_text(data) or ""

    async def _stream(self, request: CompletionRequest, on_delta: ChunkCallback) -> None:
        response = await self._post(self.endpoint, self._build_body(request))
        reader = self._reader(response)
        await drain_ndjson(reader, on_delta)


__all__ = ["OllamaProvider"]
