"""Provider implementations for the supported vendor protocols."""

from .anthropic_provider import AnthropicProvider
from .base import HTTPProvider, Provider, SDKProvider
from .gemini_provider import GeminiProvider
from .ollama_provider import OllamaProvider
from .openai_compat import GroqProvider, LMStudioProvider, OpenAICompatibleProvider, OpenRouterProvider
from .openai_provider import OpenAIProvider
from .plugin_provider import PluginProvider
from .stubs import StubProvider

__all__ = [
    "Provider",
    "HTTPProvider",
    "SDKProvider",
    "OpenAIProvider",
    "OpenAICompatibleProvider",
    "GroqProvider",
    "OpenRouterProvider",
    "LMStudioProvider",
    "OllamaProvider",
    "GeminiProvider",
    "AnthropicProvider",
    "PluginProvider",
    "StubProvider",
]
