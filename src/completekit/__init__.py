"""Public exports for the completekit package."""

from .config import ModelReference, ProviderDescriptor, Settings, VendorKind
from .exceptions import (
    CompleteKitError,
    CompletionTimeout,
    ConfigurationError,
    ProviderError,
    StreamUnavailable,
    TransportError,
)
from .factory import ProviderFactory
from .prompt import PromptBuilder
from .providers.anthropic_provider import AnthropicProvider
from .providers.base import Provider
from .providers.gemini_provider import GeminiProvider
from .providers.ollama_provider import OllamaProvider
from .providers.openai_compat import GroqProvider, LMStudioProvider, OpenRouterProvider
from .providers.openai_provider import OpenAIProvider
from .providers.plugin_provider import PluginProvider
from .providers.stubs import StubProvider
from .transport import BufferedTransport, HttpxTransport
from .types import CompletionRequest, Message, Role
from .watchdog import StallWatchdog

__version__ = "0.1.0"

__all__ = [
    "Settings",
    "ProviderDescriptor",
    "ModelReference",
    "VendorKind",
    "ProviderFactory",
    "Provider",
    "PromptBuilder",
    "CompletionRequest",
    "Message",
    "Role",
    "StallWatchdog",
    "HttpxTransport",
    "BufferedTransport",
    # Providers
    "OpenAIProvider",
    "GroqProvider",
    "OpenRouterProvider",
    "LMStudioProvider",
    "OllamaProvider",
    "GeminiProvider",
    "AnthropicProvider",
    "PluginProvider",
    "StubProvider",
    # Exceptions
    "CompleteKitError",
    "ConfigurationError",
    "ProviderError",
    "StreamUnavailable",
    "TransportError",
    "CompletionTimeout",
]
