"""
Resolve logical model ids from configuration into constructed adapters.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional

from .config import PLUGIN_MODEL_PREFIX, ProviderDescriptor, Settings, VendorKind
from .exceptions import ConfigurationError
from .providers.anthropic_provider import AnthropicProvider
from .providers.base import Provider
from .providers.gemini_provider import GeminiProvider
from .providers.ollama_provider import OllamaProvider
from .providers.openai_compat import GroqProvider, LMStudioProvider, OpenRouterProvider
from .providers.openai_provider import OpenAIProvider
from .providers.plugin_provider import PluginProvider, ProviderHost, hosted_field
from .providers.stubs import StubProvider
from .transport import Transport, default_transport

logger = logging.getLogger(__name__)

ProviderBuilder = Callable[["ProviderFactory", ProviderDescriptor, str], Provider]


def _http(cls: Any) -> ProviderBuilder:
    def build(factory: "ProviderFactory", descriptor: ProviderDescriptor, model_name: str) -> Provider:
        return cls(
            descriptor,
            model_name,
            transport=factory.transport,
            debug=factory.settings.debug_mode,
            query_timeout=factory.settings.query_timeout,
        )

    return build


def _sdk(cls: Any) -> ProviderBuilder:
    def build(factory: "ProviderFactory", descriptor: ProviderDescriptor, model_name: str) -> Provider:
        return cls(
            descriptor,
            model_name,
            debug=factory.settings.debug_mode,
            query_timeout=factory.settings.query_timeout,
        )

    return build


registry: Dict[VendorKind, ProviderBuilder] = {
    VendorKind.OPENAI: _sdk(OpenAIProvider),
    VendorKind.GEMINI: _sdk(GeminiProvider),
    VendorKind.ANTHROPIC: _sdk(AnthropicProvider),
    VendorKind.GROQ: _http(GroqProvider),
    VendorKind.OPENROUTER: _http(OpenRouterProvider),
    VendorKind.LMSTUDIO: _http(LMStudioProvider),
    VendorKind.OLLAMA: _http(OllamaProvider),
}


def register_provider(kind: VendorKind, builder: ProviderBuilder) -> None:
    registry[kind] = builder


class ProviderFactory:
    """
    Build the adapter for a model id.

    Resolution order:
    1. ids prefixed ``plugin_ai_providers_`` go to the host plugin adapter;
    2. otherwise the model, then its provider, are looked up in settings and
       the provider kind picks the adapter class.

    In testing mode any resolution failure yields a StubProvider instead of
    an error. Resolution never touches the network.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        transport: Optional[Transport] = None,
        host: Optional[ProviderHost] = None,
    ):
        self.settings = settings
        self.transport = transport or default_transport(settings.use_alternate_transport)
        self.host = host

    def create(self, model_id: Optional[str] = None) -> Provider:
        """
        Return a constructed adapter for ``model_id`` (default model when None).

        Raises:
            ConfigurationError: Unknown model or provider, missing credential
                or unsupported provider kind (outside testing mode).
        """
        model_id = model_id or self.settings.default_model_id or ""

        if model_id.startswith(PLUGIN_MODEL_PREFIX):
            return PluginProvider(
                model_id[len(PLUGIN_MODEL_PREFIX):],
                self.host,
                debug=self.settings.debug_mode,
                query_timeout=self.settings.query_timeout,
            )

        try:
            return self._create_configured(model_id)
        except ConfigurationError as exc:
            if not self.settings.testing_mode:
                raise
            logger.info("Testing mode: using stub provider for %r (%s)", model_id, exc)
            return StubProvider(query_timeout=self.settings.query_timeout)

    def _create_configured(self, model_id: str) -> Provider:
        model = self.settings.find_model(model_id)
        if model is None:
            raise ConfigurationError(f"Model not found: {model_id}")

        descriptor = self.settings.find_provider(model.provider_id)
        if descriptor is None:
            raise ConfigurationError(f"Provider not found for model: {model_id}")

        if not descriptor.api_key:
            raise ConfigurationError(
                f"API key not configured for provider: {descriptor.name}",
                suggestion=f"add an apiKey to provider '{descriptor.id}'",
            )

        builder = registry.get(descriptor.kind) if isinstance(descriptor.kind, VendorKind) else None
        if builder is None:
            raise ConfigurationError(f"Unsupported provider type: {descriptor.kind}")

        logger.debug("Resolved model %r to %s provider %r", model_id, descriptor.kind, descriptor.id)
        return builder(self, descriptor, model.model_name)

    def provider_name(self, model_id: Optional[str] = None) -> str:
        """Display name of the provider behind ``model_id``, for status messages."""
        model_id = model_id or self.settings.default_model_id or ""

        if model_id.startswith(PLUGIN_MODEL_PREFIX):
            provider_id = model_id[len(PLUGIN_MODEL_PREFIX):]
            hosted = [] if self.host is None else self.host.providers
            for provider in hosted:
                if hosted_field(provider, "id") == provider_id:
                    return str(hosted_field(provider, "name") or provider_id)
            return "AI Providers plugin"

        model = self.settings.find_model(model_id)
        if model is not None:
            descriptor = self.settings.find_provider(model.provider_id)
            if descriptor is not None:
                return descriptor.name
        return "Unknown provider"


__all__ = ["ProviderFactory", "register_provider", "registry"]
