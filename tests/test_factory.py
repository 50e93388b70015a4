"""
Tests for ProviderFactory (factory.py).

Tests cover:
- kind → adapter class selection
- plugin-prefixed ids
- missing model / provider / credential / unsupported kind
- testing-mode substitution with the stub adapter
- provider_name() lookups
- transport selection
"""

from __future__ import annotations

from types import SimpleNamespace

import pytest
from conftest import FakeTransport

from completekit.config import ModelReference, ProviderDescriptor, Settings, VendorKind
from completekit.exceptions import ConfigurationError
from completekit.factory import ProviderFactory, register_provider, registry
from completekit.providers.anthropic_provider import AnthropicProvider
from completekit.providers.gemini_provider import GeminiProvider
from completekit.providers.ollama_provider import OllamaProvider
from completekit.providers.openai_compat import GroqProvider, LMStudioProvider, OpenRouterProvider
from completekit.providers.openai_provider import OpenAIProvider
from completekit.providers.plugin_provider import PluginProvider
from completekit.providers.stubs import StubProvider
from completekit.transport import BufferedTransport, HttpxTransport


def _settings(kind, api_key="secret", **overrides) -> Settings:
    values = dict(
        providers=[ProviderDescriptor(id="p", name="Primary", kind=kind, api_key=api_key)],
        models=[ModelReference(id="m", name="Model", provider_id="p", model_name="vendor-model")],
        default_model_id="m",
    )
    values.update(overrides)
    return Settings(**values)


class TestCreate:
    """Tests for ProviderFactory.create()."""

    @pytest.mark.parametrize(
        "kind, expected",
        [
            (VendorKind.GROQ, GroqProvider),
            (VendorKind.OPENROUTER, OpenRouterProvider),
            (VendorKind.LMSTUDIO, LMStudioProvider),
            (VendorKind.OLLAMA, OllamaProvider),
        ],
    )
    def test_http_kinds(self, kind: VendorKind, expected: type) -> None:
        transport = FakeTransport()
        provider = ProviderFactory(_settings(kind), transport=transport).create("m")

        assert type(provider) is expected
        assert provider.model_name == "vendor-model"
        assert provider.transport is transport

    @pytest.mark.parametrize(
        "kind, expected",
        [
            (VendorKind.OPENAI, OpenAIProvider),
            (VendorKind.ANTHROPIC, AnthropicProvider),
            (VendorKind.GEMINI, GeminiProvider),
        ],
    )
    def test_sdk_kinds(self, kind: VendorKind, expected: type) -> None:
        provider = ProviderFactory(_settings(kind)).create("m")
        assert type(provider) is expected

    def test_default_model_used(self) -> None:
        provider = ProviderFactory(_settings(VendorKind.GROQ), transport=FakeTransport()).create()
        assert isinstance(provider, GroqProvider)

    def test_settings_flags_forwarded(self) -> None:
        settings = _settings(VendorKind.OLLAMA, debug_mode=True, query_timeout=12.0)
        provider = ProviderFactory(settings, transport=FakeTransport()).create("m")
        assert provider.debug is True
        assert provider.query_timeout == 12.0

    def test_plugin_prefix(self) -> None:
        host = SimpleNamespace(providers=[])
        provider = ProviderFactory(Settings(), host=host).create("plugin_ai_providers_abc")

        assert isinstance(provider, PluginProvider)
        assert provider.provider_id == "abc"
        assert provider.host is host

    def test_model_not_found(self) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            ProviderFactory(_settings(VendorKind.GROQ)).create("nope")
        assert "Model not found: nope" in str(exc_info.value)

    def test_provider_not_found(self) -> None:
        settings = _settings(VendorKind.GROQ, providers=[])
        with pytest.raises(ConfigurationError) as exc_info:
            ProviderFactory(settings).create("m")
        assert "Provider not found for model: m" in str(exc_info.value)

    def test_missing_credential(self) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            ProviderFactory(_settings(VendorKind.GROQ, api_key=None)).create("m")
        assert "API key not configured for provider: Primary" in str(exc_info.value)

    def test_unsupported_kind(self) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            ProviderFactory(_settings("mystery")).create("m")
        assert "Unsupported provider type: mystery" in str(exc_info.value)

    @pytest.mark.parametrize(
        "settings, model_id",
        [
            (_settings(VendorKind.GROQ, testing_mode=True), "nope"),
            (_settings(VendorKind.GROQ, testing_mode=True, providers=[]), "m"),
            (_settings(VendorKind.GROQ, api_key=None, testing_mode=True), "m"),
            (_settings("mystery", testing_mode=True), "m"),
        ],
    )
    def test_testing_mode_returns_stub(self, settings: Settings, model_id: str) -> None:
        provider = ProviderFactory(settings).create(model_id)
        assert isinstance(provider, StubProvider)

    def test_testing_mode_keeps_resolvable_models(self) -> None:
        settings = _settings(VendorKind.GROQ, testing_mode=True)
        provider = ProviderFactory(settings, transport=FakeTransport()).create("m")
        assert isinstance(provider, GroqProvider)


class TestTransportSelection:
    def test_streaming_transport_by_default(self) -> None:
        assert isinstance(ProviderFactory(Settings()).transport, HttpxTransport)

    def test_alternate_transport(self) -> None:
        factory = ProviderFactory(Settings(use_alternate_transport=True))
        assert isinstance(factory.transport, BufferedTransport)


class TestProviderName:
    """Tests for ProviderFactory.provider_name()."""

    def test_configured_model(self) -> None:
        assert ProviderFactory(_settings(VendorKind.GROQ)).provider_name("m") == "Primary"

    def test_unknown_model(self) -> None:
        assert ProviderFactory(_settings(VendorKind.GROQ)).provider_name("x") == "Unknown provider"

    def test_plugin_model(self) -> None:
        host = SimpleNamespace(providers=[SimpleNamespace(id="abc", name="Local LLM")])
        factory = ProviderFactory(Settings(), host=host)

        assert factory.provider_name("plugin_ai_providers_abc") == "Local LLM"
        assert factory.provider_name("plugin_ai_providers_zzz") == "AI Providers plugin"

    def test_plugin_model_from_dict_entry(self) -> None:
        host = SimpleNamespace(providers=[{"id": "abc", "name": "Local LLM"}])
        factory = ProviderFactory(Settings(), host=host)

        assert factory.provider_name("plugin_ai_providers_abc") == "Local LLM"

    def test_plugin_model_without_name(self) -> None:
        host = SimpleNamespace(providers=[{"id": "abc"}])
        factory = ProviderFactory(Settings(), host=host)

        assert factory.provider_name("plugin_ai_providers_abc") == "abc"


class TestRegistry:
    def test_register_provider_overrides_kind(self) -> None:
        previous = registry[VendorKind.GROQ]

        def build_stub(factory, descriptor, model_name):
            return StubProvider(delay=0)

        register_provider(VendorKind.GROQ, build_stub)
        try:
            provider = ProviderFactory(_settings(VendorKind.GROQ)).create("m")
        finally:
            register_provider(VendorKind.GROQ, previous)

        assert isinstance(provider, StubProvider)
        assert registry[VendorKind.GROQ] is previous
