"""
Provider and model configuration.

The host application owns these records; completekit only reads them. A
Settings object can be built from a plain dict (camelCase or snake_case keys)
or loaded from a JSON file.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .env import load_default_env
from .exceptions import ConfigurationError
from .types import DEFAULT_QUERY_TIMEOUT

PLUGIN_MODEL_PREFIX = "plugin_ai_providers_"


class VendorKind(str, Enum):
    """Wire protocol family of a provider."""

    OPENAI = "openai"
    GROQ = "groq"
    OPENROUTER = "openrouter"
    LMSTUDIO = "lmstudio"
    OLLAMA = "ollama"
    GEMINI = "gemini"
    ANTHROPIC = "anthropic"


@dataclass(frozen=True)
class ProviderDescriptor:
    """
    One configured vendor account or endpoint.

    Attributes:
        id: Stable identifier referenced by models.
        name: Display name.
        kind: Vendor kind; unknown kinds are kept as plain strings so the
            factory can report them.
        api_key: Credential, if any.
        url: Endpoint override; the vendor default applies when empty.
        supports_system_role: Whether the vendor accepts a system role.
    """

    id: str
    name: str
    kind: Union[VendorKind, str]
    api_key: Optional[str] = None
    url: Optional[str] = None
    supports_system_role: bool = True

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProviderDescriptor":
        raw_kind = str(data.get("type") or data.get("kind") or "")
        try:
            kind: Union[VendorKind, str] = VendorKind(raw_kind)
        except ValueError:
            kind = raw_kind
        return cls(
            id=str(data["id"]),
            name=str(data.get("name") or data["id"]),
            kind=kind,
            api_key=data.get("apiKey", data.get("api_key")) or None,
            url=(data.get("url") or "").strip() or None,
            supports_system_role=bool(
                data.get("supportsSystemRole", data.get("supports_system_role", True))
            ),
        )


@dataclass(frozen=True)
class ModelReference:
    """A logical model id bound to a vendor model name on one provider."""

    id: str
    name: str
    provider_id: str
    model_name: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ModelReference":
        return cls(
            id=str(data["id"]),
            name=str(data.get("name") or data["id"]),
            provider_id=str(data.get("providerId", data.get("provider_id", ""))),
            model_name=str(data.get("modelName", data.get("model_name", ""))),
        )


@dataclass
class Settings:
    """
    Everything the adapter factory reads from the host.

    Attributes:
        providers: Configured providers.
        models: Configured models, each pointing at one provider.
        default_model_id: Model used when the caller does not name one.
        use_alternate_transport: Use the buffered transport instead of streaming HTTP.
        testing_mode: Substitute the stub adapter for unresolvable models.
        debug_mode: Log request and response bodies at DEBUG level.
        query_timeout: Stall-timeout window in seconds. Default: 45.0.
    """

    providers: List[ProviderDescriptor] = field(default_factory=list)
    models: List[ModelReference] = field(default_factory=list)
    default_model_id: Optional[str] = None
    use_alternate_transport: bool = False
    testing_mode: bool = False
    debug_mode: bool = False
    query_timeout: float = DEFAULT_QUERY_TIMEOUT

    def find_model(self, model_id: str) -> Optional[ModelReference]:
        return next((m for m in self.models if m.id == model_id), None)

    def find_provider(self, provider_id: str) -> Optional[ProviderDescriptor]:
        return next((p for p in self.providers if p.id == provider_id), None)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Settings":
        def _get(d: Dict[str, Any], camel: str, snake: str, default: Any) -> Any:
            if camel in d:
                return d[camel]
            return d.get(snake, default)

        # Either flat or nested under "aiProviders" as the host stores it.
        section = data.get("aiProviders") or data.get("ai_providers") or data
        return cls(
            providers=[ProviderDescriptor.from_dict(p) for p in section.get("providers", [])],
            models=[ModelReference.from_dict(m) for m in section.get("models", [])],
            default_model_id=_get(section, "defaultModelId", "default_model_id", None),
            use_alternate_transport=bool(
                _get(data, "useNativeFetch", "use_alternate_transport", False)
            ),
            testing_mode=bool(_get(data, "testingMode", "testing_mode", False)),
            debug_mode=bool(_get(data, "debugMode", "debug_mode", False)),
            query_timeout=float(_get(data, "queryTimeout", "query_timeout", DEFAULT_QUERY_TIMEOUT)),
        )

    @classmethod
    def load(cls, path: Union[str, Path]) -> "Settings":
        """
        Read settings from a JSON file.

        Providers without a credential pick one up from ``<KIND>_API_KEY``
        (for example ``GROQ_API_KEY``) after loading a local ``.env``.
        """
        load_default_env()
        config_path = Path(path).expanduser()
        try:
            data = json.loads(config_path.read_text())
        except FileNotFoundError as exc:
            raise ConfigurationError(
                f"Settings file not found: {config_path}",
                suggestion="pass --config with the path to a JSON settings file",
            ) from exc
        except ValueError as exc:
            raise ConfigurationError(f"Failed to parse settings file {config_path}: {exc}") from exc

        settings = cls.from_dict(data)
        settings.providers = [_with_env_credential(p) for p in settings.providers]
        return settings


def _with_env_credential(descriptor: ProviderDescriptor) -> ProviderDescriptor:
    if descriptor.api_key:
        return descriptor
    kind = descriptor.kind.value if isinstance(descriptor.kind, VendorKind) else descriptor.kind
    env_key = os.getenv(f"{kind.upper()}_API_KEY")
    if not env_key:
        return descriptor
    return replace(descriptor, api_key=env_key)


__all__ = [
    "PLUGIN_MODEL_PREFIX",
    "VendorKind",
    "ProviderDescriptor",
    "ModelReference",
    "Settings",
]
