"""Agent configuration and provider resolution."""

import os
from dataclasses import dataclass
from typing import Optional

from pydantic import BaseModel, Field

from agent_stream.exceptions import ConfigurationError


DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_ITERATIONS = 10
DEFAULT_TIMEOUT_MS = 60000


@dataclass(frozen=True)
class ProviderDefaults:
    base_url: Optional[str]
    default_model: Optional[str]
    api_key_env: Optional[str]
    supports_tools: bool


PROVIDERS: dict[str, ProviderDefaults] = {
    "mistral": ProviderDefaults(
        base_url="https://api.mistral.ai/v1",
        default_model="mistral-large-latest",
        api_key_env="MISTRAL_API_KEY",
        supports_tools=True,
    ),
    "openai": ProviderDefaults(
        base_url="https://api.openai.com/v1",
        default_model="gpt-4o",
        api_key_env="OPENAI_API_KEY",
        supports_tools=True,
    ),
    "local": ProviderDefaults(
        base_url=None,
        default_model=None,
        api_key_env=None,
        supports_tools=False,
    ),
}


class AgentConfig(BaseModel):
    """Per-agent settings. Each Agent receives its own instance."""

    provider: str  # "mistral" | "openai" | "local"
    model: Optional[str] = None
    temperature: float = Field(default=DEFAULT_TEMPERATURE, ge=0.0, le=1.0)
    max_iterations: int = Field(default=DEFAULT_MAX_ITERATIONS, ge=1)
    timeout_ms: int = Field(default=DEFAULT_TIMEOUT_MS, gt=0)
    enabled_tools: Optional[list[str]] = None  # None means every registered tool
    system_prompt: Optional[str] = None
    api_key: Optional[str] = None
    base_url: Optional[str] = None

    model_config = {"frozen": True}


@dataclass(frozen=True)
class ProviderSettings:
    name: str
    base_url: str
    api_key: str
    model: str

    @property
    def endpoint(self) -> str:
        return f"{self.base_url.rstrip('/')}/chat/completions"


def supports_agent_mode(provider: str) -> bool:
    """Whether ``provider`` supports function calling."""
    defaults = PROVIDERS.get(provider)
    return defaults is not None and defaults.supports_tools


def resolve_provider(config: AgentConfig) -> ProviderSettings:
    """Resolve endpoint, credentials and model for ``config.provider``.

    Raises:
        ConfigurationError: If the provider is unknown, does not support
            function calling, or has no API key.
    """
    defaults = PROVIDERS.get(config.provider)
    if defaults is None:
        raise ConfigurationError(f"Unknown provider: {config.provider}")

    if not defaults.supports_tools:
        raise ConfigurationError(
            f"Provider '{config.provider}' does not support function calling. "
            f"Use one of: {[name for name in PROVIDERS if supports_agent_mode(name)]}"
        )

    api_key = config.api_key or os.environ.get(defaults.api_key_env)
    if not api_key:
        raise ConfigurationError(
            f"{config.provider} API key not configured. "
            f"Pass api_key or set {defaults.api_key_env} environment variable."
        )

    return ProviderSettings(
        name=config.provider,
        base_url=config.base_url or defaults.base_url,
        api_key=api_key,
        model=config.model or defaults.default_model,
    )
