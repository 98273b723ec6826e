import pytest
from pydantic import ValidationError

from agent_stream.config import AgentConfig, resolve_provider, supports_agent_mode
from agent_stream.exceptions import ConfigurationError


class TestAgentConfig:
    def test_defaults(self):
        config = AgentConfig(provider="openai")
        assert config.model is None
        assert config.temperature == 0.7
        assert config.max_iterations == 10
        assert config.timeout_ms == 60000
        assert config.enabled_tools is None
        assert config.system_prompt is None

    def test_provider_is_required(self):
        with pytest.raises(ValidationError):
            AgentConfig()

    @pytest.mark.parametrize("temperature", [-0.1, 1.5])
    def test_temperature_bounds(self, temperature):
        with pytest.raises(ValidationError):
            AgentConfig(provider="openai", temperature=temperature)

    def test_limits_must_be_positive(self):
        with pytest.raises(ValidationError):
            AgentConfig(provider="openai", max_iterations=0)
        with pytest.raises(ValidationError):
            AgentConfig(provider="openai", timeout_ms=0)

    def test_config_is_immutable(self):
        config = AgentConfig(provider="openai")
        with pytest.raises(ValidationError):
            config.max_iterations = 99


class TestResolveProvider:
    def test_openai_from_env(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-env")
        settings = resolve_provider(AgentConfig(provider="openai"))
        assert settings.api_key == "sk-env"
        assert settings.model == "gpt-4o"
        assert settings.endpoint == "https://api.openai.com/v1/chat/completions"

    def test_mistral_defaults(self, monkeypatch):
        monkeypatch.setenv("MISTRAL_API_KEY", "m-key")
        settings = resolve_provider(AgentConfig(provider="mistral"))
        assert settings.model == "mistral-large-latest"
        assert settings.endpoint == "https://api.mistral.ai/v1/chat/completions"

    def test_explicit_values_override_defaults(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-env")
        settings = resolve_provider(
            AgentConfig(
                provider="openai",
                api_key="sk-explicit",
                model="gpt-4o-mini",
                base_url="http://localhost:8000/v1",
            )
        )
        assert settings.api_key == "sk-explicit"
        assert settings.model == "gpt-4o-mini"
        assert settings.endpoint == "http://localhost:8000/v1/chat/completions"

    def test_missing_api_key(self, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        with pytest.raises(ConfigurationError, match="API key not configured"):
            resolve_provider(AgentConfig(provider="openai"))

    def test_local_does_not_support_function_calling(self):
        with pytest.raises(ConfigurationError, match="does not support function calling"):
            resolve_provider(AgentConfig(provider="local"))

    def test_unknown_provider(self):
        with pytest.raises(ConfigurationError, match="Unknown provider"):
            resolve_provider(AgentConfig(provider="acme"))


class TestSupportsAgentMode:
    def test_supported(self):
        assert supports_agent_mode("openai") is True
        assert supports_agent_mode("mistral") is True

    def test_unsupported(self):
        assert supports_agent_mode("local") is False
        assert supports_agent_mode("acme") is False
