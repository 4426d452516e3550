"""Tests for provider configuration and the provider factory.

Tests verify:
- ProviderConfig built from the environment and from Settings
- The factory returns the adapter named by the config
"""

from unittest.mock import patch

import pytest

from resume_builder.core.config import Settings
from resume_builder.providers.config import ProviderConfig
from resume_builder.providers.factory import create_llm_provider
from resume_builder.providers.llm.claude_adapter import ClaudeAdapter
from resume_builder.providers.llm.gemini_adapter import GeminiAdapter
from resume_builder.providers.llm.mock_adapter import MockLLMProvider
from resume_builder.providers.llm.openai_adapter import OpenAIAdapter


class TestProviderConfig:
    """Tests for ProviderConfig construction."""

    def test_from_env(self, monkeypatch):
        """Environment variables populate the config."""
        monkeypatch.setenv("LLM_PROVIDER", "openai")
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
        monkeypatch.setenv("COMPLETION_MAX_TOKENS", "250")
        config = ProviderConfig.from_env()
        assert config.llm_provider == "openai"
        assert config.openai_api_key == "sk-test"
        assert config.default_max_tokens == 250

    def test_from_settings(self):
        """Empty keys become None."""
        settings = Settings(
            _env_file=None,
            llm_provider="gemini",
            google_api_key="g-key",
            anthropic_api_key="",
            completion_temperature=0.2,
        )
        config = ProviderConfig.from_settings(settings)
        assert config.llm_provider == "gemini"
        assert config.google_api_key == "g-key"
        assert config.anthropic_api_key is None
        assert config.default_temperature == 0.2


class TestCreateLLMProvider:
    """Tests for create_llm_provider."""

    @pytest.mark.parametrize(
        ("name", "target", "adapter_cls"),
        [
            ("claude", "resume_builder.providers.llm.claude_adapter.AsyncAnthropic", ClaudeAdapter),
            ("openai", "resume_builder.providers.llm.openai_adapter.AsyncOpenAI", OpenAIAdapter),
            ("gemini", "resume_builder.providers.llm.gemini_adapter.genai.Client", GeminiAdapter),
        ],
    )
    def test_real_providers(self, name, target, adapter_cls):
        """Each provider name maps to its adapter."""
        with patch(target):
            provider = create_llm_provider(ProviderConfig(llm_provider=name))
        assert isinstance(provider, adapter_cls)
        assert provider.provider_name == name

    def test_mock_provider(self):
        """The mock name builds the test double."""
        assert isinstance(create_llm_provider(ProviderConfig(llm_provider="mock")), MockLLMProvider)

    def test_each_call_builds_a_new_instance(self):
        """There is no provider cache."""
        config = ProviderConfig(llm_provider="mock")
        assert create_llm_provider(config) is not create_llm_provider(config)

    def test_unknown_provider(self):
        """Unknown names raise ValueError."""
        with pytest.raises(ValueError, match="Unknown LLM provider"):
            create_llm_provider(ProviderConfig(llm_provider="llama"))
