"""
config.py
=========
LLM configuration for adapter generation.

Supports multiple providers through pydantic-ai with a small factory.
"""

from dataclasses import dataclass
from typing import Any

from pydantic_ai import Agent
from pydantic_ai.models.google import GoogleModel
from pydantic_ai.models.groq import GroqModel
from pydantic_ai.models.openai import OpenAIChatModel
from pydantic_ai.providers.google import GoogleProvider
from pydantic_ai.providers.groq import GroqProvider
from pydantic_ai.providers.openai import OpenAIProvider
from pydantic_ai.settings import ModelSettings


@dataclass
class LLMConfig:
    """Base configuration for any LLM provider.

    Attributes:
        provider: Provider name ('groq', 'gemini', 'openai', etc.)
        model_name: Model identifier string
        api_key: API key for authentication
        temperature: Sampling temperature (0.0-2.0). Defaults to 0.2.
        max_tokens: Maximum tokens for generation. Defaults to 1200.
        base_url: Optional API base URL for OpenAI-compatible endpoints

    """

    provider: str
    model_name: str
    api_key: str
    temperature: float = 0.2
    max_tokens: int | None = 1200
    base_url: str | None = None

    def __post_init__(self) -> None:
        """Validate configuration after initialization.

        Raises:
            ValueError: If API key or model name is missing.

        """
        if not self.api_key:
            raise ValueError(f'API key required for {self.provider}')
        if not self.model_name:
            raise ValueError(f'Model name required for {self.provider}')

    @property
    def model_settings(self) -> ModelSettings:
        """Sampling settings passed to every request."""
        settings = ModelSettings(temperature=self.temperature)
        if self.max_tokens:
            settings['max_tokens'] = self.max_tokens
        return settings


def create_groq_model(config: LLMConfig) -> GroqModel:
    """Create a Groq model from configuration."""
    return GroqModel(config.model_name, provider=GroqProvider(api_key=config.api_key))


def create_gemini_model(config: LLMConfig) -> GoogleModel:
    """Create a Gemini (Google) model from configuration."""
    return GoogleModel(config.model_name, provider=GoogleProvider(api_key=config.api_key))


def create_openai_model(config: LLMConfig) -> OpenAIChatModel:
    """Create an OpenAI model from configuration."""
    provider = OpenAIProvider(api_key=config.api_key, base_url=config.base_url)
    return OpenAIChatModel(config.model_name, provider=provider)


PROVIDER_FACTORIES = {
    'groq': create_groq_model,
    'gemini': create_gemini_model,
    'google': create_gemini_model,  # Alias
    'openai': create_openai_model,
    'gpt': create_openai_model,  # Alias
}


def create_model(config: LLMConfig) -> Any:
    """
    Create a model from configuration.

    Args:
        config: LLMConfig specifying the provider and parameters

    Returns:
        Model instance (GroqModel, GoogleModel, OpenAIChatModel)

    Raises:
        ValueError: If provider is not supported

    """
    provider_name = config.provider.lower()

    if provider_name not in PROVIDER_FACTORIES:
        available = ', '.join(PROVIDER_FACTORIES.keys())
        raise ValueError(f'Unknown provider: {provider_name}. Available: {available}')

    return PROVIDER_FACTORIES[provider_name](config)


def create_agent(config: LLMConfig) -> Agent[None, str]:
    """
    Create a plain-text pydantic-ai agent from configuration.

    The agent returns raw text; JSON is recovered from it by the generator so
    that prose wrapped around the object is tolerated.

    Args:
        config: LLMConfig specifying the provider and parameters

    Returns:
        Configured pydantic-ai Agent

    """
    return Agent(create_model(config), output_type=str, model_settings=config.model_settings)


def groq(model_name: str, api_key: str, **kwargs) -> LLMConfig:
    """Quick config for Groq."""
    return LLMConfig(provider='groq', model_name=model_name, api_key=api_key, **kwargs)


def gemini(model_name: str, api_key: str, **kwargs) -> LLMConfig:
    """Quick config for Gemini."""
    return LLMConfig(provider='gemini', model_name=model_name, api_key=api_key, **kwargs)


def openai(model_name: str, api_key: str, **kwargs) -> LLMConfig:
    """Quick config for OpenAI."""
    return LLMConfig(provider='openai', model_name=model_name, api_key=api_key, **kwargs)
