"""Environment-driven settings for the adapter service."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

from sitespec.core.fetcher import DEFAULT_MAX_HTML_BYTES
from sitespec.core.generation import LLMConfig
from sitespec.core.refinement import DEFAULT_MAX_ITERATIONS
from sitespec.utils.files import get_logs_path, get_store_path

MissMode = Literal['async', 'sync']

DEFAULT_TTL_SECONDS = 6 * 60 * 60
DEFAULT_MODELS = {
    'openai': 'gpt-4o-mini',
    'groq': 'llama-3.3-70b-versatile',
    'gemini': 'gemini-2.0-flash',
}


def _flag(name: str) -> bool:
    return os.getenv(name) == '1'


@dataclass
class Settings:
    """Runtime behaviour of the adapter service.

    Attributes:
        store_path: Adapter store JSON file
        logs_path: Directory for run log files
        auto_refresh: Regenerate stale adapters in the background on lookup hits
        auto_generate: Generate adapters on lookup misses
        auto_recursive: Use the refinement loop for miss-driven generation
        miss_mode: 'sync' waits for generation on a miss, 'async' answers immediately
        recursive_max_iterations: Refinement budget for miss-driven generation
        ttl_seconds: Age after which a stored adapter counts as stale
        max_html_bytes: Markup budget for fetched pages and prompts
        provider: LLM provider name
        model_name: LLM model identifier
        api_key: LLM API key
        base_url: Optional OpenAI-compatible endpoint
        temperature: Sampling temperature

    """

    store_path: Path = field(default_factory=get_store_path)
    logs_path: Path = field(default_factory=get_logs_path)
    auto_refresh: bool = False
    auto_generate: bool = False
    auto_recursive: bool = False
    miss_mode: MissMode = 'async'
    recursive_max_iterations: int = DEFAULT_MAX_ITERATIONS
    ttl_seconds: float = DEFAULT_TTL_SECONDS
    max_html_bytes: int = DEFAULT_MAX_HTML_BYTES
    provider: str = 'openai'
    model_name: str = DEFAULT_MODELS['openai']
    api_key: str | None = None
    base_url: str | None = None
    temperature: float = 0.2

    @classmethod
    def from_env(cls) -> 'Settings':
        """Build settings from environment variables.

        Returns:
            Settings with every unset variable at its default.

        """
        provider = os.getenv('SITESPEC_PROVIDER', 'openai').lower()
        miss_mode = os.getenv('ADAPTER_MISS_MODE', 'async').lower()
        store_path = os.getenv('ADAPTER_STORE_PATH')
        logs_path = os.getenv('SITESPEC_LOG_DIR')

        return cls(
            store_path=Path(store_path) if store_path else get_store_path(),
            logs_path=Path(logs_path) if logs_path else get_logs_path(),
            auto_refresh=_flag('ADAPTER_AUTO_REFRESH'),
            auto_generate=_flag('ADAPTER_AUTO_GENERATE'),
            auto_recursive=_flag('ADAPTER_AUTO_RECURSIVE'),
            miss_mode='sync' if miss_mode == 'sync' else 'async',
            recursive_max_iterations=int(os.getenv('ADAPTER_RECURSIVE_MAX_ITER', str(DEFAULT_MAX_ITERATIONS))),
            ttl_seconds=float(os.getenv('ADAPTER_TTL_SECONDS', str(DEFAULT_TTL_SECONDS))),
            max_html_bytes=int(os.getenv('ADAPTER_MAX_HTML_BYTES', str(DEFAULT_MAX_HTML_BYTES))),
            provider=provider,
            model_name=os.getenv('SITESPEC_MODEL') or DEFAULT_MODELS.get(provider, DEFAULT_MODELS['openai']),
            api_key=os.getenv('SITESPEC_API_KEY') or os.getenv('OPENAI_API_KEY'),
            base_url=os.getenv('OPENAI_BASE_URL'),
            temperature=float(os.getenv('SITESPEC_TEMPERATURE', '0.2')),
        )

    def llm_config(self) -> LLMConfig:
        """Build the LLM configuration.

        Raises:
            ValueError: If no API key is configured.

        """
        return LLMConfig(
            provider=self.provider,
            model_name=self.model_name,
            api_key=self.api_key or '',
            temperature=self.temperature,
            base_url=self.base_url,
        )
