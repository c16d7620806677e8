"""Model-backed adapter generation and LLM configuration."""

from sitespec.core.generation.config import (
    LLMConfig,
    create_agent,
    create_model,
    gemini,
    groq,
    openai,
)
from sitespec.core.generation.generator import AdapterGenerator, extract_json
from sitespec.core.generation.prompts import build_prompt

__all__ = [
    'AdapterGenerator',
    'LLMConfig',
    'build_prompt',
    'create_agent',
    'create_model',
    'extract_json',
    'gemini',
    'groq',
    'openai',
]
