"""Generates adapter specs by asking a language model to read page markup."""

import json
from typing import Any

import logfire
from pydantic_ai import Agent
from rich.console import Console

from sitespec.core.generation.config import LLMConfig, create_agent
from sitespec.core.generation.prompts import DEFAULT_MAX_HTML_CHARS, build_prompt
from sitespec.core.validation import parse_spec
from sitespec.exceptions import AdapterParseError, GenerationError, ModelCallError
from sitespec.models import AdapterSpec, GenerationOptions
from sitespec.utils.prompts import load_prompt
from sitespec.utils.retry import get_retryer

MAX_OUTPUT_ATTEMPTS = 2


def extract_json(text: str) -> Any | None:
    """Recover the JSON object embedded in model output.

    Takes everything from the first '{' to the last '}', so prose or code fences
    around the object are tolerated.

    Args:
        text: Raw model output

    Returns:
        Parsed JSON value, or None if no braces are present or parsing fails.

    """
    start = text.find('{')
    end = text.rfind('}')
    if start == -1 or end == -1 or end < start:
        return None
    try:
        return json.loads(text[start : end + 1])
    except json.JSONDecodeError:
        return None


class AdapterGenerator:
    """Produces candidate adapter specs from a URL and its markup.

    Retries here only cover malformed output (unparsable JSON or a spec that fails
    the structural gate). Provider failures propagate as ModelCallError.

    Attributes:
        agent: pydantic-ai agent returning plain text
        model_name: Name of the model being used
        provider: Name of the LLM provider
        console: Optional Rich console for progress output
        guide: System guide embedded at the top of every prompt
        max_html_chars: Markup budget per prompt
        max_attempts: Output attempts per generate() call

    """

    agent: Agent[Any, str]
    model_name: str
    provider: str

    def __init__(
        self,
        llm_config: LLMConfig | None = None,
        agent: Agent[Any, str] | None = None,
        console: Console | None = None,
        max_html_chars: int = DEFAULT_MAX_HTML_CHARS,
        max_attempts: int = MAX_OUTPUT_ATTEMPTS,
    ):
        """Initialize the generator with LLM configuration or an agent.

        Args:
            llm_config: Configuration for the LLM provider and model
            agent: Pre-built agent; takes priority over llm_config
            console: Rich console instance for formatted output
            max_html_chars: Markup budget per prompt
            max_attempts: Output attempts per generate() call

        Raises:
            ValueError: Must provide llm_config or an agent

        """
        self.console = console
        self.guide = load_prompt('adapter_guide')
        self.max_html_chars = max_html_chars
        self.max_attempts = max_attempts

        # Priority: agent > llm_config
        if agent is not None:
            self.agent = agent
            self.model_name = 'custom-agent'
            self.provider = 'custom'
        elif llm_config is not None:
            self.agent = create_agent(llm_config)
            self.model_name = llm_config.model_name
            self.provider = llm_config.provider
        else:
            raise ValueError('Either provide llm_config or agent parameter')

    @logfire.instrument('generate_adapter', extract_args=False)
    async def generate(self, url: str, html: str, options: GenerationOptions | None = None) -> AdapterSpec:
        """Ask the model for a spec, retrying once on malformed output.

        Args:
            url: Target page URL
            html: Page markup
            options: Hints and feedback from a previous iteration

        Returns:
            Structurally valid AdapterSpec.

        Raises:
            AdapterParseError: If no attempt produced parsable JSON.
            InvalidSpecError: If the last attempt's spec failed validation.
            ModelCallError: If the provider request failed.

        """
        options = options or GenerationOptions()
        error_hint = ''

        def before_retry(retry_state: Any) -> None:
            attempt = retry_state.attempt_number
            logfire.warn('Retrying adapter generation', url=url, attempt=attempt, hint=error_hint)
            self._print(f'[warning]  ↻ Model output rejected ({error_hint}), attempt {attempt + 1}...[/warning]')

        retryer = get_retryer(
            max_attempts=self.max_attempts,
            exceptions=(GenerationError,),
            log_callback=before_retry,
        )

        async for attempt in retryer:
            with attempt:
                prompt = build_prompt(self.guide, url, html, options, error_hint, self.max_html_chars)
                raw = await self._complete(prompt)
                try:
                    spec = self._parse(raw)
                except GenerationError as e:
                    error_hint = e.hint
                    raise

                logfire.info('Adapter spec generated', url=url, id=spec.id, template=spec.template)
                self._print(f'[success]  ✓ Model produced {spec.template} spec ({spec.id or "no id"})[/success]')
                return spec

        raise AdapterParseError()

    async def _complete(self, prompt: str) -> str:
        """Send a prompt to the model and return its raw text.

        Raises:
            ModelCallError: If the provider request fails.

        """
        try:
            result = await self.agent.run(prompt)
        except Exception as e:
            logfire.error('Model request failed', error=str(e), provider=self.provider)
            self._print(f'[danger]  ✗ Model request failed: {e}[/danger]')
            raise ModelCallError(f'model call failed: {e}') from e
        return str(result.output or '')

    def _parse(self, raw: str) -> AdapterSpec:
        candidate = extract_json(raw)
        if candidate is None:
            raise AdapterParseError()
        return parse_spec(candidate)

    def _print(self, message: str) -> None:
        if self.console:
            self.console.print(message)
