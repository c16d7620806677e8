"""Process-level adapter service.

Owns the adapter store, the in-flight registry and the generation components,
and implements the lookup, generate and refine operations on top of them.
"""

import asyncio
import logging
from collections.abc import Awaitable, Mapping
from dataclasses import dataclass
from typing import Any, Literal
from urllib.parse import urlparse

import logfire
from pydantic_ai import Agent
from rich.console import Console

from sitespec.config import Settings
from sitespec.core.evaluation import PageEvaluator
from sitespec.core.evaluation.criteria import coerce_overrides
from sitespec.core.fetcher import HTMLFetcher
from sitespec.core.generation import AdapterGenerator, LLMConfig
from sitespec.core.refinement import AdapterRefiner
from sitespec.core.validation import parse_spec
from sitespec.exceptions import InvalidURLError
from sitespec.models import AdapterSpec, CriteriaOverrides, GenerationOptions, RefinementResult
from sitespec.storage import AdapterStore, InFlightRegistry, host_key

LookupStatus = Literal['hit', 'generated', 'generating', 'not_found']


@dataclass
class LookupResult:
    """Outcome of an adapter lookup.

    Attributes:
        adapter: Stored spec, when one was found or generated
        status: 'hit', 'generated', 'generating' (background work started) or 'not_found'
        refreshing: True when a stale hit triggered a background refresh

    """

    adapter: AdapterSpec | None
    status: LookupStatus
    refreshing: bool = False


def normalize_url(url: str) -> str:
    """Check that a URL is absolute and return it stripped.

    Raises:
        InvalidURLError: If the URL has no scheme or host.

    """
    if not url or not isinstance(url, str):
        raise InvalidURLError('url required')
    url = url.strip()
    try:
        parsed = urlparse(url)
    except ValueError as e:
        raise InvalidURLError('invalid url') from e
    if not parsed.scheme or not parsed.netloc:
        raise InvalidURLError('invalid url')
    return url


class AdapterService:
    """Explicit context object for adapter generation, storage and lookup.

    Attributes:
        settings: Service behaviour switches
        console: Optional Rich console for progress output
        store: Adapter store
        inflight: Per-host de-duplication of generation work
        fetcher: Markup fetcher for requests that do not carry HTML
        generator: Single-pass adapter generator
        evaluator: Page evaluator
        refiner: Recursive refinement loop
        logger: Logger instance for detailed run tracking

    """

    def __init__(
        self,
        settings: Settings | None = None,
        llm_config: LLMConfig | None = None,
        agent: Agent[Any, str] | None = None,
        console: Console | None = None,
        store: AdapterStore | None = None,
        fetcher: HTMLFetcher | None = None,
    ):
        """Initialize the service.

        Args:
            settings: Service settings; read from the environment if omitted
            llm_config: LLM configuration; built from settings if neither it nor agent is given
            agent: Pre-built pydantic-ai agent, takes priority over llm_config
            console: Rich console instance for formatted output
            store: Adapter store; opened at settings.store_path if omitted
            fetcher: Markup fetcher; created from settings if omitted

        """
        self.settings = settings or Settings.from_env()
        self.console = console
        self.store = store or AdapterStore(self.settings.store_path)
        self.inflight = InFlightRegistry()
        self.fetcher = fetcher or HTMLFetcher(max_html_bytes=self.settings.max_html_bytes)

        if agent is None and llm_config is None:
            llm_config = self.settings.llm_config()
        self.generator = AdapterGenerator(
            llm_config=llm_config,
            agent=agent,
            console=console,
            max_html_chars=self.settings.max_html_bytes,
        )
        self.evaluator = PageEvaluator(console=console)
        self.refiner = AdapterRefiner(self.generator, self.evaluator, console=console)
        self.logger = logging.getLogger(__name__)
        self._background: set[asyncio.Task[Any]] = set()

    async def lookup(self, url: str, template_hint: str | None = None) -> LookupResult:
        """Find the adapter for a URL, generating one on a miss when configured.

        A hit is returned immediately. If it is older than the TTL and auto-refresh
        is on, a single-pass regeneration runs in the background.

        Args:
            url: Page URL
            template_hint: Restrict to specs of this template

        Returns:
            LookupResult describing what happened.

        Raises:
            InvalidURLError: If the URL is not absolute.

        """
        url = normalize_url(url)

        with logfire.span('lookup_adapter', url=url, template_hint=template_hint):
            adapter = self.store.find_adapter(url, template_hint)
            if adapter is not None:
                logfire.info('Adapter cache hit', url=url, id=adapter.id)
                refreshing = self.settings.auto_refresh and self.store.is_stale(adapter, self.settings.ttl_seconds)
                if refreshing:
                    self.logger.info('Refreshing stale adapter %s for %s', adapter.id, url)
                    self._spawn(self.generate_and_store(url, template_hint=template_hint), url)
                return LookupResult(adapter=adapter, status='hit', refreshing=refreshing)

            if not self.settings.auto_generate:
                return LookupResult(adapter=None, status='not_found')

            logfire.info('Adapter cache miss', url=url, mode=self.settings.miss_mode)
            if self.settings.miss_mode == 'sync':
                try:
                    stored = await self._generate_for_miss(url, template_hint)
                    return LookupResult(adapter=stored, status='generated')
                except Exception:
                    self.logger.exception('Auto-generate failed for %s', url)
                    logfire.error('Auto-generate failed', url=url)
                    return LookupResult(adapter=None, status='not_found')

            self._spawn(self._generate_for_miss(url, template_hint), url)
            return LookupResult(adapter=None, status='generating')

    async def generate_and_store(
        self,
        url: str,
        html: str | None = None,
        template_hint: str | None = None,
        mode_label: str | None = None,
        search_box: bool | None = None,
        criteria: CriteriaOverrides | Mapping[str, Any] | None = None,
    ) -> AdapterSpec:
        """Generate a spec in a single pass and store it.

        Concurrent calls for the same host share one generation.

        Returns:
            The stored spec.

        """
        url = normalize_url(url)
        options = GenerationOptions(
            template_hint=template_hint,
            mode_label=mode_label,
            search_box=search_box,
            criteria=coerce_overrides(criteria),
        )

        async def task() -> RefinementResult:
            with logfire.span('generate_and_store', url=url):
                self.logger.info('Generating adapter (single pass) for %s', url)
                markup = html or await self.fetcher.fetch(url)
                spec = await self.generator.generate(url, markup, options)
                report = self.evaluator.evaluate(
                    spec, markup, template_hint=template_hint, criteria=options.criteria, url=url
                )
                stored = self.store.upsert_adapter(spec)
                return RefinementResult(spec=stored, report=report, iterations=1, history=[report])

        result = await self.inflight.run(host_key(url), task)
        return result.spec

    async def refine_and_store(
        self,
        url: str,
        html: str | None = None,
        template_hint: str | None = None,
        mode_label: str | None = None,
        search_box: bool | None = None,
        criteria: CriteriaOverrides | Mapping[str, Any] | None = None,
        max_iterations: int | None = None,
    ) -> RefinementResult:
        """Run the refinement loop and store its final spec, accepted or not.

        Concurrent calls for the same host share one run.

        Returns:
            RefinementResult whose spec is the stored copy.

        """
        url = normalize_url(url)
        iterations = max_iterations or self.settings.recursive_max_iterations

        async def task() -> RefinementResult:
            with logfire.span('refine_and_store', url=url, max_iterations=iterations):
                self.logger.info('Generating adapter (recursive) for %s', url)
                markup = html or await self.fetcher.fetch(url)
                result = await self.refiner.refine(
                    url,
                    markup,
                    template_hint=template_hint,
                    mode_label=mode_label,
                    search_box=search_box,
                    criteria=criteria,
                    max_iterations=iterations,
                )
                self.logger.info(
                    'Recursive generation done for %s iterations=%d ok=%s', url, result.iterations, result.report.ok
                )
                stored = self.store.upsert_adapter(result.spec)
                return RefinementResult(
                    spec=stored, report=result.report, iterations=result.iterations, history=result.history
                )

        return await self.inflight.run(host_key(url), task)

    def submit_adapter(self, candidate: AdapterSpec | Mapping[str, Any]) -> AdapterSpec:
        """Validate and store a hand-written spec.

        Raises:
            InvalidSpecError: If the spec fails validation.

        """
        spec = parse_spec(candidate)
        return self.store.upsert_adapter(spec)

    def list_adapters(self) -> list[AdapterSpec]:
        """Return every stored spec."""
        return self.store.list_adapters()

    async def drain(self) -> None:
        """Wait for every background refresh or generation task to finish."""
        while self._background:
            await asyncio.gather(*list(self._background), return_exceptions=True)

    async def _generate_for_miss(self, url: str, template_hint: str | None) -> AdapterSpec:
        if self.settings.auto_recursive:
            result = await self.refine_and_store(url, template_hint=template_hint)
            return result.spec
        return await self.generate_and_store(url, template_hint=template_hint)

    def _spawn(self, work: Awaitable[Any], url: str) -> None:
        task = asyncio.ensure_future(work)
        self._background.add(task)

        def done(finished: asyncio.Task[Any]) -> None:
            self._background.discard(finished)
            if finished.cancelled():
                return
            error = finished.exception()
            if error is not None:
                self.logger.error('Background generation failed for %s: %s', url, error)
                logfire.error('Background generation failed', url=url, error=str(error))

        task.add_done_callback(done)
