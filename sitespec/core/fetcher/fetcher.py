"""Async markup fetcher used when a caller does not supply page HTML."""

import logging
import time

import httpx
import logfire

from sitespec.exceptions import FetchError

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = (
    'Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 '
    '(KHTML, like Gecko) Chrome/122.0.0.0 Safari/537.36'
)
DEFAULT_MAX_HTML_BYTES = 200_000


class HTMLFetcher:
    """Fetches page markup with httpx and truncates it to a fixed budget.

    Attributes:
        max_html_bytes: Characters of markup kept from each response
        timeout: Request timeout in seconds
        user_agent: User-Agent header sent with every request

    """

    def __init__(
        self,
        max_html_bytes: int = DEFAULT_MAX_HTML_BYTES,
        timeout: float = 20.0,
        user_agent: str = DEFAULT_USER_AGENT,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the fetcher.

        Args:
            max_html_bytes: Characters of markup kept from each response
            timeout: Request timeout in seconds
            user_agent: User-Agent header
            transport: Optional httpx transport, e.g. httpx.MockTransport in tests

        """
        self.max_html_bytes = max_html_bytes
        self.timeout = timeout
        self.user_agent = user_agent
        self._transport = transport

    async def fetch(self, url: str) -> str:
        """Fetch a page and return its truncated markup.

        Non-success status codes are logged but their body is still returned.

        Args:
            url: Page URL

        Returns:
            Response text, at most max_html_bytes characters.

        Raises:
            FetchError: If the request fails at the transport level.

        """
        start = time.monotonic()
        with logfire.span('fetch_html', url=url):
            try:
                async with httpx.AsyncClient(
                    headers={'User-Agent': self.user_agent},
                    timeout=self.timeout,
                    follow_redirects=True,
                    transport=self._transport,
                ) as client:
                    response = await client.get(url)
            except httpx.HTTPError as e:
                logfire.error('Fetch error', url=url, error=str(e))
                raise FetchError(url, str(e)) from e

            if response.is_error:
                logger.warning('Fetched %s with status %d', url, response.status_code)

            html = response.text[: self.max_html_bytes]
            logfire.info(
                'HTML fetched',
                url=url,
                status_code=response.status_code,
                size=len(html),
                elapsed=round(time.monotonic() - start, 2),
            )
            return html
