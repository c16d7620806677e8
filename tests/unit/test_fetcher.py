import httpx
import pytest

from sitespec.core.fetcher import HTMLFetcher
from sitespec.exceptions import FetchError


@pytest.mark.asyncio
async def test_fetch_truncates_markup():
    def handler(request):
        assert 'Mozilla' in request.headers['User-Agent']
        return httpx.Response(200, text='<html>' + 'x' * 100 + '</html>')

    fetcher = HTMLFetcher(max_html_bytes=20, transport=httpx.MockTransport(handler))
    html = await fetcher.fetch('https://example.com/')

    assert html == '<html>' + 'x' * 14


@pytest.mark.asyncio
async def test_error_status_still_returns_body():
    transport = httpx.MockTransport(lambda request: httpx.Response(503, text='<p>busy</p>'))
    html = await HTMLFetcher(transport=transport).fetch('https://example.com/')
    assert html == '<p>busy</p>'


@pytest.mark.asyncio
async def test_transport_error_raises_fetch_error():
    def handler(request):
        raise httpx.ConnectError('connection refused', request=request)

    fetcher = HTMLFetcher(transport=httpx.MockTransport(handler))
    with pytest.raises(FetchError) as exc_info:
        await fetcher.fetch('https://down.example.com/')

    assert exc_info.value.url == 'https://down.example.com/'
    assert 'connection refused' in exc_info.value.reason
