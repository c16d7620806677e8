import json

import pytest

from sitespec.core.generation import LLMConfig
from sitespec.models import AdapterSpec


@pytest.fixture
def mock_llm_config():
    return LLMConfig(provider='groq', model_name='llama-3.3-70b-versatile', api_key='test-key', temperature=0.0)


@pytest.fixture
def listing_html():
    """Ten product cards: 8 with title and link, 1 with a price."""
    cards = []
    for i in range(10):
        if i < 8:
            title = f'<a class="title" href="/p/{i}">Product {i}</a>'
        else:
            title = '<span class="placeholder"></span>'
        price = '<span class="price">$19.99</span>' if i == 0 else ''
        cards.append(f'<li class="card">{title}{price}<img src="/img/{i}.jpg"></li>')

    return f"""
    <!DOCTYPE html>
    <html>
    <head><title>Shop</title></head>
    <body>
        <ul class="results">
            {''.join(cards)}
        </ul>
    </body>
    </html>
    """


@pytest.fixture
def article_html():
    paragraph = 'The quick brown fox jumps over the lazy dog. ' * 12
    return f"""
    <!DOCTYPE html>
    <html>
    <body>
        <h1 class="title">My Awesome Article</h1>
        <div class="meta"><span class="author">Jane Doe</span></div>
        <article class="body">
            <p>{paragraph}</p>
            <p>{paragraph}</p>
        </article>
    </body>
    </html>
    """


@pytest.fixture
def shopping_spec_data():
    return {
        'id': 'shop-example',
        'template': 'shopping',
        'match': {'hostContains': ['shop.example.com']},
        'itemSelector': 'li.card',
        'fields': {
            'title': 'a.title',
            'href': {'selector': 'a.title', 'attr': 'href'},
            'price': '.price',
        },
    }


@pytest.fixture
def shopping_spec(shopping_spec_data):
    return AdapterSpec.model_validate(shopping_spec_data)


@pytest.fixture
def article_spec_data():
    return {
        'id': 'blog-article',
        'template': 'article',
        'match': {'hostContains': 'blog.example.com'},
        'content': {'selector': 'article.body', 'source': 'html'},
        'byline': '.author',
    }


@pytest.fixture
def mock_agent_factory(mocker):
    """Build a stand-in agent whose run() returns the given outputs in order.

    Strings become result objects with .output; exceptions are raised.
    """

    def factory(*outputs):
        side_effect = []
        for output in outputs:
            if isinstance(output, BaseException):
                side_effect.append(output)
            elif isinstance(output, dict):
                side_effect.append(mocker.Mock(output=json.dumps(output)))
            else:
                side_effect.append(mocker.Mock(output=output))

        agent = mocker.Mock()
        agent.run = mocker.AsyncMock(side_effect=side_effect)
        return agent

    return factory


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line('markers', 'integration: marks tests as integration tests')
    config.addinivalue_line('markers', 'unit: marks tests as unit tests')


def pytest_collection_modifyitems(config, items):
    """Apply directory-based marks to collected test items."""

    for item in items:
        # Get the test file path
        if hasattr(item, 'fspath'):
            file_path = str(item.fspath)

            # Add marks based on directory
            if '/tests/integration/' in file_path:
                item.add_marker(pytest.mark.integration)
            elif '/tests/unit/' in file_path:
                item.add_marker(pytest.mark.unit)
