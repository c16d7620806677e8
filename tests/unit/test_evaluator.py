import pytest

from sitespec.core.evaluation import PageEvaluator
from sitespec.models import AdapterSpec
from sitespec.utils.console import create_console

LINKED_FIELDS = {'title': 'a', 'href': {'selector': 'a', 'attr': 'href'}}


@pytest.fixture
def evaluator():
    return PageEvaluator()


def test_shopping_defaults_reject_low_price(evaluator, listing_html, shopping_spec):
    report = evaluator.evaluate(shopping_spec, listing_html, url='https://shop.example.com/')

    assert report.counts['items'] == 10
    assert report.counts['titleRate'] == 0.8
    assert report.counts['hrefRate'] == 0.8
    assert report.counts['priceRate'] == 0.1
    assert report.ok is False
    assert report.issues == ['price coverage 10% (< 30%)']


def test_list_template_accepts_same_page(evaluator, listing_html, shopping_spec_data):
    spec = AdapterSpec.model_validate({**shopping_spec_data, 'template': 'list'})
    report = evaluator.evaluate(spec, listing_html)

    assert report.ok is True
    assert report.issues == []
    assert report.counts['items'] == 10


def test_price_diagnostic_does_not_flip_ok(evaluator, listing_html, shopping_spec):
    report = evaluator.evaluate(shopping_spec, listing_html, criteria={'requiredFields': {'price': 0}})

    assert report.ok is True
    assert report.issues == ['low price coverage']
    assert report.counts['priceRate'] == 0.1


def test_too_few_items(evaluator, listing_html, shopping_spec_data):
    spec = AdapterSpec.model_validate({**shopping_spec_data, 'template': 'list'})
    report = evaluator.evaluate(spec, listing_html, criteria={'minItems': 12})

    assert report.ok is False
    assert report.issues == ['found 10 items (< 12)']


def test_zero_min_items_falls_back(evaluator):
    spec = AdapterSpec(template='list', item_selector='li', fields=LINKED_FIELDS)
    report = evaluator.evaluate(spec, '<ul><li><a href="/a">Alpha</a></li></ul>', criteria={'minItems': 0})

    assert report.ok is False
    assert report.issues == ['found 1 items (< 4)']


def test_max_items_caps_extraction(evaluator, listing_html, shopping_spec_data):
    spec = AdapterSpec.model_validate({**shopping_spec_data, 'template': 'list', 'maxItems': 4})
    report = evaluator.evaluate(spec, listing_html)

    assert report.counts['items'] == 4
    assert report.issues == ['found 4 items (< 6)']

    # Criteria maxItems wins over the spec's own cap
    report = evaluator.evaluate(spec, listing_html, criteria={'maxItems': 10})
    assert report.counts['items'] == 10


def test_negative_max_items_drops_from_end(evaluator, listing_html, shopping_spec_data):
    spec = AdapterSpec.model_validate({**shopping_spec_data, 'template': 'list', 'maxItems': -1})
    report = evaluator.evaluate(spec, listing_html)

    assert report.counts['items'] == 9


def test_zero_items_reports_zero_rates(evaluator, listing_html, shopping_spec_data):
    spec = AdapterSpec.model_validate({**shopping_spec_data, 'template': 'list', 'itemSelector': '.nothing'})
    report = evaluator.evaluate(spec, listing_html)

    assert report.counts['items'] == 0
    assert report.counts['titleRate'] == 0
    assert report.issues == [
        'found 0 items (< 6)',
        'title coverage 0% (< 70%)',
        'href coverage 0% (< 70%)',
    ]


def test_missing_item_selector_stops_early(evaluator, listing_html):
    spec = AdapterSpec(template='shopping', fields={'title': 'a'})
    report = evaluator.evaluate(spec, listing_html, template_hint='news')

    assert report.ok is False
    assert report.issues == ['template mismatch (expected news, got shopping)', 'itemSelector missing']
    assert report.counts == {}


def test_template_mismatch_accumulates(evaluator, listing_html, shopping_spec_data):
    spec = AdapterSpec.model_validate({**shopping_spec_data, 'template': 'list'})
    report = evaluator.evaluate(spec, listing_html, template_hint='shopping')

    assert report.ok is False
    assert report.issues[0] == 'template mismatch (expected shopping, got list)'
    assert report.counts['items'] == 10


def test_article_accepted(evaluator, article_html, article_spec_data):
    spec = AdapterSpec.model_validate(article_spec_data)
    report = evaluator.evaluate(spec, article_html)

    assert report.ok is True
    assert report.counts['contentLength'] > 400


def test_article_too_short(evaluator, article_html):
    spec = AdapterSpec(template='article', content='h1.title')
    report = evaluator.evaluate(spec, article_html)

    assert report.ok is False
    assert report.issues == ['content too short (18 < 400)']
    assert report.counts['contentLength'] == 18


def test_article_criteria_override(evaluator, article_html):
    spec = AdapterSpec(template='article', content='h1.title')
    report = evaluator.evaluate(spec, article_html, criteria={'minContentChars': 10})
    assert report.ok is True


def test_zero_min_content_chars_falls_back(evaluator, article_html):
    spec = AdapterSpec(template='article', content='h1.title')
    report = evaluator.evaluate(spec, article_html, criteria={'minContentChars': 0})

    assert report.ok is False
    assert report.issues == ['content too short (18 < 400)']


def test_coverage_percent_rounds_half_up(evaluator):
    # 5 of 8 titles = 62.5%
    cards = ''.join(f'<li><a href="/{i}">{"T" if i < 5 else ""}</a></li>' for i in range(8))
    spec = AdapterSpec(template='list', item_selector='li', fields={'title': 'a'})
    report = evaluator.evaluate(spec, f'<ul>{cards}</ul>')

    assert 'title coverage 63% (< 70%)' in report.issues
    assert report.counts['titleRate'] == 0.63


@pytest.mark.parametrize('titled, rate', [(1, 0.13), (3, 0.38), (7, 0.88), (4, 0.5)])
def test_coverage_rate_rounds_half_up(evaluator, titled, rate):
    cards = ''.join(f'<li><a href="/{i}">{"T" if i < titled else ""}</a></li>' for i in range(8))
    spec = AdapterSpec(template='list', item_selector='li', fields=LINKED_FIELDS)
    report = evaluator.evaluate(spec, f'<ul>{cards}</ul>')

    assert report.counts['titleRate'] == rate
    assert report.counts['hrefRate'] == 1.0


def test_evaluation_is_deterministic(evaluator, listing_html, shopping_spec):
    first = evaluator.evaluate(shopping_spec, listing_html)
    second = evaluator.evaluate(shopping_spec, listing_html)
    assert first == second


def test_console_output(listing_html, shopping_spec):
    console = create_console(record=True, width=120)
    PageEvaluator(console=console).evaluate(shopping_spec, listing_html)

    output = console.export_text()
    assert 'shopping: rejected' in output
    assert 'price coverage 10% (< 30%)' in output
