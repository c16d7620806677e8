from sitespec.core.evaluation import default_criteria, resolve_criteria
from sitespec.models import CriteriaOverrides


def test_base_defaults():
    criteria = default_criteria('list')
    assert criteria.min_items == 6
    assert criteria.min_content_chars == 400
    assert criteria.required_fields == {'title': 0.7, 'href': 0.7}
    assert criteria.max_items is None


def test_shopping_adds_price():
    assert default_criteria('shopping').required_fields == {'title': 0.7, 'href': 0.7, 'price': 0.3}


def test_news_adds_source_and_time():
    assert default_criteria('news').required_fields == {'title': 0.7, 'href': 0.7, 'source': 0.2, 'time': 0.2}


def test_unknown_template_gets_base():
    assert default_criteria(None).required_fields == {'title': 0.7, 'href': 0.7}


def test_defaults_are_fresh_copies():
    first = default_criteria('shopping')
    first.required_fields['price'] = 0.9
    assert default_criteria('shopping').required_fields['price'] == 0.3


def test_no_overrides_returns_defaults():
    assert resolve_criteria('news') == default_criteria('news')


def test_top_level_override_is_shallow():
    criteria = resolve_criteria('list', {'minItems': 2})
    assert criteria.min_items == 2
    assert criteria.min_content_chars == 400
    assert criteria.required_fields == {'title': 0.7, 'href': 0.7}


def test_required_fields_merge_per_key():
    criteria = resolve_criteria('shopping', {'requiredFields': {'price': 0.5, 'rating': 0.1}})
    assert criteria.required_fields == {'title': 0.7, 'href': 0.7, 'price': 0.5, 'rating': 0.1}


def test_override_model_and_snake_case_keys():
    model = CriteriaOverrides(min_content_chars=50, max_items=5)
    criteria = resolve_criteria('article', model)
    assert criteria.min_content_chars == 50
    assert criteria.max_items == 5

    criteria = resolve_criteria('article', {'min_content_chars': 10})
    assert criteria.min_content_chars == 10
