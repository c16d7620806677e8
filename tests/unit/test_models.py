from datetime import datetime, timezone

from sitespec.models import AdapterSpec, FieldRule, MatchRule, as_field_rule


def test_match_rule_host_is_case_insensitive():
    rule = MatchRule(host_contains=['Example.COM'])
    assert rule.matches('https://www.example.com/search?q=1')
    assert not rule.matches('https://other.org/')


def test_match_rule_requires_every_constrained_list():
    rule = MatchRule(host_contains=['example.com'], path_prefix=['/news'])
    assert rule.matches('https://example.com/news/today')
    assert not rule.matches('https://example.com/shop')
    assert not rule.matches('https://elsewhere.com/news')


def test_match_rule_empty_path_is_root():
    rule = MatchRule(path_prefix=['/'])
    assert rule.matches('https://example.com')


def test_match_rule_regex():
    rule = MatchRule(url_regex=[r'/item/\d+$'])
    assert rule.matches('https://example.com/item/42')
    assert not rule.matches('https://example.com/item/abc')


def test_match_rule_refused_regex_never_matches():
    rule = MatchRule(url_regex=['(a+)+$'])
    assert not rule.matches('https://example.com/aaaa')


def test_match_rule_accepts_bare_strings():
    rule = MatchRule.model_validate({'hostContains': 'example.com', 'pathPrefix': '/a'})
    assert rule.host_contains == ['example.com']
    assert rule.path_prefix == ['/a']


def test_spec_without_match_rule_matches_everything():
    spec = AdapterSpec(template='article')
    assert spec.matches('https://anything.example/whatever')


def test_spec_reads_camel_case(shopping_spec_data):
    spec = AdapterSpec.model_validate(shopping_spec_data)
    assert spec.item_selector == 'li.card'
    assert spec.is_item_template
    assert isinstance(spec.fields['href'], FieldRule)
    assert spec.fields['href'].attr == 'href'
    assert spec.fields['title'] == 'a.title'


def test_spec_dump_is_camel_case_and_keeps_extra_keys():
    spec = AdapterSpec.model_validate(
        {
            'id': 'x',
            'template': 'list',
            'itemSelector': 'li',
            'fields': {'title': 'a'},
            'notes': 'kept',
            'updatedAt': '2024-01-02T03:04:05Z',
        }
    )
    data = spec.to_json_dict()

    assert data['itemSelector'] == 'li'
    assert data['notes'] == 'kept'
    assert 'item_selector' not in data
    assert 'content' not in data
    assert spec.updated_at == datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


def test_numeric_id_coerced_to_string():
    spec = AdapterSpec.model_validate({'id': 7, 'template': 'article'})
    assert spec.id == '7'


def test_as_field_rule():
    assert as_field_rule(None) is None
    assert as_field_rule('h1') == FieldRule(selector='h1')
    rule = FieldRule(selector='a', attr='href')
    assert as_field_rule(rule) is rule
