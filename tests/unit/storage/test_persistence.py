import json
from datetime import datetime, timedelta, timezone

import pytest

from sitespec.models import AdapterSpec
from sitespec.storage import AdapterStore

T0 = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    def __init__(self, start=T0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(tmp_path, clock):
    return AdapterStore(tmp_path / 'data' / 'adapters.json', clock=clock)


def spec(adapter_id, host=None, template='list'):
    data = {'id': adapter_id, 'template': template, 'itemSelector': 'li', 'fields': {'title': 'a'}}
    if host:
        data['match'] = {'hostContains': [host]}
    return AdapterSpec.model_validate(data)


def test_creates_empty_store_file(store):
    assert store.path.exists()
    assert json.loads(store.path.read_text()) == {'adapters': []}
    assert store.list_adapters() == []


def test_upsert_stamps_and_persists(store, clock, tmp_path):
    stored = store.upsert_adapter(spec('a', 'example.com'))

    assert stored.updated_at == T0
    data = json.loads(store.path.read_text())
    assert data['adapters'][0]['id'] == 'a'
    assert data['adapters'][0]['itemSelector'] == 'li'
    assert data['adapters'][0]['updatedAt'].startswith('2024-05-01T12:00:00')

    reopened = AdapterStore(store.path)
    assert reopened.get('a') == stored


def test_upsert_replaces_by_id(store, clock):
    store.upsert_adapter(spec('a', 'one.com'))
    store.upsert_adapter(spec('b', 'two.com'))
    clock.advance(minutes=5)
    store.upsert_adapter(spec('a', 'three.com'))

    ids = [item.id for item in store.list_adapters()]
    assert ids == ['a', 'b']
    assert store.get('a').match.host_contains == ['three.com']
    assert store.get('a').updated_at == T0 + timedelta(minutes=5)


def test_upsert_does_not_mutate_input(store):
    original = spec('a')
    store.upsert_adapter(original)
    assert original.updated_at is None


def test_find_prefers_most_recent(store, clock):
    store.upsert_adapter(spec('old', 'example.com'))
    clock.advance(hours=1)
    store.upsert_adapter(spec('new', 'example.com'))

    assert store.find_adapter('https://www.example.com/x').id == 'new'


def test_find_filters_by_template(store, clock):
    store.upsert_adapter(spec('listing', 'example.com'))
    clock.advance(seconds=1)
    store.upsert_adapter(spec('story', 'example.com', template='article'))

    assert store.find_adapter('https://example.com/', template_hint='list').id == 'listing'
    assert store.find_adapter('https://example.com/', template_hint='ARTICLE').id == 'story'
    assert store.find_adapter('https://example.com/', template_hint='news') is None


def test_find_miss(store):
    store.upsert_adapter(spec('a', 'example.com'))
    assert store.find_adapter('https://other.org/') is None


def test_spec_without_match_applies_everywhere(store):
    store.upsert_adapter(spec('anything'))
    assert store.find_adapter('https://random.site/page').id == 'anything'


def test_corrupt_file_leaves_store_empty(tmp_path):
    path = tmp_path / 'adapters.json'
    path.write_text('{not json')

    store = AdapterStore(path)
    assert store.list_adapters() == []


def test_invalid_records_skipped(tmp_path):
    path = tmp_path / 'adapters.json'
    path.write_text(json.dumps({'adapters': [{'id': 'ok', 'template': 'article'}, {'id': 'bad'}, 'junk']}))

    store = AdapterStore(path)
    assert [item.id for item in store.list_adapters()] == ['ok']


def test_remove(store):
    store.upsert_adapter(spec('a'))
    assert store.remove('a') is True
    assert store.remove('a') is False
    assert json.loads(store.path.read_text()) == {'adapters': []}


def test_is_stale(store, clock):
    stored = store.upsert_adapter(spec('a'))

    assert store.is_stale(stored, ttl_seconds=60) is False
    clock.advance(seconds=61)
    assert store.is_stale(stored, ttl_seconds=60) is True
    assert store.is_stale(spec('never-stored'), ttl_seconds=0) is False
