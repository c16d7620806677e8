import pytest

from sitespec.utils.patterns import MAX_PATTERN_LENGTH, MAX_SUBJECT_LENGTH, compile_guarded, guarded_search


def test_simple_pattern_compiles():
    assert compile_guarded(r'\d+') is not None


@pytest.mark.parametrize('pattern', ['(a+)+', r'(\w*)*$', '(x+){2,}', '([a-z]+)*'])
def test_nested_quantifiers_refused(pattern):
    assert compile_guarded(pattern) is None


def test_long_pattern_refused():
    assert compile_guarded('a' * (MAX_PATTERN_LENGTH + 1)) is None


def test_invalid_pattern_refused():
    assert compile_guarded('[unclosed') is None


def test_empty_pattern_refused():
    assert compile_guarded('') is None


def test_search_returns_match():
    match = guarded_search(r'\$(\d+)', 'price $42')
    assert match is not None
    assert match.group(1) == '42'


def test_search_caps_subject_length():
    text = 'a' * MAX_SUBJECT_LENGTH + 'needle'
    assert guarded_search('needle', text) is None


def test_search_with_refused_pattern():
    assert guarded_search('(a+)+', 'aaaa') is None
