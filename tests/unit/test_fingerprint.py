import pytest

from app.domain.errors import CacheFailure
from app.infrastructure.memory.response_cache import ResponseCache, fingerprint


def test_fingerprint_is_deterministic():
    a = fingerprint("fact-check", "The earth is round", {"lang": "en"})
    b = fingerprint("fact-check", "The earth is round", {"lang": "en"})
    assert a == b


def test_fingerprint_ignores_case_and_surrounding_whitespace():
    a = fingerprint("fact-check", "The Earth is round", None)
    b = fingerprint("fact-check", "   the earth IS ROUND\n", None)
    assert a == b


def test_fingerprint_ignores_option_order():
    a = fingerprint("summarize", "text", {"style": "brief", "max_length": 100})
    b = fingerprint("summarize", "text", {"max_length": 100, "style": "brief"})
    assert a == b


def test_fingerprint_nested_mapping_order_is_irrelevant():
    a = fingerprint("x", {"b": 1, "a": {"d": 2, "c": 3}}, None)
    b = fingerprint("x", {"a": {"c": 3, "d": 2}, "b": 1}, None)
    assert a == b


def test_fingerprint_distinguishes_endpoint_input_and_options():
    base = fingerprint("summarize", "text", {"style": "brief"})
    assert fingerprint("fact-check", "text", {"style": "brief"}) != base
    assert fingerprint("summarize", "other text", {"style": "brief"}) != base
    assert fingerprint("summarize", "text", {"style": "bullet_points"}) != base


def test_inner_whitespace_is_significant():
    assert fingerprint("e", "a b", None) != fingerprint("e", "a  b", None)


def test_missing_options_equal_empty_options():
    assert fingerprint("e", "x", None) == fingerprint("e", "x", {})


def test_key_format():
    key = fingerprint("check-fallacies", "text", None)
    prefix, endpoint, digest = key.split(":")
    assert prefix == "ai_cache"
    assert endpoint == "check-fallacies"
    assert len(digest) == 64
    int(digest, 16)


def test_static_method_matches_module_function():
    assert ResponseCache.fingerprint("e", "x", {"a": 1}) == fingerprint(
        "e", "x", {"a": 1}
    )


def test_unserializable_input_raises_cache_failure():
    with pytest.raises(CacheFailure):
        fingerprint("e", object(), None)


@pytest.mark.parametrize(
    "options",
    [
        {1: "a", "b": 2},  # keys cannot be ordered
        ["b", "a"],
        [3, 1],
    ],
)
def test_unusable_options_raise_cache_failure(options):
    with pytest.raises(CacheFailure):
        ResponseCache.fingerprint("summarize", "text", options)


def test_contains_is_false_for_unusable_options(response_cache):
    assert response_cache.contains("summarize", "text", {1: "a", "b": 2}) is False
