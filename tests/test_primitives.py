"""
Tests for the leaf primitives and the signalling helpers around them.
"""

import pytest

from realinclude.errors import MatchAssertionError
from realinclude.primitives import (
    FALLBACK_ASSERTION_FUNCS,
    AssertionFuncs,
    fallback_equal,
    fallback_fail,
    signal_equal,
    signal_fail,
    strict_equal,
)
from realinclude.result import MATCHED, Mismatch


class TestStrictEqual:
    """Tests for strict_equal()."""

    def test_same_values(self):
        assert strict_equal("a", "a") is True
        assert strict_equal(1, 1) is True
        assert strict_equal(None, None) is True

    def test_no_coercion(self):
        assert strict_equal("1", 1) is False
        assert strict_equal(1, 1.0) is False
        assert strict_equal(True, 1) is False
        assert strict_equal(0, False) is False
        assert strict_equal(None, 0) is False

    def test_functions_compare_by_identity(self):
        def f():
            return False

        assert strict_equal(f, f) is True
        assert strict_equal(f, lambda: False) is False


class TestFallbacks:
    """Tests for the built-in equal() and fail()."""

    def test_equal_returns_on_match(self):
        assert fallback_equal("a", "a", "msg") is True

    def test_equal_raises_on_mismatch(self):
        with pytest.raises(MatchAssertionError, match="Equality Assertion Failed: here"):
            fallback_equal("a", "b", "here")

    def test_equal_message_shows_values(self):
        with pytest.raises(MatchAssertionError, match=r"actual='a', expected=1"):
            fallback_equal("a", 1, "here")

    def test_fail_always_raises(self):
        with pytest.raises(MatchAssertionError, match="Assertion Failed: boom"):
            fallback_fail("boom")

    def test_fallback_error_is_an_assertion_error(self):
        """pytest reports it as a normal assertion failure."""
        with pytest.raises(AssertionError):
            fallback_fail("boom")


class TestAssertionFuncs:
    """Tests for AssertionFuncs merging."""

    def test_complete(self):
        assert FALLBACK_ASSERTION_FUNCS.complete is True
        assert AssertionFuncs().complete is False
        assert AssertionFuncs(fail=fallback_fail).complete is False

    def test_merged_over_keeps_own_entries(self):
        def my_fail(message):
            raise RuntimeError(message)

        merged = AssertionFuncs(fail=my_fail).merged_over(FALLBACK_ASSERTION_FUNCS)
        assert merged.fail is my_fail
        assert merged.equal is fallback_equal

    def test_from_mapping(self):
        funcs = AssertionFuncs.from_mapping({"equal": fallback_equal})
        assert funcs.equal is fallback_equal
        assert funcs.fail is None


class TestSignalling:
    """Tests for signal_equal() / signal_fail()."""

    def test_signal_equal_matched(self):
        assert signal_equal(FALLBACK_ASSERTION_FUNCS, 1, 1, "m", "$") is MATCHED

    def test_signal_equal_captures_error(self):
        result = signal_equal(FALLBACK_ASSERTION_FUNCS, 1, 2, "m", "$.a")
        assert isinstance(result, Mismatch)
        assert result.path == "$.a"
        assert isinstance(result.error, MatchAssertionError)
        assert result.to_exception() is result.error

    def test_signal_fail_captures_error(self):
        result = signal_fail(FALLBACK_ASSERTION_FUNCS, "gone", "$.b")
        assert result.message == "gone"
        assert isinstance(result.error, MatchAssertionError)

    def test_signal_fail_without_raise_is_still_a_mismatch(self):
        calls = []
        funcs = AssertionFuncs(fail=calls.append, equal=fallback_equal)

        result = signal_fail(funcs, "gone", "$")

        assert calls == ["gone"]
        assert isinstance(result, Mismatch)
        assert result.error is None
        assert isinstance(result.to_exception(), MatchAssertionError)

    def test_signal_equal_uses_injected_equal(self):
        calls = []
        funcs = AssertionFuncs(fail=fallback_fail, equal=lambda a, e, m: calls.append((a, e, m)))
        assert signal_equal(funcs, 1, 2, "m", "$") is MATCHED
        assert calls == [(1, 2, "m")]
