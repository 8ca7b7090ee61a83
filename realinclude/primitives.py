"""
Leaf Primitives: equality and failure signalling.

Every leaf comparison and every structural failure is routed through two
injectable functions so the matcher can report through whatever testing
library the caller uses:

    equal(actual, expected, message)  - raises when the scalars differ
    fail(message)                     - always raises

signal_equal() and signal_fail() are the only places that call them. They
turn whatever the primitive raises into a Mismatch so that matching can
carry on as plain return values.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Mapping

from realinclude.errors import MatchAssertionError
from realinclude.result import MATCHED, MatchResult, Mismatch
from realinclude.shape_type import shape_type_name


EqualFunc = Callable[[Any, Any, str], Any]
FailFunc = Callable[[str], Any]

# Always propagated. Any other BaseException (pytest.fail raises one) becomes
# a Mismatch.
PASSTHROUGH_ERRORS = (KeyboardInterrupt, SystemExit, GeneratorExit)


@dataclass(frozen=True)
class AssertionFuncs:
    """A (possibly partial) pair of leaf primitives."""

    fail: FailFunc | None = None
    equal: EqualFunc | None = None

    @classmethod
    def from_mapping(cls, funcs: Mapping[str, Any]) -> "AssertionFuncs":
        return cls(fail=funcs.get("fail"), equal=funcs.get("equal"))

    @property
    def complete(self) -> bool:
        return self.fail is not None and self.equal is not None

    def merged_over(self, base: "AssertionFuncs") -> "AssertionFuncs":
        """Fill the missing primitives of self from base."""
        return AssertionFuncs(
            fail=self.fail if self.fail is not None else base.fail,
            equal=self.equal if self.equal is not None else base.equal,
        )


def strict_equal(actual: Any, expected: Any) -> bool:
    """
    Equality without coercion: same type name and ==.

    1 != 1.0, True != 1, "1" != 1. Callables and other objects fall back to
    their own __eq__ (identity for functions).
    """
    if shape_type_name(actual) != shape_type_name(expected):
        return False
    return bool(actual == expected)


def fallback_equal(actual: Any, expected: Any, message: str) -> bool:
    """Built-in equal(): raise MatchAssertionError unless strict_equal."""
    if strict_equal(actual, expected):
        return True
    raise MatchAssertionError(
        f"Equality Assertion Failed: {message} "
        f"(actual={actual!r}, expected={expected!r})"
    )


def fallback_fail(message: str) -> None:
    """Built-in fail(): always raise MatchAssertionError."""
    raise MatchAssertionError("Assertion Failed: " + message)


FALLBACK_ASSERTION_FUNCS = AssertionFuncs(fail=fallback_fail, equal=fallback_equal)


# =============================================================================
# Signalling
# =============================================================================


def signal_equal(
    funcs: AssertionFuncs,
    actual: Any,
    expected: Any,
    message: str,
    path: str,
) -> MatchResult:
    """
    Compare two leaf values with the injected equal().

    Returns:
        MATCHED if equal() returned, a Mismatch carrying the raised
        exception otherwise.
    """
    try:
        funcs.equal(actual, expected, message)
    except PASSTHROUGH_ERRORS:
        raise
    except BaseException as e:
        return Mismatch(message, path, e)
    return MATCHED


def signal_fail(funcs: AssertionFuncs, message: str, path: str) -> Mismatch:
    """
    Signal a structural failure with the injected fail().

    The result is a Mismatch even if fail() returns without raising.
    """
    try:
        funcs.fail(message)
    except PASSTHROUGH_ERRORS:
        raise
    except BaseException as e:
        return Mismatch(message, path, e)
    return Mismatch(message, path)
