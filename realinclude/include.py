"""
Deep Inclusion Matching.

Two mutually recursive matchers check that an actual value contains at
least the structure described by an expected shape:

- _match_object(): every expected key must exist in actual (placeholder keys
  are resolved against actual's keys) and its value must match
- _match_array(): every expected element must be found among the actual
  elements, in any order; each actual element is used at most once

Extra keys and extra elements in actual are always allowed.

Internally every function returns a MatchResult. Only match_inclusion() and
match_array_inclusion() turn a Mismatch into False (check mode) or an
exception (assert mode).

Array matching is greedy, first-fit and does not backtrack. A composite
actual element that was probed for one expected element is consumed even
when the probe failed, so some inputs where a different assignment would
succeed are reported as mismatches:

    match_array_inclusion([{"a": 1, "b": 2}, {"a": 1}], [{"a": 1}, {"b": 2}])
    -> False: {"a": 1} consumes the first element, {"b": 2} probes the
       second and finds nothing else.

    match_array_inclusion([{"x": 1}, {"y": 2}], [{"y": 2}, {"x": 1}])
    -> False: {"y": 2} probes (and consumes) the first element on its way
       to the second, leaving nothing for {"x": 1}.

Scalar candidates are only consumed when they match.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from realinclude.config import init_context
from realinclude.context import MatchContext, join_path
from realinclude.errors import ConfigError, InternalMatchError
from realinclude.placeholder import (
    Placeholder,
    restore_bindings,
    snapshot_bindings,
)
from realinclude.primitives import (
    PASSTHROUGH_ERRORS,
    signal_equal,
    signal_fail,
    strict_equal,
)
from realinclude.result import MATCHED, MatchResult, Mismatch
from realinclude.shape_type import (
    ShapeKind,
    classify,
    is_composite,
    is_mapping,
    is_sequence,
    shape_type_name,
    type_family,
)


logger = logging.getLogger(__name__)

# Raised by user code and never turned into a Mismatch
_PROPAGATED_ERRORS = (ConfigError, InternalMatchError) + PASSTHROUGH_ERRORS


# =============================================================================
# Public Entry Points
# =============================================================================


def match_inclusion(actual: Any, expected: Any, ctx: Any = None, **options: Any) -> bool:
    """
    Check that actual deep-includes expected.

    Args:
        actual: The value observed.
        expected: The partial shape actual must contain. A sequence is
            matched with array semantics (order independent membership).
        ctx: Options mapping or a MatchContext (see init_context).
        **options: mode, funcmode, path, symbols, assertion_funcs.

    Returns:
        True if actual includes expected. In check mode a mismatch returns
        False.

    Raises:
        Whatever the leaf primitive raised (MatchAssertionError with the
        built-in primitives) on a mismatch in assert mode.
        ConfigError: On invalid options, in any mode.
    """
    context = init_context(ctx, **options)
    root = context.path
    if is_sequence(expected):
        result = _match_array(actual, expected, root, context)
    else:
        result = _match_object(actual, expected, root, context)
    return _conclude(result, context, root)


def match_array_inclusion(actual: Any, expected: Any, ctx: Any = None, **options: Any) -> bool:
    """
    Check that every element of expected is found in the sequence actual.

    Order does not matter; each actual element satisfies at most one
    expected element. Options and behaviour on mismatch are the same as for
    match_inclusion().
    """
    context = init_context(ctx, **options)
    root = context.path
    result = _match_array(actual, expected, root, context)
    return _conclude(result, context, root)


def _conclude(result: MatchResult, ctx: MatchContext, root: str) -> bool:
    """Apply the requested mode to the final result."""
    if result is MATCHED:
        logger.debug("Inclusion matched at %s", root)
        return True

    logger.debug("Inclusion failed at %s: %s", result.path, result.message)
    if ctx.mode == "assert":
        raise result.to_exception()
    return False


# =============================================================================
# Helpers
# =============================================================================


def _describe(func: Any) -> str:
    return getattr(func, "__name__", repr(func))


def _invoke(ctx: MatchContext, path: str, func: Callable[..., Any], *args: Any) -> Any:
    """
    Call user code (matcher function or resolver) at path.

    An exception raised by user code becomes a Mismatch that carries it.
    ConfigError and InternalMatchError from a nested call propagate, as do
    KeyboardInterrupt, SystemExit and GeneratorExit.
    """
    ctx.path = path
    try:
        return func(*args)
    except _PROPAGATED_ERRORS:
        raise
    except BaseException as e:
        return Mismatch(
            f"{_describe(func)} raised {type(e).__name__} at {path}: {e}", path, e
        )


def _keys_of(actual: Any) -> list[Any]:
    """Keys of a mapping, or indices of a sequence."""
    if is_mapping(actual):
        return list(actual.keys())
    return list(range(len(actual)))


def _has_property(obj: Any, prop: Any) -> bool:
    """
    True if obj has the key (mapping) or index (sequence) prop.

    Keys that are equal but of a different type do not count: 1 does not
    find True and 1.0 does not find 1.
    """
    if is_mapping(obj):
        if prop not in obj:
            return False
        if isinstance(prop, (int, float)):
            wanted = shape_type_name(prop)
            return any(key == prop and shape_type_name(key) == wanted for key in obj)
        return True
    return shape_type_name(prop) == "int" and 0 <= prop < len(obj)


def _assert_property(obj: Any, prop: Any, message: str, ctx: MatchContext, path: str) -> MatchResult:
    if not is_composite(obj):
        raise InternalMatchError(
            f"Internal Error: Expected object for property assertion but got {shape_type_name(obj)}"
        )

    if _has_property(obj, prop):
        return MATCHED
    return signal_fail(
        ctx.assertion_funcs,
        f"Property Assertion Failed: Could not find property '{prop}': {message}",
        path,
    )


def _assert_true(expectation: Any, message: str, ctx: MatchContext, path: str) -> MatchResult:
    if expectation is not True:
        return signal_fail(ctx.assertion_funcs, "Truth Assertion Failed: " + message, path)
    return MATCHED


def _bind(token: Placeholder, candidate: Any, path: str, ctx: MatchContext) -> bool | Mismatch:
    """
    Try to bind an unresolved placeholder to candidate.

    Returns:
        True if bound, False if the resolver rejected candidate, or a
        Mismatch if the resolver raised.
    """
    binding = ctx.binding(token)
    accepted = _invoke(ctx, path, binding.accepts, candidate, ctx)
    if isinstance(accepted, Mismatch):
        return accepted
    if accepted:
        binding.value = candidate
        logger.debug("Bound %r to %r at %s", token, candidate, path)
    return accepted


def _resolve_key(
    token: Placeholder,
    actual: Any,
    matched_keys: set[Any],
    path: str,
    ctx: MatchContext,
) -> MatchResult:
    """Resolve a placeholder key, or check the key it is already bound to."""
    binding = ctx.binding(token)
    if binding.resolved:
        return _assert_property(
            actual,
            binding.value,
            f"Expected resolved symbol {path} as key (resolved to value {binding.value!r})",
            ctx,
            path,
        )

    for key in _keys_of(actual):
        if key in matched_keys:
            continue
        bound = _bind(token, key, path, ctx)
        if isinstance(bound, Mismatch):
            return bound
        if bound:
            return MATCHED
    return signal_fail(ctx.assertion_funcs, f"Could not resolve property {path}", path)


def _resolve_value(token: Placeholder, candidate: Any, path: str, ctx: MatchContext) -> MatchResult:
    """Resolve a placeholder value, or check the value it is already bound to."""
    binding = ctx.binding(token)
    if binding.resolved:
        return signal_equal(
            ctx.assertion_funcs,
            candidate,
            binding.value,
            f"Property symbol {path} did not match expected value {binding.value!r}",
            path,
        )

    bound = _bind(token, candidate, path, ctx)
    if isinstance(bound, Mismatch):
        return bound
    if not bound:
        return signal_fail(
            ctx.assertion_funcs,
            f"Property did not pass symbol {token!r} matcher {path}",
            path,
        )
    return MATCHED


# =============================================================================
# Object Matcher
# =============================================================================


def _match_member(actual: Any, expected: Any, path: str, ctx: MatchContext) -> MatchResult:
    """Match the value found under one expected key."""
    kind = classify(expected, ctx.funcmode, ctx.symbols)

    if kind is ShapeKind.SEQUENCE:
        return _match_array(actual, expected, path, ctx)

    if kind is ShapeKind.MAPPING:
        return _match_object(actual, expected, path, ctx)

    if kind is ShapeKind.MATCHER:
        outcome = _invoke(ctx, path, expected, actual, ctx)
        if isinstance(outcome, Mismatch):
            return outcome
        return _assert_true(
            outcome,
            f'Matcher function did not match expected value "{_describe(expected)}" at {path}',
            ctx,
            path,
        )

    if kind is ShapeKind.PLACEHOLDER:
        return _resolve_value(expected, actual, path, ctx)

    return signal_equal(
        ctx.assertion_funcs,
        actual,
        expected,
        f"Property does not match expected value: {path}",
        path,
    )


def _match_object(actual: Any, expected: Any, path: str, ctx: MatchContext) -> MatchResult:
    """
    Check that actual has every key of the mapping expected.

    Scalars on either side are compared with the leaf equal(). A sequence
    actual is treated as a mapping from index to element.
    """
    if not is_composite(actual) or not is_composite(expected):
        return signal_equal(
            ctx.assertion_funcs,
            actual,
            expected,
            f"Property does not match expected value: {path}",
            path,
        )

    matched_keys: set[Any] = set()
    for expected_key, expected_val in expected.items():
        prop_path = join_path(path, expected_key)
        ctx.path = prop_path

        if isinstance(expected_key, Placeholder) and expected_key in ctx.symbols:
            found = _resolve_key(expected_key, actual, matched_keys, prop_path, ctx)
            actual_key = ctx.binding(expected_key).value
        else:
            found = _assert_property(actual, expected_key, f"Expected property {prop_path}", ctx, prop_path)
            actual_key = expected_key
        if found is not MATCHED:
            return found

        result = _match_member(actual[actual_key], expected_val, prop_path, ctx)
        if result is not MATCHED:
            return result
        matched_keys.add(actual_key)

    return MATCHED


# =============================================================================
# Array Matcher
# =============================================================================


def _probe(actual: Any, expected: Any, kind: ShapeKind, path: str, ctx: MatchContext) -> MatchResult:
    """
    Try one composite candidate. Bindings made by a failed probe are undone.
    """
    snapshot = snapshot_bindings(ctx.symbols)
    if kind is ShapeKind.SEQUENCE:
        result = _match_array(actual, expected, path, ctx)
    else:
        result = _match_object(actual, expected, path, ctx)

    if result is not MATCHED:
        undone = restore_bindings(ctx.symbols, snapshot)
        if undone:
            logger.debug("Rolled back %r after failed probe at %s", undone, path)
    return result


def _match_array(actual: Any, expected: Any, path: str, ctx: MatchContext) -> MatchResult:
    """
    Check that every element of expected is found among the elements of
    actual, consuming the first fit for each.
    """
    if not is_sequence(expected):
        return signal_fail(
            ctx.assertion_funcs,
            f"Expected array of values to include at path: {path}, got {shape_type_name(expected)}",
            path,
        )
    if not is_sequence(actual):
        return signal_fail(ctx.assertion_funcs, f"Expected an array at path: {path}", path)

    consumed: set[int] = set()
    for expected_index, expected_val in enumerate(expected):
        expected_path = join_path(path, expected_index)
        ctx.path = expected_path
        kind = classify(expected_val, ctx.funcmode, ctx.symbols)

        found = False
        for actual_index, actual_val in enumerate(actual):
            if actual_index in consumed:
                continue

            if kind is ShapeKind.MATCHER:
                outcome = _invoke(ctx, expected_path, expected_val, actual_val, ctx)
                if isinstance(outcome, Mismatch):
                    return outcome
                found = bool(outcome)

            elif kind is ShapeKind.PLACEHOLDER:
                binding = ctx.binding(expected_val)
                if binding.resolved:
                    found = signal_equal(
                        ctx.assertion_funcs,
                        actual_val,
                        binding.value,
                        f"Property symbol {expected_path} did not match expected value {binding.value!r}",
                        expected_path,
                    ) is MATCHED
                else:
                    bound = _bind(expected_val, actual_val, expected_path, ctx)
                    if isinstance(bound, Mismatch):
                        return bound
                    found = bound

            elif type_family(actual_val) != type_family(expected_val):
                continue

            elif kind in (ShapeKind.SEQUENCE, ShapeKind.MAPPING):
                # Consumed by the attempt, whatever the outcome
                consumed.add(actual_index)
                found = _probe(actual_val, expected_val, kind, expected_path, ctx) is MATCHED
                if found:
                    break
                continue

            else:
                found = strict_equal(actual_val, expected_val)

            if found:
                consumed.add(actual_index)
                break

        if not found:
            return signal_fail(
                ctx.assertion_funcs,
                f"Could not find array member value at path: {expected_path}",
                expected_path,
            )

    return MATCHED
