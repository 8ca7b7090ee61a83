"""
Shape Type Classification.

Expected and actual shapes are plain Python values. This module decides how
the matcher treats each one:

- Composites: any Mapping, and any Sequence that is not text or bytes
- Scalars: everything else (None, bool, int, float, str, callables, ...)

Expected values are additionally tagged with a ShapeKind so the matchers can
dispatch on a closed set of cases instead of scattering isinstance checks.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from enum import Enum
from typing import Any

from realinclude.placeholder import Placeholder


_TEXT_TYPES = (str, bytes, bytearray)


class ShapeKind(Enum):
    """How an expected value is matched."""

    SCALAR = "scalar"
    MAPPING = "mapping"
    SEQUENCE = "sequence"
    MATCHER = "matcher"
    PLACEHOLDER = "placeholder"


def is_mapping(value: Any) -> bool:
    return isinstance(value, Mapping)


def is_sequence(value: Any) -> bool:
    """True for lists, tuples and other sequences, but not str/bytes."""
    return isinstance(value, Sequence) and not isinstance(value, _TEXT_TYPES)


def is_composite(value: Any) -> bool:
    return is_mapping(value) or is_sequence(value)


def shape_type_name(value: Any) -> str:
    """
    Return the type name used for strict comparisons.

    Returns one of: "null", "bool", "int", "float", "str", "bytes",
    "mapping", "sequence", "placeholder", "callable", or the class name for
    any other object. bool is reported separately from int so that True
    never matches 1.
    """
    if value is None:
        return "null"
    # Check bool before int (bool is subclass of int in Python)
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, int):
        return "int"
    if isinstance(value, float):
        return "float"
    if isinstance(value, str):
        return "str"
    if isinstance(value, (bytes, bytearray)):
        return "bytes"
    if is_mapping(value):
        return "mapping"
    if is_sequence(value):
        return "sequence"
    if isinstance(value, Placeholder):
        return "placeholder"
    if callable(value):
        return "callable"
    return type(value).__name__


def type_family(value: Any) -> str:
    """Like shape_type_name, but every composite reports "composite"."""
    if is_composite(value):
        return "composite"
    return shape_type_name(value)


def classify(
    value: Any,
    funcmode: str = "value",
    symbols: Mapping[Placeholder, Any] | None = None,
) -> ShapeKind:
    """
    Tag an expected value with the way it must be matched.

    Args:
        value: An expected value (or expected element of a sequence).
        funcmode: "matcher" turns callables into predicates; "value" treats
            them as literal expected values.
        symbols: Registered placeholders. Unregistered Placeholder tokens are
            plain scalars compared by identity.

    Returns:
        The ShapeKind for value.
    """
    if is_sequence(value):
        return ShapeKind.SEQUENCE
    if is_mapping(value):
        return ShapeKind.MAPPING
    if isinstance(value, Placeholder):
        if symbols is not None and value in symbols:
            return ShapeKind.PLACEHOLDER
        return ShapeKind.SCALAR
    if funcmode == "matcher" and callable(value):
        return ShapeKind.MATCHER
    return ShapeKind.SCALAR
