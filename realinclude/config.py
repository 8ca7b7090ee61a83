"""
Configuration: option validation, process-wide defaults, context creation.

Options are validated against OPTIONS_SCHEMA with jsonschema before any
matching starts. The validator understands two extra types on top of
Draft 7: "callable" (matcher functions, leaf primitives) and "placeholder"
(symbol table keys). A bad option raises ConfigError in every mode.

The process-wide defaults (operation mode and leaf primitives) are a single
lock-guarded module state. They are meant to be set once, typically from a
conftest.py, before any matching runs:

    set_default_mode("assert", {"fail": pytest.fail})
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Mapping
from typing import Any

from jsonschema import Draft7Validator, validators

from realinclude.context import FUNCMODES, MODES, ROOT_PATH, MatchContext
from realinclude.errors import ConfigError
from realinclude.placeholder import Placeholder, SymbolBinding, normalize_symbols
from realinclude.primitives import FALLBACK_ASSERTION_FUNCS, AssertionFuncs


logger = logging.getLogger(__name__)


# =============================================================================
# Options Schema
# =============================================================================

_PRIMITIVE_SCHEMA = {"type": ["callable", "null"]}

OPTIONS_SCHEMA: dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "realinclude match options",
    "type": "object",
    "properties": {
        "mode": {"enum": list(MODES)},
        "funcmode": {"enum": list(FUNCMODES)},
        "path": {"type": "string", "minLength": 1},
        "symbols": {
            "type": ["object", "null"],
            "propertyNames": {"type": "placeholder"},
            "additionalProperties": {
                "type": ["object", "null"],
                "properties": {
                    "matcher": _PRIMITIVE_SCHEMA,
                    "value": {},
                },
                "additionalProperties": False,
            },
        },
        "assertion_funcs": {
            "type": ["object", "null"],
            "properties": {
                "fail": _PRIMITIVE_SCHEMA,
                "equal": _PRIMITIVE_SCHEMA,
            },
            "additionalProperties": False,
        },
    },
    "additionalProperties": False,
}


_TYPE_CHECKER = Draft7Validator.TYPE_CHECKER.redefine_many({
    "object": lambda checker, instance: isinstance(instance, Mapping),
    "callable": lambda checker, instance: callable(instance),
    "placeholder": lambda checker, instance: isinstance(instance, Placeholder),
})

OptionsValidator = validators.extend(Draft7Validator, type_checker=_TYPE_CHECKER)

_VALIDATOR = OptionsValidator(OPTIONS_SCHEMA)


def _error_location(error) -> str:
    return ".".join(str(part) for part in error.absolute_path) or "options"


def _prepare_options(options: Mapping[str, Any]) -> dict[str, Any]:
    """Unpack dataclass option values into plain mappings for validation."""
    prepared = dict(options)

    funcs = prepared.get("assertion_funcs")
    if isinstance(funcs, AssertionFuncs):
        prepared["assertion_funcs"] = {"fail": funcs.fail, "equal": funcs.equal}

    symbols = prepared.get("symbols")
    if isinstance(symbols, Mapping):
        prepared["symbols"] = {
            token: (
                {"matcher": descriptor.matcher, "value": descriptor.value}
                if isinstance(descriptor, SymbolBinding)
                else descriptor
            )
            for token, descriptor in symbols.items()
        }
    return prepared


def validate_options(options: Mapping[str, Any]) -> None:
    """
    Validate match options against OPTIONS_SCHEMA.

    Raises:
        ConfigError: Listing every problem found, one per "; ".
    """
    errors = sorted(_VALIDATOR.iter_errors(options), key=_error_location)
    if errors:
        details = "; ".join(f"{_error_location(e)}: {e.message}" for e in errors)
        raise ConfigError(f"Invalid match options: {details}")


# =============================================================================
# Process-wide Defaults
# =============================================================================

_DEFAULT_MODE = "check"
_DEFAULT_ASSERTION_FUNCS = AssertionFuncs()
_DEFAULTS_LOCK = threading.Lock()


def set_default_mode(mode: str, assertion_funcs: Any = None) -> None:
    """
    Set the default operation mode (and optionally leaf primitives).

    Args:
        mode: "check" or "assert".
        assertion_funcs: Mapping or AssertionFuncs with "fail" and/or
            "equal". Supplied primitives replace the current defaults one by
            one; missing ones are left alone.

    Raises:
        ConfigError: If mode is not recognised or a primitive is not
            callable. Defaults are unchanged in that case.
    """
    global _DEFAULT_MODE, _DEFAULT_ASSERTION_FUNCS
    prepared = _prepare_options({"mode": mode, "assertion_funcs": assertion_funcs})
    validate_options(prepared)

    funcs = AssertionFuncs.from_mapping(prepared["assertion_funcs"] or {})
    with _DEFAULTS_LOCK:
        _DEFAULT_MODE = mode
        _DEFAULT_ASSERTION_FUNCS = funcs.merged_over(_DEFAULT_ASSERTION_FUNCS)
    logger.info("Default match mode set to %r", mode)


def get_default_mode() -> str:
    """Return the current default operation mode."""
    return _DEFAULT_MODE


def load_default_assertion_funcs() -> AssertionFuncs:
    """
    Return the default leaf primitives, installing the built-in fallback
    for any that have not been registered.
    """
    global _DEFAULT_ASSERTION_FUNCS
    with _DEFAULTS_LOCK:
        if not _DEFAULT_ASSERTION_FUNCS.complete:
            _DEFAULT_ASSERTION_FUNCS = _DEFAULT_ASSERTION_FUNCS.merged_over(
                FALLBACK_ASSERTION_FUNCS
            )
            logger.debug("Installed built-in leaf primitives")
        return _DEFAULT_ASSERTION_FUNCS


def reset_defaults() -> None:
    """Restore the initial defaults (for testing)."""
    global _DEFAULT_MODE, _DEFAULT_ASSERTION_FUNCS
    with _DEFAULTS_LOCK:
        _DEFAULT_MODE = "check"
        _DEFAULT_ASSERTION_FUNCS = AssertionFuncs()


# =============================================================================
# Context Initialisation
# =============================================================================


def init_context(options: Any = None, **overrides: Any) -> MatchContext:
    """
    Build a fresh MatchContext for one top-level call.

    Args:
        options: Mapping of options, a MatchContext (when a matcher function
            starts a nested call), or None.
        **overrides: Options given as keywords; these win over options.

    Returns:
        A new MatchContext. Placeholders start unresolved unless the caller
        supplied a value for them.

    Raises:
        ConfigError: If the options are invalid.
    """
    if isinstance(options, MatchContext):
        options = options.as_options()
    if options is not None and not isinstance(options, Mapping):
        raise ConfigError(
            f"Match options must be a mapping, got {type(options).__name__}: {options!r}"
        )

    merged = _prepare_options({**(options or {}), **overrides})
    validate_options(merged)

    defaults = load_default_assertion_funcs()
    funcs = AssertionFuncs.from_mapping(merged.get("assertion_funcs") or {})

    return MatchContext(
        path=merged.get("path", ROOT_PATH),
        funcmode=merged.get("funcmode", "value"),
        mode=merged.get("mode", _DEFAULT_MODE),
        symbols=normalize_symbols(merged.get("symbols")),
        assertion_funcs=funcs.merged_over(defaults),
    )
