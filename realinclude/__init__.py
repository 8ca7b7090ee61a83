# realinclude/__init__.py
"""
realinclude public API surface.

Deep structural inclusion for test assertions:

    - Matching: match_inclusion, match_array_inclusion
      (aliases: assert_real_include, assert_real_array_include)
    - Defaults: set_default_mode, get_default_mode, reset_defaults
    - Placeholders: Placeholder, ABSENT, SymbolBinding
    - Context: MatchContext, init_context, AssertionFuncs
    - Errors: IncludeError, ConfigError, InternalMatchError,
              MatchAssertionError

Example:

    from realinclude import Placeholder, match_inclusion

    assert match_inclusion({"id": 7, "tags": ["x", "y"]}, {"tags": ["y"]})

    owner = Placeholder("owner")
    match_inclusion(
        {"users": {"u1": {}}, "owner": "u1"},
        {"users": {owner: {}}, "owner": owner},
        symbols={owner: {}},
        mode="assert",
    )
"""

from __future__ import annotations

from .config import (
    OPTIONS_SCHEMA,
    get_default_mode,
    init_context,
    reset_defaults,
    set_default_mode,
    validate_options,
)
from .context import MatchContext
from .errors import (
    ConfigError,
    IncludeError,
    InternalMatchError,
    MatchAssertionError,
)
from .include import match_array_inclusion, match_inclusion
from .placeholder import ABSENT, Placeholder, SymbolBinding
from .primitives import AssertionFuncs

# Assertion-style aliases
assert_real_include = match_inclusion
assert_real_array_include = match_array_inclusion

__all__ = [
    "ABSENT",
    "AssertionFuncs",
    "ConfigError",
    "IncludeError",
    "InternalMatchError",
    "MatchAssertionError",
    "MatchContext",
    "OPTIONS_SCHEMA",
    "Placeholder",
    "SymbolBinding",
    "assert_real_array_include",
    "assert_real_include",
    "get_default_mode",
    "init_context",
    "match_array_inclusion",
    "match_inclusion",
    "reset_defaults",
    "set_default_mode",
    "validate_options",
]
