"""
Exception hierarchy for realinclude.

Structural and leaf failures are carried as results while matching and only
become exceptions at the top-level boundary (assert mode). The classes here
cover the errors that are always raised, whatever the requested mode, plus
the built-in failure signal used when no testing library primitives have
been injected.
"""

from __future__ import annotations


class IncludeError(Exception):
    """Base class for every error raised by realinclude."""


class ConfigError(IncludeError, ValueError):
    """Invalid options, default mode, or leaf primitive. Never swallowed."""


class InternalMatchError(IncludeError, RuntimeError):
    """An internal invariant was violated (e.g. property lookup on a scalar)."""


class MatchAssertionError(IncludeError, AssertionError):
    """Failure signal raised by the built-in leaf primitives."""
