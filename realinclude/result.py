"""
Match results.

Matching functions return either MATCHED or a Mismatch describing the first
failure found. Nothing is raised while descending; the public entry points
decide at the end whether a Mismatch becomes False or an exception.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from realinclude.errors import MatchAssertionError


# Sentinel for a successful match
class _Matched:
    """Sentinel indicating the expected shape was found."""
    __slots__ = ()

    def __repr__(self) -> str:
        return "MATCHED"


MATCHED = _Matched()


@dataclass(frozen=True)
class Mismatch:
    """
    The first failure found while matching.

    Attributes:
        message: Human readable, path-qualified description.
        path: Location of the failure, e.g. "$.users.0.name".
        error: Exception raised by the leaf primitive or user code that
            signalled the failure, if any.
    """

    message: str
    path: str
    error: BaseException | None = None

    def to_exception(self) -> BaseException:
        """Return the exception to raise for this failure in assert mode."""
        if self.error is not None:
            return self.error
        return MatchAssertionError(self.message)


MatchResult = Union[_Matched, Mismatch]
