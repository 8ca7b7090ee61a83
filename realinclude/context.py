"""
MatchContext: per-call matching state.

A context is created by config.init_context() at every public entry point,
mutated while the matchers descend (path, placeholder bindings) and thrown
away when the call returns. Matcher functions receive the live context as
their second argument.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from realinclude.placeholder import Placeholder, SymbolBinding
from realinclude.primitives import AssertionFuncs


ROOT_PATH = "$"

MODES = ("check", "assert")
FUNCMODES = ("value", "matcher")


@dataclass
class MatchContext:
    """
    Attributes:
        path: Dot-delimited location being compared, starting at ROOT_PATH.
        funcmode: "value" (callables are literal expected values) or
            "matcher" (callables are predicates).
        mode: "check" (return False on mismatch) or "assert" (raise).
        symbols: Placeholder resolution table for this call.
        assertion_funcs: Leaf primitives used for this call.
    """

    path: str = ROOT_PATH
    funcmode: str = "value"
    mode: str = "check"
    symbols: dict[Placeholder, SymbolBinding] = field(default_factory=dict)
    assertion_funcs: AssertionFuncs = field(default_factory=AssertionFuncs)

    def binding(self, token: Placeholder) -> SymbolBinding:
        return self.symbols[token]

    def resolved_symbols(self) -> dict[Placeholder, Any]:
        """Return the placeholders bound so far and their values."""
        return {
            token: binding.value
            for token, binding in self.symbols.items()
            if binding.resolved
        }

    def as_options(self) -> dict[str, Any]:
        """
        Options for starting a nested call from inside a matcher function.

        The nested call starts at the current path with the same modes,
        resolvers and primitives, but with unresolved placeholders.
        """
        return {
            "path": self.path,
            "funcmode": self.funcmode,
            "mode": self.mode,
            "symbols": {
                token: {"matcher": binding.matcher}
                for token, binding in self.symbols.items()
            },
            "assertion_funcs": self.assertion_funcs,
        }


def join_path(path: str, segment: Any) -> str:
    """Extend a path by one key or index."""
    return f"{path}.{segment}"
