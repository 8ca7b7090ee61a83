"""
Pytest configuration for realinclude tests.

Provides:
- Reset of the process-wide default mode and leaf primitives around each test
- Shared test utilities (assert_both_modes)
- Hypothesis configuration for deterministic fuzzing
"""

import os

import pytest
from hypothesis import settings

from realinclude import reset_defaults


# =============================================================================
# Hypothesis Configuration
# =============================================================================
# print_blob=True makes failures easy to reproduce.
# Select a profile with HYPOTHESIS_PROFILE (default, ci).

settings.register_profile(
    "default",
    print_blob=True,
    derandomize=False,
)

settings.register_profile(
    "ci",
    print_blob=True,
    derandomize=True,
    max_examples=500,
)

settings.load_profile(os.environ.get("HYPOTHESIS_PROFILE", "default"))


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def clean_defaults():
    """Each test starts and ends with the initial default mode."""
    reset_defaults()
    yield
    reset_defaults()


# =============================================================================
# Shared Test Utilities
# =============================================================================


def assert_both_modes(run, matches: bool):
    """
    Run one match in assert mode and in check mode and verify they agree.

    Args:
        run: Callable taking the mode ("assert" or "check") and returning
            the result of a match call.
        matches: Whether the match is expected to succeed.
    """
    if matches:
        assert run("assert") is True
        assert run("check") is True
    else:
        with pytest.raises(AssertionError):
            run("assert")
        assert run("check") is False
