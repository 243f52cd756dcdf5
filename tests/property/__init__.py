"""
tests.property package bootstrap.

Registers the Hypothesis profiles used by the property suites and selects
one from HYPOTHESIS_PROFILE, else "ci" when CI is set, else "dev".

Usage in tests:
    from tests.property import st, given

    @given(st.binary(min_size=1, max_size=64))
    def test_something(b):
        ...
"""
from __future__ import annotations

import os
from typing import Final

from hypothesis import HealthCheck, Verbosity, given, settings
from hypothesis import strategies as st

settings.register_profile(
    "dev",
    settings(
        max_examples=100,
        deadline=None,
        suppress_health_check=(HealthCheck.too_slow, HealthCheck.filter_too_much),
        verbosity=Verbosity.normal,
    ),
)

settings.register_profile(
    "ci",
    settings(
        max_examples=300,
        deadline=None,
        suppress_health_check=(HealthCheck.too_slow, HealthCheck.filter_too_much),
        verbosity=Verbosity.verbose,
        derandomize=True,
    ),
)

settings.register_profile("fast", settings(max_examples=25, deadline=None))


def _env_truthy(name: str) -> bool:
    v = os.getenv(name)
    return (v or "").lower() not in ("", "0", "false", "no", "off")


_active: Final[str] = os.getenv("HYPOTHESIS_PROFILE") or ("ci" if _env_truthy("CI") else "dev")
settings.load_profile(_active)


def key32():
    """Strategy for 32-byte public keys and hashes."""
    return st.binary(min_size=32, max_size=32)


__all__ = ["st", "given", "key32"]
