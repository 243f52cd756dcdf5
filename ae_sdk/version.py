"""
Version helpers for the ae_sdk package.

A static __version__ (PEP 440) plus the user-agent string the HTTP client
sends to nodes.
"""

from __future__ import annotations

from typing import Tuple

# Bump this when publishing
__version__ = "0.1.0"


def version_tuple() -> Tuple[int, ...]:
    """Numeric release segment, e.g. (0, 1, 0)."""
    parts = []
    for piece in __version__.split("."):
        digits = "".join(ch for ch in piece if ch.isdigit())
        if not digits:
            break
        parts.append(int(digits))
    return tuple(parts)


def user_agent() -> str:
    return f"ae-sdk-py/{__version__}"


__all__ = ["__version__", "version_tuple", "user_agent"]
