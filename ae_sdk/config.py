"""
SDK configuration: node endpoint, retry/timeouts and registrar rules.

- Loads sane defaults and supports overrides via environment variables (AE_*).
- Provides helpers for building HTTP headers and validating endpoints.

Nothing in the offline core reads the environment on its own; builders take
their inputs as arguments and only the name suffix list and default fee/ttl
are consulted when a caller passes a config explicitly.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from .version import user_agent

_DEFAULT_NODE = "http://127.0.0.1:3013"
_DEFAULT_SUFFIXES: Tuple[str, ...] = ("test", "aet")

DEFAULT_FEE = 20000
DEFAULT_TTL = 0


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    v = os.getenv(name)
    return v if v is not None else default


def _ensure_scheme(url: Optional[str], allowed: tuple[str, ...]) -> Optional[str]:
    if not url:
        return url
    lower = url.lower()
    if not any(lower.startswith(f"{sch}://") for sch in allowed):
        raise ValueError(f"URL must start with {allowed}, got: {url!r}")
    return url


def _parse_suffixes(val: Any) -> Tuple[str, ...]:
    """Accepts a comma-separated string or an iterable; strips dots and blanks."""
    if val is None or val == "":
        return _DEFAULT_SUFFIXES
    items = val.split(",") if isinstance(val, str) else list(val)
    if not all(isinstance(s, str) for s in items):
        raise ValueError(f"name_suffixes entries must be strings, got: {items!r}")
    out = tuple(c for c in (s.strip().lower().lstrip(".") for s in items) if c)
    if not out:
        raise ValueError("name_suffixes must not be empty")
    return out


@dataclass(slots=True)
class SDKConfig:
    # Remote authority (node HTTP API)
    node_url: str = field(default_factory=lambda: _DEFAULT_NODE)
    request_timeout: float = 10.0
    max_retries: int = 3
    backoff_base: float = 0.25
    user_agent: str = field(default_factory=user_agent)
    # Registrar rules
    name_suffixes: Tuple[str, ...] = _DEFAULT_SUFFIXES
    # Transaction defaults
    default_fee: int = DEFAULT_FEE
    default_ttl: int = DEFAULT_TTL

    @classmethod
    def from_env(cls, prefix: str = "AE_") -> "SDKConfig":
        """
        Create config from environment variables:

        AE_NODE_URL         (http/https)
        AE_TIMEOUT          (float seconds, HTTP)
        AE_MAX_RETRIES      (int)
        AE_BACKOFF          (float seconds, first retry delay)
        AE_USER_AGENT       (str)
        AE_NAME_SUFFIXES    (comma separated, e.g. "test,aet")
        AE_DEFAULT_FEE      (int)
        AE_DEFAULT_TTL      (int)
        """
        node = _env(f"{prefix}NODE_URL", _DEFAULT_NODE)
        _ensure_scheme(node, ("http", "https"))
        return cls(
            node_url=(node or _DEFAULT_NODE).rstrip("/"),
            request_timeout=float(_env(f"{prefix}TIMEOUT", "10.0")),
            max_retries=int(_env(f"{prefix}MAX_RETRIES", "3")),
            backoff_base=float(_env(f"{prefix}BACKOFF", "0.25")),
            user_agent=_env(f"{prefix}USER_AGENT", None) or user_agent(),
            name_suffixes=_parse_suffixes(_env(f"{prefix}NAME_SUFFIXES", None)),
            default_fee=int(_env(f"{prefix}DEFAULT_FEE", str(DEFAULT_FEE))),
            default_ttl=int(_env(f"{prefix}DEFAULT_TTL", str(DEFAULT_TTL))),
        )

    @classmethod
    def with_overrides(cls, base: Optional["SDKConfig"] = None, **overrides: Any) -> "SDKConfig":
        """
        Build from an existing config plus keyword overrides.
        Unknown keys are ignored.
        """
        base = base or cls.from_env()
        data = base.to_dict()
        data.update({k: v for k, v in overrides.items() if k in data})
        if "node_url" in overrides:
            _ensure_scheme(data["node_url"], ("http", "https"))
            data["node_url"] = data["node_url"].rstrip("/")
        data["name_suffixes"] = _parse_suffixes(data["name_suffixes"])
        return cls(**data)

    def http_headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "User-Agent": self.user_agent,
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "node_url": self.node_url,
            "request_timeout": float(self.request_timeout),
            "max_retries": int(self.max_retries),
            "backoff_base": float(self.backoff_base),
            "user_agent": self.user_agent,
            "name_suffixes": list(self.name_suffixes),
            "default_fee": int(self.default_fee),
            "default_ttl": int(self.default_ttl),
        }


__all__ = ["SDKConfig", "DEFAULT_FEE", "DEFAULT_TTL"]
