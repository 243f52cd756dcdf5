"""
Typed error classes for the SDK.

Design goals
------------
- One root `AeSdkError` with a machine-friendly `code` and optional `data`.
- Concrete subclasses for each failure mode of transaction construction:
  parameter validation, identifier decoding, name rules, encoder/schema drift,
  and the remote node collaborator.
- Safe JSON representation (`to_dict`) suitable for logs.
- Every error raised by the offline core is deterministic and permanent
  (`retryable=False`); only `RpcError` may be retryable.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional

__all__ = [
    "ErrorCode",
    "AeSdkError",
    "ValidationError",
    "DecodeError",
    "InvalidNameError",
    "EncodingInvariantError",
    "RpcError",
]


class ErrorCode(str, Enum):
    VALIDATION = "TX/VALIDATION"
    DECODE = "ID/DECODE"
    INVALID_NAME = "NAME/INVALID"
    ENCODING_INVARIANT = "ENCODING/INVARIANT"
    RPC = "RPC/ERROR"


@dataclass(eq=False)
class AeSdkError(Exception):
    """
    Root error for the SDK.

    Attributes
    ----------
    code: str
        Machine-stable error code (see ErrorCode).
    message: str
        Human hint suitable for logs.
    data: dict
        Optional machine data (field names, offending values). JSON-serializable.
    retryable: bool
        Whether the operation may succeed on retry without changing inputs.
    """

    code: str
    message: str
    data: Dict[str, Any] = field(default_factory=dict)
    retryable: bool = False

    def __post_init__(self) -> None:
        super().__init__(f"{self.code}: {self.message}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": str(self.code.value if isinstance(self.code, Enum) else self.code),
            "message": self.message,
            "data": _jsonmap(self.data),
            "retryable": self.retryable,
        }

    def __str__(self) -> str:  # pragma: no cover - human formatting
        code = self.code.value if isinstance(self.code, Enum) else self.code
        parts = [f"{code}: {self.message}"]
        if self.data:
            preview = ", ".join(f"{k}={_preview(v)}" for k, v in self.data.items())
            parts.append(f"[{preview}]")
        return " ".join(parts)


class ValidationError(AeSdkError):
    """A required parameter is missing, mistyped, or outside its declared bounds."""

    def __init__(self, message: str = "invalid parameter", *, field: Optional[str] = None, **data: Any) -> None:
        if field is not None:
            data = {"field": field, **data}
        super().__init__(code=ErrorCode.VALIDATION, message=message, data=_jsonmap(data))

    @property
    def field(self) -> Optional[str]:
        return self.data.get("field")


class DecodeError(AeSdkError, ValueError):
    """Malformed, unknown-prefix, wrong-length or checksum-failing identifier text."""

    def __init__(self, message: str = "cannot decode identifier", *, field: Optional[str] = None, **data: Any) -> None:
        if field is not None:
            data = {"field": field, **data}
        super().__init__(code=ErrorCode.DECODE, message=message, data=_jsonmap(data))

    @property
    def field(self) -> Optional[str]:
        return self.data.get("field")

    def for_field(self, field: str) -> "DecodeError":
        """Return a copy that names the parameter the bad identifier came from."""
        data = {k: v for k, v in self.data.items() if k != "field"}
        return DecodeError(self.message, field=field, **data)


class InvalidNameError(AeSdkError):
    """A name fails normalization or the registrar's charset/suffix rules."""

    def __init__(self, message: str = "invalid name", *, name: Optional[str] = None, **data: Any) -> None:
        if name is not None:
            data = {"name": name, **data}
        super().__init__(code=ErrorCode.INVALID_NAME, message=message, data=_jsonmap(data))


class EncodingInvariantError(AeSdkError):
    """
    The binary encoder was handed a field list that does not match its
    (tag, version) schema. Indicates a bug in a builder, never a user error.
    """

    def __init__(self, message: str = "field list does not match schema", **data: Any) -> None:
        super().__init__(code=ErrorCode.ENCODING_INVARIANT, message=message, data=_jsonmap(data))


class RpcError(AeSdkError):
    """Raised when the remote node rejects a request or cannot be reached."""

    def __init__(
        self,
        message: str = "node request failed",
        *,
        status: Optional[int] = None,
        path: Optional[str] = None,
        retryable: bool = False,
        **data: Any,
    ) -> None:
        extra: Dict[str, Any] = {}
        if status is not None:
            extra["status"] = status
        if path is not None:
            extra["path"] = path
        super().__init__(
            code=ErrorCode.RPC,
            message=message,
            data=_jsonmap({**extra, **data}),
            retryable=retryable,
        )

    @property
    def status(self) -> Optional[int]:
        return self.data.get("status")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _jsonmap(data: Mapping[str, Any]) -> Dict[str, Any]:
    return {k: _coerce_json(v) for k, v in data.items()}


def _coerce_json(v: Any) -> Any:
    # Keep JSON primitives; stringify the rest; hex-encode bytes.
    if v is None or isinstance(v, (bool, int, float, str, list, dict)):
        return v
    if isinstance(v, (bytes, bytearray)):
        return v.hex()
    return str(v)


def _preview(v: Any, limit: int = 96) -> str:
    s = str(_coerce_json(v))
    return s if len(s) <= limit else s[:limit] + "…"
