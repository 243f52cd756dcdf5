from __future__ import annotations

"""
HTTP JSON client (sync) for a node's REST API.

- Built on httpx; an already-configured `httpx.Client` (for instance a test
  client bound to an in-process app) may be injected. Accept, User-Agent and
  any extra headers are sent on every request, injected client or not.
- Retries transient transport failures and HTTP 429/502/503/504 with
  jittered exponential backoff.
- Any other non-2xx answer raises `RpcError` carrying status, path and the
  node's `reason`.

Example:
    from ae_sdk.rpc.http import NodeClient
    with NodeClient("http://localhost:3013") as node:
        account = node.get("/v2/accounts/ak_...")
        print(account["nonce"])
"""

import json
import logging
import random
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Union

import httpx

from ..config import SDKConfig
from ..errors import RpcError
from ..version import user_agent

log = logging.getLogger(__name__)

JSON = Union[dict, list, str, int, float, bool, None]


def _is_retriable_http(status: int) -> bool:
    # Typical transient HTTP statuses: 429/502/503/504
    return status in (429, 502, 503, 504)


def _jitter_backoff(base: float, factor: float, attempt: int, jitter: float) -> float:
    # Exponential backoff with jitter in [0, jitter]
    return base * (factor ** max(attempt - 1, 0)) + random.random() * jitter


class _Transient(Exception):
    """Internal marker for a retryable HTTP status."""

    def __init__(self, response: httpx.Response) -> None:
        super().__init__(f"HTTP {response.status_code}")
        self.response = response


@dataclass
class NodeClient:
    """Synchronous JSON client for a node's HTTP API."""

    url: str
    timeout: float = 30.0
    max_retries: int = 3
    backoff_base: float = 0.15
    backoff_factor: float = 1.8
    backoff_jitter: float = 0.2
    headers: Optional[Mapping[str, str]] = None
    client: Optional[httpx.Client] = None
    _owns_client: bool = field(init=False, default=False)
    _headers: Dict[str, str] = field(init=False, default_factory=dict)

    def __post_init__(self) -> None:
        self.url = self.url.rstrip("/")
        merged_headers: Dict[str, str] = {
            "Accept": "application/json",
            "User-Agent": user_agent(),
        }
        if self.headers:
            merged_headers.update(dict(self.headers))
        # Content-Type is set per request, only when there is a body.
        self._headers = {k: v for k, v in merged_headers.items() if k.lower() != "content-type"}
        if self.client is None:
            self.client = httpx.Client(timeout=self.timeout, headers=self._headers)
            self._owns_client = True

    @classmethod
    def from_config(cls, config: Optional[SDKConfig] = None, **kwargs: Any) -> "NodeClient":
        cfg = config or SDKConfig.from_env()
        return cls(
            url=cfg.node_url,
            timeout=cfg.request_timeout,
            max_retries=cfg.max_retries,
            backoff_base=cfg.backoff_base,
            headers=cfg.http_headers(),
            **kwargs,
        )

    # --- context manager -------------------------------------------------

    def __enter__(self) -> "NodeClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
        self.close()

    def close(self) -> None:
        if self._owns_client and self.client is not None:
            self.client.close()

    # --- public API ------------------------------------------------------

    def get(self, path: str, params: Optional[Mapping[str, Any]] = None) -> JSON:
        return self._request("GET", path, params=params)

    def post(self, path: str, body: Optional[Mapping[str, Any]] = None) -> JSON:
        return self._request("POST", path, body=body)

    # --- internals -------------------------------------------------------

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Mapping[str, Any]] = None,
        body: Optional[Mapping[str, Any]] = None,
    ) -> JSON:
        url = f"{self.url}/{path.lstrip('/')}"
        last_exc: Optional[Exception] = None
        for attempt in range(1, self.max_retries + 2):  # N retries -> N+1 attempts
            try:
                return self._send_once(method, url, path, params, body)
            except (httpx.TimeoutException, httpx.NetworkError, _Transient) as e:
                last_exc = e
                if attempt > self.max_retries:
                    break
                delay = _jitter_backoff(self.backoff_base, self.backoff_factor, attempt, self.backoff_jitter)
                log.warning(
                    "node request failed, retrying",
                    extra={"path": path, "attempt": attempt, "delay": round(delay, 3), "error": str(e)},
                )
                time.sleep(delay)

        if isinstance(last_exc, _Transient):
            raise RpcError(
                _reason(last_exc.response),
                status=last_exc.response.status_code,
                path=path,
                retryable=True,
            )
        raise RpcError("node transport failed", path=path, retryable=True, error=str(last_exc))

    def _request_headers(self, has_body: bool) -> Dict[str, str]:
        # Sent on every request so an injected client carries them too.
        headers = dict(self._headers)
        if has_body:
            headers["Content-Type"] = "application/json"
        return headers

    def _send_once(
        self,
        method: str,
        url: str,
        path: str,
        params: Optional[Mapping[str, Any]],
        body: Optional[Mapping[str, Any]],
    ) -> JSON:
        content = None if body is None else json.dumps(body, separators=(",", ":"), ensure_ascii=False)
        r = self.client.request(
            method,
            url,
            params=dict(params) if params else None,
            content=content,
            headers=self._request_headers(content is not None),
        )
        if _is_retriable_http(r.status_code):
            raise _Transient(r)
        if r.status_code >= 400:
            raise RpcError(_reason(r), status=r.status_code, path=path)
        try:
            return r.json()
        except ValueError as e:
            raise RpcError(
                "non-JSON response from node",
                status=r.status_code,
                path=path,
                body=r.text[:256],
            ) from e


def _reason(r: httpx.Response) -> str:
    try:
        data = r.json()
    except ValueError:
        return f"HTTP {r.status_code}: {r.text[:256]}"
    if isinstance(data, dict):
        for key in ("reason", "detail", "message"):
            if isinstance(data.get(key), str):
                return data[key]
    return f"HTTP {r.status_code}"


__all__ = ["NodeClient"]
