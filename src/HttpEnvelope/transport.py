"""HTTPX-backed transport collaborator.

Responsibilities
----------------
- Execute a fully resolved request (method, URI, headers, body) and report
  status, headers and raw body as a :class:`TransportResult`.
- Assign every request a UUID4 identifier that the response envelope keeps
  as its identity.
- Report curl-style metadata in the info map (``url``, ``http_code``,
  ``total_time``, ``redirect_count``, ``http_version``, ``method``,
  ``content_type``, ``size_download``).
- Translate :class:`httpx.HTTPError` into :class:`TransportError`.

Tests inject an :class:`httpx.MockTransport` through ``client=`` or
``transport=`` instead of touching the network.
"""

from __future__ import annotations

import logging
import ssl
import time
import uuid
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Optional, Protocol, Union

import certifi
import httpx

from HttpEnvelope.errors import TransportError
from HttpEnvelope.settings import HttpSettings

__all__ = [
    "HttpxTransport",
    "Transport",
    "TransportResult",
    "result_from_httpx",
]

LOGGER = logging.getLogger(__name__)

Body = Union[bytes, str, None]


@dataclass(frozen=True)
class TransportResult:
    """Raw outcome of one executed request."""

    request_id: str
    info: Mapping[str, Any]
    headers: tuple[tuple[str, str], ...] = ()
    payload: Optional[bytes] = None


class Transport(Protocol):
    """Capability that performs the actual network I/O."""

    def execute(
        self,
        method: str,
        uri: str,
        headers: Optional[Mapping[str, str]] = None,
        body: Body = None,
    ) -> TransportResult:
        """Execute a request or raise :class:`TransportError`."""
        ...


def _build_ssl_context() -> ssl.SSLContext:
    context = ssl.create_default_context()
    context.load_verify_locations(certifi.where())
    return context


def result_from_httpx(
    response: httpx.Response,
    request_id: str,
    *,
    method: Optional[str] = None,
    total_time: Optional[float] = None,
) -> TransportResult:
    """Convert a read :class:`httpx.Response` into a :class:`TransportResult`.

    ``total_time`` is the caller's measured duration in seconds. Without it
    the response's own ``elapsed`` is used, when HTTPX recorded one.
    """

    try:
        request: Optional[httpx.Request] = response.request
    except RuntimeError:
        request = None
    if total_time is None:
        try:
            total_time = response.elapsed.total_seconds()
        except RuntimeError:
            total_time = None

    content = response.content
    info: dict[str, Any] = {
        "url": str(request.url) if request is not None else None,
        "http_code": response.status_code,
        "http_version": response.http_version,
        "method": method or (request.method if request is not None else None),
        "total_time": total_time,
        "redirect_count": len(response.history),
        "content_type": response.headers.get("content-type"),
        "size_download": len(content),
    }
    return TransportResult(
        request_id=request_id,
        info=info,
        headers=tuple(response.headers.multi_items()),
        payload=content or None,
    )


class HttpxTransport:
    """Transport executing requests through a shared :class:`httpx.Client`.

    Args:
        settings: HTTP settings used when building the client.
        client: Pre-built client; takes precedence over ``transport``.
        transport: Low-level HTTPX transport (e.g. ``httpx.MockTransport``).
    """

    def __init__(
        self,
        settings: Optional[HttpSettings] = None,
        *,
        client: Optional[httpx.Client] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.settings = settings or HttpSettings()
        self._owns_client = client is None
        self._client = client or self._build_client(transport)

    def _build_client(self, transport: Optional[httpx.BaseTransport]) -> httpx.Client:
        cfg = self.settings
        timeout = httpx.Timeout(
            cfg.timeout_connect,
            read=cfg.timeout_read,
            write=cfg.timeout_write,
            pool=cfg.timeout_pool,
        )
        client = httpx.Client(
            transport=transport,
            timeout=timeout,
            verify=_build_ssl_context() if cfg.verify_tls else False,
            headers={"User-Agent": cfg.user_agent},
            follow_redirects=cfg.follow_redirects,
        )
        LOGGER.debug(
            "HTTPX client created",
            extra={
                "extra_fields": {
                    "verify_tls": cfg.verify_tls,
                    "follow_redirects": cfg.follow_redirects,
                }
            },
        )
        return client

    @property
    def client(self) -> httpx.Client:
        return self._client

    def execute(
        self,
        method: str,
        uri: str,
        headers: Optional[Mapping[str, str]] = None,
        body: Body = None,
    ) -> TransportResult:
        request_id = str(uuid.uuid4())
        method = method.upper()
        start_time = time.perf_counter()
        try:
            response = self._client.request(
                method,
                uri,
                headers=dict(headers or {}),
                content=body,
            )
        except httpx.HTTPError as exc:
            LOGGER.warning(
                "HTTP transport failure",
                extra={
                    "extra_fields": {
                        "request_id": request_id,
                        "method": method,
                        "url": uri,
                        "error": str(exc),
                    }
                },
            )
            raise TransportError(
                f"{method} {uri} failed: {exc}", method=method, url=uri
            ) from exc
        elapsed = time.perf_counter() - start_time
        return result_from_httpx(response, request_id, method=method, total_time=elapsed)

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "HttpxTransport":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
