"""Request builder composing path resolution, transport, and envelopes.

Example:
    >>> from HttpEnvelope.client import RestClient
    >>> with RestClient("https://api.example.com") as api:  # doctest: +SKIP
    ...     response = api.get("/item/:item_id.json", {"item_id": 1234, "sort": "name"})
    ...     response.status(), response.decode()
"""

from __future__ import annotations

import json as jsonlib
import logging
from collections.abc import Mapping
from typing import Any, Optional

from HttpEnvelope.decoding import JSON_CONTENT_TYPE, ContentDecoder
from HttpEnvelope.paths import ParamsLike, resolve_url
from HttpEnvelope.response import ResponseEnvelope
from HttpEnvelope.settings import Settings, get_settings
from HttpEnvelope.transport import Body, HttpxTransport, Transport

__all__ = ["RestClient"]

LOGGER = logging.getLogger(__name__)

_UNSET: Any = object()


class RestClient:
    """Builds requests from path templates and wraps responses in envelopes.

    Args:
        base_url: Prefix for every resolved path; falls back to
            ``settings.http.base_url``.
        transport: Transport collaborator; defaults to :class:`HttpxTransport`.
        settings: Settings; defaults to :func:`get_settings`.
        headers: Headers sent with every request.
        logger: Logger handed to each envelope for decode diagnostics.
        decoder: Content decoder handed to each envelope.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        transport: Optional[Transport] = None,
        settings: Optional[Settings] = None,
        headers: Optional[Mapping[str, str]] = None,
        logger: Optional[logging.Logger] = None,
        decoder: Optional[ContentDecoder] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.base_url = base_url or self.settings.http.base_url
        self._owns_transport = transport is None
        self.transport: Transport = transport or HttpxTransport(self.settings.http)
        self.headers = dict(headers or {})
        self.logger = logger or LOGGER
        self.decoder = decoder or ContentDecoder(
            default_type=self.settings.decode.default_content_type
        )

    def build_url(self, template: str, params: Optional[ParamsLike] = None) -> str:
        """Resolve ``template`` and join it to the base URL unless it is absolute."""

        return resolve_url(self.base_url, template, params)

    def request(
        self,
        method: str,
        template: str,
        params: Optional[ParamsLike] = None,
        *,
        headers: Optional[Mapping[str, str]] = None,
        body: Body = None,
        json: Any = _UNSET,
    ) -> ResponseEnvelope:
        """Resolve, execute, and wrap one request.

        Raises:
            MissingParameterError: A path placeholder has no parameter.
            TransportError: The transport failed to execute the request.
            ValueError: Both ``body`` and ``json`` were supplied.
        """

        url = self.build_url(template, params)
        merged = {**self.headers, **dict(headers or {})}
        if json is not _UNSET:
            if body is not None:
                raise ValueError("Pass either body or json, not both")
            body = jsonlib.dumps(json).encode("utf-8")
            if not any(key.lower() == "content-type" for key in merged):
                merged["Content-Type"] = JSON_CONTENT_TYPE

        result = self.transport.execute(method.upper(), url, merged, body)
        envelope = ResponseEnvelope.from_result(result, logger=self.logger, decoder=self.decoder)
        self.logger.debug(
            "HTTP request completed",
            extra={
                "extra_fields": {
                    "request_id": envelope.id,
                    "method": method.upper(),
                    "url": url,
                    "status": envelope.status(),
                    "content_type": envelope.content_type(),
                }
            },
        )
        return envelope

    def get(self, template: str, params: Optional[ParamsLike] = None, **kwargs: Any) -> ResponseEnvelope:
        return self.request("GET", template, params, **kwargs)

    def head(self, template: str, params: Optional[ParamsLike] = None, **kwargs: Any) -> ResponseEnvelope:
        return self.request("HEAD", template, params, **kwargs)

    def post(self, template: str, params: Optional[ParamsLike] = None, **kwargs: Any) -> ResponseEnvelope:
        return self.request("POST", template, params, **kwargs)

    def put(self, template: str, params: Optional[ParamsLike] = None, **kwargs: Any) -> ResponseEnvelope:
        return self.request("PUT", template, params, **kwargs)

    def patch(self, template: str, params: Optional[ParamsLike] = None, **kwargs: Any) -> ResponseEnvelope:
        return self.request("PATCH", template, params, **kwargs)

    def delete(self, template: str, params: Optional[ParamsLike] = None, **kwargs: Any) -> ResponseEnvelope:
        return self.request("DELETE", template, params, **kwargs)

    def close(self) -> None:
        if self._owns_transport and isinstance(self.transport, HttpxTransport):
            self.transport.close()

    def __enter__(self) -> "RestClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
