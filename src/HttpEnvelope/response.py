# === NAVMAP v1 ===
# {
#   "module": "HttpEnvelope.response",
#   "purpose": "Immutable response envelope with typed accessors",
#   "sections": [
#     {
#       "id": "urlparts",
#       "name": "UrlParts",
#       "anchor": "class-urlparts",
#       "kind": "class"
#     },
#     {
#       "id": "responseenvelope",
#       "name": "ResponseEnvelope",
#       "anchor": "class-responseenvelope",
#       "kind": "class"
#     }
#   ]
# }
# === /NAVMAP ===

"""Response envelope bundling transport metadata, headers, and payload.

Responsibilities
----------------
- Hold the transport-reported info map (final URL, ``http_code``, timings),
  the response headers (names lower-cased, last value wins) and the raw
  payload of one request.
- Parse ``Content-Type`` once at construction and expose the facets through
  ``mime_*`` accessors and :meth:`ResponseEnvelope.content_type`.
- Decode the payload on demand through :mod:`HttpEnvelope.decoding`.
- Render the response back into HTTP/1.x message framing for debug logs.

Design Notes
------------
- Envelopes never change after construction, so concurrent readers need
  no locking. Info and header maps are exposed as read-only proxies.
- Collaborators (logger, decoder) are passed in rather than inherited.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import asdict, dataclass, fields
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Optional, Union
from urllib.parse import urlsplit

from HttpEnvelope.decoding import DEFAULT_DECODER, ContentDecoder, decode_json
from HttpEnvelope.mime import MimeType, parse_mime_type
from HttpEnvelope.transport import TransportResult, result_from_httpx

if TYPE_CHECKING:
    import httpx

__all__ = ("ResponseEnvelope", "UrlParts")

LOGGER = logging.getLogger(__name__)

EOL = "\r\n"

Payload = Union[bytes, str, None]
HeadersLike = Union[Mapping[str, str], Iterable[tuple[str, str]]]


@dataclass(frozen=True)
class UrlParts:
    """Decomposed request URL; absent components are ``None``."""

    scheme: Optional[str] = None
    host: Optional[str] = None
    port: Optional[int] = None
    path: Optional[str] = None
    query: Optional[str] = None
    fragment: Optional[str] = None
    user: Optional[str] = None

    @classmethod
    def parse(cls, url: Optional[str]) -> "UrlParts":
        if not url:
            return cls()
        parts = urlsplit(url)
        try:
            port = parts.port
        except ValueError:
            port = None
        return cls(
            scheme=parts.scheme or None,
            host=parts.hostname,
            port=port,
            path=parts.path or None,
            query=parts.query or None,
            fragment=parts.fragment or None,
            user=parts.username,
        )

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


URL_PARTS = tuple(item.name for item in fields(UrlParts))


def _normalize_headers(headers: Optional[HeadersLike]) -> dict[str, str]:
    if headers is None:
        return {}
    pairs = headers.items() if isinstance(headers, Mapping) else headers
    normalized: dict[str, str] = {}
    for name, value in pairs:
        normalized[str(name).lower()] = value
    return normalized


class ResponseEnvelope:
    """Immutable bundle of one response's metadata, headers, and body.

    Args:
        request_id: Identifier assigned by the transport collaborator.
        info: Transport-reported metadata (``url``, ``http_code``, ...).
        headers: Response headers as a mapping or a sequence of pairs.
        payload: Raw response body, if any.
        logger: Logger used to report decode failures.
        decoder: Content decoder used by :meth:`decode`.
    """

    __slots__ = ("request_id", "logger", "decoder", "_info", "_headers", "_payload", "_mime")

    def __init__(
        self,
        request_id: str,
        info: Optional[Mapping[str, Any]] = None,
        headers: Optional[HeadersLike] = None,
        payload: Payload = None,
        *,
        logger: Optional[logging.Logger] = None,
        decoder: Optional[ContentDecoder] = None,
    ) -> None:
        setter = object.__setattr__
        setter(self, "request_id", request_id)
        setter(self, "logger", logger or LOGGER)
        setter(self, "decoder", decoder or DEFAULT_DECODER)
        setter(self, "_info", MappingProxyType(dict(info or {})))
        header_map = _normalize_headers(headers)
        setter(self, "_headers", MappingProxyType(header_map))
        setter(self, "_payload", payload)
        setter(self, "_mime", parse_mime_type(header_map.get("content-type")))

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    @classmethod
    def from_result(
        cls,
        result: TransportResult,
        *,
        logger: Optional[logging.Logger] = None,
        decoder: Optional[ContentDecoder] = None,
    ) -> "ResponseEnvelope":
        return cls(
            result.request_id,
            result.info,
            result.headers,
            result.payload,
            logger=logger,
            decoder=decoder,
        )

    @classmethod
    def from_httpx(
        cls,
        response: "httpx.Response",
        request_id: str,
        *,
        logger: Optional[logging.Logger] = None,
        decoder: Optional[ContentDecoder] = None,
    ) -> "ResponseEnvelope":
        """Build an envelope from an already-read :class:`httpx.Response`."""

        return cls.from_result(
            result_from_httpx(response, request_id), logger=logger, decoder=decoder
        )

    # ------------------------------------------------------------------
    # Identity and transport metadata
    # ------------------------------------------------------------------

    @property
    def id(self) -> str:
        return self.request_id

    def status(self, digits: int = 3) -> int:
        """HTTP status code, optionally truncated to its leading digits.

        ``status(1) == 2`` checks for any 2xx response. A missing code
        yields ``0``.

        Raises:
            ValueError: ``digits`` is smaller than one.
        """

        if digits < 1:
            raise ValueError(f"digits must be >= 1, got {digits}")
        code = self._info.get("http_code")
        if code is None or code == "":
            return 0
        return int(str(code)[:digits])

    @property
    def ok(self) -> bool:
        return self.status(1) == 2

    @property
    def is_redirect(self) -> bool:
        return self.status(1) == 3

    @property
    def is_client_error(self) -> bool:
        return self.status(1) == 4

    @property
    def is_server_error(self) -> bool:
        return self.status(1) == 5

    def info(self, key: str, default: Any = None) -> Any:
        return self._info.get(key, default)

    def infos(self) -> Mapping[str, Any]:
        return self._info

    def url(self, part: Optional[str] = None) -> Union[UrlParts, str, int, None]:
        """Decompose the URL the transport actually requested.

        Args:
            part: One of ``scheme``, ``host``, ``port``, ``path``, ``query``,
                ``fragment`` or ``user``; ``None`` returns every component.

        Raises:
            ValueError: ``part`` is not a known URL component.
        """

        if part is not None and part not in URL_PARTS:
            raise ValueError(f"Unknown URL part {part!r}; expected one of {URL_PARTS}")
        parts = UrlParts.parse(self._info.get("url"))
        if part is None:
            return parts
        return getattr(parts, part)

    # ------------------------------------------------------------------
    # Headers and payload
    # ------------------------------------------------------------------

    def header(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self._headers.get(key.lower(), default)

    def headers(self) -> Mapping[str, str]:
        return self._headers

    def payload(self) -> Payload:
        return self._payload

    # ------------------------------------------------------------------
    # MIME facets
    # ------------------------------------------------------------------

    @property
    def mime(self) -> MimeType:
        return self._mime

    def mime_type(self, default: Optional[str] = None) -> Optional[str]:
        return self._mime.type if self._mime.type is not None else default

    def mime_subtype(self, default: Optional[str] = None) -> Optional[str]:
        return self._mime.subtype if self._mime.subtype is not None else default

    def mime_tree(self, default: Optional[str] = None) -> Optional[str]:
        return self._mime.tree if self._mime.tree is not None else default

    def mime_suffix(self, default: Optional[str] = None) -> Optional[str]:
        return self._mime.suffix if self._mime.suffix is not None else default

    def mime_params(self, default: Optional[str] = None) -> Optional[str]:
        return self._mime.params if self._mime.params is not None else default

    def content_type(
        self, type: Optional[str] = None, subtype: Optional[str] = None
    ) -> Optional[str]:
        """Condensed ``type/subtype``, or ``None`` when an assertion fails.

        ``None`` is also returned when the response carries no parseable
        content type.

        Examples:
            ``content_type("application")`` on a JSON response returns
            ``"application/json"``; ``content_type("text")`` returns ``None``.
        """

        if type is not None and self._mime.type != type:
            return None
        if subtype is not None and self._mime.subtype != subtype:
            return None
        return self._mime.essence

    # ------------------------------------------------------------------
    # Decoding
    # ------------------------------------------------------------------

    def decode(self, default_type: Optional[str] = None) -> Any:
        return self.decoder.decode(self, default_type)

    def decode_json(self, associative: bool = False) -> Any:
        return decode_json(self, associative)

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def render(self) -> bytes:
        """Serialize headers and payload as an HTTP/1.x response message."""

        head = "".join(f"{key}: {value}{EOL}" for key, value in self._headers.items()) + EOL
        body = self._payload
        if body is None:
            body = b""
        elif isinstance(body, str):
            body = body.encode("utf-8")
        return head.encode("utf-8") + bytes(body)

    def __str__(self) -> str:
        return self.render().decode("utf-8", errors="replace")

    def __repr__(self) -> str:
        return (
            f"<ResponseEnvelope id={self.request_id!r} status={self.status()} "
            f"content_type={self.content_type()!r}>"
        )
