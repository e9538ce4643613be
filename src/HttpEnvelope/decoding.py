"""Content-type driven decoding of response payloads.

:class:`ContentDecoder` maps a ``type/subtype`` string to a decoder callable.
The default instance only knows ``application/json``; callers that need more
formats build their own with :meth:`ContentDecoder.register`, which returns
a new decoder and leaves the original untouched.

Decoding is never cached: every call re-reads the envelope payload.
"""

from __future__ import annotations

import json
import logging
from collections import OrderedDict
from collections.abc import Callable, Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Optional

from HttpEnvelope.errors import DecodeError, NoContentTypeError, UnsupportedContentTypeError

if TYPE_CHECKING:
    from HttpEnvelope.response import ResponseEnvelope

__all__ = (
    "JSON_CONTENT_TYPE",
    "ContentDecoder",
    "DEFAULT_DECODER",
    "decode",
    "decode_json",
)

LOGGER = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"

Decoder = Callable[["ResponseEnvelope"], Any]


def _payload_for_log(payload: Any) -> Any:
    if isinstance(payload, (bytes, bytearray)):
        return bytes(payload).decode("utf-8", errors="replace")
    return payload


def _fail(envelope: "ResponseEnvelope", error: DecodeError) -> DecodeError:
    logger = envelope.logger or LOGGER
    logger.warning(
        error.message,
        extra={
            "extra_fields": {
                "request_id": envelope.id,
                "decode_error_code": error.code,
                "payload": _payload_for_log(error.payload),
            }
        },
    )
    return error


def decode_json(envelope: "ResponseEnvelope", associative: bool = False) -> Any:
    """Parse the envelope payload as JSON.

    Args:
        envelope: Response whose raw payload is decoded.
        associative: When ``True`` JSON objects become :class:`OrderedDict`
            instances that keep the document's key order explicitly;
            otherwise plain ``dict`` documents are returned.

    Returns:
        The decoded JSON value.

    Raises:
        DecodeError: The payload is absent, not UTF-8, or not valid JSON. The
            failure is also logged as a warning with the payload attached.
    """

    payload = envelope.payload()
    if payload is None:
        raise _fail(envelope, DecodeError("No payload to decode", code="empty", payload=None))

    text = payload
    if isinstance(payload, (bytes, bytearray)):
        try:
            text = bytes(payload).decode("utf-8")
        except UnicodeDecodeError as exc:
            error = DecodeError(
                f"Malformed UTF-8 characters: {exc.reason}",
                code="encoding",
                position=exc.start,
                payload=payload,
            )
            raise _fail(envelope, error) from exc

    hook = OrderedDict if associative else None
    try:
        return json.loads(text, object_pairs_hook=hook)
    except json.JSONDecodeError as exc:
        error = DecodeError(
            exc.msg,
            code="syntax",
            position=exc.pos,
            lineno=exc.lineno,
            colno=exc.colno,
            payload=payload,
        )
        raise _fail(envelope, error) from exc


class ContentDecoder:
    """Dispatch table from content type to payload decoder."""

    def __init__(
        self,
        decoders: Optional[Mapping[str, Decoder]] = None,
        *,
        default_type: Optional[str] = None,
    ) -> None:
        table = {JSON_CONTENT_TYPE: decode_json} if decoders is None else dict(decoders)
        self._decoders = MappingProxyType({key.lower(): value for key, value in table.items()})
        self.default_type = (default_type or "").strip().lower() or None

    @property
    def content_types(self) -> tuple[str, ...]:
        return tuple(self._decoders)

    def register(self, content_type: str, decoder: Decoder) -> "ContentDecoder":
        """Return a new decoder with ``decoder`` handling ``content_type``."""

        table = dict(self._decoders)
        table[content_type.strip().lower()] = decoder
        return ContentDecoder(table, default_type=self.default_type)

    def resolve_type(self, envelope: "ResponseEnvelope", default_type: Optional[str] = None) -> str:
        """Return the content type used for dispatch.

        Raises:
            NoContentTypeError: Neither the response nor ``default_type``
                supplies a content type.
        """

        content_type = envelope.content_type()
        if content_type:
            return content_type
        fallback = (default_type or self.default_type or "").strip().lower()
        if not fallback:
            raise NoContentTypeError()
        return fallback

    def decode(self, envelope: "ResponseEnvelope", default_type: Optional[str] = None) -> Any:
        content_type = self.resolve_type(envelope, default_type)
        decoder = self._decoders.get(content_type)
        if decoder is None:
            raise UnsupportedContentTypeError(content_type)
        return decoder(envelope)


DEFAULT_DECODER = ContentDecoder()


def decode(envelope: "ResponseEnvelope", default_type: Optional[str] = None) -> Any:
    """Decode ``envelope`` with :data:`DEFAULT_DECODER`."""

    return DEFAULT_DECODER.decode(envelope, default_type)
