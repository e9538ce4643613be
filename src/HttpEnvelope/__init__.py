"""HTTP request building and response interpretation on top of HTTPX.

Modules:
- paths: path template resolution and query-string composition
- mime: Content-Type parsing into type/tree/subtype/suffix/params
- response: immutable response envelope with typed accessors
- decoding: content-type driven payload decoding (JSON)
- transport: HTTPX-backed transport collaborator
- client: request builder composing the pieces above
- settings: pydantic-settings configuration
- logging_config: JSON/text logging setup

Example:
    >>> from HttpEnvelope import resolve, parse_mime_type
    >>> str(resolve("/item/:item_id.json", {"item_id": 1234, "sort": "name"}))
    '/item/1234.json?sort=name'
    >>> parse_mime_type("application/vnd.api+json").suffix
    'json'
"""

from HttpEnvelope.client import RestClient
from HttpEnvelope.decoding import ContentDecoder, decode, decode_json
from HttpEnvelope.errors import (
    DecodeError,
    HttpEnvelopeError,
    MissingParameterError,
    NoContentTypeError,
    TransportError,
    UnsupportedContentTypeError,
)
from HttpEnvelope.mime import MimeType, parse_mime_type
from HttpEnvelope.paths import ParamMap, ResolvedUri, resolve
from HttpEnvelope.response import ResponseEnvelope, UrlParts
from HttpEnvelope.transport import HttpxTransport, Transport, TransportResult

__version__ = "0.1.0"

__all__ = [
    # Request building
    "ParamMap",
    "ResolvedUri",
    "resolve",
    "RestClient",
    # Transport
    "HttpxTransport",
    "Transport",
    "TransportResult",
    # Responses
    "MimeType",
    "parse_mime_type",
    "ResponseEnvelope",
    "UrlParts",
    "ContentDecoder",
    "decode",
    "decode_json",
    # Errors
    "HttpEnvelopeError",
    "MissingParameterError",
    "NoContentTypeError",
    "UnsupportedContentTypeError",
    "DecodeError",
    "TransportError",
]
