"""Exception hierarchy shared across request building and response decoding.

Every failure raised by the package derives from :class:`HttpEnvelopeError`
so callers can catch the whole family at once, while the specialised
subclasses keep the metadata needed to react to a particular failure
(which placeholder was missing, which content type had no decoder, what the
JSON parser complained about).

None of these errors are retried internally; retry policy belongs to the
caller.
"""

from __future__ import annotations

from typing import Optional, Union

__all__ = [
    "HttpEnvelopeError",
    "MissingParameterError",
    "NoContentTypeError",
    "UnsupportedContentTypeError",
    "DecodeError",
    "TransportError",
]


class HttpEnvelopeError(RuntimeError):
    """Base exception for request building and response interpretation failures."""


class MissingParameterError(HttpEnvelopeError):
    """Raised when a path placeholder has no corresponding parameter."""

    def __init__(self, placeholder: str, *, template: Optional[str] = None) -> None:
        message = f"Missing parameter for path placeholder ':{placeholder}'"
        if template is not None:
            message += f" in template {template!r}"
        super().__init__(message)
        self.placeholder = placeholder
        self.template = template


class NoContentTypeError(HttpEnvelopeError):
    """Raised when decoding is attempted without a parsed or default content type."""

    def __init__(self, message: str = "No content type in response header found") -> None:
        super().__init__(message)


class UnsupportedContentTypeError(HttpEnvelopeError):
    """Raised when the resolved content type has no registered decoder."""

    def __init__(self, content_type: str) -> None:
        super().__init__(f"Unknown content type in response header: {content_type}")
        self.content_type = content_type


class DecodeError(HttpEnvelopeError):
    """Raised when a response body cannot be decoded.

    Attributes:
        message: Diagnostic message reported by the underlying parser.
        code: Symbolic failure class (``"syntax"``, ``"encoding"`` or ``"empty"``).
        position: Character offset of the failure, when the parser reports one.
        lineno: Line of the failure, when known.
        colno: Column of the failure, when known.
        payload: The offending raw payload.
    """

    def __init__(
        self,
        message: str,
        *,
        code: str,
        position: Optional[int] = None,
        lineno: Optional[int] = None,
        colno: Optional[int] = None,
        payload: Union[bytes, str, None] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.position = position
        self.lineno = lineno
        self.colno = colno
        self.payload = payload


class TransportError(HttpEnvelopeError):
    """Raised when the transport collaborator fails to execute a request."""

    def __init__(self, message: str, *, method: str, url: str) -> None:
        super().__init__(message)
        self.method = method
        self.url = url
