# === NAVMAP v1 ===
# {
#   "module": "HttpEnvelope.mime",
#   "purpose": "Content-Type parsing into structured MIME facets",
#   "sections": [
#     {
#       "id": "mimetype",
#       "name": "MimeType",
#       "anchor": "class-mimetype",
#       "kind": "class"
#     },
#     {
#       "id": "parse-mime-type",
#       "name": "parse_mime_type",
#       "anchor": "function-parse-mime-type",
#       "kind": "function"
#     },
#     {
#       "id": "parse-params",
#       "name": "parse_params",
#       "anchor": "function-parse-params",
#       "kind": "function"
#     }
#   ]
# }
# === /NAVMAP ===

"""Structured parsing of ``Content-Type`` header values.

A media type is split into five independently optional facets::

    type "/" [tree "."] subtype ["+" suffix] [";" params]

``application/vnd.api+json; charset=utf-8`` therefore yields type
``application``, tree ``vnd``, subtype ``api``, suffix ``json`` and params
``charset=utf-8``. Parameters stay a single opaque string on
:class:`MimeType`; :func:`parse_params` splits them when a caller needs a
specific value such as the charset.

Input is trimmed and lower-cased before parsing. Anything that does not fit
the grammar (including an empty or missing header) produces an empty
:class:`MimeType` rather than an error.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Optional

__all__ = ("MimeType", "parse_mime_type", "parse_params")


@dataclass(frozen=True)
class MimeType:
    """Parsed media type facets; every field is ``None`` when absent."""

    type: Optional[str] = None
    tree: Optional[str] = None
    subtype: Optional[str] = None
    suffix: Optional[str] = None
    params: Optional[str] = None

    @classmethod
    def empty(cls) -> "MimeType":
        return cls()

    @property
    def is_empty(self) -> bool:
        return self == MimeType.empty()

    @property
    def essence(self) -> Optional[str]:
        """``type/subtype`` when both facets are present."""

        if not self.type or not self.subtype:
            return None
        return f"{self.type}/{self.subtype}"

    def as_dict(self) -> dict[str, Optional[str]]:
        return asdict(self)


def _clean(value: str) -> Optional[str]:
    value = value.strip()
    return value or None


def parse_mime_type(header_value: Optional[str]) -> MimeType:
    """Parse a ``Content-Type`` header value into a :class:`MimeType`.

    Args:
        header_value: Raw header value; ``None`` is treated as empty.

    Returns:
        The parsed facets, or an empty :class:`MimeType` when the value does
        not match the media type grammar.

    Examples:
        >>> parse_mime_type("application/vnd.api+json; charset=utf-8").tree
        'vnd'
        >>> parse_mime_type("").is_empty
        True
    """

    text = (header_value or "").strip().lower()
    if not text:
        return MimeType.empty()

    head, has_params, params_text = text.partition(";")
    params = _clean(params_text) if has_params else None

    type_text, has_slash, rest = head.partition("/")
    media_type = _clean(type_text)
    if not has_slash or media_type is None:
        return MimeType.empty()

    subtype_text, has_suffix, suffix_text = rest.partition("+")
    suffix = _clean(suffix_text) if has_suffix else None
    if has_suffix and suffix is None:
        return MimeType.empty()

    tree: Optional[str] = None
    tree_text, has_tree, facet_text = subtype_text.partition(".")
    if has_tree and _clean(tree_text) and _clean(facet_text):
        tree = _clean(tree_text)
        subtype = _clean(facet_text)
    else:
        subtype = _clean(subtype_text)
    if subtype is None:
        return MimeType.empty()

    return MimeType(type=media_type, tree=tree, subtype=subtype, suffix=suffix, params=params)


def parse_params(params: Optional[str]) -> dict[str, str]:
    """Split an opaque params string into ``name -> value`` pairs.

    Names are lower-cased, surrounding quotes are stripped from values, and
    fragments without ``=`` are ignored.

    Examples:
        >>> parse_params('charset=utf-8; boundary="abc"')
        {'charset': 'utf-8', 'boundary': 'abc'}
    """

    result: dict[str, str] = {}
    if not params:
        return result
    for chunk in params.split(";"):
        name, has_value, value = chunk.partition("=")
        name = name.strip().lower()
        if not has_value or not name:
            continue
        result[name] = value.strip().strip('"')
    return result
