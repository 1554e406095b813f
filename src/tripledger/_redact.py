"""Helpers for safe debug logging.

Client records carry the tax id and contact details of real people,
document records carry storage URIs that may embed signed query strings,
and history records repeat trip values inside JSON-encoded strings.
``redact_for_log`` walks a wire payload (a record, a list of records or
a ``{"data": ...}`` envelope) and masks those fields before the payload
reaches a DEBUG log.
"""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from typing import Any
from urllib.parse import urlsplit, urlunsplit

from tripledger._constants import JSON_SEPARATORS

_REDACTED = "<redacted>"

_SECRET_KEYS: frozenset[str] = frozenset({"authorization", "apitoken", "accesstoken", "token", "cookie"})

# Client contact fields; the tail is kept so records stay distinguishable.
_CONTACT_KEYS: frozenset[str] = frozenset({"inn", "phone", "email", "contactperson"})

_URI_KEYS: frozenset[str] = frozenset({"uri"})

# TripHistory fields holding JSON text.
_EMBEDDED_JSON_KEYS: frozenset[str] = frozenset({"previousvalues", "newvalues"})

_MAX_DEPTH = 20


def _mask_contact(value: Any) -> str:
    text = str(value)
    if len(text) <= 4:
        return _REDACTED
    return f"{_REDACTED}…{text[-2:]}"


def _strip_uri_secrets(value: Any) -> Any:
    if not isinstance(value, str):
        return value
    parts = urlsplit(value)
    if not parts.query and not parts.fragment:
        return value
    return urlunsplit((parts.scheme, parts.netloc, parts.path, _REDACTED if parts.query else "", ""))


def _redact_embedded_json(value: Any, *, max_string: int, depth: int) -> Any:
    if not isinstance(value, str):
        return redact_for_log(value, max_string=max_string, _depth=depth)
    try:
        decoded = json.loads(value)
    except ValueError:
        return _truncate(value, max_string)
    redacted = redact_for_log(decoded, max_string=max_string, _depth=depth)
    return json.dumps(redacted, ensure_ascii=False, separators=JSON_SEPARATORS)


def _truncate(value: str, max_string: int) -> str:
    if len(value) > max_string:
        return f"{value[:max_string]}…<truncated>"
    return value


def _redact_field(key: str, value: Any, *, max_string: int, depth: int) -> Any:
    lowered = key.lower()
    if lowered in _SECRET_KEYS:
        return _REDACTED
    if value is None:
        return None
    if lowered in _CONTACT_KEYS:
        return _mask_contact(value)
    if lowered in _URI_KEYS:
        return _strip_uri_secrets(value)
    if lowered in _EMBEDDED_JSON_KEYS:
        return _redact_embedded_json(value, max_string=max_string, depth=depth)
    return redact_for_log(value, max_string=max_string, _depth=depth)


def redact_for_log(value: Any, *, max_string: int = 512, _depth: int = 0) -> Any:
    """Return a redacted copy of *value* suitable for debug logs."""
    if _depth > _MAX_DEPTH:
        return "<max-depth>"

    if value is None or isinstance(value, (bool, int, float)):
        return value

    if isinstance(value, str):
        return _truncate(value, max_string)

    if isinstance(value, (bytes, bytearray)):
        return f"<bytes:{len(value)}b>"

    if isinstance(value, Mapping):
        return {
            str(key): _redact_field(str(key), item, max_string=max_string, depth=_depth + 1)
            for key, item in value.items()
        }

    if isinstance(value, Sequence):
        return [redact_for_log(item, max_string=max_string, _depth=_depth + 1) for item in value]

    return repr(value)
