"""Canonicalization of KbRemote JSON responses.

The API answers with PascalCase keys (``FileGroupID``, ``Name``) and local,
zone-less timestamps. ``normalize`` rewrites a parsed response so that:

- every mapping key has its first character lower-cased (``fileGroupID``),
  except all-upper keys which are lower-cased entirely (``ID`` -> ``id``);
- string values under ``lastContacted`` or ``created`` become timezone-aware
  ``datetime`` objects carrying the process's current local UTC offset.
"""
from __future__ import annotations
import re
from datetime import datetime, tzinfo
from typing import Any, Optional

from .exceptions import NormalizationError

TIMESTAMP_KEYS = frozenset({"lastContacted", "created"})

_EXTRA_FRACTION = re.compile(r"(\.\d{6})\d+")


def normalize_key(key: str) -> str:
    """Return the canonical form of a response key."""
    if not key:
        return key
    if key.isupper():
        return key.lower()
    return key[0].lower() + key[1:]


def _current_local_zone() -> tzinfo:
    return datetime.now().astimezone().tzinfo


def parse_timestamp(value: str, assume: Optional[tzinfo] = None) -> datetime:
    """Parse an ISO-like timestamp into an aware datetime.

    Zone-less values get ``assume``, or the process's current local UTC
    offset when ``assume`` is None. Values that already carry an offset are
    converted to that same zone. Fractional seconds beyond microseconds
    (.NET emits seven digits) are truncated; a trailing ``Z`` means UTC.

    Raises:
        NormalizationError: If the value is not a recognizable timestamp
    """
    try:
        text = _EXTRA_FRACTION.sub(r"\1", value.strip())
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)
    except (AttributeError, ValueError) as exc:
        raise NormalizationError(f"Invalid timestamp {value!r}") from exc

    zone = assume or _current_local_zone()
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=zone)
    return parsed.astimezone(zone)


def normalize(value: Any, parent_key: Optional[str] = None) -> Any:
    """Recursively normalize a parsed JSON value.

    Args:
        value: Parsed JSON (dict, list or scalar)
        parent_key: Canonical key under which ``value`` was found

    Returns:
        Normalized copy of ``value``

    Raises:
        NormalizationError: If a timestamp field cannot be parsed
    """
    if isinstance(value, list):
        return [normalize(item) for item in value]

    if isinstance(value, dict):
        result = {}
        for key, item in value.items():
            canonical = normalize_key(key)
            result[canonical] = normalize(item, canonical)
        return result

    if isinstance(value, str) and parent_key in TIMESTAMP_KEYS:
        return parse_timestamp(value)

    return value
