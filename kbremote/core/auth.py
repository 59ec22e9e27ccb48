"""Request signing for the KbRemote API.

Every request carries an ``Authentication`` header of the form
``<api_key>:<signature>`` and a ``Timestamp`` header. The signature is the
base64-encoded HMAC-SHA256 of ``METHOD + timestamp + path``, keyed by the API
secret, with no separators between the three parts.
"""
from __future__ import annotations
import base64
import hashlib
import hmac
from datetime import datetime, timezone
from typing import Dict, Optional, Union

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def _as_bytes(value: Union[str, bytes]) -> bytes:
    if isinstance(value, bytes):
        return value
    return value.encode("utf-8")


def format_timestamp(moment: Optional[datetime] = None) -> str:
    """Format ``moment`` (default: now) as a UTC timestamp, second precision."""
    moment = moment or datetime.now(timezone.utc)
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)
    return moment.strftime(TIMESTAMP_FORMAT)


def sign(method: str, path: str, secret: Union[str, bytes], timestamp: str) -> str:
    """Compute the request signature.

    Args:
        method: HTTP verb (upper-cased before signing)
        path: Path sent on the wire, including the ``/api`` prefix, without query string
        secret: Shared API secret
        timestamp: UTC timestamp formatted ``YYYY-MM-DD HH:MM:SS``

    Returns:
        Base64-encoded HMAC-SHA256 signature
    """
    message = f"{method.upper()}{timestamp}{path}"
    digest = hmac.new(_as_bytes(secret), message.encode("utf-8"), hashlib.sha256).digest()
    return base64.b64encode(digest).decode("ascii")


def headers(
    method: str,
    path: str,
    api_key: str,
    api_secret: Union[str, bytes],
    timestamp: Optional[str] = None,
) -> Dict[str, str]:
    """Build the authentication headers for one request.

    The same timestamp string goes into the signed message and the
    ``Timestamp`` header.
    """
    ts = timestamp or format_timestamp()
    return {
        "Authentication": f"{api_key}:{sign(method, path, api_secret, ts)}",
        "Timestamp": ts,
    }
