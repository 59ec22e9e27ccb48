"""Low-level HTTP client for the KbRemote API.

Handles request signing, dispatch, response normalization and rate-limit
retries. Resource services (devices, profiles, ...) build on ``request``.
"""
from __future__ import annotations
import json
import logging
import time
from typing import Any, Dict, Mapping, Optional, Tuple

import requests

from . import auth
from .exceptions import (
    CallerError,
    Forbidden,
    NormalizationError,
    NotFound,
    RateLimited,
    ServiceError,
    TransportError,
)
from .normalize import normalize

logger = logging.getLogger(__name__)

DEFAULT_URL = "https://www.kbremote.net"
API_URI = "/api"
REQUEST_TIMEOUT = 30
DEFAULT_MAX_RETRIES = 5
DEFAULT_RETRY_BACKOFF = 1.0
METHODS = ("GET", "POST", "PATCH", "DELETE")


def api_path(name: str) -> str:
    """Derive a resource path from a method name (``device_groups`` -> ``DeviceGroups``)."""
    return "".join(segment.capitalize() for segment in name.split("_"))


def partial_update(allowed: Tuple[str, ...], **values: Any) -> Dict[str, Any]:
    """Build a PATCH payload from the fields that were actually given.

    None values are left out. Unknown fields and an empty result are caller errors.
    """
    unknown = sorted(set(values) - set(allowed))
    if unknown:
        raise CallerError(f"Unknown field(s): {', '.join(unknown)}")
    data = {key: value for key, value in values.items() if value is not None}
    if not data:
        raise CallerError(f"need at least one of {', '.join(allowed)}")
    return data


def _split_multipart(body: Any) -> Tuple[Any, Optional[Dict[str, Any]]]:
    """Separate file-like values from plain form fields."""
    if not isinstance(body, Mapping):
        return body, None
    data: Dict[str, Any] = {}
    files: Dict[str, Any] = {}
    for key, value in body.items():
        if hasattr(value, "read"):
            files[key] = value
        else:
            data[key] = value
    return data, files or None


class KbRemoteClient:
    """Signed HTTP client for the KbRemote API.

    Features:
    - HMAC-signed ``Authentication``/``Timestamp`` headers on every request
    - Response keys and timestamps normalized (see ``normalize``)
    - Bounded retry with doubling backoff on HTTP 429 for JSON requests

    Usage:
        client = KbRemoteClient(key="my-key", secret="my-secret")
        devices = client.request("GET", "device")
    """

    def __init__(
        self,
        url: str = DEFAULT_URL,
        key: Optional[str] = None,
        secret: Optional[str] = None,
        *,
        debug: bool = False,
        logger: Optional[logging.Logger] = None,
        max_retries: int = DEFAULT_MAX_RETRIES,
        retry_backoff: float = DEFAULT_RETRY_BACKOFF,
        session: Optional[requests.Session] = None,
    ):
        """Initialize KbRemote client.

        Args:
            url: API base URL
            key: API key
            secret: API secret
            debug: Emit diagnostics for every request through ``logger``
            logger: Logger receiving debug diagnostics (defaults to this module's logger)
            max_retries: Maximum number of retries after HTTP 429
            retry_backoff: Delay in seconds before the first retry, doubled on each retry
            session: Transport session (defaults to a new ``requests.Session``)

        Raises:
            CallerError: If url, key or secret is missing
        """
        if not url:
            raise CallerError("url must be set")
        if not key:
            raise CallerError("key must be set")
        if not secret:
            raise CallerError("secret must be set")
        if max_retries < 0:
            raise CallerError("max_retries must not be negative")

        self.base_url = url.rstrip("/")
        self.api_key = key
        self.api_secret = secret
        self.debug = debug
        self.logger = logger or logging.getLogger(__name__)
        self.max_retries = max_retries
        self.retry_backoff = retry_backoff
        self.session = session or requests.Session()

    @classmethod
    def from_settings(cls, config, **kwargs) -> "KbRemoteClient":
        """Create a client from a ``ClientConfig``."""
        return cls(
            config.url,
            config.api_key,
            config.api_secret,
            debug=config.debug,
            max_retries=config.max_retries,
            retry_backoff=config.retry_backoff,
            **kwargs,
        )

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "KbRemoteClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def request(
        self,
        method: str,
        path: Optional[str] = None,
        *,
        query: Optional[Mapping[str, Any]] = None,
        body: Any = None,
        as_json: bool = True,
        name: Optional[str] = None,
    ) -> Any:
        """Execute a signed request and return the normalized response.

        Args:
            method: GET, POST, PATCH or DELETE
            path: Resource path relative to ``/api`` (e.g. ``device/42``)
            query: Query parameters
            body: Request payload; dicts and lists are sent as JSON when ``as_json``
            as_json: False for multipart uploads (file-like values in ``body``)
            name: Method name to derive the path from when ``path`` is omitted

        Returns:
            Normalized response body, or None for an empty body

        Raises:
            CallerError: Unsupported method or no path
            NotFound: HTTP 404
            Forbidden: HTTP 403
            RateLimited: HTTP 429 after all retries
            ServiceError: Any other non-200 status
            TransportError: Connection, DNS or timeout failure
            NormalizationError: Unparseable body or timestamp
        """
        method = method.upper()
        if method not in METHODS:
            raise CallerError(f"Unsupported HTTP method: {method}")
        if path is None:
            if not name:
                raise CallerError("path or name must be set")
            path = api_path(name)
        full_path = f"{API_URI}/{path.lstrip('/')}"

        if self.debug:
            self.logger.debug("%s %s", method, full_path)
            if body is not None:
                self.logger.debug("body: %r", body)

        attempt = 0
        while True:
            response = self._send(method, full_path, query, body, as_json)
            if response.status_code == 429 and as_json and attempt < self.max_retries:
                if self.debug:
                    self.logger.debug("status: %s", response.status_code)
                delay = self.retry_backoff * (2 ** attempt)
                attempt += 1
                logger.warning(
                    "Rate limited on %s %s, retry %d/%d in %.1fs",
                    method, full_path, attempt, self.max_retries, delay,
                )
                time.sleep(delay)
                continue
            return self._handle_response(response, full_path, as_json)

    def _send(
        self,
        method: str,
        full_path: str,
        query: Optional[Mapping[str, Any]],
        body: Any,
        as_json: bool,
    ) -> requests.Response:
        """Sign and dispatch one HTTP request."""
        headers = auth.headers(method, full_path, self.api_key, self.api_secret)
        headers["Accept"] = "application/json"
        kwargs: Dict[str, Any] = {"params": query, "timeout": REQUEST_TIMEOUT}

        if body is not None:
            if as_json and isinstance(body, (dict, list)):
                headers["Content-Type"] = "application/json"
                kwargs["data"] = json.dumps(body)
            else:
                kwargs["data"], kwargs["files"] = _split_multipart(body)

        url = f"{self.base_url}{full_path}"
        try:
            return self.session.request(method, url, headers=headers, **kwargs)
        except requests.RequestException as exc:
            raise TransportError(f"{method} {url} failed: {exc}") from exc

    def _handle_response(self, resp: requests.Response, full_path: str, as_json: bool) -> Any:
        """Map the HTTP status to a result or a typed exception."""
        status = resp.status_code
        if self.debug:
            self.logger.debug("status: %s", status)

        if status == 404:
            raise NotFound(status, resp.text, full_path)
        if status == 403:
            raise Forbidden(status, resp.text, full_path)
        if status == 429 and as_json:
            raise RateLimited(status, f"gave up after {self.max_retries} retries", full_path)
        if status != 200:
            raise ServiceError(status, resp.text, full_path)

        if not resp.content:
            return None
        try:
            data = resp.json()
        except ValueError as exc:
            raise NormalizationError(f"Invalid JSON from {full_path}: {exc}") from exc

        result = normalize(data)
        if self.debug:
            self.logger.debug("response: %r", result)
        return result
