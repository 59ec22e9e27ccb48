"""KbRemote API client library.

Architecture:
- auth.py: Request signing (HMAC-SHA256 Authentication/Timestamp headers)
- normalize.py: Response key/timestamp normalization
- client.py: Signed HTTP client with rate-limit retries
- devices.py: Device listing, patching and push actions
- device_groups.py: Device groups and registration keys
- profiles.py: Configuration profiles
- filegroups.py: File groups, file listing and uploads
- exceptions.py: Typed exceptions for error handling

Usage:
    from kbremote.core import KbRemoteClient, DeviceService

    client = KbRemoteClient(key="my-key", secret="my-secret")
    devices = DeviceService(client).list_devices()
"""
from .client import (
    KbRemoteClient,
    api_path,
    partial_update,
    API_URI,
    DEFAULT_URL,
    REQUEST_TIMEOUT,
)
from .exceptions import (
    KbRemoteError,
    CallerError,
    ServiceError,
    NotFound,
    Forbidden,
    RateLimited,
    TransportError,
    NormalizationError,
)
from .normalize import normalize, normalize_key, parse_timestamp
from .devices import DeviceService, PUSH_ACTIONS
from .device_groups import DeviceGroupService
from .profiles import ProfileService
from .filegroups import FileGroupService, FileGroup, FileEntry

__all__ = [
    # Client
    "KbRemoteClient",
    "api_path",
    "partial_update",
    "API_URI",
    "DEFAULT_URL",
    "REQUEST_TIMEOUT",

    # Exceptions
    "KbRemoteError",
    "CallerError",
    "ServiceError",
    "NotFound",
    "Forbidden",
    "RateLimited",
    "TransportError",
    "NormalizationError",

    # Normalization
    "normalize",
    "normalize_key",
    "parse_timestamp",

    # Services
    "DeviceService",
    "DeviceGroupService",
    "ProfileService",
    "FileGroupService",
    "FileGroup",
    "FileEntry",
    "PUSH_ACTIONS",
]
