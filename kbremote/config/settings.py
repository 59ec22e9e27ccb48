"""Settings loader with environment variable and Docker secrets integration."""
from __future__ import annotations
import logging
import os
from dataclasses import dataclass
from pathlib import Path

from kbremote.core.client import DEFAULT_MAX_RETRIES, DEFAULT_RETRY_BACKOFF, DEFAULT_URL

logger = logging.getLogger(__name__)


def _load_secret_from_file(secret_name: str, env_var: str | None = None) -> str | None:
    """
    Load secret from /run/secrets (Docker secrets pattern).

    Priority:
    1. /run/secrets/{secret_name} (Docker secrets mount)
    2. Environment variable (fallback)

    Args:
        secret_name: Name of the secret file in /run/secrets
        env_var: Optional environment variable name to check as fallback

    Returns:
        Secret value or None if not found
    """
    secret_file = Path("/run/secrets") / secret_name

    if secret_file.exists() and secret_file.is_file():
        try:
            secret_value = secret_file.read_text().strip()
        except OSError as e:
            logger.warning("[settings] Failed to read /run/secrets/%s: %s", secret_name, e)
        else:
            if secret_value:
                logger.info("[settings] Loaded %s from /run/secrets", secret_name)
                return secret_value

    if env_var:
        secret_value = os.getenv(env_var)
        if secret_value:
            logger.info("[settings] Loaded %s from environment", env_var)
            return secret_value

    return None


def _get_number(var_name: str, default, cast):
    raw = os.environ.get(var_name)
    if raw is None or not raw.strip():
        return default
    try:
        value = cast(raw.strip())
    except ValueError as e:
        raise RuntimeError(f"Environment variable {var_name} must be a number, got {raw!r}") from e
    if value < 0:
        raise RuntimeError(f"Environment variable {var_name} must not be negative")
    return value


@dataclass(frozen=True)
class ClientConfig:
    """KbRemote client configuration container."""
    api_key: str
    api_secret: str
    url: str = DEFAULT_URL
    debug: bool = False
    max_retries: int = DEFAULT_MAX_RETRIES
    retry_backoff: float = DEFAULT_RETRY_BACKOFF


def load_settings() -> ClientConfig:
    """Load client settings from environment and /run/secrets.

    Raises:
        RuntimeError: If the API key or secret is missing, or a number is malformed
    """
    api_key = _load_secret_from_file("kbremote_api_key", "KBREMOTE_API_KEY")
    if not api_key:
        raise RuntimeError("KBREMOTE_API_KEY not found in /run/secrets or environment")

    api_secret = _load_secret_from_file("kbremote_api_secret", "KBREMOTE_API_SECRET")
    if not api_secret:
        raise RuntimeError("KBREMOTE_API_SECRET not found in /run/secrets or environment")

    url = os.environ.get("KBREMOTE_URL", "").strip() or DEFAULT_URL
    debug = os.environ.get("KBREMOTE_DEBUG", "false").lower() == "true"
    max_retries = _get_number("KBREMOTE_MAX_RETRIES", DEFAULT_MAX_RETRIES, int)
    retry_backoff = _get_number("KBREMOTE_RETRY_BACKOFF", DEFAULT_RETRY_BACKOFF, float)

    logger.info("[settings] url=%s; debug=%s; max_retries=%d", url, debug, max_retries)

    return ClientConfig(
        api_key=api_key,
        api_secret=api_secret,
        url=url,
        debug=debug,
        max_retries=max_retries,
        retry_backoff=retry_backoff,
    )
