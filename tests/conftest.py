"""Pytest shared fixtures for the KbRemote client tests."""
import json
import pathlib
import sys
from typing import Any, Optional
from unittest.mock import MagicMock

# Add project root to Python path
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest
import requests

from kbremote.core import KbRemoteClient


class StubResponse:
    """Minimal stand-in for ``requests.Response``."""

    def __init__(self, status_code: int = 200, payload: Any = None, content: Optional[bytes] = None):
        self.status_code = status_code
        if content is None:
            content = json.dumps(payload).encode("utf-8") if payload is not None else b""
        self.content = content
        self.text = content.decode("utf-8", errors="replace")

    def json(self):
        return json.loads(self.content)


# ─────────────────────────────────────────────────────────────────────────────
# Network Guard Rails
# ─────────────────────────────────────────────────────────────────────────────
@pytest.fixture(autouse=True)
def _block_real_http(monkeypatch, request):
    """
    Prevent unit tests from hitting a live KbRemote endpoint.

    Integration tests are explicitly marked with @pytest.mark.integration and
    are allowed to perform real HTTP calls by skipping this fixture.
    """
    if request.node.get_closest_marker("integration"):
        return

    def _stub_request(self, method, url, *args, **kwargs):
        raise RuntimeError(f"Unexpected HTTP {method} in unit test: {url}")

    monkeypatch.setattr(requests.Session, "request", _stub_request)


@pytest.fixture
def stub_response():
    return StubResponse


@pytest.fixture
def session():
    """Transport double; set ``session.request.side_effect`` / ``return_value`` per test."""
    fake = MagicMock(spec=requests.Session)
    fake.request.return_value = StubResponse(200, {})
    return fake


@pytest.fixture
def sleeps(monkeypatch):
    """Record retry delays instead of sleeping."""
    recorded = []
    monkeypatch.setattr("kbremote.core.client.time.sleep", recorded.append)
    return recorded


@pytest.fixture
def client(session):
    return KbRemoteClient("https://kb.example", key="k", secret="s", session=session)
