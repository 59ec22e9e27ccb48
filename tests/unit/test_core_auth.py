import base64
import hashlib
import hmac
from datetime import datetime, timedelta, timezone

import pytest

from kbremote.core import auth


def _expected(secret: bytes, message: bytes) -> str:
    return base64.b64encode(hmac.new(secret, message, hashlib.sha256).digest()).decode("ascii")


@pytest.mark.critical
def test_sign_matches_reference_vector():
    signature = auth.sign("GET", "/api/device", "s", "2024-01-01 00:00:00")
    assert signature == _expected(b"s", b"GET2024-01-01 00:00:00/api/device")


def test_sign_uppercases_method():
    ts = "2024-01-01 00:00:00"
    assert auth.sign("get", "/api/device", "s", ts) == auth.sign("GET", "/api/device", "s", ts)


def test_sign_has_no_line_breaks():
    signature = auth.sign("POST", "/api/filegroup", "secret", "2024-05-06 07:08:09")
    assert "\n" not in signature
    assert len(base64.b64decode(signature)) == 32


def test_sign_is_deterministic():
    args = ("PATCH", "/api/device/1", b"secret", "2024-01-01 12:00:00")
    assert auth.sign(*args) == auth.sign(*args)


@pytest.mark.parametrize(
    "changed",
    [
        ("POST", "/api/device", "s", "2024-01-01 00:00:00"),
        ("GET", "/api/device/1", "s", "2024-01-01 00:00:00"),
        ("GET", "/api/device", "t", "2024-01-01 00:00:00"),
        ("GET", "/api/device", "s", "2024-01-01 00:00:01"),
    ],
)
def test_sign_changes_with_any_input(changed):
    base = auth.sign("GET", "/api/device", "s", "2024-01-01 00:00:00")
    assert auth.sign(*changed) != base


def test_str_and_bytes_secret_agree():
    ts = "2024-01-01 00:00:00"
    assert auth.sign("GET", "/api/profile", "sécret", ts) == auth.sign("GET", "/api/profile", "sécret".encode("utf-8"), ts)


def test_format_timestamp_converts_to_utc():
    moment = datetime(2024, 3, 1, 14, 30, 15, 999, tzinfo=timezone(timedelta(hours=2)))
    assert auth.format_timestamp(moment) == "2024-03-01 12:30:15"


def test_format_timestamp_defaults_to_now():
    ts = auth.format_timestamp()
    parsed = datetime.strptime(ts, auth.TIMESTAMP_FORMAT).replace(tzinfo=timezone.utc)
    assert abs(datetime.now(timezone.utc) - parsed) < timedelta(seconds=5)


@pytest.mark.critical
def test_headers_round_trip():
    headers = auth.headers("GET", "/api/device", api_key="k", api_secret="s")
    key, signature = headers["Authentication"].split(":", 1)
    assert key == "k"
    assert signature == auth.sign("GET", "/api/device", "s", headers["Timestamp"])


def test_headers_use_given_timestamp():
    headers = auth.headers("DELETE", "/api/filegroupfile/3", "k", "s", timestamp="2024-01-01 00:00:00")
    assert headers == {
        "Authentication": "k:" + _expected(b"s", b"DELETE2024-01-01 00:00:00/api/filegroupfile/3"),
        "Timestamp": "2024-01-01 00:00:00",
    }
