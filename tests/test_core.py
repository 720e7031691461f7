from __future__ import annotations

import pytest

from loca.core.crypto import decrypt_value, encrypt_value
from loca.core.phone import is_valid_phone, normalize_phone


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("06 12 34 56 78", "0612345678"),
        ("+33 (0)6-12-34-56-78", "+330612345678"),
        ("  ", None),
        (None, None),
        ("n/a", None),
    ],
)
def test_normalize_phone(raw, expected):
    assert normalize_phone(raw) == expected


@pytest.mark.parametrize(
    ("phone", "valid"),
    [("0612345678", True), ("+33612345678", True), ("12345", False), ("1" * 16, False), (None, False)],
)
def test_is_valid_phone(phone, valid):
    assert is_valid_phone(phone) is valid


def test_encryption_uses_fresh_nonce():
    first = encrypt_value("alice@example.com")
    second = encrypt_value("alice@example.com")

    assert first != second
    assert decrypt_value(first) == decrypt_value(second) == "alice@example.com"


def test_empty_values_are_not_encrypted():
    assert encrypt_value("") is None
    assert encrypt_value(None) is None
    assert decrypt_value(None) is None


def test_health(app_client):
    assert app_client.get("/health/ping").json() == {"status": "ok"}
    info = app_client.get("/health/info").json()
    assert info["demo_mode"] is False
    assert "service" in info
