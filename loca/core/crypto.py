from __future__ import annotations

import os
from functools import lru_cache

from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from loca.core.config import settings

NONCE_SIZE = 12


@lru_cache(maxsize=1)
def _get_cipher() -> AESGCM:
    return AESGCM(settings.encryption_key_bytes)


def encrypt_value(value: str | None) -> bytes | None:
    """Encrypt an occupant contact field; ``None`` and "" stay empty."""
    if not value:
        return None
    nonce = os.urandom(NONCE_SIZE)
    return nonce + _get_cipher().encrypt(nonce, value.encode("utf-8"), None)


def decrypt_value(blob: bytes | None) -> str | None:
    if not blob:
        return None
    nonce, data = blob[:NONCE_SIZE], blob[NONCE_SIZE:]
    return _get_cipher().decrypt(nonce, data, None).decode("utf-8")
