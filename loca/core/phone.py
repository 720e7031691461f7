from __future__ import annotations

import re

PHONE_PATTERN = re.compile(r"^\+?\d{6,15}$")


def normalize_phone(phone: str | None) -> str | None:
    """Strip separators, keeping a leading ``+`` for international numbers."""
    if not phone:
        return None
    phone = phone.strip()
    prefix = "+" if phone.startswith("+") else ""
    digits = re.sub(r"\D", "", phone)
    return f"{prefix}{digits}" if digits else None


def is_valid_phone(phone: str | None) -> bool:
    if not phone:
        return False
    return bool(PHONE_PATTERN.match(phone))
