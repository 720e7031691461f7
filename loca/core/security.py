from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any
from uuid import uuid4

from jose import JWTError, jwt
from passlib.context import CryptContext

from loca.core.config import settings


pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


@dataclass
class AccessToken:
    token: str
    expires_at: datetime
    jti: str


@dataclass
class TokenPayload:
    subject: str
    expires_at: datetime
    jti: str


class TokenDecodeError(RuntimeError):
    pass


def verify_password(plain_password: str, password_hash: str) -> bool:
    return pwd_context.verify(plain_password, password_hash)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def create_access_token(subject: str, expires_delta: timedelta | None = None) -> AccessToken:
    now = datetime.now(timezone.utc)
    expires = now + (expires_delta or timedelta(minutes=settings.access_token_expire_minutes))
    jti = uuid4().hex
    claims: dict[str, Any] = {
        "sub": subject,
        "exp": int(expires.timestamp()),
        "iat": int(now.timestamp()),
        "jti": jti,
    }
    token = jwt.encode(claims, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)
    return AccessToken(token=token, expires_at=expires, jti=jti)


def decode_access_token(token: str) -> TokenPayload:
    try:
        claims = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError as exc:
        raise TokenDecodeError("invalid or expired token") from exc

    subject = claims.get("sub")
    jti = claims.get("jti")
    exp = claims.get("exp")
    if not subject or not jti or exp is None:
        raise TokenDecodeError("malformed token claims")

    return TokenPayload(
        subject=str(subject),
        expires_at=datetime.fromtimestamp(int(exp), tz=timezone.utc),
        jti=str(jti),
    )
