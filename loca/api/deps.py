from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from fastapi import Depends, Header, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy import select
from sqlalchemy.orm import Session

from loca.core.config import settings
from loca.core.roles import READ_ROLES
from loca.core.security import TokenDecodeError, decode_access_token
from loca.db.session import get_db
from loca.models.domain import AuthSession, Realm, User
from loca.services.auth_service import list_realm_ids, list_role_codes
from loca.services.emailer_service import EmailerClient, build_emailer_client
from loca.services.notification_service import JoinPolicy

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/token")


@dataclass
class AuthenticatedUser:
    user: User
    roles: set[str]
    session: AuthSession
    token_jti: str
    realm_ids: set[int] = field(default_factory=set)

    @property
    def id(self) -> int:
        return self.user.id

    @property
    def username(self) -> str:
        return self.user.username


@dataclass(frozen=True)
class DispatchPolicy:
    demo_mode: bool
    join_policy: JoinPolicy


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def get_current_user(token: str = Depends(oauth2_scheme), db: Session = Depends(get_db)) -> AuthenticatedUser:
    unauthorized = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="authentication required",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = decode_access_token(token)
    except TokenDecodeError as exc:
        raise unauthorized from exc

    session = db.scalar(select(AuthSession).where(AuthSession.jwt_id == payload.jti))
    if not session or _as_utc(session.expires_at) <= datetime.now(timezone.utc):
        raise unauthorized

    user = db.get(User, int(payload.subject))
    if not user or user.status != "ACTIVE":
        raise unauthorized
    if session.user_id != user.id:
        raise unauthorized

    return AuthenticatedUser(
        user=user,
        roles=list_role_codes(user),
        session=session,
        token_jti=session.jwt_id,
        realm_ids=list_realm_ids(db, user.id),
    )


def require_roles(allowed_roles: set[str] | None = None):
    allowed = allowed_roles or READ_ROLES

    def _dependency(current_user: AuthenticatedUser = Depends(get_current_user)) -> AuthenticatedUser:
        if not current_user.roles.intersection(allowed):
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="insufficient role")
        return current_user

    return _dependency


def get_current_realm(
    realm_id: int | None = Header(default=None, alias="X-Realm-Id"),
    db: Session = Depends(get_db),
    current_user: AuthenticatedUser = Depends(get_current_user),
) -> Realm:
    """Realm the request works in: the X-Realm-Id header, or the user's only realm."""
    if realm_id is None:
        if len(current_user.realm_ids) != 1:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="X-Realm-Id header required",
            )
        (realm_id,) = current_user.realm_ids

    if realm_id not in current_user.realm_ids:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="realm access denied")
    realm = db.get(Realm, realm_id)
    if not realm:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="realm access denied")
    return realm


def get_emailer_client() -> EmailerClient:
    return build_emailer_client()


def get_dispatch_policy() -> DispatchPolicy:
    return DispatchPolicy(
        demo_mode=settings.demo_mode,
        join_policy=JoinPolicy(settings.dispatch_join_policy),
    )
