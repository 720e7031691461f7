from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.orm import Session

from loca.core.security import AccessToken, create_access_token, verify_password
from loca.models.domain import AuthSession, RealmMember, User


def authenticate_user(db: Session, username: str, password: str) -> User | None:
    user = db.scalar(select(User).where(User.username == username))
    if not user:
        return None
    if user.status != "ACTIVE":
        return None
    if not verify_password(password, user.password_hash):
        return None
    return user


def issue_login_token(
    db: Session,
    *,
    user: User,
    ip_address: str | None,
    user_agent: str | None,
) -> AccessToken:
    token = create_access_token(str(user.id))
    session = AuthSession(
        user_id=user.id,
        jwt_id=token.jti,
        expires_at=token.expires_at,
        ip_address=ip_address,
        user_agent=user_agent,
    )
    user.last_login_at = datetime.now(timezone.utc)
    db.add(session)
    db.commit()
    db.refresh(user)
    return token


def revoke_session(db: Session, jwt_id: str) -> None:
    session = db.scalar(select(AuthSession).where(AuthSession.jwt_id == jwt_id))
    if session:
        db.delete(session)
        db.commit()


def list_role_codes(user: User) -> set[str]:
    return {role.code for role in user.roles or []}


def list_realm_ids(db: Session, user_id: int) -> set[int]:
    return set(db.scalars(select(RealmMember.realm_id).where(RealmMember.user_id == user_id)))
