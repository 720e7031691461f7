from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from loca.core.crypto import encrypt_value
from loca.core.security import hash_password
from loca.models.domain import RealmMember, Role, User
from loca.schemas.users import UserCreate


def create_user(
    db: Session,
    payload: UserCreate,
    *,
    realm_id: int,
    actor: str | None = None,
) -> User:
    """Create a user and make it a member of ``realm_id``."""
    if db.scalar(select(User.id).where(User.username == payload.username)):
        raise ValueError("username already taken")

    codes = sorted({role.value for role in payload.roles})
    roles = list(db.scalars(select(Role).where(Role.code.in_(codes))))
    missing = set(codes) - {role.code for role in roles}
    if missing:
        raise ValueError(f"unknown roles: {', '.join(sorted(missing))}")

    user = User(
        username=payload.username,
        password_hash=hash_password(payload.password),
        enc_email=encrypt_value(payload.email),
        status=payload.status,
        created_by=actor,
        updated_by=actor,
    )
    user.roles = roles
    db.add(user)
    db.flush()
    db.add(RealmMember(realm_id=realm_id, user_id=user.id))
    db.commit()
    db.refresh(user)
    return user
