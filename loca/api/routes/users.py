from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from loca.api import deps
from loca.core.roles import ADMIN_ROLES
from loca.db.session import get_db
from loca.models.domain import Realm
from loca.schemas.users import UserCreate, UserRead
from loca.services.audit_service import log_action
from loca.services.user_service import create_user

router = APIRouter(prefix="/users", tags=["users"])


@router.post("", response_model=UserRead, status_code=201)
def create_user_endpoint(
    payload: UserCreate,
    db: Session = Depends(get_db),
    realm: Realm = Depends(deps.get_current_realm),
    current_user: deps.AuthenticatedUser = Depends(deps.require_roles(ADMIN_ROLES)),
):
    """
    Create a user who is a member of the current realm.
    """
    try:
        user = create_user(db, payload, realm_id=realm.id, actor=current_user.username)
        log_action(
            db,
            user_id=current_user.id,
            realm_id=realm.id,
            action="user.create",
            target_type="user",
            target_id=str(user.id),
            commit=True,
        )
        return UserRead.model_validate(user)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
