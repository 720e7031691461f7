from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from loca.api import deps
from loca.core.errors import PropertyInUseError
from loca.core.roles import READ_ROLES, WRITE_ROLES
from loca.db.session import get_db
from loca.models.domain import Realm
from loca.schemas.properties import PropertyCreate, PropertyRead, PropertyUpdate
from loca.services import property_service
from loca.services.audit_service import log_action

router = APIRouter(prefix="/properties", tags=["properties"])


@router.get("", response_model=list[PropertyRead])
def list_properties(
    db: Session = Depends(get_db),
    realm: Realm = Depends(deps.get_current_realm),
    current_user: deps.AuthenticatedUser = Depends(deps.require_roles(READ_ROLES)),
):
    return [PropertyRead.model_validate(p) for p in property_service.list_properties(db, realm.id)]


@router.get("/{property_id}", response_model=PropertyRead)
def get_property(
    property_id: int,
    db: Session = Depends(get_db),
    realm: Realm = Depends(deps.get_current_realm),
    current_user: deps.AuthenticatedUser = Depends(deps.require_roles(READ_ROLES)),
):
    try:
        return PropertyRead.model_validate(property_service.get_property(db, realm.id, property_id))
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


@router.post("", response_model=PropertyRead, status_code=status.HTTP_201_CREATED)
def create_property(
    payload: PropertyCreate,
    db: Session = Depends(get_db),
    realm: Realm = Depends(deps.get_current_realm),
    current_user: deps.AuthenticatedUser = Depends(deps.require_roles(WRITE_ROLES)),
):
    prop = property_service.create_property(db, realm.id, payload, actor=current_user.username)
    log_action(
        db,
        user_id=current_user.id,
        realm_id=realm.id,
        action="property.create",
        target_type="property",
        target_id=str(prop.id),
        commit=True,
    )
    return PropertyRead.model_validate(prop)


@router.patch("/{property_id}", response_model=PropertyRead)
def update_property(
    property_id: int,
    payload: PropertyUpdate,
    db: Session = Depends(get_db),
    realm: Realm = Depends(deps.get_current_realm),
    current_user: deps.AuthenticatedUser = Depends(deps.require_roles(WRITE_ROLES)),
):
    try:
        prop = property_service.update_property(
            db, realm.id, property_id, payload, actor=current_user.username
        )
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    log_action(
        db,
        user_id=current_user.id,
        realm_id=realm.id,
        action="property.update",
        target_type="property",
        target_id=str(prop.id),
        commit=True,
    )
    return PropertyRead.model_validate(prop)


@router.delete("")
def delete_properties(
    ids: list[int] = Query(..., min_length=1),
    db: Session = Depends(get_db),
    realm: Realm = Depends(deps.get_current_realm),
    current_user: deps.AuthenticatedUser = Depends(deps.require_roles(WRITE_ROLES)),
):
    try:
        deleted = property_service.delete_properties(db, realm.id, ids)
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except PropertyInUseError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    log_action(
        db,
        user_id=current_user.id,
        realm_id=realm.id,
        action="property.delete",
        target_type="property",
        target_id=",".join(str(i) for i in sorted(set(ids))),
        commit=True,
    )
    return {"deleted": deleted}
