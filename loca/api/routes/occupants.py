from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from loca.api import deps
from loca.core.roles import READ_ROLES, WRITE_ROLES
from loca.db.session import get_db
from loca.models.domain import Realm
from loca.schemas.occupants import OccupantCreate, OccupantRead, OccupantUpdate
from loca.services import occupant_service
from loca.services.audit_service import log_action

router = APIRouter(prefix="/occupants", tags=["occupants"])


@router.get("", response_model=list[OccupantRead])
def list_occupants(
    db: Session = Depends(get_db),
    realm: Realm = Depends(deps.get_current_realm),
    current_user: deps.AuthenticatedUser = Depends(deps.require_roles(READ_ROLES)),
):
    occupants = occupant_service.list_occupants(db, realm.id)
    return [occupant_service.to_read_model(o) for o in occupants]


@router.get("/{occupant_id}", response_model=OccupantRead)
def get_occupant(
    occupant_id: int,
    db: Session = Depends(get_db),
    realm: Realm = Depends(deps.get_current_realm),
    current_user: deps.AuthenticatedUser = Depends(deps.require_roles(READ_ROLES)),
):
    try:
        occupant = occupant_service.get_occupant(db, realm.id, occupant_id)
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    return occupant_service.to_read_model(occupant)


@router.post("", response_model=OccupantRead, status_code=status.HTTP_201_CREATED)
def create_occupant(
    payload: OccupantCreate,
    db: Session = Depends(get_db),
    realm: Realm = Depends(deps.get_current_realm),
    current_user: deps.AuthenticatedUser = Depends(deps.require_roles(WRITE_ROLES)),
):
    """
    Register a tenant and the properties they rent.
    """
    try:
        occupant = occupant_service.create_occupant(
            db, realm.id, payload, actor=current_user.username
        )
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    log_action(
        db,
        user_id=current_user.id,
        realm_id=realm.id,
        action="occupant.create",
        target_type="occupant",
        target_id=str(occupant.id),
        commit=True,
    )
    return occupant_service.to_read_model(occupant)


@router.patch("/{occupant_id}", response_model=OccupantRead)
def update_occupant(
    occupant_id: int,
    payload: OccupantUpdate,
    db: Session = Depends(get_db),
    realm: Realm = Depends(deps.get_current_realm),
    current_user: deps.AuthenticatedUser = Depends(deps.require_roles(WRITE_ROLES)),
):
    try:
        occupant = occupant_service.update_occupant(
            db, realm.id, occupant_id, payload, actor=current_user.username
        )
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except ValueError as exc:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    log_action(
        db,
        user_id=current_user.id,
        realm_id=realm.id,
        action="occupant.update",
        target_type="occupant",
        target_id=str(occupant.id),
        commit=True,
    )
    return occupant_service.to_read_model(occupant)


@router.delete("")
def delete_occupants(
    ids: list[int] = Query(..., min_length=1),
    db: Session = Depends(get_db),
    realm: Realm = Depends(deps.get_current_realm),
    current_user: deps.AuthenticatedUser = Depends(deps.require_roles(WRITE_ROLES)),
):
    try:
        deleted = occupant_service.delete_occupants(db, realm.id, ids)
    except LookupError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    log_action(
        db,
        user_id=current_user.id,
        realm_id=realm.id,
        action="occupant.delete",
        target_type="occupant",
        target_id=",".join(str(i) for i in sorted(set(ids))),
        commit=True,
    )
    return {"deleted": deleted}
