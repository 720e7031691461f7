from __future__ import annotations

from sqlalchemy import Select, delete, select
from sqlalchemy.orm import Session

from loca.core.errors import PropertyInUseError
from loca.models.domain import OccupantProperty, Property
from loca.schemas.properties import PropertyCreate, PropertyUpdate


def build_property_query(realm_id: int) -> Select[tuple[Property]]:
    return (
        select(Property)
        .where(Property.realm_id == realm_id)
        .order_by(Property.type.asc(), Property.name.asc())
    )


def list_properties(db: Session, realm_id: int) -> list[Property]:
    """Realm properties grouped by type, then alphabetical."""
    return list(db.scalars(build_property_query(realm_id)).all())


def get_property(db: Session, realm_id: int, property_id: int) -> Property:
    prop = db.get(Property, property_id)
    if not prop or prop.realm_id != realm_id:
        raise LookupError(f"property {property_id} not found")
    return prop


def create_property(
    db: Session,
    realm_id: int,
    payload: PropertyCreate,
    actor: str | None = None,
) -> Property:
    prop = Property(
        realm_id=realm_id,
        **payload.model_dump(),
        created_by=actor,
        updated_by=actor,
    )
    db.add(prop)
    db.commit()
    db.refresh(prop)
    return prop


def update_property(
    db: Session,
    realm_id: int,
    property_id: int,
    payload: PropertyUpdate,
    actor: str | None = None,
) -> Property:
    prop = get_property(db, realm_id, property_id)
    changes = payload.model_dump(exclude_unset=True)
    for field in ("type", "name", "price", "expense"):
        if field in changes and changes[field] is None:
            raise ValueError(f"{field} cannot be null")
    for field, value in changes.items():
        setattr(prop, field, value)
    prop.updated_by = actor
    db.commit()
    db.refresh(prop)
    return prop


def delete_properties(db: Session, realm_id: int, property_ids: list[int]) -> int:
    ids = set(property_ids)
    owned = set(
        db.scalars(
            select(Property.id).where(Property.realm_id == realm_id, Property.id.in_(ids))
        )
    )
    if ids - owned:
        missing = ", ".join(str(i) for i in sorted(ids - owned))
        raise LookupError(f"properties not found: {missing}")

    rented = sorted(
        set(
            db.scalars(
                select(OccupantProperty.property_id).where(OccupantProperty.property_id.in_(owned))
            )
        )
    )
    if rented:
        raise PropertyInUseError(
            "properties still rented: " + ", ".join(str(i) for i in rented)
        )

    db.execute(delete(Property).where(Property.id.in_(owned)))
    db.commit()
    return len(owned)
