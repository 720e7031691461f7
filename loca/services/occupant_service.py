from __future__ import annotations

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from loca.core.crypto import decrypt_value, encrypt_value
from loca.core.phone import is_valid_phone, normalize_phone
from loca.models.domain import Occupant, Property
from loca.schemas.occupants import (
    OccupantCreate,
    OccupantPropertyRead,
    OccupantRead,
    OccupantUpdate,
)


def list_occupants(db: Session, realm_id: int) -> list[Occupant]:
    query = (
        select(Occupant)
        .where(Occupant.realm_id == realm_id)
        .order_by(Occupant.name.asc(), Occupant.id.asc())
    )
    return list(db.scalars(query).all())


def get_occupant(db: Session, realm_id: int, occupant_id: int) -> Occupant:
    occupant = db.get(Occupant, occupant_id)
    if not occupant or occupant.realm_id != realm_id:
        raise LookupError(f"occupant {occupant_id} not found")
    return occupant


def create_occupant(
    db: Session,
    realm_id: int,
    payload: OccupantCreate,
    actor: str | None = None,
) -> Occupant:
    occupant = Occupant(
        realm_id=realm_id,
        name=payload.name.strip(),
        reference=payload.reference,
        manager=payload.manager,
        enc_contact_email=encrypt_value(payload.contact_email),
        enc_contact_phone=encrypt_value(_clean_phone(payload.contact_phone)),
        begin_date=payload.begin_date,
        end_date=payload.end_date,
        created_by=actor,
        updated_by=actor,
    )
    occupant.properties = _load_realm_properties(db, realm_id, payload.property_ids)
    db.add(occupant)
    db.commit()
    db.refresh(occupant)
    return occupant


def update_occupant(
    db: Session,
    realm_id: int,
    occupant_id: int,
    payload: OccupantUpdate,
    actor: str | None = None,
) -> Occupant:
    occupant = get_occupant(db, realm_id, occupant_id)
    changes = payload.model_dump(exclude_unset=True)

    if "name" in changes:
        if not changes["name"]:
            raise ValueError("name cannot be empty")
        occupant.name = changes["name"].strip()
    for field in ("reference", "manager", "begin_date", "end_date"):
        if field in changes:
            setattr(occupant, field, changes[field])
    if "contact_email" in changes:
        occupant.enc_contact_email = encrypt_value(changes["contact_email"])
    if "contact_phone" in changes:
        occupant.enc_contact_phone = encrypt_value(_clean_phone(changes["contact_phone"]))
    if changes.get("property_ids") is not None:
        occupant.properties = _load_realm_properties(db, realm_id, changes["property_ids"])

    if occupant.begin_date and occupant.end_date and occupant.end_date < occupant.begin_date:
        raise ValueError("end_date must not be before begin_date")

    occupant.updated_by = actor
    db.commit()
    db.refresh(occupant)
    return occupant


def delete_occupants(db: Session, realm_id: int, occupant_ids: list[int]) -> int:
    ids = set(occupant_ids)
    owned = set(
        db.scalars(
            select(Occupant.id).where(Occupant.realm_id == realm_id, Occupant.id.in_(ids))
        )
    )
    if ids - owned:
        missing = ", ".join(str(i) for i in sorted(ids - owned))
        raise LookupError(f"occupants not found: {missing}")

    for occupant in db.scalars(select(Occupant).where(Occupant.id.in_(owned))):
        occupant.properties = []
    db.flush()
    db.execute(delete(Occupant).where(Occupant.id.in_(owned)))
    db.commit()
    return len(owned)


def to_read_model(occupant: Occupant) -> OccupantRead:
    return OccupantRead(
        id=occupant.id,
        realm_id=occupant.realm_id,
        name=occupant.name,
        reference=occupant.reference,
        manager=occupant.manager,
        contact_email=decrypt_value(occupant.enc_contact_email),
        contact_phone=decrypt_value(occupant.enc_contact_phone),
        begin_date=occupant.begin_date,
        end_date=occupant.end_date,
        properties=[OccupantPropertyRead.model_validate(p) for p in occupant.properties],
    )


def _load_realm_properties(db: Session, realm_id: int, property_ids: list[int]) -> list[Property]:
    ids = set(property_ids)
    if not ids:
        return []
    properties = list(
        db.scalars(
            select(Property)
            .where(Property.realm_id == realm_id, Property.id.in_(ids))
            .order_by(Property.name.asc())
        )
    )
    unknown = ids - {prop.id for prop in properties}
    if unknown:
        raise ValueError(
            "properties not in this realm: " + ", ".join(str(i) for i in sorted(unknown))
        )
    return properties


def _clean_phone(phone: str | None) -> str | None:
    normalized = normalize_phone(phone)
    if normalized and not is_valid_phone(normalized):
        raise ValueError("invalid phone number")
    return normalized
