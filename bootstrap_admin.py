from __future__ import annotations

import argparse

from sqlalchemy import select

from loca.db.session import SessionLocal
from loca.models.domain import Realm
from loca.core.roles import RoleCode
from loca.schemas.users import UserCreate
from loca.services.user_service import create_user


def main() -> None:
    parser = argparse.ArgumentParser(description="Create a realm and its first administrator")
    parser.add_argument("realm", help="realm (organization) name")
    parser.add_argument("username")
    parser.add_argument("password")
    parser.add_argument("--locale", default="en")
    parser.add_argument("--currency", default="EUR")
    args = parser.parse_args()

    db = SessionLocal()
    try:
        realm = db.scalar(select(Realm).where(Realm.name == args.realm))
        if not realm:
            realm = Realm(name=args.realm, locale=args.locale, currency=args.currency)
            db.add(realm)
            db.commit()
            db.refresh(realm)
        user = create_user(
            db,
            UserCreate(
                username=args.username,
                password=args.password,
                roles=[RoleCode.ADMIN, RoleCode.OPERATOR],
            ),
            realm_id=realm.id,
            actor="bootstrap",
        )
        print(f"realm {realm.id} ({realm.name}), admin user {user.id} ({user.username})")
    finally:
        db.close()


if __name__ == "__main__":
    main()
