import json
import os

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from loca.api import deps
from loca.core.security import hash_password
from loca.db.base import Base
from loca.db.session import get_db
from loca.models.domain import Occupant, Realm, RealmMember, Role, User
from loca.services.emailer_service import EmailerClient
from loca.services.notification_service import JoinPolicy

EMAILER_URL = "http://emailer.test/emailer"
PASSWORD = "correct horse battery"


class FakeEmailer:
    """httpx.MockTransport handler standing in for the emailer service.

    By default every message reaches one recipient, ``<recordId>@example.com``.
    Set ``responder`` to change the answer per payload.
    """

    def __init__(self) -> None:
        self.payloads: list[dict] = []
        self.responder = self.one_recipient

    def __call__(self, request: httpx.Request) -> httpx.Response:
        payload = json.loads(request.content)
        self.payloads.append(payload)
        return self.responder(payload)

    @staticmethod
    def one_recipient(payload: dict) -> httpx.Response:
        return httpx.Response(
            200,
            json=[{**payload, "email": f"{payload['recordId']}@example.com", "status": "sent"}],
        )

    def client(self) -> EmailerClient:
        return EmailerClient(EMAILER_URL, timeout=5.0, transport=httpx.MockTransport(self))


@pytest.fixture()
def db_session():
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = SessionLocal()
    for code in ("ADMIN", "OPERATOR", "VIEWER"):
        session.add(Role(code=code, name=code.title()))
    session.commit()
    yield session
    session.close()
    engine.dispose()


def make_realm(db: Session, name: str) -> Realm:
    realm = Realm(name=name, locale="en", currency="EUR")
    db.add(realm)
    db.commit()
    db.refresh(realm)
    return realm


def make_user(db: Session, username: str, realms: list[Realm], roles: tuple[str, ...] = ("OPERATOR",)) -> User:
    user = User(username=username, password_hash=hash_password(PASSWORD), status="ACTIVE")
    user.roles = [db.query(Role).filter_by(code=code).one() for code in roles]
    db.add(user)
    db.flush()
    for realm in realms:
        db.add(RealmMember(realm_id=realm.id, user_id=user.id))
    db.commit()
    db.refresh(user)
    return user


def make_occupant(db: Session, realm: Realm, name: str) -> Occupant:
    occupant = Occupant(realm_id=realm.id, name=name)
    db.add(occupant)
    db.commit()
    db.refresh(occupant)
    return occupant


def authenticated(user: User, roles: set[str], realm_ids: set[int]) -> deps.AuthenticatedUser:
    session = type("Session", (), {"jwt_id": "test-jti"})()
    return deps.AuthenticatedUser(
        user=user,
        roles=roles,
        session=session,
        token_jti="test-jti",
        realm_ids=realm_ids,
    )


@pytest.fixture()
def realm(db_session: Session) -> Realm:
    return make_realm(db_session, "Rue des Lilas")


@pytest.fixture()
def other_realm(db_session: Session) -> Realm:
    return make_realm(db_session, "Harbour Lofts")


@pytest.fixture()
def operator(db_session: Session, realm: Realm) -> User:
    return make_user(db_session, "operator", [realm])


@pytest.fixture()
def fake_emailer() -> FakeEmailer:
    return FakeEmailer()


@pytest.fixture()
def app_client(db_session: Session, fake_emailer: FakeEmailer):
    """TestClient on the real app with the DB and the emailer replaced."""
    from loca.main import app

    def _override_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_db
    app.dependency_overrides[deps.get_emailer_client] = fake_emailer.client
    app.dependency_overrides[deps.get_dispatch_policy] = lambda: deps.DispatchPolicy(
        demo_mode=False, join_policy=JoinPolicy.FAIL_FAST
    )
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def client(app_client: TestClient, operator: User, realm: Realm):
    """app_client authenticated as an OPERATOR of ``realm``."""
    app_client.app.dependency_overrides[deps.get_current_user] = lambda: authenticated(
        operator, {"OPERATOR"}, {realm.id}
    )
    return app_client
