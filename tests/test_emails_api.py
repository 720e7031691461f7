"""POST /emails against the real app with a mocked emailer."""
from __future__ import annotations

from urllib.parse import quote

import httpx
from sqlalchemy import select

from conftest import authenticated, make_occupant, make_user
from loca.api import deps
from loca.models.domain import AuditLog
from loca.services.notification_service import DEMO_MODE_ERROR_MESSAGE, JoinPolicy


def _body(*tenant_ids, document="rentnotice", year=2024, month=3):
    return {"document": document, "tenantIds": list(tenant_ids), "year": year, "month": month}


def test_sends_to_known_tenants_and_reports_unknown(client, db_session, realm, fake_emailer):
    alice = make_occupant(db_session, realm, "Alice")

    response = client.post("/emails", json=_body(str(alice.id), "9999"))

    assert response.status_code == 200
    assert response.json() == [
        {
            "document": "rentnotice",
            "tenantId": str(alice.id),
            "term": "2024030100",
            "email": f"{alice.id}@example.com",
            "status": "sent",
            "name": "Alice",
        }
    ]
    assert response.headers["X-Unresolved-Tenants"] == "9999"
    assert fake_emailer.payloads == [
        {"templateName": "rentnotice", "recordId": str(alice.id), "params": {"term": "2024030100"}}
    ]


def test_no_unresolved_header_when_every_tenant_resolves(client, db_session, realm):
    alice = make_occupant(db_session, realm, "Alice")

    response = client.post("/emails", json=_body(str(alice.id)))

    assert response.status_code == 200
    assert "X-Unresolved-Tenants" not in response.headers


def test_tenant_of_another_realm_is_unresolved(client, db_session, other_realm, fake_emailer):
    stranger = make_occupant(db_session, other_realm, "Mallory")

    response = client.post("/emails", json=_body(str(stranger.id), "not-a-number"))

    assert response.status_code == 200
    assert response.json() == []
    assert response.headers["X-Unresolved-Tenants"] == f"{stranger.id},not-a-number"
    assert fake_emailer.payloads == []


def test_ids_the_database_cannot_hold_are_unresolved(client, db_session, realm, fake_emailer):
    alice = make_occupant(db_session, realm, "Alice")
    oversized = "99999999999999999999999"

    response = client.post("/emails", json=_body(str(alice.id), oversized, "0"))

    assert response.status_code == 200
    assert [o["name"] for o in response.json()] == ["Alice"]
    assert response.headers["X-Unresolved-Tenants"] == f"{oversized},0"
    assert [p["recordId"] for p in fake_emailer.payloads] == [str(alice.id)]


def test_only_plain_digit_ids_resolve(client, db_session, realm, fake_emailer):
    alice = make_occupant(db_session, realm, "Alice")
    padded = f" {alice.id} "
    signed = f"+{alice.id}"

    response = client.post("/emails", json=_body(padded, signed, str(alice.id)))

    assert response.status_code == 200
    assert [o["tenantId"] for o in response.json()] == [str(alice.id)]
    assert response.headers["X-Unresolved-Tenants"] == ",".join(
        quote(t, safe="") for t in (padded, signed)
    )
    assert [p["recordId"] for p in fake_emailer.payloads] == [str(alice.id)]


def test_emailer_failure_is_500_outside_demo_mode(client, db_session, realm, fake_emailer):
    alice = make_occupant(db_session, realm, "Alice")
    fake_emailer.responder = lambda payload: httpx.Response(500, text="smtp down")

    response = client.post("/emails", json=_body(str(alice.id)))

    assert response.status_code == 500
    assert "500" in response.json()["detail"]
    audit = db_session.scalars(select(AuditLog).where(AuditLog.action == "emails.send")).one()
    assert audit.success is False


def test_emailer_failure_in_demo_mode_returns_error_outcome(client, db_session, realm, fake_emailer):
    alice = make_occupant(db_session, realm, "Alice")
    bob = make_occupant(db_session, realm, "Bob")

    def responder(payload):
        if payload["recordId"] == str(bob.id):
            return httpx.Response(503)
        return fake_emailer.one_recipient(payload)

    fake_emailer.responder = responder
    client.app.dependency_overrides[deps.get_dispatch_policy] = lambda: deps.DispatchPolicy(
        demo_mode=True, join_policy=JoinPolicy.COLLECT_ALL
    )

    response = client.post("/emails", json=_body(str(alice.id), str(bob.id), year=2023, month=5))

    assert response.status_code == 200
    body = response.json()
    assert body[0]["status"] == "sent"
    assert body[1] == {
        "document": "rentnotice",
        "tenantId": str(bob.id),
        "term": "2023050100",
        "name": "Bob",
        "error": {"message": DEMO_MODE_ERROR_MESSAGE},
    }


def test_collect_all_failure_names_failed_tenants(client, db_session, realm, fake_emailer):
    alice = make_occupant(db_session, realm, "Alice")
    bob = make_occupant(db_session, realm, "Bob")
    fake_emailer.responder = lambda payload: httpx.Response(502)
    client.app.dependency_overrides[deps.get_dispatch_policy] = lambda: deps.DispatchPolicy(
        demo_mode=False, join_policy=JoinPolicy.COLLECT_ALL
    )

    response = client.post("/emails", json=_body(str(alice.id), str(bob.id)))

    assert response.status_code == 500
    assert str(alice.id) in response.json()["detail"]
    assert str(bob.id) in response.json()["detail"]
    assert len(fake_emailer.payloads) == 2


def test_successful_send_is_audited(client, db_session, realm, operator):
    alice = make_occupant(db_session, realm, "Alice")

    client.post("/emails", json=_body(str(alice.id), document="invoice"))

    audit = db_session.scalars(select(AuditLog).where(AuditLog.action == "emails.send")).one()
    assert audit.success is True
    assert audit.user_id == operator.id
    assert audit.realm_id == realm.id
    assert audit.target_id == "invoice"


def test_invalid_month_is_rejected(client, fake_emailer):
    response = client.post("/emails", json=_body("1", month=13))

    assert response.status_code == 422
    assert fake_emailer.payloads == []


def test_missing_tenant_ids_is_rejected(client):
    response = client.post("/emails", json={"document": "rentnotice", "year": 2024, "month": 3})

    assert response.status_code == 422


def test_viewer_cannot_send(app_client, db_session, realm):
    viewer = make_user(db_session, "viewer", [realm], roles=("VIEWER",))
    app_client.app.dependency_overrides[deps.get_current_user] = lambda: authenticated(
        viewer, {"VIEWER"}, {realm.id}
    )

    response = app_client.post("/emails", json=_body("1"))

    assert response.status_code == 403


def test_realm_header_for_foreign_realm_is_forbidden(client, other_realm):
    response = client.post(
        "/emails",
        json=_body("1"),
        headers={"X-Realm-Id": str(other_realm.id)},
    )

    assert response.status_code == 403


def test_requires_authentication(app_client):
    response = app_client.post("/emails", json=_body("1"))

    assert response.status_code == 401
