from __future__ import annotations

from loca.models.domain import Occupant, Property


def _property(db_session, realm, name="Flat 1"):
    prop = Property(realm_id=realm.id, type="apartment", name=name)
    db_session.add(prop)
    db_session.commit()
    return prop


def test_create_occupant_with_properties(client, db_session, realm):
    flat = _property(db_session, realm, "Flat 1")
    parking = _property(db_session, realm, "Box 3")

    response = client.post(
        "/occupants",
        json={
            "name": "  Alice Martin ",
            "reference": "T-001",
            "contact_email": "alice@example.com",
            "contact_phone": "+33 6 12 34 56 78",
            "begin_date": "2024-01-01",
            "end_date": "2026-12-31",
            "property_ids": [flat.id, parking.id],
        },
    )

    assert response.status_code == 201, response.text
    body = response.json()
    assert body["name"] == "Alice Martin"
    assert body["contact_email"] == "alice@example.com"
    assert body["contact_phone"] == "+33612345678"
    assert [p["name"] for p in body["properties"]] == ["Box 3", "Flat 1"]


def test_contacts_are_encrypted_at_rest(client, db_session):
    response = client.post(
        "/occupants",
        json={"name": "Bob", "contact_email": "bob@example.com", "contact_phone": "0612345678"},
    )

    occupant = db_session.get(Occupant, response.json()["id"])
    assert occupant.enc_contact_email is not None
    assert b"bob@example.com" not in occupant.enc_contact_email
    assert b"0612345678" not in occupant.enc_contact_phone


def test_property_of_another_realm_is_rejected(client, db_session, other_realm):
    foreign = _property(db_session, other_realm, "Not yours")

    response = client.post("/occupants", json={"name": "Carol", "property_ids": [foreign.id]})

    assert response.status_code == 400
    assert str(foreign.id) in response.json()["detail"]


def test_lease_end_before_begin_is_rejected(client):
    response = client.post(
        "/occupants",
        json={"name": "Dan", "begin_date": "2024-06-01", "end_date": "2024-01-01"},
    )

    assert response.status_code == 422


def test_invalid_phone_is_rejected(client):
    response = client.post("/occupants", json={"name": "Eve", "contact_phone": "12"})

    assert response.status_code == 400


def test_update_occupant(client, db_session, realm):
    flat = _property(db_session, realm)
    created = client.post("/occupants", json={"name": "Frank", "begin_date": "2024-01-01"}).json()

    response = client.patch(
        f"/occupants/{created['id']}",
        json={"manager": "Agency", "property_ids": [flat.id]},
    )

    assert response.status_code == 200
    assert response.json()["manager"] == "Agency"
    assert [p["id"] for p in response.json()["properties"]] == [flat.id]


def test_update_with_end_before_stored_begin_is_rejected(client):
    created = client.post("/occupants", json={"name": "Gina", "begin_date": "2024-06-01"}).json()

    response = client.patch(f"/occupants/{created['id']}", json={"end_date": "2024-01-01"})

    assert response.status_code == 400
    assert client.get(f"/occupants/{created['id']}").json()["end_date"] is None


def test_list_occupants_sorted_by_name(client):
    for name in ("Zoe", "Adam", "Mia"):
        client.post("/occupants", json={"name": name})

    names = [o["name"] for o in client.get("/occupants").json()]

    assert names == ["Adam", "Mia", "Zoe"]


def test_delete_occupants_frees_their_properties(client, db_session, realm):
    flat = _property(db_session, realm)
    created = client.post("/occupants", json={"name": "Hugo", "property_ids": [flat.id]}).json()

    response = client.delete("/occupants", params={"ids": [created["id"]]})

    assert response.json() == {"deleted": 1}
    assert client.get(f"/occupants/{created['id']}").status_code == 404
    assert client.delete("/properties", params={"ids": [flat.id]}).status_code == 200


def test_unknown_occupant_is_404(client):
    assert client.get("/occupants/999").status_code == 404
    assert client.delete("/occupants", params={"ids": [999]}).status_code == 404
