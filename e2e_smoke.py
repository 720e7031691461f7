from __future__ import annotations

from fastapi.testclient import TestClient

from loca.api import deps
from loca.main import app


def _override_current_user():
    user = type("User", (), {"id": 1, "username": "tester"})()
    session = type("Session", (), {"jwt_id": "dummy"})()
    return deps.AuthenticatedUser(
        user=user,
        roles={"ADMIN"},
        session=session,
        token_jti="dummy",
        realm_ids={1},
    )


def run_smoke() -> None:
    app.dependency_overrides[deps.get_current_user] = _override_current_user
    client = TestClient(app)
    client.get("/health/ping").raise_for_status()
    resp = client.get("/properties", headers={"X-Realm-Id": "1"})
    resp.raise_for_status()
    print("Smoke test completed. properties=", len(resp.json()))


if __name__ == "__main__":
    run_smoke()
