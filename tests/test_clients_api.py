from datetime import datetime

import pytest
from sqlalchemy import text

from app.models import Client

ALICE = {"name": "Alice", "email": "a@b.com", "phone": "555-1234", "address": "1 Main St"}


def _create(client, payload):
    response = client.post("/clients", json=payload)
    assert response.status_code == 200, response.text
    return response.json()["id"]


def test_create_and_fetch_round_trip(auth_client):
    client_id = _create(auth_client, ALICE)

    response = auth_client.get(f"/clients/{client_id}")
    assert response.status_code == 200
    data = response.json()
    for key, value in ALICE.items():
        assert data[key] == value
    assert data["id"] == client_id
    assert data["status"] == "active"
    assert data["created_at"] is not None
    assert data["updated_at"] is not None


def test_create_normalizes_fields(auth_client):
    client_id = _create(auth_client, {"name": "  Bob  ", "email": "", "status": "INACTIVE"})
    data = auth_client.get(f"/clients/{client_id}").json()
    assert data["name"] == "Bob"
    assert data["email"] is None
    assert data["status"] == "inactive"


def test_create_reports_all_validation_errors(auth_client, db):
    response = auth_client.post("/clients", json={"name": " ", "email": "bad", "phone": "1"})
    assert response.status_code == 400
    assert response.json() == {"error": "name required, invalid email, invalid phone"}
    assert db.query(Client).count() == 0


def test_list_clients_newest_first(auth_client):
    first = _create(auth_client, {"name": "First"})
    second = _create(auth_client, {"name": "Second"})

    response = auth_client.get("/clients")
    assert response.status_code == 200
    assert [c["id"] for c in response.json()] == [second, first]


def test_get_missing_client(auth_client):
    response = auth_client.get("/clients/999")
    assert response.status_code == 404
    assert response.json() == {"error": "Not found"}


def test_partial_update_keeps_other_fields(auth_client):
    client_id = _create(auth_client, ALICE)
    before = auth_client.get(f"/clients/{client_id}").json()

    response = auth_client.put(f"/clients/{client_id}", json={"status": "inactive"})
    assert response.status_code == 200
    assert response.json() == {"updated": 1}

    after = auth_client.get(f"/clients/{client_id}").json()
    for key in ("name", "email", "phone", "address", "created_at"):
        assert after[key] == before[key]
    assert after["status"] == "inactive"
    assert datetime.fromisoformat(after["updated_at"]) > datetime.fromisoformat(before["updated_at"])


def test_update_can_clear_optional_field(auth_client):
    client_id = _create(auth_client, ALICE)
    auth_client.put(f"/clients/{client_id}", json={"address": ""})
    assert auth_client.get(f"/clients/{client_id}").json()["address"] is None


def test_update_rejects_blank_name(auth_client):
    client_id = _create(auth_client, ALICE)
    response = auth_client.put(f"/clients/{client_id}", json={"name": ""})
    assert response.status_code == 400
    assert "name" in response.json()["error"]
    assert auth_client.get(f"/clients/{client_id}").json()["name"] == "Alice"


def test_update_missing_client_is_not_an_error(auth_client):
    response = auth_client.put("/clients/999", json={"name": "Ghost"})
    assert response.status_code == 200
    assert response.json() == {"updated": 0}


def test_delete_client(auth_client):
    client_id = _create(auth_client, ALICE)
    response = auth_client.delete(f"/clients/{client_id}")
    assert response.json() == {"deleted": 1}
    assert auth_client.get(f"/clients/{client_id}").status_code == 404


def test_delete_missing_client_reports_zero(auth_client):
    response = auth_client.delete("/clients/999")
    assert response.status_code == 200
    assert response.json() == {"deleted": 0}


@pytest.mark.parametrize("bad_id", ["abc", "1.5", "99999999999999999999999"])
def test_non_integer_id_matches_nothing(auth_client, bad_id):
    _create(auth_client, ALICE)

    response = auth_client.get(f"/clients/{bad_id}")
    assert response.status_code == 404
    assert response.json() == {"error": "Not found"}

    assert auth_client.put(f"/clients/{bad_id}", json={"name": "Bob"}).json() == {"updated": 0}
    assert auth_client.delete(f"/clients/{bad_id}").json() == {"deleted": 0}
    assert [c["name"] for c in auth_client.get("/clients").json()] == ["Alice"]


def test_email_with_trailing_newline_is_rejected(auth_client, db):
    response = auth_client.post("/clients", json={"name": "Alice", "email": "a@b.com\n"})
    assert response.status_code == 400
    assert response.json() == {"error": "invalid email"}
    assert db.query(Client).count() == 0

    client_id = _create(auth_client, ALICE)
    response = auth_client.put(f"/clients/{client_id}", json={"email": "a@b.com\n"})
    assert response.status_code == 400
    assert auth_client.get(f"/clients/{client_id}").json()["email"] == "a@b.com"


@pytest.mark.parametrize(
    "method, path, body",
    [
        ("get", "/clients", None),
        ("get", "/clients/1", None),
        ("post", "/clients", ALICE),
        ("put", "/clients/1", {"name": "Mallory"}),
        ("delete", "/clients/1", None),
    ],
)
def test_client_routes_require_session(client, db, method, path, body):
    db.add(Client(name="Existing"))
    db.commit()

    kwargs = {"json": body} if body is not None else {}
    response = client.request(method.upper(), path, **kwargs)
    assert response.status_code == 401
    assert response.json() == {"error": "unauthorized"}

    db.expire_all()
    rows = db.query(Client).all()
    assert [(c.id, c.name) for c in rows] == [(1, "Existing")]


def test_storage_failure_does_not_leak_engine_text(auth_client, db):
    db.execute(text("DROP TABLE clients"))
    db.commit()

    response = auth_client.get("/clients")
    assert response.status_code == 500
    assert response.json() == {"error": "storage failure"}


def test_health(client):
    assert client.get("/health").json()["status"] == "running"
