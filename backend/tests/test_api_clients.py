"""
Tests d'intégration API pour le CRUD des clients.
GET    /api/v1/clients          — listage
GET    /api/v1/clients/search   — recherche par nom
GET    /api/v1/clients/{id}     — détail
POST   /api/v1/clients          — inscription
PUT    /api/v1/clients/{id}     — mise à jour
DELETE /api/v1/clients/{id}     — suppression
"""

import uuid
from datetime import date, datetime
from unittest.mock import MagicMock, patch

from app.models.client import Client
from app.models.trainer import Trainer


# --- Helpers ---

def make_trainer(name="Yassine"):
    t = MagicMock(spec=Trainer)
    t.id = uuid.uuid4()
    t.name = name
    t.created_at = datetime.now()
    return t


def make_client(**kwargs) -> Client:
    c = MagicMock(spec=Client)
    c.id = kwargs.get("id", uuid.uuid4())
    c.name = kwargs.get("name", "Karim Benali")
    c.phone = kwargs.get("phone", "+32470123456")
    c.address = kwargs.get("address", "Rue Haute 12, Bruxelles")
    c.fee_submission_date = kwargs.get("fee_submission_date", date(2026, 9, 15))
    c.trainer = kwargs.get("trainer", None)
    c.trainer_id = c.trainer.id if c.trainer else None
    c.has_photo = kwargs.get("has_photo", False)
    c.photo_url = f"/api/v1/clients/{c.id}/photo" if c.has_photo else None
    c.created_at = kwargs.get("created_at", datetime.now())
    return c


VALID_PAYLOAD = {
    "name": "Karim Benali",
    "phone": "+32470123456",
    "address": "Rue Haute 12, Bruxelles",
    "fee_submission_date": "2026-09-15",
}


# ============================================================
# GET /api/v1/clients
# ============================================================

class TestListClients:
    def test_liste_vide(self, client, mock_db):
        mock_db.execute.return_value.scalars.return_value.all.return_value = []

        resp = client.get("/api/v1/clients")

        assert resp.status_code == 200
        assert resp.json() == []

    def test_liste_avec_coach_et_photo(self, client, mock_db):
        trainer = make_trainer()
        c1 = make_client(name="Alice", trainer=trainer, has_photo=True)
        c2 = make_client(name="Bruno")
        mock_db.execute.return_value.scalars.return_value.all.return_value = [c1, c2]

        resp = client.get("/api/v1/clients")

        assert resp.status_code == 200
        data = resp.json()
        assert len(data) == 2
        assert data[0]["trainer"]["name"] == "Yassine"
        assert data[0]["photo_url"] == f"/api/v1/clients/{c1.id}/photo"
        assert data[1]["trainer"] is None
        assert data[1]["photo_url"] is None

    def test_photo_inline_jamais_exposee(self, client, mock_db):
        mock_db.execute.return_value.scalars.return_value.all.return_value = [make_client(has_photo=True)]

        data = client.get("/api/v1/clients").json()[0]

        assert "photo_data" not in data


class TestSearchClients:
    def test_recherche_par_nom(self, client, mock_db):
        mock_db.execute.return_value.scalars.return_value.all.return_value = [make_client(name="Karim")]

        resp = client.get("/api/v1/clients/search", params={"name": "kar"})

        assert resp.status_code == 200
        assert resp.json()[0]["name"] == "Karim"
        sql = str(mock_db.execute.call_args[0][0])
        assert "lower(clients.name) LIKE lower(" in sql


# ============================================================
# GET /api/v1/clients/{id}
# ============================================================

def test_detail_client(client, mock_db):
    c = make_client()
    mock_db.get.return_value = c

    resp = client.get(f"/api/v1/clients/{c.id}")

    assert resp.status_code == 200
    assert resp.json()["id"] == str(c.id)


def test_detail_client_introuvable(client, mock_db):
    mock_db.get.return_value = None
    resp = client.get(f"/api/v1/clients/{uuid.uuid4()}")
    assert resp.status_code == 404


# ============================================================
# POST /api/v1/clients
# ============================================================

def test_create_client_succes(client):
    created = make_client()

    with patch("app.routers.clients.Client") as mock_cls:
        mock_cls.return_value = created

        resp = client.post("/api/v1/clients", json=VALID_PAYLOAD)

    assert resp.status_code == 201
    data = resp.json()
    assert data["name"] == "Karim Benali"
    assert data["fee_submission_date"] == "2026-09-15"
    assert data["has_photo"] is False


def test_create_client_avec_coach_inconnu(client, mock_db):
    mock_db.get.return_value = None

    resp = client.post("/api/v1/clients", json={**VALID_PAYLOAD, "trainer_id": str(uuid.uuid4())})

    assert resp.status_code == 404
    assert "Coach" in resp.json()["detail"]
    mock_db.add.assert_not_called()


def test_create_client_nom_vide(client):
    resp = client.post("/api/v1/clients", json={**VALID_PAYLOAD, "name": "   "})
    assert resp.status_code == 422


def test_create_client_sans_telephone(client):
    payload = {k: v for k, v in VALID_PAYLOAD.items() if k != "phone"}
    resp = client.post("/api/v1/clients", json=payload)
    assert resp.status_code == 422


def test_create_client_date_invalide(client):
    resp = client.post("/api/v1/clients", json={**VALID_PAYLOAD, "fee_submission_date": "pas-une-date"})
    assert resp.status_code == 422


# ============================================================
# PUT /api/v1/clients/{id}
# ============================================================

def test_update_client_succes(client, mock_db):
    c = make_client(phone="+32470000000")
    mock_db.get.return_value = c

    resp = client.put(f"/api/v1/clients/{c.id}", json={"phone": " +32470999999 "})

    assert resp.status_code == 200
    assert c.phone == "+32470999999"
    mock_db.commit.assert_called_once()


def test_update_client_introuvable(client, mock_db):
    mock_db.get.return_value = None
    resp = client.put(f"/api/v1/clients/{uuid.uuid4()}", json={"name": "X"})
    assert resp.status_code == 404


def test_update_client_adresse_vide(client):
    resp = client.put(f"/api/v1/clients/{uuid.uuid4()}", json={"address": ""})
    assert resp.status_code == 422


def test_update_client_nom_null(client, mock_db):
    """Un null explicite sur un champ obligatoire → 422, rien n'est écrit."""
    resp = client.put(f"/api/v1/clients/{uuid.uuid4()}", json={"name": None})
    assert resp.status_code == 422
    mock_db.commit.assert_not_called()


def test_update_client_date_cotisation_null(client, mock_db):
    resp = client.put(f"/api/v1/clients/{uuid.uuid4()}", json={"fee_submission_date": None})
    assert resp.status_code == 422
    mock_db.commit.assert_not_called()


def test_update_client_retire_coach(client, mock_db):
    """trainer_id: null reste accepté et détache le client de son coach."""
    c = make_client(trainer=make_trainer())
    mock_db.get.return_value = c

    resp = client.put(f"/api/v1/clients/{c.id}", json={"trainer_id": None})

    assert resp.status_code == 200
    assert c.trainer_id is None
    mock_db.commit.assert_called_once()


# ============================================================
# DELETE /api/v1/clients/{id}
# ============================================================

def test_delete_client_succes(client, mock_db):
    c = make_client()
    mock_db.get.return_value = c

    resp = client.delete(f"/api/v1/clients/{c.id}")

    assert resp.status_code == 204
    mock_db.delete.assert_called_once_with(c)
    mock_db.commit.assert_called_once()
    mock_db.execute.assert_not_called()  # présences laissées en place


def test_delete_client_introuvable(client, mock_db):
    mock_db.get.return_value = None
    resp = client.delete(f"/api/v1/clients/{uuid.uuid4()}")
    assert resp.status_code == 404
    mock_db.delete.assert_not_called()
