"""HTTP-level tests for the Patient API."""

import uuid

from fastapi.testclient import TestClient
from sqlalchemy import inspect
from sqlalchemy.pool import StaticPool

from patient_api import factory
from patient_api.config import Settings
from patient_api.factory import create_app
from patient_api.models.patient import PatientDocument
from patient_api.models.store import DocumentStore

JANE = {
    "resourceType": "Patient",
    "name": [{"family": "Doe", "given": ["Jane"]}],
    "gender": "female",
    "birthDate": "1990-02-14",
}


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_create_and_read_patient(client):
    response = client.post("/fhir/Patient", json=JANE)
    assert response.status_code == 201

    body = response.json()
    assert body["resourceType"] == "Patient"
    assert "id" in body
    assert response.headers["location"] == f"/fhir/Patient/{body['id']}"

    fetched = client.get(f"/fhir/Patient/{body['id']}")
    assert fetched.status_code == 200
    data = fetched.json()
    assert data["id"] == body["id"]
    assert data["resourceType"] == "Patient"
    assert data["name"] == JANE["name"]
    assert data["gender"] == "female"
    assert data["birthDate"] == "1990-02-14"
    assert data["active"] is True


def test_wrong_resource_type(client):
    response = client.post("/fhir/Patient", json={"resourceType": "Observation"})
    assert response.status_code == 400
    assert response.json() == {"error": "resourceType must be 'Patient'"}


def test_validation_errors_use_envelope(client):
    payload = dict(JANE, birthDate="14/02/1990")
    response = client.post("/fhir/Patient", json=payload)
    assert response.status_code == 400
    assert response.json() == {"error": "birthDate must be in YYYY-MM-DD format"}


def test_non_boolean_active_rejected(client):
    response = client.post("/fhir/Patient", json=dict(JANE, active="yes"))
    assert response.status_code == 400
    assert response.json()["error"].startswith("active:")


def test_active_echoed_as_submitted(client):
    response = client.post("/fhir/Patient", json=dict(JANE, active=False))
    assert response.status_code == 201
    fetched = client.get(f"/fhir/Patient/{response.json()['id']}")
    assert fetched.json()["active"] is False


def test_calendar_invalid_date_accepted(client):
    response = client.post("/fhir/Patient", json=dict(JANE, birthDate="2023-02-30"))
    assert response.status_code == 201


def test_non_object_body_rejected(client):
    response = client.post("/fhir/Patient", json=[JANE])
    assert response.status_code == 400
    assert response.json() == {"error": "Request body must be a JSON object"}

    response = client.post(
        "/fhir/Patient",
        content=b"{not json",
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 400
    assert response.json() == {"error": "Request body must be a JSON object"}


def test_oversized_body_rejected(client):
    padding = "x" * (1024 * 1024)
    response = client.post("/fhir/Patient", json=dict(JANE, note=padding))
    assert response.status_code == 413
    assert response.json() == {"error": "Request body too large"}


def test_streamed_oversized_body_rejected(client, store):
    def chunks():
        yield b'{"resourceType": "Patient", "name": [{"family": "Doe", "given": ["Jane"]}], "note": "'
        for _ in range(32):
            yield b"x" * (64 * 1024)
        yield b'"}'

    response = client.post(
        "/fhir/Patient",
        content=chunks(),
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 413
    assert response.json() == {"error": "Request body too large"}
    assert response.headers["x-content-type-options"] == "nosniff"

    with store._sessions() as db:
        assert db.query(PatientDocument).count() == 0


def test_streamed_body_under_limit_accepted(client):
    def chunks():
        yield b'{"resourceType": "Patient", '
        yield b'"name": [{"family": "Doe", "given": ["Jane"]}]}'

    response = client.post(
        "/fhir/Patient",
        content=chunks(),
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 201


def test_unknown_route_uses_error_envelope(client):
    response = client.get("/fhir/Observation")
    assert response.status_code == 404
    assert response.json() == {"error": "Not Found"}


def test_read_invalid_id(client):
    response = client.get("/fhir/Patient/not-a-real-id-format")
    assert response.status_code == 400
    assert response.json() == {"error": "Invalid id"}


def test_read_unknown_id(client):
    response = client.get(f"/fhir/Patient/{uuid.uuid4()}")
    assert response.status_code == 404
    assert response.json() == {"error": "Patient not found"}


def test_security_headers_present(client):
    for response in (client.get("/health"), client.get("/fhir/Patient/bad-id")):
        assert response.headers["x-content-type-options"] == "nosniff"
        assert response.headers["x-frame-options"] == "DENY"
        assert "content-security-policy" in response.headers


def test_startup_creates_table():
    store = DocumentStore.from_url(
        "sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool
    )
    app = create_app(Settings(), store=store)
    with TestClient(app) as client:
        assert "patient_documents" in inspect(store.engine).get_table_names()
        assert client.post("/fhir/Patient", json=JANE).status_code == 201


def test_factory_builds_no_default_engine(store, monkeypatch):
    def refuse(*args, **kwargs):
        raise AssertionError("default database engine built")

    monkeypatch.setattr(DocumentStore, "from_url", refuse)
    assert not hasattr(factory, "app")

    client = TestClient(factory.create_app(Settings(), store=store))
    assert client.get("/health").status_code == 200
