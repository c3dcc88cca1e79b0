"""Tests for the FastAPI API endpoints."""

from __future__ import annotations

import pytest
from fastapi import APIRouter, FastAPI
from fastapi.testclient import TestClient

from weightbalance.api.errors import register_error_handlers


@pytest.fixture
def client(make_client):
    return make_client()


@pytest.fixture
def record_id(client, record_payload):
    resp = client.post("/flight-records", json=record_payload)
    assert resp.status_code == 201
    return resp.json()["id"]


def _zero_record(doc: str) -> dict:
    return {
        "loading_index_doc": doc,
        "weight_report_doc": "WR1",
        "report_date": "2024-01-01",
        "empty_weight": 0,
        "empty_weight_index": 0,
        "dow_domestic": 0,
        "doi_domestic": 0,
        "dow_international": 0,
        "doi_international": 0,
    }


class TestHealth:
    def test_health(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}


class TestReportLifecycle:
    def test_create_then_add_galley_line(self, client):
        resp = client.post("/flight-records", json=_zero_record("DOC1"))
        assert resp.status_code == 201
        record_id = resp.json()["id"]

        resp = client.get(f"/flight-records/{record_id}")
        assert resp.status_code == 200
        data = resp.json()
        assert data["loading_index_doc"] == "DOC1"
        assert data["galley_details"] == []
        assert data["crew_details"] == []

        resp = client.post("/galley-details", json={
            "flight_record_id": record_id,
            "galley_no": "G1",
            "arm_m": 20,
            "domestic_weight_kg": 100,
            "domestic_index": 0.12,
            "international_weight_kg": 0,
            "international_index": 0,
        })
        assert resp.status_code == 201

        data = client.get(f"/flight-records/{record_id}").json()
        assert len(data["galley_details"]) == 1
        assert data["galley_details"][0]["galley_no"] == "G1"
        assert data["totals"]["galley"]["domestic_weight_kg"] == 100.0

    def test_delete_removes_everything(self, client, record_id, galley_payload, crew_payload):
        galley = client.post(
            "/galley-details", json={**galley_payload, "flight_record_id": record_id}
        ).json()
        client.post("/crew-details", json={**crew_payload, "flight_record_id": record_id})

        resp = client.delete(f"/flight-records/{record_id}")
        assert resp.status_code == 200
        assert resp.json()["message"] == f"Flight Record with ID {record_id} deleted successfully."

        assert client.get(f"/flight-records/{record_id}").status_code == 404
        assert client.delete(f"/galley-details/{galley['id']}").status_code == 404


class TestFlightRecords:
    def test_list_empty(self, client):
        resp = client.get("/flight-records")
        assert resp.status_code == 200
        assert resp.json() == []

    def test_list_newest_first(self, client):
        ids = [client.post("/flight-records", json=_zero_record(f"DOC{i}")).json()["id"] for i in range(3)]
        listed = client.get("/flight-records").json()
        assert [r["id"] for r in listed] == sorted(ids, reverse=True)
        assert "galley_details" not in listed[0]

    def test_create_returns_stored_record(self, client, record_payload):
        resp = client.post("/flight-records", json=record_payload)
        data = resp.json()
        assert data["id"] > 0
        assert data["report_date"] == "2024-03-15"
        assert data["empty_weight"] == 13311.5
        assert data["created_at"] is not None

    def test_duplicate_loading_index_doc(self, client, record_id, record_payload):
        resp = client.post("/flight-records", json=record_payload)
        assert resp.status_code == 409
        assert resp.json()["message"] == "A report with this Loading Index Doc already exists."

    def test_duplicate_on_update(self, client, record_id, record_payload):
        other = client.post(
            "/flight-records", json={**record_payload, "loading_index_doc": "OTHER"}
        ).json()
        resp = client.put(f"/flight-records/{other['id']}", json=record_payload)
        assert resp.status_code == 409
        assert resp.json()["message"] == "Another report with this Loading Index Doc already exists."

    def test_missing_field(self, client, record_payload):
        del record_payload["dow_domestic"]
        resp = client.post("/flight-records", json=record_payload)
        assert resp.status_code == 400
        data = resp.json()
        assert data["error"] == "missing_field"
        assert "dow_domestic" in data["message"]
        assert client.get("/flight-records").json() == []

    def test_non_numeric_field(self, client, record_payload):
        record_payload["empty_weight"] = "abc"
        resp = client.post("/flight-records", json=record_payload)
        assert resp.status_code == 400
        assert resp.json()["error"] == "non_numeric_field"

    def test_invalid_date(self, client, record_payload):
        record_payload["report_date"] = "yesterday"
        resp = client.post("/flight-records", json=record_payload)
        assert resp.status_code == 400
        assert resp.json()["error"] == "invalid_date"

    def test_compact_date_rejected(self, client, record_payload):
        record_payload["report_date"] = "20240315"
        resp = client.post("/flight-records", json=record_payload)
        assert resp.status_code == 400
        assert resp.json()["error"] == "invalid_date"

    def test_body_must_be_object(self, client):
        resp = client.post("/flight-records", json=["DOC1"])
        assert resp.status_code == 400
        assert resp.json()["message"] == "Request body must be a JSON object."

    def test_get_not_found(self, client):
        resp = client.get("/flight-records/999")
        assert resp.status_code == 404
        assert resp.json() == {"message": "Flight Record not found."}

    def test_invalid_id(self, client):
        resp = client.get("/flight-records/abc")
        assert resp.status_code == 400
        assert resp.json()["message"] == "Invalid or missing ID."

    def test_update(self, client, record_id, record_payload):
        resp = client.put(
            f"/flight-records/{record_id}", json={**record_payload, "weight_report_doc": "WR-NEW"}
        )
        assert resp.status_code == 200
        assert resp.json()["weight_report_doc"] == "WR-NEW"
        assert client.get(f"/flight-records/{record_id}").json()["weight_report_doc"] == "WR-NEW"

    def test_update_not_found(self, client, record_payload):
        resp = client.put("/flight-records/999", json=record_payload)
        assert resp.status_code == 404
        assert resp.json()["message"] == "Flight Record not found for update."

    def test_delete_not_found(self, client):
        resp = client.delete("/flight-records/999")
        assert resp.status_code == 404
        assert resp.json()["message"] == "Flight Record not found for deletion."


class TestDetailLines:
    def test_create_crew(self, client, record_id, crew_payload):
        resp = client.post("/crew-details", json={**crew_payload, "flight_record_id": record_id})
        assert resp.status_code == 201
        data = resp.json()
        assert data["flight_record_id"] == record_id
        assert data["qty"] == 2
        assert data["index"] == -2.27

    def test_create_requires_owner(self, client, galley_payload):
        resp = client.post("/galley-details", json=galley_payload)
        assert resp.status_code == 400
        assert resp.json()["error"] == "missing_field"

    def test_unknown_owner_is_500(self, client, galley_payload):
        resp = client.post("/galley-details", json={**galley_payload, "flight_record_id": 999})
        assert resp.status_code == 500
        data = resp.json()
        assert data["message"] == "Internal Server Error"
        assert "error" not in data

    def test_update_galley(self, client, record_id, galley_payload):
        line = client.post(
            "/galley-details", json={**galley_payload, "flight_record_id": record_id}
        ).json()
        resp = client.put(f"/galley-details/{line['id']}", json={**galley_payload, "galley_no": "G2"})
        assert resp.status_code == 200
        assert resp.json()["galley_no"] == "G2"
        assert resp.json()["flight_record_id"] == record_id

    def test_update_crew_not_found(self, client, crew_payload):
        resp = client.put("/crew-details/999", json=crew_payload)
        assert resp.status_code == 404
        assert resp.json()["message"] == "Crew Detail not found for update."

    def test_update_validation(self, client, record_id, crew_payload):
        line = client.post(
            "/crew-details", json={**crew_payload, "flight_record_id": record_id}
        ).json()
        resp = client.put(f"/crew-details/{line['id']}", json={**crew_payload, "weight_kg": "lots"})
        assert resp.status_code == 400
        assert resp.json()["error"] == "non_numeric_field"

    def test_delete_crew(self, client, record_id, crew_payload):
        line = client.post(
            "/crew-details", json={**crew_payload, "flight_record_id": record_id}
        ).json()
        resp = client.delete(f"/crew-details/{line['id']}")
        assert resp.status_code == 200
        assert resp.json()["message"] == f"Crew Detail with ID {line['id']} deleted successfully."
        assert client.get(f"/flight-records/{record_id}").json()["crew_details"] == []

    def test_delete_galley_not_found(self, client):
        resp = client.delete("/galley-details/999")
        assert resp.status_code == 404
        assert resp.json()["message"] == "Galley Detail not found for deletion."

    def test_totals(self, client, record_id, crew_payload):
        for qty, weight in ((2, 170), (3, 255)):
            client.post("/crew-details", json={
                **crew_payload, "qty": qty, "weight_kg": weight, "flight_record_id": record_id,
            })
        totals = client.get(f"/flight-records/{record_id}").json()["totals"]["crew"]
        assert totals["qty"] == 5
        assert totals["weight_kg"] == pytest.approx(425)


class TestMethodNotAllowed:
    def test_collection(self, client):
        resp = client.put("/flight-records", json={})
        assert resp.status_code == 405
        assert resp.headers["allow"] == "GET, POST"
        assert resp.json()["message"] == "Method PUT Not Allowed"

    def test_item(self, client):
        resp = client.post("/flight-records/1", json={})
        assert resp.status_code == 405
        assert resp.headers["allow"] == "DELETE, GET, PUT"

    def test_detail_collection(self, client):
        resp = client.get("/galley-details")
        assert resp.status_code == 405
        assert resp.headers["allow"] == "POST"

    def test_detail_item(self, client):
        resp = client.get("/crew-details/1")
        assert resp.status_code == 405
        assert resp.headers["allow"] == "DELETE, PUT"

    def test_nested_routers(self):
        inner = APIRouter(prefix="/inner")

        @inner.get("/item")
        def read_item():
            return {}

        @inner.delete("/item")
        def delete_item():
            return {}

        outer = APIRouter()
        outer.include_router(inner)
        app = FastAPI()
        register_error_handlers(app)
        app.include_router(outer)

        resp = TestClient(app).post("/inner/item")
        assert resp.status_code == 405
        assert resp.headers["allow"] == "DELETE, GET"


class TestIndexPolicy:
    def test_advisory_stores_supplied_index(self, client, record_id, galley_payload):
        resp = client.post("/galley-details", json={
            **galley_payload, "domestic_index": 7.5, "flight_record_id": record_id,
        })
        assert resp.json()["domestic_index"] == 7.5

    def test_enforce_recomputes_index(self, make_client, record_payload, galley_payload):
        client = make_client(env={"INDEX_POLICY": "enforce"})
        record_id = client.post("/flight-records", json=record_payload).json()["id"]
        resp = client.post("/galley-details", json={
            **galley_payload, "domestic_weight_kg": 200, "domestic_index": 7.5,
            "flight_record_id": record_id,
        })
        assert resp.status_code == 201
        assert resp.json()["domestic_index"] == 0.23


class TestDevModeErrors:
    def test_internal_error_detail_in_dev(self, client, galley_payload, monkeypatch):
        monkeypatch.setenv("ENVIRONMENT", "development")
        resp = client.post("/galley-details", json={**galley_payload, "flight_record_id": 999})
        assert resp.status_code == 500
        assert "FOREIGN KEY" in resp.json()["error"]
