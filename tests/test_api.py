"""
HTTP surface tests through FastAPI's TestClient with the generator and the
trip store swapped for in-process doubles.
"""
import pytest
from fastapi.testclient import TestClient

from trip_planner.ai.generation import StaticGenerationClient
from trip_planner.dependencies import get_generation_client, get_trip_repo
from trip_planner.main import app

from conftest import PARIS_ITINERARY

API = "/api/v1"
ALICE = {"X-User-Id": "alice"}
BOB = {"X-User-Id": "bob"}

TRIP_BODY = {
    "destination": "Paris",
    "startDate": "2025-06-01",
    "endDate": "2025-06-03",
    "itinerary": PARIS_ITINERARY,
}


@pytest.fixture
def reply(fenced_paris):
    return {"text": fenced_paris}


@pytest.fixture
def client(memory_repo, reply):
    app.dependency_overrides[get_trip_repo] = lambda: memory_repo
    app.dependency_overrides[get_generation_client] = lambda: StaticGenerationClient(reply["text"])
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def _save(client, headers=ALICE, **overrides):
    response = client.post(f"{API}/trips", json={**TRIP_BODY, **overrides}, headers=headers)
    assert response.status_code == 201
    return response.json()["tripId"]


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


# ---------------------------------------------------------------------------
# POST /itineraries/generate
# ---------------------------------------------------------------------------

class TestGenerate:
    def test_returns_raw_itinerary(self, client, fenced_paris):
        response = client.post(
            f"{API}/itineraries/generate",
            json={"destination": "Paris", "startDate": "2025-06-01", "endDate": "2025-06-03", "interests": "art"},
        )
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["itinerary"] == fenced_paris
        assert body["validated"] is True
        assert body["rejection"] is None

    def test_unparseable_reply_still_returned(self, client, reply):
        reply["text"] = "Sorry, I cannot help"
        response = client.post(
            f"{API}/itineraries/generate",
            json={"destination": "Paris", "startDate": "2025-06-01", "endDate": "2025-06-03"},
        )
        body = response.json()
        assert response.status_code == 200
        assert body["itinerary"] == "Sorry, I cannot help"
        assert body["validated"] is False
        assert body["rejection"]

    def test_empty_reply_is_structured_error(self, client, reply):
        reply["text"] = ""
        response = client.post(
            f"{API}/itineraries/generate",
            json={"destination": "Paris", "startDate": "2025-06-01", "endDate": "2025-06-03"},
        )
        assert response.status_code == 502
        assert response.json()["success"] is False
        assert response.json()["error"]["code"] == "GENERATION_EMPTY"

    def test_missing_dates_is_validation_error(self, client):
        response = client.post(f"{API}/itineraries/generate", json={"destination": "Paris"})
        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert error["details"]["field"] == "startDate"


# ---------------------------------------------------------------------------
# /trips
# ---------------------------------------------------------------------------

class TestTrips:
    def test_requires_user_header(self, client):
        response = client.get(f"{API}/trips")
        assert response.status_code == 401
        assert response.json() == {
            "success": False,
            "error": {"code": "UNAUTHENTICATED", "message": "Authentication required", "details": None},
        }

    def test_save_and_get_structured(self, client):
        trip_id = _save(client)
        response = client.get(f"{API}/trips/{trip_id}", headers=ALICE)
        assert response.status_code == 200
        trip = response.json()["trip"]
        assert trip["status"] == "saved"
        assert trip["itineraryParsed"] is True
        assert len(trip["itinerary"]["days"]) == 3
        assert trip["itinerary"]["days"][0]["day"] == 1

    def test_get_degrades_to_raw_text(self, client):
        trip_id = _save(client, itinerary="Sorry, I cannot help")
        trip = client.get(f"{API}/trips/{trip_id}", headers=ALICE).json()["trip"]
        assert trip["itineraryParsed"] is False
        assert trip["itinerary"] == "Sorry, I cannot help"
        assert trip["itineraryError"]

    def test_save_missing_itinerary(self, client):
        body = {k: v for k, v in TRIP_BODY.items() if k != "itinerary"}
        response = client.post(f"{API}/trips", json=body, headers=ALICE)
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    def test_save_blank_itinerary(self, client):
        response = client.post(f"{API}/trips", json={**TRIP_BODY, "itinerary": "  "}, headers=ALICE)
        assert response.status_code == 400
        assert response.json()["error"]["details"] == {"fields": ["itinerary"]}

    def test_lists_are_owner_scoped(self, client):
        mine = _save(client, destination="Tokyo")
        _save(client, headers=BOB, destination="Tokyo")

        saved = client.get(f"{API}/trips", params={"status": "saved"}, headers=ALICE).json()["trips"]
        assert [t["id"] for t in saved] == [mine]
        assert client.get(f"{API}/trips/saved", headers=ALICE).json()["trips"] == saved

    def test_unknown_status_rejected(self, client):
        response = client.get(f"{API}/trips", params={"status": "archived"}, headers=ALICE)
        assert response.status_code == 400
        assert response.json()["error"]["details"]["field"] == "status"

    def test_complete_moves_trip(self, client):
        trip_id = _save(client)
        response = client.patch(f"{API}/trips/{trip_id}/complete", headers=ALICE)
        assert response.json() == {"success": True}

        assert client.get(f"{API}/trips/saved", headers=ALICE).json()["trips"] == []
        completed = client.get(f"{API}/trips/completed", headers=ALICE).json()["trips"]
        assert [t["id"] for t in completed] == [trip_id]
        assert completed[0]["status"] == "completed"

    @pytest.mark.parametrize("method, suffix", [("get", ""), ("delete", ""), ("patch", "/complete")])
    def test_foreign_trip_is_not_found(self, client, method, suffix):
        trip_id = _save(client, headers=BOB)
        foreign = getattr(client, method)(f"{API}/trips/{trip_id}{suffix}", headers=ALICE)
        missing = getattr(client, method)(f"{API}/trips/9999{suffix}", headers=ALICE)

        assert foreign.status_code == missing.status_code == 404
        assert foreign.json() == missing.json()
        assert client.get(f"{API}/trips/{trip_id}", headers=BOB).status_code == 200

    def test_delete(self, client):
        trip_id = _save(client)
        assert client.delete(f"{API}/trips/{trip_id}", headers=ALICE).json() == {"success": True}
        assert client.get(f"{API}/trips/{trip_id}", headers=ALICE).status_code == 404


# ---------------------------------------------------------------------------
# SQL store behind the API
# ---------------------------------------------------------------------------

@pytest.fixture
def sql_client(sql_repo):
    app.dependency_overrides[get_trip_repo] = lambda: sql_repo
    app.dependency_overrides[get_generation_client] = lambda: StaticGenerationClient("unused")
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


class TestSqlBackedTrips:
    @pytest.mark.parametrize("method, suffix", [("get", ""), ("delete", ""), ("patch", "/complete")])
    @pytest.mark.parametrize("trip_id", ["99999999999999999999", str(2**63), "0", "-1"])
    def test_out_of_range_id_is_not_found(self, sql_client, method, suffix, trip_id):
        response = getattr(sql_client, method)(f"{API}/trips/{trip_id}{suffix}", headers=ALICE)
        missing = getattr(sql_client, method)(f"{API}/trips/9999{suffix}", headers=ALICE)
        assert response.status_code == 404
        assert response.json() == missing.json()

    def test_save_and_read_back(self, sql_client):
        trip_id = _save(sql_client)
        trip = sql_client.get(f"{API}/trips/{trip_id}", headers=ALICE).json()["trip"]
        assert trip["itineraryParsed"] is True
        assert trip["createdAt"] is not None
