import json
from datetime import date

import pytest

from trip_planner.ai.generation import StaticGenerationClient
from trip_planner.api.models.schemas import TripRequest
from trip_planner.domain.repositories import InMemoryTripRepository, SqlTripRepository
from trip_planner.domain.services.trip_service import TripService
from trip_planner.external.database import create_session_factory

PARIS_ITINERARY = {
    "tripSummary": "Three days of museums, cafés and river walks in Paris.",
    "days": [
        {
            "day": 1,
            "date": "2025-06-01",
            "title": "Arrival and the Left Bank",
            "activities": ["Check in", "Walk Saint-Germain", "Dinner in the Latin Quarter"],
        },
        {
            "day": 2,
            "date": "2025-06-02",
            "title": "Louvre and the Seine",
            "activities": ["Louvre Museum", "Tuileries Garden", "Seine river cruise"],
        },
        {
            "day": 3,
            "date": "2025-06-03",
            "title": "Montmartre",
            "activities": ["Sacré-Cœur", "Place du Tertre"],
        },
    ],
}


@pytest.fixture
def paris_json():
    return json.dumps(PARIS_ITINERARY, ensure_ascii=False, indent=2)


@pytest.fixture
def fenced_paris(paris_json):
    """Generator reply wrapped in a json code fence, the way chat models usually answer."""
    return f"```json\n{paris_json}\n```"


@pytest.fixture
def paris_request():
    return TripRequest(destination="Paris", startDate=date(2025, 6, 1), endDate=date(2025, 6, 3))


@pytest.fixture
def memory_repo():
    return InMemoryTripRepository()


@pytest.fixture
def sql_repo(tmp_path):
    return SqlTripRepository(create_session_factory(f"sqlite:///{tmp_path / 'trips.db'}"))


@pytest.fixture
def generator(fenced_paris):
    return StaticGenerationClient(fenced_paris)


@pytest.fixture
def service(memory_repo, generator):
    return TripService(repo=memory_repo, generator=generator)
