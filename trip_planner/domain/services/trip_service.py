from __future__ import annotations

from datetime import date
import json
import logging
from typing import Any, List, Optional

from trip_planner.ai.generation import GenerationClient
from trip_planner.ai.itinerary_graph import GenerationOutcome, generate_itinerary
from trip_planner.ai.itinerary_parser import parse_itinerary
from trip_planner.api.models.schemas import ItineraryDocument, TripRequest
from trip_planner.core.errors import UnauthenticatedError, ValidationError
from trip_planner.domain.models import TripEntity, TripStatus, TripView
from trip_planner.domain.repositories import TripRepository

logger = logging.getLogger(__name__)


class TripService:
    def __init__(self, repo: TripRepository, generator: GenerationClient):
        self.repo = repo
        self.generator = generator

    async def generate_itinerary(self, request: TripRequest) -> GenerationOutcome:
        if not request.destination or not request.destination.strip():
            raise ValidationError("destination is required", {"field": "destination", "reason": "must not be blank"})
        return await generate_itinerary(request, self.generator)

    async def save_trip(
        self,
        owner_id: str,
        destination: Optional[str],
        start_date: date | str | None,
        end_date: date | str | None,
        itinerary: Any,
    ) -> int:
        """Persist a trip as ``saved``. The itinerary payload is stored without being parsed."""
        self._require_owner(owner_id)
        start_text = _date_text(start_date)
        end_text = _date_text(end_date)
        missing = [
            field
            for field, value in (
                ("destination", destination.strip() if destination else ""),
                ("startDate", start_text),
                ("endDate", end_text),
                ("itinerary", "" if _is_blank(itinerary) else "ok"),
            )
            if not value
        ]
        if missing:
            raise ValidationError("Missing required fields", {"fields": missing})

        return await self.repo.create(
            owner_id,
            destination.strip(),  # type: ignore[union-attr]
            start_text,
            end_text,
            _serialize_itinerary(itinerary),
        )

    async def list_trips(self, owner_id: str, status: TripStatus | str) -> List[TripEntity]:
        self._require_owner(owner_id)
        try:
            wanted = TripStatus(status)
        except ValueError:
            raise ValidationError(
                "unknown trip status", {"field": "status", "reason": "expected 'saved' or 'completed'"}
            )
        return await self.repo.list_by_status(owner_id, wanted)

    async def get_trip(self, owner_id: str, trip_id: int) -> Optional[TripView]:
        self._require_owner(owner_id)
        trip = await self.repo.get_by_id(owner_id, trip_id)
        if trip is None:
            return None

        result = parse_itinerary(trip.itinerary)
        if not result.ok:
            # The record stays readable even when its payload no longer parses.
            logger.warning("Trip %s itinerary could not be parsed, returning raw text: %s", trip.id, result.reason)
            return TripView(trip=trip, itinerary=trip.itinerary, itinerary_parsed=False, itinerary_error=result.reason)
        return TripView(trip=trip, itinerary=result.unwrap(), itinerary_parsed=True)

    async def complete_trip(self, owner_id: str, trip_id: int) -> bool:
        self._require_owner(owner_id)
        return await self.repo.set_status(owner_id, trip_id, TripStatus.COMPLETED)

    async def delete_trip(self, owner_id: str, trip_id: int) -> bool:
        self._require_owner(owner_id)
        return await self.repo.delete(owner_id, trip_id)

    def _require_owner(self, owner_id: str) -> None:
        if not owner_id or not str(owner_id).strip():
            raise UnauthenticatedError()


def _date_text(value: date | str | None) -> str:
    if value is None:
        return ""
    if isinstance(value, date):
        return value.isoformat()
    return str(value).strip()


def _is_blank(itinerary: Any) -> bool:
    if itinerary is None:
        return True
    if isinstance(itinerary, str):
        return not itinerary.strip()
    return False


def _serialize_itinerary(itinerary: Any) -> str:
    if isinstance(itinerary, str):
        return itinerary
    if isinstance(itinerary, ItineraryDocument):
        return itinerary.model_dump_json()
    return json.dumps(itinerary, ensure_ascii=False)
