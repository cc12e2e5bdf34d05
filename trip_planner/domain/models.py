from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Union

from trip_planner.api.models.schemas import ItineraryDocument


class TripStatus(str, Enum):
    SAVED = "saved"
    COMPLETED = "completed"


@dataclass
class TripEntity:
    id: int
    owner_id: str
    destination: str
    start_date: str
    end_date: str
    itinerary: str
    status: TripStatus = TripStatus.SAVED
    created_at: Optional[datetime] = None

    def to_api_model(self):
        from trip_planner.api.models.schemas import Trip as TripSchema

        return TripSchema(
            id=self.id,
            destination=self.destination,
            startDate=self.start_date,
            endDate=self.end_date,
            status=self.status.value,
            itinerary=self.itinerary,
            createdAt=self.created_at,
        )


@dataclass
class TripView:
    """A stored trip with its itinerary resolved to a document where the payload allows it."""

    trip: TripEntity
    itinerary: Union[ItineraryDocument, str]
    itinerary_parsed: bool
    itinerary_error: Optional[str] = None

    def to_api_model(self):
        from trip_planner.api.models.schemas import TripDetail

        return TripDetail(
            id=self.trip.id,
            destination=self.trip.destination,
            startDate=self.trip.start_date,
            endDate=self.trip.end_date,
            status=self.trip.status.value,
            itinerary=self.itinerary,
            itineraryParsed=self.itinerary_parsed,
            itineraryError=self.itinerary_error,
            createdAt=self.trip.created_at,
        )
