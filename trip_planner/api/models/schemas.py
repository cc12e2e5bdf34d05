from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field

# ---------- Itinerary document ----------


class DayPlan(BaseModel):
    day: int = Field(gt=0)
    date: str
    title: str
    activities: List[str] = Field(default_factory=list)


class ItineraryDocument(BaseModel):
    tripSummary: Optional[str] = None
    days: List[DayPlan]


# ---------- Trip request ----------


class TripRequest(BaseModel):
    destination: str = Field(min_length=1)
    startDate: date
    endDate: date
    interests: Optional[str] = None
    prompt: Optional[str] = Field(default=None, description="Extra notes for the planner")


# ---------- Trips ----------


TripStatusName = Literal["saved", "completed"]


class Trip(BaseModel):
    id: int
    destination: str
    startDate: str
    endDate: str
    status: TripStatusName
    itinerary: str
    createdAt: Optional[datetime] = None


class TripDetail(BaseModel):
    id: int
    destination: str
    startDate: str
    endDate: str
    status: TripStatusName
    itinerary: Union[ItineraryDocument, str]
    itineraryParsed: bool
    itineraryError: Optional[str] = None
    createdAt: Optional[datetime] = None


# ---------- Request/Response models ----------


class GenerateItineraryRequest(TripRequest):
    pass


class GenerateItineraryResponse(BaseModel):
    success: bool = True
    itinerary: str
    validated: bool
    rejection: Optional[str] = None


class SaveTripRequest(BaseModel):
    destination: str = Field(min_length=1)
    startDate: date
    endDate: date
    itinerary: Union[str, Dict[str, Any]]


class SaveTripResponse(BaseModel):
    success: bool = True
    tripId: int


class TripListResponse(BaseModel):
    success: bool = True
    trips: List[Trip]


class TripDetailResponse(BaseModel):
    success: bool = True
    trip: TripDetail


class SuccessResponse(BaseModel):
    success: bool = True
