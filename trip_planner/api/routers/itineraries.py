from fastapi import APIRouter, Depends

from trip_planner.api.models.schemas import GenerateItineraryRequest, GenerateItineraryResponse
from trip_planner.dependencies import get_trip_service
from trip_planner.domain.services.trip_service import TripService

router = APIRouter(prefix="/itineraries", tags=["itineraries"])


@router.post("/generate", response_model=GenerateItineraryResponse)
async def generate_itinerary(
    body: GenerateItineraryRequest, svc: TripService = Depends(get_trip_service)
):
    outcome = await svc.generate_itinerary(body)
    return GenerateItineraryResponse(
        itinerary=outcome.raw,
        validated=outcome.validated,
        rejection=outcome.rejection,
    )
