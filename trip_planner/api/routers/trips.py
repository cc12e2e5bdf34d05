from fastapi import APIRouter, Depends, Query, status

from trip_planner.api.models.schemas import (
    SaveTripRequest,
    SaveTripResponse,
    SuccessResponse,
    TripDetailResponse,
    TripListResponse,
    TripStatusName,
)
from trip_planner.core.errors import NotFoundError
from trip_planner.dependencies import get_owner_id, get_trip_service
from trip_planner.domain.services.trip_service import TripService

router = APIRouter(prefix="/trips", tags=["trips"])


@router.post("", response_model=SaveTripResponse, status_code=status.HTTP_201_CREATED)
async def save_trip(
    body: SaveTripRequest,
    owner_id: str = Depends(get_owner_id),
    svc: TripService = Depends(get_trip_service),
):
    trip_id = await svc.save_trip(owner_id, body.destination, body.startDate, body.endDate, body.itinerary)
    return SaveTripResponse(tripId=trip_id)


@router.get("", response_model=TripListResponse)
async def list_trips(
    status_: TripStatusName = Query(default="saved", alias="status"),
    owner_id: str = Depends(get_owner_id),
    svc: TripService = Depends(get_trip_service),
):
    trips = await svc.list_trips(owner_id, status_)
    return TripListResponse(trips=[trip.to_api_model() for trip in trips])


@router.get("/saved", response_model=TripListResponse)
async def list_saved_trips(owner_id: str = Depends(get_owner_id), svc: TripService = Depends(get_trip_service)):
    trips = await svc.list_trips(owner_id, "saved")
    return TripListResponse(trips=[trip.to_api_model() for trip in trips])


@router.get("/completed", response_model=TripListResponse)
async def list_completed_trips(owner_id: str = Depends(get_owner_id), svc: TripService = Depends(get_trip_service)):
    trips = await svc.list_trips(owner_id, "completed")
    return TripListResponse(trips=[trip.to_api_model() for trip in trips])


@router.get("/{trip_id}", response_model=TripDetailResponse)
async def get_trip(trip_id: int, owner_id: str = Depends(get_owner_id), svc: TripService = Depends(get_trip_service)):
    view = await svc.get_trip(owner_id, trip_id)
    if view is None:
        raise NotFoundError()
    return TripDetailResponse(trip=view.to_api_model())


@router.delete("/{trip_id}", response_model=SuccessResponse)
async def delete_trip(trip_id: int, owner_id: str = Depends(get_owner_id), svc: TripService = Depends(get_trip_service)):
    if not await svc.delete_trip(owner_id, trip_id):
        raise NotFoundError()
    return SuccessResponse()


@router.patch("/{trip_id}/complete", response_model=SuccessResponse)
async def complete_trip(
    trip_id: int, owner_id: str = Depends(get_owner_id), svc: TripService = Depends(get_trip_service)
):
    if not await svc.complete_trip(owner_id, trip_id):
        raise NotFoundError()
    return SuccessResponse()
