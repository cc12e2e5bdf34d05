import logging
from functools import lru_cache
from typing import Optional

from fastapi import Depends, Header

from trip_planner.ai.generation import GenerationClient, OpenAIGenerationClient
from trip_planner.ai.openai_client import get_client
from trip_planner.core.config import settings
from trip_planner.core.errors import UnauthenticatedError
from trip_planner.domain.repositories import (
    InMemoryTripRepository,
    SqlTripRepository,
    SupabaseTripRepository,
    TripRepository,
)
from trip_planner.domain.services.trip_service import TripService
from trip_planner.external.database import create_session_factory
from trip_planner.external.supabase_client import get_supabase_client

logger = logging.getLogger(__name__)


@lru_cache
def get_trip_repo() -> TripRepository:
    backend = settings.trip_store_backend
    if backend == "supabase":
        client = get_supabase_client()
        if client is not None:
            return SupabaseTripRepository(client)
        logger.warning("Supabase trip store requested but not configured; using in-memory storage.")
        return InMemoryTripRepository()
    if backend == "sql":
        logger.info("Using SQL trip store at %s", settings.database_url)
        return SqlTripRepository(create_session_factory(settings.database_url))
    return InMemoryTripRepository()


@lru_cache
def get_generation_client() -> GenerationClient:
    return OpenAIGenerationClient(
        get_client(),
        model=settings.openai_model_itinerary,
        timeout=settings.generation_timeout_seconds,
    )


def get_trip_service(
    repo: TripRepository = Depends(get_trip_repo),
    generator: GenerationClient = Depends(get_generation_client),
) -> TripService:
    return TripService(repo=repo, generator=generator)


def get_owner_id(x_user_id: Optional[str] = Header(default=None, alias="X-User-Id")) -> str:
    """The authentication layer in front of this service resolves the session to a user id header."""
    if not x_user_id or not x_user_id.strip():
        raise UnauthenticatedError()
    return x_user_id.strip()


__all__ = [
    "get_trip_repo",
    "get_generation_client",
    "get_trip_service",
    "get_owner_id",
    "settings",
]
