from abc import ABC, abstractmethod
import asyncio
import dataclasses
from datetime import datetime, timezone
import itertools
import logging
from typing import Any, Callable, Dict, List, Optional, TypeVar

import httpx
from postgrest.exceptions import APIError as PostgrestError
from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from trip_planner.core.errors import StoreUnavailable, ValidationError
from trip_planner.external.database import TripRow

from .models import TripEntity, TripStatus

logger = logging.getLogger(__name__)

T = TypeVar("T")

# trips.id is a signed 64-bit column in SQLite and Postgres
MAX_TRIP_ID = 2**63 - 1


def _storable_id(trip_id: int) -> bool:
    return 0 < trip_id <= MAX_TRIP_ID


class TripRepository(ABC):
    """
    Owner-scoped trip storage. Every lookup filters by id *and* owner, so a trip
    owned by someone else is indistinguishable from one that does not exist.
    """

    @abstractmethod
    async def create(
        self, owner_id: str, destination: str, start_date: str, end_date: str, itinerary: str
    ) -> int:
        raise NotImplementedError

    @abstractmethod
    async def list_by_status(self, owner_id: str, status: TripStatus) -> List[TripEntity]:
        raise NotImplementedError

    @abstractmethod
    async def get_by_id(self, owner_id: str, trip_id: int) -> Optional[TripEntity]:
        raise NotImplementedError

    @abstractmethod
    async def delete(self, owner_id: str, trip_id: int) -> bool:
        raise NotImplementedError

    @abstractmethod
    async def _write_status(self, owner_id: str, trip_id: int, status: TripStatus) -> bool:
        raise NotImplementedError

    async def set_status(self, owner_id: str, trip_id: int, status: TripStatus) -> bool:
        """Move a trip to ``completed``. Returns False when no trip matched id and owner."""
        try:
            target = TripStatus(status)
        except ValueError:
            target = None
        if target is not TripStatus.COMPLETED:
            raise ValidationError(
                "trips can only be marked completed",
                {"field": "status", "reason": "saved -> completed is the only allowed transition"},
            )
        return await self._write_status(owner_id, trip_id, TripStatus.COMPLETED)


class InMemoryTripRepository(TripRepository):
    def __init__(self):
        self._store: Dict[int, TripEntity] = {}
        self._ids = itertools.count(1)

    async def create(
        self, owner_id: str, destination: str, start_date: str, end_date: str, itinerary: str
    ) -> int:
        trip_id = next(self._ids)
        self._store[trip_id] = TripEntity(
            id=trip_id,
            owner_id=owner_id,
            destination=destination,
            start_date=start_date,
            end_date=end_date,
            itinerary=itinerary,
            status=TripStatus.SAVED,
            created_at=datetime.now(timezone.utc),
        )
        return trip_id

    async def list_by_status(self, owner_id: str, status: TripStatus) -> List[TripEntity]:
        return [
            dataclasses.replace(trip)
            for trip in self._store.values()
            if trip.owner_id == owner_id and trip.status == status
        ]

    async def get_by_id(self, owner_id: str, trip_id: int) -> Optional[TripEntity]:
        trip = self._owned(owner_id, trip_id)
        return dataclasses.replace(trip) if trip else None

    async def delete(self, owner_id: str, trip_id: int) -> bool:
        if self._owned(owner_id, trip_id) is None:
            return False
        del self._store[trip_id]
        return True

    async def _write_status(self, owner_id: str, trip_id: int, status: TripStatus) -> bool:
        trip = self._owned(owner_id, trip_id)
        if trip is None:
            return False
        trip.status = status
        return True

    def _owned(self, owner_id: str, trip_id: int) -> Optional[TripEntity]:
        trip = self._store.get(trip_id)
        if trip is None or trip.owner_id != owner_id:
            return None
        return trip


class SqlTripRepository(TripRepository):
    """
    SQLAlchemy-backed repository. Each operation is a single statement scoped by
    id and user_id, executed in a worker thread.
    """

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    async def create(
        self, owner_id: str, destination: str, start_date: str, end_date: str, itinerary: str
    ) -> int:
        def _insert() -> int:
            with self.session_factory() as session:
                row = TripRow(
                    user_id=owner_id,
                    destination=destination,
                    start_date=start_date,
                    end_date=end_date,
                    itinerary=itinerary,
                    status=TripStatus.SAVED.value,
                )
                session.add(row)
                session.commit()
                return row.id

        return await self._run(_insert)

    async def list_by_status(self, owner_id: str, status: TripStatus) -> List[TripEntity]:
        def _select() -> List[TripEntity]:
            with self.session_factory() as session:
                rows = session.scalars(
                    select(TripRow).where(TripRow.user_id == owner_id, TripRow.status == status.value)
                ).all()
                return [self._row_to_entity(row) for row in rows]

        return await self._run(_select)

    async def get_by_id(self, owner_id: str, trip_id: int) -> Optional[TripEntity]:
        if not _storable_id(trip_id):
            return None

        def _select() -> Optional[TripEntity]:
            with self.session_factory() as session:
                row = session.scalars(
                    select(TripRow).where(TripRow.id == trip_id, TripRow.user_id == owner_id)
                ).first()
                return self._row_to_entity(row) if row else None

        return await self._run(_select)

    async def delete(self, owner_id: str, trip_id: int) -> bool:
        if not _storable_id(trip_id):
            return False

        def _delete() -> bool:
            with self.session_factory() as session:
                result = session.execute(
                    delete(TripRow).where(TripRow.id == trip_id, TripRow.user_id == owner_id)
                )
                session.commit()
                return result.rowcount > 0

        return await self._run(_delete)

    async def _write_status(self, owner_id: str, trip_id: int, status: TripStatus) -> bool:
        if not _storable_id(trip_id):
            return False

        def _update() -> bool:
            with self.session_factory() as session:
                result = session.execute(
                    update(TripRow)
                    .where(TripRow.id == trip_id, TripRow.user_id == owner_id)
                    .values(status=status.value)
                )
                session.commit()
                return result.rowcount > 0

        return await self._run(_update)

    async def _run(self, fn: Callable[[], T]) -> T:
        try:
            return await asyncio.to_thread(fn)
        except SQLAlchemyError as exc:
            logger.exception("Trip store query failed: %s", exc)
            raise StoreUnavailable() from exc

    @staticmethod
    def _row_to_entity(row: TripRow) -> TripEntity:
        return TripEntity(
            id=row.id,
            owner_id=row.user_id,
            destination=row.destination,
            start_date=row.start_date,
            end_date=row.end_date,
            itinerary=row.itinerary,
            status=TripStatus(row.status),
            created_at=row.created_at,
        )


class SupabaseTripRepository(TripRepository):
    """
    Supabase-backed repository over a ``trips`` table with the same columns as
    the SQL schema.
    """

    def __init__(self, client):
        if client is None:
            raise ValueError("Supabase client is required for SupabaseTripRepository")
        self.client = client
        self.table_name = "trips"

    async def create(
        self, owner_id: str, destination: str, start_date: str, end_date: str, itinerary: str
    ) -> int:
        payload = {
            "user_id": owner_id,
            "destination": destination,
            "start_date": start_date,
            "end_date": end_date,
            "itinerary": itinerary,
            "status": TripStatus.SAVED.value,
        }
        response = await self._run(lambda: self.client.table(self.table_name).insert(payload).execute())
        rows = getattr(response, "data", None) or []
        if not rows:
            raise StoreUnavailable("Trip store did not return the new trip")
        return int(rows[0]["id"])

    async def list_by_status(self, owner_id: str, status: TripStatus) -> List[TripEntity]:
        response = await self._run(
            lambda: self.client.table(self.table_name)
            .select("*")
            .eq("user_id", owner_id)
            .eq("status", status.value)
            .execute()
        )
        return [self._row_to_entity(row) for row in getattr(response, "data", None) or []]

    async def get_by_id(self, owner_id: str, trip_id: int) -> Optional[TripEntity]:
        if not _storable_id(trip_id):
            return None
        response = await self._run(
            lambda: self.client.table(self.table_name)
            .select("*")
            .eq("id", trip_id)
            .eq("user_id", owner_id)
            .execute()
        )
        rows = getattr(response, "data", None) or []
        return self._row_to_entity(rows[0]) if rows else None

    async def delete(self, owner_id: str, trip_id: int) -> bool:
        if not _storable_id(trip_id):
            return False
        response = await self._run(
            lambda: self.client.table(self.table_name).delete().eq("id", trip_id).eq("user_id", owner_id).execute()
        )
        return bool(getattr(response, "data", None))

    async def _write_status(self, owner_id: str, trip_id: int, status: TripStatus) -> bool:
        if not _storable_id(trip_id):
            return False
        response = await self._run(
            lambda: self.client.table(self.table_name)
            .update({"status": status.value})
            .eq("id", trip_id)
            .eq("user_id", owner_id)
            .execute()
        )
        return bool(getattr(response, "data", None))

    async def _run(self, fn: Callable[[], Any]) -> Any:
        try:
            return await asyncio.to_thread(fn)
        except (PostgrestError, httpx.HTTPError) as exc:
            logger.exception("Supabase trip query failed: %s", exc)
            raise StoreUnavailable() from exc

    def _row_to_entity(self, row: Dict[str, Any]) -> TripEntity:
        def _parse_dt(value: Any) -> Optional[datetime]:
            if value is None or isinstance(value, datetime):
                return value
            if value.endswith("Z"):
                value = value.replace("Z", "+00:00")
            return datetime.fromisoformat(value)

        return TripEntity(
            id=int(row["id"]),
            owner_id=str(row["user_id"]),
            destination=row["destination"],
            start_date=str(row["start_date"]),
            end_date=str(row["end_date"]),
            itinerary=row["itinerary"],
            status=TripStatus(row["status"]),
            created_at=_parse_dt(row.get("created_at")),
        )
