"""
Validating boundary between free-form generator output and a trusted ItineraryDocument.

Validation is all-or-nothing: any structural violation rejects the whole text
so callers never see a document with half-populated days.
"""
from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from trip_planner.api.models.schemas import DayPlan, ItineraryDocument
from trip_planner.core.errors import MalformedItinerary

_OPENING_FENCE = re.compile(r"\A```(?:json)?[ \t]*(?:\r?\n)?", re.IGNORECASE)
_CLOSING_FENCE = "```"


@dataclass(frozen=True)
class ParseResult:
    document: Optional[ItineraryDocument] = None
    reason: Optional[str] = None

    @classmethod
    def success(cls, document: ItineraryDocument) -> "ParseResult":
        return cls(document=document)

    @classmethod
    def failure(cls, reason: str) -> "ParseResult":
        return cls(reason=reason)

    @property
    def ok(self) -> bool:
        return self.document is not None

    def unwrap(self) -> ItineraryDocument:
        if self.document is None:
            raise MalformedItinerary(f"Itinerary could not be parsed: {self.reason}", {"reason": self.reason})
        return self.document


class _Rejected(Exception):
    pass


def strip_code_fence(text: str) -> str:
    """Remove a fence marker anchored at the very start and/or very end of the text."""
    stripped = text.strip()
    stripped = _OPENING_FENCE.sub("", stripped, count=1)
    if stripped.endswith(_CLOSING_FENCE):
        stripped = stripped[: -len(_CLOSING_FENCE)]
    return stripped.strip()


def parse_itinerary(raw: Optional[str]) -> ParseResult:
    if raw is None or not raw.strip():
        return ParseResult.failure("itinerary text is empty")

    body = strip_code_fence(raw)
    try:
        data = json.loads(body)
    except json.JSONDecodeError as exc:
        return ParseResult.failure(f"not valid JSON ({exc.msg} at line {exc.lineno})")
    except (ValueError, RecursionError) as exc:
        # nesting too deep or an integer literal over the int conversion limit
        return ParseResult.failure(f"not valid JSON ({exc.__class__.__name__})")

    try:
        return ParseResult.success(_build_document(data))
    except _Rejected as exc:
        return ParseResult.failure(str(exc))


def _build_document(data: Any) -> ItineraryDocument:
    if not isinstance(data, dict):
        raise _Rejected("itinerary must be a JSON object")

    summary = data.get("tripSummary")
    if summary is not None and not _is_text(summary):
        raise _Rejected("tripSummary must be a string")

    if "days" not in data:
        raise _Rejected("days is missing")
    days = data["days"]
    if not isinstance(days, list):
        raise _Rejected("days must be a list")
    if not days:
        raise _Rejected("days is empty")

    return ItineraryDocument(tripSummary=summary, days=[_build_day(idx, entry) for idx, entry in enumerate(days)])


def _build_day(idx: int, entry: Any) -> DayPlan:
    path = f"days[{idx}]"
    if not isinstance(entry, dict):
        raise _Rejected(f"{path} must be an object")
    for key in ("day", "date", "title"):
        if entry.get(key) is None:
            raise _Rejected(f"{path}.{key} is missing")

    day = entry["day"]
    # bool is an int subclass
    if isinstance(day, bool) or not isinstance(day, int) or day < 1:
        raise _Rejected(f"{path}.day must be a positive integer")
    if not _is_text(entry["date"]) or not entry["date"].strip():
        raise _Rejected(f"{path}.date must be a non-empty string")
    if not _is_text(entry["title"]):
        raise _Rejected(f"{path}.title must be a string")

    return DayPlan(day=day, date=entry["date"], title=entry["title"], activities=_activities(path, entry))


def _activities(path: str, entry: Dict[str, Any]) -> List[str]:
    activities = entry.get("activities")
    if activities is None:
        return []
    if not isinstance(activities, list) or not all(_is_text(item) for item in activities):
        raise _Rejected(f"{path}.activities must be a list of strings")
    return list(activities)


def _is_text(value: Any) -> bool:
    """A string that can be stored and served as UTF-8 (json.loads lets lone surrogates through)."""
    if not isinstance(value, str):
        return False
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True
