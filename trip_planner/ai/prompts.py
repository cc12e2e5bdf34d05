"""Prompt templates for itinerary generation."""

import textwrap
from typing import Optional

from trip_planner.api.models.schemas import TripRequest

INTERESTS_PLACEHOLDER = "none specified"
NOTES_PLACEHOLDER = "none"

ITINERARY_PROMPT = textwrap.dedent(
    """\
    You are a professional travel planner.

    Create a **day-by-day travel itinerary** for a trip to {destination}
    from {start_date} to {end_date}.
    Interests: {interests}.
    Extra notes: {notes}.

    Format the output strictly as valid JSON with this structure:

    {{
      "tripSummary": "string",
      "days": [
        {{
          "day": 1,
          "date": "YYYY-MM-DD",
          "title": "string",
          "activities": ["activity 1", "activity 2", "activity 3"]
        }}
      ]
    }}
    """
)


def _or_placeholder(value: Optional[str], placeholder: str) -> str:
    if value is None or not value.strip():
        return placeholder
    return value.strip()


def build_itinerary_prompt(request: TripRequest) -> str:
    """Return the generation prompt for a trip request. Pure function of its input."""
    return ITINERARY_PROMPT.format(
        destination=request.destination.strip(),
        start_date=request.startDate.isoformat(),
        end_date=request.endDate.isoformat(),
        interests=_or_placeholder(request.interests, INTERESTS_PLACEHOLDER),
        notes=_or_placeholder(request.prompt, NOTES_PLACEHOLDER),
    )
