from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Literal, Optional, TypedDict

from langgraph.graph import END, StateGraph

from trip_planner.ai.generation import GenerationClient
from trip_planner.ai.itinerary_parser import parse_itinerary
from trip_planner.ai.prompts import build_itinerary_prompt
from trip_planner.api.models.schemas import ItineraryDocument, TripRequest

logger = logging.getLogger(__name__)

GenerationStage = Literal["requested", "prompted", "generated_raw", "validated", "rejected"]


class GenerationState(TypedDict):
    request: TripRequest
    generator: GenerationClient
    stage: GenerationStage
    prompt: str
    raw: str
    document: Optional[ItineraryDocument]
    rejection: Optional[str]


@dataclass
class GenerationOutcome:
    raw: str
    document: Optional[ItineraryDocument]
    rejection: Optional[str]
    stage: GenerationStage

    @property
    def validated(self) -> bool:
        return self.document is not None


async def prompt_node(state: GenerationState) -> Dict[str, Any]:
    return {"prompt": build_itinerary_prompt(state["request"]), "stage": "prompted"}


async def generate_node(state: GenerationState) -> Dict[str, Any]:
    raw = await state["generator"].generate(state["prompt"])
    return {"raw": raw, "stage": "generated_raw"}


async def validate_node(state: GenerationState) -> Dict[str, Any]:
    result = parse_itinerary(state["raw"])
    if not result.ok:
        logger.warning("Generated itinerary for %s rejected: %s", state["request"].destination, result.reason)
        return {"document": None, "rejection": result.reason, "stage": "rejected"}
    return {"document": result.document, "rejection": None, "stage": "validated"}


def build_generation_graph():
    builder = StateGraph(GenerationState)
    builder.add_node("build_prompt", prompt_node)
    builder.add_node("generate", generate_node)
    builder.add_node("validate", validate_node)

    builder.set_entry_point("build_prompt")
    builder.add_edge("build_prompt", "generate")
    builder.add_edge("generate", "validate")
    builder.add_edge("validate", END)
    return builder.compile()


_GRAPH = build_generation_graph()


async def generate_itinerary(request: TripRequest, generator: GenerationClient) -> GenerationOutcome:
    """
    Run prompt -> generate -> validate. Generation errors propagate; a rejected
    itinerary still returns its raw text with the rejection reason attached.
    """
    initial_state: GenerationState = {
        "request": request,
        "generator": generator,
        "stage": "requested",
        "prompt": "",
        "raw": "",
        "document": None,
        "rejection": None,
    }
    result = await _GRAPH.ainvoke(initial_state)
    return GenerationOutcome(
        raw=result["raw"],
        document=result["document"],
        rejection=result["rejection"],
        stage=result["stage"],
    )
