"""Questionnaire steps and the flows that string them together.

Every flow is linear::

    neighborhood:  START → GET_NAME → GET_BAIRRO ─▶ facilities API lookup
    city:          START → GET_NAME → GET_CITY → [GET_BAIRRO] → GET_PHONE
                         → GET_AGE ─▶ service point → FINISHED
    location:      START → GET_NAME → GET_AGE → GET_PHONE → GET_LOCATION
                         ─▶ nearest facilities (open data)

In the ``city`` flow ``GET_BAIRRO`` is only asked for cities that have a
neighborhood table.
"""

from __future__ import annotations

from enum import Enum


class Step(str, Enum):
    START = "START"
    GET_NAME = "GET_NAME"
    GET_CITY = "GET_CITY"
    GET_BAIRRO = "GET_BAIRRO"
    GET_PHONE = "GET_PHONE"
    GET_AGE = "GET_AGE"
    GET_LOCATION = "GET_LOCATION"
    FINISHED = "FINISHED"


class Flow(str, Enum):
    NEIGHBORHOOD = "neighborhood"
    CITY = "city"
    LOCATION = "location"


FLOW_STEPS: dict[Flow, tuple[Step, ...]] = {
    Flow.NEIGHBORHOOD: (Step.START, Step.GET_NAME, Step.GET_BAIRRO),
    Flow.CITY: (
        Step.START,
        Step.GET_NAME,
        Step.GET_CITY,
        Step.GET_BAIRRO,
        Step.GET_PHONE,
        Step.GET_AGE,
        Step.FINISHED,
    ),
    Flow.LOCATION: (
        Step.START,
        Step.GET_NAME,
        Step.GET_AGE,
        Step.GET_PHONE,
        Step.GET_LOCATION,
    ),
}

# Steps that collect a profile field, and the field each one fills
FIELD_STEPS: dict[Step, str] = {
    Step.GET_NAME: "name",
    Step.GET_CITY: "city",
    Step.GET_BAIRRO: "neighborhood",
    Step.GET_PHONE: "phone",
    Step.GET_AGE: "age",
}


def next_step(flow: Flow, step: Step) -> Step | None:
    """Step that follows *step* in *flow*, or ``None`` at the end."""
    steps = FLOW_STEPS[flow]
    index = steps.index(step)
    return steps[index + 1] if index + 1 < len(steps) else None


def is_last_field_step(flow: Flow, step: Step) -> bool:
    """True when *step* is the final question before the flow's lookup."""
    following = next_step(flow, step)
    return following is None or following is Step.FINISHED
