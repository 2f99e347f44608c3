from __future__ import annotations

import math
from typing import Any

from pydantic import BaseModel, Field

from coach.errors import MalformedRequestError
from coach.normalizer import SlimApplication, SlimInterview, SlimNetworkingContact
from coach.schema import response_format

DEFAULT_GHOSTED_DAYS = 14


class GenerationPayload(BaseModel):
    meta: dict[str, Any] = Field(default_factory=dict)
    applications: list[SlimApplication] = Field(default_factory=list)
    networking: list[SlimNetworkingContact] = Field(default_factory=list)
    interviews: list[SlimInterview] = Field(default_factory=list)


class GenerationRequest(BaseModel):
    instructions: str
    payload: GenerationPayload
    schema_format: dict[str, Any] = Field(default_factory=response_format)

    def user_message(self) -> str:
        return self.payload.model_dump_json()


def resolve_ghosted_threshold(meta: dict[str, Any]) -> int | float:
    value = meta.get("ghosted_days_threshold")
    if value is None:
        return DEFAULT_GHOSTED_DAYS
    if isinstance(value, bool):
        raise MalformedRequestError("meta.ghosted_days_threshold must be a number.")
    if isinstance(value, (int, float)) and math.isfinite(value):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return int(text)
        except ValueError:
            pass
        try:
            parsed = float(text)
        except ValueError:
            parsed = math.nan
        if math.isfinite(parsed):
            return parsed
    raise MalformedRequestError("meta.ghosted_days_threshold must be a number.")


def build_instructions(ghosted_days: int | float) -> str:
    return f"""
You are an internship application AI coach.
Given applications, networking, and interviews, produce:
- a short summary of where the search stands
- urgent actions (next 72 hours)
- next 7 days plan
- follow-ups with message drafts (company, suggested date, reason, message draft)
- recruiter questions
- strategy insights
- interview prep plan
- risk flags

Rules:
- Be specific and time-oriented.
- Prioritize High priority + Submitted + No follow-up.
- Treat apps as ghosted if submitted > {ghosted_days} days ago and no follow-up.
- Flag records that are missing key fields (company, role, status, dates).
Return ONLY JSON matching the schema.
""".strip()


def build_generation_request(
    meta: dict[str, Any],
    applications: list[SlimApplication],
    networking: list[SlimNetworkingContact],
    interviews: list[SlimInterview],
) -> GenerationRequest:
    ghosted_days = resolve_ghosted_threshold(meta)
    return GenerationRequest(
        instructions=build_instructions(ghosted_days),
        payload=GenerationPayload(
            meta={**meta, "ghosted_days_threshold": ghosted_days},
            applications=applications,
            networking=networking,
            interviews=interviews,
        ),
    )
