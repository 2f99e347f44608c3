from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict

SCHEMA_NAME = "internship_coach_recommendations"
SCHEMA_VERSION = "1"

_STRING_LIST: dict[str, Any] = {"type": "array", "items": {"type": "string"}}

RECOMMENDATION_SCHEMA: dict[str, Any] = {
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "summary": {"type": "string"},
        "urgent_actions": _STRING_LIST,
        "next_7_days_plan": _STRING_LIST,
        "follow_ups": {
            "type": "array",
            "items": {
                "type": "object",
                "additionalProperties": False,
                "properties": {
                    "company": {"type": "string"},
                    "suggested_date": {"type": "string"},
                    "reason": {"type": "string"},
                    "message_draft": {"type": "string"},
                },
                "required": ["company", "suggested_date", "reason", "message_draft"],
            },
        },
        "recruiter_questions": _STRING_LIST,
        "strategy_insights": _STRING_LIST,
        "interview_prep": _STRING_LIST,
        "risk_flags": _STRING_LIST,
    },
    "required": [
        "summary",
        "urgent_actions",
        "next_7_days_plan",
        "follow_ups",
        "recruiter_questions",
        "strategy_insights",
        "interview_prep",
        "risk_flags",
    ],
}


def response_format() -> dict[str, Any]:
    return {
        "type": "json_schema",
        "name": f"{SCHEMA_NAME}_v{SCHEMA_VERSION}",
        "schema": RECOMMENDATION_SCHEMA,
        "strict": True,
    }


class FollowUp(BaseModel):
    model_config = ConfigDict(extra="forbid", strict=True)

    company: str
    suggested_date: str
    reason: str
    message_draft: str


class RecommendationResult(BaseModel):
    """Typed mirror of RECOMMENDATION_SCHEMA for post-parse validation."""

    model_config = ConfigDict(extra="forbid", strict=True)

    summary: str
    urgent_actions: list[str]
    next_7_days_plan: list[str]
    follow_ups: list[FollowUp]
    recruiter_questions: list[str]
    strategy_insights: list[str]
    interview_prep: list[str]
    risk_flags: list[str]
