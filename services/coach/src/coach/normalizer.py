from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any, NamedTuple

from common.utils import coerce_text, truncate
from pydantic import BaseModel

LOGGER = logging.getLogger("careercoach.coach")

MAX_APPLICATIONS = 300
MAX_NETWORKING = 300
MAX_INTERVIEWS = 200


class FieldSpec(NamedTuple):
    name: str
    keys: tuple[str, ...]
    limit: int | None = None


class SlimApplication(BaseModel):
    company: str = ""
    role: str = ""
    status: str = ""
    priority: str = ""
    date_submitted: str = ""
    deadline: str = ""
    last_follow_up: str = ""
    next_action: str = ""
    recruiter: str = ""
    recruiter_email: str = ""
    notes: str = ""
    interest: str = ""


class SlimNetworkingContact(BaseModel):
    company: str = ""
    contact: str = ""
    email: str = ""
    where_met: str = ""
    last_contact: str = ""
    next_follow_up: str = ""
    notes: str = ""


class SlimInterview(BaseModel):
    company: str = ""
    role: str = ""
    stage: str = ""
    date: str = ""
    format: str = ""
    topics: str = ""
    rating: str = ""
    follow_up_sent: str = ""
    notes: str = ""


# Display label from the tracking spreadsheet first, then the lowercase alias.
APPLICATION_FIELDS = (
    FieldSpec("company", ("Company Name", "company")),
    FieldSpec("role", ("Role Title", "role")),
    FieldSpec("status", ("Status", "status")),
    FieldSpec("priority", ("Priority", "priority")),
    FieldSpec("date_submitted", ("Date Submitted", "date_submitted")),
    FieldSpec("deadline", ("Deadline", "deadline")),
    FieldSpec("last_follow_up", ("Last Follow-Up Date", "last_follow_up")),
    FieldSpec("next_action", ("Next Action Date", "next_action")),
    FieldSpec("recruiter", ("Recruiter Name", "recruiter")),
    FieldSpec("recruiter_email", ("Recruiter Email", "recruiter_email")),
    FieldSpec("notes", ("Notes", "notes"), 500),
    FieldSpec("interest", ("Interest Level (1–5)", "interest")),
)

NETWORKING_FIELDS = (
    FieldSpec("company", ("Company", "company")),
    FieldSpec("contact", ("Contact Name", "contact")),
    FieldSpec("email", ("Email", "email")),
    FieldSpec("where_met", ("Where Met", "where_met")),
    FieldSpec("last_contact", ("Last Contact Date", "last_contact")),
    FieldSpec("next_follow_up", ("Next Follow-up Date", "next_follow_up")),
    FieldSpec("notes", ("Notes", "notes"), 500),
)

INTERVIEW_FIELDS = (
    FieldSpec("company", ("Company", "company")),
    FieldSpec("role", ("Role", "role")),
    FieldSpec("stage", ("Stage", "stage")),
    FieldSpec("date", ("Date", "date")),
    FieldSpec("format", ("Format", "format")),
    FieldSpec("topics", ("Topics", "topics"), 300),
    FieldSpec("rating", ("Self Rating (1–5)", "rating")),
    FieldSpec("follow_up_sent", ("Follow-up Sent?", "follow_up_sent")),
    FieldSpec("notes", ("Notes", "notes"), 400),
)


def resolve_field(record: Mapping[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        value = record.get(key)
        if value is not None:
            return value
    return None


def project_record(record: Any, fields: tuple[FieldSpec, ...]) -> dict[str, str]:
    if not isinstance(record, Mapping):
        record = {}
    projected: dict[str, str] = {}
    for spec in fields:
        value = resolve_field(record, spec.keys)
        if spec.limit is None:
            projected[spec.name] = coerce_text(value)
        else:
            projected[spec.name] = truncate(value, spec.limit)
    return projected


def take_first(records: Any, cap: int, *, kind: str) -> list[Any]:
    if not isinstance(records, list):
        return []
    if len(records) > cap:
        LOGGER.debug(
            json.dumps(
                {
                    "event": "records_truncated",
                    "kind": kind,
                    "received": len(records),
                    "kept": cap,
                }
            )
        )
    return records[:cap]


def normalize_applications(records: Any) -> list[SlimApplication]:
    return [
        SlimApplication(**project_record(record, APPLICATION_FIELDS))
        for record in take_first(records, MAX_APPLICATIONS, kind="applications")
    ]


def normalize_networking(records: Any) -> list[SlimNetworkingContact]:
    return [
        SlimNetworkingContact(**project_record(record, NETWORKING_FIELDS))
        for record in take_first(records, MAX_NETWORKING, kind="networking")
    ]


def normalize_interviews(records: Any) -> list[SlimInterview]:
    return [
        SlimInterview(**project_record(record, INTERVIEW_FIELDS))
        for record in take_first(records, MAX_INTERVIEWS, kind="interviews")
    ]
