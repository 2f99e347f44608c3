from __future__ import annotations

import json
import logging
from typing import Any

from common.utils import loads_strict
from pydantic import BaseModel, Field

from coach.config import CoachSettings
from coach.errors import (
    AccessDeniedError,
    GenerationInvocationError,
    MalformedRequestError,
    NonConformingOutputError,
)
from coach.gate import check_access
from coach.generation import GenerationClient
from coach.normalizer import normalize_applications, normalize_interviews, normalize_networking
from coach.prompt import build_generation_request
from coach.validator import parse_generation_output

LOGGER = logging.getLogger("careercoach.coach")


class RecordBatch(BaseModel):
    applications: Any = None
    networking: Any = None
    interviews: Any = None


class RecommendationsRequest(BaseModel):
    meta: dict[str, Any] = Field(default_factory=dict)
    data: RecordBatch = Field(default_factory=RecordBatch)


def parse_request_body(body: bytes) -> RecommendationsRequest:
    try:
        payload = loads_strict(body)
    except ValueError as exc:
        raise MalformedRequestError("Request body must be valid JSON.") from exc

    # Anything that is not an object reads as absent, like a missing key.
    if not isinstance(payload, dict):
        payload = {}
    meta = payload.get("meta")
    data = payload.get("data")
    return RecommendationsRequest(
        meta=meta if isinstance(meta, dict) else {},
        data=RecordBatch.model_validate(data) if isinstance(data, dict) else RecordBatch(),
    )


async def run_recommendations(
    *,
    settings: CoachSettings,
    generator: GenerationClient | None,
    license_key: str | None,
    body: bytes,
    request_id: str | None = None,
) -> Any:
    settings.require_api_key()
    try:
        check_access(settings.license_secret, license_key)
    except AccessDeniedError as exc:
        LOGGER.warning(
            json.dumps({"event": "access_denied", "request_id": request_id, "reason": exc.message})
        )
        raise

    request = parse_request_body(body)
    generation_request = build_generation_request(
        request.meta,
        normalize_applications(request.data.applications),
        normalize_networking(request.data.networking),
        normalize_interviews(request.data.interviews),
    )

    if generator is None:
        raise GenerationInvocationError("Generation client is not configured.")
    try:
        raw = await generator.generate(generation_request)
    except GenerationInvocationError as exc:
        LOGGER.error(
            json.dumps({"event": "generation_failed", "request_id": request_id, "error": str(exc)})
        )
        raise

    try:
        return parse_generation_output(raw, strict=settings.validate_output)
    except NonConformingOutputError as exc:
        LOGGER.error(
            json.dumps(
                {
                    "event": "non_conforming_output",
                    "request_id": request_id,
                    "error": exc.message,
                    "raw_length": len(raw or ""),
                }
            )
        )
        raise
