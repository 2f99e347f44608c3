from __future__ import annotations

from typing import Any

from common.utils import loads_strict
from pydantic import ValidationError

from coach.errors import NonConformingOutputError
from coach.schema import RecommendationResult


def parse_generation_output(raw: str, *, strict: bool = False) -> Any:
    """Parse model text as JSON and hand it back untouched.

    Shape compliance is left to the constrained decoder unless ``strict`` is
    set, in which case the parsed value must also satisfy RecommendationResult.
    The raw text is attached to every failure.
    """
    try:
        parsed = loads_strict(raw)
    except (TypeError, ValueError) as exc:
        raise NonConformingOutputError("Model returned non-JSON output.", raw=raw) from exc

    if strict:
        try:
            RecommendationResult.model_validate(parsed)
        except ValidationError as exc:
            raise NonConformingOutputError(
                "Model output does not match the recommendation schema.",
                raw=raw,
            ) from exc
    return parsed
