from __future__ import annotations

import json
from datetime import date, datetime
from typing import Any


def coerce_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (dict, list, tuple)):
        return json.dumps(value, separators=(",", ":"), default=str, ensure_ascii=False)
    return str(value)


def truncate(value: Any, limit: int) -> str:
    return coerce_text(value)[:limit]


def _reject_constant(token: str) -> Any:
    raise ValueError(f"{token} is not valid JSON")


def loads_strict(text: str | bytes) -> Any:
    """json.loads without the NaN/Infinity extensions."""
    return json.loads(text, parse_constant=_reject_constant)
