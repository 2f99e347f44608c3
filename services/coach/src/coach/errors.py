from __future__ import annotations

from typing import Any


class CoachError(Exception):
    status_code = 500

    def __init__(self, message: str, *, raw: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.raw = raw

    def to_content(self) -> dict[str, Any]:
        content: dict[str, Any] = {"error": self.message}
        if self.raw is not None:
            content["raw"] = self.raw
        return content


class ConfigurationError(CoachError):
    status_code = 500


class AccessDeniedError(CoachError):
    status_code = 401


class MalformedRequestError(CoachError):
    status_code = 400


class GenerationInvocationError(CoachError):
    status_code = 500


class NonConformingOutputError(CoachError):
    """Generation succeeded but the text cannot be used as a result.

    Always carries the raw model output so the caller can see what came back.
    """

    status_code = 500

    def __init__(self, message: str, *, raw: str) -> None:
        super().__init__(message, raw=raw)
