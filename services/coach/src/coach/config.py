from __future__ import annotations

import os

from pydantic import BaseModel, ConfigDict

from coach.errors import ConfigurationError

DEFAULT_MODEL = "gpt-4o-mini"
TRUTHY = {"1", "true", "yes", "on"}


class CoachSettings(BaseModel):
    """Process-wide configuration, resolved once when the app is created."""

    model_config = ConfigDict(frozen=True)

    openai_api_key: str | None = None
    license_secret: str | None = None
    model: str = DEFAULT_MODEL
    validate_output: bool = False

    @classmethod
    def from_env(cls) -> CoachSettings:
        return cls(
            openai_api_key=os.getenv("OPENAI_API_KEY", "").strip() or None,
            license_secret=os.getenv("LICENSE_SECRET", "").strip() or None,
            model=os.getenv("COACH_OPENAI_MODEL", "").strip() or DEFAULT_MODEL,
            validate_output=os.getenv("COACH_VALIDATE_OUTPUT", "").strip().lower() in TRUTHY,
        )

    def require_api_key(self) -> str:
        if not self.openai_api_key:
            raise ConfigurationError("Missing OPENAI_API_KEY environment variable.")
        return self.openai_api_key
