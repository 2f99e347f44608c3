from __future__ import annotations

from coach.errors import AccessDeniedError

LICENSE_HEADER = "x-license-key"


def parse_allowlist(secret: str | None) -> tuple[str, ...]:
    if not secret:
        return ()
    return tuple(token.strip() for token in secret.split(",") if token.strip())


def check_access(secret: str | None, provided: str | None) -> None:
    """Raise AccessDeniedError unless the license key is allowed.

    A blank or missing secret disables the gate entirely.
    """
    if not secret or not secret.strip():
        return
    allowed = parse_allowlist(secret)
    key = (provided or "").strip()
    if not key:
        raise AccessDeniedError(f"Missing license key ({LICENSE_HEADER}).")
    if key not in allowed:
        raise AccessDeniedError("Invalid license key.")
