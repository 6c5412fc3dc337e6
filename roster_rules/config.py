"""Environment configuration for the roster tooling."""

from __future__ import annotations

import os
from dataclasses import dataclass

from .validation import InvalidValueError, validate_max_members

DEFAULT_MAX_MEMBERS = 5
DEFAULT_MAX_RETRIES = 1
DEFAULT_REAUTH_COOLDOWN = 60
DEFAULT_LOG_LEVEL = "INFO"

CREDENTIAL_VARS = ("COC_EMAIL", "COC_PASSWORD")


def env_int(name: str, *, default: int | None = None) -> int | None:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


@dataclass(frozen=True)
class RosterSettings:
    coc_email: str | None
    coc_password: str | None
    max_members: int
    max_retries: int
    reauth_cooldown: int
    log_level: str

    @property
    def has_credentials(self) -> bool:
        return bool(self.coc_email and self.coc_password)


def read_settings() -> RosterSettings:
    max_members = env_int("ROSTER_MAX_MEMBERS", default=DEFAULT_MAX_MEMBERS)
    try:
        max_members = validate_max_members(max_members)
    except InvalidValueError:
        max_members = DEFAULT_MAX_MEMBERS
    max_retries = env_int("COC_MAX_RETRIES", default=DEFAULT_MAX_RETRIES)
    reauth_cooldown = env_int("COC_REAUTH_COOLDOWN", default=DEFAULT_REAUTH_COOLDOWN)
    return RosterSettings(
        coc_email=os.getenv("COC_EMAIL") or None,
        coc_password=os.getenv("COC_PASSWORD") or None,
        max_members=max_members,
        max_retries=max(0, max_retries),
        reauth_cooldown=max(0, reauth_cooldown),
        log_level=(os.getenv("LOG_LEVEL") or DEFAULT_LOG_LEVEL).strip().upper(),
    )


def missing_credentials() -> list[str]:
    return [name for name in CREDENTIAL_VARS if not os.getenv(name)]


__all__ = [
    "CREDENTIAL_VARS",
    "DEFAULT_MAX_MEMBERS",
    "RosterSettings",
    "env_int",
    "missing_credentials",
    "read_settings",
]
