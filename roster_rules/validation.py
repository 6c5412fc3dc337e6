from __future__ import annotations

import re

MIN_TOWN_HALL = 1
MAX_TOWN_HALL = 18
MAX_TEAM_MEMBERS = 10


class InvalidValueError(ValueError):
    """Base exception for validation failures."""


class InvalidTownHallError(InvalidValueError):
    """Raised when town hall levels outside the supported range are provided."""


_TAG_PATTERN = re.compile(r"#[A-Z0-9]+$")
_SPLIT_PATTERN = re.compile(r"[\s,]+")


def normalize_player_tag(tag: str) -> str:
    tag = tag.strip().upper()
    if not tag:
        raise InvalidValueError("Player tag cannot be empty")
    if not tag.startswith("#"):
        tag = "#" + tag
    if not _TAG_PATTERN.match(tag):
        raise InvalidValueError(f"Invalid player tag: {tag}")
    return tag


def parse_player_tags(raw: str) -> list[str]:
    parts = [p for p in _SPLIT_PATTERN.split(raw.strip()) if p]
    if not parts:
        raise InvalidValueError("At least one player tag is required")
    normalized: list[str] = []
    seen: set[str] = set()
    for part in parts:
        tag = normalize_player_tag(part)
        if tag in seen:
            raise InvalidValueError(f"Duplicate player tag provided: {tag}")
        seen.add(tag)
        normalized.append(tag)
    return normalized


def validate_town_hall(level: int | None) -> int | None:
    """Return ``level`` unchanged if it is unset or inside 1-18."""
    if level is None:
        return None
    if level < MIN_TOWN_HALL or level > MAX_TOWN_HALL:
        raise InvalidTownHallError(
            f"Town hall level {level} is outside supported range "
            f"({MIN_TOWN_HALL}-{MAX_TOWN_HALL})"
        )
    return level


def parse_town_hall(raw: str | None) -> int | None:
    """Parse a profile town hall field. Blank input means "not set"."""
    if raw is None:
        return None
    value = raw.strip()
    if not value:
        return None
    if value.upper().startswith("TH"):
        value = value[2:].strip()
    try:
        level = int(value)
    except ValueError as exc:
        raise InvalidTownHallError(f"Town hall level must be a number: {raw}") from exc
    return validate_town_hall(level)


def validate_max_members(max_members: int) -> int:
    if max_members < 1:
        raise InvalidValueError("Team must allow at least 1 member")
    if max_members > MAX_TEAM_MEMBERS:
        raise InvalidValueError(
            f"Team cannot have more than {MAX_TEAM_MEMBERS} members"
        )
    return max_members


__all__ = [
    "InvalidValueError",
    "InvalidTownHallError",
    "MAX_TEAM_MEMBERS",
    "MAX_TOWN_HALL",
    "MIN_TOWN_HALL",
    "normalize_player_tag",
    "parse_player_tags",
    "parse_town_hall",
    "validate_max_members",
    "validate_town_hall",
]
