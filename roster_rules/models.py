from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from .validation import InvalidTownHallError, parse_town_hall, validate_town_hall


def coerce_town_hall(value: object) -> int | None:
    """Read a stored town hall value, rejecting anything but 1-18 or unset."""
    if value is None:
        return None
    if isinstance(value, str):
        return parse_town_hall(value)
    if isinstance(value, int) and not isinstance(value, bool):
        return validate_town_hall(value)
    raise InvalidTownHallError(f"Town hall level must be a whole number: {value!r}")


@dataclass(slots=True)
class RosterMember:
    name: str
    tag: str
    town_hall: int | None = None

    def to_dict(self) -> dict[str, object]:
        return {"name": self.name, "tag": self.tag, "town_hall": self.town_hall}

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> RosterMember:
        return cls(
            name=str(data.get("name", "")),
            tag=str(data.get("tag", "")),
            town_hall=coerce_town_hall(data.get("town_hall")),
        )

    def display(self) -> str:
        level = f"TH{self.town_hall}" if self.town_hall is not None else "TH?"
        return f"{self.name} ({level}) {self.tag}".strip()


def roster_from_document(document: object) -> list[RosterMember]:
    """Build members from a decoded roster JSON document.

    Accepts either a list of member objects or an object with a ``members``
    list.
    """
    if isinstance(document, dict):
        document = document.get("members", [])
    if not isinstance(document, list):
        raise ValueError("Roster document must be a list of members")
    members: list[RosterMember] = []
    for item in document:
        if not isinstance(item, dict):
            raise ValueError("Each roster entry must be a JSON object")
        members.append(RosterMember.from_dict(item))
    return members


def roster_to_document(members: Iterable[RosterMember]) -> list[dict[str, object]]:
    return [member.to_dict() for member in members]


__all__ = [
    "RosterMember",
    "coerce_town_hall",
    "roster_from_document",
    "roster_to_document",
]
