"""Town Hall restriction rules for team rosters.

Each restricted level (TH 15-18) starts with one slot per team. A slot that a
higher level leaves unused cascades down to the next level only:
18 -> 17 -> 16 -> 15. TH 14 and below are unlimited.

Everything here is pure: callers pass a roster snapshot and get a value back.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Literal

from .validation import InvalidValueError

RESTRICTED_TOWN_HALLS = (18, 17, 16, 15)
UNRESTRICTED_MAX_TOWN_HALL = 14
BASE_SLOTS = 1

EligibilityOutcome = Literal[
    "allowed", "unrestricted", "missing_town_hall", "capacity_exceeded"
]

MISSING_TOWN_HALL_REASON = (
    "Player must set their Town Hall level before joining a team."
)

_CASCADE_SOURCES = {17: "TH 18", 16: "TH 17/18", 15: "TH 16/17/18"}


@dataclass(frozen=True, slots=True)
class TierCounts:
    """Number of roster members at each restricted Town Hall level."""

    th18: int = 0
    th17: int = 0
    th16: int = 0
    th15: int = 0

    def __post_init__(self) -> None:
        for level in RESTRICTED_TOWN_HALLS:
            if self.for_level(level) < 0:
                raise InvalidValueError(f"TH {level} count cannot be negative")

    def for_level(self, level: int) -> int:
        return getattr(self, f"th{level}")


@dataclass(frozen=True, slots=True)
class SlotAllocation:
    """Capacity per restricted Town Hall level after cascading."""

    th18: int
    th17: int
    th16: int
    th15: int

    def for_level(self, level: int) -> int:
        return getattr(self, f"th{level}")

    def cascaded(self, level: int) -> int:
        """Slots at ``level`` that came from unused higher levels."""
        return self.for_level(level) - BASE_SLOTS


@dataclass(frozen=True, slots=True)
class EligibilityResult:
    allowed: bool
    outcome: EligibilityOutcome
    reason: str | None = None


def compute_available_slots(counts: TierCounts) -> SlotAllocation:
    """Calculate how many slots are available for each restricted level."""
    th18_slots = BASE_SLOTS

    unused_th18 = max(0, th18_slots - counts.th18)
    th17_slots = BASE_SLOTS + unused_th18

    unused_th17 = max(0, th17_slots - counts.th17)
    th16_slots = BASE_SLOTS + unused_th17

    unused_th16 = max(0, th16_slots - counts.th16)
    th15_slots = BASE_SLOTS + unused_th16

    return SlotAllocation(
        th18=th18_slots, th17=th17_slots, th16=th16_slots, th15=th15_slots
    )


def _capacity_reason(level: int, slots: SlotAllocation) -> str:
    cap = slots.for_level(level)
    message = f"Team already has the maximum allowed TH {level} players ({cap})"
    if level == 18:
        return f"{message}. Only 1 TH 18 player is allowed per team."
    extra = slots.cascaded(level)
    if extra > 0:
        noun = "slot" if extra == 1 else "slots"
        message += (
            f" (includes {extra} cascaded {noun} from unused {_CASCADE_SOURCES[level]})"
        )
    return f"{message}."


def can_join(candidate_town_hall: int | None, counts: TierCounts) -> EligibilityResult:
    """Check whether a player at ``candidate_town_hall`` may join the roster.

    ``counts`` must describe the roster the player would be joining. Levels
    outside 1-18 are expected to be rejected upstream; this function only
    distinguishes "14 and below" from the restricted levels.
    """
    if candidate_town_hall is None:
        return EligibilityResult(
            allowed=False,
            outcome="missing_town_hall",
            reason=MISSING_TOWN_HALL_REASON,
        )

    if candidate_town_hall <= UNRESTRICTED_MAX_TOWN_HALL:
        return EligibilityResult(allowed=True, outcome="unrestricted")

    if candidate_town_hall not in RESTRICTED_TOWN_HALLS:
        return EligibilityResult(allowed=True, outcome="allowed")

    slots = compute_available_slots(counts)
    if counts.for_level(candidate_town_hall) >= slots.for_level(candidate_town_hall):
        return EligibilityResult(
            allowed=False,
            outcome="capacity_exceeded",
            reason=_capacity_reason(candidate_town_hall, slots),
        )
    return EligibilityResult(allowed=True, outcome="allowed")


def _member_town_hall(member: object) -> object:
    if isinstance(member, Mapping):
        return member.get("town_hall")
    return getattr(member, "town_hall", None)


def tier_counts(members: Iterable[object]) -> TierCounts:
    """Count members at each restricted level.

    Members may be objects with a ``town_hall`` attribute or mappings with a
    ``"town_hall"`` key. Unset and unrestricted levels are not counted.
    """
    totals = dict.fromkeys(RESTRICTED_TOWN_HALLS, 0)
    for member in members:
        level = _member_town_hall(member)
        if isinstance(level, int) and level in totals:
            totals[level] += 1
    return TierCounts(
        th18=totals[18], th17=totals[17], th16=totals[16], th15=totals[15]
    )


def restriction_summary(counts: TierCounts) -> str:
    """Human-readable slot usage for each restricted level."""
    slots = compute_available_slots(counts)
    lines: list[str] = []
    for level in RESTRICTED_TOWN_HALLS:
        used = counts.for_level(level)
        cap = slots.for_level(level)
        if used < cap:
            lines.append(f"TH {level}: {used}/{cap} slots used")
        else:
            lines.append(f"TH {level}: FULL ({cap}/{cap})")
    lines.append(f"TH {UNRESTRICTED_MAX_TOWN_HALL} and below: Unlimited")
    return "\n".join(lines)


__all__ = [
    "BASE_SLOTS",
    "EligibilityOutcome",
    "EligibilityResult",
    "MISSING_TOWN_HALL_REASON",
    "RESTRICTED_TOWN_HALLS",
    "SlotAllocation",
    "TierCounts",
    "UNRESTRICTED_MAX_TOWN_HALL",
    "can_join",
    "compute_available_slots",
    "restriction_summary",
    "tier_counts",
]
