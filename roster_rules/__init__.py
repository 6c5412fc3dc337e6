"""Town Hall roster rules for Clash of Clans team tournaments."""

from .eligibility import (
    EligibilityResult,
    SlotAllocation,
    TierCounts,
    can_join,
    compute_available_slots,
    restriction_summary,
    tier_counts,
)
from .membership import JoinDecision, review_join_request
from .models import RosterMember
from .validation import (
    InvalidTownHallError,
    InvalidValueError,
    normalize_player_tag,
    parse_player_tags,
    parse_town_hall,
    validate_max_members,
    validate_town_hall,
)

__all__ = [
    "EligibilityResult",
    "SlotAllocation",
    "TierCounts",
    "can_join",
    "compute_available_slots",
    "restriction_summary",
    "tier_counts",
    "JoinDecision",
    "review_join_request",
    "RosterMember",
    "InvalidTownHallError",
    "InvalidValueError",
    "normalize_player_tag",
    "parse_player_tags",
    "parse_town_hall",
    "validate_max_members",
    "validate_town_hall",
]
