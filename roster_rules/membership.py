"""Join-request review for team captains.

Combines the roster size cap with the Town Hall slot rules. The caller owns
the roster snapshot and whatever membership write follows an approval.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Final, Literal

from .config import DEFAULT_MAX_MEMBERS
from .eligibility import EligibilityResult, can_join, tier_counts
from .models import RosterMember
from .validation import validate_max_members

log: Final = logging.getLogger("coc-roster")

JoinOutcome = Literal[
    "approved",
    "already_on_team",
    "team_full",
    "missing_town_hall",
    "capacity_exceeded",
]


@dataclass(frozen=True, slots=True)
class JoinDecision:
    approved: bool
    outcome: JoinOutcome
    reason: str | None = None
    eligibility: EligibilityResult | None = None


def review_join_request(
    candidate: RosterMember,
    roster: Sequence[RosterMember],
    *,
    max_members: int = DEFAULT_MAX_MEMBERS,
    already_on_team: bool = False,
) -> JoinDecision:
    """Decide whether ``candidate`` can be added to ``roster``."""
    max_members = validate_max_members(max_members)

    if already_on_team:
        decision = JoinDecision(
            approved=False,
            outcome="already_on_team",
            reason="You are already in a team!",
        )
    elif len(roster) >= max_members:
        decision = JoinDecision(
            approved=False,
            outcome="team_full",
            reason=f"Team is full (max {max_members} members)",
        )
    else:
        eligibility = can_join(candidate.town_hall, tier_counts(roster))
        if eligibility.allowed:
            decision = JoinDecision(
                approved=True, outcome="approved", eligibility=eligibility
            )
        else:
            decision = JoinDecision(
                approved=False,
                outcome=eligibility.outcome,  # type: ignore[arg-type]
                reason=eligibility.reason,
                eligibility=eligibility,
            )

    if decision.approved:
        log.info(
            "Join approved for %s (TH%s); roster size %d/%d",
            candidate.tag or candidate.name,
            candidate.town_hall,
            len(roster) + 1,
            max_members,
        )
    else:
        log.info(
            "Join refused for %s (TH%s): %s",
            candidate.tag or candidate.name,
            candidate.town_hall,
            decision.reason,
        )
    return decision


__all__ = ["JoinDecision", "JoinOutcome", "review_join_request"]
