"""Command line helpers for checking team rosters against Town Hall rules."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Final

import coc

from .coc_roster import RosterFetchError, fetch_roster
from .config import RosterSettings, missing_credentials, read_settings
from .eligibility import can_join, restriction_summary, tier_counts
from .membership import review_join_request
from .models import RosterMember, roster_from_document, roster_to_document
from .validation import (
    InvalidValueError,
    parse_player_tags,
    parse_town_hall,
    validate_max_members,
)

log: Final = logging.getLogger("coc-roster")

EXIT_OK = 0
EXIT_REFUSED = 1
EXIT_INVALID = 2

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="coc-roster",
        description="Check team rosters against Town Hall slot restrictions",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default=None,
        help="Logging level (defaults to LOG_LEVEL or INFO)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    check = subparsers.add_parser(
        "check", help="Check whether a Town Hall level may join a roster"
    )
    check.add_argument("--roster", type=Path, required=True, help="Roster JSON file")
    check.add_argument(
        "--town-hall",
        default=None,
        help="Candidate Town Hall level (omit for a player without one set)",
    )

    review = subparsers.add_parser(
        "review", help="Review a join request against size and Town Hall rules"
    )
    review.add_argument("--roster", type=Path, required=True, help="Roster JSON file")
    review.add_argument("--town-hall", default=None, help="Candidate Town Hall level")
    review.add_argument("--name", default="", help="Candidate display name")
    review.add_argument("--tag", default="", help="Candidate player tag")
    review.add_argument(
        "--max-members",
        type=int,
        default=None,
        help="Team size cap (defaults to ROSTER_MAX_MEMBERS or 5)",
    )
    review.add_argument(
        "--on-team",
        action="store_true",
        help="Candidate already belongs to a team",
    )

    summary = subparsers.add_parser(
        "summary", help="Print Town Hall slot usage for a roster"
    )
    summary.add_argument("--roster", type=Path, required=True, help="Roster JSON file")

    fetch = subparsers.add_parser(
        "fetch", help="Build a roster file from Clash of Clans player tags"
    )
    fetch.add_argument("tags", nargs="+", help="Player tags (with or without #)")
    fetch.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Write the roster JSON here instead of stdout",
    )
    return parser


def configure_logging(level: str) -> None:
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        resolved = logging.INFO
    logging.basicConfig(level=resolved, format=LOG_FORMAT)


def load_roster(path: Path) -> list[RosterMember]:
    with open(path, "r", encoding="utf-8") as handle:
        document = json.load(handle)
    return roster_from_document(document)


def run_check(args: argparse.Namespace) -> int:
    town_hall = parse_town_hall(args.town_hall)
    roster = load_roster(args.roster)
    result = can_join(town_hall, tier_counts(roster))
    if result.allowed:
        print(f"Allowed: TH{town_hall} may join this roster")
        return EXIT_OK
    print(f"Refused: {result.reason}")
    return EXIT_REFUSED


def run_review(args: argparse.Namespace, settings: RosterSettings) -> int:
    max_members = (
        validate_max_members(args.max_members)
        if args.max_members is not None
        else settings.max_members
    )
    candidate = RosterMember(
        name=args.name, tag=args.tag, town_hall=parse_town_hall(args.town_hall)
    )
    roster = load_roster(args.roster)
    decision = review_join_request(
        candidate,
        roster,
        max_members=max_members,
        already_on_team=args.on_team,
    )
    if decision.approved:
        print("Approved: player can be added to the team")
        return EXIT_OK
    print(f"Refused: {decision.reason}")
    return EXIT_REFUSED


def run_summary(args: argparse.Namespace) -> int:
    roster = load_roster(args.roster)
    print(restriction_summary(tier_counts(roster)))
    return EXIT_OK


async def run_fetch(args: argparse.Namespace, settings: RosterSettings) -> int:
    missing = missing_credentials()
    if missing:
        log.error("Missing env vars: %s", ", ".join(missing))
        return EXIT_INVALID
    tags = parse_player_tags(" ".join(args.tags))

    client = coc.Client()
    try:
        await client.login(settings.coc_email, settings.coc_password)
        members = await fetch_roster(
            client,
            settings.coc_email,
            settings.coc_password,
            tags,
            max_retries=settings.max_retries,
            reauth_cooldown=settings.reauth_cooldown,
        )
    finally:
        await client.close()

    payload = json.dumps(roster_to_document(members), indent=2)
    if args.output is None:
        print(payload)
    else:
        args.output.write_text(payload + "\n", encoding="utf-8")
        log.info("Wrote %d roster members to %s", len(members), args.output)
    return EXIT_OK


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = read_settings()
    configure_logging(args.log_level or settings.log_level)

    try:
        if args.command == "check":
            return run_check(args)
        if args.command == "review":
            return run_review(args, settings)
        if args.command == "summary":
            return run_summary(args)
        return asyncio.run(run_fetch(args, settings))
    except (InvalidValueError, RosterFetchError) as exc:
        log.error("%s", exc)
        return EXIT_INVALID
    except (OSError, ValueError) as exc:
        log.error("Cannot read roster: %s", exc)
        return EXIT_INVALID
    except coc.HTTPException as exc:
        log.error("CoC API request failed: %s", exc)
        return EXIT_INVALID


if __name__ == "__main__":  # pragma: no cover - module entry point
    sys.exit(main())
