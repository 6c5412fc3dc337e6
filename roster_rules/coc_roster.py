"""Build roster snapshots from live Clash of Clans player data."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Sequence
from typing import Final, Literal

import coc

from .models import RosterMember
from .validation import normalize_player_tag

log: Final = logging.getLogger("coc-roster")

# Shared across fetches so a burst of 403s triggers one login
_reauth_lock = asyncio.Lock()
_last_reauth_attempt = 0.0


FetchStatus = Literal["not_found", "access_denied", "error"]


class RosterFetchError(RuntimeError):
    """Raised when a player in the requested roster cannot be loaded."""

    def __init__(self, tag: str, status: FetchStatus) -> None:
        super().__init__(f"Failed to load player data for {tag}: status={status}")
        self.tag = tag
        self.status = status


async def _reauthenticate(
    client: coc.Client, email: str, password: str, cooldown: int
) -> None:
    """Log the client back in unless another fetch just did."""
    global _last_reauth_attempt

    async with _reauth_lock:
        now = time.time()
        if now - _last_reauth_attempt <= cooldown:
            log.debug("Skipping re-authentication (too recent)")
            return
        await client.login(email, password)
        _last_reauth_attempt = now
        log.info("CoC API re-authentication successful")


def member_from_player(player: coc.Player) -> RosterMember:
    town_hall = getattr(player, "town_hall", None)
    return RosterMember(
        name=player.name,
        tag=player.tag,
        town_hall=int(town_hall) if town_hall else None,
    )


async def fetch_member(
    client: coc.Client,
    email: str,
    password: str,
    tag: str,
    *,
    max_retries: int = 1,
    reauth_cooldown: int = 60,
) -> RosterMember:
    """Load one player as a roster member.

    A 403 from the API is treated as an expired session: the client logs in
    again and the request is repeated, up to ``max_retries`` times.
    """
    for attempt in range(max_retries + 1):
        try:
            player = await client.get_player(tag)
        except coc.NotFound as exc:
            log.warning("Player %s not found", tag)
            raise RosterFetchError(tag, "not_found") from exc
        except coc.HTTPException as exc:
            if getattr(exc, "status", None) != 403:
                log.error("CoC API error fetching %s: %s", tag, exc)
                raise RosterFetchError(tag, "error") from exc
            if attempt >= max_retries:
                log.error("CoC API still refusing %s after %d logins", tag, attempt)
                raise RosterFetchError(tag, "access_denied") from exc
            log.warning("CoC API 403 for %s, logging in again", tag)
            try:
                await _reauthenticate(client, email, password, reauth_cooldown)
            except coc.HTTPException as login_exc:
                log.error("CoC API re-authentication failed: %s", login_exc)
                raise RosterFetchError(tag, "access_denied") from login_exc
            continue
        return member_from_player(player)
    raise RosterFetchError(tag, "error")  # pragma: no cover - loop always exits


async def fetch_roster(
    client: coc.Client,
    email: str,
    password: str,
    tags: Sequence[str],
    *,
    max_retries: int = 1,
    reauth_cooldown: int = 60,
) -> list[RosterMember]:
    """Resolve player tags into roster members, preserving tag order."""
    members: list[RosterMember] = []
    for raw_tag in tags:
        member = await fetch_member(
            client,
            email,
            password,
            normalize_player_tag(raw_tag),
            max_retries=max_retries,
            reauth_cooldown=reauth_cooldown,
        )
        log.debug("Loaded %s", member.display())
        members.append(member)
    return members


__all__ = [
    "FetchStatus",
    "RosterFetchError",
    "fetch_member",
    "fetch_roster",
    "member_from_player",
]
