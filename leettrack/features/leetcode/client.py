from __future__ import annotations

import logging
import time
from typing import Any, Dict, List, Optional

import httpx

from leettrack.Core.config import get_settings
from leettrack.common.errors import NotFound, UpstreamUnavailable
from .schemas import LeetCodeStats

logger = logging.getLogger("leetcode.client")

USER_PROFILE_QUERY = """
query getUserProfile($username: String!) {
  matchedUser(username: $username) {
    username
    profile {
      ranking
    }
    submitStats: submitStatsGlobal {
      acSubmissionNum {
        difficulty
        count
      }
    }
    problemsSolvedBeatsStats {
      difficulty
      percentage
    }
  }
}
"""


def _count_for(stats: List[Dict[str, Any]], difficulty: str) -> int:
    for item in stats:
        if item.get("difficulty") == difficulty:
            return int(item.get("count") or 0)
    return 0


def parse_matched_user(user: Dict[str, Any]) -> LeetCodeStats:
    """Map a GraphQL ``matchedUser`` payload onto a stats snapshot."""
    submit = ((user.get("submitStats") or {}).get("acSubmissionNum")) or []
    beats = user.get("problemsSolvedBeatsStats") or []
    percentages = [float(b.get("percentage") or 0) for b in beats]
    acceptance = sum(percentages) / len(percentages) if percentages else 0.0
    return LeetCodeStats(
        total_solved=_count_for(submit, "All"),
        easy_solved=_count_for(submit, "Easy"),
        medium_solved=_count_for(submit, "Medium"),
        hard_solved=_count_for(submit, "Hard"),
        acceptance_rate=round(acceptance, 2),
        ranking=int((user.get("profile") or {}).get("ranking") or 0),
    )


class LeetCodeClient:
    """Thin GraphQL reader for public LeetCode profile stats.

    Any non-success is turned into a typed error so callers can skip the
    student instead of crashing: an unknown handle raises ``NotFound``,
    transport errors, timeouts and non-2xx answers raise
    ``UpstreamUnavailable``. Nothing is retried inline.
    """

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = get_settings()
        self.endpoint = self.settings.leetcode_graphql_url
        self.timeout = self.settings.leetcode_timeout_seconds
        self.headers = {
            "Content-Type": "application/json",
            "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36",
            "Referer": "https://leetcode.com",
        }
        self._transport = transport

    async def fetch_user_stats(self, handle: str) -> LeetCodeStats:
        payload = {"query": USER_PROFILE_QUERY, "variables": {"username": handle}}
        t0 = time.perf_counter()
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(self.endpoint, headers=self.headers, json=payload)
        except httpx.TimeoutException as exc:
            raise UpstreamUnavailable(f"leetcode timeout for {handle}") from exc
        except httpx.HTTPError as exc:
            raise UpstreamUnavailable(f"leetcode transport error for {handle}: {exc}") from exc
        ms = int((time.perf_counter() - t0) * 1000)
        logger.debug("leetcode.fetch handle=%s status=%s ms=%d", handle, response.status_code, ms)

        if response.status_code != 200:
            raise UpstreamUnavailable(f"leetcode status {response.status_code} for {handle}: {response.text[:200]}")
        try:
            body = response.json()
        except ValueError as exc:
            raise UpstreamUnavailable(f"leetcode returned non-JSON for {handle}") from exc

        user = ((body or {}).get("data") or {}).get("matchedUser")
        if not user:
            raise NotFound(f"leetcode user not found: {handle}")
        return parse_matched_user(user)


leetcode_client = LeetCodeClient()
