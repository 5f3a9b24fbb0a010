"""HTTP gateway for stats endpoint calls."""

from __future__ import annotations

from typing import Any

import httpx


def stats_headers(user_agent: str) -> dict[str, str]:
    return {
        "User-Agent": user_agent,
        "Accept": "application/json, text/plain, */*",
        "Accept-Language": "en-US,en;q=0.9",
        "Origin": "https://www.nba.com",
        "Referer": "https://www.nba.com/",
        "Connection": "keep-alive",
    }


def get_json(
    url: str,
    *,
    params: dict[str, Any],
    user_agent: str,
    timeout_s: float = 30.0,
) -> httpx.Response:
    """Issue one GET through the single approved stats entrypoint; status is left to callers."""
    return httpx.get(
        url,
        params=params,
        headers=stats_headers(user_agent),
        timeout=timeout_s,
        follow_redirects=True,
    )
