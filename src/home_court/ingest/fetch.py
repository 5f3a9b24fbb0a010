"""Season game-log fetching with retries, rate limiting and per-season isolation."""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Any, Protocol

import httpx
import polars as pl
from loguru import logger
from tenacity import Retrying, retry_if_exception_type, stop_after_attempt

from home_court.errors import FetchError, InvalidInputError
from home_court.ingest import gateway
from home_court.ingest.rate_limit import RateLimiter
from home_court.pipeline.normalize import clean_names, resolve_fields
from home_court.schemas import empty_frame, enforce_schema
from home_court.settings import Settings

_MATCHUP_RE = re.compile(r"^\s*(?P<team>\S+)\s+(?P<sep>vs\.?|@)\s+(?P<opponent>\S+)\s*$")


class SeasonFetcher(Protocol):
    def fetch(self, season: int) -> pl.DataFrame: ...


@dataclass(frozen=True)
class SeasonFetchResult:
    """Outcome of one season fetch: a raw frame, or the error that replaced it."""

    season: int
    frame: pl.DataFrame | None
    error: str = ""

    @property
    def ok(self) -> bool:
        return self.frame is not None

    @property
    def rows(self) -> int:
        return self.frame.height if self.frame is not None else 0


class RetryableStatusError(RuntimeError):
    """Raised for retryable status codes."""

    def __init__(self, response: httpx.Response) -> None:
        self.response = response
        super().__init__(f"retryable status {response.status_code}")


def season_label(season: int) -> str:
    """League season string for a season keyed by its end year: 2024 -> `2023-24`."""
    start = int(season) - 1
    return f"{start}-{str(start + 1)[-2:]}"


def parse_matchup(matchup: str | None) -> tuple[str, str]:
    """Return `(location_code, opponent)` from `LAL vs. BOS` or `LAL @ BOS`.

    Both values are blank when the matchup cannot be parsed.
    """
    if not matchup:
        return "", ""
    match = _MATCHUP_RE.match(matchup)
    if match is None:
        return "", ""
    code = "A" if match.group("sep") == "@" else "H"
    return code, match.group("opponent")


def rows_from_payload(payload: dict[str, Any], *, season: int) -> pl.DataFrame:
    """Convert a `leaguegamelog` team payload into the `raw_game_logs` schema."""
    result_sets = payload.get("resultSets")
    if isinstance(result_sets, dict):
        result_sets = [result_sets]
    if not isinstance(result_sets, list) or not result_sets:
        raise FetchError(f"season {season}: payload missing resultSets")
    first = result_sets[0]
    if not isinstance(first, dict):
        raise FetchError(f"season {season}: malformed resultSets entry")
    headers = first.get("headers")
    row_set = first.get("rowSet")
    if not isinstance(headers, list) or not isinstance(row_set, list):
        raise FetchError(f"season {season}: result set missing headers/rowSet")

    index = {str(name).upper(): position for position, name in enumerate(headers)}
    for required in ("GAME_ID", "TEAM_NAME", "MATCHUP", "PTS"):
        if required not in index:
            raise FetchError(f"season {season}: result set missing column {required}")

    def _cell(row: list[Any], name: str) -> Any:
        position = index.get(name)
        if position is None or position >= len(row):
            return None
        return row[position]

    records: list[dict[str, Any]] = []
    for row in row_set:
        if not isinstance(row, list):
            continue
        location_code, opponent = parse_matchup(_cell(row, "MATCHUP"))
        game_date = _cell(row, "GAME_DATE")
        records.append(
            {
                "idGame": str(_cell(row, "GAME_ID") or ""),
                "yearSeason": int(season),
                "dateGame": str(game_date)[:10] if game_date else None,
                "nameTeam": _cell(row, "TEAM_NAME"),
                "slugOpponent": opponent or None,
                "locationGame": location_code,
                "ptsTeam": _cell(row, "PTS"),
            }
        )
    if not records:
        return empty_frame("raw_game_logs")
    return enforce_schema("raw_game_logs", pl.DataFrame(records, infer_schema_length=None))


def _wait_for_retry(retry_state) -> float:
    """Wait strategy for tenacity retries."""
    exc = retry_state.outcome.exception() if retry_state.outcome else None
    if isinstance(exc, RetryableStatusError):
        raw_value = exc.response.headers.get("Retry-After", "")
        try:
            return min(max(0.0, float(raw_value)), 60.0)
        except ValueError:
            pass
    return min(2 ** (retry_state.attempt_number - 1), 30.0)


class GameLogFetcher:
    """Team game logs for one season from the stats `leaguegamelog` endpoint."""

    def __init__(
        self,
        settings: Settings,
        *,
        limiter: RateLimiter | None = None,
        wait: Callable[[Any], float] = _wait_for_retry,
    ) -> None:
        self.settings = settings
        self._url = f"{settings.stats_base_url.rstrip('/')}/leaguegamelog"
        self._limiter = limiter or RateLimiter(rpm=settings.stats_requests_per_minute)
        self._wait = wait

    def _params(self, season: int) -> dict[str, str]:
        return {
            "Counter": "0",
            "DateFrom": "",
            "DateTo": "",
            "Direction": "ASC",
            "LeagueID": "00",
            "PlayerOrTeam": "T",
            "Season": season_label(season),
            "SeasonType": self.settings.season_type,
            "Sorter": "DATE",
        }

    def _request(self, season: int) -> dict[str, Any]:
        response: httpx.Response | None = None
        try:
            for attempt in Retrying(
                stop=stop_after_attempt(self.settings.stats_max_attempts),
                retry=retry_if_exception_type((RetryableStatusError, httpx.TransportError)),
                wait=self._wait,
                reraise=True,
            ):
                with attempt:
                    self._limiter.wait()
                    response = gateway.get_json(
                        self._url,
                        params=self._params(season),
                        user_agent=self.settings.stats_user_agent,
                        timeout_s=self.settings.stats_timeout_s,
                    )
                    if response.status_code == 429 or 500 <= response.status_code <= 599:
                        raise RetryableStatusError(response)
                    response.raise_for_status()
        except RetryableStatusError as exc:
            raise FetchError(
                f"season {season}: status {exc.response.status_code} after retries"
            ) from exc
        except httpx.HTTPError as exc:
            raise FetchError(f"season {season}: transport error: {exc}") from exc
        if response is None:
            raise FetchError(f"season {season}: no response")
        try:
            payload = response.json()
        except ValueError as exc:
            raise FetchError(f"season {season}: invalid JSON payload") from exc
        if not isinstance(payload, dict):
            raise FetchError(f"season {season}: unexpected non-object JSON payload")
        return payload

    def fetch(self, season: int) -> pl.DataFrame:
        return rows_from_payload(self._request(season), season=season)


def _layout_error(frame: pl.DataFrame) -> str:
    """Blank when the frame carries every required game-log field."""
    try:
        resolve_fields(clean_names(frame).columns)
    except InvalidInputError as exc:
        return str(exc)
    return ""


def _fetch_one(fetcher: SeasonFetcher, season: int) -> SeasonFetchResult:
    logger.info("Loading season: {}", season)
    try:
        frame = fetcher.fetch(season)
    except Exception as exc:
        logger.warning("Failed for season: {}: {}", season, exc)
        return SeasonFetchResult(season=season, frame=None, error=str(exc) or type(exc).__name__)
    if frame is None or not isinstance(frame, pl.DataFrame):
        logger.warning("Failed for season: {}: fetcher returned no frame", season)
        return SeasonFetchResult(season=season, frame=None, error="fetcher returned no frame")
    error = _layout_error(frame)
    if error:
        logger.warning("Failed for season: {}: {}", season, error)
        return SeasonFetchResult(season=season, frame=None, error=error)
    logger.debug("season {} rows={}", season, frame.height)
    return SeasonFetchResult(season=season, frame=frame)


def fetch_seasons(
    seasons: Iterable[int],
    fetcher: SeasonFetcher,
    *,
    max_workers: int = 1,
) -> list[SeasonFetchResult]:
    """Fetch every season independently; failures become empty results.

    Results are returned in ascending season order whatever the completion order.
    """
    targets = sorted({int(season) for season in seasons})
    if not targets:
        return []
    results: dict[int, SeasonFetchResult] = {}
    workers = max(1, min(int(max_workers), len(targets)))
    if workers == 1:
        for season in targets:
            results[season] = _fetch_one(fetcher, season)
    else:
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = {executor.submit(_fetch_one, fetcher, season): season for season in targets}
            for future in as_completed(futures):
                season = futures[future]
                results[season] = future.result()
    failed = [season for season in targets if not results[season].ok]
    if failed:
        logger.warning(
            "{} of {} seasons failed: {}",
            len(failed),
            len(targets),
            ",".join(str(season) for season in failed),
        )
    return [results[season] for season in targets]


def combine_season_frames(results: Iterable[SeasonFetchResult]) -> pl.DataFrame:
    """Concatenate successful season frames in season order.

    Failed seasons add no rows, and neither does a season frame missing a required field.
    """
    frames: list[pl.DataFrame] = []
    for result in sorted(results, key=lambda result: result.season):
        if result.frame is None or result.frame.width == 0:
            continue
        error = _layout_error(result.frame)
        if error:
            logger.warning("Failed for season: {}: {}", result.season, error)
            continue
        frames.append(result.frame)
    if not frames:
        return empty_frame("raw_game_logs")
    if len(frames) == 1:
        return frames[0]
    return pl.concat(frames, how="diagonal_relaxed")
