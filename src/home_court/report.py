"""Markdown rendering for home-court summary tables."""

from __future__ import annotations

from collections.abc import Sequence

import polars as pl

from home_court.eras import EraBand, era_order
from home_court.pipeline.aggregate import (
    league_overview,
    point_diff_distribution,
    top_teams,
)
from home_court.pipeline.run import HomeCourtTables


def _pct(value: float | None, decimals: int = 1) -> str:
    if value is None:
        return ""
    return f"{value * 100:.{decimals}f}%"


def _num(value: float | None, decimals: int = 2) -> str:
    if value is None:
        return ""
    return f"{value:.{decimals}f}"


def _table(headers: list[str], rows: list[list[str]]) -> list[str]:
    lines = [
        "| " + " | ".join(headers) + " |",
        "| " + " | ".join("---" for _ in headers) + " |",
    ]
    for row in rows:
        lines.append("| " + " | ".join(row) + " |")
    lines.append("")
    return lines


def team_era_matrix(team_eras: pl.DataFrame, bands: Sequence[EraBand] = ()) -> pl.DataFrame:
    """Wide team x era frame of home win rates.

    Era columns follow band chronology when bands are given, label order otherwise.
    """
    if team_eras.height == 0:
        return pl.DataFrame(schema={"home_team": pl.Utf8})
    ranks = era_order(bands)
    present = set(team_eras.get_column("era").to_list())
    eras = sorted(present, key=lambda label: (ranks.get(label, len(ranks)), label))
    wide = team_eras.pivot(on="era", index="home_team", values="home_win_rate")
    return wide.select(["home_team", *eras]).sort("home_team")


def render_summary_markdown(
    tables: HomeCourtTables, *, top_n: int = 10, bands: Sequence[EraBand] = ()
) -> str:
    overview = league_overview(tables.games)
    first_date = overview["first_date"] or ""
    last_date = overview["last_date"] or ""
    lines: list[str] = []
    lines.append("# NBA Home-Court Advantage")
    lines.append("")
    lines.append(f"- games: `{overview['games']}`")
    lines.append(f"- seasons: `{overview['seasons']}`")
    lines.append(f"- teams: `{overview['teams']}`")
    lines.append(f"- date_range: `{first_date}` to `{last_date}`")
    lines.append(f"- overall_home_win_pct: `{_pct(overview['home_win_rate'])}`")
    lines.append("")

    lines.append("## League-Wide Home Win Percentage by Season")
    lines.append("")
    lines.extend(
        _table(
            ["Season", "Games", "Home Win %", "Avg Point Diff"],
            [
                [
                    str(row["season"]),
                    str(row["games"]),
                    _pct(row["home_win_rate"]),
                    _num(row["mean_point_diff"]),
                ]
                for row in tables.seasons.iter_rows(named=True)
            ],
        )
    )

    lines.append("## Home Win Percentage by Team")
    lines.append("")
    lines.extend(
        _table(
            ["Team", "Games", "Home Win %"],
            [
                [row["home_team"], str(row["games_played"]), _pct(row["home_win_rate"])]
                for row in tables.teams.iter_rows(named=True)
            ],
        )
    )

    lines.append(f"## Top {top_n} Home-Court Advantage Teams")
    lines.append("")
    lines.extend(
        _table(
            ["Rank", "Team", "Home Win %"],
            [
                [str(rank), row["home_team"], _pct(row["home_win_rate"])]
                for rank, row in enumerate(
                    top_teams(tables.teams, top_n).iter_rows(named=True), start=1
                )
            ],
        )
    )

    matrix = team_era_matrix(tables.team_eras, bands)
    eras = [column for column in matrix.columns if column != "home_team"]
    lines.append("## Home Win Percentage by Team and Era")
    lines.append("")
    lines.extend(
        _table(
            ["Team", *eras],
            [
                [row["home_team"], *[_pct(row[era]) for era in eras]]
                for row in matrix.iter_rows(named=True)
            ],
        )
    )

    lines.append("## Point Differential Distribution: Home vs Away")
    lines.append("")
    lines.extend(
        _table(
            ["Location", "Min", "Q1", "Median", "Q3", "Max", "Mean"],
            [
                [
                    row["location"],
                    _num(row["min"], 0),
                    _num(row["q1"], 1),
                    _num(row["median"], 1),
                    _num(row["q3"], 1),
                    _num(row["max"], 0),
                    _num(row["mean"]),
                ]
                for row in point_diff_distribution(tables.point_diff_long).iter_rows(named=True)
            ],
        )
    )
    return "\n".join(lines)
