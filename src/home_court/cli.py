"""CLI entrypoint for home-court workflows."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from home_court.config import HomeCourtConfig, load_config
from home_court.errors import CLIError, HomeCourtError
from home_court.ingest.cache import load_raw_seasons
from home_court.ingest.fetch import GameLogFetcher, SeasonFetcher, combine_season_frames
from home_court.io_utils import atomic_write_json, atomic_write_text
from home_court.logging_setup import setup_logging
from home_court.pipeline.run import run_pipeline
from home_court.report import render_summary_markdown
from home_court.settings import Settings
from home_court.store.layout import build_layout
from home_court.store.tables import load_tables, write_tables
from home_court.verify.checks import run_verify


def _parse_seasons(raw: str, *, default: tuple[int, ...]) -> list[int]:
    """Parse `2000-2024`, `2000,2005` or a mix; blank falls back to the configured range."""
    if not raw or not raw.strip():
        if not default:
            raise CLIError("at least one season is required")
        return list(default)
    seasons: set[int] = set()
    for item in (part.strip() for part in raw.split(",")):
        if not item:
            continue
        try:
            if "-" in item:
                start_raw, end_raw = item.split("-", 1)
                start, end = int(start_raw), int(end_raw)
                if start > end:
                    raise CLIError(f"invalid season range: {item}")
                seasons.update(range(start, end + 1))
            else:
                seasons.add(int(item))
        except ValueError as exc:
            raise CLIError(f"invalid season: {item}") from exc
    if not seasons:
        raise CLIError("at least one season is required")
    return sorted(seasons)


def _build_fetcher() -> SeasonFetcher:
    try:
        settings = Settings.from_runtime()
    except RuntimeError:
        settings = Settings()
    return GameLogFetcher(settings)


def _max_workers(args: argparse.Namespace, config: HomeCourtConfig) -> int:
    value = int(getattr(args, "max_workers", 0) or 0)
    return value if value > 0 else config.max_workers


def _cmd_fetch(args: argparse.Namespace) -> int:
    config = load_config(data_dir=getattr(args, "data_dir", None))
    layout = build_layout(config.data_dir)
    seasons = _parse_seasons(args.seasons, default=config.seasons)
    results = load_raw_seasons(
        layout=layout,
        seasons=seasons,
        fetcher=_build_fetcher(),
        max_workers=_max_workers(args, config),
        refresh=bool(args.refresh),
    )
    ok = [result for result in results if result.ok]
    failed = [result.season for result in results if not result.ok]
    payload = {
        "seasons": len(results),
        "ok": len(ok),
        "failed_seasons": failed,
        "rows": sum(result.rows for result in results),
    }
    if args.json_output:
        print(json.dumps(payload, sort_keys=True, indent=2))
    else:
        print(
            "seasons={} ok={} failed={} rows={}".format(
                payload["seasons"],
                payload["ok"],
                ",".join(str(season) for season in failed) or "-",
                payload["rows"],
            )
        )
    return 0 if ok else 1


def _cmd_build(args: argparse.Namespace) -> int:
    config = load_config(data_dir=getattr(args, "data_dir", None))
    layout = build_layout(config.data_dir)
    seasons = _parse_seasons(args.seasons, default=config.seasons)
    results = load_raw_seasons(
        layout=layout,
        seasons=seasons,
        fetcher=None if args.offline else _build_fetcher(),
        max_workers=_max_workers(args, config),
        refresh=bool(args.refresh),
    )
    tables = run_pipeline(combine_season_frames(results), bands=config.era_bands)
    counts = write_tables(layout, tables)
    failed = [result.season for result in results if not result.ok]
    if args.json_output:
        print(
            json.dumps(
                {"counts": counts, "failed_seasons": failed, "tables_dir": str(layout.tables_dir)},
                sort_keys=True,
                indent=2,
            )
        )
    else:
        print(
            "games={} seasons={} teams={} team_eras={} failed_seasons={}".format(
                counts["games"],
                counts["seasons"],
                counts["teams"],
                counts["team_eras"],
                ",".join(str(season) for season in failed) or "-",
            )
        )
    return 0


def _cmd_verify(args: argparse.Namespace) -> int:
    config = load_config(data_dir=getattr(args, "data_dir", None))
    layout = build_layout(config.data_dir)
    seasons = _parse_seasons(args.seasons, default=config.seasons)
    results = load_raw_seasons(layout=layout, seasons=seasons, fetcher=None)
    tables = run_pipeline(combine_season_frames(results), bands=config.era_bands)
    code, report = run_verify(
        tables=tables,
        seasons=seasons,
        results=results,
        fail_on_warn=bool(args.fail_on_warn),
        bands=config.era_bands,
    )
    atomic_write_json(layout.verify_report_path(), report)
    if args.json_output:
        print(json.dumps(report, sort_keys=True, indent=2))
    else:
        overview = report["overview"]
        print(
            "failures={} warnings={} games={} home_win_rate={} report={}".format(
                len(report["failures"]),
                len(report["warnings"]),
                overview["games"],
                overview["home_win_rate"],
                layout.verify_report_path(),
            )
        )
    return int(code)


def _cmd_report(args: argparse.Namespace) -> int:
    config = load_config(data_dir=getattr(args, "data_dir", None))
    layout = build_layout(config.data_dir)
    tables = load_tables(layout)
    markdown = render_summary_markdown(tables, top_n=int(args.top_n), bands=config.era_bands)
    out_raw = str(getattr(args, "out", "") or "").strip()
    out_path = Path(out_raw).expanduser() if out_raw else layout.summary_markdown_path()
    atomic_write_text(out_path, markdown + "\n")
    if args.stdout:
        print(markdown)
    else:
        print(f"report={out_path}")
    return 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="home-court")
    parser.add_argument("--log-level", default="")
    subparsers = parser.add_subparsers(dest="command")

    fetch = subparsers.add_parser("fetch", help="Download season team game logs into the cache")
    fetch.set_defaults(func=_cmd_fetch)
    fetch.add_argument("--data-dir", default="")
    fetch.add_argument("--seasons", default="")
    fetch.add_argument("--max-workers", type=int, default=0)
    fetch.add_argument("--refresh", action="store_true")
    fetch.add_argument("--json", dest="json_output", action="store_true")

    build = subparsers.add_parser("build", help="Pair games and write summary tables")
    build.set_defaults(func=_cmd_build)
    build.add_argument("--data-dir", default="")
    build.add_argument("--seasons", default="")
    build.add_argument("--max-workers", type=int, default=0)
    build.add_argument("--offline", action="store_true")
    build.add_argument("--refresh", action="store_true")
    build.add_argument("--json", dest="json_output", action="store_true")

    verify = subparsers.add_parser("verify", help="Run integrity checks on cached seasons")
    verify.set_defaults(func=_cmd_verify)
    verify.add_argument("--data-dir", default="")
    verify.add_argument("--seasons", default="")
    verify.add_argument("--fail-on-warn", action="store_true")
    verify.add_argument("--json", dest="json_output", action="store_true")

    report = subparsers.add_parser("report", help="Render summary tables as Markdown")
    report.set_defaults(func=_cmd_report)
    report.add_argument("--data-dir", default="")
    report.add_argument("--top-n", type=int, default=10)
    report.add_argument("--out", default="")
    report.add_argument("--stdout", action="store_true")

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level or Settings().log_level)
    func = getattr(args, "func", None)
    if func is None:
        parser.print_help()
        return 0
    try:
        return int(func(args))
    except (CLIError, HomeCourtError, FileNotFoundError, ValueError) as exc:
        print(str(exc), file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
