# =============================================================================
# src/cli/tracker.py: Operator CLI for feedback, analysis and tokens
# =============================================================================
#
# Runs the same services as the HTTP API directly against the configured
# record store (SQLITE by default, see FEEDBACK_DB_PATH), without starting
# the web server:
#
#   python -m src.cli token   --owner alice
#   python -m src.cli submit  --owner alice --feedback 3 --lat 51.5 --lng -0.12
#   python -m src.cli analyze --owner alice --json
#
# ``--json`` implies ``--quiet`` so stdout holds only the JSON document.
# =============================================================================

"""Command-line access to feedback submission and correlation analysis."""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from collections.abc import Sequence

from src.models.analysis import CorrelationResult


def _format_text_output(result: CorrelationResult) -> str:
    """Format an analysis result as a human-readable table."""
    lines: list[str] = []
    sep = "=" * 60

    lines.append(sep)
    lines.append(f"  pollenTracker: Analysis for {result.owner_id}")
    lines.append(sep)
    lines.append(f"Data points: {result.data_points}")
    lines.append(f"Analyzed at: {result.analyzed_at.isoformat()}")
    lines.append("")

    if not result.correlations:
        lines.append("Not enough data for any category (need 3 readings per category).")
        return "\n".join(lines)

    lines.append(f"{'CATEGORY':<20} {'r':>8} {'p':>8}  SIGNIFICANT")
    lines.append("-" * 50)
    for category, stat in result.correlations.items():
        flag = "yes" if stat.significant else "no"
        line = f"{category:<20} {stat.correlation:>8.3f} {stat.significance:>8.3f}  {flag}"
        if stat.error:
            line += f"  ({stat.error})"
        lines.append(line)
    return "\n".join(lines)


def _suppress_logs() -> None:
    """Send structlog and stdlib logging to stderr at WARNING+ level."""
    import logging

    import structlog

    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(logging.WARNING),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )

    root = logging.getLogger()
    root.handlers.clear()
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(logging.WARNING)
    root.addHandler(handler)
    root.setLevel(logging.WARNING)

    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def _cmd_token(args: argparse.Namespace) -> int:
    from src.api.auth import create_owner_token
    from src.config.settings import Settings

    app_settings = Settings()
    if not app_settings.auth_secret:
        print("AUTH_SECRET is not set; the owner id is used as the token.", file=sys.stderr)
    print(create_owner_token(args.owner, app_settings.auth_secret))
    return 0


async def _cmd_submit(args: argparse.Namespace) -> int:
    # Deferred imports keep ``--help`` fast.
    from src.config.settings import Settings
    from src.providers.exposure.google_pollen_provider import GooglePollenProvider
    from src.providers.feedback.sqlite_feedback_store import SQLiteFeedbackStore
    from src.services.feedback_service import FeedbackService
    from src.utils.errors import PollenTrackerError

    app_settings = Settings()
    store = SQLiteFeedbackStore(db_path=app_settings.feedback_db_path)
    provider = GooglePollenProvider(
        api_key=app_settings.google_pollen_api_key,
        api_url=app_settings.pollen_api_url,
        days=app_settings.pollen_forecast_days,
    )
    service = FeedbackService(store=store, exposure_provider=provider)

    payload = {"feedback": args.feedback, "location": {"lat": args.lat, "lng": args.lng}}
    try:
        await store.initialize()
        result = await service.submit_feedback(args.owner, payload)
    except PollenTrackerError as exc:
        print(f"Error ({exc.kind}): {exc.message}", file=sys.stderr)
        return 1
    finally:
        await provider.close()

    if args.json_output:
        print(result.model_dump_json(indent=2))
    else:
        print(f"Stored record {result.record_id} with {len(result.readings)} readings")
        for reading in result.readings:
            print(f"  {reading.category:<20} {reading.exposure_level}")
    return 0


async def _cmd_analyze(args: argparse.Namespace) -> int:
    from src.config.settings import Settings
    from src.providers.feedback.sqlite_feedback_store import SQLiteFeedbackStore
    from src.services.analysis_service import AnalysisService
    from src.utils.errors import PollenTrackerError

    app_settings = Settings()
    store = SQLiteFeedbackStore(db_path=app_settings.feedback_db_path)
    service = AnalysisService(store=store)

    try:
        await store.initialize()
        result = await service.run_analysis(args.owner)
    except PollenTrackerError as exc:
        print(f"Error ({exc.kind}): {exc.message}", file=sys.stderr)
        return 1

    if args.json_output:
        print(json.dumps(result.model_dump(mode="json"), indent=2))
    else:
        print(_format_text_output(result))
    return 0


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m src.cli",
        description="Submit allergy feedback and correlate it with pollen exposure.",
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Suppress log output.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    token = subparsers.add_parser("token", help="Issue a bearer token for an owner.")
    token.add_argument("--owner", required=True, help="Owner id to sign.")

    submit = subparsers.add_parser("submit", help="Store one feedback submission.")
    submit.add_argument("--owner", required=True, help="Owner id the record belongs to.")
    submit.add_argument("--feedback", required=True, help="Feedback score (number or text).")
    submit.add_argument("--lat", required=True, help="Latitude.")
    submit.add_argument("--lng", required=True, help="Longitude.")
    submit.add_argument("--json", action="store_true", dest="json_output", help="Print JSON.")

    analyze = subparsers.add_parser("analyze", help="Recompute an owner's correlations.")
    analyze.add_argument("--owner", required=True, help="Owner id to analyse.")
    analyze.add_argument("--json", action="store_true", dest="json_output", help="Print JSON.")

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entry point.  Returns the process exit code."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.quiet or getattr(args, "json_output", False):
        _suppress_logs()

    if args.command == "token":
        return _cmd_token(args)
    if args.command == "submit":
        return asyncio.run(_cmd_submit(args))
    return asyncio.run(_cmd_analyze(args))


if __name__ == "__main__":
    sys.exit(main())
