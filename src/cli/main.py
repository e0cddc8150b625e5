"""Command-line entrypoint.

Bootstraps a session, resolves the time range, executes one statement and prints the translated
LogsQL plus results. Exit code is 0 on success and 1 on failure.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from collections.abc import Sequence

import httpx

from src.app import create_app
from src.config.logging import configure_logging
from src.config.settings import Settings, load_settings
from src.execution.state import DEFAULT_FROM, DEFAULT_TO, ExecutionEvent, Succeeded, TimeRangeValue
from src.timerange.quick_ranges import search_quick_ranges

logger = logging.getLogger(__name__)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sql-to-logsql",
        description="Translate SQL to LogsQL and optionally run it against VictoriaLogs.",
    )
    parser.add_argument("sql", nargs="?", help="SQL statement to translate")
    parser.add_argument("--from", dest="from_", default=DEFAULT_FROM, help="start ('' = unset)")
    parser.add_argument("--to", dest="to", default=DEFAULT_TO, help="end ('' = unset)")
    parser.add_argument("--mode", choices=("translate", "query"), help="override EXEC_MODE")
    parser.add_argument("--endpoint", help="VictoriaLogs URL override")
    parser.add_argument("--token", default="", help="bearer token for --endpoint")
    parser.add_argument(
        "--list-ranges",
        nargs="?",
        const="",
        metavar="SEARCH",
        help="print quick ranges (optionally filtered) and exit",
    )
    return parser


def _print_event(event: ExecutionEvent) -> None:
    if event.kind == "error":
        print(f"{event.message} {event.description}", file=sys.stderr)


async def run(
        argv: Sequence[str] | None = None,
        *,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
) -> int:
    """Run the CLI and return the process exit code."""

    args = build_arg_parser().parse_args(argv)

    if args.list_ranges is not None:
        for quick_range in search_quick_ranges(args.list_ranges):
            print(f"{quick_range.label}\t{quick_range.from_}\t{quick_range.to}")
        return 0

    if not args.sql:
        print("sql is required", file=sys.stderr)
        return 2

    app = create_app(settings or load_settings(), transport=transport)
    controller = app.controller
    controller.subscribe(_print_event)

    try:
        await controller.bootstrap()
        if args.endpoint:
            if controller.endpoint.enabled:
                controller.set_endpoint(args.endpoint, args.token)
            else:
                logger.warning("--endpoint ignored: endpoint is managed by the server")

        time_range = TimeRangeValue(from_=args.from_, to=args.to)
        now = app.clock()
        print(f"time range: {time_range.caption}")
        print(f"  from: {app.parser.describe(time_range.from_, now) or '-'}")
        print(f"  to:   {app.parser.describe(time_range.to, now) or '-'}")

        state = await controller.execute(args.sql, time_range, args.mode)
    finally:
        await app.aclose()

    if not isinstance(state, Succeeded):
        return 1

    print(state.query)
    if state.results is not None:
        print(json.dumps(state.results, indent=2, ensure_ascii=False))
    print(state.message)
    return 0


def main() -> None:
    configure_logging()
    sys.exit(asyncio.run(run()))


if __name__ == "__main__":
    main()
