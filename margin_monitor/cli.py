"""Command-line interface for the margin position monitor."""
from __future__ import annotations

import argparse
import asyncio
import sys

from .config import load_config
from .logging_setup import configure_logging
from .reports import format_price_move
from .services import Monitor


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse CLI parser."""
    parser = argparse.ArgumentParser(
        prog="margin-monitor",
        description="Risk monitor for DeepBook margin positions",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to config.yaml (default: config.yaml in project root)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )

    sub = parser.add_subparsers(dest="command")

    sub.add_parser("check", help="Evaluate every margin manager once")
    sub.add_parser("report", help="Send a position and portfolio report")

    monitor_parser = sub.add_parser("monitor", help="Continuous polling loop")
    monitor_parser.add_argument(
        "interval",
        nargs="?",
        type=int,
        default=None,
        help="Check interval in seconds (overrides config)",
    )

    simulate_parser = sub.add_parser(
        "simulate", help="Project positions under hypothetical price moves"
    )
    simulate_parser.add_argument(
        "changes",
        nargs="+",
        type=float,
        help="Price changes as fractions, e.g. -0.1 for a 10%% drop",
    )

    return parser


async def _run(args: argparse.Namespace) -> int:
    """Execute the selected command."""
    configure_logging(args.log_level)
    config = load_config(args.config)
    monitor = Monitor(config)

    if args.command == "check":
        results = await monitor.check_cycle()
        return 1 if any(r.error for r in results) else 0
    if args.command == "report":
        print(await monitor.generate_report())
        return 0
    if args.command == "monitor":
        await monitor.run_continuous(args.interval)
        return 0
    if args.command == "simulate":
        projections = await monitor.simulate(args.changes)
        for key, results in projections.items():
            print(key)
            for change, result in results.items():
                print(f"  {format_price_move(change, result)}")
        return 0

    build_parser().print_help()
    return 1


def main() -> None:
    """Entry point."""
    parser = build_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    sys.exit(asyncio.run(_run(args)))
