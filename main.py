#!/usr/bin/env python
"""CLI for the Market Sentinel intelligence pipeline."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, field_validator

from market_sentinel.config import create_from_config, get_default_config_path, load_config
from market_sentinel.data import MarketEvent
from market_sentinel.errors import MarketSentinelError

logger = logging.getLogger(__name__)


class CLIArgs(BaseModel):
    """Validated CLI arguments."""

    command: Literal["intel", "trends"]
    keywords: list[str] = []
    config: Path
    notify: str | None = None
    log: bool = False
    log_dir: str = "logs"

    @field_validator("config")
    @classmethod
    def config_must_exist(cls, v: Path) -> Path:
        if not v.exists():
            raise ValueError(f"Config file not found: {v}")
        return v

    @field_validator("notify")
    @classmethod
    def notify_must_look_like_email(cls, v: str | None) -> str | None:
        if v is not None and "@" not in v:
            raise ValueError(f"Not an email address: {v}")
        return v


def _print_event(index: int, event: MarketEvent) -> None:
    logger.info(f"{index}. [{event.severity}] {event.title} ({event.region})")
    logger.info(f"   {event.summary}")
    for stock in event.affected_stocks:
        logger.info(f"   - {stock.symbol} {stock.name}: {stock.impact} ({stock.reasoning})")
    for source in event.sources:
        logger.info(f"   Source: {source.title} <{source.uri}>")


async def run(args: CLIArgs) -> None:
    """Execute one service operation with the given configuration.

    Args:
        args: Validated CLI arguments.
    """
    config = load_config(args.config)
    service, run_logger = create_from_config(
        config,
        log_override=args.log if args.log else None,
        log_dir_override=args.log_dir if args.log_dir != "logs" else None,
    )

    if args.command == "intel":
        logger.info(f"Fetching market intelligence for: {', '.join(args.keywords) or 'defaults'}")
        events = await service.fetch_intelligence(args.keywords)
    else:
        logger.info("Fetching global trends")
        events = await service.fetch_trends()

    print(f"\nFound {len(events)} events:\n")
    for i, event in enumerate(events, 1):
        _print_event(i, event)

    if args.notify and events:
        logger.info(f"\n--- Notification draft for {args.notify} ---")
        draft = await service.draft_notification(events[0], args.notify)
        print(draft)

    if run_logger and run_logger.last_log_path:
        logger.info(f"\nRun log written to: {run_logger.last_log_path}")


def main() -> None:
    """Entry point for the CLI."""
    parser = argparse.ArgumentParser(description="Track market-moving events and trends.")
    parser.add_argument(
        "command",
        choices=["intel", "trends"],
        help="intel: recent events for keywords; trends: top global trends",
    )
    parser.add_argument(
        "keywords",
        nargs="*",
        help="Focus keywords for 'intel' (default topics when omitted)",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=None,
        help="Path to YAML config file (default: configs/default.yaml)",
    )
    parser.add_argument(
        "--notify",
        metavar="EMAIL",
        default=None,
        help="Draft an alert email about the first event for this recipient",
    )
    parser.add_argument(
        "--log",
        action="store_true",
        default=False,
        help="Write a JSON run log per operation",
    )
    parser.add_argument(
        "--log-dir",
        type=str,
        default="logs",
        help="Directory for log files (default: logs/)",
    )

    logging.basicConfig(level=logging.INFO, format="%(message)s")

    ns = parser.parse_args()
    config_path: Path = ns.config if ns.config else get_default_config_path()

    try:
        args = CLIArgs(
            command=ns.command,
            keywords=ns.keywords,
            config=config_path,
            notify=ns.notify,
            log=ns.log,
            log_dir=ns.log_dir,
        )
    except Exception as e:
        logger.error(str(e))
        sys.exit(1)

    try:
        asyncio.run(run(args))
    except MarketSentinelError as e:
        logger.error(str(e))
        sys.exit(1)
    except KeyboardInterrupt:
        sys.exit(130)


if __name__ == "__main__":
    main()
