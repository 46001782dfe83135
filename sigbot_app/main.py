"""
Command-line entry point.

    sigbot                 run the Telegram bot with the cycle scheduler
    sigbot --once          run a single cycle and exit
    sigbot --once --dry-run
                           single cycle, messages printed instead of sent
"""

import argparse
import asyncio
import os
import sys
from pathlib import Path
from typing import Optional, Sequence

import structlog
from telegram import Bot

from .bot.handlers import COMMANDS_KEY, SCHEDULER_KEY, build_application
from .commands import CommandService
from .config.defaults import DefaultConfig
from .config.loader import ConfigLoader
from .delivery import StdoutDelivery, TelegramDelivery
from .delivery.base import BaseDeliveryTransport
from .dispatch import ConfidenceFilter
from .errors import ConfigurationError
from .logging.config import configure_logging
from .orchestrator import SignalOrchestrator
from .persistence import Database, SqliteDedupStore, SqliteSubscriberStore
from .scheduler import CycleScheduler
from .sources import HttpSignalSource

logger = structlog.get_logger(__name__)


def build_sources(config: DefaultConfig) -> list[HttpSignalSource]:
    return [HttpSignalSource(params) for params in config.sources]


def build_orchestrator(config: DefaultConfig, transport: BaseDeliveryTransport) -> SignalOrchestrator:
    database = Database(config.storage.db_path)
    return SignalOrchestrator.from_config(
        config,
        sources=build_sources(config),
        subscribers=SqliteSubscriberStore(database),
        dedup_store=SqliteDedupStore(database),
        transport=transport,
    )


async def run_once(config: DefaultConfig, token: Optional[str], dry_run: bool) -> None:
    """Run a single cycle against the configured stores."""
    if dry_run:
        report = await build_orchestrator(config, StdoutDelivery()).run_cycle()
    else:
        async with Bot(token) as bot:
            report = await build_orchestrator(config, TelegramDelivery(bot)).run_cycle()
    logger.info(
        "Single cycle done",
        status=report.status.value,
        evaluated=report.evaluated,
        dispatched=report.dispatched
    )


def run_bot(config: DefaultConfig, token: str) -> None:
    """Run polling plus the interval scheduler until interrupted."""
    app = build_application(token)
    orchestrator = build_orchestrator(config, TelegramDelivery(app.bot))

    app.bot_data[COMMANDS_KEY] = CommandService(
        subscribers=orchestrator.subscribers,
        sources=orchestrator.sources,
        symbols=config.symbols,
        confidence_filter=ConfidenceFilter(config.filter.min_confidence),
        params=config.manual,
    )
    app.bot_data[SCHEDULER_KEY] = CycleScheduler(
        orchestrator.run_cycle,
        interval_seconds=config.schedule.interval_seconds,
        start_delay_seconds=config.schedule.start_delay_seconds,
    )

    logger.info(
        "Bot running",
        interval_seconds=config.schedule.interval_seconds,
        window=orchestrator.window.describe(),
        symbols=len(config.symbols),
        sources=[s.name for s in orchestrator.sources]
    )
    app.run_polling()


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="sigbot", description="Signal dispatch bot")
    parser.add_argument("--config-dir", type=Path, default=None, help="directory holding settings.yaml")
    parser.add_argument("--once", action="store_true", help="run a single cycle and exit")
    parser.add_argument("--dry-run", action="store_true", help="print messages instead of sending them")
    args = parser.parse_args(argv)
    if args.dry_run and not args.once:
        parser.error("--dry-run requires --once")

    try:
        config = ConfigLoader.create(args.config_dir).load()
    except ConfigurationError as e:
        print(f"❌ {e}", file=sys.stderr)
        return 2

    configure_logging(level=config.logging.level, format_json=config.logging.format_json)

    token = os.environ.get("TELEGRAM_BOT_TOKEN")
    if not token and not (args.once and args.dry_run):
        logger.error("TELEGRAM_BOT_TOKEN is not set")
        return 2

    if args.once:
        asyncio.run(run_once(config, token, args.dry_run))
    else:
        run_bot(config, token)
    return 0


if __name__ == "__main__":
    sys.exit(main())
