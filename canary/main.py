"""Command-line entry point for the URL canary."""

import argparse
import asyncio
import logging
import sys
from typing import Dict, List, Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from .config.loader import ConfigLoader
from .config.models import CanaryConfig, validate_target_urls
from .config.settings import Settings
from .errors import CanaryError
from .utils.logger import setup_logger
from .workflow import CanaryWorkflow


def parse_url_args(values: Optional[List[str]]) -> Optional[Dict[str, str]]:
    """
    Parse repeated ``NAME=URL`` arguments into an ordered mapping.

    Raises:
        ValueError: If an argument is not of the form NAME=URL
    """
    if not values:
        return None

    targets = {}
    for value in values:
        name, sep, url = value.partition("=")
        if not sep or not name or not url:
            raise ValueError(f"Expected NAME=URL, got '{value}'")
        targets[name] = url
    return validate_target_urls(targets)


class CanaryApp:
    """Runs the canary once or on a fixed interval."""

    def __init__(self, config: CanaryConfig, dry_run: bool = False, log_level: str = "INFO"):
        self.config = config
        self.dry_run = dry_run
        self.logger = setup_logger("canary", log_level)
        self.scheduler = None
        self.workflow = CanaryWorkflow(config, self.logger, dry_run=dry_run)

    async def run_cycle(self):
        """Execute one canary run and log its summary."""
        report = await self.workflow.run()

        self.logger.info(
            "Canary run completed",
            extra={
                "available": report.summary.available_count,
                "total": report.summary.total_count,
                "duration_s": round(report.duration_s, 3),
                "log_key": report.report.key,
                "log_persisted": report.report.result.ok,
                "metric_errors": len(report.run_result.metric_errors),
            }
        )
        return report

    def start_scheduler(self):
        """
        Run the canary every ``schedule.rate_minutes`` until interrupted.

        Overlapping runs are prevented with ``max_instances=1``.
        """
        rate = self.config.schedule.rate_minutes
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)

        self.scheduler = AsyncIOScheduler(event_loop=loop)
        self.scheduler.add_job(
            self.run_cycle,
            trigger=IntervalTrigger(minutes=rate),
            id='canary_run',
            name='URL Canary Run',
            max_instances=1,
            coalesce=True,
            misfire_grace_time=60
        )
        self.scheduler.start()
        self.logger.info(f"Scheduler started, running every {rate} minute(s)")

        # First run immediately on startup
        loop.run_until_complete(self.run_cycle())

        try:
            loop.run_forever()
        except KeyboardInterrupt:
            self.logger.info("Received keyboard interrupt")
        finally:
            if self.scheduler.running:
                self.scheduler.shutdown(wait=False)
            self.logger.info("Scheduler stopped")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Synthetic URL availability canary',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Run every two minutes with the default targets
  BUCKET_NAME=my-bucket python -m canary.main

  # Run once against custom targets without touching AWS
  python -m canary.main --run-once --dry-run --url Example=https://example.com/
        """
    )
    parser.add_argument('--config', help='Path to YAML configuration file')
    parser.add_argument(
        '--url',
        action='append',
        metavar='NAME=URL',
        help='Target to probe; repeat for several targets (overrides configured targets)'
    )
    parser.add_argument('--run-once', action='store_true', help='Run one canary pass and exit')
    parser.add_argument('--dry-run', action='store_true', help='Log metrics and the run record instead of sending them to AWS')
    parser.add_argument(
        '--log-level',
        default=Settings.log_level(),
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        help='Logging level (default: INFO or LOG_LEVEL env var)'
    )
    return parser


def load_config(args: argparse.Namespace) -> CanaryConfig:
    config = ConfigLoader.load_from_file(args.config) if args.config else ConfigLoader.from_env()
    targets = parse_url_args(args.url)
    if targets is not None:
        config = config.model_copy(update={"targets": targets})
    return config


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point."""
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args)
        app = CanaryApp(config, dry_run=args.dry_run, log_level=args.log_level)
    except (CanaryError, FileNotFoundError, ValueError) as e:
        logging.error(f"Application startup failed: {e}")
        return 1

    if args.run_once:
        asyncio.run(app.run_cycle())
        return 0

    app.start_scheduler()
    return 0


if __name__ == '__main__':
    sys.exit(main())
