"""Wires the prober, coordinator and reporter into a complete canary run."""

import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from .config.models import CanaryConfig
from .coordinator import RunCoordinator
from .errors import ConfigurationError
from .prober import Prober
from .reporter import ReportOutcome, Reporter
from .services.log_store import DryRunLogStore, LogStore, S3LogStore
from .services.metrics_sink import CloudWatchMetricsSink, DryRunMetricsSink, MetricsSink
from .utils.logger import setup_logger
from .utils.metrics import RunResult, RunSummary

DRY_RUN_BUCKET = "dry-run"


@dataclass
class CanaryRunReport:
    """Everything one run produced."""

    run_result: RunResult
    summary: RunSummary
    report: ReportOutcome
    duration_s: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "available": self.summary.available_count,
            "total": self.summary.total_count,
            "results": [entry.to_dict() for entry in self.run_result],
            "metric_errors": [r.error for r in self.run_result.metric_errors],
            "log_key": self.report.key,
            "log_persisted": self.report.result.ok,
        }


class CanaryWorkflow:
    """
    Canary run orchestrator.

    Builds AWS-backed collaborators from configuration unless they are
    passed in, then executes runs on demand.
    """

    def __init__(
        self,
        config: CanaryConfig,
        logger: logging.Logger = None,
        dry_run: bool = False,
        prober: Optional[Prober] = None,
        metrics_sink: Optional[MetricsSink] = None,
        log_store: Optional[LogStore] = None
    ):
        """
        Initialize canary workflow.

        Args:
            config: Canary configuration
            logger: Optional logger instance
            dry_run: Log metrics and records instead of sending them to AWS
            prober: Optional prober override
            metrics_sink: Optional metrics sink override
            log_store: Optional log store override

        Raises:
            ConfigurationError: If no bucket is configured outside dry-run mode
        """
        self.config = config
        self.logger = logger or setup_logger("workflow")
        self.dry_run = dry_run

        bucket = config.storage.bucket
        if bucket is None:
            if not dry_run and log_store is None:
                raise ConfigurationError("No log bucket configured (set BUCKET_NAME)")
            bucket = DRY_RUN_BUCKET

        if metrics_sink is None:
            metrics_sink = (
                DryRunMetricsSink(self.logger) if dry_run
                else CloudWatchMetricsSink(config.metrics.region, logger=self.logger)
            )
        if log_store is None:
            log_store = (
                DryRunLogStore(self.logger) if dry_run
                else S3LogStore(config.storage.region, logger=self.logger)
            )

        self.prober = prober or Prober(timeout_ms=config.probe.timeout_ms, logger=self.logger)
        self.coordinator = RunCoordinator(
            self.prober,
            metrics_sink,
            namespace=config.metrics.namespace,
            max_concurrency=config.probe.max_concurrency,
            logger=self.logger
        )
        self.reporter = Reporter(
            log_store,
            bucket,
            prefix=config.storage.prefix,
            logger=self.logger
        )

    async def run(self, targets: Optional[Mapping[str, str]] = None) -> CanaryRunReport:
        """
        Execute one complete canary run.

        Args:
            targets: Mapping of name to URL; configured targets are used when None

        Returns:
            CanaryRunReport: Results, summary and log persistence outcome
        """
        start_time = time.time()
        if targets is None:
            targets = self.config.targets

        run_result = await self.coordinator.run_once(targets)
        report = await self.reporter.report(run_result)

        return CanaryRunReport(
            run_result=run_result,
            summary=run_result.summary,
            report=report,
            duration_s=time.time() - start_time
        )
