"""Drives one canary run over a set of named targets."""

import asyncio
import logging
from collections.abc import Mapping
from typing import Optional

from .errors import ErrorKind
from .prober import Prober
from .services.metrics_sink import MetricsSink
from .utils.metrics import (
    MetricSample,
    MetricUnit,
    OperationResult,
    RunResult,
    RunResultEntry,
    Target,
)

DEFAULT_NAMESPACE = "LambdaFunctionMetrics"
LATENCY_METRIC = "URLLatency"
AVAILABLE_COUNT_METRIC = "AvailableURLCount"


class RunCoordinator:
    """
    Probes every target, submits metrics and builds the run result.

    Each target's latency metric is submitted as soon as that target's probe
    completes; the aggregate ``AvailableURLCount`` is submitted once after all
    targets are done. With ``max_concurrency`` of 1 targets are processed
    strictly one after another.
    """

    def __init__(
        self,
        prober: Prober,
        metrics_sink: MetricsSink,
        namespace: str = DEFAULT_NAMESPACE,
        max_concurrency: int = 1,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize run coordinator.

        Args:
            prober: Prober used for every target
            metrics_sink: Destination for latency and availability samples
            namespace: Metrics namespace
            max_concurrency: Number of probes allowed in flight at once
            logger: Optional logger instance
        """
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")

        self.prober = prober
        self.metrics_sink = metrics_sink
        self.namespace = namespace
        self.max_concurrency = max_concurrency
        self.logger = (logger or logging.getLogger(__name__)).getChild(self.__class__.__name__)

    async def run_once(self, targets: Mapping) -> RunResult:
        """
        Execute one run.

        Args:
            targets: Mapping of target name to URL, processed in insertion order

        Returns:
            RunResult: One entry per target, in input order

        Raises:
            TypeError: If targets is not a mapping
        """
        if not isinstance(targets, Mapping):
            raise TypeError(f"targets must be a mapping of name to URL, got {type(targets).__name__}")

        target_list = [Target(name=name, url=url) for name, url in targets.items()]
        self.logger.info(f"Starting canary run over {len(target_list)} target(s)")

        run_result = RunResult()

        if self.max_concurrency == 1:
            for target in target_list:
                entry, metric_result = await self._process_target(target)
                self._record(run_result, entry, metric_result)
        else:
            semaphore = asyncio.Semaphore(self.max_concurrency)

            async def bounded(target: Target):
                async with semaphore:
                    return await self._process_target(target)

            # gather preserves input order
            processed = await asyncio.gather(*(bounded(target) for target in target_list))
            for entry, metric_result in processed:
                self._record(run_result, entry, metric_result)

        summary = run_result.summary
        self.logger.info(
            f"Available targets: {summary.available_count}/{summary.total_count}"
        )

        count_result = await self._submit(MetricSample(
            namespace=self.namespace,
            name=AVAILABLE_COUNT_METRIC,
            value=summary.available_count,
            unit=MetricUnit.COUNT
        ))
        if not count_result.ok:
            run_result.metric_errors.append(count_result)

        return run_result

    async def _process_target(self, target: Target):
        outcome = await self.prober.probe(target.url)
        self.logger.debug(
            f"Probed {target.name}: {outcome.status.value} in {outcome.latency_ms}ms",
            extra={"url": target.url, "status_code": outcome.status_code, "error": outcome.error}
        )

        entry = RunResultEntry(
            name=target.name,
            url=target.url,
            status=outcome.status,
            latency_ms=outcome.latency_ms
        )

        metric_result = await self._submit(MetricSample(
            namespace=self.namespace,
            name=LATENCY_METRIC,
            value=outcome.latency_ms,
            unit=MetricUnit.MILLISECONDS,
            dimensions={"URL": target.name}
        ))
        return entry, metric_result

    @staticmethod
    def _record(run_result: RunResult, entry: RunResultEntry, metric_result: OperationResult) -> None:
        run_result.append(entry)
        if not metric_result.ok:
            run_result.metric_errors.append(metric_result)

    async def _submit(self, sample: MetricSample) -> OperationResult:
        try:
            result = await self.metrics_sink.submit(sample)
        except Exception as e:
            # Sinks report failures by value; a raising sink is treated the same way
            result = OperationResult.failure(ErrorKind.METRIC_SUBMISSION, f"Unexpected error: {e}")

        if not result.ok:
            self.logger.warning(
                f"Error pushing metric {sample.name}: {result.error}",
                extra={"dimensions": sample.dimensions}
            )
        return result

