"""Renders run results into a log record and persists it."""

import logging
import time
import uuid
from dataclasses import dataclass
from typing import Callable, Optional

from .errors import ErrorKind
from .services.log_store import LogStore
from .utils.metrics import OperationResult, RunResult, RunResultEntry


@dataclass(frozen=True)
class ReportOutcome:
    """Where the record was written and whether it succeeded."""

    key: str
    result: OperationResult


def format_entry(entry: RunResultEntry) -> str:
    return (
        f"Name: {entry.name}, URL: {entry.url}, "
        f"Status: {entry.status.value}, Latency: {entry.latency_ms}ms"
    )


class Reporter:
    """
    Writes one text record per run.

    Keys are the millisecond epoch time plus a short random suffix, so runs
    that persist within the same millisecond never overwrite each other.
    """

    def __init__(
        self,
        store: LogStore,
        bucket: str,
        prefix: str = "logs/",
        clock: Callable[[], float] = time.time,
        suffix: Callable[[], str] = lambda: uuid.uuid4().hex[:8],
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize reporter.

        Args:
            store: Durable store for the record
            bucket: Bucket the record is written to
            prefix: Key prefix for records
            clock: Returns seconds since the epoch, used for record keys
            suffix: Returns the unique part appended to the timestamp
            logger: Optional logger instance
        """
        self.store = store
        self.bucket = bucket
        self.prefix = prefix
        self.clock = clock
        self.suffix = suffix
        self.logger = (logger or logging.getLogger(__name__)).getChild(self.__class__.__name__)

    @staticmethod
    def render(run_result: RunResult) -> str:
        """One line per entry, in run order, newline separated."""
        return "\n".join(format_entry(entry) for entry in run_result)

    def key_for(self, timestamp_ms: int) -> str:
        return f"{self.prefix}{timestamp_ms}-{self.suffix()}.txt"

    async def report(self, run_result: RunResult) -> ReportOutcome:
        """
        Persist the rendered run result.

        Failures are logged and returned, never raised.

        Args:
            run_result: Completed run result

        Returns:
            ReportOutcome: Record key and persistence result
        """
        body = self.render(run_result).encode('utf-8')
        key = self.key_for(int(self.clock() * 1000))

        try:
            result = await self.store.put(self.bucket, key, body)
        except Exception as e:
            result = OperationResult.failure(ErrorKind.LOG_PERSIST, f"Unexpected error: {e}")

        if result.ok:
            self.logger.info("Log file saved successfully", extra={"bucket": self.bucket, "key": key})
        else:
            self.logger.warning(
                f"Error saving log file: {result.error}",
                extra={"bucket": self.bucket, "key": key}
            )

        return ReportOutcome(key=key, result=result)
