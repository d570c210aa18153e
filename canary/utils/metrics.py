"""Data structures shared by the prober, coordinator and reporter."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, Optional

from ..errors import ErrorKind
from .status import ProbeStatus


@dataclass(frozen=True)
class Target:
    """One named URL under observation."""

    name: str
    url: str


@dataclass(frozen=True)
class ProbeOutcome:
    """Result of a single reachability check."""

    status: ProbeStatus
    latency_ms: int
    status_code: Optional[int] = None
    error: Optional[str] = None


@dataclass(frozen=True)
class RunResultEntry:
    """Per-target record kept in a run result."""

    name: str
    url: str
    status: ProbeStatus
    latency_ms: int

    def to_dict(self) -> Dict[str, object]:
        return {
            "name": self.name,
            "url": self.url,
            "status": self.status.value,
            "latency_ms": self.latency_ms,
        }


@dataclass(frozen=True)
class RunSummary:
    """Aggregate availability of a run."""

    available_count: int
    total_count: int


class MetricUnit(Enum):
    """Units understood by the metrics sink."""

    MILLISECONDS = "Milliseconds"
    COUNT = "Count"


@dataclass
class MetricSample:
    """Single time-series data point handed to a metrics sink."""

    namespace: str
    name: str
    value: float
    unit: MetricUnit
    dimensions: Dict[str, str] = field(default_factory=dict)
    timestamp: Optional[datetime] = None

    def __post_init__(self):
        """Set timestamp if not provided."""
        if self.timestamp is None:
            self.timestamp = datetime.now(timezone.utc)


@dataclass(frozen=True)
class OperationResult:
    """Outcome of a call to an external collaborator."""

    ok: bool
    error_kind: Optional[ErrorKind] = None
    error: Optional[str] = None

    @classmethod
    def success(cls) -> "OperationResult":
        return cls(ok=True)

    @classmethod
    def failure(cls, kind: ErrorKind, error: str) -> "OperationResult":
        return cls(ok=False, error_kind=kind, error=error)


@dataclass
class RunResult:
    """
    Ordered per-target results of one canary run.

    Entries keep the iteration order of the target mapping. Failed metric
    submissions are collected in ``metric_errors`` so callers can observe
    them without the run being aborted.
    """

    entries: List[RunResultEntry] = field(default_factory=list)
    metric_errors: List[OperationResult] = field(default_factory=list)

    def append(self, entry: RunResultEntry) -> None:
        self.entries.append(entry)

    @property
    def summary(self) -> RunSummary:
        available = sum(1 for entry in self.entries if entry.status.is_available)
        return RunSummary(available_count=available, total_count=len(self.entries))

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self):
        return iter(self.entries)
