"""In-memory fakes for the canary's collaborators."""

import asyncio
from contextlib import asynccontextmanager
from typing import Dict, List, Optional, Union

import httpx

from canary.errors import ErrorKind
from canary.services.log_store import LogStore
from canary.services.metrics_sink import MetricsSink
from canary.utils.metrics import MetricSample, OperationResult, ProbeOutcome
from canary.utils.status import ProbeStatus


def make_transport(routes: Dict[str, Union[int, Exception]]) -> httpx.MockTransport:
    """
    Fake network keyed by URL.

    Values are either a status code to answer with or an exception to raise.
    Unknown URLs answer 404.
    """
    def handler(request: httpx.Request) -> httpx.Response:
        outcome = routes.get(str(request.url), 404)
        if isinstance(outcome, Exception):
            raise outcome
        return httpx.Response(outcome, text="ok")

    return httpx.MockTransport(handler)


class FakeProber:
    """Returns canned outcomes and records the order of probes."""

    def __init__(self, outcomes: Dict[str, ProbeOutcome], events: Optional[List[str]] = None):
        self.outcomes = outcomes
        self.events = events if events is not None else []

    async def probe(self, url: str) -> ProbeOutcome:
        self.events.append(f"probe:{url}")
        return self.outcomes[url]


class RecordingMetricsSink(MetricsSink):
    """Keeps submitted samples in memory; optionally fails every submission."""

    def __init__(self, fail: bool = False, events: Optional[List[str]] = None):
        super().__init__()
        self.fail = fail
        self.samples: List[MetricSample] = []
        self.events = events if events is not None else []

    async def submit(self, sample: MetricSample) -> OperationResult:
        self.events.append(f"metric:{sample.name}:{sample.dimensions.get('URL', '')}")
        if self.fail:
            return OperationResult.failure(ErrorKind.METRIC_SUBMISSION, "sink unavailable")
        self.samples.append(sample)
        return OperationResult.success()

    def named(self, name: str) -> List[MetricSample]:
        return [s for s in self.samples if s.name == name]


class RecordingLogStore(LogStore):
    """Keeps written objects in memory; optionally fails every write."""

    def __init__(self, fail: bool = False):
        super().__init__()
        self.fail = fail
        self.objects: Dict[str, bytes] = {}
        self.buckets: List[str] = []

    async def put(self, bucket: str, key: str, body: bytes) -> OperationResult:
        if self.fail:
            return OperationResult.failure(ErrorKind.LOG_PERSIST, "AccessDenied")
        self.buckets.append(bucket)
        self.objects[key] = body
        return OperationResult.success()


def available(latency_ms: int = 12) -> ProbeOutcome:
    return ProbeOutcome(status=ProbeStatus.AVAILABLE, latency_ms=latency_ms, status_code=200)


def unavailable(latency_ms: int = 30, status_code: Optional[int] = 503) -> ProbeOutcome:
    return ProbeOutcome(
        status=ProbeStatus.UNAVAILABLE,
        latency_ms=latency_ms,
        status_code=status_code,
        error=f"HTTP {status_code}" if status_code else "ConnectError"
    )




@asynccontextmanager
async def dripping_server(head: bytes, drip: bytes, interval: float = 0.1):
    """
    Local HTTP server that answers with ``head`` and then sends ``drip``
    every ``interval`` seconds until the context exits.

    Yields the server's base URL.
    """
    stop = asyncio.Event()

    async def handle(reader, writer):
        try:
            await reader.readuntil(b"\r\n\r\n")
            writer.write(head)
            await writer.drain()
            while not stop.is_set():
                writer.write(drip)
                await writer.drain()
                await asyncio.sleep(interval)
        except (ConnectionError, asyncio.IncompleteReadError):
            pass
        finally:
            writer.close()

    server = await asyncio.start_server(handle, "127.0.0.1", 0)
    port = server.sockets[0].getsockname()[1]
    try:
        yield f"http://127.0.0.1:{port}/"
    finally:
        stop.set()
        server.close()
        await server.wait_closed()
