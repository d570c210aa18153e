"""Single-URL reachability check."""

import asyncio
import logging
import time
from typing import Optional

import httpx

from .utils.metrics import ProbeOutcome
from .utils.status import ProbeStatus


def _elapsed_ms(start: float) -> int:
    return max(0, int(round((time.monotonic() - start) * 1000)))


class Prober:
    """
    Issues one GET against a URL and classifies the outcome.

    A 2xx response is ``available``; any other status code or any transport
    error (DNS, connect, TLS, timeout) is ``unavailable``. Latency is wall
    clock from issuing the request to knowing the outcome and is reported
    for failures too. ``probe`` never raises.
    """

    def __init__(
        self,
        timeout_ms: int = 5000,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize prober.

        Args:
            timeout_ms: Upper bound on a single probe, connect to status line
            transport: Optional httpx transport, used by tests to fake the network
            logger: Optional logger instance
        """
        self.timeout_ms = timeout_ms
        self.transport = transport
        self.logger = (logger or logging.getLogger(__name__)).getChild(self.__class__.__name__)

    async def probe(self, url: str) -> ProbeOutcome:
        """
        Check a single URL.

        The whole check, connect through status line, is bounded by
        ``timeout_ms``. The response body is never read.

        Args:
            url: Absolute URL to GET

        Returns:
            ProbeOutcome: Status and latency of the check
        """
        start = time.monotonic()

        try:
            status_code = await asyncio.wait_for(self._fetch_status(url), self.timeout_ms / 1000.0)
            latency_ms = _elapsed_ms(start)

            if 200 <= status_code < 300:
                return ProbeOutcome(
                    status=ProbeStatus.AVAILABLE,
                    latency_ms=latency_ms,
                    status_code=status_code
                )

            return ProbeOutcome(
                status=ProbeStatus.UNAVAILABLE,
                latency_ms=latency_ms,
                status_code=status_code,
                error=f"HTTP {status_code}"
            )

        except (httpx.TimeoutException, asyncio.TimeoutError):
            return ProbeOutcome(
                status=ProbeStatus.UNAVAILABLE,
                latency_ms=_elapsed_ms(start),
                error="Request timeout"
            )

        except httpx.RequestError as e:
            return ProbeOutcome(
                status=ProbeStatus.UNAVAILABLE,
                latency_ms=_elapsed_ms(start),
                error=f"{type(e).__name__}: {e}"
            )

        except Exception as e:
            # Malformed URLs and anything else the transport throws
            self.logger.debug(f"Unexpected probe error for {url}: {e}", exc_info=True)
            return ProbeOutcome(
                status=ProbeStatus.UNAVAILABLE,
                latency_ms=_elapsed_ms(start),
                error=f"Unexpected error: {e}"
            )

    async def _fetch_status(self, url: str) -> int:
        async with httpx.AsyncClient(
            transport=self.transport,
            timeout=self.timeout_ms / 1000.0,
            follow_redirects=False
        ) as client:
            async with client.stream("GET", url) as response:
                return response.status_code
