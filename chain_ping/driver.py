"""Multi-endpoint driver: one aggregator per endpoint, run concurrently."""

import asyncio
import logging
from collections.abc import Sequence

import httpx

from chain_ping.aggregator import ping_endpoint_multiple
from chain_ping.models import EndpointSummary

logger = logging.getLogger(__name__)


class UsageError(ValueError):
    """Raised when the driver is invoked without any endpoint."""


async def ping_endpoints(
    endpoints: Sequence[str],
    count: int,
    timeout_secs: float,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> list[EndpointSummary]:
    """Probe every endpoint concurrently and collect their summaries.

    Args:
        endpoints: JSON-RPC endpoint URLs.
        count: Attempts per endpoint.
        timeout_secs: Deadline for each attempt, in seconds.
        transport: Optional httpx transport shared by all clients.

    Returns:
        One summary per endpoint, in input order.

    Raises:
        UsageError: If *endpoints* is empty.
    """
    if not endpoints:
        raise UsageError("At least one endpoint is required")

    logger.info(
        "Pinging %d endpoint(s) %d time(s) each...", len(endpoints), count
    )
    return list(
        await asyncio.gather(
            *(
                ping_endpoint_multiple(url, count, timeout_secs, transport=transport)
                for url in endpoints
            )
        )
    )


def run(
    endpoints: Sequence[str],
    count: int,
    timeout_secs: float,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> list[EndpointSummary]:
    """Synchronous wrapper around ``ping_endpoints``.

    The empty-list check happens before an event loop is started.
    """
    if not endpoints:
        raise UsageError("At least one endpoint is required")
    return asyncio.run(
        ping_endpoints(endpoints, count, timeout_secs, transport=transport)
    )
