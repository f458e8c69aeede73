"""Aggregator: repeated probes against one endpoint, reduced to a summary."""

import logging
import math
from collections.abc import Iterable

import httpx

from chain_ping.models import (
    EndpointSummary,
    PingStatus,
    ProbeAttempt,
    ProbeFailure,
)
from chain_ping.probe import ping_once

logger = logging.getLogger(__name__)

_SUPPORTED_SCHEMES = ("http", "https")


class ClientSetupError(Exception):
    """Raised when no HTTP client can be built for an endpoint."""


def calculate_stats(
    latencies: list[int],
) -> tuple[int | None, int | None, int | None]:
    """Return ``(avg, min, max)`` over *latencies*.

    The average is the arithmetic mean truncated toward zero.  All three
    values are ``None`` for an empty list.
    """
    if not latencies:
        return None, None, None
    avg = sum(latencies) // len(latencies)
    return avg, min(latencies), max(latencies)


def derive_status(success_count: int, ping_count: int) -> PingStatus:
    """Classify an endpoint from its success and attempt counts.

    Zero attempts count as a failure.
    """
    if ping_count > 0 and success_count == ping_count:
        return PingStatus.ALL_SUCCEEDED
    if success_count > 0:
        return PingStatus.PARTIAL_SUCCESS
    return PingStatus.ALL_FAILED


def describe_failure(failure: ProbeFailure) -> str:
    """Turn a classified failure into the summary's error message."""
    # Each variant owns its wording: "Request timed out", "Connection failed: ...",
    # "HTTP status <code>", or the protocol error's own text.
    return failure.message


def summarize(
    endpoint: str, ping_count: int, attempts: Iterable[ProbeAttempt]
) -> EndpointSummary:
    """Reduce probe attempts into an ``EndpointSummary``.

    Attempts are folded in ``sequence`` order, so "last value" and "last
    error" refer to the highest-numbered attempt of each kind regardless of
    completion order.

    Args:
        endpoint: URL that was probed.
        ping_count: Number of attempts that were requested.
        attempts: The attempts that were made.

    Returns:
        The reduced, immutable summary.
    """
    latencies: list[int] = []
    last_value: str | None = None
    last_error: str | None = None

    for attempt in sorted(attempts, key=lambda a: a.sequence):
        if attempt.ok:
            latencies.append(attempt.latency_ms)
            last_value = attempt.value
        else:
            last_error = describe_failure(attempt.failure)  # type: ignore[arg-type]

    success_count = len(latencies)
    avg, lo, hi = calculate_stats(latencies)

    return EndpointSummary(
        endpoint=endpoint,
        ping_count=ping_count,
        success_count=success_count,
        status=derive_status(success_count, ping_count),
        avg_latency_ms=avg,
        min_latency_ms=lo,
        max_latency_ms=hi,
        last_value=last_value,
        last_error_message=last_error,
    )


async def ping_endpoint_multiple(
    url: str,
    count: int,
    timeout_secs: float,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> EndpointSummary:
    """Probe *url* ``count`` times in sequence and summarize the results.

    Each attempt waits for the previous one to finish.  A timeout on one
    attempt does not stop the remaining ones.

    Args:
        url: JSON-RPC endpoint.
        count: Number of attempts.
        timeout_secs: Deadline for each attempt, in seconds.
        transport: Optional httpx transport (used by tests).

    Returns:
        The endpoint's summary.  If the client cannot be set up, an
        all-failed summary explaining why, without any probe attempt.
    """
    try:
        client = build_client(url, count, timeout_secs, transport=transport)
    except ClientSetupError as exc:
        logger.warning("Skipping %s: %s", url, exc)
        return EndpointSummary(
            endpoint=url,
            ping_count=count,
            success_count=0,
            status=PingStatus.ALL_FAILED,
            last_error_message=f"Failed to build HTTP client: {exc}",
        )

    attempts: list[ProbeAttempt] = []
    async with client:
        for sequence in range(1, count + 1):
            attempt = await ping_once(
                client, url, sequence=sequence, deadline=timeout_secs
            )
            attempts.append(attempt)

    summary = summarize(url, count, attempts)
    logger.debug(
        "%s: %d/%d succeeded (%s)",
        url,
        summary.success_count,
        summary.ping_count,
        summary.status.value,
    )
    return summary


def build_client(
    url: str,
    count: int,
    timeout_secs: float,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Validate the probing parameters and build the endpoint's client.

    Raises:
        ClientSetupError: If the count, timeout or URL cannot be used.
    """
    if count < 0:
        raise ClientSetupError(f"ping count must be >= 0, got {count}")
    if not (isinstance(timeout_secs, (int, float)) and math.isfinite(timeout_secs)):
        raise ClientSetupError(f"invalid timeout: {timeout_secs!r}")
    if timeout_secs <= 0:
        raise ClientSetupError(f"timeout must be positive, got {timeout_secs}")

    try:
        parsed = httpx.URL(url)
    except httpx.InvalidURL as exc:
        raise ClientSetupError(f"invalid URL {url!r}: {exc}") from exc
    if parsed.scheme not in _SUPPORTED_SCHEMES:
        raise ClientSetupError(f"unsupported URL scheme in {url!r}")
    if not parsed.host:
        raise ClientSetupError(f"missing host in {url!r}")

    return httpx.AsyncClient(
        timeout=httpx.Timeout(timeout_secs),
        transport=transport,
    )
