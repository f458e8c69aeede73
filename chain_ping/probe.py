"""Single JSON-RPC probe: one timed ``eth_blockNumber`` round trip."""

import asyncio
import json
import logging
import time

import httpx

from chain_ping.models import (
    ProbeAttempt,
    ProbeFailure,
    ProtocolDecode,
    ProtocolHttpStatus,
    ProtocolMissingResult,
    ProtocolRpcError,
    TransportConnection,
    TransportTimeout,
)

logger = logging.getLogger(__name__)

RPC_METHOD = "eth_blockNumber"


def build_payload(request_id: int) -> dict:
    """Return the JSON-RPC 2.0 request body for ``eth_blockNumber``."""
    return {
        "jsonrpc": "2.0",
        "method": RPC_METHOD,
        "params": [],
        "id": request_id,
    }


async def ping_once(
    client: httpx.AsyncClient,
    url: str,
    *,
    sequence: int = 1,
    deadline: float | None = None,
) -> ProbeAttempt:
    """Send one ``eth_blockNumber`` request and classify the outcome.

    Classified failures are returned, never raised.

    Args:
        client: HTTP client used for the request.
        url: JSON-RPC endpoint.
        sequence: Attempt number, also used as the JSON-RPC id.
        deadline: Overall time budget in seconds for this attempt, on top
            of the client's own per-operation timeouts.  ``None`` relies on
            the client alone.

    Returns:
        A ``ProbeAttempt`` carrying either the extracted value or the
        classified failure.  Latency is measured up to the response
        headers; the body is read afterwards, within what is left of
        *deadline*.
    """
    payload = build_payload(sequence)
    request = client.build_request("POST", url, json=payload)

    start = time.perf_counter()
    try:
        async with asyncio.timeout(deadline):
            response = await client.send(request, stream=True)
    except TimeoutError:
        return _failed(url, sequence, start, TransportTimeout())
    except httpx.RequestError as exc:
        return _failed(url, sequence, start, classify_request_error(exc))
    elapsed = time.perf_counter() - start

    try:
        if not response.is_success:
            # Status alone decides; the body is never read.
            failure = ProtocolHttpStatus(status_code=response.status_code)
            logger.debug("%s attempt %d failed: %s", url, sequence, failure.message)
            return ProbeAttempt(url, sequence, elapsed, failure=failure)

        budget = None if deadline is None else max(deadline - elapsed, 0.0)
        outcome = await _read_envelope(response, budget)
    finally:
        await response.aclose()

    if isinstance(outcome, ProbeFailure):
        logger.debug("%s attempt %d failed: %s", url, sequence, outcome.message)
        return ProbeAttempt(url, sequence, elapsed, failure=outcome)
    return ProbeAttempt(url, sequence, elapsed, value=outcome)


def classify_request_error(exc: httpx.RequestError) -> ProbeFailure:
    """Map an httpx request exception onto its failure variant.

    Timeouts and undecodable bodies get their own variants; every other
    request error counts as a connection failure.
    """
    if isinstance(exc, httpx.TimeoutException):
        return TransportTimeout()
    if isinstance(exc, httpx.DecodingError):
        return ProtocolDecode(str(exc))
    detail = str(exc) or type(exc).__name__
    return TransportConnection(detail=detail)


def parse_envelope(body: object) -> str | ProbeFailure:
    """Extract the ``result`` of a decoded JSON-RPC response body.

    A non-null ``error`` member wins over ``result``.  A string result is
    returned as-is; any other JSON value is re-encoded compactly.

    Args:
        body: Decoded JSON document.

    Returns:
        The result string, or the ``ProbeFailure`` describing why there is
        none.
    """
    if not isinstance(body, dict):
        return ProtocolDecode(f"expected a JSON object, got {type(body).__name__}")

    error = body.get("error")
    if error is not None:
        return _rpc_error(error)

    result = body.get("result")
    if result is None:
        return ProtocolMissingResult()
    if isinstance(result, str):
        return result
    return json.dumps(result, separators=(",", ":"))


# ------------------------------------------------------------------
# Internal helpers
# ------------------------------------------------------------------


def _failed(
    url: str, sequence: int, start: float, failure: ProbeFailure
) -> ProbeAttempt:
    elapsed = time.perf_counter() - start
    logger.debug("%s attempt %d failed: %s", url, sequence, failure.message)
    return ProbeAttempt(url, sequence, elapsed, failure=failure)


def _rpc_error(error: object) -> ProtocolRpcError:
    """Build a ``ProtocolRpcError`` from the envelope's ``error`` member."""
    if isinstance(error, dict):
        code = error.get("code")
        message = error.get("message")
        return ProtocolRpcError(
            code=code if isinstance(code, int) else None,
            rpc_message=str(message) if message is not None else json.dumps(error),
        )
    return ProtocolRpcError(rpc_message=str(error))


async def _read_envelope(
    response: httpx.Response, budget: float | None
) -> str | ProbeFailure:
    """Read and decode a 2xx response body into a result or a failure."""
    try:
        async with asyncio.timeout(budget):
            await response.aread()
    except TimeoutError:
        return TransportTimeout()
    except httpx.RequestError as exc:
        return classify_request_error(exc)

    try:
        body = response.json()
    except ValueError as exc:
        return ProtocolDecode(str(exc))
    return parse_envelope(body)
