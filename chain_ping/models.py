"""Data models: PingStatus, probe failure variants, ProbeAttempt, EndpointSummary."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum


class PingStatus(str, Enum):
    """Overall outcome of the repeated attempts against one endpoint."""

    ALL_SUCCEEDED = "success"
    PARTIAL_SUCCESS = "partial_success"
    ALL_FAILED = "failure"

    @property
    def label(self) -> str:
        """Short upper-case label used in table output."""
        return _STATUS_LABELS[self]


_STATUS_LABELS = {
    PingStatus.ALL_SUCCEEDED: "SUCCESS",
    PingStatus.PARTIAL_SUCCESS: "PARTIAL",
    PingStatus.ALL_FAILED: "FAILURE",
}


# ---------------------------------------------------------------------------
# Probe failures
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ProbeFailure(ABC):
    """Base class for the classified cause of a failed probe attempt.

    The set of subclasses is closed: transport failures happen before an
    HTTP response is obtained, protocol failures after.
    """

    @property
    @abstractmethod
    def message(self) -> str:
        """Human-readable description used as the summary's last error."""


@dataclass(frozen=True)
class TransportTimeout(ProbeFailure):
    """The deadline expired before a response was received."""

    @property
    def message(self) -> str:
        return "Request timed out"


@dataclass(frozen=True)
class TransportConnection(ProbeFailure):
    """Any other transport failure (refused, DNS, TLS, reset...)."""

    detail: str = ""

    @property
    def message(self) -> str:
        if self.detail:
            return f"Connection failed: {self.detail}"
        return "Connection failed"


@dataclass(frozen=True)
class ProtocolHttpStatus(ProbeFailure):
    """The server answered with a non-2xx status code."""

    status_code: int

    @property
    def message(self) -> str:
        return f"HTTP status {self.status_code}"


@dataclass(frozen=True)
class ProtocolDecode(ProbeFailure):
    """The response body is not a JSON-RPC envelope."""

    detail: str = ""

    @property
    def message(self) -> str:
        if self.detail:
            return f"Invalid JSON-RPC response: {self.detail}"
        return "Invalid JSON-RPC response"


@dataclass(frozen=True)
class ProtocolRpcError(ProbeFailure):
    """The envelope carries a non-null ``error`` member."""

    code: int | None = None
    rpc_message: str = ""

    @property
    def message(self) -> str:
        if self.code is None:
            return f"JSON-RPC error: {self.rpc_message}"
        return f"JSON-RPC error {self.code}: {self.rpc_message}"


@dataclass(frozen=True)
class ProtocolMissingResult(ProbeFailure):
    """The envelope has neither a usable ``result`` nor an ``error``."""

    @property
    def message(self) -> str:
        return "Missing 'result' field in response"


# ---------------------------------------------------------------------------
# Attempts and summaries
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ProbeAttempt:
    """One request/response cycle against one endpoint.

    Exactly one of ``value`` and ``failure`` is set.

    Attributes:
        endpoint: URL that was probed.
        sequence: 1-based attempt number; also sent as the JSON-RPC id.
        elapsed_seconds: Time from dispatch to the response headers (or to failure
            detection for transport failures).
        value: Extracted ``result`` on success.
        failure: Classified cause on failure.
    """

    endpoint: str
    sequence: int
    elapsed_seconds: float
    value: str | None = None
    failure: ProbeFailure | None = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    @property
    def latency_ms(self) -> int:
        """Elapsed time truncated to whole milliseconds."""
        return int(self.elapsed_seconds * 1000)


@dataclass(frozen=True)
class EndpointSummary:
    """Reduced result of all probe attempts against one endpoint.

    Attributes:
        endpoint: URL that was probed.
        ping_count: Number of attempts requested.
        success_count: Number of attempts that produced a usable result.
        status: Three-way classification derived from the two counts.
        avg_latency_ms: Truncated mean over successful attempts, or None.
        min_latency_ms: Fastest successful attempt, or None.
        max_latency_ms: Slowest successful attempt, or None.
        last_value: Result of the most recent successful attempt.
        last_error_message: Description of the most recent failure.
    """

    endpoint: str
    ping_count: int
    success_count: int
    status: PingStatus
    avg_latency_ms: int | None = None
    min_latency_ms: int | None = None
    max_latency_ms: int | None = None
    last_value: str | None = None
    last_error_message: str | None = None

    @property
    def success_rate(self) -> float:
        if self.ping_count == 0:
            return 0.0
        return self.success_count / self.ping_count
