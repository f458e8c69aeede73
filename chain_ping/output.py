"""Output renderer: rich table formatter, JSON formatter, format dispatch."""

import dataclasses
import json
import logging
import sys
from io import StringIO

from rich.console import Console
from rich.table import Table
from rich.text import Text

from chain_ping.models import EndpointSummary, PingStatus

logger = logging.getLogger(__name__)

_STATUS_STYLES = {
    PingStatus.ALL_SUCCEEDED: "green",
    PingStatus.PARTIAL_SUCCESS: "yellow",
    PingStatus.ALL_FAILED: "red",
}


def sort_summaries(summaries: list[EndpointSummary]) -> list[EndpointSummary]:
    """Order summaries by ascending average latency, failures last.

    The sort is stable, so endpoints with equal latency (or none) keep
    their input order.
    """
    return sorted(
        summaries,
        key=lambda s: (s.avg_latency_ms is None, s.avg_latency_ms or 0),
    )


def render(
    summaries: list[EndpointSummary],
    fmt: str,
    *,
    file: object | None = None,
    width: int | None = None,
) -> None:
    """Dispatch output to the appropriate formatter.

    Args:
        summaries: Endpoint summaries to render.
        fmt: Output format — ``"table"`` or ``"json"``.
        file: Writable file object for output (default: ``sys.stdout``).
        width: Explicit console width (default: auto-detect).

    Raises:
        ValueError: If *fmt* is not ``"table"`` or ``"json"``.
    """
    if fmt == "table":
        render_table(summaries, file=file, width=width)
    elif fmt == "json":
        render_json(summaries, file=file)
    else:
        raise ValueError(f"Unknown output format: {fmt!r}")


# ---------------------------------------------------------------------------
# Table (rich) formatter
# ---------------------------------------------------------------------------


def render_table(
    summaries: list[EndpointSummary],
    *,
    file: object | None = None,
    width: int | None = None,
) -> None:
    """Render *summaries* as a ``rich`` table, fastest endpoint first.

    Args:
        summaries: Endpoint summaries to render.
        file: Writable file object (default: ``sys.stdout``).
        width: Explicit console width (default: auto-detect).
    """
    out = file or sys.stdout
    console = Console(file=out, highlight=False, width=width)

    table = Table(title=f"eth_blockNumber — {len(summaries)} endpoint(s)")
    table.add_column("Endpoint")
    table.add_column("Status")
    table.add_column("Avg (ms)", justify="right")
    table.add_column("Min/Max (ms)", justify="right")
    table.add_column("Success", justify="right")
    table.add_column("Block")
    table.add_column("Last error")

    # Endpoint and error strings are not rich markup.
    for s in sort_summaries(summaries):
        table.add_row(
            Text(s.endpoint),
            Text(s.status.label, style=_STATUS_STYLES.get(s.status, "")),
            _fmt(s.avg_latency_ms),
            _fmt_range(s.min_latency_ms, s.max_latency_ms),
            f"{s.success_count}/{s.ping_count}",
            Text(_fmt(s.last_value)),
            Text(_fmt(s.last_error_message)),
        )

    console.print(table)


# ---------------------------------------------------------------------------
# JSON formatter
# ---------------------------------------------------------------------------


def render_json(
    summaries: list[EndpointSummary], *, file: object | None = None
) -> None:
    """Render *summaries* as a pretty-printed JSON array to *file*.

    Each element carries every ``EndpointSummary`` field; ``status`` is
    written as its serialized value (e.g. ``"partial_success"``).

    Args:
        summaries: Endpoint summaries to render.
        file: Writable file object (default: ``sys.stdout``).
    """
    out = file or sys.stdout
    payload = [_summary_to_dict(s) for s in sort_summaries(summaries)]
    json.dump(payload, out, indent=2, default=str)
    out.write("\n")  # type: ignore[union-attr]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _summary_to_dict(summary: EndpointSummary) -> dict:
    """Convert an ``EndpointSummary`` to a plain dict."""
    data = dataclasses.asdict(summary)
    data["status"] = summary.status.value
    return data


def _fmt(value: object) -> str:
    """Format a field value for table display.

    ``None`` becomes ``"—"``, everything else is stringified.
    """
    if value is None:
        return "—"
    return str(value)


def _fmt_range(lo: int | None, hi: int | None) -> str:
    if lo is None or hi is None:
        return "—"
    return f"{lo}/{hi}"


def render_to_string(
    summaries: list[EndpointSummary], fmt: str, *, width: int = 200
) -> str:
    """Render to a string instead of stdout — useful for testing.

    Args:
        summaries: Endpoint summaries to render.
        fmt: Output format — ``"table"`` or ``"json"``.
        width: Console width for table rendering (default: 200).

    Returns:
        The rendered output as a string.
    """
    buf = StringIO()
    render(summaries, fmt, file=buf, width=width)
    return buf.getvalue()
