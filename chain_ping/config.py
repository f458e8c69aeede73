"""YAML configuration file loading."""

import logging
import math
from dataclasses import dataclass, field, fields
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path.home() / ".chain-ping" / "config.yaml"

OUTPUT_FORMATS = ("table", "json")


@dataclass
class ChainPingConfig:
    """Top-level configuration for the chain-ping tool.

    Every field has a default, so the tool works without a config file as
    long as endpoints are passed on the command line.

    Attributes:
        endpoints: JSON-RPC endpoint URLs probed when none are given on
            the command line.
        pings: Number of attempts per endpoint.
        timeout_secs: Deadline for each attempt, in seconds.
        output_format: ``"table"`` or ``"json"``.
    """

    endpoints: list[str] = field(default_factory=list)
    pings: int = 1
    timeout_secs: float = 10.0
    output_format: str = "table"


# YAML keys are the ChainPingConfig field names.
_CONFIG_KEYS = frozenset(f.name for f in fields(ChainPingConfig))


def load_config(path: Path | str | None = None) -> ChainPingConfig:
    """Load configuration from a YAML file.

    Args:
        path: Explicit path to a YAML config file.  If ``None``, the
            default location (``~/.chain-ping/config.yaml``) is tried.  If
            the default file doesn't exist, a ``ChainPingConfig`` with all
            defaults is returned silently.

    Returns:
        A populated ``ChainPingConfig`` instance.

    Raises:
        FileNotFoundError: If an explicit *path* was given but doesn't exist.
        ConfigError: If the file contains invalid YAML, has an unexpected
            top-level structure, or holds invalid values.
    """
    resolved = _resolve_path(path)

    if resolved is None:
        logger.debug("No config file found; using defaults")
        return ChainPingConfig()

    logger.debug("Loading config from %s", resolved)
    text = resolved.read_text(encoding="utf-8")

    try:
        raw = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {resolved}: {exc}") from exc

    if raw is None:
        # Empty file
        return ChainPingConfig()

    if not isinstance(raw, dict):
        raise ConfigError(
            f"Expected a YAML mapping at the top level in {resolved}, "
            f"got {type(raw).__name__}"
        )

    return _build_config(raw, source=resolved)


class ConfigError(Exception):
    """Raised when a configuration file is malformed or unreadable."""


# ------------------------------------------------------------------
# Internal helpers
# ------------------------------------------------------------------


def _resolve_path(path: Path | str | None) -> Path | None:
    """Return a concrete ``Path`` to read, or ``None`` if nothing to read.

    Raises:
        FileNotFoundError: If the caller supplied an explicit path that
            doesn't exist on disk.
    """
    if path is not None:
        p = Path(path).expanduser()
        if not p.is_file():
            raise FileNotFoundError(f"Config file not found: {p}")
        return p

    default = DEFAULT_CONFIG_PATH.expanduser()
    if default.is_file():
        return default
    return None


def _build_config(raw: dict, source: Path) -> ChainPingConfig:
    """Map raw YAML dict to a ``ChainPingConfig``, ignoring unknown keys."""
    kwargs: dict[str, object] = {
        k: v for k, v in raw.items() if k in _CONFIG_KEYS and v is not None
    }

    unknown = set(raw) - _CONFIG_KEYS
    if unknown:
        logger.warning(
            "Ignoring unknown config keys in %s: %s",
            source,
            ", ".join(sorted(unknown)),
        )

    _validate(kwargs, source)
    return ChainPingConfig(**kwargs)  # type: ignore[arg-type]


def _validate(kwargs: dict[str, object], source: Path) -> None:
    """Check value types and ranges; normalizes ``endpoints`` and the format."""
    endpoints = kwargs.get("endpoints")
    if endpoints is not None:
        if isinstance(endpoints, str):
            endpoints = [endpoints]
        if not isinstance(endpoints, list) or not all(
            isinstance(e, str) for e in endpoints
        ):
            raise ConfigError(f"'endpoints' must be a list of URLs in {source}")
        kwargs["endpoints"] = endpoints

    pings = kwargs.get("pings")
    if pings is not None:
        if isinstance(pings, bool) or not isinstance(pings, int) or pings < 0:
            raise ConfigError(
                f"'pings' must be a non-negative integer in {source}, got {pings!r}"
            )

    timeout = kwargs.get("timeout_secs")
    if timeout is not None:
        if (
            isinstance(timeout, bool)
            or not isinstance(timeout, (int, float))
            or not math.isfinite(timeout)
            or timeout <= 0
        ):
            raise ConfigError(
                f"'timeout_secs' must be a positive number in {source}, "
                f"got {timeout!r}"
            )
        kwargs["timeout_secs"] = float(timeout)

    fmt = kwargs.get("output_format")
    if fmt is not None:
        if not isinstance(fmt, str) or fmt.lower() not in OUTPUT_FORMATS:
            raise ConfigError(
                f"'output_format' must be one of {', '.join(OUTPUT_FORMATS)} "
                f"in {source}, got {fmt!r}"
            )
        kwargs["output_format"] = fmt.lower()
