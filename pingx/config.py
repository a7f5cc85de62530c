"""Validation of user-supplied run settings."""

from pingx.models import RunConfig

DEFAULT_INTERVAL_MS = 1000
DEFAULT_TIMEOUT_SECONDS = 4
MIN_INTERVAL_MS = 100


class ConfigError(ValueError):
    """Raised when user-supplied settings are invalid."""


def _to_int(value) -> int | None:
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return None


def build_run_config(
    target: str,
    count=None,
    interval=DEFAULT_INTERVAL_MS,
    timeout=DEFAULT_TIMEOUT_SECONDS,
    speed_test: bool = False,
) -> RunConfig:
    """Validate raw settings and build a RunConfig.

    Args:
        target: Hostname or IP address to ping
        count: Number of probes, or None to run until interrupted
        interval: Milliseconds between probes (at least 100)
        timeout: Per-probe timeout in seconds; None selects the default
        speed_test: Run the throughput test after bounded runs

    Raises:
        ConfigError: With a user-facing message if any value is invalid
    """
    if not target or not target.strip():
        raise ConfigError("Target must not be empty")

    parsed_count = None
    if count is not None:
        parsed_count = _to_int(count)
        if parsed_count is None or parsed_count <= 0:
            raise ConfigError("Count must be a positive number")

    parsed_interval = _to_int(interval)
    if parsed_interval is None or parsed_interval < MIN_INTERVAL_MS:
        raise ConfigError("Interval must be at least 100ms")

    parsed_timeout = DEFAULT_TIMEOUT_SECONDS if timeout is None else _to_int(timeout)
    if parsed_timeout is None or parsed_timeout <= 0:
        raise ConfigError("Timeout must be a positive number")

    return RunConfig(
        target=target.strip(),
        count=parsed_count,
        interval_ms=parsed_interval,
        timeout_seconds=parsed_timeout,
        speed_test=speed_test,
    )
