"""Platform-specific command line for a single ping probe."""

import logging
import platform

logger = logging.getLogger(__name__)

PING_PROGRAM = "ping"


def build_ping_command(
    target: str, timeout_seconds: int | None = None, system: str | None = None
) -> tuple[str, list[str]]:
    """Build the program and arguments for a one-packet echo request.

    Windows ping takes its per-reply wait in milliseconds (-w); Linux, macOS
    and anything else get the iputils/BSD form with -W in seconds.

    Args:
        target: Hostname or IP address to ping
        timeout_seconds: Per-attempt wait handed to ping itself, or None to
                         leave the utility's default in place
        system: Value of platform.system() to build for (defaults to the host)

    Returns:
        Tuple of (program, arguments); the target is the last argument
    """
    if system is None:
        system = platform.system()

    if system == "Windows":
        # Windows: ping -n count [-w timeout_ms] host
        args = ["-n", "1"]
        if timeout_seconds:
            args += ["-w", str(timeout_seconds * 1000)]
    else:
        # Linux/macOS/BSD: ping -c count [-W timeout_seconds] host
        args = ["-c", "1"]
        if timeout_seconds:
            args += ["-W", str(timeout_seconds)]

    args.append(target)
    logger.debug("Built ping command: system=%s, args=%s", system, args)
    return PING_PROGRAM, args
