"""Interpretation of ping command output (pure functions).

Only two reply formats are recognized: the Windows "Reply from" line and the
iputils/BSD "bytes from" line. This is not a general ICMP parser; anything
else degrades to a timeout, unreachable or unknown result based on English
keywords.
"""

import logging
import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from pingx.models import (
    ProbeResult,
    ProbeSuccess,
    ProbeTimeout,
    ProbeUnknown,
    ProbeUnreachable,
)

logger = logging.getLogger(__name__)

TIMEOUT_MARKERS = ("Request timed out", "Request timeout", "no answer")
UNREACHABLE_MARKERS = ("Destination host unreachable", "Host unreachable")


def round_half_up(value: str | float, places: int = 0) -> int | float:
    """Round to ``places`` decimals with ties going up (5 -> up, never to even).

    Floats are rounded on their exact binary value, so 10.25 becomes 10.3.

    Returns:
        int when places is 0, else float

    Raises:
        InvalidOperation: If value is not a decimal number
    """
    rounded = Decimal(value).quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)
    if places == 0:
        return int(rounded)
    return float(rounded)


def _windows_reply(match: re.Match) -> ProbeSuccess:
    # Reply from <ip>: bytes=<n> time=<ms>ms TTL=<ttl>
    return ProbeSuccess(
        ip=match.group(1),
        bytes_returned=int(match.group(2)),
        round_trip_ms=int(match.group(3)),
        ttl=int(match.group(4)),
    )


def _unix_reply(match: re.Match) -> ProbeSuccess:
    # <n> bytes from <ip>: icmp_seq=<seq> ttl=<ttl> time=<ms> ms
    return ProbeSuccess(
        ip=match.group(2),
        bytes_returned=int(match.group(1)),
        round_trip_ms=round_half_up(match.group(5)),
        ttl=int(match.group(4)),
        sequence=int(match.group(3)),
    )


# Evaluated top to bottom against each line; the first match wins.
REPLY_RULES = (
    (
        re.compile(r"Reply from ([\d.]+): bytes=(\d+) time=(\d+)ms TTL=(\d+)", re.IGNORECASE),
        _windows_reply,
    ),
    (
        re.compile(
            r"(\d+) bytes from ([\d.]+): icmp_seq=(\d+) ttl=(\d+) time=([\d.]+) ms",
            re.IGNORECASE,
        ),
        _unix_reply,
    ),
)


def parse_reply_line(line: str) -> ProbeSuccess | None:
    """Match a single line against the reply rules.

    Returns:
        ProbeSuccess for the first matching rule, or None
    """
    for pattern, build in REPLY_RULES:
        match = pattern.search(line)
        if not match:
            continue
        try:
            return build(match)
        except (InvalidOperation, ValueError):
            # e.g. "time=1.2.3 ms" satisfies [\d.]+ but is not a number
            logger.debug("Discarding malformed reply line: %r", line)
            continue
    return None


def parse_ping_output(output: str | None, target: str | None = None) -> ProbeResult:
    """Convert raw ping output into a ProbeResult.

    Reply lines are matched case-insensitively and take precedence over
    everything else. Without a reply, the timeout and then the unreachable
    keywords are searched for (case-sensitive). Never raises.

    Args:
        output: Raw ping stdout, possibly multi-line or empty
        target: Host that was pinged; only used for log context

    Returns:
        ProbeSuccess, ProbeTimeout, ProbeUnreachable or ProbeUnknown

    Examples:
        >>> parse_ping_output("Reply from 192.168.1.1: bytes=32 time=15ms TTL=64")
        ProbeSuccess(ip='192.168.1.1', bytes_returned=32, round_trip_ms=15, ttl=64, sequence=None)
        >>> parse_ping_output("Request timed out.")
        ProbeTimeout()
    """
    if not output:
        return ProbeUnknown(raw_output=output or "")

    for line in output.splitlines():
        reply = parse_reply_line(line)
        if reply is not None:
            return reply

    if any(marker in output for marker in TIMEOUT_MARKERS):
        return ProbeTimeout()

    if any(marker in output for marker in UNREACHABLE_MARKERS):
        return ProbeUnreachable()

    logger.debug(
        "Unrecognized ping output: target=%s, output_preview=%s", target, output[:100]
    )
    return ProbeUnknown(raw_output=output)
