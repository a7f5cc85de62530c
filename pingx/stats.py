"""Statistics aggregation for ping runs (pure functions)."""

from pingx.models import ProbeResult, ProbeSuccess, RunStatistics, StatisticsSummary
from pingx.parsing import round_half_up


def update(stats: RunStatistics, result: ProbeResult) -> RunStatistics:
    """Fold one probe result into the running statistics.

    Every result counts as sent; only ProbeSuccess counts as received and
    contributes its round-trip time.
    """
    if isinstance(result, ProbeSuccess):
        return RunStatistics(
            sent=stats.sent + 1,
            received=stats.received + 1,
            latencies=stats.latencies + (result.round_trip_ms,),
        )
    return RunStatistics(sent=stats.sent + 1, received=stats.received, latencies=stats.latencies)


def loss_percent(stats: RunStatistics) -> float:
    """Percentage of sent probes without a reply, rounded to one decimal (ties up)."""
    if stats.sent == 0:
        return 0.0
    return round_half_up((stats.sent - stats.received) / stats.sent * 100, 1)


def summarize(stats: RunStatistics) -> StatisticsSummary:
    """Compute the summary view of a run.

    Latency fields are left as None when no reply was received, so callers
    can omit the round-trip line instead of showing zeros.
    """
    summary = StatisticsSummary(
        sent=stats.sent,
        received=stats.received,
        lost=stats.sent - stats.received,
        loss_percent=loss_percent(stats),
    )
    if not stats.latencies:
        return summary

    return StatisticsSummary(
        sent=summary.sent,
        received=summary.received,
        lost=summary.lost,
        loss_percent=summary.loss_percent,
        min_ms=min(stats.latencies),
        max_ms=max(stats.latencies),
        avg_ms=round_half_up(sum(stats.latencies) / len(stats.latencies), 1),
    )
