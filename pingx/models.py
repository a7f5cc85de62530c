"""Data models for PingX probes and runs."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ProbeSuccess:
    """An echo reply was parsed from the probe output."""

    ip: str
    bytes_returned: int
    round_trip_ms: int
    ttl: int
    sequence: int | None = None


@dataclass(frozen=True)
class ProbeTimeout:
    """The probe utility reported that the request timed out."""


@dataclass(frozen=True)
class ProbeUnreachable:
    """The probe utility reported the destination as unreachable."""


@dataclass(frozen=True)
class ProbeSpawnError:
    """The probe process could not be started."""

    message: str


@dataclass(frozen=True)
class ProbeUnknown:
    """Output that matched no known reply, timeout or unreachable form."""

    raw_output: str


ProbeResult = ProbeSuccess | ProbeTimeout | ProbeUnreachable | ProbeSpawnError | ProbeUnknown


@dataclass(frozen=True)
class RunConfig:
    """Settings for one invocation.

    Values are expected to be validated already (see pingx.config); the
    scheduler and runner never re-check them.
    """

    target: str
    count: int | None = None  # None runs until cancelled
    interval_ms: int = 1000
    timeout_seconds: int = 4
    speed_test: bool = False

    @property
    def is_bounded(self) -> bool:
        return self.count is not None


@dataclass(frozen=True)
class RunStatistics:
    """Running totals for a ping run."""

    sent: int = 0
    received: int = 0
    latencies: tuple[int, ...] = field(default_factory=tuple)

    def __post_init__(self):
        """Ensure consistency between received and latencies."""
        if self.received != len(self.latencies):
            raise ValueError("received must equal the number of latencies")
        if self.received > self.sent:
            raise ValueError("received cannot exceed sent")


@dataclass(frozen=True)
class StatisticsSummary:
    """Derived view of RunStatistics; latency fields are None without replies."""

    sent: int
    received: int
    lost: int
    loss_percent: float
    min_ms: int | None = None
    max_ms: int | None = None
    avg_ms: float | None = None

    @property
    def has_latency(self) -> bool:
        return self.avg_ms is not None


@dataclass(frozen=True)
class SpeedTestResult:
    """Throughput measured by the optional speed test, in megabits per second."""

    download_mbps: float
    upload_mbps: float
