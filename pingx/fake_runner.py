"""Fake probe runner for PingX testing and simulation."""

import random
from collections import deque
from typing import Iterable

from PySide6.QtCore import QObject, QTimer, Signal

from pingx.models import ProbeResult, ProbeSuccess, ProbeTimeout


class FakeRunner(QObject):
    """Produces probe results without spawning processes.

    Results come from ``script`` in order while it lasts, then from a seeded
    simulation. Each result is delivered from the event loop, like a real
    process exit would be.
    """

    result_ready = Signal(object)  # Emits ProbeResult

    def __init__(
        self,
        script: Iterable[ProbeResult] = (),
        seed: int | None = None,
        delay_ms: int = 0,
        parent=None,
    ):
        """Initialize with optional scripted results and random seed."""
        super().__init__(parent)
        self._script = deque(script)
        self._random = random.Random(seed)
        self._delay_ms = delay_ms
        self._pending = None  # Token of the in-flight probe
        self.started = []  # (target, timeout_seconds) per start() call

        # Simulation parameters
        self.base_latency = 25.0  # Base latency in ms
        self.latency_variance = 5.0
        self.loss_probability = 0.02

    def is_busy(self) -> bool:
        return self._pending is not None

    def start(self, target: str, timeout_seconds: int | None = None) -> None:
        if self.is_busy():
            raise RuntimeError("a probe is already in flight")

        self.started.append((target, timeout_seconds))
        token = object()
        self._pending = token
        result = self._next_result()
        QTimer.singleShot(self._delay_ms, lambda: self._deliver(token, result))

    def abort(self) -> None:
        self._pending = None

    def _deliver(self, token, result: ProbeResult) -> None:
        if token is not self._pending:
            return
        self._pending = None
        self.result_ready.emit(result)

    def _next_result(self) -> ProbeResult:
        if self._script:
            return self._script.popleft()

        if self._random.random() < self.loss_probability:
            return ProbeTimeout()

        latency = max(1.0, self.base_latency + self._random.gauss(0, self.latency_variance))
        return ProbeSuccess(
            ip="192.0.2.1",
            bytes_returned=64,
            round_trip_ms=round(latency),
            ttl=64,
            sequence=len(self.started),
        )
