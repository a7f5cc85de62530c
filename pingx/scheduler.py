"""Execution loop driving sequential ping probes."""

import logging

from PySide6.QtCore import QObject, QTimer, Signal

from pingx import stats
from pingx.models import ProbeResult, RunConfig, RunStatistics
from pingx.runner import ProbeRunner, Runner

logger = logging.getLogger(__name__)


class PingScheduler(QObject):
    """Runs probes one after another, spaced by the configured interval.

    Key features:
    - Bounded mode (config.count set): exactly ``count`` probes, with the
      interval waited between probes but not after the last one
    - Unbounded mode: probes until cancel() is called
    - At most one probe in flight; the next probe is only scheduled after
      the previous result has been folded into the statistics
    - The final summary is emitted exactly once per run, whichever of
      completion or cancellation happens first

    The config is trusted as already validated.
    """

    # Signals
    result_ready = Signal(object, int)  # (ProbeResult, attempt number starting at 1)
    summary_ready = Signal(object)  # Final RunStatistics
    finished = Signal()

    def __init__(self, config: RunConfig, runner: Runner | None = None, parent=None):
        """Initialize scheduler.

        Args:
            config: Validated run configuration
            runner: Probe runner; defaults to a ProbeRunner using system ping
            parent: Qt parent object
        """
        super().__init__(parent)

        self.config = config
        self.runner = runner if runner is not None else ProbeRunner(parent=self)
        self.runner.result_ready.connect(self._on_probe_result)

        self.statistics = RunStatistics()

        # Loop state
        self._probes_started = 0
        self._intervals_waited = 0
        self._running = False
        self._summary_emitted = False

        # Single-shot timer for the pause between probes
        self.timer = QTimer(self)
        self.timer.setSingleShot(True)
        self.timer.timeout.connect(self._issue_probe)

    @property
    def is_running(self) -> bool:
        return self._running

    def start(self):
        """Start the run with an immediate first probe."""
        if self._running or self._summary_emitted:
            return

        self._running = True
        logger.info(
            "Run started: target=%s, count=%s, interval=%dms, timeout=%ds",
            self.config.target,
            self.config.count if self.config.is_bounded else "continuous",
            self.config.interval_ms,
            self.config.timeout_seconds,
        )
        self._issue_probe()

    def cancel(self):
        """Stop the run and emit the summary if it has not been emitted yet.

        Safe to call at any time and more than once. An in-flight probe is
        killed and its result, should it still arrive, is ignored.
        """
        if self._summary_emitted:
            return

        logger.info("Run cancelled after %d probes", self.statistics.sent)
        self.timer.stop()
        self.runner.abort()
        self._finish()

    def _issue_probe(self):
        """Handle timer tick - start the next probe."""
        if not self._running:
            return

        self._probes_started += 1
        logger.debug("Issuing probe %d: target=%s", self._probes_started, self.config.target)
        self.runner.start(self.config.target, self.config.timeout_seconds)

    def _on_probe_result(self, result: ProbeResult):
        """Fold a finished probe into the statistics and schedule the next one.

        Args:
            result: Outcome of the probe that just finished
        """
        if not self._running:
            logger.debug("Ignoring probe result after run ended: %s", result)
            return

        self.statistics = stats.update(self.statistics, result)
        self.result_ready.emit(result, self.statistics.sent)

        # A slot connected to result_ready may have cancelled the run
        if not self._running:
            return

        if self.config.is_bounded and self.statistics.sent >= self.config.count:
            self._finish()
            return

        self._intervals_waited += 1
        self.timer.start(self.config.interval_ms)

    def _finish(self):
        """Emit the summary once and signal completion."""
        self._running = False
        if self._summary_emitted:
            return

        self._summary_emitted = True
        logger.info(
            "Run finished: sent=%d, received=%d",
            self.statistics.sent,
            self.statistics.received,
        )
        self.summary_ready.emit(self.statistics)
        self.finished.emit()

    def get_stats(self):
        """Get scheduler statistics.

        Returns:
            Dict with loop state info
        """
        return {
            "mode": "bounded" if self.config.is_bounded else "unbounded",
            "probes_started": self._probes_started,
            "intervals_waited": self._intervals_waited,
            "running": self._running,
            "summary_emitted": self._summary_emitted,
        }
