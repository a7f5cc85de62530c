"""Worker classes for background tasks."""

import logging
from typing import Callable

from PySide6.QtCore import QObject, QRunnable, Signal

from pingx.models import SpeedTestResult
from pingx.speedtest import run_speed_test

logger = logging.getLogger(__name__)


class WorkerSignals(QObject):
    """Signals for communicating between worker threads and main thread."""

    result = Signal(object)  # Emits SpeedTestResult
    error = Signal(str)  # Emits error message
    finished = Signal()  # Emits when worker completes


class SpeedTestWorker(QRunnable):
    """Worker that executes the throughput test in a background thread."""

    def __init__(self, speed_test: Callable[[], SpeedTestResult] = run_speed_test):
        super().__init__()
        self.speed_test = speed_test
        self.signals = WorkerSignals()

    def run(self):
        """Execute the speed test in background thread."""
        try:
            logger.debug("Speed test worker starting")

            result = self.speed_test()

            self.signals.result.emit(result)

            logger.debug(
                "Speed test worker completed: download=%.2f, upload=%.2f",
                result.download_mbps,
                result.upload_mbps,
            )

        except Exception as e:
            # Ping statistics are already shown; report and carry on
            logger.exception("Speed test worker exception: error=%s", str(e))
            self.signals.error.emit(str(e))

        finally:
            # Always signal completion
            self.signals.finished.emit()
