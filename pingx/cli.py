"""Command-line interface for PingX."""

import argparse
import logging
import signal
import sys
from typing import Callable

from PySide6.QtCore import QCoreApplication, QObject, QThreadPool, QTimer, Signal
from rich.console import Console

from pingx import __version__
from pingx.config import DEFAULT_INTERVAL_MS, DEFAULT_TIMEOUT_SECONDS, ConfigError, build_run_config
from pingx.logging_config import configure_logging
from pingx.models import RunConfig, SpeedTestResult
from pingx.render import ConsoleRenderer
from pingx.scheduler import PingScheduler
from pingx.speedtest import run_speed_test
from pingx.workers import SpeedTestWorker

logger = logging.getLogger(__name__)

# Period at which the Qt loop hands control back to Python so SIGINT is handled
SIGNAL_POLL_MS = 200


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pingx",
        description="An improved ping command with colorful styling",
    )
    parser.add_argument("target", help="IP address or hostname to ping")
    parser.add_argument("-c", "--count", help="number of packets to send")
    parser.add_argument(
        "-i",
        "--interval",
        default=str(DEFAULT_INTERVAL_MS),
        help="interval between packets in milliseconds (default: %(default)s)",
    )
    parser.add_argument(
        "-t",
        "--timeout",
        nargs="?",
        const=str(DEFAULT_TIMEOUT_SECONDS),
        default=str(DEFAULT_TIMEOUT_SECONDS),
        help="timeout for each ping in seconds (default: %(default)s)",
    )
    parser.add_argument(
        "-s",
        "--speed",
        action="store_true",
        help="measure download and upload speed after ping statistics",
    )
    parser.add_argument("-V", "--version", action="version", version=__version__)
    return parser


class PingApp(QObject):
    """Connects the scheduler, renderer and optional speed test for one run."""

    finished = Signal(int)  # Emits the process exit code

    def __init__(
        self,
        config: RunConfig,
        renderer: ConsoleRenderer,
        scheduler: PingScheduler | None = None,
        speed_test: Callable[[], SpeedTestResult] = run_speed_test,
        parent=None,
    ):
        super().__init__(parent)
        self.config = config
        self.renderer = renderer
        self.scheduler = scheduler if scheduler is not None else PingScheduler(config, parent=self)
        self.scheduler.result_ready.connect(self.renderer.show_result)
        self.scheduler.summary_ready.connect(self._on_summary)
        self.scheduler.finished.connect(self._on_run_finished)
        self.speed_test = speed_test
        self.thread_pool = QThreadPool.globalInstance()
        self.speed_worker = None

    def start(self):
        self.renderer.show_banner()
        self.renderer.show_header(self.config)
        self.scheduler.start()

    def interrupt(self, *_):
        """SIGINT handler for continuous runs."""
        logger.debug("Interrupt received")
        self.scheduler.cancel()

    def _on_summary(self, statistics):
        self.renderer.show_statistics(statistics, self.config.target)

    def _on_run_finished(self):
        # Continuous runs never get here except through interrupt()
        if self.config.is_bounded and self.config.speed_test:
            self._start_speed_test()
            return
        self.finished.emit(0)

    def _start_speed_test(self):
        self.speed_worker = SpeedTestWorker(self.speed_test)
        self.speed_worker.signals.result.connect(self._on_speed_result)
        self.speed_worker.signals.error.connect(self._on_speed_error)
        self.speed_worker.signals.finished.connect(self._on_speed_finished)
        self.thread_pool.start(self.speed_worker)

    def _on_speed_result(self, result):
        self.renderer.show_speed_test(result)

    def _on_speed_error(self, message):
        self.renderer.show_speed_test_error(message)

    def _on_speed_finished(self):
        self.finished.emit(0)


def main(argv=None) -> int:
    """Main entry point for the CLI."""
    configure_logging()
    argv = sys.argv[1:] if argv is None else argv
    parser = build_parser()
    renderer = ConsoleRenderer()

    if not argv:
        renderer.show_banner()
        parser.print_help()
        return 0

    args = parser.parse_args(argv)

    try:
        config = build_run_config(
            args.target,
            count=args.count,
            interval=args.interval,
            timeout=args.timeout,
            speed_test=args.speed,
        )
    except ConfigError as e:
        ConsoleRenderer(console=Console(stderr=True, highlight=False)).show_error(str(e))
        return 1

    app = QCoreApplication.instance() or QCoreApplication([sys.argv[0]])
    ping_app = PingApp(config, renderer)
    ping_app.finished.connect(lambda code: app.exit(code))

    if config.is_bounded:
        # No mid-run cancellation for bounded runs: Ctrl+C ends the process
        signal.signal(signal.SIGINT, signal.SIG_DFL)
    else:
        signal.signal(signal.SIGINT, ping_app.interrupt)

    # Python signal handlers only run while the interpreter holds control
    heartbeat = QTimer()
    heartbeat.timeout.connect(lambda: None)
    heartbeat.start(SIGNAL_POLL_MS)

    QTimer.singleShot(0, ping_app.start)
    exit_code = app.exec()
    heartbeat.stop()
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
