"""Probe runner: executes the system ping command once per probe."""

import logging
from typing import Callable, Protocol

from PySide6.QtCore import QObject, QProcess, Signal

from pingx.command import build_ping_command
from pingx.models import ProbeResult, ProbeSpawnError
from pingx.parsing import parse_ping_output

logger = logging.getLogger(__name__)

CommandBuilder = Callable[[str, int | None], tuple[str, list[str]]]


class Runner(Protocol):
    """Interface the scheduler needs from a probe runner.

    Implementations emit ``result_ready(ProbeResult)`` exactly once per
    ``start()`` unless ``abort()`` is called first.
    """

    result_ready: Signal

    def start(self, target: str, timeout_seconds: int | None) -> None:
        ...

    def abort(self) -> None:
        ...

    def is_busy(self) -> bool:
        ...


class ProbeRunner(QObject):
    """Runs one ping process at a time via QProcess.

    The per-attempt time limit is whatever the ping utility enforces through
    its own timeout flag; the runner never kills a probe on its own. Exit
    codes are ignored: the output text alone decides the result.
    """

    result_ready = Signal(object)  # Emits ProbeResult

    def __init__(self, build_command: CommandBuilder = build_ping_command, parent=None):
        """Initialize runner.

        Args:
            build_command: Callable returning (program, args) for a target and
                           timeout; defaults to the platform ping command
            parent: Qt parent object
        """
        super().__init__(parent)
        self._build_command = build_command
        self._process: QProcess | None = None
        self._target = ""
        self._stdout = b""
        self._stderr = b""

    def is_busy(self) -> bool:
        return self._process is not None

    def start(self, target: str, timeout_seconds: int | None = None) -> None:
        """Spawn the probe process; the result arrives via result_ready.

        Raises:
            RuntimeError: If a probe is already in flight
        """
        if self.is_busy():
            raise RuntimeError("a probe is already in flight")

        program, args = self._build_command(target, timeout_seconds)
        self._target = target
        self._stdout = b""
        self._stderr = b""

        process = QProcess(self)
        process.readyReadStandardOutput.connect(lambda: self._read_stdout(process))
        process.readyReadStandardError.connect(lambda: self._read_stderr(process))
        process.finished.connect(lambda exit_code, exit_status: self._on_finished(process, exit_code))
        process.errorOccurred.connect(lambda error: self._on_error(process, error))
        self._process = process

        logger.debug("Starting probe: target=%s, program=%s, args=%s", target, program, args)
        process.start(program, args)

    def abort(self) -> None:
        """Kill the in-flight probe, if any, and drop its result."""
        process = self._process
        if process is None:
            return

        self._process = None
        logger.debug("Aborting probe: target=%s", self._target)
        process.kill()
        process.deleteLater()

    def _read_stdout(self, process: QProcess) -> None:
        if process is self._process:
            self._stdout += process.readAllStandardOutput().data()

    def _read_stderr(self, process: QProcess) -> None:
        if process is self._process:
            self._stderr += process.readAllStandardError().data()

    def _on_finished(self, process: QProcess, exit_code: int) -> None:
        if process is not self._process:
            return

        self._read_stdout(process)
        self._read_stderr(process)
        logger.debug("Probe finished: target=%s, exit_code=%d", self._target, exit_code)
        if self._stderr:
            logger.debug("Probe stderr: target=%s, stderr=%r", self._target, self._stderr[:200])

        output = self._stdout.decode("utf-8", errors="replace")
        self._resolve(parse_ping_output(output, self._target))

    def _on_error(self, process: QProcess, error: QProcess.ProcessError) -> None:
        if process is not self._process:
            return

        # Crashes and read errors are still followed by finished(); only a
        # failed start leaves the probe without an exit.
        if error != QProcess.ProcessError.FailedToStart:
            logger.debug("Probe process error: target=%s, error=%s", self._target, error)
            return

        message = process.errorString()
        logger.warning("Ping process failed to start: target=%s, error=%s", self._target, message)
        self._resolve(ProbeSpawnError(message=message))

    def _resolve(self, result: ProbeResult) -> None:
        process = self._process
        self._process = None
        if process is not None:
            process.deleteLater()
        self.result_ready.emit(result)
