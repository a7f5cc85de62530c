"""Shared fixtures for Qt-driven tests."""

import pytest
from PySide6.QtCore import QCoreApplication, QEventLoop, QTimer


@pytest.fixture(scope="session")
def qapp():
    """Create QCoreApplication instance for tests."""
    app = QCoreApplication.instance()
    if app is None:
        app = QCoreApplication([])
    yield app


def wait_for_signal(signal, trigger=None, timeout_ms=5000):
    """Run the event loop until ``signal`` fires or the timeout expires.

    Args:
        signal: Bound Qt signal to wait for
        trigger: Optional callable invoked after connecting
        timeout_ms: Upper bound on the wait

    Returns:
        List of argument tuples received (empty on timeout)
    """
    loop = QEventLoop()
    received = []

    def on_emit(*args):
        received.append(args)
        loop.quit()

    signal.connect(on_emit)
    if trigger is not None:
        trigger()
    if not received:
        QTimer.singleShot(timeout_ms, loop.quit)
        loop.exec()
    signal.disconnect(on_emit)
    return received


def process_events_for(duration_ms):
    """Keep processing Qt events for a fixed time."""
    loop = QEventLoop()
    QTimer.singleShot(duration_ms, loop.quit)
    loop.exec()
