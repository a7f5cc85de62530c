"""Unit tests for PingScheduler."""

import time

from conftest import process_events_for, wait_for_signal

from pingx.fake_runner import FakeRunner
from pingx.models import (
    ProbeSpawnError,
    ProbeSuccess,
    ProbeTimeout,
    ProbeUnknown,
    ProbeUnreachable,
    RunConfig,
)
from pingx.scheduler import PingScheduler


def success(ms):
    return ProbeSuccess(ip="10.0.0.1", bytes_returned=64, round_trip_ms=ms, ttl=64)


class Recorder:
    """Collects everything a scheduler emits."""

    def __init__(self, scheduler):
        self.results = []
        self.summaries = []
        scheduler.result_ready.connect(lambda result, attempt: self.results.append((result, attempt)))
        scheduler.summary_ready.connect(self.summaries.append)


class TestBoundedRun:
    """Test fixed-count runs."""

    def test_count_three_probes_and_two_waits(self, qapp):
        """Exactly count probes; the interval elapses between probes only."""
        runner = FakeRunner(script=[success(10), ProbeTimeout(), success(30)])
        scheduler = PingScheduler(RunConfig(target="10.0.0.1", count=3, interval_ms=100), runner)
        recorder = Recorder(scheduler)
        waits = []
        scheduler.timer.timeout.connect(lambda: waits.append(time.monotonic()))

        started = time.monotonic()
        assert wait_for_signal(scheduler.finished, scheduler.start)
        elapsed = time.monotonic() - started

        # Two full intervals passed (coarse timers may fire up to 5% early)
        assert len(waits) == 2
        assert elapsed >= 0.19
        assert waits[1] - waits[0] >= 0.095

        # No interval is waited after the last probe
        process_events_for(250)
        assert len(waits) == 2
        assert not scheduler.timer.isActive()

        assert len(runner.started) == 3
        assert [attempt for _, attempt in recorder.results] == [1, 2, 3]
        assert len(recorder.summaries) == 1
        final = recorder.summaries[0]
        assert final.sent == 3
        assert final.received == 2
        assert final.latencies == (10, 30)

    def test_single_probe_never_waits(self, qapp):
        runner = FakeRunner(script=[success(5)])
        scheduler = PingScheduler(RunConfig(target="10.0.0.1", count=1, interval_ms=100), runner)
        waits = []
        scheduler.timer.timeout.connect(lambda: waits.append(True))

        assert wait_for_signal(scheduler.finished, scheduler.start)
        process_events_for(150)

        assert waits == []
        assert not scheduler.timer.isActive()

    def test_failures_do_not_abort_run(self, qapp):
        script = [ProbeSpawnError("no ping"), ProbeUnknown("??"), ProbeUnreachable(), ProbeTimeout()]
        runner = FakeRunner(script=script)
        scheduler = PingScheduler(RunConfig(target="10.0.0.1", count=4, interval_ms=100), runner)
        recorder = Recorder(scheduler)

        assert wait_for_signal(scheduler.finished, scheduler.start)

        assert [result for result, _ in recorder.results] == script
        assert recorder.summaries[0].sent == 4
        assert recorder.summaries[0].received == 0

    def test_target_and_timeout_passed_to_runner(self, qapp):
        runner = FakeRunner(script=[ProbeTimeout(), ProbeTimeout()])
        config = RunConfig(target="example.com", count=2, interval_ms=100, timeout_seconds=7)
        scheduler = PingScheduler(config, runner)

        wait_for_signal(scheduler.finished, scheduler.start)
        assert runner.started == [("example.com", 7), ("example.com", 7)]

    def test_start_after_finish_is_ignored(self, qapp):
        runner = FakeRunner(script=[success(1)])
        scheduler = PingScheduler(RunConfig(target="10.0.0.1", count=1, interval_ms=100), runner)
        recorder = Recorder(scheduler)

        wait_for_signal(scheduler.finished, scheduler.start)
        scheduler.start()
        process_events_for(50)

        assert len(runner.started) == 1
        assert len(recorder.summaries) == 1

    def test_probes_are_sequential(self, qapp):
        """The runner is never started while a probe is in flight."""
        runner = FakeRunner(seed=3, delay_ms=20)
        scheduler = PingScheduler(RunConfig(target="10.0.0.1", count=3, interval_ms=100), runner)

        # FakeRunner.start raises RuntimeError if called while busy
        assert wait_for_signal(scheduler.finished, scheduler.start)
        assert scheduler.statistics.sent == 3


class TestUnboundedRun:
    """Test continuous runs and cancellation."""

    def test_runs_until_cancelled(self, qapp):
        runner = FakeRunner(seed=1)
        scheduler = PingScheduler(RunConfig(target="10.0.0.1", interval_ms=100), runner)
        recorder = Recorder(scheduler)

        def cancel_after_three(result, attempt):
            if attempt == 3:
                scheduler.cancel()

        scheduler.result_ready.connect(cancel_after_three)
        assert wait_for_signal(scheduler.finished, scheduler.start)

        assert len(recorder.results) == 3
        assert len(recorder.summaries) == 1
        assert recorder.summaries[0].sent == 3
        assert not scheduler.is_running
        assert not scheduler.timer.isActive()

        # Nothing else is scheduled afterwards
        process_events_for(250)
        assert len(runner.started) == 3

    def test_cancel_during_interval(self, qapp):
        runner = FakeRunner(script=[success(12)])
        scheduler = PingScheduler(RunConfig(target="10.0.0.1", interval_ms=1000), runner)
        recorder = Recorder(scheduler)

        wait_for_signal(scheduler.result_ready, scheduler.start)
        assert scheduler.timer.isActive()

        assert wait_for_signal(scheduler.finished, scheduler.cancel)
        assert recorder.summaries[0].sent == 1
        assert recorder.summaries[0].latencies == (12,)
        assert not scheduler.timer.isActive()

    def test_cancel_with_probe_in_flight_drops_late_result(self, qapp):
        """Summary reflects completed probes only and is emitted once."""
        runner = FakeRunner(script=[success(5)], delay_ms=200)
        scheduler = PingScheduler(RunConfig(target="10.0.0.1", interval_ms=100), runner)
        recorder = Recorder(scheduler)

        scheduler.start()
        assert runner.is_busy()
        assert wait_for_signal(scheduler.finished, scheduler.cancel)

        process_events_for(300)
        assert recorder.results == []
        assert len(recorder.summaries) == 1
        assert recorder.summaries[0].sent == 0
        assert len(runner.started) == 1

    def test_cancel_is_idempotent(self, qapp):
        runner = FakeRunner(seed=2)
        scheduler = PingScheduler(RunConfig(target="10.0.0.1", interval_ms=100), runner)
        recorder = Recorder(scheduler)
        finished = []
        scheduler.finished.connect(lambda: finished.append(True))

        wait_for_signal(scheduler.result_ready, scheduler.start)
        scheduler.cancel()
        scheduler.cancel()

        assert len(recorder.summaries) == 1
        assert finished == [True]
        assert scheduler.get_stats()["summary_emitted"] is True

    def test_cancel_before_start(self, qapp):
        runner = FakeRunner()
        scheduler = PingScheduler(RunConfig(target="10.0.0.1"), runner)
        recorder = Recorder(scheduler)

        scheduler.cancel()
        scheduler.start()

        assert recorder.summaries[0].sent == 0
        assert runner.started == []

    def test_get_stats_reports_mode(self, qapp):
        unbounded = PingScheduler(RunConfig(target="a"), FakeRunner())
        bounded = PingScheduler(RunConfig(target="a", count=2), FakeRunner())
        assert unbounded.get_stats()["mode"] == "unbounded"
        assert bounded.get_stats()["mode"] == "bounded"
        assert bounded.get_stats()["running"] is False
