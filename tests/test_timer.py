"""
Tests for the exam countdown.

Tests the pure remaining-time helpers, one-shot expiry and the
background polling thread.
"""

import threading
import time
from datetime import datetime, timedelta
from pathlib import Path
from unittest.mock import Mock

import pytest

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from quizrunner.timer import CountdownTimer, format_mmss, remaining_seconds, time_progress


START = datetime(2025, 1, 1, 9, 0, 0)
DEADLINE = START + timedelta(minutes=2)


class TestHelpers:
    """Test pure time computations."""

    @pytest.mark.parametrize("offset,expected", [
        (timedelta(seconds=120), 120),
        (timedelta(seconds=1.2), 2),
        (timedelta(milliseconds=1), 1),
        (timedelta(0), 0),
        (timedelta(seconds=-30), 0),
    ])
    def test_remaining_seconds_rounds_up(self, offset, expected):
        assert remaining_seconds(START + offset, START) == expected

    @pytest.mark.parametrize("seconds,expected", [
        (0, "00:00"), (5, "00:05"), (65, "01:05"), (600, "10:00"), (-3, "00:00"),
    ])
    def test_format_mmss(self, seconds, expected):
        assert format_mmss(seconds) == expected

    def test_time_progress(self):
        assert time_progress(60, 60) == 0
        assert time_progress(30, 60) == 50
        assert time_progress(0, 60) == 100
        assert time_progress(90, 60) == 0

    def test_time_progress_rounds_half_up(self):
        assert time_progress(7, 8) == 13
        assert time_progress(3, 8) == 63

    def test_time_progress_no_duration(self):
        assert time_progress(10, 0) == 0


class TestCountdownState:
    """Test seconds_left and tick without threads."""

    def test_not_running_reports_zero(self):
        on_expire = Mock()
        timer = CountdownTimer(START, DEADLINE, on_expire)

        assert timer.seconds_left == 0
        assert timer.tick(DEADLINE) == 0
        on_expire.assert_not_called()

    def test_running_starts_at_full_duration(self):
        timer = CountdownTimer(START, DEADLINE, Mock())
        timer.start(poll=False)
        assert timer.seconds_left == 120
        assert timer.total_seconds == 120

    def test_seconds_left_does_not_read_clock(self):
        clock = Mock(return_value=DEADLINE)
        timer = CountdownTimer(START, DEADLINE, Mock(), clock=clock)
        timer.start(poll=False)

        assert timer.seconds_left == 120
        assert timer.seconds_left == 120
        clock.assert_not_called()

    def test_tick_reads_clock(self):
        clock = Mock(return_value=START + timedelta(seconds=30))
        timer = CountdownTimer(START, DEADLINE, Mock(), clock=clock)
        timer.start(poll=False)

        assert timer.tick() == 90
        clock.assert_called_once()

    def test_tick_with_explicit_instant(self):
        timer = CountdownTimer(START, DEADLINE, Mock())
        timer.start(poll=False)
        assert timer.tick(START + timedelta(seconds=119.5)) == 1
        assert timer.seconds_left == 1

    def test_expiry_fires_once(self):
        on_expire = Mock()
        timer = CountdownTimer(START, DEADLINE, on_expire)
        timer.start(poll=False)

        timer.tick(START + timedelta(seconds=60))
        on_expire.assert_not_called()

        timer.tick(DEADLINE)
        timer.tick(DEADLINE + timedelta(seconds=5))
        on_expire.assert_called_once()
        assert timer.expired

    def test_no_expiry_after_stop(self):
        on_expire = Mock()
        timer = CountdownTimer(START, DEADLINE, on_expire)
        timer.start(poll=False)
        timer.stop()

        timer.tick(DEADLINE)
        on_expire.assert_not_called()
        assert timer.seconds_left == 0

    def test_expiry_is_logged(self):
        logger = Mock()
        timer = CountdownTimer(START, DEADLINE, Mock(), session_logger=logger)
        timer.start(poll=False)
        timer.tick(DEADLINE)

        logger.assert_called_once()
        assert logger.call_args[0][0] == "TIMER_EXPIRED"


class TestCountdownPolling:
    """Test the background polling thread."""

    def test_polling_fires_expiry(self):
        fired = threading.Event()
        clock = Mock(return_value=DEADLINE)
        timer = CountdownTimer(START, DEADLINE, fired.set, poll_interval=0.01, clock=clock)

        timer.start()
        assert fired.wait(timeout=2.0)
        timer.stop()

        assert timer.expired
        assert not timer.poll_thread.is_alive()

    def test_stop_from_expiry_callback(self):
        """Test that the callback may stop its own timer without deadlocking."""
        done = threading.Event()
        clock = Mock(return_value=DEADLINE)

        def on_expire():
            timer.stop()
            done.set()

        timer = CountdownTimer(START, DEADLINE, on_expire, poll_interval=0.01, clock=clock)
        timer.start()

        assert done.wait(timeout=2.0)
        assert not timer.running

    def test_start_twice_keeps_one_thread(self):
        clock = Mock(return_value=START)
        timer = CountdownTimer(START, DEADLINE, Mock(), poll_interval=0.01, clock=clock)

        timer.start()
        thread1 = timer.poll_thread
        timer.start()
        thread2 = timer.poll_thread

        assert thread1 is thread2
        timer.stop()

    def test_stop_ends_polling(self):
        clock = Mock(return_value=START)
        timer = CountdownTimer(START, DEADLINE, Mock(), poll_interval=0.01, clock=clock)
        timer.start()
        time.sleep(0.05)
        timer.stop()

        assert not timer.running
        assert not timer.poll_thread.is_alive()
        assert clock.call_count >= 1
