"""
Exam countdown.

The remaining time is always derived from the last polled instant, never
from reading the clock during computation, so the same (start, deadline, now)
triple always gives the same answer. The clock is only read inside tick(),
which the background polling thread calls on a fixed cadence.
"""

import math
import threading
import time
from datetime import datetime
from typing import Callable, Optional


def remaining_seconds(deadline: datetime, now: datetime) -> int:
    """Whole seconds left until deadline, rounded up, never negative."""
    return max(0, math.ceil((deadline - now).total_seconds()))


def format_mmss(seconds: int) -> str:
    """Format a number of seconds as MM:SS."""
    minutes, rest = divmod(max(0, int(seconds)), 60)
    return f"{minutes:02d}:{rest:02d}"


def time_progress(seconds_left: int, total_seconds: int) -> int:
    """Percentage of the total time already used, in [0, 100]."""
    if total_seconds <= 0:
        return 0
    left = max(0, min(seconds_left, total_seconds))
    used = total_seconds - left
    return max(0, min(100, math.floor(used / total_seconds * 100 + 0.5)))


class CountdownTimer:
    """Counts down to a deadline and fires a callback once when it is reached."""

    def __init__(
        self,
        start: datetime,
        deadline: datetime,
        on_expire: Callable[[], None],
        poll_interval: float = 0.25,
        clock: Callable[[], datetime] = datetime.now,
        session_logger=None
    ):
        self.start_time = start
        self.deadline = deadline
        self.on_expire = on_expire
        self.poll_interval = poll_interval
        self.clock = clock
        self.session_logger = session_logger

        self.running = False
        self.expired = False
        self.poll_thread: Optional[threading.Thread] = None
        self._now = start

    @property
    def total_seconds(self) -> int:
        return remaining_seconds(self.deadline, self.start_time)

    @property
    def seconds_left(self) -> int:
        if not self.running:
            return 0
        return remaining_seconds(self.deadline, self._now)

    def tick(self, now: Optional[datetime] = None) -> int:
        """
        Poll the clock and fire the expiry callback on the first zero.

        Args:
            now: Instant to evaluate at; reads the clock when omitted

        Returns:
            Seconds left after this tick
        """
        if not self.running:
            return 0

        self._now = now or self.clock()
        left = self.seconds_left
        if left == 0 and not self.expired:
            self.expired = True
            if self.session_logger:
                self.session_logger("TIMER_EXPIRED", f"Deadline {self.deadline.strftime('%H:%M:%S')} reached")
            self.on_expire()
        return left

    def start(self, poll: bool = True):
        """Start counting down, optionally with a background polling thread."""
        if self.running:
            return

        self.running = True
        if poll:
            self.poll_thread = threading.Thread(
                target=self._poll_background,
                daemon=True
            )
            self.poll_thread.start()

    def stop(self):
        """Stop counting down. Safe to call from inside the expiry callback."""
        self.running = False
        thread = self.poll_thread
        if thread and thread.is_alive() and thread is not threading.current_thread():
            thread.join(timeout=2.0)

    def _poll_background(self):
        """Background polling loop."""
        while self.running and not self.expired:
            try:
                self.tick()
            except Exception as e:
                if self.session_logger:
                    self.session_logger("TIMER_ERROR", f"Countdown error: {str(e)}")
                self.running = False
                break
            time.sleep(self.poll_interval)
