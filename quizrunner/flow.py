"""
Exam lifecycle controller.

Drives the Upload -> Setup -> Exam -> Result flow on top of the parser and
session engine. The only backward transitions are from Result: back to Setup
(reconfigure), to a new Exam (retry) or to Upload (load another bank).
"""

import threading
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional, Set

from . import session as engine
from .models import ExamConfig, ExamSession, GradeReport, Question
from .parser import FormatError, parse
from .timer import CountdownTimer


class Phase(str, Enum):
    UPLOAD = "upload"
    SETUP = "setup"
    EXAM = "exam"
    RESULT = "result"


class PhaseError(RuntimeError):
    """An operation was requested in a phase that does not allow it."""


class QuizFlow:
    """Owns the bank, the used-id set and the active exam session."""

    def __init__(
        self,
        config: Optional[ExamConfig] = None,
        log_path: Optional[Path] = None,
        autostart_timer: bool = True,
        clock: Callable[[], datetime] = datetime.now,
        rng=None
    ):
        self.config = config or ExamConfig.default()
        self.log_path = log_path
        self.autostart_timer = autostart_timer
        self.clock = clock
        self.rng = rng

        self.phase = Phase.UPLOAD
        self.bank: List[Question] = []
        self.used_ids: Set[str] = set()
        self.session: Optional[ExamSession] = None
        self.timer: Optional[CountdownTimer] = None
        self.error: Optional[dict] = None
        self.events: List[str] = []

        self._submit_lock = threading.Lock()

    def log(self, event: str, details: str = ""):
        """Record a timestamped session event."""
        timestamp = self.clock().strftime("%Y-%m-%d %H:%M:%S")
        log_entry = f"[{timestamp}] - {event}"
        if details:
            log_entry += f" - {details}"
        self.events.append(log_entry)

        if self.log_path:
            with open(self.log_path, 'a', encoding='utf-8') as f:
                f.write(log_entry + "\n")

    def _require(self, *phases: Phase):
        if self.phase not in phases:
            allowed = ", ".join(p.value for p in phases)
            raise PhaseError(f"Not allowed in phase '{self.phase.value}' (requires {allowed})")

    # ===== UPLOAD / SETUP =====

    def load_bank(self, text: str) -> bool:
        """
        Parse a bank and move to Setup.

        Returns:
            True if the bank was accepted; on failure self.error holds the
            structured parse error and the phase stays Upload
        """
        self._require(Phase.UPLOAD)
        self.error = None
        try:
            bank = parse(text)
        except FormatError as e:
            self.error = e.to_dict()
            self.log("BANK_REJECTED", f"{e.kind}: {e.message}")
            return False

        self.bank = bank
        self.used_ids = set()
        self.phase = Phase.SETUP
        self.log("BANK_LOADED", f"{len(bank)} questions")
        return True

    def configure(
        self,
        question_count: Optional[int] = None,
        exam_time_minutes: Optional[int] = None,
        scale_over: Optional[float] = None
    ) -> ExamConfig:
        """Update exam settings; values are clamped when the exam starts."""
        self._require(Phase.SETUP)
        if question_count is not None:
            self.config.question_count = question_count
        if exam_time_minutes is not None:
            self.config.exam_time_minutes = exam_time_minutes
        if scale_over is not None:
            self.config.scale_over = scale_over
        return self.config

    def effective_config(self) -> ExamConfig:
        """Settings as they will actually apply to the loaded bank."""
        return self.config.clamped(len(self.bank))

    # ===== EXAM =====

    def start(self) -> bool:
        """Start an exam from Setup. Returns False when the bank is empty."""
        self._require(Phase.SETUP)
        return self._begin_attempt()

    def retry(self) -> bool:
        """Start a fresh attempt from Result, keeping the used-id history."""
        self._require(Phase.RESULT)
        return self._begin_attempt()

    def _begin_attempt(self) -> bool:
        self.error = None
        if not self.bank:
            self.error = {"kind": "empty_bank", "message": "Load a question bank with at least one question first."}
            return False

        settings = self.effective_config()
        self.session, self.used_ids = engine.start_session(
            self.bank,
            settings.question_count,
            settings.exam_time_minutes,
            self.used_ids,
            now=self.clock(),
            rng=self.rng
        )
        self.timer = CountdownTimer(
            start=self.session.start_time,
            deadline=self.session.deadline,
            on_expire=lambda: self.submit(auto=True),
            poll_interval=settings.poll_interval_ms / 1000,
            clock=self.clock,
            session_logger=self.log
        )
        self.phase = Phase.EXAM
        self.timer.start(poll=self.autostart_timer)

        self.log(
            "EXAM_START",
            f"{len(self.session.questions)} questions, {settings.exam_time_minutes} minutes, "
            f"ids: {', '.join(q.id for q in self.session.questions)}"
        )
        return True

    def current_question(self) -> Optional[Question]:
        self._require(Phase.EXAM, Phase.RESULT)
        return engine.current_question(self.session)

    def answer(self, option_key: str, question_id: Optional[str] = None):
        """Answer the given question, or the current one."""
        self._require(Phase.EXAM)
        qid = question_id or engine.current_question(self.session).id
        engine.record_answer(self.session, qid, option_key)

    def toggle_flag(self, question_id: Optional[str] = None):
        self._require(Phase.EXAM)
        qid = question_id or engine.current_question(self.session).id
        engine.toggle_flag(self.session, qid)

    def next(self) -> int:
        self._require(Phase.EXAM)
        return engine.go_next(self.session)

    def previous(self) -> int:
        self._require(Phase.EXAM)
        return engine.go_previous(self.session)

    def go_to(self, number: int) -> int:
        self._require(Phase.EXAM)
        return engine.go_to(self.session, number)

    def seconds_left(self) -> int:
        return self.timer.seconds_left if self.timer else 0

    def submit(self, auto: bool = False) -> bool:
        """
        Submit the running exam and move to Result.

        Explicit and timer-driven submits share this path; whichever comes
        first wins and the other is a no-op.
        """
        with self._submit_lock:
            if self.phase != Phase.EXAM or self.session.submitted:
                return False
            engine.submit(self.session, now=self.clock(), auto=auto)
            self.phase = Phase.RESULT

        if self.timer:
            self.timer.stop()

        result = engine.score(self.session)
        self.log(
            "EXAM_TIMEOUT" if auto else "EXAM_SUBMIT",
            f"Score: {result.correct}/{result.total}"
        )
        return True

    # ===== RESULT =====

    def report(self) -> GradeReport:
        self._require(Phase.RESULT)
        return engine.build_report(self.session, self.effective_config().scale_over)

    def reconfigure(self):
        """Go back to Setup from Result."""
        self._require(Phase.RESULT)
        self.session = None
        self.timer = None
        self.phase = Phase.SETUP
        self.log("RECONFIGURE")

    def reset(self):
        """Drop the bank and its used-id history and return to Upload."""
        self._require(Phase.RESULT)
        self.bank = []
        self.used_ids = set()
        self.session = None
        self.timer = None
        self.error = None
        self.phase = Phase.UPLOAD
        self.log("BANK_RESET")
