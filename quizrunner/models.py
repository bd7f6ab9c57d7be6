"""
Data models for question banks and exam sessions.

Provides type-safe structures for Question, ExamSession, score reports and
the exam configuration.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, List, Dict, Tuple


MIN_QUESTIONS = 1
MIN_MINUTES = 1
MAX_MINUTES = 600
MIN_SCALE = 1.0
MAX_SCALE = 1000.0


def clamp(value, low, high):
    """Clamp a value into the inclusive range [low, high]."""
    return max(low, min(high, value))


@dataclass(frozen=True)
class Option:
    """A single answer option of a question."""
    key: str   # Single uppercase letter
    text: str


@dataclass(frozen=True)
class Question:
    """Represents a single-best-answer multiple choice question."""
    id: str
    stem: str
    options: Tuple[Option, ...]
    answer_key: str

    def option_keys(self) -> List[str]:
        """Return the option keys in display order."""
        return [option.key for option in self.options]

    def option_text(self, key: str) -> Optional[str]:
        """Return the text of the first option with the given key."""
        for option in self.options:
            if option.key == key:
                return option.text
        return None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "stem": self.stem,
            "options": [{"key": o.key, "text": o.text} for o in self.options],
            "answer_key": self.answer_key,
        }


@dataclass
class ExamSession:
    """
    One timed attempt over a drawn, option-shuffled subset of the bank.

    Attributes:
        questions: Exam copies of bank questions, options re-keyed A, B, C...
        answers: Question id -> chosen option key (answered questions only)
        flagged: Question id -> review marker
        start_time: When the attempt started
        deadline: start_time + configured duration
        submitted: Terminal once True
        index: Position of the question currently shown
        submitted_at: When the attempt was submitted
        auto_submitted: True when the countdown triggered the submit
    """
    questions: List[Question]
    start_time: datetime
    deadline: datetime
    answers: Dict[str, str] = field(default_factory=dict)
    flagged: Dict[str, bool] = field(default_factory=dict)
    submitted: bool = False
    index: int = 0
    submitted_at: Optional[datetime] = None
    auto_submitted: bool = False

    @property
    def duration_seconds(self) -> int:
        return int((self.deadline - self.start_time).total_seconds())


@dataclass(frozen=True)
class Score:
    """Raw result of an exam: correct answers out of total questions."""
    correct: int
    total: int

    @property
    def incorrect(self) -> int:
        return self.total - self.correct


@dataclass(frozen=True)
class ReviewItem:
    """Per-question outcome shown after submission."""
    number: int
    question: Question
    chosen: Optional[str]
    is_correct: bool


@dataclass(frozen=True)
class GradeReport:
    """Everything the result screen needs."""
    score: Score
    scale_over: float
    grade: float
    items: List[ReviewItem]
    answered_count: int
    flagged_count: int
    auto_submitted: bool


@dataclass
class ExamConfig:
    """
    Configuration for exam parameters.

    Attributes:
        question_count: Number of questions drawn per attempt
        exam_time_minutes: Total time allowed for the attempt
        scale_over: Grading scale the correct/total ratio is projected onto
        poll_interval_ms: Countdown polling cadence
    """
    question_count: int
    exam_time_minutes: int
    scale_over: float
    poll_interval_ms: int

    @staticmethod
    def from_dict(data: dict) -> 'ExamConfig':
        """Create ExamConfig from dictionary."""
        return ExamConfig(
            question_count=int(data.get('question_count', 10)),
            exam_time_minutes=int(data.get('exam_time_minutes', 10)),
            scale_over=float(data.get('scale_over', 10.0)),
            poll_interval_ms=int(data.get('poll_interval_ms', 250))
        )

    def validate(self) -> Tuple[bool, str]:
        """
        Validate configuration values.

        Out-of-range counts, minutes and scales are not errors; they are
        clamped when an exam starts. Only the poll interval is checked here.

        Returns:
            Tuple of (is_valid, error_message)
        """
        if self.poll_interval_ms <= 0:
            return False, "Poll interval must be positive"

        return True, ""

    def clamped(self, bank_size: int) -> 'ExamConfig':
        """Return a copy with every value pulled into its allowed range."""
        return ExamConfig(
            question_count=clamp(self.question_count, MIN_QUESTIONS, max(bank_size, MIN_QUESTIONS)),
            exam_time_minutes=clamp(self.exam_time_minutes, MIN_MINUTES, MAX_MINUTES),
            scale_over=clamp(self.scale_over, MIN_SCALE, MAX_SCALE),
            poll_interval_ms=self.poll_interval_ms
        )

    @staticmethod
    def default() -> 'ExamConfig':
        """Return default configuration: 10 questions, 10 minutes, graded over 10."""
        return ExamConfig(
            question_count=10,
            exam_time_minutes=10,
            scale_over=10.0,
            poll_interval_ms=250
        )
