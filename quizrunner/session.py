"""
Exam session engine.

Selects questions for an attempt without repeating them across retries,
shuffles and re-keys options, tracks answers and flags, and scores and grades
the result. Every operation is a function of the values passed in; the engine
keeps no hidden state of its own.
"""

from datetime import datetime, timedelta
from typing import Dict, List, Optional, Sequence, Set, Tuple

from .models import (
    ExamSession, GradeReport, Option, Question, ReviewItem, Score,
    MIN_QUESTIONS, MIN_MINUTES, MAX_MINUTES, MIN_SCALE, MAX_SCALE, clamp,
)
from .sampler import sample_without_replacement, shuffle


class RekeyError(RuntimeError):
    """The originally correct option was lost while re-keying a question."""


# ===== SELECTION =====

def select_for_attempt(
    bank: Sequence[Question],
    requested_count: int,
    used_ids: Set[str],
    rng=None
) -> Tuple[List[Question], Set[str]]:
    """
    Draw questions for one attempt, avoiding ids already used.

    Questions not yet in used_ids are drawn first. When that pool cannot
    cover the request, the shortfall is drawn from the entire bank and the
    used set restarts with only those shortfall ids, so a new cycle begins.

    Args:
        bank: Full question bank
        requested_count: Number of questions, already clamped to [1, len(bank)]
        used_ids: Ids drawn since the bank was loaded

    Returns:
        Tuple of (selected questions, updated used ids)
    """
    available = [q for q in bank if q.id not in used_ids]
    take = min(requested_count, len(available))
    drawn = sample_without_replacement(available, take, rng)

    if take == requested_count:
        return drawn, set(used_ids) | {q.id for q in drawn}

    # Pool exhausted: fill from the whole bank and restart tracking
    refill = sample_without_replacement(bank, requested_count - take, rng)
    return drawn + refill, {q.id for q in refill}


def _option_label(index: int) -> str:
    """A, B, C... continuing past Z through the following code points."""
    return chr(ord("A") + index)


def present_question(question: Question, rng=None) -> Question:
    """
    Return an exam copy with shuffled options re-keyed A, B, C...

    The answer key follows the originally correct option to its new letter.

    Raises:
        RekeyError: If the correct option cannot be located
    """
    shuffled = shuffle(question.options, rng)
    correct_index = next(
        (i for i, option in enumerate(shuffled) if option.key == question.answer_key),
        None
    )
    if correct_index is None:
        raise RekeyError(
            f"Answer {question.answer_key} of question {question.id} not found among its options"
        )

    options = tuple(
        Option(key=_option_label(i), text=option.text)
        for i, option in enumerate(shuffled)
    )
    return Question(
        id=question.id,
        stem=question.stem,
        options=options,
        answer_key=_option_label(correct_index)
    )


def start_session(
    bank: Sequence[Question],
    requested_count: int,
    minutes: int,
    used_ids: Set[str],
    now: Optional[datetime] = None,
    rng=None
) -> Tuple[ExamSession, Set[str]]:
    """
    Start a new attempt.

    Count is clamped to [1, len(bank)] and minutes to [1, 600]. Questions keep
    their draw order; only their options are shuffled.

    Returns:
        Tuple of (new session, updated used ids)
    """
    count = clamp(requested_count, MIN_QUESTIONS, max(len(bank), MIN_QUESTIONS))
    minutes = clamp(minutes, MIN_MINUTES, MAX_MINUTES)

    selected, updated_used_ids = select_for_attempt(bank, count, used_ids, rng)
    questions = [present_question(q, rng) for q in selected]

    start_time = now or datetime.now()
    session = ExamSession(
        questions=questions,
        start_time=start_time,
        deadline=start_time + timedelta(minutes=minutes)
    )
    return session, updated_used_ids


# ===== ANSWERS, FLAGS, NAVIGATION =====

def record_answer(session: ExamSession, question_id: str, option_key: str):
    """Store the chosen option. The key is not checked against the options."""
    if session.submitted:
        return
    session.answers[question_id] = option_key


def toggle_flag(session: ExamSession, question_id: str):
    """Mark or unmark a question for review."""
    if session.submitted:
        return
    if session.flagged.get(question_id):
        del session.flagged[question_id]
    else:
        session.flagged[question_id] = True


def current_question(session: ExamSession) -> Optional[Question]:
    if not session.questions:
        return None
    return session.questions[session.index]


def go_to(session: ExamSession, number: int) -> int:
    """Move to a 1-based question number, clamped to the exam. Returns the new index."""
    last = max(len(session.questions) - 1, 0)
    session.index = clamp(number - 1, 0, last)
    return session.index


def go_next(session: ExamSession) -> int:
    return go_to(session, session.index + 2)


def go_previous(session: ExamSession) -> int:
    return go_to(session, session.index)


def answered_count(session: ExamSession) -> int:
    return sum(1 for q in session.questions if session.answers.get(q.id))


# ===== SUBMISSION & SCORING =====

def submit(session: ExamSession, now: Optional[datetime] = None, auto: bool = False) -> bool:
    """
    Submit the attempt.

    Idempotent: only the first call has an effect.

    Returns:
        True if this call submitted the session, False if it already was
    """
    if session.submitted:
        return False
    session.submitted = True
    session.submitted_at = now or datetime.now()
    session.auto_submitted = auto
    return True


def _chosen_key(answers: Dict[str, str], question: Question) -> Optional[str]:
    chosen = answers.get(question.id)
    return chosen.upper() if chosen else None


def score(session: ExamSession) -> Score:
    """Count exact matches between stored answers and answer keys."""
    correct = sum(
        1 for q in session.questions
        if _chosen_key(session.answers, q) == q.answer_key
    )
    return Score(correct=correct, total=len(session.questions))


def grade(result: Score, scale_over: float) -> float:
    """
    Project correct/total onto a grading scale.

    The scale is clamped to [1, 1000]; an empty exam grades as 0.
    """
    scale_over = clamp(scale_over, MIN_SCALE, MAX_SCALE)
    return (result.correct / (result.total or 1)) * scale_over


def review(session: ExamSession) -> List[ReviewItem]:
    items = []
    for i, q in enumerate(session.questions):
        chosen = _chosen_key(session.answers, q)
        items.append(ReviewItem(
            number=i + 1,
            question=q,
            chosen=chosen,
            is_correct=chosen == q.answer_key
        ))
    return items


def build_report(session: ExamSession, scale_over: float) -> GradeReport:
    """Collect score, grade and per-question review for the result screen."""
    result = score(session)
    return GradeReport(
        score=result,
        scale_over=clamp(scale_over, MIN_SCALE, MAX_SCALE),
        grade=grade(result, scale_over),
        items=review(session),
        answered_count=answered_count(session),
        flagged_count=sum(1 for q in session.questions if session.flagged.get(q.id)),
        auto_submitted=session.auto_submitted
    )
