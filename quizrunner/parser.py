"""
AIKEN format parser.

Turns line-oriented question text into validated Question records:

    What is 2+2?
    A. 3
    B. 4
    ANSWER: B

Records are separated by blank lines. Any violation aborts the whole parse
with a FormatError; no partial bank is returned.
"""

import re
from typing import List, Optional

from .identity import identify
from .models import Option, Question


OPTION_RE = re.compile(r'^([A-Z])[.)]\s*(.+)\s*$', re.IGNORECASE | re.ASCII)
ANSWER_RE = re.compile(r'^ANSWER\s*:\s*([A-Z])\s*$', re.IGNORECASE | re.ASCII)


class FormatError(ValueError):
    """
    Malformed AIKEN input.

    Attributes:
        kind: Machine-readable failure kind
        message: Human-readable description quoting the offending record
        stem_line: First stem line of the offending record, if any
    """

    MISSING_STEM = "missing_stem"
    TOO_FEW_OPTIONS = "too_few_options"
    MISSING_ANSWER = "missing_answer"
    ANSWER_NOT_IN_OPTIONS = "answer_not_in_options"

    def __init__(self, kind: str, message: str, stem_line: Optional[str] = None):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.stem_line = stem_line

    def to_dict(self) -> dict:
        return {"kind": self.kind, "message": self.message}


class _PendingRecord:
    """Lines collected for the question currently being read."""

    def __init__(self):
        self.stem_lines: List[str] = []
        self.options: List[Option] = []
        self.answer_key: Optional[str] = None

    def is_empty(self) -> bool:
        return not self.stem_lines and not self.options and self.answer_key is None

    def has_body(self) -> bool:
        return bool(self.options) or self.answer_key is not None

    def build(self) -> Question:
        """Validate the record and turn it into a Question."""
        stem = "\n".join(self.stem_lines).strip()
        first_line = self.stem_lines[0].strip() if self.stem_lines else None

        if not stem:
            raise FormatError(
                FormatError.MISSING_STEM,
                "Question without a stem: options or ANSWER: found before any question text."
            )

        if len(self.options) < 2:
            raise FormatError(
                FormatError.TOO_FEW_OPTIONS,
                f'"{first_line}" has fewer than 2 options.',
                first_line
            )

        if self.answer_key is None:
            raise FormatError(
                FormatError.MISSING_ANSWER,
                f'"{first_line}" has no ANSWER: line.',
                first_line
            )

        keys = {option.key.upper() for option in self.options}
        if self.answer_key.upper() not in keys:
            raise FormatError(
                FormatError.ANSWER_NOT_IN_OPTIONS,
                f'ANSWER: {self.answer_key} does not match any option in "{first_line}".',
                first_line
            )

        options = tuple(Option(key=o.key.upper(), text=o.text.strip()) for o in self.options)
        answer_key = self.answer_key.upper()
        return Question(
            id=identify(stem, options, answer_key),
            stem=stem,
            options=options,
            answer_key=answer_key
        )


def parse(text: str) -> List[Question]:
    """
    Parse AIKEN text into a question bank.

    Args:
        text: Raw bank contents

    Returns:
        Questions in input order (empty for empty input)

    Raises:
        FormatError: If any record is malformed
    """
    lines = text.replace("\r\n", "\n").replace("\r", "\n").split("\n")

    questions: List[Question] = []
    pending = _PendingRecord()

    def flush():
        nonlocal pending
        if pending.is_empty():
            return
        questions.append(pending.build())
        pending = _PendingRecord()

    for raw in lines:
        raw = raw.rstrip()
        line = raw.strip()

        if not line:
            # Blank lines only end a record once it has options or an answer
            if pending.has_body():
                flush()
            continue

        m_answer = ANSWER_RE.match(line)
        if m_answer:
            pending.answer_key = m_answer.group(1).upper()
            continue

        m_option = OPTION_RE.match(line)
        if m_option:
            pending.options.append(Option(key=m_option.group(1).upper(), text=m_option.group(2)))
            continue

        pending.stem_lines.append(raw)

    flush()
    return questions
