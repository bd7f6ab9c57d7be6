"""
AIKEN Quiz Runner - Core Package

This package contains the core components for running timed multiple-choice exams:
- parser: AIKEN text format parsing and validation
- identity: Stable content-based question ids
- sampler: Random shuffling and sampling primitives
- session: Exam selection, option re-keying, scoring and grading
- timer: Countdown with auto-submit on expiry
- flow: Upload/Setup/Exam/Result lifecycle
"""

__version__ = "1.0.0"
