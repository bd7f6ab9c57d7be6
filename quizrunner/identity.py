"""
Stable content-based question identifiers.

Identical stem, options and answer always produce the same id, so a bank
parsed twice yields the same ids. The hash is FNV-1a (32-bit), which is fast
and good enough for UI keys; it is not a cryptographic digest.
"""

from typing import Iterable

from .models import Option


FNV_OFFSET_BASIS = 0x811C9DC5
FNV_PRIME = 0x01000193
ID_PREFIX = "q_"
_BASE36_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"


def fnv1a_32(text: str) -> int:
    """FNV-1a over the UTF-16 code units of text, as an unsigned 32-bit int."""
    data = text.encode("utf-16-le")
    h = FNV_OFFSET_BASIS
    for i in range(0, len(data), 2):
        h ^= data[i] | (data[i + 1] << 8)
        h = (h * FNV_PRIME) & 0xFFFFFFFF
    return h


def to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36_DIGITS[rem])
    return "".join(reversed(digits))


def canonical_form(stem: str, options: Iterable[Option], answer_key: str) -> str:
    parts = [stem.strip(), answer_key.strip().upper()]
    parts.extend(f"{o.key.strip().upper()}={o.text.strip()}" for o in options)
    return "|".join(parts)


def identify(stem: str, options: Iterable[Option], answer_key: str) -> str:
    """
    Derive the stable id of a question.

    Args:
        stem: Question stem
        options: Normalized options, in original order
        answer_key: Correct option letter

    Returns:
        Identifier of the form ``q_<base36 hash>``
    """
    return ID_PREFIX + to_base36(fnv1a_32(canonical_form(stem, options, answer_key)))
