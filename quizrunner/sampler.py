"""
Random selection primitives.

All functions return new lists and leave their input untouched. Pass a
seeded random.Random as rng for reproducible draws.
"""

import random
from typing import List, Sequence, TypeVar


T = TypeVar("T")


def shuffle(items: Sequence[T], rng=None) -> List[T]:
    """Return a uniformly random permutation of items (Fisher-Yates)."""
    rng = rng or random
    result = list(items)
    for i in range(len(result) - 1, 0, -1):
        j = rng.randint(0, i)
        result[i], result[j] = result[j], result[i]
    return result


def sample_without_replacement(items: Sequence[T], n: int, rng=None) -> List[T]:
    """Return min(n, len(items)) distinct elements in random order."""
    n = max(0, min(n, len(items)))
    return shuffle(items, rng)[:n]
