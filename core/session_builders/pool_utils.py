"""
Pool utilities for the queue builder.

Randomness always comes from an injectable random.Random so queue order
is reproducible in tests.
"""

from __future__ import annotations

import random
from typing import Optional, Sequence, TypeVar


T = TypeVar("T")


def shuffled(items: Sequence[T], rng: Optional[random.Random] = None) -> list[T]:
    """
    Return a uniformly shuffled copy (Fisher-Yates via random.shuffle).
    """
    result = list(items)
    (rng or random).shuffle(result)
    return result


def take(items: Sequence[T], count: int) -> list[T]:
    """First `count` items; a non-positive count yields an empty list."""
    if count <= 0:
        return []
    return list(items[:count])
