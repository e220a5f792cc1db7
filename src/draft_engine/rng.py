"""Injectable randomness.

Every random decision in the engine, the pack generators and the bots goes
through an ``rng`` object with a ``random() -> float in [0, 1)`` method.
``random.Random`` satisfies it; tests pass a seeded instance or a stub that
replays fixed fractions.
"""

import random
from typing import List, Optional, Protocol, Sequence, TypeVar

T = TypeVar("T")


class RandomSource(Protocol):
    def random(self) -> float: ...


_shared_rng = random.Random()


def resolve_rng(rng: Optional[RandomSource]) -> RandomSource:
    """Use the caller's RNG, or a process-wide one when none is given."""
    return rng if rng is not None else _shared_rng


def weighted_random_index(
    weights: Sequence[float], rng: Optional[RandomSource] = None
) -> int:
    """Return an index with probability proportional to its weight.

    ``weighted_random_index([6, 1])`` yields 0 about 85.7% of the time.
    """
    roll = resolve_rng(rng).random() * sum(weights)
    for index, weight in enumerate(weights):
        roll -= weight
        if roll <= 0:
            return index
    return len(weights) - 1


def random_index(length: int, rng: Optional[RandomSource] = None) -> int:
    """Uniform index into a sequence of ``length`` items."""
    return min(int(resolve_rng(rng).random() * length), length - 1)


def shuffle_cards(items: Sequence[T], rng: Optional[RandomSource] = None) -> List[T]:
    """Fisher-Yates shuffle into a new list; the input is left untouched."""
    rng = resolve_rng(rng)
    result = list(items)
    for i in range(len(result) - 1, 0, -1):
        j = random_index(i + 1, rng)
        result[i], result[j] = result[j], result[i]
    return result
