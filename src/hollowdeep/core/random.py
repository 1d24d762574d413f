from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import List, Sequence, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class RandomSource:
    """
    A thin wrapper around random.Random owned by the caller.

    - centralizes the draws used by floor generation (ints, floats, booleans)
    - supports deterministic seeding so a run can be replayed from its seed
    - never reseeds itself; generation only borrows it for one call
    """

    seed: int | None = None

    def __post_init__(self) -> None:
        if self.seed is not None:
            self._rng = random.Random(self.seed)
            logger.debug("Initialized RandomSource with deterministic seed=%s", self.seed)
        else:
            # Non-deterministic seed using system random state
            self._rng = random.Random()
            logger.debug("Initialized RandomSource with non-deterministic seed")

    @classmethod
    def from_seed(cls, seed: int) -> "RandomSource":
        return cls(seed=seed)

    def randint(self, a: int, b: int) -> int:
        """Uniform integer in the inclusive range [a, b]."""
        return self._rng.randint(a, b)

    def randrange(self, start: int, stop: int) -> int:
        """Uniform integer in the half-open range [start, stop)."""
        return self._rng.randrange(start, stop)

    def random(self) -> float:
        return self._rng.random()

    def chance(self, probability: float) -> bool:
        """Boolean draw that is True with the given probability.

        Always consumes exactly one float so call sequences stay aligned
        regardless of the probability value.
        """
        roll = self._rng.random()
        if probability <= 0.0:
            return False
        if probability >= 1.0:
            return True
        return roll < probability

    def choice(self, seq: Sequence[T]) -> T:
        if not seq:
            raise ValueError("RandomSource.choice() received an empty sequence")
        return seq[self._rng.randrange(0, len(seq))]

    def shuffle(self, items: List[T]) -> None:
        self._rng.shuffle(items)


__all__ = ["RandomSource"]
