"""
Seeded random source for city generation.

A seed string is hashed into a NumPy Generator. One instance is passed
through every stage of a run, so the same seed reproduces the same city.
Stages that need one value per cell draw whole arrays at once.
"""

import hashlib
import uuid
from typing import Sequence, TypeVar

import numpy as np

T = TypeVar("T")


def random_seed() -> str:
    """Create a fresh seed string for unseeded generation."""
    return uuid.uuid4().hex[:12]


def seed_to_entropy(seed: str) -> int:
    """Stable 128-bit integer derived from a seed string."""
    digest = hashlib.sha256(seed.encode("utf-8")).digest()
    return int.from_bytes(digest[:16], "big")


class CityPRNG:
    """
    Seedable random source.

    `call_count` is the number of values drawn so far; a source with a
    non-zero count no longer matches a fresh one built from its seed.
    """

    def __init__(self, seed):
        self.seed = str(seed)
        self.call_count = 0
        self._generator = np.random.default_rng(seed_to_entropy(self.seed))

    @property
    def fresh(self) -> bool:
        return self.call_count == 0

    def random(self) -> float:
        """Next value in [0, 1)."""
        self.call_count += 1
        return float(self._generator.random())

    def random_array(self, count: int) -> np.ndarray:
        """`count` values in [0, 1), drawn in order."""
        self.call_count += count
        return self._generator.random(count)

    def randint(self, count: int) -> int:
        """Integer in [0, count)."""
        return int(self.random() * count)

    def chance(self, probability: float) -> bool:
        """True with the given probability; certain outcomes draw nothing."""
        if probability >= 1:
            return True
        if probability <= 0:
            return False
        return self.random() < probability

    def choice(self, options: Sequence[T]) -> T:
        if not options:
            raise IndexError("Cannot choose from an empty sequence")
        return options[self.randint(len(options))]
