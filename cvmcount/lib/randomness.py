from __future__ import annotations
from typing import Optional
import numpy as np # type: ignore
from cvmcount.lib.errors import MessageError

# Process-wide generator, created on first use
_GLOBAL_RNG: Optional[np.random.Generator] = None


def global_rng() -> np.random.Generator:
    """Return the process-wide random generator, creating it if needed."""
    global _GLOBAL_RNG
    if _GLOBAL_RNG is None:
        _GLOBAL_RNG = np.random.default_rng()
    return _GLOBAL_RNG


def seed_global_rng(seed: Optional[int] = None) -> np.random.Generator:
    """Replace the process-wide generator with a freshly seeded one.

    Args:
        seed: Seed for the new generator (None draws fresh OS entropy)

    Returns:
        The new global generator
    """
    global _GLOBAL_RNG
    _GLOBAL_RNG = np.random.default_rng(seed)
    return _GLOBAL_RNG


def resolve_rng(rng: Optional[np.random.Generator] = None) -> np.random.Generator:
    """Return rng itself, or the process-wide generator when rng is None."""
    return rng if rng is not None else global_rng()


class Bernoulli:
    """Biased coin that comes up True with probability numerator/denominator."""

    def __init__(self, p: float):
        self.p = p

    @classmethod
    def from_ratio(cls, numerator: int, denominator: int) -> 'Bernoulli':
        """Build a coin from an integer ratio.

        Args:
            numerator: Number of favourable outcomes
            denominator: Total number of outcomes, must be positive

        Returns:
            Bernoulli coin with p = numerator / denominator

        Raises:
            MessageError: If the ratio is not a valid probability
        """
        if denominator == 0:
            raise MessageError(
                f"Invalid ratio {numerator}/{denominator}: denominator is zero")
        if numerator < 0 or denominator < 0 or numerator > denominator:
            raise MessageError(
                f"Invalid ratio {numerator}/{denominator}: not a probability")
        return cls(numerator / denominator)

    def sample(self, rng: np.random.Generator) -> bool:
        """Flip the coin once."""
        return bool(rng.random() < self.p)

    def sample_many(self, rng: np.random.Generator, n: int) -> np.ndarray:
        """Flip the coin n times independently.

        Returns:
            Boolean array of length n
        """
        return rng.random(n) < self.p

    def __repr__(self) -> str:
        return f"Bernoulli(p={self.p})"
