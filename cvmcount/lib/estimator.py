from __future__ import annotations
import math
import sys
import warnings
from enum import Enum
from typing import Any, Iterable, Optional, Type
import numpy as np # type: ignore
from cvmcount.lib.abstractsketch import AbstractSketch
from cvmcount.lib.elementset import ElementSet, HashElementSet
from cvmcount.lib.errors import MessageError, in_unit_interval
from cvmcount.lib.randomness import Bernoulli, resolve_rng

# Upper bound on rebalance rejections for a single element. Each attempt
# succeeds with probability >= 1/2 once capacity >= 2, so hitting this means
# the estimator cannot make room.
MAX_RETRIES = 10_000


def capacity_for(epsilon: float, delta: float, stream_length: int) -> int:
    """Retained-set size needed for an (epsilon, delta) guarantee.

    Computes ceil(12 / epsilon^2 * log2(8 * stream_length / delta)) with
    float semantics. Results that do not fit saturate: +inf becomes
    sys.maxsize, while negative values, -inf and nan become 0.

    Args:
        epsilon: Relative error bound
        delta: Failure probability
        stream_length: Upper bound on the number of elements processed

    Returns:
        Capacity as a non-negative integer
    """
    try:
        length = float(stream_length)
    except OverflowError:
        # Integers beyond the float range
        length = math.inf

    with np.errstate(divide='ignore', invalid='ignore', over='ignore'):
        raw = np.ceil(
            np.float64(12.0) / np.float64(epsilon) ** 2
            * np.log2(np.float64(8.0) * np.float64(length) / np.float64(delta))
        )
    if np.isnan(raw) or raw <= 0:
        return 0
    if raw >= sys.maxsize:
        return sys.maxsize
    return int(raw)


class StepOutcome(Enum):
    """Result of one attempt at processing a stream element."""
    PROCESSED = "processed"
    RETRY = "retry"


class StreamCountEstimator(AbstractSketch):
    """Single-pass distinct-count estimator with bounded memory.

    Keeps at most `capacity` stream elements. Each incoming element is kept
    with probability 1/sampling_round; whenever the retained set fills up,
    every retained element survives a fair coin flip and the sampling round
    doubles. The estimate is len(retained) * sampling_round.
    """

    def __init__(self,
                 capacity: int,
                 element_set: Type[ElementSet] = HashElementSet,
                 rng: Optional[np.random.Generator] = None,
                 debug: bool = False):
        """Initialize an estimator with an explicit capacity.

        Args:
            capacity: Maximum number of retained elements
            element_set: ElementSet subclass used for the retained elements
            rng: Generator used when a call does not pass one explicitly.
                 Defaults to the process-wide generator.
            debug: Whether to print rebalance information
        """
        super().__init__()
        if isinstance(capacity, bool) or not isinstance(capacity, (int, np.integer)):
            raise TypeError("capacity must be an integer")
        if capacity < 0:
            raise ValueError("capacity must be non-negative")
        if not (isinstance(element_set, type) and issubclass(element_set, ElementSet)):
            raise TypeError("element_set must be an ElementSet subclass")

        self._capacity = int(capacity)
        self.element_set = element_set
        self.rng = rng
        self.debug = debug
        self.epsilon: Optional[float] = None
        self.delta: Optional[float] = None
        self.stream_length: Optional[int] = None

        self._elements = element_set.with_capacity(self._capacity)
        self._sampling_round = 1
        self._rounds = 0
        self._retries = 0

    @classmethod
    def from_accuracy(cls,
                      epsilon: float,
                      delta: float,
                      stream_length: int,
                      element_set: Type[ElementSet] = HashElementSet,
                      rng: Optional[np.random.Generator] = None,
                      debug: bool = False) -> 'StreamCountEstimator':
        """Initialize an estimator from accuracy parameters.

        Args:
            epsilon: Relative error bound, in [0, 1]
            delta: Failure probability, in [0, 1]
            stream_length: Upper bound on the number of elements to process
            element_set: ElementSet subclass used for the retained elements
            rng: Default generator for this estimator
            debug: Whether to print rebalance information

        Raises:
            WrongInitialization: If epsilon or delta is outside [0, 1]
        """
        in_unit_interval(epsilon)
        in_unit_interval(delta)
        if stream_length < 0:
            raise ValueError("stream_length must be non-negative")

        if epsilon == 0 or delta == 0 or stream_length == 0:
            warnings.warn(
                f"Degenerate accuracy parameters (epsilon={epsilon}, delta={delta}, "
                f"stream_length={stream_length}); capacity saturates.",
                RuntimeWarning)

        capacity = capacity_for(epsilon, delta, stream_length)
        if debug:
            print(f"epsilon={epsilon}, delta={delta}, stream_length={stream_length} "
                  f"-> capacity={capacity}")

        estimator = cls(capacity, element_set=element_set, rng=rng, debug=debug)
        estimator.epsilon = epsilon
        estimator.delta = delta
        estimator.stream_length = stream_length
        return estimator

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def sampling_round(self) -> int:
        return self._sampling_round

    @property
    def elements(self) -> ElementSet:
        """The retained elements (do not mutate)."""
        return self._elements

    @property
    def rounds(self) -> int:
        """Number of committed rebalances."""
        return self._rounds

    @property
    def retries(self) -> int:
        """Number of rejected rebalances."""
        return self._retries

    def _rng_for(self, rng: Optional[np.random.Generator]) -> np.random.Generator:
        return rng if rng is not None else resolve_rng(self.rng)

    def process_element(self, elem: Any,
                        rng: Optional[np.random.Generator] = None) -> StepOutcome:
        """Run one attempt at processing elem.

        Resamples the membership of elem under the current round, then
        rebalances if the retained set is full. When the rebalance fails to
        free any space it is discarded and RETRY is returned; the caller has
        to process the same element again.

        Args:
            elem: Stream element
            rng: Generator to draw from (defaults to the estimator's)

        Returns:
            StepOutcome.PROCESSED or StepOutcome.RETRY

        Raises:
            MessageError: If the estimator has capacity 0, or the inclusion
                coin cannot be built
        """
        if self._capacity == 0:
            raise MessageError("Cannot process elements with capacity 0")
        rng = self._rng_for(rng)
        coin = Bernoulli.from_ratio(1, self._sampling_round)
        if coin.sample(rng):
            self._elements.insert(elem)
        elif self._elements.contains(elem):
            self._elements.remove(elem)

        if len(self._elements) == self._capacity:
            return self._rebalance(rng)
        return StepOutcome.PROCESSED

    def _rebalance(self, rng: np.random.Generator) -> StepOutcome:
        """Keep each retained element with probability 1/2 and double the round."""
        half = Bernoulli.from_ratio(1, 2)
        keep = half.sample_many(rng, len(self._elements))
        halved = self._elements.survivors(keep)

        if len(halved) == self._capacity:
            self._retries += 1
            if self.debug:
                print(f"Rebalance rejected at round {self._sampling_round}: "
                      f"all {self._capacity} elements survived")
            return StepOutcome.RETRY

        if self.debug:
            print(f"Rebalance: round {self._sampling_round} -> {self._sampling_round * 2}, "
                  f"{len(self._elements)} -> {len(halved)} elements")
        self._elements = halved
        self._sampling_round *= 2
        self._rounds += 1
        return StepOutcome.PROCESSED

    def add(self, item: Any, rng: Optional[np.random.Generator] = None) -> None:
        """Process one stream element, retrying until it is fully processed.

        Raises:
            MessageError: If the element is still not processed after
                MAX_RETRIES attempts, or the inclusion coin cannot be built
        """
        rng = self._rng_for(rng)
        for _ in range(MAX_RETRIES):
            if self.process_element(item, rng) is StepOutcome.PROCESSED:
                return
        raise MessageError(
            f"Element not processed after {MAX_RETRIES} attempts "
            f"(capacity={self._capacity}, sampling_round={self._sampling_round})")

    def add_string(self, s: str, rng: Optional[np.random.Generator] = None) -> None:
        """Add a string to the estimator."""
        self.add(s, rng)

    def add_batch(self, items: Iterable[Any],
                  rng: Optional[np.random.Generator] = None) -> int:
        """Process every element of items in order.

        Args:
            items: Stream elements
            rng: Generator to draw from (defaults to the estimator's)

        Returns:
            Distinct-count estimate after the last element
        """
        rng = self._rng_for(rng)
        for item in items:
            self.add(item, rng)
        return self.estimate_cardinality()

    def estimate_cardinality(self) -> int:
        """Return len(retained) * sampling_round."""
        return len(self._elements) * self._sampling_round

    def __repr__(self) -> str:
        return (f"StreamCountEstimator(capacity={self._capacity}, "
                f"sampling_round={self._sampling_round}, "
                f"retained={len(self._elements)}, "
                f"element_set={self.element_set.__name__})")
