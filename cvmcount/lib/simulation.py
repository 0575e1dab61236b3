from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple, Type
import numpy as np # type: ignore
from scipy.stats import binomtest # type: ignore
from cvmcount.lib.elementset import ElementSet, HashElementSet
from cvmcount.lib.estimator import StreamCountEstimator


@dataclass
class AccuracyReport:
    """Outcome of repeated estimator runs over streams of known cardinality."""
    true_distinct: int
    epsilon: float
    delta: float
    capacity: int
    estimates: np.ndarray
    relative_errors: np.ndarray
    within_epsilon: int
    trials: int
    confidence_interval: Tuple[float, float]
    sampling_rounds: np.ndarray = field(default_factory=lambda: np.zeros(0, dtype=np.int64))

    @property
    def fraction_within(self) -> float:
        return self.within_epsilon / self.trials

    def meets_guarantee(self) -> bool:
        """True unless the trials rule out success probability >= 1 - delta."""
        return self.confidence_interval[1] >= 1 - self.delta

    def summary(self) -> Dict[str, float]:
        return {
            'true_distinct': self.true_distinct,
            'capacity': self.capacity,
            'mean_estimate': float(np.mean(self.estimates)),
            'mean_relative_error': float(np.mean(self.relative_errors)),
            'max_relative_error': float(np.max(self.relative_errors)),
            'fraction_within_epsilon': self.fraction_within,
            'ci_low': self.confidence_interval[0],
            'ci_high': self.confidence_interval[1],
        }


def simulate_accuracy(true_distinct: int,
                      epsilon: float,
                      delta: float,
                      trials: int = 100,
                      stream_length: Optional[int] = None,
                      seed: Optional[int] = None,
                      repeats: int = 1,
                      element_set: Type[ElementSet] = HashElementSet,
                      confidence_level: float = 0.95) -> AccuracyReport:
    """Run independent estimators over streams with a known distinct count.

    Each trial feeds the integers 0..true_distinct-1, each repeated `repeats`
    times, in a fresh random order.

    Args:
        true_distinct: Number of distinct values in the stream
        epsilon: Relative error bound passed to the estimator
        delta: Failure probability passed to the estimator
        trials: Number of independent runs
        stream_length: Length bound for the capacity formula (defaults to
                       the actual stream length)
        seed: Seed for the whole simulation
        repeats: Occurrences of each distinct value
        element_set: Container used by the estimators
        confidence_level: Level of the Clopper-Pearson interval

    Returns:
        AccuracyReport for the runs
    """
    if true_distinct <= 0:
        raise ValueError("true_distinct must be positive")
    if trials <= 0:
        raise ValueError("trials must be positive")
    if repeats <= 0:
        raise ValueError("repeats must be positive")

    stream = np.repeat(np.arange(true_distinct), repeats)
    if stream_length is None:
        stream_length = len(stream)

    # One independent generator per trial, plus one for shuffling
    children = np.random.SeedSequence(seed).spawn(trials + 1)
    shuffle_rng = np.random.default_rng(children[0])

    estimates = np.zeros(trials, dtype=np.int64)
    rounds = np.zeros(trials, dtype=np.int64)
    capacity = 0
    for i, child in enumerate(children[1:]):
        estimator = StreamCountEstimator.from_accuracy(
            epsilon, delta, stream_length,
            element_set=element_set,
            rng=np.random.default_rng(child))
        capacity = estimator.capacity
        estimates[i] = estimator.add_batch(shuffle_rng.permutation(stream).tolist())
        rounds[i] = estimator.sampling_round

    relative_errors = np.abs(estimates - true_distinct) / true_distinct
    within = int(np.count_nonzero(relative_errors <= epsilon))
    ci = binomtest(within, trials).proportion_ci(
        confidence_level=confidence_level, method='exact')

    return AccuracyReport(
        true_distinct=true_distinct,
        epsilon=epsilon,
        delta=delta,
        capacity=capacity,
        estimates=estimates,
        relative_errors=relative_errors,
        within_epsilon=within,
        trials=trials,
        confidence_interval=(float(ci.low), float(ci.high)),
        sampling_rounds=rounds,
    )


def accuracy_sweep(distinct_counts: Sequence[int],
                   epsilon: float,
                   delta: float,
                   trials: int = 100,
                   stream_length: Optional[int] = None,
                   seed: Optional[int] = None,
                   repeats: int = 1) -> List[AccuracyReport]:
    """Run simulate_accuracy for each distinct count, in order.

    With stream_length fixed, every run uses the same capacity, so the
    reports show how the error behaves as the true cardinality grows.
    """
    seeds = np.random.SeedSequence(seed).generate_state(len(distinct_counts))
    return [
        simulate_accuracy(n, epsilon, delta, trials=trials,
                          stream_length=stream_length, seed=int(s), repeats=repeats)
        for n, s in zip(distinct_counts, seeds)
    ]
