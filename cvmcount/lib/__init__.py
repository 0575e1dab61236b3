from .errors import CountError, WrongInitialization, MessageError
from .elementset import ElementSet, HashElementSet, ListElementSet, FingerprintElementSet
from .randomness import Bernoulli, global_rng, seed_global_rng, resolve_rng
from .abstractsketch import AbstractSketch
from .estimator import StreamCountEstimator, StepOutcome, capacity_for, MAX_RETRIES
from .simulation import AccuracyReport, simulate_accuracy, accuracy_sweep

__all__ = [
    'CountError',
    'WrongInitialization',
    'MessageError',
    'ElementSet',
    'HashElementSet',
    'ListElementSet',
    'FingerprintElementSet',
    'Bernoulli',
    'global_rng',
    'seed_global_rng',
    'resolve_rng',
    'AbstractSketch',
    'StreamCountEstimator',
    'StepOutcome',
    'capacity_for',
    'MAX_RETRIES',
    'AccuracyReport',
    'simulate_accuracy',
    'accuracy_sweep',
]
