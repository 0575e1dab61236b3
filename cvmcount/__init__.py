"""
cvmcount - Python Library for Distinct-Count Estimation over Data Streams
"""

from cvmcount.lib.estimator import StreamCountEstimator, StepOutcome, capacity_for
from cvmcount.lib.elementset import ElementSet, HashElementSet, ListElementSet, FingerprintElementSet
from cvmcount.lib.errors import CountError, WrongInitialization, MessageError
from cvmcount.lib.randomness import seed_global_rng

__version__ = '0.1.0'

__all__ = [
    'StreamCountEstimator',
    'StepOutcome',
    'capacity_for',
    'ElementSet',
    'HashElementSet',
    'ListElementSet',
    'FingerprintElementSet',
    'CountError',
    'WrongInitialization',
    'MessageError',
    'seed_global_rng',
]
