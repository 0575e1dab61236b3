from __future__ import annotations
import math


class CountError(Exception):
    """Base class for errors raised by the distinct-count estimator."""


class WrongInitialization(CountError, ValueError):
    """Raised when an estimator is built from out-of-range accuracy parameters."""


class MessageError(CountError):
    """Wraps a failure to build or run a sampling distribution.

    Reaching this during normal operation means an internal invariant was
    broken (for example a sampling round of 0), so it is never retried.
    """


def in_unit_interval(value: float) -> None:
    """Raise WrongInitialization if value lies outside [0, 1].

    Args:
        value: Probability-like parameter to check. 0 itself is accepted.
    """
    if math.isnan(value):
        raise WrongInitialization(f"Input {value} is not a number.")
    if value < 0.0:
        raise WrongInitialization(f"Input {value} is negative.")
    if value > 1.0:
        raise WrongInitialization(f"Input {value} is larger than 1.")
