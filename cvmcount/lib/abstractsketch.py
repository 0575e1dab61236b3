from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any, Iterable


class AbstractSketch(ABC):
    """Base class for single-pass cardinality sketches."""

    @abstractmethod
    def add(self, item: Any) -> None:
        """Add one stream element to the sketch."""
        pass

    def add_string(self, s: str) -> None:
        """Add a string to the sketch."""
        self.add(s)

    @abstractmethod
    def add_batch(self, items: Iterable[Any]) -> int:
        """Add multiple elements to the sketch, in order.

        Args:
            items: Elements to add to the sketch

        Returns:
            Cardinality estimate after the last element
        """
        pass

    @abstractmethod
    def estimate_cardinality(self) -> int:
        """Estimate the number of distinct elements seen so far."""
        pass
