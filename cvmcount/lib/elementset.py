from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any, Hashable, Iterable, Iterator, List, Set
import xxhash # type: ignore


class ElementSet(ABC):
    """Minimal set operations the stream count estimator relies on.

    Concrete containers are interchangeable: pick a hash-backed one for
    production use, or an insertion-ordered one when a run has to be
    reproducible element for element (hash iteration order is not).
    """

    def __init__(self, capacity: int = 0):
        if capacity < 0:
            raise ValueError("capacity must be non-negative")
        self.capacity = capacity

    @classmethod
    def with_capacity(cls, capacity: int) -> 'ElementSet':
        """Create an empty container sized for capacity elements."""
        return cls(capacity)

    @abstractmethod
    def insert(self, elem: Any) -> None:
        """Insert elem if it is not already present, otherwise do nothing."""
        pass

    @abstractmethod
    def contains(self, elem: Any) -> bool:
        """Return True if elem is present."""
        pass

    @abstractmethod
    def remove(self, elem: Any) -> None:
        """Remove elem if it is present, otherwise do nothing."""
        pass

    @abstractmethod
    def __len__(self) -> int:
        pass

    @abstractmethod
    def __iter__(self) -> Iterator[Any]:
        pass

    def __contains__(self, elem: Any) -> bool:
        return self.contains(elem)

    def is_empty(self) -> bool:
        return len(self) == 0

    def survivors(self, keep: Iterable[bool]) -> 'ElementSet':
        """Build a new container holding only the kept elements.

        Args:
            keep: One flag per element, aligned with iteration order

        Returns:
            New container of the same type and capacity
        """
        kept = type(self).with_capacity(self.capacity)
        for elem, flag in zip(self, keep):
            if flag:
                kept.insert(elem)
        return kept

    def __repr__(self) -> str:
        return f"{type(self).__name__}({list(self)!r}, capacity={self.capacity})"


class HashElementSet(ElementSet):
    """Hash-backed container for hashable elements."""

    def __init__(self, capacity: int = 0):
        super().__init__(capacity)
        self._items: Set[Hashable] = set()

    def insert(self, elem: Hashable) -> None:
        self._items.add(elem)

    def contains(self, elem: Hashable) -> bool:
        return elem in self._items

    def remove(self, elem: Hashable) -> None:
        self._items.discard(elem)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Hashable]:
        return iter(self._items)


class ListElementSet(ElementSet):
    """Insertion-ordered container.

    Membership is a linear scan, so this is only meant for small capacities
    and for tests that need a deterministic iteration order. Elements only
    need to support equality.
    """

    def __init__(self, capacity: int = 0):
        super().__init__(capacity)
        self._items: List[Any] = []

    def insert(self, elem: Any) -> None:
        if elem not in self._items:
            self._items.append(elem)

    def contains(self, elem: Any) -> bool:
        return any(item == elem for item in self._items)

    def remove(self, elem: Any) -> None:
        for pos, item in enumerate(self._items):
            if item == elem:
                del self._items[pos]
                return

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Any]:
        return iter(self._items)


class FingerprintElementSet(ElementSet):
    """Container that keeps a 64-bit xxhash fingerprint per element.

    Every retained element costs the same regardless of its size. Two
    elements whose fingerprints collide are counted once. Iterating yields
    fingerprints, not the original elements.
    """

    def __init__(self, capacity: int = 0, seed: int = 42):
        super().__init__(capacity)
        self.seed = seed
        self._fingerprints: Set[int] = set()

    @classmethod
    def with_capacity(cls, capacity: int, seed: int = 42) -> 'FingerprintElementSet':
        return cls(capacity, seed=seed)

    @staticmethod
    def _to_bytes(elem: Any) -> bytes:
        """Byte representation used for hashing.

        Type prefixes keep 1, "1" and b"1" apart.
        """
        if isinstance(elem, bytes):
            return b"b" + elem
        if isinstance(elem, str):
            return b"s" + elem.encode()
        if isinstance(elem, int) and -(1 << 127) <= elem < (1 << 127):
            return b"i" + elem.to_bytes(16, byteorder='little', signed=True)
        return b"r" + repr(elem).encode()

    def fingerprint(self, elem: Any) -> int:
        """64-bit fingerprint of elem under this container's seed."""
        hasher = xxhash.xxh64(seed=self.seed)
        hasher.update(self._to_bytes(elem))
        return hasher.intdigest()

    def insert(self, elem: Any) -> None:
        self._fingerprints.add(self.fingerprint(elem))

    def contains(self, elem: Any) -> bool:
        return self.fingerprint(elem) in self._fingerprints

    def remove(self, elem: Any) -> None:
        self._fingerprints.discard(self.fingerprint(elem))

    def __len__(self) -> int:
        return len(self._fingerprints)

    def __iter__(self) -> Iterator[int]:
        return iter(self._fingerprints)

    def survivors(self, keep: Iterable[bool]) -> 'FingerprintElementSet':
        # Fingerprints are copied as-is, re-hashing them would change them
        kept = type(self).with_capacity(self.capacity, seed=self.seed)
        kept._fingerprints = {fp for fp, flag in zip(self._fingerprints, keep) if flag}
        return kept
