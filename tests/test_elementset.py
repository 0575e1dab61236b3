from __future__ import annotations
import pytest # type: ignore
from hypothesis import settings, strategies as st # type: ignore
from hypothesis.stateful import RuleBasedStateMachine, rule, invariant # type: ignore
from cvmcount.lib.elementset import (ElementSet, HashElementSet, ListElementSet,
                                     FingerprintElementSet)

CONTAINERS = [HashElementSet, ListElementSet, FingerprintElementSet]


@pytest.mark.quick
@pytest.mark.parametrize("cls", CONTAINERS)
class TestElementSetQuick:
    """Quick tests shared by every container."""

    def test_with_capacity_empty(self, cls):
        """Test that a new container is empty and remembers its capacity."""
        container = cls.with_capacity(10)
        assert isinstance(container, ElementSet)
        assert len(container) == 0
        assert container.is_empty()
        assert container.capacity == 10

    def test_zero_capacity(self, cls):
        """Test that capacity 0 is accepted."""
        container = cls.with_capacity(0)
        assert container.capacity == 0
        assert container.is_empty()

    def test_insert_idempotent(self, cls):
        """Test that inserting the same element twice keeps one copy."""
        container = cls.with_capacity(4)
        container.insert("a")
        container.insert("a")
        assert len(container) == 1
        assert container.contains("a")
        assert "a" in container

    def test_remove(self, cls):
        """Test removing present and absent elements."""
        container = cls.with_capacity(4)
        container.insert(1)
        container.insert(2)
        container.remove(1)
        assert not container.contains(1)
        assert container.contains(2)
        container.remove(99)
        assert len(container) == 1

    def test_iterate_visits_each_once(self, cls):
        """Test that iteration is finite, restartable and visits each element once."""
        container = cls.with_capacity(8)
        for value in [3, 1, 2, 3, 1]:
            container.insert(value)
        first = list(container)
        second = list(container)
        assert len(first) == 3
        assert len(set(first)) == 3
        assert sorted(first) == sorted(second)

    def test_survivors(self, cls):
        """Test that survivors keeps exactly the flagged elements."""
        container = cls.with_capacity(5)
        for value in range(5):
            container.insert(value)
        flags = [i % 2 == 0 for i in range(5)]
        expected = [item for item, keep in zip(container, flags) if keep]

        kept = container.survivors(flags)

        assert type(kept) is cls
        assert kept.capacity == 5
        assert sorted(kept) == sorted(expected)
        # The original is untouched
        assert len(container) == 5

    def test_negative_capacity(self, cls):
        """Test that a negative capacity is rejected."""
        with pytest.raises(ValueError):
            cls.with_capacity(-1)


@pytest.mark.quick
class TestListElementSetQuick:
    """Tests specific to the insertion-ordered container."""

    def test_insertion_order(self):
        container = ListElementSet.with_capacity(5)
        for value in ["c", "a", "b", "a"]:
            container.insert(value)
        assert list(container) == ["c", "a", "b"]
        container.remove("a")
        assert list(container) == ["c", "b"]

    def test_unhashable_elements(self):
        """Elements only need equality, not hashing."""
        container = ListElementSet.with_capacity(3)
        container.insert([1, 2])
        container.insert([1, 2])
        container.insert({"k": "v"})
        assert len(container) == 2
        assert container.contains([1, 2])
        container.remove([1, 2])
        assert not container.contains([1, 2])


@pytest.mark.quick
class TestFingerprintElementSetQuick:
    """Tests specific to the fingerprinting container."""

    def test_types_do_not_collide(self):
        container = FingerprintElementSet.with_capacity(3)
        container.insert(1)
        container.insert("1")
        container.insert(b"1")
        assert len(container) == 3

    def test_fingerprint_depends_on_seed(self):
        a = FingerprintElementSet.with_capacity(1, seed=1)
        b = FingerprintElementSet.with_capacity(1, seed=2)
        assert a.fingerprint("item") != b.fingerprint("item")
        assert a.fingerprint("item") == a.fingerprint("item")

    def test_large_and_other_elements(self):
        container = FingerprintElementSet.with_capacity(3)
        container.insert(1 << 200)
        container.insert((1, "x"))
        assert container.contains(1 << 200)
        assert container.contains((1, "x"))
        assert len(container) == 2

    def test_survivors_keeps_fingerprints(self):
        container = FingerprintElementSet.with_capacity(4, seed=7)
        for value in ["a", "b", "c"]:
            container.insert(value)
        kept = container.survivors([True] * 3)
        assert kept.seed == 7
        for value in ["a", "b", "c"]:
            assert kept.contains(value)


def make_model_machine(cls):
    """Build a state machine checking cls against a plain set model."""

    class ElementSetMachine(RuleBasedStateMachine):
        def __init__(self):
            super().__init__()
            self.container = cls.with_capacity(100)
            self.model = set()

        @rule(value=st.integers(min_value=0, max_value=20))
        def insert(self, value):
            self.container.insert(value)
            self.model.add(value)

        @rule(value=st.integers(min_value=0, max_value=20))
        def remove(self, value):
            self.container.remove(value)
            self.model.discard(value)

        @rule(value=st.integers(min_value=0, max_value=20))
        def contains(self, value):
            assert self.container.contains(value) == (value in self.model)

        @invariant()
        def sizes_agree(self):
            assert len(self.container) == len(self.model)
            assert self.container.is_empty() == (not self.model)

    ElementSetMachine.TestCase.settings = settings(max_examples=50, stateful_step_count=50)
    return ElementSetMachine


TestHashElementSetModel = make_model_machine(HashElementSet).TestCase
TestListElementSetModel = make_model_machine(ListElementSet).TestCase
TestFingerprintElementSetModel = make_model_machine(FingerprintElementSet).TestCase
