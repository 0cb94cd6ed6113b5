"""Tests for simulation/junction_resolver.py."""

import pytest
from simulation.junction_resolver import JunctionConflictError, JunctionResolver
from simulation.node_allocator import NodeAllocator
from tests.conftest import make_junction


@pytest.fixture
def allocator():
    return NodeAllocator()


class TestJunctionNets:
    def test_drops_blank_ground_and_duplicates(self):
        junction = make_junction("J1", "A", "", "GND", "A", " B ")
        assert JunctionResolver.junction_nets(junction) == ["A", "B"]


class TestResolve:
    def test_fresh_nets_share_one_index(self, allocator):
        resolver = JunctionResolver(allocator)
        node = resolver.resolve(make_junction("J1", "A", "B", "C"))
        assert node == 1
        assert allocator.lookup("A") == allocator.lookup("B") == allocator.lookup("C") == 1

    def test_prefers_already_numbered_net(self, allocator):
        allocator.touch("X")
        allocator.touch("B")
        resolver = JunctionResolver(allocator)
        node = resolver.resolve(make_junction("J1", "A", "B"))
        assert node == 2
        assert allocator.lookup("A") == 2

    def test_single_net_is_a_no_op(self, allocator):
        resolver = JunctionResolver(allocator)
        assert resolver.resolve(make_junction("J1", "A")) is None
        assert allocator.lookup("A") is None

    def test_ground_only_junction_is_a_no_op(self, allocator):
        resolver = JunctionResolver(allocator)
        assert resolver.resolve(make_junction("J1", "GND", "0")) is None

    def test_conflicting_nets_raise(self, allocator):
        allocator.touch("A")
        allocator.touch("B")
        resolver = JunctionResolver(allocator)
        with pytest.raises(JunctionConflictError) as excinfo:
            resolver.resolve(make_junction("J1", "A", "B"))
        assert excinfo.value.nodes == {"A": 1, "B": 2}
        assert "J1" in str(excinfo.value)

    def test_conflict_is_a_value_error(self):
        assert issubclass(JunctionConflictError, ValueError)

    def test_nets_already_merged_do_not_conflict(self, allocator):
        allocator.touch("A")
        allocator.alias("B", 1)
        resolver = JunctionResolver(allocator)
        assert resolver.resolve(make_junction("J2", "A", "B", "C")) == 1
        assert allocator.lookup("C") == 1
