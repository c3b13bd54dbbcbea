"""
Unit tests for InnovationTracker class.

Tests cover initialization, innovation number assignment,
connection splits and the independence of separate trackers.
"""

import pytest

from neatdag.genotype.innovation_tracker import InnovationTracker


# ============================================================================
# Test Fixtures
# ============================================================================

@pytest.fixture
def tracker():
    """Tracker for genomes with 3 inputs and 2 outputs."""
    return InnovationTracker(3, 2)


# ============================================================================
# Test: Initialization
# ============================================================================

class TestInnovationTrackerInitialize:
    """Test InnovationTracker initialization."""

    def test_fixed_connections_are_preseeded(self, tracker):
        """Test that input/bias to output connections use index arithmetic."""
        # inputs 0..2, bias 3, outputs 4..5
        assert tracker.get_innovation_number(0, 4) == 0
        assert tracker.get_innovation_number(0, 5) == 1
        assert tracker.get_innovation_number(2, 5) == 5
        assert tracker.get_innovation_number(3, 4) == 6
        assert tracker.num_innovations == 8

    def test_first_new_innovation_follows_fixed_block(self, tracker):
        """Test that new connections are numbered from (I + 1) * O."""
        assert tracker.get_innovation_number(0, 6) == 8

    def test_first_split_node_follows_fixed_nodes(self, tracker):
        """Test that hidden node IDs start at I + O + 1."""
        assert tracker.get_split_node(0, 4) == 6

    def test_trackers_are_independent(self):
        """Test that two trackers never share state."""
        tracker1 = InnovationTracker(2, 1)
        tracker2 = InnovationTracker(2, 1)
        tracker1.get_split_IDs(0, 3)
        tracker1.get_innovation_number(1, 4)
        assert tracker2.get_split_IDs(0, 3) == tracker1.get_split_IDs(0, 3)
        assert tracker2.num_split_nodes == 1


# ============================================================================
# Test: Lookup-or-create
# ============================================================================

class TestInnovationNumbers:
    """Test innovation number assignment."""

    def test_same_connection_same_number(self, tracker):
        first = tracker.get_innovation_number(1, 7)
        assert tracker.get_innovation_number(1, 7) == first

    def test_direction_matters(self, tracker):
        assert tracker.get_innovation_number(6, 7) != tracker.get_innovation_number(7, 6)

    def test_numbers_are_sequential(self, tracker):
        numbers = [tracker.get_innovation_number(0, node) for node in range(10, 15)]
        assert numbers == list(range(8, 13))


class TestSplits:
    """Test node IDs and innovation numbers for connection splits."""

    def test_split_ids(self, tracker):
        node_id, innov1, innov2 = tracker.get_split_IDs(0, 4)
        assert node_id == 6
        assert (innov1, innov2) == (8, 9)
        assert tracker.edge_innovations[(0, 6)] == 8
        assert tracker.edge_innovations[(6, 4)] == 9

    def test_split_is_idempotent(self, tracker):
        """Test that splitting the same connection twice returns the same IDs."""
        first = tracker.get_split_IDs(0, 4)
        tracker.get_split_IDs(1, 4)
        assert tracker.get_split_IDs(0, 4) == first
        assert tracker.num_split_nodes == 2

    def test_different_splits_get_different_nodes(self, tracker):
        node1, _, _ = tracker.get_split_IDs(0, 4)
        node2, _, _ = tracker.get_split_IDs(0, 5)
        assert node1 != node2
