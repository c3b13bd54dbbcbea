"""
Unit tests for neatdag.pool.species module.
"""

import pytest
import random
from unittest.mock import Mock

from neatdag.genotype     import Genome
from neatdag.pool.species import Species


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def genomes():
    """Five distinguishable stand-ins for genomes."""
    return [Mock(spec=Genome, name=f"genome{i}") for i in range(5)]


# ============================================================================
# Tests
# ============================================================================

class TestSpeciesInit:
    """Test Species construction."""

    def test_without_members(self, genomes):
        spec = Species(genomes[0])
        assert spec.leader is genomes[0]
        assert spec.members == []
        assert spec.is_empty()
        assert len(spec) == 0

    def test_with_members(self, genomes):
        spec = Species(genomes[0], [0, 3])
        assert spec.members == [0, 3]
        assert len(spec) == 2
        assert not spec.is_empty()

    def test_members_are_copied(self, genomes):
        members = [1, 2]
        spec = Species(genomes[0], members)
        spec.add(4)
        assert members == [1, 2]


class TestSpeciesMembers:
    """Test membership updates."""

    def test_add_keeps_order(self, genomes):
        spec = Species(genomes[0])
        for index in (4, 1, 3):
            spec.add(index)
        assert spec.members == [4, 1, 3]


class TestPickLeader:
    """Test leader selection."""

    def test_leader_is_a_member(self, genomes):
        spec = Species(genomes[0], [2, 4])
        rng  = random.Random(0)
        for _ in range(20):
            leader = spec.pick_leader(genomes, rng)
            assert leader in (genomes[2], genomes[4])
            assert spec.leader is leader

    def test_every_member_can_lead(self, genomes):
        spec    = Species(genomes[0], [0, 1, 2, 3, 4])
        rng     = random.Random(1)
        leaders = {id(spec.pick_leader(genomes, rng)) for _ in range(100)}
        assert leaders == {id(genome) for genome in genomes}

    def test_empty_species_has_no_leader(self, genomes):
        spec = Species(genomes[0])
        with pytest.raises(ValueError):
            spec.pick_leader(genomes)
