"""
Integration tests for basic evolution.

These tests run whole trials on the XOR problem and check that the
invariants linking genomes, species and the innovation tracker hold
across many generations. They use fixed random seeds for reproducibility.
"""

import pytest
import random

from neatdag.genotype import Genome
from neatdag.pool     import Population
from neatdag.run      import Config, Trial


XOR_INPUTS = [[0.0, 0.0], [0.0, 1.0], [1.0, 0.0], [1.0, 1.0]]


def xor_metric(inputs, outputs):
    target = float(int(inputs[0]) ^ int(inputs[1]))
    return 1.0 - (outputs[0] - target) ** 2


# ============================================================================
# Helper Trial Class for XOR
# ============================================================================

class TrialXORTest(Trial):
    """Simplified XOR trial for integration testing."""

    def __init__(self, config, rng):
        super().__init__(config, rng=rng, suppress_output=True)

    def _evaluate_fitness(self, genome: Genome) -> float:
        return sum(xor_metric(inputs, genome.evaluate(inputs)) for inputs in XOR_INPUTS)


@pytest.fixture
def xor_config():
    config = Config()
    config.population_size        = 60
    config.num_inputs             = 2
    config.num_outputs            = 1
    config.max_number_generations = 25
    return config


def assert_consistent_history(population: Population):
    """The same gene (endpoints) carries the same innovation number everywhere."""
    tracker = population.innovations
    for genome in population.genomes:
        for gene in genome.flatten():
            assert tracker.edge_innovations[(gene.from_id, gene.to_id)] == gene.innovation
        for node in genome.nodes[genome.num_inputs + genome.num_outputs + 1:]:
            assert node.global_id in tracker.split_innovations.values()


# ============================================================================
# Test Basic Evolution
# ============================================================================

class TestBasicEvolution:
    """End-to-end runs."""

    def test_xor_trial_runs(self, xor_config):
        trial   = TrialXORTest(xor_config, random.Random(42))
        fittest = trial.run()

        population = trial._population
        assert population.generation == 25
        assert len(population.genomes) == 60
        assert not fittest.check_cycle()
        assert 0.0 <= max(trial.fitness) <= 4.0
        assert_consistent_history(population)

    def test_topology_grows(self, xor_config):
        trial = TrialXORTest(xor_config, random.Random(7))
        trial.run()
        genomes = trial._population.genomes
        assert any(genome.num_hidden > 0 for genome in genomes)

    def test_population_loop_with_evaluate_all(self, xor_config):
        """Drive a population directly, scoring one random case per generation."""
        rng        = random.Random(1)
        population = Population(xor_config, rng=rng)
        for _ in range(15):
            inputs  = [float(rng.randint(0, 1)), float(rng.randint(0, 1))]
            fitness = population.evaluate_all(inputs, xor_metric)
            population.next_generation(fitness)

            indices = sorted(i for spec in population.species for i in spec.members)
            assert indices == list(range(xor_config.population_size))
            assert all(not genome.check_cycle() for genome in population.genomes)
        assert_consistent_history(population)

    def test_same_seed_same_result(self, xor_config):
        xor_config.max_number_generations = 5
        fittest1 = TrialXORTest(xor_config, random.Random(3)).run()
        fittest2 = TrialXORTest(xor_config, random.Random(3)).run()
        assert fittest1.flatten() == fittest2.flatten()
