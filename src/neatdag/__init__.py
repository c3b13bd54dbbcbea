"""
NEATDAG - Neuroevolution of directed acyclic networks.

This package evolves the topology and the weights of feed-forward neural networks
with a genetic algorithm in the style of NEAT (NeuroEvolution of Augmenting
Topologies). No gradients are involved: networks grow by mutation, exchange genes
through crossover aligned by innovation numbers, and compete for offspring within
species of genetically similar networks.

Main components:
- genotype: Genome graph, gene records, innovation tracking
- pool: Population, speciation and reproduction
- run: Configuration and the trial driver
- activations: Activation functions for network nodes

Example:
    >>> from neatdag import Config, Trial
    >>> config = Config("config.ini")
    >>> class MyTrial(Trial):
    ...     def _evaluate_fitness(self, genome):
    ...         return 1.0 - abs(genome.evaluate([1.0, 0.0])[0] - 1.0)
    >>> trial = MyTrial(config)
    >>> fittest = trial.run()
"""

__version__ = "0.1.0"

# Import main classes for convenient access
from neatdag.run.config                  import Config
from neatdag.run.trial                   import Trial
from neatdag.genotype.gene_record        import GeneRecord
from neatdag.genotype.genome             import Genome
from neatdag.genotype.innovation_tracker import InnovationTracker
from neatdag.pool.population             import Population
from neatdag.pool.species                import Species

__all__ = [
    "Config",
    "Trial",
    "GeneRecord",
    "Genome",
    "InnovationTracker",
    "Population",
    "Species",
]
