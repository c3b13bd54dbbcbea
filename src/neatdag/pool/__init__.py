"""
Pool Package

This package contains the classes managing populations and species.

The pool package coordinates the evolutionary process at the population level,
organizing genomes into species based on genetic similarity and managing
reproduction across generations.

Modules:
    species:    Species representation (leader plus member indices)
    population: Top-level population management and evolution

Exported Classes:
    Species:    A cluster of genetically similar genomes
    Population: Top-level evolutionary coordinator
"""

from neatdag.pool.species    import Species
from neatdag.pool.population import Population

__all__ = [
    'Species',
    'Population',
]
