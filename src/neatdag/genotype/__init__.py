"""
NEATDAG Genotype Package

This package implements the genome of a network: a directed acyclic graph of
nodes and weighted connections, plus the bookkeeping that gives structural
changes a shared history across a population.

Every connection carries an innovation number and every node a global ID,
both handed out by the InnovationTracker, so that genomes with different
layouts can be aligned gene by gene during crossover and speciation.

Modules:
    node:               Connection and Node classes
    gene_record:        GeneRecord class and gene alignment
    genome:             Genome class
    innovation_tracker: InnovationTracker class

Exported Classes:
    Connection:        Weighted connection leaving a node
    Node:              Graph node owning its outgoing connections
    GeneRecord:        Flat description of a connection in terms of global node IDs
    Genome:            Complete genome representing a neural network
    InnovationTracker: Per-population tracker for innovation numbers and node IDs
"""

from neatdag.genotype.gene_record        import GeneRecord, align_genes
from neatdag.genotype.genome             import Genome
from neatdag.genotype.innovation_tracker import InnovationTracker
from neatdag.genotype.node               import Connection, Node

__all__ = ['Connection',
           'GeneRecord',
           'Genome',
           'InnovationTracker',
           'Node',
           'align_genes']
