"""
Species Module

This module implements the Species class. A species is a cluster of genetically
similar genomes, which compete for offspring primarily among themselves.

Classes:
    Species: A leader genome plus the population indices of its members
"""

import random
from typing import TYPE_CHECKING, Iterable, Sequence

if TYPE_CHECKING:
    from neatdag.genotype import Genome

class Species:
    """
    A species of genetically similar genomes.

    During speciation a genome joins the first species whose leader lies within the
    compatibility threshold. Leaders are genome objects, not indices, so they survive
    the replacement of the generation they were drawn from and can seed the
    speciation of the next one.

    Public Attributes:
        leader:  Genome against which candidate members are compared
        members: Indices (into the population's genome list) of the members

    Public Methods:
        add(index):                 Add a member
        is_empty():                 Whether the species has no members
        pick_leader(genomes, rng):  Choose a new leader uniformly among the members
    """

    def __init__(self, leader: 'Genome', members: Iterable[int] | None = None):
        self.leader : 'Genome'   = leader
        self.members: list[int]  = list(members) if members is not None else []

    def add(self, index: int) -> None:
        self.members.append(index)

    def is_empty(self) -> bool:
        return not self.members

    def pick_leader(self, genomes: Sequence['Genome'], rng: random.Random | None = None) -> 'Genome':
        """
        Replace the leader with a random member.

        Parameters:
            genomes: the generation the member indices refer to
            rng:     source of randomness (defaults to the 'random' module)

        Returns:
            the new leader
        """
        if self.is_empty():
            raise ValueError("cannot pick a leader for a species without members")
        rng = rng if rng is not None else random
        self.leader = genomes[rng.choice(self.members)]
        return self.leader

    def __len__(self):
        return len(self.members)

    def __repr__(self):
        return f"Species(size={len(self.members)}, leader_genes={self.leader.num_connections})"
