"""
Population Module

This module implements the Population class, the top-level orchestrator of the
evolutionary algorithm. The population owns the current generation of genomes,
the innovation tracker they share, and the species they are split into; it turns
a fitness vector into the next generation through speciation, fitness sharing,
crossover and mutation.

Classes:
    Population: Evolutionary coordinator managing genomes, species and generations
"""

import math
import random
import sys
from typing import TYPE_CHECKING, Callable, Sequence

from loguru import logger

from neatdag.activations  import get_activation
from neatdag.genotype     import Genome, InnovationTracker, align_genes
from neatdag.pool.species import Species

if TYPE_CHECKING:
    from neatdag.run.config import Config

class Population:
    """
    A population of evolving genomes.

    Every generation is split into species of genetically similar genomes. Offspring
    are allocated to species in proportion to their shared fitness (the fitness of
    each member divided by the size of its species), so that a large species cannot
    crowd out a small, innovative one. Within a species, parents are drawn from the
    best ranked members, and children are produced by crossover followed by mutation.

    All genomes of a population share one InnovationTracker: the same structural
    change gets the same innovation number in every genome, which is what makes
    crossover between different topologies possible.

    Public Attributes:
        genomes:     List of all Genome objects in the current generation
        innovations: The InnovationTracker shared by all genomes
        species:     The species the current generation is split into
        generation:  Number of generations produced so far
        activation:  Activation function used by every genome

    Public Methods:
        mutate(genome):                      Apply one structural mutation
        mutate_weights(genome):              Perturb or replace the weights
        breed(fitter, other):                Crossover of two genomes
        delta(genome1, genome2):             Compatibility distance
        speciate(new_generation):            Split a generation into species
        evaluate_all(inputs, metric):        Score every genome on one input vector
        next_generation(fitness):            Replace the generation with its offspring
        create_species(members, fitness, n): Offspring of a single species
        get_fittest(fitness):                Genome with the highest fitness
    """

    def __init__(self,
                 config    : 'Config',
                 activation: Callable[[float], float] | None = None,
                 rng       : random.Random | None = None):
        """
        Create the initial generation and split it into species.

        Parameters:
            config:     stores configuration parameters
            activation: activation function shared by all genomes; if None, the
                        function named by 'config.activation' is used
            rng:        source of randomness (defaults to the 'random' module)
        """
        self._config = config
        self._rng    = rng if rng is not None else random

        self.activation : Callable[[float], float] = activation if activation is not None \
                                                      else get_activation(config.activation)
        self.num_inputs : int                      = config.num_inputs
        self.num_outputs: int                      = config.num_outputs
        self.innovations: InnovationTracker        = InnovationTracker(config.num_inputs, config.num_outputs)
        self.generation : int                      = 0

        # Every genome starts either unconnected or with all inputs connected to all outputs
        self.genomes: list[Genome] = []
        for _ in range(config.population_size):
            genome = Genome(self.num_inputs, self.num_outputs, self.activation, self._rng)
            if config.connect_ends:
                genome.connect_ends(config.max_weight)
            self.genomes.append(genome)

        self.species: list[Species] = []
        self.species = self.speciate(self.genomes)

    def mutate(self, genome: Genome) -> str | None:
        """
        Apply one structural mutation to a genome.

        With probability 'node_split_prob' an active connection is split by a new
        node; otherwise a new connection is added (or a disabled one re-enabled).
        The IDs involved are looked up in the innovation tracker, so the same
        change made in different genomes gets the same numbers.

        Parameters:
            genome: the genome to mutate in place

        Returns:
            "split", "edge" or "enable" naming what happened, or None if no mutation was possible
        """
        if self._rng.random() < self._config.node_split_prob:
            pair = genome.random_split()
            if pair is None:
                return None
            node_in, node_out = pair
            new_node_id, innov1, innov2 = self.innovations.get_split_IDs(genome.local_to_global(node_in),
                                                                         genome.local_to_global(node_out))
            if genome.split_edge(node_in, node_out, innov1, new_node_id, innov2) is None:
                return None
            return "split"

        pair = genome.random_edge()
        if pair is None:
            return None
        node_in, node_out = pair

        # 'random_edge()' only returns existing connections when they are disabled
        if genome.edge_exists(node_in, node_out):
            genome.enable_edge(node_in, node_out)
            return "enable"

        innovation = self.innovations.get_innovation_number(genome.local_to_global(node_in),
                                                            genome.local_to_global(node_out))
        weight = self._rng.uniform(-self._config.max_weight, self._config.max_weight)
        genome.add_edge(node_in, node_out, innovation, weight)
        return "edge"

    def mutate_weights(self, genome: Genome) -> None:
        """
        With probability 'weight_mutation_prob' mutate all weights of a genome:
        replace them with probability 'weight_replace_prob', perturb them otherwise.
        """
        if self._rng.random() >= self._config.weight_mutation_prob:
            return
        if self._rng.random() < self._config.weight_replace_prob:
            genome.randomize_weights(self._config.max_weight)
        else:
            genome.perturb_weights(self._config.weight_perturb_strength, self._config.max_weight)

    def breed(self, fitter: Genome, other: Genome) -> Genome:
        """
        Create a child genome by crossing over two parents.

        The genes of both parents are aligned by innovation number:
         + matching genes: weight and state are taken from a randomly chosen parent;
           if the gene is disabled in exactly one parent, the child gene is disabled
           with probability 'disabled_gene_inherit_prob'
         + genes present only in the fitter parent are inherited
         + genes present only in the other parent are dropped

        The structure of the child is therefore that of the fitter parent. Only the
        state of its genes may differ; a gene disabled in the fitter parent can be
        re-enabled, and if that closes a cycle such genes are disabled again.

        Parameters:
            fitter: the parent with the higher fitness
            other:  the other parent

        Returns:
            a new Genome

        Raises:
            RuntimeError: if matching genes connect different nodes
        """
        genes_fitter = fitter.flatten()
        genes_other  = other.flatten()

        child   = Genome(self.num_inputs, self.num_outputs, self.activation, self._rng)
        mapping = child.map_global_ids(genes_fitter)

        revived = []
        for gene_fitter, gene_other in align_genes(genes_fitter, genes_other):
            if gene_fitter is None:
                continue

            gene   = gene_fitter
            active = gene_fitter.active
            if gene_other is not None:
                if (gene_fitter.from_id, gene_fitter.to_id) != (gene_other.from_id, gene_other.to_id):
                    raise RuntimeError(f"genes with innovation number {gene_fitter.innovation} "
                                       f"connect different nodes: {gene_fitter} vs {gene_other}")
                gene   = gene_fitter if self._rng.random() < 0.5 else gene_other
                active = gene.active
                if gene_fitter.active != gene_other.active:
                    active = self._rng.random() >= self._config.disabled_gene_inherit_prob

            node_in, node_out = mapping[gene.from_id], mapping[gene.to_id]
            child.add_edge(node_in, node_out, gene.innovation, gene.weight, active)
            if active and not gene_fitter.active:
                revived.append((node_in, node_out))

        # Disabling the revived genes restores a subset of the fitter parent's active connections
        if revived and child.check_cycle():
            for node_in, node_out in revived:
                child.disable_edge(node_in, node_out)

        return child

    def delta(self, genome1: Genome, genome2: Genome) -> float:
        """
        Calculate the compatibility distance between two genomes.

        The genes of both genomes are aligned by innovation number. Genes present
        in only one genome are 'excess' if their innovation number is beyond the
        range of the other genome, 'disjoint' otherwise. The distance is:
            c1 * excess / N + c2 * disjoint / N + c3 * avg_weight_diff_of_matching_genes
        where N is the number of genes in the larger genome, or 1 for small genomes.

        Returns:
            the distance, 0 for identical gene sets
        """
        genes1 = genome1.flatten()
        genes2 = genome2.flatten()
        last1  = genes1[-1].innovation if genes1 else -1
        last2  = genes2[-1].innovation if genes2 else -1

        excess      = 0
        disjoint    = 0
        matching    = 0
        weight_diff = 0.0
        for gene1, gene2 in align_genes(genes1, genes2):
            if gene1 is not None and gene2 is not None:
                matching    += 1
                weight_diff += abs(gene1.weight - gene2.weight)
            elif gene1 is not None:
                if gene1.innovation > last2:
                    excess += 1
                else:
                    disjoint += 1
            else:
                if gene2.innovation > last1:
                    excess += 1
                else:
                    disjoint += 1

        N = max(len(genes1), len(genes2))
        if N < self._config.small_genome_size:
            N = 1

        distance  = self._config.distance_excess_coeff   * excess   / N
        distance += self._config.distance_disjoint_coeff * disjoint / N
        if matching > 0:
            distance += self._config.distance_weight_coeff * weight_diff / matching
        return distance

    def speciate(self, new_generation: Sequence[Genome]) -> list[Species]:
        """
        Split a generation into species.

        The leaders of the current species seed the clustering. Each genome joins
        the first species whose leader is closer than 'compatibility_threshold';
        otherwise it founds a new species with itself as leader. Species left
        without members are dropped, and every surviving species gets a new
        leader picked at random among its members.

        Parameters:
            new_generation: the genomes to split

        Returns:
            the new list of species (each member listed in exactly one)
        """
        candidates = [Species(spec.leader) for spec in self.species]
        for index, genome in enumerate(new_generation):
            for spec in candidates:
                if self.delta(spec.leader, genome) < self._config.compatibility_threshold:
                    spec.add(index)
                    break
            else:
                candidates.append(Species(genome, [index]))

        species = [spec for spec in candidates if not spec.is_empty()]
        for spec in species:
            spec.pick_leader(new_generation, self._rng)

        logger.debug("[Population] {} genomes split into {} species, sizes {}",
                     len(new_generation), len(species), [len(spec) for spec in species])
        return species

    def evaluate_all(self,
                     inputs: Sequence[float],
                     metric: Callable[[Sequence[float], list[float]], float]) -> list[float]:
        """
        Evaluate every genome on one input vector and score its outputs.

        Parameters:
            inputs: the network inputs
            metric: maps (inputs, outputs) to a fitness value

        Returns:
            one fitness value per genome, in population order
        """
        return [metric(inputs, genome.evaluate(inputs)) for genome in self.genomes]

    def get_fittest(self, fitness: Sequence[float]) -> Genome:
        """
        Return the genome with the highest fitness.

        Parameters:
            fitness: one value per genome, in population order
        """
        if len(fitness) != len(self.genomes):
            raise ValueError(f"expected {len(self.genomes)} fitness values, got {len(fitness)}")
        best = max(range(len(fitness)), key=lambda i: fitness[i])
        return self.genomes[best]

    def next_generation(self, fitness: Sequence[float]) -> None:
        """
        Replace the current generation with its offspring.

        Step 1: Fitness sharing
        - NaN fitness counts as 0, infinite fitness is clipped to a large finite value;
          if any value is negative, all values are shifted up
        - every member's fitness is divided by the size of its species

        Step 2: Offspring allocation
        - each species gets offspring in proportion to its total shared fitness

        Step 3: Reproduction
        - each species produces its offspring (champion copy plus crossover children)
        - every child except the champions is mutated

        Step 4: Speciation
        - the offspring are split into species, seeded by the current leaders

        Parameters:
            fitness: one value per genome, in population order

        Raises:
            ValueError: if the number of fitness values is not the population size
        """
        if len(fitness) != len(self.genomes):
            raise ValueError(f"expected {len(self.genomes)} fitness values, got {len(fitness)}")

        # Treat NaN as 0 (invalid networks get worst fitness), clip infinities so that
        # shifted values still sum to a finite total
        limit   = sys.float_info.max / (2 * max(1, len(fitness)))
        fitness = [0.0 if math.isnan(value) else min(max(float(value), -limit), limit) for value in fitness]
        lowest  = min(fitness, default=0.0)
        if lowest < 0:
            fitness = [value - lowest for value in fitness]

        # Explicit fitness sharing
        shared_fitness  = [0.0] * len(fitness)
        species_fitness = []
        for spec in self.species:
            for index in spec.members:
                shared_fitness[index] = fitness[index] / len(spec)
            species_fitness.append(sum(shared_fitness[index] for index in spec.members))

        allocations = self._allocate_offspring(species_fitness)
        logger.debug("[Population] Generation {}: offspring allocations {}", self.generation, allocations)

        # Spawn the new generation, one species at a time
        offspring_all = []
        mutations     = {"split": 0, "edge": 0, "enable": 0}
        for spec, num_offspring in zip(self.species, allocations):
            members = [self.genomes[index] for index in spec.members]
            scores  = [shared_fitness[index] for index in spec.members]
            offspring, num_champions = self.create_species(members, scores, num_offspring)

            # Champions pass unchanged, everyone else is mutated
            for child in offspring[num_champions:]:
                if self._rng.random() < self._config.structural_mutation_prob:
                    outcome = self.mutate(child)
                    if outcome is not None:
                        mutations[outcome] += 1
                self.mutate_weights(child)
            offspring_all.extend(offspring)

        logger.debug("[Population] Generation {}: structural mutations {}", self.generation, mutations)

        self.species    = self.speciate(offspring_all)
        self.genomes    = offspring_all
        self.generation += 1

    def _allocate_offspring(self, species_fitness: Sequence[float]) -> list[int]:
        """
        Calculate how many offspring each species should produce.

        Each species gets the floor of its share of the population size; the slots
        lost to rounding are handed out one at a time, cycling over the species in
        decreasing order of fitness. When all species have zero fitness, they share
        the population equally.

        Returns:
            one count per species, summing to 'population_size'
        """
        population_size = self._config.population_size
        num_species     = len(species_fitness)
        if num_species == 0:
            return []

        total_fitness = sum(species_fitness)
        if total_fitness > 0:
            allocations = [int(math.floor(value / total_fitness * population_size)) for value in species_fitness]
        else:
            allocations = [population_size // num_species] * num_species

        ranked    = sorted(range(num_species), key=lambda i: species_fitness[i], reverse=True)
        remaining = population_size - sum(allocations)
        for k in range(remaining):
            allocations[ranked[k % num_species]] += 1

        return allocations

    def create_species(self,
                       members      : Sequence[Genome],
                       fitness      : Sequence[float],
                       num_offspring: int) -> tuple[list[Genome], int]:
        """
        Generate the offspring of a single species.

        The members are ranked by fitness. If the species is large enough, its best
        member is copied into the next generation unchanged (the champion). The rest
        of the offspring are bred from two parents drawn from the top ranked fraction
        'survival_threshold' of the members; the fitter parent is passed first.

        Parameters:
            members:       the genomes of the species
            fitness:       fitness of each member
            num_offspring: number of offspring to produce

        Returns:
            tuple (offspring, number of champions at the front of the offspring list)
        """

        # Trivial case
        if num_offspring == 0 or len(members) == 0:
            return [], 0

        ranked = sorted(range(len(members)), key=lambda i: fitness[i], reverse=True)

        offspring = []
        if len(members) > self._config.champion_min_species_size:
            offspring.append(members[ranked[0]].clone())
        num_champions = len(offspring)

        # Select the parent pool - the top fraction of individuals in the species
        num_parents = max(1, int(round(len(members) * self._config.survival_threshold)))
        num_parents = min(num_parents, len(members))

        # A lower rank means a fitter parent
        while len(offspring) < num_offspring:
            rank1 = self._rng.randrange(num_parents)
            rank2 = self._rng.randrange(num_parents)
            fitter, other = members[ranked[min(rank1, rank2)]], members[ranked[max(rank1, rank2)]]
            offspring.append(self.breed(fitter, other))

        return offspring, num_champions

    def __str__(self):
        return '\n'.join(str(genome) for genome in self.genomes)
