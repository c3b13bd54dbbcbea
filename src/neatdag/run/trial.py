"""
Trial Module

This module defines the abstract base class for trials.

A trial represents one independent run of the evolutionary algorithm, evolving
a population through generations until a solution is found or the maximum
number of generations is reached. The fitness metric is problem specific and
is supplied by subclasses.
"""

import random
from abc    import ABC, abstractmethod
from typing import Callable

from loguru import logger

from neatdag.genotype import Genome
from neatdag.pool     import Population
from neatdag.run.config import Config

class Trial(ABC):
    """
    Abstract base class for implementing a trial.

    Subclasses must implement:
    - _evaluate_fitness(genome): Evaluate fitness for a single genome

    Subclasses can override:
    - _reset():           Reset trial-specific state (call super()._reset())
    - _report_progress(): Report after each generation (default: log statistics)
    - _final_report():    Report at the end of the trial (default: log the fittest genome)
    - _terminate():       Custom termination logic (default: max generations + fitness threshold)

    Public Attributes:
        failed:  whether the last run ended without reaching the fitness threshold
        fitness: fitness of each genome of the current generation

    Public Methods:
        run(): Execute a complete trial and return the fittest genome
    """

    def __init__(self,
                 config         : Config,
                 activation     : Callable[[float], float] | None = None,
                 rng            : random.Random | None = None,
                 suppress_output: bool = False):
        """
        Initialize the trial.

        Parameters:
            config:          Configuration parameters
            activation:      Activation function overriding 'config.activation'
            rng:             Source of randomness shared with the population
            suppress_output: If True, suppress progress and final reports
        """
        self._config            : Config                   = config
        self._activation                                   = activation
        self._rng                                          = rng
        self._generation_counter: int                      = 0
        self._population        : Population | None        = None
        self._suppress_output   : bool                     = suppress_output
        self.fitness            : list[float]              = []
        self.failed             : bool                     = True

    def run(self) -> Genome:
        """
        Run the trial.

        Resets the trial state and runs the evolutionary
        algorithm until the terminate condition is met.

        Returns:
            the fittest genome of the last generation
        """
        # Reset the trial state before starting a new run
        self._reset()

        # Create the initial population and evaluate it
        self._population = Population(self._config, self._activation, self._rng)
        self._evaluate_fitness_all()
        if not self._suppress_output:
            self._report_progress()

        # Evolution loop
        while not self._terminate():
            self._generation_counter += 1

            # The members of the population mate and create offspring
            self._population.next_generation(self.fitness)

            self._evaluate_fitness_all()
            if not self._suppress_output:
                self._report_progress()

        if not self._suppress_output:
            self._final_report()

        return self._population.get_fittest(self.fitness)

    def _reset(self):
        """
        Reset the trial state before starting a new run.
        """
        self._generation_counter = 0
        self.fitness = []
        self.failed  = True

    @abstractmethod
    def _evaluate_fitness(self, genome: Genome) -> float:
        """
        Evaluate and return the fitness of a genome.

        Higher fitness values indicate better performance and a larger share of
        offspring. Negative values are allowed (the population shifts them),
        NaN counts as the worst possible fitness.

        Parameters:
            genome: The genome to evaluate

        Returns:
            float: Fitness score for the genome
        """
        pass

    def _evaluate_fitness_all(self):
        self.fitness = [self._evaluate_fitness(genome) for genome in self._population.genomes]

    def _report_progress(self):
        """
        Report trial progress after each generation.
        """
        logger.info("[Trial] Generation {:04d}: {} species, max fitness {:.4f}, mean fitness {:.4f}",
                    self._generation_counter,
                    len(self._population.species),
                    max(self.fitness),
                    sum(self.fitness) / len(self.fitness))

    def _final_report(self):
        """
        Produce final report at the end of the trial.
        """
        fittest = self._population.get_fittest(self.fitness)
        logger.info("[Trial] {} after {} generations, fittest genome:\n{}",
                    "Failed" if self.failed else "Solved", self._generation_counter, fittest)

    def _terminate(self) -> bool:
        """
        Determine whether the trial should terminate.

        This default implementation stops the trial after a maximum number
        of generations and (optionally) also stops it if the best fitness
        has reached a given threshold.

        Returns:
            bool: True if the trial should stop, False otherwise
        """
        # Has this trial run for too long?
        terminate = self._generation_counter >= self._config.max_number_generations

        # Check whether the fitness has reached a target threshold
        if self._config.fitness_threshold is not None:
            success   = max(self.fitness) >= self._config.fitness_threshold
            terminate = terminate or success
            if terminate:
                self.failed = not success

        return terminate
