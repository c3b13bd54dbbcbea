"""
XOR Problem Implementation

This module implements the classic XOR (exclusive OR) problem as a benchmark
for the evolutionary algorithm. XOR is not linearly separable, so a network
can only solve it after evolving at least one hidden node.

The XOR Problem:
    Input (0, 0) → Output 0
    Input (0, 1) → Output 1
    Input (1, 0) → Output 1
    Input (1, 1) → Output 0

Fitness Function:
    Each case is scored with 'xor_metric' = 1 - mean squared error of the outputs;
    the fitness of a genome is the sum over the four cases (maximum 4.0).

Classes:
    Trial_XOR: Trial for solving XOR

Functions:
    xor_metric:    Score the outputs of a network on one XOR case
    evolve_online: Evolve on one random XOR case per generation

Usage:
    python trial_XOR.py
"""

import random
from pathlib import Path
from typing  import Sequence

from loguru import logger

from neatdag.genotype   import Genome
from neatdag.pool       import Population
from neatdag.run        import Config, Trial

XOR_INPUTS = [[0.0, 0.0], [0.0, 1.0], [1.0, 0.0], [1.0, 1.0]]

def xor_metric(inputs: Sequence[float], outputs: Sequence[float]) -> float:
    """
    Returns:
        1 - mean squared error between the outputs and the XOR of the inputs
    """
    target = [float(int(inputs[0]) ^ int(inputs[1]))]
    mse    = sum((t - o) ** 2 for t, o in zip(target, outputs)) / len(target)
    return 1.0 - mse

class Trial_XOR(Trial):
    """
    Trial evolving networks which compute the XOR boolean function.

    Implemented Methods:
        _evaluate_fitness(genome): Test network on all 4 XOR cases
        _final_report():           Log the truth table of the fittest network
    """

    def _evaluate_fitness(self, genome: Genome) -> float:
        return sum(xor_metric(inputs, genome.evaluate(inputs)) for inputs in XOR_INPUTS)

    def _final_report(self):
        super()._final_report()

        fittest = self._population.get_fittest(self.fitness)
        s  = "input         output   target\n"
        s += "-----------------------------\n"
        for inputs in XOR_INPUTS:
            output = fittest.evaluate(inputs)[0]
            s += f"{inputs} -> {output:.4f}   {int(inputs[0]) ^ int(inputs[1])}\n"
        logger.info("[Trial] Truth table of the fittest genome:\n{}", s)

def evolve_online(config: Config, num_generations: int, rng: random.Random) -> Population:
    """
    Evolve a population by scoring every generation on a single random XOR case.
    """
    population = Population(config, rng=rng)
    for _ in range(num_generations):
        inputs  = [float(rng.randint(0, 1)), float(rng.randint(0, 1))]
        fitness = population.evaluate_all(inputs, xor_metric)
        logger.info("[XOR] Generation {:03d}: max fitness {:.4f}", population.generation, max(fitness))
        population.next_generation(fitness)
    return population

if __name__ == "__main__":
    config = Config(str(Path(__file__).parent / "config_xor.ini"))
    trial   = Trial_XOR(config)
    fittest = trial.run()
    logger.info("[XOR] {}: {} hidden nodes, {} active connections",
                "Solved" if not trial.failed else "Not solved", fittest.num_hidden, fittest.num_connections)
