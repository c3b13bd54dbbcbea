import configparser
import os
from neatdag.activations import activations

class Config:

    # Attributes holding probabilities; validated after parsing.
    _PROBABILITIES = ('survival_threshold',
                      'disabled_gene_inherit_prob',
                      'structural_mutation_prob',
                      'node_split_prob',
                      'weight_mutation_prob',
                      'weight_replace_prob')

    def __init__(self, config_file: str | None = None):
        """
        Initialize Config by parsing an INI file, or create a Config holding default values.

        Parameters:
            config_file: Path to the INI configuration file.
                         If None, creates a Config with default values, which
                         can then be modified by manually setting attributes.
        """

        # Default config for testing/manual setup
        if config_file is None:
            self.population_size = 150
            self.num_inputs      = 2
            self.num_outputs     = 1
            self.connect_ends    = True
            self.activation      = 'sigmoid'

            self.compatibility_threshold = 3.0
            self.distance_excess_coeff   = 0.8
            self.distance_disjoint_coeff = 0.8
            self.distance_weight_coeff   = 0.4
            self.small_genome_size       = 20

            self.survival_threshold         = 0.35
            self.champion_min_species_size  = 5
            self.disabled_gene_inherit_prob = 0.75

            self.structural_mutation_prob = 0.3
            self.node_split_prob          = 0.3
            self.weight_mutation_prob     = 0.8
            self.weight_replace_prob      = 0.1
            self.weight_perturb_strength  = 0.8

            self.max_weight = 8.0

            self.max_number_generations = 100
            self.fitness_threshold      = None
            return

        if not os.path.exists(config_file):
            raise FileNotFoundError(f"Configuration file '{config_file}' not found")

        parser = configparser.ConfigParser()
        parser.read(config_file)

        # Sentinel for missing default values
        _NO_DEFAULT = object()

        # Helper function to safely parse values
        def get_value(section, key, value_type, default=_NO_DEFAULT):
            try:
                raw_value = parser.get(section, key)
                if raw_value.lower() == 'none':
                    return None
                if value_type == int:
                    return parser.getint(section, key)
                elif value_type == float:
                    return parser.getfloat(section, key)
                elif value_type == bool:
                    return parser.getboolean(section, key)
                elif value_type == str:
                    return raw_value
            except (configparser.NoSectionError, configparser.NoOptionError):
                if default is not _NO_DEFAULT:
                    return default
                raise

        # [POPULATION_INIT]

        # The number of genomes in each generation.
        self.population_size = get_value('POPULATION_INIT', 'population_size', int)

        # The number of input nodes, through which the network receives inputs.
        # A bias node (constant output 1.0) is always added on top of these.
        self.num_inputs = get_value('POPULATION_INIT', 'num_inputs', int)

        # The number of output nodes, to which the network delivers outputs.
        self.num_outputs = get_value('POPULATION_INIT', 'num_outputs', int)

        # Whether initial genomes start with every input (and the bias)
        # connected to every output, or without any connection at all.
        self.connect_ends = get_value('POPULATION_INIT', 'connect_ends', bool, default=True)

        # Name of the activation function shared by all nodes
        # (see 'basic_activations.py' for the available names).
        self.activation = get_value('POPULATION_INIT', 'activation', str, default='sigmoid')

        # [SPECIATION]

        # Genomes whose distance to a species leader is less than
        # this threshold are considered to be in that species.
        self.compatibility_threshold = get_value('SPECIATION', 'compatibility_threshold', float, default=3.0)

        # The coefficients weighting the excess gene count, the disjoint
        # gene count and the average weight difference of matching genes.
        self.distance_excess_coeff   = get_value('SPECIATION', 'distance_excess_coeff'  , float, default=0.8)
        self.distance_disjoint_coeff = get_value('SPECIATION', 'distance_disjoint_coeff', float, default=0.8)
        self.distance_weight_coeff   = get_value('SPECIATION', 'distance_weight_coeff'  , float, default=0.4)

        # Genomes with fewer genes than this are not normalized by their
        # gene count when calculating the distance (normalizer is 1).
        self.small_genome_size = get_value('SPECIATION', 'small_genome_size', int, default=20)

        # [REPRODUCTION]

        # The fraction of top ranked members of each species allowed to reproduce.
        self.survival_threshold = get_value('REPRODUCTION', 'survival_threshold', float, default=0.35)

        # Species with more members than this have their best
        # genome copied unchanged into the next generation.
        self.champion_min_species_size = get_value('REPRODUCTION', 'champion_min_species_size', int, default=5)

        # Probability that a gene disabled in exactly one parent is disabled in the child.
        self.disabled_gene_inherit_prob = get_value('REPRODUCTION', 'disabled_gene_inherit_prob', float, default=0.75)

        # [MUTATION]

        # The probability that a child undergoes a structural mutation.
        self.structural_mutation_prob = get_value('MUTATION', 'structural_mutation_prob', float, default=0.3)

        # Given a structural mutation, the probability that it is a node split
        # (otherwise a new connection is added).
        self.node_split_prob = get_value('MUTATION', 'node_split_prob', float, default=0.3)

        # The probability that the weights of a child are mutated, and given
        # that, the probability that they are replaced rather than perturbed.
        self.weight_mutation_prob = get_value('MUTATION', 'weight_mutation_prob', float, default=0.8)
        self.weight_replace_prob  = get_value('MUTATION', 'weight_replace_prob' , float, default=0.1)

        # Half-width of the uniform distribution from which weight perturbations are drawn.
        self.weight_perturb_strength = get_value('MUTATION', 'weight_perturb_strength', float, default=0.8)

        # [CONNECTION]

        # Weights are drawn from (and clipped to) [-max_weight, max_weight].
        self.max_weight = get_value('CONNECTION', 'max_weight', float, default=8.0)

        # [TERMINATION]

        # The number of generations after which to stop the run.
        self.max_number_generations = get_value('TERMINATION', 'max_number_generations', int, default=100)

        # The fitness value which when met or exceeded by the fittest genome causes
        # the run to end. Use "None" to only stop after 'max_number_generations'.
        self.fitness_threshold = get_value('TERMINATION', 'fitness_threshold', float, default=None)

        self.validate()

    def validate(self) -> None:
        """
        Check that configuration values are consistent.

        Raises:
            ValueError: if any value is out of its allowed range
        """
        for name in self._PROBABILITIES:
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"'{name}' must be in [0, 1], got {value}")
        if self.population_size < 1:
            raise ValueError(f"'population_size' must be positive, got {self.population_size}")
        if self.num_inputs < 0 or self.num_outputs < 1:
            raise ValueError("a network needs a non-negative number of inputs and at least one output")
        if self.activation not in activations:
            raise ValueError(f"Invalid activation function '{self.activation}'")
        if self.max_weight <= 0:
            raise ValueError(f"'max_weight' must be positive, got {self.max_weight}")
