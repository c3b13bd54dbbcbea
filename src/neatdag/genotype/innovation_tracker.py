"""
Innovation Tracker Module

This module implements the InnovationTracker class, the ledger mapping
structural changes to the historical IDs shared by all genomes of a population.

Classes:
    InnovationTracker: Tracker for innovation numbers and hidden node IDs
"""

from itertools import count

class InnovationTracker:
    """
    Tracks structural changes across all genomes of a population.
    Ensures the same structural change gets the same innovation number
    (for connections) and the same global ID (for nodes created by splits),
    no matter in which genome or in which generation it happens.

    Each Population owns its own tracker, so independent populations never
    share (or reset) each other's state.

    Node numbering convention (global IDs):
        - Input nodes:  [0, num_inputs)
        - Bias node:    num_inputs
        - Output nodes: [num_inputs + 1, num_inputs + num_outputs + 1)
        - Hidden nodes: [num_inputs + num_outputs + 1, ...)

    Public Attributes:
        edge_innovations:  (from global ID, to global ID) -> innovation number
        split_innovations: (from global ID, to global ID) -> global ID of the node splitting that connection

    Public Methods:
        get_innovation_number(node_in, node_out): Innovation number of a connection
        get_split_node(node_in, node_out):        Global ID of the node splitting a connection
        get_split_IDs(node_in, node_out):         Node ID and innovation numbers for a split
    """

    def __init__(self, num_inputs: int, num_outputs: int):
        """
        Parameters:
            num_inputs:  number of input nodes (not counting the bias node)
            num_outputs: number of output nodes
        """
        self.num_inputs : int = num_inputs
        self.num_outputs: int = num_outputs

        # For each connection ever created, map its endpoints to its innovation number
        self.edge_innovations: dict[tuple[int, int], int] = {}

        # For each connection ever split, map its endpoints to the ID of the new node
        self.split_innovations: dict[tuple[int, int], int] = {}

        # The connections between inputs (and bias) and outputs have
        # fixed innovation numbers: input_index * num_outputs + output_index
        for i in range(num_inputs + 1):
            for j in range(num_outputs):
                self.edge_innovations[(i, num_inputs + 1 + j)] = i * num_outputs + j

        self._next_innovation_number = count((num_inputs + 1) * num_outputs)
        self._next_node_id           = count(num_inputs + num_outputs + 1)

    def get_innovation_number(self, node_in: int, node_out: int) -> int:
        """
        Get innovation number for a connection, identified by its endpoints.
        Returns existing innovation number if this connection was created
        before, otherwise assigns a new innovation number.

        Parameters:
            node_in:  global ID of the 'from' end of the connection
            node_out: global ID of the 'to'   end of the connection

        Returns:
            connection ID (a.k.a. innovation number)
        """
        key = (node_in, node_out)

        # This is a new connection
        if key not in self.edge_innovations:
            self.edge_innovations[key] = next(self._next_innovation_number)

        return self.edge_innovations[key]

    def get_split_node(self, node_in: int, node_out: int) -> int:
        """
        Get the global ID of the node created when splitting the connection
        'node_in' -> 'node_out'. If this exact connection has been split before
        (in any genome) returns the same ID, otherwise creates a new one.
        """
        key = (node_in, node_out)

        # This connection hasn't been split before
        if key not in self.split_innovations:
            self.split_innovations[key] = next(self._next_node_id)

        return self.split_innovations[key]

    def get_split_IDs(self, node_in: int, node_out: int) -> tuple[int, int, int]:
        """
        Get node ID and innovation numbers for splitting a connection.
        If this exact connection has been split before, returns the same
        values, otherwise creates new ones.

        Parameters:
            node_in:  global ID of the 'from' end of the connection being split
            node_out: global ID of the 'to'   end of the connection being split

        Returns:
            3-tuple: (new_node_id, innovation1, innovation2)
            innovation1 is for the connection from 'node_in' to the new node
            innovation2 is for the connection from the new node to 'node_out'
        """
        new_node_id = self.get_split_node(node_in, node_out)

        # First new connection: original_in -> new_node
        innov1 = self.get_innovation_number(node_in, new_node_id)

        # Second new connection: new_node -> original_out
        innov2 = self.get_innovation_number(new_node_id, node_out)

        return new_node_id, innov1, innov2

    @property
    def num_innovations(self) -> int:
        return len(self.edge_innovations)

    @property
    def num_split_nodes(self) -> int:
        return len(self.split_innovations)
