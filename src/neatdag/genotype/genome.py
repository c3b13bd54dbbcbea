"""
Genome Module

This module implements the Genome class: the graph of a single candidate
network, together with the operations that mutate, evaluate and serialize it.

Classes:
    Genome: Variable topology, acyclic network of weighted connections
"""

import graphviz  # type: ignore
import itertools
import numpy as np
import random
from collections import deque
from typing      import Callable, Sequence

from neatdag.genotype.gene_record import GeneRecord
from neatdag.genotype.node        import Node

# Number of candidate connections tried by 'random_edge()' before giving up
RANDOM_EDGE_ATTEMPTS = 100

# Default bound for weights drawn by 'connect_ends()'
MAX_WEIGHT = 8.0

# Node colors used by the three-color depth first search
_WHITE, _GRAY, _BLACK = 0, 1, 2

class Genome:
    """
    A genome describing a feed-forward neural network as a graph of nodes and connections.

    The genome owns all of its nodes in a list; connections point to their target
    through the target's local ID (its index in that list). A minimal genome contains
    only the input nodes, the bias node and the output nodes. Via mutation, genomes
    grow by adding connections and by splitting connections with new hidden nodes,
    always keeping the graph of active connections acyclic.

    Node numbering convention (local IDs; for these nodes the global ID is the same):
        - Input nodes:  [0, num_inputs)
        - Bias node:    num_inputs
        - Output nodes: [num_inputs + 1, num_inputs + num_outputs + 1)
        - Hidden nodes: [num_inputs + num_outputs + 1, ...)

    Public Attributes:
        num_inputs:      number of input nodes
        num_outputs:     number of output nodes
        nodes:           all nodes, indexed by local ID
        edges:           (from, to) local ID pairs of the active connections not leaving the bias node
        num_connections: number of active connections
        activation:      activation function shared by all nodes

    Public Methods:
        connect_ends():                        Connect every input (and the bias) to every output
        add_node(global_id):                   Add a hidden node
        add_edge(from, to, innovation, ...):   Add a connection
        disable_edge(from, to) / enable_edge:  Toggle a connection
        split_edge(from, to, innovation, ...): Replace a connection with a node and two connections
        random_edge():                         Find a connection that can be added without a cycle
        random_split():                        Pick a connection that can be split
        random_disable():                      Disable a random connection
        evaluate(inputs):                      Compute the network outputs
        check_cycle():                         Whether the active connections contain a cycle
        flatten():                             Gene records sorted by innovation number
        clone():                               Independent structural copy

    Class Methods:
        un_flatten(genes, ...): Build a genome from gene records
    """

    def __init__(self,
                 num_inputs : int,
                 num_outputs: int,
                 activation : Callable[[float], float],
                 rng        : random.Random | None = None):
        """
        Initialize a minimal Genome: input, bias and output nodes, no connections.

        Parameters:
            num_inputs:  number of input nodes
            num_outputs: number of output nodes
            activation:  activation function applied by every non-input node
            rng:         source of randomness (defaults to the 'random' module)
        """
        if num_inputs < 0 or num_outputs < 1:
            raise ValueError(f"invalid genome shape: {num_inputs} inputs, {num_outputs} outputs")

        self.num_inputs : int                      = num_inputs
        self.num_outputs: int                      = num_outputs
        self.activation : Callable[[float], float] = activation
        self._rng = rng if rng is not None else random

        self.nodes          : list[Node]            = []
        self.edges          : set[tuple[int, int]]  = set()
        self.num_connections: int                   = 0
        self._local_ids     : dict[int, int]        = {}   # global ID => local ID

        for node_id in range(num_inputs + num_outputs + 1):
            self.add_node(node_id)

    @classmethod
    def un_flatten(cls,
                   genes      : Sequence[GeneRecord],
                   num_inputs : int,
                   num_outputs: int,
                   activation : Callable[[float], float],
                   rng        : random.Random | None = None) -> 'Genome':
        """
        Create a Genome from a list of gene records.

        Input, bias and output nodes always exist. Hidden nodes are created for every
        hidden global ID referenced by the genes, in ascending order of global ID,
        which makes the local IDs of the rebuilt genome dense.

        Parameters:
            genes:       the gene records describing the connections
            num_inputs:  number of input nodes
            num_outputs: number of output nodes
            activation:  activation function shared by all nodes
            rng:         source of randomness

        Returns:
            A new Genome with the described structure
        """
        genome  = cls(num_inputs, num_outputs, activation, rng)
        mapping = genome.map_global_ids(genes)
        for gene in genes:
            genome.add_edge(mapping[gene.from_id], mapping[gene.to_id], gene.innovation, gene.weight, gene.active)
        return genome

    def flatten(self) -> list[GeneRecord]:
        """
        Describe every connection (active or not) in terms of global node IDs.

        Returns:
            list of gene records sorted by innovation number
        """
        genes = []
        for node in self.nodes:
            for edge in node.edges:
                genes.append(GeneRecord(node.global_id,
                                        self.nodes[edge.target].global_id,
                                        edge.innovation,
                                        edge.weight,
                                        edge.active))
        genes.sort(key=lambda gene: gene.innovation)
        return genes

    def clone(self) -> 'Genome':
        """
        Full structural copy, obtained by rebuilding the genome from its gene records.
        """
        return Genome.un_flatten(self.flatten(), self.num_inputs, self.num_outputs, self.activation, self._rng)

    def map_global_ids(self, genes: Sequence[GeneRecord]) -> dict[int, int]:
        """
        Make sure every node referenced by 'genes' exists in this genome.

        Missing hidden nodes are added in ascending order of global ID.

        Returns:
            mapping from global ID to local ID, for every node referenced by 'genes'
        """
        referenced = set()
        for gene in genes:
            referenced.add(gene.from_id)
            referenced.add(gene.to_id)

        mapping = {}
        for global_id in sorted(referenced):
            local_id = self.global_to_local(global_id)
            if local_id is None:
                if global_id < self.num_inputs + self.num_outputs + 1:
                    raise ValueError(f"global ID {global_id} is neither a fixed nor a hidden node")
                local_id = self.add_node(global_id)
            mapping[global_id] = local_id
        return mapping

    @property
    def bias_id(self) -> int:
        return self.num_inputs

    @property
    def output_ids(self) -> range:
        return range(self.num_inputs + 1, self.num_inputs + self.num_outputs + 1)

    @property
    def num_nodes(self) -> int:
        return len(self.nodes)

    @property
    def num_hidden(self) -> int:
        return len(self.nodes) - self.num_inputs - self.num_outputs - 1

    def connect_ends(self, max_weight: float = MAX_WEIGHT) -> None:
        """
        Connect every input node, and the bias node, to every output node.
        Weights are drawn uniformly from [-max_weight, max_weight]; innovation
        numbers are deterministic: input_index * num_outputs + output_index.
        """
        for i in range(self.num_inputs + 1):
            for j in range(self.num_outputs):
                self.add_edge(i,
                              self.num_inputs + 1 + j,
                              i * self.num_outputs + j,
                              self._rng.uniform(-max_weight, max_weight))

    def add_node(self, global_id: int) -> int:
        """
        Append a node with the given historical identity.

        Returns:
            the local ID of the new node
        """
        local_id = len(self.nodes)
        self.nodes.append(Node(local_id, global_id, self.activation))
        self._local_ids[global_id] = local_id
        return local_id

    def add_edge(self, node_in: int, node_out: int, innovation: int, weight: float, active: bool = True) -> None:
        """
        Add a connection between two existing nodes.

        The caller is responsible for not creating a cycle. Active connections
        not leaving the bias node are also registered in 'edges' (connections
        leaving the bias node are never split, so they are kept out of it).

        Parameters:
            node_in:    local ID of the source node
            node_out:   local ID of the destination node
            innovation: innovation number of the connection
            weight:     weight of the connection
            active:     whether the connection is enabled

        Raises:
            ValueError: for a self-loop or an unknown local ID
        """
        if node_in == node_out:
            raise ValueError(f"self-loop connection on node {node_in}")
        self._check_local_id(node_in)
        self._check_local_id(node_out)

        if active:
            self._register(node_in, node_out)
        self.nodes[node_in].add_edge(innovation, weight, active, node_out)

    def disable_edge(self, node_in: int, node_out: int) -> bool:
        """
        Disable the connection 'node_in' -> 'node_out'.

        Returns:
            whether the connection existed and was enabled
        """
        changed = self.nodes[node_in].disable_edge(node_out)
        if changed:
            self._unregister(node_in, node_out)
        return changed

    def enable_edge(self, node_in: int, node_out: int) -> bool:
        """
        Enable the connection 'node_in' -> 'node_out'.

        Returns:
            whether the connection existed and was disabled
        """
        changed = self.nodes[node_in].enable_edge(node_out)
        if changed:
            self._register(node_in, node_out)
        return changed

    def split_edge(self,
                   node_in    : int,
                   node_out   : int,
                   innovation : int,
                   new_node_id: int,
                   innovation2: int | None = None) -> int | None:
        """
        Split the connection 'node_in' -> 'node_out' by inserting a new node.

        The connection being split is disabled; it is replaced by a connection from
        'node_in' to the new node (weight 1.0) and a connection from the new node to
        'node_out' (the old weight). If the genome already contains a node with
        global ID 'new_node_id' (the split has been inherited), nothing happens.

        Parameters:
            node_in:     local ID of the source of the connection to split
            node_out:    local ID of the destination of the connection to split
            innovation:  innovation number of the connection 'node_in' -> new node
            new_node_id: global ID of the new node
            innovation2: innovation number of the connection new node -> 'node_out'
                         (defaults to 'innovation' + 1)

        Returns:
            local ID of the new node, or None if the split was already present
        """
        if self.node_exists(new_node_id):
            return None

        old_weight = self.edge_weight(node_in, node_out)
        if old_weight is None:
            raise ValueError(f"cannot split missing connection {node_in} -> {node_out}")
        if innovation2 is None:
            innovation2 = innovation + 1

        self.disable_edge(node_in, node_out)
        new_node = self.add_node(new_node_id)
        self.add_edge(node_in,  new_node, innovation,  1.0)
        self.add_edge(new_node, node_out, innovation2, old_weight)
        return new_node

    def random_edge(self) -> tuple[int, int] | None:
        """
        Find a connection which can be added to the genome.

        The source is an input, the bias or a hidden node; the destination is an
        output or a hidden node. A candidate is rejected if it is a self-loop, if
        it is already present and enabled, or if it would close a cycle (checked
        by temporarily adding it and running the cycle detection). A candidate
        which is present but disabled can be returned; re-enabling it is safe.

        Note that the search is randomized and gives up after a fixed number of
        attempts, so it might miss the rare valid candidate.

        Returns:
            (from, to) local IDs, or None if no candidate was found
        """
        num_hidden = self.num_hidden
        for _ in range(RANDOM_EDGE_ATTEMPTS):

            # Sources: inputs, bias, then hidden nodes (skipping over the outputs)
            node_in = self._rng.randint(0, self.num_inputs + num_hidden)
            if node_in > self.num_inputs:
                node_in += self.num_outputs

            # Destinations: outputs and hidden nodes
            node_out = self.num_inputs + 1 + self._rng.randint(0, self.num_outputs + num_hidden - 1)

            # Carry out quick checks first
            if node_in == node_out:
                continue
            existing = self.nodes[node_in].find_edge(node_out)
            if existing is not None and existing.active:
                continue

            # Carry out expensive check last; the weight is irrelevant here
            self.add_edge(node_in, node_out, -1, 1.0)
            cycle = self.check_cycle()
            self._remove_last_edge(node_in)
            if not cycle:
                return node_in, node_out

        return None

    def random_split(self) -> tuple[int, int] | None:
        """
        Pick uniformly one of the active connections which can be split
        (connections leaving the bias node are never split).

        Returns:
            (from, to) local IDs, or None if there are no such connections
        """
        if not self.edges:
            return None
        return next(itertools.islice(self.edges, self._rng.randrange(len(self.edges)), None))

    def random_disable(self) -> bool:
        """
        Disable a randomly chosen connection among those which could be split.

        Returns:
            whether a connection was disabled
        """
        pair = self.random_split()
        if pair is None:
            return False
        return self.disable_edge(*pair)

    def perturb_weights(self, strength: float, max_weight: float = MAX_WEIGHT) -> None:
        """
        Add to every weight a perturbation drawn uniformly from [-strength, strength],
        clipping the result to [-max_weight, max_weight].
        """
        for node in self.nodes:
            for edge in node.edges:
                new_weight  = edge.weight + self._rng.uniform(-strength, strength)
                edge.weight = float(np.clip(new_weight, -max_weight, max_weight))

    def randomize_weights(self, max_weight: float = MAX_WEIGHT) -> None:
        """
        Replace every weight with one drawn uniformly from [-max_weight, max_weight].
        """
        for node in self.nodes:
            for edge in node.edges:
                edge.weight = self._rng.uniform(-max_weight, max_weight)

    def node_exists(self, global_id: int) -> bool:
        return global_id in self._local_ids

    def edge_exists(self, node_in: int, node_out: int) -> bool:
        return self.nodes[node_in].edge_exists(node_out)

    def edge_weight(self, node_in: int, node_out: int) -> float | None:
        return self.nodes[node_in].edge_weight(node_out)

    def local_to_global(self, local_id: int) -> int:
        return self.nodes[local_id].global_id

    def global_to_local(self, global_id: int) -> int | None:
        return self._local_ids.get(global_id)

    def evaluate(self, inputs: Sequence[float]) -> list[float]:
        """
        Compute the network outputs for the given inputs.

        Nodes are processed in topological order (Kahn's algorithm) over the active
        connections. A node's activation function is applied to the weighted sum of
        its inputs once all of them have been received. Nodes with no incoming
        active connection evaluate to the activation function's value at 0.

        Parameters:
            inputs: one value per input node

        Returns:
            one value per output node
        """
        if len(inputs) != self.num_inputs:
            raise ValueError(f"expected {self.num_inputs} inputs, got {len(inputs)}")

        num_nodes   = len(self.nodes)
        node_values = [0.0] * num_nodes
        node_values[:self.num_inputs] = [float(x) for x in inputs]
        node_values[self.bias_id] = 1.0

        # Only active connections count towards the in-degree
        in_degree = [0] * num_nodes
        for node in self.nodes:
            for edge in node.edges:
                if edge.active:
                    in_degree[edge.target] += 1

        # Start with nodes that have no incoming connections
        queue = deque()
        for local_id in range(num_nodes):
            if in_degree[local_id] == 0:
                if local_id > self.bias_id:
                    node_values[local_id] = self.nodes[local_id].evaluate(0.0)
                queue.append(local_id)

        while queue:
            node = self.nodes[queue.popleft()]
            for edge in node.edges:
                if not edge.active:
                    continue
                target = edge.target
                node_values[target] += node_values[node.local_id] * edge.weight
                in_degree[target]   -= 1
                if in_degree[target] == 0:
                    node_values[target] = self.nodes[target].evaluate(node_values[target])
                    queue.append(target)

        return node_values[self.num_inputs + 1:self.num_inputs + self.num_outputs + 1]

    def check_cycle(self) -> bool:
        """
        Check whether the active connections contain a directed cycle.

        Iterative depth first search with three colors: a gray node is on the
        current search path, so reaching a gray node means we found a back edge.
        Runs in O(nodes + active connections).
        """
        color = [_WHITE] * len(self.nodes)
        for start in range(len(self.nodes)):
            if color[start] != _WHITE:
                continue

            color[start] = _GRAY
            stack = [(start, 0)]   # (node, index of next connection to follow)
            while stack:
                local_id, next_edge = stack[-1]
                edges = self.nodes[local_id].edges
                while next_edge < len(edges) and not edges[next_edge].active:
                    next_edge += 1

                # All connections followed, the node is done
                if next_edge == len(edges):
                    color[local_id] = _BLACK
                    stack.pop()
                    continue

                stack[-1] = (local_id, next_edge + 1)
                target = edges[next_edge].target
                if color[target] == _GRAY:
                    return True
                if color[target] == _WHITE:
                    color[target] = _GRAY
                    stack.append((target, 0))
        return False

    def _check_local_id(self, local_id: int) -> None:
        if not 0 <= local_id < len(self.nodes):
            raise ValueError(f"unknown local node ID {local_id}")

    def _register(self, node_in: int, node_out: int) -> None:
        if node_in != self.bias_id:
            self.edges.add((node_in, node_out))
        self.num_connections += 1

    def _unregister(self, node_in: int, node_out: int) -> None:
        self.edges.discard((node_in, node_out))
        self.num_connections -= 1

    def _remove_last_edge(self, node_in: int) -> None:
        edge = self.nodes[node_in].remove_last_edge()
        if edge.active:
            self._unregister(node_in, edge.target)

    def visualize(self, view: bool = False) -> graphviz.Digraph:
        """
        Visualize the network using Graphviz.

        Parameters:
            view: If True, render the graph and open the result

        Returns:
            graphviz.Digraph object representing the network
        """
        dot = graphviz.Digraph()
        dot.attr(rankdir='LR')  # Left to right layout

        node_attrs = {'style': 'filled', 'shape': 'circle', 'fontsize': '8', 'width': '0.5', 'fixedsize': 'true'}
        with dot.subgraph(name='cluster_input') as input_cluster:
            input_cluster.attr(rank='source', label='Inputs', style='invisible')
            for local_id in range(self.bias_id + 1):
                label = 'bias' if local_id == self.bias_id else f"in {local_id}"
                input_cluster.node(str(local_id), label=label, fillcolor='lightgrey', **node_attrs)

        for node in self.nodes[self.num_inputs + self.num_outputs + 1:]:
            dot.node(str(node.local_id), label=f"id={node.global_id}", fillcolor='lightblue', **node_attrs)

        with dot.subgraph(name='cluster_output') as output_cluster:
            output_cluster.attr(rank='sink', label='Outputs', style='invisible')
            for local_id in self.output_ids:
                output_cluster.node(str(local_id), label=f"out {local_id}", fillcolor='white', **node_attrs)

        # Disabled connections are drawn in light gray
        for node in self.nodes:
            for edge in node.edges:
                dot.edge(str(node.local_id), str(edge.target),
                         label=f"i={edge.innovation},w={edge.weight:.2f}",
                         fontsize='6',
                         color='black' if edge.active else 'lightgray')

        if view:
            dot.render(view=True, cleanup=True)
        return dot

    def __str__(self):
        conn_genes_str = ''.join(str(gene) for gene in self.flatten())
        return (f"Nodes: {len(self.nodes)} ({self.num_hidden} hidden), "
                f"active connections: {self.num_connections}\nConns: {conn_genes_str}")
