"""
Graph Model Module

This module implements the two building blocks of a genome's graph:
nodes and the directed, weighted connections leaving them.

A genome owns all its nodes in a single list (the "arena"); a connection refers
to its destination node by the node's local ID, which is an index into that list.

Classes:
    Connection: A weighted, enable-able edge pointing at a target node
    Node:       A graph node owning its list of outgoing connections
"""

from typing import Callable

class Connection:
    """
    A directed, weighted connection leaving a node.

    The source of the connection is the Node owning it; the destination is
    identified by its local ID (an index in the genome's node list).
    Disabled connections are skipped during evaluation, but kept around so
    they can be re-enabled and so they take part in crossover alignment.

    Public Attributes:
        target:     local ID of the destination node
        innovation: global innovation number identifying this connection
        weight:     weight of the connection
        active:     whether this connection is used during evaluation
    """

    __slots__ = ('target', 'innovation', 'weight', 'active')

    def __init__(self, innovation: int, weight: float, active: bool, target: int):
        self.target    : int   = target
        self.innovation: int   = innovation
        self.weight    : float = weight
        self.active    : bool  = active

    def __repr__(self):
        return (f"Connection(target={self.target:03d}, innovation={self.innovation:03d}, "
                f"weight={self.weight:+.6f}, active={self.active})")

class Node:
    """
    A node of a genome's graph.

    Each node has two identities:
     + local ID:  its index in the owning genome's node list; reassigned
                  whenever a genome is rebuilt (cloned, bred, un-flattened)
     + global ID: its historical identity, the same in every genome
                  containing "the same" node

    Public Attributes:
        local_id:   index of the node in the owning genome's node list
        global_id:  historical identity of the node
        edges:      outgoing connections, in insertion order
        activation: the activation function (shared by all nodes of a genome)

    Public Methods:
        add_edge(innovation, weight, active, target): Append an outgoing connection
        find_edge(to):                                First connection towards 'to'
        edge_exists(to):                              Whether a connection towards 'to' exists
        edge_weight(to):                              Weight of the connection towards 'to'
        disable_edge(to) / enable_edge(to):           Flip the 'active' flag of a connection
        remove_last_edge():                           Drop the most recently added connection
        evaluate(x):                                  Apply the activation function
    """

    __slots__ = ('local_id', 'global_id', 'edges', 'activation')

    def __init__(self, local_id: int, global_id: int, activation: Callable[[float], float]):
        self.local_id  : int                       = local_id
        self.global_id : int                       = global_id
        self.edges     : list[Connection]          = []
        self.activation: Callable[[float], float]  = activation

    def add_edge(self, innovation: int, weight: float, active: bool, target: int) -> None:
        """
        Append a new outgoing connection.
        No check for cycles is made; the caller must guarantee the graph stays acyclic.
        """
        self.edges.append(Connection(innovation, weight, active, target))

    def find_edge(self, to: int) -> Connection | None:
        for edge in self.edges:
            if edge.target == to:
                return edge
        return None

    def edge_exists(self, to: int) -> bool:
        return self.find_edge(to) is not None

    def edge_weight(self, to: int) -> float | None:
        """
        Returns:
            the weight of the connection towards node 'to', or None if there is no such connection
        """
        edge = self.find_edge(to)
        return None if edge is None else edge.weight

    def disable_edge(self, to: int) -> bool:
        """
        Disable the connection towards node 'to'.

        Returns:
            whether a connection changed state (False if absent or already disabled)
        """
        edge = self.find_edge(to)
        if edge is None or not edge.active:
            return False
        edge.active = False
        return True

    def enable_edge(self, to: int) -> bool:
        """
        Enable the connection towards node 'to'.

        Returns:
            whether a connection changed state (False if absent or already enabled)
        """
        edge = self.find_edge(to)
        if edge is None or edge.active:
            return False
        edge.active = True
        return True

    def remove_last_edge(self) -> Connection:
        return self.edges.pop()

    def evaluate(self, x: float) -> float:
        return self.activation(x)

    def __repr__(self):
        return f"Node(local_id={self.local_id}, global_id={self.global_id}, edges={len(self.edges)})"
