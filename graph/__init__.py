"""
graph/
-----
Core data layer.  Public API:

    from graph import Graph, Node, Edge, NodeRole
    from graph import GraphError, InvalidReference, InvalidState, AlgorithmExhausted
"""

from graph.errors import GraphError, InvalidReference, InvalidState, AlgorithmExhausted
from graph.node   import Node,  NodeRole
from graph.edge   import Edge
from graph.graph  import Graph
from graph.demo   import build_demo_graph

__all__ = [
    "Node",      "NodeRole",
    "Edge",
    "Graph",
    "build_demo_graph",
    "GraphError",
    "InvalidReference",
    "InvalidState",
    "AlgorithmExhausted",
]
