"""
demo.py — The shipped demo graph
================================
Seven nodes, ten directed edges, every cost the Euclidean distance
between the node positions.  The classic run is start=0, end=5.
"""

from graph.graph import Graph

DEMO_POSITIONS = [
    (50, 100),
    (50, 220),
    (110, 160),
    (170, 400),
    (170, 40),
    (290, 340),
    (350, 220),
]

DEMO_EDGES = [
    (0, 1),
    (0, 2),
    (2, 4),
    (5, 3),
    (3, 5),
    (1, 3),
    (4, 6),
    (6, 5),
    (5, 1),
    (1, 6),
]

DEMO_START = 0
DEMO_END   = 5


def build_demo_graph() -> Graph:
    g = Graph()
    for x, y in DEMO_POSITIONS:
        g.add_node(x, y)
    for source, target in DEMO_EDGES:
        g.add_euclidean_edge(source, target)
    return g
