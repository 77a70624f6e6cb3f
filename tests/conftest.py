"""
Shared fixtures for the graph / engine / driver tests.
"""

import pytest

from graph import Graph, build_demo_graph
from main import create_app


@pytest.fixture
def demo_graph():
    return build_demo_graph()


@pytest.fixture
def tie_graph():
    """
    0 → 2 (2), 0 → 1 (2), 0 → 3 (5), 1 → 3 (1), 2 → 3 (1)

    After expanding 0, nodes 1 and 2 both sit at distance 2.
    """
    g = Graph()
    for _ in range(4):
        g.add_node()
    g.add_edge(0, 2, 2.0)
    g.add_edge(0, 1, 2.0)
    g.add_edge(0, 3, 5.0)
    g.add_edge(1, 3, 1.0)
    g.add_edge(2, 3, 1.0)
    return g


@pytest.fixture
def unreachable_graph():
    """0 → 1 → 2, plus node 3 with no edges at all."""
    g = Graph()
    for _ in range(4):
        g.add_node()
    g.add_edge(0, 1, 1.0)
    g.add_edge(1, 2, 1.0)
    return g


@pytest.fixture
def app():
    return create_app({"TESTING": True, "SECRET_KEY": "test"})


@pytest.fixture
def client(app):
    return app.test_client()
