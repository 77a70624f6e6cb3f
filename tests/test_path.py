"""
Unit tests for path reconstruction helpers.
"""

import pytest

from graph import Graph, InvalidState, AlgorithmExhausted
from algorithms import DijkstraEngine, reconstruct, path_edges, path_cost, mark_final_path


def finished(graph, start, end):
    engine = DijkstraEngine(graph)
    engine.initialize(start, end)
    engine.run_to_completion()
    return engine


def test_reconstruct_before_initialize_raises(demo_graph):
    with pytest.raises(InvalidState):
        reconstruct(DijkstraEngine(demo_graph), 5)


def test_path_edges_and_cost_match_distance(demo_graph):
    engine = finished(demo_graph, 0, 5)
    path = reconstruct(engine, 5)

    edges = path_edges(engine, path)
    assert [(e.source, e.target) for e in edges] == [(0, 1), (1, 3), (3, 5)]
    assert path_cost(engine, path) == pytest.approx(engine.distance_of(5), abs=1e-9)


def test_path_edges_pick_the_cheapest_parallel_edge():
    g = Graph()
    a, b, c = g.add_node(), g.add_node(), g.add_node()
    g.add_edge(a, b, 4.0)
    cheap = g.add_edge(a, b, 1.0)
    g.add_edge(b, c, 1.0)

    engine = finished(g, a, c)
    path = reconstruct(engine, c)

    assert path == [a, b, c]
    assert path_edges(engine, path)[0].id == cheap
    assert path_cost(engine, path) == 2.0


def test_mark_final_path_sets_only_route_flags(demo_graph):
    engine = finished(demo_graph, 0, 5)
    route = mark_final_path(engine, reconstruct(engine, 5))

    on_path = {e.id for e in demo_graph.edges.values() if e.on_final_path}
    assert on_path == {e.id for e in route}
    assert len(on_path) == 3


def test_reconstruct_mid_run_gives_best_known_route(demo_graph):
    engine = DijkstraEngine(demo_graph)
    engine.initialize(0, 5)
    engine.step()

    with pytest.raises(InvalidState):
        reconstruct(engine, 5)
    assert reconstruct(engine, 2) == [0, 2]


def test_predecessor_cycle_is_reported(demo_graph):
    engine = DijkstraEngine(demo_graph)
    engine.initialize(0, 5)
    engine.step()
    engine.step()
    # corrupt the map: 2 ↔ 4
    engine._predecessor[2] = 4
    engine._predecessor[4] = 2

    with pytest.raises(AlgorithmExhausted):
        reconstruct(engine, 4)
