"""
Unit tests for the Graph model.
"""

import math

import pytest

from graph import Graph, NodeRole, InvalidReference


def test_add_node_assigns_sequential_ids():
    g = Graph()
    assert [g.add_node() for _ in range(3)] == [0, 1, 2]
    assert g.node_count() == 3


def test_add_edge_unknown_node_raises():
    g = Graph()
    a = g.add_node()

    with pytest.raises(InvalidReference):
        g.add_edge(a, 7, 1.0)
    with pytest.raises(InvalidReference):
        g.add_edge(9, a, 1.0)
    assert g.edge_count() == 0


@pytest.mark.parametrize("cost", [-1.0, float("inf"), float("nan")])
def test_add_edge_rejects_bad_costs(cost):
    g = Graph()
    a, b = g.add_node(), g.add_node()

    with pytest.raises(ValueError):
        g.add_edge(a, b, cost)


def test_outgoing_edges_keep_insertion_order_and_direction():
    g = Graph()
    a, b, c = g.add_node(), g.add_node(), g.add_node()
    e1 = g.add_edge(a, c, 3.0)
    e2 = g.add_edge(a, b, 1.0)
    e3 = g.add_edge(a, b, 2.0)  # parallel
    g.add_edge(b, a, 1.0)

    assert [e.id for e in g.outgoing_edges(a)] == [e1, e2, e3]
    assert [e.id for e in g.edges_between(a, b)] == [e2, e3]
    assert g.outgoing_edges(c) == []

    with pytest.raises(InvalidReference):
        g.outgoing_edges(42)


def test_self_loop_is_allowed():
    g = Graph()
    a = g.add_node()
    eid = g.add_edge(a, a, 4.0)
    assert g.get_edge(eid).is_self_loop()


def test_set_edge_cost_changes_value_in_place():
    g = Graph()
    a, b = g.add_node(), g.add_node()
    eid = g.add_edge(a, b, 1.0)

    g.set_edge_cost(eid, 9.5)
    assert g.get_edge(eid).cost == 9.5

    with pytest.raises(InvalidReference):
        g.set_edge_cost(99, 1.0)


def test_euclidean_costs_follow_positions():
    g = Graph()
    a = g.add_node(0, 0)
    b = g.add_node(3, 4)
    eid = g.add_euclidean_edge(a, b)
    assert g.get_edge(eid).cost == 5.0

    g.get_node(b).x = 6
    g.get_node(b).y = 8
    g.update_euclidean_costs()
    assert g.get_edge(eid).cost == 10.0


def test_designate_moves_roles():
    g = Graph()
    for _ in range(3):
        g.add_node()

    g.designate(0, 2)
    assert g.get_node(0).role is NodeRole.START
    assert g.get_node(2).role is NodeRole.END

    g.designate(1, 0)
    assert g.get_node(1).role is NodeRole.START
    assert g.get_node(0).role is NodeRole.END
    assert g.get_node(2).role is NodeRole.NORMAL


def test_designate_unknown_node_leaves_roles_alone():
    g = Graph()
    g.add_node()
    g.add_node()
    g.designate(0, 1)

    with pytest.raises(InvalidReference):
        g.designate(0, 5)
    assert g.get_node(1).role is NodeRole.END


def test_dict_round_trip_keeps_ids_and_edge_order():
    g = Graph()
    a, b, c = g.add_node(1, 2, "A"), g.add_node(3, 4), g.add_node()
    g.add_edge(a, c, 2.0)
    g.add_edge(a, b, 1.5)

    copy = Graph.from_dict(g.to_dict())

    assert copy.node_ids() == [a, b, c]
    assert copy.get_node(a).label == "A"
    assert [(e.target, e.cost) for e in copy.outgoing_edges(a)] == [(c, 2.0), (b, 1.5)]
    # ids keep counting after the restored ones
    assert copy.add_node() == 3


def test_from_dict_rejects_dangling_edge():
    data = {"nodes": [{"id": 0}], "edges": [{"id": 0, "source": 0, "target": 3, "cost": 1}]}
    with pytest.raises(InvalidReference):
        Graph.from_dict(data)


def test_from_adjacency_list_parses_costs_and_arrows():
    text = """
    # comment
    A: B(3) C(7)
    B -> C
    C → A(2)
    """
    g = Graph.from_adjacency_list(text)

    labels = {n.label: n.id for n in g.nodes.values()}
    assert list(labels) == ["A", "B", "C"]
    out_a = [(e.target, e.cost) for e in g.outgoing_edges(labels["A"])]
    assert out_a == [(labels["B"], 3.0), (labels["C"], 7.0)]
    assert g.edges_between(labels["B"], labels["C"])[0].cost == 1.0
    assert g.edges_between(labels["C"], labels["A"])[0].cost == 2.0


def test_from_adjacency_list_rejects_garbage():
    with pytest.raises(ValueError):
        Graph.from_adjacency_list("A B C")


def test_generate_random_is_seeded_and_non_negative():
    g1 = Graph.generate_random(num_nodes=8, edge_probability=0.2, seed=7)
    g2 = Graph.generate_random(num_nodes=8, edge_probability=0.2, seed=7)

    assert g1.to_dict() == g2.to_dict()
    assert g1.node_count() == 8
    # spanning chain: at least n-1 edges
    assert g1.edge_count() >= 7
    assert all(e.cost >= 0 and math.isfinite(e.cost) for e in g1.edges.values())


def test_demo_graph_shape(demo_graph):
    assert demo_graph.node_count() == 7
    assert demo_graph.edge_count() == 10
    assert demo_graph.get_edge(0).cost == 120.0
