import random

import numpy as np
import pytest

from fourd.config import LayoutConfig
from fourd.errors import InvalidArgument, UseAfterRemoval
from fourd.model import EdgeKey, Graph, Vertex


def test_add_vertex_assigns_monotonic_ids_and_jittered_positions():
    graph = Graph(LayoutConfig(seed=7, jitter=2.0))
    vertices = [graph.add_vertex({"label": {"text": str(i)}}) for i in range(5)]
    assert [v.id for v in vertices] == [0, 1, 2, 3, 4]
    for vertex in vertices:
        assert ((vertex.position >= 0.0) & (vertex.position < 2.0)).all()
        assert not vertex.velocity.any()
        assert not vertex.acceleration.any()
        assert vertex.edge_count == 0
    assert vertices[2].metadata == {"label": {"text": "2"}}
    assert str(vertices[3]) == "3"


def test_seeded_graphs_place_vertices_identically():
    a = Graph(LayoutConfig(seed=3))
    b = Graph(LayoutConfig(seed=3))
    for _ in range(4):
        assert (a.add_vertex().position == b.add_vertex().position).all()


def test_duplicate_edges_collapse_into_multiplicity():
    graph = Graph()
    v1, v2 = graph.add_vertex(), graph.add_vertex()
    first = graph.add_edge(v1, v2)
    second = graph.add_edge(v1, v2)
    assert first is second
    assert graph.edge_multiplicity[EdgeKey(v1.id, v2.id)] == 2
    assert v1.edge_count == 1 and v2.edge_count == 1

    graph.remove_edge(first)
    assert graph.has_edge(first)
    assert graph.multiplicity(v1, v2) == 1

    graph.remove_edge(first)
    assert not graph.has_edge(first)
    assert EdgeKey(v1.id, v2.id) not in graph.edge_multiplicity
    assert v1.edge_count == 0 and v2.edge_count == 0
    graph.check_invariants()


def test_edge_keys_are_ordered():
    graph = Graph()
    v1, v2 = graph.add_vertex(), graph.add_vertex()
    forward = graph.add_edge(v1, v2)
    backward = graph.add_edge(v2, v1)
    assert forward is not backward
    assert graph.multiplicity(v1, v2) == 1
    assert graph.multiplicity(v2, v1) == 1
    assert v1.edge_count == 2


def test_edge_options_and_str():
    graph = Graph()
    v1, v2 = graph.add_vertex(), graph.add_vertex()
    edge = graph.add_edge(v1, v2, {"directed": True, "strength": 0.5, "color": "red"})
    assert edge.directed is True
    assert edge.strength == 0.5
    assert edge.metadata["color"] == "red"
    assert str(edge) == f"{v1.id}-->{v2.id}"
    plain = graph.add_edge(v2, v1)
    assert plain.directed is False
    assert plain.strength == 1.0


def test_remove_edge_twice_is_a_no_op():
    graph = Graph()
    v1, v2 = graph.add_vertex(), graph.add_vertex()
    edge = graph.add_edge(v1, v2)
    graph.remove_edge(edge)
    graph.remove_edge(edge)
    assert len(graph.edges) == 0
    graph.check_invariants()


def test_remove_vertex_destroys_incident_edges_regardless_of_multiplicity():
    graph = Graph()
    hub = graph.add_vertex()
    leaves = [graph.add_vertex() for _ in range(3)]
    for leaf in leaves:
        graph.add_edge(hub, leaf)
        graph.add_edge(hub, leaf)
    graph.add_edge(leaves[0], leaves[1])

    graph.remove_vertex(hub)
    assert not graph.has_vertex(hub)
    assert len(graph.edges) == 1
    assert list(graph.edge_multiplicity) == [EdgeKey(leaves[0].id, leaves[1].id)]
    assert [leaf.edge_count for leaf in leaves] == [1, 1, 0]
    graph.check_invariants()


def test_stale_vertex_handles_are_rejected():
    graph = Graph()
    v1, v2 = graph.add_vertex(), graph.add_vertex()
    graph.remove_vertex(v1)
    with pytest.raises(UseAfterRemoval):
        graph.remove_vertex(v1)
    with pytest.raises(InvalidArgument):
        graph.add_edge(v1, v2)
    with pytest.raises(UseAfterRemoval):
        graph.vertex(v1.id)
    assert graph.vertex(v2.id) is v2

    edge = graph.add_edge(v2, graph.add_vertex())
    assert graph.edge(edge.id) is edge
    graph.remove_edge(edge)
    with pytest.raises(UseAfterRemoval):
        graph.edge(edge.id)


def test_vertex_ids_are_not_reused_after_removal():
    graph = Graph()
    v1 = graph.add_vertex()
    graph.remove_vertex(v1)
    assert graph.add_vertex().id == 1


def test_add_edge_rejects_foreign_and_non_vertex_endpoints():
    graph, other = Graph(), Graph()
    mine = graph.add_vertex()
    theirs = other.add_vertex()
    with pytest.raises(InvalidArgument):
        graph.add_edge(mine, theirs)
    with pytest.raises(InvalidArgument):
        graph.add_edge(mine, "not a vertex")
    with pytest.raises(InvalidArgument):
        graph.remove_edge(mine)
    with pytest.raises(ValueError):
        graph.remove_vertex(None)


def test_self_loops_follow_config():
    graph = Graph()
    vertex = graph.add_vertex()
    with pytest.raises(InvalidArgument):
        graph.add_edge(vertex, vertex)

    permissive = Graph(LayoutConfig(allow_self_loops=True))
    vertex = permissive.add_vertex()
    loop = permissive.add_edge(vertex, vertex)
    assert loop.is_loop
    assert vertex.edge_count == 1
    permissive.remove_vertex(vertex)
    assert len(permissive.edges) == 0
    permissive.check_invariants()


def test_clear_resets_everything_and_is_idempotent():
    graph = Graph()
    v1, v2 = graph.add_vertex(), graph.add_vertex()
    graph.add_edge(v1, v2)
    graph.add_edge(v1, v2)
    graph.clear()
    assert str(graph) == "|V|: 0,  |E|: 0"
    assert graph.edge_multiplicity == {}
    assert v1.edge_count == 0
    graph.clear()
    assert len(graph) == 0
    assert graph.add_vertex().id == 0


def test_graph_str_counts_vertices_and_edges():
    graph = Graph()
    a, b, c = graph.add_vertex(), graph.add_vertex(), graph.add_vertex()
    graph.add_edge(a, b)
    graph.add_edge(b, c)
    graph.add_edge(b, c)
    assert str(graph) == "|V|: 3,  |E|: 2"


def test_check_invariants_reports_broken_incidence():
    graph = Graph()
    v1, v2 = graph.add_vertex(), graph.add_vertex()
    edge = graph.add_edge(v1, v2)
    del v2.edges[edge.id]
    with pytest.raises(AssertionError):
        graph.check_invariants()


def test_invariants_hold_through_random_mutations():
    rng = random.Random(1234)
    graph = Graph(LayoutConfig(seed=1234))
    for _ in range(600):
        vertices = list(graph.iter_vertices())
        edges = list(graph.iter_edges())
        roll = rng.random()
        if roll < 0.25 or len(vertices) < 2:
            graph.add_vertex()
        elif roll < 0.65:
            source, target = rng.sample(vertices, 2)
            graph.add_edge(source, target)
        elif roll < 0.85 and edges:
            graph.remove_edge(rng.choice(edges))
        else:
            graph.remove_vertex(rng.choice(vertices))
        graph.check_invariants()
        assert all(v.edge_count == len(v.edges) for v in graph.iter_vertices())
        assert sum(v.edge_count for v in graph.iter_vertices()) == 2 * len(graph.edges)


def test_vertex_state_is_coerced_to_float_vectors():
    graph = Graph()
    vertex = graph.add_vertex()
    vertex.velocity = (1, 2, 3)
    assert vertex.velocity.dtype == np.float64
    assert vertex.velocity.shape == (3,)
    held = vertex.position
    vertex.position += vertex.velocity
    assert vertex.position is held
    with pytest.raises(InvalidArgument):
        vertex.position = [1.0, 2.0]
    assert Vertex(9, position=[1, 2, 3]).position.dtype == np.float64
