from softmesh.adjacency import AdjacencyGraph
from softmesh.diagnostics import SELF_ADJACENCY


def test_add_edge_links_both_directions_without_dedup():
    graph = AdjacencyGraph()
    graph.add_edge(2, 1)
    graph.add_edge(1, 2)
    graph.add_edge(3, 1)

    assert graph.neighbors(1) == [2, 2, 3]
    assert graph.neighbors(2) == [1, 1]
    assert graph.neighbors(3) == [1]


def test_squash_sorts_and_dedups():
    graph = AdjacencyGraph()
    graph.add_edge(2, 1)
    graph.add_edge(1, 2)
    graph.add_edge(3, 1)
    graph.squash()

    assert graph.to_dict() == {"1": [2, 3], "2": [1], "3": [1]}
    assert list(graph.edges()) == [(1, 2), (1, 3)]


def test_has_edge_tracks_mutation():
    graph = AdjacencyGraph()
    graph.add_edge(1, 2)
    assert graph.has_edge(2, 1)
    assert not graph.has_edge(2, 3)

    graph.add_edge(2, 3)
    assert graph.has_edge(3, 2)

    graph.set_ring(2, [1])
    assert not graph.has_edge(2, 3)


def test_set_ring_refreshes_only_its_own_index_entry():
    graph = AdjacencyGraph({0: [1, 2], 1: [0, 2], 2: [0, 1]})
    assert graph.has_edge(0, 1)
    index = graph._index

    graph.set_ring(0, [2, 1])
    assert graph._index is index
    assert graph.has_edge(0, 2) and graph.has_edge(1, 0)


def test_copy_is_independent():
    graph = AdjacencyGraph({0: [1], 1: [0]})
    clone = graph.copy()
    clone.add_edge(1, 2)
    clone.set_ring(0, [])

    assert graph.to_dict() == {"0": [1], "1": [0]}
    assert not graph.has_edge(1, 2)


def test_remove_self_loops_reports_each_vertex():
    graph = AdjacencyGraph({0: [0, 1, 0], 1: [0], 2: [2]})
    diagnostics = graph.remove_self_loops()

    assert [d.vertex_ids for d in diagnostics] == [(0,), (2,)]
    assert all(d.kind == SELF_ADJACENCY for d in diagnostics)
    assert graph.neighbors(0) == [1]
    assert graph.neighbors(2) == []
    assert graph.remove_self_loops() == []


def test_asymmetric_pairs_and_referenced_ids():
    graph = AdjacencyGraph({0: [1, 5], 1: [0]})
    assert graph.asymmetric_pairs() == [(0, 5)]
    assert graph.referenced_ids() == {0, 1, 5}
    assert 5 not in graph
    assert len(graph) == 2


def test_dict_round_trip():
    graph = AdjacencyGraph({3: [1, 2], 1: [3], 2: [3]})
    loaded = AdjacencyGraph.from_dict(graph.to_dict())
    assert loaded.to_dict() == graph.to_dict()
    assert loaded.vertex_ids() == [1, 2, 3]
