import pytest

from softmesh.adjacency import AdjacencyGraph
from softmesh.builders import build_square_grid
from softmesh.diagnostics import TopologyError
from softmesh.model import MeshModel
from softmesh.models import Vertex, edge_key, face_key


def test_canonical_keys():
    assert edge_key(5, 2) == (2, 5)
    assert edge_key(2, 5) == (2, 5)
    assert face_key(9, 1, 4) == (1, 4, 9)


def test_vertex_tex_defaults_to_position():
    assert Vertex(1, 2.0, 3.0).tex == (2.0, 3.0)
    assert Vertex(1, 2.0, 3.0, 0.25, 0.75).tex == (0.25, 0.75)


def test_add_edge_and_face_check_ids():
    model = MeshModel()
    a = model.add_vertex(0, 0)
    b = model.add_vertex(1, 0)
    with pytest.raises(KeyError):
        model.add_edge(a, 99)
    with pytest.raises(KeyError):
        model.add_face(a, b, 99)
    c = model.add_vertex(0, 1)
    with pytest.raises(ValueError):
        model.add_face(a, b, a)
    assert model.add_face(c, b, a) == (0, 1, 2)


def test_named_vertex():
    model = MeshModel()
    vid = model.add_vertex(1.0, 1.0, name="anchor")
    assert model.names == {"anchor": vid}


def test_validate_lists_structural_problems():
    model = MeshModel(
        vertices=[Vertex(0, 0.0, 0.0), Vertex(1, 1.0, 0.0)],
        graph=AdjacencyGraph({0: [1, 5], 1: [0, 1]}),
        distances={(0, 7): 1.0, (1, 1): 1.0},
        names={"ghost": 12},
    )
    errors = model.validate()

    assert "Graph references missing vertex 5" in errors
    assert "Vertex 1 is its own neighbor" in errors
    assert "Vertex 0 lists 5 but not the reverse" in errors
    assert "Distance constraint (0, 7) references a missing vertex" in errors
    assert "Distance constraint (1, 1) is a self-pair" in errors
    assert "Name 'ghost' points at missing vertex 12" in errors


def test_build_rejects_unknown_graph_ids():
    model = MeshModel(
        vertices=[Vertex(0, 0.0, 0.0)],
        graph=AdjacencyGraph({0: [1]}),
    )
    with pytest.raises(TopologyError):
        model.build_topology()


def test_built_grid_validates_clean():
    model = build_square_grid(3, 3)
    model.build_topology()
    assert model.validate() == []


def test_border_rings_start_at_gap():
    model = build_square_grid(1, 1)
    model.build_topology()
    rings = model.border_rings()
    assert sorted(rings) == [0, 1, 2, 3]
    for vid, ring in rings.items():
        assert ring == model.graph.neighbors(vid)


class TestTransforms:

    def test_transform_scales_positions_only(self):
        model = build_square_grid(1, 1)
        model.transform([[2.0, 0.0], [0.0, 3.0]])
        assert model.vertices[3].position == pytest.approx((2.0, 3.0))
        assert model.vertices[3].tex == pytest.approx((1.0, 1.0))

    def test_offset(self):
        model = build_square_grid(1, 1)
        model.offset(1.0, -1.0)
        assert model.vertices[0].position == pytest.approx((1.0, -1.0))
        assert model.vertices[0].tex == pytest.approx((0.0, 0.0))

    def test_transform_requires_2x2(self):
        model = build_square_grid(1, 1)
        with pytest.raises(ValueError):
            model.transform([[1.0, 0.0, 0.0]])

    def test_rotation_preserves_topology(self):
        model = build_square_grid(2, 2)
        model.build_topology()
        faces = set(model.faces)
        borders = set(model.borders)

        model.transform([[0.0, -1.0], [1.0, 0.0]])
        model.build_topology()
        assert model.faces == faces
        assert model.borders == borders
