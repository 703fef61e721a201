import json
from pathlib import Path

import pytest

from softmesh.builders import build_block, build_square_grid
from softmesh.io import load_json, save_json
from softmesh.model import MeshModel

SCHEMA_PATH = Path(__file__).resolve().parent.parent / "schemas" / "model.schema.json"


def test_round_trip_json():
    model = build_square_grid(2, 3)
    model.set_distance(0, 1, 2.5)
    model.build_topology()
    model.tex_layer = 4
    model.set_static()

    loaded = MeshModel.from_json(model.to_json())

    assert loaded.to_dict() == model.to_dict()
    assert loaded.faces == model.faces
    assert loaded.borders == model.borders
    assert loaded.auto_distances == model.auto_distances
    assert loaded.is_static and loaded.tex_layer == 4


def test_loaded_model_keeps_allocating_fresh_ids():
    model = build_square_grid(1, 1)
    loaded = MeshModel.from_json(model.to_json())
    assert loaded.add_vertex(9.0, 9.0) == 4


def test_loaded_model_rebuilds_identically():
    model = build_block([[1, 1], [1, 0]])
    model.build_topology()
    loaded = MeshModel.from_json(model.to_json())
    loaded.build_topology()
    assert loaded.to_dict() == model.to_dict()


def test_save_and_load_file(tmp_path):
    model = build_square_grid(1, 2)
    model.build_topology()
    path = tmp_path / "model.json"
    save_json(model, path)
    assert load_json(path).to_dict() == model.to_dict()


def test_payload_validates_against_schema():
    import jsonschema

    schema = json.loads(SCHEMA_PATH.read_text())
    model = build_block([[1, 0], [1, 1]])
    model.build_topology()
    jsonschema.validate(instance=json.loads(model.to_json()), schema=schema)


def test_unknown_version_rejected():
    with pytest.raises(ValueError):
        MeshModel.from_dict({"version": "9.9"})


def test_texture_coordinates_are_loaded_as_floats():
    payload = build_square_grid(1, 1).to_dict()
    payload["vertices"][0]["tex"] = [1, 2]
    vertex = MeshModel.from_dict(payload).vertices[0]

    assert vertex.tex == (1.0, 2.0)
    assert isinstance(vertex.u, float) and isinstance(vertex.v, float)


class TestLegacyMigration:

    @pytest.fixture
    def legacy(self):
        return {
            "vs": {
                "0": {"pos": [0.0, 0.0], "tex": [0.0, 0.0], "im": 1.0},
                "1": {"pos": [1.0, 0.0], "tex": [0.5, 0.0], "im": 0.5},
                "2": {"pos": [0.0, 1.0], "tex": [0.0, 1.0], "mass": 2.0, "break_thresh": 0.1},
            },
            "neigh": {"0": [1, 2], "1": [0, 2], "2": [0, 1]},
            "fs": [[2, 1, 0]],
            "dcs": [[[1, 0], 1.5]],
            "name": {"lu": 0},
            "tex_layer": 3,
            "is_static": True,
            "id_alloc": 7,
        }

    def test_vertices_and_weights(self, legacy):
        model = MeshModel.from_dict(legacy)
        assert sorted(model.vertices) == [0, 1, 2]
        assert model.vertices[1].tex == (0.5, 0.0)
        assert [model.vertices[v].weight for v in (0, 1, 2)] == [1.0, 0.5, 0.5]

    def test_collections(self, legacy):
        model = MeshModel.from_dict(legacy)
        assert model.faces == {(0, 1, 2)}
        assert model.distances == {(0, 1): 1.5}
        assert model.names == {"lu": 0}
        assert model.tex_layer == 3
        assert model.is_static
        assert model.ids.peek() == 7

    def test_migrated_model_builds_and_saves_current_version(self, legacy):
        model = MeshModel.from_dict(legacy)
        report = model.build_topology_from_faces()
        assert model.borders == {0, 1, 2}
        assert model.distances[(0, 1)] == 1.5
        assert report.ok
        assert model.to_dict()["version"] == MeshModel.VERSION
