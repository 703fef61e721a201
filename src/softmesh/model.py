from __future__ import annotations

import json
import math
from typing import Dict, Iterable, List, Optional, Sequence, Set

import numpy as np

from .adjacency import AdjacencyGraph
from .config import BuildConfig
from .diagnostics import TopologyReport
from .ids import IdAllocator
from .models import EdgeKey, FaceKey, Vertex, edge_key, face_key
from .topology import build_topology_from_faces, build_topology_from_graph


class MeshModel:
    """Topology container for a deformable surface mesh.

    Owns the vertex set, the adjacency graph, the canonical face set, the
    border set and the distance-constraint table.  Topology builds mutate
    these in place; see :mod:`topology`.
    """

    VERSION = "2.0"

    def __init__(
        self,
        vertices: Iterable[Vertex] = (),
        graph: Optional[AdjacencyGraph] = None,
        faces: Iterable[Sequence[int]] = (),
        distances: Optional[Dict[EdgeKey, float]] = None,
        names: Optional[Dict[str, int]] = None,
        tex_layer: int = -2,
        is_static: bool = False,
    ) -> None:
        self.vertices: Dict[int, Vertex] = {v.id: v for v in vertices}
        self.graph = graph if graph is not None else AdjacencyGraph()
        self.faces: Set[FaceKey] = {face_key(*f) for f in faces}
        self.borders: Set[int] = set()
        self.classification: Dict[int, str] = {}
        self.distances: Dict[EdgeKey, float] = dict(distances or {})
        self.auto_distances: Set[EdgeKey] = set()
        self.names: Dict[str, int] = dict(names or {})
        self.tex_layer = tex_layer
        self.is_static = is_static
        self.ids = IdAllocator()
        for vid in self.vertices:
            self.ids.observe(vid)

    # ── construction ───────────────────────────────────────────────

    def add_vertex(
        self,
        x: float,
        y: float,
        u: Optional[float] = None,
        v: Optional[float] = None,
        weight: float = 1.0,
        id: Optional[int] = None,
        name: Optional[str] = None,
    ) -> int:
        """Add a vertex and return its id.

        A fresh id is allocated unless *id* is given; a given id must not
        already be in use.
        """
        if id is None:
            vid = self.ids.allocate()
        else:
            if id in self.vertices:
                raise ValueError(f"Vertex id {id} already in use")
            self.ids.observe(id)
            vid = id
        self.vertices[vid] = Vertex(vid, float(x), float(y), u, v, weight)
        self.graph.add_vertex(vid)
        if name is not None:
            self.names[name] = vid
        return vid

    def add_edge(self, a: int, b: int) -> None:
        """Link *a* and *b*; call :meth:`squash` after bulk insertion."""
        for vid in (a, b):
            if vid not in self.vertices:
                raise KeyError(f"Edge ({a}, {b}) references unknown vertex {vid}")
        self.graph.add_edge(a, b)

    def add_face(self, a: int, b: int, c: int) -> FaceKey:
        for vid in (a, b, c):
            if vid not in self.vertices:
                raise KeyError(f"Face ({a}, {b}, {c}) references unknown vertex {vid}")
        if len({a, b, c}) != 3:
            raise ValueError(f"Face ({a}, {b}, {c}) has repeated vertex ids")
        key = face_key(a, b, c)
        self.faces.add(key)
        return key

    def set_distance(self, a: int, b: int, value: float) -> None:
        key = edge_key(a, b)
        self.distances[key] = float(value)
        self.auto_distances.discard(key)

    def squash(self) -> None:
        self.graph.squash()

    def set_static(self) -> None:
        self.is_static = True

    # ── topology ───────────────────────────────────────────────────

    def build_topology(self, config: Optional[BuildConfig] = None) -> TopologyReport:
        """Graph → faces: infer triangles, borders and ring order."""
        return build_topology_from_graph(self, config)

    def build_topology_from_faces(self, config: Optional[BuildConfig] = None) -> TopologyReport:
        """Faces → graph: rebuild adjacency from the explicit face list."""
        return build_topology_from_faces(self, config)

    def validate(self) -> List[str]:
        errors: List[str] = []

        for vid in sorted(self.graph.referenced_ids() - self.vertices.keys()):
            errors.append(f"Graph references missing vertex {vid}")
        for vid in self.graph.vertex_ids():
            if vid in self.graph.neighbors(vid):
                errors.append(f"Vertex {vid} is its own neighbor")
        for a, b in self.graph.asymmetric_pairs():
            errors.append(f"Vertex {a} lists {b} but not the reverse")

        for face in sorted(self.faces):
            if len(set(face)) != 3:
                errors.append(f"Face {face} has repeated vertex ids")
            for vid in face:
                if vid not in self.vertices:
                    errors.append(f"Face {face} references missing vertex {vid}")

        for a, b in sorted(self.distances):
            if a == b:
                errors.append(f"Distance constraint ({a}, {b}) is a self-pair")
            elif a not in self.vertices or b not in self.vertices:
                errors.append(f"Distance constraint ({a}, {b}) references a missing vertex")

        for name, vid in sorted(self.names.items()):
            if vid not in self.vertices:
                errors.append(f"Name {name!r} points at missing vertex {vid}")

        return errors

    def border_rings(self) -> Dict[int, List[int]]:
        """Return the gap-rotated ring of every border vertex."""
        return {vid: list(self.graph.neighbors(vid)) for vid in sorted(self.borders)}

    # ── coordinate transforms ──────────────────────────────────────

    def positions(self) -> np.ndarray:
        """Vertex positions as an ``(n, 2)`` array in ascending id order."""
        ids = sorted(self.vertices)
        return np.array([self.vertices[vid].position for vid in ids], dtype=float).reshape(-1, 2)

    def _set_positions(self, xy: np.ndarray) -> None:
        for vid, (x, y) in zip(sorted(self.vertices), xy):
            old = self.vertices[vid]
            u, v = old.tex
            self.vertices[vid] = Vertex(vid, float(x), float(y), u, v, old.weight)

    def transform(self, matrix: Sequence[Sequence[float]]) -> None:
        """Apply a 2×2 linear map to every position (texture unchanged)."""
        m = np.asarray(matrix, dtype=float)
        if m.shape != (2, 2):
            raise ValueError(f"transform expects a 2x2 matrix, got shape {m.shape}")
        self._set_positions(self.positions() @ m.T)

    def offset(self, dx: float, dy: float) -> None:
        self._set_positions(self.positions() + np.array([dx, dy], dtype=float))

    # ── serialization ──────────────────────────────────────────────

    def to_dict(self) -> dict:
        vertices_payload = []
        for vid in sorted(self.vertices):
            vertex = self.vertices[vid]
            vertices_payload.append(
                {
                    "id": vid,
                    "position": [vertex.x, vertex.y],
                    "tex": list(vertex.tex),
                    "weight": vertex.weight,
                }
            )

        return {
            "version": self.VERSION,
            "next_id": self.ids.peek(),
            "tex_layer": self.tex_layer,
            "is_static": self.is_static,
            "names": dict(sorted(self.names.items())),
            "vertices": vertices_payload,
            "neighbors": self.graph.to_dict(),
            "borders": sorted(self.borders),
            "faces": [list(f) for f in sorted(self.faces)],
            "distances": [
                {"edge": list(key), "target": value}
                for key, value in sorted(self.distances.items())
            ],
            "defaulted": [list(key) for key in sorted(self.auto_distances)],
        }

    @classmethod
    def from_dict(cls, payload: dict) -> "MeshModel":
        if "vs" in payload:
            payload = _migrate_legacy(payload)
        version = payload.get("version")
        if version != cls.VERSION:
            raise ValueError(f"Unsupported model version {version!r}")

        vertices = []
        for entry in payload.get("vertices", []):
            x, y = entry["position"]
            tex = entry.get("tex")
            u, v = (float(tex[0]), float(tex[1])) if tex is not None else (None, None)
            vertices.append(
                Vertex(int(entry["id"]), float(x), float(y), u, v, float(entry.get("weight", 1.0)))
            )

        model = cls(
            vertices,
            AdjacencyGraph.from_dict(payload.get("neighbors", {})),
            payload.get("faces", []),
            {edge_key(*d["edge"]): float(d["target"]) for d in payload.get("distances", [])},
            payload.get("names", {}),
            payload.get("tex_layer", -2),
            payload.get("is_static", False),
        )
        model.borders = set(payload.get("borders", []))
        model.auto_distances = {edge_key(*e) for e in payload.get("defaulted", [])}
        model.ids.reserve(int(payload.get("next_id", 0)))
        return model

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, sort_keys=True)

    @classmethod
    def from_json(cls, json_data: str) -> "MeshModel":
        return cls.from_dict(json.loads(json_data))


# ═══════════════════════════════════════════════════════════════════
# Legacy record migration
# ═══════════════════════════════════════════════════════════════════


def _migrate_legacy(payload: dict) -> dict:
    """Convert the unversioned record into the current layout.

    The old record keyed everything by stringified id: ``vs`` (``pos``,
    ``tex`` and either ``im`` or ``mass``), ``neigh``, ``fs``, ``dcs``
    (``[[a, b], target]`` pairs), ``name``, ``border``, ``id_alloc``.
    """
    vertices = []
    for vid, raw in sorted(payload.get("vs", {}).items(), key=lambda kv: int(kv[0])):
        if "im" in raw:
            weight = float(raw["im"])
        elif "mass" in raw:
            mass = float(raw["mass"])
            weight = 1.0 / mass if mass > 0.0 and math.isfinite(mass) else 0.0
        else:
            weight = 1.0
        vertices.append(
            {
                "id": int(vid),
                "position": list(raw["pos"]),
                "tex": list(raw.get("tex", raw["pos"])),
                "weight": weight,
            }
        )

    return {
        "version": MeshModel.VERSION,
        "next_id": int(payload.get("id_alloc", 0)),
        "tex_layer": payload.get("tex_layer", -2),
        "is_static": payload.get("is_static", False),
        "names": {k: int(v) for k, v in payload.get("name", {}).items()},
        "vertices": vertices,
        "neighbors": payload.get("neigh", {}),
        "borders": [int(v) for v in payload.get("border", [])],
        "faces": payload.get("fs", []),
        "distances": [
            {"edge": list(edge), "target": target}
            for edge, target in payload.get("dcs", [])
        ],
    }
