"""Topology reconstruction — graph → faces and faces → graph.

Both directions run the same per-vertex pass (:mod:`ordering`):

1. order the neighbors by angle around the vertex,
2. walk consecutive pairs, testing whether each pair closes a triangle,
3. classify the vertex and rotate its ring to the first gap.

They differ only in the continuity test.  Graph → faces asks "are the two
neighbors adjacent?" and collects the triangles it discovers; faces →
graph asks "is this triangle in the explicit face list?" and keeps that
list as the face set.  On a manifold mesh both yield the same borders and
ring rotations.

Degenerate vertices (fewer than two neighbors, or a neighbor sitting on
the vertex) are skipped and reported.  ``BuildConfig(strict=True)``
aborts the pass instead.  A pass works on a private graph and writes its
results to the model only once it completes, so any ``TopologyError``
leaves the model as it was.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, Dict, List, Optional, Set

from .adjacency import AdjacencyGraph
from .config import BuildConfig
from .constraints import clear_defaults, reconcile
from .diagnostics import (
    DEGENERATE_VERTEX,
    ERROR,
    MULTIPLE_GAPS,
    Diagnostic,
    TopologyError,
    TopologyReport,
    report,
)
from .models import BORDER, INVALID, FaceKey, Vertex, face_key
from .ordering import Linked, angular_order, classify_ring, coincident_neighbors

if TYPE_CHECKING:
    from .model import MeshModel

logger = logging.getLogger(__name__)


@dataclass
class _Derived:
    faces: Set[FaceKey] = field(default_factory=set)
    borders: Set[int] = field(default_factory=set)
    classification: Dict[int, str] = field(default_factory=dict)
    rings: Dict[int, List[int]] = field(default_factory=dict)


def build_topology_from_graph(
    model: "MeshModel",
    config: Optional[BuildConfig] = None,
) -> TopologyReport:
    """Infer faces, borders and ring order from ``model.graph``."""
    config = config or BuildConfig()
    result = TopologyReport(direction="graph")

    _require_known_ids(model, model.graph.referenced_ids())
    graph = model.graph.copy()
    result.diagnostics.extend(graph.remove_self_loops())
    graph.squash()
    for vid in model.vertices:
        graph.add_vertex(vid)

    derived = _classify_all(
        model.vertices, graph, lambda vid: graph.has_edge, True, config, result,
    )
    _commit(model, graph, derived)
    _finish(model, config, result)
    return result


def build_topology_from_faces(
    model: "MeshModel",
    config: Optional[BuildConfig] = None,
) -> TopologyReport:
    """Rebuild ``model.graph`` from the explicit face list and classify it."""
    config = config or BuildConfig()
    result = TopologyReport(direction="faces")

    explicit: Set[FaceKey] = {face_key(*f) for f in model.faces}
    _require_known_ids(model, {vid for f in explicit for vid in f})
    for a, b, c in sorted(explicit):
        if a == b or b == c:
            raise TopologyError(f"Face {(a, b, c)} repeats a vertex")

    graph = AdjacencyGraph()
    for vid in model.vertices:
        graph.add_vertex(vid)
    for a, b, c in sorted(explicit):
        graph.add_edge(a, b)
        graph.add_edge(a, c)
        graph.add_edge(b, c)
    graph.squash()

    def in_faces_of(center: int) -> Linked:
        return lambda a, b: face_key(center, a, b) in explicit

    derived = _classify_all(model.vertices, graph, in_faces_of, False, config, result)
    derived.faces = explicit
    _commit(model, graph, derived)
    _finish(model, config, result)
    return result


# ═══════════════════════════════════════════════════════════════════
# Shared per-vertex pass
# ═══════════════════════════════════════════════════════════════════


def _classify_all(
    vertices: Dict[int, Vertex],
    graph: AdjacencyGraph,
    linked_for: Callable[[int], Linked],
    propose_pair: bool,
    config: BuildConfig,
    result: TopologyReport,
) -> _Derived:
    """Classify every vertex of *graph* without touching it.

    *linked_for(vid)* returns the continuity test for the ring of *vid*.
    """
    diagnostics = result.diagnostics
    derived = _Derived()
    for vid in graph.vertex_ids():
        nbrs = graph.neighbors(vid)
        center = vertices[vid]

        if len(nbrs) <= 1:
            _degenerate(
                diagnostics, config, vid,
                f"Vertex {vid} has {len(nbrs)} neighbor(s); non-manifold",
            )
            derived.classification[vid] = INVALID
            continue

        coincident = coincident_neighbors(center, vertices, nbrs, config.coincident_tol)
        if coincident:
            _degenerate(
                diagnostics, config, vid,
                f"Vertex {vid} coincides with neighbor(s) {coincident}; angle undefined",
            )
            derived.classification[vid] = INVALID
            continue

        ring, angles = angular_order(center, vertices, nbrs)
        ring_class = classify_ring(
            vid, ring, angles, linked_for(vid), propose_pair=propose_pair,
        )
        if len(ring_class.gaps) > 1:
            report(
                diagnostics, logger, MULTIPLE_GAPS, ERROR, (vid,),
                f"Vertex {vid} has {len(ring_class.gaps)} boundary gaps "
                f"at ring positions {ring_class.gaps}; non-manifold",
            )

        derived.rings[vid] = ring_class.ring
        derived.classification[vid] = ring_class.status
        if ring_class.status == BORDER:
            derived.borders.add(vid)
        derived.faces.update(ring_class.triangles)
    return derived


def _degenerate(
    diagnostics: List[Diagnostic],
    config: BuildConfig,
    vid: int,
    message: str,
) -> None:
    if config.strict:
        raise TopologyError(message)
    report(diagnostics, logger, DEGENERATE_VERTEX, ERROR, (vid,), message)


def _require_known_ids(model: "MeshModel", ids: Set[int]) -> None:
    missing = sorted(ids - model.vertices.keys())
    if missing:
        raise TopologyError(f"Topology references unknown vertex id(s) {missing}")


def _commit(model: "MeshModel", graph: AdjacencyGraph, derived: _Derived) -> None:
    for vid, ring in derived.rings.items():
        graph.set_ring(vid, ring)
    clear_defaults(model.distances, model.auto_distances)
    model.auto_distances = set()
    model.graph = graph
    model.faces = derived.faces
    model.borders = derived.borders
    model.classification = derived.classification


def _finish(model: "MeshModel", config: BuildConfig, result: TopologyReport) -> None:
    diagnostics, inserted = reconcile(
        model.distances,
        model.graph,
        default=config.default_distance,
        prune_non_edges=config.prune_non_edges,
    )
    result.diagnostics.extend(diagnostics)
    model.auto_distances = inserted

    result.classification = dict(model.classification)
    result.face_count = len(model.faces)
    result.border_count = len(model.borders)
    logger.info(
        "[build_topology:%s] %d faces, %d borders, %d invalid, %d diagnostics",
        result.direction,
        result.face_count,
        result.border_count,
        len(result.invalid_vertices()),
        len(result.diagnostics),
    )
