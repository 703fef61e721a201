"""softmesh — topology reconstruction for 2D deformable-surface meshes.

Public API is organised into layers:

- **Core** — vertex model, adjacency graph, id allocation, container, I/O
- **Topology** — angular ring ordering, manifold classification, face
  synthesis in both directions, distance-constraint reconciliation
- **Building** — procedural block generator and triangle-list constructor
- **Diagnostics** — build reports and the error taxonomy
"""

# ── Core ────────────────────────────────────────────────────────────
from .models import (
    BORDER,
    INTERIOR,
    INVALID,
    Vertex,
    edge_key,
    face_key,
)
from .adjacency import AdjacencyGraph
from .ids import IdAllocator
from .config import DEFAULT_DISTANCE, BuildConfig
from .model import MeshModel
from .io import load_json, save_json

# ── Topology ────────────────────────────────────────────────────────
from .ordering import (
    RingClassification,
    angular_order,
    classify_ring,
    coincident_neighbors,
    signed_angle_delta,
)
from .topology import build_topology_from_faces, build_topology_from_graph
from .constraints import clear_defaults, fill_defaults, fixup, reconcile

# ── Building ────────────────────────────────────────────────────────
from .builders import build_block, build_square_grid, from_triangles

# ── Diagnostics ─────────────────────────────────────────────────────
from .diagnostics import (
    DANGLING_EDGE,
    DEGENERATE_VERTEX,
    MISSING_DEFAULT,
    MULTIPLE_GAPS,
    SELF_ADJACENCY,
    Diagnostic,
    TopologyError,
    TopologyReport,
    diagnostics_report,
)

__all__ = [
    # Core
    "Vertex", "edge_key", "face_key", "INTERIOR", "BORDER", "INVALID",
    "AdjacencyGraph", "IdAllocator", "BuildConfig", "DEFAULT_DISTANCE",
    "MeshModel", "load_json", "save_json",
    # Topology
    "RingClassification", "angular_order", "classify_ring",
    "coincident_neighbors", "signed_angle_delta",
    "build_topology_from_graph", "build_topology_from_faces",
    "fixup", "fill_defaults", "clear_defaults", "reconcile",
    # Building
    "build_block", "build_square_grid", "from_triangles",
    # Diagnostics
    "Diagnostic", "TopologyReport", "TopologyError", "diagnostics_report",
    "DEGENERATE_VERTEX", "MULTIPLE_GAPS", "SELF_ADJACENCY",
    "DANGLING_EDGE", "MISSING_DEFAULT",
]
