"""Angular ring ordering and manifold classification of a single vertex.

A vertex's *ring* is its neighbor list sorted by polar angle around it.
Walking the ring, each consecutive pair either closes a triangle with the
center (the pair is *linked*) or marks a *gap* where the mesh boundary
passes through the vertex:

- no gap: the fan is closed and the vertex is interior,
- one gap: the vertex lies on the border,
- more than one gap, or fewer than two neighbors: non-manifold.

The stored ring is rotated left by the first gap index so consumers can
walk from one free edge to the other.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Sequence, Set, Tuple

import numpy as np

from .models import BORDER, INTERIOR, INVALID, FaceKey, Vertex, face_key

Linked = Callable[[int, int], bool]


@dataclass
class RingClassification:
    vertex_id: int
    status: str
    ring: List[int]
    rotation: int = 0
    triangles: Set[FaceKey] = field(default_factory=set)
    gaps: List[int] = field(default_factory=list)

    @property
    def degree(self) -> int:
        return len(self.ring)


def _offsets(
    center: Vertex,
    positions: Dict[int, Vertex],
    neighbor_ids: Sequence[int],
) -> np.ndarray:
    pts = np.array(
        [[positions[n].x, positions[n].y] for n in neighbor_ids], dtype=float,
    ).reshape(-1, 2)
    return pts - np.array([center.x, center.y], dtype=float)


def coincident_neighbors(
    center: Vertex,
    positions: Dict[int, Vertex],
    neighbor_ids: Sequence[int],
    tol: float = 1e-12,
) -> List[int]:
    """Return neighbors whose position coincides with *center* within *tol*."""
    if not neighbor_ids:
        return []
    d = _offsets(center, positions, neighbor_ids)
    dist = np.hypot(d[:, 0], d[:, 1])
    return [nid for nid, r in zip(neighbor_ids, dist) if not r > tol]


def angular_order(
    center: Vertex,
    positions: Dict[int, Vertex],
    neighbor_ids: Sequence[int],
) -> Tuple[List[int], List[float]]:
    """Sort *neighbor_ids* by ``atan2`` angle around *center*.

    Equal angles keep their input order.  Neighbors must not coincide with
    the center; check with :func:`coincident_neighbors` first.
    """
    if not neighbor_ids:
        return [], []
    d = _offsets(center, positions, neighbor_ids)
    if np.any((d[:, 0] == 0.0) & (d[:, 1] == 0.0)) or not np.all(np.isfinite(d)):
        raise ValueError(f"Vertex {center.id} has a coincident or non-finite neighbor")
    angles = np.arctan2(d[:, 1], d[:, 0])
    order = np.argsort(angles, kind="stable")
    return (
        [neighbor_ids[i] for i in order],
        [float(angles[i]) for i in order],
    )


def signed_angle_delta(a: float, b: float) -> float:
    """Signed difference ``b - a`` wrapped into (-pi, pi]."""
    d = math.fmod(b - a, 2.0 * math.pi)
    if d <= -math.pi:
        d += 2.0 * math.pi
    elif d > math.pi:
        d -= 2.0 * math.pi
    return d


def rotate_left(ring: Sequence[int], k: int) -> List[int]:
    if not ring:
        return []
    k %= len(ring)
    return list(ring[k:]) + list(ring[:k])


def classify_ring(
    vertex_id: int,
    ring: Sequence[int],
    angles: Sequence[float],
    linked: Linked,
    propose_pair: bool = True,
) -> RingClassification:
    """Classify *vertex_id* from its angularly sorted *ring*.

    *linked(a, b)* decides whether consecutive ring entries close a
    triangle with the center.  With *propose_pair*, a degree-2 vertex
    proposes its single triangle without consulting *linked*.
    """
    n = len(ring)
    if n <= 1:
        return RingClassification(vertex_id, INVALID, list(ring))

    if n == 2:
        rotation = 1 if signed_angle_delta(angles[0], angles[1]) > 0.0 else 0
        result = RingClassification(
            vertex_id, BORDER, rotate_left(ring, rotation), rotation, gaps=[rotation],
        )
        if propose_pair:
            result.triangles.add(face_key(vertex_id, ring[0], ring[1]))
        return result

    triangles: Set[FaceKey] = set()
    gaps: List[int] = []
    for i in range(n):
        a = ring[i]
        b = ring[(i + 1) % n]
        if linked(a, b):
            triangles.add(face_key(vertex_id, a, b))
        else:
            gaps.append(i)

    if not gaps:
        return RingClassification(vertex_id, INTERIOR, list(ring), 0, triangles)

    rotation = gaps[0]
    status = BORDER if len(gaps) == 1 else INVALID
    return RingClassification(
        vertex_id, status, rotate_left(ring, rotation), rotation, triangles, gaps,
    )
