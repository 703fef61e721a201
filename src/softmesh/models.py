from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

VertexId = int
EdgeKey = Tuple[int, int]
FaceKey = Tuple[int, int, int]

INTERIOR = "interior"
BORDER = "border"
INVALID = "invalid"

VERTEX_STATUSES = (INTERIOR, BORDER, INVALID)


@dataclass(frozen=True)
class Vertex:
    """A mesh vertex.

    *u*/*v* is the texture coordinate; when omitted it mirrors the
    position.  *weight* is the inverse-mass value handed to the solver and
    is carried through untouched.
    """

    id: int
    x: float
    y: float
    u: Optional[float] = None
    v: Optional[float] = None
    weight: float = 1.0

    @property
    def position(self) -> tuple[float, float]:
        return (self.x, self.y)

    @property
    def tex(self) -> tuple[float, float]:
        u = self.x if self.u is None else self.u
        v = self.y if self.v is None else self.v
        return (u, v)


def edge_key(a: int, b: int) -> EdgeKey:
    """Canonical (ascending) form of an undirected edge."""
    return (a, b) if a <= b else (b, a)


def face_key(a: int, b: int, c: int) -> FaceKey:
    """Canonical (ascending) form of a triangle."""
    x, y, z = sorted((a, b, c))
    return (x, y, z)
