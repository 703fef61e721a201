from __future__ import annotations

from typing import Dict, Iterable, Mapping, Sequence, Tuple, Union

from .model import MeshModel

Point = Tuple[float, float]


def build_block(structure: Sequence[Sequence[object]], spacing: float = 1.0) -> MeshModel:
    """Build a cell-block mesh from a 2D occupancy layout.

    Every truthy cell ``(l, c)`` contributes its four lattice corners,
    placed at ``(c * spacing, l * spacing)`` with id ``l * (cols + 1) + c``,
    and five edges: the four sides plus the ``(l, c)``–``(l+1, c+1)``
    diagonal.  Lattice corners are named ``lu``/``ru``/``ld``/``rd`` when
    they exist.  The graph is squashed but topology is not built.
    """
    if spacing <= 0.0:
        raise ValueError("spacing must be > 0")
    rows = [list(row) for row in structure]
    if not rows or not rows[0]:
        raise ValueError("structure must have at least one non-empty row")
    cols = len(rows[0])
    for idx, row in enumerate(rows):
        if len(row) != cols:
            raise ValueError(f"Row {idx} has {len(row)} cells, expected {cols}")

    stride = cols + 1
    model = MeshModel()

    def corner(l: int, c: int) -> int:
        vid = l * stride + c
        if vid not in model.vertices:
            model.add_vertex(c * spacing, l * spacing, id=vid)
        return vid

    for l, row in enumerate(rows):
        for c, filled in enumerate(row):
            if not filled:
                continue
            v0 = corner(l, c)
            v1 = corner(l, c + 1)
            v2 = corner(l + 1, c)
            v3 = corner(l + 1, c + 1)
            model.add_edge(v0, v1)
            model.add_edge(v0, v2)
            model.add_edge(v0, v3)
            model.add_edge(v1, v3)
            model.add_edge(v2, v3)

    corners = {
        "lu": 0,
        "ru": stride - 1,
        "ld": len(rows) * stride,
        "rd": len(rows) * stride + stride - 1,
    }
    for name, vid in corners.items():
        if vid in model.vertices:
            model.names[name] = vid

    model.ids.reserve((len(rows) + 1) * stride)
    model.squash()
    return model


def build_square_grid(rows: int, cols: int, spacing: float = 1.0) -> MeshModel:
    """Block mesh with every one of ``rows × cols`` cells filled."""
    if rows < 1 or cols < 1:
        raise ValueError("rows and cols must be >= 1")
    return build_block([[1] * cols for _ in range(rows)], spacing)


def from_triangles(
    positions: Union[Sequence[Point], Mapping[int, Point]],
    triangles: Iterable[Sequence[int]],
) -> MeshModel:
    """Model with explicit faces; ids are list indices unless a mapping is given."""
    if isinstance(positions, Mapping):
        items: Dict[int, Point] = dict(positions)
    else:
        items = dict(enumerate(positions))

    model = MeshModel()
    for vid in sorted(items):
        x, y = items[vid]
        model.add_vertex(x, y, id=vid)
    for tri in triangles:
        a, b, c = tri
        model.add_face(a, b, c)
    return model
