from __future__ import annotations

from dataclasses import dataclass

DEFAULT_DISTANCE = 1e-4
"""Target assigned to edges without a distance constraint.

Small but non-zero so downstream springs never collapse to zero length.
"""


@dataclass
class BuildConfig:
    """Tuneable parameters for a topology build.

    Attributes
    ----------
    strict : bool
        Abort the whole pass with :class:`~diagnostics.TopologyError` on
        the first degenerate vertex instead of skipping it.
    default_distance : float
        Value inserted for edges that have no distance constraint.
    coincident_tol : float
        Neighbors closer than this to the center vertex count as
        coincident (undefined angle).
    prune_non_edges : bool
        Drop constraint entries whose endpoints exist but are not
        adjacent, so the table covers exactly the graph's edges.
    """

    strict: bool = False
    default_distance: float = DEFAULT_DISTANCE
    coincident_tol: float = 1e-12
    prune_non_edges: bool = True

    def __post_init__(self) -> None:
        if self.default_distance <= 0.0:
            raise ValueError("default_distance must be > 0")
        if self.coincident_tol < 0.0:
            raise ValueError("coincident_tol must be >= 0")
