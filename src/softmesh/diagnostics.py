"""Build diagnostics — recoverable problems found while rebuilding topology.

Every topology build returns a :class:`TopologyReport` that aggregates
:class:`Diagnostic` records instead of printing them.  Only conditions the
build cannot recover from are raised, as :class:`TopologyError`.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, List, Optional, Tuple

from .models import BORDER, INTERIOR, INVALID

if TYPE_CHECKING:
    from .model import MeshModel


# Structural
DEGENERATE_VERTEX = "degenerate_vertex"
MULTIPLE_GAPS = "multiple_gaps"
SELF_ADJACENCY = "self_adjacency"
# Constraint table
DANGLING_EDGE = "dangling_edge"
MISSING_DEFAULT = "missing_default"

ERROR = "error"
WARNING = "warning"
INFO = "info"

_LOG_LEVELS = {
    ERROR: logging.ERROR,
    WARNING: logging.WARNING,
    INFO: logging.INFO,
}


class TopologyError(ValueError):
    """Raised when a build cannot proceed at all."""


@dataclass(frozen=True)
class Diagnostic:
    kind: str
    severity: str
    vertex_ids: Tuple[int, ...]
    message: str

    def to_dict(self) -> dict:
        return {
            "kind": self.kind,
            "severity": self.severity,
            "vertices": list(self.vertex_ids),
            "message": self.message,
        }


def report(
    diagnostics: List[Diagnostic],
    logger: logging.Logger,
    kind: str,
    severity: str,
    vertex_ids: Tuple[int, ...],
    message: str,
) -> Diagnostic:
    """Append a diagnostic to *diagnostics* and log it at its severity."""
    diag = Diagnostic(kind, severity, tuple(vertex_ids), message)
    diagnostics.append(diag)
    logger.log(_LOG_LEVELS[severity], "[%s] %s", kind, message)
    return diag


@dataclass
class TopologyReport:
    """Outcome of one topology build.

    Attributes
    ----------
    direction : str
        ``"graph"`` for graph → faces, ``"faces"`` for faces → graph.
    diagnostics : list[Diagnostic]
        Everything that was reported, in discovery order.
    classification : dict[int, str]
        Per-vertex status after the build.
    face_count, border_count : int
        Sizes of the rebuilt face and border sets.
    """

    direction: str
    diagnostics: List[Diagnostic] = field(default_factory=list)
    classification: Dict[int, str] = field(default_factory=dict)
    face_count: int = 0
    border_count: int = 0

    @property
    def ok(self) -> bool:
        return not self.errors()

    def errors(self) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.severity == ERROR]

    def warnings(self) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.severity == WARNING]

    def by_kind(self, kind: str) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.kind == kind]

    def invalid_vertices(self) -> List[int]:
        return sorted(vid for vid, status in self.classification.items() if status == INVALID)

    def status_counts(self) -> Dict[str, int]:
        counts = Counter(self.classification.values())
        return {status: counts.get(status, 0) for status in (INTERIOR, BORDER, INVALID)}

    def to_dict(self) -> dict:
        return {
            "direction": self.direction,
            "ok": self.ok,
            "faces": self.face_count,
            "borders": self.border_count,
            "status_counts": self.status_counts(),
            "diagnostics": [d.to_dict() for d in self.diagnostics],
        }


def diagnostics_report(
    model: "MeshModel",
    topology: Optional[TopologyReport] = None,
) -> Dict[str, object]:
    """Build a structured summary of *model* suitable for JSON export."""
    kinds = Counter(d.kind for d in topology.diagnostics) if topology else Counter()
    payload: Dict[str, object] = {
        "vertices": len(model.vertices),
        "edges": sum(1 for _ in model.graph.edges()),
        "faces": len(model.faces),
        "borders": len(model.borders),
        "distances": len(model.distances),
        "structural_errors": model.validate(),
        "diagnostic_counts": dict(sorted(kinds.items())),
    }
    if topology is not None:
        payload["topology"] = topology.to_dict()
    return payload
