from __future__ import annotations

import logging
from typing import Dict, Iterable, Iterator, List, Optional, Set

from .diagnostics import SELF_ADJACENCY, WARNING, Diagnostic, report
from .models import EdgeKey, edge_key

logger = logging.getLogger(__name__)


class AdjacencyGraph:
    """Undirected vertex adjacency stored as ``id -> neighbor list``.

    Edges are appended in both directions without deduplication so that
    bulk construction stays cheap; call :meth:`squash` once afterwards.
    Membership tests go through a per-vertex set index that is rebuilt
    lazily after structural changes; :meth:`set_ring` patches it in place.
    """

    def __init__(self, neighbors: Optional[Dict[int, Iterable[int]]] = None) -> None:
        self._neigh: Dict[int, List[int]] = {}
        self._index: Optional[Dict[int, Set[int]]] = None
        if neighbors:
            for vid, nbrs in neighbors.items():
                self._neigh[vid] = list(nbrs)

    # ── construction ───────────────────────────────────────────────

    def add_vertex(self, vid: int) -> None:
        if vid not in self._neigh:
            self._neigh[vid] = []
            self._index = None

    def add_edge(self, a: int, b: int) -> None:
        self._neigh.setdefault(a, []).append(b)
        self._neigh.setdefault(b, []).append(a)
        self._index = None

    def squash(self) -> None:
        """Sort every neighbor list ascending and drop duplicates."""
        for vid, nbrs in self._neigh.items():
            self._neigh[vid] = sorted(set(nbrs))
        self._index = None

    normalize = squash

    def remove_self_loops(self) -> List[Diagnostic]:
        diagnostics: List[Diagnostic] = []
        for vid in sorted(self._neigh):
            nbrs = self._neigh[vid]
            if vid not in nbrs:
                continue
            self._neigh[vid] = [n for n in nbrs if n != vid]
            report(
                diagnostics, logger, SELF_ADJACENCY, WARNING, (vid,),
                f"Vertex {vid} listed itself as a neighbor; removed",
            )
        if diagnostics:
            self._index = None
        return diagnostics

    def set_ring(self, vid: int, ring: Iterable[int]) -> None:
        """Replace the ring of *vid*; only its own index entry is refreshed."""
        self._neigh[vid] = list(ring)
        if self._index is not None:
            self._index[vid] = set(self._neigh[vid])

    def copy(self) -> "AdjacencyGraph":
        return AdjacencyGraph(self._neigh)

    def clear(self) -> None:
        self._neigh.clear()
        self._index = None

    # ── queries ────────────────────────────────────────────────────

    def neighbors(self, vid: int) -> List[int]:
        return self._neigh.get(vid, [])

    def degree(self, vid: int) -> int:
        return len(self._neigh.get(vid, ()))

    def vertex_ids(self) -> List[int]:
        return sorted(self._neigh)

    def has_edge(self, a: int, b: int) -> bool:
        if self._index is None:
            self._index = self._build_index()
        return b in self._index.get(a, ())

    def _build_index(self) -> Dict[int, Set[int]]:
        return {vid: set(nbrs) for vid, nbrs in self._neigh.items()}

    def edges(self) -> Iterator[EdgeKey]:
        """Yield every canonical edge once, in ascending order."""
        seen: Set[EdgeKey] = set()
        for vid in sorted(self._neigh):
            for other in self._neigh[vid]:
                key = edge_key(vid, other)
                if key not in seen:
                    seen.add(key)
        yield from sorted(seen)

    def referenced_ids(self) -> Set[int]:
        ids = set(self._neigh)
        for nbrs in self._neigh.values():
            ids.update(nbrs)
        return ids

    def asymmetric_pairs(self) -> List[EdgeKey]:
        """Return directed links ``a -> b`` that have no ``b -> a`` partner."""
        missing: List[EdgeKey] = []
        for vid in sorted(self._neigh):
            for other in self._neigh[vid]:
                if not self.has_edge(other, vid):
                    missing.append((vid, other))
        return missing

    def __contains__(self, vid: object) -> bool:
        return vid in self._neigh

    def __len__(self) -> int:
        return len(self._neigh)

    def __iter__(self) -> Iterator[int]:
        return iter(self.vertex_ids())

    # ── serialization ──────────────────────────────────────────────

    def to_dict(self) -> Dict[str, List[int]]:
        return {str(vid): list(self._neigh[vid]) for vid in sorted(self._neigh)}

    @classmethod
    def from_dict(cls, payload: Dict[str, Iterable[int]]) -> "AdjacencyGraph":
        return cls({int(vid): [int(n) for n in nbrs] for vid, nbrs in payload.items()})
