"""Distance-constraint reconciliation.

The distance table maps a canonical edge to the target separation used by
the downstream solver.  After a topology build it must cover exactly the
edges of the adjacency graph: stale entries are pruned, missing ones get
:data:`~config.DEFAULT_DISTANCE`.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Set

from .adjacency import AdjacencyGraph
from .config import DEFAULT_DISTANCE
from .diagnostics import (
    DANGLING_EDGE,
    INFO,
    MISSING_DEFAULT,
    WARNING,
    Diagnostic,
    report,
)
from .models import EdgeKey, edge_key

logger = logging.getLogger(__name__)

DistanceTable = Dict[EdgeKey, float]


def fixup(
    table: DistanceTable,
    graph: AdjacencyGraph,
    prune_non_edges: bool = True,
) -> List[Diagnostic]:
    """Remove entries that cannot belong to *graph*, in place.

    An entry is dropped when an endpoint is missing from the graph, when
    both endpoints are the same vertex, or (with *prune_non_edges*) when
    the endpoints are not adjacent.  Non-canonical keys are re-keyed.
    """
    diagnostics: List[Diagnostic] = []
    for key in sorted(table):
        a, b = key
        value = table[key]
        if a == b:
            reason = "is a self-pair"
        elif a not in graph or b not in graph:
            missing = a if a not in graph else b
            reason = f"references missing vertex {missing}"
        elif prune_non_edges and not graph.has_edge(a, b):
            reason = "is not an edge of the graph"
        else:
            canonical = edge_key(a, b)
            if canonical != key:
                del table[key]
                table.setdefault(canonical, value)
            continue
        del table[key]
        report(
            diagnostics, logger, DANGLING_EDGE, WARNING, (a, b),
            f"Distance constraint ({a}, {b}) {reason}; removed",
        )
    return diagnostics


def fill_defaults(
    table: DistanceTable,
    graph: AdjacencyGraph,
    default: float = DEFAULT_DISTANCE,
    diagnostics: List[Diagnostic] | None = None,
) -> Set[EdgeKey]:
    """Insert *default* for every graph edge lacking an entry.

    Returns the keys that were inserted.
    """
    if diagnostics is None:
        diagnostics = []
    inserted: Set[EdgeKey] = set()
    for key in graph.edges():
        if key in table:
            continue
        table[key] = default
        inserted.add(key)
        report(
            diagnostics, logger, MISSING_DEFAULT, INFO, key,
            f"Edge {key} had no distance constraint; set to {default:g}",
        )
    return inserted


def clear_defaults(table: DistanceTable, keys: Iterable[EdgeKey]) -> int:
    """Drop the auto-inserted entries *keys* from *table*.

    Callers stop tracking a key once its value is set explicitly, so only
    untouched defaults are removed.  Returns the number removed.
    """
    removed = 0
    for key in keys:
        if key in table:
            del table[key]
            removed += 1
    return removed


def reconcile(
    table: DistanceTable,
    graph: AdjacencyGraph,
    default: float = DEFAULT_DISTANCE,
    prune_non_edges: bool = True,
) -> tuple[List[Diagnostic], Set[EdgeKey]]:
    """Run :func:`fixup` then :func:`fill_defaults`."""
    diagnostics = fixup(table, graph, prune_non_edges=prune_non_edges)
    inserted = fill_defaults(table, graph, default, diagnostics)
    return diagnostics, inserted
