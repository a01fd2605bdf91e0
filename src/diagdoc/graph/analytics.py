"""Graph analytics - Derived properties of the relationship graph.

Cycle detection runs over link edges only; hierarchy edges form a tree
by construction (one parent per node).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Tuple

from diagdoc.core.identifier import DocumentId
from diagdoc.graph.builder import RelationshipGraph

WHITE, GRAY, BLACK = 0, 1, 2


@dataclass(frozen=True)
class CycleReport:
    """An ordered cycle in the link graph; the last node links back to the first."""

    nodes: Tuple[DocumentId, ...]

    def __len__(self) -> int:
        return len(self.nodes)

    def __iter__(self) -> Iterator[DocumentId]:
        return iter(self.nodes)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self.nodes

    def canonical(self) -> "CycleReport":
        """Rotate so the smallest identifier comes first."""
        if not self.nodes:
            return self
        start = self.nodes.index(min(self.nodes))
        return CycleReport(self.nodes[start:] + self.nodes[:start])

    def __str__(self) -> str:
        if not self.nodes:
            return ""
        return " → ".join(str(n) for n in self.nodes + (self.nodes[0],))


def detect_cycles(graph: RelationshipGraph) -> List[CycleReport]:
    """Find cycles with a three-colour depth-first search over link edges.

    Every time the walk reaches a node that is still on the current path
    (gray), the path suffix from that node is reported. Cycles reached from
    several start points are reported once per re-entry; rotations are not
    merged here (see ``canonical_cycles``).

    The walk is iterative so deep link chains do not hit the recursion limit.
    Nodes and neighbours are visited in identifier order.
    """
    color: Dict[DocumentId, int] = {}
    cycles: List[CycleReport] = []

    for start in graph.node_ids():
        if color.get(start, WHITE) != WHITE:
            continue

        path: List[DocumentId] = [start]
        position: Dict[DocumentId, int] = {start: 0}
        color[start] = GRAY
        stack = [iter(graph.links_of(start))]

        while stack:
            descended = False
            for neighbor in stack[-1]:
                state = color.get(neighbor, WHITE)
                if state == WHITE:
                    color[neighbor] = GRAY
                    position[neighbor] = len(path)
                    path.append(neighbor)
                    stack.append(iter(graph.links_of(neighbor)))
                    descended = True
                    break
                if state == GRAY:
                    cycles.append(CycleReport(tuple(path[position[neighbor]:])))
            if not descended:
                stack.pop()
                finished = path.pop()
                del position[finished]
                color[finished] = BLACK

    return cycles


def canonical_cycles(cycles: List[CycleReport]) -> List[CycleReport]:
    """Rotate each cycle to its smallest identifier and drop duplicates, keeping order."""
    seen = set()
    result: List[CycleReport] = []
    for cycle in cycles:
        canonical = cycle.canonical()
        if canonical.nodes in seen:
            continue
        seen.add(canonical.nodes)
        result.append(canonical)
    return result


def cycle_members(cycles: List[CycleReport]) -> List[DocumentId]:
    """All identifiers that take part in at least one cycle."""
    members = set()
    for cycle in cycles:
        members.update(cycle.nodes)
    return sorted(members)


def impact_of(graph: RelationshipGraph, node_id: DocumentId) -> List[DocumentId]:
    """Documents affected by a change to ``node_id``: its descendants and its backlinks."""
    affected = set(graph.descendants_of(node_id))
    affected.update(graph.backlinks_of(node_id))
    affected.discard(node_id)
    return sorted(affected)


@dataclass
class GraphSummary:
    """Derived properties computed in one pass over the graph."""

    roots: List[DocumentId] = field(default_factory=list)
    leaves: List[DocumentId] = field(default_factory=list)
    orphans: List[DocumentId] = field(default_factory=list)
    placeholders: List[DocumentId] = field(default_factory=list)
    cycles: List[CycleReport] = field(default_factory=list)
    node_count: int = 0
    link_count: int = 0
    max_depth: int = 0

    @property
    def has_cycles(self) -> bool:
        return bool(self.cycles)

    @property
    def has_orphans(self) -> bool:
        return bool(self.orphans)


def analyze_graph(graph: RelationshipGraph, canonicalize: bool = False) -> GraphSummary:
    """Compute roots, leaves, orphans, placeholders, cycles and depth.

    Args:
        graph: The graph to analyze.
        canonicalize: Merge rotations of the same cycle.
    """
    cycles = detect_cycles(graph)
    if canonicalize:
        cycles = canonical_cycles(cycles)
    return GraphSummary(
        roots=graph.roots(),
        leaves=graph.leaves(),
        orphans=graph.orphans(),
        placeholders=graph.placeholders(),
        cycles=cycles,
        node_count=graph.node_count(),
        link_count=graph.edge_count(),
        max_depth=graph.max_depth(),
    )
