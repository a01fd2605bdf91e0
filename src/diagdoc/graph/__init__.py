"""Graph module - Relationship graph data structures and analytics.

Exports:
- GraphNode: One node per document identifier
- Edge / EdgeKind: Typed edge between nodes (hierarchy or link)
- RelationshipGraph: Identifier-keyed node arena
- CycleReport: A cycle in the link graph
- LinkTally: Link counts and health score

Note: use graph.factory.run_diagnostics() to scan and build in one step
"""

from diagdoc.graph.analytics import CycleReport, GraphSummary, analyze_graph, detect_cycles
from diagdoc.graph.builder import GraphBuilder, RelationshipGraph
from diagdoc.graph.GraphNode import GraphNode
from diagdoc.graph.mermaid import render_mermaid
from diagdoc.graph.metrics import LinkTally
from diagdoc.graph.relations import Edge, EdgeKind

__all__ = [
    "GraphNode",
    "Edge",
    "EdgeKind",
    "GraphBuilder",
    "RelationshipGraph",
    "CycleReport",
    "GraphSummary",
    "analyze_graph",
    "detect_cycles",
    "render_mermaid",
    "LinkTally",
]
