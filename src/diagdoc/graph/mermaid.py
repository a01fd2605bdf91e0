"""Mermaid flowchart rendering for the relationship graph.

Pure formatting: takes a graph, returns text. Hierarchy edges render as
solid arrows (``-->``), link edges as dotted arrows (``-.->``). Dots in
identifiers are replaced with underscores so every node name is
diagram-safe.
"""

from __future__ import annotations

from typing import List

from diagdoc.core.identifier import DocumentId
from diagdoc.graph.builder import RelationshipGraph
from diagdoc.graph.relations import EdgeKind


def mermaid_node_name(node_id: DocumentId) -> str:
    return str(node_id).replace(".", "_")


def _escape_label(label: str) -> str:
    return label.replace('"', "#quot;")


def render_mermaid(
    graph: RelationshipGraph,
    direction: str = "TD",
    include_links: bool = True,
    include_labels: bool = False,
    fenced: bool = False,
) -> str:
    """Render the graph as a Mermaid flowchart.

    Args:
        graph: The graph to render.
        direction: Flowchart direction (TD, LR, ...).
        include_links: Emit dotted link edges as well as hierarchy edges.
        include_labels: Declare each node with its title as the label.
        fenced: Wrap the output in a ```mermaid code fence.

    Returns:
        Mermaid source text.
    """
    lines: List[str] = [f"graph {direction}"]

    if include_labels:
        for node in graph.all_nodes():
            label = _escape_label(node.label)
            lines.append(f'    {mermaid_node_name(node.id)}["{label}"]')

    kinds = (EdgeKind.HIERARCHY, EdgeKind.LINK) if include_links else (EdgeKind.HIERARCHY,)
    for kind in kinds:
        for edge in graph.iter_edges(kind):
            lines.append(
                f"    {mermaid_node_name(edge.source)} {kind.mermaid_arrow} "
                f"{mermaid_node_name(edge.target)}"
            )

    text = "\n".join(lines)
    if fenced:
        return f"```mermaid\n{text}\n```\n"
    return text
