"""Relations - Edge types between document nodes.

This module defines the two kinds of edges in the relationship graph:
- EdgeKind: Enum of relationship types
- Edge: A typed edge between two identifiers
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from diagdoc.core.identifier import DocumentId


class EdgeKind(Enum):
    """Types of edges in the relationship graph.

    - HIERARCHY: Parent document contains the child (tree structured)
    - LINK: Source document references the target in its text
    """

    HIERARCHY = "hierarchy"
    LINK = "link"

    @property
    def mermaid_arrow(self) -> str:
        """Arrow used by the Mermaid renderer (solid for hierarchy, dotted for links)."""
        if self == EdgeKind.HIERARCHY:
            return "-->"
        return "-.->"


@dataclass(frozen=True)
class Edge:
    """A typed, directed edge.

    For HIERARCHY edges ``source`` is the parent and ``target`` the child.
    """

    source: DocumentId
    target: DocumentId
    kind: EdgeKind

    def sort_key(self) -> tuple:
        return (self.kind.value, self.source, self.target)

    def __str__(self) -> str:
        return f"{self.source} --[{self.kind.value}]--> {self.target}"
