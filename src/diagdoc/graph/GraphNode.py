"""GraphNode - Node record for the document relationship graph.

Nodes never hold references to other node objects. Every relation is
stored as a set of DocumentId values that are looked up in the owning
RelationshipGraph, so parent/child and link/backlink pairs cannot form
reference cycles between node objects.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Set

from diagdoc.core.identifier import DocumentId


@dataclass
class GraphNode:
    """One document (or referenced-but-unscanned identifier) in the graph.

    Attributes:
        id: The document identifier.
        links_to: Identifiers this document links to (outgoing link edges).
        linked_from: Identifiers linking to this document (backlinks).
        parent: Hierarchy parent, if any.
        children: Hierarchy children.
        path: Source file, if the document was scanned.
        title: Display title.
        placeholder: True if the node exists only because something referenced it.
    """

    id: DocumentId
    links_to: Set[DocumentId] = field(default_factory=set)
    linked_from: Set[DocumentId] = field(default_factory=set)
    parent: DocumentId | None = None
    children: Set[DocumentId] = field(default_factory=set)
    path: Path | None = None
    title: str = ""
    placeholder: bool = True

    @property
    def is_root(self) -> bool:
        """True if this node has no hierarchy parent."""
        return self.parent is None

    @property
    def is_leaf(self) -> bool:
        """True if this node has no hierarchy children."""
        return not self.children

    @property
    def is_orphan(self) -> bool:
        """True for a non-master node without a parent."""
        return self.parent is None and not self.id.is_master

    def child_count(self) -> int:
        return len(self.children)

    def link_count(self) -> int:
        return len(self.links_to)

    def backlink_count(self) -> int:
        return len(self.linked_from)

    @property
    def label(self) -> str:
        """Human-readable display label.

        Titles taken from a file stem already start with the identifier.
        """
        if not self.title:
            return str(self.id)
        if self.title.split(" ", 1)[0] == str(self.id):
            return self.title
        return f"{self.id} {self.title}"

    def __str__(self) -> str:
        return self.label
