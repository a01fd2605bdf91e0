"""Graph Builder - Constructs the RelationshipGraph from scanned documents.

The graph is an arena: one dict from DocumentId to GraphNode. All
relations are stored as identifier sets on the nodes and resolved
through the dict, so the graph owns every node for its whole lifetime
and no edge can point at a missing node.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Dict, Iterable, Iterator, List

from diagdoc.core.frontmatter import derive_parent
from diagdoc.core.identifier import DocumentId
from diagdoc.core.models import Document, ScanWarning
from diagdoc.core.references import Reference, extract_references, parent_reference
from diagdoc.core.resolver import (
    DocumentIndex,
    LinkStatus,
    ReferenceResolver,
    ResolvedReference,
)
from diagdoc.graph.GraphNode import GraphNode
from diagdoc.graph.relations import Edge, EdgeKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HierarchyConflict:
    """A child whose parent was re-registered to a different identifier."""

    child: DocumentId
    previous_parent: DocumentId
    new_parent: DocumentId

    def __str__(self) -> str:
        return f"{self.child}: parent {self.previous_parent} replaced by {self.new_parent}"


@dataclass
class RelationshipGraph:
    """Container for the combined hierarchy + link graph.

    Provides indexed access to all nodes and the graph-wide queries
    (roots, leaves, orphans, ancestry). List-returning queries are sorted
    by identifier so output is stable across runs.
    """

    # Internal storage (prefixed) - excluded from constructor
    _nodes: Dict[DocumentId, GraphNode] = field(default_factory=dict, init=False, repr=False)
    _conflicts: List[HierarchyConflict] = field(default_factory=list, init=False, repr=False)

    # Construction

    def add_node(self, node_id: DocumentId) -> GraphNode:
        """Return the node for ``node_id``, creating a placeholder if missing."""
        node = self._nodes.get(node_id)
        if node is None:
            node = GraphNode(id=node_id)
            self._nodes[node_id] = node
        return node

    def add_document(self, node_id: DocumentId, path: Path | None = None, title: str = "") -> GraphNode:
        """Register a scanned document, upgrading any existing placeholder."""
        node = self.add_node(node_id)
        node.placeholder = False
        if path is not None:
            node.path = path
        if title:
            node.title = title
        return node

    def add_hierarchy_edge(self, child: DocumentId, parent: DocumentId) -> None:
        """Set ``child.parent`` and add ``child`` to ``parent.children`` together.

        A different existing parent loses the child (last write wins) and the
        replacement is recorded in ``hierarchy_conflicts()``.
        """
        child_node = self.add_node(child)
        parent_node = self.add_node(parent)

        previous = child_node.parent
        if previous is not None and previous != parent:
            self._nodes[previous].children.discard(child)
            self._conflicts.append(HierarchyConflict(child, previous, parent))
            logger.debug("Hierarchy parent of %s replaced: %s -> %s", child, previous, parent)

        child_node.parent = parent
        parent_node.children.add(child)

    def add_link_edge(self, source: DocumentId, target: DocumentId) -> None:
        """Record that ``source`` links to ``target``."""
        source_node = self.add_node(source)
        target_node = self.add_node(target)
        source_node.links_to.add(target)
        target_node.linked_from.add(source)

    # Lookup

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    def find_by_id(self, node_id: DocumentId) -> GraphNode | None:
        return self._nodes.get(node_id)

    def all_nodes(self) -> Iterator[GraphNode]:
        """Iterate all nodes in identifier order."""
        for node_id in sorted(self._nodes):
            yield self._nodes[node_id]

    def node_ids(self) -> List[DocumentId]:
        return sorted(self._nodes)

    def node_count(self) -> int:
        return len(self._nodes)

    def edge_count(self) -> int:
        """Number of link edges."""
        return sum(len(n.links_to) for n in self._nodes.values())

    def hierarchy_edge_count(self) -> int:
        return sum(1 for n in self._nodes.values() if n.parent is not None)

    def hierarchy_conflicts(self) -> List[HierarchyConflict]:
        return list(self._conflicts)

    def iter_edges(self, kind: EdgeKind | None = None) -> Iterator[Edge]:
        """Iterate edges in a stable order, optionally filtered by kind."""
        for node in self.all_nodes():
            if kind in (None, EdgeKind.HIERARCHY):
                for child in sorted(node.children):
                    yield Edge(node.id, child, EdgeKind.HIERARCHY)
            if kind in (None, EdgeKind.LINK):
                for target in sorted(node.links_to):
                    yield Edge(node.id, target, EdgeKind.LINK)

    # Hierarchy queries

    def children_of(self, node_id: DocumentId) -> List[DocumentId]:
        node = self._nodes.get(node_id)
        return sorted(node.children) if node else []

    def parent_of(self, node_id: DocumentId) -> DocumentId | None:
        node = self._nodes.get(node_id)
        return node.parent if node else None

    def ancestors_of(self, node_id: DocumentId) -> List[DocumentId]:
        """Walk parent edges upward, nearest first.

        Guarded by a visited set so an accidental hierarchy cycle terminates.
        """
        result: List[DocumentId] = []
        visited = {node_id}
        current = self.parent_of(node_id)
        while current is not None and current not in visited:
            result.append(current)
            visited.add(current)
            current = self.parent_of(current)
        return result

    def descendants_of(self, node_id: DocumentId) -> List[DocumentId]:
        """All transitive children, breadth-first."""
        result: List[DocumentId] = []
        visited = {node_id}
        queue: deque[DocumentId] = deque(self.children_of(node_id))
        while queue:
            current = queue.popleft()
            if current in visited:
                continue
            visited.add(current)
            result.append(current)
            queue.extend(self.children_of(current))
        return result

    def depth_of(self, node_id: DocumentId) -> int:
        """Distance from the node to its hierarchy root (0 for roots)."""
        return len(self.ancestors_of(node_id))

    def max_depth(self) -> int:
        return max((self.depth_of(n) for n in self._nodes), default=0)

    # Link queries

    def links_of(self, node_id: DocumentId) -> List[DocumentId]:
        node = self._nodes.get(node_id)
        return sorted(node.links_to) if node else []

    def backlinks_of(self, node_id: DocumentId) -> List[DocumentId]:
        node = self._nodes.get(node_id)
        return sorted(node.linked_from) if node else []

    # Graph-wide queries

    def roots(self) -> List[DocumentId]:
        """Nodes with no hierarchy parent."""
        return [n.id for n in self.all_nodes() if n.parent is None]

    def leaves(self) -> List[DocumentId]:
        """Nodes with no hierarchy children."""
        return [n.id for n in self.all_nodes() if not n.children]

    def orphans(self) -> List[DocumentId]:
        """Nodes with no parent, excluding the master document ``0``."""
        return [n.id for n in self.all_nodes() if n.is_orphan]

    def placeholders(self) -> List[DocumentId]:
        """Identifiers referenced as a parent but never scanned."""
        return [n.id for n in self.all_nodes() if n.placeholder]


@dataclass
class BuildResult:
    """Everything produced by one graph build.

    Attributes:
        graph: The relationship graph.
        references: Resolved in-text references of every document, in scan order.
        hierarchy_references: Declared parent references and their verdicts.
        warnings: Per-document problems found while building.
    """

    graph: RelationshipGraph
    references: List[ResolvedReference] = field(default_factory=list)
    hierarchy_references: List[ResolvedReference] = field(default_factory=list)
    warnings: List[ScanWarning] = field(default_factory=list)


class GraphBuilder:
    """Builds a RelationshipGraph from scanned documents.

    Args:
        root: Documentation root; used for path-substring matching.
        infer_parents: Derive a parent from the identifier when none is declared.
        skip_code_blocks: Ignore references inside fenced code blocks.
        check_filesystem: Let relative links match non-markdown files on disk.
    """

    def __init__(
        self,
        root: Path | None = None,
        infer_parents: bool = True,
        skip_code_blocks: bool = True,
        check_filesystem: bool = False,
    ) -> None:
        self.root = root
        self.infer_parents = infer_parents
        self.skip_code_blocks = skip_code_blocks
        self.check_filesystem = check_filesystem
        self._documents: List[Document] = []

    def add_document(self, document: Document) -> None:
        self._documents.append(document)

    def add_documents(self, documents: Iterable[Document]) -> None:
        for document in documents:
            self.add_document(document)

    def build(self) -> BuildResult:
        """Assemble the graph: nodes, hierarchy edges, then link edges."""
        graph = RelationshipGraph()
        result = BuildResult(graph=graph)

        index = DocumentIndex.from_documents(
            self._documents, root=self.root, check_filesystem=self.check_filesystem
        )
        resolver = ReferenceResolver(index)

        path_to_id: Dict[Path, DocumentId] = {}
        registered: List[Document] = []
        for doc in sorted(self._documents, key=lambda d: str(d.path)):
            if doc.doc_id is None:
                continue
            existing = graph.find_by_id(doc.doc_id)
            if existing is not None and not existing.placeholder:
                result.warnings.append(
                    ScanWarning(
                        path=doc.path,
                        message=f"Duplicate identifier {doc.doc_id} (already used by {existing.path})",
                        kind="duplicate-id",
                    )
                )
                continue
            graph.add_document(doc.doc_id, path=doc.path, title=doc.title)
            path_to_id[doc.path] = doc.doc_id
            registered.append(doc)

        for doc in sorted(registered, key=lambda d: d.doc_id):
            parent = derive_parent(doc, infer=self.infer_parents)
            if parent is None or parent == doc.doc_id:
                continue
            graph.add_hierarchy_edge(doc.doc_id, parent)
            if doc.declared_parent is not None:
                result.hierarchy_references.append(
                    self._resolve_parent(doc, graph)
                )

        for doc in self._documents:
            refs = extract_references(
                doc.body, source_id=doc.doc_id, skip_code_blocks=self.skip_code_blocks
            )
            line_offset = doc.body_line_offset
            char_offset = doc.body_char_offset
            if char_offset:
                # Report file coordinates, not body coordinates
                refs = [
                    replace(ref, line=ref.line + line_offset, position=ref.position + char_offset)
                    for ref in refs
                ]
            resolved = resolver.resolve_all(refs, doc.path)
            result.references.extend(resolved)

            source_id = path_to_id.get(doc.path)
            if source_id is None:
                continue
            for item in resolved:
                target_id = self._link_target(item, path_to_id)
                if target_id is not None and target_id != source_id:
                    graph.add_link_edge(source_id, target_id)

        logger.debug(
            "Built graph: %d nodes, %d link edges, %d references",
            graph.node_count(),
            graph.edge_count(),
            len(result.references),
        )
        return result

    @staticmethod
    def _link_target(item: ResolvedReference, path_to_id: Dict[Path, DocumentId]) -> DocumentId | None:
        if item.status not in (LinkStatus.VALID, LinkStatus.NON_STANDARD):
            return None
        if item.target_path is None:
            return None
        return path_to_id.get(item.target_path)

    @staticmethod
    def _resolve_parent(doc: Document, graph: RelationshipGraph) -> ResolvedReference:
        ref: Reference = parent_reference(doc.raw_parent or str(doc.declared_parent), doc.doc_id)
        parent_node = graph.find_by_id(doc.declared_parent)
        if parent_node is None or parent_node.placeholder:
            return ResolvedReference(ref, LinkStatus.BROKEN, source_path=doc.path)
        return ResolvedReference(
            ref, LinkStatus.VALID, source_path=doc.path, target_path=parent_node.path
        )
