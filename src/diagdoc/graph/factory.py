"""Graph Factory - Shared entry point for producing a DiagnosticReport.

Commands should use ``run_diagnostics`` (directory scan) or ``build_report``
(documents already in memory) instead of wiring the loader, builder and
analytics together themselves.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, List

from diagdoc.config import get_config, get_docs_directory
from diagdoc.core.identifier import DocumentId
from diagdoc.core.loader import scan_directory
from diagdoc.core.models import Document, ScanWarning
from diagdoc.core.resolver import ResolvedReference
from diagdoc.graph.analytics import CycleReport, GraphSummary, analyze_graph
from diagdoc.graph.builder import GraphBuilder, RelationshipGraph
from diagdoc.graph.metrics import LinkTally


@dataclass
class DiagnosticReport:
    """Everything a command needs to present the state of a corpus.

    Attributes:
        root: Documentation root, if the documents came from disk.
        documents: Scanned documents in path order.
        references: Resolved in-text references (hierarchy parents excluded).
        hierarchy_references: Declared parent references and their verdicts.
        graph: The relationship graph.
        summary: Roots, leaves, orphans, placeholders, cycles and depth.
        warnings: Scan and build warnings, in the order they were found.
        tally: Link counts over ``references``.
        config: Configuration the report was built with.
    """

    graph: RelationshipGraph
    summary: GraphSummary
    root: Path | None = None
    documents: List[Document] = field(default_factory=list)
    references: List[ResolvedReference] = field(default_factory=list)
    hierarchy_references: List[ResolvedReference] = field(default_factory=list)
    warnings: List[ScanWarning] = field(default_factory=list)
    tally: LinkTally = field(default_factory=LinkTally)
    config: dict[str, Any] = field(default_factory=dict)

    @property
    def roots(self) -> List[DocumentId]:
        return self.summary.roots

    @property
    def leaves(self) -> List[DocumentId]:
        return self.summary.leaves

    @property
    def orphans(self) -> List[DocumentId]:
        return self.summary.orphans

    @property
    def cycles(self) -> List[CycleReport]:
        return self.summary.cycles

    def broken_references(self) -> List[ResolvedReference]:
        return [r for r in self.references if r.is_broken]

    def nonstandard_references(self) -> List[ResolvedReference]:
        return [r for r in self.references if r.is_nonstandard]

    def references_to(self, node_id: DocumentId) -> List[ResolvedReference]:
        """Resolved references whose target is the document with ``node_id``."""
        node = self.graph.find_by_id(node_id)
        if node is None or node.path is None:
            return []
        return [r for r in self.references if r.target_path == node.path]

    @property
    def has_problems(self) -> bool:
        return bool(
            self.tally.broken
            or self.summary.cycles
            or self.summary.orphans
            or self.warnings
        )


def build_report(
    documents: Iterable[Document],
    root: Path | None = None,
    config: dict[str, Any] | None = None,
    warnings: Iterable[ScanWarning] | None = None,
) -> DiagnosticReport:
    """Build the graph for already-loaded documents and run analytics.

    Args:
        documents: Parsed documents.
        root: Documentation root (enables root-relative path matching).
        config: Configuration dict; ``[links]``, ``[hierarchy]`` and
            ``[cycles]`` sections are honoured.
        warnings: Warnings collected while loading, carried into the report.

    Returns:
        DiagnosticReport for the documents.
    """
    config = config or {}
    links_config = config.get("links", {})
    documents = list(documents)

    builder = GraphBuilder(
        root=root,
        infer_parents=config.get("hierarchy", {}).get("infer_parents", True),
        skip_code_blocks=links_config.get("skip_code_blocks", True),
        check_filesystem=links_config.get("check_filesystem", root is not None),
    )
    builder.add_documents(documents)
    result = builder.build()

    all_warnings = list(warnings or [])
    all_warnings.extend(result.warnings)
    for conflict in result.graph.hierarchy_conflicts():
        node = result.graph.find_by_id(conflict.child)
        path = node.path if node is not None and node.path is not None else Path(str(conflict.child))
        all_warnings.append(
            ScanWarning(path=path, message=str(conflict), kind="hierarchy-conflict")
        )

    summary = analyze_graph(
        result.graph, canonicalize=config.get("cycles", {}).get("canonicalize", False)
    )

    return DiagnosticReport(
        graph=result.graph,
        summary=summary,
        root=root,
        documents=documents,
        references=result.references,
        hierarchy_references=result.hierarchy_references,
        warnings=all_warnings,
        tally=LinkTally.from_references(result.references),
        config=config,
    )


def run_diagnostics(
    root: Path | None = None,
    config: dict[str, Any] | None = None,
    config_path: Path | None = None,
    repo_root: Path | None = None,
) -> DiagnosticReport:
    """Scan a documentation directory and build its DiagnosticReport.

    Priority for the documentation root: root > config ``[directories] docs``.

    Raises:
        DirectoryNotFoundError: If the documentation root cannot be enumerated.
    """
    if repo_root is None:
        repo_root = Path.cwd()
    if config is None:
        config = get_config(config_path, repo_root)
    if root is None:
        root = get_docs_directory(config, repo_root)

    scan = scan_directory(root, config)
    return build_report(scan.documents, root=scan.root, config=config, warnings=scan.warnings)


__all__ = ["DiagnosticReport", "build_report", "run_diagnostics"]
