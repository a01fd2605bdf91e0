"""HTML Generator for diagnostic reports.

This module renders a DiagnosticReport as a single HTML page: summary
statistics, the document tree, broken and non-standard links, cycles,
warnings and the Mermaid source of the relationship graph.
Uses Jinja2 templates.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from diagdoc import __version__
from diagdoc.graph.mermaid import render_mermaid

if TYPE_CHECKING:
    from diagdoc.graph.factory import DiagnosticReport


@dataclass
class TreeRow:
    """Represents a single row in the document tree view."""

    id: str
    title: str
    depth: int
    path: str
    is_placeholder: bool
    is_orphan: bool
    link_count: int
    backlink_count: int


@dataclass
class LinkRow:
    """One problem link for the link tables."""

    location: str
    target: str
    status: str
    note: str = ""


@dataclass
class ReportStats:
    """Statistics for the header display."""

    document_count: int = 0
    node_count: int = 0
    link_count: int = 0
    broken_count: int = 0
    orphan_count: int = 0
    cycle_count: int = 0
    max_depth: int = 0
    health: float = 100.0


class HTMLGenerator:
    """Generates an HTML diagnostics page from a DiagnosticReport.

    Args:
        report: The report to render.
        title: Page heading.
        version: Version string for display (defaults to diagdoc package version).
    """

    def __init__(
        self,
        report: DiagnosticReport,
        title: str = "Documentation diagnostics",
        version: str | None = None,
    ) -> None:
        self.report = report
        self.title = title
        self.version = version if version is not None else __version__

    def generate(self) -> str:
        """Generate the complete HTML report.

        Returns:
            Complete HTML document as string.
        """
        try:
            from jinja2 import Environment, PackageLoader, select_autoescape

            env = Environment(
                loader=PackageLoader("diagdoc.html", "templates"),
                autoescape=select_autoescape(["html", "xml", "j2"]),
            )
            template = env.get_template("report.html.j2")
        except ImportError:
            raise ImportError(
                "HTMLGenerator requires the html extra. "
                "Install with: pip install diagdoc[html]"
            )

        return template.render(
            title=self.title,
            stats=self._compute_stats(),
            rows=self._build_tree_rows(),
            broken=self._link_rows(self.report.broken_references()),
            nonstandard=self._link_rows(self.report.nonstandard_references()),
            cycles=[str(c) for c in self.report.cycles],
            warnings=[str(w) for w in self.report.warnings],
            mermaid=render_mermaid(self.report.graph),
            version=self.version,
        )

    def write(self, output: Path) -> Path:
        """Render and write the report to ``output``."""
        output = Path(output)
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(self.generate(), encoding="utf-8")
        return output

    def _compute_stats(self) -> ReportStats:
        summary = self.report.summary
        tally = self.report.tally
        return ReportStats(
            document_count=len(self.report.documents),
            node_count=summary.node_count,
            link_count=summary.link_count,
            broken_count=tally.broken,
            orphan_count=len(summary.orphans),
            cycle_count=len(summary.cycles),
            max_depth=summary.max_depth,
            health=round(tally.health_score(), 1),
        )

    def _build_tree_rows(self) -> list[TreeRow]:
        """Flatten the hierarchy depth-first, roots in identifier order."""
        graph = self.report.graph
        rows: list[TreeRow] = []
        visited = set()

        def walk(node_id, depth: int) -> None:
            if node_id in visited:
                return
            visited.add(node_id)
            node = graph.find_by_id(node_id)
            rows.append(
                TreeRow(
                    id=str(node.id),
                    title=node.title,
                    depth=depth,
                    path=str(node.path) if node.path else "",
                    is_placeholder=node.placeholder,
                    is_orphan=node.is_orphan,
                    link_count=node.link_count(),
                    backlink_count=node.backlink_count(),
                )
            )
            for child in graph.children_of(node_id):
                walk(child, depth + 1)

        for root in graph.roots():
            walk(root, 0)
        return rows

    @staticmethod
    def _link_rows(references) -> list[LinkRow]:
        rows = []
        for item in references:
            note = ""
            if item.normalized is not None:
                note = f"use [[{item.normalized}]]"
            rows.append(
                LinkRow(
                    location=item.location(),
                    target=item.reference.target,
                    status=item.status.value,
                    note=note,
                )
            )
        return rows
