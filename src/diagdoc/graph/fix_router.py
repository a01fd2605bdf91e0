"""Fix Router - Maps detected anomalies to remediation hints.

Consumes analytics output only; never touches files.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Dict, List, Optional

if TYPE_CHECKING:
    from diagdoc.graph.factory import DiagnosticReport


class AnomalyType(Enum):
    """Categories of problems the engine reports."""

    BROKEN_LINK = "broken-link"
    CASE_MISMATCH_LINK = "case-mismatch-link"
    NON_STANDARD_LINK = "non-standard-link"
    CIRCULAR_LINK = "circular-link"
    LINK_CYCLE = "link-cycle"
    ORPHAN_DOCUMENT = "orphan-document"
    MISSING_PARENT = "missing-parent"
    INVALID_IDENTIFIER = "invalid-identifier"
    DUPLICATE_IDENTIFIER = "duplicate-identifier"
    MISSING_FRONTMATTER = "missing-frontmatter"
    INVALID_FRONTMATTER = "invalid-frontmatter"
    UNREADABLE_FILE = "unreadable-file"
    HIERARCHY_CONFLICT = "hierarchy-conflict"


class FixSeverity(Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def icon(self) -> str:
        return {
            FixSeverity.CRITICAL: "✗",
            FixSeverity.HIGH: "!",
            FixSeverity.MEDIUM: "~",
            FixSeverity.LOW: "·",
        }[self]

    @property
    def rank(self) -> int:
        return [FixSeverity.CRITICAL, FixSeverity.HIGH, FixSeverity.MEDIUM, FixSeverity.LOW].index(
            self
        )


@dataclass(frozen=True)
class FixSuggestion:
    """A remediation hint.

    Attributes:
        command: diagdoc arguments that help fix it, or a "# MANUAL:" note.
        description: What the fix does.
        auto_safe: True if the fix could be applied without review.
        severity: How urgent the anomaly is.
    """

    command: str
    description: str
    auto_safe: bool
    severity: FixSeverity

    @property
    def is_manual(self) -> bool:
        return self.command.startswith("#")


DEFAULT_ROUTES: Dict[AnomalyType, FixSuggestion] = {
    AnomalyType.BROKEN_LINK: FixSuggestion(
        "links --broken-only", "List broken links and correct their targets", False,
        FixSeverity.CRITICAL,
    ),
    AnomalyType.CASE_MISMATCH_LINK: FixSuggestion(
        "links --broken-only", "Match link case to the target file name", True,
        FixSeverity.HIGH,
    ),
    AnomalyType.NON_STANDARD_LINK: FixSuggestion(
        "# MANUAL: replace [[dir/name]] with [[name]]",
        "Use the bare file name in links", True, FixSeverity.MEDIUM,
    ),
    AnomalyType.CIRCULAR_LINK: FixSuggestion(
        "# MANUAL: remove links from a document to itself",
        "Drop self-references", True, FixSeverity.LOW,
    ),
    AnomalyType.LINK_CYCLE: FixSuggestion(
        "deps --cycles", "Review the documents that link to each other in a loop", False,
        FixSeverity.MEDIUM,
    ),
    AnomalyType.ORPHAN_DOCUMENT: FixSuggestion(
        "analyze orphans", "Declare a parent in the document frontmatter", False,
        FixSeverity.HIGH,
    ),
    AnomalyType.MISSING_PARENT: FixSuggestion(
        "tree", "Create the missing parent document or fix the parent identifier", False,
        FixSeverity.HIGH,
    ),
    AnomalyType.INVALID_IDENTIFIER: FixSuggestion(
        "# MANUAL: use a dot-separated integer id such as 3.1.2",
        "Correct the id field in frontmatter", False, FixSeverity.CRITICAL,
    ),
    AnomalyType.DUPLICATE_IDENTIFIER: FixSuggestion(
        "# MANUAL: give each document a unique id",
        "Renumber one of the documents", False, FixSeverity.CRITICAL,
    ),
    AnomalyType.MISSING_FRONTMATTER: FixSuggestion(
        "# MANUAL: add a --- frontmatter block with id and parent",
        "Add YAML frontmatter", False, FixSeverity.MEDIUM,
    ),
    AnomalyType.INVALID_FRONTMATTER: FixSuggestion(
        "# MANUAL: fix the YAML between the --- fences",
        "Repair frontmatter syntax", False, FixSeverity.HIGH,
    ),
    AnomalyType.UNREADABLE_FILE: FixSuggestion(
        "# MANUAL: re-save the file as UTF-8",
        "Fix file encoding or permissions", False, FixSeverity.HIGH,
    ),
    AnomalyType.HIERARCHY_CONFLICT: FixSuggestion(
        "tree", "Keep a single parent declaration per document", False,
        FixSeverity.MEDIUM,
    ),
}


class FixRouter:
    """Routes anomaly types to fix suggestions."""

    def __init__(self, routes: Optional[Dict[AnomalyType, FixSuggestion]] = None) -> None:
        self.routes = dict(DEFAULT_ROUTES if routes is None else routes)

    def suggest(self, anomaly: AnomalyType) -> Optional[FixSuggestion]:
        return self.routes.get(anomaly)

    def generate_command(self, anomaly: AnomalyType, target: str, prog: str = "diagdoc") -> Optional[str]:
        """Full command line for a suggestion, with ``--docs-dir`` pointing at ``target``."""
        suggestion = self.suggest(anomaly)
        if suggestion is None:
            return None
        if suggestion.is_manual:
            return suggestion.command
        return f"{prog} --docs-dir {target} {suggestion.command}"


WARNING_KIND_ANOMALIES = {
    "unreadable": AnomalyType.UNREADABLE_FILE,
    "invalid-id": AnomalyType.INVALID_IDENTIFIER,
    "invalid-parent": AnomalyType.INVALID_IDENTIFIER,
    "duplicate-id": AnomalyType.DUPLICATE_IDENTIFIER,
    "frontmatter": AnomalyType.INVALID_FRONTMATTER,
    "hierarchy-conflict": AnomalyType.HIERARCHY_CONFLICT,
}


def collect_anomalies(report: "DiagnosticReport") -> Dict[AnomalyType, List[str]]:
    """Group every anomaly in a report by type, with one description per instance."""
    anomalies: Dict[AnomalyType, List[str]] = {}

    def add(kind: AnomalyType, instance: str) -> None:
        anomalies.setdefault(kind, []).append(instance)

    for item in report.references:
        if item.is_broken:
            add(AnomalyType.BROKEN_LINK, f"{item.location()} → {item.reference.target}")
        elif item.is_nonstandard:
            add(AnomalyType.NON_STANDARD_LINK, f"{item.location()} → {item.normalized}")
        elif item.is_circular:
            add(AnomalyType.CIRCULAR_LINK, item.location())
        elif item.is_case_mismatch:
            add(AnomalyType.CASE_MISMATCH_LINK, f"{item.location()} → {item.target_path.stem}")

    for cycle in report.cycles:
        add(AnomalyType.LINK_CYCLE, str(cycle))

    placeholders = set(report.summary.placeholders)
    for orphan in report.orphans:
        if orphan not in placeholders:
            add(AnomalyType.ORPHAN_DOCUMENT, str(orphan))
    for node_id in report.summary.placeholders:
        add(AnomalyType.MISSING_PARENT, str(node_id))

    for warning in report.warnings:
        kind = WARNING_KIND_ANOMALIES.get(warning.kind)
        if kind is not None:
            add(kind, str(warning))

    invalid_frontmatter = {w.path for w in report.warnings if w.kind == "frontmatter"}
    for doc in report.documents:
        if doc.path in invalid_frontmatter:
            continue
        if not doc.has_frontmatter and doc.doc_id is None:
            add(AnomalyType.MISSING_FRONTMATTER, str(doc.path))

    return anomalies


def format_fix_summary(
    anomalies: Dict[AnomalyType, List[str]],
    router: Optional[FixRouter] = None,
    target: Optional[str] = None,
) -> str:
    """Render a summary of anomalies with suggested fixes, most severe first."""
    if not anomalies:
        return ""
    router = router or FixRouter()

    def order(kind: AnomalyType) -> tuple:
        suggestion = router.suggest(kind)
        rank = suggestion.severity.rank if suggestion else len(FixSeverity)
        return (rank, kind.value)

    lines = ["Detected anomalies", "=" * 60]
    for kind in sorted(anomalies, key=order):
        count = len(anomalies[kind])
        suggestion = router.suggest(kind)
        if suggestion is None:
            lines.append(f"  ? {count} x {kind.value}")
            continue
        lines.append(f"  {suggestion.severity.icon} {count} x {kind.value}: {suggestion.description}")
        command = (
            router.generate_command(kind, target) if target is not None else suggestion.command
        )
        lines.append(f"     fix: {command}")
    return "\n".join(lines)
