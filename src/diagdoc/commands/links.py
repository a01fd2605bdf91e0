"""
diagdoc.commands.links - Link report command.

Lists every resolved reference grouped by verdict, or only the broken
ones, with a tally and link health score at the end. With --rename the
command instead rewrites links to one document and renames its file.
"""

import argparse
import json
import shutil
import sys
from typing import Any, Dict, List

from diagdoc.commands.common import node_line, parse_id_arg, uses_report
from diagdoc.core.references import replace_link_target, strip_md_suffix
from diagdoc.core.resolver import LinkStatus, ResolvedReference
from diagdoc.graph.factory import DiagnosticReport
from diagdoc.graph.metrics import tally_by_source

STATUS_ICONS = {
    LinkStatus.VALID: "✓",
    LinkStatus.BROKEN: "✗",
    LinkStatus.EXTERNAL: "↗",
    LinkStatus.CIRCULAR: "↻",
    LinkStatus.NON_STANDARD: "~",
}


@uses_report
def run(args: argparse.Namespace, report: DiagnosticReport) -> int:
    """Run the links command."""
    if getattr(args, "find_refs", None):
        return run_find_refs(args, report)
    if getattr(args, "rename", None):
        return run_rename(args, report)

    include_external = args.include_external
    if include_external is None:
        include_external = bool(report.config.get("links", {}).get("include_external", False))

    references = select_references(report, args.broken_only, include_external)

    if args.json:
        print(json.dumps(references_to_json(report, references), indent=2))
    else:
        print_references(references, args.broken_only)
        if not args.quiet:
            print_broken_by_document(report)
            print_tally(report)

    return 1 if report.tally.broken else 0


def select_references(
    report: DiagnosticReport, broken_only: bool, include_external: bool
) -> List[ResolvedReference]:
    if broken_only:
        return report.broken_references()
    if include_external:
        return list(report.references)
    return [r for r in report.references if r.status != LinkStatus.EXTERNAL]


def reference_to_dict(item: ResolvedReference) -> Dict[str, Any]:
    ref = item.reference
    return {
        "source": str(item.source_path) if item.source_path else None,
        "line": ref.line,
        "kind": ref.kind.value,
        "target": ref.target,
        "alias": ref.alias,
        "status": item.status.value,
        "resolved": str(item.target_path) if item.target_path else None,
        "normalized": item.normalized,
        "strategy": item.strategy.value if item.strategy else None,
    }


def references_to_json(report: DiagnosticReport, references: List[ResolvedReference]) -> Dict[str, Any]:
    return {
        "summary": report.tally.to_dict(),
        "references": [reference_to_dict(r) for r in references],
        "warnings": [str(w) for w in report.warnings],
    }


def print_references(references: List[ResolvedReference], broken_only: bool) -> None:
    if not references:
        print("No broken links found" if broken_only else "No links found")
        return

    for status in LinkStatus:
        group = [r for r in references if r.status == status]
        if not group:
            continue
        print(f"{status.value.upper()} ({len(group)})")
        print("-" * 60)
        for item in group:
            icon = STATUS_ICONS[status]
            line = f"  {icon} {item.location()}  {item.reference.raw or item.reference.target}"
            if item.normalized is not None:
                line += f"  (use [[{item.normalized}]])"
            elif item.is_case_mismatch:
                line += f"  (case differs from {item.target_path.stem})"
            print(line)
        print()


def print_tally(report: DiagnosticReport) -> None:
    tally = report.tally
    print(
        f"Links: {tally.total} total, {tally.valid} valid, {tally.broken} broken, "
        f"{tally.external} external, {tally.circular} circular, "
        f"{tally.nonstandard} non-standard"
    )
    print(f"Link health: {tally.health_score():.1f}%")


def run_find_refs(args: argparse.Namespace, report: DiagnosticReport) -> int:
    """List every document that references the given identifier."""
    node_id = parse_id_arg(args.find_refs)
    if node_id is None:
        return 1
    if report.graph.find_by_id(node_id) is None:
        print(f"Error: No document with identifier {node_id}", file=sys.stderr)
        return 1

    references = report.references_to(node_id)
    if args.json:
        print(json.dumps([reference_to_dict(r) for r in references], indent=2))
        return 0

    print(f"References to {node_line(report, node_id)}")
    print("=" * 60)
    if not references:
        print("  (none)")
    for item in references:
        print(f"  {item.location()}  {item.reference.raw or item.reference.target}")
    return 0


def print_broken_by_document(report: DiagnosticReport) -> None:
    stats = [s for s in tally_by_source(report.references) if s.tally.broken]
    if not stats:
        return
    print(f"Documents with broken links ({len(stats)})")
    print("-" * 60)
    for item in stats:
        print(f"  {item.tally.broken:4d}  {item.source}")
    print()


def run_rename(args: argparse.Namespace, report: DiagnosticReport) -> int:
    """
    Point every link at OLD to NEW instead.

    A scanned document whose file stem is OLD is renamed to ``NEW.md``
    in the same directory. With ``--backup`` each rewritten file is first
    copied to ``<name>.bak``.
    """
    old, new = args.rename
    new_stem = strip_md_suffix(new)

    moves = []
    for doc in report.documents:
        if doc.stem != strip_md_suffix(old):
            continue
        target = doc.path.with_name(f"{new_stem}.md")
        if target.exists():
            print(f"Error: {target} already exists", file=sys.stderr)
            return 1
        moves.append((doc.path, target))

    updated = []
    for doc in report.documents:
        text = replace_link_target(doc.text, old, new)
        if text == doc.text:
            continue
        if args.backup:
            shutil.copy2(doc.path, doc.path.with_name(doc.path.name + ".bak"))
        doc.path.write_text(text, encoding="utf-8")
        updated.append(doc.path)

    for source, target in moves:
        source.rename(target)

    if not args.quiet:
        for path in updated:
            print(f"  Updated {path}")
        for source, target in moves:
            print(f"  Renamed {source.name} -> {target.name}")
        print(f"Updated {len(updated)} file(s), renamed {len(moves)}")
    return 0
