"""
diagdoc.commands.deps - Dependency graph command.

Shows who links to whom, and can emit the graph as Mermaid, list cycles
and orphans, compute the impact set of one document, or write the HTML
report.
"""

import argparse
import sys

from diagdoc.commands.common import node_line, parse_id_arg, uses_report
from diagdoc.graph.analytics import canonical_cycles, cycle_members, impact_of
from diagdoc.graph.factory import DiagnosticReport
from diagdoc.graph.mermaid import render_mermaid


@uses_report
def run(args: argparse.Namespace, report: DiagnosticReport) -> int:
    """Run the deps command."""
    if args.format == "html":
        return write_html(args, report)
    if args.mermaid:
        print(render_mermaid(report.graph))
        return 0
    if args.impact:
        return show_impact(args, report)

    shown = False
    status = 0
    if args.cycles:
        status |= show_cycles(report)
        shown = True
    if args.orphans:
        status |= show_orphans(report)
        shown = True
    if not shown:
        show_dependencies(report)
    return status


def show_dependencies(report: DiagnosticReport) -> None:
    graph = report.graph
    print("Document Dependencies")
    print("=" * 60)
    for node in graph.all_nodes():
        if not node.links_to and not node.linked_from:
            continue
        print(node_line(report, node.id))
        for target in graph.links_of(node.id):
            print(f"  → {node_line(report, target)}")
        for source in graph.backlinks_of(node.id):
            print(f"  ← {node_line(report, source)}")
    print()
    print(f"{graph.node_count()} documents, {graph.edge_count()} link edges")


def show_cycles(report: DiagnosticReport) -> int:
    """Print link cycles; returns 1 when any exist."""
    cycles = canonical_cycles(report.cycles)
    if not cycles:
        print("No link cycles found")
        return 0
    print(f"Link cycles ({len(cycles)})")
    print("=" * 60)
    for cycle in cycles:
        print(f"  ↻ {cycle}")
    members = cycle_members(cycles)
    print()
    print(f"Documents in cycles ({len(members)})")
    for node_id in members:
        print(f"  {node_line(report, node_id)}")
    return 1


def show_orphans(report: DiagnosticReport) -> int:
    """Print orphan documents; returns 1 when any exist."""
    orphans = report.orphans
    if not orphans:
        print("No orphan documents found")
        return 0
    print(f"Orphan documents ({len(orphans)})")
    print("=" * 60)
    for node_id in orphans:
        print(f"  {node_line(report, node_id)}")
    return 1


def show_impact(args: argparse.Namespace, report: DiagnosticReport) -> int:
    node_id = parse_id_arg(args.impact)
    if node_id is None:
        return 1
    if report.graph.find_by_id(node_id) is None:
        print(f"Error: No document with identifier {node_id}", file=sys.stderr)
        return 1

    affected = impact_of(report.graph, node_id)
    print(f"Documents affected by changes to {node_line(report, node_id)}")
    print("=" * 60)
    if not affected:
        print("  (none)")
    for other in affected:
        print(f"  {node_line(report, other)}")
    return 0


def write_html(args: argparse.Namespace, report: DiagnosticReport) -> int:
    from diagdoc.html.generator import HTMLGenerator

    if not args.output:
        print("Error: --format html requires -o/--output FILE", file=sys.stderr)
        return 1
    path = HTMLGenerator(report).write(args.output)
    if not args.quiet:
        print(f"Wrote {path}")
    return 0
