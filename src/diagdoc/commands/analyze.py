"""
diagdoc.commands.analyze - Graph analysis command.

Prints one derived property of the relationship graph: its roots,
leaves, orphans or link cycles.
"""

import argparse

from diagdoc.commands.common import load_report, node_line, print_warnings
from diagdoc.graph.analytics import canonical_cycles
from diagdoc.graph.factory import DiagnosticReport


def run(args: argparse.Namespace) -> int:
    """Run the analyze command."""
    if not args.analyze_action:
        print("Usage: diagdoc analyze {roots|leaves|orphans|cycles}")
        return 1

    report = load_report(args)
    if report is None:
        return 1
    try:
        return show_analysis(args, report)
    finally:
        print_warnings(args, report)


def show_analysis(args: argparse.Namespace, report: DiagnosticReport) -> int:
    if args.analyze_action == "cycles":
        cycles = canonical_cycles(report.cycles)
        print(f"Link cycles ({len(cycles)})")
        print("=" * 60)
        for cycle in cycles:
            print(f"  ↻ {cycle}")
        return 0

    if args.analyze_action == "roots":
        ids = report.roots
        heading = "Root documents"
    elif args.analyze_action == "leaves":
        ids = report.leaves
        heading = "Leaf documents"
    elif args.analyze_action == "orphans":
        ids = report.orphans
        heading = "Orphan documents"
    else:
        return 1

    print(f"{heading} ({len(ids)})")
    print("=" * 60)
    for node_id in ids:
        print(f"  {node_line(report, node_id)}")
    return 0
