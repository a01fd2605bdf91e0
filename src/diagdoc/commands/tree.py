"""
diagdoc.commands.tree - Document hierarchy command.
"""

import argparse
import sys
from typing import Optional, Set

from diagdoc.commands.common import node_line, parse_id_arg, uses_report
from diagdoc.core.identifier import DocumentId
from diagdoc.graph.factory import DiagnosticReport


@uses_report
def run(args: argparse.Namespace, report: DiagnosticReport) -> int:
    """Show the document hierarchy as an indented tree."""
    graph = report.graph
    if args.root:
        root_id = parse_id_arg(args.root)
        if root_id is None:
            return 1
        if root_id not in graph:
            print(f"Error: No document with identifier {root_id}", file=sys.stderr)
            return 1
        roots = [root_id]
    else:
        roots = graph.roots()

    if not roots:
        print("No documents found")
        return 0

    printed: Set[DocumentId] = set()
    for root in roots:
        print_tree(report, root, 0, args.depth, printed)
    return 0


def print_tree(
    report: DiagnosticReport,
    node_id: DocumentId,
    indent: int,
    max_depth: Optional[int],
    printed: Set[DocumentId],
) -> None:
    if node_id in printed:
        return
    printed.add(node_id)

    node = report.graph.find_by_id(node_id)
    icon = "○" if node is not None and node.placeholder else "✓"
    print(f"{'  ' * indent}{icon} {node_line(report, node_id)}")

    if max_depth is not None and indent >= max_depth:
        return
    for child in report.graph.children_of(node_id):
        print_tree(report, child, indent + 1, max_depth, printed)
