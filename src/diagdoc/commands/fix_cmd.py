"""
diagdoc.commands.fix_cmd - Remediation hints.

Collects every anomaly in the report and prints the suggested fix for
each category. Never modifies files.
"""

from __future__ import annotations

import argparse

from diagdoc.commands.common import uses_report
from diagdoc.graph.factory import DiagnosticReport
from diagdoc.graph.fix_router import FixRouter, collect_anomalies, format_fix_summary


@uses_report
def run(args: argparse.Namespace, report: DiagnosticReport) -> int:
    """Run the fix command; exits 1 when anomalies were found."""
    anomalies = collect_anomalies(report)
    if not anomalies:
        print("No anomalies found")
        return 0

    target = str(report.root) if report.root is not None else None
    print(format_fix_summary(anomalies, FixRouter(), target=target))

    if getattr(args, "verbose", False):
        print()
        for kind, instances in anomalies.items():
            print(f"{kind.value}:")
            for instance in instances:
                print(f"  {instance}")
    return 1
