"""
diagdoc.commands.common - Helpers shared by the CLI commands.
"""

from __future__ import annotations

import argparse
import functools
import sys
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from diagdoc.config import get_config, get_docs_directory
from diagdoc.core.identifier import DocumentId, InvalidIdentifierError, parse_identifier
from diagdoc.core.models import DirectoryNotFoundError
from diagdoc.graph.factory import DiagnosticReport, run_diagnostics


def resolve_config(args: argparse.Namespace) -> Dict[str, Any]:
    """Load configuration from ``--config`` or by discovery from the cwd."""
    return get_config(getattr(args, "config", None), Path.cwd())


def resolve_docs_dir(args: argparse.Namespace, config: Dict[str, Any]) -> Path:
    """``--docs-dir`` wins over ``[directories] docs``."""
    docs_dir = getattr(args, "docs_dir", None)
    if docs_dir is not None:
        return Path(docs_dir)
    return get_docs_directory(config)


def load_report(args: argparse.Namespace) -> Optional[DiagnosticReport]:
    """Scan the documentation directory named by the CLI arguments.

    Prints an error and returns None when the directory does not exist.
    """
    config = resolve_config(args)
    docs_dir = resolve_docs_dir(args, config)
    try:
        report = run_diagnostics(docs_dir, config=config)
    except DirectoryNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return None
    return report


def print_warnings(args: argparse.Namespace, report: DiagnosticReport) -> None:
    """Print scan warnings to stderr unless ``--quiet`` was given."""
    if getattr(args, "quiet", False):
        return
    for warning in report.warnings:
        print(f"Warning: {warning}", file=sys.stderr)


def uses_report(
    command: Callable[[argparse.Namespace, DiagnosticReport], int],
) -> Callable[[argparse.Namespace], int]:
    """Turn ``command(args, report)`` into a CLI entry point ``run(args)``.

    The report is loaded first; scan warnings are printed after the
    command's own output.
    """

    @functools.wraps(command)
    def run(args: argparse.Namespace) -> int:
        report = load_report(args)
        if report is None:
            return 1
        try:
            return command(args, report)
        finally:
            print_warnings(args, report)

    return run


def parse_id_arg(value: str) -> Optional[DocumentId]:
    """Parse an identifier given on the command line, printing an error if invalid."""
    try:
        return parse_identifier(value)
    except InvalidIdentifierError as e:
        print(f"Error: {e}", file=sys.stderr)
        return None


def node_line(report: DiagnosticReport, node_id: DocumentId) -> str:
    """Display label for a graph node, marking identifiers that were never scanned."""
    node = report.graph.find_by_id(node_id)
    if node is None:
        return str(node_id)
    if node.placeholder:
        return f"{node_id} (missing)"
    return node.label
