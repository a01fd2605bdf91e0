"""
diagdoc.cli - Command-line interface.

Main entry point for the diagdoc CLI tool.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from diagdoc import __version__
from diagdoc.commands import analyze, completion, deps, fix_cmd, links, tree


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="diagdoc",
        description="Diagnostics for interlinked markdown documentation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  diagdoc links                 # All links grouped by verdict
  diagdoc links --broken-only   # Only broken links
  diagdoc deps --mermaid        # Relationship graph as Mermaid
  diagdoc deps --cycles         # Documents that link in a loop
  diagdoc tree --root 2         # Hierarchy below document 2
  diagdoc analyze orphans       # Documents without a parent
  diagdoc fix                   # Suggested fixes for every anomaly

Configuration:
  .diagdoc.toml in the current directory or any parent, e.g.
    [directories]
    docs = "documentation"

For detailed command help: diagdoc <command> --help
        """,
    )

    # Global options
    parser.add_argument(
        "--version",
        action="version",
        version=f"diagdoc {__version__}",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to configuration file",
        metavar="PATH",
    )
    parser.add_argument(
        "--docs-dir",
        type=Path,
        help="Override documentation directory",
        metavar="PATH",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Verbose output",
    )
    verbosity.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Suppress non-error output",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # links command
    links_parser = subparsers.add_parser(
        "links",
        help="Check every wiki-link, markdown link and embed",
    )
    links_parser.add_argument(
        "--broken-only",
        action="store_true",
        help="Only list links that do not resolve",
    )
    links_parser.add_argument(
        "--include-external",
        action="store_true",
        default=None,
        help="Also list http/https/mailto links",
    )
    links_parser.add_argument(
        "--find-refs",
        metavar="ID",
        help="List references to the document with this identifier",
    )
    links_parser.add_argument(
        "--rename",
        nargs=2,
        metavar=("OLD", "NEW"),
        help="Rename document OLD to NEW and update every link to it",
    )
    links_parser.add_argument(
        "--backup",
        action="store_true",
        help="With --rename, keep a .bak copy of each modified file",
    )
    links_parser.add_argument(
        "-j",
        "--json",
        action="store_true",
        help="Output JSON",
    )

    # deps command
    deps_parser = subparsers.add_parser(
        "deps",
        help="Show the document relationship graph",
    )
    deps_parser.add_argument(
        "--mermaid",
        action="store_true",
        help="Print the graph as a Mermaid flowchart",
    )
    deps_parser.add_argument(
        "--cycles",
        action="store_true",
        help="List link cycles",
    )
    deps_parser.add_argument(
        "--orphans",
        action="store_true",
        help="List documents without a parent",
    )
    deps_parser.add_argument(
        "--impact",
        metavar="ID",
        help="Documents affected by a change to this document",
    )
    deps_parser.add_argument(
        "--format",
        choices=["text", "html"],
        default="text",
        help="Output format (default: text)",
    )
    deps_parser.add_argument(
        "-o",
        "--output",
        type=Path,
        metavar="FILE",
        help="Output file for --format html",
    )

    # tree command
    tree_parser = subparsers.add_parser(
        "tree",
        help="Show the document hierarchy",
    )
    tree_parser.add_argument(
        "--root",
        metavar="ID",
        help="Start from this document instead of every root",
    )
    tree_parser.add_argument(
        "--depth",
        type=int,
        metavar="N",
        help="Maximum depth to print",
    )

    # analyze command
    analyze_parser = subparsers.add_parser(
        "analyze",
        help="Print one property of the relationship graph",
    )
    analyze_parser.add_argument(
        "analyze_action",
        nargs="?",
        choices=["roots", "leaves", "orphans", "cycles"],
        help="Property to print",
    )

    # fix command
    subparsers.add_parser(
        "fix",
        help="Suggest fixes for every detected anomaly",
    )

    # completion command
    completion_parser = subparsers.add_parser(
        "completion",
        help="Shell tab-completion setup",
    )
    completion_parser.add_argument(
        "--shell",
        choices=list(completion.SHELLS),
        help="Target shell (default: detected from $SHELL)",
    )
    completion_parser.add_argument(
        "--install",
        action="store_true",
        help="Append the activation line to the shell rc file",
    )

    return parser


def setup_logging(verbose: bool, quiet: bool) -> None:
    """Route library log records to stderr at a level matching -v/-q."""
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    else:
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
        force=True,
    )


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    parser = create_parser()

    # Enable shell tab-completion if argcomplete is installed
    # Install with: pip install diagdoc[completion]
    try:
        import argcomplete

        argcomplete.autocomplete(parser)
    except ImportError:
        pass

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    setup_logging(args.verbose, args.quiet)

    try:
        if args.command == "links":
            return links.run(args)
        elif args.command == "deps":
            return deps.run(args)
        elif args.command == "tree":
            return tree.run(args)
        elif args.command == "analyze":
            return analyze.run(args)
        elif args.command == "fix":
            return fix_cmd.run(args)
        elif args.command == "completion":
            return completion.run(args)
        else:
            parser.print_help()
            return 1

    except KeyboardInterrupt:
        print("\nOperation cancelled.", file=sys.stderr)
        return 130
    except Exception as e:
        if args.verbose:
            raise
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
