"""
Document loading utilities.

Centralized functions for enumerating and reading markdown documents from
a documentation root. A file that cannot be read is logged, recorded as a
ScanWarning and skipped; only a missing root aborts the scan.
"""

import fnmatch
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

from diagdoc.core.frontmatter import parse_document
from diagdoc.core.models import DirectoryNotFoundError, Document, ScanResult, ScanWarning

logger = logging.getLogger(__name__)


def get_skip_files(config: Dict[str, Any]) -> List[str]:
    """Get the skip_files glob patterns from configuration."""
    return config.get("scan", {}).get("skip_files", [])


def get_skip_dirs(config: Dict[str, Any]) -> List[str]:
    """Get the skip_dirs list from configuration.

    Args:
        config: Configuration dict

    Returns:
        List of directory names to skip (e.g., ["archive", "node_modules"])
    """
    return config.get("scan", {}).get("skip_dirs", [])


def _is_hidden(rel_path: Path) -> bool:
    return any(part.startswith(".") for part in rel_path.parts)


def find_markdown_files(
    root: Path,
    skip_dirs: Optional[List[str]] = None,
    skip_files: Optional[List[str]] = None,
    include_hidden: bool = False,
) -> List[Path]:
    """
    Recursively list ``*.md`` files under a documentation root.

    Args:
        root: Documentation root directory
        skip_dirs: Directory names to skip anywhere in the tree
        skip_files: Glob patterns matched against file names
        include_hidden: Include files and directories starting with "."

    Returns:
        Sorted list of file paths

    Raises:
        DirectoryNotFoundError: If root does not exist or is not a directory
    """
    root = Path(root)
    if not root.is_dir():
        raise DirectoryNotFoundError(root)

    skip_dirs = skip_dirs or []
    skip_files = skip_files or []

    files: List[Path] = []
    for file_path in root.rglob("*.md"):
        if not file_path.is_file():
            continue
        rel_path = file_path.relative_to(root)
        if not include_hidden and _is_hidden(rel_path):
            continue
        if any(skip_dir in rel_path.parts[:-1] for skip_dir in skip_dirs):
            continue
        if any(fnmatch.fnmatch(file_path.name, pattern) for pattern in skip_files):
            continue
        files.append(file_path)

    return sorted(files, key=lambda p: str(p))


def read_document(path: Path) -> Tuple[Optional[Document], List[ScanWarning]]:
    """
    Read and parse one file.

    Returns:
        Tuple of (Document or None when unreadable, list of ScanWarning)
    """
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Skipping unreadable file %s: %s", path, e)
        return None, [ScanWarning(path=path, message=f"Could not read file: {e}", kind="unreadable")]

    logger.debug("Loaded %s", path)
    return parse_document(path, text)


def load_documents(pairs: Iterable[Tuple[Path, str]]) -> ScanResult:
    """Build a ScanResult from in-memory ``(path, text)`` pairs."""
    result = ScanResult(root=Path("."))
    for path, text in pairs:
        doc, warnings = parse_document(Path(path), text)
        result.documents.append(doc)
        result.warnings.extend(warnings)
    return result


def scan_directory(root: Path, config: Optional[Dict[str, Any]] = None) -> ScanResult:
    """
    Load every markdown document under ``root``.

    Args:
        root: Documentation root
        config: Configuration dict (``[scan]`` section is honoured)

    Returns:
        ScanResult with documents in path order plus collected warnings
    """
    config = config or {}
    scan_config = config.get("scan", {})
    files = find_markdown_files(
        root,
        skip_dirs=get_skip_dirs(config),
        skip_files=get_skip_files(config),
        include_hidden=scan_config.get("include_hidden", False),
    )

    result = ScanResult(root=Path(root))
    for file_path in files:
        doc, warnings = read_document(file_path)
        result.warnings.extend(warnings)
        if doc is not None:
            result.documents.append(doc)

    logger.debug("Scanned %d documents under %s", len(result.documents), root)
    return result
