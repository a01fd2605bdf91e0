"""
diagdoc - Documentation diagnostics for interlinked markdown trees

diagdoc scans a directory of markdown documents that carry hierarchical
identifiers (3.1.2), extracts every wiki-link, markdown link and embed,
resolves the targets against the real file set, and reports broken links,
orphans, link cycles and the shape of the document hierarchy.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("diagdoc")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"  # Not installed
__license__ = "MIT"

from diagdoc.core.identifier import DocumentId, InvalidIdentifierError
from diagdoc.core.models import DirectoryNotFoundError
from diagdoc.core.references import Reference, ReferenceKind, extract_references
from diagdoc.core.resolver import LinkStatus, ResolvedReference

__all__ = [
    "__version__",
    "DocumentId",
    "InvalidIdentifierError",
    "DirectoryNotFoundError",
    "Reference",
    "ReferenceKind",
    "extract_references",
    "LinkStatus",
    "ResolvedReference",
]
