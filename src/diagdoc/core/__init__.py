"""
diagdoc.core - Identifiers, reference extraction, resolution and loading
"""

from diagdoc.core.identifier import DocumentId, InvalidIdentifierError, identifier_from_filename
from diagdoc.core.models import DirectoryNotFoundError, Document, ScanResult, ScanWarning
from diagdoc.core.references import Reference, ReferenceKind, extract_references
from diagdoc.core.resolver import (
    DocumentIndex,
    LinkStatus,
    ReferenceResolver,
    ResolvedReference,
    resolve_reference,
)

__all__ = [
    "DocumentId",
    "InvalidIdentifierError",
    "identifier_from_filename",
    "DirectoryNotFoundError",
    "Document",
    "ScanResult",
    "ScanWarning",
    "Reference",
    "ReferenceKind",
    "extract_references",
    "DocumentIndex",
    "LinkStatus",
    "ReferenceResolver",
    "ResolvedReference",
    "resolve_reference",
]
