"""
diagdoc.core.models - Core data models for documents and scan results.

Provides dataclasses for representing scanned documents, per-file scan
warnings, and the collected result of a directory scan.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from diagdoc.core.identifier import DocumentId


class DirectoryNotFoundError(FileNotFoundError):
    """Raised when the documentation root cannot be enumerated."""

    def __init__(self, path: Path):
        self.path = path
        super().__init__(f"Documentation directory not found: {path}")


@dataclass
class ScanWarning:
    """
    A recoverable problem found while scanning one file.

    Attributes:
        path: File the warning refers to
        message: Human-readable description
        kind: Short category (e.g., "unreadable", "invalid-id", "frontmatter")
    """

    path: Path
    message: str
    kind: str = "warning"

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"


@dataclass
class Document:
    """
    One scanned markdown document.

    Attributes:
        path: Path to the file
        text: Full raw text including frontmatter
        body: Text after the frontmatter block
        doc_id: Parsed identifier, or None if absent or malformed
        declared_parent: Parent identifier declared in frontmatter, if valid
        title: Title from frontmatter, or the file stem
        raw_id: Identifier string as written (for error reports)
        raw_parent: Parent identifier string as written
        frontmatter: Parsed frontmatter mapping
        id_error: Message if the identifier could not be parsed
    """

    path: Path
    text: str
    body: str = ""
    doc_id: Optional[DocumentId] = None
    declared_parent: Optional[DocumentId] = None
    title: str = ""
    raw_id: Optional[str] = None
    raw_parent: Optional[str] = None
    frontmatter: Dict[str, object] = field(default_factory=dict)
    id_error: Optional[str] = None

    @property
    def stem(self) -> str:
        return self.path.stem

    @property
    def has_frontmatter(self) -> bool:
        return bool(self.frontmatter)

    @property
    def body_char_offset(self) -> int:
        """Number of characters before the body."""
        return len(self.text) - len(self.body)

    @property
    def body_line_offset(self) -> int:
        """Number of lines before the body (the frontmatter block)."""
        return self.text[: self.body_char_offset].count("\n")

    @property
    def is_master(self) -> bool:
        return self.doc_id is not None and self.doc_id.is_master

    def __str__(self) -> str:
        if self.doc_id is not None:
            return f"{self.doc_id}: {self.title}"
        return str(self.path)


@dataclass
class ScanResult:
    """Documents loaded from a directory plus any per-file warnings."""

    root: Path
    documents: List[Document] = field(default_factory=list)
    warnings: List[ScanWarning] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.documents)

    def by_id(self) -> Dict[DocumentId, Document]:
        """Map identifier to document (documents without an identifier are omitted)."""
        return {doc.doc_id: doc for doc in self.documents if doc.doc_id is not None}
