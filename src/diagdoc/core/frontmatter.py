"""
diagdoc.core.frontmatter - YAML frontmatter parsing.

Only the fields the relationship graph needs are interpreted: the
document identifier, its declared parent and a title. Everything else
is kept verbatim in ``Document.frontmatter``.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml

from diagdoc.core.identifier import (
    DocumentId,
    InvalidIdentifierError,
    identifier_from_filename,
    parse_identifier,
)
from diagdoc.core.models import Document, ScanWarning
from diagdoc.core.patterns import FRONTMATTER_PATTERN

logger = logging.getLogger(__name__)

ID_KEYS = ("id", "document_id")
PARENT_KEYS = ("parent", "parent_id")
NULL_VALUES = ("null", "~", "none")


class FrontmatterError(ValueError):
    """Raised when a frontmatter block is not a valid YAML mapping."""


@dataclass
class ParsedFrontmatter:
    """Frontmatter mapping plus the body that follows it."""

    data: Dict[str, Any] = field(default_factory=dict)
    body: str = ""
    present: bool = False


def split_frontmatter(text: str) -> ParsedFrontmatter:
    """
    Split text into a frontmatter mapping and a body.

    Args:
        text: Raw document text

    Returns:
        ParsedFrontmatter with data={} when no frontmatter block exists

    Raises:
        FrontmatterError: If the block exists but is not a YAML mapping
    """
    text = text.lstrip("\ufeff")
    match = FRONTMATTER_PATTERN.match(text)
    if not match:
        return ParsedFrontmatter(data={}, body=text, present=False)

    body = text[match.end():]
    try:
        # BaseLoader keeps every scalar a string so "1.10" is not read as 1.1
        data = yaml.load(match.group(1), Loader=yaml.BaseLoader)
    except yaml.YAMLError as e:
        raise FrontmatterError(f"Invalid YAML frontmatter: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise FrontmatterError("Frontmatter is not a mapping")
    return ParsedFrontmatter(data=data, body=body, present=True)


def _first_value(data: Dict[str, Any], keys: Tuple[str, ...]) -> Optional[str]:
    for key in keys:
        value = data.get(key)
        if value is None:
            continue
        text = str(value).strip()
        if text and text.lower() not in NULL_VALUES:
            return text
    return None


def parse_document(path: Path, text: str) -> Tuple[Document, List[ScanWarning]]:
    """
    Build a Document from raw text.

    Malformed frontmatter and malformed identifiers produce warnings rather
    than exceptions so the document's references can still be extracted.

    Args:
        path: File path (used for the filename-derived identifier and title)
        text: Raw file text

    Returns:
        Tuple of (Document, list of ScanWarning)
    """
    warnings: List[ScanWarning] = []

    try:
        parsed = split_frontmatter(text)
    except FrontmatterError as e:
        logger.warning("%s: %s", path, e)
        warnings.append(ScanWarning(path=path, message=str(e), kind="frontmatter"))
        stripped = text.lstrip("\ufeff")
        match = FRONTMATTER_PATTERN.match(stripped)
        body = stripped[match.end():] if match else stripped
        parsed = ParsedFrontmatter(data={}, body=body, present=False)

    data = parsed.data
    raw_id = _first_value(data, ID_KEYS)
    raw_parent = _first_value(data, PARENT_KEYS)
    title = _first_value(data, ("title",)) or path.stem

    doc = Document(
        path=path,
        text=text,
        body=parsed.body,
        title=title,
        raw_id=raw_id,
        raw_parent=raw_parent,
        frontmatter=data,
    )

    if raw_id is not None:
        try:
            doc.doc_id = parse_identifier(raw_id)
        except InvalidIdentifierError as e:
            doc.id_error = str(e)
            warnings.append(ScanWarning(path=path, message=str(e), kind="invalid-id"))
    else:
        doc.doc_id = identifier_from_filename(path.name)

    if raw_parent is not None:
        try:
            doc.declared_parent = parse_identifier(raw_parent)
        except InvalidIdentifierError as e:
            warnings.append(
                ScanWarning(path=path, message=f"parent: {e}", kind="invalid-parent")
            )

    return doc, warnings


def derive_parent(doc: Document, infer: bool = True) -> Optional[DocumentId]:
    """
    Return the document's hierarchy parent.

    A declared parent always wins. Otherwise, when ``infer`` is set, the
    parent is the identifier with its last component dropped.
    """
    if doc.declared_parent is not None:
        return doc.declared_parent
    if infer and doc.doc_id is not None:
        return doc.doc_id.parent()
    return None
