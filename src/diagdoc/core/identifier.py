"""
diagdoc.core.identifier - Hierarchical document identifiers.

A document identifier is a dot-separated sequence of non-negative
integers such as ``3.1.2``. Ordering always compares the integer
sequence, so ``1.10`` sorts after ``1.9`` and ``1.2`` sorts before
``1.2.1``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple

COMPONENT_PATTERN = re.compile(r"[0-9]+")
FILENAME_ID_PATTERN = re.compile(r"^([0-9]+(?:\.[0-9]+)*)")


class InvalidIdentifierError(ValueError):
    """Raised when a string is not a valid hierarchical identifier."""

    def __init__(self, value: str):
        self.value = value
        super().__init__(f"Invalid document identifier: {value!r}")


@dataclass(frozen=True, order=True)
class DocumentId:
    """
    Immutable hierarchical identifier.

    Attributes:
        parts: The integer components (e.g., (3, 1, 2) for "3.1.2")
        raw: The text the identifier was parsed from
    """

    parts: Tuple[int, ...]
    raw: str = field(default="", compare=False, repr=False)

    def __post_init__(self) -> None:
        if not self.parts:
            raise InvalidIdentifierError("")
        if any(p < 0 for p in self.parts):
            raise InvalidIdentifierError(".".join(str(p) for p in self.parts))
        if not self.raw:
            object.__setattr__(self, "raw", ".".join(str(p) for p in self.parts))

    @classmethod
    def parse(cls, value: str) -> "DocumentId":
        """
        Parse an identifier string.

        Args:
            value: Text such as "3.1.2"

        Returns:
            The parsed DocumentId

        Raises:
            InvalidIdentifierError: If the string is empty or any component
                is not a non-negative integer
        """
        if not value:
            raise InvalidIdentifierError(value)
        components = value.split(".")
        if not all(COMPONENT_PATTERN.fullmatch(c) for c in components):
            raise InvalidIdentifierError(value)
        return cls(tuple(int(c) for c in components), raw=value)

    @classmethod
    def from_parts(cls, parts: List[int]) -> "DocumentId":
        """Build an identifier from integer components."""
        return cls(tuple(parts))

    @property
    def depth(self) -> int:
        """Number of components."""
        return len(self.parts)

    @property
    def module(self) -> int:
        """First component (the module number)."""
        return self.parts[0]

    @property
    def is_master(self) -> bool:
        """True for the master document identifier ``0``."""
        return self.parts == (0,)

    @property
    def is_module_root(self) -> bool:
        """True for module roots of the form ``x.0``."""
        return len(self.parts) == 2 and self.parts[1] == 0

    def parent(self) -> Optional["DocumentId"]:
        """Return the identifier with the last component dropped, or None at depth 1."""
        if len(self.parts) <= 1:
            return None
        return DocumentId(self.parts[:-1])

    def ancestors(self) -> List["DocumentId"]:
        """Return all ancestors, nearest first."""
        return list(self.iter_ancestors())

    def iter_ancestors(self) -> Iterator["DocumentId"]:
        current = self.parent()
        while current is not None:
            yield current
            current = current.parent()

    def __str__(self) -> str:
        return self.raw

    def __repr__(self) -> str:
        return f"DocumentId({self.raw!r})"


def parse_identifier(value: str) -> DocumentId:
    """Parse an identifier string (module-level convenience)."""
    return DocumentId.parse(value.strip())


def identifier_from_filename(name: str) -> Optional[DocumentId]:
    """
    Derive an identifier from a file name's leading numeric-dot prefix.

    Examples:
        "2.8.1 Full Title.md" -> 2.8.1
        "0_master.md" -> 0
        "README.md" -> None
    """
    stem = name[:-3] if name.lower().endswith(".md") else name
    match = FILENAME_ID_PATTERN.match(stem)
    if not match:
        return None
    return DocumentId.parse(match.group(1))
