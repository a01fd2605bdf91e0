"""
diagdoc.core.resolver - Reference resolution against the known document set.

Every reference resolves to exactly one LinkStatus. Matching is lenient
on purpose: documentation links are routinely abbreviated to a bare
hierarchical identifier (``[[2.8.1]]`` for ``2.8.1 Full Title.md``), and a
noisy stream of false Broken reports trains readers to ignore the report.

Resolution order (first match wins):
1. External scheme prefix -> EXTERNAL
2. Bare target equals the source's own file stem -> CIRCULAR
3. Target contains a directory separator -> NON_STANDARD
4. Fallback chain: relative path, relative path + .md, exact stem
   (case-insensitive), stem suffix, identifier prefix, path substring
5. Nothing matched -> BROKEN
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

from diagdoc.core.references import Reference, bare_name, is_external_target, strip_md_suffix

logger = logging.getLogger(__name__)


class LinkStatus(Enum):
    """Verdict for one reference."""

    VALID = "valid"
    BROKEN = "broken"
    EXTERNAL = "external"
    CIRCULAR = "circular"
    NON_STANDARD = "non-standard"


class MatchStrategy(Enum):
    """Which step of the fallback chain located the target."""

    SELF = "self"
    RELATIVE_PATH = "relative-path"
    RELATIVE_PATH_MD = "relative-path-md"
    EXACT_STEM = "exact-stem"
    STEM_SUFFIX = "stem-suffix"
    ID_PREFIX = "id-prefix"
    PATH_SUBSTRING = "path-substring"


@dataclass(frozen=True)
class ResolvedReference:
    """
    A reference plus its resolution verdict.

    Attributes:
        reference: The extracted reference
        status: The verdict
        source_path: File containing the reference
        target_path: Known document the target matched, if any
        normalized: Bare name recorded for NON_STANDARD references
        strategy: Fallback step that produced the match, if any
    """

    reference: Reference
    status: LinkStatus
    source_path: Optional[Path] = None
    target_path: Optional[Path] = None
    normalized: Optional[str] = None
    strategy: Optional[MatchStrategy] = None

    @property
    def is_broken(self) -> bool:
        return self.status == LinkStatus.BROKEN

    @property
    def is_valid(self) -> bool:
        return self.status == LinkStatus.VALID

    @property
    def is_circular(self) -> bool:
        return self.status == LinkStatus.CIRCULAR

    @property
    def is_nonstandard(self) -> bool:
        return self.status == LinkStatus.NON_STANDARD

    @property
    def is_case_mismatch(self) -> bool:
        """True when the target only matched a stem under case folding."""
        if self.strategy != MatchStrategy.EXACT_STEM or self.target_path is None:
            return False
        return strip_md_suffix(self.reference.bare_name) != self.target_path.stem

    def location(self) -> str:
        """Return file:line location string."""
        if self.source_path is not None:
            return f"{self.source_path}:{self.reference.line}"
        return f"line {self.reference.line}"

    def __str__(self) -> str:
        return f"{self.location()} {self.reference.raw or self.reference.target} [{self.status.value}]"


def _normalize(path: Path) -> str:
    return os.path.normpath(str(path))


class DocumentIndex:
    """
    Lookup structure over the set of known document paths.

    Paths are compared in normalized form. When ``root`` is given, the
    substring fallback searches root-relative paths only, so directory
    names above the corpus never produce a match. With
    ``check_filesystem`` enabled, relative-path lookups also accept files
    that exist on disk but are not markdown documents (images, PDFs).
    """

    def __init__(
        self,
        paths: Iterable[Path],
        root: Optional[Path] = None,
        check_filesystem: bool = False,
    ) -> None:
        self.root = root
        self.check_filesystem = check_filesystem
        self._paths: List[Path] = sorted({Path(p) for p in paths}, key=lambda p: str(p))
        self._normalized: Dict[str, Path] = {_normalize(p): p for p in self._paths}
        self._entries: List[Tuple[Path, str, str]] = [
            (p, p.stem.lower(), self._searchable(p).lower()) for p in self._paths
        ]

    def _searchable(self, path: Path) -> str:
        if self.root is not None:
            try:
                return str(path.relative_to(self.root))
            except ValueError:
                pass
        return str(path)

    @classmethod
    def from_documents(cls, documents, root: Optional[Path] = None, **kwargs) -> "DocumentIndex":
        return cls((doc.path for doc in documents), root=root, **kwargs)

    def __len__(self) -> int:
        return len(self._paths)

    def __contains__(self, path: object) -> bool:
        return isinstance(path, (str, Path)) and _normalize(Path(path)) in self._normalized

    @property
    def paths(self) -> List[Path]:
        return list(self._paths)

    def lookup_path(self, path: Path) -> Optional[Path]:
        """Return the known path equal to ``path`` (or an existing file on disk)."""
        known = self._normalized.get(_normalize(path))
        if known is not None:
            return known
        if not self.check_filesystem:
            return None
        try:
            is_file = path.is_file()
        except OSError as e:
            # Targets longer than the filesystem name limit raise ENAMETOOLONG
            logger.debug("Cannot stat link target %s: %s", path, e)
            return None
        return path if is_file else None

    def find_by_stem(self, name: str) -> Optional[Path]:
        """Case-insensitive exact stem match."""
        name = name.lower()
        for path, stem, _ in self._entries:
            if stem == name:
                return path
        return None

    def find_by_stem_suffix(self, name: str) -> Optional[Path]:
        """Known stem ending with ``name`` (case-insensitive)."""
        name = name.lower()
        for path, stem, _ in self._entries:
            if stem.endswith(name):
                return path
        return None

    def find_by_id_prefix(self, name: str) -> Optional[Path]:
        """Known stem starting with ``name``; only for targets starting with a digit."""
        name = name.lower()
        if not name[:1].isdigit():
            return None
        for path, stem, _ in self._entries:
            if stem.startswith(name):
                return path
        return None

    def find_by_path_substring(self, name: str) -> Optional[Path]:
        """Last resort: ``name`` appears anywhere in a known path."""
        name = name.lower()
        for path, _, searchable in self._entries:
            if name in searchable:
                return path
        return None

    def match(self, target: str, source_dir: Optional[Path]) -> Tuple[Optional[Path], Optional[MatchStrategy]]:
        """
        Run the fallback chain for a bare target.

        Returns:
            Tuple of (matched path, strategy) or (None, None)
        """
        if not target:
            return None, None

        if source_dir is not None:
            candidate = source_dir / target
            found = self.lookup_path(candidate)
            if found is not None:
                return found, MatchStrategy.RELATIVE_PATH
            found = self.lookup_path(source_dir / f"{target}.md")
            if found is not None:
                return found, MatchStrategy.RELATIVE_PATH_MD

        stem = strip_md_suffix(target)
        chain = (
            (self.find_by_stem, MatchStrategy.EXACT_STEM),
            (self.find_by_stem_suffix, MatchStrategy.STEM_SUFFIX),
            (self.find_by_id_prefix, MatchStrategy.ID_PREFIX),
        )
        for finder, strategy in chain:
            found = finder(stem)
            if found is not None:
                return found, strategy

        found = self.find_by_path_substring(target)
        if found is not None:
            return found, MatchStrategy.PATH_SUBSTRING
        return None, None


def resolve_reference(
    reference: Reference,
    source_path: Optional[Path],
    index: DocumentIndex,
) -> ResolvedReference:
    """
    Classify one reference against the known documents.

    Args:
        reference: The extracted reference
        source_path: Path of the document containing the reference
        index: Known document set

    Returns:
        ResolvedReference with exactly one status
    """
    target = reference.target

    if reference.is_external or is_external_target(target):
        return ResolvedReference(reference, LinkStatus.EXTERNAL, source_path=source_path)

    name = bare_name(target)
    source_stem = source_path.stem if source_path is not None else None

    if source_stem is not None and name and strip_md_suffix(name) == source_stem:
        return ResolvedReference(
            reference,
            LinkStatus.CIRCULAR,
            source_path=source_path,
            target_path=source_path,
            strategy=MatchStrategy.SELF,
        )

    source_dir = source_path.parent if source_path is not None else None

    if reference.has_path:
        found, strategy = index.match(name, None)
        return ResolvedReference(
            reference,
            LinkStatus.NON_STANDARD,
            source_path=source_path,
            target_path=found,
            normalized=name,
            strategy=strategy,
        )

    if reference.is_anchor_only:
        # In-page anchor: the target is the source document itself
        return ResolvedReference(
            reference,
            LinkStatus.VALID,
            source_path=source_path,
            target_path=source_path,
            strategy=MatchStrategy.SELF,
        )

    found, strategy = index.match(name, source_dir)
    if found is None:
        return ResolvedReference(reference, LinkStatus.BROKEN, source_path=source_path)
    return ResolvedReference(
        reference,
        LinkStatus.VALID,
        source_path=source_path,
        target_path=found,
        strategy=strategy,
    )


class ReferenceResolver:
    """Resolves references against one DocumentIndex."""

    def __init__(self, index: DocumentIndex) -> None:
        self.index = index

    def resolve(self, reference: Reference, source_path: Optional[Path]) -> ResolvedReference:
        return resolve_reference(reference, source_path, self.index)

    def resolve_all(
        self,
        references: Iterable[Reference],
        source_path: Optional[Path],
    ) -> List[ResolvedReference]:
        return [self.resolve(ref, source_path) for ref in references]
