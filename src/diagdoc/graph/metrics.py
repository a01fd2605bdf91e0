"""Metrics - Link tallies and health scores.

A LinkTally counts resolved references by verdict. The health score is
the share of references that are valid or external.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List

from diagdoc.core.resolver import LinkStatus, ResolvedReference


@dataclass
class LinkTally:
    """Counts of resolved references by status.

    Attributes:
        valid: Internal references that resolved.
        broken: Internal references with no matching document.
        external: http/https/mailto references.
        circular: References pointing at their own document.
        nonstandard: References written with a directory path.
        embeds: Embeds among all counted references.
    """

    valid: int = 0
    broken: int = 0
    external: int = 0
    circular: int = 0
    nonstandard: int = 0
    embeds: int = 0

    def add(self, item: ResolvedReference) -> None:
        status = item.status
        if status == LinkStatus.VALID:
            self.valid += 1
        elif status == LinkStatus.BROKEN:
            self.broken += 1
        elif status == LinkStatus.EXTERNAL:
            self.external += 1
        elif status == LinkStatus.CIRCULAR:
            self.circular += 1
        elif status == LinkStatus.NON_STANDARD:
            self.nonstandard += 1
        if item.reference.is_embed:
            self.embeds += 1

    @classmethod
    def from_references(cls, references: Iterable[ResolvedReference]) -> "LinkTally":
        tally = cls()
        for item in references:
            tally.add(item)
        return tally

    @property
    def total(self) -> int:
        return self.valid + self.broken + self.external + self.circular + self.nonstandard

    @property
    def internal(self) -> int:
        return self.total - self.external

    def health_score(self) -> float:
        """Percentage of references that are valid or external (100.0 when empty)."""
        if self.total == 0:
            return 100.0
        return (self.valid + self.external) / self.total * 100.0

    def to_dict(self) -> Dict[str, float]:
        return {
            "valid": self.valid,
            "broken": self.broken,
            "external": self.external,
            "circular": self.circular,
            "nonstandard": self.nonstandard,
            "embeds": self.embeds,
            "total": self.total,
            "health": round(self.health_score(), 1),
        }


@dataclass
class DocumentLinkStats:
    """Per-document link counts, for the most-linked / most-broken listings."""

    source: str
    tally: LinkTally = field(default_factory=LinkTally)


def tally_by_source(references: Iterable[ResolvedReference]) -> List[DocumentLinkStats]:
    """Group references by source file, ordered by broken count then name."""
    groups: Dict[str, DocumentLinkStats] = {}
    for item in references:
        key = str(item.source_path) if item.source_path is not None else "<unknown>"
        stats = groups.setdefault(key, DocumentLinkStats(source=key))
        stats.tally.add(item)
    return sorted(groups.values(), key=lambda s: (-s.tally.broken, s.source))
