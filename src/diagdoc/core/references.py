"""
diagdoc.core.references - Reference extraction from markdown text.

Finds every cross-document mention in a document body:
- Embeds: ![[file]] and ![alt](src)
- Wiki links: [[target]] and [[target|alias]]
- Markdown links: [text](target)
- External links: [text](https://...), [text](mailto:...)
"""

from __future__ import annotations

import bisect
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from diagdoc.core.identifier import DocumentId
from diagdoc.core.patterns import (
    ALIAS_SEPARATOR_PATTERN,
    EXTERNAL_SCHEMES,
    FENCE_PATTERN,
    MD_EMBED_PATTERN,
    MD_LINK_PATTERN,
    WIKI_EMBED_PATTERN,
    WIKI_LINK_PATTERN,
)


class ReferenceKind(Enum):
    """Types of references between documents."""

    HIERARCHY_PARENT = "parent"
    WIKI_LINK = "wiki"
    MARKDOWN_LINK = "markdown"
    EMBED = "embed"
    EXTERNAL = "external"


def is_external_target(target: str) -> bool:
    """True if the target uses an external scheme (http, https, mailto)."""
    return target.strip().lower().startswith(EXTERNAL_SCHEMES)


def _file_part(target: str) -> str:
    """Target text before the alias separator.

    Inside markdown tables the alias pipe is written escaped (``\\|``), so an
    escaped pipe also ends the file part here.
    """
    name = ALIAS_SEPARATOR_PATTERN.split(target, maxsplit=1)[0]
    return name.split("\\|", 1)[0]


def bare_name(target: str) -> str:
    """
    Reduce a reference target to its canonical comparison form.

    Strips the alias, the ``#anchor`` fragment and any directory path.

    Examples:
        'Docs/2.8.1 Policies|see here' -> '2.8.1 Policies'
        'guide#install' -> 'guide'
    """
    name = _file_part(target)
    name = name.split("#", 1)[0]
    name = name.replace("\\", "/").rstrip("/")
    return name.rsplit("/", 1)[-1].strip()


def strip_md_suffix(name: str) -> str:
    """Remove a trailing .md extension (case-insensitive)."""
    return name[:-3] if name.lower().endswith(".md") else name


@dataclass(frozen=True)
class Reference:
    """
    One extracted cross-document mention.

    Attributes:
        kind: The type of reference
        target: Raw target text (alias removed for wiki links)
        alias: Display text (wiki alias or markdown link text), if any
        source_id: Identifier of the document containing the reference
        position: Character offset of the match in the scanned text
        line: 1-based line number of the match
        raw: The full matched text
    """

    kind: ReferenceKind
    target: str
    alias: Optional[str] = None
    source_id: Optional[DocumentId] = None
    position: int = 0
    line: int = 1
    raw: str = ""

    @property
    def is_embed(self) -> bool:
        return self.kind == ReferenceKind.EMBED

    @property
    def is_external(self) -> bool:
        return self.kind == ReferenceKind.EXTERNAL or is_external_target(self.target)

    @property
    def is_internal(self) -> bool:
        return not self.is_external

    @property
    def bare_name(self) -> str:
        """Target with path, alias and anchor stripped."""
        return bare_name(self.target)

    @property
    def has_path(self) -> bool:
        """True if the file part of the target contains a directory separator."""
        file_part = _file_part(self.target)
        return "/" in file_part or "\\" in file_part

    @property
    def is_anchor_only(self) -> bool:
        """True for in-page anchors such as ``#section``."""
        return self.target.startswith("#")

    def location(self) -> str:
        """Return line:position string."""
        return f"{self.line}:{self.position}"

    def __str__(self) -> str:
        return self.raw or self.target


def _code_block_spans(text: str) -> List[Tuple[int, int]]:
    """Return (start, end) character spans of fenced code blocks."""
    spans: List[Tuple[int, int]] = []
    open_start: Optional[int] = None
    open_fence = ""
    for match in FENCE_PATTERN.finditer(text):
        fence = match.group(1)
        if open_start is None:
            open_start = match.start()
            open_fence = fence
        elif fence == open_fence:
            line_end = text.find("\n", match.end())
            spans.append((open_start, len(text) if line_end == -1 else line_end))
            open_start = None
    if open_start is not None:
        # Unterminated fence runs to end of text
        spans.append((open_start, len(text)))
    return spans


def _in_spans(position: int, spans: List[Tuple[int, int]]) -> bool:
    for start, end in spans:
        if start <= position < end:
            return True
        if start > position:
            break
    return False


def _preceded_by_bang(text: str, position: int) -> bool:
    return position > 0 and text[position - 1] == "!"


def _clean_markdown_target(target: str) -> str:
    """Drop an optional link title and angle brackets: <a b.md> "Title" -> a b.md."""
    target = target.strip()
    if target.startswith("<") and ">" in target:
        return target[1 : target.index(">")]
    if " " in target and target.rstrip().endswith(('"', "'")):
        return target.split(" ", 1)[0]
    return target


def _split_alias(inner: str) -> Tuple[str, Optional[str]]:
    parts = ALIAS_SEPARATOR_PATTERN.split(inner, maxsplit=1)
    if len(parts) == 2:
        return parts[0], parts[1]
    return parts[0], None


def extract_references(
    text: str,
    source_id: Optional[DocumentId] = None,
    skip_code_blocks: bool = True,
) -> List[Reference]:
    """
    Extract all references from markdown text, in document order.

    Embeds are matched first; any wiki or markdown link whose opening
    bracket directly follows ``!`` is then skipped because it was already
    counted as an embed. Unbalanced brackets simply do not match.

    Args:
        text: Markdown text to scan
        source_id: Identifier of the containing document, if known
        skip_code_blocks: Ignore matches inside fenced code blocks

    Returns:
        List of Reference objects sorted by position
    """
    spans = _code_block_spans(text) if skip_code_blocks else []
    line_starts = [0] + [i + 1 for i, ch in enumerate(text) if ch == "\n"]

    def line_of(position: int) -> int:
        return bisect.bisect_right(line_starts, position)

    references: List[Reference] = []

    def add(kind: ReferenceKind, target: str, alias: Optional[str], start: int, raw: str) -> None:
        if spans and _in_spans(start, spans):
            return
        references.append(
            Reference(
                kind=kind,
                target=target,
                alias=alias,
                source_id=source_id,
                position=start,
                line=line_of(start),
                raw=raw,
            )
        )

    for match in WIKI_EMBED_PATTERN.finditer(text):
        target, alias = _split_alias(match.group(1))
        add(ReferenceKind.EMBED, target, alias, match.start(), match.group(0))

    for match in MD_EMBED_PATTERN.finditer(text):
        target = _clean_markdown_target(match.group(2))
        add(ReferenceKind.EMBED, target, match.group(1) or None, match.start(), match.group(0))

    for match in WIKI_LINK_PATTERN.finditer(text):
        if _preceded_by_bang(text, match.start()):
            continue
        target, alias = _split_alias(match.group(1))
        add(ReferenceKind.WIKI_LINK, target, alias, match.start(), match.group(0))

    for match in MD_LINK_PATTERN.finditer(text):
        if _preceded_by_bang(text, match.start()):
            continue
        # [[a]](b) is a wiki link followed by text, not a markdown link
        if match.group(1).startswith("["):
            continue
        target = _clean_markdown_target(match.group(2))
        kind = ReferenceKind.EXTERNAL if is_external_target(target) else ReferenceKind.MARKDOWN_LINK
        add(kind, target, match.group(1) or None, match.start(), match.group(0))

    references.sort(key=lambda r: r.position)
    return references


def parent_reference(
    parent_value: str,
    source_id: Optional[DocumentId] = None,
) -> Reference:
    """Build a HIERARCHY_PARENT reference for a declared parent identifier."""
    return Reference(
        kind=ReferenceKind.HIERARCHY_PARENT,
        target=parent_value,
        source_id=source_id,
        position=0,
        line=1,
        raw=f"parent: {parent_value}",
    )


def replace_link_target(text: str, old_target: str, new_target: str) -> str:
    """
    Rewrite wiki and markdown links pointing at ``old_target``.

    Aliases and link text are preserved.
    """

    def wiki_repl(match) -> str:
        if _preceded_by_bang(match.string, match.start()):
            return match.group(0)
        target, alias = _split_alias(match.group(1))
        if target.strip() != old_target:
            return match.group(0)
        if alias is not None:
            return f"[[{new_target}|{alias}]]"
        return f"[[{new_target}]]"

    def md_repl(match) -> str:
        if _preceded_by_bang(match.string, match.start()):
            return match.group(0)
        target = match.group(2).strip()
        if target not in (old_target, f"{old_target}.md"):
            return match.group(0)
        suffix = ".md" if target.endswith(".md") and not new_target.endswith(".md") else ""
        return f"[{match.group(1)}]({new_target}{suffix})"

    result = WIKI_LINK_PATTERN.sub(wiki_repl, text)
    return MD_LINK_PATTERN.sub(md_repl, result)
