"""
Tests for diagdoc.core.resolver module.

The index is built from in-memory paths, so no files are needed.
"""

from pathlib import Path

import pytest

ROOT = Path("/docs")
PATHS = [
    ROOT / "0 Master.md",
    ROOT / "1 Intro.md",
    ROOT / "sub" / "1.1 Details.md",
    ROOT / "2.8.1 Full Title.md",
    ROOT / "guides" / "Setup Guide.md",
]


@pytest.fixture
def index():
    from diagdoc.core.resolver import DocumentIndex

    return DocumentIndex(PATHS, root=ROOT)


def resolve(text, index, source=ROOT / "1 Intro.md"):
    from diagdoc.core.references import extract_references
    from diagdoc.core.resolver import resolve_reference

    refs = extract_references(text)
    assert len(refs) == 1
    return resolve_reference(refs[0], source, index)


class TestVerdicts:
    """Each reference receives exactly one status."""

    def test_external(self, index):
        from diagdoc.core.resolver import LinkStatus

        assert resolve("[site](https://example.org)", index).status == LinkStatus.EXTERNAL

    @pytest.mark.parametrize("text", ["[[1 Intro]]", "[[1 Intro.md]]", "[[1 Intro#top]]", "[me](1 Intro.md)"])
    def test_circular(self, index, text):
        from diagdoc.core.resolver import LinkStatus

        result = resolve(text, index)
        assert result.status == LinkStatus.CIRCULAR
        assert result.is_circular

    def test_nonstandard_with_known_target(self, index):
        from diagdoc.core.resolver import LinkStatus

        result = resolve("[[guides/Setup Guide]]", index)
        assert result.status == LinkStatus.NON_STANDARD
        assert result.normalized == "Setup Guide"
        assert result.target_path == ROOT / "guides" / "Setup Guide.md"

    def test_nonstandard_backslash(self, index):
        from diagdoc.core.resolver import LinkStatus

        result = resolve("[[guides\\Setup Guide]]", index)
        assert result.status == LinkStatus.NON_STANDARD
        assert result.normalized == "Setup Guide"

    def test_nonstandard_markdown_link_to_unknown(self, index):
        from diagdoc.core.resolver import LinkStatus

        result = resolve("[x](../other/file.md)", index)
        assert result.status == LinkStatus.NON_STANDARD
        assert result.normalized == "file.md"
        assert result.target_path is None

    def test_empty_target_is_broken(self, index):
        assert resolve("[[]]", index).is_broken

    def test_anchor_only_is_valid_self(self, index):
        from diagdoc.core.resolver import MatchStrategy

        result = resolve("[jump](#section)", index)
        assert result.is_valid
        assert result.target_path == ROOT / "1 Intro.md"
        assert result.strategy == MatchStrategy.SELF

    def test_unmatched_is_broken(self, index):
        result = resolve("[[nothing-here]]", index)
        assert result.is_broken
        assert result.target_path is None


class TestFallbackChain:
    """Each fallback step, in order."""

    def test_relative_path(self, index):
        from diagdoc.core.resolver import MatchStrategy

        result = resolve("[[0 Master.md]]", index)
        assert result.is_valid
        assert result.strategy == MatchStrategy.RELATIVE_PATH

    def test_relative_path_with_md(self, index):
        from diagdoc.core.resolver import MatchStrategy

        result = resolve("[[0 Master]]", index)
        assert result.strategy == MatchStrategy.RELATIVE_PATH_MD
        assert result.target_path == ROOT / "0 Master.md"

    def test_exact_stem_case_insensitive(self, index):
        from diagdoc.core.resolver import MatchStrategy

        result = resolve("[[0 master]]", index, source=ROOT / "sub" / "1.1 Details.md")
        assert result.strategy == MatchStrategy.EXACT_STEM
        assert result.target_path == ROOT / "0 Master.md"
        assert result.is_case_mismatch

    def test_exact_stem_same_case_is_not_mismatch(self, index):
        result = resolve("[[0 Master]]", index, source=ROOT / "sub" / "1.1 Details.md")
        assert result.is_valid
        assert not result.is_case_mismatch

    def test_stem_suffix(self, index):
        from diagdoc.core.resolver import MatchStrategy

        result = resolve("[[Guide]]", index)
        assert result.strategy == MatchStrategy.STEM_SUFFIX
        assert result.target_path == ROOT / "guides" / "Setup Guide.md"

    def test_identifier_prefix(self, index):
        from diagdoc.core.resolver import MatchStrategy

        result = resolve("[[2.8.1]]", index)
        assert result.strategy == MatchStrategy.ID_PREFIX
        assert result.target_path == ROOT / "2.8.1 Full Title.md"

    def test_path_substring(self, index):
        from diagdoc.core.resolver import MatchStrategy

        result = resolve("[[guides]]", index)
        assert result.strategy == MatchStrategy.PATH_SUBSTRING

    def test_substring_ignores_directories_above_root(self, index):
        assert resolve("[[docs]]", index).is_broken

    def test_missing_sibling_identifier_is_broken(self, index):
        assert resolve("See [[1.2]]", index, source=ROOT / "sub" / "1.1 Details.md").is_broken


class TestDocumentIndex:
    """Tests for DocumentIndex lookups."""

    def test_contains_normalizes_paths(self, index):
        assert ROOT / "sub" / ".." / "1 Intro.md" in index
        assert len(index) == len(PATHS)

    def test_filesystem_lookup(self, tmp_path):
        from diagdoc.core.references import extract_references
        from diagdoc.core.resolver import DocumentIndex, MatchStrategy, resolve_reference

        (tmp_path / "diagram.png").write_bytes(b"\x89PNG")
        source = tmp_path / "a.md"
        ref = extract_references("![[diagram.png]]")[0]

        strict = resolve_reference(ref, source, DocumentIndex([source], root=tmp_path))
        assert strict.is_broken

        lenient = DocumentIndex([source], root=tmp_path, check_filesystem=True)
        result = resolve_reference(ref, source, lenient)
        assert result.is_valid
        assert result.strategy == MatchStrategy.RELATIVE_PATH

    @pytest.mark.parametrize("text", ["[[" + "a" * 300 + "]]", "![x](" + "b" * 300 + ".png)"])
    def test_overlong_target_is_broken(self, tmp_path, text):
        from diagdoc.core.references import extract_references
        from diagdoc.core.resolver import DocumentIndex, resolve_reference

        source = tmp_path / "a.md"
        ref = extract_references(text)[0]
        index = DocumentIndex([source], root=tmp_path, check_filesystem=True)
        assert resolve_reference(ref, source, index).is_broken

    def test_resolver_resolve_all(self, index):
        from diagdoc.core.references import extract_references
        from diagdoc.core.resolver import LinkStatus, ReferenceResolver

        refs = extract_references("[[0 Master]] [[missing]] [w](https://x.org)")
        results = ReferenceResolver(index).resolve_all(refs, ROOT / "1 Intro.md")
        assert [r.status for r in results] == [LinkStatus.VALID, LinkStatus.BROKEN, LinkStatus.EXTERNAL]
        assert results[1].location() == f"{ROOT / '1 Intro.md'}:1"
