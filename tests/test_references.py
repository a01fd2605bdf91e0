"""
Tests for diagdoc.core.references module.
"""


class TestExtractReferences:
    """Tests for extract_references()."""

    def test_wiki_link_with_alias(self):
        from diagdoc.core.references import ReferenceKind, extract_references

        refs = extract_references("See [[2.1 Setup|the setup page]].")
        assert len(refs) == 1
        assert refs[0].kind == ReferenceKind.WIKI_LINK
        assert refs[0].target == "2.1 Setup"
        assert refs[0].alias == "the setup page"
        assert refs[0].raw == "[[2.1 Setup|the setup page]]"

    def test_escaped_pipe_is_not_an_alias_separator(self):
        from diagdoc.core.references import extract_references

        refs = extract_references(r"| [[Guide\|guide]] |")
        assert refs[0].alias is None
        assert refs[0].bare_name == "Guide"

    def test_embeds_are_not_counted_twice(self):
        from diagdoc.core.references import ReferenceKind, extract_references

        refs = extract_references("![[diagram.png]] and ![alt text](img/photo.jpg)")
        assert [r.kind for r in refs] == [ReferenceKind.EMBED, ReferenceKind.EMBED]
        assert refs[0].target == "diagram.png"
        assert refs[1].target == "img/photo.jpg"
        assert refs[1].alias == "alt text"

    def test_external_links(self):
        from diagdoc.core.references import ReferenceKind, extract_references

        text = "[site](https://example.org) [old](http://example.org) [mail](mailto:a@b.c) [doc](guide.md)"
        kinds = [r.kind for r in extract_references(text)]
        assert kinds == [
            ReferenceKind.EXTERNAL,
            ReferenceKind.EXTERNAL,
            ReferenceKind.EXTERNAL,
            ReferenceKind.MARKDOWN_LINK,
        ]

    def test_sorted_by_position(self):
        from diagdoc.core.references import ReferenceKind, extract_references

        refs = extract_references("[a](a.md) ![[b.png]] [[c]]")
        assert [r.kind for r in refs] == [
            ReferenceKind.MARKDOWN_LINK,
            ReferenceKind.EMBED,
            ReferenceKind.WIKI_LINK,
        ]
        positions = [r.position for r in refs]
        assert positions == sorted(positions)

    def test_line_numbers_are_one_based(self):
        from diagdoc.core.references import extract_references

        refs = extract_references("first\n\n[[third]]\n")
        assert refs[0].line == 3

    def test_code_blocks_skipped_by_default(self):
        from diagdoc.core.references import extract_references

        text = "```\n[[hidden]]\n```\n~~~md\n[x](also-hidden.md)\n~~~\n[[shown]]\n"
        assert [r.target for r in extract_references(text)] == ["shown"]

    def test_code_blocks_included_when_requested(self):
        from diagdoc.core.references import extract_references

        text = "```\n[[hidden]]\n```\n[[shown]]\n"
        targets = [r.target for r in extract_references(text, skip_code_blocks=False)]
        assert targets == ["hidden", "shown"]

    def test_unterminated_fence_hides_rest(self):
        from diagdoc.core.references import extract_references

        refs = extract_references("[[before]]\n```\n[[inside]]\n")
        assert [r.target for r in refs] == ["before"]

    def test_empty_target_is_a_reference(self):
        from diagdoc.core.references import extract_references

        refs = extract_references("[[]]")
        assert len(refs) == 1
        assert refs[0].target == ""

    def test_unbalanced_brackets_do_not_match(self):
        from diagdoc.core.references import extract_references

        assert extract_references("[[oops and [broken](") == []

    def test_markdown_title_and_angle_brackets(self):
        from diagdoc.core.references import extract_references

        refs = extract_references('[a](file.md "Title") [b](<two words.md>)')
        assert [r.target for r in refs] == ["file.md", "two words.md"]

    def test_source_id_recorded(self):
        from diagdoc.core.identifier import DocumentId
        from diagdoc.core.references import extract_references

        source = DocumentId.parse("1.1")
        assert extract_references("[[x]]", source_id=source)[0].source_id == source


class TestBareName:
    """Tests for bare_name() and the Reference helpers."""

    def test_strips_path_alias_and_anchor(self):
        from diagdoc.core.references import bare_name

        assert bare_name("Docs/2.8.1 Policies|see here") == "2.8.1 Policies"
        assert bare_name("guide#install") == "guide"
        assert bare_name("dir\\file") == "file"
        assert bare_name("#only-anchor") == ""

    def test_has_path(self):
        from diagdoc.core.references import extract_references

        with_path, plain, alias_only = extract_references("[[a/b]] [[b]] [[b|x/y]]")
        assert with_path.has_path
        assert not plain.has_path
        assert not alias_only.has_path

    def test_anchor_only(self):
        from diagdoc.core.references import extract_references

        assert extract_references("[jump](#section)")[0].is_anchor_only

    def test_parent_reference(self):
        from diagdoc.core.references import ReferenceKind, parent_reference

        ref = parent_reference("1")
        assert ref.kind == ReferenceKind.HIERARCHY_PARENT
        assert ref.target == "1"
        assert ref.is_internal


class TestRewriting:
    """Tests for the link rewriting helpers."""

    def test_replace_link_target(self):
        from diagdoc.core.references import replace_link_target

        text = "See [[old|here]], [[old]] and [x](old.md); keep ![[old]] and [[older]]."
        result = replace_link_target(text, "old", "new")
        assert result == "See [[new|here]], [[new]] and [x](new.md); keep ![[old]] and [[older]]."
