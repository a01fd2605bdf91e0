"""
End-to-end tests for diagdoc.graph.factory (scan, build, analyze).
"""

import pytest

from diagdoc.core.identifier import DocumentId


def did(value):
    return DocumentId.parse(value)


class TestSmallCorpus:
    """Master 0 -> 1 -> 1.1, with 1.1 linking to a missing 1.2."""

    @pytest.fixture
    def report(self, small_corpus):
        from diagdoc.graph.factory import run_diagnostics

        return run_diagnostics(root=small_corpus, config={})

    def test_hierarchy(self, report):
        assert report.roots == [did("0")]
        assert report.leaves == [did("1.1")]
        assert report.orphans == []
        assert report.cycles == []
        assert report.graph.children_of(did("1")) == [did("1.1")]

    def test_broken_link_found(self, report):
        broken = report.broken_references()
        assert len(broken) == 1
        assert broken[0].reference.target == "1.2"
        assert broken[0].source_path.name == "1.1 Details.md"
        assert report.tally.broken == 1
        assert report.tally.valid == 1
        assert report.has_problems

    def test_line_numbers_count_frontmatter(self, report):
        broken = report.broken_references()[0]
        assert broken.reference.line == 8

    def test_declared_parents_are_not_link_references(self, report):
        assert len(report.hierarchy_references) == 2
        assert all(r.is_valid for r in report.hierarchy_references)
        assert report.tally.total == 2

    def test_link_edges(self, report):
        assert report.graph.links_of(did("0")) == [did("1")]
        assert report.graph.edge_count() == 1

    def test_references_to(self, report):
        refs = report.references_to(did("1"))
        assert [r.source_path.name for r in refs] == ["0 Master.md"]
        assert report.references_to(did("42")) == []


def test_link_cycle(docs_factory):
    from diagdoc.graph.factory import run_diagnostics

    root = docs_factory({"1 A.md": "[[2 B]]\n", "2 B.md": "[[1 A]]\n"})
    report = run_diagnostics(root=root, config={})
    assert [str(c) for c in report.cycles] == ["1 → 2 → 1"]
    assert report.orphans == [did("1"), did("2")]


def test_invalid_identifier_keeps_references(docs_factory):
    from diagdoc.graph.factory import run_diagnostics

    root = docs_factory({"1 A.md": "", "x.md": "---\nid: bad\n---\n[[1 A]]\n"})
    report = run_diagnostics(root=root, config={})
    assert report.graph.node_ids() == [did("1")]
    assert [r.is_valid for r in report.references] == [True]
    assert [w.kind for w in report.warnings] == ["invalid-id"]


def test_duplicate_identifier_first_path_wins(docs_factory):
    from diagdoc.graph.factory import run_diagnostics

    root = docs_factory({"1 B.md": "", "1 A.md": ""})
    report = run_diagnostics(root=root, config={})
    assert report.graph.find_by_id(did("1")).path.name == "1 A.md"
    assert [w.kind for w in report.warnings] == ["duplicate-id"]


def test_missing_parent_placeholder(docs_factory):
    from diagdoc.graph.factory import run_diagnostics

    root = docs_factory({"3.1 Sub.md": "---\nid: 3.1\nparent: 3\n---\n"})
    report = run_diagnostics(root=root, config={})
    assert report.summary.placeholders == [did("3")]
    assert report.graph.find_by_id(did("3")).placeholder
    assert [r.is_broken for r in report.hierarchy_references] == [True]


def test_infer_parents_setting(docs_factory):
    from diagdoc.graph.factory import run_diagnostics

    root = docs_factory({"2 Top.md": "", "2.1 Sub.md": ""})
    inferred = run_diagnostics(root=root, config={})
    assert inferred.graph.parent_of(did("2.1")) == did("2")
    assert inferred.hierarchy_references == []

    flat = run_diagnostics(root=root, config={"hierarchy": {"infer_parents": False}})
    assert flat.roots == [did("2"), did("2.1")]


def test_overlong_link_target_does_not_abort_scan(docs_factory):
    from diagdoc.graph.factory import run_diagnostics

    root = docs_factory({"1 A.md": "[[" + "a" * 300 + "]]\n", "2 B.md": "[[1 A]]\n"})
    report = run_diagnostics(root=root, config={})
    assert [r.status.value for r in report.references] == ["broken", "valid"]
    assert report.tally.broken == 1


def test_reference_positions_are_file_offsets(docs_factory):
    from diagdoc.graph.factory import run_diagnostics

    root = docs_factory({"1 A.md": "---\nid: 1\ntitle: A\n---\nSee [[2 B]] here.\n", "2 B.md": ""})
    report = run_diagnostics(root=root, config={})
    doc = report.documents[0]
    ref = report.references[0].reference
    assert ref.line == 5
    assert doc.text[ref.position:].startswith(ref.raw)


def test_master_with_broken_leaf_link(docs_factory):
    from diagdoc.graph.factory import run_diagnostics

    root = docs_factory(
        {
            "0 Master.md": "---\nid: 0\n---\n# Master\n",
            "1 Intro.md": "---\nid: 1\nparent: 0\n---\n",
            "1.1 Details.md": "---\nid: 1.1\nparent: 1\n---\nSee [[1.2]].\n",
        }
    )
    report = run_diagnostics(root=root, config={})
    assert report.roots == [did("0")]
    assert report.graph.leaves() == [did("1.1")]
    assert report.tally.broken == 1
    assert report.tally.valid == 0


def test_build_report_in_memory():
    from diagdoc.core.loader import load_documents
    from diagdoc.graph.factory import build_report

    scan = load_documents([("1 A.md", "[[2 B]] [[nowhere]]"), ("2 B.md", "")])
    report = build_report(scan.documents)
    assert report.root is None
    assert report.graph.links_of(did("1")) == [did("2")]
    assert report.tally.broken == 1


def test_missing_directory_raises(tmp_path):
    from diagdoc.core.models import DirectoryNotFoundError
    from diagdoc.graph.factory import run_diagnostics

    with pytest.raises(DirectoryNotFoundError):
        run_diagnostics(root=tmp_path / "missing", config={})


def test_docs_directory_from_config_file(tmp_path, isolated_cwd):
    from diagdoc.graph.factory import run_diagnostics

    (tmp_path / ".diagdoc.toml").write_text('[directories]\ndocs = "manual"\n', encoding="utf-8")
    (tmp_path / "manual").mkdir()
    (tmp_path / "manual" / "0 Master.md").write_text("# Master\n", encoding="utf-8")

    report = run_diagnostics(repo_root=tmp_path)
    assert report.root.name == "manual"
    assert report.graph.node_ids() == [did("0")]
