"""
Tests for diagdoc.graph.fix_router module.
"""

from diagdoc.graph.fix_router import (
    DEFAULT_ROUTES,
    AnomalyType,
    FixRouter,
    FixSeverity,
    collect_anomalies,
    format_fix_summary,
)


class TestFixRouter:
    """Tests for FixRouter."""

    def test_every_anomaly_has_a_route(self):
        router = FixRouter()
        for kind in AnomalyType:
            assert router.suggest(kind) is not None, kind

    def test_generate_command_prefixes_docs_dir(self):
        router = FixRouter()
        command = router.generate_command(AnomalyType.BROKEN_LINK, "docs")
        assert command == "diagdoc --docs-dir docs links --broken-only"

    def test_manual_commands_unchanged(self):
        router = FixRouter()
        command = router.generate_command(AnomalyType.INVALID_IDENTIFIER, "docs")
        assert command == DEFAULT_ROUTES[AnomalyType.INVALID_IDENTIFIER].command
        assert command.startswith("# MANUAL:")

    def test_custom_routes(self):
        router = FixRouter(routes={})
        assert router.suggest(AnomalyType.BROKEN_LINK) is None
        assert router.generate_command(AnomalyType.BROKEN_LINK, "docs") is None

    def test_severity_order(self):
        ranks = [s.rank for s in FixSeverity]
        assert ranks == sorted(ranks)


class TestCollectAnomalies:
    """collect_anomalies over a scanned corpus."""

    def test_small_corpus(self, small_corpus):
        from diagdoc.graph.factory import run_diagnostics

        anomalies = collect_anomalies(run_diagnostics(root=small_corpus, config={}))
        assert list(anomalies) == [AnomalyType.BROKEN_LINK]
        assert anomalies[AnomalyType.BROKEN_LINK][0].endswith("→ 1.2")

    def test_structural_problems(self, docs_factory):
        from diagdoc.graph.factory import run_diagnostics

        root = docs_factory(
            {
                "1 A.md": "[[2 B]] [[1 A]]\n",
                "2 B.md": "---\nparent: 9\n---\n[[1 A]]\n",
                "notes.md": "plain text\n",
                "broken.md": "---\nid: [1\n---\n",
            }
        )
        anomalies = collect_anomalies(run_diagnostics(root=root, config={}))

        assert anomalies[AnomalyType.LINK_CYCLE] == ["1 → 2 → 1"]
        assert len(anomalies[AnomalyType.CIRCULAR_LINK]) == 1
        assert anomalies[AnomalyType.ORPHAN_DOCUMENT] == ["1"]
        assert anomalies[AnomalyType.MISSING_PARENT] == ["9"]
        assert len(anomalies[AnomalyType.INVALID_FRONTMATTER]) == 1
        assert [p.endswith("notes.md") for p in anomalies[AnomalyType.MISSING_FRONTMATTER]] == [True]


class TestFormatFixSummary:
    """Tests for format_fix_summary()."""

    def test_empty(self):
        assert format_fix_summary({}) == ""

    def test_most_severe_first(self):
        text = format_fix_summary(
            {
                AnomalyType.CIRCULAR_LINK: ["a.md:1"],
                AnomalyType.BROKEN_LINK: ["b.md:2 → x", "b.md:3 → y"],
            },
            target="docs",
        )
        lines = text.splitlines()
        assert lines[0] == "Detected anomalies"
        assert "2 x broken-link" in lines[2]
        assert lines[3].strip() == "fix: diagdoc --docs-dir docs links --broken-only"
        assert "1 x circular-link" in lines[4]
