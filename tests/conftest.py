"""Pytest fixtures shared by the diagdoc test suite."""

import os
from pathlib import Path

import pytest


def write_doc(root: Path, name: str, text: str) -> Path:
    """Write one markdown file below ``root`` (creating parent directories)."""
    path = root / name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


@pytest.fixture
def docs_factory(tmp_path):
    """Return a function that writes {name: text} files into a fresh docs dir."""

    def make(files: dict, dirname: str = "docs") -> Path:
        root = tmp_path / dirname
        root.mkdir(parents=True, exist_ok=True)
        for name, text in files.items():
            write_doc(root, name, text)
        return root

    return make


@pytest.fixture
def small_corpus(docs_factory):
    """Master 0, module 1 below it, and 1.1 linking to a missing 1.2."""
    return docs_factory(
        {
            "0 Master.md": "---\nid: 0\ntitle: Master\n---\n# Master\n\nStart at [[1 Intro]].\n",
            "1 Intro.md": "---\nid: 1\nparent: 0\ntitle: Intro\n---\n# Intro\n",
            "1.1 Details.md": (
                "---\nid: 1.1\nparent: 1\ntitle: Details\n---\n# Details\n\nSee [[1.2]].\n"
            ),
        }
    )


@pytest.fixture
def isolated_cwd(tmp_path, monkeypatch):
    """Run in an empty working directory with no DIAGDOC_* overrides."""
    for name in list(os.environ):
        if name.startswith("DIAGDOC_"):
            monkeypatch.delenv(name, raising=False)
    work = tmp_path / "work"
    work.mkdir()
    monkeypatch.chdir(work)
    return work
