"""
Tests for diagdoc.config module.
"""

from pathlib import Path

import pytest


class TestFindConfigFile:
    """Tests for find_config_file()."""

    def test_found_in_start_dir(self, tmp_path):
        from diagdoc.config import find_config_file

        (tmp_path / ".diagdoc.toml").write_text("", encoding="utf-8")
        assert find_config_file(tmp_path) == (tmp_path / ".diagdoc.toml").resolve()

    def test_found_in_parent(self, tmp_path):
        from diagdoc.config import find_config_file

        (tmp_path / ".diagdoc.toml").write_text("", encoding="utf-8")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        assert find_config_file(nested) == (tmp_path / ".diagdoc.toml").resolve()


class TestLoadConfig:
    """Tests for load_config() and merging."""

    def test_defaults_filled_in(self, tmp_path, isolated_cwd):
        from diagdoc.config import load_config

        path = tmp_path / ".diagdoc.toml"
        path.write_text('[links]\nskip_code_blocks = false\n', encoding="utf-8")
        config = load_config(path)
        assert config["links"]["skip_code_blocks"] is False
        assert config["links"]["include_external"] is False
        assert config["directories"]["docs"] == "docs"
        assert config["hierarchy"]["infer_parents"] is True

    def test_lists_replace_defaults(self, tmp_path, isolated_cwd):
        from diagdoc.config import load_config

        path = tmp_path / ".diagdoc.toml"
        path.write_text('[scan]\nskip_dirs = ["archive"]\n', encoding="utf-8")
        assert load_config(path)["scan"]["skip_dirs"] == ["archive"]

    def test_invalid_toml(self, tmp_path):
        from diagdoc.config import ConfigError, load_config

        path = tmp_path / ".diagdoc.toml"
        path.write_text("[links\n", encoding="utf-8")
        with pytest.raises(ConfigError):
            load_config(path)

    def test_merge_configs_is_deep_and_pure(self):
        from diagdoc.config import merge_configs

        base = {"a": {"x": 1, "y": 2}, "b": [1]}
        merged = merge_configs(base, {"a": {"y": 3}, "c": True})
        assert merged == {"a": {"x": 1, "y": 3}, "b": [1], "c": True}
        assert base == {"a": {"x": 1, "y": 2}, "b": [1]}


class TestEnvOverrides:
    """DIAGDOC_<SECTION>_<KEY> environment variables."""

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("true", True),
            ("FALSE", False),
            ('["a", "b"]', ["a", "b"]),
            ('{"k": 1}', {"k": 1}),
            ("[not json", "[not json"),
            ("docs/manual", "docs/manual"),
        ],
    )
    def test_try_parse_env_value(self, raw, expected):
        from diagdoc.config import _try_parse_env_value

        assert _try_parse_env_value(raw) == expected

    def test_section_and_key(self, monkeypatch, isolated_cwd):
        from diagdoc.config import _apply_env_overrides

        monkeypatch.setenv("DIAGDOC_SCAN_SKIP_DIRS", '["archive"]')
        monkeypatch.setenv("DIAGDOC_LINKS_INCLUDE_EXTERNAL", "true")
        config = _apply_env_overrides({"scan": {"skip_dirs": []}})
        assert config["scan"]["skip_dirs"] == ["archive"]
        assert config["links"]["include_external"] is True

    def test_env_wins_over_file(self, tmp_path, monkeypatch, isolated_cwd):
        from diagdoc.config import load_config

        path = tmp_path / ".diagdoc.toml"
        path.write_text('[directories]\ndocs = "from-file"\n', encoding="utf-8")
        monkeypatch.setenv("DIAGDOC_DIRECTORIES_DOCS", "from-env")
        assert load_config(path)["directories"]["docs"] == "from-env"


class TestGetConfig:
    """Tests for get_config() and get_docs_directory()."""

    def test_no_file_gives_defaults(self, isolated_cwd):
        from diagdoc.config import DEFAULT_CONFIG, get_config

        config = get_config(start_dir=isolated_cwd)
        assert config == DEFAULT_CONFIG
        assert "_config_dir" not in config

    def test_docs_relative_to_config_file(self, tmp_path, isolated_cwd):
        from diagdoc.config import get_config, get_docs_directory

        project = tmp_path / "project"
        (project / "sub").mkdir(parents=True)
        (project / ".diagdoc.toml").write_text('[directories]\ndocs = "manual"\n', encoding="utf-8")

        config = get_config(start_dir=project / "sub")
        assert get_docs_directory(config) == project.resolve() / "manual"

    def test_docs_relative_to_repo_root(self, tmp_path):
        from diagdoc.config import get_docs_directory

        config = {"directories": {"docs": "docs"}}
        assert get_docs_directory(config, repo_root=tmp_path) == tmp_path / "docs"

    def test_absolute_docs_path(self, tmp_path):
        from diagdoc.config import get_docs_directory

        config = {"directories": {"docs": str(tmp_path)}, "_config_dir": "/elsewhere"}
        assert get_docs_directory(config) == Path(tmp_path)
