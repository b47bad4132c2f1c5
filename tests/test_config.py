"""Unit tests for site configuration."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from core.mappings import freeze_recursively, stringify_keys
from services.config import DEFAULT_CONFIG, SiteConfig, load_config, merge_config


class TestMergeConfig:
    """Tests for merge_config."""

    def test_defaults(self) -> None:
        config = merge_config(DEFAULT_CONFIG, None)

        assert config.output_dir == "output"
        assert config.data_source == "filesystem"
        assert config.router == "default"
        assert config.index_filenames == ["index.html"]

    def test_overrides_win(self) -> None:
        config = merge_config(DEFAULT_CONFIG, {"output_dir": "public", "router": "no_dirs"})

        assert config.output_dir == "public"
        assert config.router == "no_dirs"
        assert config.data_source == "filesystem"

    def test_inputs_untouched(self) -> None:
        overrides = {"output_dir": "public"}
        merge_config(DEFAULT_CONFIG, overrides)

        assert overrides == {"output_dir": "public"}
        assert DEFAULT_CONFIG.output_dir == "output"

    def test_extra_keys_kept(self) -> None:
        config = merge_config(DEFAULT_CONFIG, {"title": "My Site", 1: "one"})

        assert config.title == "My Site"
        assert config.model_dump()["1"] == "one"

    def test_invalid_value(self) -> None:
        with pytest.raises(ValidationError):
            merge_config(DEFAULT_CONFIG, {"index_filenames": "index.html"})

    def test_merges_over_custom_defaults(self) -> None:
        defaults = SiteConfig(output_dir="build")
        assert merge_config(defaults, {"router": "no_dirs"}).output_dir == "build"


class TestLoadConfig:
    """Tests for load_config."""

    def test_reads_yaml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        path = tmp_path / "config.yaml"
        path.write_text("output_dir: public\ntitle: Blog\n")

        config = load_config(str(path))

        assert config.output_dir == "public"
        assert config.title == "Blog"
        assert config.site_root == str(tmp_path)

    def test_relative_site_root_follows_config_file(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        project = tmp_path / "project"
        project.mkdir()
        path = project / "config.yaml"
        path.write_text("site_root: site\n")
        monkeypatch.chdir(tmp_path)

        config = load_config(str(path.relative_to(tmp_path)))

        assert Path(config.site_root).resolve() == (project / "site").resolve()

    def test_absolute_site_root_kept(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        elsewhere = tmp_path / "elsewhere"
        path = tmp_path / "config.yaml"
        path.write_text(f"site_root: {elsewhere}\n")

        assert load_config(str(path)).site_root == str(elsewhere)

    def test_environment_overrides(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("SITE_ROUTER", "no_dirs")
        path = tmp_path / "config.yaml"
        path.write_text("router: default\n")

        assert load_config(str(path)).router == "no_dirs"

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_config(str(tmp_path / "missing.yaml"))

    def test_not_a_mapping(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.chdir(tmp_path)
        path = tmp_path / "config.yaml"
        path.write_text("- a\n- b\n")

        with pytest.raises(ValueError):
            load_config(str(path))


class TestMappings:
    """Tests for the mapping helpers."""

    def test_stringify_keys_recurses(self) -> None:
        assert stringify_keys({1: {2: [{3: "x"}]}}) == {"1": {"2": [{"3": "x"}]}}

    def test_freeze_recursively(self) -> None:
        frozen = freeze_recursively({"a": {"b": [1, 2]}, "c": {3}})

        assert frozen["a"]["b"] == (1, 2)
        assert frozen["c"] == frozenset({3})
        with pytest.raises(TypeError):
            frozen["a"]["x"] = 1
