"""Tests for layered YAML config loading."""

import os as _os
import pathlib as _pathlib

import pytest as _pytest

import specref.config as config
import specref.config.sources as sources


class TestDeepMerge:
    """Tests for deep_merge()."""

    def test_nested_mappings_merge(self) -> None:
        """Nested keys from both sides survive."""
        merged = sources.deep_merge(
            {"matching": {"default_top": 3, "min_term_length": 2}},
            {"matching": {"default_top": 7}},
        )
        assert merged == {"matching": {"default_top": 7, "min_term_length": 2}}

    def test_non_mapping_replaces(self) -> None:
        """Lists and scalars from the override replace the base."""
        merged = sources.deep_merge(
            {"references": {"exclude_dirs": [".git", "node_modules"]}},
            {"references": {"exclude_dirs": ["build"]}},
        )
        assert merged["references"]["exclude_dirs"] == ["build"]

    def test_inputs_not_modified(self) -> None:
        """Neither argument is mutated."""
        base = {"a": {"b": 1}}
        override = {"a": {"c": 2}}
        sources.deep_merge(base, override)
        assert base == {"a": {"b": 1}}
        assert override == {"a": {"c": 2}}


class TestLayeredYamlSettingsSource:
    """Tests for LayeredYamlSettingsSource."""

    def test_layers_recorded(self, tmp_path: _pathlib.Path) -> None:
        """Loaded layers are reported lowest precedence first."""
        user_path = tmp_path / "user.yaml"
        user_path.write_text("logging:\n  level: info\n")
        project = tmp_path / "proj"
        (project / ".specref").mkdir(parents=True)
        (project / ".specref" / "config.yaml").write_text("logging:\n  level: debug\n")

        source = sources.LayeredYamlSettingsSource(
            config.Settings, project, user_config_path=user_path
        )
        assert [name for name, _ in source.get_loaded_layers()] == ["user", "project"]
        assert source() == {"logging": {"level": "debug"}}

    def test_missing_files_are_skipped(self, tmp_path: _pathlib.Path) -> None:
        """No files means an empty layer."""
        source = sources.LayeredYamlSettingsSource(
            config.Settings, tmp_path, user_config_path=tmp_path / "absent.yaml"
        )
        assert source() == {}
        assert source.get_loaded_layers() == []

    def test_empty_file_is_skipped(self, tmp_path: _pathlib.Path) -> None:
        """An empty YAML file contributes nothing."""
        user_path = tmp_path / "user.yaml"
        user_path.write_text("")
        source = sources.LayeredYamlSettingsSource(
            config.Settings, None, user_config_path=user_path
        )
        assert source() == {}

    def test_invalid_yaml_raises(self, tmp_path: _pathlib.Path) -> None:
        """Malformed YAML raises ConfigFileError naming the file."""
        user_path = tmp_path / "user.yaml"
        user_path.write_text("matching: [unclosed\n")
        with _pytest.raises(sources.ConfigFileError, match="invalid YAML") as exc_info:
            sources.LayeredYamlSettingsSource(
                config.Settings, None, user_config_path=user_path
            )
        assert exc_info.value.path == user_path

    def test_non_mapping_raises(self, tmp_path: _pathlib.Path) -> None:
        """A top-level list is rejected."""
        user_path = tmp_path / "user.yaml"
        user_path.write_text("- one\n- two\n")
        with _pytest.raises(sources.ConfigFileError, match="must be a YAML mapping"):
            sources.LayeredYamlSettingsSource(
                config.Settings, None, user_config_path=user_path
            )


class TestConfigPaths:
    """Tests for config path helpers."""

    def test_user_config_dir_from_env(self) -> None:
        """SPECREF_CONFIG_DIR overrides the user config directory."""
        assert sources.get_user_config_dir() == _pathlib.Path(_os.environ["SPECREF_CONFIG_DIR"])
        assert sources.get_user_config_path().name == "config.yaml"

    def test_user_config_dir_default(self, monkeypatch: _pytest.MonkeyPatch) -> None:
        """Without the override the XDG path is used."""
        monkeypatch.delenv("SPECREF_CONFIG_DIR")
        assert sources.get_user_config_dir() == _pathlib.Path.home() / ".config" / "specref"

    def test_project_config_path(self, tmp_path: _pathlib.Path) -> None:
        """Project config lives under .specref/."""
        assert sources.get_project_config_path(tmp_path) == tmp_path / ".specref" / "config.yaml"
