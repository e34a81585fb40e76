"""YAML configuration files for specref.

Two optional files feed Settings, lowest precedence first:

- user: ~/.config/specref/config.yaml (directory overridable with SPECREF_CONFIG_DIR)
- project: <project root>/.specref/config.yaml

Their contents are deep-merged before environment variables and
constructor arguments are applied on top by pydantic-settings.
"""

import copy as _copy
import os as _os
import pathlib as _pathlib
import typing as _typing

import pydantic.fields as _pydantic_fields
import pydantic_settings as _pydantic_settings
import yaml as _yaml

ENV_CONFIG_DIR = "SPECREF_CONFIG_DIR"

CONFIG_FILE_NAME = "config.yaml"
PROJECT_CONFIG_DIR = ".specref"


class ConfigFileError(Exception):
    """A config file exists but cannot be used."""

    def __init__(self, path: _pathlib.Path, message: str) -> None:
        self.path = path
        super().__init__(f"Error in config file {path}: {message}")


def get_user_config_dir() -> _pathlib.Path:
    """SPECREF_CONFIG_DIR if set, else ~/.config/specref."""
    override = _os.environ.get(ENV_CONFIG_DIR)
    if override:
        return _pathlib.Path(override)
    return _pathlib.Path.home() / ".config" / "specref"


def get_user_config_path() -> _pathlib.Path:
    return get_user_config_dir() / CONFIG_FILE_NAME


def get_project_config_path(project_root: _pathlib.Path) -> _pathlib.Path:
    return project_root / PROJECT_CONFIG_DIR / CONFIG_FILE_NAME


def deep_merge(
    base: _typing.Mapping[str, _typing.Any],
    override: _typing.Mapping[str, _typing.Any],
) -> dict[str, _typing.Any]:
    """
    Merge override into a copy of base.

    Mappings present on both sides are merged key by key; for anything
    else (scalars, lists) the override value wins outright. Neither
    argument is modified.
    """
    merged = _copy.deepcopy(dict(base))
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, _typing.Mapping):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = _copy.deepcopy(value)
    return merged


def read_yaml_mapping(path: _pathlib.Path) -> dict[str, _typing.Any]:
    """
    Read a YAML config file that must hold a mapping.

    An empty file reads as {}.

    Raises:
        ConfigFileError: If the file is unreadable, not valid YAML, or
            its top level is not a mapping.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigFileError(path, f"cannot read file: {e}") from e

    try:
        data = _yaml.safe_load(text)
    except _yaml.YAMLError as e:
        raise ConfigFileError(path, f"invalid YAML: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigFileError(
            path, f"config must be a YAML mapping (dict), got {type(data).__name__}"
        )
    return data


class LayeredYamlSettingsSource(_pydantic_settings.PydanticBaseSettingsSource):
    """
    pydantic-settings source merging the user and project YAML files.

    Missing files are skipped. Malformed files raise ConfigFileError
    when the source is constructed, i.e. when Settings is built.
    """

    def __init__(
        self,
        settings_cls: type[_pydantic_settings.BaseSettings],
        project_root: _pathlib.Path | None = None,
        *,
        user_config_path: _pathlib.Path | None = None,
    ) -> None:
        super().__init__(settings_cls)
        candidates = [("user", user_config_path or get_user_config_path())]
        if project_root is not None:
            candidates.append(("project", get_project_config_path(project_root)))

        self._layers: list[tuple[str, _pathlib.Path]] = []
        self._data: dict[str, _typing.Any] = {}
        for name, path in candidates:
            if not path.is_file():
                continue
            layer = read_yaml_mapping(path)
            if layer:
                self._data = deep_merge(self._data, layer)
                self._layers.append((name, path))

    def get_loaded_layers(self) -> list[tuple[str, _pathlib.Path]]:
        """(name, path) of each non-empty file that was merged, lowest first."""
        return list(self._layers)

    def get_field_value(
        self,
        field: _pydantic_fields.FieldInfo,  # noqa: ARG002 - required by pydantic-settings interface
        field_name: str,
    ) -> tuple[_typing.Any, str, bool]:
        value = self._data.get(field_name)
        return value, field_name, isinstance(value, (dict, list))

    def __call__(self) -> dict[str, _typing.Any]:
        # Unknown keys pass through so Settings can report them
        return _copy.deepcopy(self._data)
