"""
specref settings, assembled by pydantic-settings.

Sources, strongest first: keyword arguments, SPECREF_* environment
variables, the .env file named by SPECREF_ENV_FILE, then the merged
YAML files (.specref/config.yaml over ~/.config/specref/config.yaml).
Nested fields use "__" in variable names, so
SPECREF_MATCHING__DEFAULT_TOP=10 sets matching.default_top.
"""

import os as _os
import pathlib as _pathlib
import typing as _typing

import pydantic as _pydantic
import pydantic_settings as _pydantic_settings

import specref.config.sources as sources
import specref.config.types as types
import specref.constants as constants

# A directory holding any of these is treated as the project root
PROJECT_MARKERS = [".specref", constants.MANIFEST_FILE_NAME, ".git", "pyproject.toml"]


def _get_env_file() -> str | None:
    """Path from SPECREF_ENV_FILE when that file exists; no implicit .env."""
    env_file = _os.environ.get("SPECREF_ENV_FILE")
    if env_file and _pathlib.Path(env_file).is_file():
        return env_file
    return None


def find_project_root(start_path: _pathlib.Path | None = None) -> _pathlib.Path:
    """
    Nearest directory at or above start_path containing a PROJECT_MARKERS entry.

    Falls back to start_path (default: the working directory) when no
    ancestor has a marker.
    """
    start = (start_path or _pathlib.Path.cwd()).resolve()
    for candidate in (start, *start.parents):
        if any((candidate / marker).exists() for marker in PROJECT_MARKERS):
            return candidate
    return start


class Settings(_pydantic_settings.BaseSettings):
    """
    Effective specref configuration.

    Built once per CLI invocation and passed to the reference checker and
    the skill matcher. Keys that match no field are kept so that
    `specref config show` can point out typos.
    """

    model_config = _pydantic_settings.SettingsConfigDict(
        env_prefix="SPECREF_",
        env_file=_get_env_file(),
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="allow",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[_pydantic_settings.BaseSettings],
        init_settings: _pydantic_settings.PydanticBaseSettingsSource,
        env_settings: _pydantic_settings.PydanticBaseSettingsSource,
        dotenv_settings: _pydantic_settings.PydanticBaseSettingsSource,
        file_secret_settings: _pydantic_settings.PydanticBaseSettingsSource,
    ) -> tuple[_pydantic_settings.PydanticBaseSettingsSource, ...]:
        # YAML files rank below every pydantic-settings source except secrets
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            sources.LayeredYamlSettingsSource(settings_cls, find_project_root()),
            file_secret_settings,
        )

    @classmethod
    def construct_without_dotenv(cls, **kwargs: _typing.Any) -> "Settings":
        """Build Settings while ignoring any .env file (used by tests)."""
        return cls(_env_file=None, **kwargs)  # type: ignore[call-arg]

    references: types.ReferencesConfig = _pydantic.Field(
        default_factory=types.ReferencesConfig
    )
    """Reference resolution settings (roots, discovery, fenced code)."""

    matching: types.MatchingConfig = _pydantic.Field(
        default_factory=types.MatchingConfig
    )
    """Skill matching settings (weights, default top, term length)."""

    logging: types.LoggingConfig = _pydantic.Field(default_factory=types.LoggingConfig)
    """Logging settings."""

    @property
    def log_level(self) -> str:
        """Log level name suitable for logging.basicConfig."""
        return self.logging.level.upper()

    def collect_unknown_keys(self) -> dict[str, _typing.Any]:
        """
        Collect unrecognized keys from every config section.

        Returns:
            Flat dict of dotted path → value.
        """
        result: dict[str, _typing.Any] = {}
        if self.model_extra:
            result.update(self.model_extra)
        for name in ("references", "matching", "logging"):
            section: types.ConfigBase = getattr(self, name)
            result.update(section.collect_all_extra_fields(name))
        return result

    def to_dict(self) -> dict[str, _typing.Any]:
        """Convert known settings to a JSON-serializable dictionary."""
        return self.model_dump(mode="json", include={"references", "matching", "logging"})
