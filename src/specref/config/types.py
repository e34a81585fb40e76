"""Configuration type definitions for specref settings.

This module defines the Pydantic models used to represent configuration
sections nested within the main Settings class:

- ReferencesConfig: per-kind root directories and document discovery
- MatchingConfig: score weights and term filtering for skill matching
- LoggingConfig: log level for the CLI

Design decision: All types use `extra="allow"` to preserve unknown fields.
This lets `config show` report typos and outdated keys instead of silently
dropping them. Use `get_extra_fields()` to inspect unknown fields.
"""

import math as _math
import typing as _typing

import pydantic as _pydantic

import specref.constants as constants

# =============================================================================
# Base class with introspection
# =============================================================================


class ConfigBase(_pydantic.BaseModel):
    """
    Base class for all config types.

    All config types use `extra="allow"` so unknown fields are preserved
    rather than silently dropped.
    """

    model_config = _pydantic.ConfigDict(extra="allow")

    def get_extra_fields(self) -> dict[str, _typing.Any]:
        """Return fields that were provided but not in the schema."""
        return dict(self.model_extra) if self.model_extra else {}

    def collect_all_extra_fields(
        self,
        prefix: str = "",
    ) -> dict[str, _typing.Any]:
        """
        Recursively collect extra fields from this config and nested configs.

        Returns a flat dict with dotted paths as keys, e.g.:
            {"matching.default_topp": 3}

        Args:
            prefix: Dotted path prefix (used in recursion).

        Returns:
            Flat dict of path → value for all unrecognized fields.
        """
        result: dict[str, _typing.Any] = {}

        for key, value in self.get_extra_fields().items():
            path = f"{prefix}.{key}" if prefix else key
            result[path] = value

        for field_name in self.__class__.model_fields:
            value = getattr(self, field_name, None)
            if isinstance(value, ConfigBase):
                child_prefix = f"{prefix}.{field_name}" if prefix else field_name
                result.update(value.collect_all_extra_fields(child_prefix))

        return result


# =============================================================================
# Reference Settings
# =============================================================================


ReferenceKindName = _typing.Literal["rule", "persona", "example"]


class ReferencesConfig(ConfigBase):
    """
    Directive reference resolution settings.

    YAML section: references.*
    """

    roots: dict[ReferenceKindName, str] = _pydantic.Field(
        default_factory=lambda: {
            "rule": constants.DEFAULT_RULES_DIR,
            "persona": constants.DEFAULT_PERSONAS_DIR,
            "example": constants.DEFAULT_EXAMPLES_DIR,
        }
    )
    """Directory (relative to the checked root) for each path-bearing kind."""

    document_glob: str = constants.DEFAULT_DOCUMENT_GLOB
    """Glob selecting the Markdown documents to scan."""

    exclude_dirs: list[str] = _pydantic.Field(
        default_factory=lambda: list(constants.DEFAULT_EXCLUDE_DIRS)
    )
    """Directory names skipped during discovery."""

    exclude_fenced_code: bool = True
    """Ignore tokens inside fenced code blocks."""

    @_pydantic.field_validator("roots", mode="after")
    @classmethod
    def _fill_missing_roots(cls, value: dict[str, str]) -> dict[str, str]:
        # A partial override (e.g. only `rule`) keeps the other defaults
        defaults = {
            "rule": constants.DEFAULT_RULES_DIR,
            "persona": constants.DEFAULT_PERSONAS_DIR,
            "example": constants.DEFAULT_EXAMPLES_DIR,
        }
        return {**defaults, **value}


# =============================================================================
# Matching Settings
# =============================================================================


class MatchingConfig(ConfigBase):
    """
    Skill relevance matching settings.

    YAML section: matching.*
    """

    description_weight: float = _pydantic.Field(
        default=constants.DEFAULT_DESCRIPTION_WEIGHT, ge=0.0, le=1.0
    )
    """Weight of description similarity."""

    content_weight: float = _pydantic.Field(
        default=constants.DEFAULT_CONTENT_WEIGHT, ge=0.0, le=1.0
    )
    """Weight of content similarity."""

    default_top: int = _pydantic.Field(default=constants.DEFAULT_TOP_N, ge=1)
    """Number of results when --top is not given."""

    min_term_length: int = _pydantic.Field(
        default=constants.DEFAULT_MIN_TERM_LENGTH, ge=1
    )
    """Shortest term considered when tokenizing."""

    load_local_content: bool = True
    """Read SKILL.md bodies of local: skills for content similarity."""

    @_pydantic.model_validator(mode="after")
    def _check_weights(self) -> "MatchingConfig":
        total = self.description_weight + self.content_weight
        if not _math.isclose(total, 1.0, abs_tol=1e-9):
            raise ValueError(
                f"description_weight + content_weight must equal 1.0, got {total}"
            )
        return self


# =============================================================================
# Logging Settings
# =============================================================================


class LoggingConfig(ConfigBase):
    """
    Logging settings.

    YAML section: logging.*
    """

    level: _typing.Literal["debug", "info", "warning", "error"] = "warning"
    """Log level used by the CLI."""
