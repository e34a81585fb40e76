"""
Skill manifest (.skills.json) parsing.

The manifest enumerates skills by category and carries install policy:

    {
      "skills": {
        "required":    {"local:./skills/api": {"description": "...", "version": "*"}},
        "recommended": {"github:org/repo/skill": "^1.2.0"},
        "internal":    ["local:./skills/tooling"],
        "registry":    {},
        "blocked":     ["github:org/repo/legacy"]
      },
      "policy": {
        "auto_install_required": true,
        "enforce_blocked": true,
        "allow_project_override": false
      }
    }

The bare form without the "skills" wrapper is accepted too. An identifier
may be listed in at most one of required/recommended/internal/registry;
listing it in blocked as well marks it blocked.
"""

from __future__ import annotations

import dataclasses as _dataclasses
import enum as _enum
import json as _json
import logging as _logging
import pathlib as _pathlib
import typing as _typing

import pydantic as _pydantic

_logger = _logging.getLogger(__name__)


class ManifestParseError(ValueError):
    """Raised when a skill manifest cannot be read or is malformed."""

    def __init__(self, source: str, message: str) -> None:
        self.source = source
        super().__init__(f"Invalid skill manifest {source}: {message}")


class SkillCategory(str, _enum.Enum):
    """Manifest categories."""

    REQUIRED = "required"
    RECOMMENDED = "recommended"
    INTERNAL = "internal"
    BLOCKED = "blocked"
    REGISTRY = "registry"


LISTED_CATEGORIES = (
    SkillCategory.REQUIRED,
    SkillCategory.RECOMMENDED,
    SkillCategory.INTERNAL,
    SkillCategory.REGISTRY,
)
"""Categories that hold skill specs, in precedence order for display."""


@_dataclasses.dataclass(frozen=True)
class SkillManifestEntry:
    """One skill from a manifest, flattened for matching."""

    identifier: str
    """Unique identifier, e.g. "local:./skills/x" or "github:org/repo/skill"."""

    category: SkillCategory
    """Effective category (blocked overrides the listed one)."""

    description: str = ""
    """Free text used for description similarity."""

    version: str = "*"
    """Version specifier or wildcard."""

    content: str = ""
    """Skill body used for content similarity (empty if not loaded)."""

    @property
    def is_blocked(self) -> bool:
        """Whether this entry is blocked."""
        return self.category is SkillCategory.BLOCKED

    def to_dict(self) -> dict[str, _typing.Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "identifier": self.identifier,
            "category": self.category.value,
            "description": self.description,
            "version": self.version,
            "has_content": bool(self.content),
        }


class SkillSpec(_pydantic.BaseModel):
    """Per-skill settings inside a category."""

    model_config = _pydantic.ConfigDict(extra="allow")

    description: str = _pydantic.Field(
        default="",
        description="What the skill does and when to use it",
    )

    version: str = _pydantic.Field(
        default="*",
        min_length=1,
        description="Semantic version specifier or '*'",
    )


def _normalize_category(value: _typing.Any) -> _typing.Any:
    """Accept list, version-string and null shorthands for a category."""
    if value is None:
        return {}
    if isinstance(value, list):
        return {identifier: {} for identifier in value}
    if isinstance(value, dict):
        normalized: dict[_typing.Any, _typing.Any] = {}
        for identifier, spec in value.items():
            if spec is None:
                normalized[identifier] = {}
            elif isinstance(spec, str):
                normalized[identifier] = {"version": spec}
            else:
                normalized[identifier] = spec
        return normalized
    return value


class SkillsSection(_pydantic.BaseModel):
    """The "skills" object of a manifest."""

    model_config = _pydantic.ConfigDict(extra="forbid")

    required: dict[str, SkillSpec] = _pydantic.Field(default_factory=dict)
    recommended: dict[str, SkillSpec] = _pydantic.Field(default_factory=dict)
    internal: dict[str, SkillSpec] = _pydantic.Field(default_factory=dict)
    registry: dict[str, SkillSpec] = _pydantic.Field(default_factory=dict)
    blocked: list[str] = _pydantic.Field(default_factory=list)

    @_pydantic.field_validator(
        "required", "recommended", "internal", "registry", mode="before"
    )
    @classmethod
    def _normalize_listed(cls, value: _typing.Any) -> _typing.Any:
        return _normalize_category(value)

    @_pydantic.field_validator("blocked", mode="before")
    @classmethod
    def _normalize_blocked(cls, value: _typing.Any) -> _typing.Any:
        if value is None:
            return []
        if isinstance(value, dict):
            return list(value.keys())
        return value

    @_pydantic.model_validator(mode="after")
    def _check_unique_identifiers(self) -> SkillsSection:
        seen: dict[str, str] = {}
        for category in LISTED_CATEGORIES:
            for identifier in getattr(self, category.value):
                if identifier in seen:
                    raise ValueError(
                        f"skill '{identifier}' is listed in both "
                        f"'{seen[identifier]}' and '{category.value}'"
                    )
                seen[identifier] = category.value
        return self


class SkillPolicy(_pydantic.BaseModel):
    """The "policy" object of a manifest."""

    model_config = _pydantic.ConfigDict(extra="allow")

    auto_install_required: bool = True
    """Install required skills without asking."""

    enforce_blocked: bool = True
    """Refuse to install or suggest blocked skills."""

    allow_project_override: bool = False
    """Let a project manifest override the user manifest."""


class SkillsManifest(_pydantic.BaseModel):
    """A parsed skill manifest."""

    model_config = _pydantic.ConfigDict(extra="allow")

    skills: SkillsSection = _pydantic.Field(default_factory=SkillsSection)
    policy: SkillPolicy = _pydantic.Field(default_factory=SkillPolicy)

    @_pydantic.model_validator(mode="before")
    @classmethod
    def _wrap_bare_form(cls, data: _typing.Any) -> _typing.Any:
        if not isinstance(data, dict) or "skills" in data:
            return data
        section_keys = {category.value for category in SkillCategory}
        skills = {k: v for k, v in data.items() if k in section_keys}
        rest = {k: v for k, v in data.items() if k not in section_keys}
        return {**rest, "skills": skills}

    @property
    def blocked_identifiers(self) -> frozenset[str]:
        """Identifiers listed as blocked."""
        return frozenset(self.skills.blocked)

    def entries(self) -> list[SkillManifestEntry]:
        """
        Flatten the manifest into entries.

        Blocked identifiers get the blocked category whatever their listed
        category. Identifiers listed only under blocked are included as
        blocked entries without a description.

        Returns:
            Entries ordered by category, then manifest order.
        """
        blocked = self.blocked_identifiers
        result: list[SkillManifestEntry] = []
        listed: set[str] = set()

        for category in LISTED_CATEGORIES:
            specs: dict[str, SkillSpec] = getattr(self.skills, category.value)
            for identifier, spec in specs.items():
                listed.add(identifier)
                result.append(
                    SkillManifestEntry(
                        identifier=identifier,
                        category=SkillCategory.BLOCKED if identifier in blocked else category,
                        description=spec.description,
                        version=spec.version,
                    )
                )

        for identifier in self.skills.blocked:
            if identifier not in listed:
                listed.add(identifier)
                result.append(
                    SkillManifestEntry(identifier=identifier, category=SkillCategory.BLOCKED)
                )

        return result

    def to_dict(self) -> dict[str, _typing.Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "entries": [entry.to_dict() for entry in self.entries()],
            "blocked": sorted(self.blocked_identifiers),
            "policy": self.policy.model_dump(),
        }


def parse_manifest(text: str, *, source: str = "<string>") -> SkillsManifest:
    """
    Parse manifest JSON text.

    Args:
        text: JSON content.
        source: Name used in error messages.

    Returns:
        Parsed SkillsManifest.

    Raises:
        ManifestParseError: If the JSON or its structure is invalid.
    """
    try:
        data = _json.loads(text)
    except _json.JSONDecodeError as e:
        raise ManifestParseError(source, f"invalid JSON: {e}") from e

    if not isinstance(data, dict):
        raise ManifestParseError(
            source, f"top level must be an object, got {type(data).__name__}"
        )

    try:
        return SkillsManifest.model_validate(data)
    except _pydantic.ValidationError as e:
        raise ManifestParseError(source, str(e)) from e


def load_manifest(path: _pathlib.Path) -> SkillsManifest:
    """
    Load a manifest file.

    Args:
        path: Path to .skills.json.

    Returns:
        Parsed SkillsManifest.

    Raises:
        ManifestParseError: If the file cannot be read or is invalid.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ManifestParseError(str(path), f"cannot read file: {e}") from e

    manifest = parse_manifest(text, source=str(path))
    _logger.debug(
        "Loaded manifest %s: %d entries, %d blocked",
        path,
        len(manifest.entries()),
        len(manifest.blocked_identifiers),
    )
    return manifest
