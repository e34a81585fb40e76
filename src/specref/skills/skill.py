"""
SKILL.md documents of locally installed skills.

A skill directory holds a SKILL.md whose YAML frontmatter names and
describes the skill. The Markdown body is what the matcher compares a
query against as the skill's content.
"""

from __future__ import annotations

import dataclasses as _dataclasses
import pathlib as _pathlib
import re as _re

import pydantic as _pydantic
import yaml as _yaml

import specref.constants as constants

# Opening "---" line, frontmatter, closing "---" line, then the body
_FRONTMATTER_RE = _re.compile(r"\A---[ \t]*\r?\n(.*?)\r?\n---[ \t]*(?:\r?\n|\Z)(.*)\Z", _re.DOTALL)


class SkillFrontmatter(_pydantic.BaseModel):
    """
    Metadata block at the top of SKILL.md.

    Only name and description are required; other keys (license,
    allowed-tools, ...) are kept in model_extra.
    """

    model_config = _pydantic.ConfigDict(extra="allow")

    name: str = _pydantic.Field(
        ...,
        max_length=64,
        pattern=r"^[a-z0-9]+(?:-[a-z0-9]+)*$",
    )
    """Kebab-case skill name."""

    description: str = _pydantic.Field(..., min_length=1)
    """When the skill applies."""

    version: str | None = None


@_dataclasses.dataclass(frozen=True)
class SkillDocument:
    """A SKILL.md read from disk."""

    frontmatter: SkillFrontmatter
    body: str
    directory: _pathlib.Path

    @property
    def name(self) -> str:
        return self.frontmatter.name

    @property
    def description(self) -> str:
        return self.frontmatter.description


def split_frontmatter(text: str) -> tuple[SkillFrontmatter, str]:
    """
    Separate SKILL.md text into validated frontmatter and stripped body.

    Raises:
        ValueError: If there is no frontmatter block, it is not valid
            YAML, or it lacks required fields.
    """
    found = _FRONTMATTER_RE.match(text)
    if found is None:
        raise ValueError("SKILL.md must have YAML frontmatter (---)")
    raw_meta, body = found.groups()

    try:
        meta = _yaml.safe_load(raw_meta)
    except _yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in frontmatter: {e}") from e

    try:
        frontmatter = SkillFrontmatter.model_validate(meta if meta is not None else {})
    except _pydantic.ValidationError as e:
        raise ValueError(f"Invalid skill frontmatter: {e}") from e

    return frontmatter, body.strip()


def read_skill_document(skill_dir: _pathlib.Path) -> SkillDocument:
    """
    Read and parse <skill_dir>/SKILL.md.

    Args:
        skill_dir: Skill directory.

    Raises:
        FileNotFoundError: If the directory has no SKILL.md.
        ValueError: If SKILL.md cannot be parsed.
    """
    source = skill_dir / constants.SKILL_FILE_NAME
    if not source.is_file():
        raise FileNotFoundError(f"{constants.SKILL_FILE_NAME} not found: {source}")

    frontmatter, body = split_frontmatter(source.read_text(encoding="utf-8"))
    return SkillDocument(frontmatter=frontmatter, body=body, directory=skill_dir.resolve())
