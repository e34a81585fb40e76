"""
Tests for SKILL.md parsing.

Tests verify that:
- Frontmatter and body are split and validated
- Missing or invalid frontmatter raises ValueError
- read_skill_document reads a skill directory
"""

import pathlib as _pathlib
import typing as _typing

import pytest as _pytest

import specref.skills.skill as skill


class TestSkillFrontmatter:
    """Tests for SkillFrontmatter pydantic model."""

    def test_name_and_description_required(self) -> None:
        """Version is optional."""
        fm = skill.SkillFrontmatter(name="test", description="A test skill")
        assert fm.name == "test"
        assert fm.version is None

    @_pytest.mark.parametrize("name", ["a", "my-skill", "e2e-tests"])
    def test_kebab_case_names(self, name: str) -> None:
        """Lowercase kebab-case names are accepted."""
        assert skill.SkillFrontmatter(name=name, description="d").name == name

    @_pytest.mark.parametrize("name", ["MySkill", "-lead", "trail-", "two--dashes"])
    def test_invalid_names(self, name: str) -> None:
        """Anything else is rejected."""
        with _pytest.raises(ValueError, match="String should match pattern"):
            skill.SkillFrontmatter(name=name, description="d")

    def test_extra_fields_are_kept(self) -> None:
        """Unknown frontmatter keys are preserved."""
        fm = skill.SkillFrontmatter.model_validate(
            {"name": "x", "description": "d", "license": "MIT"}
        )
        assert fm.model_extra == {"license": "MIT"}


class TestSplitFrontmatter:
    """Tests for split_frontmatter()."""

    def test_splits_frontmatter_and_body(self) -> None:
        """Body is everything after the closing ---, stripped."""
        fm, body = skill.split_frontmatter(
            "---\nname: api\ndescription: API design\n---\n\n# API\n\nUse REST.\n"
        )
        assert fm.name == "api"
        assert body == "# API\n\nUse REST."

    def test_empty_body(self) -> None:
        """A file that ends at the closing --- has an empty body."""
        _, body = skill.split_frontmatter("---\nname: api\ndescription: d\n---")
        assert body == ""

    def test_missing_frontmatter(self) -> None:
        """Plain markdown is rejected."""
        with _pytest.raises(ValueError, match="must have YAML frontmatter"):
            skill.split_frontmatter("# Just a heading\n")

    def test_invalid_yaml(self) -> None:
        """Broken YAML is reported as ValueError."""
        with _pytest.raises(ValueError, match="Invalid YAML"):
            skill.split_frontmatter("---\nname: [unclosed\n---\nbody\n")

    def test_missing_description(self) -> None:
        """Schema violations are reported as ValueError."""
        with _pytest.raises(ValueError, match="Invalid skill frontmatter"):
            skill.split_frontmatter("---\nname: api\n---\nbody\n")


class TestReadSkillDocument:
    """Tests for read_skill_document()."""

    def test_reads_directory(
        self,
        tmp_path: _pathlib.Path,
        skill_factory: _typing.Callable[[_pathlib.Path, str, str, str], _pathlib.Path],
    ) -> None:
        """A directory with SKILL.md loads."""
        skill_dir = skill_factory(tmp_path, "react-testing", "React tests", "Use jest.")
        document = skill.read_skill_document(skill_dir)
        assert document.name == "react-testing"
        assert document.description == "React tests"
        assert document.body == "Use jest."
        assert document.directory == skill_dir.resolve()

    def test_missing_skill_file(self, tmp_path: _pathlib.Path) -> None:
        """A directory without SKILL.md raises FileNotFoundError."""
        with _pytest.raises(FileNotFoundError):
            skill.read_skill_document(tmp_path)
