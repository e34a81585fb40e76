"""
Tests for attaching local SKILL.md content to manifest entries.
"""

import pathlib as _pathlib
import typing as _typing

import specref.skills.loader as loader
import specref.skills.manifest as manifest

SkillFactory = _typing.Callable[[_pathlib.Path, str, str, str], _pathlib.Path]


def _entry(
    identifier: str,
    description: str = "",
    category: manifest.SkillCategory = manifest.SkillCategory.REQUIRED,
) -> manifest.SkillManifestEntry:
    return manifest.SkillManifestEntry(
        identifier=identifier, category=category, description=description
    )


class TestLocalSkillDir:
    """Tests for local_skill_dir()."""

    def test_local_identifier(self, tmp_path: _pathlib.Path) -> None:
        """local: identifiers are relative to the base directory."""
        assert loader.local_skill_dir("local:./skills/a", tmp_path) == tmp_path / "skills" / "a"

    def test_remote_identifier(self, tmp_path: _pathlib.Path) -> None:
        """Non-local identifiers have no directory."""
        assert loader.local_skill_dir("github:org/repo/a", tmp_path) is None

    def test_empty_local_identifier(self, tmp_path: _pathlib.Path) -> None:
        """local: with no path has no directory."""
        assert loader.local_skill_dir("local:", tmp_path) is None


class TestAttachLocalContent:
    """Tests for attach_local_content()."""

    def test_attaches_body_and_keeps_manifest_description(
        self, tmp_path: _pathlib.Path, skill_factory: SkillFactory
    ) -> None:
        """Body becomes content; the manifest description wins."""
        skill_factory(tmp_path / "skills", "api", "From frontmatter", "REST guidance body")
        [entry] = loader.attach_local_content(
            [_entry("local:./skills/api", "From manifest")], tmp_path
        )
        assert entry.content == "REST guidance body"
        assert entry.description == "From manifest"

    def test_fills_missing_description(
        self, tmp_path: _pathlib.Path, skill_factory: SkillFactory
    ) -> None:
        """An empty manifest description takes the frontmatter one."""
        skill_factory(tmp_path / "skills", "api", "From frontmatter", "Body")
        [entry] = loader.attach_local_content([_entry("local:./skills/api")], tmp_path)
        assert entry.description == "From frontmatter"

    def test_missing_skill_keeps_entry(self, tmp_path: _pathlib.Path) -> None:
        """A local skill without SKILL.md is left unchanged."""
        original = _entry("local:./skills/ghost", "Ghost")
        assert loader.attach_local_content([original], tmp_path) == [original]

    def test_invalid_skill_keeps_entry(self, tmp_path: _pathlib.Path) -> None:
        """An unparseable SKILL.md is left unchanged."""
        skill_dir = tmp_path / "skills" / "bad"
        skill_dir.mkdir(parents=True)
        (skill_dir / "SKILL.md").write_text("no frontmatter here")
        original = _entry("local:./skills/bad")
        assert loader.attach_local_content([original], tmp_path) == [original]

    def test_blocked_and_remote_entries_untouched(
        self, tmp_path: _pathlib.Path, skill_factory: SkillFactory
    ) -> None:
        """Blocked entries are not loaded; remote ones have nothing to load."""
        skill_factory(tmp_path / "skills", "api", "API", "Body")
        blocked = _entry("local:./skills/api", category=manifest.SkillCategory.BLOCKED)
        remote = _entry("github:org/repo/api")
        assert loader.attach_local_content([blocked, remote], tmp_path) == [blocked, remote]
