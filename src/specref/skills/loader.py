"""
Loading of local skill content for manifest entries.

`local:` identifiers name a directory relative to the manifest, e.g.
`local:./skills/api-design`. Its SKILL.md body becomes the entry's
content; the frontmatter description fills in a missing manifest
description. Remote identifiers (github:, registry names) are left as is.
"""

from __future__ import annotations

import dataclasses as _dataclasses
import logging as _logging
import pathlib as _pathlib
import typing as _typing

import specref.skills.manifest as manifest
import specref.skills.skill as skill_module

_logger = _logging.getLogger(__name__)

LOCAL_PREFIX = "local:"


def local_skill_dir(identifier: str, base_dir: _pathlib.Path) -> _pathlib.Path | None:
    """
    Map a local: identifier to its skill directory.

    Args:
        identifier: Manifest identifier.
        base_dir: Directory the manifest lives in.

    Returns:
        Skill directory, or None for non-local identifiers.
    """
    if not identifier.startswith(LOCAL_PREFIX):
        return None
    relative = identifier[len(LOCAL_PREFIX):].strip()
    if not relative:
        return None
    return base_dir / relative


def load_entry_content(
    entry: manifest.SkillManifestEntry,
    base_dir: _pathlib.Path,
) -> manifest.SkillManifestEntry:
    """
    Attach SKILL.md content to one entry.

    Failures are logged and the entry is returned unchanged.

    Args:
        entry: Manifest entry.
        base_dir: Directory the manifest lives in.

    Returns:
        Entry with content (and possibly description) filled in.
    """
    skill_dir = local_skill_dir(entry.identifier, base_dir)
    if skill_dir is None:
        return entry

    try:
        skill = skill_module.read_skill_document(skill_dir)
    except FileNotFoundError:
        # Not installed locally; match on the manifest description alone
        _logger.debug("No SKILL.md for %s in %s", entry.identifier, skill_dir)
        return entry
    except (OSError, ValueError) as e:
        _logger.warning("Cannot load skill %s: %s", entry.identifier, e)
        return entry

    _logger.debug("Loaded skill %s from %s", skill.name, skill.directory)
    return _dataclasses.replace(
        entry,
        content=skill.body,
        description=entry.description or skill.description,
    )


def attach_local_content(
    entries: _typing.Iterable[manifest.SkillManifestEntry],
    base_dir: _pathlib.Path,
) -> list[manifest.SkillManifestEntry]:
    """
    Attach SKILL.md content to every local entry.

    Blocked entries are skipped since they are never matched.

    Args:
        entries: Manifest entries.
        base_dir: Directory the manifest lives in.

    Returns:
        New list of entries.
    """
    return [
        entry if entry.is_blocked else load_entry_content(entry, base_dir)
        for entry in entries
    ]
