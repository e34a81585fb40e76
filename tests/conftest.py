"""
Shared pytest fixtures for specref tests.

This file is automatically loaded by pytest. Fixtures defined here are
available to all test files without explicit imports.
"""

import json as _json
import os as _os
import pathlib as _pathlib
import typing as _typing

import click.testing as _click_testing
import pytest as _pytest

import specref.config as config

# =============================================================================
# Environment isolation
# =============================================================================


@_pytest.fixture(autouse=True)
def isolated_env(
    tmp_path: _pathlib.Path,
    monkeypatch: _pytest.MonkeyPatch,
) -> _pathlib.Path:
    """
    Isolate every test from the user's specref configuration.

    Clears SPECREF_* variables, points the user config directory at an
    empty temp directory and runs the test from a fresh working directory
    so no project config is picked up.
    """
    for key in list(_os.environ):
        if key.startswith("SPECREF_"):
            monkeypatch.delenv(key, raising=False)

    user_dir = tmp_path / "user-config"
    user_dir.mkdir()
    monkeypatch.setenv("SPECREF_CONFIG_DIR", str(user_dir))

    workdir = tmp_path / "cwd"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    return workdir


@_pytest.fixture
def clean_settings() -> config.Settings:
    """Settings with defaults only (no .env, no config files)."""
    return config.Settings.construct_without_dotenv()


@_pytest.fixture
def cli_runner() -> _click_testing.CliRunner:
    """Click test runner."""
    return _click_testing.CliRunner()


# =============================================================================
# Documentation tree fixtures
# =============================================================================


def write_file(path: _pathlib.Path, content: str) -> _pathlib.Path:
    """Write content, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


@_pytest.fixture
def doc_tree(tmp_path: _pathlib.Path) -> _pathlib.Path:
    """
    A small guidance repository.

    - rules/security/sql.md shows annotation syntax inside a code fence
    - personas/architect.md links to an existing rule and example
    - docs/guide.md links to one missing persona and uses @team / @web
    """
    root = tmp_path / "repo"
    write_file(
        root / "rules" / "security" / "sql.md",
        """# SQL safety

Always bind parameters. See @example:java/repository.md for a full sample.

```java
@Query("select u from User u where u.name = :name")
// @rule:not/a/real/reference.md
List<User> findByName(@Param("name") String name);
```
""",
    )
    write_file(
        root / "personas" / "architect.md",
        """# Architect

Follow @rule:security/sql.md when reviewing data access.
""",
    )
    write_file(root / "examples" / "java" / "repository.md", "# Repository example\n")
    write_file(
        root / "docs" / "guide.md",
        """# Guide

Ask @team for review, search with @web, and act as @persona:ghost.md.
""",
    )
    return root


# =============================================================================
# Manifest fixtures
# =============================================================================


@_pytest.fixture
def write_manifest(
    tmp_path: _pathlib.Path,
) -> _typing.Callable[[_typing.Any], _pathlib.Path]:
    """Factory writing a manifest (dict or raw text) to tmp_path/.skills.json."""

    def _write(data: _typing.Any) -> _pathlib.Path:
        path = tmp_path / ".skills.json"
        text = data if isinstance(data, str) else _json.dumps(data)
        path.write_text(text, encoding="utf-8")
        return path

    return _write


def make_skill_dir(
    parent: _pathlib.Path,
    name: str,
    description: str,
    body: str,
) -> _pathlib.Path:
    """Create a skill directory with a SKILL.md."""
    skill_dir = parent / name
    write_file(
        skill_dir / "SKILL.md",
        f"""---
name: {name}
description: {description}
---

{body}
""",
    )
    return skill_dir


@_pytest.fixture
def skill_factory() -> _typing.Callable[[_pathlib.Path, str, str, str], _pathlib.Path]:
    """Factory creating skill directories: skill_factory(parent, name, description, body)."""
    return make_skill_dir
