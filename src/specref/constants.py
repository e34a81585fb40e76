"""
Shared constants for specref.

This module provides a single source of truth for default values
that are used across multiple modules.
"""

# Directory layout defaults
DEFAULT_RULES_DIR = "rules"
"""Root directory for @rule: references."""

DEFAULT_PERSONAS_DIR = "personas"
"""Root directory for @persona: references."""

DEFAULT_EXAMPLES_DIR = "examples"
"""Root directory for @example: references."""

DEFAULT_DOCUMENT_GLOB = "**/*.md"
"""Glob used to discover Markdown documents under a root."""

DEFAULT_EXCLUDE_DIRS = (".git", ".venv", "node_modules", "__pycache__")
"""Directory names never descended into while discovering documents."""

# Matcher defaults
DEFAULT_DESCRIPTION_WEIGHT = 0.6
"""Weight of description similarity in a skill's score."""

DEFAULT_CONTENT_WEIGHT = 0.4
"""Weight of content similarity in a skill's score."""

DEFAULT_TOP_N = 5
"""Default number of skills returned by match-skills."""

DEFAULT_MIN_TERM_LENGTH = 2
"""Terms shorter than this are ignored when matching."""

# Skill files
SKILL_FILE_NAME = "SKILL.md"
"""Name of the skill definition file inside a skill directory."""

MANIFEST_FILE_NAME = ".skills.json"
"""Conventional name of the skill manifest."""
