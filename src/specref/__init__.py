"""
specref - Directive reference checker and skill matcher

Tooling for Markdown guidance repositories: checks that @rule:, @persona:
and @example: references point at real files, and ranks skills from a
.skills.json manifest against a feature description.
"""

import importlib.metadata as _metadata

# Version is defined in pyproject.toml - read it and parse into tuple (primary representation)
_raw_version = _metadata.version("specref")
__version_info__: tuple[int, int, int] = tuple(int(x) for x in _raw_version.split(".")[:3])  # type: ignore[assignment]
__version__: str = ".".join(str(x) for x in __version_info__)
__author__ = "specref Contributors"

from specref.config import Settings  # noqa: E402

__all__ = ["__version__", "__version_info__", "Settings"]
