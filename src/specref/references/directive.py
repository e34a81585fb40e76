"""
Directive reference types.

A directive reference is an `@kind:path` token found in a Markdown
document, e.g. `@rule:security/sql.md`. `@team` and `@web` are bare
tokens naming external tools; they carry no path.
"""

from __future__ import annotations

import dataclasses as _dataclasses
import enum as _enum
import pathlib as _pathlib
import typing as _typing


class DirectiveKind(str, _enum.Enum):
    """Kinds of directive token."""

    RULE = "rule"
    PERSONA = "persona"
    EXAMPLE = "example"
    TEAM = "team"
    WEB = "web"

    @property
    def requires_path(self) -> bool:
        """Whether tokens of this kind point at a file."""
        return self in PATH_KINDS


PATH_KINDS = frozenset({DirectiveKind.RULE, DirectiveKind.PERSONA, DirectiveKind.EXAMPLE})
"""Kinds written as `@kind:path`."""


@_dataclasses.dataclass(frozen=True)
class DirectiveReference:
    """
    A reference token found in a document.

    Immutable: resolution returns a copy with resolved_path set.
    resolved_path is None when resolution failed, has not happened yet,
    or the kind names a tool rather than a file.
    """

    kind: DirectiveKind
    """Token kind."""

    raw_path: str
    """Text after `@kind:`, empty for tool kinds."""

    source_document: str
    """Identifier of the document the token occurred in."""

    line: int = 0
    """1-based line number of the token (0 if unknown)."""

    resolved_path: _pathlib.Path | None = None
    """Existing file the token points at."""

    @property
    def is_broken(self) -> bool:
        """A path-bearing reference that did not resolve."""
        return self.kind.requires_path and self.resolved_path is None

    @property
    def token(self) -> str:
        """The token as written in the source document."""
        if self.kind.requires_path:
            return f"@{self.kind.value}:{self.raw_path}"
        return f"@{self.kind.value}"

    def with_resolved_path(self, path: _pathlib.Path | None) -> DirectiveReference:
        """Return a copy with resolved_path replaced."""
        return _dataclasses.replace(self, resolved_path=path)

    def to_dict(self) -> dict[str, _typing.Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "sourceDocument": self.source_document,
            "kind": self.kind.value,
            "rawPath": self.raw_path,
            "line": self.line,
            "resolvedPath": str(self.resolved_path) if self.resolved_path else None,
        }
