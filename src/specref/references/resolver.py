"""
Resolution of directive references against per-kind root directories.

`resolve` is strict and raises for a missing file. `resolve_all` is the
scan-wide entry point: it records failures as unresolved references so
one broken link never stops a full check.
"""

from __future__ import annotations

import logging as _logging
import pathlib as _pathlib
import typing as _typing

import specref.config.types as config_types
import specref.references.directive as directive

_logger = _logging.getLogger(__name__)

RootsByKind = _typing.Mapping[directive.DirectiveKind, _pathlib.Path]


class ReferenceNotFoundError(FileNotFoundError):
    """Raised when a reference does not point at an existing file."""

    def __init__(
        self,
        reference: directive.DirectiveReference,
        path: _pathlib.Path | None,
        message: str | None = None,
    ) -> None:
        self.reference = reference
        self.path = path
        super().__init__(
            message
            or f"{reference.token} in {reference.source_document} does not resolve: {path}"
        )


def roots_for(
    root: _pathlib.Path,
    references_config: config_types.ReferencesConfig | None = None,
) -> dict[directive.DirectiveKind, _pathlib.Path]:
    """
    Build the kind → directory mapping for a checked tree.

    Args:
        root: Root of the documentation tree.
        references_config: Directory names per kind. Defaults apply if None.

    Returns:
        Mapping for every path-bearing kind.
    """
    cfg = references_config or config_types.ReferencesConfig()
    return {
        directive.DirectiveKind(kind): root / subdir
        for kind, subdir in cfg.roots.items()
    }


def resolve(
    reference: directive.DirectiveReference,
    roots_by_kind: RootsByKind,
) -> directive.DirectiveReference:
    """
    Resolve a reference to an existing file.

    The resolved path is `roots_by_kind[kind]` joined with raw_path. A
    leading "/" in raw_path is dropped so the path never leaves its root.
    Tool kinds (`@team`, `@web`) are returned unchanged.

    Args:
        reference: Reference to resolve.
        roots_by_kind: Root directory for each path-bearing kind.

    Returns:
        Copy of reference with resolved_path set.

    Raises:
        ReferenceNotFoundError: If the kind has no root or the file is missing.
    """
    if not reference.kind.requires_path:
        return reference

    root = roots_by_kind.get(reference.kind)
    if root is None:
        raise ReferenceNotFoundError(
            reference,
            None,
            f"No root directory configured for @{reference.kind.value}: references",
        )

    candidate = root / reference.raw_path.lstrip("/")
    if not candidate.is_file():
        raise ReferenceNotFoundError(reference, candidate)

    return reference.with_resolved_path(candidate)


def resolve_all(
    references: _typing.Iterable[directive.DirectiveReference],
    roots_by_kind: RootsByKind,
) -> _typing.Iterator[directive.DirectiveReference]:
    """
    Resolve every reference, keeping failures as unresolved references.

    Args:
        references: References to resolve.
        roots_by_kind: Root directory for each path-bearing kind.

    Yields:
        References with resolved_path set, or None where resolution failed.
    """
    for reference in references:
        try:
            yield resolve(reference, roots_by_kind)
        except ReferenceNotFoundError as e:
            _logger.debug("Broken reference: %s", e)
            yield reference.with_resolved_path(None)
