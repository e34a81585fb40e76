"""
Document discovery and the end-to-end reference check.

Documents are found by globbing under the checked root (default
`**/*.md`), skipping excluded directory names such as `.git` and
`node_modules`. Document ids are POSIX paths relative to the root so
reports read the same on every platform.
"""

from __future__ import annotations

import logging as _logging
import pathlib as _pathlib
import typing as _typing

import specref.config.types as config_types
import specref.references.reporting as reporting
import specref.references.resolver as resolver
import specref.references.scanner as scanner

if _typing.TYPE_CHECKING:
    import specref.config as _config

_logger = _logging.getLogger(__name__)


def discover_document_paths(
    root: _pathlib.Path,
    references_config: config_types.ReferencesConfig | None = None,
) -> list[_pathlib.Path]:
    """
    Find Markdown documents under root.

    Args:
        root: Directory to search.
        references_config: Glob and excluded directory names.

    Returns:
        Sorted list of document paths.
    """
    cfg = references_config or config_types.ReferencesConfig()
    excluded = set(cfg.exclude_dirs)

    found: list[_pathlib.Path] = []
    for path in root.glob(cfg.document_glob):
        if not path.is_file():
            continue
        relative_dirs = path.relative_to(root).parts[:-1]
        if excluded.intersection(relative_dirs):
            continue
        found.append(path)

    return sorted(found)


def load_document(path: _pathlib.Path) -> str | None:
    """
    Read one document.

    Args:
        path: Document path.

    Returns:
        File content, or None if it cannot be read or decoded.
    """
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        _logger.warning("Skipping unreadable document %s: %s", path, e)
        return None


def discover_documents(
    root: _pathlib.Path,
    references_config: config_types.ReferencesConfig | None = None,
) -> _typing.Iterator[tuple[str, str]]:
    """
    Yield (document_id, text) for every readable document under root.

    Args:
        root: Directory to search.
        references_config: Glob and excluded directory names.
    """
    for path in discover_document_paths(root, references_config):
        text = load_document(path)
        if text is None:
            continue
        yield path.relative_to(root).as_posix(), text


def check_references(
    root: _pathlib.Path,
    settings: _config.Settings | None = None,
) -> reporting.ReferenceReport:
    """
    Scan, resolve and report every reference under root.

    Args:
        root: Root of the documentation tree (holds rules/, personas/, examples/).
        settings: Settings supplying the references section. Defaults apply if None.

    Returns:
        ReferenceReport for the whole tree.
    """
    cfg = settings.references if settings is not None else config_types.ReferencesConfig()
    documents = discover_documents(root, cfg)
    references = scanner.scan(documents, exclude_fenced_code=cfg.exclude_fenced_code)
    resolved = resolver.resolve_all(references, resolver.roots_for(root, cfg))
    result = reporting.report(resolved)
    _logger.info(
        "Checked %s: %d references, %d broken",
        root,
        result.total_count,
        result.broken_count,
    )
    return result
