"""
Directive reference resolution for Markdown guidance repositories.

Documents link to one another with reference tokens:
- @rule:path - a file under rules/
- @persona:path - a file under personas/
- @example:path - a file under examples/
- @team, @web - external tools, never resolved to a file

A check discovers documents, scans them for tokens (skipping fenced code
blocks), resolves each path-bearing token against its kind's root and
reports the ones that point nowhere.
"""

from specref.references.directive import (
    PATH_KINDS,
    DirectiveKind,
    DirectiveReference,
)
from specref.references.discovery import (
    check_references,
    discover_document_paths,
    discover_documents,
    load_document,
)
from specref.references.reporting import ReferenceReport, report
from specref.references.resolver import (
    ReferenceNotFoundError,
    resolve,
    resolve_all,
    roots_for,
)
from specref.references.scanner import iter_prose_lines, scan, scan_text

__all__ = [
    # Types
    "DirectiveKind",
    "DirectiveReference",
    "PATH_KINDS",
    # Scanning
    "iter_prose_lines",
    "scan",
    "scan_text",
    # Resolution
    "ReferenceNotFoundError",
    "resolve",
    "resolve_all",
    "roots_for",
    # Reporting
    "ReferenceReport",
    "report",
    # Discovery
    "check_references",
    "discover_document_paths",
    "discover_documents",
    "load_document",
]
