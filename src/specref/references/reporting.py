"""
Aggregation of resolved references into a check report.
"""

from __future__ import annotations

import dataclasses as _dataclasses
import typing as _typing

import specref.references.directive as directive


@_dataclasses.dataclass(frozen=True)
class ReferenceReport:
    """Outcome of a reference check."""

    total_count: int
    """Number of references seen, tool kinds included."""

    broken: tuple[directive.DirectiveReference, ...]
    """Path-bearing references that did not resolve, in scan order."""

    @property
    def broken_count(self) -> int:
        """Number of broken references."""
        return len(self.broken)

    @property
    def ok(self) -> bool:
        """True when nothing is broken."""
        return not self.broken

    def to_dict(self) -> dict[str, _typing.Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "total": self.total_count,
            "broken": self.broken_count,
            "brokenReferences": [
                {
                    "sourceDocument": ref.source_document,
                    "kind": ref.kind.value,
                    "rawPath": ref.raw_path,
                    "line": ref.line,
                }
                for ref in self.broken
            ],
        }


def report(references: _typing.Iterable[directive.DirectiveReference]) -> ReferenceReport:
    """
    Summarize resolved references.

    Never fails: an all-broken input is reported, not raised.

    Args:
        references: References after resolution.

    Returns:
        ReferenceReport with totals and the broken list.
    """
    total = 0
    broken: list[directive.DirectiveReference] = []
    for reference in references:
        total += 1
        if reference.is_broken:
            broken.append(reference)
    return ReferenceReport(total_count=total, broken=tuple(broken))
