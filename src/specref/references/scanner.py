"""
Token extraction from Markdown documents.

Grammar:
- `@rule:path`, `@persona:path`, `@example:path` where path is a run of
  word characters, `.`, `/` and `-`. A trailing `.` (sentence end) is not
  part of the path.
- `@team`, `@web` as bare words (not followed by `:`).

The `@` must not follow a word character or another `@`, so e-mail
addresses and decorators like `foo@rule:x` do not count.

Fenced code blocks are skipped: rule documents routinely show annotation
syntax (`@Query`, `@rule:...`) inside example snippets, and those are not
cross-references.
"""

from __future__ import annotations

import re as _re
import typing as _typing

import specref.references.directive as directive

_TOKEN_RE = _re.compile(
    r"(?<![\w@])@(?:"
    r"(?P<kind>rule|persona|example):(?P<path>[\w./-]+)"
    r"|(?P<tool>team|web)(?![\w:-])"
    r")"
)

# CommonMark fences: up to 3 spaces of indent (relative to the enclosing
# list item's content), then 3+ backticks or tildes
_FENCE_OPEN_RE = _re.compile(r"^(?P<indent> *)(?P<fence>`{3,}|~{3,})(?P<info>.*)$")

# List item marker; group "marker" spans up to where the item's content starts
_LIST_ITEM_RE = _re.compile(r"^(?P<marker> *(?:[-*+]|\d{1,9}[.)]) {1,4})\S")


def _indent(line: str) -> int:
    return len(line) - len(line.lstrip(" "))


def _closes_fence(line: str, fence: str, container: int) -> bool:
    """Whether line closes a block opened with fence inside container."""
    offset = _indent(line) - container
    if not 0 <= offset <= 3:
        return False
    stripped = line.strip()
    return len(stripped) >= len(fence) and stripped == fence[0] * len(stripped)


def iter_prose_lines(
    text: str,
    *,
    exclude_fenced_code: bool = True,
) -> _typing.Iterator[tuple[int, str]]:
    """
    Yield (line_number, line) for lines outside fenced code blocks.

    Fence lines themselves are never yielded. An unterminated fence
    swallows the rest of the document, as Markdown renderers do.
    Fences nested in list items are measured from the item's content
    column, so a fence indented under "- step" is still a fence.

    Args:
        text: Markdown text.
        exclude_fenced_code: If False, every line is yielded.
    """
    fence: str | None = None
    # Content columns of the open list items, innermost last
    containers: list[int] = []

    for number, line in enumerate(text.splitlines(), start=1):
        if not exclude_fenced_code:
            yield number, line
            continue

        blank = not line.strip()
        indent = _indent(line)
        container = containers[-1] if containers else 0

        if fence is not None:
            if blank or indent >= container:
                if _closes_fence(line, fence, container):
                    fence = None
                continue
            # Dedent below the list item ends both the item and the fence
            fence = None

        candidate = line
        if not blank:
            while containers and indent < containers[-1]:
                containers.pop()
            item = _LIST_ITEM_RE.match(line)
            if item:
                containers.append(len(item.group("marker")))
                # A fence may open on the item line itself ("- ```java")
                candidate = " " * containers[-1] + line[containers[-1]:]
            container = containers[-1] if containers else 0

        match = _FENCE_OPEN_RE.match(candidate)
        if match and 0 <= len(match.group("indent")) - container <= 3:
            opening = match.group("fence")
            # Backtick fences may not carry backticks in their info string
            if not (opening[0] == "`" and "`" in match.group("info")):
                fence = opening
                continue

        yield number, line


def scan_text(
    document_id: str,
    text: str,
    *,
    exclude_fenced_code: bool = True,
) -> _typing.Iterator[directive.DirectiveReference]:
    """
    Extract directive references from one document.

    Args:
        document_id: Identifier recorded as the reference's source document.
        text: Markdown content.
        exclude_fenced_code: Skip tokens inside fenced code blocks.

    Yields:
        Unresolved DirectiveReference instances in document order.
    """
    for number, line in iter_prose_lines(text, exclude_fenced_code=exclude_fenced_code):
        for match in _TOKEN_RE.finditer(line):
            tool = match.group("tool")
            if tool is not None:
                yield directive.DirectiveReference(
                    kind=directive.DirectiveKind(tool),
                    raw_path="",
                    source_document=document_id,
                    line=number,
                )
                continue

            raw_path = match.group("path").rstrip(".")
            if not raw_path:
                continue
            yield directive.DirectiveReference(
                kind=directive.DirectiveKind(match.group("kind")),
                raw_path=raw_path,
                source_document=document_id,
                line=number,
            )


def scan(
    documents: _typing.Iterable[tuple[str, str]],
    *,
    exclude_fenced_code: bool = True,
) -> _typing.Iterator[directive.DirectiveReference]:
    """
    Extract directive references from a sequence of documents.

    Lazy and side-effect free: calling scan again on the same input
    yields the same references.

    Args:
        documents: (document_id, text) pairs.
        exclude_fenced_code: Skip tokens inside fenced code blocks.

    Yields:
        Unresolved DirectiveReference instances, document by document.
    """
    for document_id, text in documents:
        yield from scan_text(document_id, text, exclude_fenced_code=exclude_fenced_code)
