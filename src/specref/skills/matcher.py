"""
Skill relevance matching.

Each entry is scored against the query as a weighted sum of two cosine
similarities over term-frequency vectors:

    score = description_weight * cos(query, description)
          + content_weight     * cos(query, content)

Content text is the entry's loaded SKILL.md body plus the words of the
identifier's last path segment, so manifest-only entries still match on
their name. Blocked entries are never returned.
"""

from __future__ import annotations

import collections as _collections
import dataclasses as _dataclasses
import math as _math
import re as _re
import typing as _typing

import specref.constants as constants
import specref.skills.manifest as manifest

_TERM_RE = _re.compile(r"[a-z0-9]+")

STOP_WORDS = frozenset(
    {
        "a", "an", "and", "are", "as", "at", "be", "by", "for", "from",
        "how", "in", "into", "is", "it", "its", "of", "on", "or", "that",
        "the", "this", "to", "use", "used", "using", "when", "with",
    }
)

# MatchResult.score is stored at this precision
_SCORE_DIGITS = 9


class InvalidTopNError(ValueError):
    """Raised when a non-positive result count is requested."""

    def __init__(self, top_n: int) -> None:
        self.top_n = top_n
        super().__init__(f"top_n must be a positive integer, got {top_n}")


@_dataclasses.dataclass(frozen=True)
class MatchWeights:
    """Relative weight of description and content similarity."""

    description: float = constants.DEFAULT_DESCRIPTION_WEIGHT
    content: float = constants.DEFAULT_CONTENT_WEIGHT

    def __post_init__(self) -> None:
        if self.description < 0 or self.content < 0:
            raise ValueError("Match weights must be non-negative")
        if not _math.isclose(self.description + self.content, 1.0, abs_tol=1e-9):
            raise ValueError(
                f"Match weights must sum to 1.0, got {self.description + self.content}"
            )


@_dataclasses.dataclass(frozen=True)
class MatchResult:
    """Score of one skill against a query."""

    skill_identifier: str
    score: float
    matched_terms: frozenset[str]
    description_score: float = 0.0
    content_score: float = 0.0

    def to_dict(self) -> dict[str, _typing.Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "skillIdentifier": self.skill_identifier,
            "score": round(self.score, 4),
            "matchedTerms": sorted(self.matched_terms),
        }


def tokenize(
    text: str,
    *,
    min_term_length: int = constants.DEFAULT_MIN_TERM_LENGTH,
) -> list[str]:
    """
    Split text into lowercase terms.

    Stop words and terms shorter than min_term_length are dropped.
    """
    return [
        term
        for term in _TERM_RE.findall(text.lower())
        if len(term) >= min_term_length and term not in STOP_WORDS
    ]


def cosine_similarity(
    left: _typing.Mapping[str, int],
    right: _typing.Mapping[str, int],
) -> float:
    """Cosine similarity of two term-frequency vectors (0.0 if either is empty)."""
    if not left or not right:
        return 0.0
    dot = sum(count * right.get(term, 0) for term, count in left.items())
    if dot == 0:
        return 0.0
    norm = _math.sqrt(sum(c * c for c in left.values())) * _math.sqrt(
        sum(c * c for c in right.values())
    )
    return dot / norm


def identifier_name(identifier: str) -> str:
    """
    Human-readable name of a skill identifier.

    "local:./skills/react-testing" -> "react-testing"
    "github:org/repo/skill" -> "skill"
    """
    _, _, location = identifier.rpartition(":")
    segments = [s for s in location.replace("\\", "/").split("/") if s not in ("", ".", "..")]
    return segments[-1] if segments else location


def _content_text(entry: manifest.SkillManifestEntry) -> str:
    name = identifier_name(entry.identifier).replace("-", " ").replace("_", " ")
    return f"{name}\n{entry.content}" if entry.content else name


def score_entry(
    query_terms: _typing.Sequence[str],
    entry: manifest.SkillManifestEntry,
    *,
    weights: MatchWeights,
    min_term_length: int = constants.DEFAULT_MIN_TERM_LENGTH,
) -> MatchResult:
    """
    Score one entry against already-tokenized query terms.

    Args:
        query_terms: Output of tokenize() for the query.
        entry: Manifest entry.
        weights: Description/content weighting.
        min_term_length: Shortest term considered.

    Returns:
        MatchResult with score clamped to [0, 1] and rounded to
        _SCORE_DIGITS places, so float noise cannot split equal scores.
    """
    query_tf = _collections.Counter(query_terms)
    description_terms = tokenize(entry.description, min_term_length=min_term_length)
    content_terms = tokenize(_content_text(entry), min_term_length=min_term_length)

    description_score = cosine_similarity(query_tf, _collections.Counter(description_terms))
    content_score = cosine_similarity(query_tf, _collections.Counter(content_terms))
    score = weights.description * description_score + weights.content * content_score

    return MatchResult(
        skill_identifier=entry.identifier,
        score=round(min(1.0, max(0.0, score)), _SCORE_DIGITS),
        matched_terms=frozenset(query_tf) & frozenset(description_terms),
        description_score=description_score,
        content_score=content_score,
    )


def match(
    query: str,
    entries: _typing.Sequence[manifest.SkillManifestEntry],
    top_n: int,
    *,
    blocked: _typing.Iterable[str] = (),
    weights: MatchWeights | None = None,
    min_term_length: int = constants.DEFAULT_MIN_TERM_LENGTH,
) -> list[MatchResult]:
    """
    Return the top_n skills most relevant to query.

    Entries that are blocked (by category or by identifier in `blocked`)
    are excluded whatever their score, as are entries scoring zero.
    Results are ordered by descending score, ties by identifier.

    Args:
        query: Free-text feature description.
        entries: Candidate skills.
        top_n: Maximum number of results.
        blocked: Extra identifiers to exclude.
        weights: Description/content weighting (0.6/0.4 by default).
        min_term_length: Shortest term considered.

    Returns:
        Up to top_n MatchResult instances.

    Raises:
        InvalidTopNError: If top_n <= 0.
    """
    if top_n <= 0:
        raise InvalidTopNError(top_n)
    if not entries:
        return []

    weights = weights or MatchWeights()
    blocked_ids = frozenset(blocked)
    query_terms = tokenize(query, min_term_length=min_term_length)
    if not query_terms:
        return []

    results: list[MatchResult] = []
    for entry in entries:
        if entry.is_blocked or entry.identifier in blocked_ids:
            continue
        result = score_entry(
            query_terms, entry, weights=weights, min_term_length=min_term_length
        )
        if result.score > 0:
            results.append(result)

    results.sort(key=lambda r: (-r.score, r.skill_identifier))
    return results[:top_n]


def match_manifest(
    query: str,
    skills_manifest: manifest.SkillsManifest,
    top_n: int,
    *,
    entries: _typing.Sequence[manifest.SkillManifestEntry] | None = None,
    weights: MatchWeights | None = None,
    min_term_length: int = constants.DEFAULT_MIN_TERM_LENGTH,
) -> list[MatchResult]:
    """
    Match against a manifest, honouring its blocked list.

    Args:
        query: Free-text feature description.
        skills_manifest: Parsed manifest.
        top_n: Maximum number of results.
        entries: Pre-built entries (e.g. with local content attached).
            Defaults to skills_manifest.entries().
        weights: Description/content weighting.
        min_term_length: Shortest term considered.
    """
    return match(
        query,
        entries if entries is not None else skills_manifest.entries(),
        top_n,
        blocked=skills_manifest.blocked_identifiers,
        weights=weights,
        min_term_length=min_term_length,
    )
