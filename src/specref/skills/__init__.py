"""
Skill manifest handling and relevance matching.

A skill manifest (.skills.json) lists skills by category:
- required / recommended / internal / registry - candidate skills
- blocked - never suggested, overrides any other category

Matching scores each non-blocked skill against a feature description
(60% description similarity, 40% content similarity by default) and
returns the best few.
"""

from specref.skills.loader import (
    attach_local_content,
    load_entry_content,
    local_skill_dir,
)
from specref.skills.manifest import (
    LISTED_CATEGORIES,
    ManifestParseError,
    SkillCategory,
    SkillManifestEntry,
    SkillPolicy,
    SkillsManifest,
    load_manifest,
    parse_manifest,
)
from specref.skills.matcher import (
    InvalidTopNError,
    MatchResult,
    MatchWeights,
    cosine_similarity,
    identifier_name,
    match,
    match_manifest,
    score_entry,
    tokenize,
)
from specref.skills.skill import (
    SkillDocument,
    SkillFrontmatter,
    read_skill_document,
    split_frontmatter,
)

__all__ = [
    # Manifest
    "LISTED_CATEGORIES",
    "ManifestParseError",
    "SkillCategory",
    "SkillManifestEntry",
    "SkillPolicy",
    "SkillsManifest",
    "load_manifest",
    "parse_manifest",
    # SKILL.md
    "SkillDocument",
    "SkillFrontmatter",
    "read_skill_document",
    "split_frontmatter",
    # Content loading
    "attach_local_content",
    "load_entry_content",
    "local_skill_dir",
    # Matching
    "InvalidTopNError",
    "MatchResult",
    "MatchWeights",
    "cosine_similarity",
    "identifier_name",
    "match",
    "match_manifest",
    "score_entry",
    "tokenize",
]
