"""Tag heuristic — declared test tags against the changed file's name."""

from __future__ import annotations

import re
from typing import List

from cyselect.discovery.models import TestCandidate
from cyselect.git.models import ChangedFile
from cyselect.tokens import normalize_tag, tokenize_filename, unique

_TAG_SPLIT_RE = re.compile(r"[-_]")


def _band(ratio: float) -> float:
    if ratio >= 0.5:
        return 0.7
    if ratio >= 0.3:
        return 0.5
    if ratio > 0:
        return 0.4
    return 0.0


def tag_score(changed_file: ChangedFile, candidate: TestCandidate) -> float:
    """Score the overlap between a test's tags and the changed file's tokens.

    A tag equal to a filename token scores 1.0. Partial overlap (tag
    fragments, whole tags, substring containment) is banded to 0.4-0.7.
    """
    source_path = changed_file.source_path
    if not source_path or not candidate.tags:
        return 0.0

    tags: List[str] = unique(t for t in (normalize_tag(tag) for tag in candidate.tags) if t)
    if not tags:
        return 0.0

    source_tokens = unique(tokenize_filename(source_path))
    token_set = set(source_tokens)

    if any(tag in token_set for tag in tags):
        return 1.0

    fragments = unique(
        part for tag in tags for part in (*_TAG_SPLIT_RE.split(tag), tag) if part
    )
    matches = sum(1 for fragment in fragments if fragment in token_set)
    for token in source_tokens:
        if any(tag in token or token in tag for tag in tags):
            matches += 1  # once per token

    if matches == 0:
        return 0.0
    return _band(matches / max(len(tags), len(source_tokens)))
