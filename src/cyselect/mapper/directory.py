"""Directory proximity heuristic."""

from __future__ import annotations

import posixpath
from typing import FrozenSet, List

from cyselect.git.models import ChangedFile
from cyselect.tokens import to_posix

# Layout folders that say nothing about the feature under test
_SOURCE_NOISE: FrozenSet[str] = frozenset({"src", "lib", "app"})
_TEST_NOISE: FrozenSet[str] = frozenset({"cypress", "e2e", "tests"})

ROOT_LEVEL_SCORE = 0.3
EXACT_MATCH_BONUS = 0.2


def path_segments(directory: str) -> List[str]:
    """Normalise *directory* to POSIX form and split it into segments."""
    normalized = posixpath.normpath(to_posix(directory)) if directory else ""
    return [seg for seg in normalized.split("/") if seg and seg != "."]


def directory_score(changed_file: ChangedFile, test_path: str) -> float:
    """Score how closely the changed file's folders match the test's folders.

    Segments are compared from the deepest folder outward and counting stops
    at the first mismatch. Score = matches / longest segment list, plus a
    bonus when both lists are the same length and fully match.
    """
    source_path = changed_file.source_path
    if not source_path:
        return 0.0

    source_dir = posixpath.dirname(to_posix(source_path))
    test_dir = posixpath.dirname(to_posix(test_path))

    source_segments = [
        seg.lower() for seg in path_segments(source_dir) if seg.lower() not in _SOURCE_NOISE
    ]
    test_segments = [
        seg.lower() for seg in path_segments(test_dir) if seg.lower() not in _TEST_NOISE
    ]

    max_len = max(len(source_segments), len(test_segments))
    if max_len == 0:
        # Both effectively at the project root
        return ROOT_LEVEL_SCORE

    min_len = min(len(source_segments), len(test_segments))
    matches = 0
    for i in range(1, min_len + 1):
        if source_segments[-i] != test_segments[-i]:
            break
        matches += 1

    score = matches / max_len
    if len(source_segments) == len(test_segments) and matches == min_len:
        return min(1.0, score + EXACT_MATCH_BONUS)
    return score
