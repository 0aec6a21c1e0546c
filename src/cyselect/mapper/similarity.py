"""Filename similarity heuristic — token Dice plus longest common substring."""

from __future__ import annotations

import re

from cyselect.git.models import ChangedFile
from cyselect.tokens import base_name, dice_coefficient, tokenize_filename

# login-form.spec, button_test, cart.cy, LoginFormSpec, buttonspec
_TEST_SUFFIX_RE = re.compile(r"[._-]?(?:spec|test|cy)$", re.IGNORECASE)

DICE_WEIGHT = 0.7
LCS_WEIGHT = 0.3
HIGH_OVERLAP_BONUS = 0.1
CONTAINMENT_SCORE = 0.8


def strip_test_suffix(name: str) -> str:
    """Remove trailing ``.spec`` / ``_test`` / ``spec``-style suffixes, any case.

    A name that is nothing but a suffix is kept as is.
    """
    while True:
        stripped = _TEST_SUFFIX_RE.sub("", name)
        if stripped == name or not stripped:
            return name
        name = stripped


def longest_common_substring(first: str, second: str) -> int:
    """Length of the longest common substring (dynamic programming)."""
    if not first or not second:
        return 0
    best = 0
    previous = [0] * (len(second) + 1)
    for ch in first:
        current = [0] * (len(second) + 1)
        for j, other in enumerate(second, start=1):
            if ch == other:
                current[j] = previous[j - 1] + 1
                if current[j] > best:
                    best = current[j]
        previous = current
    return best


def lcs_ratio(first: str, second: str) -> float:
    """Substring similarity of two names, normalised by their mean length."""
    a, b = first.lower(), second.lower()
    if not a or not b:
        return 0.0
    if a == b:
        return 1.0
    if a in b or b in a:
        return CONTAINMENT_SCORE
    return longest_common_substring(a, b) / ((len(a) + len(b)) / 2)


def similarity_score(changed_file: ChangedFile, test_path: str) -> float:
    """Score filename similarity between a changed file and a test file."""
    source_path = changed_file.source_path
    if not source_path:
        return 0.0

    source_base = base_name(source_path)
    test_base = strip_test_suffix(base_name(test_path))
    if not source_base or not test_base:
        return 0.0

    if source_base.lower() == test_base.lower():
        return 1.0

    dice = dice_coefficient(tokenize_filename(source_base), tokenize_filename(test_base))
    combined = DICE_WEIGHT * dice + LCS_WEIGHT * lcs_ratio(source_base, test_base)

    if dice > 0.8:
        return min(1.0, combined + HIGH_OVERLAP_BONUS)
    return min(1.0, combined)
