"""Title heuristic — describe/it titles against the changed file's name."""

from __future__ import annotations

from cyselect.discovery.models import TestCandidate
from cyselect.git.models import ChangedFile
from cyselect.tokens import base_name, dice_coefficient, tokenize_filename

EXACT_TITLE_SCORE = 1.0
STRONG_OVERLAP_SCORE = 0.8


def title_score(changed_file: ChangedFile, candidate: TestCandidate) -> float:
    source_path = changed_file.source_path
    if not source_path or not candidate.tokens:
        return 0.0

    source_base = base_name(source_path).lower()
    if source_base:
        for title in candidate.titles:
            title_lower = title.lower()
            if title_lower and (source_base in title_lower or title_lower in source_base):
                return EXACT_TITLE_SCORE

    source_tokens = set(tokenize_filename(source_path))
    title_tokens = set(candidate.tokens)
    union = source_tokens | title_tokens
    overlap = len(source_tokens & title_tokens) / len(union) if union else 0.0
    dice = dice_coefficient(source_tokens, title_tokens)

    if overlap > 0.6 or dice > 0.6:
        return STRONG_OVERLAP_SCORE
    if overlap > 0.3 or dice > 0.3:
        return 0.4 + 0.2 * dice
    return 0.0
