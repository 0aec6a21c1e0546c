"""Score combination — probabilistic OR over weighted heuristic scores."""

from __future__ import annotations

from typing import Optional, Sequence


def normalize_score(score: float) -> float:
    """Clamp *score* to [0.0, 1.0]."""
    return max(0.0, min(1.0, score))


def combine_scores(
    scores: Sequence[float],
    weights: Optional[Sequence[Optional[float]]] = None,
) -> float:
    """Combine heuristic scores as ``1 - Π(1 - clamp(score·weight))``.

    Each weighted score is clamped before it enters the product, so one
    strong signal (a direct import, say) dominates no matter how many other
    heuristics are silent. Weights are applied only when there is one per
    score; a ``None`` weight counts as 1.0.
    """
    if not scores:
        return 0.0

    if weights is not None and len(weights) == len(scores):
        weighted = [s * (1.0 if w is None else w) for s, w in zip(scores, weights)]
    else:
        weighted = list(scores)

    miss = 1.0
    for score in weighted:
        miss *= 1.0 - normalize_score(score)
    return 1.0 - miss
