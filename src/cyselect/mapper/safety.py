"""Safety levels — threshold lookup and selection."""

from __future__ import annotations

from typing import List, Optional, Sequence

from cyselect.mapper.models import SAFETY_THRESHOLDS, TestMapping
from cyselect.mapper.scoring import normalize_score


def get_threshold(safety_level: str, custom_threshold: Optional[float] = None) -> float:
    """Return the cutoff for *safety_level*; *custom_threshold* wins if given."""
    if custom_threshold is not None:
        return normalize_score(float(custom_threshold))
    try:
        return SAFETY_THRESHOLDS[safety_level]
    except KeyError:
        raise ValueError(
            f"Unknown safety level {safety_level!r}; "
            f"expected one of {', '.join(SAFETY_THRESHOLDS)}"
        ) from None


def is_selected(score: float, threshold: float) -> bool:
    # A zero cutoff still requires some signal
    if threshold == 0.0:
        return score > 0.0
    return score >= threshold


def filter_by_safety(mappings: Sequence[TestMapping], threshold: float) -> List[str]:
    """Test paths of *mappings* that pass *threshold*, in mapping order."""
    return [m.test_path for m in mappings if is_selected(m.score, threshold)]
