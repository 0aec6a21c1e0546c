"""Mapping models, safety thresholds and the weights value object."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Literal, Optional, Tuple

SafetyLevel = Literal["high", "moderate", "medium", "low"]

SAFETY_THRESHOLDS: Dict[str, float] = {
    "high": 0.0,  # anything with signal
    "moderate": 0.2,
    "medium": 0.4,
    "low": 0.7,
}

SAFETY_LEVELS: Tuple[str, ...] = tuple(SAFETY_THRESHOLDS)


@dataclass(frozen=True)
class HeuristicWeights:
    """Per-heuristic multipliers applied before score combination."""

    directory: float = 1.0
    similarity: float = 1.0
    import_graph: float = 1.0
    tags: float = 0.5
    titles: float = 0.4

    def as_list(self) -> List[float]:
        return [self.directory, self.similarity, self.import_graph, self.tags, self.titles]


@dataclass(frozen=True)
class MappingOptions:
    """Caller-supplied configuration for one mapping run."""

    safety_level: SafetyLevel = "medium"
    threshold: Optional[float] = None  # overrides safety_level when set
    weights: HeuristicWeights = field(default_factory=HeuristicWeights)
    project_root: Optional[str] = None  # inferred from the test paths when unset
    max_workers: int = 1


@dataclass(frozen=True)
class HeuristicScores:
    directory: float = 0.0
    similarity: float = 0.0
    import_graph: float = 0.0
    tags: float = 0.0
    titles: float = 0.0

    def as_list(self) -> List[float]:
        return [self.directory, self.similarity, self.import_graph, self.tags, self.titles]


@dataclass(frozen=True)
class TestMapping:
    """Combined and per-heuristic scores for one test file."""

    __test__ = False

    test_path: str
    score: float
    heuristics: HeuristicScores
    reason: Optional[str] = None


@dataclass(frozen=True)
class MappingResult:
    """Complete result of a mapping run."""

    mappings: List[TestMapping] = field(default_factory=list)
    selected: List[str] = field(default_factory=list)
    safety_level: SafetyLevel = "medium"
    threshold: float = SAFETY_THRESHOLDS["medium"]

    @property
    def total_mappings(self) -> int:
        return len(self.mappings)

    def mapping_for(self, test_path: str) -> Optional[TestMapping]:
        for mapping in self.mappings:
            if mapping.test_path == test_path:
                return mapping
        return None
