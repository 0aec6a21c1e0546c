"""Mapping engine — heuristics, score combination, safety selection."""

from cyselect.mapper.directory import directory_score
from cyselect.mapper.engine import as_candidates, infer_project_root, map_diff_to_tests
from cyselect.mapper.import_graph import extract_imports, import_graph_score
from cyselect.mapper.models import (
    SAFETY_LEVELS,
    SAFETY_THRESHOLDS,
    HeuristicScores,
    HeuristicWeights,
    MappingOptions,
    MappingResult,
    SafetyLevel,
    TestMapping,
)
from cyselect.mapper.safety import filter_by_safety, get_threshold
from cyselect.mapper.scoring import combine_scores, normalize_score
from cyselect.mapper.similarity import similarity_score
from cyselect.mapper.tags import tag_score
from cyselect.mapper.titles import title_score

__all__ = [
    "SAFETY_LEVELS",
    "SAFETY_THRESHOLDS",
    "HeuristicScores",
    "HeuristicWeights",
    "MappingOptions",
    "MappingResult",
    "SafetyLevel",
    "TestMapping",
    "as_candidates",
    "combine_scores",
    "directory_score",
    "extract_imports",
    "filter_by_safety",
    "get_threshold",
    "import_graph_score",
    "infer_project_root",
    "map_diff_to_tests",
    "normalize_score",
    "similarity_score",
    "tag_score",
    "title_score",
]
