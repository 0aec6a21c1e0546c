"""Configuration schema — dataclasses for every config section."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Literal, Optional

from cyselect.mapper.models import HeuristicWeights, MappingOptions, SafetyLevel

OutputFormat = Literal["human", "json"]
OUTPUT_FORMATS = ("human", "json")


@dataclass
class SelectionConfig:
    safety_level: SafetyLevel = "medium"
    threshold: Optional[float] = None  # overrides safety_level when set


_DEFAULT_WEIGHTS = HeuristicWeights()


@dataclass
class WeightsConfig:
    # Defaults come from the mapper's HeuristicWeights
    directory: float = _DEFAULT_WEIGHTS.directory
    similarity: float = _DEFAULT_WEIGHTS.similarity
    import_graph: float = _DEFAULT_WEIGHTS.import_graph
    tags: float = _DEFAULT_WEIGHTS.tags
    titles: float = _DEFAULT_WEIGHTS.titles


@dataclass
class DiscoveryConfig:
    project_root: str = "."
    test_patterns: List[str] = field(default_factory=list)  # empty = defaults
    exclude: List[str] = field(default_factory=list)  # added to the defaults
    manifest: Optional[str] = None  # YAML candidate list; replaces the tree walk


@dataclass
class GitConfig:
    default_base: Optional[str] = None  # None = detect origin/main, main, ...


@dataclass
class OutputConfig:
    format: OutputFormat = "human"
    verbose: bool = False


@dataclass
class CySelectConfig:
    selection: SelectionConfig = field(default_factory=SelectionConfig)
    weights: WeightsConfig = field(default_factory=WeightsConfig)
    discovery: DiscoveryConfig = field(default_factory=DiscoveryConfig)
    git: GitConfig = field(default_factory=GitConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

    def heuristic_weights(self) -> HeuristicWeights:
        w = self.weights
        return HeuristicWeights(
            directory=w.directory,
            similarity=w.similarity,
            import_graph=w.import_graph,
            tags=w.tags,
            titles=w.titles,
        )

    def mapping_options(self, max_workers: int = 1) -> MappingOptions:
        return MappingOptions(
            safety_level=self.selection.safety_level,
            threshold=self.selection.threshold,
            weights=self.heuristic_weights(),
            project_root=self.discovery.project_root,
            max_workers=max_workers,
        )
