"""Mapping orchestrator — changed files × test candidates → MappingResult.

Each candidate is scored independently: every changed file is run through
the five heuristics, per-heuristic maxima are tracked on their own, and the
best combined score (with the reason taken from the pair that produced it)
becomes the candidate's mapping. Candidates never share state, so they may
be scored in a thread pool; results keep input order either way.
"""

from __future__ import annotations

import posixpath
from concurrent.futures import ThreadPoolExecutor
from functools import partial
from typing import List, Optional, Sequence, Tuple, Union

from cyselect.discovery.models import TestCandidate
from cyselect.git.models import ChangedFile
from cyselect.mapper.directory import directory_score
from cyselect.mapper.import_graph import extract_imports, import_graph_score
from cyselect.mapper.models import (
    HeuristicScores,
    MappingOptions,
    MappingResult,
    TestMapping,
)
from cyselect.mapper.safety import filter_by_safety, get_threshold
from cyselect.mapper.scoring import combine_scores
from cyselect.mapper.similarity import similarity_score
from cyselect.mapper.tags import tag_score
from cyselect.mapper.titles import title_score

TestInput = Union[str, TestCandidate]

_REASON_LABELS: Tuple[str, ...] = (
    "directory match",
    "filename similarity",
    "import dependency",
    "tag match",
    "title match",
)
_REASON_CUTOFF = 0.5
LOW_CONFIDENCE_REASON = "low confidence match"


def as_candidates(tests: Sequence[TestInput]) -> List[TestCandidate]:
    """Resolve bare paths into metadata-free candidates, once, at the boundary."""
    return [TestCandidate.from_path(t) if isinstance(t, str) else t for t in tests]


def infer_project_root(candidates: Sequence[TestCandidate]) -> str:
    """Guess the project root from the first test path.

    The folder holding ``cypress/`` if there is one, else the parent of the
    test's own folder.
    """
    if not candidates:
        return "."
    first = candidates[0].file
    idx = first.find("/cypress")
    if idx > 0:
        return first[:idx]
    return posixpath.dirname(posixpath.dirname(first))


def describe_scores(scores: HeuristicScores) -> str:
    labels = [
        label
        for label, value in zip(_REASON_LABELS, scores.as_list())
        if value > _REASON_CUTOFF
    ]
    return ", ".join(labels) or LOW_CONFIDENCE_REASON


def score_pair(
    changed_file: ChangedFile,
    candidate: TestCandidate,
    project_root: str,
    imports: Optional[Sequence[str]] = None,
) -> HeuristicScores:
    """Run all five heuristics for one (changed file, test) pair."""
    return HeuristicScores(
        directory=directory_score(changed_file, candidate.file),
        similarity=similarity_score(changed_file, candidate.file),
        import_graph=import_graph_score(changed_file, candidate.file, project_root, imports),
        tags=tag_score(changed_file, candidate),
        titles=title_score(changed_file, candidate),
    )


def score_candidate(
    candidate: TestCandidate,
    changed_files: Sequence[ChangedFile],
    options: MappingOptions,
    project_root: str,
) -> Optional[TestMapping]:
    """Best mapping of *candidate* over all changed files, or None if no signal."""
    if not changed_files:
        return None

    # The test's own imports do not change within a run
    imports = extract_imports(candidate.file, project_root)
    weights = options.weights.as_list()

    best_score = 0.0
    best_reason = ""
    maxima = [0.0] * len(_REASON_LABELS)

    for changed_file in changed_files:
        pair = score_pair(changed_file, candidate, project_root, imports)
        values = pair.as_list()
        maxima = [max(current, value) for current, value in zip(maxima, values)]

        combined = combine_scores(values, weights)
        if combined > best_score:
            best_score = combined
            best_reason = describe_scores(pair)

    if best_score == 0.0:
        return None

    return TestMapping(
        test_path=candidate.file,
        score=best_score,
        heuristics=HeuristicScores(*maxima),
        reason=best_reason,
    )


def map_diff_to_tests(
    changed_files: Sequence[ChangedFile],
    tests: Sequence[TestInput],
    options: Optional[MappingOptions] = None,
) -> MappingResult:
    """Score every test against the diff and select by safety level.

    *tests* may mix absolute paths and TestCandidate records. Mappings are
    sorted by score, highest first; ties keep input order.
    """
    options = options or MappingOptions()
    threshold = get_threshold(options.safety_level, options.threshold)

    candidates = as_candidates(tests)
    project_root = options.project_root or infer_project_root(candidates)
    changed = list(changed_files)
    score = partial(
        score_candidate,
        changed_files=changed,
        options=options,
        project_root=project_root,
    )

    if options.max_workers > 1 and len(candidates) > 1:
        with ThreadPoolExecutor(max_workers=options.max_workers) as pool:
            scored = list(pool.map(score, candidates))
    else:
        scored = [score(candidate) for candidate in candidates]

    mappings = [m for m in scored if m is not None]
    # list.sort is stable, reverse included
    mappings.sort(key=lambda m: m.score, reverse=True)

    return MappingResult(
        mappings=mappings,
        selected=filter_by_safety(mappings, threshold),
        safety_level=options.safety_level,
        threshold=threshold,
    )
