"""JSON reporter for CI pipelines."""

from __future__ import annotations

import json
from typing import Any, Dict, List

from cyselect.mapper.models import MappingResult


def to_dict(result: MappingResult) -> Dict[str, Any]:
    """Convert MappingResult to a JSON-serialisable dict."""
    mappings: List[Dict[str, Any]] = []
    for m in result.mappings:
        h = m.heuristics
        mappings.append({
            "testPath": m.test_path,
            "score": m.score,
            "heuristics": {
                "directory": h.directory,
                "similarity": h.similarity,
                "importGraph": h.import_graph,
                "tags": h.tags,
                "titles": h.titles,
            },
            "reason": m.reason,
        })

    return {
        "selected": list(result.selected),
        "count": len(result.selected),
        "safetyLevel": result.safety_level,
        "threshold": result.threshold,
        "mappings": mappings,
    }


def render(result: MappingResult) -> str:
    """Return formatted JSON string."""
    return json.dumps(to_dict(result), indent=2)
