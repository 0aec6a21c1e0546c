"""Walk a project tree and collect Cypress spec files."""

from __future__ import annotations

import os
from pathlib import Path
from typing import List, Optional, Sequence, Set, Union

from cyselect.discovery.metadata import extract_test_metadata
from cyselect.discovery.models import TestCandidate
from cyselect.discovery.patterns import (
    DEFAULT_EXCLUDE_PATTERNS,
    DEFAULT_TEST_PATTERNS,
    compile_patterns,
    matches_any,
)
from cyselect.tokens import to_posix


class DiscoveryError(Exception):
    """Raised when the project root or a candidate manifest cannot be read."""


def find_test_files(
    project_root: Union[str, Path],
    test_patterns: Optional[Sequence[str]] = None,
    exclude: Optional[Sequence[str]] = None,
) -> List[str]:
    """Absolute POSIX paths of matching files, sorted and de-duplicated."""
    root = Path(project_root).resolve()
    if not root.is_dir():
        raise DiscoveryError(f"Project root not found: {project_root}")

    include = compile_patterns(test_patterns or DEFAULT_TEST_PATTERNS)
    excluded = compile_patterns([*DEFAULT_EXCLUDE_PATTERNS, *(exclude or [])])

    found: Set[str] = set()
    visited: Set[str] = set()
    for dirpath, dirnames, filenames in os.walk(root, followlinks=True):
        real = os.path.realpath(dirpath)
        if real in visited:
            # Symlink cycle
            dirnames[:] = []
            continue
        visited.add(real)

        rel_dir = Path(dirpath).relative_to(root).as_posix()
        prefix = "" if rel_dir == "." else rel_dir + "/"
        dirnames[:] = [d for d in dirnames if not matches_any(excluded, f"{prefix}{d}/")]

        for name in filenames:
            rel_path = prefix + name
            if matches_any(include, rel_path) and not matches_any(excluded, rel_path):
                found.add(to_posix(os.path.join(dirpath, name)))

    return sorted(found)


def discover_tests(
    project_root: Union[str, Path],
    test_patterns: Optional[Sequence[str]] = None,
    exclude: Optional[Sequence[str]] = None,
    extract_metadata: bool = True,
) -> List[TestCandidate]:
    """Discover spec files under *project_root*.

    *exclude* adds to the default exclusions (node_modules, dist, ...).
    With *extract_metadata* off, candidates carry only their path.
    """
    files = find_test_files(project_root, test_patterns, exclude)
    if not extract_metadata:
        return [TestCandidate.from_path(f) for f in files]
    return [extract_test_metadata(f) for f in files]
