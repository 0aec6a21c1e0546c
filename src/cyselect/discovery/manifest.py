"""Load test candidates from a YAML manifest.

Either a bare list or a mapping with a ``tests`` key::

    tests:
      - cypress/e2e/login.cy.ts
      - file: cypress/e2e/cart.cy.ts
        tags: [cart, checkout]
        titles: ["Cart page"]

Relative paths resolve against the manifest's own directory.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, List, Union

import yaml

from cyselect.discovery.discover import DiscoveryError
from cyselect.discovery.models import TestCandidate
from cyselect.tokens import to_posix


def _string_list(value: Any, field_name: str, path: Path) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, list) and all(isinstance(v, str) for v in value):
        return value
    raise DiscoveryError(f"{path}: '{field_name}' must be a string or a list of strings")


def _resolve(file: str, base: Path) -> str:
    return to_posix(os.path.normpath(base / file))


def load_manifest(path: Union[str, Path]) -> List[TestCandidate]:
    path = Path(path)
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise DiscoveryError(f"Cannot read manifest {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise DiscoveryError(f"Failed to parse {path}: {exc}") from exc

    if data is None:
        return []
    if isinstance(data, dict):
        data = data.get("tests") or []
    if not isinstance(data, list):
        raise DiscoveryError(f"{path}: expected a list of tests")

    base = path.resolve().parent
    candidates: List[TestCandidate] = []
    for item in data:
        if isinstance(item, str):
            candidates.append(TestCandidate.from_path(_resolve(item, base)))
        elif isinstance(item, dict) and isinstance(item.get("file"), str):
            candidates.append(
                TestCandidate.build(
                    _resolve(item["file"], base),
                    tags=_string_list(item.get("tags"), "tags", path),
                    titles=_string_list(item.get("titles"), "titles", path),
                )
            )
        else:
            raise DiscoveryError(f"{path}: invalid test entry {item!r}")
    return candidates
