"""Import graph heuristic — does the test file import the changed file?

The test source is scanned with regexes for ES module imports and CommonJS
``require`` calls; no JavaScript parser is involved.
"""

from __future__ import annotations

import os
import posixpath
import re
from pathlib import Path
from typing import List, Optional, Sequence

from cyselect.git.models import ChangedFile
from cyselect.tokens import to_posix

_IMPORT_RE = re.compile(
    r"\bimport\s+(?:type\s+)?"
    r"(?:(?:\{[^}]*\}|\*\s+as\s+\w+|\w+)(?:\s*,\s*(?:\{[^}]*\}|\*\s+as\s+\w+|\w+))*\s+from\s+)?"
    r"[\"']([^\"']+)[\"']"
)
_REQUIRE_RE = re.compile(r"\brequire\s*\(\s*[\"']([^\"']+)[\"']\s*\)")
_EXTENSION_RE = re.compile(r"\.[^./]+$")
_INDEX_FILE_RE = re.compile(r"/index\.[^./]+$")


def resolve_path(*parts: str) -> str:
    """Join and normalise *parts* into an absolute POSIX path."""
    joined = posixpath.join(to_posix(os.getcwd()), *(to_posix(p) for p in parts))
    return posixpath.normpath(joined)


def normalize_import_path(specifier: str, test_dir: str, project_root: str) -> Optional[str]:
    """Resolve an import specifier to an absolute path, or None for packages."""
    if specifier.startswith((".", "/")):
        return resolve_path(test_dir, specifier)

    # Bare specifiers may be root-relative imports; scoped and vendored
    # packages never are.
    if "node_modules" in specifier or "@" in specifier:
        return None
    root = resolve_path(project_root)
    resolved = resolve_path(root, specifier)
    if resolved == root or resolved.startswith(root.rstrip("/") + "/"):
        return resolved
    return None


def extract_imports(test_path: str, project_root: str) -> List[str]:
    """Return the resolved import paths of *test_path*; [] if unreadable."""
    try:
        content = Path(test_path).read_text(encoding="utf-8", errors="replace")
    except OSError:
        return []

    test_dir = posixpath.dirname(resolve_path(test_path))
    imports: List[str] = []
    for pattern in (_IMPORT_RE, _REQUIRE_RE):
        for m in pattern.finditer(content):
            resolved = normalize_import_path(m.group(1), test_dir, project_root)
            if resolved:
                imports.append(resolved)
    return imports


def matches_import(changed_path: str, import_paths: Sequence[str]) -> bool:
    """True if *changed_path* is one of *import_paths*.

    Also matches with extensions stripped, and ``dir`` against
    ``dir/index.<ext>`` in either direction.
    """
    changed = posixpath.normpath(to_posix(changed_path))
    changed_no_ext = _EXTENSION_RE.sub("", changed)
    changed_no_index = _INDEX_FILE_RE.sub("", changed)

    for import_path in import_paths:
        imported = posixpath.normpath(to_posix(import_path))
        if imported == changed:
            return True
        imported_no_ext = _EXTENSION_RE.sub("", imported)
        if imported_no_ext == changed_no_ext:
            return True
        if changed_no_index == imported_no_ext or _INDEX_FILE_RE.sub("", imported) == changed_no_ext:
            return True
    return False


def import_graph_score(
    changed_file: ChangedFile,
    test_path: str,
    project_root: str,
    imports: Optional[Sequence[str]] = None,
) -> float:
    """1.0 when the test imports the changed file (or its pre-rename path).

    *imports* may carry the result of ``extract_imports`` for this test so
    the file is read once per run instead of once per changed file.
    """
    source_path = changed_file.source_path
    if not source_path:
        return 0.0

    if imports is None:
        imports = extract_imports(test_path, project_root)
    if not imports:
        return 0.0

    if matches_import(resolve_path(project_root, source_path), imports):
        return 1.0
    if changed_file.old_path and matches_import(
        resolve_path(project_root, changed_file.old_path), imports
    ):
        return 1.0
    return 0.0
