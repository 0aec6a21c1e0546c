"""Glob patterns for test discovery — defaults, brace expansion, matching.

Patterns are matched against POSIX paths relative to the project root,
case-insensitively. ``**/`` matches zero or more directories, ``*`` and
``?`` never cross a ``/``.
"""

from __future__ import annotations

import re
from typing import Iterable, List, Pattern, Sequence

from cyselect.tokens import unique

DEFAULT_TEST_PATTERNS: tuple[str, ...] = (
    "cypress/e2e/**/*.{cy,spec,test}.{ts,tsx,js,jsx}",
)

DEFAULT_EXCLUDE_PATTERNS: tuple[str, ...] = (
    "**/node_modules/**",
    "**/dist/**",
    "**/build/**",
    "**/.cache/**",
    "**/.cycache/**",
    "**/.git/**",
    "**/coverage/**",
)

# Innermost group first, so nested braces expand correctly
_BRACE_RE = re.compile(r"\{([^{}]*)\}")


def normalize_pattern(pattern: str) -> str:
    """Drop leading slashes; patterns are always root-relative."""
    return pattern.lstrip("/")


def normalize_patterns(patterns: Iterable[str]) -> List[str]:
    return [normalize_pattern(p) for p in patterns]


def expand_braces(pattern: str) -> List[str]:
    """Expand ``{a,b}`` alternatives.

    >>> expand_braces("*.{cy,spec}.ts")
    ['*.cy.ts', '*.spec.ts']
    """
    m = _BRACE_RE.search(pattern)
    if not m or "," not in m.group(1):
        return [pattern]
    head, tail = pattern[: m.start()], pattern[m.end():]
    expanded: List[str] = []
    for alternative in m.group(1).split(","):
        expanded.extend(expand_braces(head + alternative + tail))
    return unique(expanded)


def glob_to_regex(pattern: str) -> Pattern[str]:
    """Translate one brace-free glob into an anchored, case-insensitive regex."""
    out: List[str] = []
    i, n = 0, len(pattern)
    while i < n:
        if pattern.startswith("**/", i):
            out.append("(?:.*/)?")
            i += 3
            continue
        if pattern.startswith("**", i):
            out.append(".*")
            i += 2
            continue
        c = pattern[i]
        if c == "*":
            out.append("[^/]*")
        elif c == "?":
            out.append("[^/]")
        elif c == "[":
            end = pattern.find("]", i + 1)
            if end == -1:
                out.append(re.escape(c))
            else:
                body = pattern[i + 1:end]
                if body.startswith("!"):
                    body = "^" + body[1:]
                out.append(f"[{body}]")
                i = end
        else:
            out.append(re.escape(c))
        i += 1
    return re.compile("^" + "".join(out) + "$", re.IGNORECASE)


def compile_patterns(patterns: Sequence[str]) -> List[Pattern[str]]:
    """Normalize, brace-expand and compile *patterns*."""
    compiled: List[Pattern[str]] = []
    for pattern in normalize_patterns(patterns):
        compiled.extend(glob_to_regex(p) for p in expand_braces(pattern))
    return compiled


def matches_any(compiled: Sequence[Pattern[str]], rel_path: str) -> bool:
    return any(regex.match(rel_path) for regex in compiled)
