"""Git diff parser — unified diffs, --name-status and --name-only output.

The format is detected once over the whole text. Unified diffs are read by
UnifiedDiffAccumulator, a small state machine that follows the old/new path
of the file currently being read and emits one RawDiffEntry per file.
Hunk bodies are skipped by line count, so content lines that happen to
start with ``---`` or ``+++`` never reach the header handling.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import List, Optional

from cyselect.git.models import ParseResult, RawDiffEntry
from cyselect.git.normalize import normalize_diff

# --- Regex patterns for diff parsing ---

_NAME_STATUS_RE = re.compile(r"^([ACDMRTUX])(\d+)?\t(.+?)(?:\t(.+))?$")
_UNIFIED_MARKER_RE = re.compile(r"^(?:--- |\+\+\+ )", re.MULTILINE)
_DIFF_HEADER_RE = re.compile(
    r'^diff --git (?:a/(.+?)|"a/(.+?)") (?:b/(.+?)|"b/(.+?)")$'
)
_FILE_HEADER_RE = re.compile(r"^(---|\+\+\+)\s+(.+)$")
_HUNK_HEADER_RE = re.compile(
    r"^@@\s+-\d+(?:,(\d+))?\s+\+\d+(?:,(\d+))?\s+@@"
)
_FROM_RE = re.compile(r"^(rename|copy) from (.+)$")
_TO_RE = re.compile(r"^(rename|copy) to (.+)$")
_ESCAPE_RE = re.compile(r"\\([0-7]{3}|.)")

_SIMPLE_ESCAPES = {"n": "\n", "t": "\t", '"': '"', "\\": "\\"}
_DEV_NULL = "/dev/null"


class DiffFormat(str, Enum):
    UNIFIED = "unified"
    NAME_STATUS = "name-status"
    NAME_ONLY = "name-only"


def _unquote(path: str) -> str:
    """Undo git's C-style quoting of paths with unusual characters."""
    if len(path) < 2 or path[0] != '"' or path[-1] != '"':
        return path
    inner = path[1:-1]
    out = bytearray()
    pos = 0
    for m in _ESCAPE_RE.finditer(inner):
        out += inner[pos:m.start()].encode("utf-8")
        esc = m.group(1)
        if len(esc) == 3:
            out.append(int(esc, 8))
        else:
            out += _SIMPLE_ESCAPES.get(esc, esc).encode("utf-8")
        pos = m.end()
    out += inner[pos:].encode("utf-8")
    return out.decode("utf-8", errors="replace")


def _strip_side_prefix(path: str) -> str:
    """Drop the conventional ``a/`` / ``b/`` prefix from a header path."""
    if path.startswith(("a/", "b/")):
        return path[2:]
    return path


def _content_lines(text: str) -> List[str]:
    """Non-blank, non-comment lines of *text*, trimmed."""
    lines = []
    for line in text.strip().splitlines():
        trimmed = line.strip()
        if trimmed and not trimmed.startswith("#"):
            lines.append(trimmed)
    return lines


class UnifiedDiffAccumulator:
    """State machine over the lines of a unified diff.

    Usage::

        acc = UnifiedDiffAccumulator()
        for line in diff_text.splitlines():
            acc.feed(line)
        entries = acc.close()
    """

    def __init__(self) -> None:
        self.entries: List[RawDiffEntry] = []
        self._reset()

    def _reset(self) -> None:
        self.old_path: Optional[str] = None
        self.new_path: Optional[str] = None
        self.has_changes = False
        self._is_copy = False
        self._seen_old_header = False
        self._seen_new_header = False
        self._old_remaining = 0
        self._new_remaining = 0

    # ---- transitions ----

    @property
    def in_hunk(self) -> bool:
        return self._old_remaining > 0 or self._new_remaining > 0

    def feed(self, line: str) -> None:
        """Consume one line of diff text."""
        line = line.rstrip("\r")

        if self.in_hunk and self._consume_hunk_line(line):
            return

        # --- diff --git header → new file context ---
        if line.startswith("diff --git "):
            self.finalize()
            m = _DIFF_HEADER_RE.match(line)
            if m:
                bare_old, quoted_old, bare_new, quoted_new = m.groups()
                self.old_path = bare_old if bare_old is not None else _unquote(f'"{quoted_old}"')
                self.new_path = bare_new if bare_new is not None else _unquote(f'"{quoted_new}"')
                self.has_changes = True
            return

        # --- File headers (--- a/ and +++ b/) ---
        header = _FILE_HEADER_RE.match(line)
        if header:
            self._file_header(header.group(1), header.group(2))
            return

        # --- Hunk header → skip the body by line count ---
        hunk = _HUNK_HEADER_RE.match(line)
        if hunk:
            self._old_remaining = int(hunk.group(1)) if hunk.group(1) is not None else 1
            self._new_remaining = int(hunk.group(2)) if hunk.group(2) is not None else 1
            return

        # --- Extended headers ---
        if line.startswith("new file mode "):
            self.old_path = None
            self.has_changes = True
            return
        if line.startswith("deleted file mode "):
            self.new_path = None
            self.has_changes = True
            return
        if (m := _FROM_RE.match(line)):
            self._is_copy = m.group(1) == "copy"
            self.old_path = _unquote(m.group(2))
            self.has_changes = True
            return
        if (m := _TO_RE.match(line)):
            self._is_copy = m.group(1) == "copy"
            self.new_path = _unquote(m.group(2))
            self.has_changes = True
            return
        # index, mode, "Binary files ... differ", "GIT binary patch" and
        # anything else carry no path information.

    def _consume_hunk_line(self, line: str) -> bool:
        """Count *line* against the open hunk. False means the hunk ended early."""
        if line.startswith("\\"):
            return True  # "\ No newline at end of file"
        if line.startswith("+"):
            self._new_remaining -= 1
        elif line.startswith("-"):
            self._old_remaining -= 1
        elif line.startswith(" ") or line == "":
            self._old_remaining -= 1
            self._new_remaining -= 1
        else:
            # Truncated hunk; let the line be read as a header
            self._old_remaining = 0
            self._new_remaining = 0
            return False
        self._old_remaining = max(self._old_remaining, 0)
        self._new_remaining = max(self._new_remaining, 0)
        return True

    def _file_header(self, marker: str, raw: str) -> None:
        # Plain `diff -u` output appends a tab and a timestamp
        path = _unquote(raw.split("\t", 1)[0].rstrip())
        if marker == "---":
            if self._seen_old_header and self._seen_new_header:
                # Next file of a stream without `diff --git` lines
                self.finalize()
            self._seen_old_header = True
            self.old_path = None if path == _DEV_NULL else _strip_side_prefix(path)
        else:
            self._seen_new_header = True
            self.new_path = None if path == _DEV_NULL else _strip_side_prefix(path)
        self.has_changes = True

    def finalize(self) -> None:
        """Emit the in-flight file (if any) and reset the state."""
        if self.has_changes:
            entry = self._classify()
            if entry is not None:
                self.entries.append(entry)
        self._reset()

    def close(self) -> List[RawDiffEntry]:
        """Flush the last file and return every entry read so far."""
        self.finalize()
        return self.entries

    def _classify(self) -> Optional[RawDiffEntry]:
        old, new = self.old_path, self.new_path
        if old is not None and new is not None:
            if old == new:
                return RawDiffEntry(status_code="M", new_path=new)
            return RawDiffEntry(
                status_code="C" if self._is_copy else "R",
                new_path=new,
                old_path=old,
            )
        if new is not None:
            return RawDiffEntry(status_code="A", new_path=new)
        if old is not None:
            return RawDiffEntry(status_code="D", new_path=old, old_path=old)
        return None


# ── format-specific parsers ──────────────────────────────────────────────────


def parse_unified_diff(diff_text: str) -> List[RawDiffEntry]:
    acc = UnifiedDiffAccumulator()
    for line in diff_text.splitlines():
        acc.feed(line)
    return acc.close()


def parse_name_status(diff_text: str) -> List[RawDiffEntry]:
    """Parse ``git diff --name-status`` output. Malformed lines are skipped."""
    entries: List[RawDiffEntry] = []
    for line in _content_lines(diff_text):
        m = _NAME_STATUS_RE.match(line)
        if not m:
            continue
        code, score, first, second = m.groups()
        similarity = int(score) if score else None

        if code == "A":
            entries.append(RawDiffEntry(status_code="A", new_path=first))
        elif code in ("M", "T"):
            # Type changes count as modifications
            entries.append(RawDiffEntry(status_code="M", new_path=first))
        elif code == "D":
            entries.append(RawDiffEntry(status_code="D", new_path=first, old_path=first))
        elif code in ("R", "C"):
            entries.append(
                RawDiffEntry(
                    status_code=code,
                    new_path=second or first,
                    old_path=first,
                    similarity=similarity,
                )
            )
        # U (unmerged) and X (unknown) are not actionable changes
    return entries


def parse_name_only(diff_text: str) -> List[RawDiffEntry]:
    """Parse ``git diff --name-only`` output. Status is unknown, so M."""
    return [RawDiffEntry(status_code="M", new_path=line) for line in _content_lines(diff_text)]


def detect_format(diff_text: str) -> DiffFormat:
    """Guess which of the three textual shapes *diff_text* is in."""
    trimmed = diff_text.strip()
    if "diff --git" in trimmed or _UNIFIED_MARKER_RE.search(trimmed):
        return DiffFormat.UNIFIED
    lines = _content_lines(trimmed)
    if lines and _NAME_STATUS_RE.match(lines[0]):
        return DiffFormat.NAME_STATUS
    return DiffFormat.NAME_ONLY


def parse_raw_diff(diff_text: str) -> List[RawDiffEntry]:
    """Auto-detect the format of *diff_text* and return raw entries."""
    if not diff_text or not diff_text.strip():
        return []
    diff_text = diff_text.lstrip("\ufeff")

    fmt = detect_format(diff_text)
    if fmt is DiffFormat.UNIFIED:
        return parse_unified_diff(diff_text)
    if fmt is DiffFormat.NAME_STATUS:
        return parse_name_status(diff_text)
    return parse_name_only(diff_text)


def parse_diff(diff_text: str) -> ParseResult:
    """Parse git diff output of any supported shape into changed files.

    Never raises: a failure degrades to an empty result with a warning.
    """
    warnings: List[str] = []
    try:
        raw_entries = parse_raw_diff(diff_text)
        if not raw_entries and diff_text and diff_text.strip():
            warnings.append("Diff output provided but no files were parsed")
        files = normalize_diff(raw_entries)
    except Exception as exc:
        warnings.append(f"Error parsing diff: {exc}")
        return ParseResult(files=[], warnings=warnings)
    return ParseResult(files=files, warnings=warnings)
