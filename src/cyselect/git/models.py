"""Data models for diff parsing."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class FileStatus(str, Enum):
    ADDED = "added"
    MODIFIED = "modified"
    DELETED = "deleted"
    RENAMED = "renamed"


@dataclass(frozen=True)
class RawDiffEntry:
    """A file entry as read from git output, before normalisation."""

    status_code: str  # A, M, D, R, C (T is folded into M by the parser)
    new_path: str
    old_path: Optional[str] = None
    similarity: Optional[int] = None  # rename/copy score, 0-100


@dataclass(frozen=True)
class ChangedFile:
    """A normalised changed file — the unit every heuristic consumes."""

    new_path: str
    status: FileStatus = FileStatus.MODIFIED
    old_path: Optional[str] = None  # set on deletes, renames and copies

    @property
    def source_path(self) -> str:
        """Path the heuristics compare against (new path, else old path)."""
        return self.new_path or self.old_path or ""


@dataclass(frozen=True)
class ParseResult:
    """Normalised files plus any warnings raised while parsing."""

    files: List[ChangedFile] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
