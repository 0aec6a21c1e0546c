"""Raw diff entry normalisation and de-duplication."""

from __future__ import annotations

from typing import List, Set

from cyselect.git.models import ChangedFile, FileStatus, RawDiffEntry


def normalize_entry(entry: RawDiffEntry) -> ChangedFile:
    """Map one raw entry to a ChangedFile according to its status code."""
    code = entry.status_code
    old_path, new_path = entry.old_path, entry.new_path

    if code == "A":
        return ChangedFile(new_path=new_path or "", status=FileStatus.ADDED)
    if code in ("M", "T"):
        return ChangedFile(new_path=new_path or "", status=FileStatus.MODIFIED)
    if code == "D":
        path = old_path or new_path or ""
        return ChangedFile(new_path=path, status=FileStatus.DELETED, old_path=path)
    if code == "R":
        return ChangedFile(
            new_path=new_path or old_path or "",
            status=FileStatus.RENAMED,
            old_path=old_path,
        )
    if code == "C":
        # A copy is a new file; the source is kept for traceability
        return ChangedFile(new_path=new_path or "", status=FileStatus.ADDED, old_path=old_path)
    return ChangedFile(new_path=new_path or "", status=FileStatus.MODIFIED)


def dedup_key(changed: ChangedFile) -> str:
    if changed.old_path:
        return f"{changed.old_path} -> {changed.new_path}"
    return changed.new_path


def normalize_diff(entries: List[RawDiffEntry]) -> List[ChangedFile]:
    """Normalise raw entries, dropping pathless ones and duplicates.

    Dedup key: ``"<old> -> <new>"`` when an old path is set, else the new
    path. The first occurrence wins.
    """
    normalized: List[ChangedFile] = []
    seen: Set[str] = set()

    for entry in entries:
        if not entry.new_path and not entry.old_path:
            continue
        changed = normalize_entry(entry)
        if not changed.new_path:
            continue
        key = dedup_key(changed)
        if key in seen:
            continue
        seen.add(key)
        normalized.append(changed)

    return normalized
