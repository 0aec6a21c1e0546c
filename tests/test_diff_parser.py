"""Tests for the git diff parser — format detection, the unified-diff state machine, edge cases."""

import textwrap

from cyselect.git.diff_parser import (
    DiffFormat,
    UnifiedDiffAccumulator,
    detect_format,
    parse_diff,
    parse_name_only,
    parse_name_status,
    parse_raw_diff,
    parse_unified_diff,
)
from cyselect.git.models import ChangedFile, FileStatus, RawDiffEntry


class TestDetectFormat:
    def test_git_header_is_unified(self, sample_diff_modified):
        assert detect_format(sample_diff_modified) is DiffFormat.UNIFIED

    def test_plain_file_headers_are_unified(self):
        text = "--- a/x.ts\n+++ b/x.ts\n@@ -1 +1 @@\n-a\n+b\n"
        assert detect_format(text) is DiffFormat.UNIFIED

    def test_name_status(self):
        assert detect_format("M\tsrc/a.ts\n") is DiffFormat.NAME_STATUS

    def test_name_status_with_score(self):
        assert detect_format("R100\ta.ts\tb.ts") is DiffFormat.NAME_STATUS

    def test_name_only(self):
        assert detect_format("src/a.ts\nsrc/b.ts\n") is DiffFormat.NAME_ONLY

    def test_leading_comments_are_ignored(self):
        assert detect_format("# changed files\nA\tsrc/a.ts\n") is DiffFormat.NAME_STATUS


class TestNameStatus:
    def test_all_codes(self, sample_name_status):
        entries = parse_name_status(sample_name_status)
        assert entries == [
            RawDiffEntry(status_code="A", new_path="src/new.ts"),
            RawDiffEntry(status_code="M", new_path="src/modified.ts"),
            RawDiffEntry(status_code="D", new_path="src/removed.ts", old_path="src/removed.ts"),
            RawDiffEntry(
                status_code="R", new_path="src/new-name.ts", old_path="src/old-name.ts", similarity=87
            ),
            RawDiffEntry(
                status_code="C", new_path="src/copy.ts", old_path="src/base.ts", similarity=75
            ),
            RawDiffEntry(status_code="M", new_path="src/link.ts"),
        ]

    def test_rename_without_second_path(self):
        entries = parse_name_status("R100\tsrc/only.ts")
        assert entries == [
            RawDiffEntry(status_code="R", new_path="src/only.ts", old_path="src/only.ts", similarity=100)
        ]

    def test_unmerged_and_unknown_are_dropped(self):
        assert parse_name_status("U\tsrc/conflict.ts\nX\tsrc/odd.ts\n") == []

    def test_malformed_lines_are_skipped(self):
        entries = parse_name_status("M\tsrc/a.ts\nnot a status line\nM src/b.ts\n")
        assert [e.new_path for e in entries] == ["src/a.ts"]

    def test_blank_lines_and_whitespace(self):
        entries = parse_name_status("\n\n  M\tsrc/a.ts  \n\n")
        assert entries == [RawDiffEntry(status_code="M", new_path="src/a.ts")]


class TestNameOnly:
    def test_everything_is_modified(self):
        entries = parse_name_only("src/a.ts\n\nsrc/b.ts\n")
        assert entries == [
            RawDiffEntry(status_code="M", new_path="src/a.ts"),
            RawDiffEntry(status_code="M", new_path="src/b.ts"),
        ]


class TestUnifiedDiff:
    def test_modified_file(self, sample_diff_modified):
        entries = parse_unified_diff(sample_diff_modified)
        assert entries == [RawDiffEntry(status_code="M", new_path="src/components/Button.tsx")]

    def test_new_file(self, sample_diff_new_file):
        entries = parse_unified_diff(sample_diff_new_file)
        assert entries == [RawDiffEntry(status_code="A", new_path="src/pages/Cart.tsx")]

    def test_deleted_file(self, sample_diff_deleted):
        entries = parse_unified_diff(sample_diff_deleted)
        assert entries == [
            RawDiffEntry(status_code="D", new_path="src/legacy/Banner.tsx", old_path="src/legacy/Banner.tsx")
        ]

    def test_renamed_file(self, sample_diff_rename):
        entries = parse_unified_diff(sample_diff_rename)
        assert entries == [
            RawDiffEntry(status_code="R", new_path="src/auth/SignIn.tsx", old_path="src/auth/Login.tsx")
        ]

    def test_pure_rename_without_hunks(self):
        diff = textwrap.dedent("""\
            diff --git a/old.ts b/new.ts
            similarity index 100%
            rename from old.ts
            rename to new.ts
        """)
        assert parse_unified_diff(diff) == [
            RawDiffEntry(status_code="R", new_path="new.ts", old_path="old.ts")
        ]

    def test_copied_file(self):
        diff = textwrap.dedent("""\
            diff --git a/src/base.ts b/src/copy.ts
            similarity index 90%
            copy from src/base.ts
            copy to src/copy.ts
        """)
        assert parse_unified_diff(diff) == [
            RawDiffEntry(status_code="C", new_path="src/copy.ts", old_path="src/base.ts")
        ]

    def test_binary_file(self, sample_diff_binary):
        entries = parse_unified_diff(sample_diff_binary)
        assert entries == [RawDiffEntry(status_code="A", new_path="public/logo.png")]

    def test_mode_only_change(self, sample_diff_mode_only):
        entries = parse_unified_diff(sample_diff_mode_only)
        assert entries == [RawDiffEntry(status_code="M", new_path="scripts/build.sh")]

    def test_hunk_lines_that_look_like_headers(self, sample_diff_multi):
        entries = parse_unified_diff(sample_diff_multi)
        assert [e.new_path for e in entries] == ["README.md", "src/api/client.ts"]
        assert all(e.status_code == "M" for e in entries)

    def test_plain_diff_u_stream(self):
        diff = textwrap.dedent("""\
            --- a/one.ts\t2024-01-01 10:00:00
            +++ b/one.ts\t2024-01-01 10:05:00
            @@ -1 +1 @@
            -a
            +b
            --- a/two.ts
            +++ b/two.ts
            @@ -1 +1 @@
            -c
            +d
        """)
        assert parse_unified_diff(diff) == [
            RawDiffEntry(status_code="M", new_path="one.ts"),
            RawDiffEntry(status_code="M", new_path="two.ts"),
        ]

    def test_quoted_paths(self):
        diff = textwrap.dedent("""\
            diff --git "a/docs/my file.md" "b/docs/my file.md"
            index 1111111..2222222 100644
            --- "a/docs/my file.md"
            +++ "b/docs/my file.md"
            @@ -1 +1 @@
            -a
            +b
        """)
        assert parse_unified_diff(diff) == [
            RawDiffEntry(status_code="M", new_path="docs/my file.md")
        ]

    def test_octal_escaped_path(self):
        diff = '--- "a/caf\\303\\251.ts"\n+++ "b/caf\\303\\251.ts"\n@@ -1 +1 @@\n-a\n+b\n'
        assert parse_unified_diff(diff) == [RawDiffEntry(status_code="M", new_path="café.ts")]

    def test_crlf_line_endings(self, sample_diff_modified):
        crlf = sample_diff_modified.replace("\n", "\r\n")
        assert parse_unified_diff(crlf) == parse_unified_diff(sample_diff_modified)

    def test_truncated_hunk_does_not_swallow_next_file(self):
        diff = textwrap.dedent("""\
            diff --git a/a.ts b/a.ts
            --- a/a.ts
            +++ b/a.ts
            @@ -1,10 +1,10 @@
            -only one line of a ten line hunk
            diff --git a/b.ts b/b.ts
            --- a/b.ts
            +++ b/b.ts
        """)
        assert [e.new_path for e in parse_unified_diff(diff)] == ["a.ts", "b.ts"]


class TestAccumulator:
    def test_feed_and_close(self):
        acc = UnifiedDiffAccumulator()
        for line in ("diff --git a/x.ts b/x.ts", "--- a/x.ts", "+++ b/x.ts"):
            acc.feed(line)
        assert acc.entries == []  # nothing emitted before finalize
        assert acc.close() == [RawDiffEntry(status_code="M", new_path="x.ts")]

    def test_in_hunk_tracks_counts(self):
        acc = UnifiedDiffAccumulator()
        acc.feed("--- a/x.ts")
        acc.feed("+++ b/x.ts")
        acc.feed("@@ -1,2 +1,1 @@")
        assert acc.in_hunk
        acc.feed("-gone")
        acc.feed("-also gone")
        assert acc.in_hunk
        acc.feed("+new")
        assert not acc.in_hunk

    def test_header_without_changes_emits_nothing(self):
        acc = UnifiedDiffAccumulator()
        acc.feed("index 1234567..abcdef0")
        assert acc.close() == []


class TestParseRawDiff:
    def test_empty_input(self):
        assert parse_raw_diff("") == []
        assert parse_raw_diff("   \n\n") == []

    def test_bom_is_ignored(self):
        assert parse_raw_diff("\ufeffM\tsrc/a.ts") == [RawDiffEntry(status_code="M", new_path="src/a.ts")]


class TestParseDiff:
    def test_scenario_name_status(self):
        result = parse_diff("A\tsrc/new.ts\nM\tsrc/modified.ts")
        assert result.files == [
            ChangedFile(new_path="src/new.ts", status=FileStatus.ADDED),
            ChangedFile(new_path="src/modified.ts", status=FileStatus.MODIFIED),
        ]
        assert result.warnings == []

    def test_scenario_unified(self):
        diff = textwrap.dedent("""\
            --- a/Button.tsx
            +++ b/Button.tsx
            @@ -1 +1 @@
            -old
            +new
        """)
        result = parse_diff(diff)
        assert result.files == [ChangedFile(new_path="Button.tsx", status=FileStatus.MODIFIED)]

    def test_idempotent(self, sample_diff_multi, sample_name_status):
        for text in (sample_diff_multi, sample_name_status):
            assert parse_diff(text) == parse_diff(text)

    def test_rename_normalised(self, sample_diff_rename):
        result = parse_diff(sample_diff_rename)
        assert result.files == [
            ChangedFile(new_path="src/auth/SignIn.tsx", status=FileStatus.RENAMED, old_path="src/auth/Login.tsx")
        ]

    def test_empty_input_has_no_warning(self):
        result = parse_diff("")
        assert result.files == []
        assert result.warnings == []

    def test_unparseable_input_warns(self):
        result = parse_diff("# only a comment\n")
        assert result.files == []
        assert result.warnings == ["Diff output provided but no files were parsed"]

    def test_duplicates_collapse(self):
        result = parse_diff("M\tsrc/a.ts\nM\tsrc/a.ts\nA\tsrc/b.ts\n")
        assert [f.new_path for f in result.files] == ["src/a.ts", "src/b.ts"]
