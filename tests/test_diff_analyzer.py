import pytest
from conftest import SAMPLE_DIFF

from rag_review.core.models import FileStatus, Language
from rag_review.retrieval.diff_analyzer import extract_paths, parse, parse_hunk_header

ADDED_FILE = """diff --git a/lib/new.py b/lib/new.py
new file mode 100644
index 0000000..e69de29
--- /dev/null
+++ b/lib/new.py
@@ -0,0 +1,2 @@
+def created():
+    return True
"""

DELETED_FILE = """diff --git a/lib/old.py b/lib/old.py
deleted file mode 100644
index e69de29..0000000
--- a/lib/old.py
+++ /dev/null
@@ -1,2 +0,0 @@
-def removed():
-    return False
"""

RENAMED_FILE = """diff --git a/lib/before.ex b/lib/after.ex
similarity index 100%
rename from lib/before.ex
rename to lib/after.ex
"""

PLAIN_DIFF = """--- src/app.js\t2024-01-01 10:00:00.000000000 +0000
+++ src/app.js\t2024-01-02 10:00:00.000000000 +0000
@@ -1,3 +1,3 @@
 const a = 1;
--- a comment that starts like a header
+const b = 2;
"""


class TestHunkHeader:

    def test_full_header(self):
        assert parse_hunk_header(" -10,5 +12,7 @@ def handler") == (10, 5, 12, 7, "def handler")

    def test_missing_counts_default_to_one(self):
        assert parse_hunk_header(" -3 +4 @@") == (3, 1, 4, 1, "")

    @pytest.mark.parametrize("header", ["", " garbage", " -1", "@@ @@"])
    def test_unparsable_header_defaults(self, header):
        assert parse_hunk_header(header) == (1, 1, 1, 1, "")

    def test_zero_counts_kept(self):
        assert parse_hunk_header(" -0,0 +1,2 @@") == (0, 0, 1, 2, "")


class TestParse:

    def test_hunk_fields(self):
        diff = "diff --git a/app.py b/app.py\n--- a/app.py\n+++ b/app.py\n@@ -10,5 +12,7 @@ def handler\n+x\n"
        [hunk] = parse(diff).hunks
        assert (hunk.old_start, hunk.old_count, hunk.new_start, hunk.new_count, hunk.context) == (10, 5, 12, 7, "def handler")

    def test_modified_file(self):
        analysis = parse(SAMPLE_DIFF)
        [changed] = analysis.files
        assert changed.path == "billing/invoice.py"
        assert changed.old_path == "billing/invoice.py"
        assert changed.status is FileStatus.MODIFIED
        assert changed.language is Language.PYTHON
        assert analysis.added_lines == 2
        assert analysis.removed_lines == 1
        assert [(s.file, s.name) for s in analysis.modified_symbols] == [("billing/invoice.py", "class Invoice:")]

    def test_lines_keep_markers(self):
        [hunk] = parse(SAMPLE_DIFF).hunks
        assert hunk.lines == [
            "     def total(self, tax_rate):",
            "-        return self.amount * (1 + tax_rate)",
            "+        subtotal = self.amount * (1 + tax_rate)",
            "+        return _round_cents(subtotal)",
        ]
        assert hunk.file_path == "billing/invoice.py"

    def test_added_deleted_renamed(self):
        analysis = parse(ADDED_FILE + DELETED_FILE + RENAMED_FILE)
        assert [(f.status, f.path, f.old_path) for f in analysis.files] == [
            (FileStatus.ADDED, "lib/new.py", None),
            (FileStatus.DELETED, "lib/old.py", "lib/old.py"),
            (FileStatus.RENAMED, "lib/after.ex", "lib/before.ex"),
        ]
        assert analysis.files[2].language is Language.ELIXIR
        assert analysis.files[2].hunks == []
        assert analysis.added_lines == 2
        assert analysis.removed_lines == 2

    def test_hunks_reference_their_file(self):
        analysis = parse(SAMPLE_DIFF + ADDED_FILE)
        for changed in analysis.files:
            assert all(hunk.file_path == changed.path for hunk in changed.hunks)
        assert len(analysis.hunks) == 2

    def test_multiple_hunks_and_symbols(self):
        diff = (
            "diff --git a/app.py b/app.py\n"
            "--- a/app.py\n"
            "+++ b/app.py\n"
            "@@ -1,2 +1,2 @@ def first\n"
            "-a\n"
            "+b\n"
            "@@ -10,2 +10,2 @@ def first\n"
            "-c\n"
            "+d\n"
            "@@ -20,2 +20,2 @@ def second\n"
            "-e\n"
            "+f\n"
        )
        analysis = parse(diff)
        assert len(analysis.hunks) == 3
        assert [s.name for s in analysis.modified_symbols] == ["def first", "def second"]

    def test_plain_unified_diff(self):
        """diff -u output: no git line, timestamps after a tab"""
        analysis = parse(PLAIN_DIFF)
        [changed] = analysis.files
        assert changed.path == "src/app.js"
        assert changed.status is FileStatus.MODIFIED
        [hunk] = changed.hunks
        assert hunk.removed_lines == ["--- a comment that starts like a header"]
        assert hunk.added_lines == ["+const b = 2;"]

    def test_missing_path_marker(self):
        """Hunks are kept even when no path can be read"""
        analysis = parse("diff --git something odd\n@@ -1,1 +1,1 @@ def handler\n-a\n+b\n")
        [changed] = analysis.files
        assert changed.path is None
        assert changed.language is Language.UNKNOWN
        assert len(analysis.hunks) == 1
        assert analysis.modified_symbols == []

    def test_summary(self):
        summary = parse(SAMPLE_DIFF).summary()
        assert "Files changed: 1" in summary
        assert "Lines added: 2" in summary


class TestParseIsTotal:

    @pytest.mark.parametrize("text", [
        "",
        "\n\n\n",
        "not a diff at all",
        "diff --git ",
        "diff --git a/x b/x\n@@ -1",
        "diff --git a/x b/x\n@@",
        "@@ -1,2 +3,4 @@",
        "--- a\n+++ b\n@@ -x,y +z @@\n+line",
        "diff --git a/\u00e9 b/\x00\n@@ -99999999999999999999,1 +1 @@\n",
        "\r\n".join(["diff --git a/w.py b/w.py", "@@ -1 +1 @@", "-a", "+b"]),
        "diff --git a/x.py b/x.py\n--- a/x.py\n+++ b/x.py\n@@ -" + "9" * 5000 + ",1 +1,1 @@\n+x\n",
    ])
    def test_never_raises(self, text):
        analysis = parse(text)
        assert analysis.added_lines >= 0
        assert analysis.removed_lines >= 0
        assert len(analysis.hunks) == sum(len(f.hunks) for f in analysis.files)

    def test_empty_input(self):
        analysis = parse("")
        assert analysis.files == []
        assert analysis.hunks == []

    def test_truncated_header_defaults(self):
        [hunk] = parse("diff --git a/x.py b/x.py\n@@ -1").hunks
        assert (hunk.old_start, hunk.old_count, hunk.new_start, hunk.new_count, hunk.context) == (1, 1, 1, 1, "")


class TestExtractPaths:

    def test_git_marker(self):
        assert extract_paths("a/lib/x.py b/lib/y.py\nsimilarity index 90%\n") == ("lib/x.py", "lib/y.py")

    def test_dev_null_headers(self):
        assert extract_paths("a/x.py b/x.py\n--- /dev/null\n+++ b/x.py\n@@ -0,0 +1 @@\n+x") == (None, "x.py")


def test_oversized_line_number_defaults():
    header = "@@ -" + "9" * 5000 + ",1 +1,1 @@ def run():"
    [hunk] = parse(f"diff --git a/x.py b/x.py\n{header}\n+x\n").hunks
    assert (hunk.old_start, hunk.old_count, hunk.new_start, hunk.new_count, hunk.context) == (1, 1, 1, 1, "")
    assert hunk.lines == ["+x"]
