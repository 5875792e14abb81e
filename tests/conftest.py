import pytest

from diff_lens.analyzers.diff import parse_diff


# Joined from lists so blank context rows keep their leading space.
SAMPLE_DIFF = "\n".join([
    "diff --git a/src/app.py b/src/app.py",
    "index 1111111..2222222 100644",
    "--- a/src/app.py",
    "+++ b/src/app.py",
    "@@ -1,5 +1,6 @@ import os",
    " import sys",
    "-import json",
    "+import yaml",
    "+import logging",
    " ",
    " def main():",
    "     pass",
    "@@ -20,3 +21,2 @@ def helper():",
    " a = 1",
    "-b = 2",
    " c = 3",
    "diff --git a/docs/old.md b/docs/new.md",
    "similarity index 100%",
    "rename from docs/old.md",
    "rename to docs/new.md",
    "diff --git a/img/logo.png b/img/logo.png",
    "index 3333333..4444444 100644",
    "Binary files a/img/logo.png and b/img/logo.png differ",
    "diff --git a/lib/new.js b/lib/new.js",
    "new file mode 100644",
    "index 0000000..5555555",
    "--- /dev/null",
    "+++ b/lib/new.js",
    "@@ -0,0 +1,2 @@",
    "+export const a = 1;",
    "+export const b = 2;",
    "diff --git a/lib/gone.js b/lib/gone.js",
    "deleted file mode 100644",
    "index 6666666..0000000",
    "--- a/lib/gone.js",
    "+++ /dev/null",
    "@@ -1,1 +0,0 @@",
    "-module.exports = {};",
    "",
])

SINGLE_ADD_DIFF = "\n".join([
    "diff --git a/a.js b/a.js",
    "--- a/a.js",
    "+++ b/a.js",
    "@@ -9,3 +9,4 @@",
    " unchanged9",
    " unchanged10",
    "+newline",
    " unchanged11",
    "",
])

TWO_CHANGES_DIFF = "\n".join([
    "diff --git a/notes.txt b/notes.txt",
    "--- a/notes.txt",
    "+++ b/notes.txt",
    "@@ -1,7 +1,7 @@",
    " l1",
    "-l2",
    "+L2",
    " l3",
    " l4",
    " l5",
    "-l6",
    "+L6",
    " l7",
    "",
])


@pytest.fixture
def sample_diff():
    return SAMPLE_DIFF


@pytest.fixture
def sample_changes():
    return parse_diff(SAMPLE_DIFF)


@pytest.fixture
def changes_by_path(sample_changes):
    return {change.file_path: change for change in sample_changes}


@pytest.fixture
def diff_file(tmp_path):
    path = tmp_path / "pr.diff"
    path.write_text(SAMPLE_DIFF)
    return path
