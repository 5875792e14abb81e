from diff_lens.analyzers.diff import parse_diff
from diff_lens.analyzers.stats import (
    analyze_changes,
    format_changes_for_display,
    get_changes_summary,
    get_modified_lines,
)


def test_analyze_empty():
    analysis = analyze_changes(parse_diff(""))
    assert analysis.model_dump() == {
        "total_files": 0,
        "total_added": 0,
        "total_removed": 0,
        "file_stats": [],
    }


def test_analyze_totals(sample_changes):
    analysis = analyze_changes(sample_changes)
    assert analysis.total_files == 5
    assert analysis.total_added == 4
    assert analysis.total_removed == 3


def test_file_stats_preserve_order_and_flags(sample_changes):
    stats = analyze_changes(sample_changes).file_stats
    assert [(s.file_path, s.added, s.removed) for s in stats] == [
        ("src/app.py", 2, 2),
        ("docs/new.md", 0, 0),
        ("img/logo.png", 0, 0),
        ("lib/new.js", 2, 0),
        ("lib/gone.js", 0, 1),
    ]
    assert stats[2].is_binary
    assert stats[3].is_new
    assert stats[4].is_deleted


def test_changes_summary(sample_changes):
    summary = get_changes_summary(sample_changes)
    assert summary.files_changed == 5
    assert summary.lines_added == 4
    assert summary.lines_removed == 3
    assert summary.total_changes == 7
    assert summary.files[0].path == "src/app.py"
    assert summary.files[3].is_new


def test_modified_lines(changes_by_path):
    assert get_modified_lines(changes_by_path["src/app.py"]) == [2, 3]
    assert get_modified_lines(changes_by_path["lib/gone.js"]) == []


def test_format_empty():
    assert format_changes_for_display([]) == "No changes found."


def test_format_changes(sample_changes):
    text = format_changes_for_display(sample_changes)
    assert text.startswith("Summary: 5 files changed, 4 insertions(+), 3 deletions(-)\n\n")
    assert "Modified: src/app.py\n  @@ -1,5 +1,6 @@ import os\n   import sys\n  -import json\n  +import yaml\n" in text
    assert "Renamed: docs/old.md → docs/new.md" in text
    assert "Binary file: img/logo.png" in text
    assert "New file: lib/new.js" in text
    assert "Deleted: lib/gone.js" in text
    assert "module.exports" not in text
