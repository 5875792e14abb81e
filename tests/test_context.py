import pytest

from diff_lens.analyzers.context import extract_changed_code_with_context
from diff_lens.analyzers.diff import parse_diff

from conftest import TWO_CHANGES_DIFF


def spans(blocks):
    return [(b.file_path, b.start_line, b.end_line) for b in blocks]


def test_empty_input():
    assert extract_changed_code_with_context([]) == []


def test_default_context(sample_changes):
    blocks = extract_changed_code_with_context(sample_changes)
    assert spans(blocks) == [("src/app.py", 1, 6), ("lib/new.js", 1, 2)]

    code = blocks[0].code
    assert [(c.line_number, c.is_change) for c in code] == [
        (1, False),
        (2, True),
        (3, True),
        (4, False),
        (5, False),
        (6, False),
    ]
    assert blocks[0].changed_lines == 2
    assert blocks[0].context_lines == 4


def test_skips_deleted_binary_and_removal_only(sample_changes):
    paths = {b.file_path for b in extract_changed_code_with_context(sample_changes)}
    assert "lib/gone.js" not in paths
    assert "img/logo.png" not in paths
    # the second src/app.py hunk only removes a line
    assert spans(extract_changed_code_with_context(sample_changes))[0] == ("src/app.py", 1, 6)


def test_trailing_context_is_trimmed(sample_changes):
    (app, new) = extract_changed_code_with_context(sample_changes, context_lines=1)
    assert (app.start_line, app.end_line) == (1, 4)
    assert [c.line_number for c in app.code] == [1, 2, 3, 4]


def test_zero_context(sample_changes):
    (app, new) = extract_changed_code_with_context(sample_changes, context_lines=0)
    assert [c.line_number for c in app.code] == [2, 3]
    assert all(c.is_change for c in app.code)


def test_blocks_in_one_hunk_are_not_merged():
    changes = parse_diff(TWO_CHANGES_DIFF)

    blocks = extract_changed_code_with_context(changes, context_lines=1)
    assert spans(blocks) == [("notes.txt", 1, 3), ("notes.txt", 5, 7)]

    blocks = extract_changed_code_with_context(changes, context_lines=3)
    assert spans(blocks) == [("notes.txt", 1, 5), ("notes.txt", 6, 7)]
    assert [c.content for c in blocks[1].code] == ["L6", "l7"]


def test_every_block_has_a_change(sample_changes):
    for context_lines in range(0, 6):
        for block in extract_changed_code_with_context(sample_changes, context_lines):
            assert block.changed_lines > 0


def test_negative_context_rejected(sample_changes):
    with pytest.raises(ValueError):
        extract_changed_code_with_context(sample_changes, context_lines=-1)
