from diff_lens.analyzers.comments import (
    addressable_lines,
    find_best_line_for_comment,
    is_line_commentable,
)
from diff_lens.analyzers.diff import parse_diff
from diff_lens.models import LineKind

from conftest import SINGLE_ADD_DIFF


def hunks_of(diff):
    (change,) = parse_diff(diff)
    return change.hunks


TEN_TO_TWELVE = "\n".join([
    "diff --git a/b.py b/b.py",
    "@@ -10,2 +10,3 @@",
    " a",
    "+b",
    " c",
])

GAP = "\n".join([
    "diff --git a/c.py b/c.py",
    "@@ -10,1 +10,1 @@",
    " x",
    "@@ -14,1 +14,1 @@",
    " y",
])


def test_commentable_lines():
    hunks = hunks_of(SINGLE_ADD_DIFF)
    assert is_line_commentable(hunks, 11)
    assert is_line_commentable(hunks, 10)
    assert is_line_commentable(hunks, 12)
    assert is_line_commentable(hunks, 9)
    assert not is_line_commentable(hunks, 8)
    assert not is_line_commentable(hunks, 13)


def test_removed_lines_are_not_commentable(changes_by_path):
    hunks = changes_by_path["lib/gone.js"].hunks
    assert not is_line_commentable(hunks, 1)
    assert not is_line_commentable(hunks, 0)


def test_addressable_lines():
    assert addressable_lines(hunks_of(TEN_TO_TWELVE)) == {
        10: LineKind.CONTEXT,
        11: LineKind.ADDED,
        12: LineKind.CONTEXT,
    }


def test_exact_match():
    target = find_best_line_for_comment(hunks_of(TEN_TO_TWELVE), 11)
    assert target.line == 11
    assert target.exists and target.in_diff
    assert target.kind is LineKind.ADDED
    assert not target.adjusted
    assert target.original_line is None


def test_far_target_is_adjusted():
    target = find_best_line_for_comment(hunks_of(TEN_TO_TWELVE), 500)
    assert target.line == 12
    assert target.adjusted
    assert target.original_line == 500
    assert target.in_diff

    assert find_best_line_for_comment(hunks_of(TEN_TO_TWELVE), 1).line == 10


def test_tie_prefers_lower_line():
    target = find_best_line_for_comment(hunks_of(GAP), 12)
    assert target.line == 10
    assert target.adjusted

    assert find_best_line_for_comment(hunks_of(GAP), 13).line == 14


def test_no_addressable_lines(changes_by_path):
    for hunks in (changes_by_path["lib/gone.js"].hunks, []):
        target = find_best_line_for_comment(hunks, 7)
        assert target.line == 7
        assert not target.exists
        assert not target.in_diff
        assert target.kind is None
        assert not target.adjusted
