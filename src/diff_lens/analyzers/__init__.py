"""Diff-lens analyzers module."""

from diff_lens.analyzers.comments import find_best_line_for_comment, is_line_commentable
from diff_lens.analyzers.context import extract_changed_code_with_context
from diff_lens.analyzers.diff import parse_diff, parse_patch_file
from diff_lens.analyzers.stats import analyze_changes, get_changes_summary

__all__ = [
    "analyze_changes",
    "extract_changed_code_with_context",
    "find_best_line_for_comment",
    "get_changes_summary",
    "is_line_commentable",
    "parse_diff",
    "parse_patch_file",
]
