"""Resolve review comment targets to lines the code host will accept."""

import logging
from collections.abc import Iterable

from diff_lens.models import CommentTarget, Hunk, LineKind


logger = logging.getLogger(__name__)

COMMENTABLE_KINDS = (LineKind.ADDED, LineKind.CONTEXT)


def addressable_lines(hunks: Iterable[Hunk]) -> dict[int, LineKind]:
    """Map every new-file line number in the hunks to its kind."""
    lines: dict[int, LineKind] = {}
    for hunk in hunks:
        for line in hunk.lines:
            if line.new_line_number is not None:
                lines[line.new_line_number] = line.kind
    return lines


def find_best_line_for_comment(hunks: Iterable[Hunk], target_line: int) -> CommentTarget:
    """Find the nearest line in the diff on which a comment can be anchored.

    An exact match is returned as is. Otherwise the closest addressable line
    wins, the lower number on a tie. When the file has no addressable lines
    the target comes back with `in_diff=False` so the caller can fall back to
    a general comment.
    """
    lines = addressable_lines(hunks)

    if target_line in lines:
        return CommentTarget(line=target_line, exists=True, kind=lines[target_line], in_diff=True)

    if not lines:
        return CommentTarget(line=target_line, exists=False, kind=None, in_diff=False)

    closest = min(sorted(lines), key=lambda number: abs(number - target_line))
    logger.debug(f"Adjusted comment line {target_line} to {closest}")
    return CommentTarget(
        line=closest,
        exists=True,
        kind=lines[closest],
        in_diff=True,
        adjusted=True,
        original_line=target_line,
    )


def is_line_commentable(hunks: Iterable[Hunk], line_number: int) -> bool:
    """Whether `line_number` is an added or context line in the new file."""
    for hunk in hunks:
        for line in hunk.lines:
            if line.new_line_number == line_number:
                return line.kind in COMMENTABLE_KINDS
    return False
