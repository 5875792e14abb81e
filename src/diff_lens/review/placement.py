"""Plan where review comments are posted on a pull request."""

import logging
from typing import Optional

from diff_lens.analyzers.comments import find_best_line_for_comment
from diff_lens.models import CommentPlacement, FileChange, ReviewComment, ReviewResult


logger = logging.getLogger(__name__)


def build_file_index(changes: list[FileChange]) -> dict[str, FileChange]:
    """Index file changes by new path, and by old path for renames."""
    index: dict[str, FileChange] = {}
    for change in changes:
        index[change.file_path] = change
        if change.old_file_path and change.old_file_path != change.file_path:
            index.setdefault(change.old_file_path, change)
    return index


def format_inline_comment(comment: ReviewComment) -> str:
    return f"**AI Review:** {comment.comment}"


def format_general_comment(comment: ReviewComment) -> str:
    """Carry the file and line in the text when no inline anchor exists."""
    lines = [
        f"**File:** `{comment.file}`",
        f"**Line:** {comment.line}",
        "",
        comment.comment,
    ]
    return "\n".join(lines)


def format_summary_comment(summary: str) -> str:
    return f"## AI Code Review Summary\n\n{summary}"


def place_comment(comment: ReviewComment, change: Optional[FileChange]) -> CommentPlacement:
    """Resolve one comment against its file's diff."""
    if change is None:
        logger.warning(f"File {comment.file} not found in diff, posting as a general comment")
        return CommentPlacement(
            file=comment.file,
            body=format_general_comment(comment),
            inline=False,
            original_line=comment.line,
        )

    target = find_best_line_for_comment(change.hunks, comment.line)
    if not target.in_diff:
        logger.info(f"No commentable lines in {comment.file}, posting as a general comment")
        return CommentPlacement(
            file=comment.file,
            body=format_general_comment(comment),
            inline=False,
            original_line=comment.line,
        )

    if target.adjusted:
        logger.info(f"Adjusted line {comment.line} to {target.line} for {comment.file}")

    return CommentPlacement(
        file=change.file_path,
        line=target.line,
        body=format_inline_comment(comment),
        inline=True,
        adjusted=target.adjusted,
        original_line=comment.line,
    )


def plan_comment_placements(
    changes: list[FileChange],
    result: ReviewResult,
    max_comments: Optional[int] = None,
) -> list[CommentPlacement]:
    """Resolve every review comment to an inline or general placement.

    Args:
        changes: File changes parsed from the same diff the comments target
        result: Parsed AI review
        max_comments: Keep at most this many comments, in input order

    Returns:
        One placement per kept comment
    """
    index = build_file_index(changes)
    comments = result.comments
    if max_comments is not None:
        comments = comments[:max_comments]
    return [place_comment(comment, index.get(comment.file)) for comment in comments]
