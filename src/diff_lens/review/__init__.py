"""Diff-lens review workflow module."""

from diff_lens.review.placement import plan_comment_placements
from diff_lens.review.prompt import build_review_prompt
from diff_lens.review.response import parse_review_response

__all__ = ["build_review_prompt", "parse_review_response", "plan_comment_placements"]
