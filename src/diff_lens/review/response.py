"""Parse AI review responses into structured comments."""

import json
import logging
import re

from pydantic import ValidationError

from diff_lens.models import ReviewComment, ReviewResult


logger = logging.getLogger(__name__)

JSON_FENCE_RE = re.compile(r"```json\s*([\s\S]*?)\s*```")
FENCE_RE = re.compile(r"```\s*([\s\S]*?)\s*```")


def strip_code_fence(text: str) -> str:
    """Return the body of the first markdown code fence, or the text itself."""
    text = text.strip()
    for pattern in (JSON_FENCE_RE, FENCE_RE):
        match = pattern.search(text)
        if match:
            return match.group(1)
    return text


def parse_review_response(text: str, summary_max_chars: int = 500) -> ReviewResult:
    """Parse a model response.

    JSON responses yield a summary and inline comments; malformed comment
    entries are skipped. Anything that is not a JSON object becomes a plain
    text summary with no comments.
    """
    body = strip_code_fence(text)

    try:
        data = json.loads(body)
    except json.JSONDecodeError:
        data = None

    if not isinstance(data, dict):
        logger.info("Review response is plain text, using it as the summary")
        summary = text.strip()
        if len(summary) > summary_max_chars:
            summary = summary[:summary_max_chars] + "..."
        return ReviewResult(summary=summary or None, comments=[], structured=False)

    items = data.get("comments")
    if items is None:
        items = []
    elif not isinstance(items, list):
        logger.debug(f"Ignoring non-list review comments: {items!r}")
        items = []

    comments = []
    for item in items:
        try:
            comments.append(ReviewComment.model_validate(item))
        except ValidationError as e:
            logger.debug(f"Skipping malformed review comment {item!r}: {e}")
            continue

    summary = data.get("summary")
    return ReviewResult(
        summary=str(summary) if summary is not None else None,
        comments=comments,
    )
