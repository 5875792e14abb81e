"""FastAPI server exposing diff analysis over HTTP."""

import logging
from contextlib import asynccontextmanager
from typing import Optional, Union

from fastapi import FastAPI
from pydantic import BaseModel, Field

from diff_lens import __version__
from diff_lens.analyzers.comments import find_best_line_for_comment
from diff_lens.analyzers.context import extract_changed_code_with_context
from diff_lens.analyzers.diff import parse_diff
from diff_lens.analyzers.stats import analyze_changes
from diff_lens.config import Settings
from diff_lens.models import PullRequestContext, ReviewResult
from diff_lens.review.placement import build_file_index, format_summary_comment, plan_comment_placements
from diff_lens.review.prompt import DEFAULT_REVIEW_INSTRUCTIONS, build_review_prompt
from diff_lens.review.response import parse_review_response


logger = logging.getLogger(__name__)


class DiffRequest(BaseModel):
    diff: str = Field(description="Raw unified diff text")


class BlocksRequest(DiffRequest):
    context_lines: Optional[int] = Field(default=None, ge=0)


class LocateRequest(DiffRequest):
    file: str = Field(description="File path as named by the reviewer")
    line: int = Field(description="Requested new-file line")


class PromptRequest(DiffRequest):
    pr: PullRequestContext = Field(default_factory=PullRequestContext)
    instructions: str = DEFAULT_REVIEW_INSTRUCTIONS
    include_raw_diff: Optional[bool] = None


class PlanRequest(DiffRequest):
    review: Union[ReviewResult, str] = Field(description="Parsed review or raw model output")
    max_comments: Optional[int] = Field(default=None, ge=0)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Create the FastAPI application."""
    settings = settings or Settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"diff-lens {__version__} ready (context_lines={settings.context_lines})")
        yield
        logger.info("Shutting down...")

    app = FastAPI(
        title="diff-lens",
        description="Unified diff analysis for pull request review",
        version=__version__,
        lifespan=lifespan,
    )

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        return {"status": "healthy", "version": __version__}

    @app.post("/api/diff/parse")
    async def api_parse(request: DiffRequest):
        changes = parse_diff(request.diff)
        return {
            "files": [c.model_dump(mode="json") for c in changes],
            "count": len(changes),
        }

    @app.post("/api/diff/analyze")
    async def api_analyze(request: DiffRequest):
        return analyze_changes(parse_diff(request.diff)).model_dump(mode="json")

    @app.post("/api/diff/blocks")
    async def api_blocks(request: BlocksRequest):
        context_lines = settings.context_lines if request.context_lines is None else request.context_lines
        blocks = extract_changed_code_with_context(parse_diff(request.diff), context_lines)
        return {
            "blocks": [b.model_dump(mode="json") for b in blocks],
            "count": len(blocks),
        }

    @app.post("/api/diff/locate")
    async def api_locate(request: LocateRequest):
        """Resolve a comment target against the diff it will be posted on."""
        change = build_file_index(parse_diff(request.diff)).get(request.file)
        target = find_best_line_for_comment(change.hunks if change else [], request.line)
        return target.model_dump(mode="json")

    @app.post("/api/review/prompt")
    async def api_prompt(request: PromptRequest):
        include_raw_diff = request.include_raw_diff
        if include_raw_diff is None:
            include_raw_diff = settings.include_raw_diff
        text = build_review_prompt(
            request.diff,
            pr=request.pr,
            instructions=request.instructions,
            context_lines=settings.prompt_context_lines,
            preview_chars=settings.line_preview_chars,
            include_raw_diff=include_raw_diff,
        )
        return {"prompt": text}

    @app.post("/api/review/plan")
    async def api_plan(request: PlanRequest):
        """Plan where each review comment lands on the pull request."""
        review = request.review
        if isinstance(review, str):
            review = parse_review_response(review, settings.summary_max_chars)
        max_comments = settings.max_comments_per_pr if request.max_comments is None else request.max_comments
        placements = plan_comment_placements(parse_diff(request.diff), review, max_comments=max_comments)
        logger.info(f"Planned {len(placements)} comment(s), {sum(p.inline for p in placements)} inline")
        return {
            "summary": review.summary,
            "summary_comment": format_summary_comment(review.summary) if review.summary else None,
            "placements": [p.model_dump(mode="json") for p in placements],
        }

    return app
