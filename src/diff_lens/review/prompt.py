"""Review prompt construction from parsed diffs."""

from pathlib import Path
from typing import Optional

from diff_lens.analyzers.context import extract_changed_code_with_context
from diff_lens.analyzers.diff import parse_diff
from diff_lens.analyzers.stats import get_changes_summary
from diff_lens.models import ChangedCodeBlock, ChangesSummary, PullRequestContext


# Code fence hints by file extension
LANGUAGE_MAP = {
    ".c": "c",
    ".h": "c",
    ".cpp": "cpp",
    ".cc": "cpp",
    ".hpp": "cpp",
    ".rs": "rust",
    ".py": "python",
    ".go": "go",
    ".js": "javascript",
    ".jsx": "jsx",
    ".ts": "typescript",
    ".tsx": "tsx",
    ".java": "java",
    ".rb": "ruby",
}

DEFAULT_REVIEW_INSTRUCTIONS = """You are an expert code reviewer. Review the pull request below and identify:
1. Bugs and logic errors
2. Security vulnerabilities
3. Code quality issues (error handling, resource leaks, etc.)
4. Performance problems

Only comment on lines that appear in the code changes. Be precise and concise."""

RESPONSE_FORMAT = """**IMPORTANT: Please respond in JSON format with the following structure:**
{
  "summary": "Brief overall summary of the review",
  "comments": [
    {
      "file": "path/to/file.js",
      "line": 123,
      "comment": "Specific feedback for this line"
    }
  ]
}"""


def detect_language(file_path: str) -> Optional[str]:
    return LANGUAGE_MAP.get(Path(file_path).suffix.lower())


def _preview(content: str, limit: int) -> str:
    if len(content) > limit:
        return content[:limit] + "..."
    return content


def format_block(index: int, block: ChangedCodeBlock, preview_chars: int = 100) -> str:
    """Render one changed code block, marking changed lines with `>`."""
    lines = [
        f"### Block {index}: {block.file_path}",
        f"**Lines:** {block.start_line}-{block.end_line} "
        f"({block.changed_lines} changes, {block.context_lines} context)",
        "",
        f"```{detect_language(block.file_path) or ''}",
    ]
    for line in block.code:
        marker = "> " if line.is_change else "  "
        lines.append(f"{marker}{line.line_number}: {_preview(line.content, preview_chars)}")
    lines.append("```")
    return "\n".join(lines)


def _format_file(file) -> str:
    flags = ""
    if file.is_new:
        flags += " (NEW FILE)"
    if file.is_deleted:
        flags += " (DELETED)"
    if file.is_binary:
        flags += " (BINARY)"
    return f"- **{file.path}**: +{file.added} -{file.removed}{flags}"


def _format_summary(summary: ChangesSummary) -> str:
    return "\n".join([
        "## Changes Summary",
        f"- **Files Changed:** {summary.files_changed}",
        f"- **Lines Added:** {summary.lines_added}",
        f"- **Lines Removed:** {summary.lines_removed}",
        f"- **Total Changes:** {summary.total_changes}",
    ])


def build_review_prompt(
    diff_text: str,
    pr: Optional[PullRequestContext] = None,
    instructions: str = DEFAULT_REVIEW_INSTRUCTIONS,
    context_lines: int = 4,
    preview_chars: int = 100,
    include_raw_diff: bool = True,
) -> str:
    """Build a structured review prompt that shows only changed regions.

    Args:
        diff_text: Raw unified diff of the pull request
        pr: Pull request metadata
        instructions: Reviewer instructions placed at the top
        context_lines: Unchanged lines shown around each change run
        preview_chars: Maximum characters shown per code line
        include_raw_diff: Append the raw diff for reference

    Returns:
        Prompt text
    """
    pr = pr or PullRequestContext()
    changes = parse_diff(diff_text)
    summary = get_changes_summary(changes)
    blocks = extract_changed_code_with_context(changes, context_lines)

    sections = [
        instructions.strip(),
        "\n".join([
            "## Pull Request Context",
            f"**Title:** {pr.title}",
            f"**Author:** {pr.author}",
            f"**Branch:** {pr.source_branch} → {pr.destination_branch}",
            f"**Description:** {pr.description}",
        ]),
        _format_summary(summary),
        "## Files Modified\n" + "\n".join(_format_file(f) for f in summary.files),
        "## Code Changes Analysis\n\n" + "\n\n".join(
            format_block(i, block, preview_chars) for i, block in enumerate(blocks, 1)
        ),
    ]

    if include_raw_diff:
        sections.append(f"## Raw Diff for Reference\n```diff\n{diff_text.strip()}\n```")

    sections.append(
        "Please provide a thorough code review focusing on the structured changes above.\n\n"
        + RESPONSE_FORMAT
    )
    return "\n\n".join(sections) + "\n"
