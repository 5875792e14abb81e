"""Diff-lens command line interface."""

import json
import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from diff_lens import __version__
from diff_lens.analyzers.comments import find_best_line_for_comment
from diff_lens.analyzers.context import extract_changed_code_with_context
from diff_lens.analyzers.diff import parse_diff
from diff_lens.analyzers.stats import analyze_changes, format_changes_for_display
from diff_lens.config import Settings
from diff_lens.models import PullRequestContext
from diff_lens.review.placement import build_file_index, format_summary_comment, plan_comment_placements
from diff_lens.review.prompt import build_review_prompt
from diff_lens.review.response import parse_review_response


console = Console()
err_console = Console(stderr=True)


def _read_input(target: Optional[str]) -> str:
    """Read a diff from a file path, or stdin for '-' / no argument."""
    if target == "-" or target is None:
        if sys.stdin.isatty():
            err_console.print("[yellow]Reading from stdin... (pipe a diff or Ctrl+D to finish)[/]")
        return sys.stdin.read()
    path = Path(target)
    if not path.exists():
        err_console.print(f"[red]Error: File not found: {target}[/]")
        raise SystemExit(1)
    return path.read_text()


def _print_json(data):
    click.echo(json.dumps(data, indent=2, ensure_ascii=False))


diff_option = click.option(
    "--diff", "-d", "diff_path", default="-",
    help="Diff file to read, '-' for stdin",
)
format_option = click.option(
    "--format", "-f", "output_format", default="rich",
    type=click.Choice(["rich", "json"]),
)


@click.group()
@click.version_option(__version__)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx: click.Context, verbose: bool):
    """Diff-lens: unified diff analysis for pull request review."""
    settings = Settings()
    logging.basicConfig(
        level=logging.DEBUG if verbose else settings.log_level,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )
    ctx.obj = settings


@main.command()
@diff_option
@click.option("--json", "as_json", is_flag=True, help="Dump the parse result as JSON")
def show(diff_path: str, as_json: bool):
    """Show the parsed structure of a diff.

    Examples:

        git diff main..feature | diff-lens show
    """
    changes = parse_diff(_read_input(diff_path))
    if as_json:
        _print_json([c.model_dump(mode="json") for c in changes])
    else:
        click.echo(format_changes_for_display(changes), nl=False)


@main.command()
@diff_option
@format_option
def stats(diff_path: str, output_format: str):
    """Print added/removed line counts per file."""
    analysis = analyze_changes(parse_diff(_read_input(diff_path)))

    if output_format == "json":
        _print_json(analysis.model_dump(mode="json"))
        return

    table = Table(title=f"{analysis.total_files} file(s) changed")
    table.add_column("File")
    table.add_column("Added", justify="right", style="green")
    table.add_column("Removed", justify="right", style="red")
    table.add_column("Status")

    for stat in analysis.file_stats:
        status = "binary" if stat.is_binary else "deleted" if stat.is_deleted else "new" if stat.is_new else ""
        table.add_row(escape(stat.file_path), f"+{stat.added}", f"-{stat.removed}", status)

    console.print(table)
    console.print(f"[bold]{analysis.total_added}[/] insertions(+), [bold]{analysis.total_removed}[/] deletions(-)")


@main.command()
@diff_option
@format_option
@click.option("--context", "-c", "context_lines", type=click.IntRange(min=0), default=None,
              help="Unchanged lines around each change")
@click.pass_obj
def blocks(settings: Settings, diff_path: str, output_format: str, context_lines: Optional[int]):
    """List changed code blocks with surrounding context."""
    if context_lines is None:
        context_lines = settings.context_lines
    changes = parse_diff(_read_input(diff_path))
    code_blocks = extract_changed_code_with_context(changes, context_lines)

    if output_format == "json":
        _print_json([b.model_dump(mode="json") for b in code_blocks])
        return

    if not code_blocks:
        console.print("[green]No changed code blocks.[/]")
        return

    for i, block in enumerate(code_blocks, 1):
        console.print(f"[bold]{i}. {escape(block.file_path)}[/] [dim]lines {block.start_line}-{block.end_line}[/]")
        for line in block.code:
            style = "green" if line.is_change else "dim"
            marker = ">" if line.is_change else " "
            console.print(f"[{style}]{marker} {line.line_number:>5} | {escape(line.content)}[/]", highlight=False)
        console.print()


@main.command()
@click.argument("file_path")
@click.argument("line", type=int)
@diff_option
def locate(file_path: str, line: int, diff_path: str):
    """Resolve LINE in FILE_PATH to the nearest commentable line.

    Exits with status 1 when the file has no line a comment can anchor to.
    """
    index = build_file_index(parse_diff(_read_input(diff_path)))
    change = index.get(file_path)
    target = find_best_line_for_comment(change.hunks if change else [], line)
    _print_json(target.model_dump(mode="json", exclude_none=True))
    if not target.in_diff:
        raise SystemExit(1)


@main.command()
@diff_option
@click.option("--title", default="No title provided", help="Pull request title")
@click.option("--description", default="No description provided", help="Pull request description")
@click.option("--author", default="Unknown", help="Pull request author")
@click.option("--source", "source_branch", default="unknown", help="Source branch")
@click.option("--destination", "destination_branch", default="unknown", help="Destination branch")
@click.option("--raw-diff/--no-raw-diff", default=None, help="Append the raw diff")
@click.pass_obj
def prompt(
    settings: Settings,
    diff_path: str,
    title: str,
    description: str,
    author: str,
    source_branch: str,
    destination_branch: str,
    raw_diff: Optional[bool],
):
    """Build an AI review prompt from a diff."""
    pr = PullRequestContext(
        title=title,
        description=description,
        author=author,
        source_branch=source_branch,
        destination_branch=destination_branch,
    )
    text = build_review_prompt(
        _read_input(diff_path),
        pr=pr,
        context_lines=settings.prompt_context_lines,
        preview_chars=settings.line_preview_chars,
        include_raw_diff=settings.include_raw_diff if raw_diff is None else raw_diff,
    )
    click.echo(text, nl=False)


@main.command()
@click.argument("review_file", type=click.Path(exists=True, dir_okay=False))
@diff_option
@click.option("--max-comments", "-n", type=click.IntRange(min=0), default=None,
              help="Maximum number of comments to place")
@click.pass_obj
def plan(settings: Settings, review_file: str, diff_path: str, max_comments: Optional[int]):
    """Plan inline/general placement for the comments in REVIEW_FILE."""
    result = parse_review_response(Path(review_file).read_text(), settings.summary_max_chars)
    changes = parse_diff(_read_input(diff_path))
    placements = plan_comment_placements(
        changes,
        result,
        max_comments=settings.max_comments_per_pr if max_comments is None else max_comments,
    )
    _print_json({
        "summary": result.summary,
        "summary_comment": format_summary_comment(result.summary) if result.summary else None,
        "placements": [p.model_dump(mode="json") for p in placements],
    })


@main.command()
@click.option("--host", "-h", default="0.0.0.0", help="Host to bind to")
@click.option("--port", "-p", default=8080, help="Port to listen on")
@click.pass_obj
def serve(settings: Settings, host: str, port: int):
    """Start the HTTP API server."""
    import uvicorn
    from diff_lens.server.app import create_app

    app = create_app(settings=settings)
    err_console.print(f"[green]Starting diff-lens server on {host}:{port}[/]")
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    main()
