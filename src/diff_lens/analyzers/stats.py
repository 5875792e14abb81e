"""Change statistics and text rendering for parsed diffs."""

from diff_lens.models import (
    ChangesSummary,
    DiffAnalysis,
    FileChange,
    FileStats,
    FileSummary,
    LineKind,
)


def count_lines(change: FileChange) -> tuple[int, int]:
    """Return (added, removed) line counts for one file."""
    added = 0
    removed = 0
    for line in change.iter_lines():
        if line.kind is LineKind.ADDED:
            added += 1
        elif line.kind is LineKind.REMOVED:
            removed += 1
    return added, removed


def analyze_changes(changes: list[FileChange]) -> DiffAnalysis:
    """Aggregate added/removed counts across all files, preserving file order."""
    analysis = DiffAnalysis(total_files=len(changes))

    for change in changes:
        added, removed = count_lines(change)
        analysis.total_added += added
        analysis.total_removed += removed
        analysis.file_stats.append(FileStats(
            file_path=change.file_path,
            added=added,
            removed=removed,
            is_new=change.is_new,
            is_deleted=change.is_deleted,
            is_binary=change.is_binary,
        ))

    return analysis


def get_changes_summary(changes: list[FileChange]) -> ChangesSummary:
    analysis = analyze_changes(changes)
    return ChangesSummary(
        files_changed=analysis.total_files,
        lines_added=analysis.total_added,
        lines_removed=analysis.total_removed,
        files=[
            FileSummary(
                path=stat.file_path,
                added=stat.added,
                removed=stat.removed,
                is_new=stat.is_new,
                is_deleted=stat.is_deleted,
                is_binary=stat.is_binary,
            )
            for stat in analysis.file_stats
        ],
    )


def get_modified_lines(change: FileChange) -> list[int]:
    """New-file line numbers of every added line, ascending."""
    return sorted(
        line.new_line_number
        for line in change.iter_lines()
        if line.kind is LineKind.ADDED and line.new_line_number is not None
    )


def format_changes_for_display(changes: list[FileChange]) -> str:
    """Render parsed changes as plain text, one section per file."""
    if not changes:
        return "No changes found."

    analysis = analyze_changes(changes)
    out = [
        f"Summary: {analysis.total_files} files changed, "
        f"{analysis.total_added} insertions(+), {analysis.total_removed} deletions(-)",
        "",
    ]

    for change in changes:
        if change.is_binary:
            out.append(f"Binary file: {change.file_path}")
            continue
        if change.is_deleted:
            out.append(f"Deleted: {change.file_path}")
            continue

        if change.is_new:
            out.append(f"New file: {change.file_path}")
        elif change.is_renamed:
            out.append(f"Renamed: {change.old_file_path} → {change.file_path}")
        else:
            out.append(f"Modified: {change.file_path}")

        for hunk in change.hunks:
            header = f"  {hunk.header}"
            if hunk.context:
                header += f" {hunk.context}"
            out.append(header)
            for line in hunk.lines:
                out.append(f"  {line.kind.prefix}{line.content}")

        out.append("")

    return "\n".join(out) + "\n"
