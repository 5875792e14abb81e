"""Changed code blocks with bounded surrounding context."""

from collections import deque
from typing import Optional

from diff_lens.models import ChangedCodeBlock, CodeLine, FileChange, Hunk, LineKind


DEFAULT_CONTEXT_LINES = 3


def extract_changed_code_with_context(
    changes: list[FileChange],
    context_lines: int = DEFAULT_CONTEXT_LINES,
) -> list[ChangedCodeBlock]:
    """Split every hunk into blocks of changed code plus nearby context.

    Deleted and binary files are skipped. Only lines present in the new file
    are considered, and blocks from the same hunk are never merged.

    Args:
        changes: Parsed file changes
        context_lines: Unchanged lines kept before and after each change run

    Returns:
        Blocks in file/hunk order, each holding at least one change
    """
    if context_lines < 0:
        raise ValueError(f"context_lines must be >= 0, got {context_lines}")

    blocks: list[ChangedCodeBlock] = []
    for change in changes:
        if change.is_deleted or change.is_binary:
            continue
        for hunk in change.hunks:
            blocks.extend(_hunk_blocks(change.file_path, hunk, context_lines))
    return blocks


def _hunk_blocks(file_path: str, hunk: Hunk, context_lines: int) -> list[ChangedCodeBlock]:
    blocks = []
    leading: deque[CodeLine] = deque(maxlen=context_lines)
    current: Optional[list[CodeLine]] = None
    trailing = 0

    for line in hunk.lines:
        if line.new_line_number is None:
            continue

        entry = CodeLine(
            content=line.content.rstrip("\n"),
            line_number=line.new_line_number,
            is_change=line.kind is not LineKind.CONTEXT,
        )

        if entry.is_change:
            if current is None:
                current = list(leading)
                leading.clear()
            current.append(entry)
            trailing = 0
        elif current is None:
            leading.append(entry)
        else:
            current.append(entry)
            trailing += 1
            if trailing >= context_lines:
                # keep exactly context_lines unchanged lines after the last change
                del current[len(current) - trailing + context_lines:]
                blocks.append(_make_block(file_path, current))
                current = None
                trailing = 0

    if current:
        blocks.append(_make_block(file_path, current))

    return blocks


def _make_block(file_path: str, code: list[CodeLine]) -> ChangedCodeBlock:
    return ChangedCodeBlock(
        file_path=file_path,
        start_line=code[0].line_number,
        end_line=code[-1].line_number,
        code=code,
    )
