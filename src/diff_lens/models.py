"""Data models for diff-lens."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class LineKind(str, Enum):
    """Kind of a row inside a hunk, keyed by its diff prefix."""
    CONTEXT = "context"
    ADDED = "added"
    REMOVED = "removed"

    @property
    def prefix(self) -> str:
        return {"context": " ", "added": "+", "removed": "-"}[self.value]

    @property
    def in_old_file(self) -> bool:
        return self is not LineKind.ADDED

    @property
    def in_new_file(self) -> bool:
        return self is not LineKind.REMOVED


class DiffLine(BaseModel):
    """One physical row inside a hunk."""

    model_config = ConfigDict(frozen=True)

    content: str = Field(description="Line text without its prefix character")
    kind: LineKind
    old_line_number: Optional[int] = Field(default=None, description="Set for context and removed lines")
    new_line_number: Optional[int] = Field(default=None, description="Set for context and added lines")


class Hunk(BaseModel):
    """One `@@ ... @@` region of a file diff."""

    model_config = ConfigDict(frozen=True)

    old_start: int
    old_length: int = 1
    new_start: int
    new_length: int = 1
    context: str = Field(default="", description="Trailing text of the hunk header")
    lines: list[DiffLine] = Field(default_factory=list)

    @property
    def header(self) -> str:
        return f"@@ -{self.old_start},{self.old_length} +{self.new_start},{self.new_length} @@"


class FileChange(BaseModel):
    """A single file's complete diff record."""

    model_config = ConfigDict(frozen=True)

    file_path: str = Field(description="New (current) path")
    old_file_path: str = Field(description="Path before the change; equals file_path unless renamed")
    is_new: bool = False
    is_deleted: bool = False
    is_renamed: bool = False
    is_binary: bool = False
    hunks: list[Hunk] = Field(default_factory=list)

    def iter_lines(self):
        for hunk in self.hunks:
            yield from hunk.lines


class FileStats(BaseModel):
    """Per-file line counts."""

    file_path: str
    added: int = 0
    removed: int = 0
    is_new: bool = False
    is_deleted: bool = False
    is_binary: bool = False


class DiffAnalysis(BaseModel):
    """Aggregate statistics over a parsed diff."""

    total_files: int = 0
    total_added: int = 0
    total_removed: int = 0
    file_stats: list[FileStats] = Field(default_factory=list)


class FileSummary(BaseModel):
    path: str
    added: int
    removed: int
    is_new: bool = False
    is_deleted: bool = False
    is_binary: bool = False


class ChangesSummary(BaseModel):
    """Summary shape handed to prompt construction and UIs."""

    files_changed: int = 0
    lines_added: int = 0
    lines_removed: int = 0
    files: list[FileSummary] = Field(default_factory=list)

    @property
    def total_changes(self) -> int:
        return self.lines_added + self.lines_removed


class CodeLine(BaseModel):
    """A new-file line retained in a changed code block."""

    content: str
    line_number: int
    is_change: bool = False


class ChangedCodeBlock(BaseModel):
    """A contiguous span of changed code plus bounded surrounding context."""

    file_path: str
    start_line: int
    end_line: int
    code: list[CodeLine] = Field(default_factory=list)

    @property
    def changed_lines(self) -> int:
        return sum(1 for line in self.code if line.is_change)

    @property
    def context_lines(self) -> int:
        return sum(1 for line in self.code if not line.is_change)


class CommentTarget(BaseModel):
    """Where an inline comment aimed at a line can actually be anchored."""

    line: int = Field(description="Resolved new-file line number")
    exists: bool = Field(description="Whether the resolved line is in the diff")
    kind: Optional[LineKind] = None
    in_diff: bool = Field(description="False means the caller must fall back to a general comment")
    adjusted: bool = False
    original_line: Optional[int] = Field(default=None, description="Requested line when adjusted")


class PullRequestContext(BaseModel):
    """Pull request metadata used when building a review prompt."""

    title: str = "No title provided"
    description: str = "No description provided"
    author: str = "Unknown"
    source_branch: str = "unknown"
    destination_branch: str = "unknown"


class ReviewComment(BaseModel):
    """An inline comment suggested by the AI reviewer."""

    file: str = Field(description="File path")
    line: int = Field(description="Line number in the new file")
    comment: str = Field(description="Feedback text")


class ReviewResult(BaseModel):
    """Parsed AI review response."""

    summary: Optional[str] = Field(default=None, description="Overall review summary")
    comments: list[ReviewComment] = Field(default_factory=list)
    structured: bool = Field(default=True, description="False when the response was plain text")


class CommentPlacement(BaseModel):
    """A review comment ready to be submitted to the code host."""

    file: str
    line: Optional[int] = Field(default=None, description="Inline anchor; None for general comments")
    body: str
    inline: bool
    adjusted: bool = False
    original_line: int
