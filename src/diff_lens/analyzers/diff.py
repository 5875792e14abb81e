"""Diff parser for code review."""

import logging
import re
from typing import Optional

from diff_lens.models import DiffLine, FileChange, Hunk, LineKind


logger = logging.getLogger(__name__)

GIT_HEADER_RE = re.compile(r"^diff --git a/(.*?) b/(.*?)$")
HUNK_HEADER_RE = re.compile(r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@(.*)$")
BINARY_RE = re.compile(r"^Binary files? .* differ$")

DEV_NULL = "/dev/null"


def classify_line(line: str) -> Optional[LineKind]:
    """Map a raw hunk row to its kind, or None if it is not hunk content."""
    if line.startswith("+"):
        return LineKind.ADDED
    if line.startswith("-"):
        return LineKind.REMOVED
    if line.startswith(" "):
        return LineKind.CONTEXT
    return None


class HunkBuilder:
    """Accumulates the rows of one hunk, numbering them as they arrive."""

    def __init__(self, old_start: int, old_length: int, new_start: int, new_length: int, context: str = ""):
        self.old_start = old_start
        self.old_length = old_length
        self.new_start = new_start
        self.new_length = new_length
        self.context = context
        self.lines: list[DiffLine] = []
        self._old_seen = 0
        self._new_seen = 0

    @property
    def owes_old_rows(self) -> bool:
        """True while fewer old-side rows than declared have been read."""
        return self._old_seen < self.old_length

    @classmethod
    def from_header(cls, line: str) -> Optional["HunkBuilder"]:
        match = HUNK_HEADER_RE.match(line)
        if not match:
            return None
        return cls(
            old_start=int(match.group(1)),
            old_length=int(match.group(2)) if match.group(2) is not None else 1,
            new_start=int(match.group(3)),
            new_length=int(match.group(4)) if match.group(4) is not None else 1,
            context=match.group(5).strip(),
        )

    def add(self, kind: LineKind, content: str):
        old_number = None
        new_number = None
        if kind.in_old_file:
            old_number = self.old_start + self._old_seen
            self._old_seen += 1
        if kind.in_new_file:
            new_number = self.new_start + self._new_seen
            self._new_seen += 1
        self.lines.append(DiffLine(
            content=content,
            kind=kind,
            old_line_number=old_number,
            new_line_number=new_number,
        ))

    def build(self) -> Hunk:
        return Hunk(
            old_start=self.old_start,
            old_length=self.old_length,
            new_start=self.new_start,
            new_length=self.new_length,
            context=self.context,
            lines=self.lines,
        )


class FileChangeBuilder:
    """Accumulates header flags, paths and hunks for one file record."""

    def __init__(self, file_path: str = "", old_file_path: str = ""):
        self.file_path = file_path
        self.old_file_path = old_file_path
        self.is_new = False
        self.is_deleted = False
        self.is_renamed = False
        self.is_binary = False
        self.hunks: list[Hunk] = []
        self.current_hunk: Optional[HunkBuilder] = None
        self.seen_hunk_header = False

    @property
    def in_header(self) -> bool:
        """True until the first hunk header has been seen."""
        return not self.seen_hunk_header

    def apply_header(self, line: str) -> bool:
        """Apply a file-level metadata line. Returns False if it is not one."""
        if line.startswith("new file mode"):
            self.is_new = True
        elif line.startswith("deleted file mode"):
            self.is_deleted = True
        elif line.startswith("similarity index"):
            self.is_renamed = True
        elif line.startswith("rename from "):
            self.is_renamed = True
            self.old_file_path = line[len("rename from "):].strip()
        elif line.startswith("rename to "):
            self.is_renamed = True
            self.file_path = line[len("rename to "):].strip()
        elif BINARY_RE.match(line) or line.startswith("GIT binary patch"):
            if not self.is_binary:
                logger.debug(f"Skipping binary file: {self.file_path or self.old_file_path}")
            self.is_binary = True
        else:
            return False
        return True

    def set_old_path(self, path: Optional[str]):
        if path == DEV_NULL:
            self.is_new = True
        elif path is not None:
            self.old_file_path = path

    def set_new_path(self, path: Optional[str]):
        if path == DEV_NULL:
            self.is_deleted = True
        elif path is not None:
            self.file_path = path

    def open_hunk(self, hunk: Optional[HunkBuilder]):
        self.close_hunk()
        self.seen_hunk_header = True
        self.current_hunk = hunk

    def close_hunk(self):
        if self.current_hunk is not None:
            self.hunks.append(self.current_hunk.build())
            self.current_hunk = None

    def build(self) -> Optional[FileChange]:
        self.close_hunk()
        file_path = self.file_path or self.old_file_path
        if not file_path:
            logger.debug("Dropping diff record with no usable file path")
            return None
        return FileChange(
            file_path=file_path,
            old_file_path=self.old_file_path or file_path,
            is_new=self.is_new,
            is_deleted=self.is_deleted,
            is_renamed=self.is_renamed,
            is_binary=self.is_binary,
            hunks=[] if self.is_binary else self.hunks,
        )


class _ParseState:
    """Cursor state for a single parse pass."""

    def __init__(self):
        self.changes: list[FileChange] = []
        self.current: Optional[FileChangeBuilder] = None
        self.git_headers = False

    def start_file(self, file_path: str = "", old_file_path: str = "") -> FileChangeBuilder:
        self.finish_file()
        self.current = FileChangeBuilder(file_path=file_path, old_file_path=old_file_path)
        return self.current

    def finish_file(self):
        if self.current is not None:
            change = self.current.build()
            if change is not None:
                self.changes.append(change)
            self.current = None


def _path_from_marker(line: str, marker: str, prefix: str) -> Optional[str]:
    """Extract the path from a `---`/`+++` line, dropping any timestamp."""
    rest = line[len(marker):]
    if not rest.startswith(" "):
        return None
    path = rest[1:].split("\t", 1)[0].strip()
    if path.startswith(prefix):
        path = path[len(prefix):]
    return path or None


def _is_path_line(state: _ParseState, line: str) -> bool:
    if not (line.startswith("--- ") or line.startswith("+++ ")):
        return False
    current = state.current
    if current is None or current.in_header:
        return True
    if state.git_headers or not line.startswith("--- "):
        return False
    # Without `diff --git` headers a `---` line is the only file boundary,
    # but not while the open hunk still expects removed or context rows.
    hunk = current.current_hunk
    return hunk is None or not hunk.owes_old_rows


def _handle_path_line(state: _ParseState, line: str):
    current = state.current
    if line.startswith("--- "):
        headerless_next = not state.git_headers and current is not None and current.file_path
        if current is None or not current.in_header or headerless_next:
            current = state.start_file()
        current.set_old_path(_path_from_marker(line, "---", "a/"))
    else:
        if current is None:
            current = state.start_file()
        current.set_new_path(_path_from_marker(line, "+++", "b/"))


def parse_diff(diff_text: str) -> list[FileChange]:
    """Parse a unified diff into file changes.

    Unrecognized lines are ignored and records that never receive a path are
    dropped, so malformed input yields a best-effort partial result rather
    than an error.

    Args:
        diff_text: Unified diff text, with or without `diff --git` headers

    Returns:
        File changes in the order they appear in the diff
    """
    state = _ParseState()

    for line in diff_text.replace("\r", "").split("\n"):
        if line.startswith("diff --git"):
            state.git_headers = True
            match = GIT_HEADER_RE.match(line)
            if match:
                state.start_file(file_path=match.group(2).strip(), old_file_path=match.group(1).strip())
            else:
                state.start_file()
            continue

        if _is_path_line(state, line):
            _handle_path_line(state, line)
            continue

        current = state.current
        if current is None:
            continue

        if line.startswith("@@"):
            if current.is_binary:
                continue
            hunk = HunkBuilder.from_header(line)
            if hunk is None:
                logger.debug(f"Ignoring unparseable hunk header in {current.file_path}: {line!r}")
            current.open_hunk(hunk)
            continue

        if current.current_hunk is not None:
            kind = classify_line(line)
            if kind is not None:
                current.current_hunk.add(kind, line[1:])
            continue

        current.apply_header(line)

    state.finish_file()
    return state.changes


def parse_patch_file(patch_path: str) -> list[FileChange]:
    """Parse a patch file."""
    with open(patch_path, "r") as f:
        return parse_diff(f.read())


def extract_file_path(header: str) -> Optional[str]:
    """Return the target path named by a single diff header line."""
    patterns = (
        r"^diff --git a/.* b/(.*)$",
        r"^\+\+\+ b/(.*)$",
        r"^--- a/(.*)$",
    )
    for pattern in patterns:
        match = re.search(pattern, header)
        if match and match.group(1) and match.group(1) != DEV_NULL:
            return match.group(1)
    return None
