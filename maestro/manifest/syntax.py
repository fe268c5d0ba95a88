"""Header grammar shared by the manifest parser and the manifest updater.

Both sides must agree on what a task header is and which title it carries,
otherwise a status update would not find the block it was parsed from.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from maestro.core.task.models import TaskStatus

# Glyphs written by the updater.
STATUS_GLYPHS: dict[TaskStatus, str] = {
    TaskStatus.COMPLETED: "✓",
    TaskStatus.FAILED: "✗",
    TaskStatus.IN_PROGRESS: "↻",
}

# Accepted when reading; the emoji forms come from manifests annotated by
# older runs.
_GLYPH_STATUS: dict[str, TaskStatus] = {
    "✓": TaskStatus.COMPLETED,
    "✅": TaskStatus.COMPLETED,
    "✗": TaskStatus.FAILED,
    "❌": TaskStatus.FAILED,
    "↻": TaskStatus.IN_PROGRESS,
    "🔄": TaskStatus.IN_PROGRESS,
}

TIMESTAMP_MARKER = " *(completed:"
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M"

_RE_BOLD_HEADER = re.compile(r"^\*\*Task\b[^*]*\*\*:\s*(?P<title>.*)$")
_RE_BOLD_INNER_COLON = re.compile(r"^\*\*Task\b[^*:]*:\*\*\s*(?P<title>.*)$")
_RE_HEADING_HEADER = re.compile(r"^###\s+Task\b[^:]*:\s*(?P<title>.*)$")


@dataclass(frozen=True)
class Header:
    """A recognised task header line.

    Attributes:
        title: The task title, with glyph and timestamp annotation removed.
        status: Status implied by the leading glyph.
        body: The header without glyph or timestamp, e.g. ``**Task 1**: Fix``.
    """

    title: str
    status: TaskStatus
    body: str


def split_glyph(line: str) -> tuple[TaskStatus, str]:
    """Strip a leading status glyph from a trimmed line."""
    for glyph, status in _GLYPH_STATUS.items():
        if line.startswith(glyph):
            rest = line[len(glyph):]
            # Emoji may carry a variation selector.
            rest = rest.lstrip("\ufe0f")
            if rest.startswith(" ") or not rest:
                return status, rest.strip()
    return TaskStatus.NOT_STARTED, line


def strip_timestamp(line: str) -> str:
    idx = line.find(TIMESTAMP_MARKER)
    if idx == -1:
        return line
    return line[:idx].rstrip()


def parse_header(line: str) -> Header | None:
    """Return a :class:`Header` when *line* is a task header, else ``None``."""
    trimmed = line.strip()
    if not trimmed:
        return None

    status, rest = split_glyph(trimmed)
    body = strip_timestamp(rest)

    for pattern in (_RE_BOLD_HEADER, _RE_BOLD_INNER_COLON, _RE_HEADING_HEADER):
        match = pattern.match(body)
        if match:
            title = match.group("title").strip() or "Untitled Task"
            return Header(title=title, status=status, body=body)
    return None


def format_header(header: Header, status: TaskStatus, timestamp: str) -> str:
    glyph = STATUS_GLYPHS.get(status, STATUS_GLYPHS[TaskStatus.IN_PROGRESS])
    return f"{glyph} {header.body}{TIMESTAMP_MARKER} {timestamp})*"


# ---------------------------------------------------------------------------
# Key lines
# ---------------------------------------------------------------------------

_STATUS_PREFIXES = ("- Status:", "**Status:**")


def match_status_line(trimmed: str) -> str | None:
    """Return the status prefix used by *trimmed*, or ``None``."""
    for prefix in _STATUS_PREFIXES:
        if trimmed.startswith(prefix):
            return prefix
    return None


GENERATED_FILES_LABEL = "- Generated Files:"
PULL_REQUEST_LABEL = "- Pull Request:"


def match_key(trimmed: str, *names: str) -> str | None:
    """Match ``**Name:** value`` or ``- **Name**: value`` for any of *names*.

    Returns the value (possibly empty) or ``None`` when the line is not one of
    the given keys.
    """
    for name in names:
        for prefix in (f"**{name}:**", f"- **{name}**:", f"- **{name}:**"):
            if trimmed.startswith(prefix):
                return trimmed[len(prefix):].strip()
    return None
