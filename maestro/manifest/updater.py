"""Manifest updater -- writes task outcomes back into the manifest text.

:func:`update_manifest_text` is a pure text transform; :class:`ManifestFile`
wraps it in a read-modify-write over the file on disk.  Callers that may
finish tasks concurrently must serialize calls to :meth:`ManifestFile.apply`;
:class:`ManifestLocks` hands out one lock per manifest so that separate
runs over the same file serialize as well.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

import aiofiles  # type: ignore[import-untyped]

from maestro.core.task.models import Task, TaskResult, TaskStatus
from maestro.manifest import syntax
from maestro.utils.exceptions import ManifestUpdateError
from maestro.utils.logging import get_logger

logger = get_logger("manifest.updater")


def _annotation_lines(result: TaskResult, indent: str) -> list[str]:
    """Lines inserted under the status line of a completed task."""
    if result.status != TaskStatus.COMPLETED:
        return []
    lines: list[str] = []
    if result.generated_files:
        lines.append(f"{indent}{syntax.GENERATED_FILES_LABEL}")
        lines.extend(f"{indent}  - {path}" for path in result.generated_files)
    if result.pull_request_url:
        lines.append(f"{indent}{syntax.PULL_REQUEST_LABEL} [link]({result.pull_request_url})")
    return lines


def update_manifest_text(text: str, task: Task, result: TaskResult) -> str:
    """Return *text* with *task*'s header and status line reflecting *result*.

    The first header whose title equals ``task.title`` is rewritten with the
    status glyph and a completion timestamp taken from ``result.completed_at``.
    The first status line inside that block is rewritten to the result's
    status label.  Lines nested under the status line stay where they are;
    for completed results the generated files and pull request are listed
    right after them.  An annotation block left there by an earlier update
    is replaced, so applying the same result twice is a no-op.  Every other
    line passes through unchanged.
    """
    timestamp = result.completed_at.strftime(syntax.TIMESTAMP_FORMAT)
    updated: list[str] = []

    matched = False
    in_target = False
    status_done = False
    # Set while scanning the lines after the rewritten status line.
    status_indent: int | None = None
    pending: list[str] = []
    in_children = False
    in_files = False

    def flush() -> None:
        nonlocal status_indent
        updated.extend(pending)
        pending.clear()
        status_indent = None

    for line in text.splitlines():
        trimmed = line.strip()
        indent = len(line) - len(line.lstrip())

        if status_indent is not None:
            if in_children and trimmed and indent > status_indent:
                updated.append(line)
                continue
            in_children = False
            if indent == status_indent and trimmed.startswith(syntax.GENERATED_FILES_LABEL):
                in_files = True
                continue
            if in_files and indent > status_indent and trimmed.startswith("- "):
                continue
            in_files = False
            if indent == status_indent and trimmed.startswith(syntax.PULL_REQUEST_LABEL):
                continue
            flush()

        header = syntax.parse_header(line)
        if header is not None:
            in_target = False
            if not matched and header.title == task.title:
                matched = True
                in_target = True
                status_done = False
                updated.append(syntax.format_header(header, result.status, timestamp))
                continue
            updated.append(line)
            continue

        if in_target and not status_done:
            prefix = syntax.match_status_line(trimmed)
            if prefix is not None:
                leading = line[:indent]
                updated.append(f"{leading}{prefix} {result.status.value}")
                pending.extend(_annotation_lines(result, leading))
                status_done = True
                status_indent = indent
                in_children = True
                in_files = False
                continue

        updated.append(line)

    if status_indent is not None:
        flush()

    output = "\n".join(updated)
    if text.endswith("\n"):
        output += "\n"
    return output


class ManifestFile:
    """The manifest on disk, rewritten in place after every task.

    Parameters
    ----------
    path:
        Location of the manifest file.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    async def read(self) -> str:
        async with aiofiles.open(self.path, mode="r", encoding="utf-8") as fh:
            return await fh.read()

    async def apply(self, task: Task, result: TaskResult) -> None:
        """Read the manifest, update *task*'s block, and write it back.

        Raises :class:`ManifestUpdateError` when the file cannot be read,
        decoded or written.
        """
        try:
            content = await self.read()
            updated = update_manifest_text(content, task, result)
            async with aiofiles.open(self.path, mode="w", encoding="utf-8") as fh:
                await fh.write(updated)
        except (OSError, UnicodeError) as exc:
            raise ManifestUpdateError(str(self.path), str(exc)) from exc

        logger.info(
            "manifest_updated",
            path=str(self.path),
            task_title=task.title,
            status=result.status.value,
        )


class ManifestLocks:
    """One :class:`asyncio.Lock` per manifest file, keyed by resolved path.

    Share one instance between every scheduler that may run at the same
    time (the API keeps it on ``app.state``) so that their rewrites of a
    common manifest never overlap.
    """

    def __init__(self) -> None:
        self._locks: dict[Path, asyncio.Lock] = {}

    def for_path(self, path: str | Path) -> asyncio.Lock:
        key = Path(path).resolve()
        lock = self._locks.get(key)
        if lock is None:
            lock = self._locks[key] = asyncio.Lock()
        return lock

    def __len__(self) -> int:
        return len(self._locks)
