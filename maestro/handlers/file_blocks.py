"""Extract ``FILE:`` sections from an LLM response and write them to disk.

Handlers that ask the model for whole files use this response layout::

    FILE: docs/guide.md
    DESCRIPTION: What the file is for
    ```markdown
    # Guide
    ```

Every fenced block after a ``FILE:`` (or ``TESTS:``) line becomes that
file's content; a ``DESCRIPTION:`` line inside the section is optional.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path, PurePosixPath

from maestro.utils.file_utils import safe_filename, write_text

_PATH_PREFIXES = ("FILE:", "TESTS:")
_DESCRIPTION_PREFIX = "DESCRIPTION:"
_FENCE = "```"


@dataclass
class FileBlock:
    path: str
    content: str
    description: str = ""


def parse_file_blocks(response: str) -> list[FileBlock]:
    """Return the file sections of *response* in order of appearance.

    Sections without any fenced content are dropped.
    """
    blocks: list[FileBlock] = []
    path: str | None = None
    description = ""
    content: list[str] = []
    in_fence = False

    def flush() -> None:
        if path and content:
            blocks.append(FileBlock(path=path, content="\n".join(content), description=description))

    for line in response.splitlines():
        stripped = line.strip()

        if in_fence:
            if stripped.startswith(_FENCE):
                in_fence = False
            else:
                content.append(line)
            continue

        prefix = next((p for p in _PATH_PREFIXES if stripped.startswith(p)), None)
        if prefix is not None:
            flush()
            path = stripped[len(prefix):].strip()
            description = ""
            content = []
        elif stripped.startswith(_DESCRIPTION_PREFIX) and path is not None:
            description = stripped[len(_DESCRIPTION_PREFIX):].strip()
        elif stripped.startswith(_FENCE) and path is not None:
            in_fence = True

    flush()
    return blocks


def contained_path(root: Path, relative: str) -> Path:
    """Resolve *relative* below *root*.

    Absolute paths and paths escaping *root* collapse to a sanitized file
    name directly inside it.
    """
    candidate = PurePosixPath(relative.replace("\\", "/"))
    if candidate.is_absolute() or ".." in candidate.parts or not candidate.parts:
        return root / safe_filename(candidate.name or relative)
    return root.joinpath(*candidate.parts)


async def write_file_blocks(blocks: list[FileBlock], root: Path) -> list[str]:
    """Write every block below *root* and return the written paths."""
    written: list[str] = []
    for block in blocks:
        target = contained_path(root, block.path)
        await write_text(target, block.content)
        written.append(str(target))
    return written
