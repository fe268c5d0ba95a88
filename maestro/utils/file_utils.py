import re
import time
from pathlib import Path

import aiofiles  # type: ignore[import-untyped]

_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9_.-]")


def safe_filename(name: str) -> str:
    cleaned = _UNSAFE_CHARS.sub("_", name.strip())
    return cleaned or "untitled"


def create_run_dir(root: str | Path) -> Path:
    """Create a fresh ``<root>/<epoch>`` directory, suffixing on collision."""
    base = Path(root) / str(int(time.time()))
    candidate = base
    suffix = 1
    while True:
        try:
            candidate.mkdir(parents=True, exist_ok=False)
            return candidate
        except FileExistsError:
            candidate = base.with_name(f"{base.name}-{suffix}")
            suffix += 1


async def write_text(path: str | Path, content: str) -> Path:
    """Write *content* to *path*, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    async with aiofiles.open(path, mode="w", encoding="utf-8") as fh:
        await fh.write(content)
    return path
