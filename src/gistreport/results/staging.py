"""Module containing the staging file used to build the merged document."""

from __future__ import annotations

import asyncio
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from filelock import BaseFileLock, FileLock

from .stream import append_file, append_text, read_text_streaming

STAGING_LOCK_SUFFIX: Final[str] = ".lock"

log = logging.getLogger("results/staging")


def _write_text(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8", newline="") as fp:
        fp.write(content)


@dataclass(frozen=True)
class StagingFile:
    """
    Local temporary file accumulating the merge result before upload.

    A cycle always starts with `reset()` so that a file left behind by an
    aborted cycle never leaks stale content into the next upload, and
    always ends with `discard()`.
    """

    path: Path

    def lock(self) -> BaseFileLock:
        """Return a FileLock guarding this staging file across processes."""
        lock_path = self.path.with_name(self.path.name + STAGING_LOCK_SUFFIX)
        lock_path.parent.mkdir(parents=True, exist_ok=True)
        return FileLock(lock_path)

    async def reset(self, content: str = "") -> None:
        """Overwrite the staging file with content (empty by default)."""
        await asyncio.to_thread(_write_text, self.path, content)

    async def size(self) -> int:
        """Return the staging file size in bytes."""
        stat = await asyncio.to_thread(os.stat, self.path)
        return stat.st_size

    async def append(self, content: str) -> None:
        """Append raw text to the staging file."""
        await append_text(self.path, content)

    async def append_from(self, source: str | Path) -> None:
        """Stream the content of source onto the end of the staging file."""
        await append_file(source, self.path)

    async def read(self) -> str:
        """Read back the whole staging file."""
        return await read_text_streaming(self.path)

    async def discard(self) -> None:
        """Best-effort removal of the staging file. Errors are only logged."""
        try:
            await asyncio.to_thread(os.unlink, self.path)
        except OSError as exc:
            log.debug("removing %s... ignored: %s", self.path, exc)
