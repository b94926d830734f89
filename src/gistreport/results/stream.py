"""Bounded-buffer reads and appends of result files."""

from __future__ import annotations

import asyncio
from pathlib import Path

from ..config import STREAM_BUFFER_SIZE


def _read_chunks(path: Path, chunk_size: int) -> str:
    chunks: list[str] = []
    with open(path, encoding="utf-8", errors="replace", newline="") as fp:
        while chunk := fp.read(chunk_size):
            chunks.append(chunk)
    return "".join(chunks)


def _append_text(path: Path, content: str) -> None:
    with open(path, "a", encoding="utf-8", newline="") as fp:
        fp.write(content)


async def read_text_streaming(
    path: str | Path,
    *,
    chunk_size: int = STREAM_BUFFER_SIZE,
) -> str:
    """
    Return the full text of the file at path.

    The file is read in chunks of at most chunk_size characters, so we
    never ask the OS for one unbounded read. Newlines are preserved as
    they are on disk. Bytes that are not valid UTF-8 decode to U+FFFD.

    Raises:
        OSError: if the file cannot be opened or read (e.g., it vanished).
    """
    if chunk_size <= 0:
        raise ValueError(f"chunk_size must be positive, got: {chunk_size}")
    return await asyncio.to_thread(_read_chunks, Path(path), chunk_size)


async def append_text(path: str | Path, content: str) -> None:
    """Append content to the file at path, creating it if needed."""
    await asyncio.to_thread(_append_text, Path(path), content)


async def append_file(source: str | Path, target: str | Path) -> None:
    """Append the content of source to target. Read errors propagate."""
    content = await read_text_streaming(source)
    await append_text(target, content)
