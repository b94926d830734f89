"""Module to find the result files eligible for upload."""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from ..config import RESULT_FILE_SUFFIX

log = logging.getLogger("results/scan")


class ScanStatus(str, Enum):
    """Outcome of scanning the results directory."""

    OK = "ok"
    EMPTY = "empty"
    FAILED = "failed"


@dataclass(frozen=True, kw_only=True)
class ScanResult:
    """
    Result of scanning the results directory.

    Attributes:
        status: OK when files were found, EMPTY when the directory holds
            no eligible file, FAILED when the directory could not be listed.
        files: the selected paths (empty unless status is OK).
        error: description of the listing failure, if any.
    """

    status: ScanStatus
    files: list[Path] = field(default_factory=list)
    error: str | None = None


def is_result_file(filename: str) -> bool:
    """Return whether a bare filename is a visible `.jsonl` result file."""
    return filename.endswith(RESULT_FILE_SUFFIX) and not filename.startswith(".")


def select_result_files(results_dir: Path, filenames: Iterable[str]) -> list[Path]:
    """
    Filter a directory listing down to the eligible result files.

    The selection is sorted by name, so the same listing always yields
    the same order. Producers embed a timestamp in the name, therefore
    the order is also the order in which results were written.
    """
    return [results_dir / name for name in sorted(filenames) if is_result_file(name)]


async def scan_result_files(results_dir: str | Path) -> ScanResult:
    """Scan results_dir and return a tagged ScanResult, never raising on listing errors."""
    results_dir = Path(results_dir)
    try:
        filenames = await asyncio.to_thread(os.listdir, results_dir)
    except OSError as exc:
        log.warning("scanning %s... failure: %s", results_dir, exc)
        return ScanResult(status=ScanStatus.FAILED, error=str(exc))

    files = select_result_files(results_dir, filenames)
    if not files:
        return ScanResult(status=ScanStatus.EMPTY)
    return ScanResult(status=ScanStatus.OK, files=files)


async def list_result_files(results_dir: str | Path) -> list[Path]:
    """Return the eligible result files, or an empty list if listing failed."""
    return (await scan_result_files(results_dir)).files
