"""Demo producer writing sample result files for the reporter to collect."""

from __future__ import annotations

import asyncio
import json
import logging
import os
import random
import secrets
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from .config import DEFAULT_DEMO_INTERVAL, RESULT_FILE_SUFFIX

log = logging.getLogger("gistreport/producer")


def result_filename(now_ms: int | None = None, suffix: str | None = None) -> str:
    """Return a result filename like `result_1700000000000_k3x9q.jsonl`."""
    if now_ms is None:
        now_ms = time.time_ns() // 1_000_000
    if suffix is None:
        suffix = secrets.token_hex(3)
    return f"result_{now_ms}_{suffix}{RESULT_FILE_SUFFIX}"


def write_result(results_dir: str | Path, data: Any) -> Path:
    """
    Write data as a single JSON line into a new result file.

    We write a dot-prefixed temporary file in the same directory and then
    rename it, so the reporter never selects a partially written file.
    """
    results_dir = Path(results_dir)
    dest = results_dir / result_filename()
    tmp_file = results_dir / f".{dest.name}.tmp"
    with open(tmp_file, "w", encoding="utf-8", newline="") as fp:
        fp.write(json.dumps(data) + "\n")
    os.replace(tmp_file, dest)
    log.info("wrote %s", dest.name)
    return dest


def demo_record(counter: int) -> dict[str, Any]:
    return {
        "id": counter,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "value": random.random() * 1000,
        "message": f"Result #{counter}",
    }


async def run_demo(
    results_dir: str | Path,
    *,
    interval: float = DEFAULT_DEMO_INTERVAL,
    count: int | None = None,
) -> list[Path]:
    """
    Write one demo record every interval seconds.

    Runs forever unless count is given, and returns the written paths.
    """
    results_dir = Path(results_dir)
    results_dir.mkdir(parents=True, exist_ok=True)
    log.info("demo producer writing to %s every %.1fs", results_dir, interval)

    written: list[Path] = []
    counter = 0
    while count is None or counter < count:
        await asyncio.sleep(interval)
        counter += 1
        written.append(await asyncio.to_thread(write_result, results_dir, demo_record(counter)))
    return written
