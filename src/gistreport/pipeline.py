"""Module containing the merge, upload, and cleanup pipeline.

One cycle of the pipeline runs these steps strictly in order:

1. scan the results directory (an empty scan ends the cycle with no
   network calls and without touching the staging file);

2. download the current gist content into the staging file;

3. append each scanned file to the staging file, in scan order;

4. upload the staging file;

5. on success only, delete the scanned files;

6. always remove the staging file.

A result file is therefore deleted only after its content was included
in a confirmed remote write. Download failures are treated as "nothing
uploaded yet" which, if content does exist remotely, means the next
upload replaces it with only the new results. This is a known gap.
"""

from __future__ import annotations

import asyncio
import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Protocol

from filelock import Timeout

from .config import DEFAULT_RESULTS_DIR, DEFAULT_STAGING_FILENAME
from .ghremote import DownloadResult, GistRemoteStore
from .results import ScanResult, StagingFile, scan_result_files

log = logging.getLogger("gistreport/pipeline")


class RemoteStore(Protocol):
    """
    Represent the remote document the pipeline merges into.

    Methods:
        download: return the current content as a tagged DownloadResult.
        upload: replace the content and return whether it worked.
    """

    async def download(self) -> DownloadResult: ...

    async def upload(self, content: str) -> bool: ...


class CycleState(str, Enum):
    """Final state of a pipeline cycle."""

    NO_WORK = "no_work"
    UPLOADED = "uploaded"
    UPLOAD_FAILED = "upload_failed"
    LOCKED = "locked"


@dataclass(kw_only=True)
class CycleOutcome:
    """
    Outcome of a single pipeline cycle.

    Attributes:
        state: the final state of the cycle.
        scan: the scan result the cycle worked on.
        download: the download result, None when we did not download.
        deleted: result files removed after a successful upload.
        delete_failures: result files we failed to remove, with the reason.
    """

    state: CycleState
    scan: ScanResult
    download: DownloadResult | None = None
    deleted: list[Path] = field(default_factory=list)
    delete_failures: list[tuple[Path, str]] = field(default_factory=list)

    @property
    def files(self) -> list[Path]:
        """The result files selected by the scan."""
        return self.scan.files


class GistReportPipeline:
    """
    Merge local result files into a remote document.

    Invocations must not overlap. The scheduler guarantees this within
    a process, and a non-blocking file lock on the staging file makes a
    second reporter process skip its cycle instead of racing.
    """

    def __init__(
        self,
        *,
        store: RemoteStore,
        results_dir: str | Path = DEFAULT_RESULTS_DIR,
        staging_file: str | Path | None = None,
    ) -> None:
        self.store = store
        self.results_dir = Path(results_dir)
        if staging_file is None:
            staging_file = self.results_dir / DEFAULT_STAGING_FILENAME
        self.staging = StagingFile(Path(staging_file))

    async def process_results(self) -> CycleOutcome:
        """
        Run one full cycle and return its outcome.

        Raises:
            OSError: when a result file cannot be read while merging.
                Nothing remote was changed and no result file was deleted
                in that case.
        """
        log.info("checking for new results in %s...", self.results_dir)
        scan = await scan_result_files(self.results_dir)
        if not scan.files:
            log.info("no new results found")
            return CycleOutcome(state=CycleState.NO_WORK, scan=scan)

        log.info("found %d result files", len(scan.files))

        lock = self.staging.lock()
        try:
            lock.acquire(timeout=0)
        except Timeout:
            log.warning("%s is locked by another reporter... skipping cycle", self.staging.path)
            return CycleOutcome(state=CycleState.LOCKED, scan=scan)

        try:
            return await self._merge_and_upload(scan)
        finally:
            await self.staging.discard()
            lock.release()

    async def _merge_and_upload(self, scan: ScanResult) -> CycleOutcome:
        # 1. start from the remote content, or from an empty file
        download = await self.store.download()
        await self.staging.reset(download.content if download.found else "")
        if download.found:
            log.info("downloaded existing gist")
        else:
            log.info("starting fresh")

        # 2. bridge the previous batch to the new one
        if download.found and await self.staging.size() > 0:
            await self.staging.append("\n")

        # 3. merge sequentially since the order defines the document
        for path in scan.files:
            await self.staging.append_from(path)

        # 4. upload the merged document
        content = await self.staging.read()
        outcome = CycleOutcome(state=CycleState.UPLOAD_FAILED, scan=scan, download=download)
        if not await self.store.upload(content):
            log.warning("upload failed... keeping %d result files", len(scan.files))
            return outcome

        # 5. the content is remote now, so deletions are independent
        outcome.state = CycleState.UPLOADED
        await self._delete_all(outcome)
        log.info("uploaded and deleted %d files", len(outcome.deleted))
        return outcome

    async def _delete_all(self, outcome: CycleOutcome) -> None:
        results = await asyncio.gather(
            *(asyncio.to_thread(os.unlink, path) for path in outcome.files),
            return_exceptions=True,
        )
        for path, result in zip(outcome.files, results):
            if isinstance(result, BaseException):
                log.warning("deleting %s... failure: %s", path, result)
                outcome.delete_failures.append((path, str(result)))
                continue
            outcome.deleted.append(path)


async def process_results(
    gist_id: str,
    token: str,
    results_dir: str | Path = DEFAULT_RESULTS_DIR,
    staging_file: str | Path | None = None,
) -> CycleOutcome:
    """Run one cycle against the given gist using a throwaway GistRemoteStore."""
    with GistRemoteStore(gist_id=gist_id, token=token) as store:
        pipeline = GistReportPipeline(
            store=store,
            results_dir=results_dir,
            staging_file=staging_file,
        )
        return await pipeline.process_results()
