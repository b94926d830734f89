"""Module containing the GistRemoteStore implementation."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import requests
from dacite import from_dict

from ..config import DEFAULT_HTTP_TIMEOUT, GITHUB_ACCEPT, GITHUB_API_URL, RESULTS_FILENAME

log = logging.getLogger("ghremote/gist")


@dataclass(frozen=True, kw_only=True)
class GistFile:
    """Single file entry of a gist, as returned by the GitHub API."""

    filename: str | None = None
    content: str | None = None
    truncated: bool = False
    raw_url: str | None = None


@dataclass(frozen=True, kw_only=True)
class Gist:
    """The subset of a gist we care about: its files."""

    files: dict[str, GistFile | None] = field(default_factory=dict)

    def get_file(self, name: str) -> GistFile | None:
        """Return the named file entry, or None when the gist has no such file."""
        return self.files.get(name)


class DownloadStatus(str, Enum):
    """Outcome of downloading the current remote document."""

    FOUND = "found"
    EMPTY = "empty"
    FAILED = "failed"


@dataclass(frozen=True, kw_only=True)
class DownloadResult:
    """
    Result of downloading the named entry of the gist.

    Attributes:
        status: FOUND when the entry exists with non-empty content, EMPTY
            when the gist has no such entry (or an empty one), and FAILED
            when we could not confirm the remote state at all.
        content: the downloaded content (empty unless status is FOUND).
        error: description of the failure, if any.

    Callers currently treat FAILED exactly like EMPTY. Keeping the two
    apart makes that decision visible.
    """

    status: DownloadStatus
    content: str = ""
    error: str | None = None

    @property
    def found(self) -> bool:
        return self.status == DownloadStatus.FOUND


def _parse_gist(data: Any) -> Gist:
    """Parse the JSON body of a gist response."""
    if not isinstance(data, dict):
        raise ValueError(f"unexpected gist response type: {type(data).__name__}")
    return from_dict(Gist, data)


class GistRemoteStore:
    """
    Remote store for the merged results using a single GitHub gist.

    Each instance is bound to one gist and one file entry within it. We
    make exactly one attempt per operation: a failed cycle is retried by
    the scheduler on its next tick.

    Blocking HTTP calls run in a worker thread so that awaiting them does
    not block the event loop.
    """

    def __init__(
        self,
        *,
        gist_id: str,
        token: str,
        filename: str = RESULTS_FILENAME,
        base_url: str = GITHUB_API_URL,
        session: requests.Session | None = None,
        timeout: float = DEFAULT_HTTP_TIMEOUT,
    ) -> None:
        self.gist_id = gist_id
        self.filename = filename
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session if session is not None else requests.Session()
        self._owns_session = session is None
        self._token = token

    def __enter__(self) -> GistRemoteStore:
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying HTTP session, unless the caller provided it."""
        if self._owns_session:
            self.session.close()

    def url(self) -> str:
        """Return the API endpoint of the gist."""
        return f"{self.base_url}/gists/{self.gist_id}"

    def headers(self) -> dict[str, str]:
        """Return the headers for authenticated API requests."""
        return {
            "Authorization": f"Bearer {self._token}",
            "Accept": GITHUB_ACCEPT,
        }

    async def download(self) -> DownloadResult:
        """
        Download the current content of the results entry.

        Never raises: transport, authentication, and parse errors are logged
        and reported as DownloadStatus.FAILED.
        """
        try:
            log.info("downloading gist %s... start", self.gist_id)
            content = await asyncio.to_thread(self._download)
        except Exception as exc:
            log.warning("downloading gist %s... failure: %s", self.gist_id, exc)
            return DownloadResult(status=DownloadStatus.FAILED, error=str(exc))

        if not content:
            log.info("downloading gist %s... ok (no %s content)", self.gist_id, self.filename)
            return DownloadResult(status=DownloadStatus.EMPTY)

        log.info("downloading gist %s... ok (%d chars)", self.gist_id, len(content))
        return DownloadResult(status=DownloadStatus.FOUND, content=content)

    def _download(self) -> str | None:
        response = self.session.get(self.url(), headers=self.headers(), timeout=self.timeout)
        response.raise_for_status()
        entry = _parse_gist(response.json()).get_file(self.filename)
        if entry is None:
            return None
        if not entry.truncated:
            return entry.content

        # The API only returns a prefix of large files
        if not entry.raw_url:
            raise ValueError(f"{self.filename} is truncated but has no raw_url")
        log.debug("fetching truncated %s from %s", self.filename, entry.raw_url)
        raw = self.session.get(entry.raw_url, headers=self.headers(), timeout=self.timeout)
        raw.raise_for_status()
        return raw.content.decode("utf-8")

    async def upload(self, content: str) -> bool:
        """
        Replace the results entry with content and return whether it worked.

        Never raises: failures are logged with their detail and reported
        as False so the caller can decide whether to delete local files.
        """
        try:
            log.info("uploading %d chars to gist %s... start", len(content), self.gist_id)
            await asyncio.to_thread(self._upload, content)
            log.info("uploading %d chars to gist %s... ok", len(content), self.gist_id)
            return True
        except Exception as exc:
            log.error("uploading to gist %s... failure: %s", self.gist_id, exc)
            return False

    def _upload(self, content: str) -> None:
        response = self.session.patch(
            self.url(),
            json={"files": {self.filename: {"content": content}}},
            headers=self.headers(),
            timeout=self.timeout,
        )
        response.raise_for_status()


async def download_current(gist_id: str, token: str, **kwargs: Any) -> tuple[str, bool]:
    """Return the current content of the results entry and whether it was found."""
    with GistRemoteStore(gist_id=gist_id, token=token, **kwargs) as store:
        result = await store.download()
    return result.content, result.found


async def upload(gist_id: str, token: str, content: str, **kwargs: Any) -> bool:
    """Replace the results entry with content and return whether it worked."""
    with GistRemoteStore(gist_id=gist_id, token=token, **kwargs) as store:
        return await store.upload(content)
