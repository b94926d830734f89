"""
GitHub gist remote store for the merged results document.

This is a deliberately crude durable log: a single gist whose
`results.jsonl` entry is downloaded, extended locally, and replaced
wholesale on every cycle. It assumes a single writer.

Gist format (subset of the GitHub REST API response we consume):

{
  "id": "aa5a315d61ae9438b18d",
  "files": {
    "results.jsonl": {
      "filename": "results.jsonl",
      "content": "{\"id\": 1, ...}\n{\"id\": 2, ...}\n",
      "truncated": false,
      "raw_url": "https://gist.githubusercontent.com/.../results.jsonl"
    }
  }
}

When a file is too large, the API returns `"truncated": true` and only a
prefix of the content; we then fetch the full content from `raw_url`.

Updates are sent as:

    PATCH /gists/{gist_id}
    {"files": {"results.jsonl": {"content": "..."}}}
"""

from .gist import (
    DownloadResult,
    DownloadStatus,
    Gist,
    GistFile,
    GistRemoteStore,
    download_current,
    upload,
)

__all__ = [
    "DownloadResult",
    "DownloadStatus",
    "Gist",
    "GistFile",
    "GistRemoteStore",
    "download_current",
    "upload",
]
