"""JSONL gist reporter library.

This library collects newline-delimited JSON result files written by
worker processes, merges them into a single GitHub gist used as an
append-only log, and deletes the local files once the gist was updated.
"""

from .ghremote import DownloadResult, DownloadStatus, GistRemoteStore
from .pipeline import CycleOutcome, CycleState, GistReportPipeline, process_results
from .results import ScanResult, ScanStatus, StagingFile
from .scheduler import ReportScheduler

__all__ = [
    "CycleOutcome",
    "CycleState",
    "DownloadResult",
    "DownloadStatus",
    "GistRemoteStore",
    "GistReportPipeline",
    "ReportScheduler",
    "ScanResult",
    "ScanStatus",
    "StagingFile",
    "process_results",
]
