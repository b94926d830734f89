"""Package for the local side of the reporter: result files and staging.

On-Disk Format
--------------

Producers write result files into the results directory (default
`./results`), one JSON object per line:

    $resultsdir/result_{epoch_ms}_{random}.jsonl

Any file whose name ends with `.jsonl` and does not start with `.` is
eligible for upload. Producers write under a dot-prefixed temporary name
and rename, so a file becomes visible to the scanner only once complete.

The reporter keeps two dot-prefixed files of its own, which the scanner
therefore never selects:

    $resultsdir/.gist_backup        (staging file, one per cycle)
    $resultsdir/.gist_backup.lock   (cross-process lock on the staging file)

The staging file accumulates the remote document followed by the new
local content, is uploaded, and is removed at the end of every cycle.

Reading
-------

`read_text_streaming` reads files in bounded chunks (16 KiB by default)
without newline translation, so the merged document is byte-for-byte
the concatenation of its inputs.
"""

from .scan import ScanResult, ScanStatus, list_result_files, scan_result_files, select_result_files
from .staging import StagingFile
from .stream import append_file, read_text_streaming

__all__ = [
    "ScanResult",
    "ScanStatus",
    "StagingFile",
    "append_file",
    "list_result_files",
    "read_text_streaming",
    "scan_result_files",
    "select_result_files",
]
