"""Optional scripting extensions to configure logging.

Interactive sessions get a rich handler with local-timezone timestamps,
while a reporter running under a supervisor (no TTY, or `NO_COLOR` set)
gets plain single-line records that are easy to grep in container logs.
"""

from __future__ import annotations

import logging
import os
import sys
from datetime import datetime
from pathlib import Path

from rich.logging import RichHandler

LOG_FORMAT = "<%(name)s> %(message)s"

LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"

PLAIN_FORMAT = f"[%(asctime)s] %(levelname)s {LOG_FORMAT}"


class LocalTZRichHandler(RichHandler):
    """Extend the RichHandler to provide timezone aware timestamps."""

    def render(self, *, record, traceback, message_renderable):
        level = self.get_level_text(record)
        time_format = None if self.formatter is None else self.formatter.datefmt
        log_time = datetime.fromtimestamp(record.created).astimezone()
        return self._log_render(
            self.console,
            [message_renderable] if not traceback else [message_renderable, traceback],
            log_time=log_time,
            time_format=time_format,
            level=level,
            path=Path(record.pathname).name,
            line_no=record.lineno,
            link_path=record.pathname if self.enable_link_path else None,
        )


def use_rich() -> bool:
    """Return whether stderr is an interactive terminal that wants colors."""
    if os.getenv("NO_COLOR") is not None:
        return False
    return sys.stderr.isatty()


def configure(verbose: bool, *, rich: bool | None = None) -> None:
    """
    Configure the logging subsystem.

    Arguments:
        verbose: log at DEBUG level rather than INFO.
        rich: force (True) or disable (False) the LocalTZRichHandler. When
            None we decide using `use_rich()`.
    """
    level = logging.DEBUG if verbose else logging.INFO
    if rich is None:
        rich = use_rich()

    # rich renders time and level itself and reads datefmt from the formatter
    handler: logging.Handler
    if rich:
        handler = LocalTZRichHandler(show_time=True, show_level=True, show_path=False)
        fmt, datefmt = LOG_FORMAT, f"[{LOG_DATEFMT} %z]"
    else:
        handler = logging.StreamHandler()
        fmt, datefmt = PLAIN_FORMAT, LOG_DATEFMT

    logging.basicConfig(
        level=level,
        format=fmt,
        datefmt=datefmt,
        handlers=[handler],
        force=True,
    )

    # urllib3 logs every connection at DEBUG and drowns the cycle logs
    logging.getLogger("urllib3").setLevel(logging.INFO)


log = logging.getLogger("scripting")
"""Logger that the scripting package should use."""
