"""Optional scripting helpers to confine exceptions and convert them to exit codes."""

from __future__ import annotations

from .gr_logging import log


class Interceptor:
    """
    Context manager to intercept exceptions.

    Use as a context manager, possibly around awaits:

        interceptor = gr_exception.Interceptor()
        with interceptor:
            await pipeline.process_results()
        print(interceptor.failed)
        sys.exit(interceptor.exitcode())

    Exceptions deriving from Exception are logged and suppressed, so a
    failing reporter cycle never tears down the scheduling loop. The
    failures field counts how many blocks failed, so one interceptor
    can be reused across cycles.

    BaseException subclasses that are not Exceptions (KeyboardInterrupt,
    SystemExit, asyncio.CancelledError) always propagate.
    """

    def __init__(self):
        self.failures = 0
        self.last_error: BaseException | None = None

    @property
    def failed(self) -> bool:
        """Whether any intercepted block raised."""
        return self.failures > 0

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        if exc_type is None:
            return False
        if not issubclass(exc_type, Exception):
            return False
        log.error("operation failed: %s", exc_value, exc_info=(exc_type, exc_value, traceback))
        self.failures += 1
        self.last_error = exc_value
        return True  # suppress the exception

    def exitcode(self) -> int:
        """
        Return the exitcode to pass to sys.exit.

        Zero on success, 1 on failure.
        """
        return int(self.failed)
