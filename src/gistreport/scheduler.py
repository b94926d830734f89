"""Module containing the periodic scheduler driving the pipeline."""

from __future__ import annotations

import asyncio
import logging
import signal
from collections.abc import Awaitable, Callable, Iterable
from typing import Any

from .config import DEFAULT_SCAN_INTERVAL
from .scripting.gr_exception import Interceptor

log = logging.getLogger("gistreport/scheduler")

DEFAULT_SIGNALS = (signal.SIGTERM, signal.SIGINT)


class ReportScheduler:
    """
    Run a cycle function now and then every `interval` seconds.

    Cycles never overlap: the next sleep starts only once the previous
    cycle returned. Each cycle runs inside an Interceptor, so an exception
    is logged and confined to its cycle.

    Shutdown does not cancel a running cycle. It stops the periodic task
    after the in-flight cycle completes and then runs one final cycle, so
    results written just before termination are flushed.
    """

    def __init__(
        self,
        run_cycle: Callable[[], Awaitable[Any]],
        *,
        interval: float = DEFAULT_SCAN_INTERVAL,
    ) -> None:
        if interval <= 0:
            raise ValueError(f"interval must be positive, got: {interval}")
        self.run_cycle = run_cycle
        self.interval = interval
        self.interceptor = Interceptor()
        self.cycles = 0
        self._stopping = asyncio.Event()
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start the periodic task on the running event loop."""
        if self._task is not None:
            raise RuntimeError("scheduler already started")
        self._task = asyncio.create_task(self._loop(), name="gistreport-scheduler")

    async def run_once(self) -> None:
        """Run a single cycle, confining its exceptions."""
        self.cycles += 1
        log.debug("cycle #%d... start", self.cycles)
        with self.interceptor:
            await self.run_cycle()
        log.debug("cycle #%d... done", self.cycles)

    async def _loop(self) -> None:
        while not self._stopping.is_set():
            await self.run_once()
            try:
                await asyncio.wait_for(self._stopping.wait(), timeout=self.interval)
            except asyncio.TimeoutError:
                continue

    async def shutdown(self) -> None:
        """Stop the periodic task, wait for the in-flight cycle, and run a final one."""
        log.info("shutting down...")
        self._stopping.set()
        if self._task is not None:
            await self._task
        await self.run_once()
        log.info("shutting down... ok")

    async def serve(self, signals: Iterable[signal.Signals] = DEFAULT_SIGNALS) -> None:
        """
        Run until one of the given signals is delivered, then shut down.

        Signal handlers are installed on the running loop and removed on
        return, so this only works from the main thread.
        """
        loop = asyncio.get_running_loop()
        requested = asyncio.Event()
        installed = list(signals)
        for signum in installed:
            loop.add_signal_handler(signum, requested.set)
        try:
            self.start()
            await requested.wait()
        finally:
            for signum in installed:
                loop.remove_signal_handler(signum)
        await self.shutdown()
