"""Run command: the long-running reporter process."""

import asyncio
import logging

import click

from ..config import ReporterConfig
from ..ghremote import GistRemoteStore
from ..pipeline import GistReportPipeline
from ..scheduler import ReportScheduler
from ..scripting import gr_logging
from . import cli
from .options import reporter_options, resolve_config

log = logging.getLogger("gistreport/cli")


async def serve(config: ReporterConfig) -> ReportScheduler:
    """Run the scheduler for config until SIGTERM or SIGINT and return it."""
    with GistRemoteStore(gist_id=config.gist_id, token=config.token) as store:
        pipeline = GistReportPipeline(
            store=store,
            results_dir=config.results_dir,
            staging_file=config.staging_file,
        )
        scheduler = ReportScheduler(pipeline.process_results, interval=config.interval)
        log.info(
            "reporter started: dir=%s gist=%s interval=%.0fs",
            config.results_dir,
            config.gist_id,
            config.interval,
        )
        await scheduler.serve()
    return scheduler


@cli.command()
@reporter_options
@click.option(
    "--interval",
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help="Seconds between cycles (default: 180).",
)
def run(
    config_file: str | None,
    gist_id: str | None,
    token: str | None,
    results_dir: str | None,
    staging_file: str | None,
    verbose: bool,
    interval: float | None,
) -> None:
    """Upload new results periodically until terminated.

    A cycle runs immediately and then every --interval seconds. On
    SIGTERM or SIGINT the reporter lets the current cycle finish, runs
    one last cycle, and exits.
    """
    gr_logging.configure(verbose=verbose)
    config = resolve_config(
        config_file=config_file,
        gist_id=gist_id,
        token=token,
        results_dir=results_dir,
        staging_file=staging_file,
        interval=interval,
    )
    asyncio.run(serve(config))
