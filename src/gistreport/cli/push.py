"""Push command: run a single reporter cycle."""

import asyncio

import click

from ..config import ReporterConfig
from ..ghremote import GistRemoteStore
from ..pipeline import CycleOutcome, CycleState, GistReportPipeline
from ..scripting import gr_exception, gr_logging
from . import cli
from .options import reporter_options, resolve_config


async def push_once(config: ReporterConfig) -> CycleOutcome:
    """Run one cycle for config."""
    with GistRemoteStore(gist_id=config.gist_id, token=config.token) as store:
        pipeline = GistReportPipeline(
            store=store,
            results_dir=config.results_dir,
            staging_file=config.staging_file,
        )
        return await pipeline.process_results()


@cli.command()
@reporter_options
def push(
    config_file: str | None,
    gist_id: str | None,
    token: str | None,
    results_dir: str | None,
    staging_file: str | None,
    verbose: bool,
) -> None:
    """Upload pending results once and exit.

    Exits with status 1 when the upload failed or the cycle raised, in
    which case no result file was deleted.
    """
    gr_logging.configure(verbose=verbose)
    config = resolve_config(
        config_file=config_file,
        gist_id=gist_id,
        token=token,
        results_dir=results_dir,
        staging_file=staging_file,
    )

    interceptor = gr_exception.Interceptor()
    outcome: CycleOutcome | None = None
    with interceptor:
        outcome = asyncio.run(push_once(config))

    if outcome is None:
        raise SystemExit(interceptor.exitcode())

    if outcome.state == CycleState.NO_WORK:
        click.echo("Nothing to upload.")
        return

    if outcome.state == CycleState.LOCKED:
        click.echo("Another reporter holds the staging lock, nothing done.")
        return

    if outcome.state == CycleState.UPLOAD_FAILED:
        click.echo(f"Upload failed, kept {len(outcome.files)} file(s).", err=True)
        raise SystemExit(1)

    click.echo(f"Uploaded {len(outcome.files)} file(s), deleted {len(outcome.deleted)}.")
    if outcome.delete_failures:
        click.echo(f"{len(outcome.delete_failures)} deletion(s) failed:", err=True)
        for path, reason in outcome.delete_failures:
            click.echo(f"  {path}: {reason}", err=True)
