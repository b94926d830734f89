"""Demo command: write sample result files."""

import asyncio

import click

from ..config import DEFAULT_DEMO_INTERVAL, results_dir_or_default
from ..producer import run_demo
from ..scripting import gr_logging
from . import cli


@cli.command()
@click.option(
    "-d",
    "--dir",
    "results_dir",
    envvar="RESULTS_DIR",
    default=None,
    help="Results directory (default: ./results) [env: RESULTS_DIR].",
)
@click.option(
    "--interval",
    type=click.FloatRange(min=0, min_open=True),
    default=DEFAULT_DEMO_INTERVAL,
    show_default=True,
    help="Seconds between records.",
)
@click.option(
    "-n",
    "--count",
    type=click.IntRange(min=1),
    default=None,
    help="Stop after COUNT records (default: run forever).",
)
@click.option("-v", "--verbose", is_flag=True, default=False, help="Verbose mode.")
def demo(results_dir: str | None, interval: float, count: int | None, verbose: bool) -> None:
    """Write a sample result file every --interval seconds."""
    gr_logging.configure(verbose=verbose)
    resolved = results_dir_or_default(results_dir)
    try:
        written = asyncio.run(run_demo(resolved, interval=interval, count=count))
    except KeyboardInterrupt:
        return
    click.echo(f"Wrote {len(written)} result file(s) to {resolved}.")
