"""Gist reporter command-line interface."""

from importlib.metadata import version

import click

_PACKAGE_NAME = "jsonl-gist-reporter"


def _get_version() -> str:
    """Return the installed package version string."""
    return version(_PACKAGE_NAME)


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(message="%(version)s", package_name=_PACKAGE_NAME)
def cli() -> None:
    """
    Collect JSONL result files into a GitHub gist.

    Use "run" for the long-running reporter, "push" for a single cycle
    (e.g., from cron), and "demo" to produce sample result files.
    """


@cli.command("version")
def version_cmd() -> None:
    """Print the version number."""
    click.echo(_get_version())


# Register subcommands (must be after cli is defined)
from . import demo as _demo  # noqa: E402, F401
from . import push as _push  # noqa: E402, F401
from . import run as _run  # noqa: E402, F401
