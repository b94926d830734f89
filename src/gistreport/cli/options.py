"""Options shared by the commands talking to the gist."""

from collections.abc import Callable
from typing import Any

import click

from ..config import ReporterConfig, SettingsError, load_settings, resolve


def reporter_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Add the gist, credential, and directory options to a command."""
    options = [
        click.option(
            "--config",
            "config_file",
            default=None,
            metavar="FILE",
            help="YAML settings file (version: 0).",
        ),
        click.option(
            "--gist-id",
            envvar="GIST_ID",
            default=None,
            help="ID of the gist to append to [env: GIST_ID].",
        ),
        click.option(
            "--token",
            envvar="GITHUB_TOKEN",
            default=None,
            help="GitHub token with gist scope [env: GITHUB_TOKEN].",
        ),
        click.option(
            "-d",
            "--dir",
            "results_dir",
            envvar="RESULTS_DIR",
            default=None,
            help="Results directory (default: ./results) [env: RESULTS_DIR].",
        ),
        click.option(
            "--staging-file",
            default=None,
            help="Staging file (default: <dir>/.gist_backup).",
        ),
        click.option("-v", "--verbose", is_flag=True, default=False, help="Verbose mode."),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def resolve_config(
    *,
    config_file: str | None,
    gist_id: str | None,
    token: str | None,
    results_dir: str | None,
    staging_file: str | None,
    interval: float | None = None,
) -> ReporterConfig:
    """Build the ReporterConfig, converting problems into click errors."""
    settings = None
    if config_file is not None:
        try:
            settings = load_settings(config_file)
        except FileNotFoundError as exc:
            raise click.ClickException(f"Settings file not found: {config_file}") from exc
        except SettingsError as exc:
            raise click.ClickException(str(exc)) from exc

    try:
        return resolve(
            settings=settings,
            gist_id=gist_id,
            token=token,
            results_dir=results_dir,
            staging_file=staging_file,
            interval=interval,
        )
    except SettingsError as exc:
        raise click.UsageError(str(exc)) from exc
