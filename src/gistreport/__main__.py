"""Allow running the CLI as `python -m gistreport`."""

from .cli import cli

cli()
