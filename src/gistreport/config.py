"""Module containing the default reporter configuration."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Final

import dacite
import yaml

RESULTS_FILENAME: Final[str] = "results.jsonl"
"""Name of the gist entry holding the merged results."""

RESULT_FILE_SUFFIX: Final[str] = ".jsonl"

DEFAULT_RESULTS_DIR: Final[str] = "results"

DEFAULT_STAGING_FILENAME: Final[str] = ".gist_backup"

DEFAULT_SCAN_INTERVAL: Final[float] = 3 * 60.0

DEFAULT_DEMO_INTERVAL: Final[float] = 10.0

STREAM_BUFFER_SIZE: Final[int] = 16 * 1024

GITHUB_API_URL: Final[str] = "https://api.github.com"

GITHUB_ACCEPT: Final[str] = "application/vnd.github.v3+json"

DEFAULT_HTTP_TIMEOUT: Final[float] = 30.0


class SettingsError(ValueError):
    """Error emitted when the settings file is invalid."""


@dataclass(frozen=True, kw_only=True)
class Settings:
    """
    Optional settings loaded from a YAML file.

    Every field may be omitted. The token is deliberately absent: it
    must come from the environment or the command line.
    """

    version: int
    gist_id: str | None = None
    results_dir: str | None = None
    staging_file: str | None = None
    interval_seconds: float | None = None

    def __post_init__(self):
        if self.version != 0:
            raise SettingsError(f"Unsupported settings version: {self.version} (only v=0 supported)")
        if self.interval_seconds is not None and self.interval_seconds <= 0:
            raise SettingsError(f"interval_seconds must be positive, got: {self.interval_seconds}")


@dataclass(frozen=True, kw_only=True)
class ReporterConfig:
    """Fully resolved configuration for a reporter process."""

    gist_id: str
    token: str
    results_dir: Path
    staging_file: Path
    interval: float = DEFAULT_SCAN_INTERVAL


def load_settings(path: str | Path) -> Settings:
    """
    Load settings from the given YAML file.

    Raises:
        FileNotFoundError: if the file does not exist.
        SettingsError: if the YAML is malformed or does not match Settings.
    """
    path = Path(path)
    content = path.read_text()
    try:
        data = yaml.safe_load(content) or {}
    except yaml.YAMLError as exc:
        raise SettingsError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise SettingsError(f"Settings file must be a mapping: {path}")

    # YAML turns `interval_seconds: 60` into an int and an all-digits
    # gist ID into an int as well
    if isinstance(data.get("interval_seconds"), int):
        data["interval_seconds"] = float(data["interval_seconds"])
    if isinstance(data.get("gist_id"), int):
        data["gist_id"] = str(data["gist_id"])

    try:
        return dacite.from_dict(Settings, data, config=dacite.Config(strict=True))
    except dacite.DaciteError as exc:
        raise SettingsError(f"Invalid settings in {path}: {exc}") from exc


def results_dir_or_default(results_dir: str | Path | None) -> Path:
    """
    Return results_dir as a Path if not empty. Otherwise return the
    default value for the results_dir (i.e., `./results`).
    """
    return Path(DEFAULT_RESULTS_DIR) if not results_dir else Path(results_dir)


def staging_file_or_default(staging_file: str | Path | None, results_dir: Path) -> Path:
    """
    Return staging_file as a Path if not empty. Otherwise return the
    default dot-prefixed staging file inside results_dir, which the
    scanner ignores.
    """
    return results_dir / DEFAULT_STAGING_FILENAME if not staging_file else Path(staging_file)


def resolve(
    *,
    settings: Settings | None,
    gist_id: str | None,
    token: str | None,
    results_dir: str | None,
    staging_file: str | None,
    interval: float | None,
) -> ReporterConfig:
    """
    Merge explicit values (flags and environment) over settings and defaults.

    Raises:
        SettingsError: when the gist ID or the token are missing.
    """
    if settings is not None:
        gist_id = gist_id or settings.gist_id
        results_dir = results_dir or settings.results_dir
        staging_file = staging_file or settings.staging_file
        if interval is None:
            interval = settings.interval_seconds

    if not gist_id or not token:
        raise SettingsError("Missing GIST_ID or GITHUB_TOKEN")

    resolved_dir = results_dir_or_default(results_dir)
    return ReporterConfig(
        gist_id=gist_id,
        token=token,
        results_dir=resolved_dir,
        staging_file=staging_file_or_default(staging_file, resolved_dir),
        interval=DEFAULT_SCAN_INTERVAL if interval is None else interval,
    )
