"""Resolved run configuration for pylsfd."""

import os
from collections.abc import Mapping
from dataclasses import dataclass, field

from pylsfd.columns import DEFAULT_COLUMNS, Column
from pylsfd.enricher import DEFAULT_PROC_ROOT

VERSION = "0.1.0"

ENV_DEBUG = "PYLSFD_DEBUG"
ENV_WORKERS = "PYLSFD_WORKERS"


@dataclass(slots=True)
class LsfdConfig:
    """Everything one run needs, built once from argv and the environment."""

    columns: list[Column] = field(default_factory=lambda: list(DEFAULT_COLUMNS))
    noheadings: bool = False
    raw: bool = False
    json: bool = False
    workers: int = 1
    proc_root: str = DEFAULT_PROC_ROOT
    interactive: bool = False
    debug: bool = False

    def __post_init__(self) -> None:
        if self.workers < 1:
            raise ValueError(f"workers must be at least 1, got {self.workers}")
        if not self.columns:
            self.columns = list(DEFAULT_COLUMNS)


def _truthy(value: str | None) -> bool:
    return value is not None and value.strip().lower() in ("1", "true", "yes", "on")


def env_debug(environ: Mapping[str, str] | None = None) -> bool:
    """True if debug logging was requested through the environment."""
    environ = os.environ if environ is None else environ
    return _truthy(environ.get(ENV_DEBUG))


def env_workers(environ: Mapping[str, str] | None = None) -> int | None:
    """Pool size from the environment, or None if unset."""
    environ = os.environ if environ is None else environ
    value = environ.get(ENV_WORKERS)
    if value is None or not value.strip():
        return None
    workers = int(value)
    if workers < 1:
        raise ValueError(f"{ENV_WORKERS} must be at least 1, got {workers}")
    return workers
