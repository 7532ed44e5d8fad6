"""Shared helpers for ending a command: report rendering and fault handling."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from contextlib import contextmanager

import typer

from ..core.errors import ReleaseError
from ..core.report import ReleaseReport

logger = logging.getLogger("relman.cli")


@contextmanager
def abort_on_release_error() -> Iterator[None]:
    """Turn hard faults into a logged diagnostic and exit code 1."""
    try:
        yield
    except ReleaseError as e:
        logger.error("Error: %s", e)
        raise typer.Exit(code=1) from e


def finish(report: ReleaseReport, as_json: bool = False) -> None:
    if as_json:
        typer.echo(json.dumps(report.to_dict(), indent=2))
    counts = report.summary()
    logger.info("Done. pass=%s, fail=%s, skip=%s.", counts["pass"], counts["fail"], counts["skip"])
    if not report.ok:
        raise typer.Exit(code=1)
