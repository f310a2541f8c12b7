"""
svcspec CLI Utilities.

Shared utility functions used across CLI modules.
"""

import logging
import os
import platform

import typer

from .._version import get_version

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_LEVEL_ENV = "SVCSPEC_LOG_LEVEL"


def configure_logging(verbose: bool = False) -> None:
    """
    Configure root logging once per process.

    ``--verbose`` wins; otherwise the level comes from ``SVCSPEC_LOG_LEVEL``
    (default WARNING). Unknown level names fall back to WARNING.
    """
    if verbose:
        level = logging.DEBUG
    else:
        name = os.environ.get(LOG_LEVEL_ENV, "WARNING").upper()
        level = logging.getLevelName(name)
        if not isinstance(level, int):
            level = logging.WARNING
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger("svcspec").setLevel(level)


def version_callback(value: bool) -> None:
    """Display version and environment information."""
    if value:
        typer.echo(f"svcspec {get_version()}")
        typer.echo(f"Python {platform.python_version()} ({platform.python_implementation()})")
        raise typer.Exit()
