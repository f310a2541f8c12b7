"""
svcspec CLI Package.

- project.py: build, validate and inspect commands
- utils.py: Shared utilities (version, logging)
"""

import sys

import typer

from svcspec.cli.project import build_command, inspect_command, validate_command
from svcspec.cli.utils import configure_logging, version_callback

app = typer.Typer(
    help="""svcspec – service definition compiler

Compiles markdown service documents (registers, commands, events, enums,
pipes) into a validated IR, C headers and JSON/YAML interchange files.
""",
    no_args_is_help=True,
)


@app.callback()
def main_callback(
    version: bool | None = typer.Option(
        None,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show version and environment information",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """svcspec CLI main callback for global options."""
    configure_logging(verbose)


app.command(name="build")(build_command)
app.command(name="validate")(validate_command)
app.command(name="inspect")(inspect_command)


def main(argv: list[str] | None = None) -> None:
    app(args=argv, standalone_mode=True)


__all__ = ["app", "main"]


if __name__ == "__main__":
    main(sys.argv[1:])
