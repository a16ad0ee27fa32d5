import json
import logging
from pathlib import Path
from typing import Optional

import typer

from cli import commands
from receiver.mappers import MappingError

app = typer.Typer(add_completion=False)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _fail(exc: Exception) -> None:
    typer.echo(f"Error: {exc}", err=True)
    raise typer.Exit(code=1)


@app.command("check-config")
def check_config(
    config: Optional[Path] = typer.Option(None, "--config", exists=True, dir_okay=False, readable=True),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show detailed output"),
) -> None:
    """Load a mapping config and bind every field to ServiceMetaInfo."""
    _configure_logging(verbose)
    try:
        helper = commands.load_helper(config)
    except MappingError as exc:
        _fail(exc)
    for line in commands.print_mappings(helper):
        typer.echo(line)


@app.command("inflate")
def inflate(
    file: Path = typer.Option(..., "--file", exists=True, dir_okay=False, readable=True),
    config: Optional[Path] = typer.Option(None, "--config", exists=True, dir_okay=False, readable=True),
    strict: bool = typer.Option(False, "--strict", help="Fail on non-textual values"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show detailed output"),
) -> None:
    """Inflate a ServiceMetaInfo from one JSON metadata document."""
    _configure_logging(verbose)
    try:
        record = commands.inflate_document(file, config, strict=strict)
    except (MappingError, ValueError) as exc:
        _fail(exc)
    typer.echo(json.dumps(record.to_dict(), indent=2))


@app.command("inflate-batch")
def inflate_batch(
    file: Path = typer.Option(..., "--file", exists=True, dir_okay=False, readable=True),
    config: Optional[Path] = typer.Option(None, "--config", exists=True, dir_okay=False, readable=True),
    skip_errors: bool = typer.Option(False, "--skip-errors", help="Skip unresolvable lines"),
    strict: bool = typer.Option(False, "--strict", help="Fail on non-textual values"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show detailed output"),
) -> None:
    """Inflate one ServiceMetaInfo per line of an NDJSON file."""
    _configure_logging(verbose)
    try:
        result = commands.inflate_batch(file, config, skip_errors=skip_errors, strict=strict)
    except (MappingError, ValueError) as exc:
        _fail(exc)
    for line in commands.print_inflate_report(result, verbose=verbose):
        typer.echo(line)


if __name__ == "__main__":
    app()
