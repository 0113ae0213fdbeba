"""Command line interface for reprodoc.

Commands:
---------
- augment: Write the augmented copy of a document and print its path
- config: Print the effective configuration of a document as JSON
- versions: Print the past versions fragment of a generated figure
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

import typer

from reprodoc import __version__
from reprodoc.augment import augment
from reprodoc.config import resolve_config
from reprodoc.domain import ReprodocError
from reprodoc.provenance import versions_for
from reprodoc.repo import discover_repository, get_github_from_repo
from reprodoc.utils import configure_logging

logger = logging.getLogger(__name__)

app = typer.Typer(add_completion=False, help="Reproducibility metadata for literate documents.")


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"reprodoc {__version__}")
        raise typer.Exit()


def _fail(error: Exception) -> None:
    typer.echo(f"Error: {error}", err=True)
    raise typer.Exit(code=1)


@app.callback()
def main(
    log_level: str = typer.Option("WARNING", "--log-level", envvar="REPRODOC_LOG_LEVEL", help="Logging level."),
    version: Optional[bool] = typer.Option(None, "--version", callback=_version_callback, is_eager=True, help="Show version and exit."),
) -> None:
    """Reproducibility metadata for literate documents."""
    try:
        configure_logging(log_level)
    except ValueError as e:
        raise typer.BadParameter(str(e), param_hint="--log-level") from e


@app.command("augment")
def augment_command(
    source: Path = typer.Argument(..., exists=True, dir_okay=False, help="Literate document to augment."),
    destination: Optional[Path] = typer.Option(None, "--destination", "-d", help="Directory for the augmented copy."),
    knit_root_dir: Optional[Path] = typer.Option(None, "--knit-root-dir", help="Working directory for code execution."),
) -> None:
    """Write an augmented copy of SOURCE and print its path."""
    try:
        path, config = augment(source, knit_root_dir=knit_root_dir, destination=destination)
    except (ReprodocError, ValueError) as e:
        _fail(e)
        return
    logger.info(f"knit_root_dir={config.knit_root_dir}")
    typer.echo(str(path))


@app.command("config")
def config_command(
    source: Path = typer.Argument(..., exists=True, dir_okay=False, help="Literate document."),
) -> None:
    """Print the effective configuration of SOURCE as JSON."""
    try:
        config = resolve_config(source)
    except ReprodocError as e:
        _fail(e)
        return
    typer.echo(json.dumps(config.model_dump(mode="json"), indent=2, sort_keys=True))


@app.command("versions")
def versions_command(
    artifact: str = typer.Argument(..., help="Figure path relative to the knit directory."),
    knit_dir: Path = typer.Option(Path("."), "--knit-dir", help="Directory the document was rendered in."),
    output_dir: Optional[Path] = typer.Option(None, "--output-dir", help="Published output directory."),
) -> None:
    """Print the past versions of ARTIFACT as markdown."""
    repo = discover_repository(knit_dir)
    report = versions_for(artifact, repo, github=get_github_from_repo(repo), knit_dir=knit_dir, output_dir=output_dir)
    if report.is_empty:
        logger.info(f"No committed versions of {artifact}")
        return
    typer.echo(report.markdown)


if __name__ == "__main__":
    app()
