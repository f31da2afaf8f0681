"""
Frankenstyle CLI.

Thin wrapper around the core pipeline: loads frankenstyle.toml, discovers
packages, builds the stylesheet, and copies assets. Errors from the core are
reported on stderr with exit code 1.
"""

from __future__ import annotations

import logging
import platform
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from frankenstyle._version import get_version
from frankenstyle.core.assets import copy_assets
from frankenstyle.core.discovery import discover_packages
from frankenstyle.core.errors import FrankenstyleError, make_config_error
from frankenstyle.core.manifest import ProjectManifest, load_project_manifest
from frankenstyle.core.models import UrlStyle
from frankenstyle.core.pipeline import StylesheetBuilder

console = Console()

app = typer.Typer(
    help="Frankenstyle - concatenate package CSS in dependency order. "
    "Start with: frankenstyle build OUTPUT",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Display version information."""
    if value:
        typer.echo(f"Frankenstyle {get_version()} (Python {platform.python_version()})")
        raise typer.Exit()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _load_manifest(manifest: str | None) -> ProjectManifest:
    manifest_path = Path(manifest).resolve() if manifest else None
    return load_project_manifest(Path.cwd(), manifest_path)


@app.callback()
def main_callback(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version information",
    ),
) -> None:
    """Frankenstyle CLI main callback for global options."""
    pass


@app.command(name="build")
def build_command(
    output: str | None = typer.Argument(
        None,
        help="Output directory for the stylesheet and assets. Required unless the manifest"
        " sets build.output.",
    ),
    rails: bool = typer.Option(
        False, "--rails", help="Use the asset-url() helper instead of url()"
    ),
    manifest: str | None = typer.Option(
        None, "--manifest", "-m", help="Path to frankenstyle.toml"
    ),
    cache: bool | None = typer.Option(
        None, "--cache/--no-cache", help="Override the manifest's cache setting"
    ),
    workers: int | None = typer.Option(
        None, "--workers", "-w", min=1, help="Threads used to resolve CSS"
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging"),
) -> None:
    """
    Build the dependency-ordered stylesheet and copy package assets.

    OUTPUT may be omitted when frankenstyle.toml sets build.output; with
    neither, build prints "Please provide an output directory" and exits 1.

    Examples:
        frankenstyle build public/           # url('pkg/pkg.png')
        frankenstyle build --rails public/   # asset-url('pkg/pkg.png')
    """
    _configure_logging(verbose)

    try:
        project = _load_manifest(manifest)
        output_dir = Path(output).resolve() if output else project.output_path
        if output_dir is None:
            typer.echo("Please provide an output directory", err=True)
            raise typer.Exit(code=1)

        overrides: dict[str, object] = {}
        if rails:
            overrides["url_style"] = UrlStyle.HELPER
        if cache is not None:
            overrides["cached"] = cache
        if workers is not None:
            overrides["workers"] = workers
        config = project.to_config().model_copy(update=overrides)

        packages = discover_packages(project.packages_path)
        result = StylesheetBuilder(config).build(packages)

        stylesheet = output_dir / project.build.stylesheet
        included = set(result.order)
        try:
            output_dir.mkdir(parents=True, exist_ok=True)
            stylesheet.write_text(result.css, encoding="utf-8")
            assets = copy_assets([p for p in packages if p.id in included], output_dir)
        except OSError as e:
            raise make_config_error(f"Cannot write build output: {e}", output_dir) from e
    except FrankenstyleError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    typer.echo(f"Wrote {stylesheet} ({len(result.order)} packages, {len(assets)} assets)")


@app.command(name="order")
def order_command(
    manifest: str | None = typer.Option(
        None, "--manifest", "-m", help="Path to frankenstyle.toml"
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging"),
) -> None:
    """Show the order in which package CSS is concatenated."""
    _configure_logging(verbose)

    try:
        project = _load_manifest(manifest)
        packages = discover_packages(project.packages_path)
        result = StylesheetBuilder(project.to_config()).build(packages)
    except FrankenstyleError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    dependencies = {p.id: p.dependencies for p in packages}
    table = Table(title=f"{project.name} stylesheet order")
    table.add_column("#", style="dim")
    table.add_column("Package")
    table.add_column("Depends on")
    for position, package_id in enumerate(result.order, start=1):
        table.add_row(str(position), package_id, ", ".join(dependencies[package_id]))
    console.print(table)


def main() -> None:
    """Entry point for the frankenstyle console script."""
    app()


__all__ = ["app", "main"]
