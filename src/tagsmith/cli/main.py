"""
Main CLI entry point for tagsmith.
"""

from __future__ import annotations

import logging

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from tagsmith import __version__
from tagsmith.cli.tag_commands import tag_app
from tagsmith.config.settings import get_settings

console = Console()

app = typer.Typer(
    name="tagsmith",
    help="Batch editor for image caption tags",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

# Add subcommands
app.add_typer(tag_app, name="tags", help="Caption tag commands")


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else getattr(logging, get_settings().log_level)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@app.command()
def version() -> None:
    """Show version information."""
    console.print(
        Panel(
            f"[bold blue]tagsmith[/bold blue] v{__version__}",
            title="Version",
            border_style="blue",
        )
    )


@app.command()
def status() -> None:
    """Show the active configuration."""
    settings = get_settings()
    table = Table(title="Configuration", show_header=True, header_style="bold blue")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Tag separator", repr(settings.tag_separator))
    table.add_row("History limit", str(settings.history_limit))
    table.add_row("Image extensions", " ".join(settings.image_extensions))
    table.add_row("Include subdirectories", str(settings.include_subdirectories))
    table.add_row("Load dimensions", str(settings.load_dimensions))
    table.add_row("Preset file", settings.preset_file_name)
    table.add_row("Log level", settings.log_level)
    console.print(table)
    console.print("[blue]i[/blue] Use 'tagsmith tags --help' for editing commands")


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: bool = typer.Option(
        False, "--version", "-v", help="Show version and exit"
    ),
    verbose: bool = typer.Option(
        False, "--verbose", help="Log debug output to stderr"
    ),
) -> None:
    """
    tagsmith - Batch editor for image caption tags.

    Load a directory of images with their .txt captions, edit the tags in
    bulk and write back only the captions that changed.
    """
    if version:
        console.print(f"tagsmith v{__version__}")
        raise typer.Exit(code=0)

    _configure_logging(verbose)

    if ctx.invoked_subcommand is None:
        console.print("[yellow]Use 'tagsmith --help' for available commands[/yellow]")
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
