"""
Sitebox Command Line Interface (CLI)

This module provides the ``sitebox`` command. It builds the static site,
serves a live preview, or opens a shell in the site generator's container.
Commands take no options of their own; behaviour is tuned through environment
variables (``PORT``, ``CONTENT_REPOS`` and the ``SITEBOX_*`` settings).
Running ``sitebox`` without a command starts the preview.
"""

import logging
from typing import Callable, Optional, TypeVar

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from sitebox.core.orchestrator import SiteOrchestrator
from sitebox.core.settings import SiteboxSettings
from sitebox.errors import SiteboxError, format_error_chain

app = typer.Typer(rich_markup_mode="markdown")
console = Console()

T = TypeVar("T")


def configure_logging(verbose: bool = False) -> None:
    """Send sitebox log records to the console through rich."""
    logger = logging.getLogger("sitebox")
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        logger.addHandler(
            RichHandler(console=console, show_path=False, markup=False)
        )


def fail(exc: BaseException) -> None:
    """Print an error chain and exit non-zero."""
    console.print(f"Error: {format_error_chain(exc)}", style="red", markup=False)
    raise typer.Exit(1)


def build_orchestrator() -> SiteOrchestrator:
    """Create an orchestrator configured from the environment."""
    settings = SiteboxSettings.from_env()
    return SiteOrchestrator(settings)


def _run(action: Callable[[SiteOrchestrator], T]) -> Optional[T]:
    try:
        return action(build_orchestrator())
    except SiteboxError as exc:
        fail(exc)
    return None


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Show debug output, including container logs."
    ),
) -> None:
    """
    Build and preview the website in a container.
    """
    configure_logging(verbose)
    if ctx.invoked_subcommand is None:
        preview()


@app.command()
def build() -> None:
    """Compile the website to the output directory (`website/public`)."""
    _run(lambda orchestrator: orchestrator.build())
    console.print("[green]✓ Website built[/green]")


@app.command()
def preview() -> None:
    """Run a local server to preview the website and watch for changes."""
    url = _run(lambda orchestrator: orchestrator.preview())
    console.print(f"[green]✓ Website is available at {url}[/green]")


@app.command()
def shell() -> None:
    """Start an interactive shell in the site generator's container."""
    _run(lambda orchestrator: orchestrator.shell())


@app.command()
def clean() -> None:
    """Remove the generated website and the preview container."""
    _run(lambda orchestrator: orchestrator.clean())
    console.print("[green]✓ Cleaned[/green]")


@app.command("ensure-tool")
def ensure_tool() -> None:
    """Check that the container runtime and git are installed."""
    tools = _run(lambda orchestrator: orchestrator.ensure_tools()) or {}

    table = Table(title="Required tools")
    table.add_column("Tool", style="cyan")
    table.add_column("Path", style="dim")
    for name, path in tools.items():
        table.add_row(name, path)
    console.print(table)


if __name__ == "__main__":
    app()
