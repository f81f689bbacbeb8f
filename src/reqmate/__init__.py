"""Reqmate CLI - turn wiki use-case pages into requirement-enriched plain text"""

import asyncio
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich import box

from reqmate.core.exceptions import UnsupportedUrlShapeError
from reqmate.core.url_parser import parse_confluence_url
from reqmate.models.document import PlainTextDocument
from reqmate.models.page import PageLocator
from reqmate.services.requirement_enrichment_service import RequirementEnrichmentServiceFactory
from reqmate.utils.settings.factory import settings_factory

__version__ = "0.1.0"

# Initialize Typer app and Rich console
app = typer.Typer(
    name="reqmate",
    help="Load wiki use-case pages with their requirement definitions as plain text",
    add_completion=False
)
console = Console()


def display_document(document: PlainTextDocument, show_diagnostics: bool) -> None:
    """Print the plain text and, optionally, the diagnostics table"""
    console.print(Panel(document.text or "[dim](empty)[/dim]", title="Page content", box=box.ROUNDED, border_style="green"))

    if not show_diagnostics or not document.diagnostics:
        return

    table = Table(title="Diagnostics", box=box.SIMPLE)
    table.add_column("Kind", style="yellow")
    table.add_column("Key")
    table.add_column("Message")
    for diagnostic in document.diagnostics:
        table.add_row(str(diagnostic.kind), diagnostic.key or "", diagnostic.message)
    console.print(table)


@app.command()
def load(
    url: str = typer.Argument(..., help="Confluence page URL"),
    env_file: Optional[Path] = typer.Option(None, "--env-file", "-e", help="Load settings from this env file"),
    timeout: Optional[float] = typer.Option(None, "--timeout", "-t", help="Deadline in seconds for fetching"),
    save: bool = typer.Option(False, "--save/--no-save", help="Write enriched HTML and plain text artifacts"),
    diagnostics: bool = typer.Option(True, "--diagnostics/--quiet", help="Show unresolved requirements and other diagnostics"),
) -> None:
    """Fetch a page and its requirements from Confluence and print the enriched text"""
    confluence_settings = settings_factory.create_confluence_settings(env_file)
    app_settings = settings_factory.create_app_settings(env_file)
    if save:
        app_settings.save_artifacts = True

    service = RequirementEnrichmentServiceFactory.create(confluence_settings, app_settings)
    with console.status("[cyan]Loading page...[/cyan]"):
        result = service.execute(url, timeout=timeout)

    if result.is_err():
        console.print(f"[red]Error: {result.unwrap_err()}[/red]")
        raise typer.Exit(1)

    display_document(result.unwrap(), diagnostics)


@app.command("load-local")
def load_local(
    page: Path = typer.Argument(..., help="Storage-format HTML of the page"),
    requirements: Path = typer.Argument(..., help="Requirements JSON ({\"requirements\": [...]})"),
    save: bool = typer.Option(False, "--save/--no-save", help="Write enriched HTML and plain text artifacts"),
    diagnostics: bool = typer.Option(True, "--diagnostics/--quiet", help="Show unresolved requirements and other diagnostics"),
) -> None:
    """Enrich a saved page with a saved requirements file"""
    app_settings = settings_factory.create_app_settings()
    if save:
        app_settings.save_artifacts = True

    service = RequirementEnrichmentServiceFactory.create_local(page, requirements, app_settings=app_settings)
    locator = PageLocator(page_id=page.stem, space_key="", url=str(page))
    document = asyncio.run(service.process(locator))
    display_document(document, diagnostics)


@app.command("parse-url")
def parse_url(
    url: str = typer.Argument(..., help="Confluence page URL"),
    default_space: str = typer.Option("BJS", "--default-space", "-s", help="Space key used when the URL has none"),
) -> None:
    """Show the page id and space key a URL resolves to"""
    try:
        locator = parse_confluence_url(url, default_space_key=default_space)
    except UnsupportedUrlShapeError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    console.print(f"[bold]Page id:[/bold] {locator.page_id}")
    console.print(f"[bold]Space:[/bold] {locator.space_key}")


@app.command()
def version() -> None:
    """Show Reqmate version"""
    console.print(f"[bold blue]Reqmate[/bold blue] version [green]{__version__}[/green]")


def main() -> None:
    """Entry point for the CLI application"""
    app()


if __name__ == "__main__":
    main()
