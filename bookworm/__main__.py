"""Entry point for bookworm CLI."""

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Optional

import rich_click as click
from rich.console import Console
from rich.table import Table

from bookworm.core.compiler import QueryCompiler
from bookworm.core.config import Config, ConfigLoader
from bookworm.core.errors import ConfigError
from bookworm.core.executor import InMemoryExecutor
from bookworm.core.navigation import (
    NavigationRequest,
    decode_path_value,
    display_value,
    field_label,
)
from bookworm.core.plugin import PluginError, PluginManager
from bookworm.core.store import FilterStateStore
from bookworm.core.sync import SearchSession
from bookworm.models.query import SearchView
from bookworm.plugins import BUILTIN_PLUGINS

click.rich_click.TEXT_MARKUP = "rich"
click.rich_click.SHOW_ARGUMENTS = True

SORT_CHOICES = ["popularity", "latest", "title_asc", "title_desc", "year", "size_asc", "size_desc"]


def _get_plugin_manager() -> PluginManager:
    """Create the plugin manager with built-in and entry point plugins."""
    manager = PluginManager()
    for plugin_class in BUILTIN_PLUGINS:
        manager.register(plugin_class())
    manager.discover()
    return manager


def _load_config(config_path: Optional[str]) -> Config:
    """Load the given config file, or merge the discovered ones."""
    loader = ConfigLoader()
    if config_path:
        return loader.load(Path(config_path))
    return loader.load_merged()


def _build_request(
    query: Optional[str],
    url: Optional[str],
    field: Optional[str],
    value: Optional[str],
) -> NavigationRequest:
    """Combine --url, --field/--value and the QUERY argument.

    The QUERY argument wins over a query parameter inside --url.
    """
    if url:
        request = NavigationRequest.from_url(url)
        return NavigationRequest(
            field=request.field,
            value=request.value,
            query=query or request.query,
        )
    return NavigationRequest(field=field, value=value, query=query)


async def _run_search(
    session: SearchSession,
    request: NavigationRequest,
    updates: dict[str, Any],
    categories: tuple[str, ...],
    pages: int,
) -> SearchView:
    """Drive a session the way a user would: navigate, refine, load more."""
    view = await session.navigate_to(request)
    if view.error:
        return view

    if updates:
        view = await session.update_filters(updates)
    if categories:
        view = await session.set_categories(categories)

    while pages > 1 and view.has_more and not view.error:
        view = await session.load_more()
        pages -= 1

    return view


def _results_title(request: NavigationRequest) -> str:
    """Title for the results table."""
    if request.field and request.value:
        value = decode_path_value(request.value)
        return f"{field_label(request.field)}: {display_value(request.field, value)}"
    if request.query:
        return f"Search: {request.query}"
    return "All books"


def _output_results(
    console: Console,
    view: SearchView,
    output_format: str,
    title: str,
) -> None:
    """Output accumulated results in the specified format."""
    items = list(view.items)

    if output_format.lower() == "json":
        # JSONL format: one JSON object per line
        for item in items:
            print(json.dumps(item, default=str))

    elif output_format.lower() == "count":
        more = "true" if view.has_more else "false"
        print(f"total={len(items)} has_more={more}")

    else:
        table = Table(title=title)
        table.add_column("Title", style="cyan")
        table.add_column("Author")
        table.add_column("Year", justify="right")
        table.add_column("Type", style="green")
        table.add_column("Language")
        table.add_column("Publisher", style="dim")

        for item in items:
            year = item.get("published_year")
            table.add_row(
                item.get("title") or "",
                item.get("author") or "",
                str(year) if year is not None else "",
                item.get("type") or "",
                item.get("language") or "",
                item.get("publisher") or "",
            )

        noun = "book" if len(items) == 1 else "books"
        table.caption = f"{len(items)} {noun}" + (" (more available)" if view.has_more else "")
        console.print(table)


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("catalog", required=False, type=click.Path(exists=True))
@click.argument("query", required=False)
@click.option("--version", is_flag=True, help="Show version and exit.")
@click.option(
    "--list-plugins",
    is_flag=True,
    help="List all available catalog plugins and exit."
)
@click.option(
    "--plugin",
    type=str,
    help="Force a specific catalog plugin (bypasses auto-detection)."
)
@click.option(
    "--url",
    type=str,
    help="Deep link to open, e.g. '/search/publisher/Penguin-Books' or '/search?query=dune'."
)
@click.option(
    "--field",
    type=str,
    help="Metadata field of a deep link (publisher, narrator, year, format, genre, language, ...)."
)
@click.option(
    "--value",
    type=str,
    help="Metadata value of a deep link; hyphens stand for spaces."
)
@click.option("--year-from", "year_from", type=str, help="Earliest published year.")
@click.option("--year-to", "year_to", type=str, help="Latest published year.")
@click.option("--language", type=str, help="Exact language, e.g. 'German'.")
@click.option("--format", "file_type", type=str, help="File format, e.g. 'EPUB' or 'MP3'.")
@click.option(
    "--type",
    "book_type",
    type=click.Choice(["all", "ebook", "audiobook"], case_sensitive=False),
    help="Book type."
)
@click.option("--fiction", "fiction_type", type=str, help="Fiction type, e.g. 'Fiction' or 'Non-Fiction'.")
@click.option("--genre", type=str, help="Genre or category, e.g. 'Science Fiction'.")
@click.option(
    "--category",
    "categories",
    type=str,
    multiple=True,
    help="Category to include; several are OR-ed. Can be repeated."
)
@click.option(
    "--sort",
    "sort_by",
    type=click.Choice(SORT_CHOICES, case_sensitive=False),
    help="Sort order."
)
@click.option("--exact", is_flag=True, help="Match free text exactly instead of as a substring.")
@click.option(
    "--pages",
    type=click.IntRange(min=1),
    default=1,
    help="Number of pages to accumulate (default: 1)."
)
@click.option(
    "--output",
    "output_format",
    type=click.Choice(["table", "json", "count"], case_sensitive=False),
    help="Output format: table, json (JSONL), or count. Default from config."
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=False),
    help="Path to a bookworm TOML config file."
)
@click.option("--verbose", "-v", is_flag=True, help="Log compiled queries and fetches.")
@click.pass_context
def cli(
    ctx: click.Context,
    catalog: str | None,
    query: str | None,
    version: bool,
    list_plugins: bool,
    plugin: str | None,
    url: str | None,
    field: str | None,
    value: str | None,
    year_from: str | None,
    year_to: str | None,
    language: str | None,
    file_type: str | None,
    book_type: str | None,
    fiction_type: str | None,
    genre: str | None,
    categories: tuple[str, ...],
    sort_by: str | None,
    exact: bool,
    pages: int,
    output_format: str | None,
    config_path: str | None,
    verbose: bool,
) -> None:
    """Bookworm - search a book catalog from the terminal.

    Search CATALOG with free text (QUERY may hold field:value qualifiers such
    as publisher:"Penguin Random House"), a deep link, and filter options.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if version:
        from bookworm import __version__
        click.echo(f"bookworm {__version__}")
        return

    try:
        config = _load_config(config_path)
    except (ConfigError, FileNotFoundError) as e:
        Console().print(f"[red]Error:[/red] {e}")
        ctx.exit(1)

    console = Console(no_color=not config.output.color)

    if list_plugins:
        manager = _get_plugin_manager()
        table = Table(title="Available Plugins")
        table.add_column("Name", style="cyan", no_wrap=True)
        table.add_column("Version", style="green")
        table.add_column("Description")

        for name in sorted(manager.list_plugins()):
            info = manager.get_plugin_info(name)
            if info:
                table.add_row(info["name"], info.get("version", "unknown"), info.get("description", ""))

        console.print(table)
        return

    if catalog is None:
        console.print("[red]Error:[/red] Missing CATALOG argument.")
        ctx.exit(1)

    manager = _get_plugin_manager()
    try:
        books = manager.load_catalog(Path(catalog), plugin or config.catalog.default_plugin)
    except PluginError as e:
        console.print(f"[red]Error:[/red] {e}")
        console.print("\nInstalled plugins:")
        for name in manager.list_plugins():
            console.print(f"  - {name}")
        ctx.exit(1)

    collection = config.catalog.collection
    executor = InMemoryExecutor({collection: [book.model_dump() for book in books]})
    session = SearchSession(
        executor,
        collection=collection,
        store=FilterStateStore(defaults=config.search.default_criteria()),
        compiler=QueryCompiler(page_size=config.search.page_size),
    )

    updates: dict[str, Any] = {}
    for key, option_value in (
        ("year_from", year_from),
        ("year_to", year_to),
        ("language", language),
        ("file_type", file_type),
        ("book_type", book_type.lower() if book_type else None),
        ("fiction_type", fiction_type),
        ("genre", genre),
        ("sort_by", sort_by.lower() if sort_by else None),
    ):
        if option_value is not None:
            updates[key] = option_value
    if exact:
        updates["exact_match"] = True

    request = _build_request(query, url, field, value)
    view = asyncio.run(_run_search(session, request, updates, categories, pages))

    if view.error:
        console.print(f"[red]Error:[/red] {view.error}")
        ctx.exit(1)

    _output_results(console, view, output_format or config.output.format, _results_title(request))


def main() -> None:
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
