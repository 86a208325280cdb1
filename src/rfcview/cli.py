"""
Command line interface.

Usage:
    rfc 9000                      view RFC 9000 (cached copy if present)
    rfc draft-ietf-quic-transport view the latest revision of a draft
    rfc -r 9000                   refresh from the network, then view
    rfc -f 9000                   fetch into the cache, do not open
    rfc -s quic -a -l 10          search RFCs and drafts
    rfc --list-cache | --cache-info | --uncache 9000 | --clear-cache
"""

import asyncio
import os
from typing import Annotated, Optional

import typer
import yaml
from pydantic import ValidationError

from rfcview import __version__
from rfcview.cache import CacheStore, truncate_title
from rfcview.config import Settings
from rfcview.documents import FetchMode, FetchOutcome
from rfcview.errors import RfcError
from rfcview.identifiers import parse_identifier
from rfcview.logging_config import setup_logging
from rfcview.models.search import SearchKind, SearchResponse
from rfcview.state import open_app_state
from rfcview.viewer import ViewerConfig, open_document

LINE_WIDTH = 80

app = typer.Typer(
    name="rfc",
    help="Search, retrieve, and display IETF RFCs and drafts.",
    add_completion=False,
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"rfc {__version__}")
        raise typer.Exit()


def format_size(size: int) -> str:
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size / (1024 * 1024):.1f} MB"


def _title_width(name_width: int, wide: bool) -> Optional[int]:
    if wide:
        return None
    return min(max(LINE_WIDTH - name_width - 4, 0), LINE_WIDTH - 3)


def _print_rows(rows: list[tuple[str, str]], wide: bool = False) -> None:
    name_width = max((len(name) for name, _ in rows), default=10)
    title_width = _title_width(name_width, wide)
    for name, title in rows:
        typer.echo(f"{name:<{name_width}}  {truncate_title(title, title_width)}")


# ---------------------------------------------------------------------------
# Cache administration
# ---------------------------------------------------------------------------


def _list_cache(store: CacheStore, wide: bool) -> None:
    cached = store.list()
    if not cached:
        typer.echo("Cache is empty")
        return
    typer.echo(f"Cached documents ({len(cached)}):\n")
    _print_rows(
        [(str(doc.doc_id), doc.title or "(title unavailable)") for doc in cached], wide=wide
    )


def _cache_info(store: CacheStore) -> None:
    info = store.info()
    typer.echo(f"Cache directory: {info.root}")
    typer.echo(f"Cached documents: {info.entry_count}")
    typer.echo(f"Total size: {format_size(info.total_size)}")


def _clear_cache(store: CacheStore) -> None:
    removed = store.clear()
    typer.echo(f"Cache cleared ({removed} document{'' if removed == 1 else 's'} removed)")


def _uncache(store: CacheStore, document: str) -> bool:
    doc_id = parse_identifier(document)
    # Without a version, every cached revision of the draft goes.
    targets = [doc_id] if doc_id.is_resolved else store.revisions(doc_id.name or "")
    removed = [target for target in targets if store.delete(target)]
    if not removed:
        typer.echo(f"{doc_id.display_name} was not in cache")
        return False
    for target in removed:
        typer.echo(f"Removed {target.display_name} from cache")
    return True


# ---------------------------------------------------------------------------
# Remote operations
# ---------------------------------------------------------------------------


async def _fetch(settings: Settings, document: str, mode: FetchMode) -> FetchOutcome:
    doc_id = parse_identifier(document)
    async with open_app_state(settings) as state:
        return await state.documents.get(doc_id, mode)


async def _search(
    settings: Settings, query: str, kind: SearchKind, limit: Optional[int]
) -> SearchResponse:
    typer.echo(f"Searching for '{query}'...", err=True)
    async with open_app_state(settings) as state:
        return await state.search.search(query, kind, limit)


def _print_search(response: SearchResponse) -> None:
    if not response.results:
        typer.echo(f"No results found for '{response.query}'")
        return
    shown = len(response.results)
    if response.has_more and response.total_count is not None:
        typer.echo(
            f"\nShowing {shown} of {response.total_count} results (use -l to show more):\n"
        )
    elif response.has_more:
        typer.echo(f"\nShowing {shown} results (more available, use -l to show more):\n")
    else:
        typer.echo(f"\nFound {shown} result{'' if shown == 1 else 's'}:\n")
    _print_rows([(r.id, r.title) for r in response.results])
    typer.echo("\nUse 'rfc <document>' to read a document")


def _view(outcome: FetchOutcome, viewer: ViewerConfig) -> None:
    name = outcome.doc_id.display_name
    if outcome.from_cache:
        typer.echo(f"Using cached copy of {name}", err=True)
    else:
        typer.echo(f"Fetched {name}", err=True)
    if not outcome.open_after:
        typer.echo(f"Cached {name}. Use 'rfc {outcome.doc_id}' to view.", err=True)
        return
    if not open_document(outcome.path, viewer):
        # No viewer configured: hand the file to the user instead.
        typer.echo(str(outcome.path))


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


@app.command(no_args_is_help=True)
def rfc(
    document: Annotated[Optional[str], typer.Argument(
        help="RFC number (9000, rfc9000) or draft name (draft-ietf-quic-transport[-34])"
    )] = None,
    search: Annotated[Optional[str], typer.Option(
        "--search", "-s", metavar="QUERY", help="Search document titles"
    )] = None,
    open_with: Annotated[Optional[str], typer.Option(
        "--open-with", "-o", metavar="PROGRAM", help="Program to open the document with"
    )] = None,
    fetch_only: Annotated[bool, typer.Option(
        "--fetch-only", "-f", help="Fetch and cache the document, but do not open it"
    )] = False,
    refresh: Annotated[bool, typer.Option(
        "--refresh", "-r", help="Fetch from the network and refresh the cache before opening"
    )] = False,
    drafts: Annotated[bool, typer.Option(
        "--drafts", "-d", help="Only search drafts (with -s)"
    )] = False,
    all_kinds: Annotated[bool, typer.Option(
        "--all", "-a", help="Search both RFCs and drafts (with -s)"
    )] = False,
    limit: Annotated[Optional[int], typer.Option(
        "--limit", "-l", help="Maximum number of search results (with -s)"
    )] = None,
    list_cache: Annotated[bool, typer.Option(
        "--list-cache", help="List cached documents"
    )] = False,
    clear_cache: Annotated[bool, typer.Option(
        "--clear-cache", help="Remove all cached documents"
    )] = False,
    cache_info: Annotated[bool, typer.Option(
        "--cache-info", help="Show cache location and size"
    )] = False,
    uncache: Annotated[Optional[str], typer.Option(
        "--uncache", metavar="DOC", help="Remove a document from the cache"
    )] = None,
    wide: Annotated[bool, typer.Option(
        "--wide", "-w", help="Show full titles (with --list-cache)"
    )] = False,
    verbose: Annotated[bool, typer.Option(
        "--verbose", "-v", help="Enable debug logging to stderr"
    )] = False,
    version: Annotated[Optional[bool], typer.Option(
        "--version", callback=_version_callback, is_eager=True, help="Show version and exit"
    )] = None,
) -> None:
    """Search, retrieve, and display IETF RFCs and drafts."""
    if drafts and all_kinds:
        typer.echo("Error: --drafts and --all cannot be used together", err=True)
        raise typer.Exit(2)

    try:
        settings = Settings()
    except (ValidationError, yaml.YAMLError) as e:
        typer.echo(f"Error: invalid configuration:\n{e}", err=True)
        raise typer.Exit(1)
    setup_logging(settings.logging, verbose=verbose)
    store = CacheStore(settings.cache_dir)

    try:
        if list_cache:
            _list_cache(store, wide)
        elif clear_cache:
            _clear_cache(store)
        elif cache_info:
            _cache_info(store)
        elif uncache is not None:
            if not _uncache(store, uncache):
                raise typer.Exit(1)
        elif search is not None:
            if drafts:
                kind = SearchKind.DRAFTS_ONLY
            elif all_kinds:
                kind = SearchKind.BOTH
            else:
                kind = SearchKind.RFC_ONLY
            _print_search(asyncio.run(_search(settings, search, kind, limit)))
        elif document is not None:
            if fetch_only:
                mode = FetchMode.FETCH_ONLY
            elif refresh:
                mode = FetchMode.REFRESH
            else:
                mode = FetchMode.USE_CACHE_OR_FETCH
            outcome = asyncio.run(_fetch(settings, document, mode))
            _view(outcome, ViewerConfig.build(settings.viewer, os.environ, open_with))
    except RfcError as e:
        typer.echo(f"Error: {e.message}", err=True)
        raise typer.Exit(1)


def main() -> None:
    app()

