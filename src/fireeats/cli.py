"""Typer-based CLI entry point."""

from __future__ import annotations

import functools
import threading
from pathlib import Path
from typing import Optional

import typer
from rich import print
from rich.console import Console
from rich.table import Table

from fireeats.appctx import AppContext, _create_settings_manager, create_store
from fireeats.application.use_cases.populate import PopulateRequest
from fireeats.config import SORTABLE_FIELDS
from fireeats.domain.models.query import FilterSelection
from fireeats.errors import FireEatsError, SettingsError, StoreError
from fireeats.gui.viewmodels.restaurant_list_viewmodel import RestaurantListViewModel
from fireeats.infrastructure.stores.memory_store import InMemoryDocumentStore
from fireeats.utils.logging import configure_logging

app = typer.Typer(help="Browse a live restaurant directory")

_state: dict = {"settings": None, "backend": None}

_SORT_HELP = f"Order by this field, e.g. {', '.join(SORTABLE_FIELDS)}"


def _handle_errors(func):
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (SettingsError, StoreError) as exc:
            typer.echo(f"Error: {exc}", err=True)
            raise typer.Exit(1) from exc
        except FireEatsError as exc:
            typer.echo(f"Unexpected error: {exc}", err=True)
            raise typer.Exit(1) from exc

    return wrapper


@app.callback()
def main(
    settings: Optional[Path] = typer.Option(None, "--settings", help="Path to settings.json"),
    backend: Optional[str] = typer.Option(None, "--backend", help="Override store.backend (memory|firestore)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    configure_logging("DEBUG" if verbose else "WARNING")
    _state["settings"] = settings
    _state["backend"] = backend


def _context() -> AppContext:
    manager = _create_settings_manager(_state["settings"])
    return AppContext(settings=manager, store=create_store(manager, _state["backend"]))


def _wait_for_snapshot(restaurants: RestaurantListViewModel, timeout: float) -> bool:
    """Block until the list has received its first push."""
    ready = threading.Event()

    def _on_refresh() -> None:
        ready.set()

    restaurants.refresh_requested.connect(_on_refresh)
    try:
        if restaurants.loaded.value:
            return True
        return ready.wait(timeout)
    finally:
        restaurants.refresh_requested.disconnect(_on_refresh)


def _render(restaurants: RestaurantListViewModel, title: str) -> Table:
    table = Table(title=title)
    table.add_column("#", justify="right")
    table.add_column("Name")
    table.add_column("Category")
    table.add_column("City")
    table.add_column("Price", style="green")
    table.add_column("Rating", justify="right")
    for index, (restaurant, _handle) in enumerate(restaurants.snapshot()):
        table.add_row(
            str(index),
            restaurant.name,
            restaurant.category,
            restaurant.city,
            restaurant.price_label,
            f"{restaurant.average_rating:.1f} ({restaurant.rating_count})",
        )
    return table


def _selection(
    category: Optional[str], city: Optional[str], price: Optional[int], sort_by: Optional[str]
) -> FilterSelection:
    return FilterSelection(category=category or None, city=city or None, price=price, sort_by=sort_by or None)


def _seed(ctx: AppContext, count: int) -> None:
    if count:
        ctx.populate_use_case().execute(PopulateRequest(count=count, collection=ctx.settings.get("store.collection")))


@app.command()
@_handle_errors
def populate(count: int = typer.Option(20, min=0, help="Number of restaurants to add")) -> None:
    """Add random restaurants to the collection."""

    ctx = _context()
    try:
        response = ctx.populate_use_case().execute(
            PopulateRequest(count=count, collection=ctx.settings.get("store.collection"))
        )
    finally:
        ctx.shutdown()
    if not response.success:
        typer.echo(f"Error: {response.error}", err=True)
        raise typer.Exit(1)
    print(f"[green]Added {len(response.restaurants)} restaurants")
    if isinstance(ctx.store, InMemoryDocumentStore):
        print("[yellow]The memory backend does not outlive this command; use 'list --seed' to browse.")


@app.command("list")
@_handle_errors
def list_restaurants(
    category: Optional[str] = typer.Option(None, help="Only this category"),
    city: Optional[str] = typer.Option(None, help="Only this city"),
    price: Optional[int] = typer.Option(None, min=1, max=3, help="Only this price tier (1-3)"),
    sort_by: Optional[str] = typer.Option(None, "--sort", help=_SORT_HELP),
    seed: int = typer.Option(0, min=0, help="Populate this many random restaurants first"),
    timeout: float = typer.Option(10.0, help="Seconds to wait for the first snapshot"),
) -> None:
    """Print the restaurants matching the filters."""

    ctx = _context()
    try:
        _seed(ctx, seed)
        ctx.start(_selection(category, city, price, sort_by))
        if not _wait_for_snapshot(ctx.restaurants, timeout):
            typer.echo("Error: timed out waiting for results", err=True)
            raise typer.Exit(1)
        Console().print(_render(ctx.restaurants, f"{ctx.restaurants.row_count()} restaurants"))
    finally:
        ctx.shutdown()


@app.command()
@_handle_errors
def delete(
    index: int = typer.Argument(..., min=0, help="Row number as shown by 'list'"),
    category: Optional[str] = typer.Option(None),
    city: Optional[str] = typer.Option(None),
    price: Optional[int] = typer.Option(None, min=1, max=3),
    sort_by: Optional[str] = typer.Option(None, "--sort", help=_SORT_HELP),
    seed: int = typer.Option(0, min=0, help="Populate this many random restaurants first"),
    timeout: float = typer.Option(10.0, help="Seconds to wait for the store"),
) -> None:
    """Delete the restaurant shown at INDEX for the given filters."""

    ctx = _context()
    try:
        _seed(ctx, seed)
        ctx.start(_selection(category, city, price, sort_by))
        restaurants = ctx.restaurants
        if not _wait_for_snapshot(restaurants, timeout):
            typer.echo("Error: timed out waiting for results", err=True)
            raise typer.Exit(1)
        if index >= restaurants.row_count():
            typer.echo(f"Error: no row {index} ({restaurants.row_count()} rows)", err=True)
            raise typer.Exit(1)

        name = restaurants.record_at(index).name
        done = threading.Event()
        failure: list[Exception] = []

        def _on_failed(_document_id: str, error: Exception) -> None:
            failure.append(error)
            done.set()

        restaurants.refresh_requested.connect(done.set)
        restaurants.delete_failed.connect(_on_failed)
        restaurants.delete_at(index)
        finished = done.wait(timeout)
        if failure:
            typer.echo(f"Error deleting {name}: {failure[0]}", err=True)
            raise typer.Exit(1)
        if not finished:
            typer.echo(f"Error: timed out waiting for {name} to be deleted", err=True)
            raise typer.Exit(1)
        print(f"[green]Deleted {name}; {restaurants.row_count()} restaurants remain")
    finally:
        ctx.shutdown()


if __name__ == "__main__":  # pragma: no cover
    app()
