"""Typer CLI for Tiergate-Engine."""

import json
import sys
from typing import Optional

import typer
from pydantic import TypeAdapter, ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from tiergate_engine.common.exceptions import TiergateError
from tiergate_engine.common.schemas import OrderedItemIn, OrderedItemOut

app = typer.Typer(name="tiergate", help="Tiergate-Engine: plan entitlements and playlist ordering")
console = Console()
err_console = Console(stderr=True)

_ITEMS_ADAPTER = TypeAdapter(list[OrderedItemIn])


@app.callback()
def main():
    from tiergate_engine.common.config import get_settings
    from tiergate_engine.common.logging import setup_logging

    try:
        settings = get_settings()
    except RuntimeError as e:
        err_console.print(f"[bold red]INVALID_CONFIG[/bold red] — {escape(str(e))}")
        raise typer.Exit(2)
    setup_logging(settings.log_level)


def _fail(exc: TiergateError) -> None:
    err_console.print(f"[bold red]{exc.code}[/bold red] — {escape(exc.message)}")
    raise typer.Exit(2)


@app.command()
def plans():
    """List plans with their prices, ceilings and features."""
    from tiergate_engine.entitlements.capabilities import PLAYLIST_SIZE
    from tiergate_engine.entitlements.plans import get_policy_table

    table = Table(title="Plans")
    table.add_column("Plan")
    table.add_column("Name")
    table.add_column("Price (JPY/mo)", justify="right")
    table.add_column("Playlist ceiling", justify="right")
    table.add_column("Features")

    try:
        rows = get_policy_table().rows
    except TiergateError as exc:
        _fail(exc)

    for row in rows:
        table.add_row(
            row.plan.value,
            row.name,
            str(row.monthly_price),
            str(row.limits[PLAYLIST_SIZE]),
            ", ".join(sorted(row.features)) or "-",
        )
    console.print(table)


@app.command()
def check(
    plan: str = typer.Argument(..., help="Plan name or id (e.g., premium, plan_free)"),
    capability: str = typer.Argument(..., help="Capability name (e.g., premium_catalog, playlist_size)"),
    quantity: Optional[int] = typer.Option(None, help="Requested quantity for quota capabilities"),
):
    """Resolve an access decision. Exits 1 when denied."""
    from tiergate_engine.entitlements.resolver import resolve

    try:
        decision = resolve(plan, capability, quantity)
    except TiergateError as exc:
        _fail(exc)

    console.print_json(json.dumps(decision.to_dict()))
    if not decision.allowed:
        raise typer.Exit(1)


@app.command()
def normalize(
    path: str = typer.Argument("-", help="JSON file of [{\"id\", \"position\"}], or - for stdin"),
):
    """Compact playlist positions to 0..n-1."""
    from tiergate_engine.playlist.normalizer import normalize as normalize_items

    if path == "-":
        raw = sys.stdin.read()
    else:
        try:
            with open(path, encoding="utf-8") as fh:
                raw = fh.read()
        except OSError as e:
            err_console.print(f"[bold red]INVALID_INPUT[/bold red] — cannot read {escape(path)}: {escape(str(e.strerror or e))}")
            raise typer.Exit(2)

    try:
        items = _ITEMS_ADAPTER.validate_json(raw)
    except ValidationError as e:
        err_console.print(f"[bold red]INVALID_INPUT[/bold red] — {escape(str(e))}")
        raise typer.Exit(2)

    try:
        result = normalize_items((item.id, item.position) for item in items)
    except TiergateError as exc:
        _fail(exc)

    payload = [OrderedItemOut(id=item.item_id, position=item.position).model_dump() for item in result]
    console.print_json(json.dumps(payload))


@app.command("validate-name")
def validate_name(
    name: str = typer.Argument(..., help="Playlist name"),
):
    """Validate a playlist name."""
    from tiergate_engine.playlist.validation import validate_playlist_name

    result = validate_playlist_name(name)
    if result.is_valid:
        console.print("[bold green]VALID[/bold green]")
    else:
        console.print(f"[bold red]INVALID[/bold red] — {escape(result.error)}")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
