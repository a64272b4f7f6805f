"""
State commands: current, at
"""

import json
from typing import Optional

import typer
from rich.table import Table

from paperlot.core.canonical import state_hash
from paperlot.core.errors import ValidationError
from paperlot.core.state import LotState
from paperlot.query import spot_dwell_ms

from ._common import DEFAULT_EVENTS_PATH, console, fail, load_service, resolve_lot

app = typer.Typer()


def _print_state(state: LotState, title: str, json_output: bool) -> None:
    if json_output:
        print(json.dumps({"ok": True, "state": state.to_dict(), "stateHash": state_hash(state)}, indent=2))
        return

    console.print(f"[bold]{title}[/bold]")
    console.print(f"  Time: [cyan]{state.time or 'N/A'}[/cyan]")
    console.print(f"  State hash: [yellow]{state_hash(state)}[/yellow]")

    cars = Table(title="Cars")
    cars.add_column("Car", style="green")
    cars.add_column("Position", style="cyan")
    cars.add_column("Updated At", style="dim")
    for car_id in sorted(state.cars):
        car = state.cars[car_id]
        cars.add_row(car_id, f"({car.pos.x:g}, {car.pos.y:g})", car.updated_at)
    console.print(cars)

    spots = Table(title="Spots")
    spots.add_column("Spot", style="magenta")
    spots.add_column("Car", style="green")
    spots.add_column("Since", style="dim")
    spots.add_column("Dwell (s)", justify="right")
    for spot_id in sorted(state.spots):
        spot = state.spots[spot_id]
        dwell = spot_dwell_ms(state, spot_id)
        spots.add_row(spot_id, spot.car_id, spot.since, f"{dwell / 1000:.1f}" if dwell is not None else "")
    console.print(spots)


@app.command()
def current(
    events_path: str = typer.Option(
        DEFAULT_EVENTS_PATH,
        "--events",
        "-e",
        help="Path to JSONL file of lot events",
    ),
    lot: Optional[str] = typer.Option(None, "--lot", help="Lot id (default: PAPERLOT_DEFAULT_LOT)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Show a lot's live state after importing every event.

    Examples:
        paperlot state current --lot 001
        paperlot state current --json
    """
    try:
        service = load_service(events_path)
    except FileNotFoundError:
        fail(f"Events file not found: {events_path}", json_output, path=events_path)
    except ValidationError as e:
        fail(str(e), json_output)

    lot_id = resolve_lot(service, lot)
    _print_state(service.current(lot_id), f"Lot {lot_id} (current)", json_output)
    raise typer.Exit(0)


@app.command()
def at(
    instant: str = typer.Argument(..., help="Instant to reconstruct (ISO 8601)"),
    events_path: str = typer.Option(
        DEFAULT_EVENTS_PATH,
        "--events",
        "-e",
        help="Path to JSONL file of lot events",
    ),
    lot: Optional[str] = typer.Option(None, "--lot", help="Lot id (default: PAPERLOT_DEFAULT_LOT)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Reconstruct a lot's state as of an instant (time travel).

    Examples:
        paperlot state at 2024-05-01T08:30:00Z --lot 001
    """
    try:
        service = load_service(events_path)
        lot_id = resolve_lot(service, lot)
        state = service.state_at(lot_id, instant)
    except FileNotFoundError:
        fail(f"Events file not found: {events_path}", json_output, path=events_path)
    except ValidationError as e:
        fail(str(e), json_output)

    _print_state(state, f"Lot {lot_id} at {instant}", json_output)
    raise typer.Exit(0)
