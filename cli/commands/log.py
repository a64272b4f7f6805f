"""
Event log commands: events
"""

import json
from typing import Optional

import typer
from rich.table import Table

from paperlot.core.errors import ValidationError

from ._common import DEFAULT_EVENTS_PATH, console, fail, load_service, resolve_lot

app = typer.Typer()


@app.command()
def events(
    events_path: str = typer.Option(
        DEFAULT_EVENTS_PATH,
        "--events",
        "-e",
        help="Path to JSONL file of lot events",
    ),
    lot: Optional[str] = typer.Option(None, "--lot", help="Lot id (default: PAPERLOT_DEFAULT_LOT)"),
    from_: Optional[str] = typer.Option(None, "--from", help="Inclusive lower occurredAt bound"),
    to: Optional[str] = typer.Option(None, "--to", help="Inclusive upper occurredAt bound"),
    event_type: Optional[str] = typer.Option(None, "--event-type", "-t", help="Filter by event type"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    List a lot's events in occurredAt order.

    Examples:
        paperlot log events --lot 001
        paperlot log events --from 2024-05-01T08:00:00Z --to 2024-05-01T09:00:00Z
        paperlot log events --event-type SpotOccupied --json
    """
    try:
        service = load_service(events_path)
        lot_id = resolve_lot(service, lot)
        stored = service.events(lot_id, from_, to)
    except FileNotFoundError:
        fail(f"Events file not found: {events_path}", json_output, path=events_path)
    except ValidationError as e:
        fail(str(e), json_output)

    if event_type:
        stored = [s for s in stored if s.type == event_type]

    if json_output:
        print(
            json.dumps(
                {"lotId": lot_id, "count": len(stored), "events": [s.to_dict() for s in stored]},
                indent=2,
            )
        )
        raise typer.Exit(0)

    if not stored:
        console.print("[yellow]No events match the filters[/yellow]")
        raise typer.Exit(0)

    table = Table(title=f"Lot {lot_id}")
    table.add_column("Occurred At", style="cyan")
    table.add_column("Type", style="green")
    table.add_column("Car", style="yellow")
    table.add_column("Spot", style="magenta")
    table.add_column("Event ID (prefix)", style="dim")

    for s in stored:
        table.add_row(
            s.occurred_at,
            s.type,
            s.event.car_id,
            getattr(s.event, "spot_id", "") or "",
            s.event_id[:8],
        )

    console.print(table)
    console.print(f"\n[bold]Total events:[/bold] {len(stored)}")
    raise typer.Exit(0)
