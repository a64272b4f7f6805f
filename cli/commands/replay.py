"""
Replay command: re-deliver a lot's history at a paced, speed-scaled rate
"""

import asyncio
import json
from typing import Optional

import typer
from rich.table import Table

from paperlot.core.errors import ValidationError
from paperlot.core.events import StoredEvent
from paperlot.replay import CancelToken

from ._common import DEFAULT_EVENTS_PATH, console, fail, load_service, resolve_lot


def replay_command(
    events_path: str = typer.Option(
        DEFAULT_EVENTS_PATH,
        "--events",
        "-e",
        help="Path to JSONL file of lot events",
    ),
    lot: Optional[str] = typer.Option(None, "--lot", help="Lot id (default: PAPERLOT_DEFAULT_LOT)"),
    start: Optional[str] = typer.Option(None, "--start", "-s", help="Replay from this occurredAt"),
    end: Optional[str] = typer.Option(None, "--end", help="Replay up to this occurredAt"),
    speed: float = typer.Option(1.0, "--speed", help="Playback multiplier (2 = twice as fast)"),
    limit: Optional[int] = typer.Option(None, "--limit", "-n", help="Stop after N events"),
    json_output: bool = typer.Option(False, "--json", help="Emit one JSON line per event"),
):
    """
    Replay a lot's events in (scaled) real time.

    Examples:
        paperlot replay --lot 001
        paperlot replay --start 2024-05-01T08:00:00Z --speed 10
        paperlot replay --limit 5 --json
    """
    try:
        service = load_service(events_path)
    except FileNotFoundError:
        fail(f"Events file not found: {events_path}", json_output, path=events_path)
    except ValidationError as e:
        fail(str(e), json_output)

    lot_id = resolve_lot(service, lot)
    token = CancelToken()
    counts = {}

    def emit(stored: StoredEvent) -> None:
        counts[stored.type] = counts.get(stored.type, 0) + 1
        if json_output:
            print(json.dumps(stored.to_dict()), flush=True)
        else:
            console.print(
                f"[cyan]{stored.occurred_at}[/cyan]  [green]{stored.type:<12}[/green]  "
                f"car=[yellow]{stored.event.car_id}[/yellow]"
                + (f"  spot=[magenta]{stored.event.spot_id}[/magenta]" if hasattr(stored.event, "spot_id") else "")
            )
        if limit is not None and sum(counts.values()) >= limit:
            token.cancel()

    if not json_output:
        console.print(f"[bold]Replaying lot {lot_id} at {speed:g}x...[/bold]")

    try:
        outcome = asyncio.run(
            service.replay(lot_id, emit, start=start, speed=speed, should_abort=token, end=end)
        )
    except ValidationError as e:
        fail(str(e), json_output)
    except KeyboardInterrupt:
        raise typer.Exit(130)

    if not json_output:
        status = "stopped early" if outcome.aborted else "complete"
        console.print(f"[green]✓ Replay {status}: {outcome.delivered}/{outcome.total} events[/green]")

        table = Table(title="Event Counts")
        table.add_column("Event Type", style="green")
        table.add_column("Count", style="cyan", justify="right")
        for event_type in sorted(counts):
            table.add_row(event_type, str(counts[event_type]))
        console.print(table)

    raise typer.Exit(0)
