"""
Shared helpers for CLI commands.
"""

import json
from typing import Any, NoReturn

import typer
from rich.console import Console

from paperlot.config import Settings
from paperlot.service import LotService

DEFAULT_EVENTS_PATH = "events.jsonl"

console = Console()


def load_service(events_path: str) -> LotService:
    """Build a fresh service and import the JSONL file into it."""
    service = LotService(settings=Settings.from_env())
    service.load(events_path)
    return service


def resolve_lot(service: LotService, lot: Any) -> str:
    return lot or service.settings.default_lot


def fail(message: str, json_output: bool, **extra: Any) -> NoReturn:
    """Report an error and exit with status 2."""
    if json_output:
        print(json.dumps({"error": message, **extra}))
    else:
        console.print(f"[red]Error:[/red] {message}")
    raise typer.Exit(2)
