"""
Tests for the paperlot command-line tool.
"""

import json

import pytest
from typer.testing import CliRunner

from cli.main import app

from .helpers import LOT, ts

ENV = {"PAPERLOT_LOG_LEVEL": "ERROR", "PAPERLOT_METRICS_ENABLED": "0"}

runner = CliRunner()


def invoke(*args):
    return runner.invoke(app, list(args), env=ENV)


@pytest.fixture
def events_file(tmp_path):
    lines = [
        {"type": "CarEntered", "lotId": LOT, "carId": "A", "pos": {"x": 10, "y": 10}, "occurredAt": ts(0)},
        {"type": "SpotOccupied", "lotId": LOT, "carId": "A", "spotId": "S1", "occurredAt": ts(1)},
        {"type": "CarMoved", "lotId": LOT, "carId": "A", "from": {"x": 10, "y": 10},
         "to": {"x": 20, "y": 20}, "occurredAt": ts(3)},
        {"type": "SpotVacated", "lotId": LOT, "carId": "A", "spotId": "S1", "occurredAt": ts(4)},
        {"type": "CarEntered", "lotId": "002", "carId": "Z", "pos": {"x": 0, "y": 0}, "occurredAt": ts(0)},
    ]
    path = tmp_path / "events.jsonl"
    path.write_text("\n".join(json.dumps(line) for line in lines) + "\n")
    return str(path)


def test_log_events_json(events_file):
    result = invoke("log", "events", "--events", events_file, "--json")

    assert result.exit_code == 0
    body = json.loads(result.stdout)
    assert body["lotId"] == LOT
    assert body["count"] == 4
    types = [e["event"]["type"] for e in body["events"]]
    assert types == ["CarEntered", "SpotOccupied", "CarMoved", "SpotVacated"]


def test_log_events_filters(events_file):
    result = invoke(
        "log", "events", "-e", events_file, "--from", ts(1), "--to", ts(3), "-t", "CarMoved", "--json"
    )

    assert result.exit_code == 0
    body = json.loads(result.stdout)
    assert body["count"] == 1
    assert body["events"][0]["event"]["to"] == {"x": 20, "y": 20}


def test_log_events_table(events_file):
    result = invoke("log", "events", "-e", events_file, "--lot", "002")

    assert result.exit_code == 0
    assert "Total events" in result.stdout


def test_state_current_json(events_file):
    result = invoke("state", "current", "-e", events_file, "--json")

    assert result.exit_code == 0
    body = json.loads(result.stdout)
    assert body["ok"] is True
    assert body["state"]["cars"]["A"]["pos"] == {"x": 20, "y": 20}
    assert body["state"]["spots"] == {}
    assert len(body["stateHash"]) == 64


def test_state_at_json(events_file):
    result = invoke("state", "at", ts(2), "-e", events_file, "--json")

    assert result.exit_code == 0
    state = json.loads(result.stdout)["state"]
    assert state["time"] == ts(1)
    assert state["spots"]["S1"]["carId"] == "A"
    assert state["cars"]["A"]["pos"] == {"x": 10, "y": 10}


def test_state_at_invalid_instant(events_file):
    result = invoke("state", "at", "not-a-time", "-e", events_file, "--json")

    assert result.exit_code == 2
    assert "error" in json.loads(result.stdout)


def test_missing_events_file(tmp_path):
    missing = str(tmp_path / "nope.jsonl")

    result = invoke("state", "current", "-e", missing, "--json")

    assert result.exit_code == 2
    assert json.loads(result.stdout)["path"] == missing


def test_replay_json_with_limit(events_file):
    result = invoke("replay", "-e", events_file, "--speed", "1000", "--limit", "2", "--json")

    assert result.exit_code == 0
    lines = [json.loads(line) for line in result.stdout.splitlines() if line.strip()]
    assert [e["event"]["type"] for e in lines] == ["CarEntered", "SpotOccupied"]


def test_replay_rejects_bad_speed(events_file):
    result = invoke("replay", "-e", events_file, "--speed", "0", "--json")

    assert result.exit_code == 2


def test_undecodable_events_file(tmp_path):
    path = tmp_path / "events.jsonl"
    path.write_bytes(b'{"type": "CarExited", "carId": "\xff"}\n')

    result = invoke("log", "events", "-e", str(path), "--json")

    assert result.exit_code == 2
    assert "invalid UTF-8" in json.loads(result.stdout)["error"]
