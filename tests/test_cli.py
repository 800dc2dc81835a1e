import asyncio
import json
import sys
from datetime import datetime, timezone

import pytest

from meritjournal.entries import actions, cli
from meritjournal.entries.data import (
    CreateJournalEntryRequest,
    ListUpdate,
    ListUpdateActions,
)

from .conftest import OTHER_USER_ID, USER_ID


def run_cli(monkeypatch, *args):
    monkeypatch.setattr(sys, "argv", ["meritjournal", *args])
    cli.main()


@pytest.fixture
def entry(unit_of_work):
    return asyncio.run(
        actions.create_journal_entry(
            unit_of_work,
            CreateJournalEntryRequest(
                user_id=USER_ID,
                title="Morning run",
                content="Ran 5k",
                entry_date=datetime(2024, 3, 5, tzinfo=timezone.utc),
                tags=ListUpdate(action=ListUpdateActions.replace, items=["health"]),
            ),
        )
    )


def test_entries_list(entry, monkeypatch, capsys):
    run_cli(monkeypatch, "entries", "list", "-u", USER_ID, "-t", "health")

    entries = json.loads(capsys.readouterr().out)
    assert [item["id"] for item in entries] == [entry.id]
    assert entries[0]["tags"] == ["health"]
    assert entries[0]["entryDate"].startswith("2024-03-05T00:00:00")


def test_entries_get(entry, monkeypatch, capsys):
    run_cli(monkeypatch, "entries", "get", "-u", USER_ID, "-i", str(entry.id))
    assert json.loads(capsys.readouterr().out)["title"] == "Morning run"

    with pytest.raises(SystemExit) as exit_info:
        run_cli(
            monkeypatch, "entries", "get", "-u", OTHER_USER_ID, "-i", str(entry.id)
        )
    assert exit_info.value.code == 1


def test_tags_list(entry, monkeypatch, capsys):
    run_cli(monkeypatch, "tags", "list", "-u", USER_ID)

    tags = json.loads(capsys.readouterr().out)
    assert [(tag["name"], tag["entriesCount"]) for tag in tags] == [("health", 1)]
