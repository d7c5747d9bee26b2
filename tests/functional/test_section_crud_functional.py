"""Section writes with their best-effort menu mirroring."""

from __future__ import annotations

import pytest
from sqlalchemy.exc import OperationalError

from portfolio.errors import InvalidInput, NotFound, StorageError
from portfolio.logic import repository_menu, repository_sections
from portfolio.logic.events import MENU_SYNCED, MENU_SYNC_FAILED, get_buffered_events


def test_create_section_mirrors_into_menu():
    result = repository_sections.create_section(slug="about", title="About", body="Hello")

    assert result["section"]["slug"] == "about"
    report = result["menu_sync"]
    assert report["ok"] is True
    assert report["action"] == "created"
    item = repository_menu.get_item(report["menu_item_id"])
    assert item["source_slug"] == "about"
    assert [e["type"] for e in get_buffered_events()] == [MENU_SYNCED]


def test_duplicate_slug_is_invalid_input():
    repository_sections.create_section(slug="about", title="About")
    with pytest.raises(InvalidInput):
        repository_sections.create_section(slug="about", title="Again")


def test_update_section_renames_mirror_in_place():
    created = repository_sections.create_section(slug="about", title="About")
    item_id = created["menu_sync"]["menu_item_id"]

    result = repository_sections.update_section(created["section"]["id"], {"slug": "about-me", "title": "About Me"})

    assert result["section"]["slug"] == "about-me"
    assert result["menu_sync"] == {"ok": True, "action": "updated", "menu_item_id": item_id, "removed": 0}
    item = repository_menu.get_item(item_id)
    assert item["source_slug"] == "about-me"
    assert item["url"] == "/about-me"


def test_update_missing_section_is_not_found():
    with pytest.raises(NotFound):
        repository_sections.update_section(999999, {"title": "x"})


def test_delete_section_removes_mirror():
    created = repository_sections.create_section(slug="about", title="About")

    result = repository_sections.delete_section(created["section"]["id"])

    assert result["section"] is None
    assert result["menu_sync"]["removed"] == 1
    assert repository_sections.list_sections() == []
    assert repository_menu.list_all_items() == []


def test_sync_failure_does_not_roll_back_section(mocker):
    mocker.patch(
        "portfolio.logic.section_sync.on_source_created",
        side_effect=StorageError("Could not sync menu item for section 'about'"),
    )

    result = repository_sections.create_section(slug="about", title="About")

    assert result["menu_sync"] == {"ok": False, "error": "Could not sync menu item for section 'about'"}
    assert [s["slug"] for s in repository_sections.list_sections()] == ["about"]
    assert repository_menu.list_all_items() == []
    events = get_buffered_events()
    assert [e["type"] for e in events] == [MENU_SYNC_FAILED]
    assert events[0]["payload"]["error"] == "STORAGE_ERROR"


def _unreachable_engine(mocker):
    engine = mocker.Mock()
    engine.connect.side_effect = OperationalError("SELECT 1", {}, Exception("database is down"))
    return engine


def test_single_reads_report_storage_errors(mocker):
    engine = _unreachable_engine(mocker)
    mocker.patch("portfolio.logic.repository_sections.get_engine", return_value=engine)
    mocker.patch("portfolio.logic.repository_menu.get_engine", return_value=engine)

    with pytest.raises(StorageError):
        repository_sections.get_section(1)
    with pytest.raises(StorageError):
        repository_sections.delete_section(1)
    with pytest.raises(StorageError):
        repository_menu.get_item(1)
