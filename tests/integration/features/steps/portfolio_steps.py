"""Step definitions for the menu reorder and section sync features."""

from __future__ import annotations

from typing import Any, Dict, List

from behave import given, then, when


def _url(context: Any, path: str) -> str:
    return f"{context.api_prefix}{path}"


def _labels(raw: str) -> List[str]:
    return [part.strip() for part in raw.split(",") if part.strip()]


def _data(response: Any) -> Any:
    assert response.status_code < 400, f"{response.status_code}: {response.text}"
    body = response.json()
    assert body.get("success") is True, body
    return body["data"]


def _all_items(context: Any) -> List[Dict[str, Any]]:
    return _data(context.client.get(_url(context, "/navigation/menu/all")))


def _public_menu(context: Any) -> List[Dict[str, Any]]:
    return _data(context.client.get(_url(context, "/navigation/menu")))


@given('the menu contains items "{labels}"')
def step_seed_menu(context: Any, labels: str) -> None:
    for label in _labels(labels):
        _data(context.client.post(_url(context, "/admin/menu-items"), json={"label": label, "url": f"/{label.lower()}"}))


@given('the admin creates section "{slug}" titled "{title}"')
@when('the admin creates section "{slug}" titled "{title}"')
def step_create_section(context: Any, slug: str, title: str) -> None:
    data = _data(context.client.post(_url(context, "/admin/sections"), json={"slug": slug, "title": title}))
    assert data["menu_sync"]["ok"] is True, data
    context.vars.setdefault("sections", {})[slug] = data["section"]["id"]


@when('the admin renames section "{old_slug}" to "{new_slug}" titled "{title}"')
def step_rename_section(context: Any, old_slug: str, new_slug: str, title: str) -> None:
    section_id = context.vars["sections"].pop(old_slug)
    data = _data(
        context.client.patch(_url(context, f"/admin/sections/{section_id}"), json={"slug": new_slug, "title": title})
    )
    assert data["menu_sync"]["ok"] is True, data
    context.vars["sections"][new_slug] = section_id


@when('the admin deletes section "{slug}"')
def step_delete_section(context: Any, slug: str) -> None:
    section_id = context.vars["sections"].pop(slug)
    data = _data(context.client.delete(_url(context, f"/admin/sections/{section_id}")))
    assert data["menu_sync"]["removed"] == 1, data


@given("the admin moves row {source:d} to row {target:d} and saves")
@when("the admin moves row {source:d} to row {target:d} and saves")
def step_move_and_save(context: Any, source: int, target: int) -> None:
    rows = _all_items(context)
    moved = rows.pop(source - 1)
    rows.insert(target - 1, moved)
    payload = {"items": [{"id": row["id"], "order": position} for position, row in enumerate(rows)]}
    context.response = context.client.patch(_url(context, "/navigation/menu/reorder"), json=payload)


@when("a reorder is submitted that includes an unknown id")
def step_reorder_unknown(context: Any) -> None:
    rows = _all_items(context)
    items = [{"id": row["id"], "order": len(rows) - n} for n, row in enumerate(rows)]
    items.append({"id": max(row["id"] for row in rows) + 1000, "order": 0})
    context.response = context.client.patch(_url(context, "/navigation/menu/reorder"), json={"items": items})


@when("a reorder is submitted with no items")
def step_reorder_empty(context: Any) -> None:
    context.response = context.client.patch(_url(context, "/navigation/menu/reorder"), json={"items": []})


@then("the save reports {count:d} items updated")
def step_save_reports(context: Any, count: int) -> None:
    assert _data(context.response) == {"updated": count}


@then('the response is an error envelope with code "{code}" and status {status:d}')
def step_error_envelope(context: Any, code: str, status: int) -> None:
    assert context.response.status_code == status, context.response.text
    body = context.response.json()
    assert body["success"] is False
    assert body["error"] == code
    assert body["message"]


@then('the public menu reads "{labels}"')
def step_public_menu(context: Any, labels: str) -> None:
    assert [item["label"] for item in _public_menu(context)] == _labels(labels)


@then('the menu item for "{label}" links to "{url}"')
def step_menu_item_url(context: Any, label: str, url: str) -> None:
    matches = [item for item in _public_menu(context) if item["label"] == label]
    assert len(matches) == 1, matches
    assert matches[0]["url"] == url
