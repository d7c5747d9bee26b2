"""Architectural checks for the portfolio service.

Static, file/AST-based checks: nothing under ``portfolio`` is imported or
executed. They pin the layering (routes never embed SQL, the drag state
stays free of IO) and the schema facts the sync relies on.
"""

from __future__ import annotations

import ast
import re
from pathlib import Path
from typing import Iterable, List, Set

import pytest


PROJECT_ROOT = Path(__file__).resolve().parents[2]
PKG_DIR = PROJECT_ROOT / "portfolio"
_SQL_RE = re.compile(r"\b(SELECT|INSERT\s+INTO|UPDATE\s+\w+\s+SET|DELETE\s+FROM)\b", re.IGNORECASE)


def _parse(path: Path) -> ast.Module:
    try:
        return ast.parse(path.read_text(encoding="utf-8"), filename=str(path))
    except SyntaxError as exc:
        pytest.fail(f"Cannot parse {path}: {exc}")


def _imported_modules(tree: ast.AST) -> Set[str]:
    names: Set[str] = set()
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            names.update(alias.name for alias in node.names)
        elif isinstance(node, ast.ImportFrom) and node.module:
            names.add(node.module)
    return names


def _string_constants(tree: ast.AST) -> Iterable[str]:
    for node in ast.walk(tree):
        if isinstance(node, ast.Constant) and isinstance(node.value, str):
            yield node.value


def _py_files(directory: Path) -> List[Path]:
    return sorted(p for p in directory.rglob("*.py") if "__pycache__" not in p.parts)


@pytest.mark.parametrize("path", _py_files(PKG_DIR / "routes"), ids=lambda p: p.name)
def test_routes_do_not_embed_sql(path):
    tree = _parse(path)
    assert not any(m.startswith("sqlalchemy") for m in _imported_modules(tree)), path.name
    offending = [s for s in _string_constants(tree) if _SQL_RE.search(s)]
    assert offending == [], f"{path.name} embeds SQL: {offending}"


def test_reorder_state_is_free_of_io():
    tree = _parse(PKG_DIR / "client" / "reorder_state.py")
    forbidden = ("httpx", "sqlalchemy", "anyio", "asyncio", "portfolio.db", "portfolio.logic", "time", "random")
    imported = _imported_modules(tree)
    assert not [m for m in imported if m.split(".")[0] in forbidden or m.startswith(forbidden)]
    assert not [n for n in ast.walk(tree) if isinstance(n, (ast.AsyncFunctionDef, ast.Await))]


def test_reorder_engine_uses_one_transaction():
    source = (PKG_DIR / "logic" / "reorder_engine.py").read_text(encoding="utf-8")
    assert source.count(".begin()") == 1
    assert "commit(" not in source


def test_client_does_not_touch_storage():
    for path in _py_files(PKG_DIR / "client"):
        imported = _imported_modules(_parse(path))
        assert not [m for m in imported if m.startswith(("sqlalchemy", "portfolio.db", "portfolio.logic"))], path.name


@pytest.mark.parametrize("migrations", ["migrations", "sqlite_migrations"])
def test_schema_declares_unique_mirror_key(migrations):
    sql = "\n".join(
        p.read_text(encoding="utf-8")
        for p in sorted((PROJECT_ROOT / migrations).glob("*.sql"))
        if "rollback" not in p.name
    )
    assert re.search(r"CREATE\s+UNIQUE\s+INDEX\s+(?:IF\s+NOT\s+EXISTS\s+)?\w+\s+ON\s+menu_item\s*\(\s*source_slug\s*\)", sql, re.I)
    assert re.search(r'"order"\s+INTEGER\s+NOT\s+NULL', sql, re.I)
    assert re.search(r"CREATE\s+UNIQUE\s+INDEX\s+(?:IF\s+NOT\s+EXISTS\s+)?\w+\s+ON\s+section\s*\(\s*slug\s*\)", sql, re.I)


def test_error_codes_are_centralised():
    tree = _parse(PKG_DIR / "errors.py")
    codes = set(_string_constants(tree))
    assert {"INVALID_INPUT", "NOT_FOUND", "STORAGE_ERROR", "INTERNAL_ERROR"} <= codes
    for path in _py_files(PKG_DIR / "logic") + _py_files(PKG_DIR / "routes"):
        literals = set(_string_constants(_parse(path)))
        assert not literals & {"INVALID_INPUT", "STORAGE_ERROR", "NOT_FOUND"}, path.name
