"""
Tests for the response archive.

Verifies:
- Appends to the responses table
- Quotes survive intact
- Disabled / blank content issues no write
- Failures are swallowed and produce no output
"""
import sqlite3

import pytest

from voice_plugin.response_store import ResponseStore


@pytest.fixture
def db_path(tmp_path):
    path = tmp_path / "responses.db"
    conn = sqlite3.connect(path)
    conn.execute("CREATE TABLE responses (id INTEGER PRIMARY KEY, content TEXT)")
    conn.commit()
    conn.close()
    return path


def _rows(path):
    conn = sqlite3.connect(path)
    try:
        return [row[0] for row in conn.execute("SELECT content FROM responses ORDER BY id")]
    finally:
        conn.close()


@pytest.mark.asyncio
async def test_store_appends_content(db_path):
    store = ResponseStore(str(db_path))

    await store.store("První odpověď")
    await store.store("Druhá odpověď")

    assert _rows(db_path) == ["První odpověď", "Druhá odpověď"]


@pytest.mark.asyncio
async def test_store_keeps_quotes_intact(db_path):
    store = ResponseStore(str(db_path))

    await store.store("O'Brien said \"hi\"; DROP TABLE responses; --")

    assert _rows(db_path) == ["O'Brien said \"hi\"; DROP TABLE responses; --"]


@pytest.mark.asyncio
async def test_disabled_store_issues_no_write(db_path, monkeypatch):
    store = ResponseStore(str(db_path), enabled=False)
    calls = []
    monkeypatch.setattr(store, "_insert", lambda content: calls.append(content))

    await store.store("Odpověď")

    assert calls == []
    assert _rows(db_path) == []


@pytest.mark.asyncio
@pytest.mark.parametrize("content", ["", "   ", "\n\t"])
async def test_blank_content_is_ignored(db_path, monkeypatch, content):
    store = ResponseStore(str(db_path))
    calls = []
    monkeypatch.setattr(store, "_insert", lambda c: calls.append(c))

    await store.store(content)

    assert calls == []


@pytest.mark.asyncio
async def test_missing_store_is_swallowed_and_not_created(tmp_path, capsys):
    path = tmp_path / "missing" / "responses.db"
    store = ResponseStore(str(path))

    await store.store("Odpověď")

    assert not path.exists()
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err == ""


@pytest.mark.asyncio
async def test_missing_table_is_swallowed(tmp_path):
    path = tmp_path / "empty.db"
    sqlite3.connect(path).close()
    store = ResponseStore(str(path))

    await store.store("Odpověď")
