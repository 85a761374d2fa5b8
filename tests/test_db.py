"""Tests for tutorial_hub/db.py — the sqlite tutorial store."""

import sqlite3

import pytest

from tutorial_hub.db import TutorialStore, check_id, new_id
from tutorial_hub.errors import DuplicateUrl, InvalidId, NotFound
from tutorial_hub.models import Chapter, ChapteredTutorial, Difficulty, FlatTutorial


def flat(url="https://github.com/o/r/blob/main/a.md", **kw):
    return FlatTutorial(title=kw.pop("title", "Flat"), content="# Flat\n\nbody",
                        github_url=url, **kw)


def chaptered(url="https://github.com/o/r/tree/main/docs", **kw):
    chapters = [
        Chapter(title="One", content="# One", order=1, read_time=1),
        Chapter(title="Two", content="# Two", order=2, read_time=2),
    ]
    return ChapteredTutorial(title=kw.pop("title", "Docs"), chapters=chapters,
                             github_url=url, total_chapters=2, read_time=3, **kw)


def test_ids():
    assert check_id(new_id())
    for bad in ("", "123", "zz" * 12, "A" * 24):
        with pytest.raises(InvalidId):
            check_id(bad)


def test_init_schema_is_idempotent(store):
    store.init_schema()
    assert store.list_summaries() == []


def test_init_schema_creates_parent_dir(tmp_path):
    s = TutorialStore(tmp_path / "nested" / "db" / "t.db")
    s.init_schema()
    assert s.path.exists()


class TestInsertAndGet:
    def test_flat_roundtrip(self, store):
        tid = store.insert(flat(author="  octo ", category="Rust", difficulty=Difficulty.ADVANCED))
        got = store.get(tid)
        assert isinstance(got, FlatTutorial)
        assert got.id == tid
        assert got.kind == "flat"
        assert got.content == "# Flat\n\nbody"
        assert got.author == "octo"
        assert got.difficulty is Difficulty.ADVANCED
        assert got.created_at is not None
        assert got.created_at == got.updated_at

    def test_chaptered_keeps_order(self, store):
        tid = store.insert(chaptered())
        got = store.get(tid)
        assert isinstance(got, ChapteredTutorial)
        assert [(c.order, c.title, c.read_time) for c in got.chapters] == [
            (1, "One", 1), (2, "Two", 2),
        ]
        assert got.chapter(2).title == "Two"
        assert got.chapter(3) is None

    def test_default_difficulty(self, store):
        got = store.get(store.insert(flat()))
        assert got.difficulty is Difficulty.BEGINNER

    def test_duplicate_url(self, store):
        store.insert(flat())
        with pytest.raises(DuplicateUrl):
            store.insert(flat(title="Another"))

    def test_duplicate_url_leaves_no_chapters_behind(self, store):
        store.insert(chaptered())
        with pytest.raises(DuplicateUrl):
            store.insert(chaptered(title="Again"))
        assert store.counts() == {"flat": 0, "chaptered": 1, "chapters": 2}

    def test_get_missing(self, store):
        with pytest.raises(NotFound):
            store.get(new_id())

    def test_get_malformed_id(self, store):
        with pytest.raises(InvalidId):
            store.get("not-an-id")


class TestQueries:
    def test_summaries_newest_first(self, store):
        first = store.insert(flat(url="u1", title="First"))
        second = store.insert(chaptered(url="u2", title="Second"))
        summaries = store.list_summaries()
        assert [s.id for s in summaries] == [second, first]
        assert summaries[0].total_chapters == 2

    def test_find_one(self, store):
        store.insert(chaptered(author="octo"))
        assert store.find_one(title="Docs", author="octo").title == "Docs"
        assert store.find_one(title="Docs", author="other") is None

    def test_find_one_matches_null(self, store):
        store.insert(flat())
        assert store.find_one(title="Flat", author=None) is not None

    def test_find_one_rejects_unknown_column(self, store):
        with pytest.raises(ValueError):
            store.find_one(content="x")

    def test_exists_url(self, store):
        store.insert(flat(url="https://x"))
        assert store.exists_url("https://x")
        assert not store.exists_url("https://y")


class TestDelete:
    def test_delete_returns_id_and_title(self, store):
        tid = store.insert(chaptered())
        assert store.delete(tid) == {"id": tid, "title": "Docs"}
        assert store.counts() == {"flat": 0, "chaptered": 0, "chapters": 0}
        with pytest.raises(NotFound):
            store.get(tid)

    def test_delete_missing(self, store):
        with pytest.raises(NotFound):
            store.delete(new_id())

    def test_delete_malformed(self, store):
        with pytest.raises(InvalidId):
            store.delete("xyz")


def test_locked_database_raises_operational_error(tmp_path):
    path = tmp_path / "t.db"
    store = TutorialStore(path, timeout=0.05)
    store.init_schema()

    holder = sqlite3.connect(path.as_posix())
    holder.execute("BEGIN EXCLUSIVE")
    try:
        with pytest.raises(sqlite3.OperationalError, match="locked"):
            store.list_summaries()
    finally:
        holder.rollback()
        holder.close()
